"""Domain errors for escrow, staking and settlement."""

from __future__ import annotations


class WagerbookError(Exception):
    """Base exception for wagerbook errors."""

    code: str = "error"


class InvalidConfig(WagerbookError):
    """Raised when market creation parameters are invalid."""

    code = "invalid_config"


class MarketStateError(WagerbookError):
    """Raised when an operation is not allowed in the market's current state."""

    code = "market_state"


class MarketLocked(MarketStateError):
    """Raised when a stake is placed on a locked market."""

    code = "market_locked"


class MarketResolved(MarketStateError):
    """Raised when a stake is placed on a resolved market."""

    code = "market_resolved"


class AlreadyResolved(MarketStateError):
    """Raised when a resolved market is resolved or voided again."""

    code = "already_resolved"


class BetValidationError(WagerbookError):
    """Raised when caller input to a market operation is invalid."""

    code = "bet_validation"


class InvalidBetAmount(BetValidationError):
    code = "invalid_bet_amount"


class BetLimitExceeded(BetValidationError):
    """Raised when a bettor's cumulative stake on one outcome would exceed max_bet."""

    code = "bet_limit_exceeded"


class UnknownOutcome(BetValidationError):
    code = "unknown_outcome"


class OutcomeOutOfRange(BetValidationError):
    code = "outcome_out_of_range"


class InsufficientFunds(WagerbookError):
    """Raised when a withdrawal or transfer exceeds the available balance."""

    code = "insufficient_funds"


class Unauthorized(WagerbookError):
    """Raised when a privileged operation is called without the market's capability."""

    code = "unauthorized"


class NothingToClaim(WagerbookError):
    code = "nothing_to_claim"


class DuplicateMarketId(WagerbookError):
    code = "duplicate_market_id"


class InvalidAmount(WagerbookError, ValueError):
    """Raised when an amount is negative, not finite or not a number."""

    code = "invalid_amount"


class AmountOverflow(InvalidAmount):
    """Raised when amount arithmetic would round (too many significant digits)."""

    code = "amount_overflow"
