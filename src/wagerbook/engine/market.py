"""Market - escrow pools, bet ledger, resolution and refunds for one betting market.

Every public operation runs under the market's lock and validates all of its
preconditions before moving any value, so an operation either applies fully
or leaves the market untouched. Notifications go out only after the state
change is committed.
"""

from __future__ import annotations

import threading
from decimal import Decimal
from typing import Any

import structlog

from wagerbook.config.settings import Settings
from wagerbook.errors import (
    AlreadyResolved,
    AmountOverflow,
    BetLimitExceeded,
    InsufficientFunds,
    InvalidAmount,
    InvalidBetAmount,
    MarketLocked,
    MarketResolved,
    NothingToClaim,
    OutcomeOutOfRange,
    Unauthorized,
    UnknownOutcome,
    WagerbookError,
)
from wagerbook.ledger.bets import BetLedger
from wagerbook.ledger.capability import AdminCapability, authorize
from wagerbook.ledger.vault import ZERO, Vault, add_amounts, amount_sum, subtract_amounts, to_amount
from wagerbook.models import events
from wagerbook.models.market import MarketConfig, MarketDetails, PayoutPolicy, Reward
from wagerbook.notify.sinks import EventSink, NullSink
from wagerbook.settlement.payout import DEFAULT_QUANTUM, compute_rewards, total_rewards

log = structlog.get_logger(__name__)


class Market:
    """Single betting market. Create with Market.create() or Market.from_config()."""

    def __init__(
        self,
        config: MarketConfig,
        *,
        sink: EventSink | None = None,
        reward_quantum: Decimal = DEFAULT_QUANTUM,
    ) -> None:
        self.config = config
        self._sink: EventSink = sink or NullSink()
        self._quantum = reward_quantum
        self._lock = threading.RLock()
        self._admin = AdminCapability(config.title)
        # Index-aligned with config.outcomes / config.odds
        self._escrow = [Vault.new_empty(label=f"escrow:{o}") for o in config.outcomes]
        self._house = Vault.new_empty(label="house_pool")
        self._admin_pool = Vault.new_empty(label="admin_pool")
        self._ledger = BetLedger(config.outcomes)
        self._claimable: dict[str, Vault] = {}
        self._total_staked = ZERO
        self._locked = False
        self._resolved = False
        self._voided = False
        self._winning_outcome: int | None = None

    # --- Creation ---

    @classmethod
    def create(
        cls,
        title: str,
        outcomes_csv: str,
        odds_csv: str,
        min_bet: Any,
        max_bet: Any,
        policy: PayoutPolicy | str | None = None,
        *,
        sink: EventSink | None = None,
        settings: Settings | None = None,
    ) -> tuple[Market, AdminCapability]:
        """Validate parameters, build the market and mint its admin capability.

        Raises InvalidConfig on fewer than two outcomes, empty or repeated
        outcome labels, odds count mismatch, odds <= 1, min_bet below the
        configured floor, max_bet <= min_bet or max_bet at or above 1E30.
        """
        settings = settings or Settings()
        config = MarketConfig.from_csv(
            title,
            outcomes_csv,
            odds_csv,
            min_bet,
            max_bet,
            policy=policy or settings.default_policy,
            min_bet_floor=settings.min_bet_floor,
        )
        return cls.from_config(config, sink=sink, reward_quantum=settings.reward_quantum)

    @classmethod
    def from_config(
        cls,
        config: MarketConfig,
        *,
        sink: EventSink | None = None,
        reward_quantum: Decimal = DEFAULT_QUANTUM,
    ) -> tuple[Market, AdminCapability]:
        market = cls(config, sink=sink, reward_quantum=reward_quantum)
        log.info(
            "market_created",
            market_id=market.market_id,
            outcomes=config.outcomes,
            odds=[str(o) for o in config.odds],
            min_bet=str(config.min_bet),
            max_bet=str(config.max_bet),
            policy=config.policy.value,
        )
        market._emit(events.MarketCreated(market_id=market.market_id))
        return market, market._admin

    # --- Staking (public) ---

    def place_bet(self, bettor_id: str, outcome_label: str, stake: Vault) -> None:
        """Move the whole stake into the outcome's escrow pool and record it.

        Checks, in order: resolved, locked, amount bounds, outcome exists,
        bettor's cumulative stake on the outcome <= max_bet. On failure the
        stake vault is left untouched.
        """
        with self._lock:
            amount = stake.balance()
            try:
                index = self._validate_bet(bettor_id, outcome_label, amount)
            except WagerbookError as e:
                log.warning(
                    "bet_rejected",
                    market_id=self.market_id,
                    bettor_id=bettor_id,
                    outcome=outcome_label,
                    amount=str(amount),
                    reason=e.code,
                )
                raise
            self._escrow[index].deposit(stake)
            self._total_staked = add_amounts(self._total_staked, amount)
            self._ledger.record(outcome_label, bettor_id, amount)
            log.info(
                "bet_placed",
                market_id=self.market_id,
                bettor_id=bettor_id,
                outcome=outcome_label,
                amount=str(amount),
                total_staked=str(self._total_staked),
            )
            self._emit(
                events.BetPlaced(market_id=self.market_id, bettor_id=bettor_id, outcome=outcome_label, amount=amount)
            )

    def deposit_to_house_pool(self, value: Vault) -> None:
        """Fund the house pool (it backs fixed-odds rewards)."""
        with self._lock:
            amount = value.balance()
            self._house.deposit(value)
            log.info("house_deposited", market_id=self.market_id, amount=str(amount), balance=str(self._house.balance()))
            self._emit(events.HouseDeposited(market_id=self.market_id, amount=amount))

    def claim(self, bettor_id: str) -> Vault:
        """Drain and return the bettor's claimable container.

        Raises NothingToClaim when the bettor has no container or it is already empty.
        """
        with self._lock:
            vault = self._claimable.get(bettor_id)
            if vault is None or vault.is_empty():
                raise NothingToClaim(f"Nothing to claim for '{bettor_id}' in market '{self.market_id}'.")
            payout = vault.withdraw_all()
            log.info("reward_claimed", market_id=self.market_id, bettor_id=bettor_id, amount=str(payout.balance()))
            self._emit(events.RewardClaimed(market_id=self.market_id, bettor_id=bettor_id, amount=payout.balance()))
            return payout

    # --- Market management (admin) ---

    def lock(self, capability: AdminCapability) -> None:
        """Stop accepting bets. Re-locking is allowed."""
        with self._lock:
            self._require_admin(capability, "lock")
            self._locked = True
            log.info("market_locked", market_id=self.market_id)
            self._emit(events.MarketLocked(market_id=self.market_id))

    def resolve(self, winning_outcome_index: int, capability: AdminCapability) -> list[Reward]:
        """Settle the market on the winning outcome and credit winners' claimable containers.

        Fixed odds: losing pools are swept into the house pool and each winner
        is paid stake * odds from it. Proportional: every pool is swept and the
        whole pool is split by share of the winning stake. The house pool's
        post-sweep balance is checked against the total owed before anything
        moves; a shortfall raises InsufficientFunds with no state change.
        """
        with self._lock:
            self._require_admin(capability, "resolve")
            if self._resolved:
                raise AlreadyResolved(f"Market '{self.market_id}' has already been resolved.")
            index = winning_outcome_index
            if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < len(self.config.outcomes):
                raise OutcomeOutOfRange(
                    f"Winning outcome {winning_outcome_index!r} is out of bounds "
                    f"(market has {len(self.config.outcomes)} outcomes)."
                )
            label = self.config.outcomes[index]
            policy = self.config.policy
            if policy is PayoutPolicy.PROPORTIONAL:
                swept = list(range(len(self._escrow)))
            else:
                swept = [i for i in range(len(self._escrow)) if i != index]
            total_pool = self._total_staked
            try:
                rewards = compute_rewards(
                    policy, self._ledger.entries(label), self.config.odds[index], total_pool, self._quantum
                )
                owed = total_rewards(rewards)
                available = amount_sum([self._house.balance(), *(self._escrow[i].balance() for i in swept)])
                # Dry run of the payout transfers out of the swept house pool
                remaining = available
                for reward in rewards:
                    if reward.amount > remaining:
                        break
                    remaining = subtract_amounts(remaining, reward.amount)
            except AmountOverflow as e:
                log.warning("resolve_rejected", market_id=self.market_id, winning_outcome=index, reason=e.code)
                raise
            if owed > available:
                log.warning(
                    "resolve_rejected",
                    market_id=self.market_id,
                    winning_outcome=index,
                    owed=str(owed),
                    available=str(available),
                    reason=InsufficientFunds.code,
                )
                raise InsufficientFunds(
                    f"House pool cannot fund rewards for market '{self.market_id}': owed {owed}, available {available}."
                )

            for i in swept:
                self._house.deposit(self._escrow[i].withdraw_all())
            for reward in rewards:
                self._claimable_vault(reward.bettor_id).deposit(self._house.withdraw(reward.amount))
            self._winning_outcome = index
            self._reset_and_resolve()
            log.info(
                "market_resolved",
                market_id=self.market_id,
                winning_outcome=index,
                outcome=label,
                policy=policy.value,
                winners=len(rewards),
                paid=str(owed),
                house_balance=str(self._house.balance()),
            )
            self._emit(events.MarketResolved(market_id=self.market_id, winning_outcome=index))
            return rewards

    def void_resolve(self, capability: AdminCapability) -> None:
        """Resolve as void: every bettor's stakes are credited back to their claimable container."""
        with self._lock:
            self._require_admin(capability, "void_resolve")
            if self._resolved:
                raise AlreadyResolved(f"Market '{self.market_id}' has already been resolved.")
            for pool in self._escrow:
                self._house.deposit(pool.withdraw_all())
            refunded = ZERO
            for _, rec in self._ledger:
                self._claimable_vault(rec.bettor_id).deposit(self._house.withdraw(rec.amount))
                refunded = add_amounts(refunded, rec.amount)
            self._voided = True
            self._reset_and_resolve()
            log.info("market_voided", market_id=self.market_id, bets=len(self._ledger), refunded=str(refunded))
            self._emit(events.MarketVoided(market_id=self.market_id))

    def withdraw_to_admin_pool(self, amount: Any, capability: AdminCapability) -> None:
        """Move amount from the house pool to the admin pool."""
        with self._lock:
            self._require_admin(capability, "withdraw_to_admin_pool")
            amount = to_amount(amount)
            if amount <= 0:
                raise InvalidAmount(f"Withdrawal amount must be positive, got {amount}")
            if self._house.balance() < amount:
                raise InsufficientFunds(
                    f"Insufficient funds in house pool: requested {amount}, available {self._house.balance()}."
                )
            self._admin_pool.deposit(self._house.withdraw(amount))
            log.info("admin_withdrawal", market_id=self.market_id, amount=str(amount))
            self._emit(events.AdminWithdrawal(market_id=self.market_id, amount=amount))

    def admin_claim(self, capability: AdminCapability) -> Vault:
        """Drain and return the admin pool. Raises NothingToClaim when empty."""
        with self._lock:
            self._require_admin(capability, "admin_claim")
            if self._admin_pool.is_empty():
                raise NothingToClaim(f"Admin pool of market '{self.market_id}' is empty.")
            payout = self._admin_pool.withdraw_all()
            log.info("admin_claimed", market_id=self.market_id, amount=str(payout.balance()))
            self._emit(events.AdminClaimed(market_id=self.market_id, amount=payout.balance()))
            return payout

    # --- Queries ---

    @property
    def market_id(self) -> str:
        return self.config.title

    @property
    def title(self) -> str:
        return self.config.title

    @property
    def policy(self) -> PayoutPolicy:
        return self.config.policy

    @property
    def locked(self) -> bool:
        return self._locked

    @property
    def resolved(self) -> bool:
        return self._resolved

    @property
    def winning_outcome(self) -> int | None:
        return self._winning_outcome

    @property
    def status(self) -> str:
        if self._voided:
            return "voided"
        if self._resolved:
            return "resolved"
        if self._locked:
            return "locked"
        return "open"

    def list_outcomes(self) -> list[str]:
        return list(self.config.outcomes)

    def get_total_staked(self) -> Decimal:
        with self._lock:
            return self._total_staked

    def get_outcome_balance(self, label: str) -> Decimal:
        with self._lock:
            return self._escrow[self._outcome_index(label)].balance()

    def get_market_details(self) -> MarketDetails:
        with self._lock:
            return MarketDetails(
                title=self.config.title,
                outcomes=list(self.config.outcomes),
                odds=list(self.config.odds),
                total_staked=self._total_staked,
            )

    def get_house_pool_balance(self) -> Decimal:
        with self._lock:
            return self._house.balance()

    def get_admin_pool_balance(self) -> Decimal:
        with self._lock:
            return self._admin_pool.balance()

    def get_claimable_balance(self, bettor_id: str) -> Decimal:
        with self._lock:
            vault = self._claimable.get(bettor_id)
            return vault.balance() if vault is not None else ZERO

    def get_bets(self, label: str) -> list[tuple[str, Decimal]]:
        """(bettor_id, cumulative stake) for an outcome, in ledger order."""
        with self._lock:
            self._outcome_index(label)
            return [(r.bettor_id, r.amount) for r in self._ledger.entries(label)]

    # --- Helpers ---

    def _validate_bet(self, bettor_id: str, outcome_label: str, amount: Decimal) -> int:
        cfg = self.config
        if self._resolved:
            raise MarketResolved(f"Market '{self.market_id}' has already been resolved.")
        if self._locked:
            raise MarketLocked(f"Market '{self.market_id}' is locked. No more bets can be placed.")
        if amount <= 0:
            raise InvalidBetAmount("Invalid bet amount.")
        if amount < cfg.min_bet:
            raise InvalidBetAmount(f"Bet amount {amount} is below the minimum allowed of {cfg.min_bet}.")
        if amount > cfg.max_bet:
            raise InvalidBetAmount(f"Bet amount {amount} exceeds the maximum allowed of {cfg.max_bet}.")
        # Escrow and ledger totals never exceed total_staked, so this covers them too
        add_amounts(self._total_staked, amount)
        index = self._outcome_index(outcome_label)
        existing = self._ledger.find(outcome_label, bettor_id)
        if existing is not None and add_amounts(existing.amount, amount) > cfg.max_bet:
            raise BetLimitExceeded(
                f"Total bet exceeds the allowed limit by {existing.amount + amount - cfg.max_bet}. "
                f"You can bet up to {cfg.max_bet - existing.amount} more."
            )
        return index

    def _outcome_index(self, label: str) -> int:
        try:
            return self.config.outcomes.index(label)
        except ValueError:
            raise UnknownOutcome(
                f"Outcome '{label}' does not exist. The available outcomes are: {self.config.outcomes}"
            ) from None

    def _require_admin(self, capability: Any, operation: str) -> None:
        if not authorize(capability, self._admin):
            log.warning("unauthorized", market_id=self.market_id, operation=operation)
            raise Unauthorized(f"{operation} on market '{self.market_id}' requires its admin capability.")

    def _claimable_vault(self, bettor_id: str) -> Vault:
        vault = self._claimable.get(bettor_id)
        if vault is None:
            vault = self._claimable[bettor_id] = Vault.new_empty(label=f"claimable:{bettor_id}")
        return vault

    def _reset_and_resolve(self) -> None:
        self._total_staked = ZERO
        self._resolved = True

    def _emit(self, event: events.MarketEvent) -> None:
        try:
            self._sink.emit(event.event_name, event.payload())
        except Exception as e:
            log.warning("event_emit_failed", market_id=self.market_id, event_name=event.event_name, error=str(e))

    def __repr__(self) -> str:
        return f"Market(market_id={self.market_id!r}, status={self.status!r}, total_staked={self._total_staked!s})"
