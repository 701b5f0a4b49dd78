"""Value container - the only way value moves between pools."""

from __future__ import annotations

from decimal import Context, Decimal, DecimalException, Inexact, InvalidOperation
from typing import Any, Iterable

from wagerbook.errors import AmountOverflow, InsufficientFunds, InvalidAmount

ZERO = Decimal("0")

# Balances carry up to 18 decimal places on top of large integer parts, more
# than the default 28-digit context holds exactly. Inexact is trapped: any
# sum or difference that would need rounding raises instead of losing value.
AMOUNT_CONTEXT = Context(prec=60)
AMOUNT_CONTEXT.traps[Inexact] = True


def to_amount(value: Any) -> Decimal:
    """Coerce int/str/Decimal to Decimal. Floats are rejected (binary rounding)."""
    if isinstance(value, bool) or isinstance(value, float):
        raise TypeError(f"Amounts must be Decimal, int or str, not {type(value).__name__}")
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, str)):
        try:
            amount = Decimal(value.strip() if isinstance(value, str) else value)
        except InvalidOperation as e:
            raise InvalidAmount(f"Not a decimal amount: {value!r}") from e
    else:
        raise TypeError(f"Amounts must be Decimal, int or str, not {type(value).__name__}")
    if not amount.is_finite():
        raise InvalidAmount(f"Not a finite amount: {value!r}")
    if len(amount.as_tuple().digits) > AMOUNT_CONTEXT.prec:
        raise AmountOverflow(f"Amount has more than {AMOUNT_CONTEXT.prec} significant digits: {value!r}")
    return amount


def add_amounts(a: Decimal, b: Decimal) -> Decimal:
    """a + b, exactly. Raises AmountOverflow when the result would be rounded."""
    try:
        return AMOUNT_CONTEXT.add(a, b)
    except DecimalException as e:
        raise AmountOverflow(f"{a} + {b} cannot be held exactly in {AMOUNT_CONTEXT.prec} digits") from e


def subtract_amounts(a: Decimal, b: Decimal) -> Decimal:
    """a - b, exactly. Raises AmountOverflow when the result would be rounded."""
    try:
        return AMOUNT_CONTEXT.subtract(a, b)
    except DecimalException as e:
        raise AmountOverflow(f"{a} - {b} cannot be held exactly in {AMOUNT_CONTEXT.prec} digits") from e


class Vault:
    """Holds a non-negative Decimal balance. Value leaves only via withdraw/withdraw_all."""

    __slots__ = ("label", "_balance")

    def __init__(self, amount: Any = ZERO, label: str = "") -> None:
        amount = to_amount(amount)
        if amount < 0:
            raise InvalidAmount(f"Vault balance cannot be negative: {amount}")
        self.label = label
        self._balance = amount

    @classmethod
    def new_empty(cls, label: str = "") -> Vault:
        return cls(ZERO, label=label)

    def balance(self) -> Decimal:
        return self._balance

    def is_empty(self) -> bool:
        return self._balance == 0

    def deposit(self, other: Vault) -> None:
        """Move the full balance of other into this vault; other is left empty.

        Raises AmountOverflow, with both vaults unchanged, if the new balance
        cannot be held exactly.
        """
        if other is self:
            return
        self._balance = add_amounts(self._balance, other._balance)
        other._balance = ZERO

    def withdraw(self, amount: Any) -> Vault:
        """Take amount out into a new vault. Raises InsufficientFunds if amount > balance."""
        amount = to_amount(amount)
        if amount < 0:
            raise InvalidAmount(f"Cannot withdraw a negative amount: {amount}")
        if amount > self._balance:
            raise InsufficientFunds(
                f"Insufficient funds in {self.label or 'vault'}: "
                f"requested {amount}, available {self._balance}"
            )
        self._balance = subtract_amounts(self._balance, amount)
        return Vault(amount, label=self.label)

    def withdraw_all(self) -> Vault:
        out = Vault(self._balance, label=self.label)
        self._balance = ZERO
        return out

    def __repr__(self) -> str:
        return f"Vault({self._balance!s}, label={self.label!r})"


def amount_sum(values: Iterable[Decimal]) -> Decimal:
    """Exact sum of amounts. Raises AmountOverflow instead of rounding."""
    total = ZERO
    for v in values:
        total = add_amounts(total, v)
    return total
