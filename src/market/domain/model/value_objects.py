"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

from dataclasses import dataclass

from market.domain.exceptions import ValidationError


@dataclass(frozen=True)
class Identity:
    """Opaque reference to a caller or account.

    Only equality is meaningful; there is no ordering or arithmetic.
    """

    ref: str

    def __post_init__(self) -> None:
        if not isinstance(self.ref, str) or not self.ref.strip():
            raise ValidationError("Identity reference must be a non-empty string")

    def __str__(self) -> str:
        return self.ref


@dataclass(frozen=True)
class Value:
    """An amount of value in the smallest indivisible unit.

    Integers only: there is a single currency and no fractional units.
    """

    amount: int

    def __post_init__(self) -> None:
        if not isinstance(self.amount, int) or isinstance(self.amount, bool):
            raise ValidationError(
                f"Value amount must be an int, got {type(self.amount).__name__}"
            )
        if self.amount < 0:
            raise ValidationError(
                f"Value amount cannot be negative, got {self.amount}"
            )

    # --- Arithmetic helpers ---------------------------------------------------

    def __add__(self, other: Value) -> Value:
        return Value(self.amount + other.amount)

    def __sub__(self, other: Value) -> Value:
        result = self.amount - other.amount
        if result < 0:
            raise ValidationError("Value subtraction would result in a negative amount")
        return Value(result)

    def __lt__(self, other: Value) -> bool:
        return self.amount < other.amount

    def __le__(self, other: Value) -> bool:
        return self.amount <= other.amount

    def __gt__(self, other: Value) -> bool:
        return self.amount > other.amount

    def __ge__(self, other: Value) -> bool:
        return self.amount >= other.amount

    # --- Display --------------------------------------------------------------

    def __str__(self) -> str:
        return str(self.amount)

    # --- Factory --------------------------------------------------------------

    @staticmethod
    def of(amount: str | int | Value) -> Value:
        """Convenient factory that coerces integer-like input safely."""
        return Value(to_units(amount))


def to_units(amount: str | int | Value) -> int:
    """Coerce integer-like input to a plain int of smallest units.

    Floats are rejected outright; the sign is left for the caller to judge.
    """
    if isinstance(amount, Value):
        return amount.amount
    if isinstance(amount, (float, bool)):
        raise ValidationError(f"Invalid value amount: {amount!r}")
    try:
        return int(str(amount).strip())
    except ValueError as exc:
        raise ValidationError(f"Invalid value amount: {amount!r}") from exc


ZERO = Value(0)
