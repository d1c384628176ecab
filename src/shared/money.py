"""Fixed-point money helpers. All amounts are ``Decimal`` with two places."""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from shared.errors import ValidationError

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value) -> Decimal:
    """Quantize a value to cents.

    Floats go through ``str`` so ``10.1`` becomes ``Decimal("10.10")`` rather
    than its binary expansion.
    """
    if isinstance(value, float):
        value = str(value)
    try:
        amount = Decimal(value)
    except (InvalidOperation, TypeError, ValueError) as exc:
        raise ValidationError(f"Invalid monetary amount: {value!r}") from exc
    if not amount.is_finite():
        raise ValidationError(f"Invalid monetary amount: {value!r}")
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def to_minor_units(amount: Decimal) -> int:
    """Express an amount in cents, as payment gateways expect."""
    return int((to_money(amount) * 100).to_integral_value(rounding=ROUND_HALF_UP))
