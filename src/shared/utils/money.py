from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")


def round_money(value: Decimal | int | str) -> Decimal:
    """
    Round an amount to cents, half away from zero.

    Examples:
        >>> round_money(Decimal("12.345"))
        Decimal('12.35')
        >>> round_money(3)
        Decimal('3.00')
    """
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)
