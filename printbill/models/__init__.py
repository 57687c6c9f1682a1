from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")


def to_paise(amount: Decimal) -> int:
    """Decimal rupees to integer paise: Decimal('2.50') -> 250"""
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_paise(paise: int) -> Decimal:
    """Integer paise to Decimal rupees: 250 -> Decimal('2.50')"""
    return (Decimal(paise) / 100).quantize(CENT)


def format_amount(amount: Decimal, symbol: str, places: int = 2) -> str:
    """Format an amount with a currency prefix and no grouping: (2.5, '₹', 0) -> '₹3'"""
    quantum = Decimal(1).scaleb(-places)
    return f"{symbol}{amount.quantize(quantum, rounding=ROUND_HALF_UP)}"


def format_inr(amount: Decimal) -> str:
    """Format rupees with Indian digit grouping: 250000 -> '₹2,50,000.00'"""
    value = amount.quantize(CENT, rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    whole, frac = f"{abs(value):.2f}".split(".")
    if len(whole) > 3:
        head, tail = whole[:-3], whole[-3:]
        groups = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        whole = ",".join(groups + [tail])
    return f"{sign}₹{whole}.{frac}"
