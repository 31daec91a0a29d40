from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional

TWO_PLACES = Decimal("0.01")
HUNDRED = Decimal("100")


def _as_decimal(value: object, quant: Optional[Decimal] = TWO_PLACES) -> Decimal:
    if isinstance(value, Decimal):
        result = value
    else:
        result = Decimal(str(value if value is not None else 0))
    if quant is None:
        return result
    return result.quantize(quant, rounding=ROUND_HALF_UP)


@dataclass(slots=True)
class PricedLine:
    quantity: Decimal
    unit_amount: Decimal
    tax_rate: Decimal = Decimal("0")

    @property
    def net(self) -> Decimal:
        return self.quantity * self.unit_amount

    @property
    def tax(self) -> Decimal:
        return self.net * self.tax_rate / HUNDRED


@dataclass(slots=True)
class LineTotals:
    sub_total: Decimal
    tax_total: Decimal
    grand_total: Decimal


def compute_line_total(quantity: object, unit_amount: object) -> Decimal:
    return (_as_decimal(quantity, None) * _as_decimal(unit_amount, None)).quantize(
        TWO_PLACES, rounding=ROUND_HALF_UP
    )


def sum_lines(lines: Iterable[PricedLine]) -> LineTotals:
    sub = Decimal("0")
    tax = Decimal("0")
    for line in lines:
        sub += line.net
        tax += line.tax
    sub_total = sub.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
    tax_total = tax.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
    grand_total = (sub + tax).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
    return LineTotals(sub_total=sub_total, tax_total=tax_total, grand_total=grand_total)
