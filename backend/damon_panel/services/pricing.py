"""Quote price formula.

unit = (P*D + L*F + W*(CN/CD) + P*D*WR) / COM / OFF / PF, optionally rounded
to a step, then multiplied by quantity.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Any


ROUNDING_MODES: tuple[str, ...] = ("none", "round", "ceil", "floor")


@dataclass(frozen=True)
class PricingCoefficients:
    discount_multiplier: float = 0.38
    freight_rate_per_meter_eur: float = 1000.0
    customs_numerator: float = 350000.0
    customs_denominator: float = 150000.0
    warranty_rate: float = 0.05
    commission_factor: float = 0.95
    office_factor: float = 0.95
    profit_factor: float = 0.65
    rounding_mode: str = "none"
    rounding_step: float = 0.0
    exchange_rate_irr_per_eur: float = 0.0

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


DEFAULT_COEFFICIENTS = PricingCoefficients()

_NUMERIC_FIELDS: tuple[str, ...] = tuple(
    name for name, value in DEFAULT_COEFFICIENTS.as_dict().items() if isinstance(value, float)
)


@dataclass(frozen=True)
class QuoteBreakdown:
    company_price: float
    shipment: float
    customs: float
    warranty: float
    subtotal: float
    unit_price: float
    quantity: int
    total_price: float

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


def _to_float(value: Any, default: float) -> float:
    if value is None or value == "":
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(number):
        return default
    return number


def normalize_rounding_mode(mode: str | None) -> str:
    if not mode:
        return "none"
    normalized = str(mode).strip().lower()
    return normalized if normalized in ROUNDING_MODES else "none"


def coefficients_from(source: Any) -> PricingCoefficients:
    """Build coefficients from a settings row, a mapping, or None (defaults).

    Missing or unparsable fields fall back to the defaults one by one.
    """
    if source is None:
        return DEFAULT_COEFFICIENTS

    def _get(name: str) -> Any:
        if isinstance(source, dict):
            return source.get(name)
        return getattr(source, name, None)

    values: dict[str, Any] = {
        name: _to_float(_get(name), getattr(DEFAULT_COEFFICIENTS, name)) for name in _NUMERIC_FIELDS
    }
    values["rounding_mode"] = normalize_rounding_mode(_get("rounding_mode"))
    return PricingCoefficients(**values)


def normalize_quantity(quantity: Any) -> int:
    """Quantities below 1 or unparsable become 1."""
    try:
        number = int(float(quantity))
    except (TypeError, ValueError):
        return 1
    return number if number >= 1 else 1


def _divisor(value: float) -> float:
    return value if value else 1.0


def apply_rounding(value: float, *, mode: str, step: float) -> float:
    """Snap value to a multiple of step. Halves round up for mode "round"."""
    if step <= 0:
        return value
    mode = normalize_rounding_mode(mode)
    if mode == "round":
        return math.floor(value / step + 0.5) * step
    if mode == "ceil":
        return math.ceil(value / step) * step
    if mode == "floor":
        return math.floor(value / step) * step
    return value


def compute_quote(
    *,
    factory_price: Any,
    length: Any,
    weight: Any,
    coefficients: PricingCoefficients = DEFAULT_COEFFICIENTS,
    quantity: Any = 1,
) -> QuoteBreakdown:
    p = _to_float(factory_price, 0.0)
    l = _to_float(length, 0.0)  # noqa: E741
    w = _to_float(weight, 0.0)
    c = coefficients

    company_price = p * c.discount_multiplier
    shipment = l * c.freight_rate_per_meter_eur
    customs = w * (c.customs_numerator / _divisor(c.customs_denominator))
    warranty = company_price * c.warranty_rate
    subtotal = company_price + shipment + customs + warranty

    unit_price = subtotal / _divisor(c.commission_factor)
    unit_price = unit_price / _divisor(c.office_factor)
    unit_price = unit_price / _divisor(c.profit_factor)
    unit_price = apply_rounding(unit_price, mode=c.rounding_mode, step=c.rounding_step)

    qty = normalize_quantity(quantity)
    return QuoteBreakdown(
        company_price=company_price,
        shipment=shipment,
        customs=customs,
        warranty=warranty,
        subtotal=subtotal,
        unit_price=unit_price,
        quantity=qty,
        total_price=unit_price * qty,
    )


def quote_for_device(device: Any, settings_row: Any, quantity: Any = 1) -> QuoteBreakdown:
    return compute_quote(
        factory_price=device.factory_pricelist_eur,
        length=device.length_meter,
        weight=device.weight_unit,
        coefficients=coefficients_from(settings_row),
        quantity=quantity,
    )
