# pricing.py
from errors import InvalidQuantity

UNIT = "unit"
SLICE = "slice"
UNITS = (UNIT, SLICE)

# Buy 4 Get 1 Free: one item out of every full group is free.
PROMO_GROUP_SIZE = 5


def unit_price(product, unit: str) -> float:
    """
    Price of one sale unit. Cakes queried by slice are divided evenly,
    everything else sells at its listed price.
    """
    if product.item_type == "cake" and unit == SLICE:
        return product.price / product.slices_per_cake
    return product.price


def chargeable_quantity(qty: int, promo_enabled: bool) -> int:
    """How many of `qty` requested items are billed."""
    if qty < 0:
        raise InvalidQuantity(f"Quantity cannot be negative: {qty}")
    if not promo_enabled:
        return qty
    return qty - qty // PROMO_GROUP_SIZE


def line_savings(qty: int, price: float, promo_enabled: bool) -> float:
    return (qty - chargeable_quantity(qty, promo_enabled)) * price


def validate_quantity(value, what: str = "Quantity") -> int:
    """
    Coerce a user-entered quantity to a positive int.
    Accepts ints, integral floats and digit strings; raises InvalidQuantity otherwise.
    """
    if isinstance(value, bool):
        raise InvalidQuantity(f"{what} must be a whole number, got {value!r}")
    if isinstance(value, str):
        try:
            value = int(value.strip())
        except ValueError:
            raise InvalidQuantity(f"{what} must be a whole number, got {value!r}") from None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if not isinstance(value, int):
        raise InvalidQuantity(f"{what} must be a whole number, got {value!r}")
    if value <= 0:
        raise InvalidQuantity(f"{what} must be greater than zero")
    return value
