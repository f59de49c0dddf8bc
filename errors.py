# errors.py


class PosError(ValueError):
    """Base class for every condition the POS core reports to its caller."""


class InvalidQuantity(PosError):
    """A quantity or amount was not a positive whole number."""


class ValidationFailed(PosError):
    """Input for a catalog or session operation was incomplete or inconsistent."""


class InsufficientStock(PosError):
    """Requested more than the catalog currently holds when adding to cart."""

    def __init__(self, product_name, unit, requested, available):
        self.product_name = product_name
        self.unit = unit
        self.requested = requested
        self.available = available
        label = "slices" if unit == "slice" else "units"
        super().__init__(
            f"Cannot add {requested} {product_name} - only {available} {label} remain."
        )


class StockChanged(PosError):
    """Stock dropped below the cart's requested quantity before checkout."""

    def __init__(self, product_id, message=None):
        self.product_id = product_id
        super().__init__(message or f"Stock changed - not enough left for {product_id}.")
