# models.py
import math

from pricing import SLICE, UNIT, UNITS, chargeable_quantity, line_savings, unit_price, validate_quantity
from errors import InsufficientStock, InvalidQuantity, ValidationFailed

CAKE = "cake"
ITEM_TYPES = (CAKE, "pastry", "bread")


def stock_count(value, field):
    """Stock is optional but must be a whole non-negative number when given."""
    if value is None or value == "":
        return 0
    if isinstance(value, bool):
        raise ValidationFailed(f"{field} must be a whole number")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationFailed(f"{field} must be a whole number") from None
    if not number.is_integer() or number < 0:
        raise ValidationFailed(f"{field} must be a whole number of zero or more")
    return int(number)


def positive_price(value, field="Price"):
    if isinstance(value, bool):
        raise ValidationFailed(f"{field} must be a number")
    try:
        price = float(value)
    except (TypeError, ValueError):
        raise ValidationFailed(f"{field} must be a number") from None
    if not math.isfinite(price) or price <= 0:
        raise ValidationFailed(f"{field} must be greater than zero")
    return price


class Product:
    """Common identity of a sellable product. Price never changes after creation."""
    item_type = None

    def __init__(self, id: str, name: str, price: float):
        self.id = id
        self.name = name
        self._price = float(price)

    @property
    def price(self) -> float:
        return self._price

    @property
    def is_cake(self) -> bool:
        return self.item_type == CAKE

    def available(self, unit: str) -> int:
        """Stock on hand for `unit`. Each variant overrides this."""
        raise NotImplementedError

    def take(self, unit: str, qty: int):
        """Remove sold stock. Each variant overrides this."""
        raise NotImplementedError

    def add_stock(self, unit: str, amount: int):
        """Restock in `unit`. Each variant overrides this."""
        raise NotImplementedError

    def copy(self):
        return Product.from_dict(self.to_dict())

    def to_dict(self) -> dict:
        """Persisted record. Each variant overrides this."""
        raise NotImplementedError

    @staticmethod
    def from_dict(data: dict) -> "Product":
        """
        Build the right variant from a persisted record.
        Raises ValidationFailed when the record breaks a product rule.
        """
        item_type = data.get("itemType")
        product_id = data["id"]
        name = data["name"]
        if not product_id or not name:
            raise ValidationFailed("Saved product is missing its id or name")
        price = positive_price(data["price"])
        if item_type == CAKE:
            slices_per_cake = stock_count(data["slicesPerCake"], "Slices per cake")
            if slices_per_cake <= 0:
                raise ValidationFailed("Slices per cake must be greater than zero")
            return CakeProduct(
                product_id, name, price,
                slices_per_cake=slices_per_cake,
                slices_available=stock_count(data.get("slicesAvailable", 0), "Slices available"),
            )
        if not item_type:
            raise ValidationFailed(f"Saved product {product_id} has no item type")
        return UnitProduct(
            product_id, name, price, item_type,
            stock_units=stock_count(data.get("stockUnits", 0), "Stock units"),
        )

    def __eq__(self, other):
        if not isinstance(other, Product):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return f"{type(self).__name__}({self.to_dict()!r})"


class CakeProduct(Product):
    """A whole cake sold by the slice."""
    item_type = CAKE

    def __init__(self, id: str, name: str, price: float, slices_per_cake: int, slices_available: int = 0):
        super().__init__(id, name, price)
        self._slices_per_cake = slices_per_cake
        self.slices_available = slices_available

    @property
    def slices_per_cake(self) -> int:
        return self._slices_per_cake

    @property
    def whole_cakes(self) -> int:
        return self.slices_available // self.slices_per_cake

    def available(self, unit: str) -> int:
        # Cakes carry no unit stock, so a whole-cake request never fits.
        return self.slices_available if unit == SLICE else 0

    def take(self, unit: str, qty: int):
        self.slices_available -= qty

    def add_stock(self, unit: str, amount: int):
        if unit != SLICE:
            raise ValidationFailed(f"{self.name} is restocked by slice, not by {unit}")
        self.slices_available += amount

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "itemType": CAKE,
            "slicesPerCake": self.slices_per_cake,
            "slicesAvailable": self.slices_available,
        }


class UnitProduct(Product):
    """A product counted in whole units (pastries, bread, ...)."""

    def __init__(self, id: str, name: str, price: float, item_type: str, stock_units: int = 0):
        super().__init__(id, name, price)
        self.item_type = item_type
        self.stock_units = stock_units

    def available(self, unit: str) -> int:
        return self.stock_units

    def take(self, unit: str, qty: int):
        self.stock_units -= qty

    def add_stock(self, unit: str, amount: int):
        if unit != UNIT:
            raise ValidationFailed(f"{self.name} is restocked by unit, not by {unit}")
        self.stock_units += amount

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "itemType": self.item_type,
            "stockUnits": self.stock_units,
        }


class CartLine:
    """One requested product/unit pair. Holds the unit price seen when it was added."""
    def __init__(self, product_id: str, name: str, unit: str, qty: int, price: float):
        self.product_id = product_id
        self.name = name
        self.unit = unit
        self.qty = qty
        self.price = price

    @property
    def unit_label(self) -> str:
        return "sl" if self.unit == SLICE else "u"

    def to_dict(self) -> dict:
        return {"id": self.product_id, "name": self.name, "unit": self.unit,
                "qty": self.qty, "price": self.price}

    @classmethod
    def from_dict(cls, data: dict) -> "CartLine":
        unit = data["unit"]
        if unit not in UNITS:
            raise ValidationFailed(f"Unknown unit in saved cart: {unit!r}")
        try:
            qty = validate_quantity(data["qty"])
        except InvalidQuantity as e:
            raise ValidationFailed(f"Saved cart line has a bad quantity: {e}") from None
        return cls(data["id"], data["name"], unit, qty, positive_price(data["price"], "Cart price"))

    def __eq__(self, other):
        if not isinstance(other, CartLine):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return f"CartLine({self.to_dict()!r})"


class LineTotal:
    """A cart line priced under the current promo setting."""
    def __init__(self, line: CartLine, promo_enabled: bool):
        self.line = line
        self.chargeable_qty = chargeable_quantity(line.qty, promo_enabled)
        self.line_total = self.chargeable_qty * line.price
        self.line_saved = line_savings(line.qty, line.price, promo_enabled)


class CartTotals:
    def __init__(self, lines, promo_enabled: bool):
        self.promo_enabled = promo_enabled
        self.lines = [LineTotal(line, promo_enabled) for line in lines]

    @property
    def subtotal(self) -> float:
        return sum(lt.line_total for lt in self.lines)

    @property
    def saved(self) -> float:
        return sum(lt.line_saved for lt in self.lines)


class Cart:
    """Holds the current sale's lines. Products are referenced by id, never owned."""
    def __init__(self, lines=None):
        self.lines = list(lines or [])

    def __len__(self):
        return len(self.lines)

    def __iter__(self):
        return iter(self.lines)

    def find_line(self, product_id: str, unit: str):
        for line in self.lines:
            if line.product_id == product_id and line.unit == unit:
                return line
        return None

    def add_line(self, product: Product, unit: str, qty) -> CartLine:
        """
        Add `qty` of `product` sold by `unit`.
        Raises InvalidQuantity, ValidationFailed or InsufficientStock and leaves
        the cart untouched on any of them.
        """
        qty = validate_quantity(qty)
        if unit not in UNITS:
            raise ValidationFailed(f"Unknown unit: {unit!r}")
        if unit == SLICE and not product.is_cake:
            raise ValidationFailed(f"{product.name} cannot be sold by the slice")

        available = product.available(unit)
        if qty > available:
            raise InsufficientStock(product.name, unit, qty, available)

        # merge if same product and unit, keeping the originally captured price
        existing = self.find_line(product.id, unit)
        if existing:
            existing.qty += qty
            return existing
        line = CartLine(product.id, product.name, unit, qty, unit_price(product, unit))
        self.lines.append(line)
        return line

    def remove_line(self, index: int):
        if 0 <= index < len(self.lines):
            del self.lines[index]

    def clear(self):
        self.lines = []

    def totals(self, promo_enabled: bool) -> CartTotals:
        return CartTotals(self.lines, promo_enabled)

    def to_list(self) -> list:
        return [line.to_dict() for line in self.lines]

    @classmethod
    def from_list(cls, data) -> "Cart":
        return cls(CartLine.from_dict(d) for d in data)
