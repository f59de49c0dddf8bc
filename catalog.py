# catalog.py
import logging
import time

from errors import ValidationFailed
from models import CAKE, CakeProduct, Product, UnitProduct, positive_price, stock_count
from pricing import validate_quantity

logger = logging.getLogger("bakery_pos.catalog")

CAKE_LOW_STOCK_SLICES = 12
UNIT_LOW_STOCK_UNITS = 5


def seed_inventory():
    """Products a fresh install starts with."""
    return [
        CakeProduct("cake-choc", "Chocolate Cake", 24, slices_per_cake=6, slices_available=12),
        CakeProduct("cake-spice", "Spice Cake", 18, slices_per_cake=8, slices_available=8),
        UnitProduct("pastry-croissant", "Croissant", 3.5, "pastry", stock_units=30),
        UnitProduct("bread-baguette", "Baguette", 4.25, "bread", stock_units=12),
    ]


class Catalog:
    """
    The sellable products, most recently added first.
    """
    def __init__(self, products=None):
        self.products = list(products) if products is not None else seed_inventory()

    def __len__(self):
        return len(self.products)

    def __iter__(self):
        return iter(self.products)

    def find_by_id(self, product_id: str):
        for p in self.products:
            if p.id == product_id:
                return p
        return None

    def restock(self, product_id: str, amount, unit: str) -> Product:
        """
        Increase stock of one product. Cakes take slices, everything else units;
        a mismatched unit is rejected rather than ignored.
        """
        amount = validate_quantity(amount, "Restock amount")
        product = self.find_by_id(product_id)
        if product is None:
            raise ValidationFailed(f"Product not found: {product_id}")
        product.add_stock(unit, amount)
        logger.info(f"Restocked {product.name}: +{amount} {unit}")
        return product

    def _new_id(self, item_type: str) -> str:
        base = f"{item_type}-{int(time.time() * 1000)}"
        candidate, n = base, 2
        while self.find_by_id(candidate) is not None:
            candidate = f"{base}-{n}"
            n += 1
        return candidate

    def add_product(self, spec: dict) -> Product:
        """
        Create a product from a form-like dict:
        name, price, type and either slices_per_cake/slices_available (cakes)
        or stock_units (everything else).
        """
        name = str(spec.get("name") or "").strip()
        if not name:
            raise ValidationFailed("Name is required")

        price = positive_price(spec.get("price"))

        item_type = str(spec.get("type") or "").strip().lower()
        if not item_type:
            raise ValidationFailed("Item type is required")

        if item_type == CAKE:
            slices_per_cake = stock_count(spec.get("slices_per_cake"), "Slices per cake")
            if slices_per_cake <= 0:
                raise ValidationFailed("Slices per cake must be greater than zero")
            slices_available = stock_count(spec.get("slices_available"), "Slices available")
            product = CakeProduct(self._new_id(item_type), name, price,
                                  slices_per_cake=slices_per_cake,
                                  slices_available=slices_available)
        else:
            stock_units = stock_count(spec.get("stock_units"), "Stock units")
            product = UnitProduct(self._new_id(item_type), name, price, item_type,
                                  stock_units=stock_units)

        self.products.insert(0, product)
        logger.info(f"Added product {product.id} ({product.name})")
        return product

    def low_stock_alerts(self) -> list:
        alerts = []
        for p in self.products:
            if p.is_cake:
                if p.slices_available <= CAKE_LOW_STOCK_SLICES:
                    alerts.append(f"Cake {p.name} low: {p.slices_available} slices")
            elif p.stock_units <= UNIT_LOW_STOCK_UNITS:
                alerts.append(f"{p.name} low: {p.stock_units} units")
        return alerts

    def snapshot(self) -> list:
        """Independent copies of every product, for staging a change."""
        return [p.copy() for p in self.products]

    def replace(self, products):
        self.products = list(products)

    def to_list(self) -> list:
        return [p.to_dict() for p in self.products]

    @classmethod
    def from_list(cls, data) -> "Catalog":
        products = [Product.from_dict(d) for d in data]
        ids = [p.id for p in products]
        if len(set(ids)) != len(ids):
            raise ValidationFailed("Saved catalog has duplicate product ids")
        return cls(products)
