# session.py
import logging
import threading

from catalog import Catalog
from checkout import checkout
from errors import ValidationFailed
from ledger import Ledger
from models import Cart

logger = logging.getLogger("bakery_pos.session")

ROLES = ("cashier", "manager")


class PosSession:
    """
    One counter's state: catalog, cart, ledger/revenue, promo flag and role.
    Every mutating call saves the state afterwards when a store is attached;
    a failed save is logged and never undoes the change.
    """
    def __init__(self, catalog=None, cart=None, ledger=None, promo_enabled=False,
                 role="cashier", db=None):
        self.catalog = catalog if catalog is not None else Catalog()
        self.cart = cart if cart is not None else Cart()
        self.ledger = ledger if ledger is not None else Ledger()
        self.promo_enabled = bool(promo_enabled)
        self.role = role
        self.db = db
        self._lock = threading.RLock()

    # Persistence
    @classmethod
    def load(cls, db=None) -> "PosSession":
        """
        Restore from `db`, falling back to a fresh seeded session when nothing
        is stored or the stored state can't be read.
        """
        state = None
        if db is not None:
            try:
                state = db.load_state()
            except Exception as e:
                logger.warning(f"Could not read saved state: {e}")
        if state:
            try:
                return cls.from_state(state, db=db)
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                logger.warning(f"Saved state is unreadable, starting from seed catalog: {e}")
        logger.info("Starting with seed catalog")
        return cls(db=db)

    @classmethod
    def from_state(cls, state: dict, db=None) -> "PosSession":
        revenue = float(state.get("revenue") or 0)
        if revenue < 0:
            raise ValidationFailed(f"Saved revenue cannot be negative: {revenue}")
        role = state.get("role") or "cashier"
        if role not in ROLES:
            role = "cashier"
        return cls(
            catalog=Catalog.from_list(state["inventory"]),
            cart=Cart.from_list(state.get("cart") or []),
            ledger=Ledger.from_list(state.get("ledger") or [], revenue),
            promo_enabled=bool(state.get("promoEnabled")),
            role=role,
            db=db,
        )

    def to_state(self) -> dict:
        return {
            "role": self.role,
            "promoEnabled": self.promo_enabled,
            "inventory": self.catalog.to_list(),
            "cart": self.cart.to_list(),
            "ledger": self.ledger.to_list(),
            "revenue": self.ledger.revenue,
        }

    def save(self):
        if self.db is None:
            return
        try:
            self.db.save_state(self.to_state())
        except Exception:
            logger.exception("Failed to save POS state")

    def last_saved_at(self):
        """Timestamp of the last successful save, or None."""
        if self.db is None:
            return None
        try:
            return self.db.last_saved_at()
        except Exception:
            logger.exception("Failed to read save timestamp")
            return None

    # Cart
    def add_to_cart(self, product_id: str, unit: str, qty):
        with self._lock:
            product = self.catalog.find_by_id(product_id)
            if product is None:
                raise ValidationFailed(f"Product not found: {product_id}")
            line = self.cart.add_line(product, unit, qty)
            self.save()
            return line

    def remove_line(self, index: int):
        with self._lock:
            self.cart.remove_line(index)
            self.save()

    def clear_cart(self):
        with self._lock:
            self.cart.clear()
            self.save()

    def totals(self):
        return self.cart.totals(self.promo_enabled)

    def checkout(self):
        with self._lock:
            receipt = checkout(self.cart, self.catalog, self.ledger, self.promo_enabled)
            if receipt is not None:
                self.save()
            return receipt

    # Manager operations (role is only a UI hint, nothing is enforced here)
    def restock(self, product_id: str, amount, unit: str):
        with self._lock:
            product = self.catalog.restock(product_id, amount, unit)
            self.save()
            return product

    def add_product(self, spec: dict):
        with self._lock:
            product = self.catalog.add_product(spec)
            self.save()
            return product

    def set_promo(self, enabled: bool):
        with self._lock:
            self.promo_enabled = bool(enabled)
            logger.info(f"Buy 4 Get 1 Free {'enabled' if self.promo_enabled else 'disabled'}")
            self.save()

    def set_role(self, role: str):
        if role not in ROLES:
            raise ValidationFailed(f"Unknown role: {role}")
        with self._lock:
            self.role = role
            self.save()

    # Reads
    @property
    def revenue(self) -> float:
        return self.ledger.revenue

    def low_stock_alerts(self) -> list:
        return self.catalog.low_stock_alerts()
