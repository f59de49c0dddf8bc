# checkout.py
import logging

from errors import StockChanged
from ledger import SaleRecord

logger = logging.getLogger("bakery_pos.checkout")


def _stage_stock(cart, catalog) -> list:
    """
    Replay every line's requested quantity against a copy of the catalog.
    Free promo items still leave the shelf, so the full qty is consumed.
    """
    staged = catalog.snapshot()
    by_id = {p.id: p for p in staged}
    for line in cart:
        product = by_id.get(line.product_id)
        if product is None:
            raise StockChanged(line.product_id, f"{line.name} is no longer in the catalog.")
        available = product.available(line.unit)
        if line.qty > available:
            label = "slices" if line.unit == "slice" else "units"
            raise StockChanged(
                line.product_id,
                f"Stock changed - not enough {label} of {line.name} ({line.qty} requested, {available} left).",
            )
        product.take(line.unit, line.qty)
    return staged


def checkout(cart, catalog, ledger, promo_enabled: bool):
    """
    Reconcile the cart with live stock and commit the sale.

    Returns a receipt dict, or None when the cart is empty. Raises StockChanged
    without touching catalog, cart or ledger when any line no longer fits.
    """
    if len(cart) == 0:
        return None

    staged = _stage_stock(cart, catalog)

    totals = cart.totals(promo_enabled)
    sale = SaleRecord(
        [{"id": lt.line.product_id, "name": lt.line.name, "unit": lt.line.unit, "qty": lt.line.qty}
         for lt in totals.lines],
        totals.subtotal,
        totals.saved,
    )
    receipt = {
        'items': [(lt.line.name, lt.line.qty, lt.chargeable_qty, lt.line.unit_label,
                   lt.line.price, lt.line_total) for lt in totals.lines],
        'subtotal': totals.subtotal,
        'saved': totals.saved,
        'promo': promo_enabled,
        'summary': sale.summary,
        'timestamp': sale.timestamp,
    }

    # commit: nothing below can fail
    catalog.replace(staged)
    ledger.record(sale)
    cart.clear()
    logger.info(sale.summary)
    return receipt
