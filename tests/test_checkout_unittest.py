import os
import unittest
import sys
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from catalog import Catalog
from checkout import checkout
from errors import StockChanged
from ledger import Ledger
from models import Cart, UnitProduct


class CheckoutTests(unittest.TestCase):
    def setUp(self):
        self.box = UnitProduct("box-1", "Cookie Box", 10, "pastry", stock_units=8)
        self.catalog = Catalog()
        self.catalog.products.insert(0, self.box)
        self.cart = Cart()
        self.ledger = Ledger()

    def test_empty_cart_is_noop(self):
        before = self.catalog.to_list()
        self.assertIsNone(checkout(self.cart, self.catalog, self.ledger, True))
        self.assertEqual(self.catalog.to_list(), before)
        self.assertEqual(len(self.ledger), 0)
        self.assertEqual(self.ledger.revenue, 0)

    def test_promo_checkout_charges_four_consumes_five(self):
        self.cart.add_line(self.box, "unit", 5)
        receipt = checkout(self.cart, self.catalog, self.ledger, True)

        self.assertEqual(receipt['subtotal'], 40.0)
        self.assertEqual(receipt['saved'], 10.0)
        self.assertEqual(self.catalog.find_by_id("box-1").stock_units, 3)
        self.assertEqual(self.ledger.revenue, 40.0)
        self.assertEqual(len(self.ledger), 1)
        self.assertEqual(len(self.cart), 0)
        self.assertEqual(self.ledger.entries[0].summary,
                         "Sale: 5u Cookie Box | subtotal $40.00 (saved $10.00)")

    def test_summary_without_savings(self):
        self.cart.add_line(self.catalog.find_by_id("cake-choc"), "slice", 2)
        self.cart.add_line(self.catalog.find_by_id("pastry-croissant"), "unit", 1)
        checkout(self.cart, self.catalog, self.ledger, False)
        self.assertEqual(self.ledger.entries[0].summary,
                         "Sale: 2sl Chocolate Cake, 1u Croissant | subtotal $11.50")
        self.assertEqual(self.catalog.find_by_id("cake-choc").slices_available, 10)
        self.assertEqual(self.catalog.find_by_id("pastry-croissant").stock_units, 29)

    def test_stock_changed_aborts_everything(self):
        self.cart.add_line(self.catalog.find_by_id("pastry-croissant"), "unit", 2)
        self.cart.add_line(self.box, "unit", 6)
        self.box.stock_units = 4  # sold elsewhere after the line was added

        before = self.catalog.to_list()
        lines = self.cart.to_list()
        with self.assertRaises(StockChanged) as ctx:
            checkout(self.cart, self.catalog, self.ledger, True)
        self.assertEqual(ctx.exception.product_id, "box-1")
        self.assertEqual(self.catalog.to_list(), before)
        self.assertEqual(self.cart.to_list(), lines)
        self.assertEqual(len(self.ledger), 0)
        self.assertEqual(self.ledger.revenue, 0)

    def test_lines_for_same_product_draw_from_same_stock(self):
        choc = self.catalog.find_by_id("cake-choc")
        self.cart.add_line(choc, "slice", 8)
        self.cart.add_line(choc, "slice", 8)
        with self.assertRaises(StockChanged):
            checkout(self.cart, self.catalog, self.ledger, False)
        self.assertEqual(choc.slices_available, 12)

    def test_missing_product_fails(self):
        self.cart.add_line(self.box, "unit", 1)
        self.catalog.replace([p for p in self.catalog if p.id != "box-1"])
        with self.assertRaises(StockChanged):
            checkout(self.cart, self.catalog, self.ledger, False)
        self.assertEqual(len(self.cart), 1)

    def test_revenue_accumulates_newest_first(self):
        self.cart.add_line(self.box, "unit", 1)
        checkout(self.cart, self.catalog, self.ledger, False)
        self.cart.add_line(self.box, "unit", 2)
        checkout(self.cart, self.catalog, self.ledger, False)
        self.assertEqual(self.ledger.revenue, 30.0)
        self.assertEqual([e.subtotal for e in self.ledger.entries], [20.0, 10.0])

    def test_receipt_items(self):
        self.cart.add_line(self.box, "unit", 5)
        receipt = checkout(self.cart, self.catalog, self.ledger, True)
        self.assertEqual(receipt['items'], [("Cookie Box", 5, 4, "u", 10.0, 40.0)])
        self.assertTrue(receipt['promo'])


if __name__ == '__main__':
    unittest.main()
