import os
import unittest
import sys
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from catalog import Catalog, seed_inventory
from errors import InvalidQuantity, ValidationFailed
from models import CakeProduct, UnitProduct


class CatalogTests(unittest.TestCase):
    def setUp(self):
        self.catalog = Catalog()

    def test_seed_catalog(self):
        ids = [p.id for p in self.catalog]
        self.assertEqual(ids, ["cake-choc", "cake-spice", "pastry-croissant", "bread-baguette"])
        choc = self.catalog.find_by_id("cake-choc")
        self.assertIsInstance(choc, CakeProduct)
        self.assertEqual((choc.price, choc.slices_per_cake, choc.slices_available), (24.0, 6, 12))
        croissant = self.catalog.find_by_id("pastry-croissant")
        self.assertIsInstance(croissant, UnitProduct)
        self.assertEqual((croissant.price, croissant.stock_units), (3.5, 30))

    def test_find_by_id_missing(self):
        self.assertIsNone(self.catalog.find_by_id("nope"))

    def test_price_is_read_only(self):
        with self.assertRaises(AttributeError):
            self.catalog.find_by_id("bread-baguette").price = 1

    def test_restock_units(self):
        before = self.catalog.to_list()
        self.catalog.restock("bread-baguette", 3, "unit")
        after = self.catalog.to_list()
        self.assertEqual(self.catalog.find_by_id("bread-baguette").stock_units, 15)
        for b, a in zip(before, after):
            if b["id"] != "bread-baguette":
                self.assertEqual(a, b)

    def test_restock_slices(self):
        self.catalog.restock("cake-spice", 8, "slice")
        self.assertEqual(self.catalog.find_by_id("cake-spice").slices_available, 16)

    def test_restock_non_positive_is_rejected(self):
        before = self.catalog.to_list()
        for amount in (0, -4, "x"):
            with self.assertRaises(InvalidQuantity):
                self.catalog.restock("bread-baguette", amount, "unit")
        self.assertEqual(self.catalog.to_list(), before)

    def test_restock_unit_mismatch_is_rejected(self):
        before = self.catalog.to_list()
        with self.assertRaises(ValidationFailed):
            self.catalog.restock("cake-choc", 6, "unit")
        with self.assertRaises(ValidationFailed):
            self.catalog.restock("pastry-croissant", 6, "slice")
        self.assertEqual(self.catalog.to_list(), before)

    def test_restock_unknown_product(self):
        with self.assertRaises(ValidationFailed):
            self.catalog.restock("missing", 1, "unit")

    def test_add_cake(self):
        p = self.catalog.add_product({"name": "Lemon Cake", "price": "20", "type": "cake",
                                      "slices_per_cake": "10", "slices_available": 5})
        self.assertIsInstance(p, CakeProduct)
        self.assertTrue(p.id.startswith("cake-"))
        self.assertEqual((p.price, p.slices_per_cake, p.slices_available), (20.0, 10, 5))
        self.assertIs(self.catalog.products[0], p)

    def test_add_unit_product_defaults_stock(self):
        p = self.catalog.add_product({"name": "Scone", "price": 2.5, "type": "pastry"})
        self.assertIsInstance(p, UnitProduct)
        self.assertEqual(p.item_type, "pastry")
        self.assertEqual(p.stock_units, 0)

    def test_add_product_accepts_new_type(self):
        p = self.catalog.add_product({"name": "Cookie", "price": 1, "type": "cookie", "stock_units": 40})
        self.assertEqual(p.item_type, "cookie")

    def test_add_product_validation(self):
        bad_specs = [
            {"name": "", "price": 2, "type": "bread"},
            {"name": "Rye", "price": 0, "type": "bread"},
            {"name": "Rye", "price": -1, "type": "bread"},
            {"name": "Rye", "price": "abc", "type": "bread"},
            {"name": "Rye", "price": float("inf"), "type": "bread"},
            {"name": "Rye", "price": "nan", "type": "bread"},
            {"name": "Rye", "type": "bread"},
            {"name": "Rye", "price": 3, "type": ""},
            {"name": "Rye", "price": 3, "type": "bread", "stock_units": -1},
            {"name": "Rye", "price": 3, "type": "bread", "stock_units": 1.5},
            {"name": "Torte", "price": 30, "type": "cake"},
            {"name": "Torte", "price": 30, "type": "cake", "slices_per_cake": 0},
        ]
        for spec in bad_specs:
            with self.assertRaises(ValidationFailed, msg=spec):
                self.catalog.add_product(spec)
        self.assertEqual(len(self.catalog), 4)

    def test_new_ids_do_not_collide(self):
        ids = {self.catalog.add_product({"name": f"Roll {i}", "price": 1, "type": "bread"}).id
               for i in range(20)}
        self.assertEqual(len(ids), 20)
        self.assertEqual(len({p.id for p in self.catalog}), 24)

    def test_low_stock_alerts_for_seed(self):
        self.assertEqual(self.catalog.low_stock_alerts(), [
            "Cake Chocolate Cake low: 12 slices",
            "Cake Spice Cake low: 8 slices",
        ])

    def test_low_stock_alerts_thresholds(self):
        catalog = Catalog([
            CakeProduct("a", "Big Cake", 10, slices_per_cake=8, slices_available=13),
            UnitProduct("b", "Bun", 1, "bread", stock_units=6),
            UnitProduct("c", "Tart", 1, "pastry", stock_units=5),
        ])
        self.assertEqual(catalog.low_stock_alerts(), ["Tart low: 5 units"])

    def test_snapshot_is_independent(self):
        staged = self.catalog.snapshot()
        staged[0].take("slice", 5)
        self.assertEqual(self.catalog.find_by_id("cake-choc").slices_available, 12)
        self.catalog.replace(staged)
        self.assertEqual(self.catalog.find_by_id("cake-choc").slices_available, 7)

    def test_serialization_round_trip(self):
        self.catalog.add_product({"name": "Cookie", "price": 1, "type": "cookie", "stock_units": 4})
        restored = Catalog.from_list(self.catalog.to_list())
        self.assertEqual(restored.products, self.catalog.products)
        self.assertEqual(seed_inventory()[0].to_dict()["itemType"], "cake")


if __name__ == '__main__':
    unittest.main()
