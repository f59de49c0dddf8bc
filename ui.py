# ui.py
import os
import datetime
import logging
import tkinter as tk
from tkinter import messagebox, filedialog

import ttkbootstrap as ttk
from ttkbootstrap.constants import *

from errors import PosError
from ledger import format_currency
from models import ITEM_TYPES
from pricing import SLICE, UNIT, unit_price
from session import PosSession, ROLES
from utils import export_inventory_csv, export_ledger_csv, generate_txt_receipt, generate_pdf_receipt

logger = logging.getLogger("bakery_pos.ui")

BOOTSTRAP_THEMES = {
    "dark": "darkly",
    "light": "cosmo",
    "default": "cosmo"
}


class BakeryUI:
    """Counter screen. Renders the session and forwards every action to it."""
    def __init__(self, session: PosSession, config=None):
        self.session = session
        self.config = config or {"receipt_dir": "receipts", "export_dir": "exports", "theme": "default", "currency": "$"}
        self.currency = self.config.get("currency", "$")

        self.root = ttk.Window(themename=BOOTSTRAP_THEMES.get(self.config.get("theme", "default"), "cosmo"))
        self.root.title("Tiny Bakery POS")
        self.root.geometry("1100x760")
        self.root.minsize(900, 600)

        self.role_var = tk.StringVar(value=session.role)
        self.promo_var = tk.BooleanVar(value=session.promo_enabled)
        self.product_var = tk.StringVar()
        self.unit_var = tk.StringVar(value=UNIT)
        self.qty_var = tk.StringVar(value="1")
        self.receipt_type_var = tk.StringVar(value="txt")
        self.subtotal_var = tk.StringVar()
        self.saved_var = tk.StringVar()
        self.revenue_var = tk.StringVar()
        self.status_var = tk.StringVar(value="Ready")
        self.saved_at_var = tk.StringVar()
        self._product_ids = []

        self._build_gui()
        self._refresh_all()

    def _money(self, amount):
        return format_currency(amount, self.currency)

    def _build_gui(self):
        header = ttk.Frame(self.root)
        header.pack(fill=tk.X, padx=10, pady=(10, 0))
        ttk.Label(header, text="Tiny Bakery POS", font=("Arial", 16, "bold")).pack(side=tk.LEFT)

        ttk.Label(header, text="Role:").pack(side=tk.RIGHT, padx=5)
        role_combo = ttk.Combobox(header, textvariable=self.role_var, values=ROLES, state="readonly", width=10)
        role_combo.pack(side=tk.RIGHT)
        role_combo.bind("<<ComboboxSelected>>", lambda e: self._change_role())

        self.promo_check = ttk.Checkbutton(header, text="Buy 4 Get 1 Free", variable=self.promo_var,
                                           command=self._toggle_promo, bootstyle="success-round-toggle")
        self.promo_check.pack(side=tk.RIGHT, padx=15)

        self.notebook = ttk.Notebook(self.root, bootstyle="primary")
        self.notebook.pack(expand=True, fill='both', padx=10, pady=10)

        self._build_sell_tab()
        self._build_manager_tab()
        self._build_ledger_tab()

        status = ttk.Frame(self.root)
        status.pack(side=tk.BOTTOM, fill=tk.X)
        ttk.Label(status, textvariable=self.status_var, anchor=tk.W).pack(side=tk.LEFT, padx=10, pady=3)
        ttk.Label(status, textvariable=self.saved_at_var, anchor=tk.E).pack(side=tk.RIGHT, padx=10, pady=3)

    # --- Tab 1: Sell ---
    def _build_sell_tab(self):
        frame = ttk.Frame(self.notebook)
        self.notebook.add(frame, text="Sell")

        left = ttk.Frame(frame)
        left.pack(side=tk.LEFT, fill=tk.BOTH, expand=True, padx=5, pady=5)
        right = ttk.Frame(frame)
        right.pack(side=tk.RIGHT, fill=tk.Y, padx=5, pady=5)

        pick = ttk.LabelFrame(left, text="Add to Cart", bootstyle="primary")
        pick.pack(fill=tk.X, padx=5, pady=5)

        ttk.Label(pick, text="Product:").grid(row=0, column=0, padx=5, pady=5, sticky=tk.W)
        self.product_combo = ttk.Combobox(pick, textvariable=self.product_var, state="readonly", width=40)
        self.product_combo.grid(row=0, column=1, padx=5, pady=5)
        self.product_combo.bind("<<ComboboxSelected>>", lambda e: self._on_product_selected())

        ttk.Label(pick, text="Sold by:").grid(row=0, column=2, padx=5, pady=5, sticky=tk.W)
        self.unit_combo = ttk.Combobox(pick, textvariable=self.unit_var, values=(UNIT, SLICE), state="readonly", width=8)
        self.unit_combo.grid(row=0, column=3, padx=5, pady=5)

        ttk.Label(pick, text="Quantity:").grid(row=0, column=4, padx=5, pady=5, sticky=tk.W)
        qty_entry = ttk.Entry(pick, textvariable=self.qty_var, width=6)
        qty_entry.grid(row=0, column=5, padx=5, pady=5)
        qty_entry.bind('<Return>', lambda e: self._add_to_cart())

        ttk.Button(pick, text="Add to Cart", command=self._add_to_cart, bootstyle="success").grid(row=0, column=6, padx=5, pady=5)

        products_frame = ttk.LabelFrame(left, text="Products", bootstyle="primary")
        products_frame.pack(fill=tk.BOTH, expand=True, padx=5, pady=5)
        cols = ("Name", "Type", "Inventory", "Price")
        self.products_tv = ttk.Treeview(products_frame, columns=cols, show='headings', height=8)
        self.products_tv.column("Name", width=180, anchor=tk.W)
        self.products_tv.column("Type", width=80, anchor=tk.CENTER)
        self.products_tv.column("Inventory", width=180, anchor=tk.W)
        self.products_tv.column("Price", width=220, anchor=tk.W)
        for c in cols:
            self.products_tv.heading(c, text=c)
        self.products_tv.pack(fill=tk.BOTH, expand=True)

        cart_frame = ttk.LabelFrame(left, text="Cart", bootstyle="primary")
        cart_frame.pack(fill=tk.BOTH, expand=True, padx=5, pady=5)
        cart_cols = ("Product", "Qty", "Charged", "Price", "Line Total", "Saved")
        self.cart_tv = ttk.Treeview(cart_frame, columns=cart_cols, show='headings', height=8)
        self.cart_tv.column("Product", width=180, anchor=tk.W)
        for c in cart_cols[1:]:
            self.cart_tv.column(c, width=90, anchor=tk.E)
        for c in cart_cols:
            self.cart_tv.heading(c, text=c)
        self.cart_tv.pack(fill=tk.BOTH, expand=True)

        cart_btn_frame = ttk.Frame(left)
        cart_btn_frame.pack(fill=tk.X, padx=5, pady=5)
        ttk.Button(cart_btn_frame, text="Remove Selected", command=self._remove_selected, bootstyle="danger").pack(side=tk.LEFT, padx=5)
        ttk.Button(cart_btn_frame, text="Clear Cart", command=self._clear_cart, bootstyle="warning").pack(side=tk.LEFT, padx=5)

        checkout_frame = ttk.LabelFrame(right, text="Checkout", bootstyle="primary")
        checkout_frame.pack(fill=tk.BOTH, expand=True, padx=5, pady=5)

        ttk.Label(checkout_frame, text="You save:").grid(row=0, column=0, padx=5, pady=10, sticky=tk.W)
        ttk.Label(checkout_frame, textvariable=self.saved_var, font=("Arial", 12)).grid(row=0, column=1, padx=5, pady=10, sticky=tk.E)
        ttk.Separator(checkout_frame, orient=tk.HORIZONTAL).grid(row=1, column=0, columnspan=2, sticky=tk.EW, padx=5, pady=5)
        ttk.Label(checkout_frame, text="SUBTOTAL:", font=("Arial", 12, "bold")).grid(row=2, column=0, padx=5, pady=10, sticky=tk.W)
        ttk.Label(checkout_frame, textvariable=self.subtotal_var, font=("Arial", 14, "bold")).grid(row=2, column=1, padx=5, pady=10, sticky=tk.E)

        ttk.Button(checkout_frame, text="CHECKOUT", command=self._checkout, bootstyle="success-outline").grid(
            row=3, column=0, columnspan=2, padx=5, pady=20, sticky=tk.EW)

        receipt_frame = ttk.LabelFrame(right, text="Receipt Options", bootstyle="secondary")
        receipt_frame.pack(fill=tk.X, padx=5, pady=5)
        ttk.Radiobutton(receipt_frame, text="No Receipt", variable=self.receipt_type_var, value="none").pack(anchor=tk.W, padx=5, pady=2)
        ttk.Radiobutton(receipt_frame, text="Text Receipt", variable=self.receipt_type_var, value="txt").pack(anchor=tk.W, padx=5, pady=2)
        ttk.Radiobutton(receipt_frame, text="PDF Receipt", variable=self.receipt_type_var, value="pdf").pack(anchor=tk.W, padx=5, pady=2)

    # --- Tab 2: Manager ---
    def _build_manager_tab(self):
        self.manager_frame = ttk.Frame(self.notebook)
        self.notebook.add(self.manager_frame, text="Manager")

        restock = ttk.LabelFrame(self.manager_frame, text="Restock", bootstyle="primary")
        restock.pack(fill=tk.X, padx=10, pady=10)
        self.restock_product_var = tk.StringVar()
        self.restock_amount_var = tk.StringVar(value="1")
        ttk.Label(restock, text="Product:").grid(row=0, column=0, padx=5, pady=5, sticky=tk.W)
        self.restock_combo = ttk.Combobox(restock, textvariable=self.restock_product_var, state="readonly", width=40)
        self.restock_combo.grid(row=0, column=1, padx=5, pady=5)
        ttk.Label(restock, text="Amount:").grid(row=0, column=2, padx=5, pady=5, sticky=tk.W)
        ttk.Entry(restock, textvariable=self.restock_amount_var, width=6).grid(row=0, column=3, padx=5, pady=5)
        ttk.Button(restock, text="Restock", command=self._restock, bootstyle="info").grid(row=0, column=4, padx=5, pady=5)

        add = ttk.LabelFrame(self.manager_frame, text="Add New Item", bootstyle="primary")
        add.pack(fill=tk.X, padx=10, pady=10)
        labels = ["Name", "Price ($)", "Slices per Cake", "Initial Stock"]
        self.new_item_vars = [tk.StringVar(), tk.StringVar(), tk.StringVar(value="8"), tk.StringVar(value="0")]
        self.new_type_var = tk.StringVar(value=ITEM_TYPES[0])
        ttk.Label(add, text="Type:").grid(row=0, column=0, padx=5, pady=5, sticky=tk.E)
        ttk.Combobox(add, textvariable=self.new_type_var, values=ITEM_TYPES, width=18).grid(row=0, column=1, padx=5, pady=5, sticky=tk.W)
        for i, txt in enumerate(labels, start=1):
            ttk.Label(add, text=txt + ":").grid(row=i, column=0, padx=5, pady=5, sticky=tk.E)
            ttk.Entry(add, textvariable=self.new_item_vars[i - 1], width=20).grid(row=i, column=1, padx=5, pady=5, sticky=tk.W)
        ttk.Button(add, text="Add Item", command=self._add_item, bootstyle="success").grid(row=len(labels) + 1, column=0, columnspan=2, pady=10)

        exports = ttk.LabelFrame(self.manager_frame, text="Export", bootstyle="primary")
        exports.pack(fill=tk.X, padx=10, pady=10)
        ttk.Button(exports, text="Inventory to CSV", command=self._export_inventory).pack(side=tk.LEFT, padx=5, pady=5)
        ttk.Button(exports, text="Ledger to CSV", command=self._export_ledger).pack(side=tk.LEFT, padx=5, pady=5)

    # --- Tab 3: Ledger ---
    def _build_ledger_tab(self):
        frame = ttk.Frame(self.notebook)
        self.notebook.add(frame, text="Ledger")

        top = ttk.Frame(frame)
        top.pack(fill=tk.X, padx=10, pady=10)
        ttk.Label(top, text="Revenue:", font=("Arial", 12, "bold")).pack(side=tk.LEFT)
        ttk.Label(top, textvariable=self.revenue_var, font=("Arial", 12)).pack(side=tk.LEFT, padx=10)

        alerts = ttk.LabelFrame(frame, text="Low Stock Alerts", bootstyle="warning")
        alerts.pack(fill=tk.X, padx=10, pady=5)
        self.alerts_list = tk.Listbox(alerts, height=5)
        self.alerts_list.pack(fill=tk.X, padx=5, pady=5)

        sales = ttk.LabelFrame(frame, text="Sales", bootstyle="primary")
        sales.pack(fill=tk.BOTH, expand=True, padx=10, pady=5)
        self.ledger_list = tk.Listbox(sales)
        self.ledger_list.pack(fill=tk.BOTH, expand=True, padx=5, pady=5)

    # --- Rendering ---
    def _product_label(self, p):
        if p.is_cake:
            return f"{p.name} - {p.slices_available} sl @ {self._money(unit_price(p, SLICE))} /slice"
        return f"{p.name} - {p.stock_units} u @ {self._money(p.price)}"

    def _refresh_all(self):
        self._refresh_products()
        self._refresh_cart()
        self._refresh_ledger()
        self._apply_role()

    def _refresh_products(self):
        products = list(self.session.catalog)
        selected = self._selected_product_id(self.product_combo)
        restock_selected = self._selected_product_id(self.restock_combo)
        self._product_ids = [p.id for p in products]
        labels = [self._product_label(p) for p in products]
        self.product_combo["values"] = labels
        self.restock_combo["values"] = labels
        if labels:
            self.product_combo.current(self._product_ids.index(selected) if selected in self._product_ids else 0)
            self._on_product_selected()
        if restock_selected in self._product_ids:
            self.restock_combo.current(self._product_ids.index(restock_selected))

        for item in self.products_tv.get_children():
            self.products_tv.delete(item)
        for p in products:
            if p.is_cake:
                inventory = f"{p.slices_available} slices ({p.whole_cakes} whole)"
                price = f"{self._money(p.price)} / cake - {self._money(unit_price(p, SLICE))} / slice"
            else:
                inventory = f"{p.stock_units} units"
                price = f"{self._money(p.price)} / unit"
            self.products_tv.insert("", tk.END, values=(p.name, p.item_type, inventory, price))

    def _refresh_cart(self):
        for item in self.cart_tv.get_children():
            self.cart_tv.delete(item)
        totals = self.session.totals()
        for lt in totals.lines:
            line = lt.line
            self.cart_tv.insert("", tk.END, values=(
                line.name,
                f"{line.qty}{line.unit_label}",
                lt.chargeable_qty,
                self._money(line.price),
                self._money(lt.line_total),
                self._money(lt.line_saved),
            ))
        self.subtotal_var.set(self._money(totals.subtotal))
        self.saved_var.set(self._money(totals.saved))

    def _refresh_ledger(self):
        self.revenue_var.set(self._money(self.session.revenue))
        self.alerts_list.delete(0, tk.END)
        alerts = self.session.low_stock_alerts()
        for a in alerts or ["All good!"]:
            self.alerts_list.insert(tk.END, a)
        self.ledger_list.delete(0, tk.END)
        for entry in self.session.ledger.entries or ["No sales yet."]:
            self.ledger_list.insert(tk.END, str(entry))

    def _apply_role(self):
        manager = self.session.role == "manager"
        self.notebook.tab(self.manager_frame, state="normal" if manager else "hidden")
        self.promo_check.configure(state="normal" if manager else "disabled")

    def _update_status(self, message):
        self.status_var.set(f"{datetime.datetime.now():%H:%M:%S}  {message}")
        saved_at = self.session.last_saved_at()
        self.saved_at_var.set(f"Last saved: {saved_at}" if saved_at else "Not saved")
        logger.info(message)

    def _selected_product_id(self, combo):
        idx = combo.current()
        if idx < 0 or idx >= len(self._product_ids):
            return None
        return self._product_ids[idx]

    # --- Actions ---
    def _on_product_selected(self):
        product = self.session.catalog.find_by_id(self._selected_product_id(self.product_combo))
        if product is None:
            return
        self.unit_var.set(SLICE if product.is_cake else UNIT)
        self.unit_combo.configure(state="readonly" if product.is_cake else "disabled")

    def _change_role(self):
        self.session.set_role(self.role_var.get())
        self._apply_role()
        self._update_status(f"Role: {self.session.role}")

    def _toggle_promo(self):
        self.session.set_promo(self.promo_var.get())
        self._refresh_cart()

    def _add_to_cart(self):
        product_id = self._selected_product_id(self.product_combo)
        if not product_id:
            messagebox.showwarning("Input Error", "Please select a product")
            return
        try:
            line = self.session.add_to_cart(product_id, self.unit_var.get(), self.qty_var.get())
        except PosError as e:
            messagebox.showerror("Cannot Add", str(e))
            logger.warning(f"Error adding to cart: {str(e)}")
            return
        self.qty_var.set("1")
        self._refresh_cart()
        self._update_status(f"Added {line.name} to cart")

    def _remove_selected(self):
        selected = self.cart_tv.selection()
        if not selected:
            messagebox.showinfo("Selection", "Please select an item to remove")
            return
        self.session.remove_line(self.cart_tv.index(selected[0]))
        self._refresh_cart()

    def _clear_cart(self):
        if len(self.session.cart) == 0:
            return
        if messagebox.askyesno("Clear Cart", "Are you sure you want to clear the cart?"):
            self.session.clear_cart()
            self._refresh_cart()

    def _checkout(self):
        if len(self.session.cart) == 0:
            messagebox.showinfo("Checkout", "Cart is empty")
            return
        try:
            receipt = self.session.checkout()
        except PosError as e:
            messagebox.showerror("Checkout Error", str(e))
            logger.warning(f"Checkout error: {str(e)}")
            return

        self._refresh_all()
        self._update_status(receipt['summary'])
        self._write_receipt(receipt)
        messagebox.showinfo("Checkout Complete", receipt['summary'])

    def _write_receipt(self, receipt):
        kind = self.receipt_type_var.get()
        if kind == "none":
            return
        receipt_dir = self.config.get("receipt_dir", "receipts")
        os.makedirs(receipt_dir, exist_ok=True)
        stamp = datetime.datetime.now().strftime("%Y%m%d_%H%M%S")
        path = os.path.join(receipt_dir, f"receipt_{stamp}.{kind}")
        try:
            if kind == "pdf":
                generate_pdf_receipt(receipt, path, self.currency)
            else:
                generate_txt_receipt(receipt, path, self.currency)
            self._update_status(f"Receipt saved to {path}")
        except OSError as e:
            messagebox.showerror("Receipt Error", f"Failed to save receipt: {str(e)}")
            logger.error(f"Error writing receipt: {str(e)}")

    def _restock(self):
        product_id = self._selected_product_id(self.restock_combo)
        product = self.session.catalog.find_by_id(product_id)
        if product is None:
            messagebox.showwarning("Warning", "Please select a product to restock")
            return
        unit = SLICE if product.is_cake else UNIT
        try:
            self.session.restock(product_id, self.restock_amount_var.get(), unit)
        except PosError as e:
            messagebox.showerror("Restock Error", str(e))
            return
        self._refresh_all()
        self._update_status(f"Restocked {product.name}")

    def _add_item(self):
        name, price, slices_per_cake, stock = (v.get() for v in self.new_item_vars)
        item_type = self.new_type_var.get()
        spec = {"name": name, "price": price, "type": item_type}
        if item_type.strip().lower() == "cake":
            spec.update(slices_per_cake=slices_per_cake, slices_available=stock)
        else:
            spec["stock_units"] = stock
        try:
            product = self.session.add_product(spec)
        except PosError as e:
            messagebox.showerror("Add Item", str(e))
            return
        self.new_item_vars[0].set("")
        self.new_item_vars[1].set("")
        self._refresh_all()
        self._update_status(f"Added {product.name}")

    def _export_inventory(self):
        path = filedialog.asksaveasfilename(initialdir=self.config.get("export_dir", "exports"),
                                            defaultextension=".csv", filetypes=[("CSV", "*.csv")])
        if path:
            export_inventory_csv(self.session.catalog, path)
            messagebox.showinfo("Export", "Inventory exported.")

    def _export_ledger(self):
        path = filedialog.asksaveasfilename(initialdir=self.config.get("export_dir", "exports"),
                                            defaultextension=".csv", filetypes=[("CSV", "*.csv")])
        if path:
            export_ledger_csv(self.session.ledger, path)
            messagebox.showinfo("Export", "Ledger exported.")

    def run(self):
        self.root.mainloop()
