# utils.py
import datetime

import pandas as pd
from reportlab.lib import colors
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import inch
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer

from catalog import Catalog
from ledger import Ledger

INVENTORY_COLUMNS = ["id", "name", "type", "price", "slices_per_cake", "stock", "stock_unit"]


def inventory_frame(catalog: Catalog) -> pd.DataFrame:
    """One row per product; cakes report stock in slices."""
    rows = []
    for p in catalog:
        rows.append({
            'id': p.id,
            'name': p.name,
            'type': p.item_type,
            'price': p.price,
            'slices_per_cake': p.slices_per_cake if p.is_cake else None,
            'stock': p.slices_available if p.is_cake else p.stock_units,
            'stock_unit': 'slice' if p.is_cake else 'unit',
        })
    return pd.DataFrame(rows, columns=INVENTORY_COLUMNS)


def export_inventory_csv(catalog: Catalog, file_path: str):
    """Dump inventory to CSV."""
    inventory_frame(catalog).to_csv(file_path, index=False)
    return file_path


def ledger_frame(ledger: Ledger) -> pd.DataFrame:
    df = pd.DataFrame([e.to_dict() for e in ledger.entries],
                      columns=["timestamp", "summary", "subtotal", "saved"])
    df['items'] = [len(e.items) for e in ledger.entries]
    return df


def export_ledger_csv(ledger: Ledger, file_path: str):
    """Write the sale ledger (newest first) to CSV."""
    ledger_frame(ledger).to_csv(file_path, index=False)
    return file_path


def generate_txt_receipt(receipt: dict, file_path: str, currency="$"):
    """Write a simple text receipt."""
    with open(file_path, 'w') as f:
        f.write(f"Date: {receipt['timestamp']}\n")
        f.write("-" * 42 + "\n")
        f.write("Item             QTY  Paid   Price    Total\n")
        for name, qty, chargeable, unit_label, price, line in receipt['items']:
            f.write(f"{name[:15]:15} {qty:3}{unit_label:2} {chargeable:4}  {currency}{price:6.2f} {currency}{line:7.2f}\n")
        f.write("-" * 42 + "\n")
        if receipt.get('promo'):
            f.write("Promotion:    Buy 4 Get 1 Free\n")
        f.write(f"Subtotal:     {currency}{receipt['subtotal']:8.2f}\n")
        if receipt['saved'] > 0:
            f.write(f"You saved:    {currency}{receipt['saved']:8.2f}\n")
        f.write("-" * 42 + "\n")
        f.write("Thank you for your purchase!\n")
    return file_path


def generate_pdf_receipt(receipt: dict, file_path: str, currency="$"):
    """Generate a PDF receipt using ReportLab."""
    doc = SimpleDocTemplate(file_path, pagesize=letter)
    elements = []

    styles = getSampleStyleSheet()
    styles.add(ParagraphStyle(
        name='RightAlign',
        parent=styles['Normal'],
        alignment=2,  # 2 is right alignment
    ))

    elements.append(Paragraph("Receipt", styles['Heading1']))

    timestamp = receipt['timestamp']
    try:
        date_str = datetime.datetime.fromisoformat(timestamp).strftime("%Y-%m-%d %H:%M:%S")
    except (TypeError, ValueError):
        date_str = str(timestamp)
    elements.append(Paragraph(f"Date: {date_str}", styles['Normal']))
    elements.append(Spacer(1, 0.2 * inch))

    data = [["Item", "Qty", "Charged", "Price", "Total"]]
    for name, qty, chargeable, unit_label, price, line in receipt['items']:
        data.append([name, f"{qty}{unit_label}", str(chargeable), f"{currency}{price:.2f}", f"{currency}{line:.2f}"])

    data.append(["" for _ in range(5)])
    data.append(["Subtotal:", "", "", "", f"{currency}{receipt['subtotal']:.2f}"])
    data.append(["Saved:", "", "", "", f"{currency}{receipt['saved']:.2f}"])

    table = Table(data, colWidths=[2.5*inch, 0.8*inch, 0.8*inch, 1*inch, 1*inch])
    table.setStyle(TableStyle([
        ('BACKGROUND', (0, 0), (4, 0), colors.grey),
        ('TEXTCOLOR', (0, 0), (4, 0), colors.whitesmoke),
        ('ALIGN', (0, 0), (4, 0), 'CENTER'),
        ('FONTNAME', (0, 0), (4, 0), 'Helvetica-Bold'),
        ('BOTTOMPADDING', (0, 0), (4, 0), 12),
        ('BACKGROUND', (0, 1), (4, -1), colors.white),
        ('GRID', (0, 0), (-1, -4), 1, colors.black),
        ('ALIGN', (1, 1), (4, -1), 'RIGHT'),
        ('FONTNAME', (0, -2), (4, -1), 'Helvetica-Bold'),
    ]))
    elements.append(table)
    elements.append(Spacer(1, 0.5 * inch))

    if receipt.get('promo'):
        elements.append(Paragraph("Buy 4 Get 1 Free applied", styles['Normal']))
    elements.append(Paragraph("Thank you for your purchase!", styles['RightAlign']))

    doc.build(elements)
    return file_path
