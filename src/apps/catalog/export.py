"""
Export the product catalog to Excel/CSV for admins.
"""
import csv
import io
from typing import Optional

import openpyxl

from .browse import name_map, resolve_name
from .entities import Product


class ProductExporter:
    """Export products to Excel/CSV, resolving supplier, tag and category names."""

    HEADERS = [
        'ID',
        'Title',
        'Price (CTN)',
        'Price (PCS)',
        'Description',
        'Image',
        'Supplier',
        'Tags',
        'Category',
        'Status',
    ]

    def __init__(self, suppliers=(), tags=(), categories=()):
        self.supplier_names = name_map(suppliers)
        self.tag_names = name_map(tags)
        self.category_names = name_map(categories)

    def _row(self, product: Product) -> list:
        tag_names = [
            name for name in (resolve_name(self.tag_names, t) for t in product.tag_ids)
            if name
        ]
        return [
            product.id,
            product.title,
            product.price,
            product.pcs_price,
            product.description,
            product.image,
            resolve_name(self.supplier_names, product.supplier_id) or '',
            ', '.join(tag_names),
            resolve_name(self.category_names, product.category_id) or '',
            product.status,
        ]

    def export_xlsx(self, products: list[Product], title: Optional[str] = None) -> bytes:
        """Export products to Excel bytes."""
        wb = openpyxl.Workbook()
        ws = wb.active
        ws.title = title or 'Products'

        # Headers
        for col, header in enumerate(self.HEADERS, start=1):
            ws.cell(row=1, column=col, value=header)

        # Data
        for row_idx, product in enumerate(products, start=2):
            for col, value in enumerate(self._row(product), start=1):
                ws.cell(row=row_idx, column=col, value=value)

        # Save to bytes
        output = io.BytesIO()
        wb.save(output)
        output.seek(0)
        return output.read()

    def export_csv(self, products: list[Product]) -> str:
        """Export products to CSV string."""
        output = io.StringIO()
        writer = csv.writer(output)

        writer.writerow(self.HEADERS)
        for product in products:
            writer.writerow(['' if v is None else v for v in self._row(product)])

        return output.getvalue()
