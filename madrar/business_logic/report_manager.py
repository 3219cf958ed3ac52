# madrar/business_logic/report_manager.py

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional, Union
import logging

from madrar.business_logic.sales_manager import SalesManager
from madrar.constants import Language
from madrar.data_access.products_repository import ProductsRepository
from madrar.data_access.raw_materials_repository import RawMaterialsRepository

logger = logging.getLogger(__name__)

ITEM_TYPE_MATERIAL = "material"
ITEM_TYPE_PRODUCT = "product"


@dataclass
class LowStockAlert:
    item_type: str  # ITEM_TYPE_MATERIAL or ITEM_TYPE_PRODUCT
    item_id: str
    name: str
    current_stock: Decimal
    min_threshold: Decimal
    unit: str  # material unit or product size

    @property
    def is_out_of_stock(self) -> bool:
        return self.current_stock <= 0


class ReportManager:
    def __init__(self,
                 raw_materials_repository: RawMaterialsRepository,
                 products_repository: ProductsRepository,
                 sales_manager: SalesManager):
        if raw_materials_repository is None: raise ValueError("raw_materials_repository cannot be None")
        if products_repository is None: raise ValueError("products_repository cannot be None")
        if sales_manager is None: raise ValueError("sales_manager cannot be None")
        self.raw_materials_repo = raw_materials_repository
        self.products_repo = products_repository
        self.sales_manager = sales_manager

    def get_low_stock_alerts(self, language: Union[Language, str, None] = None) -> List[LowStockAlert]:
        """Materials first, then products, each at or below its minimum threshold."""
        alerts = []
        for material in self.raw_materials_repo.get_all(order_by="name"):
            if material.is_low_stock:
                alerts.append(LowStockAlert(ITEM_TYPE_MATERIAL, material.id, material.display_name(language),
                                            material.current_stock, material.min_threshold, material.unit.value))
        for product in self.products_repo.get_all(order_by="name, size"):
            if product.is_low_stock:
                alerts.append(LowStockAlert(ITEM_TYPE_PRODUCT, product.id, product.display_name(language),
                                            product.current_stock, product.min_threshold, product.size.value))
        logger.debug(f"{len(alerts)} low stock alerts.")
        return alerts

    def get_dashboard_summary(self, today: Optional[date] = None) -> Dict[str, Any]:
        today = today or date.today()
        materials = self.raw_materials_repo.get_all()
        products = self.products_repo.get_all()
        alerts = [m for m in materials if m.is_low_stock] + [p for p in products if p.is_low_stock]
        return {
            "raw_material_count": len(materials),
            "product_count": len(products),
            "total_product_units": sum((p.current_stock for p in products), Decimal("0")),
            "raw_material_value": sum((m.current_stock * m.cost_per_unit for m in materials if m.cost_per_unit),
                                      Decimal("0")),
            "low_stock_count": len(alerts),
            "today_sales_total": self.sales_manager.get_sales_total_for_date(today),
            "today_sales_count": self.sales_manager.get_sales_count_for_date(today),
            "total_sales": self.sales_manager.get_total_sales(),
        }
