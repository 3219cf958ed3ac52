# madrar/business_logic/product_manager.py

from decimal import Decimal
from typing import Any, Dict, List, Optional
import logging

from madrar.business_logic.entities.product_entity import ProductEntity
from madrar.business_logic.inventory_manager import InventoryManager
from madrar.data_access.products_repository import ProductsRepository
from madrar.data_access.production_records_repository import ProductionRecordsRepository
from madrar.data_access.sales_records_repository import SalesRecordsRepository
from madrar.constants import ProductSize, StockMovementType, ReferenceType
from madrar.errors import NotFoundError, ValidationError
from madrar.utils.number_utils import to_enum, to_non_negative_decimal, to_optional_non_negative_decimal

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("name", "name_translations", "size", "selling_price", "production_cost", "min_threshold")


class ProductManager:
    def __init__(self,
                 products_repository: ProductsRepository,
                 production_records_repository: ProductionRecordsRepository,
                 sales_repository: SalesRecordsRepository,
                 inventory_manager: InventoryManager):
        if products_repository is None:
            raise ValueError("products_repository cannot be None")
        if production_records_repository is None:
            raise ValueError("production_records_repository cannot be None")
        if sales_repository is None:
            raise ValueError("sales_repository cannot be None")
        if inventory_manager is None:
            raise ValueError("inventory_manager cannot be None")
        self.products_repository = products_repository
        self.production_records_repo = production_records_repository
        self.sales_repo = sales_repository
        self.inventory_manager = inventory_manager
        self.db_manager = products_repository.db_manager

    def create_product(self, name: str, size: Any,
                       selling_price: Any = None,
                       production_cost: Any = None,
                       current_stock: Any = Decimal("0"),
                       min_threshold: Any = Decimal("0"),
                       name_translations: Optional[Dict[str, str]] = None) -> ProductEntity:
        if not name or not str(name).strip():
            logger.error("Product name cannot be empty.")
            raise ValidationError("Product name cannot be empty.", "validation.name_required")
        size = to_enum(ProductSize, size, "size")
        opening_stock = to_non_negative_decimal(current_stock, "current_stock")

        with self.db_manager.transaction():
            product = self.products_repository.add(ProductEntity(
                name=str(name).strip(),
                size=size,
                selling_price=to_optional_non_negative_decimal(selling_price, "selling_price"),
                production_cost=to_optional_non_negative_decimal(production_cost, "production_cost"),
                min_threshold=to_non_negative_decimal(min_threshold, "min_threshold"),
                name_translations=dict(name_translations or {}),
            ))
            if opening_stock > 0:
                product = self.inventory_manager.adjust_product_stock(
                    product.id, opening_stock,
                    movement_type=StockMovementType.CORRECTION,
                    reference_type=ReferenceType.MANUAL_ADJUSTMENT,
                    notes="Opening stock")

        logger.info(f"Product '{product.name}' {size.value} (ID: {product.id}) created.")
        return product

    def get_product_by_id(self, product_id: str) -> Optional[ProductEntity]:
        product = self.products_repository.get_by_id(product_id)
        if product is None:
            logger.debug(f"Product with ID {product_id} not found.")
        return product

    def get_all_products(self) -> List[ProductEntity]:
        return self.products_repository.get_all(order_by="name, size")

    def search_products(self, name_query: str) -> List[ProductEntity]:
        return self.products_repository.search_by_name(name_query)

    def update_product(self, product_id: str, **changes: Any) -> ProductEntity:
        if "current_stock" in changes:
            raise ValidationError("current_stock cannot be edited directly.", "validation.stock_field_locked")
        unknown = [key for key in changes if key not in UPDATABLE_FIELDS]
        if unknown:
            raise ValueError(f"Unknown product fields: {unknown}")

        patch: Dict[str, Any] = {}
        if "name" in changes:
            if not changes["name"] or not str(changes["name"]).strip():
                raise ValidationError("Product name cannot be empty.", "validation.name_required")
            patch["name"] = str(changes["name"]).strip()
        if "name_translations" in changes:
            patch["name_translations"] = dict(changes["name_translations"] or {})
        if "size" in changes:
            patch["size"] = to_enum(ProductSize, changes["size"], "size")
        for key in ("selling_price", "production_cost"):
            if key in changes:
                patch[key] = to_optional_non_negative_decimal(changes[key], key)
        if "min_threshold" in changes:
            patch["min_threshold"] = to_non_negative_decimal(changes["min_threshold"], "min_threshold")

        updated = self.products_repository.update_fields(product_id, patch)
        if updated is None:
            raise NotFoundError("Product", product_id)
        logger.info(f"Product ID {product_id} updated: {sorted(patch)}")
        return updated

    def delete_product(self, product_id: str) -> bool:
        """Deletes a product and its recipe. Products with production or sales history are kept."""
        with self.db_manager.transaction():
            product = self.products_repository.get_by_id(product_id)
            if product is None:
                raise NotFoundError("Product", product_id)
            if self.production_records_repo.get_by_product_id(product_id) or \
                    self.sales_repo.get_by_product_id(product_id):
                raise ValidationError(f"Product '{product.name}' has history.",
                                      "validation.product_has_history", product=product.name)
            self.products_repository.delete(product_id)
        logger.info(f"Product '{product.name}' (ID: {product_id}) deleted.")
        return True

    def set_stock(self, product_id: str, new_stock: Any, notes: Optional[str] = None) -> ProductEntity:
        return self.inventory_manager.set_product_stock(product_id, new_stock, notes)
