# madrar/business_logic/entities/__init__.py
from .base_entity import BaseEntity, LocalizedNameMixin
from .raw_material_entity import RawMaterialEntity
from .product_entity import ProductEntity
from .bom_entry_entity import BomEntryEntity
from .production_record_entity import ProductionRecordEntity
from .production_material_entity import ProductionMaterialEntity
from .sale_record_entity import SaleRecordEntity
from .person_entity import PersonEntity
from .customer_transaction_entity import CustomerTransactionEntity
from .supplier_transaction_entity import SupplierTransactionEntity
from .stock_movement_entity import StockMovementEntity

__all__ = [
    "BaseEntity", "LocalizedNameMixin", "RawMaterialEntity", "ProductEntity",
    "BomEntryEntity", "ProductionRecordEntity", "ProductionMaterialEntity",
    "SaleRecordEntity", "PersonEntity", "CustomerTransactionEntity",
    "SupplierTransactionEntity", "StockMovementEntity",
]
