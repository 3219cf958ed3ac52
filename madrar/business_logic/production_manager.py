# madrar/business_logic/production_manager.py
from datetime import datetime
from decimal import Decimal
from typing import Any, List, Optional
import logging

from madrar.business_logic.entities.production_record_entity import ProductionRecordEntity
from madrar.business_logic.entities.production_material_entity import ProductionMaterialEntity
from madrar.business_logic.bom_manager import BomManager
from madrar.business_logic.inventory_manager import InventoryManager
from madrar.data_access.production_records_repository import ProductionRecordsRepository
from madrar.data_access.production_materials_repository import ProductionMaterialsRepository
from madrar.data_access.products_repository import ProductsRepository
from madrar.data_access.raw_materials_repository import RawMaterialsRepository
from madrar.constants import ProductionStage, StockMovementType, ReferenceType
from madrar.errors import MadrarError, NotFoundError, NoRecipeError, InsufficientStockError
from madrar.utils.date_converter import now, parse_datetime
from madrar.utils.number_utils import to_whole_units

logger = logging.getLogger(__name__)


class ProductionManager:
    def __init__(self,
                 production_records_repository: ProductionRecordsRepository,
                 production_materials_repository: ProductionMaterialsRepository,
                 products_repository: ProductsRepository,
                 raw_materials_repository: RawMaterialsRepository,
                 bom_manager: BomManager,
                 inventory_manager: InventoryManager):
        if production_records_repository is None: raise ValueError("production_records_repository cannot be None")
        if production_materials_repository is None: raise ValueError("production_materials_repository cannot be None")
        if products_repository is None: raise ValueError("products_repository cannot be None")
        if raw_materials_repository is None: raise ValueError("raw_materials_repository cannot be None")
        if bom_manager is None: raise ValueError("bom_manager cannot be None")
        if inventory_manager is None: raise ValueError("inventory_manager cannot be None")

        self.production_records_repo = production_records_repository
        self.production_materials_repo = production_materials_repository
        self.products_repo = products_repository
        self.raw_materials_repo = raw_materials_repository
        self.bom_manager = bom_manager
        self.inventory_manager = inventory_manager
        self.db_manager = production_records_repository.db_manager
        self.last_stage: Optional[ProductionStage] = None

    def record_production(self,
                          product_id: str,
                          quantity: Any,
                          production_date: Optional[datetime] = None,
                          notes: Optional[str] = None) -> ProductionRecordEntity:
        """
        Produces ``quantity`` units of the product from its recipe.

        Validation, the production record with its consumed materials, every
        material decrement and the product increment are one store
        transaction: either all of them are written or none. On failure the
        raised error's ``stage`` names the step that failed.
        """
        logger.info(f"Attempting to record production for product ID {product_id}, quantity: {quantity}")
        stage = ProductionStage.VALIDATING
        self.last_stage = stage
        try:
            quantity = to_whole_units(quantity, "quantity")
            production_date = parse_datetime(production_date, "production_date") or now()

            with self.db_manager.transaction():
                product = self.products_repo.get_by_id(product_id)
                if product is None:
                    raise NotFoundError("Product", product_id)

                resolution = self.bom_manager.resolve_requirements(product_id, quantity)
                if resolution.is_empty:
                    raise NoRecipeError(product.id, product.name)
                if not resolution.all_sufficient:
                    first = resolution.shortages[0]
                    shortages = [{"material_id": req.material_id, "material": req.material_name,
                                  "available": req.available, "required": req.quantity_required}
                                 for req in resolution.shortages]
                    raise InsufficientStockError(first.material_name, first.available, first.quantity_required,
                                                 shortages=shortages)

                stage = ProductionStage.RECORDING
                consumed = [ProductionMaterialEntity(
                                production_record_id="",
                                material_id=req.material_id,
                                quantity_used=req.quantity_required,
                                cost_at_time=req.cost_per_unit or Decimal("0"))
                            for req in resolution.requirements]
                record = self.production_records_repo.add(ProductionRecordEntity(
                    product_id=product_id,
                    quantity=quantity,
                    production_date=production_date,
                    total_cost=sum((item.line_cost for item in consumed), Decimal("0")),
                    notes=notes,
                ))
                for item, req in zip(consumed, resolution.requirements):
                    item.production_record_id = record.id
                    self.production_materials_repo.add(item)
                    item.material_name = req.material_name

                stage = ProductionStage.CONSUMING
                for req in resolution.requirements:
                    self.inventory_manager.adjust_material_stock(
                        req.material_id, -req.quantity_required,
                        movement_type=StockMovementType.PRODUCTION_CONSUMPTION,
                        reference_type=ReferenceType.PRODUCTION_RECORD,
                        reference_id=record.id,
                        require_available=True)

                stage = ProductionStage.PRODUCING
                self.inventory_manager.adjust_product_stock(
                    product_id, quantity,
                    movement_type=StockMovementType.PRODUCTION_OUTPUT,
                    reference_type=ReferenceType.PRODUCTION_RECORD,
                    reference_id=record.id)
        except MadrarError as e:
            e.stage = stage
            self.last_stage = ProductionStage.FAILED
            logger.warning(f"Production of product ID {product_id} failed during {stage.value}: {e}")
            raise
        except Exception:
            self.last_stage = ProductionStage.FAILED
            logger.error(f"Unexpected error during production of product ID {product_id} at {stage.value}.",
                         exc_info=True)
            raise

        self.last_stage = ProductionStage.COMPLETE
        record.materials = consumed
        record.product_name = product.name
        logger.info(f"Production record {record.id} created: {quantity} x '{product.name}', "
                    f"total cost {record.total_cost}.")
        return record

    def get_production_records(self) -> List[ProductionRecordEntity]:
        records = self.production_records_repo.get_all_recent()
        names = {}
        for record in records:
            if record.product_id not in names:
                product = self.products_repo.get_by_id(record.product_id)
                names[record.product_id] = product.name if product else None
            record.product_name = names[record.product_id]
        return records

    def get_production_with_details(self, production_record_id: str) -> Optional[ProductionRecordEntity]:
        record = self.production_records_repo.get_by_id(production_record_id)
        if record is None:
            return None
        product = self.products_repo.get_by_id(record.product_id)
        record.product_name = product.name if product else None
        record.materials = self.production_materials_repo.get_by_production_record_id(record.id)
        for item in record.materials:
            material = self.raw_materials_repo.get_by_id(item.material_id)
            item.material_name = material.name if material else None
        return record
