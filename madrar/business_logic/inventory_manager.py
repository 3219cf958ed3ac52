# madrar/business_logic/inventory_manager.py
from decimal import Decimal
from typing import Any, Dict, List, Optional, Union
import logging

from madrar.business_logic.entities.product_entity import ProductEntity
from madrar.business_logic.entities.raw_material_entity import RawMaterialEntity
from madrar.business_logic.entities.stock_movement_entity import StockMovementEntity
from madrar.constants import StockMovementType, ReferenceType
from madrar.data_access.base_repository import BaseRepository
from madrar.data_access.products_repository import ProductsRepository
from madrar.data_access.raw_materials_repository import RawMaterialsRepository
from madrar.data_access.stock_movements_repository import StockMovementsRepository
from madrar.errors import InsufficientStockError, NotFoundError
from madrar.utils.number_utils import to_decimal, to_non_negative_decimal

logger = logging.getLogger(__name__)

StockedEntity = Union[RawMaterialEntity, ProductEntity]


class InventoryManager:
    """
    The only place current_stock is written. Every change appends a stock
    movement in the same transaction as the stock update.
    """

    def __init__(self,
                 raw_materials_repository: RawMaterialsRepository,
                 products_repository: ProductsRepository,
                 stock_movements_repository: StockMovementsRepository):
        if raw_materials_repository is None:
            raise ValueError("raw_materials_repository cannot be None.")
        if products_repository is None:
            raise ValueError("products_repository cannot be None.")
        if stock_movements_repository is None:
            raise ValueError("stock_movements_repository cannot be None.")

        self.raw_materials_repo = raw_materials_repository
        self.products_repo = products_repository
        self.stock_movements_repo = stock_movements_repository
        self.db_manager = raw_materials_repository.db_manager

    def adjust_material_stock(self, material_id: str, delta: Any,
                              movement_type: StockMovementType = StockMovementType.CORRECTION,
                              reference_type: Optional[ReferenceType] = None,
                              reference_id: Optional[str] = None,
                              notes: Optional[str] = None,
                              require_available: bool = False,
                              extra_fields: Optional[Dict[str, Any]] = None) -> RawMaterialEntity:
        return self._adjust(self.raw_materials_repo, "RawMaterial", "material_id", material_id, delta,
                            movement_type, reference_type, reference_id, notes, require_available, extra_fields)

    def adjust_product_stock(self, product_id: str, delta: Any,
                             movement_type: StockMovementType = StockMovementType.CORRECTION,
                             reference_type: Optional[ReferenceType] = None,
                             reference_id: Optional[str] = None,
                             notes: Optional[str] = None,
                             require_available: bool = False,
                             extra_fields: Optional[Dict[str, Any]] = None) -> ProductEntity:
        return self._adjust(self.products_repo, "Product", "product_id", product_id, delta,
                            movement_type, reference_type, reference_id, notes, require_available, extra_fields)

    def set_material_stock(self, material_id: str, new_stock: Any, notes: Optional[str] = None) -> RawMaterialEntity:
        """Corrective update to an absolute value, recorded as a correction movement of the difference."""
        return self._set(self.raw_materials_repo, "RawMaterial", "material_id", material_id, new_stock, notes)

    def set_product_stock(self, product_id: str, new_stock: Any, notes: Optional[str] = None) -> ProductEntity:
        return self._set(self.products_repo, "Product", "product_id", product_id, new_stock, notes)

    def get_material_movements(self, material_id: str) -> List[StockMovementEntity]:
        return self.stock_movements_repo.get_by_material_id(material_id)

    def get_product_movements(self, product_id: str) -> List[StockMovementEntity]:
        return self.stock_movements_repo.get_by_product_id(product_id)

    def _adjust(self, repository: BaseRepository, entity_name: str, movement_key: str, item_id: str,
                delta: Any, movement_type: StockMovementType, reference_type: Optional[ReferenceType],
                reference_id: Optional[str], notes: Optional[str], require_available: bool,
                extra_fields: Optional[Dict[str, Any]]) -> StockedEntity:
        delta = to_decimal(delta, "quantity")

        with self.db_manager.transaction():
            item = repository.get_by_id(item_id)
            if item is None:
                raise NotFoundError(entity_name, item_id)

            new_stock = item.current_stock + delta
            if require_available and new_stock < 0:
                logger.warning(f"Stock adjustment rejected for {entity_name} '{item.name}': "
                               f"{item.current_stock} available, {-delta} requested.")
                raise InsufficientStockError(item.name, item.current_stock, -delta)

            patch = {"current_stock": new_stock}
            patch.update(extra_fields or {})
            updated = repository.update_fields(item_id, patch)

            self.stock_movements_repo.add(StockMovementEntity(
                movement_type=movement_type,
                quantity=delta,
                reference_type=reference_type,
                reference_id=reference_id,
                notes=notes,
                **{movement_key: item_id}
            ))

        logger.info(f"{entity_name} '{item.name}' stock changed by {delta}: {item.current_stock} -> {new_stock} "
                    f"({movement_type.value}).")
        return updated

    def _set(self, repository: BaseRepository, entity_name: str, movement_key: str, item_id: str,
             new_stock: Any, notes: Optional[str]) -> StockedEntity:
        new_stock = to_non_negative_decimal(new_stock, "current_stock")

        with self.db_manager.transaction():
            item = repository.get_by_id(item_id)
            if item is None:
                raise NotFoundError(entity_name, item_id)
            delta = new_stock - item.current_stock
            if delta == Decimal("0"):
                return item
            return self._adjust(repository, entity_name, movement_key, item_id, delta,
                                StockMovementType.CORRECTION, ReferenceType.MANUAL_ADJUSTMENT, None,
                                notes, False, None)
