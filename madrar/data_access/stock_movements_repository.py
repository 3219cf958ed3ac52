# madrar/data_access/stock_movements_repository.py
from typing import List
import logging

from madrar.data_access.base_repository import BaseRepository
from madrar.data_access.database_manager import DatabaseManager
from madrar.business_logic.entities.stock_movement_entity import StockMovementEntity

logger = logging.getLogger(__name__)


class StockMovementsRepository(BaseRepository[StockMovementEntity]):
    def __init__(self, db_manager: DatabaseManager):
        super().__init__(db_manager, StockMovementEntity, "stock_movements")

    def get_by_material_id(self, material_id: str) -> List[StockMovementEntity]:
        return self.find_by_criteria({"material_id": material_id}, order_by="created_at, rowid")

    def get_by_product_id(self, product_id: str) -> List[StockMovementEntity]:
        return self.find_by_criteria({"product_id": product_id}, order_by="created_at, rowid")
