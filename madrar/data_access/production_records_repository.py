# madrar/data_access/production_records_repository.py
from typing import List
import logging

from madrar.data_access.base_repository import BaseRepository
from madrar.business_logic.entities.production_record_entity import ProductionRecordEntity
from madrar.data_access.database_manager import DatabaseManager

logger = logging.getLogger(__name__)


class ProductionRecordsRepository(BaseRepository[ProductionRecordEntity]):
    def __init__(self, db_manager: DatabaseManager):
        super().__init__(db_manager, ProductionRecordEntity, "production_records")

    def get_all_recent(self) -> List[ProductionRecordEntity]:
        return self.get_all(order_by="production_date DESC, created_at DESC, rowid DESC")

    def get_by_product_id(self, product_id: str) -> List[ProductionRecordEntity]:
        return self.find_by_criteria({"product_id": product_id}, order_by="production_date DESC")
