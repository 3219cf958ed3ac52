# madrar/data_access/bom_repository.py
from typing import List
import logging

from madrar.data_access.base_repository import BaseRepository
from madrar.business_logic.entities.bom_entry_entity import BomEntryEntity
from madrar.data_access.database_manager import DatabaseManager

logger = logging.getLogger(__name__)


class BomRepository(BaseRepository[BomEntryEntity]):
    def __init__(self, db_manager: DatabaseManager):
        super().__init__(db_manager, BomEntryEntity, "product_bom")

    def get_by_product_id(self, product_id: str) -> List[BomEntryEntity]:
        logger.debug(f"Fetching BOM entries for product ID: {product_id}")
        return self.find_by_criteria({"product_id": product_id}, order_by="created_at, rowid")

    def get_by_material_id(self, material_id: str) -> List[BomEntryEntity]:
        return self.find_by_criteria({"material_id": material_id})

    def delete_by_product_id(self, product_id: str) -> int:
        deleted = self.delete_by_criteria({"product_id": product_id})
        logger.debug(f"Deleted {deleted} BOM entries for product ID: {product_id}")
        return deleted
