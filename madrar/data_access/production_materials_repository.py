# madrar/data_access/production_materials_repository.py
from typing import List
import logging

from madrar.data_access.base_repository import BaseRepository
from madrar.business_logic.entities.production_material_entity import ProductionMaterialEntity
from madrar.data_access.database_manager import DatabaseManager

logger = logging.getLogger(__name__)


class ProductionMaterialsRepository(BaseRepository[ProductionMaterialEntity]):
    def __init__(self, db_manager: DatabaseManager):
        super().__init__(db_manager, ProductionMaterialEntity, "production_materials")

    def get_by_production_record_id(self, production_record_id: str) -> List[ProductionMaterialEntity]:
        logger.debug(f"Fetching consumed materials for production record ID: {production_record_id}")
        return self.find_by_criteria({"production_record_id": production_record_id})
