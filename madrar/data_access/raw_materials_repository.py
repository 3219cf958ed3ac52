# madrar/data_access/raw_materials_repository.py

from typing import List
import logging

from madrar.data_access.base_repository import BaseRepository
from madrar.data_access.database_manager import DatabaseManager
from madrar.business_logic.entities.raw_material_entity import RawMaterialEntity

logger = logging.getLogger(__name__)


class RawMaterialsRepository(BaseRepository[RawMaterialEntity]):
    def __init__(self, db_manager: DatabaseManager):
        super().__init__(db_manager=db_manager,
                         model_type=RawMaterialEntity,
                         table_name="raw_materials")

    def search_by_name(self, name_query: str) -> List[RawMaterialEntity]:
        query = f"SELECT * FROM {self._table_name} WHERE name LIKE ? OR name_translations LIKE ? ORDER BY name"
        rows = self.db_manager.fetch_all(query, (f"%{name_query}%", f"%{name_query}%"))
        return [self._entity_from_row(dict(row)) for row in rows if row]
