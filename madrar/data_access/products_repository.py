# madrar/data_access/products_repository.py

from typing import List
import logging

from madrar.data_access.base_repository import BaseRepository
from madrar.data_access.database_manager import DatabaseManager
from madrar.business_logic.entities.product_entity import ProductEntity

logger = logging.getLogger(__name__)


class ProductsRepository(BaseRepository[ProductEntity]):
    def __init__(self, db_manager: DatabaseManager):
        super().__init__(db_manager=db_manager,
                         model_type=ProductEntity,
                         table_name="products")

    def search_by_name(self, name_query: str) -> List[ProductEntity]:
        query = f"SELECT * FROM {self._table_name} WHERE name LIKE ? OR name_translations LIKE ? ORDER BY name"
        rows = self.db_manager.fetch_all(query, (f"%{name_query}%", f"%{name_query}%"))
        return [self._entity_from_row(dict(row)) for row in rows if row]
