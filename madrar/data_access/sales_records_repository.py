# madrar/data_access/sales_records_repository.py
from datetime import datetime
from typing import List
import logging

from madrar.data_access.base_repository import BaseRepository
from madrar.business_logic.entities.sale_record_entity import SaleRecordEntity
from madrar.data_access.database_manager import DatabaseManager

logger = logging.getLogger(__name__)


class SalesRecordsRepository(BaseRepository[SaleRecordEntity]):
    def __init__(self, db_manager: DatabaseManager):
        super().__init__(db_manager, SaleRecordEntity, "sales_records")

    def get_all_recent(self) -> List[SaleRecordEntity]:
        return self.get_all(order_by="sale_date DESC, created_at DESC, rowid DESC")

    def get_by_date_range(self, start: datetime, end: datetime) -> List[SaleRecordEntity]:
        """Sales with start <= sale_date < end."""
        query = f"SELECT * FROM {self._table_name} WHERE sale_date >= ? AND sale_date < ? ORDER BY sale_date"
        rows = self.db_manager.fetch_all(query, (start.isoformat(), end.isoformat()))
        return [self._entity_from_row(dict(row)) for row in rows]

    def get_by_customer_id(self, customer_id: str) -> List[SaleRecordEntity]:
        return self.find_by_criteria({"customer_id": customer_id}, order_by="sale_date")

    def get_by_product_id(self, product_id: str) -> List[SaleRecordEntity]:
        return self.find_by_criteria({"product_id": product_id}, order_by="sale_date")
