# madrar/data_access/supplier_transactions_repository.py
from typing import List
import logging

from madrar.data_access.base_repository import BaseRepository
from madrar.data_access.database_manager import DatabaseManager
from madrar.business_logic.entities.supplier_transaction_entity import SupplierTransactionEntity

logger = logging.getLogger(__name__)


class SupplierTransactionsRepository(BaseRepository[SupplierTransactionEntity]):
    def __init__(self, db_manager: DatabaseManager):
        super().__init__(db_manager, SupplierTransactionEntity, "supplier_transactions")

    def get_by_supplier_id(self, supplier_id: str) -> List[SupplierTransactionEntity]:
        return self.find_by_criteria({"supplier_id": supplier_id}, order_by="created_at, rowid")
