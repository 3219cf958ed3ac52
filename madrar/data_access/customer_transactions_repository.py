# madrar/data_access/customer_transactions_repository.py
from typing import List
import logging

from madrar.data_access.base_repository import BaseRepository
from madrar.data_access.database_manager import DatabaseManager
from madrar.business_logic.entities.customer_transaction_entity import CustomerTransactionEntity

logger = logging.getLogger(__name__)


class CustomerTransactionsRepository(BaseRepository[CustomerTransactionEntity]):
    def __init__(self, db_manager: DatabaseManager):
        super().__init__(db_manager, CustomerTransactionEntity, "customer_transactions")

    def get_by_customer_id(self, customer_id: str) -> List[CustomerTransactionEntity]:
        return self.find_by_criteria({"customer_id": customer_id}, order_by="created_at, rowid")
