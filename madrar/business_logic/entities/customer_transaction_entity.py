# madrar/business_logic/entities/customer_transaction_entity.py
from dataclasses import dataclass, field
from typing import Optional
from datetime import datetime
from decimal import Decimal
from .base_entity import BaseEntity
from madrar.constants import CustomerTransactionType


@dataclass
class CustomerTransactionEntity(BaseEntity):
    customer_id: str
    transaction_type: CustomerTransactionType
    amount: Decimal = Decimal("0")
    description: Optional[str] = field(default=None)
    reference_id: Optional[str] = field(default=None)  # sales_records.id for unpaid sale balances
    created_at: Optional[datetime] = field(default=None)
