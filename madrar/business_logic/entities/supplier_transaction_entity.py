# madrar/business_logic/entities/supplier_transaction_entity.py
from dataclasses import dataclass, field
from typing import Optional
from datetime import datetime
from decimal import Decimal
from .base_entity import BaseEntity
from madrar.constants import SupplierTransactionType


@dataclass
class SupplierTransactionEntity(BaseEntity):
    supplier_id: str
    transaction_type: SupplierTransactionType
    amount: Decimal = Decimal("0")
    description: Optional[str] = field(default=None)
    reference_id: Optional[str] = field(default=None)  # raw_materials.id for purchases
    created_at: Optional[datetime] = field(default=None)
