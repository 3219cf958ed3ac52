# madrar/business_logic/entities/sale_record_entity.py
from dataclasses import dataclass, field
from typing import Optional
from datetime import datetime
from decimal import Decimal
from .base_entity import BaseEntity
from madrar.constants import PaymentMethod, PaymentStatus
from madrar.errors import LedgerPostingFailed


@dataclass
class SaleRecordEntity(BaseEntity):
    product_id: str
    quantity: Decimal
    customer_name: str
    sale_price: Decimal    # per unit
    total_amount: Decimal  # quantity x sale_price
    amount_paid: Decimal
    payment_status: PaymentStatus
    payment_method: PaymentMethod = field(default=PaymentMethod.CASH)
    sale_date: Optional[datetime] = field(default=None)
    customer_id: Optional[str] = field(default=None)
    notes: Optional[str] = field(default=None)
    created_at: Optional[datetime] = field(default=None)

    # Set when the customer ledger entry could not be posted after the sale committed
    ledger_warning: Optional[LedgerPostingFailed] = field(default=None, compare=False, repr=False, init=False)
    product_name: Optional[str] = field(default=None, compare=False, repr=False, init=False)

    @property
    def remaining_amount(self) -> Decimal:
        return max(self.total_amount - self.amount_paid, Decimal("0"))
