# madrar/business_logic/entities/stock_movement_entity.py
from dataclasses import dataclass, field
from typing import Optional
from datetime import datetime
from decimal import Decimal
from .base_entity import BaseEntity
from madrar.constants import StockMovementType, ReferenceType


@dataclass
class StockMovementEntity(BaseEntity):
    movement_type: StockMovementType
    quantity: Decimal  # signed change
    # Exactly one of these is set
    material_id: Optional[str] = field(default=None)
    product_id: Optional[str] = field(default=None)

    reference_type: Optional[ReferenceType] = field(default=None)
    reference_id: Optional[str] = field(default=None)
    notes: Optional[str] = field(default=None)
    created_at: Optional[datetime] = field(default=None)
