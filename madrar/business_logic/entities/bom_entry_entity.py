# madrar/business_logic/entities/bom_entry_entity.py
from dataclasses import dataclass, field
from typing import Optional
from datetime import datetime
from decimal import Decimal
from .base_entity import BaseEntity


@dataclass
class BomEntryEntity(BaseEntity):
    product_id: str
    material_id: str
    quantity_per_unit: Decimal  # material consumed per one unit of product, fractions allowed
    created_at: Optional[datetime] = field(default=None)

    # Display fields, not stored
    material_name: Optional[str] = field(default=None, compare=False, repr=False, init=False)
    material_unit: Optional[str] = field(default=None, compare=False, repr=False, init=False)
