# madrar/business_logic/entities/production_record_entity.py
from dataclasses import dataclass, field
from typing import Optional, List
from datetime import datetime
from decimal import Decimal
from .base_entity import BaseEntity
from .production_material_entity import ProductionMaterialEntity


@dataclass
class ProductionRecordEntity(BaseEntity):
    product_id: str
    quantity: Decimal
    production_date: datetime
    total_cost: Optional[Decimal] = field(default=None)
    notes: Optional[str] = field(default=None)
    created_at: Optional[datetime] = field(default=None)

    # Stored in production_materials, attached by ProductionManager
    materials: List[ProductionMaterialEntity] = field(default_factory=list, compare=False, repr=False, init=False)
    product_name: Optional[str] = field(default=None, compare=False, repr=False, init=False)
