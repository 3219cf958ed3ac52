# madrar/business_logic/entities/production_material_entity.py
from dataclasses import dataclass, field
from typing import Optional
from decimal import Decimal
from .base_entity import BaseEntity


@dataclass
class ProductionMaterialEntity(BaseEntity):
    production_record_id: str
    material_id: str
    quantity_used: Decimal
    cost_at_time: Decimal = field(default_factory=lambda: Decimal("0"))  # cost_per_unit snapshot

    material_name: Optional[str] = field(default=None, compare=False, repr=False, init=False)

    @property
    def line_cost(self) -> Decimal:
        return self.quantity_used * self.cost_at_time
