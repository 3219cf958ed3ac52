# madrar/business_logic/entities/raw_material_entity.py
from dataclasses import dataclass, field
from typing import Optional, Dict
from datetime import datetime
from decimal import Decimal
from .base_entity import BaseEntity, LocalizedNameMixin
from madrar.constants import MaterialUnit


@dataclass
class RawMaterialEntity(LocalizedNameMixin, BaseEntity):
    name: str
    unit: MaterialUnit

    current_stock: Decimal = field(default_factory=lambda: Decimal("0"))
    min_threshold: Decimal = field(default_factory=lambda: Decimal("0"))
    cost_per_unit: Optional[Decimal] = field(default=None)
    supplier_id: Optional[str] = field(default=None)  # persons.id of a supplier
    last_received: Optional[datetime] = field(default=None)
    name_translations: Dict[str, str] = field(default_factory=dict)
    created_at: Optional[datetime] = field(default=None)
    updated_at: Optional[datetime] = field(default=None)

    # Display only, filled by the manager
    supplier_name: Optional[str] = field(default=None, compare=False, repr=False, init=False)

    @property
    def is_low_stock(self) -> bool:
        return self.current_stock <= self.min_threshold
