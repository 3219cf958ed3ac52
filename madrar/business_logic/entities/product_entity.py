# madrar/business_logic/entities/product_entity.py
from dataclasses import dataclass, field
from typing import Optional, Dict
from datetime import datetime
from decimal import Decimal
from .base_entity import BaseEntity, LocalizedNameMixin
from madrar.constants import ProductSize


@dataclass
class ProductEntity(LocalizedNameMixin, BaseEntity):
    name: str
    size: ProductSize

    selling_price: Optional[Decimal] = field(default=None)
    production_cost: Optional[Decimal] = field(default=None)
    current_stock: Decimal = field(default_factory=lambda: Decimal("0"))
    min_threshold: Decimal = field(default_factory=lambda: Decimal("0"))
    name_translations: Dict[str, str] = field(default_factory=dict)
    created_at: Optional[datetime] = field(default=None)
    updated_at: Optional[datetime] = field(default=None)

    @property
    def is_low_stock(self) -> bool:
        return self.current_stock <= self.min_threshold
