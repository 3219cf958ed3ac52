# madrar/business_logic/entities/person_entity.py
from dataclasses import dataclass, field
from typing import Optional
from datetime import datetime
from .base_entity import BaseEntity
from madrar.constants import PersonType


@dataclass
class PersonEntity(BaseEntity):
    name: str
    person_type: PersonType  # Enum: Customer, Supplier
    phone: Optional[str] = field(default=None)
    notes: Optional[str] = field(default=None)
    created_at: Optional[datetime] = field(default=None)
