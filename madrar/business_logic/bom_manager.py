# madrar/business_logic/bom_manager.py

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Optional
import logging

from madrar.business_logic.entities.bom_entry_entity import BomEntryEntity
from madrar.data_access.bom_repository import BomRepository
from madrar.data_access.products_repository import ProductsRepository
from madrar.data_access.raw_materials_repository import RawMaterialsRepository
from madrar.errors import NotFoundError, ValidationError
from madrar.utils.number_utils import to_non_negative_decimal, to_positive_decimal

logger = logging.getLogger(__name__)


@dataclass
class MaterialRequirement:
    material_id: str
    material_name: str
    unit: str
    quantity_per_unit: Decimal
    quantity_required: Decimal
    available: Decimal
    cost_per_unit: Optional[Decimal] = None

    @property
    def sufficient(self) -> bool:
        return self.available >= self.quantity_required

    @property
    def shortfall(self) -> Decimal:
        return max(self.quantity_required - self.available, Decimal("0"))


@dataclass
class BomResolution:
    product_id: str
    production_quantity: Decimal
    requirements: List[MaterialRequirement] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.requirements

    @property
    def all_sufficient(self) -> bool:
        # An empty recipe is never sufficient
        return bool(self.requirements) and all(req.sufficient for req in self.requirements)

    @property
    def shortages(self) -> List[MaterialRequirement]:
        return [req for req in self.requirements if not req.sufficient]


class BomManager:
    def __init__(self,
                 bom_repository: BomRepository,
                 raw_materials_repository: RawMaterialsRepository,
                 products_repository: ProductsRepository):
        if bom_repository is None: raise ValueError("bom_repository cannot be None")
        if raw_materials_repository is None: raise ValueError("raw_materials_repository cannot be None")
        if products_repository is None: raise ValueError("products_repository cannot be None")

        self.bom_repo = bom_repository
        self.raw_materials_repo = raw_materials_repository
        self.products_repo = products_repository

    def _validate_entries(self, entries: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        validated = []
        material_ids = set()
        for entry in entries:
            material_id = entry.get("material_id")
            material = self.raw_materials_repo.get_by_id(material_id) if material_id else None
            if material is None:
                raise NotFoundError("RawMaterial", material_id)
            quantity = to_non_negative_decimal(entry.get("quantity_per_unit"), "quantity_per_unit")
            if material_id in material_ids:
                raise ValidationError(f"Material '{material.name}' appears more than once in the recipe.",
                                      "validation.duplicate_material", material=material.name)
            material_ids.add(material_id)
            validated.append({"material_id": material_id, "quantity_per_unit": quantity})
        return validated

    def set_bom(self, product_id: str, entries: List[Dict[str, Any]]) -> List[BomEntryEntity]:
        """Replaces the product's whole recipe with the given {material_id, quantity_per_unit} entries."""
        logger.info(f"Setting BOM for product ID {product_id} with {len(entries)} entries.")
        with self.products_repo.db_manager.transaction():
            if self.products_repo.get_by_id(product_id) is None:
                raise NotFoundError("Product", product_id)
            validated = self._validate_entries(entries)

            self.bom_repo.delete_by_product_id(product_id)
            for entry in validated:
                self.bom_repo.add(BomEntryEntity(product_id=product_id, **entry))
        return self.get_bom(product_id)

    def get_bom(self, product_id: str) -> List[BomEntryEntity]:
        entries = self.bom_repo.get_by_product_id(product_id)
        for entry in entries:
            material = self.raw_materials_repo.get_by_id(entry.material_id)
            if material:
                entry.material_name = material.name
                entry.material_unit = material.unit.value
        return entries

    def clear_bom(self, product_id: str) -> int:
        deleted = self.bom_repo.delete_by_product_id(product_id)
        logger.info(f"Cleared {deleted} BOM entries for product ID {product_id}.")
        return deleted

    def resolve_requirements(self, product_id: str, production_quantity: Any) -> BomResolution:
        """
        Multiplies the per-unit recipe by the production quantity and compares
        each line with the material's current stock. Reads only.
        """
        quantity = to_positive_decimal(production_quantity, "quantity")
        resolution = BomResolution(product_id=product_id, production_quantity=quantity)

        for entry in self.bom_repo.get_by_product_id(product_id):
            material = self.raw_materials_repo.get_by_id(entry.material_id)
            if material is None:
                raise NotFoundError("RawMaterial", entry.material_id)
            resolution.requirements.append(MaterialRequirement(
                material_id=material.id,
                material_name=material.name,
                unit=material.unit.value,
                quantity_per_unit=entry.quantity_per_unit,
                quantity_required=entry.quantity_per_unit * quantity,
                available=material.current_stock,
                cost_per_unit=material.cost_per_unit,
            ))

        logger.debug(f"Resolved {len(resolution.requirements)} requirements for product {product_id} x {quantity}; "
                     f"all sufficient: {resolution.all_sufficient}")
        return resolution
