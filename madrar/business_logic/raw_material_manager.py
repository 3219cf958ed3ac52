# madrar/business_logic/raw_material_manager.py

from decimal import Decimal
from typing import Any, Dict, List, Optional
import logging

from madrar.business_logic.entities.raw_material_entity import RawMaterialEntity
from madrar.business_logic.inventory_manager import InventoryManager
from madrar.business_logic.person_manager import PersonManager
from madrar.data_access.bom_repository import BomRepository
from madrar.data_access.raw_materials_repository import RawMaterialsRepository
from madrar.constants import MaterialUnit, PersonType, StockMovementType, ReferenceType
from madrar.errors import NotFoundError, ValidationError
from madrar.utils.date_converter import now
from madrar.utils.number_utils import (
    to_enum, to_non_negative_decimal, to_optional_non_negative_decimal, to_positive_decimal
)

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("name", "name_translations", "unit", "min_threshold", "cost_per_unit", "supplier_id")


class RawMaterialManager:
    def __init__(self,
                 raw_materials_repository: RawMaterialsRepository,
                 bom_repository: BomRepository,
                 inventory_manager: InventoryManager,
                 person_manager: PersonManager):
        if raw_materials_repository is None: raise ValueError("raw_materials_repository cannot be None")
        if bom_repository is None: raise ValueError("bom_repository cannot be None")
        if inventory_manager is None: raise ValueError("inventory_manager cannot be None")
        if person_manager is None: raise ValueError("person_manager cannot be None")

        self.raw_materials_repo = raw_materials_repository
        self.bom_repo = bom_repository
        self.inventory_manager = inventory_manager
        self.person_manager = person_manager
        self.db_manager = raw_materials_repository.db_manager

    def _validate_supplier(self, supplier_id: Optional[str]) -> Optional[str]:
        if not supplier_id:
            return None
        return self.person_manager.require_person(supplier_id, PersonType.SUPPLIER).id

    def create_material(self, name: str, unit: Any,
                        current_stock: Any = Decimal("0"),
                        min_threshold: Any = Decimal("0"),
                        cost_per_unit: Any = None,
                        supplier_id: Optional[str] = None,
                        name_translations: Optional[Dict[str, str]] = None) -> RawMaterialEntity:
        logger.info(f"Attempting to create raw material '{name}'.")
        if not name or not str(name).strip():
            raise ValidationError("Material name cannot be empty.", "validation.name_required")
        unit = to_enum(MaterialUnit, unit, "unit")
        opening_stock = to_non_negative_decimal(current_stock, "current_stock")
        min_threshold = to_non_negative_decimal(min_threshold, "min_threshold")
        cost_per_unit = to_optional_non_negative_decimal(cost_per_unit, "cost_per_unit")

        with self.db_manager.transaction():
            supplier_id = self._validate_supplier(supplier_id)
            material = self.raw_materials_repo.add(RawMaterialEntity(
                name=str(name).strip(),
                unit=unit,
                min_threshold=min_threshold,
                cost_per_unit=cost_per_unit,
                supplier_id=supplier_id,
                name_translations=dict(name_translations or {}),
            ))
            if opening_stock > 0:
                material = self.inventory_manager.adjust_material_stock(
                    material.id, opening_stock,
                    movement_type=StockMovementType.CORRECTION,
                    reference_type=ReferenceType.MANUAL_ADJUSTMENT,
                    notes="Opening stock")

        logger.info(f"Raw material '{material.name}' (ID: {material.id}) created with stock {material.current_stock} "
                    f"{unit.value}.")
        return material

    def get_material_by_id(self, material_id: str) -> Optional[RawMaterialEntity]:
        material = self.raw_materials_repo.get_by_id(material_id)
        if material and material.supplier_id:
            supplier = self.person_manager.get_person_by_id(material.supplier_id)
            material.supplier_name = supplier.name if supplier else None
        return material

    def get_all_materials(self) -> List[RawMaterialEntity]:
        materials = self.raw_materials_repo.get_all(order_by="name")
        suppliers = {person.id: person.name for person in self.person_manager.get_suppliers()}
        for material in materials:
            material.supplier_name = suppliers.get(material.supplier_id)
        return materials

    def search_materials(self, name_query: str) -> List[RawMaterialEntity]:
        return self.raw_materials_repo.search_by_name(name_query)

    def update_material(self, material_id: str, **changes: Any) -> RawMaterialEntity:
        """Updates descriptive fields; stock only changes through receipts, production or set_stock."""
        if "current_stock" in changes:
            raise ValidationError("current_stock cannot be edited directly.", "validation.stock_field_locked")
        unknown = [key for key in changes if key not in UPDATABLE_FIELDS]
        if unknown:
            raise ValueError(f"Unknown raw material fields: {unknown}")

        patch: Dict[str, Any] = {}
        if "name" in changes:
            if not changes["name"] or not str(changes["name"]).strip():
                raise ValidationError("Material name cannot be empty.", "validation.name_required")
            patch["name"] = str(changes["name"]).strip()
        if "name_translations" in changes:
            patch["name_translations"] = dict(changes["name_translations"] or {})
        if "unit" in changes:
            patch["unit"] = to_enum(MaterialUnit, changes["unit"], "unit")
        if "min_threshold" in changes:
            patch["min_threshold"] = to_non_negative_decimal(changes["min_threshold"], "min_threshold")
        if "cost_per_unit" in changes:
            patch["cost_per_unit"] = to_optional_non_negative_decimal(changes["cost_per_unit"], "cost_per_unit")

        with self.db_manager.transaction():
            if "supplier_id" in changes:
                patch["supplier_id"] = self._validate_supplier(changes["supplier_id"])
            updated = self.raw_materials_repo.update_fields(material_id, patch)
            if updated is None:
                raise NotFoundError("RawMaterial", material_id)
        logger.info(f"Raw material ID {material_id} updated: {sorted(patch)}")
        return updated

    def delete_material(self, material_id: str) -> bool:
        with self.db_manager.transaction():
            material = self.raw_materials_repo.get_by_id(material_id)
            if material is None:
                raise NotFoundError("RawMaterial", material_id)
            if self.bom_repo.get_by_material_id(material_id):
                raise ValidationError(f"Material '{material.name}' is used in a recipe.",
                                      "validation.material_in_use", material=material.name)
            self.raw_materials_repo.delete(material_id)
        logger.info(f"Raw material '{material.name}' (ID: {material_id}) deleted.")
        return True

    def receive_material(self, material_id: str, quantity: Any, unit_cost: Any = None,
                         notes: Optional[str] = None) -> RawMaterialEntity:
        """
        Adds received stock and stamps last_received. A given unit_cost becomes
        the material's cost_per_unit. When the material has a supplier and a
        cost is known, the purchase is posted to the supplier's ledger.
        """
        quantity = to_positive_decimal(quantity, "quantity")
        unit_cost = to_optional_non_negative_decimal(unit_cost, "unit_cost")

        with self.db_manager.transaction():
            material = self.raw_materials_repo.get_by_id(material_id)
            if material is None:
                raise NotFoundError("RawMaterial", material_id)

            extra_fields: Dict[str, Any] = {"last_received": now()}
            if unit_cost is not None:
                extra_fields["cost_per_unit"] = unit_cost
            updated = self.inventory_manager.adjust_material_stock(
                material_id, quantity,
                movement_type=StockMovementType.RECEIPT,
                reference_type=ReferenceType.MATERIAL_RECEIPT,
                notes=notes,
                extra_fields=extra_fields)

            cost = unit_cost if unit_cost is not None else material.cost_per_unit
            if material.supplier_id and cost:
                self.person_manager.record_supplier_purchase(
                    material.supplier_id, quantity * cost, reference_id=material_id,
                    description=f"Received {quantity} {material.unit.value} of {material.name}")

        logger.info(f"Received {quantity} {material.unit.value} of '{material.name}'; "
                    f"stock now {updated.current_stock}.")
        return updated

    def set_stock(self, material_id: str, new_stock: Any, notes: Optional[str] = None) -> RawMaterialEntity:
        return self.inventory_manager.set_material_stock(material_id, new_stock, notes)
