"""Tests for recipe maintenance and requirement resolution."""

from decimal import Decimal

import pytest

from madrar.constants import ProductSize
from madrar.errors import NotFoundError, ValidationError


def test_get_bom_attaches_material_details(app, honey_jar, raw_honey):
    entries = app.bom_manager.get_bom(honey_jar.id)

    assert len(entries) == 2
    honey_entry = next(e for e in entries if e.material_id == raw_honey.id)
    assert honey_entry.quantity_per_unit == Decimal("0.5")
    assert honey_entry.material_name == "Raw Honey"
    assert honey_entry.material_unit == "kg"


def test_set_bom_replaces_previous_recipe(app, honey_jar, raw_honey):
    app.bom_manager.set_bom(honey_jar.id, [{"material_id": raw_honey.id, "quantity_per_unit": "0.45"}])

    entries = app.bom_manager.get_bom(honey_jar.id)
    assert [(e.material_id, e.quantity_per_unit) for e in entries] == [(raw_honey.id, Decimal("0.45"))]


def test_set_bom_rejects_duplicates_without_writing(app, honey_jar, raw_honey):
    with pytest.raises(ValidationError) as exc_info:
        app.bom_manager.set_bom(honey_jar.id, [
            {"material_id": raw_honey.id, "quantity_per_unit": "1"},
            {"material_id": raw_honey.id, "quantity_per_unit": "2"},
        ])
    assert exc_info.value.message_key == "validation.duplicate_material"
    assert len(app.bom_manager.get_bom(honey_jar.id)) == 2


def test_set_bom_validates_references_and_quantities(app, honey_jar, raw_honey):
    with pytest.raises(NotFoundError):
        app.bom_manager.set_bom("missing-product", [])
    with pytest.raises(NotFoundError):
        app.bom_manager.set_bom(honey_jar.id, [{"material_id": "missing", "quantity_per_unit": "1"}])
    with pytest.raises(ValidationError):
        app.bom_manager.set_bom(honey_jar.id, [{"material_id": raw_honey.id, "quantity_per_unit": "-1"}])


def test_resolve_requirements_scales_by_quantity(app, honey_jar, raw_honey, jars):
    resolution = app.bom_manager.resolve_requirements(honey_jar.id, 40)

    required = {req.material_id: req.quantity_required for req in resolution.requirements}
    assert required == {raw_honey.id: Decimal("20.0"), jars.id: Decimal("40")}
    assert resolution.all_sufficient
    assert not resolution.is_empty


def test_resolve_requirements_reports_shortfall(app, honey_jar, raw_honey):
    resolution = app.bom_manager.resolve_requirements(honey_jar.id, 120)

    assert not resolution.all_sufficient
    shortage = resolution.shortages[0]
    assert shortage.material_id == raw_honey.id
    assert shortage.shortfall == Decimal("10.0")


def test_resolve_requirements_is_idempotent(app, honey_jar):
    """Resolving twice without a mutation in between gives identical results."""

    first = app.bom_manager.resolve_requirements(honey_jar.id, 40)
    second = app.bom_manager.resolve_requirements(honey_jar.id, 40)
    assert first == second


def test_empty_recipe_is_never_sufficient(app):
    product = app.product_manager.create_product("Sage Tea Blend", ProductSize.SIZE_100G)
    resolution = app.bom_manager.resolve_requirements(product.id, 1)
    assert resolution.is_empty
    assert not resolution.all_sufficient


def test_clear_bom_removes_entries(app, honey_jar):
    assert app.bom_manager.clear_bom(honey_jar.id) == 2
    assert app.bom_manager.get_bom(honey_jar.id) == []
