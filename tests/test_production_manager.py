"""Tests for the production transaction: validation, stock conservation and rollback."""

from datetime import datetime
from decimal import Decimal

import pytest

from madrar.constants import MaterialUnit, ProductSize, ProductionStage, StockMovementType
from madrar.errors import InsufficientStockError, NoRecipeError, NotFoundError, StoreError, ValidationError


def _stock_snapshot(app):
    materials = {m.id: m.current_stock for m in app.raw_material_manager.get_all_materials()}
    products = {p.id: p.current_stock for p in app.product_manager.get_all_products()}
    return materials, products


# ---------------------------------------------------------------------------
# Successful runs
# ---------------------------------------------------------------------------


def test_production_consumes_materials_and_adds_product(app, honey_jar, raw_honey, jars):
    """50 kg raw honey at 0.5 kg per unit: producing 40 leaves 30 kg."""

    record = app.production_manager.record_production(honey_jar.id, 40, notes="Morning batch")

    assert app.raw_material_manager.get_material_by_id(raw_honey.id).current_stock == Decimal("30")
    assert app.raw_material_manager.get_material_by_id(jars.id).current_stock == Decimal("60")
    assert app.product_manager.get_product_by_id(honey_jar.id).current_stock == Decimal("40")
    assert record.quantity == Decimal("40")
    assert record.notes == "Morning batch"
    assert app.production_manager.last_stage is ProductionStage.COMPLETE


def test_production_snapshots_material_costs(app, honey_jar, raw_honey, jars):
    record = app.production_manager.record_production(honey_jar.id, 10)

    used = {item.material_id: (item.quantity_used, item.cost_at_time) for item in record.materials}
    assert used == {raw_honey.id: (Decimal("5.0"), Decimal("4.500")),
                    jars.id: (Decimal("10"), Decimal("0.250"))}
    # 5 x 4.500 + 10 x 0.250
    assert record.total_cost == Decimal("25.0")


def test_material_without_cost_counts_as_zero(app):
    wax = app.raw_material_manager.create_material("Beeswax", MaterialUnit.GRAM, current_stock=500)
    candle = app.product_manager.create_product("Wax Candle", ProductSize.SIZE_100G)
    app.bom_manager.set_bom(candle.id, [{"material_id": wax.id, "quantity_per_unit": 100}])

    record = app.production_manager.record_production(candle.id, 2)
    assert record.total_cost == Decimal("0")
    assert record.materials[0].cost_at_time == Decimal("0")


def test_production_details_and_listing(app, honey_jar, raw_honey):
    produced_on = datetime(2024, 3, 1, 9, 30)
    record = app.production_manager.record_production(honey_jar.id, 4, production_date=produced_on)

    details = app.production_manager.get_production_with_details(record.id)
    assert details.product_name == "Sidr Honey"
    assert details.production_date == produced_on
    assert {item.material_name for item in details.materials} == {"Raw Honey", "Glass Jar 500g"}

    listed = app.production_manager.get_production_records()
    assert [r.id for r in listed] == [record.id]
    assert listed[0].product_name == "Sidr Honey"
    assert app.production_manager.get_production_with_details("missing") is None


def test_production_writes_movements_referencing_record(app, honey_jar, raw_honey):
    record = app.production_manager.record_production(honey_jar.id, 2)

    movement = app.inventory_manager.get_material_movements(raw_honey.id)[-1]
    assert movement.movement_type is StockMovementType.PRODUCTION_CONSUMPTION
    assert movement.quantity == Decimal("-1.0")
    assert movement.reference_id == record.id
    output = app.inventory_manager.get_product_movements(honey_jar.id)[-1]
    assert output.movement_type is StockMovementType.PRODUCTION_OUTPUT
    assert output.quantity == Decimal("2")


# ---------------------------------------------------------------------------
# Rejections
# ---------------------------------------------------------------------------


def test_insufficient_material_changes_nothing(app, honey_jar, raw_honey):
    """With 5 kg raw honey, 40 units need 20 kg: rejected and nothing is written."""

    app.raw_material_manager.set_stock(raw_honey.id, 5)
    before = _stock_snapshot(app)

    with pytest.raises(InsufficientStockError) as exc_info:
        app.production_manager.record_production(honey_jar.id, 40)

    error = exc_info.value
    assert error.stage is ProductionStage.VALIDATING
    assert error.item_name == "Raw Honey"
    assert error.shortages[0]["required"] == Decimal("20.0")
    assert _stock_snapshot(app) == before
    assert app.production_manager.get_production_records() == []
    assert app.production_manager.last_stage is ProductionStage.FAILED


def test_product_without_recipe_raises_no_recipe(app):
    tea = app.product_manager.create_product("Sage Tea Blend", ProductSize.SIZE_250G)
    before = _stock_snapshot(app)

    with pytest.raises(NoRecipeError):
        app.production_manager.record_production(tea.id, 5)

    assert _stock_snapshot(app) == before
    assert app.production_manager.get_production_records() == []


@pytest.mark.parametrize("quantity", [0, -3, "abc"])
def test_production_quantity_must_be_positive(app, honey_jar, quantity):
    with pytest.raises(ValidationError):
        app.production_manager.record_production(honey_jar.id, quantity)


@pytest.mark.parametrize("quantity", ["2.5", Decimal("0.5")])
def test_production_quantity_must_be_whole_units(app, honey_jar, quantity):
    before = _stock_snapshot(app)

    with pytest.raises(ValidationError) as exc_info:
        app.production_manager.record_production(honey_jar.id, quantity)

    assert exc_info.value.message_key == "validation.whole_units"
    assert _stock_snapshot(app) == before


def test_malformed_production_date_is_a_validation_error(app, honey_jar):
    before = _stock_snapshot(app)

    with pytest.raises(ValidationError) as exc_info:
        app.production_manager.record_production(honey_jar.id, 2, production_date="9 March 2024")

    assert exc_info.value.message_key == "validation.invalid_date"
    assert exc_info.value.stage is ProductionStage.VALIDATING
    assert _stock_snapshot(app) == before
    assert app.production_manager.get_production_records() == []


def test_unknown_product_raises_not_found(app):
    with pytest.raises(NotFoundError):
        app.production_manager.record_production("missing", 1)


def test_failure_while_producing_rolls_back_everything(app, honey_jar, raw_honey, jars, monkeypatch):
    """If the product increment fails, the record, its materials and the consumption are undone."""

    before = _stock_snapshot(app)

    def failing_increment(*args, **kwargs):
        raise StoreError("disk I/O error")

    monkeypatch.setattr(app.inventory_manager, "adjust_product_stock", failing_increment)

    with pytest.raises(StoreError) as exc_info:
        app.production_manager.record_production(honey_jar.id, 10)

    assert exc_info.value.stage is ProductionStage.PRODUCING
    assert _stock_snapshot(app) == before
    assert app.production_manager.production_records_repo.count() == 0
    assert app.production_manager.production_materials_repo.count() == 0
    assert len(app.inventory_manager.get_material_movements(raw_honey.id)) == 1
