"""Tests for the stock ledger primitives."""

from decimal import Decimal

import pytest

from madrar.constants import StockMovementType, ReferenceType
from madrar.errors import InsufficientStockError, NotFoundError, ValidationError


def test_adjust_material_stock_applies_delta_and_logs_movement(app, raw_honey):
    updated = app.inventory_manager.adjust_material_stock(raw_honey.id, Decimal("-12.5"))

    assert updated.current_stock == Decimal("37.5")
    assert updated.updated_at is not None
    movements = app.inventory_manager.get_material_movements(raw_honey.id)
    assert [m.quantity for m in movements] == [Decimal("50"), Decimal("-12.5")]
    assert movements[-1].movement_type is StockMovementType.CORRECTION


def test_adjust_without_floor_allows_negative(app, raw_honey):
    """The bare primitive does not enforce a floor unless asked to."""

    updated = app.inventory_manager.adjust_material_stock(raw_honey.id, Decimal("-60"))
    assert updated.current_stock == Decimal("-10")


def test_adjust_with_floor_rejects_and_leaves_stock(app, raw_honey):
    with pytest.raises(InsufficientStockError) as exc_info:
        app.inventory_manager.adjust_material_stock(raw_honey.id, Decimal("-60"), require_available=True)

    assert exc_info.value.available == Decimal("50")
    assert exc_info.value.requested == Decimal("60")
    assert app.raw_material_manager.get_material_by_id(raw_honey.id).current_stock == Decimal("50")
    assert len(app.inventory_manager.get_material_movements(raw_honey.id)) == 1


def test_adjust_unknown_item_raises_not_found(app):
    with pytest.raises(NotFoundError):
        app.inventory_manager.adjust_material_stock("nope", Decimal("1"))
    with pytest.raises(NotFoundError):
        app.inventory_manager.adjust_product_stock("nope", Decimal("1"))


def test_adjust_product_stock_records_reference(app, stocked_product):
    updated = app.inventory_manager.adjust_product_stock(
        stocked_product.id, Decimal("3"),
        movement_type=StockMovementType.PRODUCTION_OUTPUT,
        reference_type=ReferenceType.PRODUCTION_RECORD,
        reference_id="run-1")

    assert updated.current_stock == Decimal("13")
    movement = app.inventory_manager.get_product_movements(stocked_product.id)[-1]
    assert movement.reference_type is ReferenceType.PRODUCTION_RECORD
    assert movement.reference_id == "run-1"


def test_set_stock_records_correction_delta(app, stocked_product):
    updated = app.inventory_manager.set_product_stock(stocked_product.id, Decimal("4"), notes="Stock count")

    assert updated.current_stock == Decimal("4")
    movement = app.inventory_manager.get_product_movements(stocked_product.id)[-1]
    assert movement.quantity == Decimal("-6")
    assert movement.reference_type is ReferenceType.MANUAL_ADJUSTMENT
    assert movement.notes == "Stock count"


def test_set_stock_to_same_value_writes_nothing(app, stocked_product):
    app.inventory_manager.set_product_stock(stocked_product.id, Decimal("10"))
    assert len(app.inventory_manager.get_product_movements(stocked_product.id)) == 1


def test_set_stock_rejects_negative_values(app, raw_honey):
    with pytest.raises(ValidationError):
        app.inventory_manager.set_material_stock(raw_honey.id, Decimal("-1"))
