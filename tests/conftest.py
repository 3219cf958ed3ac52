"""Shared fixtures: every test gets its own SQLite file under tmp_path."""

from decimal import Decimal

import pytest

from madrar.constants import MaterialUnit, ProductSize
from madrar.main_app import build_application

ADMIN_PASSWORD = "test-admin"


@pytest.fixture
def admin_password():
    return ADMIN_PASSWORD


@pytest.fixture
def app(tmp_path):
    return build_application(str(tmp_path / "madrar_test.db"), admin_password=ADMIN_PASSWORD)


@pytest.fixture
def db_manager(app):
    return app.db_manager


@pytest.fixture
def supplier(app):
    return app.person_manager.add_supplier("Jabal Apiary", phone="+968 9000 0000")


@pytest.fixture
def customer(app):
    return app.person_manager.add_customer("Salim Al Harthy")


@pytest.fixture
def raw_honey(app, supplier):
    return app.raw_material_manager.create_material(
        "Raw Honey", MaterialUnit.KILOGRAM,
        current_stock=Decimal("50"), min_threshold=Decimal("10"),
        cost_per_unit=Decimal("4.500"), supplier_id=supplier.id,
        name_translations={"ar": "عسل خام"},
    )


@pytest.fixture
def jars(app):
    return app.raw_material_manager.create_material(
        "Glass Jar 500g", MaterialUnit.PIECE,
        current_stock=Decimal("100"), min_threshold=Decimal("20"), cost_per_unit=Decimal("0.250"),
    )


@pytest.fixture
def honey_jar(app, raw_honey, jars):
    """A 500g honey jar product whose recipe is 0.5 kg raw honey and one jar per unit."""
    product = app.product_manager.create_product(
        "Sidr Honey", ProductSize.SIZE_500G,
        selling_price=Decimal("20.00"), min_threshold=Decimal("5"),
        name_translations={"ar": "عسل السدر"},
    )
    app.bom_manager.set_bom(product.id, [
        {"material_id": raw_honey.id, "quantity_per_unit": Decimal("0.5")},
        {"material_id": jars.id, "quantity_per_unit": Decimal("1")},
    ])
    return product


@pytest.fixture
def stocked_product(app):
    """A product with 10 units on hand and no recipe."""
    return app.product_manager.create_product(
        "Wild Flower Honey", ProductSize.SIZE_1KG,
        selling_price=Decimal("20.00"), current_stock=Decimal("10"), min_threshold=Decimal("2"),
    )
