"""Tests for customers, suppliers, their ledgers and customer analytics."""

from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest

from madrar.constants import PersonType
from madrar.errors import NotFoundError, StoreError, ValidationError


def test_add_person_validates_name_and_type(app):
    with pytest.raises(ValidationError):
        app.person_manager.add_person("", PersonType.CUSTOMER)
    with pytest.raises(ValidationError):
        app.person_manager.add_person("Aisha", "employee")
    person = app.person_manager.add_person("  Aisha ", "customer")
    assert person.name == "Aisha"
    assert person.person_type is PersonType.CUSTOMER


def test_customers_and_suppliers_are_listed_separately(app, customer, supplier):
    assert [p.id for p in app.person_manager.get_customers()] == [customer.id]
    assert [p.id for p in app.person_manager.get_suppliers()] == [supplier.id]


def test_customer_balance_nets_payments(app, stocked_product, customer):
    app.sales_manager.record_sale(stocked_product.id, 4, customer.name, "20.00",
                                  amount_paid="30.00", customer_id=customer.id)
    app.person_manager.record_customer_payment(customer.id, "20.00", description="Cash at shop")

    assert app.person_manager.get_customer_balance(customer.id) == Decimal("30.00")
    assert len(app.person_manager.get_customer_ledger(customer.id)) == 2


def test_supplier_balance_nets_payments(app, raw_honey, supplier):
    app.raw_material_manager.receive_material(raw_honey.id, 10, unit_cost="4.000")
    app.person_manager.record_supplier_payment(supplier.id, "15")
    assert app.person_manager.get_supplier_balance(supplier.id) == Decimal("25.00")


def test_payments_go_to_the_right_party_type(app, customer, supplier):
    with pytest.raises(ValidationError):
        app.person_manager.record_customer_payment(supplier.id, 10)
    with pytest.raises(ValidationError):
        app.person_manager.record_supplier_payment(customer.id, 10)
    with pytest.raises(ValidationError):
        app.person_manager.record_customer_payment(customer.id, 0)


def test_update_and_delete_person(app, customer):
    updated = app.person_manager.update_person(customer.id, phone="+968 9111 1111")
    assert updated.phone == "+968 9111 1111"
    assert app.person_manager.delete_person(customer.id) is True
    with pytest.raises(NotFoundError):
        app.person_manager.delete_person(customer.id)


def test_customer_with_ledger_entries_cannot_be_deleted(app, stocked_product, customer):
    """An unpaid sale leaves a ledger entry; deleting the customer must not erase it."""

    app.sales_manager.record_sale(stocked_product.id, 2, customer.name, "20.00",
                                  amount_paid=0, customer_id=customer.id)

    with pytest.raises(ValidationError) as exc_info:
        app.person_manager.delete_person(customer.id)

    assert exc_info.value.message_key == "validation.person_has_history"
    assert app.person_manager.get_person_by_id(customer.id) is not None
    assert app.person_manager.customer_transactions_repo.count() == 1
    assert app.person_manager.get_customer_balance(customer.id) == Decimal("40.00")


def test_supplier_with_ledger_entries_cannot_be_deleted(app, raw_honey, supplier):
    app.raw_material_manager.receive_material(raw_honey.id, 5)

    with pytest.raises(ValidationError):
        app.person_manager.delete_person(supplier.id)

    assert app.person_manager.get_supplier_balance(supplier.id) == Decimal("22.50")


def test_ledger_rows_block_deletion_at_store_level(app, db_manager, customer):
    app.person_manager.record_customer_payment(customer.id, "5.00")

    with pytest.raises(StoreError):
        db_manager.execute_query("DELETE FROM persons WHERE id = ?", (customer.id,))

    assert app.person_manager.customer_transactions_repo.count() == 1


# ---------------------------------------------------------------------------
# Analytics
# ---------------------------------------------------------------------------


def test_analytics_for_unknown_customer_raises(app, supplier):
    with pytest.raises(NotFoundError):
        app.person_manager.get_customer_analytics("missing")
    with pytest.raises(NotFoundError):
        app.person_manager.get_customer_analytics(supplier.id)


def test_analytics_without_purchases(app, customer):
    analytics = app.person_manager.get_customer_analytics(customer.id)
    assert analytics["total_purchases"] == 0
    assert analytics["total_spent"] == Decimal("0")
    assert analytics["most_active_days"] == []
    assert analytics["next_order_prediction"] == {
        "predicted_date": None, "confidence": "Low", "avg_days_between_orders": None}


def test_analytics_aggregates_purchases(app, stocked_product, honey_jar, customer):
    app.product_manager.set_stock(honey_jar.id, 10)
    first = datetime(2024, 1, 1, 10, 0)  # a Monday
    for offset, product, quantity in [(0, stocked_product, 1), (7, honey_jar, 3), (14, stocked_product, 2)]:
        app.sales_manager.record_sale(product.id, quantity, customer.name, "10.00",
                                      customer_id=customer.id, sale_date=first + timedelta(days=offset))

    analytics = app.person_manager.get_customer_analytics(customer.id)

    assert analytics["total_purchases"] == 3
    assert analytics["total_spent"] == Decimal("60.00")
    assert analytics["most_active_days"] == ["Monday"]
    top = analytics["most_purchased_products"]
    assert [p["product_name"] for p in top] == ["Wild Flower Honey", "Sidr Honey"]
    assert top[0]["purchase_count"] == 2
    assert top[1]["product_name_ar"] == "عسل السدر"

    prediction = analytics["next_order_prediction"]
    assert prediction["avg_days_between_orders"] == 7.0
    assert prediction["predicted_date"] == date(2024, 1, 22)
    assert prediction["confidence"] == "Medium"
