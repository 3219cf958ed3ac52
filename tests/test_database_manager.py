"""Tests for the SQLite wrapper and the generic repository mapping."""

from datetime import datetime
from decimal import Decimal

import pytest

from madrar.business_logic.entities import PersonEntity, RawMaterialEntity
from madrar.constants import MaterialUnit, PersonType
from madrar.data_access.database_manager import DatabaseManager
from madrar.data_access.persons_repository import PersonsRepository
from madrar.data_access.raw_materials_repository import RawMaterialsRepository
from madrar.errors import StoreError


@pytest.fixture
def fresh_db(tmp_path):
    manager = DatabaseManager(str(tmp_path / "store.db"))
    manager.create_tables()
    return manager


def test_create_tables_is_repeatable(fresh_db):
    """Creating the schema twice should neither fail nor drop data."""

    repo = PersonsRepository(fresh_db)
    repo.add(PersonEntity(name="Aisha", person_type=PersonType.CUSTOMER))
    fresh_db.create_tables()
    assert repo.count() == 1


def test_add_assigns_id_and_created_at(fresh_db):
    """Inserted rows get an opaque string id and a creation timestamp."""

    person = PersonsRepository(fresh_db).add(PersonEntity(name="Aisha", person_type=PersonType.CUSTOMER))
    assert isinstance(person.id, str) and len(person.id) == 32
    assert isinstance(person.created_at, datetime)


def test_decimals_round_trip_exactly(fresh_db):
    """Quantities are stored as decimal text, so 0.1 + 0.2 stays exact."""

    repo = RawMaterialsRepository(fresh_db)
    material = repo.add(RawMaterialEntity(name="Sage", unit=MaterialUnit.GRAM,
                                          current_stock=Decimal("0.1") + Decimal("0.2"),
                                          name_translations={"ar": "ميرمية"}))
    loaded = repo.get_by_id(material.id)
    assert loaded.current_stock == Decimal("0.3")
    assert loaded.unit is MaterialUnit.GRAM
    assert loaded.name_translations == {"ar": "ميرمية"}
    assert loaded.cost_per_unit is None


def test_missing_rows_return_none_or_false(fresh_db):
    repo = PersonsRepository(fresh_db)
    assert repo.get_by_id("missing") is None
    assert repo.update_fields("missing", {"name": "x"}) is None
    assert repo.delete("missing") is False
    assert repo.find_by_criteria({"name": "nobody"}) == []


def test_update_fields_rejects_unknown_columns(fresh_db):
    repo = PersonsRepository(fresh_db)
    person = repo.add(PersonEntity(name="Aisha", person_type=PersonType.CUSTOMER))
    with pytest.raises(ValueError):
        repo.update_fields(person.id, {"balance": 10})


def test_find_by_criteria_supports_operators(fresh_db):
    repo = RawMaterialsRepository(fresh_db)
    for name in ("Beeswax", "Propolis", "Royal Jelly"):
        repo.add(RawMaterialEntity(name=name, unit=MaterialUnit.KILOGRAM))
    names = [m.name for m in repo.find_by_criteria({"name": (">", "Beeswax")}, order_by="name")]
    assert names == ["Propolis", "Royal Jelly"]
    assert len(repo.find_by_criteria({}, limit=2)) == 2


def test_check_constraint_surfaces_as_store_error(fresh_db):
    """Invalid enum text written behind the repository's back is rejected by the schema."""

    with pytest.raises(StoreError):
        fresh_db.execute_query(
            "INSERT INTO persons (id, name, person_type, created_at) VALUES (?, ?, ?, ?)",
            ("p1", "Bad", "employee", "2024-01-01T00:00:00"),
        )


def test_transaction_rolls_back_every_statement(fresh_db):
    """A failure inside transaction() undoes writes made through any repository."""

    repo = PersonsRepository(fresh_db)
    with pytest.raises(RuntimeError):
        with fresh_db.transaction():
            repo.add(PersonEntity(name="First", person_type=PersonType.CUSTOMER))
            repo.add(PersonEntity(name="Second", person_type=PersonType.SUPPLIER))
            raise RuntimeError("boom")
    assert repo.count() == 0
    assert not fresh_db.in_transaction


def test_nested_transaction_joins_outer(fresh_db):
    repo = PersonsRepository(fresh_db)
    with pytest.raises(RuntimeError):
        with fresh_db.transaction():
            with fresh_db.transaction():
                repo.add(PersonEntity(name="Inner", person_type=PersonType.CUSTOMER))
            raise RuntimeError("outer fails after inner finished")
    assert repo.count() == 0


def test_transaction_commits_on_success(fresh_db):
    repo = PersonsRepository(fresh_db)
    with fresh_db.transaction():
        repo.add(PersonEntity(name="Kept", person_type=PersonType.CUSTOMER))
    assert [p.name for p in repo.get_all()] == ["Kept"]


def test_writer_lock_times_out_with_store_error(tmp_path):
    """While one transaction holds the write lock, a second writer gives up with StoreError."""

    path = str(tmp_path / "locked.db")
    first = DatabaseManager(path)
    first.create_tables()
    second = DatabaseManager(path, timeout=0.1)

    with first.transaction():
        PersonsRepository(first).add(PersonEntity(name="Holder", person_type=PersonType.CUSTOMER))
        with pytest.raises(StoreError):
            with second.transaction():
                pass
