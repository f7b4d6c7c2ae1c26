"""Tests for the client record store (list and insert against one table)."""

from __future__ import annotations

from datetime import date

from sqlalchemy import inspect

from client_registry.config import CLIENT_TABLE, StoreConfig
from client_registry.database import build_engine
from client_registry.schemas.client import ClientRecordInput
from client_registry.schemas.envelope import ErrorKind
from client_registry.services.record_store import RecordStore, StoreFailure, StoreOk


def _input(name: str = "Lucía", **overrides) -> ClientRecordInput:
    fields = {
        "name": name,
        "paternal_surname": "Hernández",
        "maternal_surname": "Ruiz",
        "birth_date": "1990-12-25",
        "address": "Av. Juárez 12",
        "phone": "5512345678",
        "registration_date": "2024-03-01",
    }
    fields.update(overrides)
    return ClientRecordInput(**fields)


# ============================================================================
# Tests: list_all
# ============================================================================


def test_list_all_empty_store(store: RecordStore) -> None:
    result = store.list_all()

    assert isinstance(result, StoreOk)
    assert result.value == []


def test_list_all_newest_first(store: RecordStore) -> None:
    ids = [store.insert(_input(name)).value for name in ("Ana", "Beto", "Carla")]

    result = store.list_all()

    assert [row.name for row in result.value] == ["Carla", "Beto", "Ana"]
    assert [row.id for row in result.value] == sorted(ids, reverse=True)


def test_list_all_missing_table_is_query_failure() -> None:
    # No create_tables on this engine.
    bare = RecordStore(build_engine(StoreConfig(database_url="sqlite://")))

    result = bare.list_all()

    assert isinstance(result, StoreFailure)
    assert result.kind is ErrorKind.QUERY_FAILED
    assert CLIENT_TABLE in result.detail


def test_list_all_unreachable_database(tmp_path) -> None:
    url = f"sqlite:///{tmp_path / 'missing-dir' / 'clientes.db'}"
    unreachable = RecordStore.from_config(StoreConfig(database_url=url))

    result = unreachable.list_all()

    assert isinstance(result, StoreFailure)
    assert result.kind is ErrorKind.STORE_UNAVAILABLE


# ============================================================================
# Tests: insert
# ============================================================================


def test_insert_returns_fresh_ids(store: RecordStore) -> None:
    first = store.insert(_input("Ana"))
    second = store.insert(_input("Beto"))

    assert isinstance(first, StoreOk)
    assert isinstance(second, StoreOk)
    assert second.value != first.value


def test_insert_stores_all_fields(store: RecordStore) -> None:
    new_id = store.insert(_input()).value

    (row,) = store.list_all().value
    assert row.id == new_id
    assert row.name == "Lucía"
    assert row.paternal_surname == "Hernández"
    assert row.maternal_surname == "Ruiz"
    assert row.birth_date == date(1990, 12, 25)
    assert row.address == "Av. Juárez 12"
    assert row.phone == "5512345678"
    assert row.registration_date == date(2024, 3, 1)


def test_insert_optional_fields_absent(store: RecordStore) -> None:
    store.insert(
        _input(maternal_surname=None, birth_date=None, address=None, phone=None)
    )

    (row,) = store.list_all().value
    assert row.maternal_surname is None
    assert row.birth_date is None
    assert row.address is None
    assert row.phone is None


def test_insert_values_are_bound_not_interpolated(store: RecordStore, engine) -> None:
    hostile = "Bob'); DROP TABLE clientes; --"

    result = store.insert(_input(hostile))

    assert isinstance(result, StoreOk)
    assert inspect(engine).has_table(CLIENT_TABLE)
    assert store.list_all().value[0].name == hostile


def test_insert_malformed_date_is_query_failure(store: RecordStore) -> None:
    result = store.insert(_input(birth_date="25/12/1990"))

    assert isinstance(result, StoreFailure)
    assert result.kind is ErrorKind.QUERY_FAILED
    assert store.list_all().value == []


def test_insert_constraint_violation_is_rejected(store: RecordStore) -> None:
    # An empty registration date leaves the NOT NULL column without a value.
    result = store.insert(_input(registration_date=""))

    assert isinstance(result, StoreFailure)
    assert result.kind is ErrorKind.VALIDATION_REJECTED
    assert store.list_all().value == []


def test_ping(store: RecordStore) -> None:
    assert store.ping() is True


# ============================================================================
# Tests: schema creation
# ============================================================================


def test_ensure_schema_creates_table() -> None:
    engine = build_engine(StoreConfig(database_url="sqlite://"))
    fresh = RecordStore(engine)

    assert fresh.ensure_schema() is True
    assert inspect(engine).has_table(CLIENT_TABLE)
    assert fresh.list_all().value == []


def test_ensure_schema_reports_unreachable_database(tmp_path) -> None:
    url = f"sqlite:///{tmp_path / 'missing-dir' / 'clientes.db'}"
    unreachable = RecordStore.from_config(StoreConfig(database_url=url))

    assert unreachable.ensure_schema() is False


def test_deferred_schema_created_on_first_contact(tmp_path) -> None:
    db_dir = tmp_path / "later"
    config = StoreConfig(database_url=f"sqlite:///{db_dir / 'clientes.db'}")
    deferred = RecordStore.from_config(config, create_schema=True)
    assert deferred.ensure_schema() is False

    db_dir.mkdir()
    result = deferred.insert(_input())

    assert isinstance(result, StoreOk)
    assert [row.id for row in deferred.list_all().value] == [result.value]
