import pytest
from sqlalchemy import exc as sa_exc

from personal_manager.core.errors import (
    ConstraintError,
    NotFoundError,
    SchemaError,
    StoreConnectionError,
    StoreError,
    ValidationError,
    from_sqlalchemy,
)
from personal_manager.models.entities import Module
from personal_manager.models.store import RecordStore


@pytest.mark.parametrize(
    "error, expected",
    [
        (sa_exc.IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed")), ConstraintError),
        (sa_exc.DataError("INSERT", {}, Exception("bad value")), ValidationError),
        (sa_exc.OperationalError("SELECT", {}, Exception("no such table: modules")), SchemaError),
        (sa_exc.ProgrammingError("SELECT", {}, Exception("syntax")), SchemaError),
        (sa_exc.NoSuchTableError("modules"), SchemaError),
        (sa_exc.InterfaceError("SELECT", {}, Exception("closed")), StoreConnectionError),
        (sa_exc.TimeoutError("QueuePool limit reached"), StoreConnectionError),
        (sa_exc.DBAPIError("SELECT", {}, Exception("gone"), connection_invalidated=True), StoreConnectionError),
    ],
)
def test_from_sqlalchemy_maps_by_type(error, expected):
    assert type(from_sqlalchemy(error)) is expected


def test_from_sqlalchemy_unknown_falls_back_to_base():
    err = from_sqlalchemy(sa_exc.SQLAlchemyError("strange"))
    assert type(err) is StoreError
    assert err.kind == "unknown"
    assert err.status_code == 500


def test_error_envelope_fields():
    err = NotFoundError("Journey", 7)
    body = err.to_dict()
    assert body["type"] == "not_found"
    assert body["severity"] == "low"
    assert body["message"] == "Journey not found"
    assert body["details"] == {"resource": "Journey", "id": 7}
    assert err.status_code == 404


async def test_insert_select_scoped_by_owner(db_session):
    store = RecordStore(db_session, Module)
    await store.insert(owner_id=1, code="IT102", name="Databases")
    await store.insert(owner_id=1, code="IT101", name="Intro IT")
    await store.insert(owner_id=2, code="IT101", name="Someone else's")

    mine = await store.select_all(1, Module.code)
    assert [m.code for m in mine] == ["IT101", "IT102"]
    assert await store.select_by_id(mine[0].id, owner_id=2) is None


async def test_duplicate_code_raises_constraint_and_session_recovers(db_session):
    store = RecordStore(db_session, Module)
    await store.insert(owner_id=1, code="IT101", name="Intro IT")
    with pytest.raises(ConstraintError):
        await store.insert(owner_id=1, code="IT101", name="Again")

    other = await store.insert(owner_id=1, code="IT200", name="Networks")
    assert other.id is not None


async def test_update_and_delete_report_affected_rows(db_session):
    store = RecordStore(db_session, Module)
    m = await store.insert(owner_id=1, code="IT101", name="Intro IT")

    assert await store.update(m.id, 1, name="Intro to IT") == 1
    assert (await store.select_by_id(m.id, 1)).name == "Intro to IT"
    assert await store.update(m.id + 100, 1, name="nope") == 0
    assert await store.update(m.id, 2, name="wrong owner") == 0

    assert await store.delete(m.id, 1) == 1
    assert await store.delete(m.id, 1) == 0
