import pytest
from sqlalchemy.exc import OperationalError

from generator_service.errors import OrderNotFoundError, OrderValidationError, StorageError
from generator_service.order_store import OrderRecord, OrderStore


@pytest.fixture
def store(tmp_path):
    s = OrderStore(f"sqlite:///{tmp_path / 'orders.db'}")
    s.init()
    yield s
    s.close()


def _count(store):
    with store.Session() as session:
        return session.query(OrderRecord).count()


def test_create_and_get(store):
    order = store.create(["a", {"sku": "b", "quantity": 2}], 10)

    assert order.status == "pending"
    assert order.id
    assert order.createdAt
    assert store.get(order.id) == order


def test_ids_are_unique(store):
    a = store.create(["a"], 1)
    b = store.create(["a"], 1)
    assert a.id != b.id


@pytest.mark.parametrize("items, amount", [
    ([], 10),
    (None, 10),
    ("abc", 10),
    (["a"], -1),
    (["a"], "10"),
    (["a"], None),
    (["a"], True),
    (["a"], float("inf")),
    (["a"], float("nan")),
])
def test_invalid_input_writes_nothing(store, items, amount):
    with pytest.raises(OrderValidationError):
        store.create(items, amount)
    assert _count(store) == 0


def test_zero_amount_is_valid(store):
    assert store.create(["a"], 0).totalAmount == 0


def test_get_unknown(store):
    with pytest.raises(OrderNotFoundError):
        store.get("does-not-exist")


def test_database_failure_raises_storage_error(tmp_path):
    # table was never created
    s = OrderStore(f"sqlite:///{tmp_path / 'empty.db'}")
    with pytest.raises(StorageError) as exc_info:
        s.create(["a"], 1)
    assert isinstance(exc_info.value.__cause__, OperationalError)
    with pytest.raises(StorageError):
        s.get("x")
    s.close()


@pytest.mark.parametrize("payload", ["{not json", '{"id": "x", "orderItems": ["a"], "totalAmount": null}'])
def test_corrupt_payload_raises_storage_error(store, payload):
    with store.Session.begin() as session:
        session.add(OrderRecord(id="x", payload=payload, created_at="2026-01-01T00:00:00+00:00"))

    with pytest.raises(StorageError):
        store.get("x")
