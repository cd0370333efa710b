from decimal import Decimal

import pytest

from p2p_desk.domain.models import QuotaState
from p2p_desk.infrastructure.db.models import HISTORY_KEY, SETTINGS_KEY
from p2p_desk.infrastructure.db.repositories.state_repository import StateRepository


@pytest.mark.integration
def test_raw_set_get_delete(session_factory):
    with session_factory() as session:
        repo = StateRepository(session)
        assert repo.get_raw("k") is None

        repo.set_raw("k", "one")
        repo.set_raw("k", "two")
        assert repo.get_raw("k") == "two"

        assert repo.delete("k") is True
        assert repo.delete("k") is False
        assert repo.get_raw("k") is None


@pytest.mark.integration
def test_empty_store_reads_absent(store):
    assert store.load_ledger() is None
    assert store.load_quota() is None
    assert store.load_inventory() is None


@pytest.mark.integration
def test_ledger_roundtrip_keeps_order(store, make_record):
    store.save_ledger([make_record("new"), make_record("old")])
    ledger = store.load_ledger()
    assert [r.id for r in ledger] == ["new", "old"]
    assert ledger[0].profit == Decimal("50")


@pytest.mark.integration
def test_quota_roundtrip(store):
    state = QuotaState(Decimal("16300"), Decimal("1200.5"), Decimal("20.5"), 4)
    store.save_quota(state)
    assert store.load_quota() == state


@pytest.mark.integration
def test_inventory_echo_is_verbatim(store):
    store.save_inventory(" 12abc")
    assert store.load_inventory() == " 12abc"


@pytest.mark.integration
@pytest.mark.parametrize(
    "key, raw",
    [
        (HISTORY_KEY, "not json"),
        (HISTORY_KEY, '{"id": "a"}'),
        (HISTORY_KEY, '[{"id": "a"}]'),
        (SETTINGS_KEY, "[]"),
        (SETTINGS_KEY, '{"limitUSD": 1, "usedUSD": 0, "exchangeRate": 1, "lastResetMonth": 12}'),
    ],
)
def test_invalid_entries_read_as_absent(session_factory, store, key, raw):
    with session_factory() as session:
        StateRepository(session).set_raw(key, raw)
        session.commit()

    loaded = store.load_ledger() if key == HISTORY_KEY else store.load_quota()
    assert loaded is None


@pytest.mark.integration
def test_entries_are_independent(store, make_record):
    store.save_inventory("5")
    store.save_ledger([make_record("a")])
    assert store.load_inventory() == "5"
    assert store.load_quota() is None
