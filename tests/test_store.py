"""
Receipt store backends.
"""
import json
from datetime import datetime, timezone

import pytest
from sqlalchemy.exc import IntegrityError

from loanpay.config import settings
from loanpay.schemas import Receipt, ReceiptStatus
from loanpay.store import JsonFileReceiptStore, SqlReceiptStore, build_store, store_scope, uses_database

AT = datetime(2026, 10, 18, 9, 30, tzinfo=timezone.utc)


def _receipt(reference="ORDER-1", **fields):
    return Receipt(reference=reference, amount=100, phone="254712345678", timestamp=AT, **fields)


class TestJsonFileStore:
    def test_missing_file_is_empty(self, tmp_path):
        store = JsonFileReceiptStore(tmp_path / "receipts.json")
        assert store.all() == {}
        assert store.get("ORDER-1") is None
        assert not store.path.exists()

    def test_put_and_get(self, tmp_path):
        store = JsonFileReceiptStore(tmp_path / "nested" / "receipts.json")
        store.put(_receipt())
        assert store.get("ORDER-1") == _receipt()
        assert "ORDER-1" in store

    def test_layout_is_pretty_printed_object(self, tmp_path):
        store = JsonFileReceiptStore(tmp_path / "receipts.json")
        store.put(_receipt(status=ReceiptStatus.CANCELLED))
        text = store.path.read_text(encoding="utf-8")
        assert text.startswith('{\n  "ORDER-1": {')
        record = json.loads(text)["ORDER-1"]
        assert record["status"] == "cancelled"
        assert record["timestamp"].startswith("2026-10-18T09:30:00")

    def test_put_overwrites_whole_record(self, tmp_path):
        store = JsonFileReceiptStore(tmp_path / "receipts.json")
        store.put(_receipt())
        store.put(_receipt(status=ReceiptStatus.PROCESSING, transaction_code="QK1"))
        stored = store.get("ORDER-1")
        assert stored.status == ReceiptStatus.PROCESSING
        assert stored.transaction_code == "QK1"
        assert len(store.all()) == 1

    def test_save_all(self, tmp_path):
        store = JsonFileReceiptStore(tmp_path / "receipts.json")
        store.put(_receipt("ORDER-1"))
        store.save_all([_receipt("ORDER-2"), _receipt("ORDER-3")])
        assert sorted(store.all()) == ["ORDER-1", "ORDER-2", "ORDER-3"]

    def test_no_temp_files_left(self, tmp_path):
        store = JsonFileReceiptStore(tmp_path / "receipts.json")
        store.put(_receipt())
        assert [p.name for p in tmp_path.iterdir()] == ["receipts.json"]


class TestSqlStore:
    def test_round_trip(self, store):
        store.put(_receipt(transaction_id="TX1"))
        stored = store.get("ORDER-1")
        assert stored == _receipt(transaction_id="TX1")
        assert stored.timestamp.tzinfo is not None

    def test_put_updates(self, store):
        store.put(_receipt())
        store.put(_receipt(status=ReceiptStatus.LOAN_RELEASED))
        assert store.get("ORDER-1").status == ReceiptStatus.LOAN_RELEASED
        assert list(store.all()) == ["ORDER-1"]

    def test_missing(self, store):
        assert store.get("nope") is None

    def test_failed_write_rolls_back(self, store):
        with pytest.raises(IntegrityError):
            store.put(_receipt().model_copy(update={"timestamp": None}))
        store.put(_receipt("ORDER-2"))
        assert list(store.all()) == ["ORDER-2"]

    def test_failed_batch_rolls_back(self, store):
        with pytest.raises(IntegrityError):
            store.save_all([_receipt(), _receipt("ORDER-2").model_copy(update={"timestamp": None})])
        assert store.all() == {}
        store.save_all([_receipt()])
        assert list(store.all()) == ["ORDER-1"]


class TestBuildStore:
    def test_sql_default(self, db):
        assert isinstance(build_store(db), SqlReceiptStore)

    def test_json_backend(self, monkeypatch, tmp_path):
        monkeypatch.setattr(settings, "RECEIPT_STORE", "json")
        monkeypatch.setattr(settings, "RECEIPTS_FILE", str(tmp_path / "r.json"))
        store = build_store()
        assert isinstance(store, JsonFileReceiptStore)
        assert store.path == (tmp_path / "r.json").resolve()

    def test_unknown_backend(self, monkeypatch):
        monkeypatch.setattr(settings, "RECEIPT_STORE", "redis")
        with pytest.raises(ValueError):
            build_store()


class TestStoreScope:
    def test_json_backend_never_opens_a_session(self, monkeypatch, tmp_path):
        def no_database():
            raise AssertionError("json backend opened a database session")

        monkeypatch.setattr(settings, "RECEIPT_STORE", "json")
        monkeypatch.setattr(settings, "RECEIPTS_FILE", str(tmp_path / "r.json"))
        monkeypatch.setattr("loanpay.database.SessionLocal", no_database)
        assert not uses_database()
        with store_scope() as store:
            assert isinstance(store, JsonFileReceiptStore)

    def test_sql_backend_closes_session(self, monkeypatch, db):
        closed = []
        monkeypatch.setattr(settings, "RECEIPT_STORE", "sql")
        monkeypatch.setattr("loanpay.database.SessionLocal", lambda: db)
        monkeypatch.setattr(db, "close", lambda: closed.append(True))
        with store_scope() as store:
            assert isinstance(store, SqlReceiptStore)
            assert store.db is db
        assert closed == [True]
