import json
from datetime import datetime, timezone

import pytest

from engine.models import Mode, PriceSnapshot, PriceTriple, Provenance
from services.cache_store import CacheStatus, CacheStore


def _state():
    snap = PriceSnapshot.default()
    snap.ingredient_a = PriceTriple.from_high_low(120, 100)
    snap.items[0].price = PriceTriple(5_000_000, 4_800_000, 4_900_000)
    prov = Provenance.fetched(datetime(2024, 6, 1, 8, 30, tzinfo=timezone.utc))
    return snap, prov


def test_roundtrip(tmp_path):
    store = CacheStore(tmp_path / "prices_cache.json")
    snap, prov = _state()
    store.save(snap, prov)

    result = store.load_result()
    assert result.status is CacheStatus.OK
    assert result.state.snapshot == snap
    assert result.state.provenance == prov


def test_absent(tmp_path):
    store = CacheStore(tmp_path / "missing.json")
    assert store.load_result().status is CacheStatus.ABSENT
    assert store.load() is None


@pytest.mark.parametrize(
    "content",
    [
        "{",
        "[]",
        json.dumps({"snapshot": {}}),
        json.dumps({"snapshot": PriceSnapshot.default().to_dict(), "provenance": {"mode": "guessed"}}),
        json.dumps(
            {"snapshot": PriceSnapshot.default().to_dict(), "provenance": {"mode": "fetched", "fetched_at": "soon"}}
        ),
    ],
)
def test_corrupt(tmp_path, content):
    path = tmp_path / "prices_cache.json"
    path.write_text(content, encoding="utf-8")
    store = CacheStore(path)
    assert store.load_result().status is CacheStatus.CORRUPT
    assert store.load() is None


def test_manual_state_roundtrip(tmp_path):
    store = CacheStore(tmp_path / "c.json")
    store.save(PriceSnapshot.default(), Provenance())
    state = store.load()
    assert state.provenance.mode is Mode.MANUAL
    assert state.provenance.fetched_at is None


def test_failed_save_keeps_previous_file(tmp_path, monkeypatch):
    path = tmp_path / "prices_cache.json"
    store = CacheStore(path)
    snap, prov = _state()
    store.save(snap, prov)
    before = path.read_text(encoding="utf-8")

    def boom(*a, **k):
        raise OSError("disk full")

    monkeypatch.setattr("services.cache_store.os.replace", boom)
    with pytest.raises(OSError):
        store.save(PriceSnapshot.default(), Provenance())

    assert path.read_text(encoding="utf-8") == before
    assert not (tmp_path / "prices_cache.json.tmp").exists()
