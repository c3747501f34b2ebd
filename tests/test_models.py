from datetime import datetime, timezone

import pytest

from engine.models import (
    CHEST_ID,
    CraftedItemOption,
    Mode,
    PriceSnapshot,
    PriceTriple,
    Provenance,
)


def test_from_high_low_truncates_avg():
    assert PriceTriple.from_high_low(11, 4) == PriceTriple(high=11, low=4, avg=7)


def test_default_snapshot():
    snap = PriceSnapshot.default()
    assert [item.name for item in snap.items] == ["Oathplate helm", "Oathplate chest", "Oathplate legs"]
    assert snap.items[1].item_id == CHEST_ID
    assert snap.ingredient_a == PriceTriple()
    assert all(item.price == PriceTriple() for item in snap.items)


def test_default_triples_are_independent():
    snap = PriceSnapshot.default()
    snap.items[0].price.high = 5
    assert snap.items[1].price.high == 0


def test_default_provenance_is_manual_never_fetched():
    prov = Provenance()
    assert prov.mode is Mode.MANUAL
    assert prov.fetched_at is None


def test_snapshot_dict_roundtrip():
    snap = PriceSnapshot.default()
    snap.ingredient_a = PriceTriple(3, 1, 2)
    snap.items[2] = CraftedItemOption("Legs", 1, PriceTriple(9, 7, 8))
    assert PriceSnapshot.from_dict(snap.to_dict()) == snap


def test_snapshot_requires_three_items():
    data = PriceSnapshot.default().to_dict()
    data["items"] = data["items"][:2]
    with pytest.raises(ValueError):
        PriceSnapshot.from_dict(data)


def test_provenance_dict():
    at = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    data = Provenance.fetched(at).to_dict()
    assert data == {"mode": "fetched", "fetched_at": "2024-01-02T03:04:05Z"}
    assert Provenance.from_dict(data) == Provenance(Mode.FETCHED, at)
    assert Provenance.from_dict({"mode": "manual", "fetched_at": None}) == Provenance()


def test_as_manual_keeps_fetch_time():
    at = datetime(2024, 1, 2, tzinfo=timezone.utc)
    prov = Provenance.fetched(at).as_manual()
    assert prov.mode is Mode.MANUAL
    assert prov.fetched_at == at


@pytest.mark.parametrize("raw", ["yesterday", "2024-13-45T00:00:00Z", [1, 2]])
def test_provenance_rejects_unreadable_fetch_time(raw):
    with pytest.raises(ValueError):
        Provenance.from_dict({"mode": "fetched", "fetched_at": raw})


def test_provenance_never_fetched_forms():
    assert Provenance.from_dict({"mode": "manual", "fetched_at": None}).fetched_at is None
    assert Provenance.from_dict({"mode": "manual"}).fetched_at is None
