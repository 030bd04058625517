import json
import pytest

from agrimarket.errors import NotFoundError
from agrimarket.models import Crop
from agrimarket.repository import Repository
from agrimarket.storage import EntityStore, InMemoryKeyValueStore, CROPS


def make_repo(initial=None):
    kv = InMemoryKeyValueStore(initial)
    return kv, Repository(EntityStore(kv), CROPS, Crop)


def tomato(**overrides):
    data = dict(farmer_id="f1", farmer_name="Ramesh", name="Tomatoes", category="Vegetables", quantity=100, price=20)
    data.update(overrides)
    return Crop(**data)


def test_records_are_stored_with_camel_case_keys():
    kv, repo = make_repo()
    crop = repo.insert(tomato())

    stored = json.loads(kv.get_item(CROPS))
    assert stored[0]["id"] == crop.id
    assert stored[0]["farmerId"] == "f1"
    assert stored[0]["isApproved"] is False
    assert "createdAt" in stored[0]


def test_all_keeps_insertion_order():
    _, repo = make_repo()
    first = repo.insert(tomato(name="A"))
    second = repo.insert(tomato(name="B"))
    third = repo.insert(tomato(name="C"))

    assert [c.id for c in repo.all()] == [first.id, second.id, third.id]


def test_update_unknown_id_is_a_no_op():
    kv, repo = make_repo()
    assert repo.update_by_id("missing", {"price": 1}) is None
    assert kv.get_item(CROPS) is None


def test_update_accepts_stored_key_names():
    _, repo = make_repo()
    crop = repo.insert(tomato())

    updated = repo.update_by_id(crop.id, {"isApproved": True, "price": 25})
    assert updated.is_approved is True
    assert updated.price == 25
    assert repo.get(crop.id).price == 25


def test_delete_is_idempotent():
    _, repo = make_repo()
    crop = repo.insert(tomato())

    assert repo.delete_by_id(crop.id) is True
    assert repo.delete_by_id(crop.id) is False
    assert repo.all() == []


def test_require_raises_not_found():
    _, repo = make_repo()
    with pytest.raises(NotFoundError):
        repo.require("nope")


def test_unreadable_records_are_skipped():
    good = tomato().to_record()
    _, repo = make_repo({CROPS: json.dumps([{"id": "broken"}, good])})

    assert [c.id for c in repo.all()] == [good["id"]]


def test_records_sharing_an_id_all_survive_a_write():
    first = tomato(id="1700000000000", name="A").to_record()
    second = tomato(id="1700000000000", name="B").to_record()
    kv, repo = make_repo({CROPS: json.dumps([first, second])})

    assert [c.name for c in repo.all()] == ["A", "B"]
    repo.insert(tomato(name="C"))

    stored = json.loads(kv.get_item(CROPS))
    assert [r["name"] for r in stored] == ["A", "B", "C"]


def test_update_and_delete_apply_to_every_record_with_the_id():
    records = [tomato(id="dup", name="A").to_record(), tomato(id="dup", name="B").to_record(), tomato(name="C").to_record()]
    kv, repo = make_repo({CROPS: json.dumps(records)})

    updated = repo.update_by_id("dup", {"price": 5})
    assert updated.name == "A"
    assert [c.price for c in repo.all()] == [5, 5, 20]

    assert repo.delete_by_id("dup") is True
    assert [c.name for c in repo.all()] == ["C"]


def test_unreadable_records_are_written_back_untouched():
    broken = {"id": "broken", "note": "legacy"}
    good = tomato().to_record()
    kv, repo = make_repo({CROPS: json.dumps([broken, good])})

    repo.update_by_id(good["id"], {"price": 30})
    repo.insert(tomato(name="Onions"))
    repo.delete_by_id("missing")

    stored = json.loads(kv.get_item(CROPS))
    assert stored[0] == broken
    assert stored[1]["price"] == 30
    assert stored[2]["name"] == "Onions"


def test_update_skips_unreadable_record_with_matching_id():
    broken = {"id": "broken"}
    kv, repo = make_repo({CROPS: json.dumps([broken])})

    assert repo.update_by_id("broken", {"price": 1}) is None
    assert json.loads(kv.get_item(CROPS)) == [broken]
