from dynview.core.properties import MISSING, PropertyBag


def test_missing_key_returns_sentinel():
    bag = PropertyBag()
    assert bag.get("nope") is MISSING
    assert bag.get("nope", 5) == 5
    assert not MISSING
    assert repr(MISSING) == "MISSING"


def test_set_reports_change():
    bag = PropertyBag()
    assert bag.set("a", 1) is True
    assert bag.set("a", 1) is False
    assert bag.set("a", 2) is True
    assert bag.get("a") == 2


def test_none_is_a_stored_value():
    bag = PropertyBag()
    assert bag.set("a", None) is True
    assert bag.get("a") is None
    assert "a" in bag
    assert bag.set("a", None) is False


def test_equal_values_of_different_types_are_a_change():
    bag = PropertyBag(a=1)
    assert bag.set("a", True) is True
    assert bag.set("a", 1.0) is True


def test_keys_are_case_sensitive():
    bag = PropertyBag(Name="x")
    assert bag.contains("Name")
    assert not bag.contains("name")


def test_insertion_order_preserved():
    bag = PropertyBag()
    for key in ("z", "a", "m"):
        bag.set(key, key)
    bag.set("a", "again")
    assert list(bag) == ["z", "a", "m"]
    assert [k for k, _ in bag.items()] == ["z", "a", "m"]


def test_add_remove_list():
    bag = PropertyBag()
    bag.add(x=1, y=2)
    assert bag.list() == {"x": 1, "y": 2}
    assert bag.remove("x") is True
    assert bag.remove("x") is False
    assert bag.list() == {"y": 2}
    assert len(bag) == 1


def test_list_is_a_copy():
    bag = PropertyBag(x=1)
    snapshot = bag.list()
    snapshot["x"] = 99
    assert bag.get("x") == 1
