from __future__ import annotations

from dotkv.document import DocumentStore, deep_merge, flatten, strict_equal, type_of, unflatten


def test_set_get_has_delete():
    doc = DocumentStore()
    doc.set("user.name", "Aris")
    assert doc.get("user.name") == "Aris"
    assert doc.get("user.missing", "dflt") == "dflt"
    assert doc.get("user.name.deeper", "dflt") == "dflt"
    assert doc.has("user")
    assert doc.delete("user.name") is True
    assert doc.delete("user.name") is False
    assert doc.delete("nope.nope") is False
    assert doc.data == {"user": {}}


def test_stored_null_is_present():
    doc = DocumentStore()
    doc.set("x", None)
    assert doc.has("x")
    assert doc.get("x", "dflt") is None
    assert doc.type("x") == "null"


def test_get_returns_copies():
    doc = DocumentStore()
    payload = {"tags": ["a"]}
    doc.set("p", payload)
    payload["tags"].append("mutated-outside")
    got = doc.get("p")
    got["tags"].append("mutated-copy")
    assert doc.get("p") == {"tags": ["a"]}


def test_deep_merge_unions_mappings_and_replaces_arrays():
    target = {"p": {"q": 1, "arr": [1, 2]}, "s": 1}
    deep_merge(target, {"p": {"r": 2, "arr": [3]}, "s": {"now": "map"}})
    assert target == {"p": {"q": 1, "arr": [3], "r": 2}, "s": {"now": "map"}}


def test_flatten_treats_arrays_as_leaves_and_skips_empty_mappings():
    tree = {"a": {"b": 1, "c": [1, {"d": 2}]}, "e": {}, "f": None}
    assert [tuple(e) for e in flatten(tree)] == [
        ("a.b", 1),
        ("a.c", [1, {"d": 2}]),
        ("f", None),
    ]


def test_unflatten_rebuilds_nested_tree():
    assert unflatten([("a.b", 1), ("a.c.d", 2), ("e", [1])]) == {"a": {"b": 1, "c": {"d": 2}}, "e": [1]}


def test_type_of():
    assert type_of(True) == "boolean"
    assert type_of(1) == "number"
    assert type_of(1.5) == "number"
    assert type_of("s") == "string"
    assert type_of([]) == "array"
    assert type_of({}) == "object"
    assert type_of(None) == "null"
    assert DocumentStore().type("missing") == "undefined"


def test_strict_equal_is_primitive_only():
    assert strict_equal(1, 1.0)
    assert strict_equal("a", "a")
    assert not strict_equal(1, True)
    assert not strict_equal("1", 1)
    assert not strict_equal({"a": 1}, {"a": 1})
    assert not strict_equal([1], [1])


def test_strict_equal_treats_tuples_and_mappings_as_containers():
    from types import MappingProxyType

    assert not strict_equal((1,), (1,))
    assert not strict_equal(MappingProxyType({"a": 1}), MappingProxyType({"a": 1}))


def test_deep_merge_reports_replaced_paths():
    target = {"k": 1, "p": {"child": 1, "keep": 2}, "m": {"x": 1}}
    replaced = deep_merge(target, {"k": {"fresh": 1}, "p": {"child": [2]}, "m": {"y": 2}, "new": 3})
    assert replaced == ["k", "p.child"]
    assert target == {"k": {"fresh": 1}, "p": {"child": [2], "keep": 2}, "m": {"x": 1, "y": 2}, "new": 3}
