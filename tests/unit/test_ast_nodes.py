import pytest

import ast_nodes as n


def test_key_value_list_index_is_last_write_wins():
    entries = [n.KeyValue("a", n.Integer(1)), n.KeyValue("b", n.Integer(2)), n.KeyValue("a", n.Integer(3))]
    obj = n.KeyValueList.from_entries(entries)
    assert len(obj) == 3
    assert [e.key for e in obj.entries] == ["a", "b", "a"]
    assert obj.index == {"a": n.Integer(3), "b": n.Integer(2)}
    assert obj["a"] == n.Integer(3)
    assert "b" in obj
    assert list(obj.keys()) == ["a", "b"]


def test_from_entries_rejects_non_pairs():
    with pytest.raises(TypeError) as ei:
        n.KeyValueList.from_entries([n.String("oops")])
    assert "expected KeyValue node, got String" in str(ei.value)


def test_to_kv_unpacks_pairs_and_fails_loudly_otherwise():
    assert n.to_kv(n.KeyValue("k", n.Float(1.5))) == ("k", n.Float(1.5))
    with pytest.raises(TypeError):
        n.to_kv(n.DEFAULT)


def test_default_is_an_empty_placeholder():
    assert n.DEFAULT == n.Default()
    assert n.KeyValueList() == n.KeyValueList.from_entries([])
    assert len(n.List()) == 0


def test_nodes_are_immutable():
    node = n.String("x")
    with pytest.raises(AttributeError):
        node.value = "y"


def test_index_is_read_only():
    obj = n.KeyValueList.from_entries([n.KeyValue("a", n.Integer(1))])
    with pytest.raises(TypeError):
        obj.index["b"] = n.Integer(9)
    assert dict(obj.index) == {"a": n.Integer(1)}


def test_plain_constructor_derives_index_from_entries():
    obj = n.KeyValueList([n.KeyValue("a", n.Integer(1)), n.KeyValue("a", n.Integer(2))])
    assert obj.entries == (n.KeyValue("a", n.Integer(1)), n.KeyValue("a", n.Integer(2)))
    assert obj.index == {"a": n.Integer(2)}
    with pytest.raises(TypeError):
        n.KeyValueList(entries=(), index={"x": n.Integer(1)})
    with pytest.raises(TypeError):
        n.KeyValueList([n.Integer(1)])


def test_object_nodes_are_hashable():
    obj = n.KeyValueList.from_entries([n.KeyValue("a", n.Integer(1))])
    same = n.KeyValueList.from_entries([n.KeyValue("a", n.Integer(1))])
    assert hash(obj) == hash(same)
    assert hash(n.List((obj, n.String("x")))) == hash(n.List((same, n.String("x"))))
    assert len({obj, same}) == 1
