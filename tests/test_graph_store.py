import numpy as np
import pytest

from graphunit.exceptions import (
    ConstraintViolation,
    GraphIntegrityError,
    InvalidPropertyValue,
    NotFoundError,
)
from graphunit.graph import Graph, GraphStore, Node, Relationship, read_graph
from graphunit.policy import InclusionPolicy, nodes_without_label


def test_store_creates_and_reads_elements(store):
    a = store.create_node("Person", name="Michal")
    b = store.create_node("Company", name="GraphAware")
    rel = store.create_relationship(a.id, b.id, "WORKS_FOR", since=2014)

    assert store.node_count() == 2
    assert store.relationship_count() == 1
    assert store.get_node(a.id).labels == frozenset({"Person"})
    assert store.get_node(b.id).properties["name"] == "GraphAware"

    fetched = store.get_relationship(rel.id)
    assert (fetched.start, fetched.end, fetched.type) == (a.id, b.id, "WORKS_FOR")
    assert fetched.properties["since"] == 2014
    assert [r.id for r in store.relationships_of(a.id)] == [rel.id]


def test_parallel_relationships_and_self_loops(store):
    a = store.create_node()
    b = store.create_node()
    store.create_relationship(a.id, b.id, "CHILD")
    store.create_relationship(a.id, b.id, "CHILD")
    loop = store.create_relationship(a.id, a.id, "SELF")

    assert store.relationship_count() == 3
    assert len(store.relationships_of(a.id)) == 3
    assert loop.start == loop.end == a.id


def test_ids_are_never_reused(store):
    first = store.create_node()
    store.delete_node(first.id)
    second = store.create_node()
    assert second.id != first.id


def test_connected_node_cannot_be_deleted(store):
    a = store.create_node()
    b = store.create_node()
    rel = store.create_relationship(a.id, b.id, "REL")

    with pytest.raises(ConstraintViolation):
        store.delete_node(a.id)

    store.delete_relationship(rel.id)
    store.delete_node(a.id)
    assert not store.has_node(a.id)


def test_missing_elements_raise_not_found(store):
    with pytest.raises(NotFoundError):
        store.get_node(42)
    with pytest.raises(NotFoundError):
        store.delete_relationship(7)
    with pytest.raises(NotFoundError):
        store.create_relationship(0, 1, "REL")


def test_properties_are_validated_and_none_removes(store):
    node = store.create_node(name="x", gone=None)
    assert "gone" not in store.get_node(node.id).properties

    store.set_node_property(node.id, "name", None)
    assert store.get_node(node.id).properties == {}

    with pytest.raises(InvalidPropertyValue):
        store.set_node_property(node.id, "bad", {"a": 1})
    with pytest.raises(InvalidPropertyValue):
        store.create_node(bad=[1, "a"])


def test_labels_can_be_added_and_removed(store):
    node = store.create_node("A")
    store.add_label(node.id, "B")
    store.remove_label(node.id, "A")
    assert store.get_node(node.id).labels == frozenset({"B"})


def test_transaction_rolls_back_on_error(store):
    kept = store.create_node("Kept", value=1)

    with pytest.raises(RuntimeError):
        with store.transaction():
            store.create_node("Lost")
            store.set_node_property(kept.id, "value", 2)
            store.add_label(kept.id, "Changed")
            raise RuntimeError("boom")

    assert store.node_count() == 1
    assert store.get_node(kept.id).properties["value"] == 1
    assert store.get_node(kept.id).labels == frozenset({"Kept"})


def test_nested_transactions_join_the_outer_one(store):
    with pytest.raises(ValueError):
        with store.transaction():
            store.create_node()
            with store.transaction():
                store.create_node()
            raise ValueError("outer failure")

    assert store.node_count() == 0


def test_token_registry_outlives_deleted_elements(store):
    a = store.create_node("Accident", accident="dummy")
    b = store.create_node()
    rel = store.create_relationship(a.id, b.id, "ACCIDENT")
    store.delete_relationship(rel.id)
    store.delete_node(a.id)

    assert "Accident" in store.all_known_labels()
    assert "ACCIDENT" in store.all_known_relationship_types()
    assert "accident" in store.all_known_property_keys()
    assert store.labels_in_use() == set()

    snapshot = read_graph(store)
    assert snapshot.node_count() == 1
    assert snapshot.relationship_count() == 0


def test_clone_is_independent(store):
    node = store.create_node("A", values=np.array([1, 2]))
    copy = store.clone()
    copy.add_label(node.id, "B")
    copy.create_node()

    assert store.node_count() == 1
    assert store.get_node(node.id).labels == frozenset({"A"})


def test_snapshot_applies_policy_and_drops_dangling_relationships(store):
    a = store.create_node("Keep")
    b = store.create_node("Keep")
    hidden = store.create_node("ChangeSet")
    store.create_relationship(a.id, b.id, "REL")
    store.create_relationship(a.id, hidden.id, "REL")
    store.create_relationship(b.id, a.id, "NEXT")

    policy = InclusionPolicy(
        node=nodes_without_label("ChangeSet"),
        relationship=lambda rel: rel.type != "NEXT",
    )
    snapshot = read_graph(store, policy)

    assert set(snapshot.nodes) == {a.id, b.id}
    assert snapshot.relationship_count() == 1
    assert [r.type for r in snapshot.relationships_between(a.id, b.id)] == ["REL"]
    assert snapshot.relationships_between(b.id, a.id) == []
    assert snapshot.out_degree(a.id) == 1
    assert snapshot.in_degree(b.id) == 1


def test_snapshot_is_immutable_after_store_changes(store):
    node = store.create_node(name="before")
    snapshot = read_graph(store)
    store.set_node_property(node.id, "name", "after")
    store.create_node()

    assert snapshot.node_count() == 1
    assert snapshot.get_node(node.id).properties["name"] == "before"
    with pytest.raises(TypeError):
        snapshot.nodes[99] = node


def test_graph_rejects_dangling_relationships():
    node = Node.create(1, ["A"])
    rel = Relationship.create(10, "REL", 1, 2)
    with pytest.raises(GraphIntegrityError):
        Graph([node], [rel])


def test_describe_renders_labels_and_properties():
    node = Node.create(1, ["Person", "Human"], {"name": "Michal", "age": 30})
    rel = Relationship.create(2, "WORKS_FOR", 1, 1, {"since": 2014})
    assert node.describe() == "(:Human:Person {age: 30, name: 'Michal'})"
    assert rel.describe() == "[:WORKS_FOR {since: 2014}]"
    assert Node.create(3).describe() == "()"


def test_store_executes_scripts(store):
    store.execute('{"nodes": [{"key": "a", "labels": ["A"]}, {"key": "b"}],'
                  ' "relationships": [{"start": "a", "type": "R", "end": "b"}]}')
    assert store.node_count() == 2
    assert store.relationship_count() == 1


def test_relationship_properties_may_share_parameter_names(store):
    a = store.create_node()
    b = store.create_node()
    rel = store.create_relationship(
        a.id, b.id, "R", self=1, start=2013, end=2014, type="x"
    )

    assert (rel.start, rel.end, rel.type) == (a.id, b.id, "R")
    assert dict(rel.properties) == {"self": 1, "start": 2013, "end": 2014, "type": "x"}


def test_snapshot_does_not_share_array_values(store):
    values = [1, 2]
    array = np.array([3, 4])
    node = store.create_node(number=values, other=array)
    snapshot = read_graph(store)

    values.append(3)
    array[0] = 99
    store.set_node_property(node.id, "later", values)
    values.append(4)

    properties = snapshot.get_node(node.id).properties
    assert list(properties["number"]) == [1, 2]
    assert list(properties["other"]) == [3, 4]
    assert list(store.get_node(node.id).properties["later"]) == [1, 2, 3]
