import pytest

from errors import RootNotFound
from layout import edge_path, extra_edges, layout
from models import Edge, GraphStore, PersonNode, Point, Relation, RelationKind, Sex


P = RelationKind.PARENT
C = RelationKind.CHILD
S = RelationKind.SIBLING
RP = RelationKind.REPRODUCTIVE_PARTNER


def person(person_id, sex, *relations):
    return PersonNode(person_id, sex, None, [Relation(kind, target) for kind, target in relations])


def test_parents_are_placed_above_on_their_side(family_store):
    result = layout(family_store, 0, 10)

    assert result.positions == {0: Point(0, 0), 1: Point(-10, 10), 2: Point(10, 10)}
    assert result.edges == [Edge(0, 1, P), Edge(0, 2, P)]


def test_origin_offsets_every_position(family_store):
    result = layout(family_store, 0, 10, origin=Point(100, 50))

    assert result.positions == {0: Point(100, 50), 1: Point(90, 60), 2: Point(110, 60)}


def test_child_and_sideways_rules():
    store = GraphStore(
        nodes=[
            person(0, Sex.FEMALE, (C, 1), (S, 2), (RP, 3)),
            person(1, Sex.FEMALE),
            person(2, Sex.MALE),
            person(3, Sex.MALE),
        ]
    )

    result = layout(store, 0, 5)

    assert result.positions[1] == Point(5, -5)
    assert result.positions[2] == Point(-5, 0)
    assert result.positions[3] == Point(-5, 0)
    assert [e.kind for e in result.edges] == [C, S, RP]


def test_traversal_is_depth_first_in_stored_order():
    # 0 -> 1 -> 3 is followed before 0 -> 2
    store = GraphStore(
        nodes=[
            person(0, Sex.MALE, (P, 1), (P, 2)),
            person(1, Sex.MALE, (C, 0), (S, 3)),
            person(2, Sex.FEMALE, (C, 0)),
            person(3, Sex.FEMALE, (S, 1)),
        ]
    )

    result = layout(store, 0, 10)

    assert result.edges == [Edge(0, 1, P), Edge(1, 3, S), Edge(0, 2, P)]
    assert result.positions[3] == Point(0, 10)


def test_cycle_is_drawn_with_first_edge_only():
    # 2 is reachable as 0's sibling and as 1's child; only the first chain is drawn
    store = GraphStore(
        nodes=[
            person(0, Sex.MALE, (P, 1), (S, 2)),
            person(1, Sex.FEMALE, (C, 0), (C, 2)),
            person(2, Sex.FEMALE, (P, 1), (S, 0)),
        ]
    )

    result = layout(store, 0, 10)

    assert result.edges == [Edge(0, 1, P), Edge(1, 2, C)]
    assert result.positions[2] == Point(20, 0)
    assert extra_edges(store, result) == [Edge(0, 2, S)]


def test_unreachable_people_are_left_out():
    store = GraphStore(
        nodes=[
            person(0, Sex.MALE, (S, 1)),
            person(1, Sex.FEMALE, (S, 0)),
            person(2, Sex.MALE, (S, 3)),
            person(3, Sex.MALE, (S, 2)),
        ]
    )

    result = layout(store, 0, 10)

    assert set(result.positions) == {0, 1}
    assert all(e.from_id in (0, 1) and e.to_id in (0, 1) for e in result.edges)


def test_layout_is_deterministic(family_store):
    assert layout(family_store, 0, 10) == layout(family_store, 0, 10)


def test_empty_store_gives_empty_layout():
    result = layout(GraphStore(), 42, 10)

    assert result.positions == {}
    assert result.edges == []


def test_missing_root_raises(family_store):
    with pytest.raises(RootNotFound) as excinfo:
        layout(family_store, 9, 10)

    assert excinfo.value.root_id == 9


def test_relation_to_unknown_person_is_skipped(caplog):
    store = GraphStore(nodes=[person(0, Sex.MALE, (P, 7), (P, 1)), person(1, Sex.FEMALE)])

    result = layout(store, 0, 10)

    assert set(result.positions) == {0, 1}
    assert result.edges == [Edge(0, 1, P)]
    assert "unknown person 7" in caplog.text


def test_parent_edge_path_is_elbowed_in_global_coordinates():
    positions = {0: Point(100, 100), 1: Point(90, 110)}

    path = edge_path(Edge(0, 1, P), positions, 10)

    assert path == [Point(100, 100), Point(100, 110), Point(90, 110)]


def test_child_edge_path_steps_down():
    positions = {4: Point(0, 0), 5: Point(10, -10)}

    assert edge_path(Edge(4, 5, C), positions, 10) == [Point(0, 0), Point(0, -10), Point(10, -10)]


def test_sibling_edge_path_is_straight():
    positions = {0: Point(3, 4), 1: Point(-7, 4)}

    assert edge_path(Edge(0, 1, S), positions, 10) == [Point(3, 4), Point(-7, 4)]
    assert edge_path(Edge(0, 1, RP), positions, 10) == [Point(3, 4), Point(-7, 4)]


def test_edge_paths_follow_nested_positions(family_store):
    # Grandparent edges start from the parent's final position, not the origin
    family_store.nodes[1].relations = [Relation(C, 0), Relation(P, 3)]
    family_store.nodes.append(person(3, Sex.FEMALE, (C, 1)))

    result = layout(family_store, 0, 10)
    grandparent = next(e for e in result.edges if e.to_id == 3)

    assert edge_path(grandparent, result.positions, 10) == [
        Point(-10, 10),
        Point(-10, 20),
        Point(0, 20),
    ]
