"""Deterministic single-pass layout of a kinship graph."""

import logging

from errors import RootNotFound
from models import Edge, GraphStore, Layout, PersonNode, Point, RelationKind, Sex


logger = logging.getLogger(__name__)

# Vertical direction of each relation kind, in units of the step distance
VERTICAL_STEP = {
    RelationKind.PARENT: 1,
    RelationKind.CHILD: -1,
    RelationKind.SIBLING: 0,
    RelationKind.REPRODUCTIVE_PARTNER: 0,
}


def side(node: PersonNode) -> int:
    """Horizontal side a newly discovered person is placed on: males left, females right."""
    return -1 if node.sex == Sex.MALE else 1


def step(origin: Point, kind: RelationKind, discovered: PersonNode, step_distance: float) -> Point:
    """Position of a person discovered from `origin` through a relation of the given kind."""
    return Point(
        origin.x + side(discovered) * step_distance,
        origin.y + VERTICAL_STEP[kind] * step_distance,
    )


def layout(
    store: GraphStore,
    root_id: int,
    step_distance: float,
    origin: Point = Point(0.0, 0.0),
) -> Layout:
    """
    Place every person reachable from `root_id` and list the edges used to reach them.

    Depth-first with an explicit stack. At each step the first relation of the
    current person (in stored order) whose target has not been visited is followed;
    the target is placed relative to the current person and pushed. A person with
    no unvisited relations is popped. Positions are never revised once set, so a
    person reachable along several chains is drawn with only the first edge that
    reached it.

    Returns an empty layout for an empty store. Raises RootNotFound if the root is
    not in a non-empty store.
    """
    if not store.nodes:
        return Layout()

    nodes = {node.id: node for node in store.nodes}
    if root_id not in nodes:
        raise RootNotFound(root_id)

    result = Layout(positions={root_id: origin})
    visited = {root_id}
    stack = [root_id]

    while stack:
        current = nodes[stack[-1]]

        chosen = None
        for relation in current.relations:
            if relation.target_id in visited:
                continue
            if relation.target_id not in nodes:
                logger.warning(
                    "Skipping %s relation from %d to unknown person %d",
                    relation.kind.value,
                    current.id,
                    relation.target_id,
                )
                # Mark it so the warning fires once and the scan can move past it
                visited.add(relation.target_id)
                continue
            chosen = relation
            break

        if chosen is None:
            stack.pop()
            continue

        discovered = nodes[chosen.target_id]
        result.positions[discovered.id] = step(
            result.positions[current.id], chosen.kind, discovered, step_distance
        )
        result.edges.append(Edge(from_id=current.id, to_id=discovered.id, kind=chosen.kind))
        visited.add(discovered.id)
        stack.append(discovered.id)

    logger.debug(
        "Laid out %d of %d people from root %d", len(result.positions), len(nodes), root_id
    )
    return result


def edge_path(edge: Edge, positions: dict[int, Point], step_distance: float) -> list[Point]:
    """
    Polyline for an edge, in global coordinates.

    Parent and child edges are elbowed: from the discovering person, step vertically
    by the step distance toward the relation's direction, then across to the
    discovered person's x. Sibling and partner edges are a straight segment.
    """
    start = positions[edge.from_id]
    end = positions[edge.to_id]

    dy = VERTICAL_STEP[edge.kind] * step_distance
    if dy == 0:
        return [start, end]

    elbow_y = start.y + dy
    path = [start, Point(start.x, elbow_y), Point(end.x, elbow_y)]
    if path[-1] != end:
        path.append(end)
    return path


def extra_edges(store: GraphStore, result: Layout) -> list[Edge]:
    """
    Relations between already positioned people that the traversal did not draw.

    Each unordered pair is listed once, from the first person (in store order) that
    holds the relation. Pairs joined by a traversed edge are left out.
    """
    drawn = {frozenset((e.from_id, e.to_id)) for e in result.edges}
    extras = []
    for node in store.nodes:
        if node.id not in result.positions:
            continue
        for relation in node.relations:
            pair = frozenset((node.id, relation.target_id))
            if relation.target_id not in result.positions or len(pair) == 1 or pair in drawn:
                continue
            drawn.add(pair)
            extras.append(Edge(from_id=node.id, to_id=relation.target_id, kind=relation.kind))
    return extras
