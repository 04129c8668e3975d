"""Data classes for kinship graph entities."""

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum


class Sex(Enum):
    MALE = "Male"
    FEMALE = "Female"


class RelationKind(Enum):
    """
    Kind of a relation held by a person.

    A PARENT relation on A pointing to X means "X is a parent of A"; CHILD means
    "X is a child of A". SIBLING and REPRODUCTIVE_PARTNER are symmetric.
    The values are the tags used by the relation engine.
    """

    PARENT = "Parent"
    CHILD = "Child"
    SIBLING = "Sibling"
    REPRODUCTIVE_PARTNER = "RP"

    @property
    def inverse(self) -> "RelationKind":
        if self is RelationKind.PARENT:
            return RelationKind.CHILD
        if self is RelationKind.CHILD:
            return RelationKind.PARENT
        return self


@dataclass
class Relation:
    kind: RelationKind
    target_id: int


@dataclass
class PersonNode:
    id: int
    sex: Sex
    name: str | None = None
    relations: list[Relation] = field(default_factory=list)  # order is the layout tie-break


@dataclass
class GraphStore:
    """
    Locally owned, metadata-bearing copy of the kinship graph.

    Nodes are kept sorted by id after every merge. The legacy merge assumes the
    ids form a dense range starting at 0, so that a node's position equals its id.
    """

    nodes: list[PersonNode] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.nodes)

    def __iter__(self) -> Iterator[PersonNode]:
        return iter(self.nodes)

    def sort(self):
        self.nodes.sort(key=lambda n: n.id)

    def ids(self) -> list[int]:
        return [n.id for n in self.nodes]

    def get(self, person_id: int) -> PersonNode | None:
        for node in self.nodes:
            if node.id == person_id:
                return node
        return None

    def rename(self, person_id: int, name: str | None):
        """Set the display name of a person. Only the store ever writes names."""
        node = self.get(person_id)
        if node is None:
            raise KeyError(f"Person ID {person_id} not found in store")
        node.name = name


@dataclass
class SnapshotRelation:
    kind: str  # "Parent", "Child", "RP" or "Sibling"
    id: int


@dataclass
class SnapshotNode:
    id: int
    sex: str  # "Male" or "Female"
    relations: list[SnapshotRelation] = field(default_factory=list)


@dataclass
class RelationEngineSnapshot:
    """One full, name-less recomputation of the graph returned by the relation engine."""

    nodes: list[SnapshotNode] = field(default_factory=list)


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class Edge:
    from_id: int
    to_id: int
    kind: RelationKind


@dataclass
class Layout:
    positions: dict[int, Point] = field(default_factory=dict)
    edges: list[Edge] = field(default_factory=list)
