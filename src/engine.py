"""Relation engine boundary and the engines used behind it."""

import copy
import logging
from collections.abc import Iterable
from typing import Protocol

from errors import DescriptionError
from merge import merge
from models import (
    GraphStore,
    PersonNode,
    RelationEngineSnapshot,
    RelationKind,
    Sex,
    SnapshotNode,
    SnapshotRelation,
)
from parsing import Query, Statement, parse_description


logger = logging.getLogger(__name__)


class RelationEngine(Protocol):
    """Derives the complete relation graph of a family from its description."""

    def describe(self, text: str):
        """Extend the engine's accumulated family description."""
        ...

    def snapshot(self) -> RelationEngineSnapshot:
        """Return the full current relation graph, without names."""
        ...

    def relation_between(self, a: PersonNode, b: PersonNode) -> str:
        """Return a display label for how `b` is related to `a`."""
        ...


class StaticRelationEngine:
    """Engine returning fixed snapshots, in order. The last one repeats."""

    def __init__(self, snapshots: Iterable[RelationEngineSnapshot], labels: dict | None = None):
        self._snapshots = list(snapshots)
        self._labels = labels or {}
        self.descriptions: list[str] = []

    def describe(self, text: str):
        self.descriptions.append(text)

    def snapshot(self) -> RelationEngineSnapshot:
        if not self._snapshots:
            return RelationEngineSnapshot()
        if len(self._snapshots) > 1:
            return self._snapshots.pop(0)
        return copy.deepcopy(self._snapshots[0])

    def relation_between(self, a: PersonNode, b: PersonNode) -> str:
        return self._labels.get((a.id, b.id), "")


# Display labels for a direct relation, by kind and sex of the related person
RELATION_LABELS = {
    (RelationKind.PARENT, Sex.MALE): "father",
    (RelationKind.PARENT, Sex.FEMALE): "mother",
    (RelationKind.CHILD, Sex.MALE): "son",
    (RelationKind.CHILD, Sex.FEMALE): "daughter",
    (RelationKind.SIBLING, Sex.MALE): "brother",
    (RelationKind.SIBLING, Sex.FEMALE): "sister",
    (RelationKind.REPRODUCTIVE_PARTNER, Sex.MALE): "partner",
    (RelationKind.REPRODUCTIVE_PARTNER, Sex.FEMALE): "partner",
}


class DirectRelationEngine:
    """
    Engine that records stated relations and their inverses.

    Descriptions are lines of the form `NAME M|F RELATION NAME M|F`, where
    `A M PARENT B F` means "A is a parent of B". People get dense ids from 0 in
    order of first mention. The only derived relation is that the two parents
    of a child become reproductive partners; a third parent is rejected.
    `A TO B` lines are queries; their answers are kept in `answers`. A query
    naming someone not yet described is an error.
    """

    def __init__(self):
        self.labels: dict[str, int] = {}
        self._sexes: list[Sex] = []
        self._relations: list[list[tuple[RelationKind, int]]] = []
        self.answers: list[str] = []

    def describe(self, text: str):
        # Work on copies so a bad line leaves the description untouched
        items = parse_description(text)

        labels = dict(self.labels)
        sexes = list(self._sexes)
        relations = [list(r) for r in self._relations]

        def person_id(name: str, sex: Sex) -> int:
            if name not in labels:
                labels[name] = len(sexes)
                sexes.append(sex)
                relations.append([])
            return labels[name]

        queries = []
        for item in items:
            if isinstance(item, Query):
                queries.append(item)
                continue
            a = person_id(item.name, item.sex)
            b = person_id(item.other_name, item.other_sex)
            if item.kind == RelationKind.PARENT:
                add_parent(relations, a, b, item)
            elif item.kind == RelationKind.CHILD:
                add_parent(relations, b, a, item)
            else:
                add_symmetric(relations, a, b, item.kind)

        for query in queries:
            check_query(query, labels)

        self.labels, self._sexes, self._relations = labels, sexes, relations
        logger.debug("Description now has %d people", len(self._sexes))

        for query in queries:
            self.answers.append(self.query(query))

    def query(self, query: Query) -> str:
        check_query(query, self.labels)
        a = self.labels[query.name]
        b = self.labels[query.other_name]
        return self.relation_between(
            PersonNode(id=a, sex=self._sexes[a]), PersonNode(id=b, sex=self._sexes[b])
        )

    def snapshot(self) -> RelationEngineSnapshot:
        return RelationEngineSnapshot(
            nodes=[
                SnapshotNode(
                    id=i,
                    sex=sex.value,
                    relations=[SnapshotRelation(kind=k.value, id=t) for k, t in self._relations[i]],
                )
                for i, sex in enumerate(self._sexes)
            ]
        )

    def relation_between(self, a: PersonNode, b: PersonNode) -> str:
        """Comma separated labels of how `b` is directly related to `a`, e.g. "mother"."""
        if a.id >= len(self._relations) or b.id >= len(self._sexes):
            return ""
        labels = [
            RELATION_LABELS[(kind, self._sexes[b.id])]
            for kind, target in self._relations[a.id]
            if target == b.id
        ]
        return ",".join(labels)


def check_query(query: Query, labels: dict[str, int]):
    """Fail a query that names someone the description never mentions."""
    for name in (query.name, query.other_name):
        if name not in labels:
            raise DescriptionError(query.line_number, query.line, f"unknown person {name}")


def add_symmetric(relations: list[list[tuple[RelationKind, int]]], a: int, b: int, kind: RelationKind):
    """Record `kind` from a to b and from b to a, once each."""
    if (kind, b) not in relations[a]:
        relations[a].append((kind, b))
    if (kind, a) not in relations[b]:
        relations[b].append((kind, a))


def add_parent(relations: list[list[tuple[RelationKind, int]]], parent: int, child: int, statement: Statement):
    """Make `parent` a parent of `child`, pairing them with the child's other parent."""
    parents = [t for k, t in relations[child] if k == RelationKind.PARENT]
    if parent in parents:
        return
    if len(parents) >= 2:
        raise DescriptionError(statement.line_number, statement.line, "child already has two parents")
    if parents:
        add_symmetric(relations, parent, parents[0], RelationKind.REPRODUCTIVE_PARTNER)
    relations[child].append((RelationKind.PARENT, parent))
    relations[parent].append((RelationKind.CHILD, child))


def sync(engine: RelationEngine, store: GraphStore, text: str):
    """
    Send a description to the engine and merge the resulting graph into the store.

    If the engine fails the error propagates and the store is not touched.
    """
    engine.describe(text)
    snapshot = engine.snapshot()
    merge(store, snapshot)
    logger.info("Store synced: %d people", len(store))
