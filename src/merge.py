"""Reconciliation of relation engine snapshots into the local graph store."""

import logging
from dataclasses import dataclass, field

from models import GraphStore, PersonNode, Relation, RelationEngineSnapshot
from parsing import convert_relations, sex_from_tag


logger = logging.getLogger(__name__)


def merge(store: GraphStore, snapshot: RelationEngineSnapshot):
    """
    Merge a freshly recomputed, name-less snapshot into the store, in place.

    Correspondence is positional: after sorting both sides by id, store position i
    is matched with snapshot position i. This relies on ids forming a dense range
    starting at 0.

    - Store longer than snapshot: truncated to the snapshot's length.
    - Store shorter than snapshot: new nodes appended with no name.
    - Every position gets the snapshot's relations; name and sex are left alone.

    All tags are converted before anything is written, so an InvalidRelationTag or
    InvalidSexTag leaves the store exactly as it was.
    """
    snapshot_nodes = sorted(snapshot.nodes, key=lambda n: n.id)
    n = len(snapshot_nodes)

    # Convert everything up front
    converted: list[list[Relation]] = [convert_relations(node.relations) for node in snapshot_nodes]
    old_len = len(store.nodes)
    new_sexes = [sex_from_tag(node.sex) for node in snapshot_nodes[old_len:]]

    store.sort()

    if old_len > n:
        del store.nodes[n:]

    for offset, sex in enumerate(new_sexes):
        i = old_len + offset
        store.nodes.append(PersonNode(id=snapshot_nodes[i].id, sex=sex, name=None))

    for i in range(n):
        store.nodes[i].relations = list(converted[i])

    logger.debug(
        "Merged snapshot of %d nodes into store of %d nodes (now %d)", n, old_len, len(store.nodes)
    )


@dataclass
class MergeReport:
    added: list[int] = field(default_factory=list)
    removed: list[int] = field(default_factory=list)
    kept: list[int] = field(default_factory=list)


def merge_by_id(store: GraphStore, snapshot: RelationEngineSnapshot) -> MergeReport:
    """
    Merge a snapshot into the store by id rather than by position.

    Ids in both keep their name and sex and take the snapshot's relations, ids only
    in the snapshot are added without a name, and ids only in the store are removed.
    Does not depend on ids being dense. Leaves the store untouched on a bad tag.
    """
    snapshot_nodes = sorted(snapshot.nodes, key=lambda n: n.id)
    existing = {node.id: node for node in store.nodes}

    # Convert everything up front
    converted = []
    for snap_node in snapshot_nodes:
        relations = convert_relations(snap_node.relations)
        sex = None if snap_node.id in existing else sex_from_tag(snap_node.sex)
        converted.append((snap_node.id, sex, relations))

    merged: list[PersonNode] = []
    report = MergeReport()
    for person_id, sex, relations in converted:
        node = existing.get(person_id)
        if node is None:
            node = PersonNode(id=person_id, sex=sex, name=None)
            report.added.append(person_id)
        else:
            report.kept.append(person_id)
        node.relations = relations
        merged.append(node)

    snapshot_ids = {person_id for person_id, _, _ in converted}
    report.removed = sorted(i for i in existing if i not in snapshot_ids)
    store.nodes[:] = merged

    logger.debug(
        "Merged by id: %d added, %d removed, %d kept",
        len(report.added),
        len(report.removed),
        len(report.kept),
    )
    return report
