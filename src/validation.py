"""Structural validation of a kinship graph store."""

import networkx as nx

from graph import build_graph, get_kind_subgraph
from models import GraphStore, RelationKind


def validate_store(store: GraphStore) -> list[str]:
    """
    Validate the store for:
    - Ids that are not a dense range from 0 (the positional merge relies on it)
    - Relations to people that are not in the store
    - People related to themselves
    - More than two parents
    - Reproductive partners of the same sex
    - Relations without their inverse
    - Cycles in parent relations

    Returns a list of warning messages.
    """
    warnings: list[str] = []

    ids = sorted(store.ids())
    if ids != list(range(len(ids))):
        warnings.append(f"Ids are not a dense range starting at 0: {ids}")

    nodes = {node.id: node for node in store.nodes}

    for node in store.nodes:
        parents = 0
        for relation in node.relations:
            target = nodes.get(relation.target_id)

            if relation.target_id == node.id:
                warnings.append(f"Person {node.id} is related to themselves")
                continue
            if target is None:
                warnings.append(
                    f"Person {node.id} has a {relation.kind.value} relation to unknown person "
                    f"{relation.target_id}"
                )
                continue

            if relation.kind == RelationKind.PARENT:
                parents += 1
            elif relation.kind == RelationKind.REPRODUCTIVE_PARTNER and target.sex == node.sex:
                # Only report each pair once
                if node.id < target.id:
                    warnings.append(
                        f"Persons {node.id} and {target.id} are reproductive partners of the same sex"
                    )

            inverse = relation.kind.inverse
            if not any(r.kind == inverse and r.target_id == node.id for r in target.relations):
                warnings.append(
                    f"Person {node.id} has a {relation.kind.value} relation to {target.id} "
                    f"without the inverse {inverse.value} relation"
                )

        if parents > 2:
            warnings.append(f"Person {node.id} has {parents} parents")

    # Check for cycles
    parent_graph = get_kind_subgraph(build_graph(store), RelationKind.PARENT)
    try:
        cycle = nx.find_cycle(parent_graph, orientation="original")
        cycle_nodes = [edge[0] for edge in cycle]
        warnings.append(f"Cycle detected in parent relations: {cycle_nodes}")
    except nx.NetworkXNoCycle:
        pass  # No cycle found, which is good

    return warnings
