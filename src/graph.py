"""NetworkX graph building and operations."""

import networkx as nx

from models import GraphStore, RelationKind


def build_graph(store: GraphStore) -> nx.MultiDiGraph:
    """
    Build a NetworkX multigraph from the store.

    One edge per stored relation, from the holder to the target, keyed by its
    position in the holder's relation list. Relations to unknown ids still add
    the target as a bare node so that dangling references stay visible.
    """
    G = nx.MultiDiGraph()

    # Note: use 'person_name' instead of 'name' to avoid conflict with pydot
    for node in store.nodes:
        G.add_node(node.id, person_name=node.name, sex=node.sex)

    for node in store.nodes:
        for ordinal, relation in enumerate(node.relations):
            G.add_edge(node.id, relation.target_id, key=ordinal, kind=relation.kind)

    return G


def get_reachable_subgraph(G: nx.MultiDiGraph, root_id: int) -> nx.MultiDiGraph:
    """
    Extract the subgraph of everyone reachable from `root_id` by following relations.

    This is the set of people the layout places.
    """
    if root_id not in G:
        raise ValueError(f"Person ID {root_id} not found in graph")

    reachable = nx.descendants(G, root_id) | {root_id}
    return G.subgraph(reachable).copy()


def get_kind_subgraph(G: nx.MultiDiGraph, kind: RelationKind) -> nx.DiGraph:
    """
    Extract a simple directed graph holding only relations of one kind.

    Every person in G is kept, related or not.
    """
    H = nx.DiGraph()
    H.add_nodes_from(G.nodes(data=True))
    H.add_edges_from((u, v) for u, v, data in G.edges(data=True) if data.get("kind") == kind)
    return H
