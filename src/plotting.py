"""Visualization functions for laid out kinship graphs."""

import logging
from pathlib import Path

import matplotlib.pyplot as plt
from matplotlib.figure import Figure
import pydot

from layout import edge_path
from models import GraphStore, Layout, PersonNode, RelationKind, Sex


logger = logging.getLogger(__name__)

EDGE_COLORS = {
    RelationKind.PARENT: "#756B58",
    RelationKind.CHILD: "#F5B53D",
    RelationKind.REPRODUCTIVE_PARTNER: "#3E53F5",
    RelationKind.SIBLING: "#585B75",
}


def node_label(node: PersonNode) -> str:
    return node.name if node.name else f"#{node.id}"


def node_color(node: PersonNode) -> str:
    # Color by sex
    return "lightblue" if node.sex == Sex.MALE else "lightpink"


def draw_layout(store: GraphStore, layout: Layout, step_distance: float) -> Figure:
    """
    Draw a layout onto a new matplotlib figure.

    People are labeled boxes at their positions; edges follow `edge_path`, so
    parent and child edges are elbowed and sibling and partner edges are straight.
    """
    fig, ax = plt.subplots(figsize=(12, 9))

    for edge in layout.edges:
        path = edge_path(edge, layout.positions, step_distance)
        ax.plot(
            [p.x for p in path],
            [p.y for p in path],
            color=EDGE_COLORS[edge.kind],
            linewidth=2,
            zorder=1,
        )

    for node in store.nodes:
        position = layout.positions.get(node.id)
        if position is None:
            continue
        ax.text(
            position.x,
            position.y,
            node_label(node),
            ha="center",
            va="center",
            fontsize=10,
            zorder=2,
            bbox={"boxstyle": "round", "facecolor": node_color(node), "edgecolor": "black"},
        )

    if layout.positions:
        xs = [p.x for p in layout.positions.values()]
        ys = [p.y for p in layout.positions.values()]
        ax.set_xlim(min(xs) - step_distance, max(xs) + step_distance)
        ax.set_ylim(min(ys) - step_distance, max(ys) + step_distance)

    ax.set_aspect("equal")
    ax.axis("off")
    fig.tight_layout()
    return fig


def plot_layout(
    store: GraphStore, layout: Layout, step_distance: float, output_path: Path | None = None
):
    """
    Plot a layout.

    Args:
        store: Store holding names and sexes of the laid out people
        layout: Positions and edges from `layout.layout`
        step_distance: The step distance the layout was computed with
        output_path: Path to save the output image. If None, displays interactively.
    """
    fig = draw_layout(store, layout, step_distance)

    if output_path:
        # Determine format from extension
        ext = output_path.suffix.lower().lstrip(".")
        if ext not in ("png", "svg", "pdf"):
            ext = "png"

        fig.savefig(output_path, format=ext)
        plt.close(fig)
        logger.info("Graph saved to %s", output_path)
    else:
        plt.show()


def build_dot(store: GraphStore, layout: Layout) -> pydot.Dot:
    """
    Build a Graphviz graph with every position pinned.

    Render with `neato -n` so Graphviz keeps the positions. Graphviz's y axis
    points up, as the layout's does.
    """
    P = pydot.Dot(graph_type="graph")
    P.set("splines", "ortho")
    P.set("outputorder", "edgesfirst")

    for node in store.nodes:
        position = layout.positions.get(node.id)
        if position is None:
            continue
        P.add_node(
            pydot.Node(
                str(node.id),
                label=node_label(node),
                shape="box",
                style="rounded,filled",
                fillcolor=node_color(node),
                fontsize="10",
                pos=f"{position.x},{position.y}!",
            )
        )

    for edge in layout.edges:
        P.add_edge(
            pydot.Edge(
                str(edge.from_id),
                str(edge.to_id),
                color=EDGE_COLORS[edge.kind],
                label=edge.kind.value,
            )
        )

    return P


def write_dot(store: GraphStore, layout: Layout, output_path: Path):
    """Write the pinned DOT source of a layout."""
    build_dot(store, layout).write_raw(str(output_path))
    logger.info("DOT source saved to %s", output_path)
