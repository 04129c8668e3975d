"""
1) Read a family description and send it to the relation engine.
2) Merge the engine's graph into the local store, keeping names.
3) Validate the store.
4) Lay out the graph from a root person.
5) Store the graph with SQLite.
6) Plot the layout.
"""

import argparse
import logging
from pathlib import Path
import sqlite3
import sys

from database import create_database, load_store, save_store
from engine import DirectRelationEngine, sync
from errors import KinGraphError
from graph import build_graph, get_reachable_subgraph
from layout import extra_edges, layout
from models import GraphStore
from plotting import plot_layout, write_dot
from validation import validate_store


DEFAULT_ROOT = 0
DEFAULT_STEP = 10.0
MAX_WARNINGS_SHOWN = 10


def parse_name(value: str) -> tuple[int, str]:
    """Parse an `ID=NAME` option value."""
    person_id, sep, name = value.partition("=")
    if not sep or not name:
        raise argparse.ArgumentTypeError(f"expected ID=NAME, got {value!r}")
    try:
        return int(person_id), name
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid person id in {value!r}") from None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Lay out and plot a kinship graph.")
    parser.add_argument("description", type=Path, help="Path to the family description file.")
    parser.add_argument("--root", type=int, default=DEFAULT_ROOT, help="Id of the root person.")
    parser.add_argument(
        "--step", type=float, default=DEFAULT_STEP, help="Distance between related people."
    )
    parser.add_argument("--db", type=Path, help="SQLite file the store is loaded from and saved to.")
    parser.add_argument("--plot", type=Path, help="Image to plot to (png, svg or pdf).")
    parser.add_argument("--dot", type=Path, help="Graphviz file with pinned positions.")
    parser.add_argument(
        "--name",
        type=parse_name,
        action="append",
        default=[],
        metavar="ID=NAME",
        help="Set a display name. May be repeated.",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging.")
    return parser


def run(args: argparse.Namespace) -> int:
    conn = create_database(args.db) if args.db else None
    try:
        return run_pipeline(args, conn)
    finally:
        if conn is not None:
            conn.close()


def run_pipeline(args: argparse.Namespace, conn: sqlite3.Connection | None) -> int:
    store = GraphStore()
    if conn is not None:
        store = load_store(conn)
        print(f"Loaded {len(store)} people from SQLite: {args.db}")

    print(f"Reading family description: {args.description}")
    engine = DirectRelationEngine()
    sync(engine, store, args.description.read_text(encoding="utf-8"))
    print(f"  Store has {len(store)} people")
    for answer in engine.answers:
        print(f"  Query: {answer or 'not directly related'}")

    # People without a name are named as in the description
    for label, person_id in engine.labels.items():
        node = store.get(person_id)
        if node is not None and node.name is None:
            store.rename(person_id, label)
    for person_id, name in args.name:
        store.rename(person_id, name)

    print("Validating store...")
    warnings = validate_store(store)
    if warnings:
        print(f"  Found {len(warnings)} validation warnings:")
        for w in warnings[:MAX_WARNINGS_SHOWN]:
            print(f"    - {w}")
        if len(warnings) > MAX_WARNINGS_SHOWN:
            print(f"    ... and {len(warnings) - MAX_WARNINGS_SHOWN} more")
    else:
        print("  No validation issues found")

    print(f"Laying out from person {args.root}...")
    result = layout(store, args.root, args.step)
    print(f"  Placed {len(result.positions)} people with {len(result.edges)} edges")
    if store.nodes:
        reachable = get_reachable_subgraph(build_graph(store), args.root)
        # The graph also holds ids that are only relation targets
        unplaced = len(store) - len(set(reachable.nodes) & set(store.ids()))
        if unplaced:
            print(f"  {unplaced} people are not reachable from the root")
    extras = extra_edges(store, result)
    if extras:
        print(f"  {len(extras)} relations between placed people are not drawn")

    if conn is not None:
        print(f"Storing data in SQLite: {args.db}")
        save_store(conn, store)

    if args.plot:
        print(f"Plotting graph to: {args.plot}")
        plot_layout(store, result, args.step, args.plot)
    if args.dot:
        print(f"Writing Graphviz source to: {args.dot}")
        write_dot(store, result, args.dot)

    print("Done!")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        return run(args)
    except (KinGraphError, KeyError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
