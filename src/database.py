"""SQLite and JSON persistence for the graph store."""

import json
from pathlib import Path
import sqlite3

from models import GraphStore, PersonNode, Relation
from parsing import relation_kind_from_tag, sex_from_tag


def create_database(db_path: Path) -> sqlite3.Connection:
    """Create SQLite database with person and relation tables."""
    conn = sqlite3.connect(db_path)
    cursor = conn.cursor()

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS person (
            id INTEGER PRIMARY KEY,
            sex TEXT NOT NULL,
            name TEXT
        )
    """)

    # ordinal keeps each person's relation order, which the layout depends on
    cursor.execute("""
        CREATE TABLE IF NOT EXISTS relation (
            person_id INTEGER NOT NULL,
            ordinal INTEGER NOT NULL,
            kind TEXT NOT NULL,
            target_id INTEGER NOT NULL,
            PRIMARY KEY (person_id, ordinal),
            FOREIGN KEY (person_id) REFERENCES person(id)
        )
    """)

    conn.commit()
    return conn


def save_store(conn: sqlite3.Connection, store: GraphStore):
    """Replace the database contents with the store."""
    cursor = conn.cursor()
    cursor.execute("DELETE FROM relation")
    cursor.execute("DELETE FROM person")

    cursor.executemany(
        "INSERT INTO person (id, sex, name) VALUES (?, ?, ?)",
        [(p.id, p.sex.value, p.name) for p in store.nodes],
    )

    cursor.executemany(
        """
        INSERT INTO relation (person_id, ordinal, kind, target_id)
        VALUES (?, ?, ?, ?)
        """,
        [
            (p.id, ordinal, r.kind.value, r.target_id)
            for p in store.nodes
            for ordinal, r in enumerate(p.relations)
        ],
    )

    conn.commit()


def load_store(conn: sqlite3.Connection) -> GraphStore:
    """Load a store from the database, sorted by id with relation order preserved."""
    cursor = conn.cursor()

    nodes: dict[int, PersonNode] = {}
    cursor.execute("SELECT id, sex, name FROM person ORDER BY id")
    for row in cursor.fetchall():
        nodes[row[0]] = PersonNode(id=row[0], sex=sex_from_tag(row[1]), name=row[2])

    cursor.execute("SELECT person_id, kind, target_id FROM relation ORDER BY person_id, ordinal")
    for row in cursor.fetchall():
        nodes[row[0]].relations.append(Relation(relation_kind_from_tag(row[1]), row[2]))

    return GraphStore(nodes=list(nodes.values()))


def store_to_dict(store: GraphStore) -> dict:
    """Interchange form: the relation engine's node shape plus names."""
    return {
        "nodes": [
            {
                "id": p.id,
                "sex": p.sex.value,
                "name": p.name,
                "relations": [{"kind": r.kind.value, "id": r.target_id} for r in p.relations],
            }
            for p in store.nodes
        ]
    }


def store_from_dict(data: dict) -> GraphStore:
    return GraphStore(
        nodes=[
            PersonNode(
                id=int(p["id"]),
                sex=sex_from_tag(p["sex"]),
                name=p.get("name"),
                relations=[
                    Relation(relation_kind_from_tag(r["kind"]), int(r["id"]))
                    for r in p.get("relations", [])
                ],
            )
            for p in data.get("nodes", [])
        ]
    )


def save_json(path: Path, store: GraphStore):
    path.write_text(json.dumps(store_to_dict(store), indent=2), encoding="utf-8")


def load_json(path: Path) -> GraphStore:
    return store_from_dict(json.loads(path.read_text(encoding="utf-8")))
