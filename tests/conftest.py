import matplotlib

matplotlib.use("Agg")

import pytest

from models import GraphStore, PersonNode, Relation, RelationKind, Sex
from parsing import parse_snapshot


def _snapshot_from(nodes):
    """Build a snapshot from (id, sex, [(kind_tag, target), ...]) tuples."""
    return parse_snapshot(
        {
            "nodes": [
                {
                    "id": person_id,
                    "sex": sex,
                    "relations": [{"kind": kind, "id": target} for kind, target in relations],
                }
                for person_id, sex, relations in nodes
            ]
        }
    )


@pytest.fixture
def make_snapshot():
    return _snapshot_from


@pytest.fixture
def family_store():
    """John with his parents Gabe and Izy."""
    return GraphStore(
        nodes=[
            PersonNode(
                0,
                Sex.MALE,
                "John",
                [Relation(RelationKind.PARENT, 1), Relation(RelationKind.PARENT, 2)],
            ),
            PersonNode(1, Sex.MALE, "Gabe", []),
            PersonNode(2, Sex.FEMALE, "Izy", []),
        ]
    )
