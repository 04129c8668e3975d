"""Relation engine wire format parsing and tag conversion."""

import json
from dataclasses import dataclass

from errors import DescriptionError, InvalidRelationTag, InvalidSexTag
from models import (
    Relation,
    RelationEngineSnapshot,
    RelationKind,
    Sex,
    SnapshotNode,
    SnapshotRelation,
)


# Tags used by the relation engine in snapshots
RELATION_TAG_MAP = {
    "Parent": RelationKind.PARENT,
    "Child": RelationKind.CHILD,
    "RP": RelationKind.REPRODUCTIVE_PARTNER,
    "Sibling": RelationKind.SIBLING,
}

SEX_TAG_MAP = {
    "Male": Sex.MALE,
    "Female": Sex.FEMALE,
}

# Keywords used in family description lines
DESCRIPTION_RELATION_MAP = {
    "PARENT": RelationKind.PARENT,
    "CHILD": RelationKind.CHILD,
    "RP": RelationKind.REPRODUCTIVE_PARTNER,
    "SIBLING": RelationKind.SIBLING,
}

DESCRIPTION_SEX_MAP = {
    "M": Sex.MALE,
    "F": Sex.FEMALE,
}


def relation_kind_from_tag(tag: str) -> RelationKind:
    """Convert an engine relation tag ("Parent", "Child", "RP", "Sibling") to a RelationKind."""
    try:
        return RELATION_TAG_MAP[tag]
    except (KeyError, TypeError):
        raise InvalidRelationTag(tag) from None


def sex_from_tag(tag: str) -> Sex:
    """Convert an engine sex tag ("Male", "Female") to a Sex."""
    try:
        return SEX_TAG_MAP[tag]
    except (KeyError, TypeError):
        raise InvalidSexTag(tag) from None


def convert_relations(relations: list[SnapshotRelation]) -> list[Relation]:
    """Convert snapshot relations in order, failing on the first unknown tag."""
    return [Relation(relation_kind_from_tag(r.kind), r.id) for r in relations]


def parse_snapshot(data: str | dict) -> RelationEngineSnapshot:
    """
    Parse the relation engine's JSON graph into a snapshot.

    The wire format is {"nodes": [{"id": 0, "sex": "Male", "relations": [{"kind": "Parent", "id": 1}]}]}.
    A "name" field, if the engine sends one, is ignored. Tags are kept as strings;
    they are converted (and validated) by the merge.
    """
    if isinstance(data, str):
        data = json.loads(data)

    nodes = []
    for raw in data.get("nodes") or []:
        nodes.append(
            SnapshotNode(
                id=int(raw["id"]),
                sex=raw["sex"],
                relations=[
                    SnapshotRelation(kind=r["kind"], id=int(r["id"]))
                    for r in raw.get("relations", [])
                ],
            )
        )
    return RelationEngineSnapshot(nodes=nodes)


@dataclass
class Statement:
    """A parsed description line: `NAME M|F RELATION NAME M|F`."""

    name: str
    sex: Sex
    kind: RelationKind
    other_name: str
    other_sex: Sex
    line_number: int = 0
    line: str = ""


@dataclass
class Query:
    """A parsed description line: `NAME TO NAME`."""

    name: str
    other_name: str
    line_number: int = 0
    line: str = ""


def parse_description_line(line: str, line_number: int = 1) -> Statement | Query | None:
    """
    Parse one line of a family description.

    Handles:
    - "Izy F PARENT Mary F"  (Izy is a parent of Mary)
    - "Solomon M RP Izy F"
    - "Izy TO Solomon"       (query)
    - blank lines and "# comments" (returns None)
    """
    words = line.split()
    if not words or words[0].startswith("#"):
        return None

    if len(words) == 3 and words[1].upper() == "TO":
        return Query(name=words[0], other_name=words[2], line_number=line_number, line=line)

    if len(words) != 5:
        raise DescriptionError(line_number, line, "expected 'NAME SEX RELATION NAME SEX'")

    name, sex, rel, other_name, other_sex = words
    if name == other_name:
        raise DescriptionError(line_number, line, "a person can not be related to themselves")

    sex_value = DESCRIPTION_SEX_MAP.get(sex.upper())
    other_sex_value = DESCRIPTION_SEX_MAP.get(other_sex.upper())
    if sex_value is None or other_sex_value is None:
        raise DescriptionError(line_number, line, "invalid sex")

    kind = DESCRIPTION_RELATION_MAP.get(rel.upper())
    if kind is None:
        raise DescriptionError(line_number, line, "invalid relationship")

    return Statement(
        name=name,
        sex=sex_value,
        kind=kind,
        other_name=other_name,
        other_sex=other_sex_value,
        line_number=line_number,
        line=line,
    )


def parse_description(text: str) -> list[Statement | Query]:
    """Parse a multi-line family description, skipping blank and comment lines."""
    parsed = []
    for line_number, line in enumerate(text.splitlines(), start=1):
        item = parse_description_line(line, line_number)
        if item is not None:
            parsed.append(item)
    return parsed
