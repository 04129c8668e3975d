"""Exceptions raised by the kinship graph core."""


class KinGraphError(ValueError):
    """Base class for kinship graph errors."""


class InvalidRelationTag(KinGraphError):
    def __init__(self, tag):
        super().__init__(f"Unrecognized relation tag: {tag!r}")
        self.tag = tag


class InvalidSexTag(KinGraphError):
    def __init__(self, tag):
        super().__init__(f"Unrecognized sex tag: {tag!r}")
        self.tag = tag


class RootNotFound(KinGraphError):
    def __init__(self, root_id: int):
        super().__init__(f"Person ID {root_id} not found in store")
        self.root_id = root_id


class DescriptionError(KinGraphError):
    """A family description line could not be understood by the relation engine."""

    def __init__(self, line_number: int, line: str, reason: str):
        super().__init__(f"Line {line_number}: {reason}: {line.strip()!r}")
        self.line_number = line_number
        self.line = line
        self.reason = reason
