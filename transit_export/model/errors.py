"""Exceptions raised by the transit network model."""


class TransitModelError(Exception):
    """Base class for network model errors."""


class InvalidContainment(TransitModelError):
    """A containment mutation breaks the stop area type rules."""

    def __init__(self, parent_type: str, child_type: str, relation: str) -> None:
        self.parent_type = parent_type
        self.child_type = child_type
        self.relation = relation
        super().__init__(f"{parent_type} cannot hold {child_type} in {relation}")


class UnknownObjectError(TransitModelError, KeyError):
    """Lookup of an identifier that is not registered in the network."""

    def __init__(self, kind: str, object_id: str) -> None:
        self.kind = kind
        self.object_id = object_id
        super().__init__(f"Unknown {kind}: {object_id}")

    def __str__(self) -> str:
        return f"Unknown {self.kind}: {self.object_id}"


class DuplicateObjectError(TransitModelError):
    """Registration of an identifier that is already taken."""

    def __init__(self, kind: str, object_id: str) -> None:
        self.kind = kind
        self.object_id = object_id
        super().__init__(f"Duplicate {kind}: {object_id}")
