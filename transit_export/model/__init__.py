"""Transit network model: entities, containment rules and loading."""

from transit_export.model.errors import (
    DuplicateObjectError,
    InvalidContainment,
    TransitModelError,
    UnknownObjectError,
)
from transit_export.model.network import TransitNetwork

__all__ = [
    "DuplicateObjectError",
    "InvalidContainment",
    "TransitModelError",
    "TransitNetwork",
    "UnknownObjectError",
]
