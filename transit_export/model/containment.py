"""Stop area containment rules."""

from transit_export.model.models import AreaType

CONTAINED_STOP_AREAS = "contained_stop_areas"
CONTAINED_STOP_POINTS = "contained_stop_points"
ROUTING_CONSTRAINT_AREAS = "routing_constraint_areas"
ROUTING_CONSTRAINT_LINES = "routing_constraint_lines"

STOP_POINT_KIND = "StopPoint"
LINE_KIND = "Line"

PHYSICAL_AREA_TYPES = frozenset({AreaType.BOARDING_POSITION, AreaType.QUAY})


def allowed_child_areas(area_type: AreaType) -> frozenset[AreaType]:
    """Area types a stop area of the given type may hold."""
    match area_type:
        case AreaType.BOARDING_POSITION | AreaType.QUAY:
            return frozenset()
        case AreaType.COMMERCIAL_STOP_POINT:
            return PHYSICAL_AREA_TYPES
        case AreaType.STOP_PLACE:
            return frozenset({AreaType.STOP_PLACE, AreaType.COMMERCIAL_STOP_POINT})
        case AreaType.ROUTING_CONSTRAINT:
            return frozenset(AreaType) - {AreaType.ROUTING_CONSTRAINT}
    raise ValueError(f"Unhandled area type: {area_type}")


def accepts_stop_points(area_type: AreaType) -> bool:
    """Only boarding positions and quays hold stop points."""
    return area_type in PHYSICAL_AREA_TYPES


def child_area_relation(area_type: AreaType) -> str:
    """Name of the relation child areas of this type are stored in."""
    if area_type is AreaType.ROUTING_CONSTRAINT:
        return ROUTING_CONSTRAINT_AREAS
    return CONTAINED_STOP_AREAS
