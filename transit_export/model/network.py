"""In-memory transit network: entity tables and stop area relations."""

import logging
from typing import Any

from shapely.geometry import MultiPoint, Point

from transit_export.model.containment import (
    CONTAINED_STOP_POINTS,
    LINE_KIND,
    ROUTING_CONSTRAINT_AREAS,
    ROUTING_CONSTRAINT_LINES,
    STOP_POINT_KIND,
    accepts_stop_points,
    allowed_child_areas,
    child_area_relation,
)
from transit_export.model.errors import (
    DuplicateObjectError,
    InvalidContainment,
    UnknownObjectError,
)
from transit_export.model.models import (
    AccessLink,
    AccessPoint,
    AreaType,
    Company,
    ConnectionLink,
    GroupOfLines,
    JourneyPattern,
    Line,
    Network,
    Route,
    StopArea,
    StopPoint,
    Timetable,
    VehicleJourney,
)

logger = logging.getLogger(__name__)

# entity class -> attribute holding its table
_TABLES: dict[type, str] = {
    Network: "networks",
    Company: "companies",
    GroupOfLines: "group_of_lines",
    Line: "lines",
    Route: "routes",
    JourneyPattern: "journey_patterns",
    VehicleJourney: "vehicle_journeys",
    Timetable: "timetables",
    StopArea: "stop_areas",
    StopPoint: "stop_points",
    ConnectionLink: "connection_links",
    AccessPoint: "access_points",
    AccessLink: "access_links",
}


def _append_unique(items: list[str], object_id: str) -> bool:
    if object_id in items:
        return False
    items.append(object_id)
    return True


def _remove_present(items: list[str] | None, object_id: str) -> bool:
    if items is None or object_id not in items:
        return False
    items.remove(object_id)
    return True


class TransitNetwork:
    """
    Arena of network entities addressed by identifier.

    Entities are plain records kept in one table per kind. Stop area
    containment (parent/child areas, contained stop points, routing
    constraints) and the link relations are identifier-keyed tables owned by
    the network, so every mutation goes through the methods below and the
    back-references stay consistent.
    """

    def __init__(self) -> None:
        """Initialize empty entity and relation tables."""
        self.networks: dict[str, Network] = {}
        self.companies: dict[str, Company] = {}
        self.group_of_lines: dict[str, GroupOfLines] = {}
        self.lines: dict[str, Line] = {}
        self.routes: dict[str, Route] = {}
        self.journey_patterns: dict[str, JourneyPattern] = {}
        self.vehicle_journeys: dict[str, VehicleJourney] = {}
        self.timetables: dict[str, Timetable] = {}
        self.stop_areas: dict[str, StopArea] = {}
        self.stop_points: dict[str, StopPoint] = {}
        self.connection_links: dict[str, ConnectionLink] = {}
        self.access_points: dict[str, AccessPoint] = {}
        self.access_links: dict[str, AccessLink] = {}

        # Containment: child -> parent and parent -> ordered children
        self._parent: dict[str, str] = {}
        self._child_areas: dict[str, list[str]] = {}
        self._stop_point_area: dict[str, str] = {}
        self._child_stop_points: dict[str, list[str]] = {}

        # Routing constraints, outside of normal containment
        self._routing_constraint_areas: dict[str, list[str]] = {}
        self._routing_constraint_lines: dict[str, list[str]] = {}

        # Links, keyed by stop area
        self._connection_start_links: dict[str, list[str]] = {}
        self._connection_end_links: dict[str, list[str]] = {}
        self._access_links: dict[str, list[str]] = {}
        self._access_points: dict[str, list[str]] = {}

    # Registration and lookup

    def register(self, entity: Any) -> None:
        """Add an entity to the table of its kind."""
        table = self._table_for(entity)
        if entity.object_id in table:
            raise DuplicateObjectError(type(entity).__name__, entity.object_id)
        table[entity.object_id] = entity

    def _adopt(self, entity: Any) -> None:
        """Register an entity unless this very object is already registered."""
        table = self._table_for(entity)
        existing = table.get(entity.object_id)
        if existing is None:
            table[entity.object_id] = entity
        elif existing is not entity:
            raise DuplicateObjectError(type(entity).__name__, entity.object_id)

    def _table_for(self, entity: Any) -> dict[str, Any]:
        try:
            return getattr(self, _TABLES[type(entity)])
        except KeyError:
            raise TypeError(f"Not a network entity: {type(entity).__name__}") from None

    @staticmethod
    def _get(table: dict[str, Any], kind: str, object_id: str) -> Any:
        try:
            return table[object_id]
        except KeyError:
            raise UnknownObjectError(kind, object_id) from None

    def line(self, object_id: str) -> Line:
        return self._get(self.lines, "Line", object_id)

    def stop_area(self, object_id: str) -> StopArea:
        return self._get(self.stop_areas, "StopArea", object_id)

    def stop_point(self, object_id: str) -> StopPoint:
        return self._get(self.stop_points, "StopPoint", object_id)

    # Containment engine

    def add_child_area(self, parent_id: str, child_id: str) -> None:
        """
        Put a stop area inside another one.

        Raises InvalidContainment when the parent type may not hold the child
        type. Routing constraints record the child in their own relation and
        leave its parent untouched; other areas become the child's parent,
        detaching it from any previous parent.
        """
        parent = self.stop_area(parent_id)
        child = self.stop_area(child_id)
        relation = child_area_relation(parent.area_type)
        allowed = allowed_child_areas(parent.area_type)
        if parent_id == child_id or child.area_type not in allowed:
            raise InvalidContainment(parent.area_type.value, child.area_type.value, relation)

        if parent.area_type is AreaType.ROUTING_CONSTRAINT:
            areas = self._routing_constraint_areas.setdefault(parent_id, [])
            _append_unique(areas, child_id)
            return

        current = self._parent.get(child_id)
        if current == parent_id:
            return
        if current is not None:
            self._child_areas[current].remove(child_id)
            logger.debug(f"Stop area {child_id} moved from {current} to {parent_id}")

        self._child_areas.setdefault(parent_id, []).append(child_id)
        self._parent[child_id] = parent_id

    def remove_child_area(self, parent_id: str, child_id: str) -> None:
        """Undo add_child_area; clears the parent back-reference."""
        parent = self.stop_area(parent_id)
        if parent.area_type is AreaType.ROUTING_CONSTRAINT:
            _remove_present(self._routing_constraint_areas.get(parent_id), child_id)
            return

        if _remove_present(self._child_areas.get(parent_id), child_id):
            del self._parent[child_id]

    def add_routing_constraint_area(self, area_id: str, child_id: str) -> None:
        """Add a stop area to a routing constraint, never to another area type."""
        area = self.stop_area(area_id)
        child = self.stop_area(child_id)
        if area.area_type is not AreaType.ROUTING_CONSTRAINT:
            raise InvalidContainment(
                area.area_type.value, child.area_type.value, ROUTING_CONSTRAINT_AREAS
            )
        self.add_child_area(area_id, child_id)

    def remove_routing_constraint_area(self, area_id: str, child_id: str) -> None:
        area = self.stop_area(area_id)
        child = self.stop_area(child_id)
        if area.area_type is not AreaType.ROUTING_CONSTRAINT:
            raise InvalidContainment(
                area.area_type.value, child.area_type.value, ROUTING_CONSTRAINT_AREAS
            )
        _remove_present(self._routing_constraint_areas.get(area_id), child_id)

    def add_child_stop_point(self, parent_id: str, stop_point_id: str) -> None:
        """Place a stop point in a boarding position or quay."""
        parent = self.stop_area(parent_id)
        self.stop_point(stop_point_id)
        if not accepts_stop_points(parent.area_type):
            raise InvalidContainment(
                parent.area_type.value, STOP_POINT_KIND, CONTAINED_STOP_POINTS
            )

        current = self._stop_point_area.get(stop_point_id)
        if current == parent_id:
            return
        if current is not None:
            self._child_stop_points[current].remove(stop_point_id)

        self._child_stop_points.setdefault(parent_id, []).append(stop_point_id)
        self._stop_point_area[stop_point_id] = parent_id

    def remove_child_stop_point(self, parent_id: str, stop_point_id: str) -> None:
        """Undo add_child_stop_point; clears the stop point back-reference."""
        if _remove_present(self._child_stop_points.get(parent_id), stop_point_id):
            del self._stop_point_area[stop_point_id]

    def add_routing_constraint_line(self, area_id: str, line_id: str) -> None:
        """Attach a line to a routing constraint area."""
        area = self.stop_area(area_id)
        if area.area_type is not AreaType.ROUTING_CONSTRAINT:
            raise InvalidContainment(area.area_type.value, LINE_KIND, ROUTING_CONSTRAINT_LINES)
        _append_unique(self._routing_constraint_lines.setdefault(area_id, []), line_id)

    def remove_routing_constraint_line(self, area_id: str, line_id: str) -> None:
        area = self.stop_area(area_id)
        if area.area_type is not AreaType.ROUTING_CONSTRAINT:
            raise InvalidContainment(area.area_type.value, LINE_KIND, ROUTING_CONSTRAINT_LINES)
        _remove_present(self._routing_constraint_lines.get(area_id), line_id)

    # Links (no endpoint cross-validation)

    def add_connection_link(self, area_id: str, link: ConnectionLink, end: bool = False) -> None:
        """Attach a connection link to the start side (or end side) of an area."""
        self.stop_area(area_id)
        self._adopt(link)
        links = self._connection_end_links if end else self._connection_start_links
        _append_unique(links.setdefault(area_id, []), link.object_id)

    def remove_connection_link(self, area_id: str, link_id: str) -> None:
        _remove_present(self._connection_start_links.get(area_id), link_id)
        _remove_present(self._connection_end_links.get(area_id), link_id)

    def add_access_link(self, area_id: str, link: AccessLink) -> None:
        self.stop_area(area_id)
        self._adopt(link)
        _append_unique(self._access_links.setdefault(area_id, []), link.object_id)

    def remove_access_link(self, area_id: str, link_id: str) -> None:
        _remove_present(self._access_links.get(area_id), link_id)

    def add_access_point(self, area_id: str, access_point: AccessPoint) -> None:
        self.stop_area(area_id)
        self._adopt(access_point)
        _append_unique(self._access_points.setdefault(area_id, []), access_point.object_id)

    def remove_access_point(self, area_id: str, access_point_id: str) -> None:
        _remove_present(self._access_points.get(area_id), access_point_id)

    # Queries

    def parent_of(self, area_id: str) -> StopArea | None:
        parent_id = self._parent.get(area_id)
        return self.stop_areas[parent_id] if parent_id is not None else None

    def child_areas(self, area_id: str) -> list[StopArea]:
        return [self.stop_areas[child_id] for child_id in self._child_areas.get(area_id, [])]

    def child_stop_points(self, area_id: str) -> list[StopPoint]:
        return [self.stop_points[sp_id] for sp_id in self._child_stop_points.get(area_id, [])]

    def containing_area(self, stop_point_id: str) -> StopArea | None:
        area_id = self._stop_point_area.get(stop_point_id)
        return self.stop_areas[area_id] if area_id is not None else None

    def routing_constraint_areas(self, area_id: str) -> list[StopArea]:
        return [
            self.stop_areas[child_id]
            for child_id in self._routing_constraint_areas.get(area_id, [])
        ]

    def routing_constraint_line_ids(self, area_id: str) -> list[str]:
        return list(self._routing_constraint_lines.get(area_id, []))

    def routing_constraints_of(self, line_id: str) -> list[StopArea]:
        """Routing constraint areas affecting a line."""
        return [
            self.stop_areas[area_id]
            for area_id, line_ids in self._routing_constraint_lines.items()
            if line_id in line_ids
        ]

    def connection_links_of(self, area_id: str) -> list[ConnectionLink]:
        """Start-side and end-side links of an area, without duplicates."""
        link_ids = list(self._connection_start_links.get(area_id, []))
        for link_id in self._connection_end_links.get(area_id, []):
            _append_unique(link_ids, link_id)
        return [self.connection_links[link_id] for link_id in link_ids]

    def access_links_of(self, area_id: str) -> list[AccessLink]:
        return [self.access_links[link_id] for link_id in self._access_links.get(area_id, [])]

    def access_points_of(self, area_id: str) -> list[AccessPoint]:
        return [self.access_points[ap_id] for ap_id in self._access_points.get(area_id, [])]

    def area_centroid(self, area_id: str) -> Point | None:
        """
        Derived position of a stop area.

        An area with coordinates is its own centroid; otherwise the centroid of
        its child areas' centroids is used. Areas without any located
        descendant have no centroid.
        """
        return self._centroid(area_id, set())

    def _centroid(self, area_id: str, visiting: set[str]) -> Point | None:
        area = self.stop_area(area_id)
        if area.has_position:
            return Point(area.longitude, area.latitude)

        visiting.add(area_id)
        points: list[Point] = []
        for child_id in self._child_areas.get(area_id, []):
            if child_id in visiting:
                continue
            point = self._centroid(child_id, visiting)
            if point is not None:
                points.append(point)

        if not points:
            return None
        return MultiPoint(points).centroid

    def stats(self) -> dict[str, int]:
        """Entity counts per table."""
        return {table: len(getattr(self, table)) for table in _TABLES.values()}
