"""Network snapshot reader."""

import json
import logging
from datetime import date
from pathlib import Path
from typing import Any

from transit_export.model.errors import InvalidContainment, UnknownObjectError
from transit_export.model.models import (
    AccessLink,
    AccessPoint,
    AccessPointType,
    AreaType,
    CalendarDay,
    Company,
    ConnectionLink,
    DayType,
    GroupOfLines,
    JourneyPattern,
    Line,
    LinkOrientation,
    Network,
    Period,
    Route,
    StopArea,
    StopPoint,
    Timetable,
    VehicleJourney,
)
from transit_export.model.network import TransitNetwork

logger = logging.getLogger(__name__)


class NetworkReader:
    """Read a JSON network snapshot into a TransitNetwork."""

    def __init__(self, input_path: str) -> None:
        """Initialize reader with the path of the JSON document."""
        self.input_path = Path(input_path)
        if not self.input_path.is_file():
            raise ValueError(f"Network file not found: {input_path}")

        self.network = TransitNetwork()
        # Containment mutations refused by the stop area rules
        self.rejected: list[str] = []
        self._document: dict[str, Any] = {}

    def read_all(self) -> TransitNetwork:
        """Read every section of the document."""
        logger.info(f"Reading network data from {self.input_path}")
        with open(self.input_path, encoding="utf-8") as f:
            self._document = json.load(f)
        if not isinstance(self._document, dict):
            raise ValueError(f"Network document must be a JSON object: {self.input_path}")

        self.read_networks()
        self.read_companies()
        self.read_group_of_lines()
        self.read_stop_areas()
        self.read_stop_points()
        self.read_connection_links()
        self.read_access_points()
        self.read_access_links()
        self.read_timetables()
        self.read_lines()
        self.read_routing_constraints()

        stats = self.network.stats()
        logger.info(
            f"Loaded {stats['lines']} lines, {stats['routes']} routes, "
            f"{stats['vehicle_journeys']} vehicle journeys, {stats['timetables']} timetables, "
            f"{stats['stop_areas']} stop areas, {stats['stop_points']} stop points"
        )
        if self.rejected:
            logger.warning(f"{len(self.rejected)} containment relations rejected")
        return self.network

    def _section(self, name: str) -> list[dict[str, Any]]:
        section = self._document.get(name, [])
        if not section:
            logger.info(f"{name} not found, skipping")
        return section

    def read_networks(self) -> None:
        for row in self._section("networks"):
            self.network.register(
                Network(
                    object_id=row["id"],
                    name=row.get("name", ""),
                    object_version=row.get("version", 1),
                    description=row.get("description", ""),
                    registration_number=row.get("registration_number"),
                    version_date=self._parse_date(row["version_date"])
                    if row.get("version_date")
                    else None,
                )
            )

    def read_companies(self) -> None:
        for row in self._section("companies"):
            self.network.register(
                Company(
                    object_id=row["id"],
                    name=row.get("name", ""),
                    object_version=row.get("version", 1),
                    short_name=row.get("short_name", ""),
                    registration_number=row.get("registration_number"),
                    phone=row.get("phone"),
                    email=row.get("email"),
                )
            )

    def read_group_of_lines(self) -> None:
        for row in self._section("group_of_lines"):
            self.network.register(
                GroupOfLines(
                    object_id=row["id"],
                    name=row.get("name", ""),
                    object_version=row.get("version", 1),
                    line_ids=list(row.get("lines", [])),
                )
            )

    def read_stop_areas(self) -> None:
        """Read stop areas, then apply parent relations through the containment rules."""
        rows = self._section("stop_areas")
        for row in rows:
            self.network.register(
                StopArea(
                    object_id=row["id"],
                    area_type=self._parse_enum(AreaType, row["area_type"]),
                    name=row.get("name", ""),
                    object_version=row.get("version", 1),
                    latitude=row.get("latitude"),
                    longitude=row.get("longitude"),
                    comment=row.get("comment"),
                    registration_number=row.get("registration_number"),
                    fare_code=row.get("fare_code"),
                    mobility_restricted_suitable=row.get("mobility_restricted_suitable", False),
                )
            )

        for row in rows:
            parent_id = row.get("parent")
            if parent_id:
                self._contain(self.network.add_child_area, parent_id, row["id"])

    def read_stop_points(self) -> None:
        for row in self._section("stop_points"):
            stop_point = StopPoint(
                object_id=row["id"],
                route_id=row.get("route"),
                position=row.get("position", 0),
                object_version=row.get("version", 1),
            )
            self.network.register(stop_point)
            area_id = row.get("stop_area")
            if area_id:
                self._contain(self.network.add_child_stop_point, area_id, stop_point.object_id)

    def read_connection_links(self) -> None:
        for row in self._section("connection_links"):
            link = ConnectionLink(
                object_id=row["id"],
                start_area_id=row["start"],
                end_area_id=row["end"],
                name=row.get("name", ""),
                object_version=row.get("version", 1),
                default_duration=row.get("duration"),
                link_distance=row.get("distance"),
            )
            self.network.register(link)
            for area_id, end in ((link.start_area_id, False), (link.end_area_id, True)):
                if area_id in self.network.stop_areas:
                    self.network.add_connection_link(area_id, link, end=end)
                else:
                    logger.warning(
                        f"Connection link {link.object_id} references unknown stop area {area_id}"
                    )

    def read_access_points(self) -> None:
        for row in self._section("access_points"):
            access_point = AccessPoint(
                object_id=row["id"],
                name=row.get("name", ""),
                object_version=row.get("version", 1),
                latitude=row.get("latitude"),
                longitude=row.get("longitude"),
                access_type=self._parse_enum(AccessPointType, row.get("type", "InOut")),
            )
            self.network.register(access_point)
            area_id = row.get("stop_area")
            if area_id in self.network.stop_areas:
                self.network.add_access_point(area_id, access_point)
            elif area_id:
                logger.warning(
                    f"Access point {access_point.object_id} references unknown stop area {area_id}"
                )

    def read_access_links(self) -> None:
        for row in self._section("access_links"):
            link = AccessLink(
                object_id=row["id"],
                access_point_id=row["access_point"],
                stop_area_id=row["stop_area"],
                name=row.get("name", ""),
                object_version=row.get("version", 1),
                orientation=self._parse_enum(
                    LinkOrientation, row.get("orientation", "AccessPointToStopArea")
                ),
                default_duration=row.get("duration"),
            )
            self.network.register(link)
            if link.stop_area_id in self.network.stop_areas:
                self.network.add_access_link(link.stop_area_id, link)
            else:
                logger.warning(
                    f"Access link {link.object_id} references unknown stop area "
                    f"{link.stop_area_id}"
                )

    def read_timetables(self) -> None:
        for row in self._section("timetables"):
            timetable = Timetable(
                object_id=row["id"],
                object_version=row.get("version", 1),
                comment=row.get("comment", ""),
                day_types=[self._parse_enum(DayType, value) for value in row.get("day_types", [])],
                calendar_days=[
                    CalendarDay(
                        day=self._parse_date(day["date"]),
                        included=day.get("included", True),
                    )
                    for day in row.get("calendar_days", [])
                ],
                periods=[
                    Period(
                        start=self._parse_date(period["start"]),
                        end=self._parse_date(period["end"]),
                    )
                    for period in row.get("periods", [])
                ],
            )
            timetable.compute_limit_of_periods()
            self.network.register(timetable)

    def read_lines(self) -> None:
        """Read lines with their nested routes, journey patterns and vehicle journeys."""
        for row in self._section("lines"):
            line = Line(
                object_id=row["id"],
                name=row.get("name", ""),
                object_version=row.get("version", 1),
                number=str(row.get("number", "")),
                published_name=row.get("published_name", ""),
                transport_mode=row.get("transport_mode", ""),
                network_id=row.get("network"),
                company_id=row.get("company"),
                group_of_lines_ids=list(row.get("group_of_lines", [])),
            )
            self.network.register(line)
            for route_row in row.get("routes", []):
                line.route_ids.append(self._read_route(route_row, line.object_id))

    def _read_route(self, row: dict[str, Any], line_id: str) -> str:
        route = Route(
            object_id=row["id"],
            line_id=line_id,
            name=row.get("name", ""),
            object_version=row.get("version", 1),
            direction=row.get("direction", ""),
            stop_point_ids=list(row.get("stop_points", [])),
        )
        self.network.register(route)
        for stop_point_id in route.stop_point_ids:
            stop_point = self.network.stop_points.get(stop_point_id)
            if stop_point is not None and stop_point.route_id is None:
                stop_point.route_id = route.object_id

        for jp_row in row.get("journey_patterns", []):
            journey_pattern = JourneyPattern(
                object_id=jp_row["id"],
                route_id=route.object_id,
                name=jp_row.get("name", ""),
                object_version=jp_row.get("version", 1),
                published_name=jp_row.get("published_name", ""),
            )
            self.network.register(journey_pattern)
            route.journey_pattern_ids.append(journey_pattern.object_id)

            for vj_row in jp_row.get("vehicle_journeys", []):
                vehicle_journey = VehicleJourney(
                    object_id=vj_row["id"],
                    journey_pattern_id=journey_pattern.object_id,
                    name=vj_row.get("name", ""),
                    object_version=vj_row.get("version", 1),
                    number=vj_row.get("number"),
                    company_id=vj_row.get("company"),
                    timetable_ids=list(vj_row.get("timetables", [])),
                )
                self.network.register(vehicle_journey)
                journey_pattern.vehicle_journey_ids.append(vehicle_journey.object_id)

        return route.object_id

    def read_routing_constraints(self) -> None:
        """Apply routing constraint areas and lines, once lines are known."""
        for row in self._document.get("stop_areas", []):
            for child_id in row.get("routing_constraint_areas", []):
                self._contain(self.network.add_routing_constraint_area, row["id"], child_id)
            for line_id in row.get("routing_constraint_lines", []):
                self._contain(self.network.add_routing_constraint_line, row["id"], line_id)

    def _contain(self, mutation: Any, parent_id: str, child_id: str) -> None:
        """Apply a containment mutation, recording it if the rules refuse it."""
        try:
            mutation(parent_id, child_id)
        except (InvalidContainment, UnknownObjectError) as e:
            message = f"{parent_id} -> {child_id}: {e}"
            logger.warning(f"Containment rejected: {message}")
            self.rejected.append(message)

    @staticmethod
    def _parse_date(value: str) -> date:
        """Parse YYYY-MM-DD or YYYYMMDD."""
        try:
            return date.fromisoformat(value)
        except (TypeError, ValueError):
            raise ValueError(f"Invalid date format: {value}") from None

    @staticmethod
    def _parse_enum(enum_type: Any, value: str) -> Any:
        try:
            return enum_type(value)
        except ValueError:
            raise ValueError(f"Invalid {enum_type.__name__}: {value}") from None
