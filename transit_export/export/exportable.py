"""Closure of entities collected for one line export."""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from transit_export.model.models import (
    AccessLink,
    AccessPoint,
    Company,
    ConnectionLink,
    GroupOfLines,
    JourneyPattern,
    Line,
    LineStats,
    Network,
    Route,
    StopArea,
    StopPoint,
    Timetable,
    VehicleJourney,
)

T = TypeVar("T")


class EntitySet(Generic[T]):
    """
    Insertion-ordered set of entities keyed by object_id.

    Membership is decided by identifier, never by value: two timetables with
    the same dates but different identifiers are distinct members.
    """

    def __init__(self, items: Iterable[T] = ()) -> None:
        self._items: dict[str, T] = {}
        self.update(items)

    def add(self, item: T) -> bool:
        """Add an item; returns False if its identifier was already present."""
        object_id = item.object_id  # type: ignore[attr-defined]
        if object_id in self._items:
            return False
        self._items[object_id] = item
        return True

    def update(self, items: Iterable[T]) -> None:
        for item in items:
            self.add(item)

    def get(self, object_id: str) -> T | None:
        return self._items.get(object_id)

    def ids(self) -> list[str]:
        return list(self._items)

    def __contains__(self, item: object) -> bool:
        return getattr(item, "object_id", None) in self._items

    def __iter__(self) -> Iterator[T]:
        return iter(self._items.values())

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"EntitySet({self.ids()!r})"


@dataclass
class ExportableData:
    """De-duplicated entities handed to a format producer for one line."""

    line: Line | None = None
    network: Network | None = None
    routes: EntitySet[Route] = field(default_factory=EntitySet)
    journey_patterns: EntitySet[JourneyPattern] = field(default_factory=EntitySet)
    vehicle_journeys: EntitySet[VehicleJourney] = field(default_factory=EntitySet)
    timetables: EntitySet[Timetable] = field(default_factory=EntitySet)
    stop_points: EntitySet[StopPoint] = field(default_factory=EntitySet)
    stop_areas: EntitySet[StopArea] = field(default_factory=EntitySet)
    stop_places: EntitySet[StopArea] = field(default_factory=EntitySet)
    commercial_stop_points: EntitySet[StopArea] = field(default_factory=EntitySet)
    boarding_positions: EntitySet[StopArea] = field(default_factory=EntitySet)
    quays: EntitySet[StopArea] = field(default_factory=EntitySet)
    connection_links: EntitySet[ConnectionLink] = field(default_factory=EntitySet)
    access_points: EntitySet[AccessPoint] = field(default_factory=EntitySet)
    access_links: EntitySet[AccessLink] = field(default_factory=EntitySet)
    companies: EntitySet[Company] = field(default_factory=EntitySet)
    group_of_lines: EntitySet[GroupOfLines] = field(default_factory=EntitySet)

    def stats(self) -> LineStats:
        """Object counts of the closure."""
        return LineStats(
            line_count=1 if self.line is not None else 0,
            route_count=len(self.routes),
            journey_pattern_count=len(self.journey_patterns),
            vehicle_journey_count=len(self.vehicle_journeys),
            stop_area_count=len(self.stop_areas),
            access_point_count=len(self.access_points),
            connection_link_count=len(self.connection_links),
            timetable_count=len(self.timetables),
        )
