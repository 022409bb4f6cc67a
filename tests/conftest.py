"""Pytest configuration and fixtures."""

import shutil
from datetime import date
from pathlib import Path

import pytest

from transit_export.model.models import (
    AreaType,
    CalendarDay,
    JourneyPattern,
    Line,
    Period,
    Route,
    StopArea,
    StopPoint,
    Timetable,
    VehicleJourney,
)
from transit_export.model.network import TransitNetwork


class NetworkBuilder:
    """Small helper assembling networks for tests."""

    def __init__(self) -> None:
        self.network = TransitNetwork()

    def area(
        self,
        object_id: str,
        area_type: AreaType,
        parent: str | None = None,
        latitude: float | None = None,
        longitude: float | None = None,
    ) -> StopArea:
        area = StopArea(
            object_id=object_id,
            area_type=area_type,
            name=object_id,
            latitude=latitude,
            longitude=longitude,
        )
        self.network.register(area)
        if parent is not None:
            self.network.add_child_area(parent, object_id)
        return area

    def stop_point(self, object_id: str, area_id: str | None = None) -> StopPoint:
        stop_point = StopPoint(object_id=object_id)
        self.network.register(stop_point)
        if area_id is not None:
            self.network.add_child_stop_point(area_id, object_id)
        return stop_point

    def timetable(
        self,
        object_id: str,
        periods: list[tuple[date, date]] | None = None,
        days: list[date] | None = None,
    ) -> Timetable:
        timetable = Timetable(
            object_id=object_id,
            periods=[Period(start, end) for start, end in periods or []],
            calendar_days=[CalendarDay(day) for day in days or []],
        )
        timetable.compute_limit_of_periods()
        self.network.register(timetable)
        return timetable

    def line(self, object_id: str, **kwargs: object) -> Line:
        line = Line(object_id=object_id, name=object_id, **kwargs)  # type: ignore[arg-type]
        self.network.register(line)
        return line

    def route(self, line: Line, object_id: str, stop_point_ids: list[str]) -> Route:
        route = Route(object_id=object_id, line_id=line.object_id, stop_point_ids=stop_point_ids)
        self.network.register(route)
        line.route_ids.append(object_id)
        return route

    def journey(
        self,
        route: Route,
        object_id: str,
        timetable_ids: list[str],
        company_id: str | None = None,
        journey_pattern_id: str | None = None,
    ) -> VehicleJourney:
        jp_id = journey_pattern_id or f"JP:{route.object_id}"
        journey_pattern = self.network.journey_patterns.get(jp_id)
        if journey_pattern is None:
            journey_pattern = JourneyPattern(object_id=jp_id, route_id=route.object_id)
            self.network.register(journey_pattern)
            route.journey_pattern_ids.append(jp_id)

        vehicle_journey = VehicleJourney(
            object_id=object_id,
            journey_pattern_id=jp_id,
            company_id=company_id,
            timetable_ids=timetable_ids,
        )
        self.network.register(vehicle_journey)
        journey_pattern.vehicle_journey_ids.append(object_id)
        return vehicle_journey


@pytest.fixture
def builder() -> NetworkBuilder:
    """Empty network builder."""
    return NetworkBuilder()


@pytest.fixture
def network_minimal() -> Path:
    """Path to minimal network fixture."""
    return Path(__file__).parent / "fixtures" / "network_minimal.json"


@pytest.fixture
def network_invalid() -> Path:
    """Path to invalid network fixture."""
    return Path(__file__).parent / "fixtures" / "network_invalid.json"


@pytest.fixture
def tmp_output(tmp_path: Path) -> Path:
    """Temporary output directory."""
    output_dir = tmp_path / "export"
    output_dir.mkdir()
    yield output_dir
    # Cleanup
    if output_dir.exists():
        shutil.rmtree(output_dir)
