"""Collection of the exportable closure of a line."""

import logging
from collections.abc import Iterator
from datetime import date
from typing import Any

from transit_export.export.exportable import EntitySet, ExportableData
from transit_export.export.reduction import clip_timetable
from transit_export.model.models import AreaType, Line, StopArea, Timetable, VehicleJourney
from transit_export.model.network import TransitNetwork

logger = logging.getLogger(__name__)


class DataCollector:
    """
    Walk a line and gather everything a producer needs to export it.

    Validity propagates bottom-up: a vehicle journey is valid when one of its
    timetables runs in the requested window and its route has stop points; a
    journey pattern, route or line is valid when one of its children is.
    Only valid objects and what they reference end up in the closure.

    The collector keeps no state between calls, so one instance may serve
    several lines concurrently as long as nothing mutates the network.
    """

    def collect(
        self,
        network: TransitNetwork,
        line: Line,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> tuple[bool, ExportableData]:
        """
        Collect the closure of a line, optionally restricted to a date window.

        Args:
            network: Fully loaded network the line belongs to
            line: Line to export
            start_date: First date to keep, or None for no lower bound
            end_date: Last date to keep, or None for no upper bound

        Returns:
            Tuple of (line has data in the window, collected closure)
        """
        collection = ExportableData()
        bounded = start_date is not None or end_date is not None
        # timetable id -> reduced copy (None when reduced away), for this call only
        reduced: dict[str, Timetable | None] = {}
        valid_line = False

        for route in self._resolve(network.routes, line.route_ids, "Route", line.object_id):
            stop_points = list(
                self._resolve(
                    network.stop_points, route.stop_point_ids, "StopPoint", route.object_id
                )
            )
            if not stop_points:
                logger.error(f"Route {route.object_id} has no stop points")
                continue

            valid_route = False
            for journey_pattern in self._resolve(
                network.journey_patterns,
                route.journey_pattern_ids,
                "JourneyPattern",
                route.object_id,
            ):
                valid_journey_pattern = False
                for vehicle_journey in self._resolve(
                    network.vehicle_journeys,
                    journey_pattern.vehicle_journey_ids,
                    "VehicleJourney",
                    journey_pattern.object_id,
                ):
                    if bounded:
                        timetables = self._reduced_timetables(
                            network, vehicle_journey, start_date, end_date, reduced
                        )
                    else:
                        timetables = self._running_timetables(network, vehicle_journey)
                    if not timetables:
                        continue

                    collection.timetables.update(timetables)
                    collection.vehicle_journeys.add(vehicle_journey)
                    if vehicle_journey.company_id is not None:
                        collection.companies.update(
                            self._resolve(
                                network.companies,
                                [vehicle_journey.company_id],
                                "Company",
                                vehicle_journey.object_id,
                            )
                        )
                    valid_journey_pattern = True

                if valid_journey_pattern:
                    collection.journey_patterns.add(journey_pattern)
                    valid_route = True

            if valid_route:
                collection.routes.add(route)
                collection.stop_points.update(stop_points)
                for stop_point in stop_points:
                    stop_area = network.containing_area(stop_point.object_id)
                    if stop_area is None:
                        logger.warning(f"Stop point {stop_point.object_id} is in no stop area")
                        continue
                    self._collect_stop_areas(network, collection, stop_area)
                valid_line = True

        if valid_line:
            self._collect_line_extras(network, collection, line)

        logger.info(
            f"Line {line.object_id}: valid={valid_line}, "
            f"{len(collection.routes)} routes, "
            f"{len(collection.vehicle_journeys)} vehicle journeys, "
            f"{len(collection.timetables)} timetables, "
            f"{len(collection.stop_areas)} stop areas"
        )
        return valid_line, collection

    @staticmethod
    def _running_timetables(
        network: TransitNetwork, vehicle_journey: VehicleJourney
    ) -> list[Timetable]:
        """Timetables of a journey that have at least one day or period."""
        return [
            timetable
            for timetable in DataCollector._resolve(
                network.timetables,
                vehicle_journey.timetable_ids,
                "Timetable",
                vehicle_journey.object_id,
            )
            if not timetable.is_empty
        ]

    @staticmethod
    def _reduced_timetables(
        network: TransitNetwork,
        vehicle_journey: VehicleJourney,
        start_date: date | None,
        end_date: date | None,
        reduced: dict[str, Timetable | None],
    ) -> list[Timetable]:
        """Reduced copies of the timetables of a journey that survive the window."""
        survivors: list[Timetable] = []
        for timetable in DataCollector._resolve(
            network.timetables,
            vehicle_journey.timetable_ids,
            "Timetable",
            vehicle_journey.object_id,
        ):
            if timetable.object_id in reduced:
                survivor = reduced[timetable.object_id]
            else:
                survivor = clip_timetable(timetable, start_date, end_date)
                reduced[timetable.object_id] = survivor
            if survivor is not None:
                survivors.append(survivor)
        return survivors

    @staticmethod
    def _collect_stop_areas(
        network: TransitNetwork, collection: ExportableData, stop_area: StopArea
    ) -> None:
        """Add a stop area and its ancestors with their links and access points."""
        current: StopArea | None = stop_area
        while current is not None and current not in collection.stop_areas:
            collection.stop_areas.add(current)
            bucket = DataCollector._bucket_for(collection, current.area_type)
            if bucket is not None:
                bucket.add(current)
            collection.connection_links.update(network.connection_links_of(current.object_id))
            collection.access_points.update(network.access_points_of(current.object_id))
            collection.access_links.update(network.access_links_of(current.object_id))
            current = network.parent_of(current.object_id)

    @staticmethod
    def _bucket_for(collection: ExportableData, area_type: AreaType) -> EntitySet[StopArea] | None:
        match area_type:
            case AreaType.STOP_PLACE:
                return collection.stop_places
            case AreaType.COMMERCIAL_STOP_POINT:
                return collection.commercial_stop_points
            case AreaType.BOARDING_POSITION:
                return collection.boarding_positions
            case AreaType.QUAY:
                return collection.quays
            case AreaType.ROUTING_CONSTRAINT:
                return None
        raise ValueError(f"Unhandled area type: {area_type}")

    @staticmethod
    def _collect_line_extras(
        network: TransitNetwork, collection: ExportableData, line: Line
    ) -> None:
        collection.line = line
        if line.network_id is not None:
            collection.network = next(
                DataCollector._resolve(
                    network.networks, [line.network_id], "Network", line.object_id
                ),
                None,
            )
        if line.company_id is not None:
            collection.companies.update(
                DataCollector._resolve(
                    network.companies, [line.company_id], "Company", line.object_id
                )
            )
        collection.group_of_lines.update(
            DataCollector._resolve(
                network.group_of_lines, line.group_of_lines_ids, "GroupOfLines", line.object_id
            )
        )
        # Routing constraints sit outside the containment tree
        collection.stop_areas.update(network.routing_constraints_of(line.object_id))

    @staticmethod
    def _resolve(
        table: dict[str, Any], object_ids: list[str], kind: str, owner_id: str
    ) -> Iterator[Any]:
        """Yield referenced entities, skipping identifiers missing from the network."""
        for object_id in object_ids:
            entity = table.get(object_id)
            if entity is None:
                logger.warning(f"{kind} {object_id} referenced by {owner_id} not found, skipping")
                continue
            yield entity


def collect(
    network: TransitNetwork,
    line: Line,
    start_date: date | None = None,
    end_date: date | None = None,
) -> tuple[bool, ExportableData]:
    """Collect the closure of a line with a fresh collector."""
    return DataCollector().collect(network, line, start_date, end_date)
