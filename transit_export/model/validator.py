"""Network data validator."""

import logging

from transit_export.model.models import ValidationReport
from transit_export.model.network import TransitNetwork

logger = logging.getLogger(__name__)


class NetworkValidator:
    """Validate a loaded network for consistency."""

    def __init__(self, network: TransitNetwork, rejected: list[str] | None = None) -> None:
        """Initialize validator with the network and the containments refused at load."""
        self.network = network
        self.rejected = rejected or []
        self.errors: list[str] = []
        self.warnings: list[str] = []

    def validate(self) -> ValidationReport:
        """Run all validation checks."""
        logger.info("Validating network data")

        self._validate_lines()
        self._validate_routes()
        self._validate_vehicle_journeys()
        self._validate_timetables()
        self._validate_stop_areas()
        self._validate_stop_points()
        self._validate_links()
        self._validate_containment()

        valid = len(self.errors) == 0

        report = ValidationReport(
            valid=valid,
            errors=self.errors.copy(),
            warnings=self.warnings.copy(),
            stats=self.network.stats(),
        )

        if not valid:
            logger.error(f"Validation failed with {len(self.errors)} errors")
        elif self.warnings:
            logger.warning(f"Validation passed with {len(self.warnings)} warnings")
        else:
            logger.info("Validation passed")

        return report

    def _validate_lines(self) -> None:
        """Validate lines exist and reference known objects."""
        if not self.network.lines:
            self.errors.append("No lines found in network data")

        for line in self.network.lines.values():
            if line.network_id is not None and line.network_id not in self.network.networks:
                self.errors.append(
                    f"Line {line.object_id} references non-existent network {line.network_id}"
                )
            if line.company_id is not None and line.company_id not in self.network.companies:
                self.errors.append(
                    f"Line {line.object_id} references non-existent company {line.company_id}"
                )
            for group_id in line.group_of_lines_ids:
                if group_id not in self.network.group_of_lines:
                    self.errors.append(
                        f"Line {line.object_id} references non-existent group of lines {group_id}"
                    )

    def _validate_routes(self) -> None:
        """Validate routes have known stop points."""
        for route in self.network.routes.values():
            if not route.stop_point_ids:
                self.warnings.append(f"Route {route.object_id} has no stop points")
            for stop_point_id in route.stop_point_ids:
                if stop_point_id not in self.network.stop_points:
                    self.errors.append(
                        f"Route {route.object_id} references non-existent stop point "
                        f"{stop_point_id}"
                    )

    def _validate_vehicle_journeys(self) -> None:
        """Validate vehicle journeys reference known timetables and companies."""
        for vehicle_journey in self.network.vehicle_journeys.values():
            if not vehicle_journey.timetable_ids:
                self.warnings.append(f"Vehicle journey {vehicle_journey.object_id} has no timetable")
            for timetable_id in vehicle_journey.timetable_ids:
                if timetable_id not in self.network.timetables:
                    self.errors.append(
                        f"Vehicle journey {vehicle_journey.object_id} references non-existent "
                        f"timetable {timetable_id}"
                    )
            company_id = vehicle_journey.company_id
            if company_id is not None and company_id not in self.network.companies:
                self.errors.append(
                    f"Vehicle journey {vehicle_journey.object_id} references non-existent "
                    f"company {company_id}"
                )

    def _validate_timetables(self) -> None:
        """Validate periods are ordered and flag timetables that never run."""
        for timetable in self.network.timetables.values():
            if timetable.is_empty:
                self.warnings.append(
                    f"Timetable {timetable.object_id} has no calendar day nor period"
                )
            for period in timetable.periods:
                if period.start > period.end:
                    self.errors.append(
                        f"Timetable {timetable.object_id} has period starting after its end: "
                        f"{period.start} > {period.end}"
                    )

    def _validate_stop_areas(self) -> None:
        """Validate stop areas have valid coordinates."""
        for area in self.network.stop_areas.values():
            if area.latitude is not None and not (-90 <= area.latitude <= 90):
                self.errors.append(
                    f"Stop area {area.object_id} has invalid latitude: {area.latitude}"
                )
            if area.longitude is not None and not (-180 <= area.longitude <= 180):
                self.errors.append(
                    f"Stop area {area.object_id} has invalid longitude: {area.longitude}"
                )
            if not area.name:
                self.warnings.append(f"Stop area {area.object_id} has empty name")

    def _validate_stop_points(self) -> None:
        for stop_point in self.network.stop_points.values():
            if self.network.containing_area(stop_point.object_id) is None:
                self.warnings.append(f"Stop point {stop_point.object_id} is in no stop area")

    def _validate_links(self) -> None:
        """Validate link ends reference known objects."""
        stop_area_ids = self.network.stop_areas
        for link in self.network.connection_links.values():
            for area_id in (link.start_area_id, link.end_area_id):
                if area_id not in stop_area_ids:
                    self.errors.append(
                        f"Connection link {link.object_id} references non-existent stop area "
                        f"{area_id}"
                    )
            if link.default_duration is not None and link.default_duration < 0:
                self.warnings.append(
                    f"Connection link {link.object_id} has negative duration: "
                    f"{link.default_duration}"
                )

        for access_link in self.network.access_links.values():
            if access_link.access_point_id not in self.network.access_points:
                self.errors.append(
                    f"Access link {access_link.object_id} references non-existent access point "
                    f"{access_link.access_point_id}"
                )
            if access_link.stop_area_id not in stop_area_ids:
                self.errors.append(
                    f"Access link {access_link.object_id} references non-existent stop area "
                    f"{access_link.stop_area_id}"
                )

    def _validate_containment(self) -> None:
        for message in self.rejected:
            self.errors.append(f"Invalid containment {message}")
