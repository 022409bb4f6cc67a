"""Data models for the transit network and export reporting."""

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from enum import Enum

logger = logging.getLogger(__name__)

MAX_TEXT_LENGTH = 255


class AreaType(Enum):
    """Kind of stop area, driving the containment rules."""

    BOARDING_POSITION = "BoardingPosition"
    QUAY = "Quay"
    COMMERCIAL_STOP_POINT = "CommercialStopPoint"
    STOP_PLACE = "StopPlace"
    ROUTING_CONSTRAINT = "RoutingConstraint"


class DayType(Enum):
    """Day types a timetable applies its periods to."""

    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"
    SUNDAY = "Sunday"
    WEEKDAY = "WeekDay"
    WEEKEND = "WeekEnd"
    SCHOOL_HOLIDAY = "SchoolHoliday"
    PUBLIC_HOLIDAY = "PublicHoliday"
    MARKET_DAY = "MarketDay"


_DAY_TYPE_WEEKDAYS: dict[DayType, tuple[int, ...]] = {
    DayType.MONDAY: (0,),
    DayType.TUESDAY: (1,),
    DayType.WEDNESDAY: (2,),
    DayType.THURSDAY: (3,),
    DayType.FRIDAY: (4,),
    DayType.SATURDAY: (5,),
    DayType.SUNDAY: (6,),
    DayType.WEEKDAY: (0, 1, 2, 3, 4),
    DayType.WEEKEND: (5, 6),
}


class AccessPointType(Enum):
    """Direction an access point may be used in."""

    IN = "In"
    OUT = "Out"
    IN_OUT = "InOut"


class LinkOrientation(Enum):
    """Orientation of an access link."""

    ACCESS_POINT_TO_STOP_AREA = "AccessPointToStopArea"
    STOP_AREA_TO_ACCESS_POINT = "StopAreaToAccessPoint"


class LineState(Enum):
    """Outcome of a line export."""

    OK = "OK"
    ERROR = "ERROR"


class LineErrorCode(Enum):
    """Reason a line was not exported."""

    NO_DATA_ON_PERIOD = "NO_DATA_ON_PERIOD"


def _truncate(value: str | None, attribute: str, object_id: str) -> str | None:
    if value is not None and len(value) > MAX_TEXT_LENGTH:
        logger.warning(f"{attribute} too long on {object_id}, truncated: {value}")
        return value[:MAX_TEXT_LENGTH]
    return value


@dataclass(frozen=True)
class CalendarDay:
    """Explicit date of a timetable, included or excluded."""

    day: date
    included: bool = True


@dataclass(frozen=True)
class Period:
    """Inclusive date range of a timetable."""

    start: date
    end: date


@dataclass
class Timetable:
    """Validity calendar shared by vehicle journeys."""

    object_id: str
    object_version: int = 1
    comment: str = ""
    day_types: list[DayType] = field(default_factory=list)
    calendar_days: list[CalendarDay] = field(default_factory=list)
    periods: list[Period] = field(default_factory=list)
    start_of_period: date | None = None
    end_of_period: date | None = None

    @property
    def is_empty(self) -> bool:
        """True when the timetable has neither days nor periods (not running)."""
        return not self.calendar_days and not self.periods

    def compute_limit_of_periods(self) -> None:
        """Recompute start_of_period/end_of_period from periods and included days."""
        starts = [period.start for period in self.periods]
        ends = [period.end for period in self.periods]
        for calendar_day in self.calendar_days:
            if calendar_day.included:
                starts.append(calendar_day.day)
                ends.append(calendar_day.day)

        self.start_of_period = min(starts) if starts else None
        self.end_of_period = max(ends) if ends else None

    def active_dates(self) -> set[date]:
        """
        Expand the timetable to the set of dates it runs on.

        Periods only contribute the weekdays named by the day types; with no
        weekday-related day type every date of a period is active. Included
        calendar days are added and excluded ones removed afterwards.
        """
        weekdays: set[int] = set()
        for day_type in self.day_types:
            weekdays.update(_DAY_TYPE_WEEKDAYS.get(day_type, ()))

        dates: set[date] = set()
        for period in self.periods:
            current = period.start
            while current <= period.end:
                if not weekdays or current.weekday() in weekdays:
                    dates.add(current)
                current += timedelta(days=1)

        for calendar_day in self.calendar_days:
            if calendar_day.included:
                dates.add(calendar_day.day)
        for calendar_day in self.calendar_days:
            if not calendar_day.included:
                dates.discard(calendar_day.day)

        return dates


@dataclass
class Network:
    """Public transport network grouping lines."""

    object_id: str
    name: str = ""
    object_version: int = 1
    description: str = ""
    registration_number: str | None = None
    version_date: date | None = None


@dataclass
class Company:
    """Operator or authority."""

    object_id: str
    name: str = ""
    object_version: int = 1
    short_name: str = ""
    registration_number: str | None = None
    phone: str | None = None
    email: str | None = None


@dataclass
class GroupOfLines:
    """Commercial grouping of lines."""

    object_id: str
    name: str = ""
    object_version: int = 1
    line_ids: list[str] = field(default_factory=list)


@dataclass
class StopArea:
    """Typed stop area; containment and links live in the network tables."""

    object_id: str
    area_type: AreaType
    name: str = ""
    object_version: int = 1
    latitude: float | None = None
    longitude: float | None = None
    comment: str | None = None
    registration_number: str | None = None
    fare_code: int | None = None
    mobility_restricted_suitable: bool = False

    def __post_init__(self) -> None:
        self.comment = _truncate(self.comment, "comment", self.object_id)
        self.registration_number = _truncate(
            self.registration_number, "registration_number", self.object_id
        )

    @property
    def has_position(self) -> bool:
        return self.latitude is not None and self.longitude is not None


@dataclass
class StopPoint:
    """Stop of a route, placed in a boarding position or quay."""

    object_id: str
    route_id: str | None = None
    position: int = 0
    object_version: int = 1


@dataclass
class ConnectionLink:
    """Walking connection between two stop areas."""

    object_id: str
    start_area_id: str
    end_area_id: str
    name: str = ""
    object_version: int = 1
    default_duration: int | None = None  # seconds
    link_distance: float | None = None  # meters


@dataclass
class AccessPoint:
    """Entrance or exit of a stop area."""

    object_id: str
    name: str = ""
    object_version: int = 1
    latitude: float | None = None
    longitude: float | None = None
    access_type: AccessPointType = AccessPointType.IN_OUT


@dataclass
class AccessLink:
    """Path between an access point and a stop area."""

    object_id: str
    access_point_id: str
    stop_area_id: str
    name: str = ""
    object_version: int = 1
    orientation: LinkOrientation = LinkOrientation.ACCESS_POINT_TO_STOP_AREA
    default_duration: int | None = None  # seconds


@dataclass
class VehicleJourney:
    """Scheduled trip of a journey pattern."""

    object_id: str
    journey_pattern_id: str | None = None
    name: str = ""
    object_version: int = 1
    number: int | None = None
    company_id: str | None = None
    timetable_ids: list[str] = field(default_factory=list)


@dataclass
class JourneyPattern:
    """Stop calling pattern shared by vehicle journeys."""

    object_id: str
    route_id: str | None = None
    name: str = ""
    object_version: int = 1
    published_name: str = ""
    vehicle_journey_ids: list[str] = field(default_factory=list)


@dataclass
class Route:
    """Directional path of a line through ordered stop points."""

    object_id: str
    line_id: str | None = None
    name: str = ""
    object_version: int = 1
    direction: str = ""
    stop_point_ids: list[str] = field(default_factory=list)
    journey_pattern_ids: list[str] = field(default_factory=list)


@dataclass
class Line:
    """Public transport line."""

    object_id: str
    name: str = ""
    object_version: int = 1
    number: str = ""
    published_name: str = ""
    transport_mode: str = ""
    network_id: str | None = None
    company_id: str | None = None
    group_of_lines_ids: list[str] = field(default_factory=list)
    route_ids: list[str] = field(default_factory=list)


@dataclass
class ValidationReport:
    """Report from validation process."""

    valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    stats: dict[str, int] = field(default_factory=dict)


@dataclass
class LineStats:
    """Object counts of an export, per line or merged over a job."""

    line_count: int = 0
    route_count: int = 0
    journey_pattern_count: int = 0
    vehicle_journey_count: int = 0
    stop_area_count: int = 0
    access_point_count: int = 0
    connection_link_count: int = 0
    timetable_count: int = 0

    def merge(self, other: "LineStats") -> None:
        """Add the counts of another stats record to this one."""
        self.line_count += other.line_count
        self.route_count += other.route_count
        self.journey_pattern_count += other.journey_pattern_count
        self.vehicle_journey_count += other.vehicle_journey_count
        self.stop_area_count += other.stop_area_count
        self.access_point_count += other.access_point_count
        self.connection_link_count += other.connection_link_count
        self.timetable_count += other.timetable_count


@dataclass
class LineError:
    """Error attached to a line that could not be exported."""

    code: LineErrorCode
    description: str


@dataclass
class LineInfo:
    """Export outcome of one line."""

    line_id: str
    name: str
    status: LineState = LineState.OK
    stats: LineStats = field(default_factory=LineStats)
    errors: list[LineError] = field(default_factory=list)


@dataclass
class ExportReport:
    """Export outcome of a whole job."""

    lines: list[LineInfo] = field(default_factory=list)
    stats: LineStats = field(default_factory=LineStats)
    files: dict[str, str] = field(default_factory=dict)  # filename -> path


@dataclass
class ExportConfig:
    """Configuration for export process."""

    input_path: str
    output_path: str
    line_ids: list[str] | None = None  # None exports every line
    start_date: date | None = None
    end_date: date | None = None
    write_report: bool = True

    def __post_init__(self) -> None:
        if (
            self.start_date is not None
            and self.end_date is not None
            and self.start_date > self.end_date
        ):
            raise ValueError(
                f"start_date {self.start_date} is after end_date {self.end_date}"
            )
