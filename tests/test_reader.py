"""Tests for network reader."""

import json
from datetime import date
from pathlib import Path

import pytest

from transit_export.model.models import AreaType, Period
from transit_export.model.reader import NetworkReader


def write_document(tmp_path: Path, document: object) -> Path:
    path = tmp_path / "network.json"
    path.write_text(json.dumps(document), encoding="utf-8")
    return path


def test_reader_basic(network_minimal: Path) -> None:
    """Test basic network reading."""
    reader = NetworkReader(str(network_minimal))
    network = reader.read_all()

    stats = network.stats()
    assert stats["lines"] == 2
    assert stats["routes"] == 3
    assert stats["journey_patterns"] == 3
    assert stats["vehicle_journeys"] == 5
    assert stats["timetables"] == 4
    assert stats["stop_areas"] == 7
    assert stats["stop_points"] == 4
    assert stats["connection_links"] == 1
    assert stats["access_points"] == 1
    assert stats["access_links"] == 1
    assert reader.rejected == []


def test_reader_nested_lines(network_minimal: Path) -> None:
    """Test routes, journey patterns and vehicle journeys are linked to their owners."""
    network = NetworkReader(str(network_minimal)).read_all()

    line = network.line("L:1")
    assert line.route_ids == ["R:1", "R:2"]
    assert line.network_id == "NET:1"
    assert line.group_of_lines_ids == ["GL:1"]
    assert network.routes["R:1"].journey_pattern_ids == ["JP:1"]
    assert network.journey_patterns["JP:1"].vehicle_journey_ids == ["VJ:1", "VJ:2"]
    assert network.vehicle_journeys["VJ:1"].company_id == "CO:2"
    assert network.stop_points["SP:1"].route_id == "R:1"


def test_reader_containment(network_minimal: Path) -> None:
    """Test parent relations and routing constraints are applied."""
    network = NetworkReader(str(network_minimal)).read_all()

    assert network.parent_of("SA:quay1").object_id == "SA:csp"
    assert network.parent_of("SA:csp").object_id == "SA:place"
    assert network.stop_areas["SA:place"].area_type is AreaType.STOP_PLACE
    assert network.containing_area("SP:2").object_id == "SA:bp1"
    assert [a.object_id for a in network.routing_constraint_areas("SA:itl")] == ["SA:csp"]
    assert [a.object_id for a in network.routing_constraints_of("L:1")] == ["SA:itl"]
    assert network.routing_constraints_of("L:2") == []


def test_reader_links(network_minimal: Path) -> None:
    """Test connection links are attached on both ends."""
    network = NetworkReader(str(network_minimal)).read_all()

    assert [link.object_id for link in network.connection_links_of("SA:quay1")] == ["CL:1"]
    assert [link.object_id for link in network.connection_links_of("SA:quay2")] == ["CL:1"]
    assert [ap.object_id for ap in network.access_points_of("SA:place")] == ["AP:1"]
    assert [al.object_id for al in network.access_links_of("SA:place")] == ["AL:1"]


def test_reader_timetables(network_minimal: Path) -> None:
    """Test timetables are parsed with their limits."""
    network = NetworkReader(str(network_minimal)).read_all()

    year = network.timetables["TM:year"]
    assert year.periods == [Period(date(2024, 1, 1), date(2024, 12, 31))]

    days = network.timetables["TM:days"]
    assert days.start_of_period == date(2024, 3, 1)
    assert days.end_of_period == date(2024, 3, 2)

    assert network.timetables["TM:empty"].is_empty


def test_reader_records_rejected_containment(network_invalid: Path) -> None:
    """Test containment refused by the rules is recorded instead of raised."""
    reader = NetworkReader(str(network_invalid))
    network = reader.read_all()

    assert len(reader.rejected) == 2
    assert reader.rejected[0].startswith("SA:quay -> SA:place")
    assert reader.rejected[1].startswith("SA:csp -> SP:2")
    assert network.parent_of("SA:place") is None
    assert network.containing_area("SP:2") is None


def test_reader_unknown_parent(tmp_path: Path) -> None:
    """Test a parent that does not exist is recorded as rejected."""
    path = write_document(
        tmp_path,
        {"stop_areas": [{"id": "SA:1", "area_type": "Quay", "parent": "SA:ghost"}]},
    )
    reader = NetworkReader(str(path))
    reader.read_all()

    assert len(reader.rejected) == 1
    assert "SA:ghost" in reader.rejected[0]


def test_reader_routing_constraint_areas_on_other_types(tmp_path: Path) -> None:
    """Test routing constraint members listed on a stop place are rejected."""
    path = write_document(
        tmp_path,
        {
            "stop_areas": [
                {"id": "SA:place", "area_type": "StopPlace", "routing_constraint_areas": ["SA:csp"]},
                {"id": "SA:csp", "area_type": "CommercialStopPoint"},
            ]
        },
    )
    reader = NetworkReader(str(path))
    network = reader.read_all()

    assert len(reader.rejected) == 1
    assert reader.rejected[0].startswith("SA:place -> SA:csp")
    assert "routing_constraint_areas" in reader.rejected[0]
    assert network.parent_of("SA:csp") is None


def test_reader_invalid_date(tmp_path: Path) -> None:
    """Test malformed dates are reported."""
    path = write_document(
        tmp_path, {"timetables": [{"id": "TM:1", "periods": [{"start": "soon", "end": "later"}]}]}
    )

    with pytest.raises(ValueError, match="Invalid date format"):
        NetworkReader(str(path)).read_all()


def test_reader_invalid_area_type(tmp_path: Path) -> None:
    """Test unknown area types are reported."""
    path = write_document(tmp_path, {"stop_areas": [{"id": "SA:1", "area_type": "Platform"}]})

    with pytest.raises(ValueError, match="Invalid AreaType"):
        NetworkReader(str(path)).read_all()


def test_reader_not_an_object(tmp_path: Path) -> None:
    """Test a document that is not a JSON object is refused."""
    path = write_document(tmp_path, [])

    with pytest.raises(ValueError):
        NetworkReader(str(path)).read_all()


def test_reader_missing_file() -> None:
    """Test reader with missing input file."""
    with pytest.raises(ValueError):
        NetworkReader("/nonexistent/network.json")
