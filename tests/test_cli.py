import json
import logging

import pytest

from routegeo.cli import create_argument_parser, format_bearing, main
from routegeo.config import RouteGeoConfig
from routegeo.dms import NO_VALUE, DmsFormat


@pytest.fixture(autouse=True)
def restore_root_logger():
    """main() installs a console handler on the root logger; undo that."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def route_file(tmp_path):
    nodes = [
        {"lat": 0, "lon": 0, "id": 1},
        {"lat": 0, "lon": 1, "id": 2},
        {"lat": 1, "lon": 1, "id": 3},
        {"lat": 1, "lon": 0, "id": 4},
    ]
    path = tmp_path / "route.json"
    path.write_text(json.dumps(nodes), encoding="utf-8")
    return str(path)


def test_distance_command(capsys):
    main(["distance", "52.205", "0.119", "48.857", "2.351"])
    out = capsys.readouterr().out

    assert "Distance: 404." in out
    assert "Initial bearing: 156°" in out
    assert "(SSE)" in out
    assert "Midpoint: 50°32′" in out


def test_distance_command_accepts_dms(capsys):
    main(["distance", "52°12′18″N", "0°07′08″E", "48°51′25″N", "2°21′04″E"])
    assert "Distance: 404." in capsys.readouterr().out


def test_rhumb_distance_command(capsys):
    main(["distance", "--rhumb", "51.127", "1.338", "50.964", "1.853"])
    out = capsys.readouterr().out

    assert "Rhumb distance: 40.31" in out
    assert "(ESE)" in out
    assert "Midpoint:" in out


def test_distance_command_in_decimal_degrees(capsys):
    main(["--format", "d", "--dp", "2", "distance", "0", "0", "0", "1"])
    out = capsys.readouterr().out

    assert "Initial bearing: 090.00° (E)" in out
    assert "Midpoint: 00.00°N, 000.50°E" in out


def test_coincident_points_have_no_bearing(capsys):
    main(["distance", "10", "10", "10", "10"])
    assert f"Initial bearing: {NO_VALUE}" in capsys.readouterr().out


def test_destination_command(capsys):
    main(["destination", "51.4778", "-0.0015", "7794", "300.7"])
    out = capsys.readouterr().out

    assert "Destination: 51°30′" in out
    assert "W" in out
    assert "Final bearing:" in out


def test_rhumb_destination_command(capsys):
    main(["--format", "d", "destination", "--rhumb", "51.127", "1.338", "40300", "116.7"])
    assert "Destination: 50.9642°N, 001.8530°E" in capsys.readouterr().out


def test_intersection_command(capsys):
    main(["intersection", "51.8853", "0.2545", "108.547", "49.0034", "2.5735", "32.435"])
    assert "Intersection: 50°54′" in capsys.readouterr().out


def test_ambiguous_intersection(capsys):
    main(["intersection", "0", "0", "0", "0", "10", "180"])
    assert "No unique intersection" in capsys.readouterr().out


def test_route_command(route_file, capsys):
    main(["route", route_file])
    out = capsys.readouterr().out

    assert out.startswith("Start: ")
    assert "2) turn left and follow the road" in out
    assert "Total route length:" in out


def test_route_metrics_are_logged(route_file, caplog):
    main(["--metrics", "--log-level", "DEBUG", "route", route_file])
    assert "=== ROUTEGEO_METRICS ===" in caplog.text
    assert "node_count=4" in caplog.text


def test_area_command(route_file, capsys):
    main(["area", route_file])
    out = capsys.readouterr().out
    assert out.startswith("Area: ")
    assert "km²" in out


def test_missing_route_file(tmp_path, caplog):
    with pytest.raises(SystemExit) as excinfo:
        main(["route", str(tmp_path / "missing.json")])
    assert excinfo.value.code == 1
    assert "Route file not found" in caplog.text


def test_malformed_route_file(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("[{", encoding="utf-8")
    with pytest.raises(SystemExit) as excinfo:
        main(["route", str(path)])
    assert excinfo.value.code == 1


def test_area_needs_three_nodes(tmp_path):
    path = tmp_path / "line.json"
    path.write_text(json.dumps([{"lat": 0, "lon": 0}, {"lat": 1, "lon": 1}]))
    with pytest.raises(SystemExit) as excinfo:
        main(["area", str(path)])
    assert excinfo.value.code == 1


def test_no_command(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main([])
    assert excinfo.value.code == 1
    assert "usage:" in capsys.readouterr().out


def test_unparseable_coordinate():
    with pytest.raises(SystemExit) as excinfo:
        main(["distance", "north", "0", "1", "1"])
    assert excinfo.value.code == 2


def test_version(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["--version"])
    assert excinfo.value.code == 0
    assert capsys.readouterr().out.startswith("routegeo ")


def test_config_from_args():
    args = create_argument_parser().parse_args(
        ["--format", "dm", "--dp", "1", "--radius", "3959", "route", "x.json",
         "--bearing-tolerance", "30"]
    )
    config = RouteGeoConfig.from_args(args)

    assert config.dms_format is DmsFormat.DM
    assert config.decimal_places == 1
    assert config.radius == 3959
    assert config.bearing_tolerance == 30
    assert config.log_level == "WARNING"
    assert config.metrics is False


def test_config_defaults_without_route_options():
    args = create_argument_parser().parse_args(["distance", "0", "0", "1", "1"])
    assert RouteGeoConfig.from_args(args).bearing_tolerance == 20.0


def test_format_bearing():
    config = RouteGeoConfig(dms_format=DmsFormat.D, decimal_places=1)
    assert format_bearing(None, config) == NO_VALUE
    assert format_bearing(270, config) == "270.0° (W)"
