import pytest

import main
from flocking.resources import BoidSettings, WorldBounds


def test_short_headless_run_succeeds():
    code = main.main(
        ["--boids", "20", "--ticks", "5", "--seed", "1", "--log-level", "WARNING"]
    )

    assert code == 0


def test_soft_boundary_with_goal():
    code = main.main(
        [
            "--boids", "10",
            "--ticks", "3",
            "--boundary", "soft_repulsion",
            "--steering", "desired_velocity",
            "--goal", "10", "0",
            "--log-level", "WARNING",
        ]
    )

    assert code == 0


def test_invalid_world_size_is_a_configuration_error():
    assert main.main(["--width", "-5", "--log-level", "CRITICAL"]) == 2


def test_out_of_range_reports_unusual_values():
    settings = BoidSettings(separation_weight=9.0)
    bounds = WorldBounds(width=1500.0, height=700.0)

    assert main.out_of_range(settings, bounds) == ["separation_weight", "width"]
    assert main.out_of_range(BoidSettings(), WorldBounds()) == []


def test_unknown_log_level_is_a_usage_error():
    with pytest.raises(SystemExit) as exc:
        main.main(["--log-level", "LOUD"])

    assert exc.value.code == 2


def test_log_level_is_case_insensitive():
    args = main.build_parser().parse_args(["--log-level", "debug"])

    assert args.log_level == "DEBUG"
