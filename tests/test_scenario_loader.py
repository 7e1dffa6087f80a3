"""
Scenario Loader and CLI Tests

Tests loading both scenario shapes, input validation and the checker's
exit codes.
"""

import json
import sys
from pathlib import Path

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from checker import EXIT_INVALID, EXIT_SAFE, EXIT_UNSAFE, demo_configuration, main
from utils.scenario_loader import (
    ScenarioLoadError, get_scenario_description, load_scenario, parse_scenario
)


SCENARIOS_DIR = project_root / "tests" / "scenarios"


def test_load_direct_format():
    """Owners and free pool given directly."""
    configuration = load_scenario(str(SCENARIOS_DIR / "chain.json"))

    print(configuration.display())
    assert len(configuration) == 2
    assert configuration.width == 2
    assert configuration.get_free() == [1, 1]
    assert sorted(o.owner_id for o in configuration.get_owned()) == [0, 1]


def test_load_process_resource_format():
    """required = max_demand - allocation, free = total - sum(allocation)."""
    configuration = load_scenario(str(SCENARIOS_DIR / "textbook_processes.json"))

    assert len(configuration) == 5
    assert configuration.get_free() == [3, 3, 2]

    by_id = {o.owner_id: o for o in configuration.get_owned()}
    assert by_id[0].required == [7, 4, 3]
    assert by_id[0].owned == [0, 1, 0]
    assert by_id[2].required == [6, 0, 0]


def test_over_allocation_rejected():
    with pytest.raises(ScenarioLoadError, match="exceed total instances"):
        load_scenario(str(SCENARIOS_DIR / "over_allocated.json"))


def test_width_mismatch_rejected():
    with pytest.raises(ScenarioLoadError, match="length mismatch"):
        load_scenario(str(SCENARIOS_DIR / "width_mismatch.json"))


@pytest.mark.parametrize("data, message", [
    ({"free": [1]}, "missing 'owners'"),
    ({"owners": []}, "missing 'free'"),
    ({"owners": [], "free": [1]}, "at least one owner"),
    ({"owners": [{"owned": [0]}], "free": [1]}, "missing required field: required"),
    ({"owners": [{"id": 1, "owned": [0], "required": [1]},
                 {"id": 1, "owned": [0], "required": [1]}], "free": [1]}, "Duplicate owner id"),
    ({"owners": [{"owned": [0], "required": [-2]}], "free": [1]}, "cannot be negative"),
    ({"processes": []}, "missing 'resources'"),
    ([1, 2, 3], "JSON object"),
    ({"owners": [{"owned": [0], "required": [1]}], "free": 5}, "free: expected a list of counts"),
    ({"owners": [5], "free": [1]}, "Owner 0 must be an object"),
    ({"owners": [{"owned": "0", "required": [1]}], "free": [1]}, "expected a list of counts"),
    ({"resources": [{"type_id": 0, "total_instances": 3}],
      "processes": [{"pid": 1, "max_demand": 3}]}, "process 1 max_demand: expected a list"),
    ({"resources": [{"type_id": 0, "total_instances": "3"}],
      "processes": [{"pid": 1, "max_demand": [3]}]}, "total_instances"),
    ({"resources": [{"type_id": 0, "total_instances": 3}],
      "processes": ["p1"]}, "Process 0 must be an object"),
    ({"resources": {"type_id": 0}, "processes": []}, "'resources' must be a list"),
])
def test_invalid_scenarios(data, message):
    with pytest.raises(ScenarioLoadError, match=message):
        parse_scenario(data)


def test_missing_and_malformed_files(tmp_path):
    with pytest.raises(ScenarioLoadError, match="not found"):
        load_scenario(str(tmp_path / "absent.json"))

    broken = tmp_path / "broken.json"
    broken.write_text("{ not json", encoding="utf-8")
    with pytest.raises(ScenarioLoadError, match="Invalid JSON"):
        load_scenario(str(broken))

    assert get_scenario_description(str(broken)) == ''
    assert get_scenario_description(str(tmp_path / "absent.json")) == ''


def test_scenario_description():
    description = get_scenario_description(str(SCENARIOS_DIR / "chain.json"))
    assert description.startswith("X needs")


def test_demo_configuration_matches_classic_file():
    demo = demo_configuration()
    from_file = load_scenario(str(project_root / "scenarios" / "demo_classic.json"))
    assert demo.key() == from_file.key()


def test_cli_exit_codes(capsys):
    assert main(["--scenario", str(SCENARIOS_DIR / "chain.json")]) == EXIT_SAFE
    assert main(["--demo"]) == EXIT_UNSAFE
    assert main(["--scenario", str(SCENARIOS_DIR / "over_allocated.json")]) == EXIT_INVALID

    output = capsys.readouterr().out
    assert "Verdict: SAFE" in output
    assert "Verdict: UNSAFE" in output
    assert "[ERROR]" in output


def test_cli_semantics_flag(capsys):
    divergent = str(SCENARIOS_DIR / "divergent.json")
    assert main(["--scenario", divergent]) == EXIT_UNSAFE
    assert main(["--scenario", divergent, "--semantics", "frontier_nonempty"]) == EXIT_SAFE


def test_cli_trace_and_log_file(tmp_path, capsys):
    log_path = tmp_path / "check.log"
    code = main([
        "--scenario", str(SCENARIOS_DIR / "chain.json"),
        "--trace", "--verbose", "--log-file", str(log_path)
    ])
    assert code == EXIT_SAFE

    output = capsys.readouterr().out
    assert "SEARCH TRACE" in output
    assert "GRANT O1" in output

    logged = log_path.read_text(encoding="utf-8")
    assert logged.startswith("Safety Check Log - ")
    assert "Verdict: SAFE" in logged
    assert "[DEBUG] Expansion 1" in logged


def test_cli_requires_a_source():
    with pytest.raises(SystemExit):
        main([])


def test_scenario_files_are_valid_json():
    for path in list(SCENARIOS_DIR.glob("*.json")) + list((project_root / "scenarios").glob("*.json")):
        with open(path, encoding="utf-8") as f:
            json.load(f)


@pytest.mark.parametrize("data", [
    {"owners": [{"owned": [0], "required": [1]}], "free": 5},
    {"owners": ["not an owner"], "free": [1]},
    {"resources": [{"type_id": 0, "total_instances": "3"}],
     "processes": [{"pid": 1, "max_demand": [3]}]},
    {"resources": [{"type_id": 0, "total_instances": 3}],
     "processes": [{"pid": 1, "max_demand": 3}]},
])
def test_cli_rejects_mistyped_fields(tmp_path, capsys, data):
    """Wrong JSON types are reported as invalid input, not a traceback."""
    scenario = tmp_path / "mistyped.json"
    scenario.write_text(json.dumps(data), encoding="utf-8")

    assert main(["--scenario", str(scenario)]) == EXIT_INVALID
    assert "[ERROR] Failed to load scenario" in capsys.readouterr().out
