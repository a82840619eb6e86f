"""
End-to-end tests for the suggest-validation CLI.

Runs the argparse entry point on JSON files and checks the printed results
and exit codes.
"""

import json

import pytest

from suggest_validation.cli.suggest_cli import main


def _run(argv, capsys):
    with pytest.raises(SystemExit) as exc_info:
        main(argv)
    return exc_info.value.code, capsys.readouterr().out


def _result_lines(out: str) -> list[dict]:
    return [json.loads(line) for line in out.splitlines() if line.startswith("{")]


@pytest.mark.e2e
def test_validate_valid_file(write_json, valid_record, capsys):
    path = write_json("valid.json", valid_record)

    code, out = _run(["validate", "--input", str(path)], capsys)

    assert code == 0
    [result] = _result_lines(out)
    assert result["is_valid"] is True
    assert result["mode"] == "strict"
    assert result["tier_summary"]["core"] == {"provided": 7, "required": 7, "valid": 7}


@pytest.mark.e2e
def test_validate_mixed_files_exits_nonzero(write_json, valid_record, capsys):
    good = write_json("good.json", valid_record)
    bad = write_json("bad.json", {**valid_record, "lat": 95})

    code, out = _run(["validate", "--input", str(good), str(bad)], capsys)

    assert code == 1
    results = _result_lines(out)
    assert [r["is_valid"] for r in results] == [True, False]
    assert results[1]["errors"][0]["code"] == "out_of_range"


@pytest.mark.e2e
def test_validate_legacy_file_compatible_mode(write_json, legacy_record, capsys):
    path = write_json("legacy.json", legacy_record)

    code, out = _run(["validate", "--input", str(path), "--mode", "compatible"], capsys)

    assert code == 0
    [result] = _result_lines(out)
    assert result["sanitized"]["wheelchair"] == "yes"
    assert result["sanitized"]["charge"] == "0.50 GBP"


@pytest.mark.e2e
def test_malformed_and_missing_files(tmp_path, capsys):
    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")

    code, out = _run(["validate", "--input", str(broken), str(tmp_path / "absent.json")], capsys)

    assert code == 1
    results = _result_lines(out)
    assert results[0]["error"] == "invalid_json"
    assert results[1]["error"] == "file_not_found"


@pytest.mark.e2e
def test_validate_with_metrics_and_summary(write_json, valid_record, capsys, monkeypatch):
    monkeypatch.setenv("METRICS_LEVEL", "detailed")
    path = write_json("valid.json", valid_record)

    code, out = _run(["validate", "--input", str(path), "--metrics", "--summary"], capsys)

    assert code == 0
    assert "# TYPE tier_validation_duration_seconds histogram" in out
    assert 'tier="all"' in out
    assert '"validation_calls": 1' in out


@pytest.mark.e2e
def test_bad_tier_config_exits_with_config_error(write_json, valid_record, tmp_path, capsys):
    path = write_json("valid.json", valid_record)

    code, _ = _run(["validate", "--input", str(path), "--config", str(tmp_path / "none.yaml")], capsys)

    assert code == 2


@pytest.mark.e2e
def test_tiers_command(capsys):
    main(["tiers"])
    out = capsys.readouterr().out

    assert "TIER CONFIGURATION 1.0.0" in out
    assert "Core properties: access, amenity, fee, lat, lng, opening_hours, wheelchair" in out


@pytest.mark.e2e
def test_no_command_prints_help(capsys):
    code, out = _run([], capsys)

    assert code == 1
    assert "validate" in out


@pytest.mark.e2e
def test_summary_window_choices(write_json, valid_record, capsys):
    path = write_json("valid.json", valid_record)

    code, out = _run(["validate", "--input", str(path), "--summary", "--window", "24h"], capsys)
    assert code == 0
    assert '"time_window": "24h"' in out

    code, _ = _run(["validate", "--input", str(path), "--window", "30d"], capsys)
    assert code == 2
