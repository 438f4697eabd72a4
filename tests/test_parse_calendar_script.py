"""Tests for the parse_calendar command-line script."""

import json
import sqlite3

import pytest

import scripts.parse_calendar as parse_script


@pytest.fixture
def logged(monkeypatch):
    """Capture parse log writes instead of touching the real database."""
    traces = []
    monkeypatch.setattr(parse_script, "log_parse", traces.append)
    return traces


def test_writes_json_output(tmp_path, logged, maize_calendar_xlsx):
    input_file = tmp_path / "maize.xlsx"
    input_file.write_bytes(maize_calendar_xlsx)
    output_file = tmp_path / "out" / "maize.json"

    parse_script.main(
        [
            str(input_file),
            "--output", str(output_file),
            "--region", "Ashanti",
            "--district", "Ejura",
            "--grid",
            "--quiet",
        ]
    )

    output = json.loads(output_file.read_text())
    assert output["success"] is True
    assert output["metadata"]["region"] == "Ashanti"
    assert output["metadata"]["district"] == "Ejura"
    assert "commodity" not in output["metadata"]
    assert output["data"]["summary"]["totalActivities"] == 4
    assert len(output["grid"]["rows"]) == 4
    assert len(logged) == 1
    assert logged[0].filename == "maize.xlsx"


def test_prints_json_to_stdout(tmp_path, logged, capsys, scenario_a_xlsx):
    input_file = tmp_path / "calendar.xlsx"
    input_file.write_bytes(scenario_a_xlsx)

    parse_script.main([str(input_file), "--quiet"])

    output = json.loads(capsys.readouterr().out)
    assert output["data"]["activities"][0]["name"] == "Land preparation"
    assert "grid" not in output


def test_malformed_file_exits_with_error(tmp_path, logged, capsys):
    input_file = tmp_path / "broken.xlsx"
    input_file.write_bytes(b"not a workbook")

    with pytest.raises(SystemExit) as exc:
        parse_script.main([str(input_file), "--quiet"])

    assert exc.value.code == 1
    assert capsys.readouterr().out.startswith("Error:")
    # Failed parses are logged too
    assert len(logged) == 1


def test_missing_file_exits_with_error(tmp_path, logged):
    with pytest.raises(SystemExit) as exc:
        parse_script.main([str(tmp_path / "nope.xlsx")])

    assert exc.value.code == 1
    assert logged == []


def test_log_failure_does_not_fail_the_run(tmp_path, monkeypatch, capsys, scenario_a_xlsx):
    def broken_log(trace):
        raise sqlite3.OperationalError("no such table: parse_requests")

    monkeypatch.setattr(parse_script, "log_parse", broken_log)
    input_file = tmp_path / "calendar.xlsx"
    input_file.write_bytes(scenario_a_xlsx)

    parse_script.main([str(input_file)])

    captured = capsys.readouterr()
    assert json.loads(captured.out)["success"] is True
    assert "could not write parse log" in captured.err


def test_save_writes_under_output_dir(tmp_path, monkeypatch, logged, scenario_a_xlsx):
    monkeypatch.setattr(parse_script, "OUTPUT_DIR", tmp_path / "output")
    input_file = tmp_path / "calendar.xlsx"
    input_file.write_bytes(scenario_a_xlsx)

    parse_script.main([str(input_file), "--save", "--quiet"])

    saved = tmp_path / "output" / "calendars" / "calendar.json"
    assert json.loads(saved.read_text())["success"] is True


def test_reads_legacy_xls_input(tmp_path, logged, capsys, maize_calendar_xls):
    input_file = tmp_path / "maize.xls"
    input_file.write_bytes(maize_calendar_xls)

    parse_script.main([str(input_file), "--quiet"])

    output = json.loads(capsys.readouterr().out)
    assert output["success"] is True
    assert output["data"]["summary"]["totalActivities"] == 4
