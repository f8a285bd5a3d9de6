import json

import pytest

from discovery.admin import cli

NOW = "2024-07-03T15:00:00+00:00"


@pytest.fixture()
def prepared_files(tmp_path):
    events = [
        {
            "id": "rex",
            "title": "Jazz Night at The Rex",
            "starts_at": "2024-07-06T20:00:00+00:00",
            "category": "music",
            "event_mode": "in_person",
            "latitude": 43.6504,
            "longitude": -79.3885,
            "price_text": "$25",
            "save_count": 40,
        },
        {
            "id": "park",
            "title": "Yoga in the Park",
            "starts_at": "2024-07-06T09:00:00+00:00",
            "category": "wellness",
            "event_mode": "hybrid",
            "latitude": 43.6465,
            "longitude": -79.4637,
            "price_text": "Free",
        },
        {
            "id": "stream",
            "title": "Online Jazz History Talk",
            "starts_at": "2024-07-04T18:00:00+00:00",
            "category": "community",
            "event_mode": "online",
        },
    ]
    events_path = tmp_path / "events.json"
    events_path.write_text(json.dumps(events), encoding="utf-8")
    settings_path = tmp_path / "settings.toml"
    settings_path.write_text(
        f"[logging]\nconfig_path = \"{(tmp_path / 'no-logging.yaml').as_posix()}\"\n",
        encoding="utf-8",
    )
    return str(events_path), str(settings_path)


def _run(capsys, argv):
    cli.main(argv)
    return json.loads(capsys.readouterr().out)


def test_view_filters_and_sorts(prepared_files, capsys):
    events_path, settings_path = prepared_files
    output = _run(
        capsys,
        [
            "--settings", settings_path,
            "view",
            "--events", events_path,
            "--time-range", "weekend",
            "--sort", "date",
            "--now", NOW,
        ],
    )
    assert [row["id"] for row in output["events"]] == ["park", "rex"]
    assert output["headline"] == "2 events this weekend"
    assert output["active_filters"] == 1
    assert output["summary"] is None


def test_view_applies_search_and_price(prepared_files, capsys):
    events_path, settings_path = prepared_files
    output = _run(
        capsys,
        [
            "--settings", settings_path,
            "view",
            "--events", events_path,
            "--search", "jazz",
            "--price", "free",
            "--now", NOW,
        ],
    )
    assert [row["id"] for row in output["events"]] == ["stream"]
    assert output["headline"] == "1 event this week · Free"


def test_view_custom_range(prepared_files, capsys):
    events_path, settings_path = prepared_files
    output = _run(
        capsys,
        [
            "--settings", settings_path,
            "view",
            "--events", events_path,
            "--time-range", "custom",
            "--from", "2024-07-04",
            "--to", "2024-07-05",
            "--now", NOW,
        ],
    )
    assert [row["id"] for row in output["events"]] == ["stream"]


def test_explain_orders_by_total(prepared_files, capsys):
    events_path, settings_path = prepared_files
    output = _run(capsys, ["--settings", settings_path, "explain", "--events", events_path, "--now", NOW])
    totals = [row["total"] for row in output]
    assert totals == sorted(totals, reverse=True)
    stream = next(row for row in output if row["id"] == "stream")
    assert stream["proximity"] == 10


def test_window_command(prepared_files, capsys):
    _, settings_path = prepared_files
    output = _run(capsys, ["--settings", settings_path, "window", "weekend", "--now", NOW])
    assert output["start"] == "2024-07-06T00:00:00+00:00"
    assert output["end"] == "2024-07-07T23:59:59.999000+00:00"


def test_missing_events_file_exits_with_error(prepared_files, tmp_path, capsys):
    _, settings_path = prepared_files
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--settings", settings_path, "view", "--events", str(tmp_path / "nope.json")])
    assert excinfo.value.code == 2
    assert "Events file not found" in capsys.readouterr().err


def test_invalid_event_row_is_reported(tmp_path):
    path = tmp_path / "events.json"
    path.write_text(json.dumps([{"id": "x", "title": "No start"}]), encoding="utf-8")
    with pytest.raises(ValueError, match="row 0"):
        cli.load_events(path)
