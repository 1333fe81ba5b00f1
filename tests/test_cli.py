import json

import pytest

from wavefinder.cli import _parse_weight_pairs, main

PREFERENCE_ARGS = [
    "--location", "Lisbon",
    "--ability", "2",
    "--max-travel-time", "10",
    "--budget", "1200",
    "--temperature", "2",
    "--start", "2026-10-01",
]


def test_rank_json_output(capsys):
    assert main(["rank", *PREFERENCE_ARGS, "--limit", "3", "--json"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert 0 < len(data["results"]) <= 3
    assert data["query"]["travel_month"] == 10


def test_rank_text_output_with_explanations(capsys):
    assert main(["rank", *PREFERENCE_ARGS, "--limit", "2", "--explain"]) == 0
    out = capsys.readouterr().out
    assert "Top results:" in out
    assert "overall=" in out


def test_explain_unknown_destination_exits_2(capsys):
    assert main(["explain", "--id", "nowhere", *PREFERENCE_ARGS]) == 2
    assert "Unknown destination" in capsys.readouterr().err


def test_seasonal_and_forecast_json(capsys):
    assert main(["seasonal", "--id", "pt-ericeira", "--month", "10", "--json"]) == 0
    assert json.loads(capsys.readouterr().out)["month"] == 10

    assert main(["forecast", "--id", "pt-ericeira", "--json"]) == 0
    assert 1 <= json.loads(capsys.readouterr().out)["rating"] <= 10


def test_weight_pairs_are_validated():
    assert _parse_weight_pairs(["Budget=40"]) == {"budget": 40.0}
    with pytest.raises(ValueError):
        _parse_weight_pairs(["budget"])
    with pytest.raises(ValueError):
        _parse_weight_pairs(["vibes=10"])
