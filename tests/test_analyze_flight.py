import sys

import numpy as np
import pytest

import analyze_flight
from solar_nav.core.logging_utils import FlightRecorder
from solar_nav.core.simulation import build_context, step
from solar_nav.data.bodies import BODY_DEFINITIONS


@pytest.fixture
def recorded_run(tmp_path):
    recorder = FlightRecorder(tmp_path, run_id="run")
    ctx = build_context(
        BODY_DEFINITIONS,
        home="earth",
        target="mars",
        rng=np.random.default_rng(5),
        recorder=recorder,
    )
    for name in ctx.registry.names():
        ctx.registry.mark_ready(name)
    ctx.controls.set("launch", True)
    for _ in range(200):
        step(ctx, 1.0 / 60.0)
    recorder.close()
    return recorder.run_dir


def test_loaders_read_recorded_flight(recorded_run):
    ts = analyze_flight.load_timeseries(recorded_run / analyze_flight.TIMESERIES_FILENAME)
    events = analyze_flight.load_events(recorded_run / analyze_flight.EVENTS_FILENAME)
    assert ts["tick"].size == 200
    assert [event["type"] for event in events] == ["launch", "landed"]
    assert events[0]["body"] == "mars"
    assert "eta" in events[0]["details"]


def test_summary_pairs_launch_with_landing(recorded_run):
    events = analyze_flight.load_events(recorded_run / analyze_flight.EVENTS_FILENAME)
    summary = analyze_flight.summarize_events(events)
    assert summary == {"launch": 1, "landed": 1, "launch_rejected": 0}
    [(target, flown, eta)] = analyze_flight.flight_durations(events)
    assert target == "mars"
    assert eta is not None
    assert abs(flown - eta) <= 2.0


def test_main_writes_figures(recorded_run, monkeypatch, capsys):
    monkeypatch.setattr(sys, "argv", ["analyze_flight.py", str(recorded_run)])
    analyze_flight.main()
    fig_dir = recorded_run / analyze_flight.FIGS_SUBDIR
    assert (fig_dir / "path_xz.png").exists()
    assert (fig_dir / "distance.png").exists()
    output = capsys.readouterr().out
    assert "Run: run" in output
    assert "Flight to mars" in output
