"""Analyze a recorded flight and generate diagnostic figures."""
from __future__ import annotations

import argparse
import csv
import json
from pathlib import Path
from typing import Dict, List

import numpy as np

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt

from solar_nav.core.logging_utils import parse_details


TIMESERIES_FILENAME = "timeseries.csv"
EVENTS_FILENAME = "events.csv"
META_FILENAME = "meta.json"
FIGS_SUBDIR = "figs"
SUMMARY_EVENTS = ("launch", "landed", "launch_rejected")


def load_timeseries(path: Path) -> Dict[str, np.ndarray]:
    with path.open("r", newline="") as fh:
        reader = csv.DictReader(fh)
        columns: Dict[str, List[float]] = {name: [] for name in reader.fieldnames or []}
        for row in reader:
            for key, value in row.items():
                if key is None:
                    continue
                columns.setdefault(key, []).append(float(value))
    return {key: np.asarray(values) for key, values in columns.items()}


def load_events(path: Path) -> List[dict]:
    with path.open("r", newline="") as fh:
        reader = csv.DictReader(fh)
        events: List[dict] = []
        for row in reader:
            if not row:
                continue
            events.append(
                {
                    "tick": int(float(row["tick"])),
                    "type": row["type"],
                    "body": row["body"],
                    "details": parse_details(row.get("details") or ""),
                }
            )
    return events


def ensure_fig_dir(run_dir: Path) -> Path:
    fig_dir = run_dir / FIGS_SUBDIR
    fig_dir.mkdir(parents=True, exist_ok=True)
    return fig_dir


def summarize_events(events: List[dict]) -> Dict[str, int]:
    summary: Dict[str, int] = {etype: 0 for etype in SUMMARY_EVENTS}
    for event in events:
        if event["type"] in summary:
            summary[event["type"]] += 1
    return summary


def flight_durations(events: List[dict]) -> List[tuple[str, int, float | None]]:
    """Pair each launch with the next landing: (target, ticks flown, predicted eta)."""

    flights: List[tuple[str, int, float | None]] = []
    pending: dict | None = None
    for event in events:
        if event["type"] == "launch":
            pending = event
        elif event["type"] == "landed" and pending is not None:
            eta = pending["details"].get("eta")
            flights.append(
                (pending["body"], event["tick"] - pending["tick"], float(eta) if eta else None)
            )
            pending = None
    return flights


def plot_path(fig_dir: Path, ts: Dict[str, np.ndarray], meta: dict, events: List[dict]) -> None:
    fig, ax = plt.subplots(figsize=(6, 6))
    theta = np.linspace(0, 2 * np.pi, 256)
    for body in meta.get("bodies", {}).values():
        radius = float(body.get("orbit_radius", 0.0))
        if radius > 0.0:
            ax.plot(radius * np.cos(theta), radius * np.sin(theta), color="#888888", alpha=0.25, lw=0.8)
    ax.scatter([0.0], [0.0], color="#ffd43b", s=60, label="Sun")
    ax.plot(ts["x"], ts["z"], color="#6bc5c0", lw=1.5, label="Ship")
    intercepts = [e for e in events if e["type"] == "launch" and "x" in e["details"]]
    if intercepts:
        ax.scatter(
            [float(e["details"]["x"]) for e in intercepts],
            [float(e["details"]["z"]) for e in intercepts],
            color="#d9480f",
            marker="x",
            s=50,
            label="Intercept point",
        )
    ax.set_aspect("equal", "box")
    ax.set_xlabel("x")
    ax.set_ylabel("z")
    ax.set_title("Ship path (x-z)")
    ax.legend()
    fig.tight_layout()
    fig.savefig(fig_dir / "path_xz.png", dpi=150)
    plt.close(fig)


def plot_distance(fig_dir: Path, ts: Dict[str, np.ndarray], events: List[dict]) -> None:
    fig, ax = plt.subplots(figsize=(7, 4))
    distance = np.where(ts["distance"] >= 0.0, ts["distance"], np.nan)
    ax.plot(ts["tick"], distance, color="#4dabf7")
    for event in events:
        if event["type"] == "launch":
            ax.axvline(event["tick"], color="#2f9e44", linestyle="--", alpha=0.5, label="Launch")
        elif event["type"] == "landed":
            ax.axvline(event["tick"], color="#d9480f", linestyle=":", alpha=0.5, label="Landed")
    handles, labels = ax.get_legend_handles_labels()
    if handles:
        unique = dict(zip(labels, handles))
        ax.legend(list(unique.values()), list(unique.keys()))
    ax.set_xlabel("tick")
    ax.set_ylabel("distance to intercept point")
    ax.set_title("Distance to destination")
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    fig.savefig(fig_dir / "distance.png", dpi=150)
    plt.close(fig)


def print_summary(
    run_dir: Path,
    meta: dict,
    ticks: int,
    event_summary: Dict[str, int],
    flights: List[tuple[str, int, float | None]],
) -> None:
    print(f"Run: {run_dir.name}")
    print(f" Home: {meta.get('home', '?')}, initial target: {meta.get('target', '?')}")
    print(f" Recorded ticks: {ticks}")
    for target, flown, eta in flights:
        if eta is not None:
            print(f" Flight to {target}: {flown} ticks (predicted {eta:.1f})")
        else:
            print(f" Flight to {target}: {flown} ticks")
    print(
        " Events:" +
        ",".join(f" {etype}: {count}" for etype, count in event_summary.items())
    )


def main() -> None:
    parser = argparse.ArgumentParser(description="Analyze a recorded flight and create figures.")
    parser.add_argument("run_dir", nargs="?", help="Path to a specific flight directory")
    args = parser.parse_args()

    base_runs_dir = Path("data") / "flights"
    if args.run_dir:
        run_path = Path(args.run_dir)
        if not run_path.is_dir():
            run_path = base_runs_dir / args.run_dir
    else:
        last_run_file = base_runs_dir / "last_run.txt"
        if not last_run_file.exists():
            parser.error("No flight given and last_run.txt is missing.")
        run_id = last_run_file.read_text(encoding="utf-8").strip()
        run_path = base_runs_dir / run_id

    if not run_path.is_dir():
        parser.error(f"Flight directory not found: {run_path}")

    meta_path = run_path / META_FILENAME
    ts_path = run_path / TIMESERIES_FILENAME
    ev_path = run_path / EVENTS_FILENAME

    if not ts_path.exists() or not ev_path.exists():
        parser.error("Flight directory is missing timeseries.csv or events.csv.")

    meta: dict = {}
    if meta_path.exists():
        with meta_path.open("r", encoding="utf-8") as fh:
            meta = json.load(fh)

    ts = load_timeseries(ts_path)
    events = load_events(ev_path)

    if not ts or ts["tick"].size == 0:
        parser.error("timeseries.csv is empty, nothing to analyze.")

    fig_dir = ensure_fig_dir(run_path)
    plot_path(fig_dir, ts, meta, events)
    plot_distance(fig_dir, ts, events)

    print_summary(run_path, meta, int(ts["tick"].size), summarize_events(events), flight_durations(events))


if __name__ == "__main__":
    main()
