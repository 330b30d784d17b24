"""Flight recording: per-tick ship samples and navigation events as CSV."""
from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Mapping, Optional, Sequence


def _fmt(value: object) -> str:
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, (int, float)):
        return f"{value:.10g}"
    return str(value)


class _CsvChannel:
    """One append-only CSV file with a row buffer flushed every ``threshold`` rows."""

    def __init__(self, path: Path, header: Sequence[str], threshold: int) -> None:
        self.path = path
        self._threshold = max(1, threshold)
        self._pending: list[str] = []
        self._fh = path.open("w", newline="", encoding="utf-8")
        self._fh.write(",".join(header) + "\n")

    def append(self, cells: Sequence[str]) -> None:
        self._pending.append(",".join(cells))
        if len(self._pending) >= self._threshold:
            self.flush()

    def flush(self) -> None:
        if not self._pending:
            return
        self._fh.write("\n".join(self._pending) + "\n")
        self._fh.flush()
        self._pending.clear()

    def close(self) -> None:
        self.flush()
        self._fh.close()


def _unique_run_dir(root: Path, base: str) -> tuple[str, Path]:
    run_id = base
    n = 0
    while (root / run_id).exists():
        n += 1
        run_id = f"{base}_{n:02d}"
    path = root / run_id
    path.mkdir(parents=True, exist_ok=False)
    return run_id, path


class FlightRecorder:
    """Writes ``timeseries.csv``, ``events.csv`` and ``meta.json`` for one flight session.

    The newest run id is stored in ``<root>/last_run.txt`` so the analysis
    script can find it without arguments.
    """

    TIMESERIES_HEADER = ["tick", "x", "y", "z", "distance", "traveling"]
    EVENTS_HEADER = ["tick", "type", "body", "details"]

    def __init__(
        self,
        root_dir: str | Path = "data/flights",
        run_id: Optional[str] = None,
        *,
        timeseries_flush_threshold: int = 200,
        events_flush_threshold: int = 20,
    ) -> None:
        self.root_dir = Path(root_dir)
        self.root_dir.mkdir(parents=True, exist_ok=True)
        base = run_id or datetime.now().strftime("%Y%m%d_%H%M%S") + "_flight"
        self.run_id, self.run_dir = _unique_run_dir(self.root_dir, base)
        self.meta_path = self.run_dir / "meta.json"

        self._samples = _CsvChannel(
            self.run_dir / "timeseries.csv", self.TIMESERIES_HEADER, timeseries_flush_threshold
        )
        self._events = _CsvChannel(self.run_dir / "events.csv", self.EVENTS_HEADER, events_flush_threshold)
        self.closed = False

        (self.root_dir / "last_run.txt").write_text(self.run_id, encoding="utf-8")

    @property
    def timeseries_path(self) -> Path:
        return self._samples.path

    @property
    def events_path(self) -> Path:
        return self._events.path

    def write_meta(self, meta: dict) -> None:
        self.meta_path.write_text(json.dumps(meta, indent=2, sort_keys=True), encoding="utf-8")

    def log_sample(self, values: Sequence[float]) -> None:
        self._samples.append([_fmt(v) for v in values])

    def log_event(
        self,
        tick: int,
        event_type: str,
        body: str,
        details: Mapping[str, object] | None = None,
    ) -> None:
        self._events.append([_fmt(tick), event_type, body, format_details(details or {})])

    def close(self) -> None:
        if self.closed:
            return
        self._samples.close()
        self._events.close()
        self.closed = True

    def __enter__(self) -> "FlightRecorder":
        return self

    def __exit__(self, exc_type, exc, tb) -> Optional[bool]:
        self.close()
        return None


def format_details(details: Mapping[str, object]) -> str:
    """``key=value`` pairs joined by ``;``. Commas are replaced so the CSV column stays whole."""

    return ";".join(f"{key}={_fmt(value)}" for key, value in details.items()).replace(",", " ")


def parse_details(text: str) -> dict[str, str]:
    details: dict[str, str] = {}
    for part in text.split(";"):
        if "=" in part:
            key, value = part.split("=", 1)
            details[key] = value
    return details


__all__ = ["FlightRecorder", "format_details", "parse_details"]
