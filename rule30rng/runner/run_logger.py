"""Run artifact logger — writes structured files into {base_dir}/{run_id}/.

Produces:
  - config.json        Full run config snapshot
  - blocks.jsonl       Per-block metric records (append)
  - events.jsonl       Semantic event records (append)
  - run_summary.json   Run-level summary (written once at end)

Uses only stdlib (json, pathlib, datetime). No database dependency.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any


class RunLogger:
    """Writes sampling-run artifacts to a run directory."""

    def __init__(self, base_dir: str | Path, run_id: str) -> None:
        self._run_dir = Path(base_dir) / run_id
        self._run_dir.mkdir(parents=True, exist_ok=True)
        self._blocks_path = self._run_dir / "blocks.jsonl"
        self._events_path = self._run_dir / "events.jsonl"

    @property
    def run_dir(self) -> Path:
        return self._run_dir

    # ------------------------------------------------------------------
    # Config snapshot
    # ------------------------------------------------------------------

    def write_config(self, config_dict: dict[str, Any]) -> None:
        """Write the full run config as config.json."""
        payload = {
            "written_at": datetime.now(timezone.utc).isoformat(),
            **config_dict,
        }
        (self._run_dir / "config.json").write_text(
            json.dumps(payload, indent=2, default=str), encoding="utf-8"
        )

    # ------------------------------------------------------------------
    # Append-only streams
    # ------------------------------------------------------------------

    def _append(self, path: Path, records: list[dict[str, Any]]) -> None:
        if not records:
            return
        with path.open("a", encoding="utf-8") as f:
            for rec in records:
                f.write(json.dumps(rec, default=str) + "\n")

    def log_block_metrics(self, records: list[dict[str, Any]]) -> None:
        """Append block metric records to blocks.jsonl."""
        self._append(self._blocks_path, records)

    def log_events(self, events: list[dict[str, Any]]) -> None:
        """Append semantic events to events.jsonl."""
        self._append(self._events_path, events)

    # ------------------------------------------------------------------
    # Run summary (write once)
    # ------------------------------------------------------------------

    def write_summary(self, summary: dict[str, Any]) -> None:
        """Write the run summary as run_summary.json."""
        if not summary:
            return
        payload = {
            "written_at": datetime.now(timezone.utc).isoformat(),
            **summary,
        }
        (self._run_dir / "run_summary.json").write_text(
            json.dumps(payload, indent=2, default=str), encoding="utf-8"
        )
