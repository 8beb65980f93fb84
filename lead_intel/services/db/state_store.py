"""
Run state store - a whole campaign run persisted as one JSON document.

Shape: {"run_id": ..., "leads": [...], "updated_at": ..., ...}. Saves write a
temp file in the same directory and os.replace() it over the target, so a
crash mid-write leaves the previous state intact.
"""

import json
import os
import tempfile
import uuid
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..models import utc_now


class LeadStateStore:
    """Load/save the lead list of a run."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> Dict[str, Any]:
        """
        Read the state document.

        Raises:
            FileNotFoundError: if the state file is missing
            ValueError: if the file is not a JSON object with a leads list
        """
        with self.path.open("r", encoding="utf-8") as f:
            state = json.load(f)

        if not isinstance(state, dict):
            raise ValueError(f"State file {self.path} is not a JSON object")
        leads = state.setdefault("leads", [])
        if not isinstance(leads, list):
            raise ValueError(f"State file {self.path} has a non-list 'leads' entry")
        state.setdefault("run_id", self.path.stem)
        return state

    def load_leads(self) -> List[Dict[str, Any]]:
        return self.load()["leads"]

    def save(self, state: Dict[str, Any]) -> None:
        """Atomically replace the state file."""
        state = dict(state)
        state["updated_at"] = utc_now()
        self.path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_path = tempfile.mkstemp(prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(state, f, indent=2, ensure_ascii=False)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    def save_leads(self, leads: List[Dict[str, Any]], run_id: Optional[str] = None, **extra: Any) -> None:
        """Save a lead list, keeping any other keys already in the file."""
        state: Dict[str, Any] = self.load() if self.exists() else {}
        state.update(extra)
        state["run_id"] = run_id or state.get("run_id") or f"run_{uuid.uuid4().hex[:8]}"
        state["leads"] = leads
        self.save(state)
