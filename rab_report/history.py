"""
Persistent storage for saved reports and the working draft.
Stores data in a JSON file on the user's machine.
"""

import json
import logging
import time
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from .models import Report, ReportMetadata

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_FILE = Path.home() / ".rab_report" / "history.json"


class ReportHistory:
    """
    JSON-file repository of saved reports.
    
    Stores:
    - History: saved reports, newest first, capped at max_entries
    - Draft: the report currently being edited
    """
    
    MAX_ENTRIES = 50
    
    def __init__(self, history_file: str = None, max_entries: int = MAX_ENTRIES):
        self.history_file = Path(history_file) if history_file else DEFAULT_HISTORY_FILE
        self.max_entries = max_entries
        self._data: Dict[str, Any] = {
            'history': [],  # [{id, report}], newest first
            'draft': None,  # report dict or None
        }
        self._load()
    
    def _load(self):
        """Load stored data from file."""
        if not self.history_file.exists():
            return
        try:
            with open(self.history_file, 'r', encoding='utf-8') as f:
                loaded = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Could not read history file %s: %s", self.history_file, e)
            return
        if isinstance(loaded, dict):
            self._data.update(loaded)
    
    def _write(self):
        """Save stored data to file."""
        self.history_file.parent.mkdir(parents=True, exist_ok=True)
        with open(self.history_file, 'w', encoding='utf-8') as f:
            json.dump(self._data, f, indent=2, ensure_ascii=False)
    
    def _next_id(self) -> int:
        # Millisecond timestamp, bumped when two saves land in the same ms
        report_id = int(time.time() * 1000)
        used = {entry['id'] for entry in self._data['history']}
        while report_id in used:
            report_id += 1
        return report_id
    
    def save(self, report: Report) -> int:
        """Add a report to the history and return its id."""
        report_id = self._next_id()
        history = [{'id': report_id, 'report': report.to_dict()}] + self._data['history']
        self._data['history'] = history[:self.max_entries]
        self._write()
        logger.info("Saved report '%s' to history as %d",
                    report.metadata.display_title, report_id)
        return report_id
    
    def list(self) -> List[Tuple[int, ReportMetadata]]:
        """Get (id, metadata) for every saved report, newest first."""
        return [
            (entry['id'], Report.from_dict(entry['report']).metadata)
            for entry in self._data['history']
        ]
    
    def item_count(self, report_id: int) -> int:
        """Number of line items in a saved report."""
        return len(self.load(report_id).items)
    
    def load(self, report_id: int) -> Report:
        """Load a saved report by id."""
        for entry in self._data['history']:
            if entry['id'] == report_id:
                return Report.from_dict(entry['report'])
        raise KeyError(f"No saved report with id {report_id}")
    
    def __len__(self) -> int:
        return len(self._data['history'])
    
    def save_draft(self, report: Report):
        """Remember the report currently being edited."""
        self._data['draft'] = report.to_dict()
        self._write()
    
    def load_draft(self) -> Optional[Report]:
        """Get the stored draft, if any."""
        draft = self._data.get('draft')
        return Report.from_dict(draft) if draft else None
    
    def clear(self):
        """Remove all saved reports and the draft."""
        self._data = {
            'history': [],
            'draft': None,
        }
        self._write()
