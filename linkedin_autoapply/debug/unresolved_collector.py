"""
Unresolved field collector

Read-only observability into form controls no handler could fill. Recording
never changes behavior.

Usage:
    1. FormHandler calls record() whenever a control stays unresolved
    2. flush() runs when a modal session reaches its terminal outcome

Output:
    debug_unresolved.jsonl - one JSON object per unresolved control
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path

log = logging.getLogger(__name__)


class UnresolvedCollector:
    def __init__(self, path="debug_unresolved.jsonl"):
        self.path = Path(path)
        self._buffer = []

    def __len__(self):
        return len(self._buffer)

    def record(self, *, posting, context, reason):
        """
        Buffer one unresolved control.

        Args:
            posting: JobPosting being applied to, or None outside a session
            context: FieldContext of the control
            reason: why no answer was applied (no_handler, handler_failed, ...)
        """
        self._buffer.append(
            {
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "job_id": posting.external_id if posting else "",
                "job_url": posting.listing_url if posting else "",
                "field_type": context.control_kind.value,
                "question_text": context.question,
                "options": context.options or None,
                "required": context.required,
                "error": context.error or None,
                "reason": reason,
            }
        )

    def flush(self, outcome="", outcome_reason=""):
        """Append buffered records to the JSONL file. Called on terminal outcomes only."""
        if not self._buffer:
            return 0

        count = len(self._buffer)
        with open(self.path, "a", encoding="utf-8") as f:
            for record in self._buffer:
                record["outcome"] = outcome
                record["outcome_reason"] = outcome_reason
                f.write(json.dumps(record, ensure_ascii=False) + "\n")

        self._buffer.clear()
        log.debug("Flushed %d unresolved field(s) to %s", count, self.path)
        return count
