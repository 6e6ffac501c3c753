"""
Thought Ledger - append-only thought history with a branch index.

One ledger is created per server process and handed to the request
handlers. Every public method takes the same lock, so a submit is seen
either completely (history and branch index) or not at all.
"""
import threading
from typing import Dict, List

from .thought_types import Snapshot, ThoughtRecord


class ThoughtLedger:
    """
    Track submitted thoughts and the branches they belong to.

    History holds every record in call order. The branch index maps a
    branch id to the records submitted under it; dict order gives the
    first-seen order of branch ids. References such as revises_thought
    and branch_from_thought are stored as given and never checked.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._history: List[ThoughtRecord] = []
        self._branches: Dict[str, List[ThoughtRecord]] = {}

    def submit(self, record: ThoughtRecord) -> Snapshot:
        """
        Append a validated thought and report where the sequence stands.

        Args:
            record: Output of validate_thought_arguments

        Returns:
            Snapshot taken right after the append
        """
        record = record.with_corrected_total()

        with self._lock:
            self._history.append(record)
            if record.branch_id:
                self._branches.setdefault(record.branch_id, []).append(record)

            return Snapshot(
                thought_number=record.thought_number,
                total_thoughts=record.total_thoughts,
                next_thought_needed=record.next_thought_needed,
                branches=list(self._branches),
                thought_history_length=len(self._history),
            )

    def history(self) -> List[ThoughtRecord]:
        """Get a copy of the full history in submission order."""
        with self._lock:
            return list(self._history)

    def branch_history(self, branch_id: str) -> List[ThoughtRecord]:
        """Get a copy of one branch's records (empty for an unknown id)."""
        with self._lock:
            return list(self._branches.get(branch_id, []))

    def branch_names(self) -> List[str]:
        """Get all branch ids in first-seen order."""
        with self._lock:
            return list(self._branches)

    @property
    def history_length(self) -> int:
        with self._lock:
            return len(self._history)
