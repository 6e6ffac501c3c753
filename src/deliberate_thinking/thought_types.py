"""
Thought Types - records and snapshots exchanged with the thought ledger.

Wire names are camelCase (as sent by MCP clients); attribute names are
snake_case.
"""
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional


@dataclass(frozen=True)
class ThoughtRecord:
    """
    One submitted thinking step.

    Frozen: once appended to the ledger a record never changes. A revision
    is a new record pointing back at an older thought number.
    """
    content: str
    thought_number: int
    total_thoughts: int
    next_thought_needed: bool
    is_revision: Optional[bool] = None
    revises_thought: Optional[int] = None
    branch_from_thought: Optional[int] = None
    branch_id: Optional[str] = None
    needs_more_thoughts: Optional[bool] = None

    def with_corrected_total(self) -> "ThoughtRecord":
        """Return a copy whose total estimate is at least its thought number."""
        if self.total_thoughts < self.thought_number:
            return replace(self, total_thoughts=self.thought_number)
        return self

    def to_dict(self) -> Dict:
        data = {
            "thought": self.content,
            "thoughtNumber": self.thought_number,
            "totalThoughts": self.total_thoughts,
            "nextThoughtNeeded": self.next_thought_needed,
        }
        optional = {
            "isRevision": self.is_revision,
            "revisesThought": self.revises_thought,
            "branchFromThought": self.branch_from_thought,
            "branchId": self.branch_id,
            "needsMoreThoughts": self.needs_more_thoughts,
        }
        data.update({k: v for k, v in optional.items() if v is not None})
        return data


@dataclass(frozen=True)
class Snapshot:
    """Status summary returned after each submission."""
    thought_number: int
    total_thoughts: int
    next_thought_needed: bool
    branches: List[str] = field(default_factory=list)
    thought_history_length: int = 0

    def to_dict(self) -> Dict:
        return {
            "thoughtNumber": self.thought_number,
            "totalThoughts": self.total_thoughts,
            "nextThoughtNeeded": self.next_thought_needed,
            "branches": list(self.branches),
            "thoughtHistoryLength": self.thought_history_length,
        }
