"""
Deliberate Thinking - an MCP server that records step-by-step reasoning.
"""
from .config import SERVER_VERSION as __version__
from .thought_ledger import ThoughtLedger
from .thought_types import Snapshot, ThoughtRecord
from .validators import ThoughtValidationError, validate_thought_arguments

__all__ = [
    "ThoughtLedger",
    "ThoughtRecord",
    "Snapshot",
    "ThoughtValidationError",
    "validate_thought_arguments",
    "__version__",
]
