"""
Deliberate Thinking Configuration

Environment-variable driven configuration.
Nothing here is part of the MCP contract; it only tunes diagnostics.

Environment Variables:
    DELIBERATE_LOG_LEVEL: Level for the stderr log handler (default: INFO)
    DELIBERATE_LOG_DIR: Directory for daily log files (default: unset, no files)
    DELIBERATE_ECHO_THOUGHTS: Render each accepted thought to the log (default: 1)
    DELIBERATE_MAX_ECHO_LENGTH: Max chars of thought text to echo (default: 500)
"""
import os
import platform
from pathlib import Path

# ============== SERVER IDENTITY ==============
SERVER_NAME = "deliberate-thinking"
SERVER_VERSION = "0.1.0"
TOOL_NAME = "deliberatethinking"

# ============== LOGGING ==============
LOG_LEVEL = os.environ.get("DELIBERATE_LOG_LEVEL", "INFO").upper()

_log_dir = os.environ.get("DELIBERATE_LOG_DIR", "")
LOG_DIR = Path(_log_dir) if _log_dir else None

# ============== THOUGHT ECHO ==============
ECHO_THOUGHTS = os.environ.get("DELIBERATE_ECHO_THOUGHTS", "1").lower() not in ("0", "false", "no", "off")
MAX_ECHO_LENGTH = int(os.environ.get("DELIBERATE_MAX_ECHO_LENGTH", "500"))


# ============== HELPER FUNCTIONS ==============
def ensure_directories():
    """Create the log directory if one is configured."""
    if LOG_DIR is not None:
        LOG_DIR.mkdir(parents=True, exist_ok=True)


def get_server_info() -> dict:
    """Get the effective server configuration."""
    return {
        "server_name": SERVER_NAME,
        "server_version": SERVER_VERSION,
        "tool_name": TOOL_NAME,
        "platform": platform.system(),
        "log_level": LOG_LEVEL,
        "log_dir": str(LOG_DIR) if LOG_DIR is not None else "(stderr only)",
        "echo_thoughts": ECHO_THOUGHTS,
        "max_echo_length": MAX_ECHO_LENGTH,
    }
