"""
Centralized logging for the Deliberate Thinking server.
Logs to stderr and, when DELIBERATE_LOG_DIR is set, to daily files.

stdout carries the MCP JSON-RPC stream, so no handler may write there.
"""
import json
import logging
import re
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from . import config
from .thought_types import ThoughtRecord


def sanitize_text(text: str, max_length: int = config.MAX_ECHO_LENGTH) -> str:
    """
    Make thought text safe for a single log line.
    - Replace newlines and tabs with " | "
    - Remove control characters
    - Truncate to max length
    """
    if not text:
        return ""

    text = re.sub(r'[\n\r\t]+', ' | ', text)
    text = re.sub(r'[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]', '', text)
    text = re.sub(r'\s+', ' ', text).strip()

    if len(text) > max_length:
        text = text[:max_length - 3] + "..."

    return text


class ThinkingLogger:
    """Centralized logger for thinking-server operations."""

    def __init__(self, log_dir: Optional[Path] = None, level: str = config.LOG_LEVEL,
                 name: str = "DeliberateThinking"):
        self.log_dir = log_dir
        self.log_file: Optional[Path] = None
        self.error_log_file: Optional[Path] = None

        self.logger = logging.getLogger(name)
        self.logger.setLevel(logging.DEBUG)
        self.logger.propagate = False

        # Clear existing handlers to avoid duplicates
        if self.logger.hasHandlers():
            self.logger.handlers.clear()

        file_formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

        if log_dir is not None:
            log_dir = Path(log_dir)
            log_dir.mkdir(parents=True, exist_ok=True)

            # Rotating log files (daily)
            today = datetime.now().strftime('%Y-%m-%d')
            self.log_file = log_dir / f"thinking_{today}.log"
            self.error_log_file = log_dir / f"thinking_errors_{today}.log"

            file_handler = logging.FileHandler(self.log_file, encoding='utf-8')
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(file_formatter)

            error_handler = logging.FileHandler(self.error_log_file, encoding='utf-8')
            error_handler.setLevel(logging.ERROR)
            error_handler.setFormatter(file_formatter)

            self.logger.addHandler(file_handler)
            self.logger.addHandler(error_handler)

        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(getattr(logging, level.upper(), logging.INFO))
        console_handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
        self.logger.addHandler(console_handler)

    def _format_context(self, **context) -> str:
        """Format context dictionary as JSON string."""
        if not context:
            return ""
        try:
            return json.dumps(context, ensure_ascii=False, default=str)
        except (TypeError, ValueError):
            return str(context)

    def _with_context(self, message: str, **context) -> str:
        context_str = self._format_context(**context)
        return f"{message} | {context_str}" if context_str else message

    def info(self, message: str, **context):
        """Log info with context."""
        self.logger.info(self._with_context(message, **context))

    def error(self, message: str, exception: Optional[Exception] = None, **context):
        """Log error with exception details."""
        log_message = self._with_context(message, **context)
        if exception:
            self.logger.error(log_message, exc_info=exception)
        else:
            self.logger.error(log_message)

    def warning(self, message: str, **context):
        self.logger.warning(self._with_context(message, **context))

    def debug(self, message: str, **context):
        self.logger.debug(self._with_context(message, **context))

    def mcp_tool_call(self, tool_name: str, arguments: Dict[str, Any],
                      success: bool, duration_ms: float, error: Optional[str] = None):
        """Log MCP tool call with standardized format."""
        log_data = {
            'tool': tool_name,
            'arg_keys': sorted(arguments or {}),
            'success': success,
            'duration_ms': round(duration_ms, 2)
        }

        if error:
            log_data['error'] = error
            self.warning(f"MCP tool call rejected: {tool_name}", **log_data)
        else:
            self.debug(f"MCP tool call: {tool_name}", **log_data)

    def thought_step(self, record: ThoughtRecord, max_length: int = config.MAX_ECHO_LENGTH):
        """Render an accepted thought for humans watching stderr."""
        self.info(
            f"Deliberate Thinking Step {record.thought_number}/{record.total_thoughts}: "
            f"{sanitize_text(record.content, max_length)}"
        )
        if record.branch_id:
            self.info(f"  Branch: {record.branch_id}")
        if record.is_revision and record.revises_thought is not None:
            self.info(f"  Revision of thought {record.revises_thought}")

    def get_log_stats(self) -> Dict[str, Any]:
        """Get statistics about logs."""
        stats = {
            'log_file': str(self.log_file) if self.log_file else None,
            'error_log_file': str(self.error_log_file) if self.error_log_file else None,
        }

        if self.log_file and self.log_file.exists():
            stats['log_file_size_kb'] = self.log_file.stat().st_size / 1024

        if self.error_log_file and self.error_log_file.exists():
            stats['error_log_size_kb'] = self.error_log_file.stat().st_size / 1024

        return stats


# Global logger instance
_global_logger: Optional[ThinkingLogger] = None


def get_logger() -> ThinkingLogger:
    """Get or create global logger instance."""
    global _global_logger
    if _global_logger is None:
        _global_logger = ThinkingLogger(log_dir=config.LOG_DIR)
    return _global_logger
