"""
Soccerverse Discord Bot - Logger
================================

Tree-style logger with Europe/Paris timestamps and daily log folders.

Features:
- Unique run ID per bot session
- Tree formatting for structured key/value details
- Console and file output simultaneously
- Separate error file for warnings and failures
- Automatic cleanup of old log folders (7+ days)

Log Structure:
    logs/
    ├── 2026-10-18/
    │   ├── Soccerverse-2026-10-18.log
    │   └── Soccerverse-Errors-2026-10-18.log
    └── ...

Author: Soccerverse Bot
"""

import os
import re
import shutil
import traceback
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any, List, Optional, Tuple
from zoneinfo import ZoneInfo


# =============================================================================
# Constants
# =============================================================================

LOG_RETENTION_DAYS = 7
LOG_PREFIX = "Soccerverse"
LOG_TIMEZONE = ZoneInfo("Europe/Paris")

EMOJI_PATTERN = re.compile(
    "["
    "\U0001F600-\U0001F64F"  # emoticons
    "\U0001F300-\U0001F5FF"  # symbols & pictographs
    "\U0001F680-\U0001F6FF"  # transport & map symbols
    "\U0001F1E0-\U0001F1FF"  # flags
    "\U00002702-\U000027B0"  # dingbats
    "\U0001F900-\U0001F9FF"  # supplemental symbols
    "\U00002600-\U000026FF"  # misc symbols
    "\U00002300-\U000023FF"  # misc technical
    "]+",
    flags=re.UNICODE
)


class TreeSymbols:
    """Box-drawing characters for tree formatting."""
    BRANCH = "├─"
    LAST = "└─"
    PIPE = "│ "
    SPACE = "  "


# =============================================================================
# MiniTreeLogger
# =============================================================================

class MiniTreeLogger:
    """Logger writing tree-formatted entries to console and daily log files."""

    def __init__(self, base_dir: Optional[Path] = None) -> None:
        self.run_id: str = str(uuid.uuid4())[:8]

        self.logs_base_dir = base_dir or Path(__file__).parent.parent.parent / "logs"
        self.logs_base_dir.mkdir(parents=True, exist_ok=True)

        self.current_date = ""
        self._rotate(datetime.now(LOG_TIMEZONE).strftime("%Y-%m-%d"))
        self._cleanup_old_logs()
        self._write_header(f"NEW SESSION - RUN ID: {self.run_id}")

    # -------------------------------------------------------------------------
    # File Management
    # -------------------------------------------------------------------------

    def _rotate(self, date_str: str) -> None:
        """Point log files at the folder for the given date."""
        self.current_date = date_str
        self.log_dir = self.logs_base_dir / date_str
        self.log_dir.mkdir(exist_ok=True)
        self.log_file: Path = self.log_dir / f"{LOG_PREFIX}-{date_str}.log"
        self.error_file: Path = self.log_dir / f"{LOG_PREFIX}-Errors-{date_str}.log"

    def _check_date_rotation(self) -> None:
        today = datetime.now(LOG_TIMEZONE).strftime("%Y-%m-%d")
        if today != self.current_date:
            self._rotate(today)
            self._write_header(f"LOG ROTATION - Continuing session {self.run_id}")

    def _cleanup_old_logs(self) -> None:
        """Delete dated log folders older than the retention period."""
        now = datetime.now(LOG_TIMEZONE)
        deleted = 0
        try:
            for folder in self.logs_base_dir.iterdir():
                if not folder.is_dir():
                    continue
                try:
                    folder_date = datetime.strptime(folder.name, "%Y-%m-%d").replace(tzinfo=LOG_TIMEZONE)
                except ValueError:
                    continue
                if (now - folder_date).days > LOG_RETENTION_DAYS:
                    shutil.rmtree(folder)
                    deleted += 1
        except OSError as e:
            print(f"[LOG CLEANUP ERROR] {e}")
            return

        if deleted:
            print(f"[LOG CLEANUP] Deleted {deleted} old log folders (>{LOG_RETENTION_DAYS} days)")

    def _write_header(self, text: str) -> None:
        header = f"\n{'=' * 60}\n{text}\n{self._get_timestamp()}\n{'=' * 60}\n\n"
        self._append(header, also_to_error=True)

    def _append(self, text: str, also_to_error: bool = False) -> None:
        try:
            with open(self.log_file, "a", encoding="utf-8") as f:
                f.write(text)
            if also_to_error:
                with open(self.error_file, "a", encoding="utf-8") as f:
                    f.write(text)
        except OSError:
            pass

    # -------------------------------------------------------------------------
    # Formatting
    # -------------------------------------------------------------------------

    def _get_timestamp(self) -> str:
        current_time = datetime.now(LOG_TIMEZONE)
        return current_time.strftime(f"[%H:%M:%S {current_time.strftime('%Z')}]")

    def _line(self, message: str, emoji: str) -> str:
        clean_message = EMOJI_PATTERN.sub("", message).strip()
        if emoji:
            return f"{self._get_timestamp()} {emoji} {clean_message}"
        return f"{self._get_timestamp()} {clean_message}"

    def _emit(
        self,
        title: str,
        items: Optional[List[Tuple[str, Any]]],
        emoji: str,
        status: str,
        is_error: bool = False,
    ) -> None:
        """Write a title line followed by its tree branches."""
        self._check_date_rotation()

        lines = [self._line(title, emoji)]
        if items:
            for i, (key, value) in enumerate(items):
                prefix = TreeSymbols.LAST if i == len(items) - 1 else TreeSymbols.BRANCH
                lines.append(f"  {prefix} {key}: {value}")
        else:
            lines.append(f"  {TreeSymbols.LAST} Status: {status}")

        block = "\n".join(lines)
        print(block)
        print()
        self._append(f"{block}\n\n", also_to_error=is_error)

    # -------------------------------------------------------------------------
    # Log Levels
    # -------------------------------------------------------------------------

    def info(self, msg: str, details: Optional[List[Tuple[str, Any]]] = None) -> None:
        self._emit(msg, details, "ℹ️", "OK")

    def success(self, msg: str, details: Optional[List[Tuple[str, Any]]] = None) -> None:
        self._emit(msg, details, "✅", "Complete")

    def warning(self, msg: str, details: Optional[List[Tuple[str, Any]]] = None) -> None:
        self._emit(msg, details, "⚠️", "Warning", is_error=True)

    def error(self, msg: str, details: Optional[List[Tuple[str, Any]]] = None) -> None:
        self._emit(msg, details, "❌", "Failed", is_error=True)

    def critical(self, msg: str, details: Optional[List[Tuple[str, Any]]] = None) -> None:
        self._emit(msg, details, "🚨", "Critical", is_error=True)

    def debug(self, msg: str, details: Optional[List[Tuple[str, Any]]] = None) -> None:
        """Log a debug message (only if DEBUG env var is set)."""
        if os.getenv("DEBUG", "").lower() in ("1", "true", "yes"):
            self._emit(msg, details, "🔍", "Debug")

    def exception(self, msg: str, details: Optional[List[Tuple[str, Any]]] = None) -> None:
        """Log an error followed by the active traceback (file output only)."""
        self._emit(msg, details, "💥", "Exception", is_error=True)
        self._append(traceback.format_exc() + "\n", also_to_error=True)

    # -------------------------------------------------------------------------
    # Tree Helpers
    # -------------------------------------------------------------------------

    def tree(self, title: str, items: List[Tuple[str, Any]], emoji: str = "📦") -> None:
        """
        Log structured data in tree format.

        Example output:
            [14:00:00 CEST] 🗺️ Mapping Tables Rebuilt
              ├─ Clubs: 8421
              ├─ Players: 190233
              └─ Skipped: 3
        """
        self._emit(title, items, emoji, "OK")

    def error_tree(
        self,
        title: str,
        error: BaseException,
        context: Optional[List[Tuple[str, Any]]] = None,
    ) -> None:
        """Log an exception's type and message plus optional context."""
        items: List[Tuple[str, Any]] = [
            ("Type", type(error).__name__),
            ("Message", str(error)),
        ]
        if context:
            items.extend(context)
        self._emit(title, items, "❌", "Failed", is_error=True)


# =============================================================================
# Module Export
# =============================================================================

logger = MiniTreeLogger()

__all__ = ["logger", "MiniTreeLogger", "TreeSymbols"]
