"""Structured logging: console plus a JSON-lines event log."""

import contextvars
import json
import logging
import os
import sys
import threading
import time
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any

from src.core.config import config


def _format_duration(seconds: float) -> str:
    if seconds < 0:
        return "0s"
    if seconds >= 60:
        m = int(seconds // 60)
        s = seconds % 60
        if s < 0.05:
            return f"{m}m"
        return f"{m}m {s:.0f}s" if s >= 1 else f"{m}m {s:.1f}s"
    if seconds >= 0.05:
        return f"{seconds:.1f}s"
    if seconds > 0:
        return "<0.1s"
    return "0s"


def _short_reason(reason: str | None, max_len: int = 80) -> str:
    """One-line short reason for console (failed backend or tool)."""
    if not reason or not reason.strip():
        return ""
    s = reason.strip().replace("\n", " ").strip()
    return s[:max_len] + "..." if len(s) > max_len else s


_log_in_tool: contextvars.ContextVar[bool] = contextvars.ContextVar(
    "log_in_tool", default=False
)
_log_tool_start: contextvars.ContextVar[float | None] = contextvars.ContextVar(
    "log_tool_start", default=None
)


def _use_color() -> bool:
    if os.environ.get("NO_COLOR"):
        return False
    try:
        return sys.stdout.isatty()
    except Exception:
        return False


def _c(role: str) -> str:
    if not _use_color():
        return ""
    # 38;5;N = foreground 256-color
    codes = {
        "dim": "\033[38;5;239m",
        "tool": "\033[38;5;81m",
        "source": "\033[38;5;81m",
        "run": "\033[38;5;78m",
        "done_ok": "\033[38;5;78m",
        "done_fail": "\033[38;5;203m",
        "duration": "\033[38;5;221m",
    }
    return codes.get(role, "")


def _reset() -> str:
    if not _use_color():
        return ""
    return "\033[0m"


@dataclass
class LogEvent:
    event_type: str
    timestamp: str
    data: dict[str, Any]

    def to_dict(self) -> dict:
        return asdict(self)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), default=str, ensure_ascii=False)


class DiscoveryLogger:
    def __init__(self):
        config.logs_dir.mkdir(parents=True, exist_ok=True)
        self.log_file = config.logs_dir / "discovery.log"
        self._file_lock = threading.Lock()
        self._log_file_handle = open(self.log_file, "a", encoding="utf-8")
        self._setup_console_logger()

    def _setup_console_logger(self):
        self.console = logging.getLogger("discovery")
        self.console.setLevel(logging.DEBUG)
        self._console_formatter = logging.Formatter(
            "%(asctime)s │ %(message)s", datefmt="%H:%M:%S"
        )
        if not self.console.handlers:
            handler = logging.StreamHandler()
            handler.setLevel(logging.INFO)
            handler.setFormatter(self._console_formatter)
            self.console.addHandler(handler)
        self._setup_third_party_console_logging()

    def _setup_third_party_console_logging(self):
        # Search and channel modules log through their own module loggers.
        handler = logging.StreamHandler()
        handler.setLevel(logging.INFO)
        handler.setFormatter(self._console_formatter)
        log = logging.getLogger("src.discovery")
        log.setLevel(logging.INFO)
        log.propagate = False
        if not log.handlers:
            log.addHandler(handler)
        logging.getLogger("httpx").setLevel(logging.WARNING)

    def log_event(self, event: LogEvent) -> None:
        with self._file_lock:
            self._log_file_handle.write(event.to_json() + "\n")
            self._log_file_handle.flush()

    def _timestamp(self) -> str:
        return datetime.now().isoformat()

    def _prefix(self) -> str:
        if _log_in_tool.get():
            return "  │ "
        return ""

    def _format_tool_args(self, args: dict) -> str:
        """Shorten args for console so long queries don't flood the log."""
        max_val = 72
        out = []
        for k, v in (args or {}).items():
            s = repr(v)
            if len(s) > max_val:
                s = s[: max_val - 3].rstrip() + "..."
            out.append(f"{k}={s}")
        return ", ".join(out)

    def channel_refresh(
        self,
        channel: str,
        message_count: int,
        record_count: int,
        success: bool,
        *,
        duration_seconds: float = 0.0,
        error_reason: str | None = None,
    ) -> None:
        data: dict[str, Any] = {
            "channel": channel,
            "messages": message_count,
            "records": record_count,
            "success": success,
            "duration_seconds": round(duration_seconds, 3),
        }
        if error_reason:
            data["error_reason"] = error_reason[:500]
        self.log_event(
            LogEvent(event_type="CHANNEL_REFRESH", timestamp=self._timestamp(), data=data)
        )
        dur = f"{_c('duration')}{_format_duration(duration_seconds)}{_reset()}"
        if success:
            self.console.info(
                f"{self._prefix()}Refreshed {_c('source')}@{channel}{_reset()}  "
                f"{message_count} messages -> {record_count} candidates  {dur}"
            )
        else:
            self.console.warning(
                f"{self._prefix()}⚠️ Refresh of @{channel} skipped: {_short_reason(error_reason)}"
            )

    def backend_result(
        self,
        backend: str,
        result_count: int,
        success: bool,
        *,
        duration_seconds: float = 0.0,
        error_reason: str | None = None,
    ) -> None:
        data: dict[str, Any] = {
            "backend": backend,
            "results": result_count,
            "success": success,
            "duration_seconds": round(duration_seconds, 3),
        }
        if not success and error_reason:
            data["error_reason"] = error_reason[:500]
        self.log_event(
            LogEvent(event_type="BACKEND_RESULT", timestamp=self._timestamp(), data=data)
        )
        dur = f"{_c('duration')}{_format_duration(duration_seconds)}{_reset()}"
        if success:
            status_str = f"{_c('done_ok')}[ok]{_reset()}"
        else:
            status_str = f"{_c('done_fail')}[failed]{_reset()} {_short_reason(error_reason)}"
        self.console.info(
            f"{self._prefix()}{_c('source')}{backend}{_reset()}  {result_count} results  {dur}  {status_str}"
        )

    def tool_execute(self, tool_name: str, args: dict):
        _log_tool_start.set(time.monotonic())
        _log_in_tool.set(True)
        event = LogEvent(
            event_type="TOOL_EXECUTE",
            timestamp=self._timestamp(),
            data={"tool": tool_name, "args": args},
        )
        self.log_event(event)
        short_args = self._format_tool_args(args)
        self.console.info(
            f"{_c('run')}▶ Run{_reset()}  {_c('tool')}{tool_name}{_reset()}({short_args})"
        )

    def tool_result(
        self,
        tool_name: str,
        result_length: int,
        success: bool,
        *,
        error_reason: str | None = None,
    ) -> None:
        _log_in_tool.set(False)
        start = _log_tool_start.get()
        _log_tool_start.set(None)
        elapsed = (time.monotonic() - start) if start is not None else 0.0
        data: dict[str, Any] = {
            "tool": tool_name,
            "result_length": result_length,
            "success": success,
            "duration_seconds": round(elapsed, 3),
        }
        if not success and error_reason:
            data["error_reason"] = error_reason[:500]
        event = LogEvent(
            event_type="TOOL_RESULT", timestamp=self._timestamp(), data=data
        )
        self.log_event(event)
        dur_colored = f"{_c('duration')}{_format_duration(elapsed)}{_reset()}"
        if success:
            status_str = f"{_c('done_ok')}[ok]{_reset()}"
        else:
            status_str = f"{_c('done_fail')}[failed]{_reset()} {_short_reason(error_reason)}"
        self.console.info(
            f"{_c('done_ok')}✓ Done{_reset()}  {_c('tool')}{tool_name}{_reset()}  "
            f"total {dur_colored}  {result_length} chars  {status_str}"
        )

    def error(self, message: str, *args, exception: Exception | None = None, **kwargs):
        event = LogEvent(
            event_type="ERROR",
            timestamp=self._timestamp(),
            data={
                "message": message,
                "exception": str(exception) if exception else None,
            },
        )
        self.log_event(event)

        allowed = {"exc_info", "stack_info", "stacklevel", "extra"}
        log_kwargs = {k: v for k, v in kwargs.items() if k in allowed}
        if exception and "exc_info" not in log_kwargs:
            log_kwargs["exc_info"] = exception

        self.console.error(f"❌ Error: {message}", *args, **log_kwargs)

    def info(self, message: str, *args, **kwargs):
        allowed = {"exc_info", "stack_info", "stacklevel", "extra"}
        log_kwargs = {k: v for k, v in kwargs.items() if k in allowed}
        self.console.info(message, *args, **log_kwargs)

    def warning(self, message: str, *args, **kwargs):
        event = LogEvent(
            event_type="WARNING",
            timestamp=self._timestamp(),
            data={"message": message[:500]},
        )
        self.log_event(event)

        allowed = {"exc_info", "stack_info", "stacklevel", "extra"}
        log_kwargs = {k: v for k, v in kwargs.items() if k in allowed}
        self.console.warning(f"⚠️ {message}", *args, **log_kwargs)

    def debug(self, message: str, *args, **kwargs):
        event = LogEvent(
            event_type="DEBUG", timestamp=self._timestamp(), data={"message": message}
        )
        self.log_event(event)

        allowed = {"exc_info", "stack_info", "stacklevel", "extra"}
        log_kwargs = {k: v for k, v in kwargs.items() if k in allowed}
        self.console.debug(message, *args, **log_kwargs)


logger = DiscoveryLogger()
