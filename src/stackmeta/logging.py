from __future__ import annotations

import json
import os
import sys
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, Optional


class StructuredLogger:
    """Structured JSON logger writing to stderr."""

    def __init__(self, scope: str, debug: Optional[bool] = None):
        self.scope = scope
        if debug is None:
            debug = os.environ.get("STACKMETA_DEBUG", "").strip().lower() in ("1", "true", "yes")
        self.debug_enabled = debug
        self._stage_starts: dict[str, datetime] = {}

    def debug(self, message: str, **kwargs: Any) -> None:
        if self.debug_enabled:
            self._emit("debug", message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self._emit("info", message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._emit("warning", message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self._emit("error", message, **kwargs)

    @contextmanager
    def stage(self, name: str, **kwargs: Any) -> Iterator[None]:
        """Context manager that tracks stage timing."""
        start = datetime.now(timezone.utc)
        self._stage_starts[name] = start
        self.debug("stage_start", stage=name, **kwargs)
        status = "ok"
        try:
            yield
        except Exception as exc:
            status = "error"
            self.error("stage_error", stage=name, error=str(exc), **kwargs)
            raise
        finally:
            end = datetime.now(timezone.utc)
            duration_ms = int((end - start).total_seconds() * 1000)
            self.debug("stage_end", stage=name, duration_ms=duration_ms, status=status, **kwargs)

    def _emit(self, level: str, message: str, **kwargs: Any) -> None:
        """Emit one structured JSON log line."""
        payload: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": level,
            "scope": self.scope,
            "message": message,
        }
        payload.update(self._sanitize(kwargs))

        sys.stderr.write(json.dumps(payload, ensure_ascii=False, default=str) + "\n")
        sys.stderr.flush()

    @staticmethod
    def _sanitize(fields: Dict[str, Any]) -> Dict[str, Any]:
        redacted: Dict[str, Any] = {}
        for key, value in fields.items():
            if StructuredLogger._is_sensitive_key(key):
                redacted[key] = "***"
            else:
                redacted[key] = value
        return redacted

    @staticmethod
    def _is_sensitive_key(key: str) -> bool:
        lowered = key.lower()
        return any(token in lowered for token in ("token", "secret", "password", "credential"))
