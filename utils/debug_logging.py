"""
Structured settlement trace.

Enabled when the DEBUG_LOG_PATH env var is set. Each call appends one JSONL
record describing a settlement decision, for auditing disputed resolutions
without polluting normal logs.
"""

from __future__ import annotations

import json
import logging
import os
import time
from typing import Any

logger = logging.getLogger("grit_core.utils.debug_logging")


def debug_log(
    event: str,
    location: str,
    message: str,
    data: dict[str, Any] | None = None,
    *,
    session_id: str = "grit-session",
) -> None:
    """
    Append a JSONL trace entry to DEBUG_LOG_PATH if configured.

    Never raises: a failed write is reported on the module logger instead.
    """
    path = os.getenv("DEBUG_LOG_PATH")
    if not path:
        return

    payload = {
        "sessionId": session_id,
        "event": event,
        "timestamp": int(time.time() * 1000),
        "location": location,
        "message": message,
        "data": data or {},
    }

    try:
        line = json.dumps(payload, default=str)
        with open(path, "a", encoding="utf-8") as f:
            f.write(line + "\n")
    except (OSError, TypeError, ValueError) as e:
        logger.debug(f"Settlement trace write failed: {e}")
