#!/usr/bin/env python3
# Copyright 2025 icecake0141
# SPDX-License-Identifier: Apache-2.0
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# This file was created or modified with the assistance of an AI (Large Language Model).
# Review required for correctness, security, and licensing.

"""
Debug trace of whois sessions.

When enabled, every registry exchange is recorded as a JSON line: the
connection target, the query bytes, how the response ended (clean close,
reset, timeout) and how much data arrived. This is the tool for answering
"did the registry really return nothing, or did we cut it off?".
"""

import json
import os
import sys
import threading
import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional


class WhoisDebugLogger:
    """
    Logger for capturing whois session events.

    Events are written one JSON object per line and flushed immediately so a
    stalled session still leaves a trace on disk.
    """

    def __init__(self, log_file_path: str = "asnblock_debug_whois.log"):
        """
        Initialize debug logger.

        Args:
            log_file_path: Path to log file for writing debug events
        """
        self.log_file_path = log_file_path
        self.session_start = time.monotonic()
        self.event_count = 0
        self.log_file = None
        self._lock = threading.Lock()

    def start_session(self) -> None:
        """Start a new debug logging session."""
        try:
            # pylint: disable=consider-using-with
            self.log_file = open(self.log_file_path, "a", encoding="utf-8")
        except OSError as e:
            print(f"Warning: Could not open whois debug log file: {e}", file=sys.stderr)
            self.log_file = None
            return
        self._write_event(
            {
                "event_type": "SESSION_START",
                "timestamp_utc": datetime.now(timezone.utc).isoformat(),
                "timestamp_monotonic": time.monotonic(),
                "python_version": sys.version,
                "platform": sys.platform,
                "pid": os.getpid(),
                "log_format_version": "1.0",
            }
        )

    def log_connect(self, host: str, port: int, timeout: float) -> None:
        """Record an outgoing whois connection attempt."""
        self._record(
            {
                "event_type": "WHOIS_CONNECT",
                "host": host,
                "port": port,
                "timeout_seconds": timeout,
            }
        )

    def log_query(self, asn: str, query: bytes) -> None:
        """Record the query line sent to the registry."""
        self._record(
            {
                "event_type": "WHOIS_QUERY",
                "asn": asn,
                "query_repr": repr(query),
            }
        )

    def log_response(self, asn: str, total_bytes: int, chunks: int, duration: float, end_reason: str) -> None:
        """
        Record a completed response.

        Args:
            asn: Canonical ASN that was queried
            total_bytes: Number of bytes received
            chunks: Number of recv() calls that returned data
            duration: Seconds from connect to end of response
            end_reason: "closed" for a clean close, "read_error" when a read
                error after partial data ended the response
        """
        self._record(
            {
                "event_type": "WHOIS_RESPONSE",
                "asn": asn,
                "total_bytes": total_bytes,
                "chunks": chunks,
                "duration_seconds": duration,
                "end_reason": end_reason,
            }
        )

    def log_error(self, asn: str, reason: str, detail: str) -> None:
        """Record a failed whois session."""
        self._record(
            {
                "event_type": "WHOIS_ERROR",
                "asn": asn,
                "reason": reason,
                "detail": detail,
            }
        )

    def _record(self, event: Dict[str, Any]) -> None:
        event["timestamp_utc"] = datetime.now(timezone.utc).isoformat()
        event["elapsed_seconds"] = time.monotonic() - self.session_start
        self._write_event(event)

    def _write_event(self, event: Dict[str, Any]) -> None:
        """Write event to log file as JSON."""
        with self._lock:
            if not self.log_file:
                return
            self.event_count += 1
            try:
                self.log_file.write(json.dumps(event) + "\n")
                self.log_file.flush()
            except OSError:
                pass  # Tracing must never break a request

    def close(self) -> None:
        """Close the debug logging session."""
        if self.log_file:
            self._write_event(
                {
                    "event_type": "SESSION_END",
                    "timestamp_utc": datetime.now(timezone.utc).isoformat(),
                    "timestamp_monotonic": time.monotonic(),
                    "total_events": self.event_count,
                }
            )
            with self._lock:
                self.log_file.close()
                self.log_file = None


# Global debug logger instance (None when debugging is disabled)
# pylint: disable=invalid-name
_debug_logger: Optional[WhoisDebugLogger] = None


def init_debug_logger(log_file_path: str = "asnblock_debug_whois.log") -> None:
    """
    Initialize global debug logger.

    Args:
        log_file_path: Path to debug log file
    """
    # pylint: disable=global-statement
    global _debug_logger
    _debug_logger = WhoisDebugLogger(log_file_path)
    _debug_logger.start_session()


def get_debug_logger() -> Optional[WhoisDebugLogger]:
    """Get the global debug logger instance."""
    return _debug_logger


def shutdown_debug_logger() -> None:
    """Shutdown and close debug logger."""
    # pylint: disable=global-statement
    global _debug_logger
    if _debug_logger:
        _debug_logger.close()
        _debug_logger = None


def is_debug_enabled() -> bool:
    """Check if debug logging is enabled."""
    return _debug_logger is not None
