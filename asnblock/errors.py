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
Error types raised by the asnblock pipeline.

The HTTP layer and the CLI translate these into status codes and exit
statuses; nothing below the pipeline knows about either.
"""

from typing import Optional


class AsnBlockError(Exception):
    """Base class for all asnblock errors."""


class InvalidASNError(AsnBlockError, ValueError):
    """Raised when an ASN identifier is malformed or outside the public ranges."""

    def __init__(self, raw: str, message: str = "Invalid ASN format"):
        super().__init__(f"{message}: {raw!r}")
        self.raw = raw


class NetworkError(AsnBlockError):
    """
    Raised when the whois registry cannot be queried.

    Attributes:
        reason: Short machine-readable cause ("connect_failed", "timeout",
            "send_failed", "read_failed", "response_too_large")
        detail: Human readable detail, usually the underlying OSError text
    """

    def __init__(self, reason: str, detail: str = ""):
        message = reason if not detail else f"{reason}: {detail}"
        super().__init__(message)
        self.reason = reason
        self.detail = detail


class CacheIOError(AsnBlockError):
    """Raised when a cache file exists but cannot be read, or cannot be written."""

    def __init__(self, operation: str, path: str, detail: Optional[str] = None):
        message = f"cache {operation} failed for {path}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.operation = operation
        self.path = path
