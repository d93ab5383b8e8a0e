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
Route lookup against the RADb whois registry.

This module provides the functions that ask RADb which prefixes an ASN
originates. It is split into two parts:
- Pure parsing function (unit-testable without network)
- Network client (can be mocked for testing)

The pipeline calls both in turn.
"""

import logging
import socket
import time
from typing import List

from asnblock.debug_logger import get_debug_logger
from asnblock.errors import NetworkError
from asnblock.validator import ASNIdentifier

logger = logging.getLogger(__name__)

WHOIS_HOST = "whois.radb.net"
WHOIS_PORT = 43
DEFAULT_TIMEOUT = 10.0
DEFAULT_MAX_BYTES = 16 * 1024 * 1024
RECV_CHUNK_SIZE = 4096

ROUTE_TOKEN = "route:"


def parse_route_prefixes(response: str) -> List[str]:
    """
    Extract announced prefixes from a RADb "-i origin" response.

    A line counts only when it starts with "route:" in column 0; the prefix
    is the second whitespace-separated field. Order and duplicates are kept.

    Args:
        response: Raw whois response text

    Returns:
        List of prefix strings, empty if the response has no route objects

    Examples:
        >>> parse_route_prefixes("route:      10.0.0.0/24\\nnoise: ignored")
        ['10.0.0.0/24']
        >>> parse_route_prefixes("route6:     2001:db8::/32")
        []
    """
    prefixes = []
    for line in response.split("\n"):
        if not line.startswith(ROUTE_TOKEN):
            continue
        fields = line.split()
        if len(fields) >= 2:
            prefixes.append(fields[1])
    return prefixes


def build_origin_query(asn: ASNIdentifier) -> bytes:
    """Build the inverse-origin query line for an ASN."""
    return f"-i origin {asn.canonical}\r\n".encode("ascii")


def _network_error(asn: ASNIdentifier, reason: str, exc: BaseException) -> NetworkError:
    tracer = get_debug_logger()
    if tracer:
        tracer.log_error(asn.canonical, reason, str(exc))
    return NetworkError(reason, str(exc))


def fetch_routes_via_whois(
    asn: ASNIdentifier,
    timeout: float = DEFAULT_TIMEOUT,
    max_bytes: int = DEFAULT_MAX_BYTES,
    host: str = WHOIS_HOST,
    port: int = WHOIS_PORT,
) -> str:
    """
    Fetch the raw route objects originated by an ASN from a whois server.

    The whole exchange (connect, send, read until the server closes) must
    finish within ``timeout`` seconds.

    Args:
        asn: Validated ASN to query
        timeout: Overall deadline in seconds for the session
        max_bytes: Maximum bytes accepted from the server
        host: Whois server hostname
        port: Whois server port

    Returns:
        Raw response text

    Raises:
        NetworkError: On connect failure, timeout, send failure, a read
            failure before any data arrived, or an oversized response
    """
    query = build_origin_query(asn)
    tracer = get_debug_logger()
    if tracer:
        tracer.log_connect(host, port, timeout)
    started = time.monotonic()
    deadline = started + timeout

    try:
        conn = socket.create_connection((host, port), timeout=timeout)
    except TimeoutError as exc:
        raise _network_error(asn, "timeout", exc) from exc
    except OSError as exc:
        raise _network_error(asn, "connect_failed", exc) from exc

    chunks = []
    total_read = 0
    end_reason = "closed"
    with conn as sock:
        try:
            sock.settimeout(max(deadline - time.monotonic(), 0.001))
            sock.sendall(query)
        except TimeoutError as exc:
            raise _network_error(asn, "timeout", exc) from exc
        except OSError as exc:
            raise _network_error(asn, "send_failed", exc) from exc
        if tracer:
            tracer.log_query(asn.canonical, query)

        while True:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise _network_error(asn, "timeout", TimeoutError(f"no close from {host} within {timeout}s"))
            sock.settimeout(remaining)
            try:
                chunk = sock.recv(RECV_CHUNK_SIZE)
            except TimeoutError as exc:
                raise _network_error(asn, "timeout", exc) from exc
            except OSError as exc:
                if not chunks:
                    raise _network_error(asn, "read_failed", exc) from exc
                # Server closure is the only end marker whois has
                logger.warning(
                    "Read error after %d bytes from %s for %s, treating as end of response: %s",
                    total_read,
                    host,
                    asn,
                    exc,
                )
                end_reason = "read_error"
                break
            if not chunk:
                break
            total_read += len(chunk)
            if total_read > max_bytes:
                raise _network_error(asn, "response_too_large", ValueError(f"response exceeded {max_bytes} bytes"))
            chunks.append(chunk)

    if tracer:
        tracer.log_response(asn.canonical, total_read, len(chunks), time.monotonic() - started, end_reason)
    logger.debug("Received %d bytes from %s for %s", total_read, host, asn)
    return b"".join(chunks).decode("utf-8", errors="replace")
