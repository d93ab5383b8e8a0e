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
Block-list generation pipeline.

validate -> cache lookup -> (miss) whois fetch -> parse -> convert ->
encode -> cache store. Errors propagate as asnblock.errors exceptions; the
only one handled here is a failed cache write, which is logged and ignored
because the caller already has a good result.
"""

import functools
import logging
from typing import Callable, NamedTuple, Optional

from asnblock.cache import BlocklistCache
from asnblock.dat_format import convert_prefixes
from asnblock.errors import CacheIOError
from asnblock.network_whois import (
    DEFAULT_MAX_BYTES,
    DEFAULT_TIMEOUT,
    WHOIS_HOST,
    WHOIS_PORT,
    fetch_routes_via_whois,
    parse_route_prefixes,
)
from asnblock.validator import ASNIdentifier, validate_asn

logger = logging.getLogger(__name__)


class BlocklistResult(NamedTuple):
    """Encoded block-list plus where it came from."""

    asn: ASNIdentifier
    text: str
    from_cache: bool

    @property
    def source(self) -> str:
        return "cache" if self.from_cache else "registry"


class BlocklistPipeline:
    """
    Produce dat block-lists for ASNs, backed by a write-once file cache.

    Instances hold configuration only, so one pipeline can serve concurrent
    requests. Two requests for the same uncached ASN may both query the
    registry; the later cache write wins.
    """

    def __init__(
        self,
        cache: Optional[BlocklistCache] = None,
        fetch_raw: Optional[Callable[[ASNIdentifier], str]] = None,
        whois_host: str = WHOIS_HOST,
        whois_port: int = WHOIS_PORT,
        timeout: float = DEFAULT_TIMEOUT,
        max_bytes: int = DEFAULT_MAX_BYTES,
    ):
        self.cache = cache if cache is not None else BlocklistCache()
        if fetch_raw is None:
            fetch_raw = functools.partial(
                fetch_routes_via_whois,
                timeout=timeout,
                max_bytes=max_bytes,
                host=whois_host,
                port=whois_port,
            )
        self.fetch_raw = fetch_raw

    def generate(self, raw_asn: str) -> BlocklistResult:
        """
        Return the block-list for an ASN, from cache when available.

        Args:
            raw_asn: ASN string as received, with the "AS" prefix

        Returns:
            BlocklistResult with the encoded text and provenance flag

        Raises:
            InvalidASNError: If raw_asn is not a public ASN
            CacheIOError: If a cached record exists but cannot be read
            NetworkError: If the registry query fails
        """
        asn = validate_asn(raw_asn)

        cached = self.cache.get(asn.canonical)
        if cached is not None:
            logger.info("Served from cache: %s", self.cache.path_for(asn.canonical))
            return BlocklistResult(asn=asn, text=cached, from_cache=True)

        response = self.fetch_raw(asn)
        prefixes = parse_route_prefixes(response)
        text = convert_prefixes(asn, prefixes)

        try:
            self.cache.put(asn.canonical, text)
        except CacheIOError as exc:
            logger.warning("Failed to write to cache: %s", exc)

        logger.info("Generated blocklist for %s (%d prefixes)", asn, len(prefixes))
        return BlocklistResult(asn=asn, text=text, from_cache=False)
