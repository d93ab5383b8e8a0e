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
eMule/PeerGuardian "dat" block-list encoding.

Each line reads ``<first> - <last> , <level> , <description>``. The access
level is always 000 (blocked) and the description is the canonical ASN.
"""

from typing import Iterable

from asnblock.ranges import RangeOrPassthrough, cidr_to_range
from asnblock.validator import ASNIdentifier

SEVERITY = "000"


def format_dat_line(entry: RangeOrPassthrough, asn: ASNIdentifier) -> str:
    """Format one block-list line, including the trailing newline."""
    if isinstance(entry, str):
        return f"{entry} , {SEVERITY} , {asn.canonical}\n"
    first, last = entry
    return f"{first} - {last} , {SEVERITY} , {asn.canonical}\n"


def encode_blocklist(asn: ASNIdentifier, ranges: Iterable[RangeOrPassthrough]) -> str:
    """
    Serialize address ranges into dat block-list text.

    Pass-through entries (prefixes that could not be parsed) are written
    verbatim in place of the range.

    Args:
        asn: ASN used as the description of every line
        ranges: AddressRange values or raw pass-through strings

    Returns:
        Block-list text, or "" when there are no ranges
    """
    return "".join(format_dat_line(entry, asn) for entry in ranges)


def convert_prefixes(asn: ASNIdentifier, prefixes: Iterable[str]) -> str:
    """Convert registry prefixes to ranges and encode them in one step."""
    return encode_blocklist(asn, (cidr_to_range(prefix) for prefix in prefixes))
