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
ASN identifier validation.

Only public ASNs are accepted: 1-64511 and 65536-4199999999. The 16-bit
private range (64512-65535), zero, and everything above the 32-bit private
range are rejected.
"""

from typing import NamedTuple

from asnblock.errors import InvalidASNError

ASN_PREFIX = "AS"

PUBLIC_16BIT_RANGE = (1, 64511)
PUBLIC_32BIT_RANGE = (65536, 4199999999)


class ASNIdentifier(NamedTuple):
    """A validated public ASN. Build it with validate_asn(), never directly."""

    number: int
    canonical: str

    def __str__(self) -> str:
        return self.canonical


def is_public_asn(number: int) -> bool:
    """Return True if number lies in one of the public ASN ranges."""
    low16, high16 = PUBLIC_16BIT_RANGE
    low32, high32 = PUBLIC_32BIT_RANGE
    return low16 <= number <= high16 or low32 <= number <= high32


def normalize_asn_param(raw: str) -> str:
    """
    Prepend the "AS" prefix to a user-supplied ASN when it is missing.

    Examples:
        >>> normalize_asn_param("15169")
        'AS15169'
        >>> normalize_asn_param("AS15169")
        'AS15169'
    """
    if raw.startswith(ASN_PREFIX):
        return raw
    return ASN_PREFIX + raw


def validate_asn(raw: str) -> ASNIdentifier:
    """
    Validate an ASN string and return its canonical identifier.

    Args:
        raw: ASN string, with or without the case-sensitive "AS" prefix

    Returns:
        ASNIdentifier with the parsed number and "AS<digits>" canonical form

    Raises:
        InvalidASNError: If the value is not a base-10 number or not public
    """
    digits = raw[len(ASN_PREFIX):] if raw.startswith(ASN_PREFIX) else raw
    # str.isdigit() also accepts non-ASCII digits such as superscripts
    if not digits or not (digits.isascii() and digits.isdigit()):
        raise InvalidASNError(raw)
    # int() refuses strings past sys.get_int_max_str_digits(); no public ASN has more than 10 digits
    if len(digits.lstrip("0")) > len(str(PUBLIC_32BIT_RANGE[1])):
        raise InvalidASNError(raw, "ASN outside public ranges")
    number = int(digits)
    if not is_public_asn(number):
        raise InvalidASNError(raw, "ASN outside public ranges")
    return ASNIdentifier(number=number, canonical=f"{ASN_PREFIX}{number}")
