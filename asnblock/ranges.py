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
CIDR prefix to address range conversion.
"""

import ipaddress
from typing import NamedTuple, Union


class AddressRange(NamedTuple):
    """Inclusive IPv4 address range."""

    first: str
    last: str

    def __str__(self) -> str:
        return f"{self.first} - {self.last}"


RangeOrPassthrough = Union[AddressRange, str]


def cidr_to_range(prefix: str) -> RangeOrPassthrough:
    """
    Convert an IPv4 CIDR prefix into an inclusive address range.

    The lower bound is the address exactly as written in the prefix, so a
    registry entry such as "10.0.0.7/24" keeps ".7" as its first address.
    The upper bound has every host bit set.

    Text that is not an IPv4 "address/length" literal is returned unchanged.

    Examples:
        >>> cidr_to_range("192.168.1.128/25")
        AddressRange(first='192.168.1.128', last='192.168.1.255')
        >>> cidr_to_range("not-a-prefix")
        'not-a-prefix'
    """
    address, sep, length = prefix.partition("/")
    # IPv4Interface also takes bare addresses and dotted netmasks; only "/N" is a CIDR literal here
    if not sep or not (length.isascii() and length.isdigit()):
        return prefix
    try:
        interface = ipaddress.IPv4Interface(f"{address}/{int(length)}")
    except ValueError:
        return prefix
    return AddressRange(first=str(interface.ip), last=str(interface.network.broadcast_address))
