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
Unit tests for asnblock.validator.
"""

import os
import sys
import unittest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "../..")))

from asnblock.errors import InvalidASNError
from asnblock.validator import ASNIdentifier, is_public_asn, normalize_asn_param, validate_asn


class TestValidateASN(unittest.TestCase):
    """Test ASN validation and canonicalization."""

    def test_public_boundaries_accepted(self):
        """Range edges of both public ranges validate and round-trip."""
        for number in (1, 64511, 65536, 4199999999):
            asn = validate_asn(f"AS{number}")
            self.assertEqual(asn.number, number)
            self.assertEqual(asn.canonical, f"AS{number}")
            self.assertEqual(validate_asn(asn.canonical), asn)

    def test_typical_asn(self):
        """Test a common real-world ASN."""
        asn = validate_asn("AS15169")
        self.assertIsInstance(asn, ASNIdentifier)
        self.assertEqual(str(asn), "AS15169")

    def test_without_prefix(self):
        """The AS prefix is optional."""
        self.assertEqual(validate_asn("13335").canonical, "AS13335")

    def test_reserved_values_rejected(self):
        """Zero, the 16-bit private range, and values past the ceiling fail."""
        for number in (0, 64512, 65000, 65535, 4200000000, 4294967295, 99999999999):
            with self.subTest(number=number):
                with self.assertRaises(InvalidASNError):
                    validate_asn(f"AS{number}")

    def test_non_numeric_rejected(self):
        """Test malformed identifiers."""
        for raw in ("", "AS", "ASfoo", "AS12a", "AS-5", "AS+5", "AS 5", "as15169", "AS1.5", "AS¹"):
            with self.subTest(raw=raw):
                with self.assertRaises(InvalidASNError):
                    validate_asn(raw)

    def test_prefix_is_case_sensitive(self):
        """Only an upper-case AS prefix is stripped."""
        with self.assertRaises(InvalidASNError):
            validate_asn("as100")

    def test_leading_zeros_canonicalized(self):
        """Test that leading zeros are dropped from the canonical form."""
        self.assertEqual(validate_asn("AS00042").canonical, "AS42")

    def test_very_long_digit_string_rejected(self):
        """Digit strings beyond int()'s conversion limit are still InvalidASNError."""
        for raw in ("AS" + "1" * 5000, "9" * 5000, "AS" + "4" * 11):
            with self.subTest(length=len(raw)):
                with self.assertRaises(InvalidASNError):
                    validate_asn(raw)

    def test_many_leading_zeros_accepted(self):
        """Leading zeros do not count toward the digit limit."""
        self.assertEqual(validate_asn("AS" + "0" * 5000 + "15169").canonical, "AS15169")

    def test_error_is_value_error(self):
        """InvalidASNError can be caught as ValueError."""
        with self.assertRaises(ValueError):
            validate_asn("AS0")


class TestIsPublicASN(unittest.TestCase):
    """Test the range predicate."""

    def test_ranges(self):
        self.assertTrue(is_public_asn(1))
        self.assertTrue(is_public_asn(64511))
        self.assertFalse(is_public_asn(64512))
        self.assertFalse(is_public_asn(65535))
        self.assertTrue(is_public_asn(65536))
        self.assertTrue(is_public_asn(4199999999))
        self.assertFalse(is_public_asn(4200000000))
        self.assertFalse(is_public_asn(0))


class TestNormalizeASNParam(unittest.TestCase):
    """Test boundary normalization."""

    def test_adds_prefix(self):
        self.assertEqual(normalize_asn_param("3320"), "AS3320")

    def test_keeps_existing_prefix(self):
        self.assertEqual(normalize_asn_param("AS3320"), "AS3320")

    def test_lowercase_prefix_not_recognized(self):
        """A lower-case prefix gets another AS prepended and then fails validation."""
        normalized = normalize_asn_param("as3320")
        self.assertEqual(normalized, "ASas3320")
        with self.assertRaises(InvalidASNError):
            validate_asn(normalized)


if __name__ == "__main__":
    unittest.main()
