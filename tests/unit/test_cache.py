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
Unit tests for the on-disk block-list cache.
"""

import os
import sys
import tempfile
import unittest
from unittest.mock import patch

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "../..")))

from asnblock.cache import BlocklistCache
from asnblock.errors import CacheIOError


class TestBlocklistCache(unittest.TestCase):
    """Test BlocklistCache get/put."""

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.cache_dir = os.path.join(self.tmpdir.name, "cache")
        self.cache = BlocklistCache(self.cache_dir)

    def tearDown(self):
        self.tmpdir.cleanup()

    def test_path_layout(self):
        self.assertEqual(self.cache.path_for("AS15169"), os.path.join(self.cache_dir, "AS15169.dat"))

    def test_custom_extension(self):
        cache = BlocklistCache(self.cache_dir, extension=".p2p")
        self.assertTrue(cache.path_for("AS1").endswith("AS1.p2p"))

    def test_miss_returns_none(self):
        self.assertIsNone(self.cache.get("AS15169"))

    def test_put_creates_directory(self):
        self.assertFalse(os.path.exists(self.cache_dir))
        self.cache.put("AS15169", "1.0.0.0 - 1.0.0.255 , 000 , AS15169\n")
        self.assertTrue(os.path.isdir(self.cache_dir))

    def test_put_then_get(self):
        text = "1.0.0.0 - 1.0.0.255 , 000 , AS15169\n"
        self.cache.put("AS15169", text)
        self.assertEqual(self.cache.get("AS15169"), text)

    def test_file_content_is_exact_text(self):
        text = "a , 000 , AS1\r\nb , 000 , AS1\n"
        self.cache.put("AS1", text)
        with open(self.cache.path_for("AS1"), "rb") as fh:
            self.assertEqual(fh.read(), text.encode("utf-8"))

    def test_empty_value_is_a_hit(self):
        """An ASN with no routes caches an empty file, which is still a hit."""
        self.cache.put("AS1", "")
        self.assertEqual(self.cache.get("AS1"), "")

    def test_put_overwrites(self):
        self.cache.put("AS1", "old\n")
        self.cache.put("AS1", "new\n")
        self.assertEqual(self.cache.get("AS1"), "new\n")

    def test_put_leaves_no_temporary_files(self):
        self.cache.put("AS1", "x\n")
        self.assertEqual(os.listdir(self.cache_dir), ["AS1.dat"])

    def test_unreadable_record_raises(self):
        """A record that exists but cannot be read is an error, not a miss."""
        os.makedirs(self.cache.path_for("AS1"))
        with self.assertRaises(CacheIOError) as ctx:
            self.cache.get("AS1")
        self.assertEqual(ctx.exception.operation, "read")

    def test_read_oserror_raises(self):
        self.cache.put("AS1", "x\n")
        with patch("builtins.open", side_effect=PermissionError("denied")):
            with self.assertRaises(CacheIOError):
                self.cache.get("AS1")

    def test_write_failure_raises(self):
        # A regular file where the cache directory should be
        with open(self.cache_dir, "w", encoding="utf-8") as fh:
            fh.write("not a directory")
        with self.assertRaises(CacheIOError) as ctx:
            self.cache.put("AS1", "x\n")
        self.assertEqual(ctx.exception.operation, "write")

    def test_replace_failure_cleans_temporary_file(self):
        with patch("asnblock.cache.os.replace", side_effect=OSError("disk full")):
            with self.assertRaises(CacheIOError):
                self.cache.put("AS1", "x\n")
        self.assertEqual(os.listdir(self.cache_dir), [])


if __name__ == "__main__":
    unittest.main()
