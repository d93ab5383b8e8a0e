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
On-disk cache of encoded block-lists.

One file per ASN: ``<directory>/<canonical ASN><extension>``. Records are
written once and never expire.
"""

import logging
import os
import tempfile
from typing import Optional

from asnblock.errors import CacheIOError

logger = logging.getLogger(__name__)

DEFAULT_CACHE_DIR = "cache"
DEFAULT_EXTENSION = ".dat"


class BlocklistCache:
    """File-per-key cache of block-list text."""

    def __init__(self, directory: str = DEFAULT_CACHE_DIR, extension: str = DEFAULT_EXTENSION):
        self.directory = directory
        self.extension = extension

    def path_for(self, key: str) -> str:
        """Return the file path that stores ``key``."""
        return os.path.join(self.directory, f"{key}{self.extension}")

    def get(self, key: str) -> Optional[str]:
        """
        Read a cached block-list.

        Args:
            key: Canonical ASN string

        Returns:
            Cached text, or None when no record exists

        Raises:
            CacheIOError: If the record exists but cannot be read
        """
        path = self.path_for(key)
        if not os.path.exists(path):
            return None
        try:
            with open(path, "r", encoding="utf-8", newline="") as fh:
                return fh.read()
        except (OSError, UnicodeDecodeError) as exc:
            raise CacheIOError("read", path, str(exc)) from exc

    def put(self, key: str, value: str) -> None:
        """
        Store a block-list, replacing any previous record.

        The text goes to a temporary file in the cache directory first and is
        renamed into place, so concurrent readers see either nothing or the
        complete record.

        Raises:
            CacheIOError: If the directory or file cannot be written
        """
        path = self.path_for(key)
        tmp_path = None
        try:
            os.makedirs(self.directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(prefix=f".{key}.", suffix=".tmp", dir=self.directory)
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as fh:
                fh.write(value)
            os.chmod(tmp_path, 0o644)
            os.replace(tmp_path, path)
        except OSError as exc:
            if tmp_path and os.path.exists(tmp_path):
                try:
                    os.unlink(tmp_path)
                except OSError:
                    logger.debug("Could not remove temporary cache file %s", tmp_path)
            raise CacheIOError("write", path, str(exc)) from exc
        logger.debug("Cached %d bytes at %s", len(value), path)
