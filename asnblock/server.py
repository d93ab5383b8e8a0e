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
HTTP front end for the block-list pipeline.

GET /generate?asn=<ASN> returns the dat block-list as text/plain. Invalid
input maps to 400, registry and cache failures map to 500.
"""

import logging
from typing import Optional

import uvicorn
from fastapi import FastAPI, Query
from fastapi.responses import PlainTextResponse

from asnblock import __version__
from asnblock.errors import CacheIOError, InvalidASNError, NetworkError
from asnblock.pipeline import BlocklistPipeline
from asnblock.validator import normalize_asn_param

logger = logging.getLogger(__name__)

DEFAULT_LISTEN_HOST = "0.0.0.0"
DEFAULT_PORT = 8080
SOURCE_HEADER = "X-Blocklist-Source"


def create_app(pipeline: BlocklistPipeline) -> FastAPI:
    """Build the FastAPI application bound to ``pipeline``."""
    app = FastAPI(title="asnblock", version=__version__)

    # Sync handler: FastAPI runs it in the worker thread pool, one request per thread
    @app.get("/generate", response_class=PlainTextResponse)
    def generate(asn: Optional[str] = Query(default=None)) -> PlainTextResponse:
        if not asn:
            return PlainTextResponse("ASN parameter is missing", status_code=400)

        try:
            result = pipeline.generate(normalize_asn_param(asn))
        except InvalidASNError:
            return PlainTextResponse("Invalid ASN format", status_code=400)
        except CacheIOError as exc:
            logger.error("Cache read failed for %s: %s", asn, exc)
            return PlainTextResponse(f"Failed to read from cache: {exc}", status_code=500)
        except NetworkError as exc:
            logger.error("Registry query failed for %s: %s", asn, exc)
            return PlainTextResponse(f"Failed to fetch IPs: {exc}", status_code=500)

        return PlainTextResponse(result.text, headers={SOURCE_HEADER: result.source})

    return app


class BlocklistServer:
    """HTTP server wrapping one pipeline instance."""

    def __init__(
        self,
        pipeline: BlocklistPipeline,
        host: str = DEFAULT_LISTEN_HOST,
        port: int = DEFAULT_PORT,
        log_level: str = "INFO",
    ):
        self.pipeline = pipeline
        self.host = host
        self.port = port
        self.log_level = log_level
        self.app = create_app(pipeline)

    def run(self) -> None:
        """Serve until interrupted."""
        logger.info("Listening on %s:%d", self.host, self.port)
        # log_config=None keeps the handlers installed by the CLI
        uvicorn.run(self.app, host=self.host, port=self.port, log_level=self.log_level.lower(), log_config=None)
