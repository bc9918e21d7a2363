"""
Job service webhook.

Why:
    The job service calls back into the app to discover registered functions
    (PUT), read their configuration (GET) and execute steps (POST). All three
    share one base path and are served by the job library's own handler.

Notes:
    - Requests and responses pass through unmodified; signing and payload
      validation belong to the library.
    - The path is public in the auth middleware; the job service does not
      carry an identity session.
"""

from __future__ import annotations

import logging
from typing import Callable, Sequence

import inngest
import inngest.fast_api
from fastapi import FastAPI

logger = logging.getLogger("symptomdx.jobs")

JOB_WEBHOOK_PATH = "/api/inngest"


def mount_job_webhook(
    app: FastAPI,
    client: inngest.Inngest,
    functions: Sequence[inngest.Function],
    *,
    serve_path: str = JOB_WEBHOOK_PATH,
    serve: Callable[..., None] = inngest.fast_api.serve,
) -> None:
    """Register GET, POST and PUT on `serve_path`, delegated to the job library."""
    serve(app, client, list(functions), serve_path=serve_path)
    logger.info("Job webhook mounted: path=%s functions=%d", serve_path, len(functions))
