"""
Job service client handle.

The job library owns scheduling, retries and the function registry; this
module only builds the client the webhook adapter and job definitions share.
"""
from __future__ import annotations

import logging
import os

import inngest

APP_ID = "symptomdx-ai"

logger = logging.getLogger("symptomdx.jobs")


def _is_production() -> bool:
    if (os.getenv("INNGEST_DEV", "") or "").strip():
        return False
    env = (os.getenv("SYMPTOMDX_ENV", "dev") or "").lower()
    return env in {"prod", "production", "stage", "staging"}


def build_client() -> inngest.Inngest:
    return inngest.Inngest(app_id=APP_ID, logger=logger, is_production=_is_production())


JOB_CLIENT = build_client()
