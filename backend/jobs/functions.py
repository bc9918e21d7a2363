"""
Background job definitions served through the job webhook.

Each definition is a thin wrapper: payload parsing and decisions live in
plain helpers below so they can be tested without the job runtime.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
import logging
from typing import Any, Dict

import inngest

from . import events
from .client import JOB_CLIENT

logger = logging.getLogger("symptomdx.jobs")

MAX_RETRY_DELAY_MS = 30_000


def retry_delay_ms(retry_count: int) -> int:
    """Exponential back-off: 1s, 2s, 4s, ... capped at 30s."""
    return min(1000 * (2 ** max(0, retry_count)), MAX_RETRY_DELAY_MS)


def build_retry_payload(failed: events.DiagnosisFailed) -> Dict[str, Any]:
    """Original event data plus the incremented retry counter."""
    payload = failed.model_dump(by_alias=True)
    payload["retryCount"] = failed.retry_count + 1
    return payload


def usage_limit_summary(data: events.UsageLimitExceeded) -> Dict[str, Any]:
    return {
        "userId": data.user_id,
        "limitType": data.limit_type,
        "currentUsage": data.current_usage,
        "limit": data.limit,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@JOB_CLIENT.create_function(
    fn_id="test-function",
    trigger=inngest.TriggerEvent(event=events.TEST_EVENT),
)
async def test_function(ctx: inngest.Context, step: inngest.Step) -> Dict[str, Any]:
    logger.info("Test function executed: event=%s", ctx.event.name)
    return {"success": True, "message": "Test function executed successfully"}


@JOB_CLIENT.create_function(
    fn_id="simple-ai-diagnosis",
    trigger=inngest.TriggerEvent(event=events.DIAGNOSIS_REQUESTED),
)
async def simple_ai_diagnosis(ctx: inngest.Context, step: inngest.Step) -> Dict[str, Any]:
    request = events.DiagnosisRequested.model_validate(ctx.event.data)
    logger.info("Simple AI diagnosis for session %s (priority=%s)", request.session_id, request.priority)
    await step.sleep("ai-processing", timedelta(seconds=2))
    return {
        "sessionId": request.session_id,
        "predictions": [
            {
                "diseaseId": "test-disease",
                "confidence": 0.85,
                "confidenceIntervalLow": 0.8,
                "confidenceIntervalHigh": 0.9,
                "reasoning": ["Test reasoning"],
                "riskFactors": ["Test risk factor"],
                "recommendations": ["Test recommendation"],
            }
        ],
        "processingTime": 2000,
        "success": True,
    }


@JOB_CLIENT.create_function(
    fn_id="monitor-usage-limits",
    trigger=inngest.TriggerEvent(event=events.USAGE_LIMIT_EXCEEDED),
)
async def monitor_usage_limits(ctx: inngest.Context, step: inngest.Step) -> Dict[str, Any]:
    data = events.UsageLimitExceeded.model_validate(ctx.event.data)

    def _log_usage_limit() -> None:
        logger.warning(
            "User %s exceeded %s limit: %s/%s", data.user_id, data.limit_type, data.current_usage, data.limit
        )

    def _notify_admins() -> None:
        logger.info("Admin notification: user %s hit %s limit", data.user_id, data.limit_type)

    await step.run("log-usage-limit", _log_usage_limit)
    await step.run("notify-admins", _notify_admins)
    return usage_limit_summary(data)


@JOB_CLIENT.create_function(
    fn_id="retry-failed-ai-requests",
    trigger=inngest.TriggerEvent(event=events.DIAGNOSIS_FAILED),
)
async def retry_failed_ai_requests(ctx: inngest.Context, step: inngest.Step) -> Dict[str, Any]:
    failed = events.DiagnosisFailed.model_validate(ctx.event.data)
    logger.info(
        "Retrying failed AI request for session %s (attempt %s/%s)",
        failed.session_id,
        failed.retry_count + 1,
        failed.max_retries,
    )
    if failed.retry_count >= failed.max_retries:
        logger.error(
            "AI processing for session %s failed after %s attempts: %s",
            failed.session_id,
            failed.max_retries,
            failed.error,
        )
        return {"success": False, "reason": "Max retries exceeded"}

    await step.sleep("wait-before-retry", timedelta(milliseconds=retry_delay_ms(failed.retry_count)))
    await step.send_event(
        "retry-ai-request",
        inngest.Event(name=events.DIAGNOSIS_REQUESTED, data=build_retry_payload(failed)),
    )
    return {"success": True, "retryCount": failed.retry_count + 1}


JOB_FUNCTIONS = [
    test_function,
    simple_ai_diagnosis,
    monitor_usage_limits,
    retry_failed_ai_requests,
]
