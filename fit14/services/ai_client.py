"""Client for the external workout-plan generation service.

One request per generation, no retries. A service instance runs at most one
generation at a time and the pending one can be cancelled; a cancelled
generation produces nothing.
"""

from __future__ import annotations

import asyncio
import logging
import time
from datetime import date, datetime, timedelta, timezone
from email.utils import parsedate_to_datetime
from typing import Optional
from uuid import uuid4

import httpx

from fit14.config import Settings
from fit14.errors import (
    ConfigurationError,
    GenerationInProgress,
    InvalidInput,
    NetworkFailure,
    NoInternetConnection,
    RateLimited,
    RequestTimeout,
    ServiceError,
)
from fit14.logging_config import log_context
from fit14.services.goal_data import GoalDataAggregate
from fit14.services.prompt_builder import PROMPT_VERSION, build_prompt, build_regeneration_prompt
from fit14.services.response_parser import ParsedPlan, parse_plan_response
from fit14.services.workout_plan import WorkoutPlan

logger = logging.getLogger(__name__)


def _parse_reset_at(response: httpx.Response) -> Optional[datetime]:
    """Reset time from ``Retry-After`` (seconds or HTTP date) or ``X-RateLimit-Reset`` (epoch)."""
    retry_after = response.headers.get("Retry-After")
    if retry_after:
        if retry_after.strip().isdigit():
            return datetime.now(timezone.utc) + timedelta(seconds=int(retry_after))
        try:
            return parsedate_to_datetime(retry_after)
        except (TypeError, ValueError):
            pass
    reset = response.headers.get("X-RateLimit-Reset")
    if reset:
        try:
            return datetime.fromtimestamp(float(reset), tz=timezone.utc)
        except (ValueError, OverflowError):
            return None
    return None


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(body, dict):
        return str(body.get("message") or body.get("error") or "")
    return ""


class PlanGenerationService:
    """Generates WorkoutPlans from goal data through the AI service."""

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings
        self._transport = transport
        self._task: Optional[asyncio.Task] = None

    @property
    def is_generating(self) -> bool:
        return self._task is not None and not self._task.done()

    def cancel(self) -> bool:
        """Cancel the pending generation. Returns False when nothing was running."""
        if not self.is_generating:
            return False
        logger.info("Cancelling plan generation")
        self._task.cancel()
        return True

    async def generate(
        self,
        aggregate: GoalDataAggregate,
        start_date: Optional[date] = None,
        regenerate: bool = False,
    ) -> WorkoutPlan:
        parsed = await self.generate_parsed(aggregate, start_date, regenerate)
        return parsed.plan

    async def generate_parsed(
        self,
        aggregate: GoalDataAggregate,
        start_date: Optional[date] = None,
        regenerate: bool = False,
    ) -> ParsedPlan:
        if self.is_generating:
            raise GenerationInProgress()
        if not aggregate.is_sufficient_for_generation():
            issues = aggregate.validation_issues()
            raise InvalidInput(issues[0] if issues else None)
        if not self.settings.has_api_key:
            raise ConfigurationError("AI service API key is not configured")

        task = asyncio.ensure_future(self._run(aggregate, start_date, regenerate))
        self._task = task
        try:
            return await task
        finally:
            if self._task is task:
                self._task = None

    async def _run(
        self, aggregate: GoalDataAggregate, start_date: Optional[date], regenerate: bool
    ) -> ParsedPlan:
        request_id = str(uuid4())
        prompt = build_regeneration_prompt(aggregate) if regenerate else build_prompt(aggregate)
        user_goals = aggregate.complete_goal_text()
        profile = aggregate.structured_summary()
        payload = {
            "userGoals": user_goals,
            "requestId": request_id,
            "prompt": prompt,
            "profile": profile,
        }

        with log_context(request_id=request_id, prompt_version=PROMPT_VERSION):
            logger.info("Starting plan generation")
            start = time.perf_counter()
            response = await self._post(payload)
            self._raise_for_status(response)

            parsed = parse_plan_response(
                response.text, user_goals, start_date=start_date, goal_profile=profile
            )
            logger.info(
                "Plan generation finished",
                extra={
                    "ctx_duration_ms": round((time.perf_counter() - start) * 1000, 1),
                    "ctx_days": len(parsed.plan.days),
                    "ctx_rejected": len(parsed.rejected_exercises),
                },
            )
        return parsed

    async def _post(self, payload: dict) -> httpx.Response:
        headers = {
            "Authorization": f"Bearer {self.settings.ai_api_key}",
            "Content-Type": "application/json",
        }
        try:
            async with httpx.AsyncClient(
                transport=self._transport, timeout=self.settings.request_timeout_sec
            ) as client:
                return await client.post(self.settings.ai_endpoint, json=payload, headers=headers)
        except httpx.TimeoutException as exc:
            logger.warning("Plan generation timed out", exc_info=True)
            raise RequestTimeout() from exc
        except httpx.ConnectError as exc:
            logger.warning("Could not reach AI service", exc_info=True)
            raise NoInternetConnection() from exc
        except httpx.TransportError as exc:
            logger.warning("Transport error talking to AI service", exc_info=True)
            raise NetworkFailure(str(exc)) from exc

    def _raise_for_status(self, response: httpx.Response) -> None:
        status = response.status_code
        if 200 <= status < 300:
            return
        detail = _error_detail(response)
        logger.warning(
            "AI service returned HTTP %d", status,
            extra={"ctx_status": status, "ctx_detail": detail},
        )
        if status == 429:
            raise RateLimited(reset_at=_parse_reset_at(response))
        if status in (401, 403):
            raise ServiceError("The AI service rejected the configured credentials")
        raise ServiceError(detail or f"AI service error (HTTP {status})")
