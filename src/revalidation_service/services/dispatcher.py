"""Fan-out of revalidation calls for one event or one explicit slug batch."""
from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Iterable

from revalidation_service.application.dto.endpoint import EndpointConfig
from revalidation_service.application.ports.notifier import Notifier
from revalidation_service.domain.entities.outcome import (
    CONFIG_INCOMPLETE,
    DEADLINE_EXCEEDED,
    NO_TARGETS,
    DispatchResult,
    RevalidationOutcome,
)
from revalidation_service.domain.events.change_event import ChangeEvent
from revalidation_service.services.config_resolver import ConfigResolver
from revalidation_service.services.slug_mapper import SlugMapper

logger = logging.getLogger(__name__)

DEFAULT_CONCURRENCY = 4
DEFAULT_MAX_ATTEMPTS = 2
BASE_BACKOFF_SECONDS = 0.5
MAX_BACKOFF_SECONDS = 5.0

Sleep = Callable[[float], Awaitable[None]]


def _calc_backoff(attempt: int, base: float, ceiling: float) -> float:
    return min(base * (2 ** attempt), ceiling)


def dedupe_targets(targets: Iterable[str]) -> list[str]:
    """Exact, case-sensitive dedup keeping first-seen order."""
    return list(dict.fromkeys(targets))


class Dispatcher:
    def __init__(
        self,
        resolver: ConfigResolver,
        notifier: Notifier,
        mapper: SlugMapper | None = None,
        *,
        concurrency: int = DEFAULT_CONCURRENCY,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        backoff_base: float = BASE_BACKOFF_SECONDS,
        backoff_max: float = MAX_BACKOFF_SECONDS,
        default_deadline: float | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        if concurrency < 1:
            raise ValueError("concurrency must be >= 1")
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        self._resolver = resolver
        self._notifier = notifier
        self._mapper = mapper or SlugMapper()
        self._concurrency = concurrency
        self._max_attempts = max_attempts
        self._backoff_base = backoff_base
        self._backoff_max = backoff_max
        self._default_deadline = default_deadline
        self._sleep = sleep

    async def dispatch_event(
        self,
        event: ChangeEvent,
        *,
        deadline: float | None = None,
    ) -> DispatchResult:
        targets = self._mapper.map_event(event)
        if not targets:
            logger.debug("No revalidation needed for %r", event)
            return DispatchResult(reason=NO_TARGETS)
        return await self.dispatch_batch(targets, deadline=deadline)

    async def dispatch_batch(
        self,
        targets: Iterable[str],
        *,
        deadline: float | None = None,
    ) -> DispatchResult:
        requested = list(targets)
        if not requested:
            return DispatchResult(reason=NO_TARGETS)

        config = await self._resolver.resolve()
        problem = config.problem()
        if problem is not None:
            reason = f"{CONFIG_INCOMPLETE}: {problem}"
            logger.warning(
                "Revalidation skipped for %d target(s): %s", len(requested), reason,
            )
            return DispatchResult(
                outcomes=tuple(
                    RevalidationOutcome.skipped(t, reason) for t in dedupe_targets(requested)
                ),
                reason=reason,
            )

        outcomes: list[RevalidationOutcome] = []
        unique: list[str] = []
        for target in dedupe_targets(requested):
            if not target or not target.strip():
                outcomes.append(RevalidationOutcome.skipped(target, "empty slug"))
            else:
                unique.append(target)

        if unique:
            timeout = deadline if deadline is not None else self._default_deadline
            outcomes.extend(await self._fan_out(unique, config, timeout))

        never_started = any(o.reason == DEADLINE_EXCEEDED for o in outcomes)
        result = DispatchResult(
            outcomes=tuple(outcomes),
            reason=DEADLINE_EXCEEDED if never_started else None,
        )
        self._log_result(result)
        return result

    async def _fan_out(
        self,
        targets: list[str],
        config: EndpointConfig,
        timeout: float | None,
    ) -> list[RevalidationOutcome]:
        semaphore = asyncio.Semaphore(self._concurrency)
        started: set[str] = set()

        async def _run(target: str) -> RevalidationOutcome:
            async with semaphore:
                started.add(target)
                return await self._attempt(target, config)

        tasks = {
            asyncio.create_task(_run(t), name=f"revalidate:{t}"): t for t in targets
        }
        _done, pending = await asyncio.wait(tasks, timeout=timeout)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
            logger.warning(
                "Revalidation batch deadline of %.1fs hit, abandoned %d call(s), %d never started",
                timeout or 0.0,
                len(pending),
                sum(1 for t in pending if tasks[t] not in started),
            )

        outcomes: list[RevalidationOutcome] = []
        for task, target in tasks.items():
            if task.cancelled():
                if target in started:
                    outcomes.append(RevalidationOutcome.transport_error(target, "timeout"))
                else:
                    outcomes.append(RevalidationOutcome.skipped(target, DEADLINE_EXCEEDED))
                continue
            exc = task.exception()
            if exc is not None:
                logger.error(
                    "Unexpected error revalidating %s", target, exc_info=exc,
                )
                outcomes.append(
                    RevalidationOutcome.transport_error(target, f"unexpected error: {exc}")
                )
                continue
            outcomes.append(task.result())
        return outcomes

    async def _attempt(self, target: str, config: EndpointConfig) -> RevalidationOutcome:
        attempt = 0
        while True:
            outcome = await self._notifier.notify(target, config)
            attempt += 1
            if not outcome.retryable or attempt >= self._max_attempts:
                break
            delay = _calc_backoff(attempt - 1, self._backoff_base, self._backoff_max)
            logger.info(
                "Retrying revalidation of %s in %.2fs (attempt %d/%d, %s)",
                target, delay, attempt + 1, self._max_attempts, outcome.reason or outcome.code,
            )
            await self._sleep(delay)
        return RevalidationOutcome(
            target=outcome.target,
            status=outcome.status,
            code=outcome.code,
            reason=outcome.reason,
            attempts=attempt,
        )

    @staticmethod
    def _log_result(result: DispatchResult) -> None:
        for outcome in result.failed:
            logger.warning(
                "Revalidation error for %s: %s %s",
                outcome.target,
                outcome.status,
                outcome.code if outcome.code is not None else outcome.reason,
            )
        summary = result.summary()
        logger.info(
            "Revalidation batch finished: %d target(s), %d ok, %d failed, %d skipped",
            summary["total"],
            summary["succeeded"],
            summary["failed"],
            summary["skipped"],
        )
