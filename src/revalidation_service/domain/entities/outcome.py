from __future__ import annotations

from dataclasses import dataclass

from revalidation_service.domain.value_objects.enums import OutcomeStatus

CONFIG_INCOMPLETE = "config_incomplete"
NO_TARGETS = "no_targets"
DEADLINE_EXCEEDED = "deadline_exceeded"


@dataclass(frozen=True, slots=True)
class RevalidationOutcome:
    """Result of one revalidation attempt (or non-attempt) for a single slug."""

    target: str
    status: OutcomeStatus
    code: int | None = None
    reason: str | None = None
    attempts: int = 0

    @classmethod
    def success(cls, target: str, *, code: int = 200) -> RevalidationOutcome:
        return cls(target=target, status=OutcomeStatus.SUCCESS, code=code, attempts=1)

    @classmethod
    def http_error(
        cls, target: str, code: int, reason: str | None = None,
    ) -> RevalidationOutcome:
        return cls(target=target, status=OutcomeStatus.HTTP_ERROR, code=code, reason=reason, attempts=1)

    @classmethod
    def transport_error(cls, target: str, reason: str) -> RevalidationOutcome:
        return cls(target=target, status=OutcomeStatus.TRANSPORT_ERROR, reason=reason, attempts=1)

    @classmethod
    def skipped(cls, target: str, reason: str) -> RevalidationOutcome:
        return cls(target=target, status=OutcomeStatus.SKIPPED, reason=reason)

    @property
    def ok(self) -> bool:
        return self.status == OutcomeStatus.SUCCESS

    @property
    def failed(self) -> bool:
        return self.status in (OutcomeStatus.HTTP_ERROR, OutcomeStatus.TRANSPORT_ERROR)

    @property
    def retryable(self) -> bool:
        """Transport failures and 5xx responses may succeed on a later attempt."""
        if self.status == OutcomeStatus.TRANSPORT_ERROR:
            return True
        return self.status == OutcomeStatus.HTTP_ERROR and (self.code or 0) >= 500


@dataclass(frozen=True, slots=True)
class DispatchResult:
    """Outcomes of one batch. Lives only until the caller has logged or rendered it."""

    outcomes: tuple[RevalidationOutcome, ...] = ()
    reason: str | None = None

    @property
    def succeeded(self) -> list[RevalidationOutcome]:
        return [o for o in self.outcomes if o.ok]

    @property
    def failed(self) -> list[RevalidationOutcome]:
        return [o for o in self.outcomes if o.failed]

    @property
    def skipped(self) -> list[RevalidationOutcome]:
        return [o for o in self.outcomes if o.status == OutcomeStatus.SKIPPED]

    @property
    def config_incomplete(self) -> bool:
        return bool(self.reason and self.reason.startswith(CONFIG_INCOMPLETE))

    @property
    def deadline_exceeded(self) -> bool:
        return self.reason == DEADLINE_EXCEEDED

    @property
    def ok(self) -> bool:
        return not self.failed and not self.config_incomplete and not self.deadline_exceeded

    def summary(self) -> dict[str, int]:
        return {
            "total": len(self.outcomes),
            "succeeded": len(self.succeeded),
            "failed": len(self.failed),
            "skipped": len(self.skipped),
        }

