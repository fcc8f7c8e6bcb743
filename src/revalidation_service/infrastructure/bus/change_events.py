"""Decoding of CMS change events delivered as flat Redis stream entries."""
from __future__ import annotations

from typing import Any

from revalidation_service.domain.events.change_event import ChangeEvent
from revalidation_service.domain.events.post_transition import PostTransition
from revalidation_service.domain.events.taxonomy_changed import TaxonomyChanged
from revalidation_service.domain.value_objects.enums import TaxonomyAction

POST_TRANSITION = "post.transition"
TAXONOMY_PREFIX = "taxonomy."

_TRUTHY = {"1", "true", "yes", "on"}


class MalformedEventError(ValueError):
    pass


def _flag(fields: dict[str, Any], name: str) -> bool:
    return str(fields.get(name, "")).strip().lower() in _TRUTHY


def _required(fields: dict[str, Any], name: str) -> str:
    value = fields.get(name)
    if value is None:
        raise MalformedEventError(f"missing field {name!r}")
    return str(value)


def parse_change_event(event_type: str, fields: dict[str, Any]) -> ChangeEvent | None:
    """Build a typed event from stream fields.

    Returns ``None`` for event types this service does not handle and raises
    ``MalformedEventError`` when a handled type lacks required fields.
    """
    if event_type == POST_TRANSITION:
        return PostTransition(
            content_type=_required(fields, "post_type"),
            # Drafts may not have a post_name yet.
            slug_token=str(fields.get("post_name") or ""),
            old_status=_required(fields, "old_status"),
            new_status=_required(fields, "new_status"),
            autosave=_flag(fields, "autosave"),
            scheduled=_flag(fields, "cron"),
        )

    if event_type.startswith(TAXONOMY_PREFIX):
        action_raw = event_type.removeprefix(TAXONOMY_PREFIX)
        try:
            action = TaxonomyAction(action_raw)
        except ValueError:
            return None
        term_raw = _required(fields, "term_id")
        try:
            term_id = int(term_raw)
        except ValueError as exc:
            raise MalformedEventError(f"term_id is not an integer: {term_raw!r}") from exc
        return TaxonomyChanged(
            action=action,
            taxonomy_id=term_id,
            taxonomy=str(fields.get("taxonomy") or "category"),
        )

    return None
