from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class PostTransition:
    """A content entity moved from one status to another."""

    content_type: str
    slug_token: str
    old_status: str
    new_status: str
    autosave: bool = False
    scheduled: bool = False

    @property
    def is_background(self) -> bool:
        return self.autosave or self.scheduled
