from __future__ import annotations

from enum import StrEnum


class PostStatus(StrEnum):
    DRAFT = "draft"
    AUTO_DRAFT = "auto-draft"
    PENDING = "pending"
    PUBLISH = "publish"
    FUTURE = "future"
    PRIVATE = "private"
    TRASH = "trash"
    INHERIT = "inherit"


class TaxonomyAction(StrEnum):
    CREATED = "created"
    EDITED = "edited"
    DELETED = "deleted"


class OutcomeStatus(StrEnum):
    SUCCESS = "success"
    HTTP_ERROR = "http_error"
    TRANSPORT_ERROR = "transport_error"
    SKIPPED = "skipped"


class RevalidationAction(StrEnum):
    SINGLE = "single"
    CLEAR_ALL = "clear_all"


class PrincipalKind(StrEnum):
    USER = "user"
    ADMIN = "admin"
