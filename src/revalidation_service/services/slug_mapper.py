from __future__ import annotations

from typing import Mapping

from revalidation_service.domain.events.change_event import ChangeEvent
from revalidation_service.domain.events.post_transition import PostTransition
from revalidation_service.domain.events.taxonomy_changed import TaxonomyChanged
from revalidation_service.domain.value_objects.enums import PostStatus

DEFAULT_ROUTE_PREFIXES: Mapping[str, str] = {"post": "/blog"}
DEFAULT_LISTING_SLUG = "/blog"


class SlugMapper:
    """Pure translation of change events into frontend slugs.

    ``route_prefixes`` maps a content type to the path its entities live
    under; types without an entry are served from the site root.
    """

    def __init__(
        self,
        route_prefixes: Mapping[str, str] | None = None,
        *,
        listing_slug: str = DEFAULT_LISTING_SLUG,
    ) -> None:
        prefixes = DEFAULT_ROUTE_PREFIXES if route_prefixes is None else route_prefixes
        self._prefixes = {k: v.rstrip("/") for k, v in prefixes.items()}
        self._listing_slug = listing_slug

    def slug_for(self, content_type: str, slug_token: str) -> str:
        prefix = self._prefixes.get(content_type, "")
        return f"{prefix}/{slug_token.strip('/')}"

    def map_event(self, event: ChangeEvent) -> tuple[str, ...]:
        if isinstance(event, TaxonomyChanged):
            return (self._listing_slug,)
        if isinstance(event, PostTransition):
            return self._map_transition(event)
        return ()

    def _map_transition(self, event: PostTransition) -> tuple[str, ...]:
        if event.is_background:
            return ()
        if event.old_status == PostStatus.DRAFT and event.new_status == PostStatus.DRAFT:
            return ()
        # Revisions and attachments are not independently routable.
        if event.new_status == PostStatus.INHERIT:
            return ()
        if not event.slug_token.strip("/"):
            return ()
        return (self.slug_for(event.content_type, event.slug_token),)


_default_mapper = SlugMapper()


def map_event(event: ChangeEvent) -> tuple[str, ...]:
    return _default_mapper.map_event(event)
