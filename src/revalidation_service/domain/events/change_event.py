from __future__ import annotations

from typing import TypeAlias

from revalidation_service.domain.events.post_transition import PostTransition
from revalidation_service.domain.events.taxonomy_changed import TaxonomyChanged

ChangeEvent: TypeAlias = PostTransition | TaxonomyChanged
