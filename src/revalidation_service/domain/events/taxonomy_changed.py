from __future__ import annotations

from dataclasses import dataclass

from revalidation_service.domain.value_objects.enums import TaxonomyAction


@dataclass(frozen=True, slots=True)
class TaxonomyChanged:
    action: TaxonomyAction
    taxonomy_id: int
    taxonomy: str = "category"
