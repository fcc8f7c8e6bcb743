from __future__ import annotations

from typing import Any

from revalidation_service.application.dto.principal import Principal
from revalidation_service.domain.value_objects.enums import PrincipalKind


def principal_from_claims(payload: dict[str, Any]) -> Principal:
    kind_raw = payload.get("kind", payload.get("role", "user"))
    kind = PrincipalKind(kind_raw) if kind_raw in PrincipalKind.__members__.values() else PrincipalKind.USER
    return Principal(
        kind=kind,
        subject_id=int(payload["sub"]),
        roles=payload.get("roles", []),
    )
