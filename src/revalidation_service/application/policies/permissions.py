from __future__ import annotations

from revalidation_service.application.dto.principal import Principal
from revalidation_service.application.exceptions import ForbiddenError


def assert_admin(principal: Principal) -> None:
    if not principal.is_admin:
        raise ForbiddenError("Admin access required")
