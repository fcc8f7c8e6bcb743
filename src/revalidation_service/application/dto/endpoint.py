from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import urlsplit


@dataclass(frozen=True, slots=True)
class EndpointConfig:
    """Frontend revalidation endpoint, resolved fresh for every dispatch."""

    base_url: str | None = None
    secret: str | None = None

    def problem(self) -> str | None:
        """Why no call may be made with this config, or ``None`` when usable."""
        missing = [name for name in ("base_url", "secret") if not getattr(self, name)]
        if missing:
            return "missing " + ", ".join(missing)
        parts = urlsplit(self.base_url or "")
        if parts.scheme not in ("http", "https") or not parts.netloc:
            return f"base_url is not an absolute http(s) URL: {self.base_url!r}"
        return None

    @property
    def is_complete(self) -> bool:
        return self.problem() is None

    def __repr__(self) -> str:
        secret = "***" if self.secret else None
        return f"EndpointConfig(base_url={self.base_url!r}, secret={secret!r})"
