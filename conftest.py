"""Root conftest: loads .env.test before any module imports settings."""
from __future__ import annotations

import os
from pathlib import Path

_env_test = Path(__file__).resolve().parent / ".env.test"
if _env_test.exists():
    for raw in _env_test.read_text().splitlines():
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        key, _, value = line.partition("=")
        os.environ.setdefault(key.strip(), value.strip().strip('"'))

# Deployment overrides would shadow the stored settings the tests exercise.
for _name in ("NEXTJS_FRONTEND_URL", "NEXTJS_REVALIDATION_SECRET"):
    os.environ.pop(_name, None)
