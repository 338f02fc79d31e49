import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Ensure tests never depend on a developer's real storeguard settings from the environment.
for name in list(os.environ):
    if name.upper().startswith("STOREGUARD_"):
        del os.environ[name]


@pytest.fixture(autouse=True)
def fresh_settings():
    from storeguard.config import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
