from typing import Any

import pytest


@pytest.fixture
def context() -> dict[str, Any]:
    """Shared state between the steps of one scenario."""
    return {}
