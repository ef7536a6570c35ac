from __future__ import annotations

from collections.abc import Generator
from pathlib import Path

import pytest

from sqltemplate.utils.logging import set_correlation_id

here = Path(__file__).parent
root_path = here.parent


@pytest.fixture(autouse=True)
def clear_correlation_id() -> Generator[None, None, None]:
    """Keep correlation IDs from leaking between tests."""
    set_correlation_id(None)
    yield
    set_correlation_id(None)
