from __future__ import annotations

from pathlib import Path

import pytest

from tests._fixtures.port_builder import PortBuilder


@pytest.fixture
def port_builder(tmp_path: Path) -> PortBuilder:
    """Provide a reusable port builder rooted at the pytest tmp_path."""
    return PortBuilder(tmp_path)
