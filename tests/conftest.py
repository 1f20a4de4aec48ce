from __future__ import annotations

from pathlib import Path

import pytest

from tests._fixtures.doc_nodes import DataDirBuilder


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    return tmp_path / "data" / "api"


@pytest.fixture
def data_builder(data_dir: Path) -> DataDirBuilder:
    """Provide a builder writing package data under ``data_dir``."""
    return DataDirBuilder(data_dir)
