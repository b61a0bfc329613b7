from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

import pytest

from tests._fixtures.lib_tree import LibTreeBuilder


@pytest.fixture
def lib_tree(tmp_path: Path) -> LibTreeBuilder:
    """Provide a library tree builder rooted at the pytest tmp_path."""
    return LibTreeBuilder(tmp_path)


@pytest.fixture(autouse=True)
def _reset_nativelibs_logger() -> Iterator[None]:
    """Undo CLI logging configuration so caplog keeps seeing records."""
    yield
    logger = logging.getLogger("nativelibs")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
