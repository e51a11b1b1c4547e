# tests/conftest.py
"""
Pytest configuration and fixtures.
Adds src to sys.path so `import refields` works without an install.
"""

import logging
import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

project_root = Path(__file__).parent.parent
src_root = project_root / "src"
if str(src_root) not in sys.path:
    sys.path.insert(0, str(src_root))

from refields.instrumentation import LogMode  # noqa: E402
from refields.session import FormSession  # noqa: E402


@pytest.fixture
def fake_driver():
    driver = MagicMock(name="driver")
    driver.find_elements.return_value = []
    return driver


@pytest.fixture
def session(fake_driver):
    logger = logging.getLogger("refields.tests")
    logger.setLevel(logging.DEBUG)
    return FormSession(logger, driver=fake_driver, mode=LogMode.DEBUG)


@pytest.fixture
def make_element():
    def _make(value="", *, selected=False, attr_value=None, driver=None):
        el = MagicMock(name="element")
        el.get_property.return_value = value
        el.get_attribute.return_value = attr_value if attr_value is not None else value
        el.is_selected.return_value = selected
        el.parent = driver if driver is not None else MagicMock(name="parent_driver")
        return el

    return _make
