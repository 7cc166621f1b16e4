"""Pytest configuration.

Run pytest from this project's root; pythonpath in pyproject.toml puts src/
and the project root on sys.path so tests import qt_lazy_linter and
tests.linter_test_utils alike.
"""

import pytest

from qt_lazy_linter.infrastructure.di.container import QtLazyContainer
from qt_lazy_linter.infrastructure.gateways.astroid_gateway import AstroidGateway
from qt_lazy_linter.use_cases.checks import build_default_registry


@pytest.fixture
def registry():
    return build_default_registry()


@pytest.fixture
def gateway():
    return AstroidGateway()


@pytest.fixture(autouse=True)
def _reset_container():
    QtLazyContainer.reset()
    yield
    QtLazyContainer.reset()
