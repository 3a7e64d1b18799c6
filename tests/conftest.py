"""
Global test configuration and fixtures
"""

import pytest

from codegraph_source.config import SourceSettings
from codegraph_source.parsing.parser_registry import BackendRegistry
from codegraph_source.processed_source import ProcessedSource
from tests.fakes import FAKE_VERSION, FakeBackendFactory


@pytest.fixture
def settings() -> SourceSettings:
    """Settings independent of the process environment"""
    return SourceSettings(
        dialect_version="3.12",
        all_errors_are_fatal=False,
        ignore_warnings=False,
        end_marker="__END__",
    )


@pytest.fixture
def process(settings):
    """Build a ProcessedSource with the real Python backends"""

    def _process(source, version="3.12", path=None, **kwargs):
        kwargs.setdefault("settings", settings)
        return ProcessedSource(source, version, path, **kwargs)

    return _process


@pytest.fixture
def fake_registry():
    """
    Registry with a single scripted backend under FAKE_VERSION.

    Returns (registry, factory); mutate the factory before processing.
    """
    factory = FakeBackendFactory()
    registry = BackendRegistry(register_defaults=False)
    registry.register(FAKE_VERSION, factory)
    return registry, factory


# Pytest hooks
def pytest_configure(config):
    """pytest 설정"""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")


def pytest_collection_modifyitems(config, items):
    """Add markers based on test path"""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
