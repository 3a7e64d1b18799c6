"""
Test Fakes Module

Provides fake/stub implementations for testing.
These are minimal implementations that satisfy interfaces without real dependencies.
"""

from tests.fakes.fake_backend import FAKE_VERSION, FakeBackend, FakeBackendFactory, fake_token

__all__ = [
    "FAKE_VERSION",
    "FakeBackend",
    "FakeBackendFactory",
    "fake_token",
]
