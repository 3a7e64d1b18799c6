"""
Parser Registry

Maps dialect versions to parser backend factories. Adding a version is a
registration, never an edit of the lookup.
"""

from collections.abc import Callable
from functools import partial
from typing import Any

from codegraph_source.exceptions import UnknownDialectError
from codegraph_source.models import DialectVersion
from codegraph_source.observability import get_logger
from codegraph_source.parsing.backends import PythonBackend
from codegraph_source.ports import ParserBackend

logger = get_logger(__name__)

# Factory signature: factory(consumer, *, all_errors_are_fatal, ignore_warnings) -> backend
BackendFactory = Callable[..., ParserBackend]

SUPPORTED_PYTHON_VERSIONS: tuple[DialectVersion, ...] = tuple(DialectVersion(3, minor) for minor in range(8, 14))


class BackendRegistry:
    """
    Registry for dialect parser backends.

    Supports (by default):
    - Python 3.8 through 3.13
    """

    def __init__(self, register_defaults: bool = True):
        self._factories: dict[DialectVersion, BackendFactory] = {}
        if register_defaults:
            self._setup_backends()

    def _setup_backends(self) -> None:
        """Register the CPython-parser backends"""
        for version in SUPPORTED_PYTHON_VERSIONS:
            self.register(version, partial(PythonBackend, version))

    def register(self, version: DialectVersion | tuple[int, int] | str, factory: BackendFactory) -> None:
        """
        Register a backend factory for a version (replaces an existing one).

        Args:
            version: Dialect version
            factory: Callable building a backend from a diagnostic consumer
        """
        version = DialectVersion.parse(version)
        self._factories[version] = factory
        logger.debug("backend_registered", version=str(version))

    def unregister(self, version: DialectVersion | tuple[int, int] | str) -> None:
        self._factories.pop(DialectVersion.parse(version), None)

    def select(self, version: DialectVersion | tuple[int, int] | str) -> BackendFactory:
        """
        Get the backend factory for a version.

        Raises:
            UnknownDialectError: If the version is not registered
        """
        parsed = DialectVersion.parse(version)
        factory = self._factories.get(parsed)
        if factory is None:
            raise UnknownDialectError(
                f"Unknown dialect version: {version!r}",
                {"supported": [str(v) for v in self.supported_versions]},
            )
        return factory

    def supports(self, version: Any) -> bool:
        """Check if version is supported (never raises)"""
        try:
            return DialectVersion.parse(version) in self._factories
        except UnknownDialectError:
            return False

    @property
    def supported_versions(self) -> list[DialectVersion]:
        return sorted(self._factories)


# Global registry instance
_registry: BackendRegistry | None = None


def get_registry() -> BackendRegistry:
    """Get global backend registry instance"""
    global _registry
    if _registry is None:
        _registry = BackendRegistry()
    return _registry
