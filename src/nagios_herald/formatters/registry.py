"""Registry of formatter variants, built once at startup."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from types import MappingProxyType

from nagios_herald.formatters.base import (
    DEFAULT_FORMATTER,
    ConfigurationError,
    FormatterVariant,
)
from nagios_herald.formatters.check_disk import CHECK_DISK_FORMATTER

logger = logging.getLogger(__name__)


class UnknownFormatterError(ConfigurationError):
    """Raised when no formatter is registered under a name."""

    def __init__(self, name: str, available: Iterable[str]) -> None:
        super().__init__(
            f"Unknown formatter {name!r} (available: {', '.join(sorted(available))})"
        )
        self.name = name


class DuplicateFormatterError(ConfigurationError):
    """Raised when two formatter variants share a name."""


class FormatterRegistry:
    """Immutable mapping of formatter names to variants.

    Example:
        ```python
        registry = build_default_registry()
        variant = registry.lookup("check_disk")
        ```
    """

    def __init__(self, variants: Iterable[FormatterVariant]) -> None:
        """Build the registry.

        Args:
            variants: Formatter variants to register.

        Raises:
            DuplicateFormatterError: If two variants have the same name.
        """
        formatters: dict[str, FormatterVariant] = {}
        for variant in variants:
            if variant.name in formatters:
                raise DuplicateFormatterError(
                    f"Formatter {variant.name!r} is registered more than once"
                )
            formatters[variant.name] = variant
        self._formatters = MappingProxyType(formatters)
        logger.debug(f"Registered formatters: {', '.join(self.names())}")

    def __contains__(self, name: object) -> bool:
        return name in self._formatters

    def __iter__(self) -> Iterator[FormatterVariant]:
        return iter(self._formatters.values())

    def __len__(self) -> int:
        return len(self._formatters)

    def names(self) -> list[str]:
        """Get the registered names, sorted."""
        return sorted(self._formatters)

    def lookup(self, name: str) -> FormatterVariant:
        """Get the variant registered under a name.

        Raises:
            UnknownFormatterError: If the name is not registered.
        """
        try:
            return self._formatters[name]
        except KeyError:
            raise UnknownFormatterError(name, self._formatters) from None


def build_default_registry() -> FormatterRegistry:
    """Build the registry of the bundled formatters."""
    return FormatterRegistry([DEFAULT_FORMATTER, CHECK_DISK_FORMATTER])
