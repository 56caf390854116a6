"""Tests for the formatter registry."""

from __future__ import annotations

import pytest

from nagios_herald.formatters.base import (
    DEFAULT_FORMATTER,
    ConfigurationError,
    FormatterVariant,
)
from nagios_herald.formatters.check_disk import CHECK_DISK_FORMATTER
from nagios_herald.formatters.registry import (
    DuplicateFormatterError,
    FormatterRegistry,
    UnknownFormatterError,
    build_default_registry,
)


class TestFormatterRegistry:
    """Tests for FormatterRegistry."""

    def test_default_registry_names(self) -> None:
        registry = build_default_registry()
        assert registry.names() == ["check_disk", "default"]
        assert len(registry) == 2
        assert "check_disk" in registry

    def test_lookup_is_stable(self) -> None:
        """Looking up a name always returns the same variant."""
        registry = build_default_registry()
        for name in registry.names():
            assert registry.lookup(name) is registry.lookup(name)
        assert registry.lookup("default") is DEFAULT_FORMATTER
        assert registry.lookup("check_disk") is CHECK_DISK_FORMATTER

    def test_unknown_name(self) -> None:
        """Unknown names raise a configuration error listing the choices."""
        registry = build_default_registry()
        with pytest.raises(UnknownFormatterError, match="check_cpu") as exc_info:
            registry.lookup("check_cpu")
        assert "check_disk, default" in str(exc_info.value)
        assert isinstance(exc_info.value, ConfigurationError)

    def test_duplicate_names_rejected(self) -> None:
        with pytest.raises(DuplicateFormatterError, match="default"):
            FormatterRegistry([DEFAULT_FORMATTER, FormatterVariant(name="default")])

    def test_iterates_variants(self) -> None:
        registry = FormatterRegistry([DEFAULT_FORMATTER])
        assert list(registry) == [DEFAULT_FORMATTER]
