"""Formatting layer - Nagios macros to text and HTML content."""

from nagios_herald.formatters.base import (
    DEFAULT_FORMATTER,
    ConfigurationError,
    Formatter,
    FormatterOptions,
    FormatterVariant,
    InvalidNotificationTypeError,
    MissingSectionError,
)
from nagios_herald.formatters.check_disk import CHECK_DISK_FORMATTER
from nagios_herald.formatters.models import (
    ContentBuffer,
    ContentFragment,
    NotificationType,
    Section,
    SectionCall,
    StateType,
)
from nagios_herald.formatters.registry import (
    DuplicateFormatterError,
    FormatterRegistry,
    UnknownFormatterError,
    build_default_registry,
)

__all__ = [
    "CHECK_DISK_FORMATTER",
    "DEFAULT_FORMATTER",
    "ConfigurationError",
    "ContentBuffer",
    "ContentFragment",
    "DuplicateFormatterError",
    "Formatter",
    "FormatterOptions",
    "FormatterRegistry",
    "FormatterVariant",
    "InvalidNotificationTypeError",
    "MissingSectionError",
    "NotificationType",
    "Section",
    "SectionCall",
    "StateType",
    "UnknownFormatterError",
    "build_default_registry",
]
