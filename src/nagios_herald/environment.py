"""Access to the Nagios macros exported into a notification's environment.

Nagios exports every macro for a notification as an ``NAGIOS_*`` environment
variable. This module snapshots those variables once per invocation and
provides lookups that never fail on a missing macro.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType

from dotenv import dotenv_values

logger = logging.getLogger(__name__)

NAGIOS_VAR_PREFIX = "NAGIOS_"

# Literal escape sequences Nagios leaves in plugin output
ESCAPE_SEQUENCES = (
    ("\\n", "\n"),
    ("\\t", "\t"),
)


class EnvFileError(Exception):
    """Raised when a saved Nagios environment cannot be loaded."""


def unescape_text(text: str) -> str:
    """Turn literal escape sequences (e.g. ``\\n``) into control characters."""
    for escaped, char in ESCAPE_SEQUENCES:
        text = text.replace(escaped, char)
    return text


def load_env_file(path: str | Path) -> dict[str, str]:
    """Load a captured Nagios environment from a ``KEY=VALUE`` file.

    Args:
        path: Path to the environment file.

    Returns:
        Mapping of variable names to values (unset values become "").

    Raises:
        EnvFileError: If the file does not exist or is not a regular file.
    """
    env_path = Path(path)
    if not env_path.is_file():
        raise EnvFileError(f"Environment file not found: {env_path}")

    values = dotenv_values(env_path)
    logger.debug(f"Loaded {len(values)} variables from {env_path}")
    return {key: value or "" for key, value in values.items()}


@dataclass(frozen=True)
class NotificationContext:
    """Read-only snapshot of the Nagios macros for one alert event.

    Attributes:
        variables: The ``NAGIOS_*`` variables captured for the event.
    """

    variables: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "variables", MappingProxyType(dict(self.variables)))

    @classmethod
    def from_environ(cls, environ: Mapping[str, str] | None = None) -> NotificationContext:
        """Build a context from the ``NAGIOS_*`` entries of an environment.

        Args:
            environ: Environment mapping (defaults to ``os.environ``).

        Returns:
            NotificationContext holding only Nagios variables.
        """
        source = os.environ if environ is None else environ
        return cls(
            variables={
                key: value
                for key, value in source.items()
                if key.startswith(NAGIOS_VAR_PREFIX)
            }
        )

    def get(self, name: str) -> str:
        """Return a Nagios variable, or "" when it is not set."""
        return self.variables.get(name) or ""

    def unescaped(self, name: str) -> str:
        """Return a Nagios variable with literal escape sequences decoded."""
        return unescape_text(self.get(name))

    @property
    def state_type(self) -> str:
        """SERVICE when a service state is present, HOST otherwise."""
        return "SERVICE" if self.get("NAGIOS_SERVICESTATE") else "HOST"

    def state_var_name(self, suffix: str) -> str:
        """Name of ``NAGIOS_<HOST|SERVICE><suffix>`` for the current state type."""
        return f"{NAGIOS_VAR_PREFIX}{self.state_type}{suffix}"

    def state_var(self, suffix: str) -> str:
        """Read ``NAGIOS_<HOST|SERVICE><suffix>`` for the current state type."""
        return self.get(self.state_var_name(suffix))

    def last_state_var(self) -> str:
        """Read ``NAGIOS_LAST<HOST|SERVICE>STATE``."""
        return self.get(f"{NAGIOS_VAR_PREFIX}LAST{self.state_type}STATE")

    @property
    def hostname(self) -> str:
        return self.get("NAGIOS_HOSTNAME")

    @property
    def service_desc(self) -> str:
        return self.get("NAGIOS_SERVICEDESC")

    @property
    def notification_type(self) -> str:
        return self.get("NAGIOS_NOTIFICATIONTYPE")
