"""CLI entry point for Nagios Herald.

Nagios runs this once per notification with the alert's macros exported
as ``NAGIOS_*`` environment variables.

Usage:
    python -m nagios_herald [options]
"""

from __future__ import annotations

import argparse
import logging
import logging.config
import os
import smtplib
import sys
from typing import NoReturn

import httpx
from pydantic import ValidationError

from nagios_herald import __version__
from nagios_herald.config import Settings, clear_settings_cache, get_settings
from nagios_herald.environment import EnvFileError, NotificationContext, load_env_file
from nagios_herald.formatters import (
    ConfigurationError,
    Formatter,
    FormatterOptions,
    FormatterRegistry,
    build_default_registry,
)
from nagios_herald.helpers import ChefInventory, GangliaGraph, UrlImageDownloader
from nagios_herald.messages import MESSAGE_SENDERS, Message, MessageSender, parse_recipients

# Application info
APP_NAME = "Nagios Herald"
APP_VERSION = __version__

# Exit codes
EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_CONFIG_ERROR = 2

# Nagios contact macros holding recipients per message type
RECIPIENT_VARS = {
    "email": "NAGIOS_CONTACTEMAIL",
    "pager": "NAGIOS_CONTACTPAGER",
}

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI.

    Returns:
        Configured ArgumentParser instance.
    """
    parser = argparse.ArgumentParser(
        prog="nagios-herald",
        description="Format Nagios notifications with context and deliver them.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  nagios-herald -m email                       Send an email for the current alert
  nagios-herald -m pager -r oncall@example.com Page a specific recipient
  nagios-herald -f check_disk -e alert.env -n  Print a replayed check_disk alert
  nagios-herald --list-formatters              Show available formatters
        """,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {APP_VERSION}",
    )

    parser.add_argument(
        "-m",
        "--message-type",
        choices=sorted(MESSAGE_SENDERS),
        default="email",
        help="Type of message to send (default: email)",
    )

    parser.add_argument(
        "-f",
        "--formatter",
        default="default",
        help="Formatter used to build the message (default: default)",
    )

    parser.add_argument(
        "-t",
        "--notification-type",
        default=None,
        help="Override the Nagios notification type (default: $NAGIOS_NOTIFICATIONTYPE)",
    )

    parser.add_argument(
        "-e",
        "--env-file",
        default=None,
        help="Read Nagios variables from a KEY=VALUE file instead of the environment",
    )

    parser.add_argument(
        "-r",
        "--recipients",
        default=None,
        help="Comma-separated recipients (default: Nagios contact for the message type)",
    )

    parser.add_argument(
        "-u",
        "--nagios-url",
        default=None,
        help="Override the Nagios web UI base URL (default: from settings)",
    )

    parser.add_argument(
        "--reply-to",
        default=None,
        help="Override the From / Reply-To address (default: from settings)",
    )

    parser.add_argument(
        "-n",
        "--no-send",
        action="store_true",
        help="Print the message instead of sending it",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Override logging level (default: from settings)",
    )

    parser.add_argument(
        "--list-formatters",
        action="store_true",
        help="List available formatters and exit",
    )

    parser.add_argument(
        "--config-check",
        action="store_true",
        help="Validate configuration and exit",
    )

    return parser


def configure_logging(level: str) -> None:
    """Configure logging for the application.

    Args:
        level: Logging level string (DEBUG, INFO, etc.)
    """
    config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "detailed": {
                "format": (
                    "%(asctime)s [%(levelname)s] %(name)s (%(filename)s:%(lineno)d): %(message)s"
                ),
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": level,
                "formatter": "detailed" if level == "DEBUG" else "standard",
                "stream": "ext://sys.stdout",
            },
        },
        "root": {
            "level": level,
            "handlers": ["console"],
        },
        # Quieter logging for noisy libraries
        "loggers": {
            "httpx": {"level": "WARNING"},
            "httpcore": {"level": "WARNING"},
        },
    }
    logging.config.dictConfig(config)


def validate_config() -> Settings | None:
    """Validate and load configuration.

    Returns:
        Settings instance if valid, None if invalid.
    """
    try:
        # Clear cache to force reload
        clear_settings_cache()
        return get_settings()
    except ValidationError as e:
        print("Configuration validation failed:", file=sys.stderr)
        for error in e.errors():
            field = ".".join(str(loc) for loc in error["loc"])
            msg = error["msg"]
            print(f"  {field}: {msg}", file=sys.stderr)
        return None


def run_config_check(settings: Settings, registry: FormatterRegistry) -> int:
    """Print the configuration and available components.

    Args:
        settings: Validated settings.
        registry: Formatter registry.

    Returns:
        Exit code (0 for success).
    """
    summary = settings.redacted_summary()
    print("Configuration is valid!")
    print()
    print("Configuration:")
    print(f"  Nagios URL: {summary['nagios_url']}")
    print(f"  Reply-To: {summary['reply_to']}")
    print(f"  Recipient Domain: {summary['recipient_domain']}")
    print(f"  SMTP: {settings.smtp.host}:{settings.smtp.port}")
    print(f"  Log Level: {summary['log_level']}")
    print(f"  Dry Run: {summary['dry_run']}")
    print(f"  Ganglia: {'enabled' if settings.ganglia.enabled else 'disabled'}")
    print(f"  Formatters: {', '.join(registry.names())}")
    print()
    print("All checks passed. Ready to run.")
    return EXIT_SUCCESS


def list_formatters(registry: FormatterRegistry) -> int:
    """Print the registered formatters."""
    for variant in sorted(registry, key=lambda v: v.name):
        print(f"{variant.name:<20} {variant.description}")
    return EXIT_SUCCESS


def load_context(env_file: str | None, notification_type: str | None) -> NotificationContext:
    """Build the notification context from the environment or an env file.

    Args:
        env_file: Optional KEY=VALUE file replacing the process environment.
        notification_type: Optional override of NAGIOS_NOTIFICATIONTYPE.

    Raises:
        EnvFileError: If the env file cannot be read.
    """
    environ = load_env_file(env_file) if env_file else dict(os.environ)
    if notification_type:
        environ["NAGIOS_NOTIFICATIONTYPE"] = notification_type.upper()
    return NotificationContext.from_environ(environ)


def build_formatter_options(
    settings: Settings,
    http_client: httpx.Client,
    nagios_url: str | None = None,
) -> FormatterOptions:
    """Build formatter options, wiring the Ganglia helper when configured."""
    graph_fetcher = None
    ganglia = settings.ganglia
    if ganglia.url and ganglia.chef_search_url:
        graph_fetcher = GangliaGraph(
            ganglia.url,
            ChefInventory(ganglia.chef_search_url, client=http_client),
            UrlImageDownloader(http_client),
        )
    return FormatterOptions(
        nagios_url=nagios_url or settings.nagios_url,
        recipient_domain=settings.recipient_domain,
        graph_fetcher=graph_fetcher,
    )


def create_sender(message_type: str, settings: Settings, dry_run: bool) -> MessageSender:
    """Create the sender for a message type."""
    sender_class = MESSAGE_SENDERS[message_type]
    return sender_class(
        smtp_host=settings.smtp.host,
        smtp_port=settings.smtp.port,
        timeout=settings.smtp.timeout,
        dry_run=dry_run,
    )


def run(args: argparse.Namespace, settings: Settings, registry: FormatterRegistry) -> int:
    """Format and deliver one notification.

    Args:
        args: Parsed command line arguments.
        settings: Application settings.
        registry: Formatter registry.

    Returns:
        Exit code.
    """
    dry_run = args.no_send or settings.dry_run

    try:
        variant = registry.lookup(args.formatter)
        context = load_context(args.env_file, args.notification_type)
    except (ConfigurationError, EnvFileError) as e:
        logger.critical(str(e))
        return EXIT_CONFIG_ERROR

    recipients = parse_recipients(args.recipients) or parse_recipients(
        context.get(RECIPIENT_VARS[args.message_type])
    )
    if not recipients and not dry_run:
        logger.warning(f"No recipients found for {args.message_type} message, nothing to send")
        return EXIT_SUCCESS

    try:
        with (
            httpx.Client(timeout=settings.ganglia.http_timeout, follow_redirects=True) as http_client,
            Formatter(
                variant,
                context,
                args.message_type,
                build_formatter_options(settings, http_client, args.nagios_url),
            ) as formatter,
        ):
            subject = formatter.generate_subject()
            content = formatter.generate_body()
            message = Message(
                recipients=recipients,
                subject=subject,
                text=content.text,
                html=content.html,
                attachments=tuple(content.attachments),
                reply_to=args.reply_to or settings.reply_to,
            )
            # Send before the sandbox holding attachments is removed
            status = create_sender(args.message_type, settings, dry_run).send(message)
    except ConfigurationError as e:
        logger.critical(str(e))
        return EXIT_CONFIG_ERROR
    except (smtplib.SMTPException, OSError) as e:
        logger.exception(f"Message delivery failed: {e}")
        return EXIT_ERROR

    logger.debug(f"Notification {status.value}")
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> NoReturn:
    """Main entry point for the CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:]).
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    # Validate configuration first
    settings = validate_config()
    if settings is None:
        sys.exit(EXIT_CONFIG_ERROR)

    # Determine effective log level
    log_level = args.log_level or settings.log_level
    configure_logging(log_level)

    registry = build_default_registry()

    if args.list_formatters:
        sys.exit(list_formatters(registry))

    if args.config_check:
        sys.exit(run_config_check(settings, registry))

    sys.exit(run(args, settings, registry))


if __name__ == "__main__":
    main()
