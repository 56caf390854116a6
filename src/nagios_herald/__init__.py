"""Nagios Herald - Contextual Nagios alert notifications."""

__version__ = "0.1.0"
