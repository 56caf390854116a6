"""Pager message sender: short text-only mail for SMS gateways."""

from __future__ import annotations

from nagios_herald.messages.base import MessageSender


class PagerSender(MessageSender):
    """Sends the subject and plain-text body only."""

    name = "pager"
