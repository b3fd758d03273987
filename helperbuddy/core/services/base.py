"""Shared base for feature services."""

from __future__ import annotations

import logging

from helperbuddy.infra.logging import get_lazy_logger


class BaseService:
    """Gives each service a ``logger`` and a lazy ``_lazy`` for DEBUG lines.

    Both are named after the concrete class, e.g. ``ReminderDispatcher``.
    """

    def __init__(self) -> None:
        name = type(self).__name__
        self.logger = logging.getLogger(name)
        self._lazy = get_lazy_logger(name)
