"""Services whose annotations are only strings at runtime."""

from __future__ import annotations

from typing import TYPE_CHECKING

from services import Transport

if TYPE_CHECKING:
    from services import Logger


class Partly:
    def __init__(self, transport: Transport, logger: Logger | None = None):
        self.transport = transport
        self.logger = logger
