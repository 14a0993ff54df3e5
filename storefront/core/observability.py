"""Operator-facing error reporting."""

from __future__ import annotations

import logging
from typing import Any, Optional

logger = logging.getLogger("storefront.errors")


class ErrorReporter:
    """Records internal failures for operators without exposing them to callers.

    Routes receive an instance through FastAPI dependency injection so the
    destination can be swapped (tests install a recording reporter).
    """

    def __init__(self, target: Optional[logging.Logger] = None) -> None:
        self.target = target or logger

    def report(self, operation: str, exc: BaseException, **context: Any) -> None:
        """Log ``exc`` raised while running ``operation`` with its traceback."""

        self.target.error(
            "%s failed: %s",
            operation,
            exc,
            exc_info=(type(exc), exc, exc.__traceback__),
            extra={"operation": operation, "context": context},
        )


__all__ = ["ErrorReporter"]
