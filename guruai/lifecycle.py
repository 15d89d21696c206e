"""Shared lifetime handling for the per-view controllers.

A view owns at most one outstanding provider call. The call runs in a worker
thread behind an ``asyncio.Task`` so that tearing the view down can cancel it
and the late reply never lands in discarded state.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Optional

from .errors import RequestInProgress, ViewClosed

logger = logging.getLogger(__name__)


class ViewController:
    view_name = "view"

    def __init__(self) -> None:
        self._pending: Optional[asyncio.Task] = None
        self._closed = False

    @property
    def busy(self) -> bool:
        return self._pending is not None and not self._pending.done()

    @property
    def closed(self) -> bool:
        return self._closed

    def _ensure_ready(self) -> None:
        if self._closed:
            raise ViewClosed(f"{self.view_name} view is closed")
        if self.busy:
            raise RequestInProgress(f"{self.view_name} request already in flight")

    async def _run(self, fn: Callable[..., Any], *args: Any) -> Any:
        task = asyncio.ensure_future(asyncio.to_thread(fn, *args))
        self._pending = task
        try:
            return await task
        except asyncio.CancelledError:
            if self._closed:
                raise ViewClosed(f"{self.view_name} view closed while waiting for the model") from None
            raise
        finally:
            if self._pending is task:
                self._pending = None

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._pending is not None and not self._pending.done():
            logger.info(f"Cancelling pending {self.view_name} request on teardown")
            self._pending.cancel()
        self._on_close()

    def _on_close(self) -> None:
        pass
