"""
Synchronous facade over an asynchronous :class:`ServicePrincipal`.
"""

import asyncio
import functools
import inspect
from typing import Any, Callable

from spo_admin.admin.service_principal import ServicePrincipal


class BlockingServicePrincipal:
    """
    Run service principal operations to completion on a private event loop.

    Every attribute of the wrapped object is exposed; coroutine results are
    awaited before returning, so ``blocking.list_grants2()`` returns the list.
    Must not be used from within a running event loop.
    """

    def __init__(self, service_principal: ServicePrincipal) -> None:
        self._service_principal = service_principal
        self._loop = asyncio.new_event_loop()

    def __getattr__(self, name: str) -> Any:
        attribute = getattr(self._service_principal, name)
        if not callable(attribute):
            return attribute
        return self._blocking(attribute)

    def _blocking(self, function: Callable[..., Any]) -> Callable[..., Any]:
        @functools.wraps(function)
        def call(*args: Any, **kwargs: Any) -> Any:
            result = function(*args, **kwargs)
            if inspect.isawaitable(result):
                return self._loop.run_until_complete(result)
            return result

        return call

    def close(self) -> None:
        """Close the wrapped client, if it can be closed, and the event loop."""
        if self._loop.is_closed():
            return
        close = getattr(self._service_principal, "close", None)
        if close is not None:
            result = close()
            if inspect.isawaitable(result):
                self._loop.run_until_complete(result)
        # joins worker threads started by asyncio.to_thread
        self._loop.run_until_complete(self._loop.shutdown_default_executor())
        self._loop.close()

    def __enter__(self) -> "BlockingServicePrincipal":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
