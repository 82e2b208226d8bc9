"""
Single request helper racing a caller signal against a timeout.
"""
import asyncio
import logging
from typing import Any, Optional, Union

import httpx
from proxy_config import AbortError

from .dispatcher import AgentSelector, OptionsInput, coerce_options, get_default_selector

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 20000


async def fetch_with_timeout(
    resource: Union[str, httpx.URL],
    options: OptionsInput = None,
    *,
    method: str = "GET",
    timeout: Optional[int] = None,
    signal: Optional[asyncio.Event] = None,
    selector: Optional[AgentSelector] = None,
    **request_kwargs: Any
) -> httpx.Response:
    """Issue one request through the agent resolved for ``resource``.

    The request is aborted with :class:`AbortError` when ``signal`` is set or
    the timeout elapses, whichever happens first. The timeout in milliseconds
    is ``timeout`` if given, else ``options.timeout``, else
    ``DEFAULT_TIMEOUT_MS``; 0 waits indefinitely. The same value configures
    the agent, whose own timeout is skewed to fire after the deadline. The
    response body is read before returning.
    """
    opts = coerce_options(options)
    if timeout is None:
        timeout = DEFAULT_TIMEOUT_MS if opts.timeout is None else opts.timeout
    if opts.timeout != timeout:
        opts = opts.model_copy(update={"timeout": timeout})

    selector = selector or get_default_selector()
    agent = selector.get_agent(resource, opts)

    if signal is not None and signal.is_set():
        raise AbortError(str(resource), timed_out=False)

    async def _send() -> httpx.Response:
        async with httpx.AsyncClient(transport=agent, timeout=None) as client:
            return await client.request(method, resource, **request_kwargs)

    request_task = asyncio.ensure_future(_send())
    signal_task = asyncio.ensure_future(signal.wait()) if signal is not None else None
    waiters = {request_task} if signal_task is None else {request_task, signal_task}

    try:
        done, _ = await asyncio.wait(
            waiters,
            timeout=timeout / 1000 if timeout else None,
            return_when=asyncio.FIRST_COMPLETED,
        )
    finally:
        if signal_task is not None:
            signal_task.cancel()
        if not request_task.done():
            request_task.cancel()

    if request_task in done:
        return request_task.result()

    await asyncio.gather(request_task, return_exceptions=True)
    timed_out = signal_task is None or signal_task not in done
    logger.debug(f"{method} {resource} aborted ({'timeout' if timed_out else 'signal'})")
    raise AbortError(str(resource), timed_out=timed_out)
