import asyncio
from collections.abc import Awaitable, Iterable
import contextlib
import signal

from loguru import logger


async def serve_until_signal(
    *,
    stop_coros: Iterable[Awaitable] = (),
    watch: Iterable[asyncio.Future | None] = (),
) -> None:
    """
    Block until SIGINT/SIGTERM arrives or any watched task finishes, then:
      1) await the stop coroutines (e.g. engine.stop())
      2) cancel and drain watched tasks that are still running
    """
    loop = asyncio.get_running_loop()
    stop_event = asyncio.Event()
    watched = [t for t in watch if t is not None]

    def _on_signal() -> None:
        if not stop_event.is_set():
            logger.info("[serve] Signal received, shutting down")
            stop_event.set()

    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, _on_signal)

    waiter = asyncio.create_task(stop_event.wait(), name="stop-signal")
    try:
        running = [t for t in watched if not t.done()]
        await asyncio.wait([waiter, *running], return_when=asyncio.FIRST_COMPLETED)

        await asyncio.gather(*stop_coros, return_exceptions=True)

        pending = [t for t in watched if not t.done()]
        for task in pending:
            task.cancel()
        if pending:
            with contextlib.suppress(asyncio.CancelledError):
                await asyncio.gather(*pending, return_exceptions=True)

    finally:
        waiter.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await waiter
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.remove_signal_handler(sig)
