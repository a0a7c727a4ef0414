import asyncio
import logging
import threading
from dataclasses import dataclass
from typing import Any

from fastapi import WebSocket, WebSocketDisconnect

from ..canvas.models import Pixel

logger = logging.getLogger(__name__)

# pushed in place of a message when a viewer is cut off
_CLOSE = None


@dataclass(eq=False)
class Subscription:
    loop: asyncio.AbstractEventLoop
    queue: asyncio.Queue


class PixelBroadcaster:
    """Fans committed pixels out to every connected viewer.

    ``publish`` may be called from any thread; each subscriber's queue is
    only touched from its own event loop. A viewer that falls more than
    ``max_pending`` messages behind is disconnected.
    """

    def __init__(self, max_pending: int = 256) -> None:
        self._subs: list[Subscription] = []
        self._lock = threading.Lock()
        self.max_pending = max_pending

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subs)

    def subscribe(self) -> Subscription:
        # one slot stays free for the close marker
        sub = Subscription(loop=asyncio.get_running_loop(), queue=asyncio.Queue(maxsize=self.max_pending + 1))
        with self._lock:
            self._subs.append(sub)
        return sub

    def unsubscribe(self, sub: Subscription) -> None:
        with self._lock:
            if sub in self._subs:
                self._subs.remove(sub)

    def publish(self, pixel: Pixel) -> None:
        message = {"type": "pixel_placed", "pixel": pixel.to_dict()}
        with self._lock:
            subs = list(self._subs)
        for sub in subs:
            try:
                sub.loop.call_soon_threadsafe(self._offer, sub, message)
            except RuntimeError:
                # event loop already closed; the viewer is gone
                logger.debug("Dropping subscriber with closed event loop")
                self.unsubscribe(sub)

    def _offer(self, sub: Subscription, message: dict[str, Any]) -> None:
        with self._lock:
            if sub not in self._subs:
                return
        if sub.queue.qsize() < self.max_pending:
            sub.queue.put_nowait(message)
            return
        logger.warning("Viewer fell %d messages behind; disconnecting it", self.max_pending)
        self.unsubscribe(sub)
        sub.queue.put_nowait(_CLOSE)

    async def serve(self, websocket: WebSocket) -> None:
        await websocket.accept()
        sub = self.subscribe()
        await websocket.send_json({"type": "subscribed"})
        forward = asyncio.create_task(self._forward(websocket, sub))
        logger.info("Viewer connected (%d total)", self.subscriber_count)
        try:
            while True:
                await websocket.receive_text()
        except WebSocketDisconnect:
            pass
        finally:
            forward.cancel()
            self.unsubscribe(sub)
            logger.info("Viewer disconnected (%d total)", self.subscriber_count)

    @staticmethod
    async def _forward(websocket: WebSocket, sub: Subscription) -> None:
        while True:
            message: dict[str, Any] | None = await sub.queue.get()
            try:
                if message is _CLOSE:
                    await websocket.close(code=1013)
                    return
                await websocket.send_json(message)
            except Exception as e:
                logger.warning(f"Failed to push pixel to viewer: {e}")
                return
