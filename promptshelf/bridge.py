"""Message passing between the webview and the prompt handlers.

Inbound messages arrive as "<type>:<content>" strings. Outbound
notifications are calls to window-level JavaScript functions, which the
host runs on its UI thread. Handlers never call the sink directly: they
post work to a CallbackQueue and the UI thread drains it.
"""

from __future__ import annotations

import logging
import queue
from collections.abc import Callable, Iterable

from .models import BridgeMessage

logger = logging.getLogger(__name__)

JS_ESCAPES = {
    "\\": "\\\\",
    "'": "\\'",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


def escape_js(text: str) -> str:
    """Escape text for use inside a quoted JavaScript string literal."""
    escaped = "".join(JS_ESCAPES.get(ch, ch) for ch in text)
    return escaped.replace("</", "<\\/")


class CallbackQueue:
    """FIFO of deferred UI work. post() never runs the task inline."""

    def __init__(self):
        self._tasks: queue.SimpleQueue[Callable[[], None]] = queue.SimpleQueue()

    def post(self, task: Callable[[], None]) -> None:
        self._tasks.put(task)

    def pending(self) -> int:
        return self._tasks.qsize()

    def drain(self) -> int:
        """Run queued tasks on the calling thread until the queue is empty.

        Tasks posted while draining run in the same pass.

        Returns:
            Number of tasks run.
        """
        count = 0
        while True:
            try:
                task = self._tasks.get_nowait()
            except queue.Empty:
                return count
            task()
            count += 1


class Bridge:
    """Outbound side of the webview bridge.

    Args:
        sink: Called as sink(function_name, escaped_argument) on the UI thread.
        callbacks: Queue drained by the UI thread. A private one is created
            when omitted.
    """

    def __init__(
        self,
        sink: Callable[[str, str], None],
        callbacks: CallbackQueue | None = None,
    ):
        self.sink = sink
        self.callbacks = callbacks or CallbackQueue()

    @staticmethod
    def qualify(function: str) -> str:
        return function if function.startswith("window.") else f"window.{function}"

    def call_js(self, function: str, payload: str) -> None:
        """Schedule window.<function>(payload) on the UI thread."""
        self.invoke_later(lambda: self.call_js_now(function, payload))

    def call_js_now(self, function: str, payload: str) -> None:
        """Invoke the sink immediately. Only call from the UI thread."""
        self.sink(self.qualify(function), escape_js(payload))

    def invoke_later(self, task: Callable[[], None]) -> None:
        self.callbacks.post(task)


class MessageDispatcher:
    """Routes raw webview messages to the first handler that accepts them.

    A handler exposes supported_types and handle(type, content) -> bool.
    """

    def __init__(self, handlers: Iterable = ()):
        self.handlers = list(handlers)

    def register(self, handler) -> None:
        self.handlers.append(handler)

    def supported_types(self) -> list[str]:
        return [t for h in self.handlers for t in h.supported_types]

    def dispatch(self, raw: str) -> bool:
        message = BridgeMessage.parse(raw)
        return self.dispatch_message(message.type, message.content)

    def dispatch_message(self, type_: str, content: str) -> bool:
        for handler in self.handlers:
            if type_ in handler.supported_types and handler.handle(type_, content):
                return True
        logger.debug("Unhandled message type: %s", type_)
        return False
