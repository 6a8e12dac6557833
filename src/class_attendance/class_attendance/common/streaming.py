from __future__ import annotations

import json
import queue
from typing import Any, Callable

from flask import Response, stream_with_context

from ..database.subscriptions import Subscription

KEEPALIVE_SECONDS = 15.0


def sse_response(
    subscribe: Callable[[Callable[[Any], None]], Subscription],
    serialize: Callable[[Any], Any],
) -> Response:
    """Stream every pushed update as a server-sent event.

    The subscription is released when the client goes away.
    """
    updates: "queue.Queue[Any]" = queue.Queue()
    subscription = subscribe(updates.put)

    def generate():
        try:
            while True:
                try:
                    item = updates.get(timeout=KEEPALIVE_SECONDS)
                except queue.Empty:
                    yield ": keep-alive\n\n"
                    continue
                yield f"data: {json.dumps(serialize(item), ensure_ascii=False)}\n\n"
        finally:
            subscription.unsubscribe()

    response = Response(stream_with_context(generate()), mimetype="text/event-stream")
    response.headers["Cache-Control"] = "no-cache"
    response.call_on_close(subscription.unsubscribe)
    return response
