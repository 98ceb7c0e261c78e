"""Ordering of pipelined requests and responses on one connection."""

from __future__ import annotations

import threading
from typing import Dict


class _Sequencer:
    """Lets numbered events run one after another, starting at 0."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._id = 0
        self._waiting: Dict[int, threading.Event] = {}

    def start(self, id: int) -> None:
        """Block until event ``id`` may begin, i.e. until ``end(id - 1)`` was called."""
        with self._lock:
            if self._id == id:
                return
            event = threading.Event()
            self._waiting[id] = event
        event.wait()

    def end(self, id: int) -> None:
        """Mark event ``id`` as done and wake the waiter for ``id + 1``, if any.

        Raises RuntimeError if ``id`` is not the active event.
        """
        with self._lock:
            if self._id != id:
                raise RuntimeError("out of sync")
            self._id = id + 1
            event = self._waiting.pop(self._id, None)
        if event is not None:
            event.set()


class Pipeline:
    """Manages an in-order sequence of pipelined requests and responses.

    Each client takes a number with :meth:`next`, then brackets sending its
    request with :meth:`start_request` and :meth:`end_request`, and reading its
    response with :meth:`start_response` and :meth:`end_response`.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._id = 0
        self._request = _Sequencer()
        self._response = _Sequencer()

    def next(self) -> int:
        """Return the id of the next request/response pair."""
        with self._lock:
            id = self._id
            self._id += 1
        return id

    def start_request(self, id: int) -> None:
        """Block until it is the turn of request ``id``."""
        self._request.start(id)

    def end_request(self, id: int) -> None:
        """Signal that request ``id`` has been sent."""
        self._request.end(id)

    def start_response(self, id: int) -> None:
        """Block until it is the turn of response ``id``."""
        self._response.start(id)

    def end_response(self, id: int) -> None:
        """Signal that response ``id`` has been read."""
        self._response.end(id)