"""
Rate-Limited Progress Channel

A one-directional, single-producer / single-consumer message conduit from a
search thread to whoever started the search.

Messages:
    - SearchUpdate: intermediate progress, subject to rate limiting
    - SearchCompleted: the final result, always delivered
    - SearchFailed: the search aborted, always delivered

Rate Limiting:
    A sender may carry a minimum interval between messages. An update is sent
    if no minimum is set, if nothing has been sent yet, or if more than the
    minimum has elapsed since the last message actually sent. Otherwise it is
    silently dropped (not queued). Each update carries a full snapshot, so
    readers should use cumulative counters rather than deltas.

Disconnection:
    When the receiver is closed, sends stop: the first failed send is logged,
    the sender marks itself disconnected and nothing is raised to the search.
"""

import logging
import queue
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional, Tuple, Union

from shogi_engine.errors import ChannelDisconnected
from shogi_engine.search.progress import SearchProgress

logger = logging.getLogger(__name__)

Clock = Callable[[], float]

_UNSET = object()


@dataclass(frozen=True)
class SearchUpdate:
    progress: SearchProgress


@dataclass(frozen=True)
class SearchCompleted:
    progress: SearchProgress


@dataclass(frozen=True)
class SearchFailed:
    reason: str


Message = Union[SearchUpdate, SearchCompleted, SearchFailed]


class _Channel:
    """Queue shared by one sender family and one receiver."""

    def __init__(self):
        self.queue: "queue.Queue[Message]" = queue.Queue()
        self.closed = threading.Event()

    def put(self, message: Message) -> None:
        if self.closed.is_set():
            raise ChannelDisconnected("Progress receiver has been closed")
        self.queue.put(message)


class ProgressSender:
    """
    Sending end of a progress channel.

    Attributes:
        min_interval: Minimum seconds between sent updates (None = no limit)
        disconnected: True once a send found the receiver closed
    """

    def __init__(self, channel: _Channel, min_interval: Optional[float] = None, clock: Clock = time.monotonic):
        self._channel = channel
        self._clock = clock
        self._last_sent: Optional[float] = None
        self.min_interval = min_interval
        self.disconnected = False

    def clone(self, min_interval=_UNSET) -> "ProgressSender":
        """
        New sender on the same channel with its own rate-limit clock.

        Args:
            min_interval: Interval for the clone (defaults to this sender's)
        """
        interval = self.min_interval if min_interval is _UNSET else min_interval
        return ProgressSender(self._channel, interval, self._clock)

    def _deliver(self, message: Message) -> bool:
        if self.disconnected:
            return False
        try:
            self._channel.put(message)
        except ChannelDisconnected as e:
            logger.warning(f"{e}; no further progress will be reported")
            self.disconnected = True
            return False
        return True

    def _ready(self) -> bool:
        if self.min_interval is None or self._last_sent is None:
            return True
        return self._clock() - self._last_sent > self.min_interval

    def send_update(self, progress: SearchProgress) -> bool:
        """
        Send an intermediate update unless the rate limit suppresses it.

        Returns:
            True if the message was put on the channel
        """
        if not self._ready():
            return False
        sent = self._deliver(SearchUpdate(progress.snapshot()))
        if self.min_interval is not None:
            self._last_sent = self._clock()
        return sent

    def send_completed(self, progress: SearchProgress) -> bool:
        """Send the final result. Never rate limited."""
        return self._deliver(SearchCompleted(progress.snapshot()))

    def send_failed(self, reason: str) -> bool:
        """Report an aborted search. Never rate limited."""
        return self._deliver(SearchFailed(reason))


class ProgressReceiver:
    """Receiving end of a progress channel."""

    def __init__(self, channel: _Channel):
        self._channel = channel

    def try_receive(self) -> Optional[Message]:
        """Return the next message, or None if none is waiting."""
        try:
            return self._channel.queue.get_nowait()
        except queue.Empty:
            return None

    def receive(self, timeout: Optional[float] = None) -> Optional[Message]:
        """Block until a message arrives (or timeout expires, returning None)."""
        try:
            return self._channel.queue.get(timeout=timeout)
        except queue.Empty:
            return None

    def close(self) -> None:
        """Disconnect; later sends are dropped by the sender."""
        self._channel.closed.set()

    @property
    def closed(self) -> bool:
        return self._channel.closed.is_set()


def create_channel(
    min_interval: Optional[float] = None,
    clock: Clock = time.monotonic,
) -> Tuple[ProgressSender, ProgressReceiver]:
    """
    Create a connected sender/receiver pair.

    Args:
        min_interval: Rate limit for the returned sender (None = no limit)
        clock: Monotonic time source in seconds, injectable for tests

    Returns:
        Tuple of (sender, receiver)
    """
    channel = _Channel()
    return ProgressSender(channel, min_interval, clock), ProgressReceiver(channel)
