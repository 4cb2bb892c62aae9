"""
Progress Channel

Thread-safe, rate-limited message passing from a search thread to its
consumer.

Key Components:
    - create_channel: build a connected (sender, receiver) pair
    - ProgressSender: throttled updates, unthrottled final messages
    - ProgressReceiver: non-blocking try_receive(), blocking receive()
    - SearchUpdate / SearchCompleted / SearchFailed: message types
"""

from shogi_engine.channel.sender import (
    Message,
    ProgressReceiver,
    ProgressSender,
    SearchCompleted,
    SearchFailed,
    SearchUpdate,
    create_channel,
)

__all__ = [
    'Message',
    'ProgressReceiver',
    'ProgressSender',
    'SearchCompleted',
    'SearchFailed',
    'SearchUpdate',
    'create_channel',
]
