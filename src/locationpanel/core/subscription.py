"""
Change notification channels and the subscriptions bound to them.

A `ChangeChannel` carries occurrence-only events ("something changed", no payload).
`open_subscription` binds a handler to a channel for the lifetime of a
`ChangeSubscription`. Notifications may be raised on any thread; the handler
always runs on the thread that opened the subscription, through a Qt queued
connection when the threads differ.
"""

import logging
from typing import Callable, Optional

from PyQt6.QtCore import QObject, pyqtSignal, pyqtSlot

logger = logging.getLogger("LocationPanel.Subscription")


class ChangeChannel(QObject):
    """
    A named, payload-free notification channel.

    Signals:
        changed: Emitted once per `notify()` call.
    """
    changed = pyqtSignal()

    def __init__(self, name: str, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self.name = name

    def notify(self) -> None:
        """Announces that something on this channel changed. Safe from any thread."""
        self.changed.emit()

    def teardown(self) -> None:
        """Drops every registration on this channel."""
        try:
            self.changed.disconnect()
        except (TypeError, RuntimeError):
            # Nothing was connected.
            pass
        logger.debug("Channel '%s' torn down.", self.name)


class ChangeSubscription(QObject):
    """
    A live registration of a handler on a ChangeChannel.

    Created through `open_subscription`. `close()` is idempotent and tolerates
    the channel having dropped the registration on its own.
    """

    def __init__(self, channel: ChangeChannel, handler: Callable[[], None],
                 parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._channel = channel
        self._handler = handler
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    def _open(self) -> None:
        self._channel.changed.connect(self._dispatch)
        self._active = True
        logger.debug("Subscribed to channel '%s'.", self._channel.name)

    @pyqtSlot()
    def _dispatch(self) -> None:
        # A notification queued before close() may still arrive; drop it.
        if not self._active:
            return
        self._handler()

    def close(self) -> None:
        """Unregisters the handler. Calling this on an inactive subscription is a no-op."""
        if not self._active:
            return
        self._active = False
        try:
            self._channel.changed.disconnect(self._dispatch)
        except (TypeError, RuntimeError) as e:
            # Race with an external teardown of the channel; not an error.
            logger.debug("Channel '%s' was already unregistered: %s", self._channel.name, e)
        else:
            logger.debug("Unsubscribed from channel '%s'.", self._channel.name)


def open_subscription(channel: ChangeChannel, handler: Callable[[], None],
                      parent: Optional[QObject] = None) -> ChangeSubscription:
    """Registers `handler` on `channel` and returns the live subscription."""
    subscription = ChangeSubscription(channel, handler, parent)
    subscription._open()
    return subscription
