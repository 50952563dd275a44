"""
Change Notification
===================

Minimal observer support shared by the record and its entries. An editor
subscribes once and gets a callback for every successful mutation, which
it typically uses to set its own "unsaved changes" flag.

Notifications are at-least-once: writing a value equal to the current one
still notifies.
"""

from typing import Callable


# Callback signature: (source object, name of the field that changed)
ChangeCallback = Callable[[object, str], None]


class Observable:
    """
    Mixin holding a list of change callbacks.

    The subscriber list is created lazily so that dataclasses using this
    mixin do not need to declare it as a field.
    """

    def _subscribers(self) -> list[ChangeCallback]:
        try:
            return self.__dict__["_change_subscribers"]
        except KeyError:
            subscribers: list[ChangeCallback] = []
            object.__setattr__(self, "_change_subscribers", subscribers)
            return subscribers

    def subscribe(self, callback: ChangeCallback) -> ChangeCallback:
        """
        Register a change callback.

        Returns the callback, so this can be used as a decorator.
        """
        self._subscribers().append(callback)
        return callback

    def unsubscribe(self, callback: ChangeCallback) -> None:
        """Remove a callback; unknown callbacks are ignored."""
        subscribers = self._subscribers()
        if callback in subscribers:
            subscribers.remove(callback)

    def _notify(self, name: str) -> None:
        # Copy so callbacks may unsubscribe themselves.
        for callback in list(self.__dict__.get("_change_subscribers", ())):
            callback(self, name)
