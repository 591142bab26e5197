"""In-process publish/subscribe bus connecting hosts to the layout systems."""

from __future__ import annotations

from collections import defaultdict
from typing import Any, Callable, Dict, Mapping, MutableMapping

from core.events.topics import EventTopic

__all__ = ["EventBus", "Subscriber", "Topic"]

Topic = str | EventTopic
Subscriber = Callable[..., None]


class EventBus:
    """Simple in-memory event dispatcher.

    Topics may be :class:`~core.events.topics.EventTopic` members or plain
    strings.  Payloads are passed either as a mapping (``publish(topic,
    payload)``) or as keyword arguments; keyword values win on conflicts.
    Subscribers run synchronously in registration order and their exceptions
    propagate to the publisher.
    """

    def __init__(self) -> None:
        self._subscribers: MutableMapping[str, list[Subscriber]] = defaultdict(list)

    @staticmethod
    def _normalise_topic(topic: Topic) -> str:
        return topic.value if isinstance(topic, EventTopic) else str(topic)

    def subscribe(self, topic: Topic, callback: Subscriber) -> None:
        """Register ``callback`` for ``topic`` events (once)."""

        key = self._normalise_topic(topic)
        if callback not in self._subscribers[key]:
            self._subscribers[key].append(callback)

    def unsubscribe(self, topic: Topic, callback: Subscriber) -> None:
        key = self._normalise_topic(topic)
        callbacks = self._subscribers.get(key)
        if not callbacks or callback not in callbacks:
            return
        callbacks.remove(callback)
        if not callbacks:
            del self._subscribers[key]

    def publish(
        self,
        topic: Topic,
        payload: Mapping[str, Any] | None = None,
        /,
        **kwargs: Any,
    ) -> None:
        """Deliver ``topic`` with the merged payload to every subscriber."""

        key = self._normalise_topic(topic)
        merged_payload: Dict[str, Any] = dict(payload or {})
        if kwargs:
            merged_payload.update(kwargs)

        for callback in list(self._subscribers.get(key, ())):
            callback(**merged_payload)
