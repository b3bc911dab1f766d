"""
Session context and subscriber registry.

A SessionContext is created when a user session starts and torn down when
it ends; it carries the session language, the opaque caller context that
is forwarded to providers, and the SubscriberRegistry that components
notify. Nothing here is process-global, so concurrent sessions never see
each other's language or subscribers.
"""

import logging
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from core.language import Language

logger = logging.getLogger(__name__)

# Event names
LANGUAGE_CHANGED = "language_changed"
PURIFIED = "purified"
FRAGMENT_FIXED = "fragment_fixed"

Subscriber = Callable[[Any], None]


class SubscriberRegistry:
    """Event name -> callbacks. A failing callback is logged and skipped."""

    def __init__(self):
        self._subscribers: Dict[str, List[Subscriber]] = {}

    def subscribe(self, event: str, callback: Subscriber) -> Subscriber:
        callbacks = self._subscribers.setdefault(event, [])
        if callback not in callbacks:
            callbacks.append(callback)
        return callback

    def unsubscribe(self, event: str, callback: Subscriber) -> bool:
        callbacks = self._subscribers.get(event, [])
        if callback in callbacks:
            callbacks.remove(callback)
            return True
        return False

    def notify(self, event: str, payload: Any = None) -> int:
        """Call every subscriber of an event; returns how many succeeded"""
        delivered = 0
        for callback in list(self._subscribers.get(event, [])):
            try:
                callback(payload)
                delivered += 1
            except Exception as e:
                logger.warning(f"Subscriber {callback!r} failed on '{event}': {e}")
        return delivered

    def subscribers(self, event: str) -> List[Subscriber]:
        return list(self._subscribers.get(event, []))

    def clear(self):
        self._subscribers.clear()

    def __len__(self) -> int:
        return sum(len(v) for v in self._subscribers.values())


@dataclass
class SessionContext:
    """Per-session state passed explicitly to whoever needs it"""
    session_id: str
    language: Language
    caller_context: Any = None
    registry: SubscriberRegistry = field(default_factory=SubscriberRegistry)
    _owned: List[Tuple[str, Subscriber]] = field(default_factory=list, init=False, repr=False, compare=False)

    def subscribe(self, event: str, callback: Subscriber) -> Subscriber:
        """Subscribe on the registry for the lifetime of this session"""
        if callback not in self.registry.subscribers(event):
            self._owned.append((event, callback))
        return self.registry.subscribe(event, callback)

    def release(self) -> int:
        """Unsubscribe what this session subscribed; returns how many were removed"""
        removed = 0
        for event, callback in self._owned:
            if self.registry.unsubscribe(event, callback):
                removed += 1
        self._owned.clear()
        return removed

    def set_language(self, language: Language) -> bool:
        """Switch the session language; notifies only on an actual change"""
        language = Language(language)
        if language == self.language:
            return False
        previous, self.language = self.language, language
        self.registry.notify(LANGUAGE_CHANGED, {"from": previous, "to": language})
        return True


@contextmanager
def open_session(
    language: Language,
    caller_context: Any = None,
    registry: Optional[SubscriberRegistry] = None,
    session_id: Optional[str] = None,
) -> Iterator[SessionContext]:
    """
    Session scope.

    With no registry a private one is created and cleared at exit. A shared
    registry passed in by the host keeps its other subscribers; only the
    callbacks added through `session.subscribe` are removed at exit.

        with open_session(Language.ARABIC, caller_context=token) as session:
            session.subscribe(PURIFIED, on_purified)
            result = await pipeline.purify(text, session.language, session=session)
    """
    owns_registry = registry is None
    session = SessionContext(
        session_id=session_id or uuid.uuid4().hex,
        language=Language(language),
        caller_context=caller_context,
        registry=SubscriberRegistry() if owns_registry else registry,
    )
    logger.debug(f"Session {session.session_id} opened ({session.language.value})")
    try:
        yield session
    finally:
        if owns_registry:
            session.registry.clear()
        else:
            session.release()
        logger.debug(f"Session {session.session_id} closed")
