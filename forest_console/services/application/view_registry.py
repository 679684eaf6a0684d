"""
Application service: per-session storage of entity screen controllers.
"""
import logging
import time
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional

from forest_console.config import settings
from forest_console.domain.schema import EntitySchema
from forest_console.infrastructure.gateway import EntityGateway
from forest_console.services.application.view_controller import EntityViewController

logger = logging.getLogger(__name__)


@dataclass
class _SessionViews:
    last_seen: float
    views: Dict[str, EntityViewController] = field(default_factory=dict)


class ViewRegistry:
    """
    Holds the controller of every open entity screen, keyed by browser
    session and entity.

    Screens never share state: each (session, entity) pair owns its own
    controller and its own copy of the list. Opening a screen replaces its
    controller, the same way a page reload remounts a component.

    A session is dropped once it has been idle for ``idle_timeout`` seconds,
    and the least recently used one goes first when more than
    ``max_sessions`` are held.
    """

    def __init__(
        self,
        idle_timeout: Optional[float] = None,
        max_sessions: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.idle_timeout = idle_timeout if idle_timeout is not None else settings.view_idle_timeout
        self.max_sessions = max_sessions if max_sessions is not None else settings.max_view_sessions
        self.clock = clock
        # Least recently used session first
        self._sessions: "OrderedDict[str, _SessionViews]" = OrderedDict()

    def _touch(self, session_id: str) -> _SessionViews:
        now = self.clock()
        self._evict_idle(now)
        entry = self._sessions.get(session_id)
        if entry is None:
            entry = self._sessions[session_id] = _SessionViews(last_seen=now)
        else:
            entry.last_seen = now
            self._sessions.move_to_end(session_id)
        while len(self._sessions) > self.max_sessions:
            evicted, _ = self._sessions.popitem(last=False)
            logger.info("Evicted views of session %s (limit %d)", evicted, self.max_sessions)
        return entry

    def _evict_idle(self, now: float) -> None:
        while self._sessions:
            session_id, entry = next(iter(self._sessions.items()))
            if now - entry.last_seen < self.idle_timeout:
                break
            del self._sessions[session_id]
            logger.info("Evicted views of idle session %s", session_id)

    def mount(
        self,
        session_id: str,
        schema: EntitySchema,
        gateway: EntityGateway,
    ) -> EntityViewController:
        controller = EntityViewController(schema, gateway)
        self._touch(session_id).views[schema.key] = controller
        return controller

    def get(self, session_id: str, entity_key: str) -> Optional[EntityViewController]:
        self._evict_idle(self.clock())
        if session_id not in self._sessions:
            return None
        return self._touch(session_id).views.get(entity_key)

    def discard_session(self, session_id: str) -> int:
        """Drop every controller of a session; returns how many were dropped."""
        entry = self._sessions.pop(session_id, None)
        if entry is None:
            return 0
        logger.debug("Discarded %d views for session %s", len(entry.views), session_id)
        return len(entry.views)

    @property
    def session_count(self) -> int:
        return len(self._sessions)

    def __len__(self) -> int:
        return sum(len(entry.views) for entry in self._sessions.values())


# Singleton instance
_registry: Optional[ViewRegistry] = None


def get_view_registry() -> ViewRegistry:
    """
    Get or create the singleton view registry.

    Returns:
        ViewRegistry instance
    """
    global _registry
    if _registry is None:
        _registry = ViewRegistry()
    return _registry
