"""Per-session client state, passed explicitly to the client components."""
import asyncio
import logging
from typing import Dict, Optional, Set

from autonews.client.backend import Backend

logger = logging.getLogger(__name__)


class SessionContext:
    """Viewer identity plus the favorite state cached for that viewer.

    Built once per browsing session. ``set_viewer`` must be called on login and
    logout; it drops everything cached for the previous viewer.
    """

    def __init__(self, backend: Backend, viewer: Optional[str] = None):
        self.backend = backend
        self.viewer = viewer.strip().lower() if viewer else None
        self.generation = 0
        self.counts: Dict[str, int] = {}
        self.pending_liked: Dict[str, bool] = {}
        self.in_flight: Set[str] = set()
        self._membership: Optional[Set[str]] = None
        self._membership_load: Optional[asyncio.Future] = None

    def set_viewer(self, viewer: Optional[str]) -> None:
        viewer = viewer.strip().lower() if viewer else None
        if viewer == self.viewer:
            return
        logger.info("Viewer changed, clearing favorite cache")
        self.viewer = viewer
        self.generation += 1
        self._membership = None
        self._membership_load = None
        self.pending_liked.clear()
        self.in_flight.clear()

    async def sign_in(self, email: str, password: str) -> None:
        await self.backend.login(email, password)
        self.set_viewer(email)

    def sign_out(self) -> None:
        logout = getattr(self.backend, "logout", None)
        if logout is not None:
            logout()
        self.set_viewer(None)

    def cached_membership(self) -> Set[str]:
        """Membership as far as it is loaded, without a backend call"""
        return self._membership if self._membership is not None else set()

    def record_favorite(self, post_id: str, liked: bool) -> None:
        """Apply a confirmed favorite change to the loaded membership"""
        if self._membership is None:
            return
        if liked:
            self._membership.add(post_id)
        else:
            self._membership.discard(post_id)

    async def membership(self) -> Set[str]:
        """Post ids the viewer has favorited, fetched on first use.

        Concurrent callers share a single backend call.
        """
        if self.viewer is None:
            return set()
        if self._membership is not None:
            return self._membership
        generation = self.generation
        if self._membership_load is None:
            self._membership_load = asyncio.ensure_future(self._load_membership(generation))
        await asyncio.shield(self._membership_load)
        if generation != self.generation:
            # viewer changed while loading
            return set()
        return self.cached_membership()

    async def _load_membership(self, generation: int) -> Set[str]:
        try:
            membership = await self.backend.list_favorites_for_viewer()
        finally:
            if generation == self.generation:
                self._membership_load = None
        if generation == self.generation:
            self._membership = membership
        return membership
