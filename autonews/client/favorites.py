"""Like button state with optimistic updates.

A toggle shows its result right away, then confirms it with the backend. If
the backend call fails, the liked flag and the count go back to what they
were before the click. While a toggle on a post is in flight, further toggles
on that same post are ignored, the same way a disabled button would ignore
them.
"""
import logging
from dataclasses import dataclass
from typing import Dict, Iterable

from autonews.client.context import SessionContext
from autonews.client.optimistic import optimistic_mutation
from autonews.core.errors import AuthRequiredError, DuplicateError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FavoriteState:
    liked: bool
    count: int


class FavoriteClient:
    def __init__(self, context: SessionContext):
        self.context = context

    def is_liked(self, post_id: str) -> bool:
        ctx = self.context
        if post_id in ctx.pending_liked:
            return ctx.pending_liked[post_id]
        return post_id in ctx.cached_membership()

    def count(self, post_id: str) -> int:
        return self.context.counts.get(post_id, 0)

    def state(self, post_id: str) -> FavoriteState:
        return FavoriteState(liked=self.is_liked(post_id), count=self.count(post_id))

    def is_pending(self, post_id: str) -> bool:
        return post_id in self.context.in_flight

    async def load_counts(self, post_ids: Iterable[str]) -> Dict[str, int]:
        """Fetch counts for a whole page in one call; missing ids count as 0.

        For a signed-in viewer the favorite membership is loaded as well, so
        the liked flags shown with the page are the server's.
        """
        post_ids = list(dict.fromkeys(post_ids))
        if not post_ids:
            return {}
        counts = await self.context.backend.count_favorites(post_ids)
        for post_id in post_ids:
            # an in-flight toggle owns the displayed count until it settles
            if post_id not in self.context.in_flight:
                self.context.counts[post_id] = counts.get(post_id, 0)
        await self.context.membership()
        return counts

    async def toggle(self, post_id: str) -> FavoriteState:
        ctx = self.context
        if ctx.viewer is None:
            raise AuthRequiredError("Sign in to like stories")
        if post_id in ctx.in_flight:
            logger.debug("Toggle on %s ignored, previous toggle still in flight", post_id)
            return self.state(post_id)

        ctx.in_flight.add(post_id)
        generation = ctx.generation
        try:
            membership = await ctx.membership()
            if generation != ctx.generation:
                return self.state(post_id)
            was_liked = post_id in membership

            def read():
                return was_liked, ctx.counts.get(post_id, 0)

            def apply(previous):
                liked, count = previous
                ctx.pending_liked[post_id] = not liked
                ctx.counts[post_id] = max(0, count + (-1 if liked else 1))

            async def commit():
                if was_liked:
                    await ctx.backend.delete_favorite(post_id)
                    return False
                try:
                    await ctx.backend.insert_favorite(post_id)
                except DuplicateError:
                    # the pair already exists server side, which is the state we wanted
                    logger.debug("Favorite on %s already existed", post_id)
                return True

            def rollback(previous):
                if generation != ctx.generation:
                    return
                liked, count = previous
                ctx.pending_liked.pop(post_id, None)
                ctx.counts[post_id] = count

            def on_success(liked):
                if generation != ctx.generation:
                    return
                ctx.record_favorite(post_id, liked)
                ctx.pending_liked.pop(post_id, None)

            await optimistic_mutation(read, apply, commit, rollback, on_success)
            return self.state(post_id)
        finally:
            if generation == ctx.generation:
                ctx.in_flight.discard(post_id)
