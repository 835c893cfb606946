import asyncio

from autonews.client.context import SessionContext
from autonews.client.favorites import FavoriteClient
from autonews.client.feed import FeedQuery, PostFeed
from autonews.core.events import ChangeFeed


class FeedBackend:
    """记录请求次数的假后端"""

    def __init__(self):
        self.version = 1
        self.posts = [{"id": "p1"}, {"id": "p2"}]
        self.counts = {"p1": 4}
        self.list_calls = []
        self.count_calls = 0
        self.favorites = set()

    async def list_favorites_for_viewer(self):
        return set(self.favorites)

    async def changes_version(self):
        return self.version

    async def list_posts(self, params):
        self.list_calls.append(params)
        return list(self.posts)

    async def count_favorites(self, post_ids):
        self.count_calls += 1
        return {p: self.counts[p] for p in post_ids if p in self.counts}


def _feed(backend, query=None):
    context = SessionContext(backend)
    return PostFeed(context, FavoriteClient(context), query)


class TestPostFeed:
    def test_refresh_loads_page_and_counts_in_one_batch(self):
        """刷新时每页只请求一次收藏数"""
        backend = FeedBackend()
        feed = _feed(backend, FeedQuery(tag="btc", page=1, page_size=10))
        posts = asyncio.run(feed.refresh())
        assert [p["id"] for p in posts] == ["p1", "p2"]
        assert backend.list_calls == [{"topic": None, "tag": "btc", "offset": 10, "limit": 10}]
        assert backend.count_calls == 1
        assert feed.favorites.count("p1") == 4
        assert feed.favorites.count("p2") == 0

    def test_sync_without_changes_does_nothing(self):
        backend = FeedBackend()
        feed = _feed(backend)
        asyncio.run(feed.refresh())
        assert asyncio.run(feed.sync()) is False
        assert len(backend.list_calls) == 1

    def test_sync_refetches_whole_page_after_change(self):
        """变更后重新获取整页"""
        backend = FeedBackend()
        feed = _feed(backend)
        asyncio.run(feed.refresh())
        backend.version = 2
        backend.posts = [{"id": "p3"}] + backend.posts
        assert asyncio.run(feed.sync()) is True
        assert [p["id"] for p in feed.posts] == ["p3", "p1", "p2"]
        assert feed.version == 2

    def test_change_event_marks_page_stale(self):
        backend = FeedBackend()
        feed = _feed(backend)
        asyncio.run(feed.refresh())

        changes = ChangeFeed()
        unsubscribe = changes.subscribe(feed.on_change)
        changes.publish("update", "p1")
        assert feed.stale
        assert asyncio.run(feed.sync()) is True
        assert not feed.stale
        assert len(backend.list_calls) == 2

        unsubscribe()
        changes.publish("delete", "p1")
        assert not feed.stale

    def test_show_switches_query(self):
        backend = FeedBackend()
        feed = _feed(backend)
        asyncio.run(feed.show(FeedQuery(topic="World")))
        assert backend.list_calls[-1]["topic"] == "World"

    def test_refresh_shows_viewer_favorites(self):
        """登录用户刷新后显示已收藏"""
        backend = FeedBackend()
        backend.favorites = {"p1"}
        context = SessionContext(backend, viewer="reader@example.com")
        feed = PostFeed(context, FavoriteClient(context))
        asyncio.run(feed.refresh())
        assert feed.favorites.is_liked("p1")
        assert not feed.favorites.is_liked("p2")


class TestChangeFeed:
    def test_versions_increase(self):
        changes = ChangeFeed()
        first = changes.publish("insert", "a")
        second = changes.publish("delete", "a")
        assert (first.version, second.version) == (1, 2)
        assert changes.version == 2

    def test_failing_subscriber_does_not_stop_others(self):
        changes = ChangeFeed()
        seen = []

        def broken(event):
            raise RuntimeError("listener bug")

        changes.subscribe(broken)
        changes.subscribe(seen.append)
        changes.publish("insert", "a")
        assert [e.post_id for e in seen] == ["a"]
