"""Page controllers.

Each page builds the view model for one screen of the site. The controller is
picked once from ``PAGES`` by its page name and then rendered with a
``PageContext``.
"""
from dataclasses import dataclass, field
from typing import Dict, Optional, Type

from autonews.api.deps import serialize_posts
from autonews.core.errors import AuthRequiredError, NotFoundError, PermissionDeniedError
from autonews.core.render import excerpt
from autonews.db.store import PostFilter, Store
from autonews.models.post import PostStatus, Topic
from autonews.models.profile import Role

ALL_TOPICS = "All"


@dataclass
class PageContext:
    store: Store
    viewer: Optional[str] = None  # email of the signed-in viewer
    role: Role = Role.GUEST
    params: Dict[str, str] = field(default_factory=dict)

    def liked(self) -> set:
        if self.viewer is None:
            return set()
        return self.store.list_favorites_for_viewer(self.viewer)

    def session_info(self) -> dict:
        return {
            "signed_in": self.viewer is not None,
            "email": self.viewer,
            "role": self.role,
            "is_admin": self.role == Role.ADMIN,
        }


class PageController:
    name = ""

    def render(self, context: PageContext) -> dict:
        raise NotImplementedError


class HomePage(PageController):
    """Published stories filtered by topic and tag"""
    name = "home"
    page_size = 20

    def render(self, context: PageContext) -> dict:
        topic_name = context.params.get("topic") or ALL_TOPICS
        tag = context.params.get("tag") or None
        topic = None if topic_name == ALL_TOPICS else Topic(topic_name)

        posts = context.store.list_posts(PostFilter(topic=topic, tag=tag), limit=self.page_size)
        liked = context.liked()
        stories = []
        for post in serialize_posts(context.store, posts):
            stories.append({
                "id": post["id"],
                "title": post["title"],
                "topic": post["topic"],
                "tags": post["tags"][:3],
                "byline": post["byline"],
                "image": post["image"],
                "created_at": post["created_at"],
                "excerpt": excerpt(post["content"]),
                "favorites_count": post["favorites_count"],
                "liked": post["id"] in liked,
            })
        return {
            "page": self.name,
            "session": context.session_info(),
            "topics": [ALL_TOPICS] + [t.value for t in Topic],
            "topic": topic_name,
            "tags": context.store.list_tags(),
            "tag": tag,
            "stories": stories,
        }


class LoginPage(PageController):
    name = "login"

    def render(self, context: PageContext) -> dict:
        return {"page": self.name, "session": context.session_info()}


class AdminPage(PageController):
    """Every post, drafts included, for review"""
    name = "admin"

    def render(self, context: PageContext) -> dict:
        if context.viewer is None:
            raise AuthRequiredError()
        if context.role != Role.ADMIN:
            raise PermissionDeniedError("Admin only")
        posts = context.store.list_posts(PostFilter(status=None), limit=200)
        rows = serialize_posts(context.store, posts)
        return {
            "page": self.name,
            "session": context.session_info(),
            "topics": [t.value for t in Topic],
            "posts": [{
                "id": row["id"],
                "title": row["title"],
                "topic": row["topic"],
                "tags": row["tags"],
                "status": row["status"],
                "created_at": row["created_at"],
                "favorites_count": row["favorites_count"],
            } for row in rows],
            "pending_review": sum(1 for row in rows if row["status"] == PostStatus.DRAFT),
        }


class PostPage(PageController):
    name = "post"

    def render(self, context: PageContext) -> dict:
        post_id = context.params.get("id")
        post = context.store.get_post(post_id) if post_id else None
        if post is None or (post.status != PostStatus.PUBLISHED and context.role != Role.ADMIN):
            raise NotFoundError("Article not found")
        data = serialize_posts(context.store, [post])[0]
        return {
            "page": self.name,
            "session": context.session_info(),
            "post": {
                "id": data["id"],
                "title": data["title"],
                "topic": data["topic"],
                "tags": data["tags"],
                "byline": data["byline"],
                "image": data["image"],
                "status": data["status"],
                "created_at": data["created_at"],
                "content_html": data["content_html"],
                "favorites_count": data["favorites_count"],
                "liked": post.id in context.liked(),
            },
            "share_text": data["title"],
        }


class AccountPage(PageController):
    """The viewer's profile and liked stories"""
    name = "account"

    def render(self, context: PageContext) -> dict:
        if context.viewer is None:
            raise AuthRequiredError()
        liked_ids = context.liked()
        posts = [context.store.get_post(post_id) for post_id in sorted(liked_ids)]
        posts = [p for p in posts if p is not None and p.status == PostStatus.PUBLISHED]
        posts.sort(key=lambda p: p.created_at, reverse=True)
        return {
            "page": self.name,
            "session": context.session_info(),
            "favorites": [{
                "id": row["id"],
                "title": row["title"],
                "topic": row["topic"],
                "favorites_count": row["favorites_count"],
            } for row in serialize_posts(context.store, posts)],
        }


PAGES: Dict[str, Type[PageController]] = {
    page.name: page for page in (HomePage, LoginPage, AdminPage, PostPage, AccountPage)
}


def get_page(name: str) -> PageController:
    try:
        return PAGES[name]()
    except KeyError:
        raise NotFoundError(f"Unknown page {name!r}") from None
