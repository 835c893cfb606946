import logging
from datetime import datetime, timedelta, UTC

from autonews.db.store import Store
from autonews.models.post import Origin, Topic
from autonews.schemas.post import PostCreate
from autonews.services.lifecycle import PostLifecycleManager

logger = logging.getLogger(__name__)

DEMO_POSTS = [
    PostCreate(
        title="Bitcoin holds $60k as miners rotate; ETH eyes upgrade",
        image="https://images.unsplash.com/photo-1641260587932-f7bd6e2dbe0c?q=80&w=1600&auto=format&fit=crop",
        topic=Topic.CRYPTO,
        tags=["bitcoin", "eth", "markets"],
        content=(
            "Markets stayed range-bound as miners rotated hash power and fees normalized. "
            "On-chain shows miner outflows cooling, while L2 activity remains strong.\n\n"
            "Key drivers:\n- Macro remains mixed as rates path softens\n"
            "- Exchange inflows stabilize\n- ETF flows continue to oscillate"
        ),
    ),
    PostCreate(
        title="House panel advances digital asset bill",
        image="https://images.unsplash.com/photo-1555967522-37949fc21dcb?q=80&w=1600&auto=format&fit=crop",
        topic=Topic.US_POLITICS,
        tags=["policy", "stablecoins"],
        byline="AutoNews Capitol",
        content=(
            "The committee advanced a measure to clarify stablecoin oversight; final text remains in flux. "
            "Observers expect amendments addressing state charters.\n\n"
            "What's next:\n- Full House calendar review\n- Senate working group response"
        ),
    ),
    PostCreate(
        title="Global markets react to rate path shift",
        image="https://images.unsplash.com/photo-1518546305927-5a555bb7020d?q=80&w=1600&auto=format&fit=crop",
        topic=Topic.WORLD,
        tags=["macro", "fx"],
        byline="Economy Desk",
        content=(
            "EM rallies as dollar softens; crypto tracks risk-on tone. "
            "Commodities mixed as supply headlines fade.\n\n"
            "Watch:\n- US CPI next week\n- Oil inventories\n- Asia PMIs"
        ),
    ),
]


def seed_demo_posts(store: Store) -> int:
    """Insert the demo posts when the posts table is empty; returns how many were added"""
    if store.count_posts() > 0:
        return 0
    start = datetime.now(UTC)
    for hours_ago, fields in enumerate(DEMO_POSTS, start=1):
        stamp = start - timedelta(hours=hours_ago)
        PostLifecycleManager(store, clock=lambda stamp=stamp: stamp).create(
            fields, author="system", origin=Origin.MANUAL
        )
    logger.info("Seeded %d demo posts", len(DEMO_POSTS))
    return len(DEMO_POSTS)
