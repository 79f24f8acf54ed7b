"""
Community picks: collaborative filtering over the most similar peers.

Selects the top-K peers by user similarity, then scores each item by the
similarity-weighted share of those peers who completed or liked it:
score = 100 * sum(sim of supporting peers) / sum(sim of selected peers).
"""

import logging
from dataclasses import dataclass
from typing import Dict, List

from ..models.item import Item
from ..models.profile import PeerUser
from .similarity import most_similar_users

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommunitySupport:
    """Peer backing for one item."""

    score: float
    supporting_peers: int
    selected_peers: int


def community_scores(
    target: PeerUser,
    peers: List[PeerUser],
    items: List[Item],
    peer_count: int,
) -> Dict[str, CommunitySupport]:
    """
    Peer support per item id; items no selected peer engaged with are omitted.

    Peers with zero similarity are not selected. No peers -> empty dict.
    """
    neighbors = [(p, s) for p, s in most_similar_users(target, peers, peer_count) if s > 0]
    total = sum(s for _, s in neighbors)
    if total <= 0:
        logger.debug("[community] no similar peers among %d", len(peers))
        return {}

    support: Dict[str, CommunitySupport] = {}
    for item in items:
        backing = [s for peer, s in neighbors if item.id in peer.behavior.history]
        if not backing:
            continue
        support[item.id] = CommunitySupport(
            score=min(100.0, 100.0 * sum(backing) / total),
            supporting_peers=len(backing),
            selected_peers=len(neighbors),
        )
    logger.debug("[community] peers=%d supported_items=%d", len(neighbors), len(support))
    return support
