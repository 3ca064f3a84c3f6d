# app/services/match_service.py
import logging
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Set

from app.models.profile import Profile
from app.repositories.profile_repo import ProfileRepository
from app.utils.recommender import calculate_match_scores

logger = logging.getLogger(__name__)


def _link_names(links) -> Set[str]:
    return {link.skill.name.lower() for link in links if link.skill}


class MatchService:
    def __init__(self, db: AsyncSession):
        self.profile_repo = ProfileRepository(db)
        self.db = db

    async def suggest_matches(self, viewer: Profile, limit: int = 10) -> List[dict]:
        """
        Suggested swap partners: public, active profiles that teach what
        the viewer wants or want what the viewer teaches.
        """
        wanted_names = _link_names(viewer.skills_wanted)
        offered_names = _link_names(viewer.skills_offered)
        if not wanted_names and not offered_names:
            return []  # Nothing listed yet, nothing to match on

        candidates = []
        for profile in await self.profile_repo.list_public_active_profiles():
            if profile.id == viewer.id:
                continue
            candidates.append({
                "item_id": profile.id,
                "offered": _link_names(profile.skills_offered),
                "wanted": _link_names(profile.skills_wanted),
                "item_object": profile,
            })

        scored = calculate_match_scores(wanted_names, offered_names, candidates)
        logger.info(f"{len(scored)} match candidates for profile {viewer.id}")

        return [
            {
                "profile": item["item_object"],
                "match_score": round(item["score"], 2),
            }
            for item in scored[:limit]
        ]
