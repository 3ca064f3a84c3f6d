# app/utils/profile_filter.py
from typing import Iterable, List, Optional


def _contains(value: Optional[str], needle: str) -> bool:
    return bool(value) and needle in value.lower()


def _skill_names(links) -> List[str]:
    return [link.skill.name for link in links or [] if link.skill is not None]


def matches_query(profile, query: str) -> bool:
    """Substring match on name, location, offered or wanted skill names"""
    needle = query.strip().lower()
    if not needle:
        return True
    if _contains(profile.full_name, needle) or _contains(profile.location, needle):
        return True
    names = _skill_names(profile.skills_offered) + _skill_names(profile.skills_wanted)
    return any(needle in name.lower() for name in names)


def offers_category(profile, category: str) -> bool:
    wanted = category.lower()
    return any(
        link.skill is not None and (link.skill.category or "").lower() == wanted
        for link in profile.skills_offered or []
    )


def offers_skill(profile, skill_id: str) -> bool:
    return any(link.skill_id == skill_id for link in profile.skills_offered or [])


def filter_profiles(
    profiles: Iterable,
    query: str = "",
    category: Optional[str] = None,
    skill_id: Optional[str] = None,
    exclude_profile_id: Optional[str] = None,
) -> List:
    """
    In-memory browse filter over already fetched profiles.
    category "all" (or empty) means no category filter.
    """
    filtered = list(profiles)

    if query and query.strip():
        filtered = [p for p in filtered if matches_query(p, query)]

    if category and category.lower() != "all":
        filtered = [p for p in filtered if offers_category(p, category)]

    if skill_id:
        filtered = [p for p in filtered if offers_skill(p, skill_id)]

    if exclude_profile_id:
        filtered = [p for p in filtered if p.id != exclude_profile_id]

    return filtered
