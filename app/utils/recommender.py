# app/utils/recommender.py
import Levenshtein
from typing import List, Dict, Set

FUZZY_THRESHOLD = 0.7

# Helper: Levenshtein similarity of two strings (0.0 ~ 1.0)
def _get_string_similarity(s1: str, s2: str) -> float:
    # Levenshtein.distance is an edit distance;
    # normalise it to a similarity where 1.0 means identical
    if not s1 or not s2:
        return 0.0
    distance = Levenshtein.distance(s1.lower(), s2.lower())
    max_len = max(len(s1), len(s2))
    return 1.0 - (distance / max_len)


def _overlap_score(source: Set[str], target: Set[str]) -> float:
    """
    1.0 per exact name shared, plus the best fuzzy similarity
    (above FUZZY_THRESHOLD) for each remaining source name
    """
    if not source or not target:
        return 0.0

    exact_matches = source & target
    score = len(exact_matches) * 1.0

    fuzzy_target = target - exact_matches
    for s_name in source - exact_matches:
        best = 0.0
        for t_name in fuzzy_target:
            similarity = _get_string_similarity(s_name, t_name)
            if similarity > FUZZY_THRESHOLD:
                best = max(best, similarity)
        score += best

    return score


def _normalise(names) -> Set[str]:
    return {name.strip().lower() for name in names if name and name.strip()}


def calculate_match_scores(
    # What the viewer wants to learn / can teach
    wanted_skill_names: Set[str],
    offered_skill_names: Set[str],
    # Candidates: {"item_id", "offered", "wanted", "item_object"}
    candidates: List[Dict]
) -> List[Dict]:
    """
    Score swap partners in both directions: what they teach that the
    viewer wants, plus what they want that the viewer teaches.
    """
    wanted = _normalise(wanted_skill_names)
    offered = _normalise(offered_skill_names)

    if not wanted and not offered:
        return []

    matches = []
    for candidate in candidates:
        teaches = _overlap_score(wanted, _normalise(candidate.get("offered", set())))
        learns = _overlap_score(offered, _normalise(candidate.get("wanted", set())))
        total_score = teaches + learns

        if total_score > 0:
            matches.append({
                "item_id": candidate.get("item_id"),
                "score": round(total_score, 4),
                "item_object": candidate.get("item_object")
            })

    # Score first, stored rating breaks ties (both descending)
    matches.sort(
        key=lambda x: (
            x["score"],
            getattr(x.get("item_object"), 'rating', 0) or 0
        ),
        reverse=True
    )

    return matches
