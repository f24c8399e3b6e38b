# services/profile-service/src/apps/core/engines/matching.py
"""
Matching Engine

Similarity between a reference profile and candidate profiles:

    0.4 * |Rs & Cs| / |Rs| + 0.4 * |Ra & Ca| / |Ra| + 0.2 * [Rrole == Crole]

where ``s`` are skills and ``a`` aircraft types. A term whose reference
set is empty contributes zero.
"""

from typing import AbstractSet, Iterable, List, Optional

from .types import MatchProfile, RankedCandidate, SimilarityScore

SKILLS_WEIGHT = 0.4
AIRCRAFT_WEIGHT = 0.4
ROLE_WEIGHT = 0.2


def overlap_term(
    reference_set: AbstractSet[str],
    candidate_set: AbstractSet[str],
    weight: float
) -> float:
    """Weighted share of the reference set that the candidate also has."""
    if not reference_set:
        return 0.0
    return weight * len(reference_set & candidate_set) / len(reference_set)


def similarity(reference: MatchProfile, candidate: MatchProfile) -> SimilarityScore:
    skills = overlap_term(reference.skills, candidate.skills, SKILLS_WEIGHT)
    aircraft = overlap_term(reference.aircraft_types, candidate.aircraft_types, AIRCRAFT_WEIGHT)
    role = ROLE_WEIGHT if reference.role == candidate.role else 0.0
    total = min(1.0, round(skills + aircraft + role, 6))
    return SimilarityScore(
        skills=skills,
        aircraft_types=aircraft,
        role=role,
        total=total,
    )


def rank_candidates(
    reference: MatchProfile,
    candidates: Iterable[MatchProfile],
    limit: Optional[int] = None
) -> List[RankedCandidate]:
    """
    Score and order candidates by descending similarity.

    The reference itself is never ranked. Ties keep the input order.
    """
    ranked = [
        RankedCandidate(candidate=candidate, score=similarity(reference, candidate))
        for candidate in candidates
        if candidate.id != reference.id
    ]
    ranked.sort(key=lambda item: item.score.total, reverse=True)
    if limit is not None:
        ranked = ranked[:limit]
    return ranked
