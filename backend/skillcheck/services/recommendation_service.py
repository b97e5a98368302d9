"""Recommendation selector: narrows and reorders the course catalog for a user.

`select` runs a pipeline of stages. Each stage receives the current list and
returns either a new list or None ("no opinion"); `run_stages` keeps the
last non-empty list, so a stage that would filter everything out falls back
to what the previous stage produced.

    track filter -> specialization filter -> weak-area boost

This is a heuristic re-ranker, not scored retrieval: no relevance scores, no
diversity constraint. Ties always keep catalog order.
"""

import logging
from collections import defaultdict
from typing import Callable, Optional, Sequence

from sqlalchemy.orm import Session

from skillcheck.errors import NotFoundError
from skillcheck.models.recommendation import Recommendation, RecommendationProgress
from skillcheck.models.user import User
from skillcheck.scoring import clamp, mean
from skillcheck.services import store
from skillcheck.services.locks import user_lock

logger = logging.getLogger(__name__)

# ── Keyword tables ───────────────────────────────────────────────────────────

TRACK_KEYWORDS: dict[str, list[str]] = {
    "Computer Systems Engineering": [
        "programming", "development", "software", "systems", "web", "mobile", "frontend", "backend",
    ],
    "Computer Engineering": ["computing", "data", "analysis", "systems", "networks", "security"],
    "Information Technology Engineering": [
        "information technology", "infrastructure", "cloud", "networks", "systems",
    ],
    "Bachelor of Informatics": ["informatics", "management", "projects", "analysis"],
    "Software Development Engineering": [
        "development", "software", "programming", "web", "mobile", "frontend", "backend",
    ],
    "Computer Science Engineering": [
        "algorithms", "computing", "theory", "mathematics", "artificial intelligence",
    ],
}
DEFAULT_TRACK_KEYWORDS = ["programming", "development", "technology"]

# Specializations missing here (e.g. "Cloud Computing") do not narrow anything.
SPECIALIZATION_KEYWORDS: dict[str, list[str]] = {
    "Data Management": ["data", "sql", "nosql", "databases", "analysis", "big data", "data science"],
    "Cross-Platform Programming": [
        "web", "mobile", "frontend", "backend", "fullstack", "react", "angular", "vue",
    ],
    "Security and Networks": [
        "security", "networks", "cybersecurity", "ethical hacking", "pentesting", "firewall",
    ],
    "Mobile Data Management": ["mobile", "android", "ios", "react native", "flutter", "mobile data"],
    "Artificial Intelligence": [
        "artificial intelligence", "machine learning", "deep learning", "neural networks", "nlp",
    ],
    "Web Development": ["web", "frontend", "backend", "fullstack", "javascript", "react", "node"],
}

WEAK_CATEGORY_COUNT = 2
FALLBACK_COUNT = 3
UNSCORED_CATEGORY_RANK = 100

# Appended to a user's catalog at registration, keyed by specialization.
SPECIALIZATION_RECOMMENDATIONS: dict[str, list[dict]] = {
    "Data Management": [
        {
            "title": "Course: Advanced SQL for Data Management",
            "description": "Learn advanced SQL techniques to manage large volumes of data",
            "category": "Databases",
            "difficulty": "Intermediate",
            "duration": "15 hours",
            "icon": "Database",
            "url": "https://www.coursera.org/learn/sql-for-data-science",
            "platform": "Coursera",
        },
        {
            "title": "Project: Data Warehouse with ETL",
            "description": "Implement a complete data warehouse with ETL processes",
            "category": "Databases",
            "difficulty": "Advanced",
            "duration": "25 hours",
            "icon": "Database",
            "url": "https://www.udemy.com/course/data-warehouse-the-ultimate-guide/",
            "platform": "Udemy",
        },
    ],
    "Cross-Platform Programming": [
        {
            "title": "Course: React Native for mobile apps",
            "description": "Build cross-platform mobile applications with React Native",
            "category": "Frontend",
            "difficulty": "Intermediate",
            "duration": "20 hours",
            "icon": "Code2",
            "url": "https://reactnative.dev/docs/getting-started",
            "platform": "Official documentation",
        },
        {
            "title": "Project: Cross-platform app with Flutter",
            "description": "Create an application that runs on iOS, Android and the web with Flutter",
            "category": "Frontend",
            "difficulty": "Intermediate",
            "duration": "30 hours",
            "icon": "Code2",
            "url": "https://flutter.dev/learn",
            "platform": "Official documentation",
        },
    ],
}

Stage = Callable[[list], Optional[list]]


# ── Pipeline ─────────────────────────────────────────────────────────────────

def track_keywords(career: Optional[str]) -> list[str]:
    return TRACK_KEYWORDS.get(career or "", DEFAULT_TRACK_KEYWORDS)


def specialization_keywords(specialization: Optional[str]) -> list[str]:
    return SPECIALIZATION_KEYWORDS.get(specialization or "", [])


def matches_any(item, keywords: Sequence[str]) -> bool:
    """Case-insensitive substring match over title, description and category."""
    haystacks = [(getattr(item, f, None) or "").lower() for f in ("title", "description", "category")]
    return any(k.lower() in h for k in keywords for h in haystacks)


def keyword_stage(keywords: Sequence[str]) -> Stage:
    def stage(items: list) -> Optional[list]:
        if not keywords:
            return None
        return [i for i in items if matches_any(i, keywords)]

    return stage


def category_means(test_results) -> dict[str, float]:
    scores: dict[str, list[int]] = defaultdict(list)
    for r in test_results:
        if r.category:
            scores[r.category].append(r.score)
    return {c: mean(v) for c, v in scores.items()}


def weak_categories(test_results, count: int = WEAK_CATEGORY_COUNT) -> list[str]:
    """The `count` categories with the lowest mean score, weakest first."""
    ranked = sorted(category_means(test_results).items(), key=lambda kv: kv[1])
    return [c for c, _ in ranked[:count]]


def weak_area_stage(test_results) -> Stage:
    weak = [c.lower() for c in weak_categories(test_results)]

    def stage(items: list) -> Optional[list]:
        if not weak:
            return None
        boosted = [i for i in items if any(w in (i.category or "").lower() for w in weak)]
        if not boosted:
            return None
        rest = [i for i in items if not any(i is b for b in boosted)]
        return boosted + rest

    return stage


def run_stages(items: list, stages: Sequence[Stage]) -> list:
    """Apply stages in order, keeping the last non-empty result."""
    current = list(items)
    for stage in stages:
        narrowed = stage(current)
        if narrowed:
            current = narrowed
    return current


def select(user: User, recommendations: Sequence, test_results: Sequence) -> list:
    """Order the catalog for `user`; callers usually take a short prefix.

    Never returns an empty list for a non-empty catalog.
    """
    catalog = list(recommendations)
    selected = run_stages(
        catalog,
        [
            keyword_stage(track_keywords(user.career)),
            keyword_stage(specialization_keywords(user.specialization)),
            weak_area_stage(test_results),
        ],
    )
    if not selected:
        return catalog[:FALLBACK_COUNT]
    return selected


def rank_by_weakness(recommendations: Sequence, test_results: Sequence) -> list:
    """Whole catalog, categories with the lowest mean score first.

    Categories without results rank as if scored 100. Stable.
    """
    means = category_means(test_results)
    if not means:
        return list(recommendations)
    return sorted(recommendations, key=lambda r: means.get(r.category, UNSCORED_CATEGORY_RANK))


# ── Persistence-backed operations ────────────────────────────────────────────

def with_overlay(db: Session, user_id: str, recommendations: Sequence[Recommendation]) -> list[dict]:
    """Attach the user's progress/completed overlay to each catalog item."""
    overlay = store.get_recommendation_progress(db, user_id)
    out = []
    for rec in recommendations:
        row = overlay.get(rec.id)
        out.append({
            "recommendation": rec,
            "progress": row.progress if row else 0,
            "completed": bool(row.completed) if row else False,
        })
    return out


def personalized(db: Session, user: User, limit: Optional[int] = None) -> list[dict]:
    catalog = store.list_recommendations(db, user.id)
    results = store.list_test_results(db, user.id)
    picked = select(user, catalog, results)
    if limit is not None:
        picked = picked[:limit]
    return with_overlay(db, user.id, picked)


def ranked_for_user(db: Session, user_id: str) -> list[dict]:
    catalog = store.list_recommendations(db, user_id)
    results = store.list_test_results(db, user_id)
    return with_overlay(db, user_id, rank_by_weakness(catalog, results))


def seed_for_specialization(db: Session, user: User) -> list[Recommendation]:
    """Append the specialization-specific items for a new user. Caller commits."""
    added = []
    for data in SPECIALIZATION_RECOMMENDATIONS.get(user.specialization or "", []):
        added.append(store.save_recommendation(db, Recommendation(owner_id=user.id, **data)))
    if added:
        logger.info("Added %d %s recommendations for user %s", len(added), user.specialization, user.id)
    return added


def _visible_recommendation(db: Session, user_id: str, recommendation_id: str) -> Recommendation:
    rec = store.get_recommendation(db, recommendation_id)
    if rec is None or (rec.owner_id is not None and rec.owner_id != user_id):
        raise NotFoundError("Recommendation not found")
    return rec


def _set_overlay(db: Session, user_id: str, recommendation_id: str, progress: int, completed: Optional[bool]) -> dict:
    with user_lock(user_id), store.unit_of_work(db):
        rec = _visible_recommendation(db, user_id, recommendation_id)
        row = store.get_recommendation_progress(db, user_id).get(rec.id)
        if row is None:
            row = RecommendationProgress(user_id=user_id, recommendation_id=rec.id, completed=False)
        row.progress = clamp(int(progress))
        if completed is not None:
            row.completed = completed
        store.save_recommendation_progress(db, row)
    return {"recommendation": rec, "progress": row.progress, "completed": bool(row.completed)}


def update_progress(db: Session, user_id: str, recommendation_id: str, progress: int) -> dict:
    return _set_overlay(db, user_id, recommendation_id, progress, None)


def complete(db: Session, user_id: str, recommendation_id: str) -> dict:
    return _set_overlay(db, user_id, recommendation_id, 100, True)
