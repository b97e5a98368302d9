"""Category performance reporter and dashboard statistics."""

import calendar
from datetime import datetime, timedelta
from typing import Optional, Sequence

from sqlalchemy.orm import Session

from skillcheck.scoring import mean, round_score
from skillcheck.services import store

REPORT_CATEGORIES = ["Frontend", "Backend", "Databases", "Algorithms", "DevOps"]
NO_DATE = "N/A"


def one_month_before(moment: datetime) -> datetime:
    """Same time on the same day of the previous calendar month.

    The day is clamped to the length of that month, so March 31 maps to
    the last day of February.
    """
    year, month = (moment.year, moment.month - 1) if moment.month > 1 else (moment.year - 1, 12)
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


# Range name -> cutoff for a given "now"; None keeps every result
TIME_RANGES = {
    "all": None,
    "month": one_month_before,
    "week": lambda now: now - timedelta(days=7),
}


def _newest_first(results: Sequence) -> list:
    return sorted(results, key=lambda r: store.as_utc(r.date), reverse=True)


def build_report(skills: Sequence, test_results: Sequence) -> list[dict]:
    """Per-category summary for the fixed dashboard categories.

    change is the latest score minus the one before it (0 with fewer than
    two results in the category).
    """
    report = []
    for category in REPORT_CATEGORIES:
        category_skills = [s for s in skills if s.category == category]
        category_tests = _newest_first([r for r in test_results if r.category == category])

        change = 0
        if len(category_tests) >= 2:
            change = category_tests[0].score - category_tests[1].score

        report.append({
            "title": category,
            "score": round_score(mean(s.score for s in category_skills)) if category_skills else 0,
            "change": change,
            "tests": len(category_tests),
            "last_test": store.as_utc(category_tests[0].date).isoformat() if category_tests else NO_DATE,
            "skills": [{"name": s.name, "score": s.score} for s in category_skills],
        })
    return report


def report(db: Session, user_id: str) -> list[dict]:
    return build_report(store.get_skills(db, user_id), store.list_test_results(db, user_id))


def filter_by_range(test_results: Sequence, time_range: str, now: Optional[datetime] = None) -> list:
    if time_range not in TIME_RANGES:
        raise ValueError(f"Unknown time range {time_range!r}")
    cutoff_for = TIME_RANGES[time_range]
    if cutoff_for is None:
        return list(test_results)
    cutoff = cutoff_for(now or store.now_utc())
    return [r for r in test_results if store.as_utc(r.date) >= cutoff]


def build_statistics(test_results: Sequence, categories: Sequence[dict], skills: Sequence) -> dict:
    """Headline numbers for the statistics page.

    Worst category ignores categories still at 0; both best and worst are
    "N/A" when nothing qualifies.
    """
    total = len(test_results)
    avg = round_score(mean(r.score for r in test_results)) if total else 0

    best = {"name": NO_DATE, "score": 0}
    worst = {"name": NO_DATE, "score": 100}
    for c in categories:
        if c["score"] > best["score"]:
            best = {"name": c["title"], "score": c["score"]}
        if 0 < c["score"] < worst["score"]:
            worst = {"name": c["title"], "score": c["score"]}
    if worst["name"] == NO_DATE:
        worst = {"name": NO_DATE, "score": 0}

    improvement = 0
    if total >= 2:
        ordered = _newest_first(test_results)
        improvement = ordered[0].score - ordered[-1].score

    distribution: dict[str, int] = {}
    for s in skills:
        distribution[s.category] = distribution.get(s.category, 0) + 1

    return {
        "total_tests": total,
        "average_score": avg,
        "best_category": best,
        "worst_category": worst,
        "improvement": improvement,
        "skills_distribution": [{"category": c, "count": n} for c, n in distribution.items()],
    }


def statistics(db: Session, user_id: str, time_range: str = "all") -> dict:
    skills = store.get_skills(db, user_id)
    results = filter_by_range(store.list_test_results(db, user_id), time_range)
    return build_statistics(results, build_report(skills, results), skills)
