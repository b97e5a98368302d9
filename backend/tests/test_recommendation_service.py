"""Tests for the recommendation selector and the course progress overlay."""

from types import SimpleNamespace

import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from skillcheck.errors import NotFoundError
from skillcheck.services import recommendation_service as rs
from skillcheck.services import store


def _rec(key, title, description, category):
    return SimpleNamespace(id=key, title=title, description=description, category=category)


REACT = _rec("1", "Course: React from scratch", "Improve your Frontend web development skills", "Frontend")
NODE = _rec("2", "Project: REST API with Node.js", "Build a complete backend API with a database", "Backend")
SORTING = _rec("3", "Course: Sorting algorithms", "Understand and apply the main sorting algorithms", "Algorithms")
SQL = _rec("4", "Exercise: SQL query optimization", "Faster queries in relational systems", "Databases")
SECURITY = _rec("11", "Introduction to Cybersecurity", "Information security and data protection", "Security")

CATALOG = [REACT, NODE, SORTING, SQL, SECURITY]


def _user(career="", specialization=""):
    return SimpleNamespace(career=career, specialization=specialization)


def _result(category, score):
    return SimpleNamespace(category=category, score=score)


class TestSelect:
    def test_track_filter(self):
        user = _user("Software Development Engineering")
        assert rs.select(user, CATALOG, []) == [REACT, NODE]

    def test_unmapped_specialization_is_noop(self):
        user = _user("Software Development Engineering", "Cloud Computing")
        assert rs.select(user, CATALOG, []) == [REACT, NODE]

    def test_specialization_narrows_track_list(self):
        user = _user("Software Development Engineering", "Data Management")
        # "database" contains "data"
        assert rs.select(user, CATALOG, []) == [NODE]

    def test_stage_that_empties_list_falls_back(self):
        user = _user("Computer Science Engineering", "Mobile Data Management")
        assert rs.select(user, CATALOG, []) == [SORTING]

    def test_unknown_career_uses_default_keywords(self):
        assert rs.select(_user("Astronomy"), CATALOG, []) == [REACT]

    def test_weak_area_moves_to_front(self):
        user = _user("Software Development Engineering")
        results = [_result("Backend", 30), _result("Databases", 40), _result("Frontend", 90)]
        assert rs.select(user, CATALOG, results)[:2] == [NODE, REACT]

    def test_weak_area_without_match_keeps_order(self):
        user = _user("Software Development Engineering")
        assert rs.select(user, CATALOG, [_result("DevOps", 10)]) == [REACT, NODE]

    def test_never_empty_for_non_empty_catalog(self):
        careers = list(rs.TRACK_KEYWORDS) + ["", "Unknown"]
        specializations = list(rs.SPECIALIZATION_KEYWORDS) + ["", "Cloud Computing"]
        for career in careers:
            for specialization in specializations:
                picked = rs.select(_user(career, specialization), CATALOG, [_result("Security", 5)])
                assert picked

    def test_no_keyword_match_returns_catalog(self):
        catalog = [_rec("9", "Watercolour", "Painting basics", "Art")]
        assert rs.select(_user("Software Development Engineering"), catalog, []) == catalog

    def test_empty_catalog(self):
        assert rs.select(_user(), [], []) == []


class TestWeakCategories:
    def test_two_lowest_means_weakest_first(self):
        results = [_result("A", 90), _result("B", 20), _result("C", 50), _result("B", 40)]
        assert rs.weak_categories(results) == ["B", "C"]


class TestRankByWeakness:
    def test_orders_by_category_mean(self):
        results = [_result("Databases", 20), _result("Frontend", 80)]
        ranked = rs.rank_by_weakness(CATALOG, results)
        assert ranked == [SQL, REACT, NODE, SORTING, SECURITY]

    def test_zero_average_ranks_first(self):
        ranked = rs.rank_by_weakness(CATALOG, [_result("Algorithms", 0), _result("Frontend", 10)])
        assert ranked[:2] == [SORTING, REACT]

    def test_no_results_keeps_catalog_order(self):
        assert rs.rank_by_weakness(CATALOG, []) == CATALOG


class TestStoredRecommendations:
    def test_specialization_items_are_private(self, db, make_user):
        owner = make_user(semester="8", specialization="Data Management")
        other = make_user()

        mine = {r.title for r in store.list_recommendations(db, owner.id)}
        theirs = {r.title for r in store.list_recommendations(db, other.id)}
        assert "Course: Advanced SQL for Data Management" in mine
        assert "Course: Advanced SQL for Data Management" not in theirs
        assert len(mine) == len(theirs) + 2

    def test_personalized_limit(self, db, make_user):
        user = make_user()
        entries = rs.personalized(db, user, limit=2)
        assert len(entries) == 2
        assert all(e["progress"] == 0 and e["completed"] is False for e in entries)

    def test_progress_and_complete(self, db, make_user):
        user = make_user()
        entry = rs.update_progress(db, user.id, "1", 40)
        assert entry["progress"] == 40
        assert entry["completed"] is False

        entry = rs.complete(db, user.id, "1")
        assert entry["progress"] == 100
        assert entry["completed"] is True

        ranked = {e["recommendation"].id: e for e in rs.ranked_for_user(db, user.id)}
        assert ranked["1"]["completed"] is True
        assert ranked["2"]["progress"] == 0

    def test_unknown_recommendation(self, db, make_user):
        user = make_user()
        with pytest.raises(NotFoundError):
            rs.update_progress(db, user.id, "nope", 10)

    def test_other_users_item_not_visible(self, db, make_user):
        owner = make_user(semester="8", specialization="Cross-Platform Programming")
        other = make_user()
        owned = [r for r in store.list_recommendations(db, owner.id) if r.owner_id == owner.id]
        with pytest.raises(NotFoundError):
            rs.complete(db, other.id, owned[0].id)
