"""
tests/test_search_service.py — People & Post Search Tests
==========================================================
Uses an in-memory SQLite database via the shared conftest fixtures.
"""

from __future__ import annotations

from unittest.mock import patch

from conftest import FOUNDER_PROFILE, make_user
from startupconnect.database.models import UserRole
from startupconnect.engine.profiles import parse_profile
from startupconnect.services import engagement_service as es
from startupconnect.services import search_service
from startupconnect.services.search_service import SearchFilters, profile_matches, search


def _ids(results) -> list[str]:
    return sorted(u.id for u in results.users)


class TestPeopleSearch:
    def test_no_term_returns_everyone(self, db_engine, members):
        assert _ids(search(db_engine)) == ["alice", "bob", "carol"]

    def test_term_matches_name_or_bio_case_insensitively(self, db_engine, members):
        assert _ids(search(db_engine, "ALICE")) == ["alice"]
        assert _ids(search(db_engine, "first round")) == ["carol"]

    def test_role_filter(self, db_engine, members):
        results = search(db_engine, filters=SearchFilters(role=UserRole.ANGEL_INVESTOR))
        assert _ids(results) == ["bob"]

    def test_industry_matches_founders_and_investors(self, db_engine, members):
        make_user(
            db_engine, "dave", UserRole.FOUNDER,
            profile=dict(FOUNDER_PROFILE, industry="Gaming"),
        )
        results = search(db_engine, filters=SearchFilters(industry="Climate Tech"))
        assert _ids(results) == ["alice", "bob"]

    def test_funding_stage_and_location(self, db_engine, members):
        assert _ids(search(db_engine, filters=SearchFilters(funding_stage="Series A"))) == ["bob"]
        assert _ids(search(db_engine, filters=SearchFilters(location="bengal"))) == ["alice"]

    def test_expertise(self, db_engine, members):
        results = search(db_engine, filters=SearchFilters(expertise="Fundraising"))
        assert _ids(results) == ["carol"]

    def test_excluded_member_does_not_use_a_result_slot(self, db_engine, members):
        with patch.object(search_service, "MAX_RESULTS", 2):
            results = search(db_engine, exclude_user_id="alice")
        assert _ids(results) == ["bob", "carol"]


class TestPostSearch:
    def test_posts_match_term(self, db_engine, members):
        hit = es.create_post(db_engine, "alice", "Looking for a 50% discount on solar panels")
        es.create_post(db_engine, "bob", "Office hours this Friday")

        results = search(db_engine, "solar")
        assert [p.id for p in results.posts] == [hit.id]

    def test_like_wildcards_are_literal(self, db_engine, members):
        hit = es.create_post(db_engine, "alice", "We grew 50% month over month")
        es.create_post(db_engine, "alice", "We grew 500 users")

        assert [p.id for p in search(db_engine, "50%").posts] == [hit.id]


def test_profile_matches_requires_every_filter():
    profile = parse_profile(UserRole.FOUNDER, FOUNDER_PROFILE)
    assert profile_matches(profile, SearchFilters(industry="Climate Tech", funding_stage="Seed"))
    assert not profile_matches(profile, SearchFilters(industry="Climate Tech", funding_stage="Series A"))
    assert not profile_matches(profile, SearchFilters(expertise="Legal"))
