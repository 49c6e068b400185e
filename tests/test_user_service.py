"""
tests/test_user_service.py — Signup, Profile & Suggestion Tests
================================================================
Uses an in-memory SQLite database via the shared conftest fixtures.
"""

from __future__ import annotations

import pytest

from conftest import EXPERT_PROFILE, FOUNDER_PROFILE, INVESTOR_PROFILE, make_user
from startupconnect.database.models import UserRole
from startupconnect.errors import EmailTaken, InvalidProfile, UserNotFound
from startupconnect.services import relationship_service as rs
from startupconnect.services import user_service as us


class TestCreateUser:
    def test_signup_fills_defaults(self, db_engine):
        user = us.create_user(
            db_engine,
            email="  Priya@Example.com ",
            name="Priya",
            role=UserRole.FOUNDER,
            profile=FOUNDER_PROFILE,
        )
        assert len(user.id) == 32
        assert user.email == "priya@example.com"
        assert user.role == "Startup Founder"
        assert user.profile["kind"] == "founder"
        assert user.profile["language"] == "en"
        assert user.profile["profile_picture_url"].startswith("https://placehold.co/")
        assert user.domains == "(Climate Tech)"
        assert user.connections == [] and user.requests_sent == [] and user.requests_received == []

    def test_explicit_id(self, db_engine):
        assert make_user(db_engine, "alice").id == "alice"

    def test_duplicate_email(self, db_engine):
        make_user(db_engine, "alice")
        with pytest.raises(EmailTaken):
            us.create_user(
                db_engine,
                email="ALICE@example.com",
                name="Other Alice",
                role=UserRole.FOUNDER,
                profile=FOUNDER_PROFILE,
            )

    def test_duplicate_id(self, db_engine):
        make_user(db_engine, "alice")
        with pytest.raises(InvalidProfile) as exc_info:
            us.create_user(
                db_engine,
                email="new@example.com",
                name="Alice Again",
                role=UserRole.FOUNDER,
                profile=FOUNDER_PROFILE,
                user_id="alice",
            )
        assert exc_info.value.field == "id"

    @pytest.mark.parametrize(
        ("kwargs", "field"),
        [
            ({"email": "not-an-email"}, "email"),
            ({"name": "   "}, "name"),
            ({"role": "Astronaut"}, "role"),
            ({"profile": EXPERT_PROFILE}, None),
        ],
    )
    def test_invalid_signup(self, db_engine, kwargs, field):
        args = {
            "email": "x@example.com",
            "name": "X",
            "role": UserRole.FOUNDER,
            "profile": FOUNDER_PROFILE,
        }
        args.update(kwargs)
        with pytest.raises(InvalidProfile) as exc_info:
            us.create_user(db_engine, **args)
        if field:
            assert exc_info.value.field == field


class TestGetAndUpdate:
    def test_get_user_includes_id_sets(self, db_engine, members):
        rs.send_request(db_engine, "alice", "bob")
        rs.send_request(db_engine, "carol", "alice")

        alice = us.get_user(db_engine, "alice")
        assert alice.requests_sent == ["bob"]
        assert alice.requests_received == ["carol"]
        assert alice.connections == []

    def test_get_unknown(self, db_engine):
        with pytest.raises(UserNotFound):
            us.get_user(db_engine, "nobody")

    def test_update_name_keeps_profile(self, db_engine, members):
        updated = us.update_profile(db_engine, "alice", name="Alice Sharma")
        assert updated.name == "Alice Sharma"
        assert updated.profile["startup_name"] == "Solarly"

    def test_role_change_needs_matching_profile(self, db_engine, members):
        with pytest.raises(InvalidProfile):
            us.update_profile(db_engine, "alice", role=UserRole.INDUSTRY_EXPERT)
        assert us.get_user(db_engine, "alice").role == "Startup Founder"

        updated = us.update_profile(
            db_engine, "alice", role=UserRole.INDUSTRY_EXPERT, profile=EXPERT_PROFILE
        )
        assert updated.role == "Industry Expert"
        assert updated.profile["kind"] == "expert"

    def test_investor_role_switch_keeps_investor_profile(self, db_engine, members):
        updated = us.update_profile(db_engine, "bob", role=UserRole.VENTURE_CAPITALIST)
        assert updated.role == "Venture Capitalist"
        assert updated.profile["investment_focus"] == INVESTOR_PROFILE["investment_focus"]

    def test_update_unknown(self, db_engine):
        with pytest.raises(UserNotFound):
            us.update_profile(db_engine, "nobody", name="Ghost")


class TestSuggestions:
    def test_excludes_self_and_linked_members(self, db_engine, members):
        make_user(db_engine, "dave", UserRole.FOUNDER)
        rs.send_request(db_engine, "alice", "bob")

        ids = [m.id for m in us.suggest_connections(db_engine, "alice")]
        assert "alice" not in ids
        assert "bob" not in ids
        assert sorted(ids) == ["carol", "dave"]

    def test_shared_industry_first(self, db_engine, members):
        make_user(
            db_engine,
            "erin",
            UserRole.FOUNDER,
            profile=dict(FOUNDER_PROFILE, industry="Gaming"),
        )
        ids = [m.id for m in us.suggest_connections(db_engine, "alice", limit=10)]
        # bob invests in Climate Tech, alice's industry
        assert ids[0] == "bob"
        assert set(ids) == {"bob", "carol", "erin"}

    def test_limit(self, db_engine, members):
        assert len(us.suggest_connections(db_engine, "alice", limit=1)) == 1

    def test_summaries_keep_order(self, db_engine, members):
        summaries = us.get_summaries(db_engine, ["carol", "nobody", "alice"])
        assert [s.id for s in summaries] == ["carol", "alice"]
        assert summaries[0].domains == "(Fundraising)"
        assert summaries[1].location == "Bengaluru"
