"""
tests/test_profiles.py — Role-Tagged Profile Validation Tests
==============================================================
Pure pydantic checks: no database involved.
"""

from __future__ import annotations

import pytest

from conftest import EXPERT_PROFILE, FOUNDER_PROFILE, INVESTOR_PROFILE
from startupconnect.constants import default_profile_picture
from startupconnect.database.models import UserRole
from startupconnect.engine.profiles import (
    ExpertProfile,
    FounderProfile,
    InvestorProfile,
    display_domains,
    parse_profile,
    profile_kind_for,
    profile_to_json,
)
from startupconnect.errors import InvalidProfile


class TestRoleToKind:
    @pytest.mark.parametrize(
        ("role", "kind"),
        [
            (UserRole.FOUNDER, "founder"),
            (UserRole.ANGEL_INVESTOR, "investor"),
            (UserRole.VENTURE_CAPITALIST, "investor"),
            (UserRole.INDUSTRY_EXPERT, "expert"),
            ("Venture Capitalist", "investor"),
        ],
    )
    def test_every_role_has_a_kind(self, role, kind):
        assert profile_kind_for(role) == kind

    def test_unknown_role(self):
        with pytest.raises(InvalidProfile) as exc_info:
            profile_kind_for("Astronaut")
        assert exc_info.value.field == "role"


class TestParseProfile:
    def test_founder(self):
        profile = parse_profile(UserRole.FOUNDER, FOUNDER_PROFILE)
        assert isinstance(profile, FounderProfile)
        assert profile.startup_name == "Solarly"
        assert profile.language == "en"

    def test_investor_dedupes_focus(self):
        data = dict(INVESTOR_PROFILE, investment_focus=["FinTech", "FinTech", "AI/ML"])
        profile = parse_profile(UserRole.VENTURE_CAPITALIST, data)
        assert isinstance(profile, InvestorProfile)
        assert profile.investment_focus == ["FinTech", "AI/ML"]

    def test_expert(self):
        profile = parse_profile(UserRole.INDUSTRY_EXPERT, EXPERT_PROFILE)
        assert isinstance(profile, ExpertProfile)
        assert profile.years_of_experience == 12

    def test_founder_fields_rejected_for_investor(self):
        with pytest.raises(InvalidProfile):
            parse_profile(UserRole.ANGEL_INVESTOR, FOUNDER_PROFILE)

    def test_mismatched_kind_tag(self):
        data = dict(FOUNDER_PROFILE, kind="expert")
        with pytest.raises(InvalidProfile) as exc_info:
            parse_profile(UserRole.FOUNDER, data)
        assert exc_info.value.field == "kind"

    def test_matching_kind_tag_accepted(self):
        data = dict(FOUNDER_PROFILE, kind="founder")
        assert isinstance(parse_profile(UserRole.FOUNDER, data), FounderProfile)

    def test_unknown_industry_names_field(self):
        data = dict(FOUNDER_PROFILE, industry="Space Mining")
        with pytest.raises(InvalidProfile) as exc_info:
            parse_profile(UserRole.FOUNDER, data)
        assert exc_info.value.field == "industry"

    def test_negative_experience(self):
        data = dict(EXPERT_PROFILE, years_of_experience=-1)
        with pytest.raises(InvalidProfile) as exc_info:
            parse_profile(UserRole.INDUSTRY_EXPERT, data)
        assert exc_info.value.field == "years_of_experience"

    def test_investor_needs_a_focus(self):
        data = dict(INVESTOR_PROFILE, investment_focus=[])
        with pytest.raises(InvalidProfile) as exc_info:
            parse_profile(UserRole.ANGEL_INVESTOR, data)
        assert exc_info.value.field == "investment_focus"

    def test_unsupported_language(self):
        data = dict(FOUNDER_PROFILE, language="fr")
        with pytest.raises(InvalidProfile) as exc_info:
            parse_profile(UserRole.FOUNDER, data)
        assert exc_info.value.field == "language"

    def test_blank_website_is_none(self):
        profile = parse_profile(UserRole.FOUNDER, dict(FOUNDER_PROFILE, website="  "))
        assert profile.website is None

    def test_json_round_trip_keeps_kind(self):
        data = profile_to_json(parse_profile(UserRole.FOUNDER, FOUNDER_PROFILE))
        assert data["kind"] == "founder"
        assert isinstance(parse_profile(UserRole.FOUNDER, data), FounderProfile)


class TestDisplayDomains:
    def test_founder(self):
        assert display_domains(parse_profile(UserRole.FOUNDER, FOUNDER_PROFILE)) == "(Climate Tech)"

    def test_investor_shows_two(self):
        data = dict(INVESTOR_PROFILE, investment_focus=["B2B SaaS", "FinTech", "Gaming"])
        profile = parse_profile(UserRole.ANGEL_INVESTOR, data)
        assert display_domains(profile) == "(B2B SaaS, FinTech)"

    def test_expert(self):
        profile = parse_profile(UserRole.INDUSTRY_EXPERT, EXPERT_PROFILE)
        assert display_domains(profile) == "(Fundraising)"


def test_default_picture_uses_initial():
    assert default_profile_picture("priya") == "https://placehold.co/100x100.png?text=P"
    assert default_profile_picture("  ") == "https://placehold.co/100x100.png?text=U"
