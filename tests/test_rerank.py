"""Unit tests for keyword boosting and re-ranking."""

import pytest

from community_os.search.keywords import extract_keywords
from community_os.search.rerank import (
    MAX_BOOST,
    calculate_keyword_boost,
    combine_scores,
    rerank_profiles,
)
from tests.helpers import make_profile


class TestCalculateKeywordBoost:
    """Tests for calculate_keyword_boost()."""

    def test_exact_phrase_skill_match(self):
        """Test a skill containing the whole query uses the higher weight."""
        profile = make_profile(skills=["Computer Vision", "Python"])

        boost, matched = calculate_keyword_boost(
            profile, extract_keywords("computer vision"), query="computer vision"
        )

        # min(0.4, 1/2 * 0.5)
        assert boost == pytest.approx(0.25)
        assert matched.skills == ["Computer Vision"]

    def test_keyword_skill_match(self):
        """Test a partial keyword hit is capped at the lower skill weight."""
        profile = make_profile(skills=["Vision Systems", "Python"])

        boost, matched = calculate_keyword_boost(
            profile, extract_keywords("computer vision"), query="computer vision"
        )

        # min(0.2, 1/2 * 0.5)
        assert boost == pytest.approx(0.2)
        assert matched.skills == ["Vision Systems"]

    def test_parsed_skills_count_toward_ratio(self):
        """Test supplementary skills join the skill list used for the ratio."""
        profile = make_profile(skills=["Rust"], parsed_skills=["Go", "Kubernetes", "Terraform"])

        boost, matched = calculate_keyword_boost(profile, {"rust"}, query="rust")

        # min(0.4, 1/4 * 0.5)
        assert boost == pytest.approx(0.125)
        assert matched.skills == ["Rust"]

    def test_interest_match(self):
        """Test interest hits contribute ratio * 0.2."""
        profile = make_profile(interests=["hiking", "chess", "cooking"])

        boost, matched = calculate_keyword_boost(profile, {"hiking"}, query="hiking")

        assert boost == pytest.approx(0.2 / 3)
        assert matched.interests == ["hiking"]

    def test_can_help_and_needs_help(self):
        """Test help fields each add a flat 0.1 and are flagged."""
        profile = make_profile(
            can_help="Rust code review", needs_help="finding Rust contributors"
        )

        boost, matched = calculate_keyword_boost(profile, {"rust"}, query="rust")

        assert boost == pytest.approx(0.2)
        assert matched.can_help is True
        assert matched.needs_help is True

    def test_bio_snippet_is_truncated(self):
        """Test a bio hit reports the first 100 characters."""
        bio = "Rust developer. " + "x" * 200
        profile = make_profile(bio=bio)

        boost, matched = calculate_keyword_boost(profile, {"rust"}, query="rust")

        assert boost == pytest.approx(0.05)
        assert matched.bio == bio[:100]

    def test_enhanced_bio_used_when_bio_does_not_match(self):
        """Test the enhanced bio fills the snippet when the bio misses."""
        profile = make_profile(bio="Backend engineer", enhanced_bio="Writes Rust daily")

        boost, matched = calculate_keyword_boost(profile, {"rust"}, query="rust")

        assert boost == pytest.approx(0.05)
        assert matched.bio == "Writes Rust daily"

    def test_startup_keywords(self):
        """Test startup queries boost founders and named startups."""
        profile = make_profile(has_startup=True, startup_name="Acme")

        boost, _ = calculate_keyword_boost(
            profile, extract_keywords("startup founders"), query="startup founders"
        )

        assert boost == pytest.approx(0.15)

    def test_fundraising_help_founder(self):
        """Test a fundraising helper with a named startup collects help and startup boosts."""
        profile = make_profile(
            has_startup=True, startup_name="Acme", can_help="fundraising strategy"
        )

        boost, matched = calculate_keyword_boost(
            profile, extract_keywords("fundraising help"), query="fundraising help"
        )

        # can-help 0.1 + startup 0.1 + startup name 0.05
        assert boost == pytest.approx(0.25)
        assert matched.can_help is True

    def test_startup_boost_needs_startup_keyword(self):
        """Test founders get nothing extra for unrelated queries."""
        profile = make_profile(has_startup=True, startup_name="Acme")

        boost, _ = calculate_keyword_boost(profile, {"rust"}, query="rust")

        assert boost == 0.0

    def test_boost_is_capped(self):
        """Test the sum of all contributions never exceeds 0.5."""
        profile = make_profile(
            skills=["Rust"],
            interests=["rust meetups"],
            can_help="rust",
            needs_help="rust",
            bio="rust",
            enhanced_bio="rust",
        )

        boost, _ = calculate_keyword_boost(profile, {"rust"}, query="rust")

        assert boost == MAX_BOOST

    def test_no_keywords_no_boost(self):
        """Test a profile with no matching field gets zero and an empty match set."""
        profile = make_profile(skills=["Go"], bio="Designer")

        boost, matched = calculate_keyword_boost(profile, {"rust"}, query="rust")

        assert boost == 0.0
        assert matched.to_dict() == {}


class TestCombineScores:
    """Tests for combine_scores()."""

    def test_default_weighting(self):
        """Test weak boosts use a 0.7/0.3 split."""
        assert combine_scores(0.8, 0.1) == pytest.approx(0.8 * 0.7 + 0.1 * 0.3)

    def test_strong_boost_weighting(self):
        """Test boosts above 0.3 use a 0.5/0.5 split."""
        assert combine_scores(0.8, 0.5) == pytest.approx(0.65)

    def test_boundary_uses_default_weighting(self):
        """Test a boost of exactly 0.3 is not treated as strong."""
        assert combine_scores(1.0, 0.3) == pytest.approx(0.79)

    def test_clamped_to_one(self):
        """Test out-of-range similarity still yields at most 1.0."""
        assert combine_scores(2.0, 0.5) == 1.0


class TestRerankProfiles:
    """Tests for rerank_profiles()."""

    def test_keyword_hit_overtakes_slightly_closer_embedding(self):
        """Test a can-help hit lifts a candidate above a closer but unrelated one."""
        helper = make_profile(1, "Helper", can_help="fundraising and investor intros")
        bystander = make_profile(2, "Bystander", bio="Frontend developer")

        ranked = rerank_profiles([(bystander, 0.52), (helper, 0.5)], "fundraising help")

        assert [m.profile.id for m in ranked] == [1, 2]
        assert ranked[0].relevance_score == pytest.approx(0.38)
        assert ranked[0].matched_fields.can_help is True
        assert ranked[0].similarity_score == 0.5
        assert ranked[1].relevance_score == pytest.approx(0.364)

    def test_fundraising_help_founder_uses_default_weighting(self):
        """Test a 0.25 boost stays under the strong threshold and blends 0.7/0.3."""
        founder = make_profile(
            1, has_startup=True, startup_name="Acme", can_help="fundraising strategy"
        )

        ranked = rerank_profiles([(founder, 0.6)], "fundraising help")

        assert ranked[0].relevance_score == pytest.approx(0.6 * 0.7 + 0.25 * 0.3)

    def test_fundraising_skill_tips_into_strong_weighting(self):
        """Test an extra skill hit lifts the boost past 0.3 and switches to 0.5/0.5."""
        founder = make_profile(
            1,
            skills=["Fundraising"],
            has_startup=True,
            startup_name="Acme",
            can_help="fundraising strategy",
        )

        ranked = rerank_profiles([(founder, 0.6)], "fundraising help")

        # skill 0.2 + can-help 0.1 + startup 0.15 = 0.45
        assert ranked[0].relevance_score == pytest.approx(0.6 * 0.5 + 0.45 * 0.5)
        assert ranked[0].matched_fields.skills == ["Fundraising"]

    def test_reranking_is_repeatable(self):
        """Test two runs over the same candidates give the same ranking and scores."""
        candidates = [
            (make_profile(3, skills=["Rust"], interests=["hiking"]), 0.55),
            (make_profile(1, bio="Rust and Go"), 0.6),
            (make_profile(2, can_help="rust reviews", has_startup=True), 0.4),
            (make_profile(4), 0.7),
        ]

        first = rerank_profiles(candidates, "rust hiking")
        second = rerank_profiles(candidates, "rust hiking")

        assert first == second
        assert [m.to_dict() for m in first] == [m.to_dict() for m in second]

    def test_ties_broken_by_id(self):
        """Test equal relevance orders by profile id regardless of input order."""
        ranked = rerank_profiles(
            [(make_profile(5), 0.6), (make_profile(2), 0.6), (make_profile(9), 0.6)],
            "anything",
        )

        assert [m.profile.id for m in ranked] == [2, 5, 9]

    def test_every_candidate_is_returned(self):
        """Test re-ranking neither drops nor duplicates candidates."""
        candidates = [(make_profile(i), 0.1 * i) for i in range(1, 8)]

        ranked = rerank_profiles(candidates, "rust")

        assert sorted(m.profile.id for m in ranked) == list(range(1, 8))
        scores = [m.relevance_score for m in ranked]
        assert scores == sorted(scores, reverse=True)

    def test_empty_candidates(self):
        """Test an empty candidate list re-ranks to an empty list."""
        assert rerank_profiles([], "rust") == []
