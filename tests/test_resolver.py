from auto_site_drafter.dictionaries import DEFAULT_PROFILE_ID, INDUSTRY_PROFILES
from auto_site_drafter.models.requirements import Requirements
from auto_site_drafter.normalizer import normalize_requirements
from auto_site_drafter.resolver import IndustryProfileResolver


def _requirements(**fields) -> Requirements:
    return normalize_requirements({"businessName": "Acme", **fields})


def test_design_studio_resolves_to_creative_profile(aurora_payload):
    profile = IndustryProfileResolver().resolve(normalize_requirements(aurora_payload))

    assert profile.id == "creative"


def test_explicit_profile_id_wins():
    resolver = IndustryProfileResolver()

    assert resolver.resolve(_requirements(industry="restaurant", description="a law firm")).id == "restaurant"


def test_industry_text_outweighs_description():
    profile = IndustryProfileResolver().resolve(
        _requirements(industry="family law attorney", description="We also run a small cafe")
    )

    assert profile.id == "legal"


def test_unknown_industry_falls_back_to_default():
    profile = IndustryProfileResolver().resolve(_requirements(industry="zeppelin repairs"))

    assert profile.id == DEFAULT_PROFILE_ID


def test_resolution_is_deterministic(bistro_payload):
    resolver = IndustryProfileResolver()
    requirements = normalize_requirements(bistro_payload)

    assert resolver.resolve(requirements) == resolver.resolve(requirements)


def test_multi_word_keywords_score_by_word_count():
    resolver = IndustryProfileResolver()
    creative = next(profile for profile in INDUSTRY_PROFILES if profile.id == "creative")

    # Whole phrases score their word count; "interior design" overlaps on one token
    assert resolver.score(creative, "a small design studio") == 4.5
    assert resolver.score(creative, "") == 0.0
