"""Tests for settings loading."""

from meal_feed.config import Settings


def test_scoring_weights_default_to_reference_values(settings: Settings) -> None:
    weights = settings.scoring
    assert weights.engagement == 2
    assert weights.nutrient_fit == 30
    assert weights.social == 8
    assert settings.reference_timezone == "Asia/Singapore"


def test_scoring_weights_read_from_nested_env(monkeypatch) -> None:
    monkeypatch.setenv("SCORING__SOCIAL", "12")
    monkeypatch.setenv("RECOMMENDATION_LIMIT", "5")

    settings = Settings(supabase_url="https://x.supabase.co", supabase_service_key="k")

    assert settings.scoring.social == 12
    assert settings.scoring.engagement == 2
    assert settings.recommendation_limit == 5


def test_log_level_defaults_to_info(settings: Settings) -> None:
    assert settings.log_level == "INFO"
