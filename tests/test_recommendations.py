"""Recommendation templates and weather advisories."""

from __future__ import annotations

import pytest

from harvest_guard.models import EnvironmentReading
from harvest_guard.services.recommendations import RecommendationGenerator, weather_advisories


@pytest.fixture
def generator():
    return RecommendationGenerator()


class TestRecommendationGenerator:
    def test_aflatoxin_template_wins(self, generator):
        result = generator.generate("critical", True, 80, 32, 36.4)

        assert result.text.startswith("High Risk of Aflatoxin Mold (ETCL: 36 hours).")
        assert "36 ঘন্টা" in result.text_localized
        assert result.source == "deterministic"

    def test_aflatoxin_overrides_low_tier_text(self, generator):
        result = generator.generate("low", True, 50, 20, 200)
        assert result.text.startswith("High Risk of Aflatoxin Mold")

    @pytest.mark.parametrize("level", ["high", "critical"])
    def test_moisture_damage_template(self, generator, level):
        result = generator.generate(level, False, 72.5, 20, 60)

        assert "Moisture: 73%." in result.text
        assert "আর্দ্রতা: 73%" in result.text_localized

    def test_medium_template_reports_conditions(self, generator):
        result = generator.generate("medium", False, 66.4, 26.5, 100)
        assert "Moisture 66%, Temperature 27°C" in result.text

    def test_low_template(self, generator):
        result = generator.generate("low", False, 50, 20, 200)

        assert result.text.startswith("Low risk detected.")
        assert result.text_localized.startswith("কম ঝুঁকি")


class TestWeatherAdvisories:
    def test_stormy_heat(self):
        reading = EnvironmentReading(location="Khulna", temperature=33, humidity=80, rain_chance=75)
        advisories = weather_advisories(reading)

        assert [a.title for a in advisories] == [
            "High Temperature Alert",
            "High Humidity Risk",
            "Heavy Rain Expected",
        ]
        assert [a.level for a in advisories] == ["high", "high", "medium"]
        assert advisories[0].message.startswith("Temperature is 33°C.")

    def test_ideal_conditions(self):
        reading = EnvironmentReading(location="Rajshahi", temperature=25, humidity=50, rain_chance=10)
        advisories = weather_advisories(reading)

        assert len(advisories) == 1
        assert advisories[0].level == "good"

    def test_unremarkable_conditions_give_nothing(self):
        reading = EnvironmentReading(location="Dhaka", temperature=31, humidity=70, rain_chance=40)
        assert weather_advisories(reading) == []

    def test_bengali_titles(self):
        reading = EnvironmentReading(location="Sylhet", temperature=28, humidity=90, rain_chance=20)
        advisories = weather_advisories(reading, locale="bn")

        assert [a.title for a in advisories] == ["উচ্চ আর্দ্রতার ঝুঁকি"]
