"""Tier-based storage recommendations and weather advisories (English/Bengali)."""

from __future__ import annotations

from harvest_guard.models import (
    EnvironmentReading,
    Locale,
    Recommendation,
    RiskLevel,
    WeatherAdvisory,
)
from harvest_guard.services.risk_scoring import round_half_up


class RecommendationGenerator:
    """Pick one of four templates: aflatoxin, then high, medium, low."""

    def generate(
        self,
        risk_level: RiskLevel,
        aflatoxin_risk: bool,
        moisture: float,
        temperature: float,
        etcl_hours: float,
    ) -> Recommendation:
        hours = round_half_up(etcl_hours)
        moisture_pct = round_half_up(moisture)
        temp_c = round_half_up(temperature)

        if aflatoxin_risk:
            return Recommendation(
                text=(
                    f"High Risk of Aflatoxin Mold (ETCL: {hours} hours). Weather forecast suggests "
                    "high humidity, requiring immediate indoor aeration. Check storage and increase "
                    "ventilation immediately."
                ),
                text_localized=(
                    f"আফ্লাটক্সিন ছত্রাকের উচ্চ ঝুঁকি (ETCL: {hours} ঘন্টা)। আবহাওয়ার পূর্বাভাস উচ্চ "
                    "আর্দ্রতা প্রস্তাব করে, তাৎক্ষণিক অভ্যন্তরীণ বায়ু চলাচল প্রয়োজন। অবিলম্বে সংরক্ষণ "
                    "পরীক্ষা করুন এবং বায়ু চলাচল বাড়ান।"
                ),
            )
        if risk_level in ("high", "critical"):
            return Recommendation(
                text=(
                    f"High Risk of moisture damage detected. Moisture: {moisture_pct}%. Implement "
                    "aeration schedule and monitor daily for early signs of mold."
                ),
                text_localized=(
                    f"আর্দ্রতা ক্ষতির উচ্চ ঝুঁকি সনাক্ত করা হয়েছে। আর্দ্রতা: {moisture_pct}%। বায়ু "
                    "চলাচলের সময়সূচী প্রয়োগ করুন এবং ছত্রাকের প্রাথমিক লক্ষণের জন্য দৈনিক পর্যবেক্ষণ করুন।"
                ),
            )
        if risk_level == "medium":
            return Recommendation(
                text=(
                    "Moderate risk detected. Maintain regular monitoring schedule. Current "
                    f"conditions: Moisture {moisture_pct}%, Temperature {temp_c}°C. Schedule weekly "
                    "inspections."
                ),
                text_localized=(
                    "মাঝারি ঝুঁকি সনাক্ত করা হয়েছে। নিয়মিত পর্যবেক্ষণ সময়সূচী বজায় রাখুন। বর্তমান "
                    f"অবস্থা: আর্দ্রতা {moisture_pct}%, তাপমাত্রা {temp_c}°C। সাপ্তাহিক পরিদর্শন "
                    "নির্ধারণ করুন।"
                ),
            )
        return Recommendation(
            text=(
                "Low risk detected. Conditions are favorable. Continue regular monitoring and "
                "maintain proper storage practices."
            ),
            text_localized=(
                "কম ঝুঁকি সনাক্ত করা হয়েছে। অবস্থা অনুকূল। নিয়মিত পর্যবেক্ষণ চালিয়ে যান এবং সঠিক "
                "সংরক্ষণ অনুশীলন বজায় রাখুন।"
            ),
        )


def weather_advisories(reading: EnvironmentReading, locale: Locale = "en") -> list[WeatherAdvisory]:
    """Storage advisories for current conditions at a location."""

    bn = locale == "bn"
    temp = round_half_up(reading.temperature)
    humidity = round_half_up(reading.humidity)
    rain = round_half_up(reading.rain_chance)
    advisories: list[WeatherAdvisory] = []

    if reading.temperature > 32:
        advisories.append(
            WeatherAdvisory(
                level="high",
                title="উচ্চ তাপমাত্রা সতর্কতা" if bn else "High Temperature Alert",
                message=(
                    f"তাপমাত্রা {temp}°C। ফসল সুরক্ষার জন্য সঠিক বায়ু সংচালন নিশ্চিত করুন এবং ফসল ঢেকে রাখুন।"
                    if bn
                    else f"Temperature is {temp}°C. Ensure proper ventilation and cover crops to prevent heat damage."
                ),
            )
        )
    if reading.humidity > 75:
        advisories.append(
            WeatherAdvisory(
                level="high",
                title="উচ্চ আর্দ্রতার ঝুঁকি" if bn else "High Humidity Risk",
                message=(
                    f"আর্দ্রতা {humidity}%। ছত্রাক এবং ছত্রাকজনিত রোগের উচ্চ ঝুঁকি। বায়ু চলাচল বাড়ান এবং পচা পরীক্ষা করুন।"
                    if bn
                    else f"Humidity at {humidity}%. High risk of mold and fungal diseases. Increase aeration and check for rot."
                ),
            )
        )
    if reading.rain_chance > 70:
        advisories.append(
            WeatherAdvisory(
                level="medium",
                title="প্রবল বৃষ্টি প্রত্যাশিত" if bn else "Heavy Rain Expected",
                message=(
                    f"{rain}% বৃষ্টির সম্ভাবনা। নিকাশ নিশ্চিত করুন এবং সংরক্ষিত ফসল পানির ক্ষতি থেকে রক্ষা করতে ঢেকে রাখুন।"
                    if bn
                    else f"{rain}% chance of rain. Ensure drainage and cover stored crops to prevent water damage."
                ),
            )
        )
    if 20 < reading.temperature < 30 and reading.humidity < 65 and reading.rain_chance < 30:
        advisories.append(
            WeatherAdvisory(
                level="good",
                title="আদর্শ অবস্থা" if bn else "Ideal Conditions",
                message=(
                    "সংরক্ষণ এবং পর্যবেক্ষণের জন্য নিখুঁত আবহাওয়া। ফসল কম ঝুঁকিতে রয়েছে। নিয়মিত পরীক্ষা চালিয়ে যান।"
                    if bn
                    else "Perfect weather for storage and monitoring. Crops are at lower risk. Continue regular checks."
                ),
            )
        )
    return advisories


__all__ = ["RecommendationGenerator", "weather_advisories"]
