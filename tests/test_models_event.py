"""Tests for event and weather models."""

from datetime import date

import pytest

from fuji_calendar.models.event import (
    CalendarEvent,
    CalendarResponse,
    DayType,
    EventSubType,
    EventType,
    FujiEvent,
    StoredEventType,
)
from fuji_calendar.models.weather import WeatherInfo, WeatherRecommendation


class TestStoredEventType:
    """Tests for stored type mapping."""

    @pytest.mark.parametrize(
        "stored,expected",
        [
            (StoredEventType.DIAMOND_SUNRISE, (EventType.DIAMOND, EventSubType.SUNRISE)),
            (StoredEventType.DIAMOND_SUNSET, (EventType.DIAMOND, EventSubType.SUNSET)),
            (StoredEventType.PEARL_MOONRISE, (EventType.PEARL, EventSubType.RISING)),
            (StoredEventType.PEARL_MOONSET, (EventType.PEARL, EventSubType.SETTING)),
        ],
    )
    def test_to_public(self, stored, expected):
        assert stored.to_public() == expected


class TestFujiEvent:
    """Tests for the FujiEvent model."""

    def test_type_checks(self, make_event):
        diamond = make_event()
        pearl = make_event(event_type=EventType.PEARL, sub_type=EventSubType.RISING)

        assert diamond.is_diamond() and not diamond.is_pearl()
        assert pearl.is_pearl() and not pearl.is_diamond()

    def test_wire_format(self, make_event):
        data = make_event(quality_score=0.8).to_json_dict()

        assert data["date"] == "2025-06-10"
        assert data["subType"] == "sunrise"
        assert data["qualityScore"] == 0.8
        assert data["time"] == "2025-06-10T05:00:00+09:00"

    def test_parses_wire_format(self, make_event):
        event = make_event()
        assert FujiEvent.model_validate(event.to_json_dict()) == event

    def test_quality_score_range(self, make_event):
        with pytest.raises(ValueError):
            make_event(quality_score=1.5)


class TestCalendarEvent:
    """Tests for calendar day construction."""

    def test_both(self, make_event):
        day = CalendarEvent.from_events(
            date(2025, 6, 10),
            [make_event(), make_event(event_type=EventType.PEARL, sub_type=EventSubType.SETTING)],
        )
        assert day.type == DayType.BOTH

    def test_events_sorted_by_time(self, make_event):
        late = make_event(hour=18, sub_type=EventSubType.SUNSET)
        early = make_event(hour=5)

        day = CalendarEvent.from_events(date(2025, 6, 10), [late, early])

        assert day.type == DayType.DIAMOND
        assert day.events == [early, late]


class TestCalendarResponse:
    def test_all_events_and_dates(self, sample_calendar):
        assert len(sample_calendar.all_events()) == 3
        assert sample_calendar.event_dates() == [date(2025, 6, 10), date(2025, 6, 15)]

    def test_invalid_month(self):
        with pytest.raises(ValueError):
            CalendarResponse(year=2025, month=13)


class TestWeatherInfo:
    """Tests for the WeatherInfo model."""

    def test_is_shootable(self):
        good = WeatherInfo(
            condition="一部曇り", cloud_cover=40, visibility=12,
            recommendation=WeatherRecommendation.GOOD,
        )
        fair = good.model_copy(update={"recommendation": WeatherRecommendation.FAIR})

        assert good.is_shootable() is True
        assert fair.is_shootable() is False

    def test_cloud_cover_range(self):
        with pytest.raises(ValueError):
            WeatherInfo(
                condition="曇り", cloud_cover=120, visibility=5,
                recommendation=WeatherRecommendation.POOR,
            )

    def test_wire_keys(self, clear_weather):
        assert set(clear_weather.to_json_dict()) == {
            "condition", "cloudCover", "visibility", "recommendation",
        }
