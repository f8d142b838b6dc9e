"""Tests for the economic calendar.

**Feature: tradeflow**
"""

from datetime import date, datetime
from unittest.mock import MagicMock, patch

import pytest
import pytz
import requests

from tradeflow.economic_calendar import (
    FMP_CALENDAR_URL,
    SOURCE_LIVE,
    SOURCE_SAMPLE,
    classify_impact,
    compare_to_forecast,
    fetch_economic_calendar,
    filter_by_impact,
    get_sample_events,
    map_events,
    parse_indicator,
    to_local_time,
)


TODAY = date(2024, 6, 10)

LIVE_EVENT = {
    "event": "CPI y/y",
    "currency": "USD",
    "impact": "High",
    "date": "2024-06-10 12:30:00",
    "actual": 3.4,
    "estimate": 3.3,
    "previous": 3.5,
    "country": "US",
    "change": -0.1,
    "changePercentage": -2.86,
}


def mock_response(payload, ok=True, status_code=200):
    response = MagicMock()
    response.ok = ok
    response.status_code = status_code
    response.json.return_value = payload
    return response


class TestFetchFallback:
    """
    **Feature: tradeflow, Property 29: Calendar Fallback**
    **Validates: Requirements 6.1**

    Any failure of the live source serves the sample, tagged as such.
    """

    def test_live_data(self):
        with patch("tradeflow.economic_calendar.requests.get") as mock_get:
            mock_get.return_value = mock_response([LIVE_EVENT])

            result = fetch_economic_calendar("key", today=TODAY, timezone="UTC")

        assert result.source == SOURCE_LIVE
        assert not result.is_fallback
        assert result.events[0].event == "CPI y/y"
        assert result.events[0].surprise == "beat"
        mock_get.assert_called_once_with(
            FMP_CALENDAR_URL,
            params={"from": "2024-06-10", "to": "2024-06-10", "apikey": "key"},
            timeout=None,
        )

    def test_no_api_key_uses_sample(self):
        with patch("tradeflow.economic_calendar.requests.get") as mock_get:
            result = fetch_economic_calendar(None, today=TODAY)

        assert result.is_fallback
        assert len(result.events) == len(get_sample_events(TODAY))
        mock_get.assert_not_called()

    @pytest.mark.parametrize(
        "response",
        [
            mock_response([], ok=True),
            mock_response({"error": "limit"}, ok=True),
            mock_response([LIVE_EVENT], ok=False, status_code=403),
        ],
    )
    def test_unusable_response_uses_sample(self, response):
        with patch("tradeflow.economic_calendar.requests.get", return_value=response):
            result = fetch_economic_calendar("key", today=TODAY)

        assert result.source == SOURCE_SAMPLE

    def test_network_error_uses_sample(self):
        with patch(
            "tradeflow.economic_calendar.requests.get",
            side_effect=requests.ConnectionError("offline"),
        ) as mock_get:
            result = fetch_economic_calendar("key", today=TODAY)

        assert result.source == SOURCE_SAMPLE
        assert mock_get.call_count == 1

    def test_invalid_json_uses_sample(self):
        response = mock_response(None)
        response.json.side_effect = ValueError("bad json")
        with patch("tradeflow.economic_calendar.requests.get", return_value=response):
            result = fetch_economic_calendar("key", today=TODAY)

        assert result.is_fallback


class TestEventMapping:
    """
    **Feature: tradeflow, Property 30: Event Mapping**
    **Validates: Requirements 6.1**
    """

    def test_sample_events_are_dated_today(self):
        events = get_sample_events(TODAY)

        assert events
        assert all(event["date"].startswith("2024-06-10 ") for event in events)

    def test_sample_events_default_to_utc_date(self):
        # 20:30 in New York is already the next day in UTC
        def now(tz=None):
            if tz is pytz.utc:
                return datetime(2024, 6, 11, 0, 30, tzinfo=pytz.utc)
            return datetime(2024, 6, 10, 20, 30)

        with patch("tradeflow.economic_calendar.datetime") as mock_datetime:
            mock_datetime.now.side_effect = now
            events = get_sample_events()

        assert all(event["date"].startswith("2024-06-11 ") for event in events)

    def test_fetch_defaults_to_utc_date(self):
        with patch("tradeflow.economic_calendar._utc_today", return_value=TODAY):
            with patch("tradeflow.economic_calendar.requests.get") as mock_get:
                mock_get.return_value = mock_response([LIVE_EVENT])

                fetch_economic_calendar("key", timezone="UTC")

        assert mock_get.call_args.kwargs["params"]["from"] == "2024-06-10"

    def test_impact_classification(self):
        assert classify_impact("high") == "High"
        assert classify_impact(" Medium ") == "Medium"
        assert classify_impact("None") == "Low"
        assert classify_impact(None) == "Low"

    def test_parse_indicator(self):
        assert parse_indicator("275K") == 275
        assert parse_indicator("-0.3%") == -0.3
        assert parse_indicator(None) is None
        assert parse_indicator("n/a") is None

    def test_compare_to_forecast(self):
        assert compare_to_forecast("275K", "250K") == "beat"
        assert compare_to_forecast("3.7%", "3.8%") == "missed"
        assert compare_to_forecast("5.25%", "5.25%") == "met"
        assert compare_to_forecast(None, "1") is None

    def test_local_time_conversion(self):
        local = to_local_time("2024-06-10 12:30:00", "Asia/Kolkata")

        assert (local.hour, local.minute) == (18, 0)

    def test_bad_time_is_none(self):
        assert to_local_time("soon", "UTC") is None

    def test_map_events_skips_non_objects(self):
        events = map_events([LIVE_EVENT, "junk"], timezone="UTC")

        assert len(events) == 1
        assert events[0].forecast == "3.3"
        assert events[0].change_percentage == -2.86

    def test_filter_by_impact(self):
        events = map_events(get_sample_events(TODAY), timezone="UTC")

        high = filter_by_impact(events, "high")

        assert high
        assert all(event.impact == "High" for event in high)
        assert filter_by_impact(events, None) == events
