"""Economic calendar.

Fetches today's macro-economic releases from Financial Modeling Prep and
falls back to a curated sample whenever the live source cannot be used.
The caller is always told which source it got.
"""

import logging
from datetime import date, datetime
from typing import Any, Optional

import pytz
import requests
from pydantic import BaseModel, Field

from tradeflow.models import EconomicEvent

logger = logging.getLogger(__name__)

FMP_CALENDAR_URL = "https://financialmodelingprep.com/api/v3/economic_calendar"

IMPACT_LEVELS = ("High", "Medium", "Low")

SOURCE_LIVE = "live"
SOURCE_SAMPLE = "sample"

_EVENT_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


class CalendarResult(BaseModel):
    """Events plus the source they came from."""

    events: list[EconomicEvent] = Field(default_factory=list)
    source: str = Field(..., description="'live' or 'sample'")

    model_config = {"frozen": True}

    @property
    def is_fallback(self) -> bool:
        return self.source == SOURCE_SAMPLE


def _utc_today() -> date:
    return datetime.now(pytz.utc).date()


def get_sample_events(today: Optional[date] = None) -> list[dict]:
    """Curated releases dated today (UTC), in the provider's raw shape."""
    day = (today or _utc_today()).isoformat()
    rows = [
        ("Non-Farm Payrolls", "USD", "High", "13:30:00", "275K", "250K", "229K", "US"),
        ("Unemployment Rate", "USD", "High", "13:30:00", "3.7%", "3.8%", "3.7%", "US"),
        ("ISM Manufacturing PMI", "USD", "High", "15:00:00", "49.1", "47.5", "47.4", "US"),
        ("BOE Interest Rate Decision", "GBP", "High", "12:00:00", "5.25%", "5.25%", "5.25%", "GB"),
        ("ECB Monetary Policy Statement", "EUR", "High", "12:45:00", None, None, None, "EU"),
        ("French Flash Manufacturing PMI", "EUR", "Medium", "08:15:00", "42.5", "43.1", "42.8", "FR"),
        ("Flash Manufacturing PMI", "GBP", "Medium", "09:30:00", "47.3", "46.5", "46.2", "GB"),
        ("BOJ Monetary Policy Minutes", "JPY", "Medium", "00:30:00", None, None, None, "JP"),
        ("Core Retail Sales m/m", "CAD", "High", "13:30:00", "0.6%", "0.4%", "-0.3%", "CA"),
        ("German Ifo Business Climate", "EUR", "High", "09:00:00", "86.0", "85.5", "85.2", "DE"),
        ("CB Consumer Confidence", "USD", "High", "15:00:00", "110.7", "114.0", "114.8", "US"),
        ("FOMC Meeting Minutes", "USD", "High", "19:00:00", None, None, None, "US"),
        ("CPI y/y", "GBP", "High", "07:00:00", "4.0%", "4.1%", "4.0%", "GB"),
        ("Core Durable Goods Orders m/m", "USD", "Medium", "13:30:00", "0.1%", "0.2%", "-0.3%", "US"),
        ("Advance GDP q/q", "USD", "High", "13:30:00", "3.3%", "2.0%", "4.9%", "US"),
        ("Core CPI y/y", "JPY", "High", "00:30:00", "2.3%", "2.3%", "2.5%", "JP"),
        ("ECB Press Conference", "EUR", "High", "13:45:00", None, None, None, "EU"),
        ("Core PCE Price Index m/m", "USD", "High", "13:30:00", "0.2%", "0.2%", "0.1%", "US"),
        ("GDP m/m", "CAD", "High", "13:30:00", "0.2%", "0.1%", "-0.1%", "CA"),
        ("German CPI m/m", "EUR", "Low", "13:00:00", "0.2%", "0.3%", "0.1%", "DE"),
        ("Richmond Manufacturing Index", "USD", "Low", "15:00:00", "-15", "-10", "-11", "US"),
        ("Pending Home Sales m/m", "USD", "Low", "15:00:00", "8.3%", "1.5%", "-0.3%", "US"),
        ("Retail Sales m/m", "CAD", "Medium", "13:30:00", "0.9%", "0.8%", "-0.2%", "CA"),
        ("Revised GDP q/q", "GBP", "Medium", "07:00:00", "-0.3%", "-0.1%", "-0.1%", "GB"),
    ]
    return [
        {
            "event": event,
            "currency": currency,
            "impact": impact,
            "date": f"{day} {clock}",
            "actual": actual,
            "estimate": estimate,
            "previous": previous,
            "country": country,
        }
        for event, currency, impact, clock, actual, estimate, previous, country in rows
    ]


def classify_impact(value: Any) -> str:
    """Map a provider impact label onto High / Medium / Low (default Low)."""
    if isinstance(value, str):
        for level in IMPACT_LEVELS:
            if value.strip().lower() == level.lower():
                return level
    return "Low"


def parse_indicator(value: Any) -> Optional[float]:
    """Read a reported figure such as "275K" or "-0.3%" as a number."""
    if value is None:
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    text = str(value).strip().replace("%", "").replace("K", "").replace("k", "")
    try:
        return float(text)
    except ValueError:
        return None


def compare_to_forecast(actual: Any, forecast: Any) -> Optional[str]:
    """Whether the actual figure beat, met, or missed the forecast.

    Returns:
        "beat", "met", "missed", or None when either side is not numeric.
    """
    actual_value = parse_indicator(actual)
    forecast_value = parse_indicator(forecast)
    if actual_value is None or forecast_value is None:
        return None
    if actual_value > forecast_value:
        return "beat"
    if actual_value < forecast_value:
        return "missed"
    return "met"


def to_local_time(value: str, timezone: Optional[str] = None) -> Optional[datetime]:
    """Convert a UTC release time to the given zone, or the system zone.

    Args:
        value: UTC time as 'YYYY-MM-DD HH:MM:SS'.
        timezone: IANA zone name (e.g., 'Asia/Kolkata').

    Returns:
        Timezone-aware datetime, or None if the value or zone is invalid.
    """
    try:
        utc_time = pytz.utc.localize(datetime.strptime(value, _EVENT_TIME_FORMAT))
    except (TypeError, ValueError):
        return None
    if not timezone:
        return utc_time.astimezone()
    try:
        return utc_time.astimezone(pytz.timezone(timezone))
    except pytz.UnknownTimeZoneError:
        logger.warning("Unknown timezone %s, using system time zone", timezone)
        return utc_time.astimezone()


def _optional_text(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def _optional_float(value: Any) -> Optional[float]:
    try:
        return None if value is None else float(value)
    except (TypeError, ValueError):
        return None


def map_events(raw_events: list[Any], timezone: Optional[str] = None) -> list[EconomicEvent]:
    """Convert provider records into EconomicEvent models."""
    events = []
    for item in raw_events:
        if not isinstance(item, dict):
            continue
        when = str(item.get("date") or "")
        actual = _optional_text(item.get("actual"))
        forecast = _optional_text(item.get("estimate"))
        events.append(
            EconomicEvent(
                event=str(item.get("event") or ""),
                currency=str(item.get("currency") or ""),
                impact=classify_impact(item.get("impact")),
                date=when,
                local_time=to_local_time(when, timezone),
                actual=actual,
                forecast=forecast,
                previous=_optional_text(item.get("previous")),
                country=str(item.get("country") or ""),
                change=_optional_float(item.get("change")),
                change_percentage=_optional_float(item.get("changePercentage")),
                surprise=compare_to_forecast(actual, forecast),
            )
        )
    return events


def fetch_economic_calendar(
    api_key: Optional[str] = None,
    today: Optional[date] = None,
    timezone: Optional[str] = None,
    timeout: Optional[float] = None,
) -> CalendarResult:
    """Get today's economic releases.

    A single request is made when an API key is configured. Any failure
    (no key, non-2xx status, network error, empty or non-list payload)
    serves the sample events instead. There is no retry.

    Args:
        api_key: Financial Modeling Prep API key.
        today: Day to fetch, defaults to the current UTC date.
        timezone: Zone to convert release times into.
        timeout: Optional request timeout in seconds.

    Returns:
        CalendarResult tagged with source 'live' or 'sample'.
    """
    today = today or _utc_today()
    day = today.isoformat()

    if api_key and api_key != "demo":
        try:
            response = requests.get(
                FMP_CALENDAR_URL,
                params={"from": day, "to": day, "apikey": api_key},
                timeout=timeout,
            )
            if response.ok:
                data = response.json()
                if isinstance(data, list) and data:
                    return CalendarResult(events=map_events(data, timezone), source=SOURCE_LIVE)
            logger.info("Calendar API returned %s, using sample data", response.status_code)
        except (requests.RequestException, ValueError) as e:
            logger.warning("Calendar API error, using sample data: %s", e)

    return CalendarResult(
        events=map_events(get_sample_events(today), timezone), source=SOURCE_SAMPLE
    )


def filter_by_impact(events: list[EconomicEvent], impact: Optional[str]) -> list[EconomicEvent]:
    if not impact:
        return events
    level = classify_impact(impact)
    return [event for event in events if event.impact == level]
