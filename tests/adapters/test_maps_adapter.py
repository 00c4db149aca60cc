"""Tests for MapsAdapter commute estimates."""

from datetime import datetime

import httpx
import pytest

from src.adapters.maps_adapter import (
    CommuteError,
    MapsAdapter,
    parse_event_time,
)


def element(duration: str, traffic: str | None = None) -> dict:
    item = {
        "status": "OK",
        "distance": {"text": "12.3 km"},
        "duration": {"text": duration},
    }
    if traffic:
        item["duration_in_traffic"] = {"text": traffic}
    return {"status": "OK", "rows": [{"elements": [item]}]}


def make_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestParseEventTime:
    def test_twelve_hour_range_uses_start(self):
        parsed = parse_event_time("March 20, 2024", "2:30 PM - 3:30 PM")

        assert parsed == datetime(2024, 3, 20, 14, 30)

    def test_twenty_four_hour(self):
        assert parse_event_time("2024-03-20", "09:15") == datetime(2024, 3, 20, 9, 15)

    def test_midnight_and_noon(self):
        assert parse_event_time("2024-03-20", "12:00 AM").hour == 0
        assert parse_event_time("2024-03-20", "12:00 PM").hour == 12

    def test_relative_date(self):
        now = datetime(2024, 3, 20, 8, 0)

        parsed = parse_event_time("tomorrow", "10:00 AM", now=now)

        assert parsed == datetime(2024, 3, 21, 10, 0)

    @pytest.mark.parametrize(
        ("event_date", "event_time"),
        [(None, "2:00 PM"), ("2024-03-20", None), ("2024-03-20", "All day"), ("2024-03-20", "25:00")],
    )
    def test_unparseable_returns_none(self, event_date, event_time):
        assert parse_event_time(event_date, event_time) is None


class TestCalculateCommute:
    async def test_missing_key_raises(self, monkeypatch):
        monkeypatch.setattr("src.adapters.maps_adapter.settings.google_maps_api_key", None)
        adapter = MapsAdapter()

        with pytest.raises(CommuteError, match="not configured"):
            await adapter.calculate_commute("1 Market St")

    async def test_driving_and_transit_options_for_future_event(self):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            if request.url.params["mode"] == "driving":
                return httpx.Response(200, json=element("25 mins", traffic="32 mins"))
            return httpx.Response(200, json=element("40 mins"))

        async with make_client(handler) as client:
            adapter = MapsAdapter(api_key="maps-key", http_client=client)
            commute = await adapter.calculate_commute(
                "1 Market St, San Francisco",
                origin="Oakland, CA",
                event_date="2099-06-15",
                event_time="2:00 PM",
            )

        assert [r.url.params["mode"] for r in requests] == ["driving", "transit"]
        driving_params = requests[0].url.params
        assert driving_params["traffic_model"] == "best_guess"
        assert driving_params["origins"] == "Oakland, CA"
        assert driving_params["departure_time"] == str(int(datetime(2099, 6, 15, 14).timestamp()))
        assert "traffic_model" not in requests[1].url.params

        assert commute.distance == "12.3 km"
        assert commute.duration == "25 mins"
        assert commute.traffic_duration == "32 mins"
        assert commute.transit_options == [
            "Transit: 40 mins (at 2:00 PM on 6/15/2099)",
            "Drive: 25 mins (at 2:00 PM on 6/15/2099)",
            "Drive (with traffic): 32 mins (at 2:00 PM on 6/15/2099)",
        ]

    async def test_past_or_missing_time_departs_now(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.url.params["departure_time"])
            return httpx.Response(200, json=element("10 mins"))

        async with make_client(handler) as client:
            adapter = MapsAdapter(api_key="maps-key", http_client=client)
            commute = await adapter.calculate_commute("Somewhere")

        assert seen == ["now", "now"]
        assert commute.transit_options[0].endswith("(now)")

    async def test_non_ok_status_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200, json={"status": "REQUEST_DENIED", "error_message": "bad key"}
            )

        async with make_client(handler) as client:
            adapter = MapsAdapter(api_key="maps-key", http_client=client)
            with pytest.raises(CommuteError, match="bad key"):
                await adapter.calculate_commute("Somewhere")

    async def test_http_error_raises_commute_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(503)

        async with make_client(handler) as client:
            adapter = MapsAdapter(api_key="maps-key", http_client=client)
            with pytest.raises(CommuteError, match="request failed"):
                await adapter.calculate_commute("Somewhere")

    async def test_unroutable_transit_is_omitted(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.params["mode"] == "transit":
                return httpx.Response(
                    200, json={"status": "OK", "rows": [{"elements": [{"status": "ZERO_RESULTS"}]}]}
                )
            return httpx.Response(200, json=element("15 mins"))

        async with make_client(handler) as client:
            adapter = MapsAdapter(api_key="maps-key", http_client=client)
            commute = await adapter.calculate_commute("Somewhere")

        assert commute.transit_options == ["Drive: 15 mins (now)"]

    async def test_non_json_body_raises_commute_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>oops</html>")

        async with make_client(handler) as client:
            adapter = MapsAdapter(api_key="maps-key", http_client=client)
            with pytest.raises(CommuteError, match="invalid JSON"):
                await adapter.calculate_commute("Somewhere")

    async def test_ok_element_without_duration_is_omitted(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.params["mode"] == "transit":
                return httpx.Response(
                    200, json={"status": "OK", "rows": [{"elements": [{"status": "OK"}]}]}
                )
            return httpx.Response(200, json=element("15 mins"))

        async with make_client(handler) as client:
            adapter = MapsAdapter(api_key="maps-key", http_client=client)
            commute = await adapter.calculate_commute("Somewhere")

        assert commute.transit_options == ["Drive: 15 mins (now)"]
        assert commute.duration == "15 mins"
