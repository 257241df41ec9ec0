"""Tests for the current weather proxy."""

import asyncio

import httpx
import pytest

from city_weather import __version__
from city_weather.models.weather import WeatherQuery
from city_weather.providers.base import ProviderError
from city_weather.providers.openweather import OpenWeatherProvider

from conftest import use_session


class TestWeatherRoute:
    def test_weather_by_city(self, client, alice, mock_weather, london_weather):
        requests = mock_weather(lambda request: httpx.Response(200, json=london_weather))
        use_session(client, alice)

        response = client.get("/api/weather", params={"city": "London"})

        assert response.status_code == 200
        assert response.json() == london_weather

        assert len(requests) == 1
        params = requests[0].url.params
        assert params["q"] == "London"
        assert params["units"] == "metric"
        assert params["appid"] == "test-openweather-key"
        assert "lat" not in params

    def test_weather_by_coordinates(self, client, alice, mock_weather, london_weather):
        requests = mock_weather(lambda request: httpx.Response(200, json=london_weather))
        use_session(client, alice)

        response = client.get("/api/weather", params={"lat": 51.5074, "lon": -0.1278})

        assert response.status_code == 200
        params = requests[0].url.params
        assert float(params["lat"]) == pytest.approx(51.5074)
        assert float(params["lon"]) == pytest.approx(-0.1278)
        assert "q" not in params

    @pytest.mark.parametrize(
        "params",
        [
            {},
            {"lat": 51.5},
            {"lon": -0.1},
            {"city": "L"},
            {"lat": 100, "lon": 0},
            {"lat": 0, "lon": 200},
            {"lat": "north", "lon": 0},
            {"city": "London", "lat": 51.5, "lon": -0.1},
        ],
    )
    def test_invalid_parameters(self, client, alice, mock_weather, params):
        requests = mock_weather(lambda request: httpx.Response(200, json={}))
        use_session(client, alice)

        response = client.get("/api/weather", params=params)

        assert response.status_code == 400
        assert "error" in response.json()
        assert requests == []

    def test_provider_error_is_relayed(self, client, alice, mock_weather):
        mock_weather(
            lambda request: httpx.Response(
                404, json={"cod": "404", "message": "city not found"}
            )
        )
        use_session(client, alice)

        response = client.get("/api/weather", params={"city": "Atlantis"})

        assert response.status_code == 404
        assert response.json() == {"error": "city not found"}

    def test_provider_error_without_message(self, client, alice, mock_weather):
        mock_weather(lambda request: httpx.Response(503, text="upstream down"))
        use_session(client, alice)

        response = client.get("/api/weather", params={"city": "London"})

        assert response.status_code == 503
        assert response.json() == {"error": "Failed to fetch weather data"}

    def test_network_failure(self, client, alice, mock_weather):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        requests = mock_weather(handler)
        use_session(client, alice)

        response = client.get("/api/weather", params={"city": "London"})

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to fetch weather data"}
        # No automatic retries
        assert len(requests) == 1


class TestOpenWeatherProvider:
    def test_requires_api_key(self):
        with pytest.raises(ValueError):
            OpenWeatherProvider(api_key="")

    def test_invalid_json_body(self):
        async def run():
            transport = httpx.MockTransport(
                lambda request: httpx.Response(200, text="<html>oops</html>")
            )
            async with OpenWeatherProvider(api_key="k", transport=transport) as provider:
                await provider.get_current_weather(WeatherQuery(city="London"))

        with pytest.raises(ProviderError) as exc_info:
            asyncio.run(run())
        assert exc_info.value.status_code == 500
        assert exc_info.value.provider == "openweather"

    def test_custom_base_url_and_units(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"name": "Oslo"})

        async def run():
            async with OpenWeatherProvider(
                api_key="k",
                base_url="https://weather.test/current",
                units="imperial",
                transport=httpx.MockTransport(handler),
            ) as provider:
                return await provider.get_current_weather(WeatherQuery(city="Oslo"))

        assert asyncio.run(run()) == {"name": "Oslo"}
        assert seen[0].url.host == "weather.test"
        assert seen[0].url.params["units"] == "imperial"
        assert seen[0].headers["user-agent"] == f"city-weather/{__version__}"

    def test_upstream_error_carries_status_and_message(self):
        async def run():
            transport = httpx.MockTransport(
                lambda request: httpx.Response(404, json={"message": "city not found"})
            )
            async with OpenWeatherProvider(api_key="k", transport=transport) as provider:
                await provider.get_current_weather(WeatherQuery(city="Atlantis"))

        with pytest.raises(ProviderError) as exc_info:
            asyncio.run(run())
        assert exc_info.value.status_code == 404
        assert exc_info.value.message == "city not found"
