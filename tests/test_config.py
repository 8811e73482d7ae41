"""
Tests for settings resolution.
"""
import pytest

from tests._helpers import RecordingHandler
from wavespeed import ConfigurationError, Settings, WaveSpeed, get_settings
from wavespeed.config import DEFAULT_BASE_URL, non_negative_int, positive_float, resolve_value


class TestResolveValue:
    def test_explicit_wins_over_environment(self):
        assert resolve_value(5.0, {"X": "3"}, "X", 1.0, float) == 5.0

    def test_environment_wins_over_default(self):
        assert resolve_value(None, {"X": "3"}, "X", 1.0, float) == 3.0

    def test_default_when_unset_or_blank(self):
        assert resolve_value(None, {}, "X", 1.0, float) == 1.0
        assert resolve_value(None, {"X": "  "}, "X", 1.0, float) == 1.0

    def test_unparseable_environment_falls_back_to_default(self):
        assert resolve_value(None, {"X": "soon"}, "X", 1.0, float) == 1.0

    @pytest.mark.parametrize("raw", ["0", "-2", "nan", "inf", "-inf"])
    def test_out_of_range_environment_falls_back_to_default(self, raw):
        assert resolve_value(None, {"X": raw}, "X", 1.0, positive_float) == 1.0

    def test_negative_retry_count_falls_back_to_default(self):
        assert resolve_value(None, {"X": "-1"}, "X", 3, non_negative_int) == 3
        assert resolve_value(None, {"X": "0"}, "X", 3, non_negative_int) == 0


class TestSettings:
    def test_defaults(self):
        settings = get_settings("test-api-key")

        assert settings.api_key == "test-api-key"
        assert settings.base_url == DEFAULT_BASE_URL == "https://api.wavespeed.ai/api/v2/"
        assert settings.poll_interval == 0.5
        assert settings.timeout == 60.0
        assert settings.max_retries == 3

    def test_reads_given_environment_mapping(self):
        settings = get_settings(
            environ={
                "WAVESPEED_API_KEY": "env-api-key",
                "WAVESPEED_POLL_INTERVAL": "3",
                "WAVESPEED_TIMEOUT": "90",
                "WAVESPEED_MAX_RETRIES": "5",
            }
        )

        assert settings.api_key == "env-api-key"
        assert settings.poll_interval == 3.0
        assert settings.timeout == 90.0
        assert settings.max_retries == 5

    def test_explicit_arguments_override_environment(self):
        settings = get_settings(
            "arg-key",
            poll_interval=2.0,
            environ={"WAVESPEED_API_KEY": "env-key", "WAVESPEED_POLL_INTERVAL": "9"},
        )

        assert settings.api_key == "arg-key"
        assert settings.poll_interval == 2.0

    def test_missing_api_key(self):
        with pytest.raises(ConfigurationError, match="API key is required"):
            get_settings(environ={})

    def test_empty_api_key_is_missing(self):
        with pytest.raises(ConfigurationError, match="API key is required"):
            get_settings("", environ={})

    @pytest.mark.parametrize(
        "kwargs, message",
        [
            ({"poll_interval": 0}, "poll_interval must be a positive finite number"),
            ({"poll_interval": float("inf")}, "poll_interval must be a positive finite number"),
            ({"timeout": -1}, "timeout must be a positive finite number"),
            ({"timeout": float("nan")}, "timeout must be a positive finite number"),
            ({"max_retries": -1}, "max_retries cannot be negative"),
        ],
    )
    def test_validation(self, kwargs, message):
        with pytest.raises(ConfigurationError, match=message):
            Settings(api_key="k", **kwargs)

    def test_api_key_hidden_from_repr(self):
        assert "secret-key" not in repr(Settings(api_key="secret-key"))

    def test_non_finite_environment_values_use_defaults(self):
        settings = get_settings(
            "k",
            environ={
                "WAVESPEED_TIMEOUT": "nan",
                "WAVESPEED_POLL_INTERVAL": "inf",
                "WAVESPEED_MAX_RETRIES": "-1",
            },
        )

        assert settings.poll_interval == 0.5
        assert settings.timeout == 60.0
        assert settings.max_retries == 3

    def test_zero_poll_interval_in_environment_uses_default(self):
        assert get_settings("k", environ={"WAVESPEED_POLL_INTERVAL": "0"}).poll_interval == 0.5


class TestClientConfiguration:
    @pytest.mark.asyncio
    async def test_initialize_with_api_key(self):
        async with WaveSpeed("test-api-key") as client:
            assert client.base_url == "https://api.wavespeed.ai/api/v2/"
            assert "test-api-key" not in repr(client)

    @pytest.mark.asyncio
    async def test_api_key_from_environment(self, monkeypatch):
        monkeypatch.setenv("WAVESPEED_API_KEY", "env-api-key")

        async with WaveSpeed() as client:
            assert client.poll_interval == 0.5

    @pytest.mark.asyncio
    async def test_environment_read_at_construction(self, monkeypatch):
        monkeypatch.setenv("WAVESPEED_POLL_INTERVAL", "3")
        monkeypatch.setenv("WAVESPEED_TIMEOUT", "90")

        async with WaveSpeed("test-api-key") as client:
            assert client.poll_interval == 3.0
            assert client.timeout == 90.0

    @pytest.mark.asyncio
    async def test_custom_options(self):
        async with WaveSpeed(
            "test-api-key",
            base_url="https://custom-api.example.com",
            poll_interval=5,
            timeout=120,
            max_retries=1,
        ) as client:
            assert client.base_url == "https://custom-api.example.com"
            assert client.poll_interval == 5
            assert client.timeout == 120
            assert client.max_retries == 1

    def test_missing_api_key_fails_before_network(self, make_client):
        handler = RecordingHandler()

        with pytest.raises(ConfigurationError, match="API key is required"):
            make_client(handler, api_key=None)

        assert handler.calls == 0
