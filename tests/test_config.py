import pytest

from stream_assertions import Never, PublishTimeoutError, assert_eventually_publishes
from stream_assertions.config import (
    DEFAULT_DESCRIPTION,
    DEFAULT_TIMEOUT,
    AssertionSettings,
    get_settings,
    load_settings,
)


class TestLoadSettings:
    def test_fromEnv_whenEnvironmentEmpty_thenDefaults(self):
        settings = load_settings({})

        assert settings == AssertionSettings()
        assert settings.default_timeout == DEFAULT_TIMEOUT
        assert settings.default_description == DEFAULT_DESCRIPTION
        assert settings.timeout_multiplier == 1.0

    def test_fromEnv_whenVariablesSet_thenOverrides(self):
        settings = load_settings(
            {
                "STREAM_ASSERTIONS_TIMEOUT": "2.5",
                "STREAM_ASSERTIONS_DESCRIPTION": "Stream behaved",
                "STREAM_ASSERTIONS_TIMEOUT_MULTIPLIER": "3",
            }
        )

        assert settings.default_timeout == 2.5
        assert settings.default_description == "Stream behaved"
        assert settings.timeout_multiplier == 3.0

    def test_fromEnv_whenValuesBlank_thenDefaults(self):
        settings = load_settings({"STREAM_ASSERTIONS_TIMEOUT": " "})

        assert settings.default_timeout == DEFAULT_TIMEOUT

    @pytest.mark.parametrize("raw", ["abc", "0", "-1"])
    def test_fromEnv_whenTimeoutInvalid_thenValueErrorNamesVariable(self, raw):
        with pytest.raises(ValueError, match="STREAM_ASSERTIONS_TIMEOUT"):
            load_settings({"STREAM_ASSERTIONS_TIMEOUT": raw})


class TestEffectiveTimeout:
    def test_resolveTimeout_whenNone_thenDefault(self):
        assert AssertionSettings(default_timeout=2.0).effective_timeout(None) == 2.0

    def test_resolveTimeout_whenMultiplierSet_thenScales(self):
        settings = AssertionSettings(timeout_multiplier=2.0)

        assert settings.effective_timeout(0.5) == 1.0

    def test_resolveTimeout_whenNotPositive_thenRaises(self):
        with pytest.raises(ValueError):
            AssertionSettings().effective_timeout(0)


def test_getSettings_whenCalledTwice_thenReadsEnvironmentOnce(monkeypatch):
    monkeypatch.setenv("STREAM_ASSERTIONS_TIMEOUT", "0.1")
    get_settings.cache_clear()

    assert get_settings().default_timeout == 0.1

    monkeypatch.setenv("STREAM_ASSERTIONS_TIMEOUT", "5")
    assert get_settings().default_timeout == 0.1


def test_assertPublished_whenEnvironmentSetsDefaults_thenApplied(monkeypatch):
    monkeypatch.setenv("STREAM_ASSERTIONS_TIMEOUT", "0.1")
    monkeypatch.setenv("STREAM_ASSERTIONS_DESCRIPTION", "Silent stream")
    get_settings.cache_clear()

    with pytest.raises(PublishTimeoutError) as exc_info:
        assert_eventually_publishes(Never(), [])

    verdict = exc_info.value.verdict
    assert verdict.timeout == 0.1
    assert verdict.description == "Silent stream"
