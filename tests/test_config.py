"""Settings parsing tests"""

import pytest

from geo_resolver.config import Settings


def test_default_provider_order():
    settings = Settings(_env_file=None, provider_order="primary,secondary,mathematical")
    assert settings.get_provider_order() == ["primary", "secondary", "mathematical"]


def test_mathematical_always_last_and_deduplicated():
    settings = Settings(_env_file=None, provider_order="mathematical, Secondary ,primary,secondary")
    assert settings.get_provider_order() == ["secondary", "primary", "mathematical"]


def test_unknown_provider_rejected():
    settings = Settings(_env_file=None, provider_order="primary,here")
    with pytest.raises(ValueError, match="here"):
        settings.get_provider_order()


def test_api_keys_parsed(monkeypatch):
    monkeypatch.setenv("API_KEYS", "one, two,,three")
    settings = Settings(_env_file=None)
    assert settings.get_api_keys() == ["one", "two", "three"]


def test_trust_weights():
    settings = Settings(_env_file=None, trust_secondary=0.7)
    assert settings.get_trust_weights() == {"primary": 1.0, "secondary": 0.7, "mathematical": 0.1}
