"""
Test Environment Configuration - Verify defaults, overrides and validation
"""

import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest

from src.coreutils.env import DEFAULT_BASE_URL, load_config

ENV_KEYS = [
    "PATIENT_API_KEY",
    "PATIENT_API_BASE_URL",
    "PATIENT_PAGE_SIZE",
    "PATIENT_MAX_RETRIES",
    "REQUEST_TIMEOUT",
    "FETCH_TIMEOUT",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_defaults():
    config = load_config()

    assert config.api_key is None
    assert config.base_url == DEFAULT_BASE_URL
    assert config.page_size == 20
    assert config.max_retries == 3
    assert config.request_timeout == 30.0
    assert config.fetch_timeout is None


def test_overrides(monkeypatch):
    monkeypatch.setenv("PATIENT_API_KEY", "ak_test")
    monkeypatch.setenv("PATIENT_API_BASE_URL", "http://localhost:8080/api/")
    monkeypatch.setenv("PATIENT_PAGE_SIZE", "5")
    monkeypatch.setenv("FETCH_TIMEOUT", "120")

    config = load_config()

    assert config.api_key == "ak_test"
    assert config.base_url == "http://localhost:8080/api"
    assert config.page_size == 5
    assert config.fetch_timeout == 120.0


@pytest.mark.parametrize(
    "key,value",
    [
        ("PATIENT_PAGE_SIZE", "ten"),
        ("PATIENT_PAGE_SIZE", "0"),
        ("PATIENT_MAX_RETRIES", "-1"),
        ("REQUEST_TIMEOUT", "0"),
        ("FETCH_TIMEOUT", "soon"),
    ],
)
def test_invalid_values(monkeypatch, key, value):
    monkeypatch.setenv(key, value)

    with pytest.raises(ValueError):
        load_config()
