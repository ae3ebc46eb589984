"""Shared fixtures for the GitOps Secrets test-suite."""
import pytest

from gitops_secrets.conf import MASTER_KEY_ENV
from gitops_secrets.vault import crypto

MASTER_KEY = "1e18cc54-1d77-45a1-ae46-fecebce35ae2"
OTHER_MASTER_KEY = "0b7f3a1e-9c44-4d02-8e61-2f5a7c9d1b30"
FAST_ITERATIONS = 1000

SECRETS = {
    "API_KEY": "46f181e0-d68c-49d2-aa4c-1dd30d954877",
    "AUTH_TOKEN": "cb71114f-22c3-4a66-af06-39d8d39a2af3",
}

# Captured envelope of SECRETS under MASTER_KEY with the historical
# 1,000,000 iteration default and an 8-byte salt.
LEGACY_CIPHER = (
    "base64:1000000:6Mb/k90J0ts=:ckoXxlCYKWPdpeQx:"
    "g+vDP451CfU8lJeqZfKl9rzGuZZppQk50espQMI+VR59zz/JHwMjdEIYMMzZD/zcm0vmri1Az"
    "Man4J4lQmcIJSsAKtkRtvqX0Je5RxBIrRJD5gDoz3SH4B7qm78Rb2h9FTiZU+MD1am+Pwc5cE"
    "w88X4l+46OOg=="
)

# Captured envelope of LOW_ITERATIONS_PAYLOAD under MASTER_KEY, 1,000 iterations.
LOW_ITERATIONS_PAYLOAD = {
    "API_KEY": "abc",
    "AUTH_TOKEN": "xyz",
    "NESTED": {"retries": 3, "enabled": True},
}
LOW_ITERATIONS_CIPHER = (
    "base64:1000:XbgBcHJ6rhCkX9N4W8w6QQ==:BTb6eYiKxiNlCJ+i:"
    "frYs4d4TeQ2SoduzAXLNopc1IAOwxkrrS3PxBv00RimqIAqeIV0qU5sXgV9jQm2JAT0qJ689j"
    "CKdi3YzRE9WuX8Cm7LrBxwfvGv2v6V8Jyf1YukW5glX4vxS"
)

# Captured envelope of SCENARIO_PAYLOAD under MASTER_KEY, 1,000 iterations.
SCENARIO_PAYLOAD = {"API_KEY": "abc", "AUTH_TOKEN": "xyz"}
SCENARIO_CIPHER = (
    "base64:1000:zRzFlDqTyL1fgHYYtTYd0A==:c/8XRh6v89lFs3kp:"
    "L7A/DQhtUcTWjqgcp8hOWwR5JwYawgo5Yx56VCLDwv83pTsiZgAwA54TPkRENZC+HJkjjg=="
)


@pytest.fixture
def master_key_env(monkeypatch):
    """Set GITOPS_SECRETS_MASTER_KEY for the duration of a test."""
    monkeypatch.setenv(MASTER_KEY_ENV, MASTER_KEY)
    return MASTER_KEY


@pytest.fixture
def no_master_key(monkeypatch):
    monkeypatch.delenv(MASTER_KEY_ENV, raising=False)


@pytest.fixture
def fast_kdf(monkeypatch):
    """Lower the default work factor for new envelopes."""
    monkeypatch.setattr(crypto, "DEFAULT_ITERATIONS", FAST_ITERATIONS)
    return FAST_ITERATIONS
