import logging

import pytest

from r2multipart.config import R2Config, Settings, configure_logging
from r2multipart.services.multipart import MultipartUploadService, MultipartUploadServiceBuilder, R2Gateway


@pytest.fixture
def settings(monkeypatch):
    monkeypatch.setenv("R2_ACCOUNT_ID", "account")
    monkeypatch.setenv("R2_ACCESS_KEY", "access")
    monkeypatch.setenv("R2_SECRET_KEY", "secret")
    monkeypatch.setenv("R2_MAX_ATTEMPTS", "5")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    return Settings(_env_file=None)


def test_settings_from_environment(settings):
    assert settings.R2_ACCOUNT_ID == "account"
    assert settings.R2_MAX_ATTEMPTS == 5
    assert settings.R2_ENDPOINT is None


def test_config_from_settings(settings):
    config = R2Config.from_settings(settings)

    assert config.endpoint_url == "https://account.r2.cloudflarestorage.com"
    assert config.max_attempts == 5


def test_endpoint_requires_account_or_override():
    with pytest.raises(ValueError):
        R2Config(account_id="", access_key="a", secret_key="s").endpoint_url


def test_builder(settings):
    service = MultipartUploadServiceBuilder.build(settings)

    assert isinstance(service, MultipartUploadService)
    assert isinstance(service.gateway, R2Gateway)


def test_configure_logging(settings):
    configure_logging(settings)
    assert logging.getLogger("r2multipart").level == logging.DEBUG
