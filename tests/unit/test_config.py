"""
Unit tests for configuration and logging setup
"""
import logging

import pytest
from pydantic import ValidationError as PydanticValidationError

from etsy_client.utils import config as config_module
from etsy_client.utils.config import (
    API_URL, ClientOptions, EtsySettings, build_options, get_config, reload_config
)
from etsy_client.utils.exceptions import ConfigurationError
from etsy_client.utils.logger import CONSOLE_HANDLER_NAME, EtsyClientLogger, get_logger, setup_logging


class TestClientOptions:
    """Test request options"""

    def test_defaults(self):
        options = build_options(None)
        assert options.not_found_error is False
        assert options.timeout == 30.0

    def test_alias(self):
        assert build_options({"404_error": True}).not_found_error is True
        assert build_options({"not_found_error": True}).not_found_error is True

    def test_dump_uses_alias(self):
        dumped = ClientOptions(not_found_error=True).model_dump(by_alias=True)
        assert dumped["404_error"] is True

    def test_instance_passes_through(self):
        options = ClientOptions(timeout=5)
        assert build_options(options) is options

    def test_invalid_timeout(self):
        with pytest.raises(ConfigurationError):
            build_options({"timeout": 0})

    def test_unknown_keys_ignored(self):
        assert build_options({"retries": 3}) == ClientOptions()


class TestEtsySettings:
    """Test environment settings"""

    def test_from_environment(self, clean_env):
        clean_env.setenv("ETSY_CLIENT_ID", " keystring ")
        clean_env.setenv("ETSY_API_KEY", "1.key")
        clean_env.setenv("ETSY_NOT_FOUND_ERROR", "true")
        clean_env.setenv("ETSY_TIMEOUT", "12")

        settings = EtsySettings()

        assert settings.client_id == "keystring"
        assert settings.api_url == API_URL
        assert settings.options == ClientOptions(not_found_error=True, timeout=12)

    def test_from_env_file(self, clean_env, tmp_path):
        (tmp_path / ".env").write_text("ETSY_CLIENT_ID=from-file\nETSY_LOG_LEVEL=debug\n")

        settings = EtsySettings()

        assert settings.client_id == "from-file"
        assert settings.log_level == "DEBUG"

    def test_invalid_log_level(self, clean_env):
        with pytest.raises(PydanticValidationError):
            EtsySettings(client_id="x", log_level="LOUD", _env_file=None)

    def test_summary_hides_secrets(self, clean_env):
        settings = EtsySettings(client_id="x", api_key="1.secret", _env_file=None)

        summary = settings.summary()

        assert summary["has_api_key"] is True
        assert "1.secret" not in str(summary)

    def test_get_config_missing_client_id(self, clean_env):
        with pytest.raises(ConfigurationError):
            get_config()

    def test_get_config_cached_and_reloaded(self, clean_env):
        clean_env.setenv("ETSY_CLIENT_ID", "first")
        first = get_config()
        assert get_config() is first

        clean_env.setenv("ETSY_CLIENT_ID", "second")
        assert get_config().client_id == "first"
        assert reload_config().client_id == "second"
        assert config_module._config.client_id == "second"


class TestLogging:
    """Test logger hierarchy"""

    def test_module_loggers_are_children(self):
        logger = get_logger("etsy_client.api.dispatcher")

        assert logger.name == "etsy_client.api.dispatcher"
        assert logger.parent.name == "etsy_client"

    def test_setup_logging_level(self):
        root = setup_logging("DEBUG")
        try:
            assert root.level == logging.DEBUG
            assert get_logger("etsy_client.resources.base").getEffectiveLevel() == logging.DEBUG
        finally:
            root.setLevel(logging.WARNING)

    def test_handlers_not_duplicated(self):
        root = setup_logging()
        count = len(root.handlers)

        setup_logging()
        get_logger("etsy_client.client")

        assert len(root.handlers) == count

    def test_library_logger_defers_to_application(self, monkeypatch):
        monkeypatch.delenv("ETSY_LOG_LEVEL", raising=False)
        logger = EtsyClientLogger("etsy_client_isolated").get_logger()

        assert logger.propagate is True
        assert [type(h) for h in logger.handlers] == [logging.NullHandler]
        assert logger.level == logging.NOTSET

    def test_records_reach_application_handlers(self):
        records = []
        handler = logging.Handler()
        handler.emit = records.append
        application_root = logging.getLogger()
        application_root.addHandler(handler)
        library_logger = get_logger("etsy_client.client")
        previous = library_logger.level
        library_logger.setLevel(logging.INFO)
        try:
            library_logger.info("Refreshed access token")
        finally:
            application_root.removeHandler(handler)
            library_logger.setLevel(previous)

        assert [r.getMessage() for r in records] == ["Refreshed access token"]

    def test_setup_logging_attaches_console_once(self):
        root = setup_logging()
        setup_logging()

        names = [h.get_name() for h in root.handlers]
        assert names.count(CONSOLE_HANDLER_NAME) == 1
        assert root.propagate is True
