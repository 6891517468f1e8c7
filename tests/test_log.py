import logging
from collections.abc import Iterator

import pytest
import structlog

from varstream.config import get_settings
from varstream.log import configure_logging


@pytest.fixture(autouse=True)
def restore_structlog() -> Iterator[None]:
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
    structlog.reset_defaults()


class TestConfigureLogging:
    def test_filters_below_level(self) -> None:
        assert configure_logging("warning") == "WARNING"

        config = structlog.get_config()
        wrapper = config["wrapper_class"]
        assert wrapper.info is not wrapper.warning
        assert config["cache_logger_on_first_use"] is True
        assert any(
            isinstance(p, structlog.dev.ConsoleRenderer) for p in config["processors"]
        )

    def test_unknown_level(self) -> None:
        with pytest.raises(ValueError, match="CHATTY"):
            configure_logging("chatty")

    def test_level_from_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("VARSTREAM_LOG_LEVEL", "ERROR")

        assert configure_logging() == "ERROR"
        assert logging.getLogger("varstream").level == logging.ERROR

    def test_stdlib_level(self, monkeypatch: pytest.MonkeyPatch) -> None:
        calls: list[dict[str, object]] = []
        monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))

        configure_logging("debug")

        assert calls[0]["level"] == logging.DEBUG
