import logging

from erv_service.config import LOG_FORMAT, Config, setup_logging


def test_defaults_are_valid():
    assert Config.validate()


def test_invalid_cfm_window(monkeypatch, caplog):
    monkeypatch.setattr(Config, "MIN_CFM", 5000.0)
    monkeypatch.setattr(Config, "MAX_CFM", 100.0)
    with caplog.at_level(logging.WARNING):
        assert not Config.validate()
    assert "ERV_MIN_CFM" in caplog.text


def test_setup_logging(monkeypatch):
    calls = {}
    monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.update(kw))
    setup_logging("debug")
    assert calls == {"level": "DEBUG", "format": LOG_FORMAT}
