import logging

import pytest

from httpdebugproxy.cli import main


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("HDP_LOG_LEVEL", raising=False)
    return tmp_path


def test_missing_config_file(workdir, monkeypatch, caplog):
    monkeypatch.setenv("HDP_CONFIG", str(workdir / "absent.yaml"))
    caplog.set_level(logging.ERROR)
    assert main([]) == 1
    assert "absent.yaml" in caplog.text


def test_config_without_upstreams(workdir, monkeypatch, caplog):
    path = workdir / "config.yaml"
    path.write_text("server:\n  host: 127.0.0.1\n  port: 0\nupstreams: {}\n", encoding="utf-8")
    monkeypatch.setenv("HDP_CONFIG", str(path))
    caplog.set_level(logging.ERROR)
    assert main([]) == 1
    assert "No upstreams defined" in caplog.text


def test_default_config_path_is_used(workdir, monkeypatch, caplog):
    monkeypatch.delenv("HDP_CONFIG", raising=False)
    (workdir / "config.yaml").write_text("server: {host: 127.0.0.1}\n", encoding="utf-8")
    caplog.set_level(logging.ERROR)
    assert main([]) == 1
    assert "port" in caplog.text


def test_help_exits(workdir):
    with pytest.raises(SystemExit) as info:
        main(["--help"])
    assert info.value.code == 0