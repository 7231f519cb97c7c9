import pytest

from httpdebugproxy.config import Config, ConfigError, ServerConfig, load_config


def _data(**overrides):
    data = {
        "server": {"host": "127.0.0.1", "port": 8080},
        "upstreams": {"api": "http://localhost:9000"},
    }
    data.update(overrides)
    return data


def test_from_dict_minimal():
    config = Config.from_dict(_data())
    assert config.server == ServerConfig(host="127.0.0.1", port=8080)
    assert config.upstreams == {"api": "http://localhost:9000"}
    assert config.default_upstream is None


def test_from_dict_optional_fields():
    data = _data(default_upstream="api")
    data["server"].update(
        {"host_v6": "::1", "port_v6": 8081, "api_key": "placeholder", "ssl_cert": "c.pem"}
    )
    config = Config.from_dict(data)
    assert config.server.host_v6 == "::1"
    assert config.server.port_v6 == 8081
    assert config.server.api_key == "placeholder"
    assert config.server.ssl_cert == "c.pem"
    assert config.server.ssl_key is None
    assert config.default_upstream == "api"


@pytest.mark.parametrize("missing", ["server", "upstreams"])
def test_from_dict_missing_section(missing):
    data = _data()
    del data[missing]
    with pytest.raises(ConfigError, match=missing):
        Config.from_dict(data)


@pytest.mark.parametrize("port", [-1, 70000, "80", True])
def test_from_dict_bad_port(port):
    data = _data()
    data["server"]["port"] = port
    with pytest.raises(ConfigError):
        Config.from_dict(data)


def test_from_dict_rejects_non_mapping():
    with pytest.raises(ConfigError):
        Config.from_dict(["server"])


def test_validate_no_upstreams():
    config = Config.from_dict(_data(upstreams={}))
    with pytest.raises(ConfigError, match="No upstreams defined"):
        config.validate()


def test_validate_missing_default():
    config = Config.from_dict(_data(upstreams={"a": "http://a", "b": "http://b"}))
    with pytest.raises(ConfigError, match="Default upstream is not defined"):
        config.validate()


def test_validate_unknown_default():
    config = Config.from_dict(
        _data(upstreams={"a": "http://a", "b": "http://b"}, default_upstream="c")
    )
    with pytest.raises(ConfigError, match="doesn't match") as info:
        config.validate()
    assert '"a"' in str(info.value) and '"b"' in str(info.value)


def test_validate_accepts_single_upstream_without_default():
    config = Config.from_dict(_data())
    config.validate()
    assert len(config.upstreams) == 1


def test_load_config_reads_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "server:\n  host: 0.0.0.0\n  port: 3000\n"
        "upstreams:\n  one: http://localhost:1\n  two: http://localhost:2\n"
        "default_upstream: two\n",
        encoding="utf-8",
    )
    config = load_config(path)
    assert config.server.port == 3000
    assert list(config.upstreams) == ["one", "two"]
    assert config.default_upstream == "two"


def test_load_config_invalid_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("server: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(path)


def test_load_config_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "absent.yaml")