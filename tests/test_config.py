import pytest
import tomli_w

from solprobe import config
from solprobe.config import Config, ConfigError, load_config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in ("SOLPROBE_CONFIG", "SOLPROBE_RPC_URL", "SOLPROBE_UPDATE_INTERVAL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))


def _write(path, payload):
    path.write_text(tomli_w.dumps(payload), encoding="utf-8")
    return path


def test_missing_file_writes_defaults(tmp_path):
    path = tmp_path / "solprobe" / "config.toml"

    loaded = load_config(path)

    assert loaded == Config()
    assert path.exists()
    assert load_config(path) == Config()


def test_default_location_follows_xdg(tmp_path):
    load_config()

    assert (tmp_path / "xdg" / "solprobe" / "config.toml").exists()
    assert config.config_path() == tmp_path / "xdg" / "solprobe" / "config.toml"


def test_reads_values_from_file(tmp_path):
    path = _write(tmp_path / "config.toml", {"default_url": "http://localhost:8899", "update_interval": 2})

    loaded = load_config(path)

    assert loaded.default_url == "http://localhost:8899"
    assert loaded.update_interval == 2


def test_partial_file_falls_back_to_defaults(tmp_path):
    path = _write(tmp_path / "config.toml", {"update_interval": 9})

    loaded = load_config(path)

    assert loaded.default_url == config.DEFAULT_URL
    assert loaded.update_interval == 9


def test_environment_overrides_file(tmp_path, monkeypatch):
    path = _write(tmp_path / "config.toml", {"default_url": "http://a", "update_interval": 2})
    monkeypatch.setenv("SOLPROBE_RPC_URL", "http://b")
    monkeypatch.setenv("SOLPROBE_UPDATE_INTERVAL", "30")

    loaded = load_config(path)

    assert loaded == Config(default_url="http://b", update_interval=30)


def test_config_env_var_selects_file(tmp_path, monkeypatch):
    path = _write(tmp_path / "custom.toml", {"update_interval": 11})
    monkeypatch.setenv("SOLPROBE_CONFIG", str(path))

    assert load_config().update_interval == 11


def test_invalid_toml_raises(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text("update_interval = = 3", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(path)


@pytest.mark.parametrize("value", [0, -5, "soon", True])
def test_invalid_interval_raises(tmp_path, value):
    path = _write(tmp_path / "config.toml", {"update_interval": value})

    with pytest.raises(ConfigError):
        load_config(path)


def test_blank_url_raises(tmp_path):
    path = _write(tmp_path / "config.toml", {"default_url": "  "})

    with pytest.raises(ConfigError):
        load_config(path)
