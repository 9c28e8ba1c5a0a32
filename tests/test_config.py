import pytest

from datacollector.listener.config import DEFAULT_PORT, ListenerConfig, load_config
from datacollector.shared import config as shared_config
from datacollector.shared.config import find_config_file, load_yaml_config, parse_log_level

_ENV_VARS = (
    "DATACOLLECTOR_CONFIG",
    "DATACOLLECTOR_ENV",
    "UDP_LISTENER_PORT",
    "UDP_LISTENER_HOST",
    "STORAGE_BACKEND",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def _write_config(tmp_path, text: str):
    path = tmp_path / "listener.yaml"
    path.write_text(text)
    return path


def test_defaults_without_config_file() -> None:
    config = load_config()

    assert config.host == "0.0.0.0"
    assert config.port == DEFAULT_PORT == 5000
    assert config.retry_delay == 1.0
    assert config.storage_backend == "mysql"
    assert config.log_level == "INFO"


def test_yaml_config_is_loaded(tmp_path) -> None:
    path = _write_config(
        tmp_path,
        """
log_level: debug
udp_listener:
  host: 127.0.0.1
  port: 6000
  retry_delay: 0.5
storage:
  backend: memory
""",
    )

    config = load_config(str(path))

    assert config.host == "127.0.0.1"
    assert config.port == 6000
    assert config.retry_delay == 0.5
    assert config.storage_backend == "memory"
    assert config.log_level == "DEBUG"


def test_config_path_from_environment(tmp_path, monkeypatch) -> None:
    path = _write_config(tmp_path, "udp_listener:\n  port: 7000\n")
    monkeypatch.setenv("DATACOLLECTOR_CONFIG", str(path))

    assert load_config().port == 7000


def test_environment_overrides_file(tmp_path, monkeypatch) -> None:
    path = _write_config(tmp_path, "udp_listener:\n  port: 6000\n")
    monkeypatch.setenv("UDP_LISTENER_PORT", "6001")
    monkeypatch.setenv("UDP_LISTENER_HOST", "10.0.0.1")
    monkeypatch.setenv("STORAGE_BACKEND", "memory")
    monkeypatch.setenv("LOG_LEVEL", "warning")

    config = load_config(str(path))

    assert config.port == 6001
    assert config.host == "10.0.0.1"
    assert config.storage_backend == "memory"
    assert config.log_level == "WARNING"


def test_database_settings_come_from_environment(monkeypatch) -> None:
    monkeypatch.setenv("DB_HOST", "mysql.internal")
    monkeypatch.setenv("DB_DATABASE", "telemetry")

    config = load_config()

    assert config.db.host == "mysql.internal"
    assert config.db.database == "telemetry"


@pytest.mark.parametrize("port", ["not-a-port", "70000", "-1"])
def test_invalid_port_is_rejected(port, monkeypatch) -> None:
    monkeypatch.setenv("UDP_LISTENER_PORT", port)

    with pytest.raises(ValueError):
        load_config()


def test_unknown_storage_backend_is_rejected() -> None:
    with pytest.raises(ValueError):
        ListenerConfig.from_dict({"storage": {"backend": "sqlite"}})


def test_missing_config_file_raises(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "missing.yaml"))


def test_empty_yaml_file_gives_defaults(tmp_path) -> None:
    path = _write_config(tmp_path, "")

    assert load_yaml_config(path) == {}
    assert load_config(str(path)).port == DEFAULT_PORT


def test_deployment_config_file_follows_environment(tmp_path, monkeypatch) -> None:
    monkeypatch.setattr(shared_config, "CONFIG_DIR", tmp_path)
    monkeypatch.setenv("DATACOLLECTOR_ENV", "lab")

    assert find_config_file() is None

    path = _write_config(tmp_path, "udp_listener:\n  port: 7100\n")
    path.rename(tmp_path / "config-lab.yaml")

    assert find_config_file() == tmp_path / "config-lab.yaml"
    assert load_config().port == 7100


def test_explicit_path_wins_over_environment(tmp_path, monkeypatch) -> None:
    path = _write_config(tmp_path, "")
    monkeypatch.setenv("DATACOLLECTOR_CONFIG", str(tmp_path / "elsewhere.yaml"))

    assert find_config_file(path) == path


def test_missing_config_file_from_environment_raises(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("DATACOLLECTOR_CONFIG", str(tmp_path / "missing.yaml"))

    with pytest.raises(FileNotFoundError):
        load_config()


@pytest.mark.parametrize(
    "text",
    [
        "- port: 5000\n",
        "udp_listener: 5000\n",
        "storage:\n  - memory\n",
    ],
)
def test_malformed_config_shape_is_rejected(tmp_path, text) -> None:
    path = _write_config(tmp_path, text)

    with pytest.raises(ValueError):
        load_yaml_config(path)
    with pytest.raises(ValueError):
        load_config(str(path))


def test_log_level_is_normalized() -> None:
    assert parse_log_level("debug") == "DEBUG"
    assert parse_log_level(" Warning ") == "WARNING"
    assert ListenerConfig.from_dict({}).log_level == "INFO"


def test_unknown_log_level_is_rejected(monkeypatch) -> None:
    with pytest.raises(ValueError):
        parse_log_level("chatty")

    monkeypatch.setenv("LOG_LEVEL", "chatty")
    with pytest.raises(ValueError):
        load_config()
