import pytest

from hospital_personnel.config import (
    Config,
    ConfigError,
    DatabaseConfig,
    load_config,
)

SAMPLE = """\
server:
  port: 8080
database:
  host: localhost
  port: 5432
  user: user
  password: password
  dbname: personnel
  sslmode: disable
redis:
  addr: localhost:6379
  password: password
  db: 2
jwt:
  private_key: placeholder
  public_key: placeholder
  access_token_expiry: 15m
  refresh_token_expiry: 168h
hospital_service:
  base_url: http://localhost:8081
"""


def test_dsn_format():
    password = "password"
    cfg = DatabaseConfig(
        host="localhost", port="5432", user="user", password=password,
        dbname="personnel", sslmode="disable",
    )
    assert cfg.dsn() == (
        "host=localhost user=user password=password dbname=personnel port=5432 sslmode=disable"
    )


def test_load_config_reads_yaml(tmp_path):
    (tmp_path / "config.yml").write_text(SAMPLE, encoding="utf-8")
    cfg = load_config(tmp_path)
    assert cfg.server.port == "8080"
    assert cfg.database.dbname == "personnel"
    assert cfg.database.port == "5432"
    assert cfg.redis.db == 2
    assert cfg.jwt.access_token_expiry == "15m"
    assert cfg.hospital_service.base_url == "http://localhost:8081"


def test_load_config_accepts_yaml_extension(tmp_path):
    (tmp_path / "config.yaml").write_text("server:\n  port: '3000'\n", encoding="utf-8")
    cfg = load_config(tmp_path)
    assert cfg.server.port == "3000"
    assert cfg.redis.db == 0
    assert cfg.database.host == ""


def test_environment_overrides_present_keys(tmp_path, monkeypatch):
    (tmp_path / "config.yml").write_text(SAMPLE, encoding="utf-8")
    monkeypatch.setenv("SERVER.PORT", "9090")
    monkeypatch.setenv("REDIS.DB", "5")
    cfg = load_config(tmp_path)
    assert cfg.server.port == "9090"
    assert cfg.redis.db == 5


def test_missing_file_raises(tmp_path):
    with pytest.raises(ConfigError, match="error reading config file"):
        load_config(tmp_path)


def test_invalid_yaml_raises(tmp_path):
    (tmp_path / "config.yml").write_text("server: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_bad_integer_raises():
    with pytest.raises(ConfigError, match="unmarshalling"):
        Config.from_dict({"redis": {"db": "many"}})


def test_section_must_be_mapping():
    with pytest.raises(ConfigError):
        Config.from_dict({"server": ["8080"]})


def test_keys_are_case_insensitive():
    cfg = Config.from_dict({"Server": {"PORT": "8000"}})
    assert cfg.server.port == "8000"


def test_empty_mapping_gives_defaults():
    cfg = Config.from_dict({})
    assert cfg == Config()