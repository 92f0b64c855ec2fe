"""Tests for configuration models and YAML loading."""

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from sqlquest.config import (
    ConfigParser,
    DatabaseConfig,
    DatabaseType,
    ExecutionSettings,
    RetrySettings,
    SQLQuestConfig,
    create_sample_config,
    load_config,
)
from sqlquest.exceptions import ConfigurationError


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("SQLQUEST_DATABASE_URL", "SQLQUEST_CONFIG_FILE"):
        monkeypatch.delenv(name, raising=False)


class TestDatabaseConfig:
    """Test database configuration validation."""

    def test_url_sets_type(self) -> None:
        config = DatabaseConfig(url="postgresql://app:secret@db:5432/quest")
        assert config.type == DatabaseType.POSTGRESQL

    def test_url_with_driver_sets_backend_type(self) -> None:
        assert DatabaseConfig(url="mysql+aiomysql://app@db/quest").type == DatabaseType.MYSQL

    def test_url_type_mismatch(self) -> None:
        with pytest.raises(ValidationError, match="does not match"):
            DatabaseConfig(type="mysql", url="postgresql://app@db/quest")

    def test_unsupported_backend(self) -> None:
        with pytest.raises(ValidationError, match="Unsupported database backend"):
            DatabaseConfig(url="oracle://app@db/quest")

    def test_type_or_url_required(self) -> None:
        with pytest.raises(ValidationError, match="requires a 'type' or a 'url'"):
            DatabaseConfig(host="db")

    def test_sqlite_database_field_used_as_path(self) -> None:
        assert DatabaseConfig(type="sqlite", database="quest.db").path == "quest.db"

    def test_server_fields_required(self) -> None:
        with pytest.raises(ValidationError, match="require 'username'"):
            DatabaseConfig(type="postgresql", host="db", database="quest")

    def test_aliases(self) -> None:
        config = DatabaseConfig(driver="postgresql", host="db", database="quest", user="app")
        assert config.type == DatabaseType.POSTGRESQL
        assert config.username == "app"

    @pytest.mark.parametrize("port", [0, 70000])
    def test_port_range(self, port: int) -> None:
        with pytest.raises(ValidationError, match="Port must be between"):
            DatabaseConfig(type="mysql", host="db", port=port, database="quest", username="app")


class TestSQLQuestConfig:
    """Test the top-level configuration."""

    def test_first_database_is_default(self) -> None:
        config = SQLQuestConfig(databases={
            "a": DatabaseConfig(type="sqlite", path=":memory:"),
            "b": DatabaseConfig(type="sqlite", path="b.db"),
        })
        assert config.default_database == "a"
        assert config.get_database().path == ":memory:"
        assert config.get_database("b").path == "b.db"

    def test_unknown_default(self) -> None:
        with pytest.raises(ValidationError, match="not found in databases"):
            SQLQuestConfig(databases={"a": DatabaseConfig(type="sqlite", path="a.db")}, default_database="z")

    def test_get_unknown_database(self) -> None:
        config = SQLQuestConfig(databases={"a": DatabaseConfig(type="sqlite", path="a.db")})
        with pytest.raises(KeyError):
            config.get_database("z")

    def test_from_url(self) -> None:
        config = SQLQuestConfig.from_url("sqlite:///quest.db")
        assert config.default_database == "default"
        assert config.get_database().type == DatabaseType.SQLITE

    def test_defaults(self) -> None:
        config = SQLQuestConfig(databases={"a": DatabaseConfig(type="sqlite", path="a.db")})
        assert config.splitter.service_url is None
        assert config.execution.sql_dir == "sql"
        assert config.execution.timing is True
        assert config.retry.times == 10
        assert config.retry.wait == 5000

    def test_retry_times_validation(self) -> None:
        assert RetrySettings(times=None).times is None
        with pytest.raises(ValidationError):
            RetrySettings(times=0)


class TestConfigParser:
    """Test YAML loading."""

    def test_env_var_interpolation(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("QUEST_DB_HOST", "db.internal")
        monkeypatch.delenv("QUEST_DB_PORT", raising=False)
        path = tmp_path / "sqlquest.yaml"
        path.write_text("""
databases:
  main:
    type: postgresql
    host: ${QUEST_DB_HOST}
    port: ${QUEST_DB_PORT:-6543}
    database: quest
    username: app
""", encoding="utf-8")

        config = ConfigParser().load_config(path)

        assert config.databases["main"].host == "db.internal"
        assert config.databases["main"].port == 6543

    def test_missing_env_var(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("QUEST_MISSING_PASSWORD", raising=False)
        path = tmp_path / "sqlquest.yaml"
        path.write_text("""
databases:
  main:
    type: sqlite
    path: ${QUEST_MISSING_PASSWORD}
""", encoding="utf-8")

        with pytest.raises(ConfigurationError, match="QUEST_MISSING_PASSWORD"):
            ConfigParser().load_config(path)

    def test_include_has_lower_priority(self, tmp_path: Path) -> None:
        (tmp_path / "base.yaml").write_text("""
databases:
  main:
    type: sqlite
    path: base.db
retry:
  times: 3
  wait: 100
""", encoding="utf-8")
        path = tmp_path / "sqlquest.yaml"
        path.write_text("""
include: base.yaml
retry:
  wait: 0
""", encoding="utf-8")

        config = ConfigParser().load_config(path)

        assert config.databases["main"].path == "base.db"
        assert config.retry.times == 3
        assert config.retry.wait == 0

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "sqlquest.yaml"
        path.write_text("", encoding="utf-8")

        with pytest.raises(ConfigurationError, match="is empty"):
            ConfigParser().load_config(path)

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "sqlquest.yaml"
        path.write_text("databases: [unclosed", encoding="utf-8")

        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            ConfigParser().load_config(path)

    def test_missing_explicit_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="not found"):
            ConfigParser().load_config(tmp_path / "nope.yaml")

    def test_default_location(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        (tmp_path / "sqlquest.yml").write_text("databases:\n  main:\n    type: sqlite\n    path: x.db\n", encoding="utf-8")

        assert ConfigParser().load_config().default_database == "main"

    def test_sample_config_is_loadable(self, tmp_path: Path) -> None:
        path = tmp_path / "sample.yaml"
        create_sample_config(path)

        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
        config = ConfigParser().load_config(path)

        assert set(raw["databases"]) == {"dev", "local"}
        assert config.default_database == "local"


class TestLoadConfig:
    """Test the module-level loader."""

    def test_url_argument(self) -> None:
        config = load_config(database_url="sqlite:///quest.db")
        assert config.get_database().url == "sqlite:///quest.db"

    def test_url_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SQLQUEST_DATABASE_URL", "sqlite:///env.db")
        assert load_config().get_database().url == "sqlite:///env.db"

    def test_invalid_url(self) -> None:
        with pytest.raises(ConfigurationError, match="Invalid database URL"):
            load_config(database_url="oracle://app@db/quest")

    def test_explicit_file_wins_over_environment(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SQLQUEST_DATABASE_URL", "sqlite:///env.db")
        path = tmp_path / "sqlquest.yaml"
        path.write_text("databases:\n  file:\n    type: sqlite\n    path: file.db\n", encoding="utf-8")

        assert load_config(path).default_database == "file"

    def test_explicit_url_wins_over_explicit_file(self, tmp_path: Path) -> None:
        path = tmp_path / "sqlquest.yaml"
        create_sample_config(path)

        config = load_config(path, f"sqlite:///{tmp_path / 'other.db'}")

        assert list(config.databases) == ["default"]
        assert config.get_database().url == f"sqlite:///{tmp_path / 'other.db'}"

    def test_quest_dir_config_is_found(self, tmp_path: Path, quest_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        (quest_dir / "sqlquest.yaml").write_text(
            "databases:\n  quest_local:\n    type: sqlite\n    path: local.db\n", encoding="utf-8",
        )

        assert load_config(quest_dir=quest_dir).default_database == "quest_local"


class TestConfigIncludes:
    """Test ``include:`` resolution."""

    def test_nested_includes_merge_in_order(self, tmp_path: Path) -> None:
        shared = tmp_path / "shared"
        shared.mkdir()
        (shared / "databases.yaml").write_text(
            "databases:\n  main:\n    type: sqlite\n    path: shared.db\nview:\n  schema: public\n  env: shared\n",
            encoding="utf-8",
        )
        (shared / "retry.yaml").write_text("include: databases.yaml\nretry:\n  times: 4\n", encoding="utf-8")
        path = tmp_path / "sqlquest.yaml"
        path.write_text("include:\n  - shared/retry.yaml\nview:\n  env: quest\n", encoding="utf-8")

        config = ConfigParser().load_config(path)

        assert config.databases["main"].path == "shared.db"
        assert config.retry.times == 4
        assert config.view == {"schema": "public", "env": "quest"}

    def test_include_cycle_rejected(self, tmp_path: Path) -> None:
        (tmp_path / "a.yaml").write_text("include: b.yaml\n", encoding="utf-8")
        (tmp_path / "b.yaml").write_text("include: a.yaml\n", encoding="utf-8")

        with pytest.raises(ConfigurationError, match="Circular configuration include"):
            ConfigParser().load_config(tmp_path / "a.yaml")

    def test_missing_include(self, tmp_path: Path) -> None:
        path = tmp_path / "sqlquest.yaml"
        path.write_text("include: nowhere.yaml\n", encoding="utf-8")

        with pytest.raises(ConfigurationError, match="Included file .* not found"):
            ConfigParser().load_config(path)

    def test_non_mapping_document_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "sqlquest.yaml"
        path.write_text("- just\n- a list\n", encoding="utf-8")

        with pytest.raises(ConfigurationError, match="must contain a mapping"):
            ConfigParser().load_config(path)


class TestExecutionSettings:
    """Test SQL directory validation."""

    @pytest.mark.parametrize("sql_dir", ["sql", "queries/nightly"])
    def test_relative_dirs_accepted(self, sql_dir: str) -> None:
        assert ExecutionSettings(sql_dir=sql_dir).sql_dir == sql_dir

    @pytest.mark.parametrize("sql_dir", ["/etc", "../shared", "sql/../../x", "  "])
    def test_dirs_outside_quest_rejected(self, sql_dir: str) -> None:
        with pytest.raises(ValidationError, match="relative path inside the quest directory"):
            ExecutionSettings(sql_dir=sql_dir)
