"""Tests for YAML configuration."""

from pathlib import Path

import pytest

from kidcal.config import Config
from kidcal.models import ValidationError


@pytest.fixture
def home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolated home and working directories."""
    home = tmp_path / "home"
    work = tmp_path / "work"
    home.mkdir()
    work.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(work)
    return home


def test_defaults(home: Path) -> None:
    """Test built-in defaults apply when nothing is set."""
    config = Config()
    assert config.get("store") == "json"
    assert config.autosave_delay() == 0.3
    assert config.store_path() == Path.cwd() / ".kidcal" / "data.json"
    assert config.list() == {}


def test_set_get_unset(home: Path) -> None:
    """Test local values are saved and removed."""
    config = Config()
    config.set("store", "sqlite")
    assert Config().get("store") == "sqlite"
    assert Config().store_path().name == "data.db"
    config.unset("store")
    assert Config().get("store") == "json"


def test_local_overrides_global(home: Path) -> None:
    """Test local values win over global ones, which win over defaults."""
    Config(use_global=True).set("autosave.delay_ms", "1000")
    assert Config().autosave_delay() == 1.0
    Config().set("autosave.delay_ms", "50")
    assert Config().autosave_delay() == 0.05
    assert Config(use_global=True).get("autosave.delay_ms") == 1000
    assert Config().list() == {"autosave.delay_ms": 50}


def test_invalid_delay_falls_back(home: Path) -> None:
    """Test a hand-edited non-numeric delay uses the default."""
    config_dir = Path.cwd() / ".kidcal"
    config_dir.mkdir()
    (config_dir / "config.yaml").write_text("autosave.delay_ms: soon\n")
    assert Config().autosave_delay() == 0.3


@pytest.mark.parametrize(
    ("key", "value", "reason"),
    [
        ("store", "postgres", "one of"),
        ("store.path", "  ", "empty"),
        ("autosave.delay_ms", "soon", "milliseconds"),
        ("autosave.delay_ms", "-5", "negative"),
        ("colour", "blue", "Unknown config key"),
    ],
)
def test_set_rejects_bad_values(home: Path, key: str, value: str, reason: str) -> None:
    """Test set validates the key and value and writes nothing on failure."""
    config = Config()
    with pytest.raises(ValidationError, match=reason):
        config.set(key, value)
    assert not (Path.cwd() / ".kidcal" / "config.yaml").exists()


def test_set_normalizes_values(home: Path) -> None:
    """Test values are stored in their checked form."""
    config = Config()
    config.set("store", " SQLite ")
    config.set("autosave.delay_ms", "250")
    assert Config().list() == {"store": "sqlite", "autosave.delay_ms": 250}


def test_source(home: Path) -> None:
    """Test where each effective value comes from."""
    Config(use_global=True).set("store", "sqlite")
    Config().set("autosave.delay_ms", "10")
    config = Config()
    assert config.source("autosave.delay_ms") == "local"
    assert config.source("store") == "global"
    assert config.source("store.path") is None
    assert Config(use_global=True).source("autosave.delay_ms") == "default"


def test_explicit_store_path(home: Path) -> None:
    """Test store.path overrides the default location."""
    config = Config()
    config.set("store.path", "/tmp/kids.json")
    assert config.store_path() == Path("/tmp/kids.json")


def test_broken_config_file(home: Path) -> None:
    """Test unreadable YAML raises ValueError."""
    config_dir = Path.cwd() / ".kidcal"
    config_dir.mkdir()
    (config_dir / "config.yaml").write_text("store: [unclosed\n")
    with pytest.raises(ValueError, match="Failed to load config"):
        Config()


def test_custom_config_dir(tmp_path: Path, home: Path) -> None:
    """Test a custom directory is used for the config file."""
    config = Config(config_dir=tmp_path / "custom")
    config.set("store", "sqlite")
    assert (tmp_path / "custom" / "config.yaml").exists()
