"""Config loading unit tests."""

from pathlib import Path

import pytest

from k1s0_pagination import (
    ConfigError,
    ConfigErrorCodes,
    PaginationConfig,
    generate_key,
    load,
)

KEY = generate_key()


def write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def test_load_defaults(tmp_path: Path) -> None:
    """A minimal file falls back to defaults."""
    base = write(tmp_path / "config.yaml", f"pagination:\n  token_keys: ['{KEY}']\n")
    config = load(base)
    assert config.default_page_size == 50
    assert config.max_page_size == 1000
    assert config.token_ttl == 259200
    assert config.store == "none"
    assert config.log.format == "json"


def test_load_top_level_section(tmp_path: Path) -> None:
    """Settings may sit at the top level without a pagination: key."""
    base = write(tmp_path / "config.yaml", f"token_keys: ['{KEY}']\nmax_page_size: 200\n")
    assert load(base).max_page_size == 200


def test_env_file_overrides_base(tmp_path: Path) -> None:
    """The environment file overrides the base file."""
    base = write(
        tmp_path / "config.yaml",
        f"pagination:\n  token_keys: ['{KEY}']\n  lister_timeout: 5\n  log:\n    level: INFO\n",
    )
    env = write(
        tmp_path / "config.prod.yaml",
        "pagination:\n  lister_timeout: 2.5\n  store: memory\n  log:\n    format: text\n",
    )
    config = load(base, env)
    assert config.lister_timeout == 2.5
    assert config.store == "memory"
    assert config.log.level == "INFO"
    assert config.log.format == "text"


def test_missing_env_file_ignored(tmp_path: Path) -> None:
    base = write(tmp_path / "config.yaml", f"token_keys: ['{KEY}']\n")
    assert load(base, tmp_path / "absent.yaml").token_keys == [KEY]


def test_missing_base_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigError) as exc_info:
        load(tmp_path / "absent.yaml")
    assert exc_info.value.code == ConfigErrorCodes.READ_FILE


def test_invalid_yaml(tmp_path: Path) -> None:
    base = write(tmp_path / "config.yaml", "pagination: [unclosed\n")
    with pytest.raises(ConfigError) as exc_info:
        load(base)
    assert exc_info.value.code == ConfigErrorCodes.PARSE_YAML


@pytest.mark.parametrize(
    "body",
    [
        "max_page_size: 10\n",
        f"token_keys: ['{KEY}']\nmax_page_size: 10\ndefault_page_size: 20\n",
        f"token_keys: ['{KEY}']\nmax_page_size: -1\n",
        f"token_keys: ['{KEY}']\nlister_timeout: 0\n",
        f"token_keys: ['{KEY}']\nstore: redis\n",
        "token_keys: ['c2hvcnQ=']\n",
        "token_keys: []\n",
    ],
)
def test_validation_errors(tmp_path: Path, body: str) -> None:
    base = write(tmp_path / "config.yaml", body)
    with pytest.raises(ConfigError) as exc_info:
        load(base)
    assert exc_info.value.code == ConfigErrorCodes.VALIDATION
    assert str(exc_info.value).startswith("VALIDATION_ERROR: ")


def test_token_ttl_delta() -> None:
    config = PaginationConfig(token_keys=[KEY], token_ttl=90)
    assert config.token_ttl_delta.total_seconds() == 90


def test_env_file_replaces_lists(tmp_path: Path) -> None:
    other = generate_key()
    base = write(tmp_path / "config.yaml", f"token_keys: ['{KEY}']\nsweep_interval: 60\n")
    env = write(tmp_path / "config.prod.yaml", f"token_keys: ['{other}', '{KEY}']\n")
    config = load(base, env)
    assert config.token_keys == [other, KEY]
    assert config.sweep_interval == 60
