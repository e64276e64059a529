# tests/core/config/test_options.py
"""
Testes da validação da seção `data_methods` (`DataMethodsOptions`).

Os testes asseguram que:
- a seção ausente produz os defaults
- valores válidos são preservados
- chaves desconhecidas e tipos inválidos são rejeitados explicitamente

Invariantes:
    - Nenhuma opção inválida é aceita silenciosamente
"""

from pathlib import Path

import pytest

from datamethods import DataMethodsOptions, load_config
from datamethods.core.config.errors import ConfigError, InvalidOptionsError


def test_missing_section_yields_defaults():
    opts = DataMethodsOptions.from_config({})
    assert opts == DataMethodsOptions()
    assert opts.dependencies is None
    assert opts.dependency_filter is None
    assert opts.log_level == "info"
    assert opts.preload_threads == 1


def test_options_from_loaded_config(tmp_path: Path, data_methods_defaults_yaml, data_methods_local_yaml):
    defaults = tmp_path / "defaults.yaml"
    local = tmp_path / "local.yaml"
    defaults.write_text(data_methods_defaults_yaml, encoding="utf-8")
    local.write_text(data_methods_local_yaml, encoding="utf-8")

    opts = DataMethodsOptions.from_config(load_config(defaults_path=str(defaults), local_path=str(local)))
    assert opts.dependencies == ["user_profile", "user_id"]
    assert opts.dependency_filter == "^(team|user)"
    assert opts.log_level == "debug"
    assert opts.preload_threads == 4


def test_string_and_callable_dependencies_are_accepted():
    assert DataMethodsOptions.from_dict({"dependencies": "a b"}).dependencies == "a b"
    fn = lambda host: ["a"]  # noqa: E731
    assert DataMethodsOptions.from_dict({"dependencies": fn}).dependencies is fn


@pytest.mark.parametrize(
    "section",
    [
        {"dependency": ["a"]},
        {"dependencies": 3},
        {"dependencies": ["a", 1]},
        {"log_level": "trace"},
        {"preload": 2},
        {"preload": {"workers": 2}},
        {"preload": {"threads": -1}},
        {"preload": {"threads": "2"}},
        {"preload": {"threads": True}},
    ],
)
def test_invalid_sections_are_rejected(section):
    with pytest.raises(InvalidOptionsError):
        DataMethodsOptions.from_dict(section)


def test_non_mapping_section_is_rejected():
    with pytest.raises(ConfigError):
        DataMethodsOptions.from_config({"data_methods": ["dependencies"]})


def test_load_reads_merges_and_validates(tmp_path: Path, data_methods_defaults_yaml):
    defaults = tmp_path / "defaults.yaml"
    defaults.write_text(data_methods_defaults_yaml, encoding="utf-8")
    opts = DataMethodsOptions.load(defaults, tmp_path / "missing.yaml")
    assert opts.dependency_filter == "^(team|user)"
    assert opts.preload_threads == 2


def test_load_rejects_invalid_section(tmp_path: Path):
    defaults = tmp_path / "defaults.json"
    defaults.write_text('{"data_methods": {"preload": {"threads": -2}}}', encoding="utf-8")
    with pytest.raises(InvalidOptionsError):
        DataMethodsOptions.load(defaults)


@pytest.mark.parametrize("level", ["critical", "fatal"])
def test_severe_log_levels_are_valid_options(level):
    assert DataMethodsOptions.from_dict({"log_level": level}).log_level == level
