# tests/core/methods/test_builder.py
"""
Testes do builder declarativo (`MethodSpecBuilder`).

Os testes asseguram que:
- strings viram `MethodTarget`, callables viram `Expression`, demais valores `Literal`
- transforms são normalizados (callable, caminho pontuado ou lista de passos)
- scope logic aceita 'and'/'or' em qualquer forma suportada
- storage aceita nome explícito, True/None (nome do método) ou False (desligado)
- a forma literal (`from_fields`) é equivalente à forma encadeada
- declarações inválidas falham no momento da declaração

Limites explícitos:
    - Não registra specs nem resolve data methods
"""

import pytest

try:
    from datamethods import (
        STORAGE_DISABLED,
        Expression,
        Literal,
        MethodSpecBuilder,
        MethodTarget,
        ScopeMode,
    )
    from datamethods.core.exceptions import InvalidMethodSpecError
except Exception as e:  # noqa: BLE001
    MethodSpecBuilder = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing builder modules. Implement:\n"
            "- src/datamethods/core/methods/builder.py (MethodSpecBuilder)\n"
            "- src/datamethods/core/methods/types.py (MethodSpec, targets)\n"
            f"Import error: {_IMPORT_ERR}"
        )


def test_chained_declaration_builds_immutable_spec():
    """
    Verifica que a forma encadeada produz um `MethodSpec` completo.

    Invariantes:
        - A ordem dos sources é a ordem de declaração
        - O spec compilado não pode ser alterado
    """
    _require_imports()
    fetch = lambda host: {"id": 1}  # noqa: E731
    spec = (
        MethodSpecBuilder("team_info")
        .scope({"team": "team:read"})
        .scope([{"user": "users:read"}], {"logic": "and", "base": "team"})
        .source("team_id", transform="info.name", retries=2)
        .source(fetch)
        .source(42)
        .condition("is_bot")
        .storage("team")
        .default_value("unknown")
        .info_key("team_name")
        .build()
    )

    assert spec.scopes == ({"team": "team:read"}, {"user": "users:read"})
    assert spec.scope_mode is ScopeMode.AND
    assert spec.scope_options == {"base": "team"}
    assert [s.target for s in spec.sources] == [MethodTarget("team_id"), Expression(fetch), Literal(42)]
    assert spec.sources[0].transform == ("info", "name")
    assert spec.sources[0].options == {"retries": 2}
    assert spec.conditions == ("is_bot",)
    assert spec.storage_key == "team"
    assert spec.default_value == "unknown"
    assert spec.info_key == "team_name"

    with pytest.raises(AttributeError):
        spec.name = "other"


def test_defaults():
    _require_imports()
    spec = MethodSpecBuilder("m").build()
    assert spec.scopes == ()
    assert spec.scope_mode is ScopeMode.OR
    assert spec.sources == ()
    assert spec.conditions == ()
    assert spec.default_value is None
    assert spec.storage_key == "m"
    assert spec.caching_enabled is True


@pytest.mark.parametrize("value", ["AND", "and", ScopeMode.AND, {"logic": "And"}])
def test_scope_logic_forms(value):
    _require_imports()
    assert MethodSpecBuilder("m").scope_opts(value).build().scope_mode is ScopeMode.AND


def test_invalid_scope_logic_fails_at_declaration():
    _require_imports()
    with pytest.raises(InvalidMethodSpecError):
        MethodSpecBuilder("m").scope_opts({"logic": "xor"})


@pytest.mark.parametrize(
    "key, expected_key",
    [(None, "m"), (True, "m"), ("shared", "shared"), (False, None)],
)
def test_storage_forms(key, expected_key):
    _require_imports()
    spec = MethodSpecBuilder("m").storage(key).build()
    assert spec.storage_key == expected_key
    assert spec.caching_enabled is (key is not False)


@pytest.mark.parametrize("key", ["", "  ", 3])
def test_invalid_storage_fails(key):
    _require_imports()
    with pytest.raises(InvalidMethodSpecError):
        MethodSpecBuilder("m").storage(key)


def test_storage_disabled_marker_is_falsy_singleton():
    _require_imports()
    spec = MethodSpecBuilder("m").storage(False).build()
    assert spec.storage is STORAGE_DISABLED
    assert not STORAGE_DISABLED
    assert repr(STORAGE_DISABLED) == "STORAGE_DISABLED"


@pytest.mark.parametrize("transform", ["", ".", [], [""], [1], 3.5])
def test_invalid_transform_fails(transform):
    _require_imports()
    with pytest.raises(InvalidMethodSpecError):
        MethodSpecBuilder("m").source("x", transform=transform)


@pytest.mark.parametrize("name", ["", "   ", None])
def test_invalid_name_fails(name):
    _require_imports()
    with pytest.raises(InvalidMethodSpecError):
        MethodSpecBuilder(name)


def test_from_fields_matches_chained_form():
    """
    Verifica que a forma literal estruturada equivale à forma encadeada.

    A forma literal aceita listas para `scope`, `source` e `condition`, e
    dicts como itens de `source`.
    """
    _require_imports()
    literal = MethodSpecBuilder.from_fields(
        "profile",
        {
            "scope": [{"user": "users.profile:read"}],
            "scope_opts": "and",
            "source": ["user_id", {"target": "identity", "transform": "user.profile"}],
            "condition": ["is_user"],
            "storage": False,
            "default_value": {},
            "info_key": "profile",
        },
    ).build()
    chained = (
        MethodSpecBuilder("profile")
        .scope({"user": "users.profile:read"})
        .scope_opts("and")
        .source("user_id")
        .source("identity", transform="user.profile")
        .condition("is_user")
        .storage(False)
        .default_value({})
        .info_key("profile")
        .build()
    )
    assert literal == chained


def test_from_fields_rejects_unknown_fields():
    _require_imports()
    with pytest.raises(InvalidMethodSpecError) as exc:
        MethodSpecBuilder.from_fields("m", {"sources": ["x"]})
    assert exc.value.details["unknown"] == ["sources"]


def test_from_fields_accepts_tuples_as_several_declarations():
    """
    Verifica que tuplas, como listas, declaram um item por elemento.

    Invariantes:
        - `source=("a", "b")` produz dois `MethodTarget`, nunca um `Literal` da tupla
    """
    _require_imports()
    spec = MethodSpecBuilder.from_fields(
        "m",
        {"source": ("api_a", "api_b"), "condition": ("ready", "allowed"), "scope": ({"a": 1}, {"b": 2})},
    ).build()
    assert [s.target for s in spec.sources] == [MethodTarget("api_a"), MethodTarget("api_b")]
    assert spec.conditions == ("ready", "allowed")
    assert spec.scopes == ({"a": 1}, {"b": 2})


def test_from_fields_source_mapping_with_options():
    _require_imports()
    spec = MethodSpecBuilder.from_fields(
        "m", {"source": [{"target": "identity", "transform": ["user"], "retries": 1}]}
    ).build()
    [src] = spec.sources
    assert src.target == MethodTarget("identity")
    assert src.transform == ("user",)
    assert src.options == {"retries": 1}


@pytest.mark.parametrize("source", [[{"team": "T1"}], {"team": "T1"}])
def test_from_fields_rejects_source_mapping_without_target_or_transform(source):
    _require_imports()
    with pytest.raises(InvalidMethodSpecError) as exc:
        MethodSpecBuilder.from_fields("m", {"source": source})
    assert exc.value.details["keys"] == ["team"]


def test_fixed_mapping_value_is_declared_with_literal():
    _require_imports()
    spec = MethodSpecBuilder.from_fields("m", {"source": [Literal({"team": "T1"})]}).build()
    assert spec.sources[0].target == Literal({"team": "T1"})
