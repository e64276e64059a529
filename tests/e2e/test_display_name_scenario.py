# tests/e2e/test_display_name_scenario.py
"""
Cenário ponta a ponta: cadeia user_id → profile → display_name.

Simula uma strategy de autenticação que deriva o nome de exibição a partir
do perfil do usuário, que por sua vez depende do id do usuário. O cenário
percorre configuração em YAML, resolução encadeada, cache, preload e
fallback quando a cadeia é desligada pela allow-list.
"""

from pathlib import Path

from datamethods import DataMethods


def _strategy_class():
    class SlackLikeStrategy(DataMethods):
        granted = ({"user": "users.profile:read"},)

        def has_scope(self, queries, options):
            return any(q in self.granted for q in queries)

    SlackLikeStrategy.data_method("user_id", default_value="U1")
    SlackLikeStrategy.data_method(
        "profile",
        lambda m: m.scope({"user": "users.profile:read"}).source("user_id", transform=lambda uid: uid + "-profile"),
    )
    SlackLikeStrategy.data_method(
        "display_name",
        lambda m: m.source("profile").default_value("anon").info_key("name"),
    )
    return SlackLikeStrategy


def test_chain_resolves_through_profile():
    Strategy = _strategy_class()
    strategy = Strategy()

    assert Strategy.dependency_tree()["display_name"] == {"profile": 1, "user_id": 1}
    assert strategy.display_name() == "U1-profile"
    assert strategy.apply_data_methods() == {"name": "U1-profile"}


def test_chain_falls_back_when_profile_yields_nothing():
    Strategy = _strategy_class()
    # user_id fora da allow-list: o único source de profile deixa de ser elegível
    strategy = Strategy(options={"dependencies": ["display_name", "profile"]})

    assert strategy.profile() is None
    assert strategy.display_name() == "anon"


def test_chain_falls_back_without_scope():
    Strategy = _strategy_class()
    Strategy.granted = ()

    assert Strategy().display_name() == "anon"


def test_yaml_configured_strategy_preloads_chain(tmp_path: Path):
    defaults = tmp_path / "defaults.yaml"
    defaults.write_text(
        "data_methods:\n"
        "  dependencies: user_id profile display_name\n"
        "  log_level: info\n"
        "  preload:\n"
        "    threads: 3\n",
        encoding="utf-8",
    )
    Strategy = _strategy_class()
    strategy = Strategy.from_config_files(defaults)

    assert strategy.preload() == 3
    assert strategy.data_context.get_cached("display_name") == "U1-profile"
    assert strategy.data_context.events[0]["message"] == "Preloading (3) methods with (3) threads"
