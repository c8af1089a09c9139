import pytest

from core.config import CONFIG_ENV_VAR, DEFAULT_CFG, load_config


def test_defaults_without_file(monkeypatch):
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    cfg = load_config()
    assert cfg == DEFAULT_CFG
    assert cfg is not DEFAULT_CFG


def test_file_is_deep_merged(tmp_path):
    path = tmp_path / "asset_info.yml"
    path.write_text("lookup:\n  enabled: false\nservices:\n  wifi: [AppleBCMWLANCore]\n", encoding="utf-8")

    cfg = load_config(str(path))

    assert cfg["lookup"]["enabled"] is False
    assert cfg["lookup"]["host"] == "support-sp.apple.com"
    assert cfg["services"]["wifi"] == ["AppleBCMWLANCore"]
    assert cfg["services"]["storage"] == ["AppleAPFSMedia", "CoreStorageLogical"]
    # defaults are never mutated by a merge
    assert DEFAULT_CFG["lookup"]["enabled"] is True


def test_env_var_path(tmp_path, monkeypatch):
    path = tmp_path / "cfg.yml"
    path.write_text("registry:\n  on_snapshot_failure: raise\n", encoding="utf-8")
    monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
    assert load_config()["registry"]["on_snapshot_failure"] == "raise"


def test_missing_explicit_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "nope.yml"))


def test_non_mapping_file(tmp_path):
    path = tmp_path / "list.yml"
    path.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(str(path))


def test_empty_sections_keep_defaults(tmp_path):
    path = tmp_path / "empty.yml"
    path.write_text("lookup:\nlogging:\nservices:\n  wifi:\n", encoding="utf-8")

    cfg = load_config(str(path))

    assert cfg["lookup"] == DEFAULT_CFG["lookup"]
    assert cfg["logging"]["level"] == "WARNING"
    assert cfg["services"]["wifi"] == DEFAULT_CFG["services"]["wifi"]


@pytest.mark.parametrize("text", [
    "lookup: yes\n",
    "services: [AirPort]\n",
    "services:\n  wifi: AirPort_BrcmNIC\n",
    "services:\n  storage: [AppleAPFSMedia, 3]\n",
])
def test_wrongly_typed_sections_rejected(tmp_path, text):
    path = tmp_path / "bad.yml"
    path.write_text(text, encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(str(path))
