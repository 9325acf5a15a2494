"""Tests for the Registry init/use/wipe lifecycle and store semantics."""

from unittest.mock import patch

import pytest

import configninja
from configninja.core.errors import ConfigError
from configninja.core.registry import Registry, SharingMode
from configninja.core.view import ConfigView


class TestInit:
    def test_init_returns_view(self, registry, config_dir):
        config = registry.init("app", config_dir, "staging")
        assert isinstance(config, ConfigView)
        assert config["a"] == 1
        assert config["nested"]["number"] == 3

    def test_init_twice_fails_before_reading(self, registry, config_dir):
        registry.init("app", config_dir, "staging")
        with patch("configninja.core.registry.ConfigBuilder") as builder:
            with pytest.raises(ConfigError, match="already exists"):
                registry.init("app", config_dir, "staging")
            builder.assert_not_called()

    def test_failed_build_leaves_no_entry(self, registry, config_dir):
        with pytest.raises(ConfigError):
            registry.init("app", config_dir, "qa")
        assert not registry.has("app")

    def test_plain_option(self, registry, config_dir):
        config = registry.init("app", config_dir, "staging", {"plain": True})
        assert type(config) is dict


class TestUse:
    def test_use_unknown_id(self, registry):
        with pytest.raises(ConfigError, match="not been initialised"):
            registry.use("missing")

    def test_use_does_not_rebuild(self, registry, config_dir):
        registry.init("app", config_dir, "staging")
        with patch("configninja.core.registry.ConfigBuilder") as builder:
            registry.use("app")
            builder.assert_not_called()

    def test_shared_views_share_identity(self, registry, config_dir):
        first = registry.init("app", config_dir, "staging")
        second = registry.use("app")
        assert first is second
        first["added"] = "value"
        assert second["added"] == "value"
        assert registry.use("app", plain=True)["added"] == "value"

    def test_immutable_views_are_independent(self, registry, config_dir):
        first = registry.init("app", config_dir, "staging", {"immutable": True})
        second = registry.use("app")
        assert first is not second
        first["nested"]["number"] = 100
        assert second["nested"]["number"] == 3
        assert registry.use("app")["nested"]["number"] == 3

    def test_immutable_override_per_call(self, registry, config_dir):
        shared = registry.init("app", config_dir, "staging")
        detached = registry.use("app", immutable=True)
        detached["a"] = 42
        assert shared["a"] == 1

    def test_plain_override_per_call(self, registry, config_dir):
        registry.init("app", config_dir, "staging")
        plain = registry.use("app", plain=True)
        assert type(plain) is dict
        assert not hasattr(plain, "reload")
        assert plain is registry.use("app", plain=True)


class TestWipe:
    def test_wipe_unknown_id(self, registry):
        with pytest.raises(ConfigError, match="not been initialised"):
            registry.wipe("missing")

    def test_wipe_then_use_fails(self, registry, config_dir):
        config = registry.init("app", config_dir, "staging")
        registry.wipe("app")
        with pytest.raises(ConfigError):
            registry.use("app")
        with pytest.raises(ConfigError):
            config.reload()
        assert config["a"] == 1

    def test_wipe_allows_reinit(self, registry, config_dir):
        registry.init("app", config_dir, "staging")
        registry.wipe("app")
        config = registry.init("app", config_dir, "production")
        assert config["env"]["id"] == "production"


class TestStore:
    def test_reload_updates_shared_entry_in_place(self, registry, write_config):
        write_config("production", {"a": 1})
        config = registry.init("app", write_config.directory, "production")
        write_config("production", {"a": 2, "fresh": True})
        reloaded = config.reload()
        assert reloaded is config
        assert config["a"] == 2
        assert config["fresh"] is True

    def test_reload_drops_removed_keys(self, registry, write_config):
        write_config("production", {"a": 1, "gone": True})
        config = registry.init("app", write_config.directory, "production")
        write_config("production", {"a": 1})
        config.reload()
        assert "gone" not in config

    def test_reload_replaces_immutable_entry(self, registry, write_config):
        write_config("production", {"a": 1})
        config = registry.init("app", write_config.directory, "production", {"immutable": True})
        write_config("production", {"a": 2})
        reloaded = config.reload()
        assert config["a"] == 1
        assert reloaded["a"] == 2
        assert registry.use("app")["a"] == 2

    def test_failed_reload_keeps_entry(self, registry, write_config):
        write_config("production", {"a": 1})
        config = registry.init("app", write_config.directory, "production")
        write_config("production", "{broken", raw=True)
        with pytest.raises(ConfigError):
            config.reload()
        assert config["a"] == 1
        assert registry.use("app")["a"] == 1

    def test_sharing_mode(self, registry, config_dir):
        registry.init("shared", config_dir, "staging")
        registry.init("cloned", config_dir, "staging", {"immutable": True})
        assert registry._entries["shared"].sharing is SharingMode.SHARED
        assert registry._entries["cloned"].sharing is SharingMode.CLONED

    def test_registries_are_isolated(self, config_dir):
        first, second = Registry(), Registry()
        first.init("app", config_dir, "staging")
        assert not second.has("app")
        assert first.ids() == ["app"]


def test_module_level_helpers(config_dir):
    try:
        config = configninja.init("module-level", config_dir, "staging")
        assert configninja.use("module-level") is config
    finally:
        if configninja.registry.has("module-level"):
            configninja.wipe("module-level")
    assert not configninja.registry.has("module-level")


def test_clear_forgets_every_entry(registry, config_dir):
    registry.init("one", config_dir, "staging")
    registry.init("two", config_dir, "production")
    registry.clear()
    assert registry.ids() == []
