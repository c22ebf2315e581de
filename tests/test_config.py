"""Tests for modctx.config module."""

from __future__ import annotations

from pathlib import Path

import pytest

from modctx.config import (
    DEFAULT_EXCLUDED_MODULES,
    ContextConfig,
    RuntimeSettings,
    deep_merge,
    find_config_file,
)

SAMPLE_CONFIG = {
    "runtime": {"executable": "powershell", "module_path_variable": "PSModulePath"},
    "context": {
        "modules_dir": "mods",
        "context_dir": "meta",
        "excluded_modules": ["modctx", "posh-git"],
    },
}


# ---------------------------------------------------------------------------
# deep_merge
# ---------------------------------------------------------------------------


class TestDeepMerge:
    def test_basic(self):
        base = {"a": 1, "b": {"c": 2, "d": 3}}
        override = {"b": {"c": 99, "e": 5}}
        assert deep_merge(base, override) == {"a": 1, "b": {"c": 99, "d": 3, "e": 5}}

    def test_does_not_mutate_base(self):
        base = {"a": 1, "b": {"c": 2}}
        deep_merge(base, {"b": {"c": 99}})
        assert base["b"]["c"] == 2

    def test_override_dict_with_scalar(self):
        assert deep_merge({"a": {"nested": 1}}, {"a": "scalar"})["a"] == "scalar"

    def test_disjoint_keys(self):
        assert deep_merge({"a": 1}, {"b": 2}) == {"a": 1, "b": 2}


# ---------------------------------------------------------------------------
# ContextConfig.from_dict
# ---------------------------------------------------------------------------


class TestFromDict:
    def test_basic(self):
        config = ContextConfig.from_dict(SAMPLE_CONFIG)
        assert config.runtime.executable == "powershell"
        assert config.context.modules_dir == "mods"
        assert config.context.excluded_modules == ("modctx", "posh-git")

    def test_defaults(self):
        config = ContextConfig.from_dict({})
        assert config.runtime.executable == "pwsh"
        assert config.runtime.module_path_variable == "PSModulePath"
        assert config.context.modules_dir == "Modules"
        assert config.context.context_dir == "Context"
        assert config.context.excluded_modules == DEFAULT_EXCLUDED_MODULES

    def test_layout_uses_directory_names(self, tmp_path):
        config = ContextConfig.from_dict(SAMPLE_CONFIG)
        layout = config.context.layout(tmp_path / "dev")
        assert layout.modules_dir_path() == tmp_path / "dev" / "mods"
        assert layout.manifest_path() == tmp_path / "dev" / "meta" / "Context_dev.json"

    def test_is_excluded_case_insensitive(self):
        config = ContextConfig.from_dict(SAMPLE_CONFIG)
        assert config.context.is_excluded("POSH-GIT")
        assert not config.context.is_excluded("posh")


class TestRuntimeSettings:
    @pytest.mark.parametrize(
        "path",
        [
            "/opt/microsoft/powershell/7/Modules/PSReadLine",
            r"C:\Program Files\PowerShell\7\Modules\PackageManagement\1.4.8.1",
            r"C:\WINDOWS\system32\WindowsPowerShell\v1.0\Modules\Microsoft.PowerShell.Utility",
        ],
    )
    def test_builtin_paths(self, path):
        assert RuntimeSettings().is_builtin(path)

    @pytest.mark.parametrize(
        "path",
        [
            "/home/u/.local/share/powershell/Modules/Pester/5.5.0",
            r"C:\Users\me\Documents\PowerShell\Modules\Pester\5.5.0",
        ],
    )
    def test_user_paths(self, path):
        assert not RuntimeSettings().is_builtin(path)


# ---------------------------------------------------------------------------
# Loading from disk
# ---------------------------------------------------------------------------


class TestLoad:
    def test_find_walks_up(self, tmp_path):
        (tmp_path / ".modctx.toml").write_text("")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        assert find_config_file(nested) == (tmp_path / ".modctx.toml").resolve()

    def test_missing_file_gives_defaults(self, tmp_path):
        config = ContextConfig.load(tmp_path)
        assert config == ContextConfig()
        assert config.source is None

    def test_load_with_local_override(self, tmp_path):
        (tmp_path / ".modctx.toml").write_text(
            '[runtime]\nexecutable = "powershell"\n\n'
            '[context]\nmodules_dir = "mods"\n'
        )
        (tmp_path / ".modctx.local.toml").write_text(
            '[runtime]\nexecutable = "pwsh-preview"\n'
        )

        config = ContextConfig.load(tmp_path)

        assert config.runtime.executable == "pwsh-preview"
        assert config.context.modules_dir == "mods"
        assert config.source == (tmp_path / ".modctx.toml").resolve()
