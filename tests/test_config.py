"""Tests for configuration file support."""

import warnings

import pytest

from cranelift_tools.config import (
    DEFAULT_SHELL_ARGS,
    BuildConfig,
    BumpConfig,
    Config,
    DefaultsConfig,
    JitTestConfig,
    _find_project_config,
    _load_toml_file,
    generate_template,
    get_config_paths,
)
from cranelift_tools.exceptions import ConfigError


class TestConfigDataclasses:
    """Test configuration dataclass defaults."""

    def test_defaults_config_defaults(self):
        config = DefaultsConfig()
        assert config.verbose is False
        assert config.quiet is False

    def test_bump_config_defaults(self):
        config = BumpConfig()
        assert config.crate == "cranelift-codegen"
        assert config.repository == "bytecodealliance/wasmtime"
        assert config.allow_large is False
        assert config.timeout == 30.0

    def test_tests_config_defaults(self):
        config = JitTestConfig()
        assert config.shell_args == DEFAULT_SHELL_ARGS
        assert "--wasm-compiler=cranelift" in config.shell_args
        assert config.default_filter is None

    def test_build_config_defaults(self):
        config = BuildConfig()
        assert config.jobs is None
        assert config.make == "make"

    def test_config_defaults(self):
        config = Config()
        assert isinstance(config.defaults, DefaultsConfig)
        assert isinstance(config.bump, BumpConfig)
        assert isinstance(config.tests, JitTestConfig)
        assert isinstance(config.build, BuildConfig)


class TestConfigDiscovery:
    """Test config file discovery."""

    def test_find_project_config_in_current_dir(self, tmp_path):
        config_file = tmp_path / ".cranelift-tools.toml"
        config_file.write_text("[build]\njobs = 4\n")

        assert _find_project_config(tmp_path) == config_file

    def test_find_project_config_alternate_name(self, tmp_path):
        config_file = tmp_path / "cranelift-tools.toml"
        config_file.write_text("[build]\njobs = 4\n")

        assert _find_project_config(tmp_path) == config_file

    def test_find_project_config_prefers_hidden(self, tmp_path):
        (tmp_path / "cranelift-tools.toml").write_text("[build]\njobs = 2\n")
        hidden = tmp_path / ".cranelift-tools.toml"
        hidden.write_text("[build]\njobs = 4\n")

        assert _find_project_config(tmp_path) == hidden

    def test_find_project_config_walks_up(self, tmp_path):
        parent_config = tmp_path / ".cranelift-tools.toml"
        parent_config.write_text("[build]\njobs = 4\n")

        objdir = tmp_path / "obj-debug" / "dist"
        objdir.mkdir(parents=True)

        assert _find_project_config(objdir) == parent_config

    @pytest.mark.parametrize("marker", [".git", ".hg"])
    def test_find_project_config_stops_at_repo_root(self, tmp_path, marker):
        project = tmp_path / "gecko"
        (project / marker).mkdir(parents=True)
        (tmp_path / ".cranelift-tools.toml").write_text("[build]\n")

        assert _find_project_config(project) is None

    def test_find_project_config_finds_in_repo_root(self, tmp_path):
        (tmp_path / ".hg").mkdir()
        config_file = tmp_path / ".cranelift-tools.toml"
        config_file.write_text("[build]\n")

        assert _find_project_config(tmp_path) == config_file


class TestLoadToml:
    """Test TOML file loading."""

    def test_load_valid_toml(self, tmp_path):
        config_file = tmp_path / "config.toml"
        config_file.write_text('[tests]\ndefault_filter = "wasm"\n\n[build]\njobs = 16\n')

        result = _load_toml_file(config_file)
        assert result["tests"]["default_filter"] == "wasm"
        assert result["build"]["jobs"] == 16

    def test_load_invalid_toml(self, tmp_path):
        config_file = tmp_path / "config.toml"
        config_file.write_text("invalid [ toml syntax")

        with pytest.raises(ConfigError, match="Invalid TOML"):
            _load_toml_file(config_file)

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="Cannot read"):
            _load_toml_file(tmp_path / "nonexistent.toml")


class TestConfigLoad:
    """Test Config.load() method."""

    def test_load_defaults_only(self, tmp_path):
        (tmp_path / ".git").mkdir()

        config = Config.load(tmp_path)
        assert config.build.jobs is None
        assert config.tests.default_filter is None
        assert config.get_source("build.jobs") == "default"

    def test_load_project_config(self, tmp_path):
        (tmp_path / ".hg").mkdir()
        (tmp_path / ".cranelift-tools.toml").write_text(
            '[tests]\ndefault_filter = "wasm"\n\n[bump]\nallow_large = true\n'
        )

        config = Config.load(tmp_path)
        assert config.tests.default_filter == "wasm"
        assert config.bump.allow_large is True

    def test_load_user_config(self, tmp_path, monkeypatch):
        (tmp_path / ".git").mkdir()
        user_config = tmp_path / "user-config.toml"
        user_config.write_text("[defaults]\nverbose = true\n\n[build]\njobs = 6\n")
        monkeypatch.setattr("cranelift_tools.config.USER_CONFIG_PATH", user_config)

        config = Config.load(tmp_path)
        assert config.defaults.verbose is True
        assert config.build.jobs == 6

    def test_project_overrides_user(self, tmp_path, monkeypatch):
        (tmp_path / ".git").mkdir()
        user_config = tmp_path / "user-config.toml"
        user_config.write_text('[build]\njobs = 6\nmake = "gmake"\n')
        project_config = tmp_path / ".cranelift-tools.toml"
        project_config.write_text("[build]\njobs = 32\n")
        monkeypatch.setattr("cranelift_tools.config.USER_CONFIG_PATH", user_config)

        config = Config.load(tmp_path)
        # Project overrides user
        assert config.build.jobs == 32
        # User value preserved when not in project
        assert config.build.make == "gmake"
        assert config.get_source("build.jobs") == str(project_config)
        assert config.get_source("build.make") == str(user_config)

    def test_unknown_keys_warn(self, tmp_path):
        (tmp_path / ".git").mkdir()
        (tmp_path / ".cranelift-tools.toml").write_text(
            "[route]\nstrategy = 'basic'\n\n[build]\nthreads = 4\n"
        )

        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            Config.load(tmp_path)

        messages = [str(w.message) for w in caught]
        assert any("Unknown config key 'route'" in m for m in messages)
        assert any("Unknown config key 'build.threads'" in m for m in messages)

    def test_section_must_be_table(self, tmp_path):
        (tmp_path / ".git").mkdir()
        (tmp_path / ".cranelift-tools.toml").write_text('build = "fast"\n')

        with pytest.raises(ConfigError, match="must be a table"):
            Config.load(tmp_path)


class TestTemplate:
    def test_template_is_valid_toml(self, tmp_path):
        path = tmp_path / "template.toml"
        path.write_text(generate_template())

        # Everything is commented out, so the template loads as empty sections
        data = _load_toml_file(path)
        assert set(data) == {"defaults", "bump", "tests", "build"}
        assert all(section == {} for section in data.values())

    def test_template_mentions_every_key(self):
        template = generate_template()
        for key in ("verbose", "crate", "repository", "shell_args", "default_filter", "jobs", "make"):
            assert f"# {key} =" in template


class TestConfigPaths:
    def test_paths(self, tmp_path, monkeypatch):
        (tmp_path / ".git").mkdir()
        config_file = tmp_path / "cranelift-tools.toml"
        config_file.write_text("")
        monkeypatch.chdir(tmp_path)

        paths = get_config_paths()
        assert paths["user"] is None
        assert paths["project"] == config_file
