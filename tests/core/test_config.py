# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Tests for the configuration system."""

from dataclasses import dataclass, field
from pathlib import Path

import pytest

from pyfly_csrf.core.config import Config, config_properties


@config_properties(prefix="pyfly.csrf")
@dataclass
class _CsrfSection:
    token_key: str = "XSRF-TOKEN"
    max_age: int = 0
    secure: bool = False
    ignored_methods: list[str] = field(default_factory=lambda: ["GET"])


class TestConfig:
    def test_load_from_dict(self):
        config = Config({"pyfly": {"csrf": {"token-key": "APP-TOKEN"}}})
        assert config.get("pyfly.csrf.token-key") == "APP-TOKEN"

    def test_get_with_default(self):
        assert Config({}).get("missing.key", "default") == "default"

    def test_get_section(self):
        config = Config({"pyfly": {"csrf": {"cookie": {"path": "/app"}}}})
        assert config.get_section("pyfly.csrf.cookie") == {"path": "/app"}
        assert config.get_section("pyfly.missing") == {}

    def test_load_from_yaml_file(self, tmp_path: Path):
        config_file = tmp_path / "pyfly.yaml"
        config_file.write_text("pyfly:\n  csrf:\n    token-key: YAML-TOKEN\n")
        config = Config.from_file(config_file)
        assert config.get("pyfly.csrf.token-key") == "YAML-TOKEN"
        assert config.loaded_sources == [str(config_file)]

    def test_load_from_toml_file(self, tmp_path: Path):
        config_file = tmp_path / "pyfly.toml"
        config_file.write_text('[pyfly.csrf]\nerror-message = "Forbidden"\n')
        config = Config.from_file(config_file)
        assert config.get("pyfly.csrf.error-message") == "Forbidden"

    def test_missing_file_is_empty(self, tmp_path: Path):
        config = Config.from_file(tmp_path / "absent.yaml")
        assert config.to_dict() == {}
        assert config.loaded_sources == []

    def test_env_var_override(self, monkeypatch):
        monkeypatch.setenv("PYFLY_CSRF_TOKEN_KEY", "ENV-TOKEN")
        config = Config({"pyfly": {"csrf": {"token-key": "FILE-TOKEN"}}})
        assert config.get("pyfly.csrf.token-key") == "ENV-TOKEN"

    def test_env_key(self):
        assert Config.env_key("pyfly.csrf.token-key") == "PYFLY_CSRF_TOKEN_KEY"
        assert Config.env_key("app.name") == "PYFLY_APP_NAME"


class TestProfileConfigMerging:
    def test_merge_profile_config(self, tmp_path):
        base = tmp_path / "pyfly.yaml"
        base.write_text("pyfly:\n  csrf:\n    token-key: BASE\n    error-message: base\n")

        profile = tmp_path / "pyfly-prod.yaml"
        profile.write_text("pyfly:\n  csrf:\n    token-key: PROD\n")

        config = Config.from_file(base, active_profiles=["prod"])
        assert config.get("pyfly.csrf.token-key") == "PROD"
        assert config.get("pyfly.csrf.error-message") == "base"
        assert len(config.loaded_sources) == 2

    def test_missing_profile_file_is_skipped(self, tmp_path):
        base = tmp_path / "pyfly.yaml"
        base.write_text("app:\n  name: test\n")

        config = Config.from_file(base, active_profiles=["nonexistent"])
        assert config.get("app.name") == "test"


class TestPlaceholderResolution:
    def test_resolve_env_var(self, monkeypatch):
        monkeypatch.setenv("CSRF_SIGNING_KEY", "s3cret")
        config = Config({"pyfly": {"csrf": {"secret": "${CSRF_SIGNING_KEY}"}}})
        assert config.get("pyfly.csrf.secret") == "s3cret"

    def test_resolve_config_reference(self):
        config = Config({"app": {"key": "abc"}, "pyfly": {"csrf": {"secret": "${app.key}"}}})
        assert config.get("pyfly.csrf.secret") == "abc"

    def test_resolve_with_default(self, monkeypatch):
        monkeypatch.delenv("CSRF_SIGNING_KEY", raising=False)
        config = Config({"key": "${CSRF_SIGNING_KEY:fallback}"})
        assert config.get("key") == "fallback"

    def test_unresolvable_raises(self, monkeypatch):
        monkeypatch.delenv("NOPE_NOT_SET", raising=False)
        config = Config({"key": "${NOPE_NOT_SET}"})
        with pytest.raises(ValueError, match="Cannot resolve placeholder"):
            config.get("key")

    def test_circular_reference_raises(self):
        config = Config({"a": "${b}", "b": "${a}"})
        with pytest.raises(ValueError, match="Max recursion depth"):
            config.get("a")


class TestBind:
    def test_bind_hyphenated_keys(self):
        config = Config({"pyfly": {"csrf": {"token-key": "T", "max-age": 60}}})
        section = config.bind(_CsrfSection)
        assert section.token_key == "T"
        assert section.max_age == 60

    def test_bind_underscore_keys(self):
        config = Config({"pyfly": {"csrf": {"token_key": "T"}}})
        assert config.bind(_CsrfSection).token_key == "T"

    def test_bind_uses_defaults(self):
        section = Config({}).bind(_CsrfSection)
        assert section.token_key == "XSRF-TOKEN"
        assert section.ignored_methods == ["GET"]

    def test_bind_coerces_env_strings(self, monkeypatch):
        monkeypatch.setenv("PYFLY_CSRF_MAX_AGE", "120")
        monkeypatch.setenv("PYFLY_CSRF_SECURE", "true")
        monkeypatch.setenv("PYFLY_CSRF_IGNORED_METHODS", "GET, HEAD,POST")
        section = Config({}).bind(_CsrfSection)
        assert section.max_age == 120
        assert section.secure is True
        assert section.ignored_methods == ["GET", "HEAD", "POST"]

    def test_bind_requires_decorator(self):
        @dataclass
        class Plain:
            value: int = 0

        with pytest.raises(ValueError, match="not decorated"):
            Config({}).bind(Plain)
