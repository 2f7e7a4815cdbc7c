"""Tests for configuration loading."""

import os

import pytest

from inkpress.config import SITE_DEFAULTS, load_build_paths, load_config, load_environment, load_site_meta
from inkpress.errors import ConfigError


class TestLoadConfig:
    def test_missing_file(self, tmp_path) -> None:
        assert load_config(tmp_path / "site.toml") == {}

    def test_toml(self, tmp_path) -> None:
        path = tmp_path / "site.toml"
        path.write_text('title = "From TOML"\nminify = false\n')
        assert load_config(path) == {"title": "From TOML", "minify": False}

    def test_yaml(self, tmp_path) -> None:
        path = tmp_path / "site.yaml"
        path.write_text("title: From YAML\n")
        assert load_config(path) == {"title": "From YAML"}

    def test_empty_yaml(self, tmp_path) -> None:
        path = tmp_path / "site.yml"
        path.write_text("")
        assert load_config(path) == {}

    def test_json(self, tmp_path) -> None:
        path = tmp_path / "site.json"
        path.write_text('{"title": "From JSON"}')
        assert load_config(path) == {"title": "From JSON"}

    @pytest.mark.parametrize(
        "name, text",
        [("site.toml", "title = "), ("site.yaml", "a: [b"), ("site.json", "{"), ("site.json", "[1, 2]")],
    )
    def test_invalid(self, tmp_path, name: str, text: str) -> None:
        path = tmp_path / name
        path.write_text(text)
        with pytest.raises(ConfigError):
            load_config(path)


class TestSiteMeta:
    def test_defaults(self) -> None:
        site = load_site_meta({}, environ={})
        assert site.title == SITE_DEFAULTS["title"]
        assert site.url == "https://yourdomain.com"
        assert site.logo_text == "Y"

    def test_environment_overrides_config(self) -> None:
        config = {"title": "Config Title", "author": "Config Author"}
        site = load_site_meta(config, environ={"SITE_TITLE": "Env Title", "SITE_URL": "https://env.example/"})
        assert site.title == "Env Title"
        assert site.author == "Config Author"
        assert site.url == "https://env.example"

    def test_blank_values_fall_back(self) -> None:
        site = load_site_meta({"title": "  "}, environ={"SITE_AUTHOR": ""})
        assert site.title == SITE_DEFAULTS["title"]
        assert site.author == SITE_DEFAULTS["author"]

    def test_frozen(self) -> None:
        site = load_site_meta({}, environ={})
        with pytest.raises(AttributeError):
            site.title = "changed"


class TestBuildPaths:
    def test_defaults(self, tmp_path) -> None:
        paths = load_build_paths({}, tmp_path)
        assert paths.content_dir == tmp_path / "content" / "posts"
        assert paths.templates_dir == tmp_path / "templates"
        assert paths.output_dir == tmp_path / "dist"
        assert paths.minify is True

    def test_overrides(self, tmp_path) -> None:
        paths = load_build_paths({"output": "public", "minify": "no"}, tmp_path)
        assert paths.output_dir == tmp_path / "public"
        assert paths.minify is False


def test_load_environment_reads_dotenv(tmp_path, monkeypatch) -> None:
    monkeypatch.delenv("SITE_LOGO_TEXT", raising=False)
    (tmp_path / ".env").write_text("SITE_LOGO_TEXT=Z\n")
    try:
        load_environment(tmp_path)
        assert load_site_meta({}).logo_text == "Z"
    finally:
        os.environ.pop("SITE_LOGO_TEXT", None)


def test_existing_environment_wins_over_dotenv(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("SITE_LOGO_TEXT", "Q")
    (tmp_path / ".env").write_text("SITE_LOGO_TEXT=Z\n")
    load_environment(tmp_path)
    assert load_site_meta({}).logo_text == "Q"
