from __future__ import annotations

import json
import logging
import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

import yaml
from dotenv import load_dotenv

from .errors import ConfigError
from .utils import parse_bool

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = "site.toml"

SITE_DEFAULTS = {
    "title": "Your Blog",
    "description": "Personal blog about technology, thoughts, and experiences",
    "url": "https://yourdomain.com",
    "author": "Your Name",
    "logo_text": "Y",
    "language": "en",
}

# SiteMeta field -> environment variable
SITE_ENV = {
    "title": "SITE_TITLE",
    "description": "SITE_DESCRIPTION",
    "url": "SITE_URL",
    "author": "SITE_AUTHOR",
    "logo_text": "SITE_LOGO_TEXT",
    "language": "SITE_LANGUAGE",
}


@dataclass(frozen=True)
class SiteMeta:
    """Site-wide settings shared by every rendering step."""

    title: str = SITE_DEFAULTS["title"]
    description: str = SITE_DEFAULTS["description"]
    url: str = SITE_DEFAULTS["url"]
    author: str = SITE_DEFAULTS["author"]
    logo_text: str = SITE_DEFAULTS["logo_text"]
    language: str = SITE_DEFAULTS["language"]


@dataclass(frozen=True)
class BuildPaths:
    root: Path
    content_dir: Path
    templates_dir: Path
    output_dir: Path
    minify: bool = True


def load_config(path: Path) -> dict:
    if not path.exists():
        return {}
    suffix = path.suffix.lower()
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {path}: {exc}") from exc
    if suffix == ".toml":
        try:
            data = tomllib.loads(text)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"Invalid TOML in config file {path}: {exc}") from exc
    elif suffix in {".yml", ".yaml"}:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in config file {path}: {exc}") from exc
        if data is None:
            return {}
    else:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"Invalid JSON in config file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config file must be a mapping: {path}")
    logger.debug("Loaded config from %s", path)
    return data


def load_site_meta(config: Mapping, environ: Optional[Mapping[str, str]] = None) -> SiteMeta:
    """Resolve site settings: environment first, then config file, then defaults."""
    if environ is None:
        environ = os.environ
    values = {}
    for field, env_key in SITE_ENV.items():
        value = environ.get(env_key)
        if not value:
            value = config.get(field)
        if value is None or str(value).strip() == "":
            value = SITE_DEFAULTS[field]
        values[field] = str(value).strip()
    values["url"] = values["url"].rstrip("/")
    return SiteMeta(**values)


def load_build_paths(config: Mapping, root: Path) -> BuildPaths:
    def resolve(key: str, default: str) -> Path:
        path = Path(str(config.get(key) or default))
        if not path.is_absolute():
            path = root / path
        return path

    return BuildPaths(
        root=root,
        content_dir=resolve("content", "content/posts"),
        templates_dir=resolve("templates", "templates"),
        output_dir=resolve("output", "dist"),
        minify=parse_bool(config.get("minify"), default=True),
    )


def load_environment(root: Path) -> None:
    env_path = root / ".env"
    if env_path.exists():
        load_dotenv(env_path, override=False)
        logger.debug("Loaded environment from %s", env_path)
