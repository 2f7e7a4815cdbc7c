from __future__ import annotations

from pathlib import Path
from typing import Optional


class SiteBuildError(Exception):
    """Base class for every error that aborts a build."""


class ConfigError(SiteBuildError):
    pass


class ContentReadError(SiteBuildError):
    def __init__(self, message: str, path: Optional[Path] = None) -> None:
        self.path = path
        if path is not None:
            message = f"{path}: {message}"
        super().__init__(message)


class InvalidSlugError(SiteBuildError):
    pass


class DuplicateSlugError(InvalidSlugError):
    def __init__(self, slug: str, first: Path, second: Path) -> None:
        self.slug = slug
        self.first = first
        self.second = second
        super().__init__(f"Duplicate slug {slug!r}: {second} clashes with {first}")


class InvalidDateError(SiteBuildError):
    pass


class TemplateNotFoundError(SiteBuildError):
    def __init__(self, name: str, templates_dir: Path) -> None:
        self.name = name
        self.templates_dir = templates_dir
        super().__init__(f"Template not found: {templates_dir / name}")


class RenderError(SiteBuildError):
    pass


class WriteError(SiteBuildError):
    pass


class ScaffoldError(SiteBuildError):
    pass
