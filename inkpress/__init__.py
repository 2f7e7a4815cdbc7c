"""Static site generator for a personal blog."""

from .config import BuildPaths, SiteMeta
from .content import RawPost
from .errors import (
    ConfigError,
    ContentReadError,
    DuplicateSlugError,
    InvalidDateError,
    InvalidSlugError,
    RenderError,
    ScaffoldError,
    SiteBuildError,
    TemplateNotFoundError,
    WriteError,
)
from .pipeline import BuildResult, build_site
from .posts import Post

__version__ = "0.1.0"

__all__ = [
    "BuildPaths",
    "BuildResult",
    "ConfigError",
    "ContentReadError",
    "DuplicateSlugError",
    "InvalidDateError",
    "InvalidSlugError",
    "Post",
    "RawPost",
    "RenderError",
    "ScaffoldError",
    "SiteBuildError",
    "SiteMeta",
    "TemplateNotFoundError",
    "WriteError",
    "build_site",
]
