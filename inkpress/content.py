from __future__ import annotations

import html as html_lib
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from .errors import ContentReadError, InvalidDateError

logger = logging.getLogger(__name__)

SOURCE_SUFFIXES = (".md", ".html")
FENCE = "---"
CJK_RE = re.compile(r"[\u3040-\u30ff\u3400-\u4dbf\u4e00-\u9fff\uac00-\ud7af]")
WORD_RE = re.compile(r"[A-Za-z0-9]+(?:'[A-Za-z0-9]+)?")


@dataclass(frozen=True)
class RawPost:
    """One content file split into front matter and body."""

    path: Path
    meta: dict = field(default_factory=dict)
    body: str = ""

    @property
    def slug(self) -> str:
        return self.path.stem

    @property
    def is_markdown(self) -> bool:
        return self.path.suffix.lower() == ".md"


def parse_front_matter(text: str) -> tuple[dict, str]:
    clean_text = text.lstrip("\ufeff")
    lines = clean_text.splitlines()
    if not lines or lines[0].strip() != FENCE:
        return {}, clean_text

    end = None
    for i in range(1, len(lines)):
        if lines[i].strip() == FENCE:
            end = i
            break
    if end is None:
        raise ContentReadError("front matter block is not closed")

    try:
        meta = yaml.safe_load("\n".join(lines[1:end]))
    except yaml.YAMLError as exc:
        raise ContentReadError(f"invalid front matter: {exc}") from exc
    except ValueError as exc:
        # PyYAML constructs dates while loading, so 2024-13-45 fails here.
        raise InvalidDateError(f"invalid date in front matter: {exc}") from exc
    if meta is None:
        meta = {}
    if not isinstance(meta, dict):
        raise ContentReadError("front matter must be a mapping")
    meta = {str(key).strip().lower(): value for key, value in meta.items()}
    body = "\n".join(lines[end + 1 :])
    return meta, body


def read_raw_post(path: Path) -> RawPost:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ContentReadError(f"cannot read file: {exc}", path) from exc
    try:
        meta, body = parse_front_matter(text)
    except ContentReadError as exc:
        raise ContentReadError(str(exc), path) from exc
    except InvalidDateError as exc:
        raise InvalidDateError(f"{path}: {exc}") from exc
    return RawPost(path=path, meta=meta, body=body)


def list_sources(content_dir: Path) -> list[Path]:
    if not content_dir.is_dir():
        raise ContentReadError("content directory not found", content_dir)
    try:
        entries = list(content_dir.iterdir())
    except OSError as exc:
        raise ContentReadError(f"cannot list directory: {exc}", content_dir) from exc
    sources = [p for p in entries if p.is_file() and p.suffix.lower() in SOURCE_SUFFIXES]
    return sorted(sources, key=lambda p: p.name)


def load_raw_posts(content_dir: Path) -> list[RawPost]:
    posts = []
    for path in list_sources(content_dir):
        logger.debug("Reading %s", path)
        posts.append(read_raw_post(path))
    return posts


def count_words(text: str) -> int:
    text = html_lib.unescape(text)
    cjk_count = len(CJK_RE.findall(text))
    text = CJK_RE.sub(" ", text)
    return cjk_count + len(WORD_RE.findall(text))
