from __future__ import annotations

import datetime as dt
import logging
import math
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, Optional

from .content import RawPost, count_words
from .errors import DuplicateSlugError, InvalidDateError, InvalidSlugError
from .markup import convert_body, strip_tags
from .utils import display_date, parse_bool

logger = logging.getLogger(__name__)

SLUG_RE = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
WORDS_PER_MINUTE = 200

Converter = Callable[[RawPost], str]


@dataclass(frozen=True)
class Post:
    slug: str
    title: str
    description: str
    content: str
    date: dt.date
    formatted_date: str
    keywords: str = ""
    categories: tuple[str, ...] = ()
    image: Optional[str] = None
    read_time: int = 1
    published: bool = True
    source: Optional[Path] = None


def validate_slug(slug: str, path: Optional[Path] = None) -> str:
    if not SLUG_RE.match(slug):
        where = f" ({path})" if path is not None else ""
        raise InvalidSlugError(
            f"Slug {slug!r}{where} must contain only lowercase letters, digits and single hyphens"
        )
    return slug


def parse_post_date(value: object, today: dt.date) -> dt.date:
    if value is None or value == "":
        return today
    # datetime is a subclass of date, so check it first.
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if isinstance(value, str):
        try:
            return dt.date.fromisoformat(value.strip())
        except ValueError as exc:
            raise InvalidDateError(f"Invalid date {value!r}, expected YYYY-MM-DD") from exc
    raise InvalidDateError(f"Invalid date {value!r}, expected YYYY-MM-DD")


def parse_keywords(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return ", ".join(str(item).strip() for item in value if str(item).strip())
    return str(value).strip()


def parse_categories(value: object) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, (list, tuple)):
        items = [str(item).strip() for item in value]
    else:
        items = [item.strip() for item in str(value).split(",")]
    return tuple(item for item in items if item)


def read_time(word_count: int) -> int:
    return max(1, math.ceil(word_count / WORDS_PER_MINUTE))


def normalize_post(raw: RawPost, today: dt.date, converter: Converter = convert_body) -> Post:
    meta = raw.meta
    slug = validate_slug(raw.slug, raw.path)
    try:
        date = parse_post_date(meta.get("date"), today)
    except InvalidDateError as exc:
        raise InvalidDateError(f"{raw.path}: {exc}") from exc

    body_text = raw.body if raw.is_markdown else strip_tags(raw.body)
    image = meta.get("img")
    title = meta.get("title")
    return Post(
        slug=slug,
        title=str(title).strip() if title else slug,
        description=str(meta.get("description") or "").strip(),
        content=converter(raw),
        date=date,
        formatted_date=display_date(date),
        keywords=parse_keywords(meta.get("keywords")),
        categories=parse_categories(meta.get("categories")),
        image=str(image).strip() if image else None,
        read_time=read_time(count_words(body_text)),
        # Only an explicit false hides a post from listings and feeds.
        published=parse_bool(meta.get("published"), default=True),
        source=raw.path,
    )


def normalize_posts(
    raws: Iterable[RawPost], today: dt.date, converter: Converter = convert_body
) -> list[Post]:
    posts = []
    seen: dict[str, Path] = {}
    for raw in raws:
        if raw.slug in seen:
            raise DuplicateSlugError(raw.slug, seen[raw.slug], raw.path)
        seen[raw.slug] = raw.path
        post = normalize_post(raw, today, converter)
        logger.debug("Normalized %s (%s)", post.slug, "published" if post.published else "draft")
        posts.append(post)
    return posts


def published_posts(posts: Iterable[Post]) -> list[Post]:
    """Published posts, newest first. Equal dates keep their input order."""
    return sorted((post for post in posts if post.published), key=lambda p: p.date, reverse=True)
