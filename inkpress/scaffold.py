from __future__ import annotations

import datetime as dt
import logging
import re
from pathlib import Path
from typing import Iterable, Optional

import yaml

from .errors import InvalidDateError, ScaffoldError, WriteError
from .posts import validate_slug

logger = logging.getLogger(__name__)

BODY_PLACEHOLDER = "Write your post here.\n"


def slugify(text: str) -> str:
    text = text.lower()
    text = re.sub(r"[^a-z0-9]+", "-", text)
    return text.strip("-") or "post"


def render_front_matter(meta: dict) -> str:
    dumped = yaml.safe_dump(meta, sort_keys=False, allow_unicode=True, default_flow_style=False)
    return f"---\n{dumped}---\n"


def scaffold_post(
    content_dir: Path,
    title: str,
    description: str = "",
    keywords: str = "",
    date: Optional[str] = None,
    slug: Optional[str] = None,
    categories: Iterable[str] = (),
    draft: bool = False,
    today: Optional[dt.date] = None,
) -> Path:
    """Create ``<slug>.md`` with front matter ready for the next build."""
    title = title.strip()
    if not title:
        raise ScaffoldError("A post needs a title.")
    if date:
        try:
            post_date = dt.date.fromisoformat(date.strip())
        except ValueError as exc:
            raise InvalidDateError(f"Invalid date {date!r}, expected YYYY-MM-DD") from exc
    else:
        post_date = today or dt.date.today()
    slug = validate_slug(slugify(slug) if slug else slugify(title))

    meta = {
        "title": title,
        "description": description.strip(),
        "date": post_date,
        "keywords": keywords.strip(),
        "categories": [c.strip() for c in categories if c.strip()],
    }
    if draft:
        meta["published"] = False

    path = content_dir / f"{slug}.md"
    if path.exists():
        raise WriteError(f"File already exists: {path}")
    try:
        content_dir.mkdir(parents=True, exist_ok=True)
        path.write_text(render_front_matter(meta) + "\n" + BODY_PLACEHOLDER, encoding="utf-8")
    except OSError as exc:
        raise WriteError(f"Cannot write {path}: {exc}") from exc
    logger.info("Created %s", path)
    return path
