from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass, field
from typing import Optional

from .config import BuildPaths, SiteMeta
from .content import load_raw_posts
from .feeds import build_rss, build_sitemap
from .output import OutputWriter
from .posts import Post, normalize_posts, published_posts
from .render import PAGE_TEMPLATES, Renderer, minify_css

logger = logging.getLogger(__name__)


@dataclass
class BuildResult:
    all_posts: list[Post] = field(default_factory=list)
    published: list[Post] = field(default_factory=list)
    files: dict[str, str] = field(default_factory=dict)
    assets: list[str] = field(default_factory=list)


def render_site(paths: BuildPaths, site: SiteMeta, now: dt.datetime) -> BuildResult:
    """Load, normalize and render everything without touching the output directory."""
    today = now.date()
    result = BuildResult()

    logger.info("Reading posts from %s", paths.content_dir)
    raws = load_raw_posts(paths.content_dir)
    result.all_posts = normalize_posts(raws, today)
    result.published = published_posts(result.all_posts)

    renderer = Renderer(paths.templates_dir, site, minify=paths.minify)
    renderer.check_templates()

    logger.info("Rendering %d posts", len(result.all_posts))
    for post in result.all_posts:
        result.files[f"posts/{post.slug}.html"] = renderer.render_post(post)

    for page in PAGE_TEMPLATES:
        logger.info("Rendering %s page", page)
        result.files[f"{page}.html"] = renderer.render_page(page, result.published)

    logger.info("Generating sitemap and RSS feed")
    result.files["sitemap.xml"] = build_sitemap(result.published, site, today)
    result.files["rss.xml"] = build_rss(result.published, site, now)
    return result


def build_site(paths: BuildPaths, site: SiteMeta, now: Optional[dt.datetime] = None) -> BuildResult:
    if now is None:
        now = dt.datetime.now(dt.timezone.utc)
    result = render_site(paths, site, now)

    with OutputWriter(paths.output_dir, paths.root) as writer:
        result.assets = writer.copy_assets(paths.root, minify_css if paths.minify else None)
        for asset in result.assets:
            logger.debug("Copied %s", asset)
        for relpath, text in result.files.items():
            writer.write_text(relpath, text)

    logger.info(
        "Generated %d posts (%d published) in %s",
        len(result.all_posts),
        len(result.published),
        paths.output_dir,
    )
    return result
