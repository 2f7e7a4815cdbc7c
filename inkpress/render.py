from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

import csscompressor
import jinja2
import minify_html

from .config import SiteMeta
from .errors import RenderError, TemplateNotFoundError
from .posts import Post
from .utils import iso_date, join_url, rfc822_date

logger = logging.getLogger(__name__)

POST_TEMPLATE = "post.html.jinja2"
INDEX_TEMPLATE = "index.html.jinja2"
ABOUT_TEMPLATE = "about.html.jinja2"
WRITING_TEMPLATE = "writing.html.jinja2"
REQUIRED_TEMPLATES = (POST_TEMPLATE, INDEX_TEMPLATE, ABOUT_TEMPLATE, WRITING_TEMPLATE)

PAGE_TEMPLATES = {
    "index": INDEX_TEMPLATE,
    "about": ABOUT_TEMPLATE,
    "writing": WRITING_TEMPLATE,
}

MINIFY_OPTIONS = {
    "keep_closing_tags": True,
    "keep_html_and_head_opening_tags": True,
    "keep_comments": False,
    "minify_css": True,
    "minify_js": False,
}


def minify_page(text: str) -> str:
    """Drop comments and whitespace that does not affect rendering."""
    return minify_html.minify(text, **MINIFY_OPTIONS)


def minify_css(text: str) -> str:
    return csscompressor.compress(text)


def asset_paths(root: str) -> dict[str, str]:
    """Links to site-level files as seen from a page ``root`` levels deep."""
    prefix = "" if root == "." else f"{root}/"
    return {
        "css_path": f"{prefix}styles.css",
        "favicon_path": f"{prefix}images/favicon.ico",
        "manifest_path": f"{prefix}site.webmanifest",
        "rss_path": f"{prefix}rss.xml",
        "home_path": f"{prefix}index.html",
        "about_path": f"{prefix}about.html",
        "writing_path": f"{prefix}writing.html",
        "posts_path": f"{prefix}posts",
    }


def post_url(site: SiteMeta, slug: str) -> str:
    return join_url(site.url, f"posts/{slug}.html")


def image_url(site: SiteMeta, image: str | None) -> str:
    if not image:
        return ""
    if image.startswith(("http://", "https://")):
        return image
    path = image
    while path.startswith(("../", "./")):
        path = path.split("/", 1)[1]
    return join_url(site.url, path)


def make_environment(templates_dir: Path) -> jinja2.Environment:
    env = jinja2.Environment(
        loader=jinja2.FileSystemLoader(str(templates_dir)),
        autoescape=jinja2.select_autoescape(enabled_extensions=("html", "xml", "jinja2")),
        undefined=jinja2.StrictUndefined,
        keep_trailing_newline=True,
    )
    env.filters["rfc822"] = rfc822_date
    env.filters["isodate"] = iso_date
    return env


class Renderer:
    """Applies posts and site data to the Jinja templates."""

    def __init__(self, templates_dir: Path, site: SiteMeta, minify: bool = True) -> None:
        self.templates_dir = templates_dir
        self.site = site
        self.minify = minify
        self.env = make_environment(templates_dir)

    def get_template(self, name: str) -> jinja2.Template:
        try:
            return self.env.get_template(name)
        except jinja2.TemplateNotFound as exc:
            raise TemplateNotFoundError(exc.name or name, self.templates_dir) from exc
        except jinja2.TemplateSyntaxError as exc:
            raise RenderError(f"Syntax error in template {name} line {exc.lineno}: {exc.message}") from exc

    def check_templates(self) -> None:
        for name in REQUIRED_TEMPLATES:
            self.get_template(name)

    def base_context(self, root: str) -> dict:
        context = {
            "site": self.site,
            "base_url": self.site.url,
            "author": self.site.author,
            "logo_text": self.site.logo_text,
        }
        context.update(asset_paths(root))
        return context

    def render(self, name: str, context: dict) -> str:
        template = self.get_template(name)
        try:
            html_text = template.render(**context)
        except jinja2.TemplateNotFound as exc:
            raise TemplateNotFoundError(exc.name or name, self.templates_dir) from exc
        except jinja2.TemplateError as exc:
            raise RenderError(f"Failed to render {name}: {exc}") from exc
        if self.minify:
            try:
                html_text = minify_page(html_text)
            except Exception as exc:
                raise RenderError(f"Failed to minify {name}: {exc}") from exc
        return html_text

    def render_post(self, post: Post) -> str:
        context = self.base_context("..")
        context.update(
            post=post,
            title=post.title,
            url=post_url(self.site, post.slug),
            image=image_url(self.site, post.image),
        )
        return self.render(POST_TEMPLATE, context)

    def render_page(self, page: str, posts: Sequence[Post]) -> str:
        try:
            name = PAGE_TEMPLATES[page]
        except KeyError:
            raise RenderError(f"Unknown page: {page}") from None
        context = self.base_context(".")
        context.update(
            posts=list(posts),
            title=self.site.title,
            description=self.site.description,
            url=join_url(self.site.url, f"{page}.html") if page != "index" else self.site.url + "/",
        )
        return self.render(name, context)
