from __future__ import annotations

import re

import markdown

from .content import RawPost

IMG_SRC_RE = re.compile(r'<img([^>]*?)src="([^"]+)"', re.IGNORECASE)
TAG_RE = re.compile(r"<[^>]+>")
MARKDOWN_EXTENSIONS = ["fenced_code", "codehilite", "tables", "toc"]
MARKDOWN_CONFIGS = {"codehilite": {"guess_lang": False}}


def fix_relative_img_src(html_text: str, root: str) -> str:
    def repl(match: re.Match) -> str:
        attrs = match.group(1)
        src = match.group(2)
        if src.startswith(("http://", "https://", "data:", "#", "/", "./", "../")):
            return match.group(0)
        return f'<img{attrs}src="{root}/{src}"'

    return IMG_SRC_RE.sub(repl, html_text)


def strip_tags(html_text: str) -> str:
    return TAG_RE.sub("", html_text)


def markdown_to_html(text: str) -> str:
    md = markdown.Markdown(extensions=MARKDOWN_EXTENSIONS, extension_configs=MARKDOWN_CONFIGS)
    return md.convert(text)


def convert_body(raw: RawPost) -> str:
    """Turn a post body into HTML usable from the posts/ directory."""
    if raw.is_markdown:
        html_text = markdown_to_html(raw.body)
    else:
        html_text = raw.body
    return fix_relative_img_src(html_text, "..")
