from __future__ import annotations

import datetime as dt
import html
from typing import Sequence

from .config import SiteMeta
from .posts import Post
from .render import post_url
from .utils import iso_date, join_url, rfc822_date

SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"
GENERATOR = "inkpress"
FEED_TTL = 60


def sitemap_entry(loc: str, lastmod: dt.date, changefreq: str, priority: str) -> str:
    return "\n".join(
        [
            "  <url>",
            f"    <loc>{html.escape(loc)}</loc>",
            f"    <lastmod>{iso_date(lastmod)}</lastmod>",
            f"    <changefreq>{changefreq}</changefreq>",
            f"    <priority>{priority}</priority>",
            "  </url>",
        ]
    )


def build_sitemap(posts: Sequence[Post], site: SiteMeta, today: dt.date) -> str:
    """Sitemap of the home page, the about page and every post passed in."""
    entries = [
        sitemap_entry(site.url + "/", today, "daily", "1.0"),
        sitemap_entry(join_url(site.url, "about.html"), today, "monthly", "0.8"),
    ]
    for post in posts:
        entries.append(sitemap_entry(post_url(site, post.slug), post.date, "monthly", "0.7"))
    return "\n".join(
        [
            '<?xml version="1.0" encoding="UTF-8"?>',
            f'<urlset xmlns="{SITEMAP_NS}">',
            *entries,
            "</urlset>",
            "",
        ]
    )


def rss_item(post: Post, site: SiteMeta) -> str:
    link = post_url(site, post.slug)
    lines = [
        "    <item>",
        f"      <title>{html.escape(post.title)}</title>",
        f"      <description>{html.escape(post.description)}</description>",
        f"      <link>{html.escape(link)}</link>",
        f'      <guid isPermaLink="false">{html.escape(post.slug)}</guid>',
    ]
    lines.extend(f"      <category>{html.escape(category)}</category>" for category in post.categories)
    lines.extend(
        [
            f"      <dc:creator>{html.escape(site.author)}</dc:creator>",
            f"      <pubDate>{rfc822_date(post.date)}</pubDate>",
            "    </item>",
        ]
    )
    return "\n".join(lines)


def build_rss(posts: Sequence[Post], site: SiteMeta, build_time: dt.datetime) -> str:
    """RSS 2.0 feed with one item per post, in the order given."""
    feed_url = join_url(site.url, "rss.xml")
    built = rfc822_date(build_time)
    author = html.escape(site.author)
    channel = [
        f"    <title>{html.escape(site.title)}</title>",
        f"    <description>{html.escape(site.description)}</description>",
        f"    <link>{html.escape(site.url)}</link>",
        f'    <atom:link href="{html.escape(feed_url)}" rel="self" type="application/rss+xml"/>',
        "    <image>",
        f"      <url>{html.escape(join_url(site.url, 'images/logo.png'))}</url>",
        f"      <title>{html.escape(site.title)}</title>",
        f"      <link>{html.escape(site.url)}</link>",
        "    </image>",
        f"    <generator>{GENERATOR}</generator>",
        f"    <managingEditor>{author}</managingEditor>",
        f"    <webMaster>{author}</webMaster>",
        f"    <copyright>{build_time.year} {author}</copyright>",
        f"    <language>{html.escape(site.language)}</language>",
        f"    <pubDate>{built}</pubDate>",
        f"    <lastBuildDate>{built}</lastBuildDate>",
        f"    <ttl>{FEED_TTL}</ttl>",
    ]
    channel.extend(rss_item(post, site) for post in posts)
    return "\n".join(
        [
            '<?xml version="1.0" encoding="UTF-8"?>',
            '<rss version="2.0" xmlns:dc="http://purl.org/dc/elements/1.1/" '
            'xmlns:atom="http://www.w3.org/2005/Atom">',
            "  <channel>",
            *channel,
            "  </channel>",
            "</rss>",
            "",
        ]
    )
