from __future__ import annotations

import argparse
import datetime as dt
import logging
import sys
import time
from pathlib import Path
from typing import Optional, Sequence

from .config import DEFAULT_CONFIG, load_build_paths, load_config, load_environment, load_site_meta
from .content import load_raw_posts
from .errors import SiteBuildError
from .pipeline import build_site
from .posts import normalize_posts
from .scaffold import scaffold_post

logger = logging.getLogger("inkpress")


def configure_logging(verbose: bool = False) -> None:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.handlers[:] = [handler]
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.propagate = False


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="inkpress", description="Static site generator for a personal blog.")
    parser.add_argument("--config", default=DEFAULT_CONFIG, help="Path to site config file (TOML/YAML/JSON).")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every file read and written.")
    commands = parser.add_subparsers(dest="command")

    commands.add_parser("build", help="Build the site (default).")

    new = commands.add_parser("new", help="Create a new post in the content directory.")
    new.add_argument("title", help="Post title.")
    new.add_argument("--description", default="", help="One-line description.")
    new.add_argument("--keywords", default="", help="Comma-separated keywords.")
    new.add_argument("--date", default=None, help="Publication date (YYYY-MM-DD), defaults to today.")
    new.add_argument("--slug", default=None, help="File name without extension, derived from the title.")
    new.add_argument("--category", dest="categories", action="append", default=[], help="Category (repeatable).")
    new.add_argument("--draft", action="store_true", help="Mark the post as unpublished.")

    commands.add_parser("list", help="List posts, newest first.")
    return parser


def cmd_build(args: argparse.Namespace, config: dict, root: Path) -> None:
    paths = load_build_paths(config, root)
    site = load_site_meta(config)
    logger.info("Starting build of %s", site.title)
    start = time.perf_counter()
    build_site(paths, site)
    elapsed = time.perf_counter() - start
    logger.info("Build completed in %.2fs.", elapsed)


def cmd_new(args: argparse.Namespace, config: dict, root: Path) -> None:
    paths = load_build_paths(config, root)
    path = scaffold_post(
        paths.content_dir,
        args.title,
        description=args.description,
        keywords=args.keywords,
        date=args.date,
        slug=args.slug,
        categories=args.categories,
        draft=args.draft,
    )
    print(f"Next: edit the post body in {path}")


def cmd_list(args: argparse.Namespace, config: dict, root: Path) -> None:
    paths = load_build_paths(config, root)
    posts = normalize_posts(load_raw_posts(paths.content_dir), dt.date.today())
    for post in sorted(posts, key=lambda p: p.date, reverse=True):
        marker = "" if post.published else " [draft]"
        print(f"{post.date.isoformat()}  {post.slug}{marker}  {post.title}")


COMMANDS = {
    None: cmd_build,
    "build": cmd_build,
    "new": cmd_new,
    "list": cmd_list,
}


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)
    root = Path.cwd()
    try:
        load_environment(root)
        config = load_config(root / args.config)
        COMMANDS[args.command](args, config, root)
    except SiteBuildError as exc:
        logger.error("%s failed: %s", args.command or "build", exc)
        return 1
    return 0


def run() -> None:
    sys.exit(main())
