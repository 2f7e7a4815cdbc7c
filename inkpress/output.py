from __future__ import annotations

import logging
import shutil
import tempfile
from pathlib import Path
from typing import Callable, Optional

from .errors import WriteError

logger = logging.getLogger(__name__)

STYLESHEET = "styles.css"
IMAGES_DIR = "images"
PASSTHROUGH_FILES = ("site.webmanifest", "robots.txt")
FAVICON_FILES = ("favicon.ico", "favicon-16x16.png", "favicon-32x32.png", "apple-touch-icon.png")


def check_output_dir(output_dir: Path, project_root: Path) -> None:
    output_resolved = output_dir.resolve()
    root_resolved = project_root.resolve()
    if output_resolved == root_resolved:
        raise WriteError("Refusing to use the project root as output directory.")
    if not output_resolved.is_relative_to(root_resolved):
        raise WriteError(f"Refusing to write outside the project root: {output_dir}")


class OutputWriter:
    """Writes a build into a staging directory and swaps it into place.

    Until ``commit`` runs, the previous contents of ``output_dir`` stay
    untouched, so a failed build never leaves a half-written site behind.
    """

    def __init__(self, output_dir: Path, project_root: Path) -> None:
        check_output_dir(output_dir, project_root)
        self.output_dir = output_dir
        self.project_root = project_root
        self.staging: Optional[Path] = None

    def __enter__(self) -> "OutputWriter":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.commit()
        else:
            self.discard()

    def open(self) -> Path:
        try:
            self.output_dir.parent.mkdir(parents=True, exist_ok=True)
            staging = Path(tempfile.mkdtemp(prefix=f".{self.output_dir.name}-", dir=self.output_dir.parent))
            (staging / "posts").mkdir()
        except OSError as exc:
            raise WriteError(f"Cannot create staging directory: {exc}") from exc
        self.staging = staging
        logger.debug("Staging build in %s", staging)
        return staging

    def _target(self, relpath: str) -> Path:
        if self.staging is None:
            raise WriteError("Output writer is not open.")
        return self.staging / relpath

    def write_text(self, relpath: str, text: str) -> Path:
        path = self._target(relpath)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")
        except OSError as exc:
            raise WriteError(f"Cannot write {relpath}: {exc}") from exc
        logger.debug("Wrote %s", relpath)
        return path

    def copy_file(self, source: Path, relpath: str) -> bool:
        if not source.is_file():
            return False
        dest = self._target(relpath)
        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(source, dest)
        except OSError as exc:
            raise WriteError(f"Cannot copy {source}: {exc}") from exc
        return True

    def copy_tree(self, source: Path, relpath: str) -> bool:
        if not source.is_dir():
            return False
        try:
            shutil.copytree(source, self._target(relpath), dirs_exist_ok=True)
        except (OSError, shutil.Error) as exc:
            raise WriteError(f"Cannot copy {source}: {exc}") from exc
        return True

    def copy_assets(self, source_root: Path, css_filter: Optional[Callable[[str], str]] = None) -> list[str]:
        """Copy the optional passthrough assets that exist under ``source_root``."""
        copied = []
        stylesheet = source_root / STYLESHEET
        if stylesheet.is_file():
            try:
                css = stylesheet.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                raise WriteError(f"Cannot read {stylesheet}: {exc}") from exc
            self.write_text(STYLESHEET, css_filter(css) if css_filter else css)
            copied.append(STYLESHEET)
        if self.copy_tree(source_root / IMAGES_DIR, IMAGES_DIR):
            copied.append(f"{IMAGES_DIR}/")
        for name in PASSTHROUGH_FILES:
            if self.copy_file(source_root / name, name):
                copied.append(name)
        for name in FAVICON_FILES:
            relpath = f"{IMAGES_DIR}/{name}"
            if self._target(relpath).exists():
                continue
            if self.copy_file(source_root / name, relpath):
                copied.append(relpath)
        return copied

    def commit(self) -> None:
        if self.staging is None:
            raise WriteError("Output writer is not open.")
        backup = None
        try:
            if self.output_dir.exists():
                backup = Path(
                    tempfile.mkdtemp(prefix=f".{self.output_dir.name}-old-", dir=self.output_dir.parent)
                )
                backup.rmdir()
                self.output_dir.rename(backup)
            self.staging.rename(self.output_dir)
        except OSError as exc:
            if backup is not None and backup.exists() and not self.output_dir.exists():
                backup.rename(self.output_dir)
            self.discard()
            raise WriteError(f"Cannot replace {self.output_dir}: {exc}") from exc
        self.staging = None
        if backup is not None:
            shutil.rmtree(backup, ignore_errors=True)
        logger.debug("Published build to %s", self.output_dir)

    def discard(self) -> None:
        if self.staging is not None:
            shutil.rmtree(self.staging, ignore_errors=True)
            self.staging = None
