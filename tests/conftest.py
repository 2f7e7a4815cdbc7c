import datetime as dt
import shutil
from pathlib import Path

import pytest
import yaml

from inkpress.config import BuildPaths, SiteMeta

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"
BUILD_TIME = dt.datetime(2024, 6, 1, 12, 30, tzinfo=dt.timezone.utc)


def write_post(content_dir: Path, name: str, meta: dict | None = None, body: str = "Body text.") -> Path:
    path = content_dir / name
    path.parent.mkdir(parents=True, exist_ok=True)
    if meta is None:
        path.write_text(body, encoding="utf-8")
    else:
        header = yaml.safe_dump(meta, sort_keys=False)
        path.write_text(f"---\n{header}---\n{body}\n", encoding="utf-8")
    return path


@pytest.fixture
def site() -> SiteMeta:
    return SiteMeta(
        title="Test Blog",
        description="Notes for testing",
        url="https://example.com",
        author="Test Author",
        logo_text="T",
    )


@pytest.fixture
def project(tmp_path: Path) -> BuildPaths:
    """A project tree with the bundled templates and an empty content directory."""
    shutil.copytree(TEMPLATES_DIR, tmp_path / "templates")
    (tmp_path / "content" / "posts").mkdir(parents=True)
    return BuildPaths(
        root=tmp_path,
        content_dir=tmp_path / "content" / "posts",
        templates_dir=tmp_path / "templates",
        output_dir=tmp_path / "dist",
    )
