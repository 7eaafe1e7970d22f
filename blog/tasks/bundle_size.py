# blog/tasks/bundle_size.py
"""Size report for the static assets served under /static."""

import gzip
from dataclasses import dataclass
from pathlib import Path
from typing import List

ASSET_SUFFIXES = (".js", ".css")
TOP_N = 20


@dataclass(frozen=True)
class AssetSize:
    name: str
    size: int
    gzip_size: int
    is_large: bool


@dataclass(frozen=True)
class BundleReport:
    assets: List[AssetSize]  # largest first, at most TOP_N
    total_files: int
    total_size: int
    total_gzip_size: int
    large_count: int
    threshold_kb: int


def format_size(size_bytes: float) -> str:
    if size_bytes < 1024:
        return f"{size_bytes:.2f} B"
    if size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.2f} KB"
    return f"{size_bytes / (1024 * 1024):.2f} MB"


def analyze_bundles(directory: Path, threshold_kb: int) -> BundleReport:
    """Raises FileNotFoundError when the directory does not exist."""
    directory = Path(directory)
    if not directory.is_dir():
        raise FileNotFoundError(directory)

    assets = []
    for path in sorted(directory.rglob("*")):
        if not path.is_file() or path.suffix not in ASSET_SUFFIXES:
            continue
        data = path.read_bytes()
        assets.append(AssetSize(
            name=str(path.relative_to(directory)),
            size=len(data),
            gzip_size=len(gzip.compress(data)),
            is_large=len(data) > threshold_kb * 1024,
        ))

    assets.sort(key=lambda a: a.size, reverse=True)
    return BundleReport(
        assets=assets[:TOP_N],
        total_files=len(assets),
        total_size=sum(a.size for a in assets),
        total_gzip_size=sum(a.gzip_size for a in assets),
        large_count=sum(1 for a in assets if a.is_large),
        threshold_kb=threshold_kb,
    )
