import zipfile
from pathlib import Path
from typing import Union

import pytest


def write_wheel(path: Path, metadata: Union[str, bytes], dist_info: str = "demo-1.0.dist-info") -> Path:
    with zipfile.ZipFile(path, "w") as archive:
        archive.writestr("demo/__init__.py", "")
        archive.writestr(f"{dist_info}/METADATA", metadata)
        archive.writestr(f"{dist_info}/WHEEL", "Wheel-Version: 1.0\n")
    return path


@pytest.fixture
def make_wheel(tmp_path: Path):
    def _make(filename: str, metadata: Union[str, bytes], directory: Path = None) -> Path:
        target = (directory or tmp_path) / filename
        target.parent.mkdir(parents=True, exist_ok=True)
        return write_wheel(target, metadata)
    return _make
