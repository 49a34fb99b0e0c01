"""Pytest configuration and shared fixtures for all tests."""

import sys
import textwrap
import uuid
import zipfile
from pathlib import Path
from typing import Callable, Dict, List, Optional

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))


def _unique_package_name(prefix: str = "beans") -> str:
    return f"{prefix}_{uuid.uuid4().hex[:8]}"


def _forget_modules(package_names: List[str]) -> None:
    for module_name in list(sys.modules):
        if any(module_name == name or module_name.startswith(name + ".") for name in package_names):
            del sys.modules[module_name]


@pytest.fixture
def make_package(tmp_path, monkeypatch) -> Callable[..., str]:
    """Write a throwaway package to disk and put it on sys.path.

    Call with a mapping of relative file paths (inside the package) to
    source text. Returns the generated top-level package name.
    """
    root = tmp_path / "src"
    root.mkdir()
    monkeypatch.syspath_prepend(str(root))
    created: List[str] = []

    def factory(files: Dict[str, str], name: Optional[str] = None) -> str:
        name = name or _unique_package_name()
        package_dir = root / name
        package_dir.mkdir()
        (package_dir / "__init__.py").write_text("")
        for relative, source in files.items():
            path = package_dir / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(textwrap.dedent(source))
        created.append(name)
        import importlib
        importlib.invalidate_caches()
        return name

    yield factory
    _forget_modules(created)


@pytest.fixture
def make_archive(tmp_path) -> Callable[..., tuple]:
    """Write a package into a zip archive (not yet on sys.path).

    Returns (archive path, package name).
    """
    created: List[str] = []

    def factory(files: Dict[str, str], name: Optional[str] = None) -> tuple:
        name = name or _unique_package_name("zipped")
        archive_path = tmp_path / f"{name}.zip"
        with zipfile.ZipFile(archive_path, "w") as archive:
            archive.writestr(f"{name}/__init__.py", "")
            for relative, source in files.items():
                archive.writestr(f"{name}/{relative}", textwrap.dedent(source))
        created.append(name)
        return archive_path, name

    yield factory
    _forget_modules(created)
