"""Component scanner for automatic discovery.

The scanner resolves a dotted package name to its physical locations on
``sys.path``, enumerates the module files below each location and imports
them, collecting every class that carries the component marker. Packages may
live in plain directories or inside zip archives.
"""

import importlib
import importlib.util
import inspect
import sys
import zipfile
from enum import Enum
from pathlib import Path, PurePosixPath
from typing import Iterator, List, Optional, Protocol, Set, Tuple, Type

from loguru import logger

from .decorators import get_component_marker
from .errors import ComponentScanError, DiscoveryLoadError

MODULE_SUFFIX = ".py"
PACKAGE_MODULE = "__init__"


def is_component_class(cls: Type) -> bool:
    """Check whether a class can be registered as a bean.

    It must carry the component marker itself and be concrete: protocols,
    enums and abstract classes are rejected.
    """
    return (
        inspect.isclass(cls)
        and get_component_marker(cls) is not None
        and not _is_protocol(cls)
        and not issubclass(cls, Enum)
        and not inspect.isabstract(cls)
    )


def _is_protocol(cls: Type) -> bool:
    return bool(getattr(cls, "_is_protocol", False))


def _module_name(package: str, relative_parts: Tuple[str, ...]) -> Optional[str]:
    """Build a dotted module name from a file path relative to ``package``."""
    *subpackages, filename = relative_parts
    stem = filename[: -len(MODULE_SUFFIX)]
    parts = [*subpackages] if stem == PACKAGE_MODULE else [*subpackages, stem]
    if not all(part.isidentifier() for part in parts):
        return None
    return ".".join([package, *parts])


class Locator(Protocol):
    """A physical location that yields candidate module names."""

    def candidate_modules(self) -> Iterator[str]:
        ...


class DirectoryLocator:
    """Walks a package directory recursively."""

    def __init__(self, directory: Path, package: str):
        self.directory = directory
        self.package = package

    def __repr__(self) -> str:
        return f"DirectoryLocator({str(self.directory)!r}, {self.package!r})"

    def candidate_modules(self) -> Iterator[str]:
        if not self.directory.is_dir():
            logger.debug(f"Directory does not exist or is not a directory: {self.directory}")
            return
        yield from self._walk(self.directory, (), set())

    def _walk(self, directory: Path, relative: Tuple[str, ...], visited: Set[Path]) -> Iterator[str]:
        # Symlinked directories may point back into the tree
        real = directory.resolve()
        if real in visited:
            logger.debug(f"Skipping already visited directory: {directory}")
            return
        visited.add(real)

        try:
            entries = sorted(directory.iterdir())
        except OSError as e:
            logger.error(f"Failed to scan file system directory: {directory}: {e}")
            return

        for entry in entries:
            if entry.is_dir():
                if entry.name == "__pycache__" or not entry.name.isidentifier():
                    continue
                yield from self._walk(entry, relative + (entry.name,), visited)
            elif entry.name.endswith(MODULE_SUFFIX) and entry.is_file():
                module_name = _module_name(self.package, relative + (entry.name,))
                if module_name:
                    yield module_name


class ArchiveLocator:
    """Enumerates the module entries of a package inside a zip archive."""

    def __init__(self, archive: Path, package_dir: str, package: str):
        """Initialize the locator.

        Args:
            archive: Path of the zip file
            package_dir: Slash-delimited path of the package inside the archive
            package: Dotted package name
        """
        self.archive = archive
        self.package_dir = package_dir.strip("/")
        self.package = package

    def __repr__(self) -> str:
        return f"ArchiveLocator({str(self.archive)!r}, {self.package_dir!r}, {self.package!r})"

    def candidate_modules(self) -> Iterator[str]:
        prefix = self.package_dir + "/"
        try:
            with zipfile.ZipFile(self.archive) as archive:
                entries = archive.namelist()
        except (OSError, zipfile.BadZipFile) as e:
            logger.error(f"Failed to scan archive: {self.archive}: {e}")
            return

        for entry in sorted(entries):
            if entry.endswith("/") or not entry.startswith(prefix) or not entry.endswith(MODULE_SUFFIX):
                continue
            relative = PurePosixPath(entry[len(prefix):]).parts
            if "__pycache__" in relative:
                continue
            module_name = _module_name(self.package, relative)
            if module_name:
                yield module_name


class ModuleLocator:
    """A base name that resolves to a single module rather than a package."""

    def __init__(self, module_name: str):
        self.module_name = module_name

    def __repr__(self) -> str:
        return f"ModuleLocator({self.module_name!r})"

    def candidate_modules(self) -> Iterator[str]:
        yield self.module_name


def split_archive_path(location: str) -> Optional[Tuple[Path, str]]:
    """Split a location inside a zip archive into (archive, inner path).

    Returns None when no parent of ``location`` is a zip file.
    """
    path = Path(location)
    for parent in path.parents:
        if parent.is_file():
            if not zipfile.is_zipfile(parent):
                return None
            return parent, path.relative_to(parent).as_posix()
    return None


class ClasspathScanner:
    """Scanner for discovering component classes below a base package."""

    def __init__(self):
        self.load_errors: List[DiscoveryLoadError] = []

    def locate(self, base_package: str) -> List[Locator]:
        """Resolve every physical location of a package.

        Args:
            base_package: Dotted package name (e.g. "myapp.services")

        Returns:
            One locator per location; empty if the package does not exist

        Raises:
            ComponentScanError: If the search roots cannot be enumerated
        """
        loaded = sys.modules.get(base_package)
        if loaded is not None and getattr(loaded, "__spec__", None) is None:
            # Scripts run directly (__main__) have no __spec__ to resolve
            return [ModuleLocator(base_package)]

        try:
            spec = importlib.util.find_spec(base_package)
        except (ModuleNotFoundError, ValueError) as e:
            logger.warning(f"Package not found: {base_package} ({e})")
            return []
        except Exception as e:
            raise ComponentScanError(base_package, str(e), cause=e) from e

        if spec is None:
            logger.warning(f"Package not found: {base_package}")
            return []

        if spec.submodule_search_locations is None:
            return [ModuleLocator(base_package)]

        try:
            locations = list(spec.submodule_search_locations)
        except OSError as e:
            raise ComponentScanError(base_package, str(e), cause=e) from e

        locators: List[Locator] = []
        for location in locations:
            if Path(location).is_dir():
                locators.append(DirectoryLocator(Path(location), base_package))
                continue

            archive = split_archive_path(location)
            if archive is not None:
                locators.append(ArchiveLocator(archive[0], archive[1], base_package))
            else:
                logger.debug(f"Unsupported location: {location} for package: {base_package}")

        return locators

    def scan(self, base_package: str) -> Set[Type]:
        """Scan a package for component classes.

        Args:
            base_package: Dotted package name

        Returns:
            The set of eligible component classes

        Raises:
            ComponentScanError: If the search roots cannot be enumerated
        """
        logger.debug(f"Scanning for components in package: {base_package}")
        self.load_errors = []

        classes: Set[Type] = set()
        seen: Set[str] = set()
        for locator in self.locate(base_package):
            for module_name in locator.candidate_modules():
                if module_name in seen:
                    continue
                seen.add(module_name)
                classes.update(self._scan_module(module_name))

        logger.debug(f"Found [{len(classes)}] component classes in package: {base_package}")
        return classes

    def _scan_module(self, module_name: str) -> List[Type]:
        """Import a module and return the component classes defined in it."""
        try:
            module = importlib.import_module(module_name)
        except Exception as e:
            self.load_errors.append(DiscoveryLoadError(module_name, cause=e))
            logger.debug(f"Skipping module {module_name} due to load error: {type(e).__name__}: {e}")
            return []

        components = []
        for _, obj in inspect.getmembers(module, inspect.isclass):
            # Skip imported classes
            if obj.__module__ != module.__name__:
                continue
            if is_component_class(obj):
                components.append(obj)
                logger.debug(f"Found component class: {module_name}.{obj.__qualname__}")

        return components
