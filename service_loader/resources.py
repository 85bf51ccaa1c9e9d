"""Declaration file lookup across directories and zip archives.

A declaration file for a capability lives at
``<root>/META-INF/services/<capability-id>``. Each search root may be a plain
directory or a zip archive (wheels, eggs and zipapps included); every root
that carries the file contributes one Resource, in root order.
"""

from __future__ import annotations

import logging
import zipfile
import zlib
from collections.abc import Iterable
from collections.abc import Iterator
from contextlib import AbstractContextManager
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO
from typing import Protocol

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = "META-INF/services"


class Resource(Protocol):
    """One declaration file, readable as a byte stream."""

    uri: str

    def open(self) -> AbstractContextManager[BinaryIO]:
        """Open the resource for reading. The caller closes it."""
        ...


class ResourceLocator(Protocol):
    """Finds the declaration files for a capability identifier."""

    def locate(self, capability_id: str) -> Iterator[Resource]:
        """Yield one Resource per declaration file found.

        Raises:
            OSError: The search roots could not be enumerated
        """
        ...


class FileResource:
    """Declaration file on the local filesystem."""

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self.uri = self.path.resolve().as_uri()

    def open(self) -> BinaryIO:
        return self.path.open("rb")

    def __eq__(self, other: object) -> bool:
        return isinstance(other, FileResource) and other.path == self.path

    def __hash__(self) -> int:
        return hash(self.path)

    def __repr__(self) -> str:
        return f"FileResource({self.path})"


class ArchiveResource:
    """Declaration file stored as a member of a zip archive."""

    def __init__(self, archive: str | Path, member: str):
        self.archive = Path(archive)
        self.member = member
        self.uri = f"zip:{self.archive.resolve().as_uri()}!/{member}"

    @contextmanager
    def open(self) -> Iterator[BinaryIO]:
        """Open the member; archive damage surfaces as OSError, like a file read fault."""
        try:
            with zipfile.ZipFile(self.archive) as zf:
                with zf.open(self.member) as stream:
                    yield stream
        except (zipfile.BadZipFile, zlib.error) as e:
            raise OSError(f"Corrupt archive {self.archive}: {e}") from e
        except KeyError as e:
            raise OSError(f"Member {self.member} missing from {self.archive}") from e

    def __eq__(self, other: object) -> bool:
        return (
            isinstance(other, ArchiveResource) and other.archive == self.archive and other.member == self.member
        )

    def __hash__(self) -> int:
        return hash((self.archive, self.member))

    def __repr__(self) -> str:
        return f"ArchiveResource({self.archive}!/{self.member})"


class SearchPathLocator:
    """Looks for declaration files under an ordered list of search roots.

    Roots that do not exist are ignored. Roots that are neither a directory
    nor a readable zip archive are skipped with a debug message.
    """

    def __init__(self, roots: Iterable[str | Path], prefix: str = DEFAULT_PREFIX):
        """Initialize locator.

        Args:
            roots: Directories or zip archives, searched in order
            prefix: Relative directory holding declaration files
        """
        self.roots = [Path(root) if root else Path(".") for root in roots]
        self.prefix = prefix.strip("/")

    def locate(self, capability_id: str) -> Iterator[Resource]:
        """Yield declaration files for capability_id in root order."""
        relative = f"{self.prefix}/{capability_id}"
        for root in self.roots:
            if root.is_dir():
                candidate = root / relative
                if candidate.is_file():
                    logger.debug(f"[services:locate] {capability_id} -> {candidate}")
                    yield FileResource(candidate)
                continue

            if not root.is_file():
                continue

            if not zipfile.is_zipfile(root):
                logger.debug(f"Search root {root} is not a directory or zip archive, skipping")
                continue

            if self._archive_contains(root, relative):
                logger.debug(f"[services:locate] {capability_id} -> {root}!/{relative}")
                yield ArchiveResource(root, relative)

    def _archive_contains(self, archive: Path, member: str) -> bool:
        """Check whether a zip archive has the given member."""
        try:
            with zipfile.ZipFile(archive) as zf:
                zf.getinfo(member)
                return True
        except KeyError:
            return False
        except zipfile.BadZipFile as e:
            logger.warning(f"Skipping unreadable archive {archive}: {e}")
            return False

    def __repr__(self) -> str:
        return f"SearchPathLocator({len(self.roots)} roots, prefix={self.prefix})"
