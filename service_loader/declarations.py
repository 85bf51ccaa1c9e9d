"""Parser for provider declaration files.

Format: UTF-8 text, one provider name per line. Lines are trimmed; blank
lines and lines starting with ``#`` are ignored. There is no inline comment,
escaping or continuation syntax, so ``pkg.Impl  # note`` is a single name.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from collections.abc import Iterator

from .resources import Resource

logger = logging.getLogger(__name__)

COMMENT_MARKER = "#"


def parse_declarations(lines: Iterable[bytes]) -> Iterator[str]:
    """Yield declared names from a binary stream, in file order.

    Args:
        lines: Binary stream (or any iterable of encoded lines)

    Raises:
        UnicodeDecodeError: A line is not valid UTF-8
        OSError: Reading the stream failed
    """
    for raw in lines:
        line = raw.decode("utf-8").strip()
        if not line or line.startswith(COMMENT_MARKER):
            continue
        yield line


def read_declarations(resource: Resource, *, log: logging.Logger | None = None) -> Iterator[str]:
    """Yield declared names from one declaration file.

    The stream is closed however iteration ends. A read or decode fault
    stops this resource only; it is logged and names already yielded stand.

    Args:
        resource: Declaration file to read
        log: Logger receiving read faults (default: this module's logger)
    """
    log = log or logger
    try:
        with resource.open() as stream:
            yield from parse_declarations(stream)
    except (OSError, UnicodeDecodeError) as e:
        log.warning(f"Failed to load {resource.uri}: {e}", exc_info=e)


def iter_declarations(resources: Iterable[Resource], *, log: logging.Logger | None = None) -> Iterator[str]:
    """Yield declared names across resources, in resource order."""
    for resource in resources:
        yield from read_declarations(resource, log=log)
