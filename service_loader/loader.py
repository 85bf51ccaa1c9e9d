"""Provider discovery pipeline.

For a capability class, find every ``META-INF/services/<capability-id>``
declaration file the loading context can see, resolve each declared name,
keep those that subclass the capability and optionally instantiate them.

Failures are isolated per declared name (or per declaration file) and
reported to the logger; callers only ever see the providers that loaded.
Declarations that resolve to something which does not satisfy the
capability are skipped without a log entry.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from collections.abc import MutableSequence
from typing import Any
from typing import TypeVar

from .context import LoadingContext
from .declarations import read_declarations
from .errors import ProviderConstructionError
from .errors import ProviderNotFoundError
from .errors import ResourceLookupError
from .validation import capability_id
from .validation import instantiate
from .validation import is_assignable

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _iter_validated(
    capability: type, context: LoadingContext, log: logging.Logger, strict: bool
) -> Iterator[tuple[str, Any]]:
    """Yield (declared name, validated descriptor) pairs in declaration order."""
    service = capability_id(capability)

    try:
        resources = context.locate(service)
    except OSError as e:
        _lookup_failed(service, e, log, strict)
        return

    while True:
        try:
            resource = next(resources)
        except StopIteration:
            return
        except OSError as e:
            _lookup_failed(service, e, log, strict)
            return

        for name in read_declarations(resource, log=log):
            try:
                descriptor = context.resolve(name)
            except ProviderNotFoundError as e:
                log.warning(f"Failed to load {name}: {e}", exc_info=e)
                continue

            if not is_assignable(descriptor, capability):
                continue  # not a provider of this capability

            yield name, descriptor


def _lookup_failed(service: str, error: OSError, log: logging.Logger, strict: bool) -> None:
    log.warning(f"Failed to look up service providers for {service}: {error}", exc_info=error)
    if strict:
        raise ResourceLookupError(service, error) from error


def iter_descriptors(
    capability: type[T],
    context: LoadingContext | None = None,
    *,
    log: logging.Logger | None = None,
    strict: bool = False,
) -> Iterator[type[T]]:
    """Lazily yield provider classes declared for a capability.

    Args:
        capability: Class every provider must subclass
        context: Where to look and how to load (default: sys.path + imports)
        log: Logger receiving per-provider faults (default: this module's logger)
        strict: Raise ResourceLookupError when declaration files cannot be
            enumerated instead of stopping quietly

    Yields:
        Provider classes, in declaration-file order then line order
    """
    context = context or LoadingContext.default()
    for _name, descriptor in _iter_validated(capability, context, log or logger, strict):
        yield descriptor


def discover_descriptors(
    capability: type[T],
    context: LoadingContext | None,
    result: MutableSequence[type[T]],
    *,
    log: logging.Logger | None = None,
    strict: bool = False,
) -> None:
    """Append every provider class declared for a capability to result.

    Existing contents of result are kept. Duplicate declarations produce
    duplicate entries.
    """
    for descriptor in iter_descriptors(capability, context, log=log, strict=strict):
        result.append(descriptor)


def discover_instances(
    context: LoadingContext | None,
    capability: type[T],
    *,
    log: logging.Logger | None = None,
    strict: bool = False,
) -> list[T]:
    """Instantiate every provider declared for a capability.

    Providers that cannot be constructed with no arguments are logged and
    skipped.

    Returns:
        New provider instances, in declaration order
    """
    log = log or logger
    context = context or LoadingContext.default()

    instances: list[T] = []
    for name, descriptor in _iter_validated(capability, context, log, strict):
        try:
            instances.append(instantiate(descriptor, capability, name=name))
        except ProviderConstructionError as e:
            log.warning(f"Failed to load {name} ({e.kind.value}): {e}", exc_info=e)
    return instances
