"""Loading context: where declaration files come from and how names load."""

from __future__ import annotations

import sys
from collections.abc import Iterable
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .resolvers import ImportResolver
from .resolvers import NameResolver
from .resources import DEFAULT_PREFIX
from .resources import Resource
from .resources import ResourceLocator
from .resources import SearchPathLocator
from .settings import LoaderSettings


@dataclass(frozen=True)
class LoadingContext:
    """Pairs a resource locator with a name resolver.

    Usage:
        context = LoadingContext.default()
        codecs = discover_instances(context, Codec)
    """

    locator: ResourceLocator
    resolver: NameResolver

    @classmethod
    def default(cls, prefix: str = DEFAULT_PREFIX) -> LoadingContext:
        """Search the current sys.path and resolve through the import system."""
        return cls.for_roots(sys.path, prefix=prefix)

    @classmethod
    def for_roots(cls, roots: Iterable[str | Path], prefix: str = DEFAULT_PREFIX) -> LoadingContext:
        """Search explicit roots and resolve through the import system."""
        return cls(locator=SearchPathLocator(list(roots), prefix=prefix), resolver=ImportResolver())

    @classmethod
    def from_settings(cls, settings: LoaderSettings) -> LoadingContext:
        """Build a context from loaded settings (configured roots before sys.path)."""
        roots: list[str | Path] = list(settings.search_paths)
        if settings.include_sys_path:
            roots.extend(sys.path)
        return cls.for_roots(roots, prefix=settings.resource_prefix)

    def locate(self, capability_id: str) -> Iterator[Resource]:
        return iter(self.locator.locate(capability_id))

    def resolve(self, name: str) -> Any:
        return self.resolver.resolve(name, self)
