"""Exceptions raised while looking up service providers.

Every per-provider failure is a ProviderError carrying the declared name and
a ProviderFaultKind. The discovery pipeline catches these and logs them; the
kind only changes the wording of the log message.
"""

from enum import Enum


class ProviderFaultKind(Enum):
    """Why a declared provider could not be used."""

    NOT_FOUND = "not-found"
    NOT_INSTANTIABLE = "not-instantiable"
    INACCESSIBLE = "inaccessible"
    CONSTRUCTOR_RAISED = "constructor-raised"


_KIND_DETAIL = {
    ProviderFaultKind.NOT_FOUND: "could not be resolved",
    ProviderFaultKind.NOT_INSTANTIABLE: "cannot be instantiated",
    ProviderFaultKind.INACCESSIBLE: "has no zero-argument constructor",
    ProviderFaultKind.CONSTRUCTOR_RAISED: "raised during construction",
}


class ProviderError(Exception):
    """Base class for failures tied to a single declared provider name."""

    def __init__(self, name: str, kind: ProviderFaultKind, message: str | None = None):
        self.name = name
        self.kind = kind
        self.detail = _KIND_DETAIL[kind]
        super().__init__(message or f"Provider '{name}' {self.detail}")


class ProviderNotFoundError(ProviderError):
    """Raised when a declared name does not resolve to anything loadable."""

    def __init__(self, name: str, message: str | None = None):
        super().__init__(name, ProviderFaultKind.NOT_FOUND, message)


class ProviderConstructionError(ProviderError):
    """Raised when a validated provider cannot be instantiated."""

    pass


class ResourceLookupError(Exception):
    """Raised in strict mode when declaration files cannot be enumerated."""

    def __init__(self, capability_id: str, cause: Exception):
        self.capability_id = capability_id
        self.cause = cause
        super().__init__(f"Failed to look up service providers for {capability_id}: {cause}")
