"""Provider discovery through META-INF/services declaration files.

Declare providers of a capability in ``META-INF/services/<module>.<Class>``
under any search root (directory or zip archive), one name per line:

    # codecs shipped with this package
    mypkg.codecs.GzipCodec
    mypkg.codecs:ZstdCodec

then load them:

    from service_loader import LoadingContext, discover_instances

    codecs = discover_instances(LoadingContext.default(), Codec)
"""

from .context import LoadingContext
from .declarations import iter_declarations
from .declarations import parse_declarations
from .declarations import read_declarations
from .errors import ProviderConstructionError
from .errors import ProviderError
from .errors import ProviderFaultKind
from .errors import ProviderNotFoundError
from .errors import ResourceLookupError
from .loader import discover_descriptors
from .loader import discover_instances
from .loader import iter_descriptors
from .resolvers import ImportResolver
from .resolvers import MappingResolver
from .resolvers import NameResolver
from .resources import DEFAULT_PREFIX
from .resources import ArchiveResource
from .resources import FileResource
from .resources import Resource
from .resources import ResourceLocator
from .resources import SearchPathLocator
from .settings import LoaderSettings
from .settings import SettingsPaths
from .settings import load_settings
from .validation import capability_id
from .validation import instantiate
from .validation import is_assignable

__all__ = [
    "DEFAULT_PREFIX",
    "ArchiveResource",
    "FileResource",
    "ImportResolver",
    "LoaderSettings",
    "LoadingContext",
    "MappingResolver",
    "NameResolver",
    "ProviderConstructionError",
    "ProviderError",
    "ProviderFaultKind",
    "ProviderNotFoundError",
    "Resource",
    "ResourceLocator",
    "ResourceLookupError",
    "SearchPathLocator",
    "SettingsPaths",
    "capability_id",
    "discover_descriptors",
    "discover_instances",
    "instantiate",
    "is_assignable",
    "iter_declarations",
    "iter_descriptors",
    "load_settings",
    "parse_declarations",
    "read_declarations",
]
