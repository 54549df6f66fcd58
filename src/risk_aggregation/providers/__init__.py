"""
Provider access for the aggregation layer.

Provides the HTTP transport, envelope validation, payload parsers, the
single-endpoint ProviderClient, the ordered-mirror EndpointFallbackResolver
and the provider endpoint catalog.
"""

from .transport import (
    ProviderError,
    TransportError,
    EnvelopeError,
    RecordParseError,
    HttpRequest,
    HttpResponse,
    HttpTransport,
    AiohttpTransport,
)

from .envelope import (
    PayloadShape,
    unwrap_envelope,
    require_shape,
)

from .parsers import (
    FIELD_ALIASES,
    parse_subject,
    parse_incident,
    parse_entries,
)

from .catalog import (
    CatalogError,
    ProviderSpec,
    ProviderCatalog,
    default_catalog,
    load_catalog,
    catalog_from_dict,
)

from .client import ProviderClient, DEFAULT_TIMEOUT
from .resolver import EndpointFallbackResolver

__all__ = [
    # Transport
    'ProviderError',
    'TransportError',
    'EnvelopeError',
    'RecordParseError',
    'HttpRequest',
    'HttpResponse',
    'HttpTransport',
    'AiohttpTransport',

    # Envelope and parsing
    'PayloadShape',
    'unwrap_envelope',
    'require_shape',
    'FIELD_ALIASES',
    'parse_subject',
    'parse_incident',
    'parse_entries',

    # Catalog
    'CatalogError',
    'ProviderSpec',
    'ProviderCatalog',
    'default_catalog',
    'load_catalog',
    'catalog_from_dict',

    # Clients
    'ProviderClient',
    'DEFAULT_TIMEOUT',
    'EndpointFallbackResolver',
]
