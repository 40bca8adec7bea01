"""API clients for external data sources."""

from vizsnp.api.pdbe import PDBeAPIError, PDBeClient
from vizsnp.api.uniprot import UniProtAPIError, UniProtClient
from vizsnp.api.vep import VEPAPIError, VEPClient

__all__ = [
    "VEPClient",
    "VEPAPIError",
    "PDBeClient",
    "PDBeAPIError",
    "UniProtClient",
    "UniProtAPIError",
]
