"""
Resolvers: one class per data source.

Every resolver derives from AbstractResolver, shells out through the shared
Process Runner, parses the text with statusmon.parsers and returns a typed
record. ResolverFactory builds them from the application configuration.
"""

from .base import AbstractResolver
from .connectivity import ConnectivityResolver
from .drivers import DriverResolver
from .factory import RESOLVER_NAMES, ResolverFactory
from .gpu import GpuResolver
from .network import NetworkResolver
from .processes import ProcessResolver, rank_processes
from .software import SoftwareResolver

__all__ = [
    "AbstractResolver",
    "ConnectivityResolver",
    "DriverResolver",
    "GpuResolver",
    "NetworkResolver",
    "ProcessResolver",
    "RESOLVER_NAMES",
    "ResolverFactory",
    "SoftwareResolver",
    "rank_processes",
]
