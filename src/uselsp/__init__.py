"""uselsp package root."""

from uselsp.exceptions import (
    ConfigurationFault,
    MalformedRange,
    NeverThrown,
    UnresolvedEntry,
    UseLspError,
)
from uselsp.invariants import never

__all__ = [
    "__version__",
    "ConfigurationFault",
    "MalformedRange",
    "NeverThrown",
    "UnresolvedEntry",
    "UseLspError",
    "never",
]

__version__ = "0.1.0"
