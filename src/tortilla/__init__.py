"""tortilla package root."""

from tortilla.exceptions import NeverRaise, NeverThrown, OverloadResolutionError
from tortilla.invariants import never
from tortilla.synthesis.emission import install_wrappers, wrap_class

__all__ = [
    "__version__",
    "NeverRaise",
    "NeverThrown",
    "OverloadResolutionError",
    "install_wrappers",
    "never",
    "wrap_class",
]

__version__ = "0.1.0"
