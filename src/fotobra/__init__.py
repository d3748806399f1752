"""fotobra – classificação determinística de fotos de obra."""

from ._version import __version__

__all__ = [
    "__version__",
    "classification",
    "cli",
    "config",
    "export",
    "service",
    "utils",
]
