"""Single source of truth for the tlock-wrap version string."""

__version__: str = "0.1.0"
