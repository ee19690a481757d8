"""Pizza ordering backend: identity, franchises, menu and orders over HTTP."""

__version__ = "1.0.0"
