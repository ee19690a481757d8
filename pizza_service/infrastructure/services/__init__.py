"""External service clients."""

from .factory_client import FactoryClient, FactoryReceipt

__all__ = ["FactoryClient", "FactoryReceipt"]
