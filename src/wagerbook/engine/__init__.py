"""Market aggregate and the market registry."""

from wagerbook.engine.market import Market
from wagerbook.engine.registry import Registry

__all__ = ["Market", "Registry"]
