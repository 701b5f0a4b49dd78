"""wagerbook - escrow and settlement engine for betting markets."""

from wagerbook.engine import Market, Registry
from wagerbook.ledger import AdminCapability, Vault
from wagerbook.models import MarketDetails, PayoutPolicy, Reward

__version__ = "0.1.0"

__all__ = [
    "AdminCapability",
    "Market",
    "MarketDetails",
    "PayoutPolicy",
    "Registry",
    "Reward",
    "Vault",
]
