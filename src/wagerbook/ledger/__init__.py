"""Value containers, admin capability and the bet ledger."""

from wagerbook.ledger.bets import BetLedger, BetRecord
from wagerbook.ledger.capability import AdminCapability, authorize
from wagerbook.ledger.vault import Vault, to_amount

__all__ = ["AdminCapability", "BetLedger", "BetRecord", "Vault", "authorize", "to_amount"]
