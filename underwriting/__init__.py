"""
Underwriting Ledger Package
---------------------------
Deterministic risk assessment, premium pricing and claim fraud scoring over an
auditable policy / claim / profile ledger.
Usage: from underwriting.services.ledger_service import LedgerService
"""

__version__ = "1.0.0"
__all__ = ["api", "engine", "ledger", "models", "services", "utils"]
