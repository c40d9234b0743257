"""In-memory stores for generated and distributed data."""

from invest_engine.store.investment import InvestmentLedger, PropertyListing

__all__ = ["InvestmentLedger", "PropertyListing"]
