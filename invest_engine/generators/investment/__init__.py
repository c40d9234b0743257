"""Investment domain generators."""

from invest_engine.generators.investment.listing import PropertyListingGenerator
from invest_engine.generators.investment.position import PositionGenerator

__all__ = ["PositionGenerator", "PropertyListingGenerator"]
