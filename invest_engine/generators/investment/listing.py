"""Property listing generator."""

import random

from invest_engine.economics.yield_model import YieldModel
from invest_engine.generators.base import BaseGenerator
from invest_engine.store.investment import PropertyListing


class PropertyListingGenerator(BaseGenerator):
    """Generate synthetic property listings across yield categories."""

    # Property value bounds per category, in major units
    VALUE_RANGES = {
        "commercial": (2_000_000, 50_000_000),
        "residential": (1_000_000, 20_000_000),
        "medical": (5_000_000, 80_000_000),
        "administrative": (2_000_000, 40_000_000),
        "educational": (3_000_000, 60_000_000),
        "hotel": (10_000_000, 150_000_000),
    }

    def __init__(self, seed: int | None = None, yield_model: YieldModel | None = None) -> None:
        super().__init__(seed)
        self.yield_model = yield_model or YieldModel()

    def generate(self, category_id: str | None = None) -> PropertyListing:
        """Generate a listing.

        Parameters
        ----------
        category_id : str | None
            Category to use; random when omitted.

        Returns
        -------
        PropertyListing
            Listing valued in whole thousands of major units.
        """
        if category_id is None:
            category = random.choice(self.yield_model.categories())
        else:
            category = self.yield_model.get(category_id)

        low, high = self.VALUE_RANGES.get(category.category_id, (1_000_000, 50_000_000))
        value_major = random.randint(low // 1000, high // 1000) * 1000

        return PropertyListing(
            property_id=self.fake.uuid4(),
            name=f"{self.fake.street_name()} {category.name}",
            category_id=category.category_id,
            property_value=value_major * 100,
        )
