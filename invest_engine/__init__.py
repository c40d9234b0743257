"""Investment economics engine for fractional real-estate platforms."""

__version__ = "0.1.0"
