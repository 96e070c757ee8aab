"""Paradise POS register: cart pricing, checkout and transaction capture."""

__version__ = "1.0.0"
