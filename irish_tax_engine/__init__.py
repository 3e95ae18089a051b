"""Irish tax computation engine: Revenue rates, capital allowances, reliefs, VAT, Form 11, CT1."""

__version__ = "1.0.0"
