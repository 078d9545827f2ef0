"""
TF2 Currencies: exact keys-and-metal amounts for Team Fortress 2 trading.

Layers: constants → models → arithmetic → conversion → text / codec
Values:  whole keys + metal counted in weapons. Floats only at the edges.
"""

__version__ = "1.0.0"
