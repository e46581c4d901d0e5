"""Location Resolution API: geocoding and distance with provider fallback"""

__version__ = "0.1.0"
