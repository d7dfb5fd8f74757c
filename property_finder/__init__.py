"""
Property Finder API: real-estate listings with filtered property search.
"""

__version__ = "1.0.0"
