"""
Borough-level incident analysis for New York City: cleaning, aggregation,
per-capita normalization, geospatial enrichment and a daily occurrence model.
"""

__version__ = "0.1.0"
