"""
Data ingestion and normalization module.

Candle model, raw row normalization, candle series validation and the
injectable market-data cache used by data-source collaborators.
"""
