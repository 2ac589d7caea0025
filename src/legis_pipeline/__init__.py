"""legis_pipeline package.

Contains modules for loading scraped monthly listings of laws and decrees,
filtering out routine documents by title, building gap-free monthly count
series, decomposing them into seasonally-adjusted and trend components, and
aligning administrative terms on a common elapsed-time axis.

Architecture:
- Loader → Filter → Aggregator → Decomposer → Aligner, each a pure batch
  transform over pandas tables
- Dask is used for partitioned title classification and per-type decomposition
- Pydantic models validate output rows before export
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
