"""Isnad network analysis for hadith transmission chains.

This package turns a table of hadiths (each with its chain of narrators)
and a table of narrator biographies into a directed transmission network,
computes network metrics over it, and exports JSON artifacts for a
client-side visualization.

Main components:
- CSV record loading with per-field recovery
- Narrator network construction with weighted edges
- Degree, PageRank and sampled betweenness centrality
- Top-N subgraph, narrator detail, hadith index and statistics export
"""

from .core import IsnadNetworkAnalyzer, IsnadNetworkConfig, IsnadGraph, RecordLoadError

__all__ = [
    "IsnadNetworkAnalyzer",
    "IsnadNetworkConfig",
    "IsnadGraph",
    "RecordLoadError",
]

__version__ = "1.0.0"
