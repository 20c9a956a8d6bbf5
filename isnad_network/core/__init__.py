"""Core components for the isnad network pipeline."""

from .models import (
    NarratorRecord, HadithRecord, GraphNode, GraphEdge, IsnadGraph,
    NarratorGroup, IsnadNetworkConfig, IsnadNetworkError, RecordLoadError
)
from .isnad_analyzer import IsnadNetworkAnalyzer
from .record_loader import RecordLoader
from .network_builder import NetworkBuilder
from .centrality_analyzer import CentralityAnalyzer
from .exporter import NetworkExporter

__all__ = [
    # Models
    "NarratorRecord", "HadithRecord", "GraphNode", "GraphEdge", "IsnadGraph",
    "NarratorGroup", "IsnadNetworkConfig", "IsnadNetworkError", "RecordLoadError",

    # Core components
    "IsnadNetworkAnalyzer", "RecordLoader", "NetworkBuilder",
    "CentralityAnalyzer", "NetworkExporter"
]
