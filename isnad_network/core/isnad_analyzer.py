"""Main orchestrator for the isnad network pipeline."""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from .models import (
    IsnadNetworkConfig, IsnadGraph, HadithRecord, NarratorRecord, GraphNode
)
from .record_loader import RecordLoader
from .network_builder import NetworkBuilder
from .centrality_analyzer import CentralityAnalyzer
from .exporter import NetworkExporter

logger = logging.getLogger(__name__)


class IsnadNetworkAnalyzer:
    """Runs loading, graph construction, metrics and export in sequence."""

    def __init__(self, config: Optional[IsnadNetworkConfig] = None):
        """Initialize with configuration."""
        self.config = config or IsnadNetworkConfig()

        # Initialize components
        self.loader = RecordLoader()
        self.network_builder = NetworkBuilder()
        self.centrality_analyzer = CentralityAnalyzer()
        self.exporter = NetworkExporter(top_n=self.config.top_n,
                                        stats_top_k=self.config.stats_top_k)

        # Data storage
        self.hadiths: List[HadithRecord] = []
        self.narrators: List[NarratorRecord] = []
        self.narrator_lookup: Dict[int, NarratorRecord] = {}
        self.graph: Optional[IsnadGraph] = None

    def analyze(self) -> IsnadGraph:
        """Run the pipeline up to (not including) export."""
        logger.info("Starting isnad network analysis")

        # Step 1: Load both datasets; a failure here aborts before any output
        self._load_records()

        # Step 2: Build the narrator network
        self._build_network()

        # Step 3: Calculate centrality metrics
        self._calculate_centralities()

        logger.info("Analysis complete")
        return self.graph

    def _load_records(self):
        """Load hadith and narrator records and build the narrator lookup."""
        hadiths, self.narrators = self.loader.load_all(
            self.config.hadiths_path, self.config.narrators_path
        )

        self.hadiths = hadiths[:self.config.max_hadiths]
        if len(hadiths) > len(self.hadiths):
            logger.info(f"Truncated {len(hadiths)} hadiths to the first {len(self.hadiths)}")

        self.narrator_lookup = self.loader.build_narrator_lookup(self.narrators)

    def _build_network(self):
        """Build the directed narrator network."""
        self.graph = self.network_builder.build_network(self.hadiths, self.narrator_lookup)

        stats = self.network_builder.get_network_statistics(self.graph)
        logger.info(f"Network built: {stats}")

    def _calculate_centralities(self):
        """Calculate degree, PageRank and betweenness."""
        self.centrality_analyzer.calculate_all_centralities(self.graph, self.config)

        stats = self.centrality_analyzer.calculate_centrality_statistics(self.graph)
        logger.debug(f"Centrality statistics: {stats}")

    def export_results(self, output_dir: Optional[str] = None) -> Dict[str, Path]:
        """Write the JSON artifacts.

        Args:
            output_dir: Directory to write into; defaults to the configured one
        """
        if self.graph is None:
            raise ValueError("No graph available. Run analyze() first.")

        output_dir = output_dir or self.config.output_dir
        return self.exporter.export_all(output_dir, self.graph, self.hadiths, self.narrator_lookup)

    def get_top_narrators(self, metric: str = 'pagerank', n: int = 10) -> List[GraphNode]:
        """Get top N narrators by a metric."""
        if self.graph is None:
            return []

        top_ids = self.centrality_analyzer.identify_central_nodes(self.graph, metric, n)
        return [self.graph.nodes[node_id] for node_id in top_ids]

    def get_narrator_details(self, narrator_id: int) -> Optional[Dict[str, Any]]:
        """Get the detail entry for a single narrator."""
        if self.graph is None or narrator_id not in self.graph.nodes:
            return None

        node = self.graph.nodes[narrator_id]
        record = self.narrator_lookup.get(narrator_id)
        details = self.exporter.narrator_detail(node, record)
        details['group'] = int(node.group)
        details['teachers'] = record.teachers if record else ""
        details['students'] = record.students if record else ""
        return details
