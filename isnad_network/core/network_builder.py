"""Narrator transmission network construction from hadith chains."""

import logging
from typing import Dict, List, Optional
import networkx as nx

from .models import HadithRecord, NarratorRecord, IsnadGraph, NarratorGroup

logger = logging.getLogger(__name__)


class NetworkBuilder:
    """Builds the directed narrator network from transmission chains."""

    # Checked in order; the first matching bucket wins.
    GRADE_GROUP_KEYWORDS = [
        (NarratorGroup.THIQAH, ("thiqah", "comp")),
        (NarratorGroup.HASAN, ("hasan",)),
        (NarratorGroup.PROPHET, ("rasool", "prophet")),
    ]

    def __init__(self, progress_interval: int = 1000):
        """Initialize builder.

        Args:
            progress_interval: Log progress every this many hadiths
        """
        self.progress_interval = progress_interval

    def build_network(self, hadiths: List[HadithRecord],
                      narrator_lookup: Dict[int, NarratorRecord]) -> IsnadGraph:
        """Build the narrator network from hadith chains."""
        logger.info(f"Building narrator network from {len(hadiths)} hadiths")

        graph = IsnadGraph()
        unresolved = set()

        for index, hadith in enumerate(hadiths):
            if self.progress_interval and index % self.progress_interval == 0:
                logger.info(f"Processing hadith {index}/{len(hadiths)}...")

            self._process_chain(hadith.chain, graph, narrator_lookup, unresolved)

        if unresolved:
            logger.info(f"{len(unresolved)} narrator ids had no narrator record; "
                        f"using placeholder names")

        logger.info(f"Created network with {graph.number_of_nodes} nodes and "
                    f"{graph.number_of_edges} edges")
        return graph

    def _process_chain(self, chain, graph: IsnadGraph,
                       narrator_lookup: Dict[int, NarratorRecord], unresolved: set):
        """Add the nodes and consecutive-pair edges of one chain."""
        if len(chain) < 2:
            return  # A single narrator is not a transmission

        for narrator_id in chain:
            if narrator_id in graph.nodes:
                continue

            info = narrator_lookup.get(narrator_id)
            if info is None:
                if narrator_id not in unresolved:
                    logger.debug(f"Narrator {narrator_id} not found in narrator records")
                unresolved.add(narrator_id)

            graph.add_node(
                narrator_id,
                name=info.name if info else None,
                grade=info.grade if info else None,
                group=self.classify_grade(info.grade if info else None),
            )

        for source, target in zip(chain, chain[1:]):
            graph.add_edge(source, target)

    @classmethod
    def classify_grade(cls, grade: Optional[str]) -> NarratorGroup:
        """Map a free-text reliability grade onto a visual group."""
        if not grade:
            return NarratorGroup.UNKNOWN

        grade = grade.lower()
        for group, keywords in cls.GRADE_GROUP_KEYWORDS:
            if any(keyword in grade for keyword in keywords):
                return group

        return NarratorGroup.UNKNOWN

    def get_network_statistics(self, graph: IsnadGraph) -> Dict[str, float]:
        """Calculate basic network statistics."""
        if graph.number_of_nodes == 0:
            return {}

        digraph = graph.to_networkx()
        stats = {
            'num_nodes': digraph.number_of_nodes(),
            'num_edges': digraph.number_of_edges(),
            'density': graph.density(),
            'num_self_loops': nx.number_of_selfloops(digraph),
            'total_transmissions': sum(edge.weight for edge in graph.edges.values()),
        }

        # Chains are directed, so connectivity is reported in the weak sense
        components = list(nx.weakly_connected_components(digraph))
        stats['num_components'] = len(components)
        stats['largest_component_size'] = len(max(components, key=len))
        stats['is_connected'] = len(components) == 1

        return stats
