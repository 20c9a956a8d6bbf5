"""JSON artifact export for the visualization front-end."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from .models import GraphNode, HadithRecord, IsnadGraph, NarratorRecord

logger = logging.getLogger(__name__)


def _first_present(*values: Optional[str], default: str = "Unknown") -> str:
    for value in values:
        if value:
            return value
    return default


class NetworkExporter:
    """Serializes the analyzed network into independent JSON artifacts.

    Four files are produced:
    - graph.json: top-N subgraph by PageRank for the force-directed view
    - narrators.json: detail entry for every node, keyed by id
    - hadiths.json: hadith search index with resolved narrator names
    - stats.json: graph summary and top-k lists
    """

    GRAPH_FILE = "graph.json"
    NARRATORS_FILE = "narrators.json"
    HADITHS_FILE = "hadiths.json"
    STATS_FILE = "stats.json"

    def __init__(self, top_n: int = 500, stats_top_k: int = 20):
        self.top_n = top_n
        self.stats_top_k = stats_top_k

    def select_top_nodes(self, graph: IsnadGraph, top_n: Optional[int] = None) -> List[GraphNode]:
        """Nodes by PageRank descending, cut at top_n."""
        top_n = self.top_n if top_n is None else top_n
        ranked = sorted(graph.nodes.values(), key=lambda node: node.pagerank, reverse=True)
        return ranked[:top_n]

    def build_graph_artifact(self, graph: IsnadGraph, top_n: Optional[int] = None) -> Dict[str, List[Dict]]:
        """Cut graph with only the edges whose endpoints both survive."""
        top_nodes = self.select_top_nodes(graph, top_n)
        kept_ids = {node.id for node in top_nodes}

        nodes = [
            {
                'id': node.id,
                'name': node.name,
                'grade': node.grade,
                'pagerank': node.pagerank,
                'in_degree': node.in_degree,
                'group': int(node.group),
            }
            for node in top_nodes
        ]
        edges = [
            {'source': edge.source, 'target': edge.target, 'weight': edge.weight}
            for edge in graph.edges.values()
            if edge.source in kept_ids and edge.target in kept_ids
        ]

        return {'nodes': nodes, 'edges': edges}

    def build_narrator_details(self, graph: IsnadGraph,
                               narrator_lookup: Dict[int, NarratorRecord]) -> Dict[str, Dict[str, Any]]:
        """Detail entry for every node in the graph, keyed by stringified id."""
        return {
            str(node.id): self.narrator_detail(node, narrator_lookup.get(node.id))
            for node in graph.nodes.values()
        }

    def narrator_detail(self, node: GraphNode, info: Optional[NarratorRecord]) -> Dict[str, Any]:
        """Merge a node's metrics with its biographical record, if any."""
        return {
            'id': node.id,
            'name': node.name,
            'name_arabic': _first_present(info.name if info else None, default=node.name),
            'grade': node.grade,
            'birth': _first_present(info.birth_date, info.birth_date_place) if info else "Unknown",
            'death': _first_present(info.death_date, info.death_date_place) if info else "Unknown",
            'birth_place': _first_present(info.birth_place) if info else "Unknown",
            'areas': _first_present(info.area_of_interest) if info else "Unknown",
            'pagerank': node.pagerank,
            'in_degree': node.in_degree,
            'out_degree': node.out_degree,
            'betweenness': node.betweenness,
        }

    def build_hadith_index(self, hadiths: List[HadithRecord],
                           narrator_lookup: Dict[int, NarratorRecord]) -> List[Dict[str, Any]]:
        """Search index entry for each processed hadith."""
        index = []

        for hadith in hadiths:
            narrator_names = []
            for narrator_id in hadith.chain:
                info = narrator_lookup.get(narrator_id)
                narrator_names.append(_first_present(info.name if info else None,
                                                     default=f"Unknown ({narrator_id})"))

            index.append({
                'id': hadith.id,
                'hadith_id': hadith.hadith_id,
                'source': hadith.source,
                'chapter': hadith.chapter,
                'chapter_no': hadith.chapter_no,
                'hadith_no': hadith.hadith_no,
                'text_ar': hadith.text_ar,
                'text_en': hadith.text_en,
                'chain': list(hadith.chain),
                'narrator_names': narrator_names,
            })

        return index

    def build_statistics(self, graph: IsnadGraph, top_k: Optional[int] = None) -> Dict[str, Any]:
        """Graph summary plus top-k narrators by PageRank, betweenness and citations."""
        top_k = self.stats_top_k if top_k is None else top_k
        nodes = list(graph.nodes.values())

        def top_by(attribute: str, key: str) -> List[Dict[str, Any]]:
            ranked = sorted(nodes, key=lambda node: getattr(node, attribute), reverse=True)
            return [
                {'id': node.id, 'name': node.name, 'grade': node.grade, key: getattr(node, attribute)}
                for node in ranked[:top_k]
            ]

        return {
            'graph': {
                'nodes': graph.number_of_nodes,
                'edges': graph.number_of_edges,
                'density': graph.density(),
            },
            'top_pagerank': top_by('pagerank', 'pagerank'),
            'top_betweenness': top_by('betweenness', 'betweenness'),
            'top_citations': top_by('in_degree', 'citations'),
        }

    def export_all(self, output_dir: str, graph: IsnadGraph, hadiths: List[HadithRecord],
                   narrator_lookup: Dict[int, NarratorRecord]) -> Dict[str, Path]:
        """Write all four artifacts into output_dir.

        Returns:
            Mapping of artifact name to written path
        """
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        graph_artifact = self.build_graph_artifact(graph)
        artifacts = {
            'graph': (self.GRAPH_FILE, graph_artifact),
            'narrators': (self.NARRATORS_FILE, self.build_narrator_details(graph, narrator_lookup)),
            'hadiths': (self.HADITHS_FILE, self.build_hadith_index(hadiths, narrator_lookup)),
            'stats': (self.STATS_FILE, self.build_statistics(graph)),
        }

        written = {}
        for name, (filename, payload) in artifacts.items():
            written[name] = self._write_json(output_dir / filename, payload)

        logger.info(f"Exported graph: {len(graph_artifact['nodes'])} nodes, "
                    f"{len(graph_artifact['edges'])} edges")
        logger.info(f"Exported {graph.number_of_nodes} narrator details and "
                    f"{len(hadiths)} hadiths to {output_dir}")
        return written

    def _write_json(self, path: Path, payload: Any) -> Path:
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(payload, f, indent=2, ensure_ascii=False)

        logger.debug(f"Wrote {path}")
        return path
