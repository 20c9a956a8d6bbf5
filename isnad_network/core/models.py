"""Data models for the isnad network pipeline."""

import os
from dataclasses import dataclass, field
from typing import Dict, Optional, Set, Tuple
from enum import IntEnum
import networkx as nx


class NarratorGroup(IntEnum):
    """Visual grouping bucket derived from a narrator's grade."""
    PROPHET = 0
    HASAN = 1
    THIQAH = 2
    UNKNOWN = 3


class IsnadNetworkError(Exception):
    """Base error for the isnad network pipeline."""


class RecordLoadError(IsnadNetworkError):
    """Raised when an input dataset cannot be read."""

    def __init__(self, dataset: str, path: str, reason: str):
        self.dataset = dataset
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load {dataset} dataset from {path}: {reason}")


@dataclass(frozen=True)
class NarratorRecord:
    """Narrator biographical record from the narrators table."""
    scholar_indx: Optional[int] = None  # None when the source value is malformed
    name: str = ""
    grade: str = ""
    birth_date_place: str = ""
    death_date_place: str = ""
    birth_place: str = ""
    birth_date: str = ""
    death_date: str = ""
    area_of_interest: str = ""
    teachers: str = ""
    students: str = ""


@dataclass(frozen=True)
class HadithRecord:
    """Hadith record with its transmission chain."""
    id: Optional[int] = None
    hadith_id: Optional[int] = None
    source: str = ""
    chapter: str = ""
    chapter_no: str = ""
    hadith_no: str = ""
    text_ar: str = ""
    text_en: str = ""
    chain: Tuple[int, ...] = ()


@dataclass
class GraphNode:
    """Narrator node with computed metrics."""
    id: int
    name: str = ""
    grade: str = "Unknown"
    group: NarratorGroup = NarratorGroup.UNKNOWN

    # Filled in by the centrality analyzer
    pagerank: float = 0.0
    in_degree: int = 0
    out_degree: int = 0
    betweenness: float = 0.0


@dataclass
class GraphEdge:
    """Directed transmission edge between two narrators."""
    source: int
    target: int
    weight: int = 1


@dataclass
class IsnadGraph:
    """Directed narrator graph with forward and reverse adjacency indices.

    Nodes and edges keep insertion order. The adjacency indices are only
    written by ``add_edge`` so they always agree with the edge set.
    """
    nodes: Dict[int, GraphNode] = field(default_factory=dict)
    edges: Dict[Tuple[int, int], GraphEdge] = field(default_factory=dict)
    successors: Dict[int, Set[int]] = field(default_factory=dict)
    predecessors: Dict[int, Set[int]] = field(default_factory=dict)

    def add_node(self, node_id: int, name: Optional[str] = None,
                 grade: Optional[str] = None,
                 group: NarratorGroup = NarratorGroup.UNKNOWN) -> GraphNode:
        """Add a node unless it already exists; the first insertion wins."""
        node = self.nodes.get(node_id)
        if node is None:
            node = GraphNode(
                id=node_id,
                name=name or f"Unknown ({node_id})",
                grade=grade or "Unknown",
                group=group,
            )
            self.nodes[node_id] = node
        return node

    def add_edge(self, source: int, target: int) -> GraphEdge:
        """Add a directed edge or bump the weight of an existing one."""
        key = (source, target)
        edge = self.edges.get(key)
        if edge is not None:
            edge.weight += 1
        else:
            edge = GraphEdge(source=source, target=target)
            self.edges[key] = edge

        self.successors.setdefault(source, set()).add(target)
        self.predecessors.setdefault(target, set()).add(source)
        return edge

    @property
    def number_of_nodes(self) -> int:
        return len(self.nodes)

    @property
    def number_of_edges(self) -> int:
        return len(self.edges)

    def density(self) -> float:
        """Edge density E / (N * (N - 1)); 0 for graphs with fewer than two nodes."""
        n_nodes = self.number_of_nodes
        if n_nodes < 2:
            return 0.0
        return self.number_of_edges / (n_nodes * (n_nodes - 1))

    def to_networkx(self):
        """Return a weighted ``networkx.DiGraph`` copy of this graph."""
        digraph = nx.DiGraph()
        for node in self.nodes.values():
            digraph.add_node(node.id, name=node.name, grade=node.grade, group=int(node.group))
        for edge in self.edges.values():
            digraph.add_edge(edge.source, edge.target, weight=edge.weight)
        return digraph


def _env_int(name: str, default: int) -> int:
    value = os.environ.get(name)
    return int(value) if value not in (None, "") else default


def _env_float(name: str, default: float) -> float:
    value = os.environ.get(name)
    return float(value) if value not in (None, "") else default


@dataclass
class IsnadNetworkConfig:
    """Configuration for a pipeline run."""
    hadiths_path: str = "all_hadiths_clean.csv"
    narrators_path: str = "all_rawis.csv"
    output_dir: str = os.path.join("public", "data")
    max_hadiths: int = 15000
    top_n: int = 500
    pagerank_iterations: int = 100
    damping: float = 0.85
    betweenness_sample_size: int = 1000
    stats_top_k: int = 20

    def __post_init__(self):
        for name in ("max_hadiths", "top_n", "pagerank_iterations",
                     "betweenness_sample_size", "stats_top_k"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")
        if not 0.0 <= self.damping <= 1.0:
            raise ValueError(f"damping must be between 0 and 1, got {self.damping}")

    @classmethod
    def from_env(cls, **overrides) -> "IsnadNetworkConfig":
        """Build a config from ISNAD_* environment variables.

        Keyword overrides that are not None take precedence over the
        environment.
        """
        values = {
            "hadiths_path": os.environ.get("ISNAD_HADITHS_PATH") or cls.hadiths_path,
            "narrators_path": os.environ.get("ISNAD_NARRATORS_PATH") or cls.narrators_path,
            "output_dir": os.environ.get("ISNAD_OUTPUT_DIR") or cls.output_dir,
            "max_hadiths": _env_int("ISNAD_MAX_HADITHS", cls.max_hadiths),
            "top_n": _env_int("ISNAD_TOP_N", cls.top_n),
            "pagerank_iterations": _env_int("ISNAD_PAGERANK_ITERATIONS", cls.pagerank_iterations),
            "damping": _env_float("ISNAD_DAMPING", cls.damping),
            "betweenness_sample_size": _env_int("ISNAD_BETWEENNESS_SAMPLE_SIZE",
                                                cls.betweenness_sample_size),
            "stats_top_k": _env_int("ISNAD_STATS_TOP_K", cls.stats_top_k),
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)
