"""Comparative analysis of algorithm results."""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from maze_search.core.data_models import AlgorithmResult


def efficiency_ratio(result: AlgorithmResult) -> float:
    """Nodes expanded per path step; infinite for a zero-length path."""
    if result.path_length > 0:
        return result.nodes_expanded / result.path_length
    return math.inf


def _percent_over(value: float, best: float) -> float:
    if best <= 0:
        return 0.0
    return (value - best) / best * 100.0


@dataclass
class AlgorithmComparison:
    """One row of the detailed comparison table."""
    name: str
    time_taken: float
    nodes_expanded: int
    path_length: int
    efficiency: float
    time_overhead_pct: float
    nodes_overhead_pct: float
    extra_steps: int
    is_optimal: bool


@dataclass
class ComparisonSummary:
    """Rankings over the results that found a path."""
    any_found: bool
    most_efficient: Optional[str] = None
    least_efficient: Optional[str] = None
    min_nodes: int = 0
    max_nodes: int = 0
    shortest_path: int = 0
    longest_path: int = 0
    shortest_path_by: List[str] = field(default_factory=list)
    fastest: Optional[str] = None
    slowest: Optional[str] = None
    fastest_time: float = 0.0
    slowest_time: float = 0.0
    optimal_algorithms: List[str] = field(default_factory=list)
    efficiency_ranking: List[Tuple[str, float]] = field(default_factory=list)
    rows: List[AlgorithmComparison] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'any_found': self.any_found,
            'most_efficient': self.most_efficient,
            'least_efficient': self.least_efficient,
            'min_nodes': self.min_nodes,
            'max_nodes': self.max_nodes,
            'shortest_path': self.shortest_path,
            'longest_path': self.longest_path,
            'shortest_path_by': list(self.shortest_path_by),
            'fastest': self.fastest,
            'slowest': self.slowest,
            'fastest_time': self.fastest_time,
            'slowest_time': self.slowest_time,
            'optimal_algorithms': list(self.optimal_algorithms),
            'efficiency_ranking': [
                {'name': name, 'ratio': None if math.isinf(ratio) else ratio}
                for name, ratio in self.efficiency_ranking
            ],
            'rows': [
                dict(row.__dict__, efficiency=None if math.isinf(row.efficiency) else row.efficiency)
                for row in self.rows
            ],
            'failed': list(self.failed),
        }


def analyze_results(results: Sequence[AlgorithmResult]) -> ComparisonSummary:
    """Build the comparative summary.

    Ties resolve to the first result in input order, matching how the
    results are listed in the comparison.
    """
    successful = [r for r in results if r.found]
    failed = [r.name for r in results if not r.found]
    if not successful:
        return ComparisonSummary(any_found=False, failed=failed)

    min_nodes = min(r.nodes_expanded for r in successful)
    max_nodes = max(r.nodes_expanded for r in successful)
    shortest = min(r.path_length for r in successful)
    longest = max(r.path_length for r in successful)
    fastest_time = min(r.time_taken for r in successful)
    slowest_time = max(r.time_taken for r in successful)

    ranking = sorted(((r.name, efficiency_ratio(r)) for r in successful), key=lambda item: item[1])

    rows = [
        AlgorithmComparison(
            name=r.name,
            time_taken=r.time_taken,
            nodes_expanded=r.nodes_expanded,
            path_length=r.path_length,
            efficiency=efficiency_ratio(r),
            time_overhead_pct=_percent_over(r.time_taken, fastest_time),
            nodes_overhead_pct=_percent_over(r.nodes_expanded, min_nodes),
            extra_steps=r.path_length - shortest,
            is_optimal=r.is_optimal,
        )
        for r in successful
    ]

    return ComparisonSummary(
        any_found=True,
        most_efficient=next(r.name for r in successful if r.nodes_expanded == min_nodes),
        least_efficient=next(r.name for r in successful if r.nodes_expanded == max_nodes),
        min_nodes=min_nodes,
        max_nodes=max_nodes,
        shortest_path=shortest,
        longest_path=longest,
        shortest_path_by=[r.name for r in successful if r.path_length == shortest],
        fastest=next(r.name for r in successful if r.time_taken == fastest_time),
        slowest=next(r.name for r in successful if r.time_taken == slowest_time),
        fastest_time=fastest_time,
        slowest_time=slowest_time,
        optimal_algorithms=[r.name for r in successful if r.is_optimal],
        efficiency_ranking=ranking,
        rows=rows,
        failed=failed,
    )


def format_summary(summary: ComparisonSummary) -> str:
    """Render the summary as a plain-text table."""
    if not summary.any_found:
        return "No algorithm found a path to the goal."

    lines = [
        f"Fastest to goal:  {summary.fastest} ({summary.fastest_time * 1000:.1f}ms)",
        f"Most efficient:   {summary.most_efficient} ({summary.min_nodes} nodes)",
        f"Shortest path:    {summary.shortest_path} steps by {', '.join(summary.shortest_path_by)}",
        "",
        f"{'Algorithm':<18}{'Time':>12}{'Nodes':>14}{'Path':>10}{'Efficiency':>12}",
    ]
    for row in summary.rows:
        time_col = f"{row.time_taken * 1000:.1f}ms"
        if row.time_overhead_pct:
            time_col += f" +{row.time_overhead_pct:.0f}%"
        nodes_col = f"{row.nodes_expanded}"
        if row.nodes_overhead_pct:
            nodes_col += f" +{row.nodes_overhead_pct:.0f}%"
        path_col = f"{row.path_length}" + (f" +{row.extra_steps}" if row.extra_steps else "")
        efficiency_col = "-" if math.isinf(row.efficiency) else f"{row.efficiency:.2f}"
        lines.append(f"{row.name:<18}{time_col:>12}{nodes_col:>14}{path_col:>10}{efficiency_col:>12}")

    if summary.failed:
        lines.append("")
        lines.append(f"No path: {', '.join(summary.failed)}")
    return '\n'.join(lines)
