# -*- coding: utf-8 -*-
"""
Planning tracker: CSV artifacts of a finished solve.

Files produced (when Tracker is used):
  - allocations.csv        (final placement, one row per machine/container pair)
  - allocation_plan.csv    (diff against the initial state: kept / added / removed)
  - metrics.csv            (per-machine usage, before and after local search)
  - solver_summary.csv     (quality, scores, iteration counts, per-resource KPIs)

Notes
-----
- Callers decide when to invoke these writers; the solver calls write_all at
  the end of a solve when it was given a tracker.
"""

from __future__ import annotations
import csv
import os
from dataclasses import dataclass
from typing import Dict, List

from mpls.planning.solution import SolverResult
from mpls.quality_metrics.core import summarize_metrics


def _fmt(value: float) -> str:
    return f"{float(value):.3f}"


@dataclass
class Tracker:
    """
    Thin, opt-in artifact writer. Callers control when/where to dump.
    """
    out_dir: str

    def __post_init__(self) -> None:  # type: ignore[override]
        os.makedirs(self.out_dir, exist_ok=True)

    def write_allocations_csv(
        self,
        result: SolverResult,
        filename: str = "allocations.csv",
    ) -> str:
        """
        Final placement.

        Columns:
          machine, container
        """
        path = os.path.join(self.out_dir, filename)
        with open(path, "w", newline="", encoding="utf-8") as f:
            w = csv.writer(f)
            w.writerow(["machine", "container"])
            for a in result.allocations:
                w.writerow([a.machine.name, a.container.name])
        return path

    def write_allocation_plan_csv(
        self,
        result: SolverResult,
        filename: str = "allocation_plan.csv",
    ) -> str:
        """
        Diff of the solution against the initial state.

        Columns:
          machine, container, change   (change in {kept, added, removed})
        """
        path = os.path.join(self.out_dir, filename)
        added = set(result.new_allocations)

        with open(path, "w", newline="", encoding="utf-8") as f:
            w = csv.writer(f)
            w.writerow(["machine", "container", "change"])
            for a in result.allocations:
                w.writerow([a.machine.name, a.container.name, "added" if a in added else "kept"])
            for a in result.deallocations:
                w.writerow([a.machine.name, a.container.name, "removed"])
        return path

    def write_metrics_csv(
        self,
        result: SolverResult,
        filename: str = "metrics.csv",
    ) -> str:
        """
        Per-machine usage snapshots.

        Columns:
          snapshot, resource, index, machine, allocated, total_available, difference
        """
        path = os.path.join(self.out_dir, filename)
        snapshots = (("initial", result.initial_metrics), ("solution", result.solution_metrics))

        with open(path, "w", newline="", encoding="utf-8") as f:
            w = csv.writer(f)
            w.writerow([
                "snapshot",
                "resource",
                "index",
                "machine",
                "allocated",
                "total_available",
                "difference",
            ])
            for label, metrics in snapshots:
                for kind, rows in metrics.items():
                    for m in rows:
                        w.writerow([
                            label,
                            kind.value,
                            m.index,
                            m.machine_name,
                            m.allocated,
                            m.total_available,
                            m.difference,
                        ])
        return path

    def write_solver_summary_csv(
        self,
        result: SolverResult,
        filename: str = "solver_summary.csv",
    ) -> str:
        """
        One-row summary of the solve.

        Columns (in order):
          1. Outcome: quality, error_code
          2. Scores: initial state, baseline (after initial placement), final
          3. Effort: iterations per local-search phase, elapsed seconds
          4. Plan: allocations, added, removed
          5. Per-resource KPIs of the solution (OU / BL / Overloaded per kind)
        """
        path = os.path.join(self.out_dir, filename)
        kpis: Dict[str, float] = summarize_metrics(result.solution_metrics)

        header: List[str] = [
            "quality",
            "error_code",
            "initial_state_score",
            "baseline_score",
            "score",
            "best_worst_iterations",
            "full_scan_iterations",
            "container_swap_iterations",
            "elapsed_s",
            "allocations",
            "added",
            "removed",
        ]
        row: List[object] = [
            result.quality.value,
            "" if result.error_code is None else result.error_code.value,
            _fmt(result.initial_state_score),
            _fmt(result.baseline_score),
            _fmt(result.score),
            result.best_worst_swapping_iterations_spent,
            result.full_scan_iterations_spent,
            result.inter_container_swapping_iterations_spent,
            _fmt(result.elapsed),
            len(result.allocations),
            len(result.new_allocations),
            len(result.deallocations),
        ]
        for key, value in kpis.items():
            header.append(key)
            row.append(_fmt(value))

        with open(path, "w", newline="", encoding="utf-8") as f:
            w = csv.writer(f)
            w.writerow(header)
            w.writerow(row)
        return path

    def write_all(self, result: SolverResult) -> Dict[str, str]:
        """Write every artifact; returns {artifact name: path}."""
        return {
            "allocations": self.write_allocations_csv(result),
            "allocation_plan": self.write_allocation_plan_csv(result),
            "metrics": self.write_metrics_csv(result),
            "solver_summary": self.write_solver_summary_csv(result),
        }
