#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Solve problems/problem_1 (or the built-in demo fleet) and export CSV artifacts.

This version does NOT use argparse.
Just set the variables at the top of the file and run:

    python scripts/run_problem.py

Outputs under OUT_DIR:
  - allocations.csv        (final placement)
  - allocation_plan.csv    (kept / added / removed vs. current allocations)
  - metrics.csv            (per-machine usage before/after local search)
  - solver_summary.csv     (quality, scores, iterations, per-resource KPIs)
"""

from __future__ import annotations
import logging
import os
from typing import List, Optional

# ====== CONFIGURATION ======
MACHINES_PATH = "../problems/problem_1/machines.json"
CONTAINERS_PATH = "../problems/problem_1/containers.json"
ALLOCATIONS_PATH: Optional[str] = "../problems/problem_1/allocations.json"  # None = start from scratch
OUT_DIR = "reports/problem_1"

# Ignore the JSON files and solve the built-in demo fleet instead
USE_DEMO_FLEET = False

# Objective: balanced resource kinds (order = resource axis)
OPTIMIZE_RESOURCES = ["cpu", "memory"]
HARD_CONSTRAINT_RESOURCE: Optional[str] = "memory"
MAXIMIZE_RESOURCE_USAGE_FOR: Optional[str] = None

# Search budget
INITIAL_RANDOM_GUESS_ITERATIONS = 0   # 0 = greedy initial placement
BEST_WORST_SWAPPING_ITERATIONS = 1000
FULL_SCAN_ITERATIONS = 2
FULL_SCAN_SWAP_CONTAINER_ITERATIONS = 1
TIMEOUT_S: Optional[float] = 10.0
ALLOWED_CHURN_PERCENTAGE: Optional[float] = 50.0

# RNG seed and log level
SEED = 42
LOG_LEVEL = logging.INFO
# ===========================

# Project imports
from mpls.business_objects import Allocation, ContainerSpec, Machine
from mpls.planning import SolverParameters, SolverResult
from mpls.planning.solvers.mpls_solver import MplsAllocationSolver
from mpls.planning.tracker import Tracker
from mpls.utils.fleet import FleetTemplate, build_containers, build_machines
from mpls.utils.read_jsons import read_allocations_json, read_containers_json, read_machines_json


def build_demo_fleet() -> tuple:
    """228 machines in three sizes, one container spec wanting 24 instances."""
    template = FleetTemplate()
    machines: List[Machine] = (
        build_machines(93, template.with_resource("cpu", 20).with_resource("memory", 20), start=0)
        + build_machines(51, template.with_resource("cpu", 5).with_resource("memory", 5), start=93)
        + build_machines(84, template.with_resource("cpu", 1).with_resource("memory", 1), start=144)
    )
    containers: List[ContainerSpec] = build_containers(
        1,
        FleetTemplate().with_resource("cpu", 1).with_resource("memory", 1).with_instance_count(24),
    )
    return machines, containers, None


def load_problem() -> tuple:
    machines: List[Machine] = read_machines_json(MACHINES_PATH)
    containers: List[ContainerSpec] = read_containers_json(CONTAINERS_PATH)
    allocations: Optional[List[Allocation]] = None
    if ALLOCATIONS_PATH is not None and os.path.exists(ALLOCATIONS_PATH):
        allocations = read_allocations_json(ALLOCATIONS_PATH, machines, containers)
    return machines, containers, allocations


def main() -> None:
    logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    # Load problem definition
    machines, containers, allocations = build_demo_fleet() if USE_DEMO_FLEET else load_problem()

    parameters = SolverParameters(
        machines=machines,
        containers=containers,
        current_allocations=allocations,
        optimize_resources=tuple(OPTIMIZE_RESOURCES),
        hard_constraint_resource=HARD_CONSTRAINT_RESOURCE,
        maximize_resource_usage_for=MAXIMIZE_RESOURCE_USAGE_FOR,
        initial_random_guess_iterations=INITIAL_RANDOM_GUESS_ITERATIONS,
        best_worst_swapping_iterations=BEST_WORST_SWAPPING_ITERATIONS,
        full_scan_iterations=FULL_SCAN_ITERATIONS,
        full_scan_swap_container_iterations=FULL_SCAN_SWAP_CONTAINER_ITERATIONS,
        timeout=TIMEOUT_S,
        allowed_churn_percentage=ALLOWED_CHURN_PERCENTAGE,
        seed=SEED,
    )

    # Solve and dump artifacts
    solver = MplsAllocationSolver(tracker=Tracker(out_dir=OUT_DIR))
    result: SolverResult = solver.solve(parameters)

    # Console summary
    print("\n=== Allocation Solve Complete ===")
    print(f"Solution quality: {result.quality.value}")
    if result.error_code is not None:
        print(f"Error code:       {result.error_code.value}")
    print(f"Score:            {result.score:.4f} (initial placement {result.baseline_score:.4f})")
    print(f"New allocations:  {len(result.new_allocations)}")
    print(f"Deallocations:    {len(result.deallocations)}")
    for a in result.allocations:
        print(f"  {a.machine.name} <- {a.container.name}")

    print(f"\nArtifacts written under: {os.path.abspath(OUT_DIR)}")


if __name__ == "__main__":
    main()
