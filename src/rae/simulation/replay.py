from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Sequence

from rae.assignment import build_default_registry, calculate_assignments, incoming_counts
from rae.contracts import Character
from rae.core import fair_random, seeded_random
from rae.roster import roster_from_dicts, roster_to_dicts


@dataclass(slots=True)
class ReplayRun:
    algorithm: str
    roster: list[dict[str, Any]]


class ReplayHarness:
    """Records assignment runs and replays them twice under the same seed."""

    def __init__(self, seed: int) -> None:
        self.seed = seed
        self.runs: list[ReplayRun] = []

    def record(self, roster: Sequence[Character], algorithm: str = "greedy") -> None:
        self.runs.append(ReplayRun(algorithm=algorithm, roster=roster_to_dicts(roster)))

    def save(self, path: Path) -> None:
        path.write_text(
            json.dumps({"seed": self.seed, "runs": [{"algorithm": r.algorithm, "roster": r.roster} for r in self.runs]}, indent=2),
            encoding="utf-8",
        )

    @staticmethod
    def load(path: Path) -> ReplayHarness:
        data = json.loads(path.read_text(encoding="utf-8"))
        harness = ReplayHarness(seed=int(data["seed"]))
        for raw in data["runs"]:
            harness.runs.append(ReplayRun(algorithm=raw["algorithm"], roster=raw["roster"]))
        return harness

    def replay(self) -> tuple[list[dict], list[dict]]:
        return self._replay_once(), self._replay_once()

    def _replay_once(self) -> list[dict]:
        registry = build_default_registry(seeded_random(self.seed))
        fingerprints: list[dict] = []
        for run in self.runs:
            result = calculate_assignments(roster_from_dicts(run.roster), run.algorithm, registry=registry)
            fingerprints.append(self._fingerprint(run.algorithm, result))
        return fingerprints

    @staticmethod
    def _fingerprint(algorithm: str, result: Sequence[Character]) -> dict:
        return {
            "algorithm": algorithm,
            "edges": sorted([c.character_id, edge.target_id] for c in result for edge in c.reinforce),
            "scores": {c.character_id: c.score for c in result if c.score is not None},
        }


@dataclass(slots=True)
class SimulationSummary:
    algorithm: str
    runs: int
    edge_counts: list[int] = field(default_factory=list)
    incoming_ranges: dict[str, tuple[int, int]] = field(default_factory=dict)

    @property
    def stable(self) -> bool:
        return all(low == high for low, high in self.incoming_ranges.values())


def simulate(roster: Sequence[Character], algorithm: str = "greedy", runs: int = 20) -> SimulationSummary:
    """Repeat unseeded runs and report how far per-target load drifts between them."""
    if runs < 1:
        raise ValueError("runs must be at least 1")
    summary = SimulationSummary(algorithm=algorithm, runs=runs)
    for _ in range(runs):
        result = calculate_assignments(roster, algorithm, registry=build_default_registry(fair_random()))
        counts = incoming_counts(result)
        summary.edge_counts.append(sum(counts.values()))
        for character in result:
            count = counts[character.character_id]
            low, high = summary.incoming_ranges.get(character.character_id, (count, count))
            summary.incoming_ranges[character.character_id] = (min(low, count), max(high, count))
    return summary
