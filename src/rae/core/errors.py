from __future__ import annotations

import json
from dataclasses import asdict
from datetime import datetime, UTC
from pathlib import Path
from typing import Mapping, Sequence
from uuid import uuid4

from rae.contracts import ForensicArtifact, ValidationIssue


class AssignmentIntegrityError(RuntimeError):
    """A strict run returned a roster that breaks an edge invariant."""

    def __init__(self, artifact: ForensicArtifact) -> None:
        super().__init__(f"[{artifact.error_code}] {artifact.message}")
        self.artifact = artifact

    @property
    def algorithm(self) -> str:
        return str(self.artifact.context.get("algorithm", ""))

    @property
    def error_code(self) -> str:
        return self.artifact.error_code

    @property
    def violations(self) -> list[str]:
        return list(self.artifact.causal_fragment)


def build_forensic_artifact(
    algorithm: str,
    issues: Sequence[ValidationIssue],
    *,
    incoming_counts: Mapping[str, int],
    edge_count: int,
    roster_size: int,
) -> ForensicArtifact:
    if not issues:
        raise ValueError("a forensic artifact needs at least one issue")
    identifiers: dict[str, str] = {}
    for issue in issues:
        previous = identifiers.get(issue.entity_id)
        identifiers[issue.entity_id] = issue.code if previous is None else f"{previous},{issue.code}"
    return ForensicArtifact(
        artifact_id=str(uuid4()),
        timestamp=datetime.now(UTC),
        engine_scope="assignment",
        error_code=issues[0].code,
        message=f"{algorithm} assignment violated {len(issues)} invariant(s)",
        state_snapshot={"incoming_counts": dict(incoming_counts), "edge_count": edge_count},
        context={
            "algorithm": algorithm,
            "roster_size": roster_size,
            "violation_codes": sorted({i.code for i in issues}),
        },
        identifiers=identifiers,
        causal_fragment=[f"{i.code}:{i.entity_id}:{i.message}" for i in issues],
    )


def persist_forensic_artifact(artifact: ForensicArtifact, output_dir: Path) -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    algorithm = artifact.context.get("algorithm") or "unknown"
    path = output_dir / f"forensic_{algorithm}_{artifact.artifact_id}.json"
    path.write_text(json.dumps(asdict(artifact), default=str, indent=2), encoding="utf-8")
    return path
