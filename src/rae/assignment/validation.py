from __future__ import annotations

from collections import Counter
from typing import Iterable, Sequence

from rae.contracts import (
    AssignmentReport,
    Character,
    ValidationError,
    ValidationIssue,
    ValidationResult,
)
from rae.core.errors import AssignmentIntegrityError, build_forensic_artifact
from rae.core.policy import CapacityPolicy

from .capacity import CapacityResolver
from .normalize import is_declared_status, normalize_marches_count, normalize_status

CONFIDENCE_RANGE = (0.0, 2.0)


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class RosterValidator:
    """Opt-in input contract check run before an assignment."""

    def validate(self, roster: Sequence[Character]) -> ValidationResult:
        issues: list[ValidationIssue] = []
        issues.extend(self._validate_identity(roster))
        for character in roster:
            issues.extend(self._validate_numbers(character))
        issues.extend(self._validate_farms(roster))
        return self._finalize(issues)

    def _finalize(self, issues: list[ValidationIssue]) -> ValidationResult:
        ordered = sorted(issues, key=lambda x: (x.severity, x.code, x.entity_id, x.field_path))
        blocking = [i for i in ordered if i.severity == "blocking"]
        if blocking:
            raise ValidationError(blocking)
        return ValidationResult(ok=True, issues=ordered)

    def _validate_identity(self, roster: Sequence[Character]) -> list[ValidationIssue]:
        issues: list[ValidationIssue] = []
        counts = Counter(c.character_id for c in roster)
        for character_id, count in sorted(counts.items()):
            if not character_id:
                issues.append(
                    ValidationIssue(
                        code="EMPTY_CHARACTER_ID",
                        severity="blocking",
                        field_path="id",
                        entity_id="",
                        message=f"{count} character(s) have no id",
                    )
                )
            elif count > 1:
                issues.append(
                    ValidationIssue(
                        code="DUPLICATE_CHARACTER_ID",
                        severity="blocking",
                        field_path="id",
                        entity_id=character_id,
                        message=f"id appears {count} times in the roster",
                    )
                )
        return issues

    def _validate_numbers(self, character: Character) -> list[ValidationIssue]:
        issues: list[ValidationIssue] = []
        cid = character.character_id
        if isinstance(character.marches_count, bool) or not isinstance(character.marches_count, int):
            issues.append(
                ValidationIssue(
                    code="INVALID_MARCHES_COUNT",
                    severity="blocking",
                    field_path="marchesCount",
                    entity_id=cid,
                    message=f"marchesCount must be an integer, got {character.marches_count!r}",
                )
            )
        numeric_fields = [
            ("reinforcementCapacity", character.reinforcement_capacity, "NEGATIVE_REINFORCEMENT_CAPACITY"),
            ("maxReinforcementMarches", character.max_reinforcement_marches, "NEGATIVE_MAX_REINFORCEMENT"),
            ("confidenceLevel", character.confidence_level, None),
        ]
        for field_path, value, negative_code in numeric_fields:
            if value is None:
                continue
            if not _is_number(value):
                issues.append(
                    ValidationIssue(
                        code="NON_NUMERIC_FIELD",
                        severity="blocking",
                        field_path=field_path,
                        entity_id=cid,
                        message=f"{field_path} must be a number, got {value!r}",
                    )
                )
            elif negative_code is not None and value < 0:
                issues.append(
                    ValidationIssue(
                        code=negative_code,
                        severity="blocking",
                        field_path=field_path,
                        entity_id=cid,
                        message=f"{field_path} must not be negative",
                    )
                )
        if not is_declared_status(character.status):
            issues.append(
                ValidationIssue(
                    code="UNDECLARED_STATUS",
                    severity="warning",
                    field_path="status",
                    entity_id=cid,
                    message=f"status {character.status!r} is treated as offline_not_empty",
                )
            )
        low, high = CONFIDENCE_RANGE
        confidence = character.confidence_level
        if _is_number(confidence) and not low < confidence <= high:
            issues.append(
                ValidationIssue(
                    code="CONFIDENCE_OUT_OF_RANGE",
                    severity="warning",
                    field_path="confidenceLevel",
                    entity_id=cid,
                    message=f"confidenceLevel {character.confidence_level} outside ({low}, {high}]",
                )
            )
        return issues

    def _validate_farms(self, roster: Sequence[Character]) -> list[ValidationIssue]:
        issues: list[ValidationIssue] = []
        ids = {c.character_id for c in roster}
        for character in roster:
            owner = character.main_character_id
            if not owner:
                continue
            if owner == character.character_id:
                issues.append(
                    ValidationIssue(
                        code="SELF_OWNED_FARM",
                        severity="warning",
                        field_path="mainCharacterId",
                        entity_id=character.character_id,
                        message="character lists itself as its main character",
                    )
                )
            elif owner not in ids:
                issues.append(
                    ValidationIssue(
                        code="DANGLING_MAIN_CHARACTER",
                        severity="warning",
                        field_path="mainCharacterId",
                        entity_id=character.character_id,
                        message=f"main character '{owner}' is not in the roster",
                    )
                )
        return issues


class AssignmentAuditor:
    """Post-run invariant audit over a returned roster.

    Incoming load is checked against the hard cap every strategy honours (the
    explicit override and the troop-derived cap); strategy defaults only ever
    lower it further.
    """

    def __init__(self, policy: CapacityPolicy | None = None) -> None:
        self._policy = policy or CapacityPolicy()
        self._resolver = CapacityResolver(self._policy)

    def audit(
        self,
        algorithm: str,
        result: Sequence[Character],
        *,
        farm_target_statuses: Iterable[str] = (),
    ) -> AssignmentReport:
        allowed_farm_targets = set(farm_target_statuses)
        by_id = {c.character_id: c for c in result}
        incoming: Counter[str] = Counter()
        unused: dict[str, int] = {}
        issues: list[ValidationIssue] = []

        for source in result:
            targets = source.target_ids()
            for target_id in targets:
                incoming[target_id] += 1
            capacity = normalize_marches_count(source.marches_count, self._policy.max_marches)
            if len(targets) > capacity:
                issues.append(self._blocking("OUTGOING_OVER_CAPACITY", source.character_id, f"{len(targets)} edges exceed capacity {capacity}"))
            elif targets and len(targets) < capacity:
                unused[source.character_id] = capacity - len(targets)
            if source.character_id in targets:
                issues.append(self._blocking("SELF_REINFORCEMENT", source.character_id, "character reinforces itself"))
            duplicates = sorted(t for t, n in Counter(targets).items() if n > 1)
            if duplicates:
                issues.append(self._blocking("DUPLICATE_EDGE", source.character_id, f"duplicate targets {duplicates}"))
            missing = sorted(t for t in targets if t not in by_id)
            if missing:
                issues.append(self._blocking("UNKNOWN_TARGET", source.character_id, f"targets not in roster {missing}"))
            if source.is_farm:
                for target_id in targets:
                    target = by_id.get(target_id)
                    if target is None or normalize_status(target.status).value not in allowed_farm_targets:
                        issues.append(self._blocking("FARM_AS_SOURCE", source.character_id, f"farm reinforces '{target_id}'"))

        for target in result:
            cap = self._resolver.incoming_cap(target)
            count = incoming[target.character_id]
            if cap is not None and count > cap:
                issues.append(self._blocking("INCOMING_OVER_CAP", target.character_id, f"{count} incoming edges exceed cap {cap}"))

        return AssignmentReport(
            algorithm=algorithm,
            edge_count=sum(incoming.values()),
            incoming_counts={c.character_id: incoming[c.character_id] for c in result},
            unused_outgoing=unused,
            issues=issues,
        )

    def enforce(self, report: AssignmentReport, *, roster_size: int) -> None:
        if report.passed:
            return
        blocking = [i for i in report.issues if i.severity == "blocking"]
        artifact = build_forensic_artifact(
            report.algorithm,
            blocking,
            incoming_counts=report.incoming_counts,
            edge_count=report.edge_count,
            roster_size=roster_size,
        )
        raise AssignmentIntegrityError(artifact)

    @staticmethod
    def _blocking(code: str, entity_id: str, message: str) -> ValidationIssue:
        return ValidationIssue(code=code, severity="blocking", field_path="reinforce", entity_id=entity_id, message=message)
