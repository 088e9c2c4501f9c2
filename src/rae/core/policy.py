from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(slots=True)
class CapacityPolicy:
    max_marches: int = 6
    troops_per_march: int = 150_000

    def validate(self) -> None:
        if self.max_marches < 1:
            raise ValueError("max_marches must be at least 1")
        if self.troops_per_march <= 0:
            raise ValueError("troops_per_march must be positive")


@dataclass(slots=True)
class GreedyPolicy:
    online_base: float = 1.5
    offline_empty_base: float = 1.0
    offline_not_empty_base: float = 1.0
    penalty: float = 3.0
    preferential_rounds: int = 3
    min_incoming_weight: float = 0.5
    default_confidence: float = 1.0
    online_edge_value: float = 1.3
    offline_empty_edge_value: float = 1.0
    offline_not_empty_offset: float = 4.0
    capacity: CapacityPolicy = field(default_factory=CapacityPolicy)

    def validate(self) -> None:
        bases = [
            self.online_base,
            self.offline_empty_base,
            self.offline_not_empty_base,
            self.min_incoming_weight,
            self.default_confidence,
            self.online_edge_value,
            self.offline_empty_edge_value,
        ]
        if any(v <= 0 for v in bases):
            raise ValueError("greedy scoring bases must be positive")
        if self.penalty < 0 or self.offline_not_empty_offset < 0:
            raise ValueError("greedy penalties must not be negative")
        if self.preferential_rounds < 0:
            raise ValueError("preferential_rounds must not be negative")
        self.capacity.validate()


@dataclass(slots=True)
class SmartPolicy:
    online_multiplier: float = 1.3
    offline_empty_multiplier: float = 1.0
    high_town_center_level: int = 34
    high_town_center_cap: int = 2
    default_incoming_cap: int = 3
    default_confidence: float = 1.0
    capacity: CapacityPolicy = field(default_factory=CapacityPolicy)

    def validate(self) -> None:
        if self.online_multiplier <= 0 or self.offline_empty_multiplier <= 0:
            raise ValueError("smart status multipliers must be positive")
        if self.high_town_center_cap < 0 or self.default_incoming_cap < 0:
            raise ValueError("smart default incoming caps must not be negative")
        if self.default_confidence <= 0:
            raise ValueError("default_confidence must be positive")
        self.capacity.validate()


@dataclass(slots=True)
class EnginePolicies:
    greedy: GreedyPolicy
    smart: SmartPolicy
    capacity: CapacityPolicy


def default_policies() -> EnginePolicies:
    capacity = CapacityPolicy()
    return EnginePolicies(
        greedy=GreedyPolicy(capacity=capacity),
        smart=SmartPolicy(capacity=capacity),
        capacity=capacity,
    )


def validate_policies(policies: EnginePolicies) -> None:
    policies.capacity.validate()
    policies.greedy.validate()
    policies.smart.validate()
