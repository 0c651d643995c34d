"""
HR Configuration Schema (``hr_config.schema``).

Defines the structure and regulatory defaults for GOSI contribution
calculation and approval routing.  Actual values are loaded from the
YAML configuration at runtime through ``hr_config.get_active_config()``.

Invariants enforced
-------------------
* Every rate is a ``Decimal`` in [0, 1].
* The GOSI salary cap and loan threshold are positive.
* Role visibility always lets a role see its own stage.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Self

from hr_kernel.domain.approval import ApproverRole
from hr_kernel.domain.employee import SAUDI_NATIONALITIES
from hr_kernel.logging_config import get_logger

logger = get_logger("config.schema")

_RATE_FIELDS = (
    "saudi_employee_pension_rate",
    "saudi_employer_pension_rate",
    "saned_employee_rate",
    "saned_employer_rate",
    "non_saudi_employer_rate",
    "occupational_hazards_rate",
)


def _as_decimal(value: Any) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


@dataclass(frozen=True)
class GOSIConfig:
    """
    GOSI contribution rates and limits.

    Field defaults are the published GOSI rates:

        Saudi:      employee 10% pension + 1% SANED
                    employer 12% pension + 1% SANED
        Non-Saudi:  employer 2%
        Everyone:   2% occupational hazards (employer)
    """

    saudi_employee_pension_rate: Decimal = Decimal("0.10")
    saudi_employer_pension_rate: Decimal = Decimal("0.12")
    saned_employee_rate: Decimal = Decimal("0.01")
    saned_employer_rate: Decimal = Decimal("0.01")
    non_saudi_employer_rate: Decimal = Decimal("0.02")
    occupational_hazards_rate: Decimal = Decimal("0.02")
    salary_cap: Decimal = Decimal("45000")
    due_day: int = 10
    saudi_nationalities: frozenset[str] = SAUDI_NATIONALITIES

    def __post_init__(self):
        for name in _RATE_FIELDS:
            rate = getattr(self, name)
            if not isinstance(rate, Decimal):
                raise ValueError(f"{name} must be a Decimal, got {type(rate).__name__}")
            if rate < 0:
                raise ValueError(f"{name} cannot be negative")
            if rate > 1:
                raise ValueError(f"{name} cannot exceed 1 (100%)")

        if self.salary_cap <= 0:
            raise ValueError("salary_cap must be positive")

        # Day 29+ does not exist in every month.
        if not 1 <= self.due_day <= 28:
            raise ValueError(f"due_day must be between 1 and 28, got {self.due_day}")

        if not self.saudi_nationalities:
            raise ValueError("saudi_nationalities cannot be empty")
        if any(v != v.strip().casefold() for v in self.saudi_nationalities):
            raise ValueError("saudi_nationalities must be stripped and case-folded")

    @property
    def saudi_employee_rate(self) -> Decimal:
        return self.saudi_employee_pension_rate + self.saned_employee_rate

    @property
    def saudi_employer_rate(self) -> Decimal:
        return self.saudi_employer_pension_rate + self.saned_employer_rate

    @property
    def saned_total_rate(self) -> Decimal:
        return self.saned_employee_rate + self.saned_employer_rate

    @classmethod
    def with_defaults(cls) -> Self:
        return cls()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Create config from dictionary (e.g., loaded from YAML)."""
        kwargs: dict[str, Any] = {}
        for name in (*_RATE_FIELDS, "salary_cap"):
            if name in data:
                kwargs[name] = _as_decimal(data[name])
        if "due_day" in data:
            kwargs["due_day"] = int(data["due_day"])
        if "saudi_nationalities" in data:
            kwargs["saudi_nationalities"] = frozenset(
                str(v).strip().casefold() for v in data["saudi_nationalities"]
            )
        unknown = set(data) - set(kwargs)
        if unknown:
            raise ValueError(f"Unknown GOSI config keys: {sorted(unknown)}")
        return cls(**kwargs)


def _default_visibility() -> dict[ApproverRole, frozenset[ApproverRole]]:
    return {
        ApproverRole.MANAGER: frozenset({ApproverRole.MANAGER}),
        ApproverRole.HR: frozenset({ApproverRole.HR, ApproverRole.SENIOR_MANAGEMENT}),
        ApproverRole.FINANCE: frozenset({ApproverRole.FINANCE}),
        ApproverRole.SENIOR_MANAGEMENT: frozenset({ApproverRole.SENIOR_MANAGEMENT}),
    }


def _default_admin_stages() -> frozenset[ApproverRole]:
    return frozenset({
        ApproverRole.HR,
        ApproverRole.SENIOR_MANAGEMENT,
        ApproverRole.FINANCE,
    })


@dataclass(frozen=True)
class ApprovalRoutingConfig:
    """
    Approval routing settings.

    ``loan_senior_management_threshold``: loans whose amount exceeds this
    value add a senior-management stage after HR.

    ``role_visibility``: which stages appear in a role's pending list.
    HR and senior management share one administrative view.

    ``admin_stages``: stages an admin principal may act at.
    """

    loan_senior_management_threshold: Decimal = Decimal("15000")
    role_visibility: dict[ApproverRole, frozenset[ApproverRole]] = field(
        default_factory=_default_visibility
    )
    admin_stages: frozenset[ApproverRole] = field(default_factory=_default_admin_stages)

    def __post_init__(self):
        if self.loan_senior_management_threshold <= 0:
            raise ValueError("loan_senior_management_threshold must be positive")
        for role, visible in self.role_visibility.items():
            if role not in visible:
                raise ValueError(f"role '{role.value}' must be able to see its own stage")
        if ApproverRole.MANAGER in self.admin_stages:
            raise ValueError("manager stage is acted on by the direct manager, not admins")

    def visible_stages(self, role: ApproverRole) -> frozenset[ApproverRole]:
        return self.role_visibility.get(role, frozenset({role}))

    @classmethod
    def with_defaults(cls) -> Self:
        return cls()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Create config from dictionary (e.g., loaded from YAML)."""
        kwargs: dict[str, Any] = {}
        if "loan_senior_management_threshold" in data:
            kwargs["loan_senior_management_threshold"] = _as_decimal(
                data["loan_senior_management_threshold"]
            )
        if "role_visibility" in data:
            visibility = _default_visibility()
            for role, stages in data["role_visibility"].items():
                visibility[ApproverRole(role)] = frozenset(ApproverRole(s) for s in stages)
            kwargs["role_visibility"] = visibility
        if "admin_stages" in data:
            kwargs["admin_stages"] = frozenset(ApproverRole(s) for s in data["admin_stages"])
        unknown = set(data) - set(kwargs)
        if unknown:
            raise ValueError(f"Unknown approval routing config keys: {sorted(unknown)}")
        return cls(**kwargs)


@dataclass(frozen=True)
class HRConfig:
    """Complete runtime configuration: GOSI plus approval routing."""

    config_id: str = "default"
    version: int = 1
    gosi: GOSIConfig = field(default_factory=GOSIConfig)
    approvals: ApprovalRoutingConfig = field(default_factory=ApprovalRoutingConfig)
    checksum: str | None = None

    @classmethod
    def with_defaults(cls) -> Self:
        logger.info("hr_config_created_with_defaults")
        return cls()

    @classmethod
    def from_dict(cls, data: dict[str, Any], checksum: str | None = None) -> Self:
        """Create config from a parsed YAML document."""
        logger.info(
            "hr_config_loading_from_dict",
            extra={"keys": sorted(data.keys())},
        )
        return cls(
            config_id=str(data.get("config_id", "default")),
            version=int(data.get("version", 1)),
            gosi=GOSIConfig.from_dict(data.get("gosi") or {}),
            approvals=ApprovalRoutingConfig.from_dict(data.get("approvals") or {}),
            checksum=checksum,
        )
