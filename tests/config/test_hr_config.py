"""
Tests for HR configuration: schema validation, YAML loading, and the
get_active_config entrypoint.
"""

import logging
from decimal import Decimal

import pytest
import yaml

from hr_config import get_active_config
from hr_config.loader import compute_checksum, load_hr_config, load_yaml_file, parse_hr_config
from hr_config.schema import ApprovalRoutingConfig, GOSIConfig, HRConfig
from hr_kernel.domain.approval import ApproverRole


class TestGOSIConfig:

    def test_published_rates(self):
        config = GOSIConfig.with_defaults()
        assert config.saudi_employee_rate == Decimal("0.11")
        assert config.saudi_employer_rate == Decimal("0.13")
        assert config.saned_total_rate == Decimal("0.02")
        assert config.non_saudi_employer_rate == Decimal("0.02")
        assert config.occupational_hazards_rate == Decimal("0.02")
        assert config.salary_cap == Decimal("45000")
        assert config.due_day == 10

    def test_rate_above_one_rejected(self):
        with pytest.raises(ValueError, match="cannot exceed 1"):
            GOSIConfig(non_saudi_employer_rate=Decimal("2"))

    def test_negative_rate_rejected(self):
        with pytest.raises(ValueError, match="cannot be negative"):
            GOSIConfig(saned_employee_rate=Decimal("-0.01"))

    def test_float_rate_rejected(self):
        with pytest.raises(ValueError, match="must be a Decimal"):
            GOSIConfig(occupational_hazards_rate=0.02)

    @pytest.mark.parametrize("day", [0, 29, 31])
    def test_due_day_range(self, day):
        with pytest.raises(ValueError, match="due_day"):
            GOSIConfig(due_day=day)

    def test_non_positive_cap_rejected(self):
        with pytest.raises(ValueError, match="salary_cap"):
            GOSIConfig(salary_cap=Decimal("0"))

    def test_from_dict_normalizes_values(self):
        config = GOSIConfig.from_dict({
            "salary_cap": "50000",
            "saudi_nationalities": [" Saudi Arabia ", "KSA"],
        })
        assert config.salary_cap == Decimal("50000")
        assert config.saudi_nationalities == frozenset({"saudi arabia", "ksa"})

    def test_from_dict_unknown_key(self):
        with pytest.raises(ValueError, match="Unknown GOSI config keys"):
            GOSIConfig.from_dict({"salary_ceiling": "45000"})


class TestApprovalRoutingConfig:

    def test_defaults(self):
        config = ApprovalRoutingConfig.with_defaults()
        assert config.loan_senior_management_threshold == Decimal("15000")
        assert config.visible_stages(ApproverRole.HR) == frozenset(
            {ApproverRole.HR, ApproverRole.SENIOR_MANAGEMENT}
        )
        assert ApproverRole.MANAGER not in config.admin_stages

    def test_role_must_see_own_stage(self):
        with pytest.raises(ValueError, match="see its own stage"):
            ApprovalRoutingConfig(
                role_visibility={ApproverRole.HR: frozenset({ApproverRole.FINANCE})}
            )

    def test_manager_not_an_admin_stage(self):
        with pytest.raises(ValueError, match="direct manager"):
            ApprovalRoutingConfig(admin_stages=frozenset({ApproverRole.MANAGER}))

    def test_threshold_positive(self):
        with pytest.raises(ValueError):
            ApprovalRoutingConfig(loan_senior_management_threshold=Decimal("0"))

    def test_from_dict_overrides_one_role(self):
        config = ApprovalRoutingConfig.from_dict({
            "role_visibility": {"finance": ["finance", "hr"]},
        })
        assert config.visible_stages(ApproverRole.FINANCE) == frozenset(
            {ApproverRole.FINANCE, ApproverRole.HR}
        )
        assert config.visible_stages(ApproverRole.HR) == frozenset(
            {ApproverRole.HR, ApproverRole.SENIOR_MANAGEMENT}
        )

    def test_from_dict_unknown_role(self):
        with pytest.raises(ValueError):
            ApprovalRoutingConfig.from_dict({"admin_stages": ["ceo"]})


class TestLoader:

    def test_default_file_matches_schema_defaults(self):
        config = get_active_config()
        assert config.config_id == "ksa-default"
        assert config.gosi == GOSIConfig()
        assert config.approvals == ApprovalRoutingConfig()
        assert config.checksum

    def test_custom_file(self, tmp_path):
        path = tmp_path / "hr.yaml"
        path.write_text(yaml.safe_dump({
            "config_id": "pilot",
            "version": 3,
            "gosi": {"salary_cap": "40000", "due_day": 15},
            "approvals": {"loan_senior_management_threshold": "10000"},
        }))

        config = get_active_config(path)

        assert config.config_id == "pilot"
        assert config.version == 3
        assert config.gosi.salary_cap == Decimal("40000")
        assert config.gosi.due_day == 15
        assert config.approvals.loan_senior_management_threshold == Decimal("10000")

    def test_missing_sections_use_defaults(self):
        config = parse_hr_config({"config_id": "bare"})
        assert config.gosi == GOSIConfig()
        assert config.approvals == ApprovalRoutingConfig()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_hr_config(tmp_path / "absent.yaml")

    def test_non_mapping_document(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ValueError, match="mapping"):
            load_yaml_file(path)

    def test_checksum_deterministic_and_key_order_independent(self):
        assert compute_checksum({"a": 1, "b": "2"}) == compute_checksum({"b": "2", "a": 1})
        assert compute_checksum({"a": 1}) != compute_checksum({"a": 2})

    def test_config_trace_emitted(self, caplog):
        caplog.set_level(logging.INFO, logger="hr_kernel")
        config = get_active_config()

        traces = [r for r in caplog.records if r.getMessage() == "HR_CONFIG_TRACE"]
        assert len(traces) == 1
        assert traces[0].config_id == "ksa-default"
        assert traces[0].checksum == config.checksum

    def test_hr_config_defaults(self):
        config = HRConfig.with_defaults()
        assert config.checksum is None
        assert config.gosi.salary_cap == Decimal("45000")
