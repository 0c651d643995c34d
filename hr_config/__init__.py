"""
hr_config -- single public entrypoint for HR kernel configuration.

Responsibility:
    Provides the one way to obtain configuration at runtime through
    ``get_active_config()``: GOSI rates, the salary cap, the contribution
    due day, the loan senior-management threshold, and approval role
    visibility.  YAML loading is internal tooling.

Architecture position:
    Configuration -- sits above ``hr_kernel`` and below ``hr_engines`` /
    ``hr_services``.  The kernel never imports from ``hr_config``.

Failure modes:
    - ``FileNotFoundError`` -- configuration file missing.
    - ``ValueError`` -- unknown keys or invalid values.

Audit relevance:
    Every successful ``get_active_config()`` call emits an
    ``HR_CONFIG_TRACE`` log entry with the config id, version and
    checksum, tying each generated GOSI report and routed request back to
    the exact rates and thresholds in force.
"""

from __future__ import annotations

import logging
from pathlib import Path

from hr_config.loader import load_hr_config
from hr_config.schema import ApprovalRoutingConfig, GOSIConfig, HRConfig

_logger = logging.getLogger("hr_kernel.config")

_DEFAULT_CONFIG_PATH = Path(__file__).parent / "defaults" / "hr.yaml"

__all__ = [
    "ApprovalRoutingConfig",
    "GOSIConfig",
    "HRConfig",
    "get_active_config",
]


def get_active_config(config_path: Path | None = None) -> HRConfig:
    """The ONLY public configuration entrypoint.

    Args:
        config_path: Override path to a configuration YAML file.
            Defaults to hr_config/defaults/hr.yaml.

    Returns:
        A validated, frozen ``HRConfig``.  Not cached; callers hold the
        returned config for the duration of their work.
    """
    path = config_path or _DEFAULT_CONFIG_PATH
    config = load_hr_config(path)

    _logger.info(
        "HR_CONFIG_TRACE",
        extra={
            "trace_type": "HR_CONFIG_TRACE",
            "config_id": config.config_id,
            "config_version": config.version,
            "checksum": config.checksum,
            "salary_cap": str(config.gosi.salary_cap),
            "loan_senior_management_threshold": str(
                config.approvals.loan_senior_management_threshold
            ),
        },
    )
    return config
