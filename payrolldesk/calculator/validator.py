"""
CTC calculator business-rule validator.

Runs AFTER Pydantic structural validation (non-negative, finite, each
percentage within 0–100). Collects all violations in a single pass and raises
ValueError with a JSON-encoded list of {field, issue} dicts.

Rules:
  1. Allocated percentages may exceed 100; special allowance goes negative;
     calculate_ctc() reports that as a warning, not an error.
  2. Allocated percentages above settings.max_allocation_percent are rejected:
     the residual would be more negative than the pay it is carved from.
  3. A zero CTC is computed (everything is 0) but flagged as a warning.
"""
from __future__ import annotations

import logging
from typing import Any

from payrolldesk.calculator.schemas import CompensationInput
from payrolldesk.config import settings
from payrolldesk.errors import violations_error

logger = logging.getLogger(__name__)


def validate_compensation(
    data: CompensationInput,
    max_allocation_percent: float | None = None,
) -> list[str]:
    """
    Validate a CompensationInput against business rules.

    Returns:
        Business warnings (possibly empty) that do not block computation.

    Raises:
        ValueError: If any hard rule is violated. The message is a JSON string
            containing a list of {"field": str, "issue": str} dicts.
    """
    limit = settings.max_allocation_percent if max_allocation_percent is None else max_allocation_percent
    violations: list[dict[str, Any]] = []
    warnings: list[str] = []

    allocated = data.percentages.allocated
    if allocated > limit:
        violations.append({
            "field": "percentages",
            "issue": (
                f"Component percentages total {allocated:g}%, above the "
                f"{limit:g}% maximum."
            ),
        })

    if data.ctc == 0:
        warnings.append("CTC is 0; every component and deduction will be 0.")

    if violations:
        logger.info("CTC input rejected: %d violation(s)", len(violations))
        raise violations_error(violations)

    return warnings
