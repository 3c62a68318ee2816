"""
PayrollDesk CTC Engine — salary structure and take-home estimate.
Pure functions. No I/O.

calculate_ctc() is the public entry point:
  1. Split monthly gross into percentaged components, special allowance = residual
  2. Statutory deductions (EPF, professional tax, ESI) per applicability flags
  3. Annual income tax on annual CTC under the selected regime
  4. Net monthly = gross − (EPF employee + PT + ESI employee + monthly tax)
"""
from __future__ import annotations

import logging

from payrolldesk.calculator.schemas import (
    CompensationInput,
    ComponentAmount,
    ComponentBreakdown,
    ComponentPercentages,
    CTCResult,
    DeductionSet,
    StatutoryOptions,
    TaxRegime,
)
from payrolldesk.calculator.tax_engine import calculate_regime_tax

logger = logging.getLogger(__name__)

# ===========================================================================
# STATUTORY CONSTANTS
# ===========================================================================

EPF_RATE                 = 0.12
EPF_MONTHLY_CEILING      = 1_800     # 12% of the ₹15,000 PF wage ceiling

PROFESSIONAL_TAX_MONTHLY = 200

ESI_EMPLOYEE_RATE        = 0.0075
ESI_EMPLOYER_RATE        = 0.0325
ESI_WAGE_CEILING         = 21_000    # Monthly gross above this is not covered

# Display order matches the exported breakdown tables.
COMPONENT_LABELS: dict[str, str] = {
    "basic":       "Basic Salary",
    "hra":         "HRA",
    "da":          "DA",
    "lta":         "LTA",
    "special":     "Special Allowance",
    "performance": "Performance Bonus",
}


def calculate_breakdown(
    monthly_gross: float,
    percentages: ComponentPercentages,
) -> ComponentBreakdown:
    """
    Split monthly_gross into earning components.

    Every component except special is gross × pct / 100. Special allowance is
    gross − sum(others), so the components always add back up to gross. It is
    negative when the percentages exceed 100; callers decide how to flag that.
    """
    monthly: dict[str, float] = {
        "basic":       monthly_gross * percentages.basic / 100,
        "hra":         monthly_gross * percentages.hra / 100,
        "da":          monthly_gross * percentages.da / 100,
        "lta":         monthly_gross * percentages.lta / 100,
        "performance": monthly_gross * percentages.performance / 100,
    }
    monthly["special"] = monthly_gross - (
        monthly["basic"] + monthly["hra"] + monthly["da"]
        + monthly["lta"] + monthly["performance"]
    )

    components = [
        ComponentAmount(
            name=name,
            label=label,
            monthly=monthly[name],
            annual=monthly[name] * 12,
        )
        for name, label in COMPONENT_LABELS.items()
    ]
    return ComponentBreakdown(
        components=components,
        gross_monthly=monthly_gross,
        gross_annual=monthly_gross * 12,
    )


def calculate_epf(basic_monthly: float, applicable: bool) -> float:
    """Employee EPF = min(basic × 12%, ₹1,800). Never exceeds the ceiling."""
    if not applicable:
        return 0.0
    return min(max(0.0, basic_monthly) * EPF_RATE, EPF_MONTHLY_CEILING)


def calculate_esi(monthly_gross: float, applicable: bool) -> tuple[float, float]:
    """(employee, employer) ESI. Zero when not applicable or above the wage ceiling."""
    if not applicable or monthly_gross > ESI_WAGE_CEILING:
        return 0.0, 0.0
    return monthly_gross * ESI_EMPLOYEE_RATE, monthly_gross * ESI_EMPLOYER_RATE


def calculate_deductions(
    breakdown: ComponentBreakdown,
    options: StatutoryOptions,
    annual_tax: float = 0.0,
) -> DeductionSet:
    """
    Monthly statutory deductions for a breakdown.

    Employer EPF mirrors the employee share in this simplified model.
    """
    epf_employee = calculate_epf(breakdown.get("basic").monthly, options.epf)
    esi_employee, esi_employer = calculate_esi(breakdown.gross_monthly, options.esi)
    return DeductionSet(
        epf_employee=epf_employee,
        epf_employer=epf_employee,
        professional_tax=float(PROFESSIONAL_TAX_MONTHLY) if options.professional_tax else 0.0,
        esi_employee=esi_employee,
        esi_employer=esi_employer,
        income_tax_monthly=annual_tax / 12,
        income_tax_annual=annual_tax,
    )


def calculate_ctc(data: CompensationInput) -> CTCResult:
    """
    Full CTC breakdown for one compensation input.

    The old regime's 80C estimate receives 12 × the employee EPF computed
    here; the new regime ignores it.
    """
    monthly_gross = data.monthly_ctc

    # Step 1: Earnings
    breakdown = calculate_breakdown(monthly_gross, data.percentages)

    # Step 2: Income tax on annual CTC
    epf_employee = calculate_epf(breakdown.get("basic").monthly, data.options.epf)
    tax = calculate_regime_tax(
        data.annual_ctc,
        data.tax_regime,
        annual_retirement_contribution=epf_employee * 12,
    )

    # Step 3: Statutory deductions
    deductions = calculate_deductions(breakdown, data.options, tax.total_tax)

    # Step 4: Net take-home
    net_monthly = monthly_gross - deductions.total_monthly

    warnings: list[str] = []
    special = breakdown.get("special").monthly
    if special < 0:
        warnings.append(
            f"Component percentages total {data.percentages.allocated:g}%; "
            f"special allowance is negative (INR {special:,.0f}/month)."
        )
        logger.warning(
            "Negative special allowance allocated=%s special=%s",
            data.percentages.allocated,
            special,
        )

    return CTCResult(
        input=data,
        breakdown=breakdown,
        deductions=deductions,
        tax=tax,
        net_monthly=net_monthly,
        net_annual=net_monthly * 12,
        warnings=warnings,
    )


def default_input(regime: TaxRegime = TaxRegime.new) -> CompensationInput:
    """Values the calculator resets to: ₹50,000/month, 40/20/10/5/10 split."""
    return CompensationInput(tax_regime=regime)
