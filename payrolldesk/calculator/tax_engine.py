"""
PayrollDesk Tax Engine — AY 2025-26 (Budget 2025)
Pure Python, deterministic. Same input → same output.

Estimates annual income tax on salary for the CTC calculator. This is a
payroll estimate, not a filing computation: the only deductions modelled are
the standard deduction and, in the old regime, a capped 80C estimate built
from the employee's provident-fund contribution.

Rebate mechanics (simplified 87A):
  - taxable_income <= rebate threshold → tax is 0
  - above the threshold → full slab tax plus 4% cess, no partial rebate
"""
from __future__ import annotations

import math

from payrolldesk.calculator.schemas import (
    RegimeComparison,
    RegimeRules,
    RegimeTax,
    TaxBracket,
    TaxRegime,
)

# ===========================================================================
# ASSESSMENT YEAR CONSTANT
# ===========================================================================

ASSESSMENT_YEAR = "AY2025-26"

# ===========================================================================
# DEDUCTION AND REBATE CONSTANTS
# ===========================================================================

OLD_STD_DEDUCTION        = 50_000
NEW_STD_DEDUCTION        = 75_000

OLD_REBATE_THRESHOLD     = 500_000
NEW_REBATE_THRESHOLD     = 1_200_000

# Old regime 80C estimate: EPF employee contribution + ₹1L of other
# investments, capped at the 80C ceiling.
OLD_80C_ESTIMATE_BASE    = 100_000
CAP_80C                  = 150_000

CESS_RATE                = 0.04

# ===========================================================================
# SLAB TABLES: (lower bound, marginal rate)
# ===========================================================================

OLD_REGIME_SLABS: tuple[tuple[float, float], ...] = (
    (0,            0.00),   # 0–2.5L: 0%
    (250_000,      0.05),   # 2.5–5L: 5%
    (500_000,      0.20),   # 5–10L: 20%
    (1_000_000,    0.30),   # >10L: 30%
)

NEW_REGIME_SLABS: tuple[tuple[float, float], ...] = (
    (0,            0.00),   # 0–4L: 0%
    (400_000,      0.05),   # 4–8L: 5%
    (800_000,      0.10),   # 8–12L: 10%
    (1_200_000,    0.15),   # 12–16L: 15%
    (1_600_000,    0.20),   # 16–20L: 20%
    (2_000_000,    0.25),   # 20–24L: 25%
    (2_400_000,    0.30),   # >24L: 30%
)


def _brackets(slabs: tuple[tuple[float, float], ...]) -> tuple[TaxBracket, ...]:
    return tuple(TaxBracket(lower_bound=lower, rate=rate) for lower, rate in slabs)


OLD_REGIME_RULES = RegimeRules(
    regime=TaxRegime.old,
    standard_deduction=OLD_STD_DEDUCTION,
    rebate_threshold=OLD_REBATE_THRESHOLD,
    brackets=_brackets(OLD_REGIME_SLABS),
    surcharge_rate=CESS_RATE,
    itemized_base=OLD_80C_ESTIMATE_BASE,
    itemized_cap=CAP_80C,
)

NEW_REGIME_RULES = RegimeRules(
    regime=TaxRegime.new,
    standard_deduction=NEW_STD_DEDUCTION,
    rebate_threshold=NEW_REBATE_THRESHOLD,
    brackets=_brackets(NEW_REGIME_SLABS),
    surcharge_rate=CESS_RATE,
)

REGIME_RULES: dict[TaxRegime, RegimeRules] = {
    TaxRegime.old: OLD_REGIME_RULES,
    TaxRegime.new: NEW_REGIME_RULES,
}


# ===========================================================================
# INTERNAL HELPERS (pure functions: no side effects, no I/O)
# ===========================================================================

def calculate_slab_tax(taxable_income: float, brackets: tuple[TaxBracket, ...]) -> float:
    """
    Apply progressive slab tax to taxable_income.

    Each bracket's rate applies only to the slice of income between its lower
    bound and the next bracket's lower bound (the last bracket is open-ended).
    """
    tax = 0.0
    for i, bracket in enumerate(brackets):
        if taxable_income <= bracket.lower_bound:
            break
        upper = brackets[i + 1].lower_bound if i + 1 < len(brackets) else float("inf")
        slab_income = min(taxable_income, upper) - bracket.lower_bound
        tax += slab_income * bracket.rate
    return tax


def estimate_itemized_deduction(
    annual_retirement_contribution: float,
    rules: RegimeRules,
) -> float:
    """
    Old regime 80C estimate: min(EPF × 12 + ₹1L, ₹1.5L).
    Regimes without an itemized cap (new regime) always return 0.
    """
    if rules.itemized_cap <= 0:
        return 0.0
    return min(max(0.0, annual_retirement_contribution) + rules.itemized_base, rules.itemized_cap)


def _resolve_rules(regime: TaxRegime | RegimeRules) -> RegimeRules:
    if isinstance(regime, RegimeRules):
        return regime
    return REGIME_RULES[TaxRegime(regime)]


# ===========================================================================
# PUBLIC API
# ===========================================================================

def calculate_regime_tax(
    annual_income: float,
    regime: TaxRegime | RegimeRules,
    annual_retirement_contribution: float = 0.0,
) -> RegimeTax:
    """
    Annual income tax on annual_income under one regime.

    annual_retirement_contribution only matters for the old regime, where it
    feeds the 80C estimate. It is passed explicitly so the old-regime figure
    never depends on which regime the user happens to have selected.
    """
    if not math.isfinite(annual_income) or annual_income < 0:
        raise ValueError(f"annual_income must be a finite amount >= 0, got {annual_income}")
    if not math.isfinite(annual_retirement_contribution) or annual_retirement_contribution < 0:
        raise ValueError(
            f"annual_retirement_contribution must be a finite amount >= 0, "
            f"got {annual_retirement_contribution}"
        )

    rules = _resolve_rules(regime)

    # Step 1: Deductions
    ded_std = float(rules.standard_deduction)
    ded_itemized = estimate_itemized_deduction(annual_retirement_contribution, rules)

    # Step 2: Taxable income (never negative)
    taxable_income = max(0.0, annual_income - ded_std - ded_itemized)

    # Step 3: Rebate: nil tax at or below the threshold
    if taxable_income <= rules.rebate_threshold:
        return RegimeTax(
            regime=rules.regime,
            gross_income=annual_income,
            standard_deduction=ded_std,
            itemized_deduction=ded_itemized,
            taxable_income=taxable_income,
            rebate_applied=True,
            slab_tax=0.0,
            surcharge=0.0,
            total_tax=0.0,
        )

    # Step 4: Slab tax, then cess on top
    slab_tax = calculate_slab_tax(taxable_income, rules.brackets)
    total_tax = slab_tax * (1 + rules.surcharge_rate)

    return RegimeTax(
        regime=rules.regime,
        gross_income=annual_income,
        standard_deduction=ded_std,
        itemized_deduction=ded_itemized,
        taxable_income=taxable_income,
        rebate_applied=False,
        slab_tax=slab_tax,
        surcharge=total_tax - slab_tax,
        total_tax=total_tax,
    )


def income_tax(
    annual_income: float,
    regime: TaxRegime | RegimeRules,
    annual_retirement_contribution: float = 0.0,
) -> float:
    """Annual tax only. Monthly withholding is this value / 12."""
    return calculate_regime_tax(annual_income, regime, annual_retirement_contribution).total_tax


def compare_regimes(
    annual_income: float,
    annual_retirement_contribution: float = 0.0,
) -> RegimeComparison:
    """
    Tax under both regimes for the same income.
    Recommends the lower-tax regime; ties go to the new regime.
    """
    old = calculate_regime_tax(annual_income, TaxRegime.old, annual_retirement_contribution)
    new = calculate_regime_tax(annual_income, TaxRegime.new, annual_retirement_contribution)

    if old.total_tax < new.total_tax:
        recommended = TaxRegime.old
        savings = new.total_tax - old.total_tax
    else:
        recommended = TaxRegime.new
        savings = old.total_tax - new.total_tax

    return RegimeComparison(
        old=old,
        new=new,
        recommended_regime=recommended,
        savings_amount=round(savings, 2),
    )
