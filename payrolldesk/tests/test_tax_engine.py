"""
Tax engine test suite — AY 2025-26
Expected values hand-computed from the slab tables.

Groups:
  1. Named constant verification, exact equality
  2. Parametrised regime cases, approx(abs=0.01)
  3. Rebate boundary and monotonicity properties
  4. Slab table validation
"""
from __future__ import annotations

from dataclasses import dataclass

import pytest
from pydantic import ValidationError

from payrolldesk.calculator.schemas import RegimeRules, TaxBracket, TaxRegime
from payrolldesk.calculator.tax_engine import (
    ASSESSMENT_YEAR,
    CAP_80C,
    CESS_RATE,
    NEW_REBATE_THRESHOLD,
    NEW_REGIME_RULES,
    NEW_STD_DEDUCTION,
    OLD_80C_ESTIMATE_BASE,
    OLD_REBATE_THRESHOLD,
    OLD_REGIME_RULES,
    OLD_STD_DEDUCTION,
    calculate_regime_tax,
    calculate_slab_tax,
    compare_regimes,
    estimate_itemized_deduction,
    income_tax,
)


# ===========================================================================
# TEST GROUP 1: Named constant verification
# ===========================================================================

def test_assessment_year_constant() -> None:
    assert ASSESSMENT_YEAR == "AY2025-26"


def test_deduction_and_rebate_constants() -> None:
    assert OLD_STD_DEDUCTION    == 50_000
    assert NEW_STD_DEDUCTION    == 75_000
    assert OLD_REBATE_THRESHOLD == 500_000
    assert NEW_REBATE_THRESHOLD == 1_200_000
    assert OLD_80C_ESTIMATE_BASE == 100_000
    assert CAP_80C              == 150_000
    assert CESS_RATE            == pytest.approx(0.04)


def test_new_regime_bracket_bounds_fy2025() -> None:
    bounds = [b.lower_bound for b in NEW_REGIME_RULES.brackets]
    rates = [b.rate for b in NEW_REGIME_RULES.brackets]
    assert bounds == [0, 400_000, 800_000, 1_200_000, 1_600_000, 2_000_000, 2_400_000]
    assert rates == pytest.approx([0.0, 0.05, 0.10, 0.15, 0.20, 0.25, 0.30])


def test_old_regime_bracket_bounds() -> None:
    bounds = [b.lower_bound for b in OLD_REGIME_RULES.brackets]
    assert bounds == [0, 250_000, 500_000, 1_000_000]


# ===========================================================================
# TEST GROUP 2: Parametrised regime cases
# ===========================================================================

@dataclass
class RegimeCase:
    description: str
    annual_income: float
    regime: TaxRegime
    retirement_contribution: float
    expected_taxable: float
    expected_tax: float


REGIME_CASES: list[RegimeCase] = [
    RegimeCase(
        description="new_50k_monthly_below_rebate",
        annual_income=600_000, regime=TaxRegime.new, retirement_contribution=21_600,
        # 600000 - 75000 = 525000 <= 12L → 0
        expected_taxable=525_000, expected_tax=0,
    ),
    RegimeCase(
        description="new_2L_monthly_full_slabs",
        annual_income=2_400_000, regime=TaxRegime.new, retirement_contribution=21_600,
        # taxable 2325000: 20000 + 40000 + 60000 + 80000 + 81250 = 281250 × 1.04
        expected_taxable=2_325_000, expected_tax=292_500,
    ),
    RegimeCase(
        description="new_top_slab",
        annual_income=3_075_000, regime=TaxRegime.new, retirement_contribution=0,
        # taxable 3000000: 20000+40000+60000+80000+100000 + 0.30×600000=180000 → 480000 × 1.04
        expected_taxable=3_000_000, expected_tax=499_200,
    ),
    RegimeCase(
        description="old_50k_monthly_80c_estimate",
        annual_income=600_000, regime=TaxRegime.old, retirement_contribution=21_600,
        # itemized = min(21600 + 100000, 150000) = 121600; taxable 428400 <= 5L → 0
        expected_taxable=428_400, expected_tax=0,
    ),
    RegimeCase(
        description="old_2L_monthly",
        annual_income=2_400_000, regime=TaxRegime.old, retirement_contribution=21_600,
        # taxable 2228400: 12500 + 100000 + 0.30×1228400=368520 → 481020 × 1.04
        expected_taxable=2_228_400, expected_tax=500_260.8,
    ),
    RegimeCase(
        description="old_80c_estimate_capped",
        annual_income=1_200_000, regime=TaxRegime.old, retirement_contribution=80_000,
        # itemized = min(180000, 150000) = 150000; taxable 1000000: 12500 + 100000 → 112500 × 1.04
        expected_taxable=1_000_000, expected_tax=117_000,
    ),
]


@pytest.mark.parametrize("case", REGIME_CASES, ids=[c.description for c in REGIME_CASES])
def test_regime_tax_cases(case: RegimeCase) -> None:
    result = calculate_regime_tax(case.annual_income, case.regime, case.retirement_contribution)
    assert result.taxable_income == pytest.approx(case.expected_taxable, abs=0.01)
    assert result.total_tax == pytest.approx(case.expected_tax, abs=0.01)
    assert result.total_tax == pytest.approx(result.slab_tax + result.surcharge, abs=1e-6)


def test_new_regime_2325000_slab_tax_before_cess() -> None:
    assert calculate_slab_tax(2_325_000, NEW_REGIME_RULES.brackets) == pytest.approx(281_250)


def test_monthly_tax_is_annual_over_twelve() -> None:
    result = calculate_regime_tax(2_400_000, TaxRegime.new)
    assert result.monthly_tax == pytest.approx(24_375, abs=0.01)


def test_income_tax_accepts_regime_strings() -> None:
    assert income_tax(2_400_000, "new") == pytest.approx(292_500, abs=0.01)


def test_new_regime_ignores_retirement_contribution() -> None:
    with_epf = calculate_regime_tax(2_400_000, TaxRegime.new, 21_600)
    without = calculate_regime_tax(2_400_000, TaxRegime.new, 0)
    assert with_epf.total_tax == without.total_tax
    assert with_epf.itemized_deduction == 0


def test_itemized_estimate_without_contribution() -> None:
    assert estimate_itemized_deduction(0, OLD_REGIME_RULES) == 100_000
    assert estimate_itemized_deduction(1_000_000, OLD_REGIME_RULES) == CAP_80C
    assert estimate_itemized_deduction(50_000, NEW_REGIME_RULES) == 0


def test_negative_income_rejected() -> None:
    with pytest.raises(ValueError):
        calculate_regime_tax(-1, TaxRegime.new)


@pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
@pytest.mark.parametrize("regime", [TaxRegime.old, TaxRegime.new])
def test_non_finite_income_rejected(regime: TaxRegime, value: float) -> None:
    with pytest.raises(ValueError):
        income_tax(value, regime)


@pytest.mark.parametrize("value", [float("nan"), float("inf"), -1.0])
def test_bad_retirement_contribution_rejected(value: float) -> None:
    with pytest.raises(ValueError):
        calculate_regime_tax(1_000_000, TaxRegime.old, value)
    with pytest.raises(ValueError):
        compare_regimes(1_000_000, value)


# ===========================================================================
# TEST GROUP 3: Rebate boundary and monotonicity
# ===========================================================================

@pytest.mark.parametrize(
    "regime, boundary_income",
    [
        # new: 75000 std + 12L threshold
        (TaxRegime.new, 1_275_000),
        # old with no EPF: 50000 std + 100000 itemized + 5L threshold
        (TaxRegime.old, 650_000),
    ],
)
def test_zero_at_threshold_positive_just_above(regime: TaxRegime, boundary_income: float) -> None:
    at = calculate_regime_tax(boundary_income, regime)
    above = calculate_regime_tax(boundary_income + 1, regime)
    assert at.total_tax == 0
    assert at.rebate_applied is True
    assert above.total_tax > 0
    assert above.rebate_applied is False


def test_just_above_new_threshold_value() -> None:
    # taxable 1200001: 20000 + 40000 + 0.15 → 60000.15 × 1.04
    assert income_tax(1_275_001, TaxRegime.new) == pytest.approx(62_400.156, abs=0.001)


@pytest.mark.parametrize("regime", [TaxRegime.old, TaxRegime.new])
def test_tax_monotonic_in_income(regime: TaxRegime) -> None:
    incomes = sorted(
        {i * 25_000 for i in range(0, 201)}
        | {650_000, 650_001, 671_600, 671_601, 1_275_000, 1_275_001}
    )
    taxes = [income_tax(i, regime, 21_600) for i in incomes]
    for lower, higher in zip(taxes, taxes[1:]):
        assert higher >= lower


def test_zero_income_is_zero_tax() -> None:
    for regime in TaxRegime:
        result = calculate_regime_tax(0, regime)
        assert result.taxable_income == 0
        assert result.total_tax == 0


# ===========================================================================
# TEST GROUP 4: compare_regimes and slab table validation
# ===========================================================================

def test_compare_regimes_tie_goes_to_new() -> None:
    comparison = compare_regimes(600_000, 21_600)
    assert comparison.old.total_tax == 0
    assert comparison.new.total_tax == 0
    assert comparison.recommended_regime == TaxRegime.new
    assert comparison.savings_amount == 0


def test_compare_regimes_new_wins_high_income() -> None:
    comparison = compare_regimes(2_400_000, 21_600)
    assert comparison.recommended_regime == TaxRegime.new
    assert comparison.savings_amount == pytest.approx(500_260.8 - 292_500, abs=0.01)


def test_compare_regimes_decouples_contribution() -> None:
    """Old-regime figure depends only on the contribution passed in."""
    a = compare_regimes(2_400_000, 21_600).old.total_tax
    b = calculate_regime_tax(2_400_000, TaxRegime.old, 21_600).total_tax
    assert a == b


def _rules(brackets: list[tuple[float, float]]) -> RegimeRules:
    return RegimeRules(
        regime=TaxRegime.new,
        standard_deduction=0,
        rebate_threshold=0,
        brackets=tuple(TaxBracket(lower_bound=lo, rate=r) for lo, r in brackets),
        surcharge_rate=0,
    )


def test_rules_reject_non_increasing_bounds() -> None:
    with pytest.raises(ValidationError):
        _rules([(0, 0.0), (500_000, 0.1), (500_000, 0.2)])


def test_rules_reject_first_bound_not_zero() -> None:
    with pytest.raises(ValidationError):
        _rules([(100, 0.0), (500_000, 0.1)])


def test_bracket_rejects_rate_of_one() -> None:
    with pytest.raises(ValidationError):
        TaxBracket(lower_bound=0, rate=1.0)


def test_custom_rules_used_directly() -> None:
    rules = _rules([(0, 0.0), (100, 0.5)])
    # 1000 taxable: 0.5 × 900
    assert income_tax(1_000, rules) == pytest.approx(450)
