"""
CTC engine and validator tests.

Default input: ₹50,000/month, basic 40 / hra 20 / da 10 / lta 5 / performance 10,
EPF and PT on, ESI off, new regime.
"""
from __future__ import annotations

import json
from dataclasses import dataclass

import pytest
from pydantic import ValidationError

from payrolldesk.calculator import calculate_ctc
from payrolldesk.calculator.ctc_engine import (
    EPF_MONTHLY_CEILING,
    PROFESSIONAL_TAX_MONTHLY,
    calculate_breakdown,
    calculate_epf,
    calculate_esi,
    default_input,
)
from payrolldesk.calculator.schemas import (
    CompensationInput,
    ComponentPercentages,
    PayPeriod,
    StatutoryOptions,
    TaxRegime,
)
from payrolldesk.calculator.validator import validate_compensation


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

def test_default_breakdown_components() -> None:
    result = calculate_ctc(default_input())
    monthly = {c.name: c.monthly for c in result.breakdown.components}
    assert monthly == pytest.approx({
        "basic": 20_000, "hra": 10_000, "da": 5_000,
        "lta": 2_500, "special": 7_500, "performance": 5_000,
    })
    assert [c.name for c in result.breakdown.components] == [
        "basic", "hra", "da", "lta", "special", "performance",
    ]


def test_default_net_take_home() -> None:
    result = calculate_ctc(default_input())
    # EPF capped at 1800, PT 200, tax 0 (taxable 525000 under the rebate)
    assert result.deductions.epf_employee == pytest.approx(1_800)
    assert result.deductions.professional_tax == PROFESSIONAL_TAX_MONTHLY
    assert result.tax.total_tax == 0
    assert result.deductions.total_monthly == pytest.approx(2_000)
    assert result.net_monthly == pytest.approx(48_000)
    assert result.net_annual == pytest.approx(576_000)
    assert result.warnings == []


def test_two_lakh_monthly_new_regime() -> None:
    result = calculate_ctc(CompensationInput(ctc=200_000))
    assert result.tax.total_tax == pytest.approx(292_500, abs=0.01)
    assert result.deductions.income_tax_monthly == pytest.approx(24_375, abs=0.01)
    assert result.net_monthly == pytest.approx(173_625, abs=0.01)


def test_old_regime_uses_epf_in_80c_estimate() -> None:
    result = calculate_ctc(default_input(TaxRegime.old))
    assert result.tax.itemized_deduction == pytest.approx(121_600)
    assert result.tax.taxable_income == pytest.approx(428_400)
    assert result.tax.total_tax == 0


def test_old_regime_without_epf_uses_base_estimate() -> None:
    data = CompensationInput(
        tax_regime=TaxRegime.old,
        options=StatutoryOptions(epf=False),
    )
    result = calculate_ctc(data)
    assert result.deductions.epf_employee == 0
    assert result.tax.itemized_deduction == pytest.approx(100_000)


def test_annual_pay_period_matches_monthly() -> None:
    monthly = calculate_ctc(CompensationInput(ctc=50_000))
    annual = calculate_ctc(CompensationInput(ctc=600_000, pay_period=PayPeriod.annual))
    assert annual.breakdown.gross_monthly == pytest.approx(50_000)
    assert annual.breakdown.gross_annual == pytest.approx(600_000)
    assert annual.net_monthly == pytest.approx(monthly.net_monthly)
    assert annual.tax.total_tax == pytest.approx(monthly.tax.total_tax)


def test_calculation_is_deterministic() -> None:
    data = CompensationInput(ctc=123_456.78, tax_regime=TaxRegime.old)
    assert calculate_ctc(data) == calculate_ctc(data)


# ---------------------------------------------------------------------------
# Breakdown invariants
# ---------------------------------------------------------------------------

@dataclass
class SplitCase:
    description: str
    gross: float
    percentages: ComponentPercentages


SPLIT_CASES: list[SplitCase] = [
    SplitCase("defaults", 50_000, ComponentPercentages()),
    SplitCase("all_zero", 75_000, ComponentPercentages(basic=0, hra=0, da=0, lta=0, performance=0)),
    SplitCase("exactly_100", 80_000, ComponentPercentages(basic=50, hra=25, da=10, lta=5, performance=10)),
    SplitCase("over_100", 50_000, ComponentPercentages(basic=60, hra=30, da=10, lta=5, performance=10)),
    SplitCase("fractional", 33_333.33, ComponentPercentages(basic=41.5, hra=17.3, da=9.9, lta=4.1, performance=7.7)),
]


@pytest.mark.parametrize("case", SPLIT_CASES, ids=[c.description for c in SPLIT_CASES])
def test_components_sum_to_gross(case: SplitCase) -> None:
    breakdown = calculate_breakdown(case.gross, case.percentages)
    assert sum(c.monthly for c in breakdown.components) == pytest.approx(case.gross)
    assert sum(c.annual for c in breakdown.components) == pytest.approx(case.gross * 12)


def test_over_allocation_gives_negative_special_and_warning() -> None:
    data = CompensationInput(
        percentages=ComponentPercentages(basic=60, hra=30, da=10, lta=5, performance=10),
    )
    result = calculate_ctc(data)
    assert result.breakdown.get("special").monthly == pytest.approx(-7_500)
    assert len(result.warnings) == 1
    assert "115%" in result.warnings[0]
    assert "INR -7,500/month" in result.warnings[0]
    assert "\u20b9" not in result.warnings[0]


def test_breakdown_get_unknown_component() -> None:
    breakdown = calculate_breakdown(10_000, ComponentPercentages())
    with pytest.raises(KeyError):
        breakdown.get("bonus")


# ---------------------------------------------------------------------------
# Statutory deductions
# ---------------------------------------------------------------------------

@pytest.mark.parametrize(
    "basic, expected",
    [
        (4_000, 480),
        (15_000, 1_800),
        (20_000, EPF_MONTHLY_CEILING),
        (4_000_000, EPF_MONTHLY_CEILING),
        (0, 0),
    ],
)
def test_epf_capped(basic: float, expected: float) -> None:
    assert calculate_epf(basic, True) == pytest.approx(expected)


def test_epf_not_applicable() -> None:
    assert calculate_epf(20_000, False) == 0


def test_esi_below_and_above_ceiling() -> None:
    assert calculate_esi(20_000, True) == pytest.approx((150, 650))
    assert calculate_esi(21_000, True) == pytest.approx((157.5, 682.5))
    assert calculate_esi(21_001, True) == (0.0, 0.0)
    assert calculate_esi(20_000, False) == (0.0, 0.0)


def test_esi_reduces_net_when_enabled() -> None:
    data = CompensationInput(ctc=20_000, options=StatutoryOptions(esi=True))
    result = calculate_ctc(data)
    # basic 8000 → EPF 960; PT 200; ESI 150; tax 0
    assert result.deductions.esi_employee == pytest.approx(150)
    assert result.deductions.esi_employer == pytest.approx(650)
    assert result.net_monthly == pytest.approx(18_690)


def test_all_flags_off_means_only_income_tax() -> None:
    data = CompensationInput(
        ctc=200_000,
        options=StatutoryOptions(epf=False, professional_tax=False, esi=False),
    )
    result = calculate_ctc(data)
    assert result.deductions.epf_employee == 0
    assert result.deductions.professional_tax == 0
    assert result.deductions.total_monthly == pytest.approx(result.deductions.income_tax_monthly)


def test_zero_ctc_zeroes_every_component() -> None:
    result = calculate_ctc(CompensationInput(ctc=0))
    assert all(c.monthly == 0 for c in result.breakdown.components)
    assert result.deductions.epf_employee == 0
    assert result.tax.total_tax == 0


# ---------------------------------------------------------------------------
# Input validation
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("ctc", [-1, float("nan"), float("inf")])
def test_invalid_ctc_rejected(ctc: float) -> None:
    with pytest.raises(ValidationError):
        CompensationInput(ctc=ctc)


def test_percentage_above_100_rejected() -> None:
    with pytest.raises(ValidationError):
        ComponentPercentages(basic=101)


def test_unknown_field_rejected() -> None:
    with pytest.raises(ValidationError):
        CompensationInput(ctc=50_000, bonus=10)


def test_validator_allows_mild_over_allocation() -> None:
    data = CompensationInput(
        percentages=ComponentPercentages(basic=60, hra=30, da=10, lta=5, performance=10),
    )
    assert validate_compensation(data) == []


def test_validator_rejects_allocation_above_limit() -> None:
    data = CompensationInput(
        percentages=ComponentPercentages(basic=100, hra=100, da=10, lta=0, performance=0),
    )
    with pytest.raises(ValueError) as exc_info:
        validate_compensation(data)
    violations = json.loads(str(exc_info.value))
    assert violations[0]["field"] == "percentages"
    assert "210%" in violations[0]["issue"]


def test_validator_custom_limit() -> None:
    with pytest.raises(ValueError):
        validate_compensation(default_input(), max_allocation_percent=80)


def test_validator_warns_on_zero_ctc() -> None:
    warnings = validate_compensation(CompensationInput(ctc=0))
    assert warnings == ["CTC is 0; every component and deduction will be 0."]
