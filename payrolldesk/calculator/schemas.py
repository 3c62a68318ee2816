"""
schemas.py — CTC calculator Pydantic v2 data contracts (AY 2025-26).

Defines:
  - TaxRegime, PayPeriod enums
  - ComponentPercentages, StatutoryOptions, CompensationInput  (calculator input)
  - ComponentAmount, ComponentBreakdown                      (earnings)
  - DeductionSet                                             (statutory withholdings)
  - TaxBracket, RegimeRules                                  (slab tables)
  - RegimeTax, CTCResult, RegimeComparison                   (calculator output)

All monetary fields are INR. CompensationInput.ctc is MONTHLY or ANNUAL
depending on pay_period; every output carries both monthly and annual figures.
"""
from __future__ import annotations

from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class TaxRegime(str, Enum):
    old = "old"
    new = "new"


class PayPeriod(str, Enum):
    monthly = "monthly"
    annual = "annual"


# ---------------------------------------------------------------------------
# Input
# ---------------------------------------------------------------------------

class ComponentPercentages(BaseModel):
    """
    Share of gross pay allocated to each explicit earning component.

    The percentages do NOT have to sum to 100. Whatever is left flows into
    the special allowance, which goes negative when the sum exceeds 100.
    """
    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    basic: float = Field(default=40, ge=0, le=100)
    hra: float = Field(default=20, ge=0, le=100)
    da: float = Field(default=10, ge=0, le=100)
    lta: float = Field(default=5, ge=0, le=100)
    performance: float = Field(default=10, ge=0, le=100)

    @property
    def allocated(self) -> float:
        return self.basic + self.hra + self.da + self.lta + self.performance


class StatutoryOptions(BaseModel):
    """Which statutory deductions apply to this employee."""
    model_config = ConfigDict(extra="forbid")

    epf: bool = True                # Provident fund, 12% of basic, capped
    professional_tax: bool = True   # Flat ₹200/month
    esi: bool = False               # State insurance, only below the wage ceiling


class CompensationInput(BaseModel):
    """
    Everything the CTC calculator needs.

    extra='forbid' ensures unknown fields from client requests cause a 422 error.
    allow_inf_nan=False rejects NaN / Infinity before any arithmetic runs.
    """
    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    ctc: float = Field(
        default=50_000, ge=0,
        description="Cost to company in INR, monthly or annual per pay_period.",
    )
    pay_period: PayPeriod = PayPeriod.monthly
    percentages: ComponentPercentages = Field(default_factory=ComponentPercentages)
    options: StatutoryOptions = Field(default_factory=StatutoryOptions)
    tax_regime: TaxRegime = TaxRegime.new

    @property
    def monthly_ctc(self) -> float:
        return self.ctc / 12 if self.pay_period == PayPeriod.annual else self.ctc

    @property
    def annual_ctc(self) -> float:
        return self.ctc if self.pay_period == PayPeriod.annual else self.ctc * 12


# ---------------------------------------------------------------------------
# Earnings
# ---------------------------------------------------------------------------

class ComponentAmount(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str       # basic | hra | da | lta | special | performance
    label: str      # Display label used by table and document exports
    monthly: float
    annual: float


class ComponentBreakdown(BaseModel):
    """
    Earning components in display order.

    Invariant: sum(c.monthly for c in components) == gross_monthly.
    The special allowance is the residual that makes this hold.
    """
    model_config = ConfigDict(extra="forbid")

    components: List[ComponentAmount]
    gross_monthly: float
    gross_annual: float

    def get(self, name: str) -> ComponentAmount:
        for component in self.components:
            if component.name == name:
                return component
        raise KeyError(name)


# ---------------------------------------------------------------------------
# Deductions
# ---------------------------------------------------------------------------

class DeductionSet(BaseModel):
    """Monthly statutory withholdings. Annual income tax is carried alongside."""
    model_config = ConfigDict(extra="forbid")

    epf_employee: float = 0
    epf_employer: float = 0         # Employer cost, not withheld from pay
    professional_tax: float = 0
    esi_employee: float = 0
    esi_employer: float = 0         # Employer cost, not withheld from pay
    income_tax_monthly: float = 0
    income_tax_annual: float = 0

    @computed_field
    @property
    def total_monthly(self) -> float:
        """Amount withheld from the employee every month."""
        return (
            self.epf_employee
            + self.professional_tax
            + self.esi_employee
            + self.income_tax_monthly
        )


# ---------------------------------------------------------------------------
# Slab tables
# ---------------------------------------------------------------------------

class TaxBracket(BaseModel):
    """Marginal rate applied to income from lower_bound up to the next bracket."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    lower_bound: float = Field(..., ge=0)
    rate: float = Field(..., ge=0, lt=1)


class RegimeRules(BaseModel):
    """
    Deduction and slab parameters of one regime.

    itemized_base / itemized_cap describe the old-regime 80C estimate:
        min(annual_retirement_contribution + itemized_base, itemized_cap)
    Both are 0 for the new regime.
    """
    model_config = ConfigDict(extra="forbid", frozen=True)

    regime: TaxRegime
    standard_deduction: float = Field(..., ge=0)
    rebate_threshold: float = Field(..., ge=0)
    brackets: tuple[TaxBracket, ...]
    surcharge_rate: float = Field(..., ge=0, lt=1)
    itemized_base: float = Field(default=0, ge=0)
    itemized_cap: float = Field(default=0, ge=0)

    @model_validator(mode="after")
    def validate_brackets(self) -> "RegimeRules":
        """Bounds must start at 0 and be strictly increasing."""
        if not self.brackets:
            raise ValueError("brackets must not be empty")
        if self.brackets[0].lower_bound != 0:
            raise ValueError("first bracket must start at 0")
        for prev, cur in zip(self.brackets, self.brackets[1:]):
            if cur.lower_bound <= prev.lower_bound:
                raise ValueError(
                    f"bracket bounds must be strictly increasing "
                    f"({prev.lower_bound:,.0f} → {cur.lower_bound:,.0f})"
                )
        return self


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------

class RegimeTax(BaseModel):
    """
    Annual income tax under one regime.

    Computation sequence:
      1. taxable_income = max(0, gross_income - standard_deduction - itemized_deduction)
      2. taxable_income <= rebate threshold → everything below is 0
      3. slab_tax = progressive bracket calculation
      4. surcharge = slab_tax × 4%
      5. total_tax = slab_tax + surcharge
    """
    model_config = ConfigDict(extra="forbid")

    regime: TaxRegime
    gross_income: float
    standard_deduction: float
    itemized_deduction: float = 0
    taxable_income: float
    rebate_applied: bool
    slab_tax: float
    surcharge: float
    total_tax: float

    @property
    def monthly_tax(self) -> float:
        return self.total_tax / 12


class CTCResult(BaseModel):
    """Output of calculate_ctc(), the CTC calculator response schema."""
    model_config = ConfigDict(extra="forbid")

    input: CompensationInput
    breakdown: ComponentBreakdown
    deductions: DeductionSet
    tax: RegimeTax
    net_monthly: float
    net_annual: float
    warnings: List[str] = []


class RegimeComparison(BaseModel):
    """Both regimes side by side. Ties go to the new regime."""
    model_config = ConfigDict(extra="forbid")

    old: RegimeTax
    new: RegimeTax
    recommended_regime: TaxRegime
    savings_amount: float


__all__ = [
    "TaxRegime",
    "PayPeriod",
    "ComponentPercentages",
    "StatutoryOptions",
    "CompensationInput",
    "ComponentAmount",
    "ComponentBreakdown",
    "DeductionSet",
    "TaxBracket",
    "RegimeRules",
    "RegimeTax",
    "CTCResult",
    "RegimeComparison",
]
