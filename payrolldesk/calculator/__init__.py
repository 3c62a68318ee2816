"""
calculator — CTC breakdown and income-tax estimate.

Public API re-exported here so callers outside the package need one import.
"""
from payrolldesk.calculator.ctc_engine import calculate_ctc
from payrolldesk.calculator.schemas import CompensationInput, CTCResult, TaxRegime
from payrolldesk.calculator.tax_engine import calculate_regime_tax, compare_regimes, income_tax

__all__ = [
    "CompensationInput",
    "CTCResult",
    "TaxRegime",
    "calculate_ctc",
    "calculate_regime_tax",
    "compare_regimes",
    "income_tax",
]
