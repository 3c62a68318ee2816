"""PayrollDesk — CTC calculator, payroll test run and leave register."""

__version__ = "0.1.0"
