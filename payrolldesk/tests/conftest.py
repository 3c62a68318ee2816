"""
Test configuration for PayrollDesk tests.

The test-run endpoint normally pauses 100 ms per employee so the UI can show
progress; tests switch that off before the settings singleton is created.
"""
import os

os.environ.setdefault("PAYROLLDESK_TEST_RUN_ITEM_DELAY_MS", "0")
os.environ.setdefault("PAYROLLDESK_DEBUG", "false")
