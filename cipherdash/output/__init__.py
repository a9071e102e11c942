"""
CipherDash Output Module
=========================

Console display and report generation for CipherDash results.
"""

from cipherdash.output.console import CipherDashConsoleOutput
from cipherdash.output.report import CipherDashReportGenerator

__all__ = [
    "CipherDashConsoleOutput",
    "CipherDashReportGenerator",
]
