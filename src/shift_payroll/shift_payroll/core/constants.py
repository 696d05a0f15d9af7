"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

HOURS_QUANTUM = Decimal("0.01")
MONEY_QUANTUM = Decimal("0.01")

DEFAULT_REPORT_DAYS = 30
DAYS_PER_WEEK = 7

NOT_AVAILABLE = "N/A"
UNKNOWN_NAME = "Unknown"
DEFAULT_COMPANY_NAME = "Service Provider"
