"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

MIN_WORKLOAD = Decimal("0")
MAX_WORKLOAD = Decimal("100")
FULL_CAPACITY = Decimal("100")

MIN_HOURS = Decimal("0")
MAX_HOURS_PER_DAY = Decimal("24")

DEFAULT_TOP_WORKLOAD_LIMIT = 10
COMPLETION_POINTS_PER_LOG = 10
COMPLETION_CAP = 100

UTILIZATION_SCALE = 4
AVERAGE_SCALE = 2

# Stored as DECIMAL(5,2) / DECIMAL(4,2).
STORED_DECIMAL_PLACES = 2
