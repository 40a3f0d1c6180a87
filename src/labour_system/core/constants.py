"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

API_PREFIX = "/api/v1"

DEFAULT_PAGE = 1
DEFAULT_PAGE_LIMIT = 20

DEFAULT_EXPORT_MAX_RECORDS = 10000
DEFAULT_ACCESS_TOKEN_MINUTES = 60
DEFAULT_REFRESH_TOKEN_DAYS = 10
DASHBOARD_TREND_DAYS = 7

MIN_PASSWORD_LENGTH = 6
MAX_LEAVE_REASON_LENGTH = 500
MAX_REMARKS_LENGTH = 1000
MAX_PERFORMANCE_SCORE = 100

ACCESS_TOKEN_COOKIE = "accessToken"
REFRESH_TOKEN_COOKIE = "refreshToken"

MSG_NO_ATTENDANCE_FOR_PERIOD = "No attendance records found for the given period to generate salary."
MSG_SALARY_ALREADY_GENERATED = "Salary records for this period already generated for all labourers."
