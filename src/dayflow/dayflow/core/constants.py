"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

HALF_DAY_HOURS = 4
CLOCK_IN_EXPIRY_HOURS = 24
SESSION_TIMEOUT_HOURS = 24

OTP_LENGTH = 6
OTP_TTL_SECONDS = 5 * 60
OTP_RESEND_COOLDOWN_SECONDS = 60

LEAVE_MAX_FUTURE_MONTHS = 6
MIN_PASSWORD_LENGTH = 8
MIN_EMPLOYEE_ID_LENGTH = 3

DEFAULT_PORT = 5000


class StorageKeys:
    ATTENDANCE_RECORDS = "attendance_records"
    ACTIVE_CLOCK_INS = "active_clock_ins"
    USERS = "dayflow_users"
    EMPLOYEES = "dayflow_employees"
    LEAVE_DATA = "dayflow_leave_data"
    PAYROLL_DATA = "dayflow_payroll_data"
    SALARY_STRUCTURES = "dayflow_salary_structures"
