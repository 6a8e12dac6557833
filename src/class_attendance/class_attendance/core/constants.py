"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from .enums import AttendanceStatus

# Attendance dates are stored at noon so timezone conversion never moves them
# to the adjacent calendar day.
NORMALIZED_DAY_HOUR = 12

DEFAULT_STATUS = AttendanceStatus.HADIR

# Fixed order used for summaries and chart axes.
STATUS_ORDER = (
    AttendanceStatus.HADIR,
    AttendanceStatus.SAKIT,
    AttendanceStatus.IZIN,
    AttendanceStatus.ALPA,
)

DEFAULT_APP_ID = "absensi-kelas-default"
