class AttendanceSyncError(Exception):
    """Base error for a failed reconciliation pass.

    Carries the HTTP status and a short machine-readable code so the API
    layer can render the CRM error envelope without inspecting the type.
    """

    status_code = 500
    error_code = "attendance_sync_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AuthError(AttendanceSyncError):
    """Verification token mismatch."""

    status_code = 401
    error_code = "unauthorized"


class ConfigError(AttendanceSyncError):
    """Missing provider settings or webinar custom-field mapping."""

    status_code = 400
    error_code = "configuration_error"


class RemoteError(AttendanceSyncError):
    """Non-success response or network fault from the webinar provider."""

    status_code = 502
    error_code = "remote_error"


class StoreError(AttendanceSyncError):
    """Failure reading from or writing to the CRM data layer."""

    status_code = 500
    error_code = "store_error"
