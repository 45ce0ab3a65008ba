class AppStatusCode:
    """Application level status codes carried in ``JsonOutResult.status_code``."""

    OPERATION_FAILED = "200"
    OPERATION_TIMED_OUT = "202"

    INVALID_INPUT = "300"
    REQUIRED_VALIDATION_ERROR = "301"
    INVALID_DATE_RANGE = "302"

    RECORD_NOT_FOUND = "400"

    AUTHENTICATION_TOKEN_INVALID = "500"
    AUTHENTICATION_TOKEN_EXPIRED = "501"
