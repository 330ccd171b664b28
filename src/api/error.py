from fastapi import status
from libs.result import Error
from src.domain.errors import ErrorCode


class ClientError(Exception):
    def __init__(self, base_error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        self.base_error = base_error
        self.status_code = status_code
        super().__init__(base_error.message)


class ServerError(Exception):
    def __init__(self, base_error: Error):
        self.base_error = base_error
        super().__init__(base_error.message)


CLIENT_ERROR_STATUS = {
    ErrorCode.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    ErrorCode.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorCode.VISITOR_BANNED: status.HTTP_403_FORBIDDEN,
    ErrorCode.ADMISSION_DENIED: status.HTTP_403_FORBIDDEN,
    ErrorCode.CODE_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.BUILDING_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.HOST_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.VISIT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.VISITOR_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.VISITOR_NOT_IN_VISIT: status.HTTP_404_NOT_FOUND,
    ErrorCode.BAN_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.CAPACITY_EXCEEDED: status.HTTP_409_CONFLICT,
    ErrorCode.VISIT_ALREADY_CLOSED: status.HTTP_409_CONFLICT,
    ErrorCode.DUPLICATE_ENTRY: status.HTTP_409_CONFLICT,
    ErrorCode.DUPLICATE_EXIT: status.HTTP_409_CONFLICT,
    ErrorCode.EXIT_WITHOUT_ENTRY: status.HTTP_409_CONFLICT,
    ErrorCode.VISIT_IN_PROGRESS: status.HTTP_409_CONFLICT,
    ErrorCode.INVALID_VISIT_STATE: status.HTTP_409_CONFLICT,
    ErrorCode.INVALID_VISITOR_TRANSITION: status.HTTP_409_CONFLICT,
    ErrorCode.ALREADY_BANNED: status.HTTP_409_CONFLICT,
    ErrorCode.CODE_EXPIRED: status.HTTP_410_GONE,
}


def raise_for_error(error: Error):
    """Translate a use case error into the matching HTTP exception"""
    status_code = CLIENT_ERROR_STATUS.get(error.code)
    if status_code is None:
        raise ServerError(error)
    raise ClientError(error, status_code=status_code)
