"""
Error codes returned by the access-control use cases.

Every rejection carries one of these stable codes plus a human message.
"""


class ErrorCode:
    # Malformed input, caller's fault
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Policy rejections
    CAPACITY_EXCEEDED = "CAPACITY_EXCEEDED"
    VISITOR_BANNED = "VISITOR_BANNED"
    ADMISSION_DENIED = "ADMISSION_DENIED"
    FORBIDDEN = "FORBIDDEN"

    # Service-to-service authentication
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_API_KEY = "INVALID_API_KEY"

    # State-machine guard rejections
    CODE_NOT_FOUND = "CODE_NOT_FOUND"
    CODE_EXPIRED = "CODE_EXPIRED"
    VISIT_ALREADY_CLOSED = "VISIT_ALREADY_CLOSED"
    DUPLICATE_ENTRY = "DUPLICATE_ENTRY"
    DUPLICATE_EXIT = "DUPLICATE_EXIT"
    EXIT_WITHOUT_ENTRY = "EXIT_WITHOUT_ENTRY"
    VISIT_IN_PROGRESS = "VISIT_IN_PROGRESS"
    INVALID_VISIT_STATE = "INVALID_VISIT_STATE"
    INVALID_VISITOR_TRANSITION = "INVALID_VISITOR_TRANSITION"

    # Conflicts
    ALREADY_BANNED = "ALREADY_BANNED"

    # Lookups
    BUILDING_NOT_FOUND = "BUILDING_NOT_FOUND"
    HOST_NOT_FOUND = "HOST_NOT_FOUND"
    VISIT_NOT_FOUND = "VISIT_NOT_FOUND"
    VISITOR_NOT_FOUND = "VISITOR_NOT_FOUND"
    VISITOR_NOT_IN_VISIT = "VISITOR_NOT_IN_VISIT"
    BAN_NOT_FOUND = "BAN_NOT_FOUND"

    # Infrastructure
    ISSUANCE_EXHAUSTED = "ISSUANCE_EXHAUSTED"
    STORAGE_ERROR = "STORAGE_ERROR"
