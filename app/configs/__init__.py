from app.configs.settings import (
    DEFAULT_ERROR_MESSAGE,
    DEFAULT_SUBJECT,
    MAX_MESSAGE_LENGTH,
    MAX_PHONE_LENGTH,
    MAX_SUBJECT_LENGTH,
    SEND_SUCCESS_MESSAGE,
    SUBJECT_PREFIX,
    LimiterConfig,
    Settings,
    file_logger,
    settings,
)

__all__ = [
    "DEFAULT_ERROR_MESSAGE",
    "DEFAULT_SUBJECT",
    "MAX_MESSAGE_LENGTH",
    "MAX_PHONE_LENGTH",
    "MAX_SUBJECT_LENGTH",
    "SEND_SUCCESS_MESSAGE",
    "SUBJECT_PREFIX",
    "LimiterConfig",
    "Settings",
    "file_logger",
    "settings",
]
