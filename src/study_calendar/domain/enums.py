from __future__ import annotations

from enum import Enum


class ValidationCode(str, Enum):
    OK = "ok"
    QUOTA_EXCEEDED = "quota_exceeded"
    NAME_LENGTH = "name_length"
    DESCRIPTION_LENGTH = "description_length"
    TIME_FORMAT = "time_format"
    TIME_ORDER = "time_order"
