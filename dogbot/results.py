"""Result codes reported by the lidar link and helpers to check them."""

from __future__ import annotations

from enum import IntEnum

RESULT_FAIL_BIT = 0x80000000


class ResultCode(IntEnum):
    """Result codes; any code with the fail bit set is a failure."""

    OK = 0
    ALREADY_DONE = 0x20
    FAIL_BIT = RESULT_FAIL_BIT
    INVALID_DATA = 0x8000 | RESULT_FAIL_BIT
    OPERATION_FAIL = 0x8001 | RESULT_FAIL_BIT
    OPERATION_TIMEOUT = 0x8002 | RESULT_FAIL_BIT
    OPERATION_STOP = 0x8003 | RESULT_FAIL_BIT
    OPERATION_NOT_SUPPORT = 0x8004 | RESULT_FAIL_BIT
    FORMAT_NOT_SUPPORT = 0x8005 | RESULT_FAIL_BIT
    INSUFFICIENT_MEMORY = 0x8006 | RESULT_FAIL_BIT


class LidarError(Exception):
    """Raised when an operation ends with a failing result code."""

    def __init__(self, code: int, message: str | None = None) -> None:
        self.code = int(code)
        try:
            label = ResultCode(self.code).name
        except ValueError:
            label = f"0x{self.code:08x}"
        super().__init__(message or f"lidar operation failed: {label}")


def is_ok(result: int) -> bool:
    """Return True when the fail bit of ``result`` is clear."""
    return (int(result) & RESULT_FAIL_BIT) == 0


def is_fail(result: int) -> bool:
    """Return True when the fail bit of ``result`` is set."""
    return not is_ok(result)


def check_result(result: int) -> int:
    """Return ``result`` unchanged, or raise :class:`LidarError` if it failed."""
    if is_fail(result):
        raise LidarError(result)
    return int(result)