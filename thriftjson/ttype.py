"""Type tags and message kinds shared by every protocol."""

from __future__ import annotations

from enum import IntEnum


class TType(IntEnum):
    STOP = 0  # end of a set of fields
    VOID = 1  # no value (only legal for return types)
    BOOL = 2
    BYTE = 3  # signed 8 bit integer
    I08 = 3
    DOUBLE = 4  # 64 bit IEEE 754 float
    I16 = 6
    I32 = 8
    I64 = 10
    STRING = 11
    UTF7 = 11
    UTF8 = 11
    UTF16 = 11
    STRUCT = 12
    MAP = 13
    SET = 14
    LIST = 15


class MessageType(IntEnum):
    CALL = 1  # client to server
    REPLY = 2  # normal response
    EXCEPTION = 3  # error response
    ONEWAY = 4  # call without a response


SCALAR_TYPES = frozenset(
    {TType.BOOL, TType.I08, TType.I16, TType.I32, TType.I64, TType.DOUBLE, TType.STRING}
)
