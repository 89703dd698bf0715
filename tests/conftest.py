import pytest

from thriftjson import (
    Field,
    JsonProtocol,
    List,
    Map,
    MapEntry,
    MemoryTransport,
    Scalar,
    Set,
    Struct,
    TType,
    new_bool,
    new_byte,
    new_double,
    new_i16,
    new_i32,
    new_i64,
    new_string,
)


@pytest.fixture
def protocol():
    return JsonProtocol(MemoryTransport())


@pytest.fixture
def nested():
    return Struct(
        {
            1: new_bool(False).as_field(),
            2: new_byte(-8).as_field(),
            3: new_i16(300).as_field(),
            4: new_i64(2**40).as_field(),
            5: new_double(0.25).as_field(),
            6: new_string('héllo').as_field(),
            7: List(TType.STRING, [new_string('a'), Scalar(TType.STRING)]).as_field(),
            8: Set(TType.I32, [new_i32(1), new_i32(2)]).as_field(),
            9: Map(
                TType.I32,
                TType.LIST,
                [MapEntry(new_i32(1), List(TType.BOOL, [new_bool(True)]))],
            ).as_field(),
            10: Field(TType.STRUCT, Struct({1: Scalar(TType.I32).as_field()})),
        }
    )
