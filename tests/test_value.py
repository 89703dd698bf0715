import msgspec
import pytest

from thriftjson import (
    Field,
    List,
    Map,
    MapEntry,
    Message,
    MessageType,
    ProtocolError,
    ProtocolErrorKind,
    Scalar,
    Set,
    Struct,
    TType,
    new_bool,
    new_byte,
    new_double,
    new_i08,
    new_i16,
    new_i32,
    new_i64,
    new_string,
)

ACCESSORS = [
    'bool_value',
    'number_value',
    'string_value',
    'list_value',
    'map_value',
    'set_value',
    'struct_value',
]

SHAPES = {
    'bool_value': 'boolean',
    'number_value': 'number',
    'string_value': 'string',
    'list_value': 'list',
    'map_value': 'map',
    'set_value': 'set',
    'struct_value': 'struct',
}

VALUES = [
    (new_bool(True), 'bool_value'),
    (new_byte(1), 'number_value'),
    (new_i16(2), 'number_value'),
    (new_i32(3), 'number_value'),
    (new_i64(4), 'number_value'),
    (new_double(1.5), 'number_value'),
    (new_string('a'), 'string_value'),
    (List(TType.I32, [new_i32(1)]), 'list_value'),
    (Set(TType.I32, [new_i32(1)]), 'set_value'),
    (Map(TType.STRING, TType.I32, [MapEntry(new_string('a'), new_i32(1))]), 'map_value'),
    (Struct({1: new_i32(1).as_field()}), 'struct_value'),
]


##
## accessors
##


@pytest.mark.parametrize('value, valid', VALUES)
def test_accessor_exclusivity(value, valid):
    for accessor in ACCESSORS:
        if accessor == valid:
            getattr(value, accessor)
            continue
        with pytest.raises(ProtocolError) as info:
            getattr(value, accessor)
        assert info.value.kind == ProtocolErrorKind.INVALID_DATA
        assert str(info.value) == f'expected {SHAPES[accessor]} value'


def test_scalar_accessors():
    assert new_bool(False).bool_value is False
    assert new_i32(7).number_value == 7
    assert new_double(0.5).number_value == 0.5
    assert new_string('x').string_value == 'x'


def test_container_accessors_return_self():
    lst = List(TType.I32, [new_i32(1)])
    st = Struct({})
    assert lst.list_value is lst
    assert st.struct_value is st


def test_unset_scalar():
    value = Scalar(TType.I32)
    assert not value.is_set
    assert new_i32(0).is_set

    with pytest.raises(ProtocolError, match='missing required field') as info:
        value.number_value
    assert info.value.kind == ProtocolErrorKind.INVALID_DATA

    with pytest.raises(ProtocolError, match='expected boolean value'):
        value.bool_value


@pytest.mark.parametrize('value_type', [TType.LIST, TType.STRUCT, TType.VOID, 99])
def test_scalar_rejects_non_scalar_type(value_type):
    with pytest.raises(ProtocolError):
        Scalar(value_type, 1)


##
## model
##


def test_type_aliases():
    assert TType.BYTE is TType.I08
    assert TType.UTF7 is TType.STRING
    assert TType.UTF8 is TType.STRING
    assert TType.UTF16 is TType.STRING
    assert new_byte(1) == new_i08(1)
    assert Scalar(TType.UTF8, 'a') == new_string('a')


def test_values_are_immutable():
    value = new_i32(1)
    with pytest.raises(AttributeError):
        value.value = 2

    lst = List(TType.I32, [new_i32(1)])
    assert isinstance(lst.items, tuple)


def test_structural_equality():
    assert List(TType.I32, [new_i32(1)]) == List(TType.I32, (new_i32(1),))
    assert List(TType.I32, [new_i32(1)]) != Set(TType.I32, [new_i32(1)])
    assert Struct({1: new_i32(1).as_field(), 2: new_bool(True).as_field()}) == Struct(
        {2: new_bool(True).as_field(), 1: new_i32(1).as_field()}
    )
    assert Scalar(TType.I32) != new_i32(0)
    assert Scalar(TType.I32).value is msgspec.UNSET


def test_as_field():
    value = new_string('x')
    assert value.as_field() == Field(TType.STRING, value)

    lst = List(TType.I32, [])
    assert lst.as_field() == Field(TType.LIST, lst)
    assert Struct({}).as_field().field_type == TType.STRUCT


def test_field_delegates_accessors():
    field = new_i32(5).as_field()
    assert field.number_value == 5
    with pytest.raises(ProtocolError):
        field.string_value

    empty = Field(TType.I32, None)
    with pytest.raises(ProtocolError, match='expected number value'):
        empty.number_value


def test_message_delegates_accessors():
    payload = Struct({1: new_string('ok').as_field()})
    msg = Message('ping', 2, 42, payload)

    assert msg.message_type is MessageType.REPLY
    assert msg.struct_value is payload
    with pytest.raises(ProtocolError):
        msg.list_value


@pytest.mark.parametrize(
    'wrapper, held',
    [
        (new_string('x'), new_string('x')),
        (new_string('x').as_field(), new_string('x')),
        (Field(TType.LIST, None), None),
        (Message('ping', 1, 1, Struct({})), Struct({})),
    ],
)
def test_accessors_resolve_held_value(wrapper, held):
    assert wrapper._held == held


##
## struct lookup
##


def test_get_field():
    field = new_i32(7).as_field()
    st = Struct({1: field})

    assert st.get_field(1, TType.I32) is field
    assert st.get_field(1, TType.STRING) is None
    assert st.get_field(2, TType.I32) is None


def test_get_field_alias():
    st = Struct({1: new_byte(1).as_field()})
    assert st.get_field(1, TType.I08) is not None


##
## helpers
##


def test_list_helpers():
    lst = List.from_items(TType.I32, [1, 2, 3], new_i32)
    assert lst == List(TType.I32, [new_i32(1), new_i32(2), new_i32(3)])
    assert lst.map(lambda item: item.number_value * 2) == [2, 4, 6]


def test_set_helpers():
    st = Set.from_items(TType.STRING, ['a', 'b'], new_string)
    assert isinstance(st, Set)
    assert st.map(lambda item: item.string_value) == ['a', 'b']


def test_map_helpers():
    mp = Map.from_dict(TType.STRING, TType.I32, {'a': 1, 'b': 2}, new_string, new_i32)
    assert mp.entries[0] == MapEntry(new_string('a'), new_i32(1))
    assert mp.to_dict(lambda k: k.string_value, lambda v: v.number_value) == {'a': 1, 'b': 2}
