"""
Schema and type inference tests.
"""

import numpy as np
import pytest

import boosttext as bt
from boosttext.schema import as_type, is_builtin, type_name, type_of

from tests.animals import ANIMAL, Animal, Manimal


class TestNames:

    def test_scalars(self):
        assert bt.INT16.name == "int16_t"
        assert bt.STRING.name == "string"

    def test_composites(self):
        assert bt.Slice(str).name == "vector<string>"
        assert bt.Array(np.uint8, 3).name == "array<uint8_t,3>"
        assert bt.Map(str, str).name == "map<string,string>"
        assert bt.Slice(ANIMAL).name == "vector<animal>"
        assert bt.Slice(Manimal).name == "vector<Manimal>"

    def test_type_name(self):
        assert type_name("custom") == "custom"
        with pytest.raises(bt.TypeNotSupportedError):
            type_name(42)


class TestInference:

    @pytest.mark.parametrize("value, want", [
        (True, bt.BOOL),
        (np.bool_(False), bt.BOOL),
        (np.int8(1), bt.INT8),
        (np.uint64(1), bt.UINT64),
        (np.float32(1), bt.FLOAT32),
        (1.5, bt.FLOAT64),
        (1j, bt.COMPLEX128),
        (np.complex64(1j), bt.COMPLEX64),
        ("hello", bt.STRING),
        (b"hello", bt.BYTES),
        (np.zeros(3, dtype=np.int32), bt.Slice(bt.INT32)),
        (Animal("pet", 4, 1), ANIMAL),
    ])
    def test_type_of(self, value, want):
        assert type_of(value) == want

    @pytest.mark.parametrize("value", [42, None, [1, 2], {"a": "b"}, np.zeros((2, 2))])
    def test_undeterminable(self, value):
        assert type_of(value) is None

    @pytest.mark.parametrize("target, want", [
        (bool, bt.BOOL),
        (float, bt.FLOAT64),
        (complex, bt.COMPLEX128),
        (str, bt.STRING),
        (bytes, bt.BYTES),
        (np.int16, bt.INT16),
        (np.float32, bt.FLOAT32),
        (Animal, ANIMAL),
        (Manimal, Manimal),
        (bt.Map(str, bt.INT32), bt.Map(bt.STRING, bt.INT32)),
    ])
    def test_as_type(self, target, want):
        assert as_type(target) == want

    @pytest.mark.parametrize("target", [int, 42, object, "string"])
    def test_as_type_unsupported(self, target):
        assert as_type(target) is None


class TestStruct:

    def test_fields_are_normalized(self):
        point = bt.Struct("point", [("x", float), ("y", np.float32)])
        assert point.fields == (("x", bt.FLOAT64), ("y", bt.FLOAT32))

    def test_bad_field_type(self):
        with pytest.raises(bt.TypeNotSupportedError):
            bt.Struct("point", [("x", int)])

    def test_build(self):
        assert ANIMAL.build({"name": "pet", "legs": 4, "tails": 1}) == Animal("pet", 4, 1)
        plain = bt.Struct("plain", [("x", bt.INT8)])
        assert plain.build({"x": 1}) == {"x": 1}

    def test_field_value(self):
        assert ANIMAL.field_value(Animal("pet", 4, 1), "legs") == 4
        assert ANIMAL.field_value({"legs": 4}, "legs") == 4


class TestSlice:

    def test_bytes_identity(self):
        assert bt.BYTES == bt.Slice(bt.UINT8)
        assert bt.BYTES.name == "vector<uint8_t>"

    def test_build(self):
        assert bt.BYTES.build([104, 105]) == b"hi"
        packed = bt.Slice(bt.UINT8).build([104, 105])
        assert isinstance(packed, np.ndarray)
        assert packed.dtype == np.uint8
        assert bt.Slice(str).build(["a"]) == ["a"]


def test_builtin_kinds():
    assert is_builtin(bt.INT8)
    assert is_builtin(bt.FLOAT64)
    assert is_builtin(bt.BOOL)
    assert not is_builtin(bt.STRING)
    assert not is_builtin(bt.COMPLEX64)
    assert not is_builtin(ANIMAL)
    assert not is_builtin(Manimal)
