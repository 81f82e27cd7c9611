"""Record types shared by the test modules."""

from dataclasses import dataclass

import boosttext as bt


@dataclass
class Animal:
    name: str
    legs: int
    tails: int


ANIMAL = bt.Struct(
    "animal",
    [("name", bt.STRING), ("legs", bt.INT16), ("tails", bt.INT8)],
    factory=Animal,
)
Animal.__boost_type__ = ANIMAL


@dataclass
class Manimal:
    """Same layout as Animal, written by hand."""

    name: str
    legs: int
    tails: int

    def marshal_boost(self, w):
        w.write_type_descr(ANIMAL)  # shares the descriptor of Animal
        w.write_string(self.name)
        w.write_i16(self.legs)
        w.write_i8(self.tails)

    @classmethod
    def unmarshal_boost(cls, r):
        r.read_type_descr(ANIMAL)
        name = r.read_string()
        legs = r.read_i16()
        tails = r.read_i8()
        return cls(name, legs, tails)


HEADER = b"22 serialization::archive 17 "
