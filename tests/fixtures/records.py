"""Record types and canned instances shared by the encoder tests."""

from __future__ import annotations

import queue
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, NamedTuple

import numpy as np
import pytest
from pydantic import BaseModel, Field, PrivateAttr

from recordcsv.encoder import StructuralEncoder

__all__ = [
    "Address",
    "Basic",
    "Book",
    "Chain",
    "Collections",
    "Color",
    "ComplexMap",
    "Embedded",
    "Level",
    "Location",
    "MapPtr",
    "Palette",
    "Point",
    "Scalars",
    "Scores",
    "Tags",
    "TreeNode",
    "WithUnsupported",
    "embedded_records",
    "encoder",
]


@dataclass
class Tags:
    count: int = field(default=0, metadata={"json": "number", "csv": "Number"})
    counts: list[int] = field(default_factory=list, metadata={"json": "numbers", "csv": "Numbers"})
    _counts: list[int] = field(default_factory=list)
    word: str = field(default="", metadata={"json": "word", "csv": "Word"})
    words: list[str] = field(default_factory=list, metadata={"json": "words", "csv": "Words"})
    string_string: dict[str, str] = field(
        default_factory=dict, metadata={"json": "mapstringstring", "csv": "MapStringString"}
    )
    string_int: dict[str, int] = field(
        default_factory=dict, metadata={"json": "mapstringint", "csv": "MapStringInt"}
    )
    int_int: dict[int, int] = field(
        default_factory=dict, metadata={"json": "mapintint", "csv": "MapIntInt"}
    )
    _words: list[str] = field(default_factory=list)


@dataclass
class Address:
    addr1: str = ""
    addr2: str = ""
    city: str = ""
    state: str = ""
    zip: str = ""


@dataclass
class Location:
    id: int = 0
    address: Address = field(default_factory=Address)
    phone: str = ""
    lat: str = ""
    long: str = ""


@dataclass
class Embedded:
    name: str = ""
    location: Location = field(default_factory=Location)
    notes: dict[str, str] = field(default_factory=dict)
    stuff: dict[str, str] = field(default_factory=dict)


def embedded_records() -> list[Embedded]:
    return [
        Embedded(
            name="United Center",
            location=Location(
                id=1,
                address=Address(
                    addr1="1901 W. Madison St.", city="Chicago", state="IL", zip="60612"
                ),
                phone="(312) 455-4500",
                lat="41.8806",
                long="-87.6742",
            ),
            notes={"NHL": "Blackhawks", "NBA": "Bulls"},
        ),
        Embedded(
            name="Wrigley Field",
            location=Location(
                id=1906,
                address=Address(
                    addr1="1060 W. Addison St.",
                    addr2="Broadcast Booth",
                    city="Chicago",
                    state="IL",
                    zip="60613",
                ),
                phone="(773) 404-2827",
                lat="41.9483",
                long="-87.6556",
            ),
            notes={"MLB": "Cubs"},
            stuff={"Jack Brickhouse": "Hey Hey", "Harry Caray": "Holy Cow"},
        ),
    ]


@dataclass
class Basic:
    name: str = field(metadata={"json": "name", "csv": "Nom"})
    titles: list[str] = field(metadata={"json": "list", "csv": "Liste"})


@dataclass
class Scalars:
    flag: bool
    count: int
    small: np.uint8
    big: np.uint64
    ratio: float
    narrow: np.float32
    wave: complex
    narrow_wave: np.complex64
    text: str


@dataclass
class Collections:
    floats: list[float]
    narrow: list[np.float32]
    waves: list[complex]
    pair: tuple[int, str]
    labels: set[str]
    frozen: frozenset[int]
    payload: bytes
    maybe: int | None
    grid: list[list[int]]


@dataclass
class Scores:
    points: dict[str, int]
    by_rank: dict[int, str] = field(default_factory=dict)


@dataclass
class WithUnsupported:
    label: str
    callback: Callable[[], None] | None = None
    jobs: queue.Queue | None = None
    anything: Any = None
    view: memoryview | None = None
    handlers: list[Callable[[], None]] = field(default_factory=list)
    lookup: dict[str, Any] = field(default_factory=dict)
    mixed: int | str = 0
    _hidden: str = "secret"
    count: int = 0


@dataclass
class ComplexMap:
    map_map: dict[str, dict[str, str]] = field(metadata={"csv": "MapMap"})
    map_slice: dict[str, list[str]] = field(metadata={"csv": "MapSlice"})
    map_2d_slice: dict[str, list[list[str]]] = field(metadata={"csv": "Map2DSlice"})
    map_basic: dict[str, Basic] = field(metadata={"csv": "MapBasic"})
    map_basic_slice: dict[str, list[Basic]] = field(metadata={"csv": "MapBasicSlice"})
    map_basic_2d_slice: dict[str, list[list[Basic]]] = field(metadata={"csv": "MapBasic2DSlice"})


@dataclass
class MapPtr:
    map_basic_p: dict[str, Basic | None] = field(
        default_factory=dict, metadata={"csv": "MapBasicP"}
    )
    map_basic_slice_p: dict[str, list[Basic] | None] = field(
        default_factory=dict, metadata={"csv": "MapBasicSliceP"}
    )
    map_p_basic_slice: dict[str, list[Basic | None]] = field(
        default_factory=dict, metadata={"csv": "MapPBasicSlice"}
    )
    p_map_p_basic_slice: dict[str, list[Basic | None]] | None = field(
        default=None, metadata={"csv": "PMapPBasicSlice"}
    )


@dataclass
class TreeNode:
    label: str
    children: list[TreeNode] = field(default_factory=list)
    parent: TreeNode | None = None


@dataclass
class Chain:
    name: str
    next: Chain | None = None
    link: Chain = None  # type: ignore[assignment]


class Book(BaseModel):
    title: str = Field(json_schema_extra={"csv": "Title"})
    isbn: str = Field(alias="ISBN")
    price: float
    _secret: str = PrivateAttr(default="hidden")


class Point(NamedTuple):
    x: int
    y: int
    label: str = ""


class Color(str, Enum):
    RED = "red"
    GREEN = "green"


class Level(IntEnum):
    LOW = 1
    HIGH = 3


@dataclass
class Palette:
    color: Color
    level: Level


@pytest.fixture()
def encoder() -> StructuralEncoder:
    return StructuralEncoder()
