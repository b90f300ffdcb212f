"""Property-based checks for the structural encoder and leaf formatting."""

from __future__ import annotations

import pytest

pytest.importorskip("hypothesis")

from hypothesis import given, strategies as st  # noqa: E402

from recordcsv.encoder import StructuralEncoder  # noqa: E402
from recordcsv.stringify import format_complex, format_float, format_unsigned  # noqa: E402
from tests.fixtures.records import Basic, Collections, Scores  # noqa: E402

pytestmark = pytest.mark.property

_finite_floats = st.floats(allow_nan=False, allow_infinity=False)
_basic_records = st.builds(
    Basic,
    name=st.text(max_size=20),
    titles=st.lists(st.text(max_size=10), max_size=5),
)
_collections_records = st.builds(
    Collections,
    floats=st.lists(_finite_floats, max_size=4),
    narrow=st.just([]),
    waves=st.lists(st.complex_numbers(allow_nan=False, allow_infinity=False), max_size=3),
    pair=st.tuples(st.integers(), st.text(max_size=5)),
    labels=st.sets(st.text(max_size=5), max_size=4),
    frozen=st.frozensets(st.integers(), max_size=4),
    payload=st.binary(max_size=6),
    maybe=st.one_of(st.none(), st.integers()),
    grid=st.lists(st.lists(st.integers(), max_size=3), max_size=3),
)


@given(st.lists(_basic_records, min_size=1, max_size=6))
def test_every_row_matches_the_header_width(records: list[Basic]) -> None:
    rows = StructuralEncoder().marshal(records)

    assert len(rows) == len(records) + 1
    assert {len(row) for row in rows} == {2}


@given(_collections_records)
def test_row_width_matches_columns_for_collections(record: Collections) -> None:
    encoder = StructuralEncoder()

    assert len(encoder.derive_row(record)) == len(encoder.derive_columns(Collections))


@given(st.dictionaries(st.text(max_size=8), st.integers(), max_size=8), st.randoms())
def test_mapping_cells_ignore_insertion_order(points: dict[str, int], rng) -> None:
    items = list(points.items())
    rng.shuffle(items)
    encoder = StructuralEncoder()

    assert encoder.derive_row(Scores(points)) == encoder.derive_row(Scores(dict(items)))


@given(st.lists(st.integers(), max_size=6, unique=True), st.randoms())
def test_set_cells_ignore_iteration_order(values: list[int], rng) -> None:
    shuffled = list(values)
    rng.shuffle(shuffled)
    encoder = StructuralEncoder()
    base = dict(
        floats=[], narrow=[], waves=[], pair=(0, ""), labels=set(), payload=b"", maybe=None, grid=[]
    )

    first = encoder.derive_row(Collections(frozen=frozenset(values), **base))
    second = encoder.derive_row(Collections(frozen=frozenset(shuffled), **base))

    assert first == second


@given(_finite_floats)
def test_float_text_round_trips(value: float) -> None:
    assert float(format_float(value)) == value


@given(st.complex_numbers(allow_nan=False, allow_infinity=False))
def test_complex_text_round_trips(value: complex) -> None:
    text = format_complex(value)

    assert text.startswith("(") and text.endswith("i)")
    assert complex(text.replace("i)", "j)")) == value


@given(st.integers(min_value=0, max_value=2**64 - 1), st.integers(min_value=2, max_value=36))
def test_unsigned_text_parses_back_in_its_base(value: int, base: int) -> None:
    assert int(format_unsigned(value, base), base) == value
