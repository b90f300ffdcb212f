"""Row writer quoting, line endings and record helpers."""

from __future__ import annotations

import csv
import io

import pytest

from recordcsv.config import EncoderConfig, RecordCSVConfig, WriterConfig
from recordcsv.writer import RowWriter
from tests.fixtures.records import Basic, Point

pytestmark = pytest.mark.unit


def test_plain_cells_are_not_quoted() -> None:
    buffer = io.StringIO()
    RowWriter(buffer).write_all([["a", "b"], ["1", "2"]])

    assert buffer.getvalue() == "a,b\n1,2\n"


def test_special_cells_are_quoted_and_quotes_doubled() -> None:
    buffer = io.StringIO()
    RowWriter(buffer).write_all([["a,b", 'say "hi"', "two\nlines", "a\rb", "plain"]])

    assert buffer.getvalue() == '"a,b","say ""hi""","two\nlines","a\rb",plain\n'


@pytest.mark.parametrize("use_crlf", [False, True])
def test_carriage_return_cells_survive_a_csv_reader(use_crlf: bool) -> None:
    buffer = io.StringIO()
    RowWriter(buffer, use_crlf=use_crlf).write_all([["a\rb", "c"], ["d", "e"]])

    rows = list(csv.reader(io.StringIO(buffer.getvalue(), newline="")))

    assert rows == [["a\rb", "c"], ["d", "e"]]


def test_crlf_line_endings() -> None:
    buffer = io.StringIO()
    writer = RowWriter(buffer)
    writer.write(["x"])
    writer.set_use_crlf(True)
    writer.write(["y"])

    assert writer.use_crlf is True
    assert buffer.getvalue() == "x\ny\r\n"


def test_custom_delimiter_from_config() -> None:
    buffer = io.StringIO()
    writer = RowWriter.from_writer_config(buffer, WriterConfig(delimiter=";", use_crlf=True))
    writer.write_all([["a;b", "c,d"]])

    assert buffer.getvalue() == '"a;b";c,d\r\n'


def test_write_records_marshals_header_and_rows() -> None:
    buffer = io.StringIO()
    RowWriter(buffer).write_records(
        [Basic("Fyodor Dostoyevsky", ["Brothers Karamazov", "Crime and Punishment"])]
    )

    assert buffer.getvalue() == (
        'Nom,Liste\nFyodor Dostoyevsky,"(Brothers Karamazov,Crime and Punishment)"\n'
    )


def test_tag_settings_reach_the_encoder() -> None:
    buffer = io.StringIO()
    writer = RowWriter(buffer)
    writer.set_tag("json")
    writer.write_columns(Basic)
    writer.set_use_tags(False)
    writer.write_columns(Basic)

    assert buffer.getvalue() == "name,list\nname,titles\n"


def test_write_columns_and_record_separately() -> None:
    buffer = io.StringIO()
    writer = RowWriter(buffer)
    writer.write_columns(Point(1, 2))
    writer.write_record(Point(1, 2, "origin"))
    writer.flush()

    assert buffer.getvalue() == "x,y,label\n1,2,origin\n"


def test_from_config_builds_a_configured_encoder() -> None:
    config = RecordCSVConfig(encoder=EncoderConfig(list_delimiters=("[", "]")))
    buffer = io.StringIO()
    writer = RowWriter.from_config(buffer, config)
    writer.write_records([Basic("a", ["b", "c"])])

    assert writer.encoder.config.list_delimiters == ("[", "]")
    assert buffer.getvalue() == 'Nom,Liste\na,"[b,c]"\n'
