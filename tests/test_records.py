from __future__ import annotations

import io
from dataclasses import dataclass, field
from datetime import datetime
from typing import List

import pytest

from msereader import FileParseError, MessageType, ValueKind, read_document


@dataclass
class Styling:
    border: str = ""

    def reflect(self, reader):
        self.border = reader.handle("border", ValueKind.TEXT, self.border)


@dataclass
class Card:
    name: str = ""
    power: int = 0

    def reflect(self, reader):
        self.name = reader.handle("name", ValueKind.TEXT, self.name)
        self.power = reader.handle("power", ValueKind.INT, self.power)


@dataclass
class CardSet:
    title: str = ""
    created: datetime = None
    styling: Styling = field(default_factory=Styling)
    cards: List[Card] = field(default_factory=list)

    def reflect(self, reader):
        self.title = reader.handle("title", ValueKind.TEXT, self.title)
        self.created = reader.handle("created", ValueKind.DATETIME, self.created)
        reader.handle_record("styling", self.styling)
        reader.handle_records("card", Card, self.cards)


DOCUMENT = (
    "mse_version: 2.0.0\n"
    "title: Demo\n"
    "card:\n"
    "\tpower: 3\n"
    "\tname: Alpha\n"
    "\tflavor: unknown\n"
    "card:\n"
    "\tname: Beta\n"
    "styling:\n"
    "\tborder: black\n"
)


def test_record_fields_in_any_order(make_reader):
    r = make_reader(DOCUMENT)
    cs = CardSet()
    r.read_record(cs)
    assert cs.title == "Demo"
    assert cs.cards == [Card(name="Alpha", power=3), Card(name="Beta", power=0)]
    assert cs.styling.border == "black"
    assert r.at_end


def test_unknown_key_inside_record_is_reported_with_its_line(make_reader):
    r = make_reader(DOCUMENT)
    r.read_record(CardSet())
    assert [(w.line_number, w.message) for w in r.warnings] == [(6, "Unexpected key: 'flavor'")]


def test_unknown_keys_are_silent_when_lenient(make_reader):
    r = make_reader(DOCUMENT, ignore_invalid=True)
    cs = CardSet()
    r.read_record(cs)
    assert len(cs.cards) == 2
    assert r.warnings == []


def test_read_document_posts_aggregated_warnings(messages):
    cs = CardSet()
    reader = read_document(io.BytesIO(DOCUMENT.encode("utf-8")), cs, filename="test.mse", messages=messages)
    assert cs.styling.border == "black"
    assert reader.warnings == []
    (kind, text), = messages.drain()
    assert kind == MessageType.WARNING
    assert text == "Warnings while reading file:\ntest.mse\n\nOn line 6: \tUnexpected key: 'flavor'"


def test_read_document_without_showing_warnings(messages):
    reader = read_document(io.BytesIO(DOCUMENT.encode("utf-8")), CardSet(), show_warnings=False, messages=messages)
    assert len(reader.warnings) == 1
    assert len(messages) == 0


def test_show_warnings_is_a_no_op_without_warnings(make_reader, messages):
    r = make_reader("title: Demo\n")
    r.read_record(CardSet())
    assert r.show_warnings() is None
    assert len(messages) == 0


def test_fatal_error_names_file_and_line(messages):
    doc = "title: Demo\ncreated: sometime soon\n"
    with pytest.raises(FileParseError) as excinfo:
        read_document(io.BytesIO(doc.encode("utf-8")), CardSet(), filename="broken.mse", messages=messages)
    err = excinfo.value
    assert err.filename == "broken.mse"
    assert err.line_number == 2
    assert "Expected a date and time" in str(err)
    assert str(err).startswith("broken.mse: ")


def test_record_with_only_nested_blocks(make_reader):
    r = make_reader("styling:\n\tborder: white\ntitle: After\n")
    cs = CardSet()
    r.read_record(cs)
    assert cs.styling.border == "white"
    assert cs.title == "After"


def test_discarded_warnings_are_never_posted(messages):
    reader = read_document(io.BytesIO(DOCUMENT.encode("utf-8")), CardSet(), show_warnings=False, messages=messages)
    reader.discard_warnings()
    assert reader.show_warnings() is None
    assert len(messages) == 0
