from __future__ import annotations

import io
from typing import List, Optional

import fitz  # PyMuPDF
import pytest
from pypdf import PdfWriter
from pypdf.generic import (
    ArrayObject,
    DecodedStreamObject,
    DictionaryObject,
    FloatObject,
    NameObject,
    NumberObject,
    TextStringObject,
)

from form_binding import DocumentParseError, FieldKind, FormField

# /Ff bits: radio + no-toggle-to-off, and combo box
RADIO_FLAGS = (1 << 15) | (1 << 14)
COMBO_FLAG = 1 << 17


class FakeField:
    """In-memory field handle with the same surface as the PyMuPDF codec's."""

    def __init__(self, name: str, kind, options=None, text: Optional[str] = None,
                 checked: bool = False, selected: Optional[List[str]] = None):
        self.name = name
        self.kind = kind
        self.options = list(options or [])
        self.text = text
        self.checked = checked
        self.selected = list(selected or [])
        self.page = 0

    def get_text(self):
        return self.text

    def set_text(self, text):
        self.text = text

    def is_checked(self):
        return self.checked

    def set_checked(self, checked):
        self.checked = checked

    def get_selected(self):
        return list(self.selected)

    def select(self, option):
        self.selected = [] if option is None else [option]

    def snapshot(self):
        return FormField(name=self.name, kind=self.kind, options=list(self.options))


class FakeDocument:
    def __init__(self, fields):
        self.fields = fields
        self.saved = False
        self.closed = False

    def save(self) -> bytes:
        self.saved = True
        self.closed = True
        return b"%FAKE-SAVED"

    def close(self):
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


class FakeCodec:
    """Hands out one prepared document; any other payload fails to parse."""

    def __init__(self, *fields):
        self.document = FakeDocument(list(fields))
        self.loaded = []

    def load(self, data: bytes) -> FakeDocument:
        self.loaded.append(data)
        if data != b"%FAKE":
            raise DocumentParseError("not a fake document")
        return self.document

    def field(self, name: str) -> FakeField:
        return next(f for f in self.document.fields if f.name == name)


@pytest.fixture
def fake_codec():
    def make(*fields):
        return FakeCodec(*fields)
    return make


def _add_widget(page, name, field_type, rect, **attrs):
    w = fitz.Widget()
    w.field_name = name
    w.field_type = field_type
    w.rect = fitz.Rect(*rect)
    for key, value in attrs.items():
        setattr(w, key, value)
    page.add_widget(w)


@pytest.fixture
def make_pdf():
    """Build a real PDF form from (name, kind, attrs) rows, one widget per row."""
    widget_types = {
        FieldKind.TEXT: fitz.PDF_WIDGET_TYPE_TEXT,
        FieldKind.CHECKBOX: fitz.PDF_WIDGET_TYPE_CHECKBOX,
        FieldKind.DROPDOWN: fitz.PDF_WIDGET_TYPE_COMBOBOX,
    }

    def build(*rows, pages: int = 1) -> bytes:
        doc = fitz.open()
        for _ in range(pages):
            doc.new_page(width=550, height=750)
        for i, (name, kind, attrs) in enumerate(rows):
            attrs = dict(attrs)
            page = doc[attrs.pop("page", 0)]
            field_type = widget_types.get(kind, kind)
            top = 40 + (i % 20) * 30
            _add_widget(page, name, field_type, (55, top, 300, top + 20), **attrs)
        data = doc.tobytes()
        doc.close()
        return data

    return build


def _appearance(writer: PdfWriter):
    stream = DecodedStreamObject()
    stream.set_data(b"")
    stream.update({
        NameObject("/Type"): NameObject("/XObject"),
        NameObject("/Subtype"): NameObject("/Form"),
        NameObject("/BBox"): ArrayObject([FloatObject(0), FloatObject(0), FloatObject(15), FloatObject(15)]),
    })
    return writer._add_object(stream)


def _rect(top: float, width: float = 15):
    return ArrayObject([FloatObject(55), FloatObject(top), FloatObject(55 + width), FloatObject(top + 15)])


def _write_form(writer: PdfWriter, page, annots, fields) -> bytes:
    page[NameObject("/Annots")] = ArrayObject(annots)
    writer._root_object[NameObject("/AcroForm")] = DictionaryObject({
        NameObject("/Fields"): ArrayObject(fields),
    })
    buf = io.BytesIO()
    writer.write(buf)
    return buf.getvalue()


@pytest.fixture
def make_radio_pdf():
    """Build a real radio group whose export values are written as PDF names."""

    def build(name: str, options: List[str], selected: Optional[str] = None) -> bytes:
        writer = PdfWriter()
        page = writer.add_blank_page(550, 750)
        parent = DictionaryObject({
            NameObject("/FT"): NameObject("/Btn"),
            NameObject("/Ff"): NumberObject(RADIO_FLAGS),
            NameObject("/T"): TextStringObject(name),
            NameObject("/V"): NameObject("/" + (selected or "Off")),
        })
        parent_ref = writer._add_object(parent)
        kids = []
        for i, option in enumerate(options):
            kid = DictionaryObject({
                NameObject("/Type"): NameObject("/Annot"),
                NameObject("/Subtype"): NameObject("/Widget"),
                NameObject("/Parent"): parent_ref,
                NameObject("/Rect"): _rect(600 - i * 30),
                NameObject("/AS"): NameObject("/" + (option if option == selected else "Off")),
                NameObject("/AP"): DictionaryObject({
                    NameObject("/N"): DictionaryObject({
                        NameObject("/" + option): _appearance(writer),
                        NameObject("/Off"): _appearance(writer),
                    }),
                }),
            })
            kids.append(writer._add_object(kid))
        parent[NameObject("/Kids")] = ArrayObject(kids)
        return _write_form(writer, page, list(kids), [parent_ref])

    return build


@pytest.fixture
def make_empty_dropdown_pdf():
    """Build a combo box that offers no options at all."""

    def build(name: str) -> bytes:
        writer = PdfWriter()
        page = writer.add_blank_page(550, 750)
        field = DictionaryObject({
            NameObject("/Type"): NameObject("/Annot"),
            NameObject("/Subtype"): NameObject("/Widget"),
            NameObject("/FT"): NameObject("/Ch"),
            NameObject("/Ff"): NumberObject(COMBO_FLAG),
            NameObject("/T"): TextStringObject(name),
            NameObject("/Opt"): ArrayObject([]),
            NameObject("/V"): TextStringObject(""),
            NameObject("/Rect"): _rect(600, width=150),
        })
        ref = writer._add_object(field)
        return _write_form(writer, page, [ref], [ref])

    return build
