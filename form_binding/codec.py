"""PyMuPDF document codec.

Opens PDF bytes, exposes the AcroForm as an ordered list of field handles
(one per field name, however many widgets carry it) and serializes the
document back to bytes. Nothing outside this module touches fitz objects.
"""
from __future__ import annotations
import logging
import re
from typing import Dict, List, Optional, Any

import fitz  # PyMuPDF

from .errors import DocumentParseError
from .schema import FieldKind, FormField

logger = logging.getLogger(__name__)

WIDGET_KINDS = {
    fitz.PDF_WIDGET_TYPE_TEXT: FieldKind.TEXT,
    fitz.PDF_WIDGET_TYPE_CHECKBOX: FieldKind.CHECKBOX,
    fitz.PDF_WIDGET_TYPE_RADIOBUTTON: FieldKind.RADIO_GROUP,
    fitz.PDF_WIDGET_TYPE_COMBOBOX: FieldKind.DROPDOWN,
    fitz.PDF_WIDGET_TYPE_LISTBOX: FieldKind.DROPDOWN,
}

OFF_STATE = "Off"

_NAME_ESCAPE = re.compile(r"#([0-9A-Fa-f]{2})")


def _is_on(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if not value:
        return False
    return str(value).lstrip("/") != OFF_STATE


def decode_name(value: Any) -> str:
    """Undo PDF name escapes, e.g. "Falcon#20Heavy" -> "Falcon Heavy"."""
    text = str(value).lstrip("/")
    return _NAME_ESCAPE.sub(lambda m: chr(int(m.group(1), 16)), text)


class PdfFormFieldHandle:
    """Live handle on one named field of an open document."""

    def __init__(self, name: str, widget_type: int, page: int, doc: fitz.Document):
        self.name = name
        self._doc = doc
        self.widget_type = widget_type
        self.page = page
        self.widgets: List[fitz.Widget] = []

    @property
    def kind(self):
        # Unrecognised widget types surface as their raw fitz tag
        return WIDGET_KINDS.get(self.widget_type, self.widget_type)

    @property
    def options(self) -> List[str]:
        kind = self.kind
        if kind == FieldKind.RADIO_GROUP:
            states: List[str] = []
            for w in self.widgets:
                state = w.on_state()
                if not state:
                    continue
                state = decode_name(state)
                if state not in states:
                    states.append(state)
            return states
        if kind == FieldKind.DROPDOWN:
            values = self.widgets[0].choice_values or []
            # Entries are either plain strings or (export value, display text) pairs
            return [str(v[0]) if isinstance(v, (list, tuple)) else str(v) for v in values]
        return []

    def get_text(self) -> Optional[str]:
        value = self.widgets[0].field_value
        return str(value) if value else None

    def set_text(self, text: Optional[str]):
        for w in self.widgets:
            w.field_value = text or ""
            if not text:
                self._clear_value(w)
            w.update()

    def _clear_value(self, w: fitz.Widget):
        # update() leaves a stale /V behind when the new text is empty
        self._doc.xref_set_key(w.xref, "V", "()")
        kind, parent = self._doc.xref_get_key(w.xref, "Parent")
        if kind == "xref":
            self._doc.xref_set_key(int(parent.split()[0]), "V", "()")

    def is_checked(self) -> bool:
        return _is_on(self.widgets[0].field_value)

    def set_checked(self, checked: bool):
        for w in self.widgets:
            w.field_value = bool(checked)
            w.update()

    def get_selected(self) -> List[str]:
        if self.kind == FieldKind.RADIO_GROUP:
            for w in self.widgets:
                value = w.field_value
                state = w.on_state()
                if not state:
                    continue
                state = decode_name(state)
                if value is True or (_is_on(value) and decode_name(value) == state):
                    return [state]
            return []
        value = self.widgets[0].field_value
        if isinstance(value, (list, tuple)):
            return [str(v) for v in value if v]
        return [str(value)] if value else []

    def select(self, option: Optional[str]):
        if self.kind == FieldKind.RADIO_GROUP:
            chosen = None
            # Switch the others off before turning the chosen button on
            for w in self.widgets:
                state = w.on_state()
                if option is not None and chosen is None and state and decode_name(state) == option:
                    chosen = w
                    continue
                w.field_value = False
                w.update()
            if chosen is not None:
                chosen.field_value = True
                chosen.update()
            return
        for w in self.widgets:
            w.field_value = option if option is not None else ""
            w.update()

    def snapshot(self) -> FormField:
        return FormField(
            name=self.name,
            kind=self.kind,
            options=self.options,
            page=self.page,
            widget_count=len(self.widgets),
        )


class PdfFormDocument:
    """An opened PDF and its form fields in document order."""

    def __init__(self, doc: fitz.Document):
        self._doc = doc
        # Widgets become invalid once their page object is collected
        self._pages = [doc[i] for i in range(doc.page_count)]
        self.fields: List[PdfFormFieldHandle] = self._collect_fields()

    def _collect_fields(self) -> List[PdfFormFieldHandle]:
        by_name: Dict[str, PdfFormFieldHandle] = {}
        ordered: List[PdfFormFieldHandle] = []
        for page_num, page in enumerate(self._pages):
            for w in page.widgets() or []:
                name = w.field_name
                if not name:
                    continue
                handle = by_name.get(name)
                if handle is None:
                    handle = PdfFormFieldHandle(name, w.field_type, page_num, self._doc)
                    by_name[name] = handle
                    ordered.append(handle)
                handle.widgets.append(w)
        return ordered

    def save(self) -> bytes:
        try:
            return self._doc.tobytes()
        finally:
            self.close()

    def close(self):
        if not self._doc.is_closed:
            self._doc.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


def load_document(data: bytes) -> PdfFormDocument:
    if not data:
        raise DocumentParseError("Empty document")
    try:
        doc = fitz.open(stream=bytes(data), filetype="pdf")
    except Exception as e:
        raise DocumentParseError(f"Failed to parse PDF bytes: {e}") from e
    if doc.needs_pass:
        doc.close()
        raise DocumentParseError("Encrypted PDF not supported")
    if doc.page_count == 0:
        doc.close()
        raise DocumentParseError("PDF has no pages")
    document = PdfFormDocument(doc)
    logger.debug(f"Loaded PDF: pages={doc.page_count} fields={len(document.fields)}")
    return document


class PyMuPDFCodec:
    """Default codec handed to FormFiller and FormReader."""

    def load(self, data: bytes) -> PdfFormDocument:
        return load_document(data)
