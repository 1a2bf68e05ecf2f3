from __future__ import annotations
from typing import Dict, List, Optional
import asyncio
import logging
import time

from .codec import PyMuPDFCodec
from .config import (
    SUFFIX_MARKER,
    CHECKED_TEXT,
    UNCHECKED_TEXT,
    DROPDOWN_JOINER,
    MAX_FORM_FIELDS,
)
from .errors import UnsupportedFieldKind
from .logging_utils import log_form_operation
from .resolver import ValueResolver
from .schema import FieldKind, FormField

logger = logging.getLogger(__name__)


class FormReader:
    """Extract the current value of every field into a flat mapping.

    Values are always strings, except that a text field that was never set
    reads as None. A field named ``<base><marker><n>`` is also published
    under ``<base>``; when several fields share a base, the one that comes
    last in document order wins.
    """

    def __init__(self, codec=None, suffix_marker: str = SUFFIX_MARKER):
        self.codec = codec or PyMuPDFCodec()
        self.resolver = ValueResolver(suffix_marker)
        self._extractors = {
            FieldKind.TEXT: self._read_text,
            FieldKind.CHECKBOX: self._read_checkbox,
            FieldKind.RADIO_GROUP: self._read_radio,
            FieldKind.DROPDOWN: self._read_dropdown,
        }

    def read(self, document_bytes: bytes) -> Dict[str, Optional[str]]:
        started = time.time()
        with self.codec.load(document_bytes) as document:
            data = self.collect(document)
        log_form_operation("read", {"read_count": len(data)}, started)
        return data

    async def read_async(self, document_bytes: bytes) -> Dict[str, Optional[str]]:
        started = time.time()
        document = await asyncio.to_thread(self.codec.load, document_bytes)
        with document:
            data = self.collect(document)
        log_form_operation("read", {"read_count": len(data)}, started)
        return data

    def collect(self, document) -> Dict[str, Optional[str]]:
        data: Dict[str, Optional[str]] = {}
        for field in document.fields:
            try:
                value = self.get_field_value(field)
            except UnsupportedFieldKind as e:
                logger.debug(f"Skipping field: {e}")
                continue
            data[field.name] = value
            alias = self.resolver.alias_for(field.name)
            if alias is not None:
                data[alias] = value
        logger.info(f"Read form: keys={len(data)}")
        return data

    def get_field_value(self, field) -> Optional[str]:
        extractor = self._extractors.get(field.kind)
        if extractor is None:
            raise UnsupportedFieldKind(field.name, field.kind)
        return extractor(field)

    def _read_text(self, field) -> Optional[str]:
        return field.get_text()

    def _read_checkbox(self, field) -> str:
        return CHECKED_TEXT if field.is_checked() else UNCHECKED_TEXT

    def _read_radio(self, field) -> str:
        selected = field.get_selected()
        return selected[0] if selected else ""

    def _read_dropdown(self, field) -> str:
        return DROPDOWN_JOINER.join(field.get_selected())


def read_form(document_bytes: bytes, *, suffix_marker: str = SUFFIX_MARKER, codec=None) -> Dict[str, Optional[str]]:
    return FormReader(codec, suffix_marker).read(document_bytes)


async def read_form_async(document_bytes: bytes, *, suffix_marker: str = SUFFIX_MARKER,
                          codec=None) -> Dict[str, Optional[str]]:
    return await FormReader(codec, suffix_marker).read_async(document_bytes)


def list_form_fields(document_bytes: bytes, codec=None) -> List[FormField]:
    """List the supported fields of a form in document order.

    Push buttons, signatures and other kinds the filler cannot set are left
    out. At most MAX_FORM_FIELDS entries are returned.
    """
    codec = codec or PyMuPDFCodec()
    collected: List[FormField] = []
    with codec.load(document_bytes) as document:
        for field in document.fields:
            if not isinstance(field.kind, FieldKind):
                continue
            if len(collected) >= MAX_FORM_FIELDS:
                logger.warning(f"Field cap reached ({MAX_FORM_FIELDS}); remaining fields not listed")
                break
            collected.append(field.snapshot())
    return collected
