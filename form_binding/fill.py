from __future__ import annotations
from typing import Mapping
import asyncio
import logging
import time

from .codec import PyMuPDFCodec
from .config import SUFFIX_MARKER, DEFAULT_MISMATCH_POLICY
from .errors import UnsupportedFieldKind
from .logging_utils import log_form_operation
from .policy import OptionMismatchPolicy, select_option
from .resolver import ValueResolver, value_to_text, is_checked_value
from .schema import FieldKind, FormValue

logger = logging.getLogger(__name__)


class FormFiller:
    """Apply a flat value mapping onto every field of a PDF form.

    Each field's value is looked up by name (falling back to the unsuffixed
    name for cloned fields), coerced for the field's kind and written through
    the codec. Fields the caller has no data for are cleared, unchecked, or
    set per the option policy, so the output depends only on the inputs.
    """

    def __init__(self, codec=None, suffix_marker: str = SUFFIX_MARKER,
                 mismatch_policy: OptionMismatchPolicy = DEFAULT_MISMATCH_POLICY):
        self.codec = codec or PyMuPDFCodec()
        self.resolver = ValueResolver(suffix_marker)
        self.mismatch_policy = OptionMismatchPolicy(mismatch_policy)
        self._handlers = {
            FieldKind.TEXT: self._fill_text,
            FieldKind.CHECKBOX: self._fill_checkbox,
            FieldKind.RADIO_GROUP: self._fill_choice,
            FieldKind.DROPDOWN: self._fill_choice,
        }

    def fill(self, document_bytes: bytes, data: Mapping[str, FormValue]) -> bytes:
        started = time.time()
        document = self.codec.load(document_bytes)
        try:
            summary = self.apply(document, data)
        except Exception:
            document.close()
            raise
        output = document.save()
        log_form_operation("fill", summary, started)
        return output

    async def fill_async(self, document_bytes: bytes, data: Mapping[str, FormValue]) -> bytes:
        started = time.time()
        document = await asyncio.to_thread(self.codec.load, document_bytes)
        try:
            summary = self.apply(document, data)
        except Exception:
            document.close()
            raise
        output = await asyncio.to_thread(document.save)
        log_form_operation("fill", summary, started)
        return output

    def apply(self, document, data: Mapping[str, FormValue]):
        """Fill every field of an already loaded document in place."""
        filled = 0
        skipped = []
        for field in document.fields:
            value = self.resolver.resolve(field.name, data)
            try:
                self.set_field_value(field, value)
            except UnsupportedFieldKind as e:
                logger.debug(f"Skipping field: {e}")
                skipped.append(field.name)
                continue
            filled += 1
        logger.info(f"Filled form: fields={filled} skipped={len(skipped)}")
        return {"filled_count": filled, "skipped": skipped}

    def set_field_value(self, field, value: FormValue):
        handler = self._handlers.get(field.kind)
        if handler is None:
            raise UnsupportedFieldKind(field.name, field.kind)
        handler(field, value)

    def _fill_text(self, field, value: FormValue):
        field.set_text(value_to_text(value))

    def _fill_checkbox(self, field, value: FormValue):
        field.set_checked(is_checked_value(value))

    def _fill_choice(self, field, value: FormValue):
        option = select_option(value_to_text(value), list(field.options), self.mismatch_policy)
        field.select(option)


def fill_form(document_bytes: bytes, data: Mapping[str, FormValue], *,
              suffix_marker: str = SUFFIX_MARKER,
              mismatch_policy: OptionMismatchPolicy = DEFAULT_MISMATCH_POLICY,
              codec=None) -> bytes:
    return FormFiller(codec, suffix_marker, mismatch_policy).fill(document_bytes, data)


async def fill_form_async(document_bytes: bytes, data: Mapping[str, FormValue], *,
                          suffix_marker: str = SUFFIX_MARKER,
                          mismatch_policy: OptionMismatchPolicy = DEFAULT_MISMATCH_POLICY,
                          codec=None) -> bytes:
    return await FormFiller(codec, suffix_marker, mismatch_policy).fill_async(document_bytes, data)
