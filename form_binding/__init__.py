"""Bind flat value mappings to PDF form fields, and read them back.

Filling resolves each field's value by name (tolerating cloned-field
suffixes), coerces it for the field's kind and writes it through a PyMuPDF
codec. Reading is the mirror image.
"""
from .schema import FieldKind, FormField, FormValue
from .errors import FormBindingError, DocumentParseError, UnsupportedFieldKind, OptionMismatchError
from .policy import OptionMismatchPolicy, select_option
from .resolver import ValueResolver, resolve_value, base_name, value_to_text, is_checked_value
from .codec import PyMuPDFCodec, PdfFormDocument, load_document
from .fill import FormFiller, fill_form, fill_form_async
from .extract import FormReader, read_form, read_form_async, list_form_fields

__all__ = [
    "FieldKind",
    "FormField",
    "FormValue",
    "FormBindingError",
    "DocumentParseError",
    "UnsupportedFieldKind",
    "OptionMismatchError",
    "OptionMismatchPolicy",
    "select_option",
    "ValueResolver",
    "resolve_value",
    "base_name",
    "value_to_text",
    "is_checked_value",
    "PyMuPDFCodec",
    "PdfFormDocument",
    "load_document",
    "FormFiller",
    "fill_form",
    "fill_form_async",
    "FormReader",
    "read_form",
    "read_form_async",
    "list_form_fields",
]
