class FormBindingError(Exception):
    pass


class DocumentParseError(FormBindingError):
    """The input bytes are not a PDF the codec can open."""


class UnsupportedFieldKind(FormBindingError):
    """A field reports a kind outside text/checkbox/radio/dropdown.

    Raised by the dispatchers and caught by the fill/read loops, which skip
    the field.
    """

    def __init__(self, name: str, kind: object):
        super().__init__(f"Field {name!r} has unsupported kind {kind!r}")
        self.name = name
        self.kind = kind


class OptionMismatchError(FormBindingError):
    """Raised under the strict policy when a value matches no option."""

    def __init__(self, value: str, options):
        super().__init__(f"Value {value!r} is not one of {list(options)!r}")
        self.value = value
        self.options = list(options)
