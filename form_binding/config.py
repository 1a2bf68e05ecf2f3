"""
Configuration constants for form value binding.
Per-call overrides are passed as keyword arguments; nothing here is read from
the environment.
"""
from .policy import OptionMismatchPolicy

# Authoring tools append this marker when a field is cloned across pages
# (e.g. "signature_es_1"); the text before it is the canonical name.
SUFFIX_MARKER = "_es_"

# Closed set of literals that check a checkbox (compared lower-cased).
CHECKBOX_TRUE_LITERALS = frozenset({"yes", "true", "1"})

# What to select when a radio/dropdown value is not one of the options.
DEFAULT_MISMATCH_POLICY = OptionMismatchPolicy.FALLBACK_FIRST

# Checkbox values reported by the reader
CHECKED_TEXT = "true"
UNCHECKED_TEXT = "false"

# Joiner for multi-select dropdown values on read
DROPDOWN_JOINER = ", "

MAX_FORM_FIELDS = 300  # inspector safety cap

# Logging Configuration
LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'
FORM_OPERATIONS_LOG = None  # path of a JSON-lines log of fill/read calls; None disables it
