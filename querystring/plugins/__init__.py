"""
Token plugins shipped with the query string compiler.
"""

from .file_expansion import FileExpansion
from .text import Text
from .ranges import Ranges
from .underscored import Underscored
from .ip import IP
from .bare_words import BareWords
from .nested import Nested
from .auto_escape import AutoEscape

DEFAULT_PLUGINS = (
    FileExpansion,
    Text,
    Ranges,
    Underscored,
    IP,
    BareWords,
    Nested,
    AutoEscape,
)

__all__ = [
    "DEFAULT_PLUGINS",
    "FileExpansion",
    "Text",
    "Ranges",
    "Underscored",
    "IP",
    "BareWords",
    "Nested",
    "AutoEscape",
]
