"""JavaScript content assist: completion proposals, hover, definitions and dependency summaries."""

from .assist import ContentAssistProvider
from .backend.proposals import Position, Proposal
from .frontend.parse import ParseError
from .indexer import MemoryIndexer
from .model import (
    Definition,
    DefinitionResult,
    FuncType,
    NamedType,
    Record,
    Summary,
    format_type,
    parse_type,
)
from .verify import Diagnostic, check_modules

__all__ = [
    "ContentAssistProvider",
    "Definition",
    "DefinitionResult",
    "Diagnostic",
    "FuncType",
    "MemoryIndexer",
    "NamedType",
    "ParseError",
    "Position",
    "Proposal",
    "Record",
    "Summary",
    "check_modules",
    "format_type",
    "parse_type",
]
