"""Frontend package - parses JavaScript and infers types over the AST."""

from .classify import classify, find_hover_target
from .environment import Environment
from .inference import run_inference
from .parse import ParseError, parse
from .walker import Found, visit
