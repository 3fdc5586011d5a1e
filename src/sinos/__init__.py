"""Sinos language front end: tokenizer and parser producing span-annotated ASTs."""

from sinos.sinos_errors import ErrorKind, SinosError
from sinos.sinos_parser import Parser, parse
from sinos.sinos_source import SourceFile, Span

__version__ = "0.1.0"

__all__ = ["ErrorKind", "Parser", "SinosError", "SourceFile", "Span", "parse"]
