"""
Errors raised by the mzstk front end.

LexError comes out of the tokenizer, StructuralError out of the tree
builder. Both carry the index where the problem was found: a character
offset for the lexer, a token index for the builder.
"""

from typing import Optional


class TranslationError(Exception):
    """Base class for every failure while translating a program."""
    kind = "Translation"

    def __init__(self, message: str, index: Optional[int] = None):
        self.message = message
        self.index = index
        if index is not None:
            super().__init__(f"{self.kind} error at index {index}: {message}")
        else:
            super().__init__(f"{self.kind} error: {message}")


class LexError(TranslationError):
    """Invalid character sequence in the source text."""
    kind = "Lex"


class StructuralError(TranslationError):
    """Token stream does not form a well-nested program."""
    kind = "Structural"


# The tree builder's contract calls it a parse error
ParseError = StructuralError


class ResourceError(TranslationError):
    """Allocation failure during translation."""
    kind = "Resource"
