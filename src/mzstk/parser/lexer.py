"""
mzstk Lexer (Tokenizer)

Converts raw .mzstk source text into a stream of tokens.
Handles: numbers, operators, block brackets, variables, comments, S/E markers.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, List, Optional

from mzstk.parser.errors import LexError


class TokenType(Enum):
    """Types of tokens in mzstk source."""
    PUSH = auto()            # 123
    ADD = auto()             # +
    SUBTRACT = auto()        # -
    MULTIPLY = auto()        # *
    DIVIDE = auto()          # /
    MODULO = auto()          # %
    STORE = auto()           # :x
    LOAD = auto()            # ;x
    IF_OPEN = auto()         # [
    IF_CLOSE = auto()        # ]
    WHILE_OPEN = auto()      # {
    WHILE_CLOSE = auto()     # }
    FOR_OPEN = auto()        # (
    FOR_CLOSE = auto()       # )
    FUNCTION_OPEN = auto()   # @
    FUNCTION_CLOSE = auto()  # $
    EQUAL = auto()           # ==
    NOT_EQUAL = auto()       # !=
    LESS = auto()            # <
    GREATER = auto()         # >
    LESS_EQUAL = auto()      # <=
    GREATER_EQUAL = auto()   # >=
    AND = auto()             # &&
    OR = auto()              # ||
    NOT = auto()             # !
    START = auto()           # S
    EXIT = auto()            # E
    EOF = auto()             # End of input


@dataclass(frozen=True)
class Token:
    """A single token from the lexer."""
    type: TokenType
    value: Optional[int] = None

    @property
    def name(self) -> Optional[str]:
        """Variable name for STORE/LOAD tokens."""
        if self.type in (TokenType.STORE, TokenType.LOAD):
            return chr(self.value)
        return None

    def __repr__(self):
        if self.type in (TokenType.STORE, TokenType.LOAD):
            return f"Token({self.type.name}, {self.name!r})"
        if self.value is not None:
            return f"Token({self.type.name}, {self.value})"
        return f"Token({self.type.name})"


WHITESPACE = frozenset(" \t\n\r\f\v")
DIGITS = frozenset("0123456789")


def is_variable_char(ch: Optional[str]) -> bool:
    """Variable names are a single ASCII letter."""
    return ch is not None and ch.isascii() and ch.isalpha()


class Lexer:
    """
    Tokenizer for mzstk source text.

    Usage:
        lexer = Lexer(source_text)
        tokens = list(lexer.tokenize())
    """

    SINGLE_CHAR = {
        '+': TokenType.ADD,
        '-': TokenType.SUBTRACT,
        '*': TokenType.MULTIPLY,
        '/': TokenType.DIVIDE,
        '%': TokenType.MODULO,
        '[': TokenType.IF_OPEN,
        ']': TokenType.IF_CLOSE,
        '{': TokenType.WHILE_OPEN,
        '}': TokenType.WHILE_CLOSE,
        '(': TokenType.FOR_OPEN,
        ')': TokenType.FOR_CLOSE,
        '@': TokenType.FUNCTION_OPEN,
        '$': TokenType.FUNCTION_CLOSE,
        'S': TokenType.START,
        'E': TokenType.EXIT,
    }

    # Operators whose second character is mandatory
    DOUBLED = {
        '&': ('&', TokenType.AND),
        '|': ('|', TokenType.OR),
        '=': ('=', TokenType.EQUAL),
    }

    VARIABLE_PREFIX = {
        ':': TokenType.STORE,
        ';': TokenType.LOAD,
    }

    def __init__(self, source: str, filename: str = "<unknown>"):
        self.source = source
        self.filename = filename
        self.pos = 0
        self.length = len(source)

    def _current(self) -> Optional[str]:
        """Get current character or None if at end."""
        if self.pos >= self.length:
            return None
        return self.source[self.pos]

    def _peek(self, offset: int = 1) -> Optional[str]:
        """Peek ahead by offset characters."""
        pos = self.pos + offset
        if pos >= self.length:
            return None
        return self.source[pos]

    def _advance(self) -> Optional[str]:
        """Advance one character and return it."""
        ch = self._current()
        if ch is not None:
            self.pos += 1
        return ch

    def _skip_comment(self) -> None:
        """Skip from # through the next newline."""
        while True:
            ch = self._advance()
            if ch is None or ch == '\n':
                break

    def _read_number(self) -> int:
        """Read a maximal run of decimal digits."""
        value = 0
        while self._current() in DIGITS:
            value = value * 10 + (ord(self._advance()) - ord('0'))
        return value

    def _read_doubled(self, ch: str, start: int) -> TokenType:
        """Read a two-character operator that must repeat its follower."""
        follower, token_type = self.DOUBLED[ch]
        nxt = self._peek()
        if nxt is None:
            raise LexError(f"Unexpected end of input after {ch!r}", start)
        if nxt != follower:
            raise LexError(f"{ch!r} must be followed by {follower!r}", start)
        self.pos += 2
        return token_type

    def _read_variable(self, ch: str, start: int) -> Token:
        """Read a store/load token and its single-letter variable name."""
        name = self._peek()
        if not is_variable_char(name):
            raise LexError(f"Invalid variable name after {ch!r}", start)
        self.pos += 2
        return Token(self.VARIABLE_PREFIX[ch], ord(name))

    def tokenize(self) -> Iterator[Token]:
        """Generate tokens from the source, ending with a single EOF token."""
        while True:
            ch = self._current()
            start = self.pos

            if ch is None:
                yield Token(TokenType.EOF)
                break

            if ch in WHITESPACE:
                self._advance()
                continue

            if ch == '#':
                self._skip_comment()
                continue

            if ch in DIGITS:
                yield Token(TokenType.PUSH, self._read_number())
                continue

            if ch in self.SINGLE_CHAR:
                self._advance()
                yield Token(self.SINGLE_CHAR[ch])
                continue

            if ch in self.DOUBLED:
                yield Token(self._read_doubled(ch, start))
                continue

            if ch == '!':
                self._advance()
                if self._current() == '=':
                    self._advance()
                    yield Token(TokenType.NOT_EQUAL)
                else:
                    yield Token(TokenType.NOT)
                continue

            if ch in ('<', '>'):
                self._advance()
                if self._current() == '=':
                    self._advance()
                    yield Token(TokenType.LESS_EQUAL if ch == '<' else TokenType.GREATER_EQUAL)
                else:
                    yield Token(TokenType.LESS if ch == '<' else TokenType.GREATER)
                continue

            if ch in self.VARIABLE_PREFIX:
                yield self._read_variable(ch, start)
                continue

            raise LexError(f"Unknown token: {ch!r} (ASCII {ord(ch)})", start)

    def tokenize_all(self) -> List[Token]:
        """Convenience method to get all tokens as a list."""
        return list(self.tokenize())


def tokenize(source: str) -> List[Token]:
    """Tokenize source text. Raises LexError on the first invalid character."""
    return Lexer(source).tokenize_all()


def read_source(filepath: str) -> str:
    """Read a source file, falling back through common encodings."""
    # latin-1 always succeeds
    for encoding in ['utf-8-sig', 'utf-8', 'latin-1']:
        try:
            with open(filepath, 'r', encoding=encoding) as f:
                return f.read()
        except UnicodeDecodeError:
            continue


def tokenize_file(filepath: str) -> List[Token]:
    """Tokenize a file and return all tokens. Handles encoding fallback."""
    lexer = Lexer(read_source(filepath), filename=filepath)
    return lexer.tokenize_all()
