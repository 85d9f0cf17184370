"""
Lexer for Sable - Recursive Descent Parser

Turns Sable source code into a lazy stream of tokens.

Features:
- Single-pass, forward-only tokenization (no backtracking)
- Tokens are produced on demand; iterate a Lexer or call next_token()
- Position tracking (line, column)
- Two-character comparison operators resolved with one character of lookahead
"""

from typing import Iterator, List, Optional

from .token_types import TT, Tok

# ============================================================================
# Errors
# ============================================================================

class LexError(Exception):
    """Lexical analysis error"""
    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        self.message = message
        self.line = line
        self.column = column
        super().__init__(
            f"{message} at line {line}, col {column}" if line is not None else message
        )

class UnknownTokenError(LexError):
    def __init__(self, char: str, line: int, column: int):
        super().__init__(f"Unexpected character {char!r}", line, column)
        self.char = char

# ============================================================================
# Character Cursor
# ============================================================================

class CharCursor:
    """Peekable character cursor: peek() without consuming, advance() to consume."""

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.line = 1
        self.column = 1

    def peek(self) -> str:
        """Look at the next character; '' at end of input"""
        if self.pos < len(self.source):
            return self.source[self.pos]
        return ''

    def advance(self) -> str:
        """Consume the next character and return it"""
        ch = self.peek()
        if not ch:
            return ch

        self.pos += 1
        if ch == '\n':
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        return ch

    def at_end(self) -> bool:
        return self.pos >= len(self.source)

# ============================================================================
# Lexer Implementation
# ============================================================================

class Lexer:
    """
    Sable lexer.

    The lexer never looks more than one character ahead. All token
    lookahead the parser needs is provided by the parser's own cursor.
    """

    # Keyword mapping
    KEYWORDS = {
        'fn': TT.FN,
        'return': TT.RETURN,
        'let': TT.LET,
        'and': TT.AND,
        'or': TT.OR,
        'not': TT.NOT,
        'true': TT.TRUE,
        'false': TT.FALSE,
        'none': TT.NONE,
    }

    # Single-character tokens that never combine with what follows
    SINGLE = {
        '(': TT.LPAR,
        ')': TT.RPAR,
        '{': TT.LBRACE,
        '}': TT.RBRACE,
        ',': TT.COMMA,
        ';': TT.SEMI,
        '+': TT.PLUS,
        '-': TT.MINUS,
        '*': TT.STAR,
        '/': TT.SLASH,
    }

    # First character -> (alone, followed by '=')
    EQ_SUFFIXED = {
        '=': (TT.ASSIGN, TT.EQ),
        '!': (TT.NEG, TT.NEQ),
        '<': (TT.LT, TT.LTE),
        '>': (TT.GT, TT.GTE),
    }

    def __init__(self, source: str):
        self.source = source
        self.cursor = CharCursor(source)

    def __iter__(self) -> Iterator[Tok]:
        """Yield tokens lazily, ending with (and including) EOF"""
        while True:
            tok = self.next_token()
            yield tok
            if tok.type == TT.EOF:
                return

    # ========================================================================
    # Main Tokenization
    # ========================================================================

    def next_token(self) -> Tok:
        """Scan and return the next token"""
        self.skip_whitespace()

        line, column = self.cursor.line, self.cursor.column
        ch = self.cursor.peek()

        # Running out of input here is the normal end of the stream
        if not ch:
            return Tok(TT.EOF, None, line, column)

        if _is_digit(ch):
            return self.scan_number(line, column)

        if ch.isalpha():
            return self.scan_identifier(line, column)

        return self.scan_operator(line, column)

    def tokenize(self) -> List[Tok]:
        """Tokenize entire source, return token list"""
        return list(self)

    # ========================================================================
    # Token Scanners
    # ========================================================================

    def scan_number(self, line: int, column: int) -> Tok:
        """Scan a run of digits; conversion to an integer is left to the parser"""
        value = ''
        while _is_digit(self.cursor.peek()):
            value += self.cursor.advance()

        return Tok(TT.NUMBER, value, line, column)

    def scan_identifier(self, line: int, column: int) -> Tok:
        """Scan identifier or keyword"""
        value = ''
        while self.cursor.peek().isalnum() or self.cursor.peek() == '_':
            value += self.cursor.advance()

        token_type = self.KEYWORDS.get(value, TT.IDENT)
        return Tok(token_type, value, line, column)

    def scan_operator(self, line: int, column: int) -> Tok:
        """Scan operators and punctuation"""
        ch = self.cursor.advance()

        token_type = self.SINGLE.get(ch)
        if token_type is not None:
            return Tok(token_type, ch, line, column)

        pair = self.EQ_SUFFIXED.get(ch)
        if pair is not None:
            alone, suffixed = pair
            if self.cursor.peek() == '=':
                self.cursor.advance()
                return Tok(suffixed, ch + '=', line, column)
            return Tok(alone, ch, line, column)

        raise UnknownTokenError(ch, line, column)

    # ========================================================================
    # Utilities
    # ========================================================================

    def skip_whitespace(self) -> bool:
        """Skip whitespace (newlines included), return True if any skipped"""
        skipped = False
        while self.cursor.peek().isspace():
            self.cursor.advance()
            skipped = True
        return skipped


def _is_digit(ch: str) -> bool:
    # ASCII 0-9 only; other Unicode digits are unknown characters
    return '0' <= ch <= '9'


def tokenize(source: str) -> List[Tok]:
    """Convenience function to tokenize source"""
    return Lexer(source).tokenize()
