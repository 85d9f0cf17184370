"""
Recursive Descent Parser for Sable

Structure:
- Lexer: lazy token stream from source (lexer_rd)
- TokenCursor: one token of lookahead over that stream
- Parser: recursive descent for primaries, precedence climbing for
  binary operators
- AST: lark Trees, see tree.py for the node shapes
"""

from typing import Iterable, Iterator, List, Optional

from lark import Token, Tree

from . import tree as ast
from .lexer_rd import Lexer
from .token_types import TT, Tok

# Number literals are 32-bit signed; arithmetic on them is unbounded.
MAX_NUMBER_LITERAL = 2**31 - 1

# ============================================================================
# Errors
# ============================================================================

class ParseError(Exception):
    """Parse error with position info"""
    def __init__(self, message: str, token: Optional[Tok] = None):
        self.message = message
        self.token = token
        self.line = token.line if token else None
        self.column = token.column if token else None
        super().__init__(
            f"{message} at line {token.line}, col {token.column}" if token else message
        )

class UnexpectedEndOfInput(ParseError):
    """Input ran out where the grammar still required something"""
    def __init__(self, expected: str, token: Optional[Tok] = None):
        super().__init__(f"Unexpected end of input, expected {expected}", token)
        self.expected = expected

class UnexpectedTokenError(ParseError):
    def __init__(self, expected: str, token: Tok):
        super().__init__(f"Expected {expected}, got {_describe(token)}", token)
        self.expected = expected

class InvalidNumberError(ParseError):
    def __init__(self, token: Tok):
        super().__init__(
            f"Invalid number literal {token.value!r} (must be at most {MAX_NUMBER_LITERAL})", token
        )

class FunctionMissingNameError(ParseError):
    def __init__(self, token: Tok):
        super().__init__(f"Function requires a name, got {_describe(token)}", token)

class FunctionMissingLParenError(ParseError):
    def __init__(self, token: Tok):
        super().__init__(f"Expected '(' after function name, got {_describe(token)}", token)

class ParamMissingCommaError(ParseError):
    def __init__(self, token: Tok):
        super().__init__(f"Missing ',' before parameter {token.value!r}", token)

class ParamExtraCommaError(ParseError):
    def __init__(self, token: Tok):
        super().__init__("Unexpected ',' in parameter list", token)

class ParamExpectedError(ParseError):
    def __init__(self, token: Tok):
        super().__init__("Expected parameter name after ','", token)

class ParamInvalidTokenError(ParseError):
    def __init__(self, token: Tok):
        super().__init__(f"Invalid token {_describe(token)} in parameter list", token)

class UnclosedParenError(ParseError):
    def __init__(self, token: Tok):
        super().__init__(f"Expected ')', got {_describe(token)}", token)

class CallMissingCommaError(ParseError):
    def __init__(self, token: Tok):
        super().__init__(f"Expected ',' or ')' in argument list, got {_describe(token)}", token)

class NestingTooDeepError(ParseError):
    """Input nests deeper than the parser's Python stack can follow"""
    def __init__(self, token: Optional[Tok] = None):
        super().__init__("Expression nested too deeply", token)

def _describe(tok: Tok) -> str:
    if tok.type == TT.EOF:
        return "end of input"
    return f"{tok.type.name} {tok.value!r}"

# ============================================================================
# Token Cursor
# ============================================================================

class TokenCursor:
    """One-token-lookahead view over a lazy token stream.

    Once the stream is exhausted every further peek/advance returns EOF.
    """

    def __init__(self, tokens: Iterable[Tok]):
        self._tokens: Iterator[Tok] = iter(tokens)
        self._peeked: Optional[Tok] = None
        self._eof: Optional[Tok] = None
        self.last: Optional[Tok] = None

    def peek(self) -> Tok:
        """Look at the next token without consuming it"""
        if self._peeked is None:
            self._peeked = self._pull()
        return self._peeked

    def advance(self) -> Tok:
        """Consume the next token and return it"""
        tok = self.peek()
        self._peeked = None
        self.last = tok
        return tok

    def _pull(self) -> Tok:
        if self._eof is not None:
            return self._eof

        tok = next(self._tokens, None)
        if tok is None:
            tok = Tok(TT.EOF, None, 0, 0)
        if tok.type == TT.EOF:
            self._eof = tok
        return tok

# ============================================================================
# Parser
# ============================================================================

class Parser:
    """
    Recursive descent parser for Sable.

    Binary operator precedence (lowest to highest):
    1. assignment (=)
    2. and, or
    3. compare (==, !=, <, <=, >, >=)
    4. add (+, -)
    5. mul (*, /)

    Unary prefixes (not, !, -) bind tighter than every binary operator.
    """

    def __init__(self, tokens: Iterable[Tok]):
        self.cursor = TokenCursor(tokens)

    # ========================================================================
    # Token Navigation
    # ========================================================================

    def peek(self) -> Tok:
        return self.cursor.peek()

    def advance(self) -> Tok:
        return self.cursor.advance()

    def check(self, *types: TT) -> bool:
        """Check if current token matches any of the given types"""
        return self.peek().type in types

    def match(self, *types: TT) -> bool:
        """Check and consume if current token matches"""
        if self.check(*types):
            self.advance()
            return True
        return False

    def advance_required(self, expected: str) -> Tok:
        """Consume a token that must exist; EOF here is a parse failure"""
        tok = self.advance()
        if tok.type == TT.EOF:
            raise UnexpectedEndOfInput(expected, tok)
        return tok

    # ========================================================================
    # Expressions
    # ========================================================================

    def parse(self) -> Tree:
        """Parse one expression from the front of the stream"""
        try:
            return self.parse_expr()
        except RecursionError:
            raise NestingTooDeepError(self.cursor.last) from None

    def parse_expr(self) -> Tree:
        lhs = self.parse_primary()
        return self.parse_binop_rhs(0, lhs)

    def parse_binop_rhs(self, min_prec: int, lhs: Tree) -> Tree:
        """
        Precedence climbing. Operators at or above min_prec are folded into
        lhs left to right; a tighter operator after the right operand pulls
        that operand into a recursive climb first.
        """
        while True:
            prec = self.peek().precedence
            if prec < min_prec:
                return lhs

            op = self.advance()
            if self.check(TT.EOF):
                raise UnexpectedEndOfInput(f"operand after {op.value!r}", self.peek())

            rhs = self.parse_primary()
            if self.peek().precedence > prec:
                rhs = self.parse_binop_rhs(prec + 1, rhs)

            lhs = ast.binop(_op_token(op), lhs, rhs)

    def parse_primary(self) -> Tree:
        tok = self.advance_required("expression")

        match tok.type:
            case TT.NUMBER:
                return self.parse_number(tok)
            case TT.TRUE:
                return ast.boolean(True)
            case TT.FALSE:
                return ast.boolean(False)
            case TT.NONE:
                return ast.none()
            case TT.LBRACE:
                return self.parse_block()
            case TT.LPAR:
                return self.parse_paren()
            case TT.FN:
                return self.parse_function()
            case TT.RETURN:
                return ast.return_(self.parse_expr())
            case TT.LET:
                return self.parse_let()
            case TT.IDENT:
                return self.parse_identifier(tok)
            case TT.NOT | TT.NEG | TT.MINUS:
                operand = self.parse_primary()
                return ast.unary(_op_token(tok), operand)
            case _:
                raise UnexpectedTokenError("expression", tok)

    def parse_number(self, tok: Tok) -> Tree:
        try:
            value = int(tok.value)
        except ValueError:
            raise InvalidNumberError(tok) from None

        if value > MAX_NUMBER_LITERAL:
            raise InvalidNumberError(tok)
        return ast.number(value)

    def parse_block(self) -> Tree:
        """Parse block body after '{': expressions until '}'"""
        exprs: List[Tree] = []

        while True:
            if self.match(TT.RBRACE):
                break
            if self.check(TT.EOF):
                raise UnexpectedEndOfInput("'}' to close block", self.peek())
            if self.match(TT.SEMI):
                continue
            exprs.append(self.parse_expr())

        return ast.block(exprs)

    def parse_paren(self) -> Tree:
        """
        Parse grouped expression after '('. A run of opening parens is
        counted here instead of recursing once per paren; each close resumes
        the enclosing level's operator climb.
        """
        depth = 1
        while self.match(TT.LPAR):
            depth += 1

        expr = self.parse_expr()
        while True:
            tok = self.advance()
            if tok.type != TT.RPAR:
                raise UnclosedParenError(tok)

            depth -= 1
            if depth == 0:
                return expr
            expr = self.parse_binop_rhs(0, expr)

    def parse_function(self) -> Tree:
        """
        Parse function statement after 'fn':
        fn name(params) body  =>  name = fn(params) body
        """
        name = self.advance_required("function name")
        if name.type != TT.IDENT:
            raise FunctionMissingNameError(name)

        params = self.parse_params()
        body = self.parse_expr()

        return ast.assign(_ident_token(name), ast.function(params, body))

    def parse_params(self) -> List[Token]:
        """Parse '(' ident (',' ident)* ')' with strict comma placement"""
        lpar = self.advance_required("'(' after function name")
        if lpar.type != TT.LPAR:
            raise FunctionMissingLParenError(lpar)

        params: List[Token] = []
        first = True
        expect_identifier = True

        while True:
            tok = self.advance_required("parameter list")

            match tok.type:
                case TT.IDENT:
                    if not expect_identifier:
                        raise ParamMissingCommaError(tok)
                    expect_identifier = False
                    params.append(_ident_token(tok))
                case TT.COMMA:
                    if expect_identifier:
                        raise ParamExtraCommaError(tok)
                    expect_identifier = True
                case TT.RPAR:
                    if expect_identifier and not first:
                        raise ParamExpectedError(tok)
                    break
                case _:
                    raise ParamInvalidTokenError(tok)

            first = False

        return params

    def parse_call_args(self) -> List[Tree]:
        """Parse argument list after '(': expr (',' expr)* ')'"""
        if self.match(TT.RPAR):
            return []

        args: List[Tree] = []
        while True:
            args.append(self.parse_expr())

            tok = self.advance_required("')' to close argument list")
            if tok.type == TT.RPAR:
                break
            if tok.type != TT.COMMA:
                raise CallMissingCommaError(tok)

        return args

    def parse_identifier(self, tok: Tok) -> Tree:
        name = _ident_token(tok)
        if self.match(TT.LPAR):
            return ast.call(name, self.parse_call_args())
        return ast.var(name)

    def parse_let(self) -> Tree:
        """Parse 'let' name '=' expr"""
        name = self.advance_required("name after 'let'")
        if name.type != TT.IDENT:
            raise UnexpectedTokenError("name after 'let'", name)

        eq = self.advance_required("'=' after let name")
        if eq.type != TT.ASSIGN:
            raise UnexpectedTokenError("'=' after let name", eq)

        return ast.let(_ident_token(name), self.parse_expr())


def _ident_token(tok: Tok) -> Token:
    return ast.ident(tok.value, tok.line, tok.column)

def _op_token(tok: Tok) -> Token:
    return ast.op_token(tok.value, tok.line, tok.column)

# ============================================================================
# Entry points
# ============================================================================

def parse(source: str) -> Tree:
    """Parse the first expression of *source*. Lex errors propagate unchanged."""
    return Parser(Lexer(source)).parse()
