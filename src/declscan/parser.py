"""declscan parser: walks the token stream and collects class declarations."""

from __future__ import annotations

from collections.abc import Callable

from declscan.decls import ClassDecl, DeclKind, NameDecl
from declscan.errors import ParseError
from declscan.lexer import Lexer
from declscan.tokens import Token, TokenType, token_name

GenericSink = Callable[[str], None]


def _is_keyword(tok: Token, word: str) -> bool:
    return tok.type == TokenType.IDENTIFIER and not tok.verbatim and tok.value == word


class Parser:
    """Single-pass recursive descent scanner for namespace, class and struct headers.

    Everything between headers is read token by token and only braces are
    tracked. `_scopes` holds one entry per open brace: the NameDecl that
    brace opened, or None for an anonymous block.
    """

    def __init__(self, source: str, on_generic: GenericSink | None = None) -> None:
        self._source = source
        self._lexer = Lexer(source)
        self._on_generic = on_generic
        self._scopes: list[NameDecl | None] = []
        self._type_depth = 0
        self._classes: list[ClassDecl] = []

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def _next(self) -> Token:
        return self._lexer.next_token()

    def _expect(self, tt: TokenType) -> Token:
        tok = self._next()
        if tok.type != tt:
            raise self._unexpected(tok, token_name(tt))
        return tok

    def _expect_name(self) -> str:
        return str(self._expect(TokenType.IDENTIFIER).value)

    def _unexpected(self, tok: Token, expected: str) -> ParseError:
        message = f"expected {expected}, found {tok.describe()}"
        return ParseError(message, tok.position, self._source)

    def _skip_nullable(self) -> None:
        if self._lexer.peek_matches(TokenType.QUESTION):
            self._next()

    # ------------------------------------------------------------------
    # Declarations
    # ------------------------------------------------------------------

    def parse(self) -> list[ClassDecl]:
        while True:
            tok = self._next()

            if tok.type == TokenType.EOF:
                break

            if _is_keyword(tok, "where"):
                self._parse_where()
            elif _is_keyword(tok, "class"):
                self._parse_class()
            elif _is_keyword(tok, "struct"):
                self._parse_struct()
            elif _is_keyword(tok, "namespace"):
                self._parse_namespace(tok)
            elif tok.type == TokenType.LBRACE:
                self._scopes.append(None)
            elif tok.type == TokenType.RBRACE:
                self._close_scope(tok)

        if self._scopes:
            raise ParseError(
                "reached end of input with missing closing braces",
                self._lexer.current_pos(),
                self._source,
            )
        return self._classes

    def _close_scope(self, tok: Token) -> None:
        if not self._scopes:
            raise ParseError("unmatched '}'", tok.position, self._source)
        decl = self._scopes.pop()
        if decl is not None and decl.is_type:
            self._type_depth -= 1

    def _open_type_scope(self, name: str, kind: DeclKind) -> None:
        self._scopes.append(NameDecl(name, kind))
        self._type_depth += 1

    def _parse_where(self) -> None:
        # "where" is only a constraint clause when followed by `T : X`;
        # "class" and "struct" there are constraints, not declarations
        if not self._lexer.peek_matches(
            TokenType.IDENTIFIER, TokenType.COLON, TokenType.IDENTIFIER
        ):
            return
        self._parse_type_constraints()
        # The clause ends on a method or type body we have no name for
        self._scopes.append(None)

    def _parse_class(self) -> None:
        name = self._expect_name()

        namespaces = [d.name for d in self._scopes if d is not None and not d.is_type]
        enclosing = [d.name for d in self._scopes if d is not None and d.is_type]
        nested = self._type_depth > 0

        bases: list[str] = []
        generic = False

        while True:
            tok = self._next()
            if tok.type == TokenType.COLON:
                bases = self._parse_class_base_list()
                break
            if tok.type == TokenType.LBRACE:
                break
            if tok.type == TokenType.LESS and not generic:
                generic = True
                self._skip_generic_params()
            elif _is_keyword(tok, "where"):
                self._parse_type_constraints()
                break
            else:
                raise self._unexpected(tok, "':', '<', 'where' or '{'")

        self._open_type_scope(name, DeclKind.CLASS)

        decl = ClassDecl(".".join(namespaces), ".".join([*enclosing, name]), tuple(bases), nested)
        if not generic:
            self._classes.append(decl)
        elif self._on_generic is not None:
            self._on_generic(decl.full_name)

    def _parse_struct(self) -> None:
        # Structs only name scopes. Anything between the name and the
        # body (bases, generics, constraints) is passed over.
        name: str | None = None
        while True:
            tok = self._next()
            if tok.type == TokenType.IDENTIFIER and name is None:
                name = str(tok.value)
            elif tok.type == TokenType.LBRACE:
                if name is None:
                    raise self._unexpected(tok, "identifier after 'struct'")
                break
            elif tok.type == TokenType.EOF:
                raise self._unexpected(tok, "'{' after struct declaration")

        self._open_type_scope(name, DeclKind.STRUCT)

    def _parse_namespace(self, tok: Token) -> None:
        if self._type_depth > 0:
            raise ParseError("found namespace nested inside type", tok.position, self._source)
        name = self._parse_namespace_name()
        self._scopes.append(NameDecl(name, DeclKind.NAMESPACE))

    def _parse_namespace_name(self) -> str:
        """Parse `A.B.C {`, consuming the brace, and return the dotted name."""
        parts: list[str] = []
        while True:
            parts.append(self._expect_name())
            tok = self._next()
            if tok.type == TokenType.LBRACE:
                return ".".join(parts)
            if tok.type != TokenType.PERIOD:
                raise self._unexpected(tok, "'.' or '{'")

    # ------------------------------------------------------------------
    # Names, bases and constraints
    # ------------------------------------------------------------------

    def _parse_full_type_name(self) -> str:
        """Parse a dotted type name; generic arguments are skipped, not returned."""
        parts: list[str] = []
        while True:
            parts.append(self._expect_name())

            if self._lexer.peek_matches(TokenType.LESS):
                self._next()
                self._skip_generic_params()

            # Only a period directly after the name continues it
            if self._lexer.peek_char() != ".":
                return ".".join(parts)
            self._next()

    def _parse_class_base_list(self) -> list[str]:
        """Parse bases after ':' up to and including the body's '{'."""
        bases: list[str] = []
        while True:
            bases.append(self._parse_full_type_name())
            tok = self._next()
            if tok.type == TokenType.COMMA:
                continue
            if _is_keyword(tok, "where"):
                self._parse_type_constraints()
                return bases
            if tok.type == TokenType.LBRACE:
                return bases
            raise self._unexpected(tok, "',', 'where' or '{'")

    def _parse_type_constraints(self) -> None:
        """Parse `T : A, B.C<D>, new()` clauses up to and including the '{'."""
        while self._parse_constraint_clause():
            pass

    def _parse_constraint_clause(self) -> bool:
        """Parse one clause after 'where'. Return True if another 'where' follows."""
        self._expect(TokenType.IDENTIFIER)
        self._expect(TokenType.COLON)

        while True:
            self._expect(TokenType.IDENTIFIER)
            tok = self._next()

            while tok.type == TokenType.PERIOD:
                self._expect(TokenType.IDENTIFIER)
                tok = self._next()

            if tok.type == TokenType.LESS:
                self._skip_generic_params()
                tok = self._next()

            # new()
            if tok.type == TokenType.LPAREN:
                self._expect(TokenType.RPAREN)
                tok = self._next()

            if tok.type == TokenType.COMMA:
                continue
            if _is_keyword(tok, "where"):
                return True
            if tok.type == TokenType.LBRACE:
                return False
            raise self._unexpected(tok, "',', 'where' or '{'")

    # ------------------------------------------------------------------
    # Type shapes (consumed, never kept)
    # ------------------------------------------------------------------

    def _skip_type(self, tok: Token) -> Token:
        """Consume the type starting at tok and return the token after it.

        A tok that cannot start a type is returned untouched.
        """
        if tok.type == TokenType.LPAREN:
            self._skip_tuple_params()
            tok = self._next()
        elif tok.type == TokenType.IDENTIFIER:
            tok = self._next()

            # Qualified: System.Collections.IList
            while tok.type == TokenType.PERIOD:
                self._expect(TokenType.IDENTIFIER)
                tok = self._next()

            if tok.type == TokenType.LESS:
                self._skip_generic_params()
                tok = self._next()
        else:
            return tok

        # Array and nullable suffixes: int[], int?[], int[]?
        while tok.type in (TokenType.LBRACKET, TokenType.QUESTION):
            if tok.type == TokenType.LBRACKET:
                closing = self._next()
                if closing.type != TokenType.RBRACKET:
                    raise self._unexpected(closing, "']' after '['")
            tok = self._next()

        return tok

    def _skip_generic_params(self) -> None:
        """Skip the rest of `<...>` after its '<' was consumed.

        Empty slots are allowed, so `<>` and `<,>` pass.
        """
        while True:
            tok = self._skip_type(self._next())
            if tok.type == TokenType.GREATER:
                self._skip_nullable()
                return
            if tok.type != TokenType.COMMA:
                raise self._unexpected(tok, "',' or '>'")

    def _skip_tuple_params(self) -> None:
        """Skip the rest of `(...)` after its '(' was consumed."""
        while True:
            tok = self._next()
            if tok.type not in (TokenType.LPAREN, TokenType.IDENTIFIER):
                raise self._unexpected(tok, "type")
            tok = self._skip_type(tok)

            # Element name: (int count, string label)
            if tok.type == TokenType.IDENTIFIER:
                tok = self._next()

            if tok.type == TokenType.RPAREN:
                self._skip_nullable()
                return
            if tok.type != TokenType.COMMA:
                raise self._unexpected(tok, "',' or ')'")


def parse(source: str, on_generic: GenericSink | None = None) -> list[ClassDecl]:
    """Convenience function: scan source text and return its class declarations."""
    return Parser(source, on_generic).parse()
