"""
ZQC Recursive Descent Parser
============================

This module implements a backtracking recursive descent parser for the
ZQC language. It takes a token stream from the lexer (or the token
loader) and builds an Abstract Syntax Tree (AST).

Grammar (Simplified EBNF)
-------------------------
unit            ::= (declaration | function_def)* EOF
declaration     ::= specifiers (init_decl (',' init_decl)*)? ';'
init_decl       ::= declarator ('=' assignment)?
function_def    ::= specifiers declarator compound
specifiers      ::= ('int' | 'double' | 'char' | 'void')+
declarator      ::= see zqc.frontend.declarator

compound        ::= '{' (declaration | statement)* '}'
statement       ::= if_stmt | while_stmt | return_stmt | break_stmt
                  | continue_stmt | compound | ';' | expr ';'
if_stmt         ::= 'if' '(' expr ')' statement ('else' statement)?
while_stmt      ::= 'while' '(' expr ')' statement
return_stmt     ::= 'return' expr? ';'
break_stmt      ::= 'break' ';'
continue_stmt   ::= 'continue' ';'

Expression Precedence (lowest to highest)
-----------------------------------------
1.  assignment     = += -= *= /=   (right-associative)
2.  logical_or     ||
3.  logical_and    &&
4.  bitwise_or     |
5.  bitwise_xor    ^
6.  bitwise_and    &
7.  equality       == !=
8.  relational     > >= < <=
9.  shift          << >>
10. additive       + -
11. multiplicative * / %
12. cast           '(' specifiers ')' cast
13. unary          ! + -
14. postfix        [] ()
15. primary        IDENTIFIER, constants, STRING, '(' expr ')'

Control Discipline
------------------
Every rule takes a start index and returns a Success or a Failure (see
zqc.frontend.results). Where the grammar has alternatives they are tried
in order from the same start index and the deepest failure is kept.

The compilation unit and every compound statement parse their items in a
recovery loop: when an item cannot be parsed at all its deepest failure
is recorded and parsing resumes at the next synchronization point past
that failure, the token after a ';' or ')' or the first token on a new
line. Inside a block, recovery never skips past the block's own closing
brace.

Example Usage
-------------
>>> from zqc.frontend.lexer import tokenize
>>> from zqc.frontend.parser import Parser
>>> parser = Parser(tokenize('int f(int a) { return a + 1; }'))
>>> unit = parser.parse()
>>> parser.diagnostics.has_errors()
False
"""

import logging
from typing import Optional, Sequence

from zqc.frontend.ast import (
    AssignmentExpression,
    AssignmentOperator,
    BinaryExpression,
    BinaryOperator,
    BreakStatement,
    CallExpression,
    CastExpression,
    CompilationUnit,
    CompoundStatement,
    ContinueStatement,
    Declaration,
    DeclarationRoot,
    EmptyStatement,
    ExpressionStatement,
    FunctionDeclarator,
    IdentifierExpression,
    IfStatement,
    NumberLiteral,
    ArraySubscript,
    ParenthesizedExpression,
    ReturnStatement,
    StringLiteral,
    TokenSpan,
    UnaryExpression,
    UnaryOperator,
    WhileStatement,
)
from zqc.frontend.declarator import DeclaratorResolver
from zqc.frontend.diagnostics import DiagnosticCollector, DiagnosticKind
from zqc.frontend.lexer import decode_literal
from zqc.frontend.options import ParserOptions
from zqc.frontend.results import (
    Failure,
    ParseResult,
    Rule,
    Success,
    deepest,
    expected,
    fail,
    first_of,
)
from zqc.frontend.tokens import Token, TokenKind

logger = logging.getLogger(__name__)


UNARY_OPERATORS = {
    TokenKind.PLUS: UnaryOperator.PLUS,
    TokenKind.MINUS: UnaryOperator.MINUS,
    TokenKind.NOT: UnaryOperator.LOGICAL_NOT,
}

ASSIGNMENT_OPERATORS = {
    TokenKind.ASSIGN: AssignmentOperator.ASSIGN,
    TokenKind.PLUS_ASSIGN: AssignmentOperator.ADD_ASSIGN,
    TokenKind.MINUS_ASSIGN: AssignmentOperator.SUB_ASSIGN,
    TokenKind.STAR_ASSIGN: AssignmentOperator.MUL_ASSIGN,
    TokenKind.SLASH_ASSIGN: AssignmentOperator.DIV_ASSIGN,
}

# Binary operator levels, lowest precedence first
BINARY_LEVELS = (
    {TokenKind.OR: BinaryOperator.LOGICAL_OR},
    {TokenKind.AND: BinaryOperator.LOGICAL_AND},
    {TokenKind.PIPE: BinaryOperator.BIT_OR},
    {TokenKind.CARET: BinaryOperator.BIT_XOR},
    {TokenKind.AMPERSAND: BinaryOperator.BIT_AND},
    {
        TokenKind.EQ: BinaryOperator.EQUAL,
        TokenKind.NE: BinaryOperator.NOT_EQUAL,
    },
    {
        TokenKind.GT: BinaryOperator.GREATER,
        TokenKind.GE: BinaryOperator.GREATER_EQ,
        TokenKind.LT: BinaryOperator.LESS,
        TokenKind.LE: BinaryOperator.LESS_EQ,
    },
    {
        TokenKind.LSHIFT: BinaryOperator.SHIFT_LEFT,
        TokenKind.RSHIFT: BinaryOperator.SHIFT_RIGHT,
    },
    {
        TokenKind.PLUS: BinaryOperator.ADD,
        TokenKind.MINUS: BinaryOperator.SUBTRACT,
    },
    {
        TokenKind.STAR: BinaryOperator.MULTIPLY,
        TokenKind.SLASH: BinaryOperator.DIVIDE,
        TokenKind.PERCENT: BinaryOperator.MODULO,
    },
)

_BINARY_PRECEDENCE = {
    kind: (level, operator)
    for level, operators in enumerate(BINARY_LEVELS)
    for kind, operator in operators.items()
}

_SYNC_AFTER = (TokenKind.SEMICOLON, TokenKind.RPAREN)


class Parser:
    """
    Backtracking recursive descent parser for ZQC.

    Parses a token stream into a CompilationUnit. Syntax errors do not
    stop the parse: they are recorded in ``diagnostics`` and the parser
    resynchronizes, so the returned tree may be partial. Check
    ``diagnostics.has_errors()`` before trusting it.

    Attributes:
        tokens: The token stream, ending with an EOF token
        options: Parser configuration
        diagnostics: Errors and warnings recorded by the last parse
    """

    def __init__(self, tokens: Sequence[Token], options: Optional[ParserOptions] = None):
        """
        Initialize the parser.

        Args:
            tokens: Token stream; the last token must be EOF
            options: Parser configuration (defaults to ParserOptions())

        Raises:
            ValueError: If the stream does not end with an EOF token
        """
        self.tokens = tuple(tokens)
        if not self.tokens or self.tokens[-1].kind != TokenKind.EOF:
            raise ValueError("token stream must end with an EOF token")

        self.options = options or ParserOptions()
        self.eof_index = len(self.tokens) - 1
        self.diagnostics = DiagnosticCollector(
            self.tokens,
            self.options.filename,
            self.options.max_errors,
            self.options.source_lines,
        )
        self.declarators = DeclaratorResolver(self)

        # Expression results by (rule, start index)
        self._memo: dict[tuple[str, int], tuple[ParseResult, Optional[Failure]]] = {}

        self._nesting = 0
        self._nesting_exceeded = False

        # Errors recorded so far along the items being kept
        self._error_count = 0

        # Deepest failure of an alternative that lost to a later success
        self._superseded: Optional[Failure] = None

    def parse(self) -> CompilationUnit:
        """
        Parse the whole token stream.

        Returns:
            CompilationUnit with every declaration that could be parsed
        """
        self.diagnostics.clear()
        self._memo.clear()
        self._superseded = None
        self._error_count = 0

        logger.debug("Parsing %d tokens from %s", len(self.tokens), self.options.filename)
        declarations, _, diagnostics = self._parse_items(
            0,
            self.eof_index,
            (self._parse_declaration, self._parse_function_definition),
            "declaration",
        )
        # A single item can carry several diagnostics past the check
        for diagnostic in diagnostics[:self.options.max_errors]:
            self.diagnostics.add(diagnostic)

        logger.debug(
            "Parsed %d top-level declarations with %d errors",
            len(declarations),
            self.diagnostics.error_count(),
        )
        return CompilationUnit(tuple(declarations), span=self.span(0, self.eof_index))

    # =========================================================================
    # Helpers
    # =========================================================================

    def span(self, start: int, end: int) -> TokenSpan:
        return TokenSpan(start, end)

    def _kind(self, pos: int) -> TokenKind:
        return self.tokens[min(pos, self.eof_index)].kind

    def _expect(self, pos: int, kind: TokenKind) -> ParseResult:
        """Match a single token of the given kind."""
        if self._kind(pos) == kind:
            return Success(self.tokens[pos], pos + 1)
        return expected(pos, kind)

    def _note(self, failure: Failure) -> None:
        """Remember a failure that lost to a later successful alternative."""
        if self._superseded is None:
            self._superseded = failure
        else:
            self._superseded = deepest(self._superseded, failure)

    def _first_of(self, start: int, *alternatives: Rule) -> ParseResult:
        return first_of(start, *alternatives, on_superseded=self._note)

    def _expected_at(self, start: int, failure: Failure, description: str) -> Failure:
        """Replace a failure that consumed nothing with a plainer message."""
        if failure.depth <= start and failure.kind != DiagnosticKind.NESTING_TOO_DEEP:
            return expected(start, description)
        return failure

    def guarded(self, start: int, compute: Rule) -> ParseResult:
        """
        Run a recursive rule, failing once nesting passes max_nesting.

        A limit set higher than the interpreter stack allows ends the same
        way: the RecursionError is caught by the innermost guarded rule
        that still has room to build the failure.
        """
        if self._nesting >= self.options.max_nesting:
            return self._too_deep(start, self.options.max_nesting)
        self._nesting += 1
        try:
            return compute(start)
        except RecursionError:
            logger.debug("Interpreter stack exhausted at nesting level %d", self._nesting)
            return self._too_deep(start, self._nesting - 1)
        finally:
            self._nesting -= 1

    def _too_deep(self, start: int, levels: int) -> Failure:
        self._nesting_exceeded = True
        return fail(
            DiagnosticKind.NESTING_TOO_DEEP,
            start,
            detail=f"nesting deeper than {levels} levels",
        )

    def _memoized(self, rule: str, start: int, compute: Rule) -> ParseResult:
        """
        Run a guarded rule at most once per start index.

        Alternatives retry the same expression prefixes, so without this
        nested parentheses would be parsed exponentially many times.
        Results that hit the nesting limit depend on the current depth
        and are not cached.
        """
        key = (rule, start)
        cached = self._memo.get(key)
        if cached is not None:
            result, superseded = cached
            if superseded is not None:
                self._note(superseded)
            return result

        outer_superseded = self._superseded
        outer_exceeded = self._nesting_exceeded
        self._superseded = None
        self._nesting_exceeded = False

        try:
            result = self.guarded(start, compute)
        finally:
            superseded = self._superseded
            exceeded = self._nesting_exceeded
            self._superseded = outer_superseded
            self._nesting_exceeded = outer_exceeded or exceeded
        if superseded is not None:
            self._note(superseded)
        if not exceeded:
            self._memo[key] = (result, superseded)
        return result

    # =========================================================================
    # Error Recovery
    # =========================================================================

    def _parse_items(
        self,
        pos: int,
        limit: int,
        alternatives: tuple[Rule, ...],
        description: str,
    ) -> tuple[list, int, list]:
        """
        Parse items up to ``limit``, recovering from items that fail.

        The error limit counts every diagnostic kept so far in the whole
        parse, so sibling blocks share it.

        Returns:
            (items, end index, recorded diagnostics in source order)
        """
        items = []
        diagnostics = []

        while pos < limit:
            if self.diagnostics.should_stop(self._error_count):
                logger.debug("Error limit reached, skipping tokens %d to %d", pos, limit)
                pos = limit
                break

            recorded = self._error_count
            outer_superseded = self._superseded
            self._superseded = None
            result = self._first_of(pos, *alternatives)
            superseded = self._superseded
            self._superseded = outer_superseded

            if result.ok:
                items.append(result.node)
                diagnostics.extend(result.diagnostics)
                # Blocks inside failed alternatives counted errors that were dropped
                self._error_count = recorded + len(result.diagnostics)
                pos = result.end
                continue

            if superseded is not None and result.kind != DiagnosticKind.NESTING_TOO_DEEP:
                result = deepest(result, superseded)
            result = self._expected_at(pos, result, description)
            diagnostics.append(result.diagnostic)
            self._error_count = recorded + 1

            resume = self._synchronize(pos, result.depth, limit)
            logger.debug(
                "Recovered from %s at token %d, skipping tokens %d to %d",
                result.kind.value,
                result.diagnostic.position,
                pos,
                resume,
            )
            pos = resume

        return items, pos, diagnostics

    def _synchronize(self, start: int, failed_at: int, limit: int) -> int:
        """
        Find where to resume after an item starting at ``start`` failed.

        Returns the first synchronization point past ``start`` and not
        before ``failed_at``: a token just after a ';' or ')', or the
        first token of a new source line. Never goes past ``limit``.
        """
        pos = max(failed_at, start + 1)
        while pos < limit:
            previous = self.tokens[pos - 1]
            if previous.kind in _SYNC_AFTER or self.tokens[pos].line != previous.line:
                break
            pos += 1
        return min(pos, limit)

    def _matching_brace(self, open_index: int) -> int:
        """Index of the '}' closing the '{' at open_index, or the EOF index."""
        depth = 0
        for pos in range(open_index, self.eof_index):
            kind = self.tokens[pos].kind
            if kind == TokenKind.LBRACE:
                depth += 1
            elif kind == TokenKind.RBRACE:
                depth -= 1
                if depth == 0:
                    return pos
        return self.eof_index

    # =========================================================================
    # Declarations
    # =========================================================================

    def parse_specifiers(self, start: int) -> ParseResult:
        """Parse one or more declaration specifier keywords."""
        pos = start
        while self.tokens[pos].is_type_specifier():
            pos += 1
        if pos == start:
            return expected(start, "type specifier")
        return Success(self.tokens[start:pos], pos)

    def _parse_declaration(self, start: int) -> ParseResult:
        """
        Parse a declaration.

        Examples:
            int;
            int a;
            double x = 1.5, y, table[10];
            int f(int a, char b);
        """
        specifiers = self.parse_specifiers(start)
        if not specifiers.ok:
            return specifiers
        pos = specifiers.end

        declarators = []
        initializers = []
        if self._kind(pos) != TokenKind.SEMICOLON:
            while True:
                declarator = self.declarators.parse(pos)
                if not declarator.ok:
                    return declarator
                declarators.append(declarator.node)
                pos = declarator.end

                if self._kind(pos) == TokenKind.ASSIGN:
                    value = self._parse_assignment(pos + 1)
                    if not value.ok:
                        return value
                    initializers.append(value.node)
                    pos = value.end
                else:
                    initializers.append(None)

                if self._kind(pos) != TokenKind.COMMA:
                    break
                pos += 1

        root = DeclarationRoot(
            specifiers.node,
            tuple(declarators),
            tuple(initializers),
            span=self.span(start, pos),
        )
        semicolon = self._expect(pos, TokenKind.SEMICOLON)
        if not semicolon.ok:
            return semicolon
        return Success(Declaration(root, span=self.span(start, semicolon.end)), semicolon.end)

    def _parse_function_definition(self, start: int) -> ParseResult:
        """Parse a function definition: specifiers, function declarator, body."""
        specifiers = self.parse_specifiers(start)
        if not specifiers.ok:
            return specifiers

        declarator = self.declarators.parse(specifiers.end)
        if not declarator.ok:
            return declarator
        if not isinstance(declarator.node, FunctionDeclarator):
            return fail(
                DiagnosticKind.INVALID_DECLARATOR,
                specifiers.end,
                detail="function definition requires a function declarator",
            )

        body = self._parse_compound(declarator.end)
        if not body.ok:
            return body

        root = DeclarationRoot(
            specifiers.node,
            (declarator.node,),
            (None,),
            span=self.span(start, declarator.end),
        )
        return Success(
            Declaration(root, body.node, span=self.span(start, body.end)),
            body.end,
            body.diagnostics,
        )

    # =========================================================================
    # Statements
    # =========================================================================

    def _parse_compound(self, start: int) -> ParseResult:
        """
        Parse a brace-enclosed block.

        Items that fail are recovered inside the block. A block whose
        closing brace is missing at the end of input is still built, with
        a diagnostic.
        """
        opening = self._expect(start, TokenKind.LBRACE)
        if not opening.ok:
            return opening

        limit = self._matching_brace(start)
        items, pos, diagnostics = self._parse_items(
            start + 1,
            limit,
            (self._parse_declaration, self._parse_statement),
            "declaration or statement",
        )

        if self._kind(pos) == TokenKind.RBRACE:
            end = pos + 1
        else:
            diagnostics.append(expected(pos, TokenKind.RBRACE).diagnostic)
            end = pos

        return Success(
            CompoundStatement(tuple(items), span=self.span(start, end)),
            end,
            tuple(diagnostics),
        )

    def _parse_statement(self, start: int) -> ParseResult:
        return self.guarded(start, self._statement)

    def _statement(self, start: int) -> ParseResult:
        result = self._first_of(
            start,
            self._parse_if,
            self._parse_while,
            self._parse_return,
            self._parse_break,
            self._parse_continue,
            self._parse_compound,
            self._parse_empty,
            self._parse_expression_statement,
        )
        if result.ok:
            return result
        return self._expected_at(start, result, "statement")

    def _parse_condition(self, start: int) -> ParseResult:
        """Parse '(' expression ')'."""
        opening = self._expect(start, TokenKind.LPAREN)
        if not opening.ok:
            return opening
        condition = self.parse_expression(opening.end)
        if not condition.ok:
            return condition
        closing = self._expect(condition.end, TokenKind.RPAREN)
        if not closing.ok:
            return closing
        return Success(condition.node, closing.end)

    def _parse_if(self, start: int) -> ParseResult:
        keyword = self._expect(start, TokenKind.IF)
        if not keyword.ok:
            return keyword
        condition = self._parse_condition(keyword.end)
        if not condition.ok:
            return condition
        then_branch = self._parse_statement(condition.end)
        if not then_branch.ok:
            return then_branch

        pos = then_branch.end
        diagnostics = then_branch.diagnostics
        else_branch = None
        if self._kind(pos) == TokenKind.ELSE:
            result = self._parse_statement(pos + 1)
            if not result.ok:
                return result
            else_branch = result.node
            diagnostics += result.diagnostics
            pos = result.end

        node = IfStatement(
            condition.node,
            then_branch.node,
            else_branch,
            span=self.span(start, pos),
        )
        return Success(node, pos, diagnostics)

    def _parse_while(self, start: int) -> ParseResult:
        keyword = self._expect(start, TokenKind.WHILE)
        if not keyword.ok:
            return keyword
        condition = self._parse_condition(keyword.end)
        if not condition.ok:
            return condition
        body = self._parse_statement(condition.end)
        if not body.ok:
            return body
        node = WhileStatement(condition.node, body.node, span=self.span(start, body.end))
        return Success(node, body.end, body.diagnostics)

    def _parse_return(self, start: int) -> ParseResult:
        """
        Parse a return statement.

        A value followed by anything but ';' still yields a ReturnStatement,
        carrying the missing-semicolon diagnostic with it.
        """
        keyword = self._expect(start, TokenKind.RETURN)
        if not keyword.ok:
            return keyword
        if self._kind(keyword.end) == TokenKind.SEMICOLON:
            end = keyword.end + 1
            return Success(ReturnStatement(span=self.span(start, end)), end)

        value = self.parse_expression(keyword.end)
        if not value.ok:
            return value
        if self._kind(value.end) == TokenKind.SEMICOLON:
            end = value.end + 1
            return Success(ReturnStatement(value.node, span=self.span(start, end)), end)

        missing = expected(value.end, TokenKind.SEMICOLON)
        node = ReturnStatement(value.node, span=self.span(start, value.end))
        return Success(node, value.end, (missing.diagnostic,))

    def _parse_keyword_statement(self, start: int, kind: TokenKind, node_class) -> ParseResult:
        keyword = self._expect(start, kind)
        if not keyword.ok:
            return keyword
        semicolon = self._expect(keyword.end, TokenKind.SEMICOLON)
        if not semicolon.ok:
            return semicolon
        return Success(node_class(span=self.span(start, semicolon.end)), semicolon.end)

    def _parse_break(self, start: int) -> ParseResult:
        return self._parse_keyword_statement(start, TokenKind.BREAK, BreakStatement)

    def _parse_continue(self, start: int) -> ParseResult:
        return self._parse_keyword_statement(start, TokenKind.CONTINUE, ContinueStatement)

    def _parse_empty(self, start: int) -> ParseResult:
        semicolon = self._expect(start, TokenKind.SEMICOLON)
        if not semicolon.ok:
            return semicolon
        return Success(EmptyStatement(span=self.span(start, semicolon.end)), semicolon.end)

    def _parse_expression_statement(self, start: int) -> ParseResult:
        expression = self.parse_expression(start)
        if not expression.ok:
            return expression
        semicolon = self._expect(expression.end, TokenKind.SEMICOLON)
        if not semicolon.ok:
            return semicolon
        node = ExpressionStatement(expression.node, span=self.span(start, semicolon.end))
        return Success(node, semicolon.end)

    # =========================================================================
    # Expressions
    # =========================================================================

    def parse_expression(self, start: int) -> ParseResult:
        """Parse a full expression (an assignment expression)."""
        return self._parse_assignment(start)

    def _parse_assignment(self, start: int) -> ParseResult:
        return self._memoized("assignment", start, self._assignment)

    def _assignment(self, start: int) -> ParseResult:
        return self._first_of(start, self._assignment_form, self._parse_logical_or)

    def _assignment_form(self, start: int) -> ParseResult:
        """Parse unary assignment-operator assignment (right-associative)."""
        target = self._parse_unary(start)
        if not target.ok:
            return target
        operator = ASSIGNMENT_OPERATORS.get(self._kind(target.end))
        if operator is None:
            return expected(target.end, "assignment operator")
        value = self._parse_assignment(target.end + 1)
        if not value.ok:
            return value
        node = AssignmentExpression(
            operator,
            target.node,
            value.node,
            span=self.span(start, value.end),
        )
        return Success(node, value.end)

    def _parse_logical_or(self, start: int) -> ParseResult:
        return self._parse_binary(start, 0)

    def _parse_binary(self, start: int, min_level: int) -> ParseResult:
        """
        Parse the binary levels from ``min_level`` upward.

        Each right operand is parsed one level higher than its operator,
        so every level folds to the left.
        """
        result = self._parse_cast(start)
        if not result.ok:
            return result
        left, pos = result.node, result.end

        while self._kind(pos) in _BINARY_PRECEDENCE:
            level, operator = _BINARY_PRECEDENCE[self._kind(pos)]
            if level < min_level:
                break
            right = self._parse_binary(pos + 1, level + 1)
            if not right.ok:
                return right
            left = BinaryExpression(operator, left, right.node, span=self.span(start, right.end))
            pos = right.end

        return Success(left, pos)

    def _parse_cast(self, start: int) -> ParseResult:
        return self._memoized("cast", start, self._cast)

    def _cast(self, start: int) -> ParseResult:
        if self._kind(start) == TokenKind.LPAREN and self.tokens[start + 1].is_type_specifier():
            return self._first_of(start, self._cast_form, self._parse_unary)
        return self._parse_unary(start)

    def _cast_form(self, start: int) -> ParseResult:
        """Parse '(' specifiers ')' cast."""
        specifiers = self.parse_specifiers(start + 1)
        if not specifiers.ok:
            return specifiers
        closing = self._expect(specifiers.end, TokenKind.RPAREN)
        if not closing.ok:
            return closing
        operand = self._parse_cast(closing.end)
        if not operand.ok:
            return operand
        node = CastExpression(specifiers.node, operand.node, span=self.span(start, operand.end))
        return Success(node, operand.end)

    def _parse_unary(self, start: int) -> ParseResult:
        return self._memoized("unary", start, self._unary)

    def _unary(self, start: int) -> ParseResult:
        operator = UNARY_OPERATORS.get(self._kind(start))
        if operator is None:
            return self._parse_postfix(start)
        operand = self._parse_cast(start + 1)
        if not operand.ok:
            return operand
        node = UnaryExpression(operator, operand.node, span=self.span(start, operand.end))
        return Success(node, operand.end)

    def _parse_postfix(self, start: int) -> ParseResult:
        """Parse a primary followed by any chain of [index] and (arguments)."""
        result = self._parse_primary(start)
        if not result.ok:
            return result
        node, pos = result.node, result.end

        while True:
            kind = self._kind(pos)
            if kind == TokenKind.LBRACKET:
                index = self.parse_expression(pos + 1)
                if not index.ok:
                    return index
                closing = self._expect(index.end, TokenKind.RBRACKET)
                if not closing.ok:
                    return closing
                pos = closing.end
                node = ArraySubscript(node, index.node, span=self.span(start, pos))
            elif kind == TokenKind.LPAREN:
                arguments = self._parse_arguments(pos)
                if not arguments.ok:
                    return arguments
                pos = arguments.end
                node = CallExpression(node, arguments.node, span=self.span(start, pos))
            else:
                return Success(node, pos)

    def _parse_arguments(self, open_index: int) -> ParseResult:
        """Parse a parenthesized, comma-separated argument list."""
        pos = open_index + 1
        if self._kind(pos) == TokenKind.RPAREN:
            return Success((), pos + 1)

        arguments = []
        while True:
            argument = self._parse_assignment(pos)
            if not argument.ok:
                return argument
            arguments.append(argument.node)
            pos = argument.end

            kind = self._kind(pos)
            if kind == TokenKind.RPAREN:
                return Success(tuple(arguments), pos + 1)
            if kind != TokenKind.COMMA:
                return expected(pos, TokenKind.RPAREN, TokenKind.COMMA)
            pos += 1

    def _parse_primary(self, start: int) -> ParseResult:
        token = self.tokens[start]
        span = self.span(start, start + 1)

        if token.kind == TokenKind.IDENTIFIER:
            return Success(IdentifierExpression(token.lexeme, span=span), start + 1)

        if token.kind in (TokenKind.INTEGER_CONSTANT, TokenKind.DOUBLE_CONSTANT, TokenKind.CHAR_CONSTANT):
            value = self._number_value(token)
            if value is None:
                return fail(
                    DiagnosticKind.EXPECTED_EXPRESSION,
                    start,
                    detail=f"invalid numeric constant '{token.lexeme}'",
                )
            return Success(NumberLiteral(value, span=span), start + 1)

        if token.kind == TokenKind.STRING:
            return Success(StringLiteral(decode_literal(token.lexeme), span=span), start + 1)

        if token.kind == TokenKind.LPAREN:
            inner = self.parse_expression(start + 1)
            if not inner.ok:
                return inner
            closing = self._expect(inner.end, TokenKind.RPAREN)
            if not closing.ok:
                return closing
            node = ParenthesizedExpression(inner.node, span=self.span(start, closing.end))
            return Success(node, closing.end)

        return fail(DiagnosticKind.EXPECTED_EXPRESSION, start)

    @staticmethod
    def _number_value(token: Token) -> Optional[float]:
        """Numeric value of a constant token, or None if it does not parse."""
        lexeme = token.lexeme
        try:
            if token.kind == TokenKind.CHAR_CONSTANT:
                text = decode_literal(lexeme)
                return float(ord(text[0])) if text else 0.0
            if token.kind == TokenKind.INTEGER_CONSTANT:
                if lexeme[:2] in ("0x", "0X"):
                    return float(int(lexeme[2:], 16))
                return float(int(lexeme, 10))
            return float(lexeme)
        except ValueError:
            return None

