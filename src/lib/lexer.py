"""
Structural Pygments lexer for the declaration language

Tokenizes the restricted grammar subset the scanner and rewriters need to
reason about structure: comments, string and template literals, brackets,
operators, keywords and names. The helpers below locate braces, colons,
commas and assignment operators by token, so punctuation inside strings,
template literals and comments is never mistaken for structure.

Token types:
- Comment: // line comments and /* block */ comments
- String: quoted strings, whole `template ${literals}` and /regex/ literals
- Punctuation: { } ( ) [ ]
- Operator: => = : ; , | & ? < > and friends
- Keyword: export, import, const, interface, type, function, ...
- Name / Number: identifiers and numeric literals
"""

from bisect import bisect_right
from typing import Any, Iterable, Iterator, List, Tuple

from pygments.lexer import RegexLexer, bygroups, words
from pygments.token import (
    Text,
    Whitespace,
    Punctuation,
    Operator,
    Name,
    String,
    Keyword,
    Number,
    Comment,
)


OPENERS = '{(['
CLOSERS = '})]'

# Tokens after which a '{' opens an object type rather than a function body
TYPE_POSITION = {':', '|', '&', '<', ',', '=>', '=', '?', 'keyof', 'typeof', 'extends', 'is'}

# /pattern/flags; never starts like a comment, character classes may hold '/'
REGEX_LITERAL = r'(/(?![*/])(?:\\.|\[(?:\\.|[^\]\\\n])*\]|[^/\\\n\[])+/[a-zA-Z]*)'


class DeclarationLexer(RegexLexer):
    """
    Lexer for the declaration language structure

    Example:
        export const url = 'http://host:80/{id}'

    Tokens:
        export → Keyword
        const → Keyword
        url → Name
        = → Operator
        'http://host:80/{id}' → String (braces and colons inside are inert)
    """

    name = 'TSDeclare'
    aliases = ['tsdeclare']
    filenames = ['*.ts', '*.mts', '*.cts']

    tokens = {
        'root': [
            # Comments
            (r'/\*[\s\S]*?\*/', Comment.Multiline),
            (r'/\*[\s\S]*', Comment.Multiline),  # unterminated
            (r'//[^\n]*', Comment.Single),

            # Strings
            (r'"(\\\\|\\[^\\]|[^"\\\n])*"', String.Double),
            (r"'(\\\\|\\[^\\]|[^'\\\n])*'", String.Single),
            (r'`', String.Backtick, 'template'),

            # Regular expression literals, only where an operand is expected
            (r'([{(\[])(\s*)' + REGEX_LITERAL, bygroups(Punctuation, Whitespace, String.Regex)),
            (r'(=>|===?|!==?|&&|\|\||\?\?|[,=:;!&|?])(\s*)' + REGEX_LITERAL,
             bygroups(Operator, Whitespace, String.Regex)),
            (r'(?<![\w$])(return|typeof|case)(\s*)' + REGEX_LITERAL,
             bygroups(Name, Whitespace, String.Regex)),

            # Brackets
            (r'[{(\[]', Punctuation),
            (r'[})\]]', Punctuation),

            # Multi-character operators before single characters
            (r'=>|===?|!==?|<=|>=|&&|\|\||\?\?|\.\.\.', Operator),
            (r'[:;,=?|&<>!+\-*/%.~^@#]', Operator),

            (words((
                'export', 'import', 'declare', 'const', 'let', 'var', 'enum',
                'interface', 'type', 'function', 'async', 'default', 'from',
                'as', 'extends', 'keyof', 'typeof', 'infer', 'readonly', 'is',
            ), prefix=r'(?<![\w$])', suffix=r'(?![\w$])'), Keyword),

            (r'[A-Za-z_$][\w$]*', Name),
            (r'\d[\w.]*', Number),

            (r'\s+', Whitespace),
            (r'.', Text),
        ],

        'template': [
            (r'`', String.Backtick, '#pop'),
            (r'\\[\s\S]', String.Escape),
            (r'\$\{', String.Interpol, 'interpolation'),
            (r'[^`\\$]+', String.Backtick),
            (r'\$', String.Backtick),
        ],

        'interpolation': [
            # Everything up to the closing brace belongs to the literal
            (r'\}', String.Interpol, '#pop'),
            (r'[^}]+', String.Interpol),
        ],
    }


_lexer = DeclarationLexer()


def tokens_get(text: str) -> List[Tuple[int, Any, str]]:
    """
    Tokenize text keeping character offsets.

    Args:
        text: Declaration source fragment (one or more lines)

    Returns:
        List of (offset, tokentype, value) triples covering the whole text
    """
    return list(_lexer.get_tokens_unprocessed(text))


def token_isInert(tokentype: Any) -> bool:
    """True for tokens that never carry structure (strings, comments, whitespace)"""
    return tokentype in String or tokentype in Comment or tokentype in Whitespace


def braces_balance(text: str) -> int:
    """
    Count '{' minus '}' outside strings and comments.

    Example:
        braces_balance("key: '{', nested: {") → 1
    """
    balance = 0
    for _, tokentype, value in tokens_get(text):
        if tokentype in Punctuation:
            if value == '{':
                balance += 1
            elif value == '}':
                balance -= 1
    return balance


def brackets_balance(text: str) -> int:
    """Count openers minus closers over braces, parentheses and square brackets"""
    balance = 0
    for _, tokentype, value in tokens_get(text):
        if tokentype in Punctuation:
            balance += 1 if value in OPENERS else -1
    return balance


def toplevel_find(text: str, target: str, start: int = 0, angles: bool = False) -> int:
    """
    Find the first structural token equal to target at nesting depth zero.

    Args:
        text: Fragment to search
        target: Exact token value (e.g. ':', '=', '{', ',')
        start: Ignore matches before this offset
        angles: Treat '<' and '>' as nesting (use inside type annotations)

    Returns:
        Offset of the token, or -1 if not found

    Example:
        toplevel_find("fn: (a: string) => void = x", '=', angles=True) → 24
    """
    depth = 0
    for pos, tokentype, value in tokens_get(text):
        if token_isInert(tokentype):
            continue
        if depth == 0 and pos >= start and value == target:
            return pos
        if tokentype in Punctuation:
            depth += 1 if value in OPENERS else -1
        elif angles and tokentype in Operator:
            if value == '<':
                depth += 1
            elif value == '>' and depth > 0:
                depth -= 1
    return -1


def toplevel_split(text: str, separator: str, angles: bool = False) -> List[str]:
    """
    Split text on separator tokens at nesting depth zero.

    Returns:
        Stripped, non-empty parts in source order

    Example:
        toplevel_split("a: 1, b: [1, 2], c: 'x,y'", ',') → ['a: 1', 'b: [1, 2]', "c: 'x,y'"]
    """
    parts = []
    depth = 0
    last = 0
    for pos, tokentype, value in tokens_get(text):
        if token_isInert(tokentype):
            continue
        if depth == 0 and value == separator:
            parts.append(text[last:pos])
            last = pos + len(value)
            continue
        if tokentype in Punctuation:
            depth += 1 if value in OPENERS else -1
        elif angles and tokentype in Operator:
            if value == '<':
                depth += 1
            elif value == '>' and depth > 0:
                depth -= 1
    parts.append(text[last:])
    return [part.strip() for part in parts if part.strip()]


def bodyBrace_find(text: str) -> int:
    """
    Locate the opening brace of a function body.

    The body brace is the first '{' at depth zero after the parameter list
    has closed whose preceding token does not put it in a type position.
    Generic parameters, destructured parameters and object return types are
    skipped.

    Returns:
        Offset of the body brace, or -1 for a bodiless signature

    Example:
        bodyBrace_find("function f({ a }: O): { b: 1 } {") → 31
    """
    depth = 0
    params_closed = False
    previous = ''
    for pos, tokentype, value in tokens_get(text):
        if token_isInert(tokentype) and tokentype not in String:
            continue
        if tokentype in Punctuation:
            if value == '{' and depth == 0 and params_closed and previous not in TYPE_POSITION:
                return pos
            if value in OPENERS:
                depth += 1
            else:
                depth -= 1
                if value == ')' and depth == 0:
                    params_closed = True
        elif tokentype in Operator:
            if value == '<':
                depth += 1
            elif value == '>' and depth > 0:
                depth -= 1
        previous = value
    return -1


def lines_nest(lines: Iterable[str], level: int = 1) -> Iterator[Tuple[int, str]]:
    """
    Pair each stripped, non-blank line with its nesting level.

    The lines are tokenized together, so brackets inside a block comment or
    other literal spanning several lines never change the depth. A line that
    starts with a structural closer sits one level above the running depth,
    so closing braces line up with the line that opened them.

    Args:
        lines: Raw body lines
        level: Nesting level of the first line

    Yields:
        (level, stripped_line)
    """
    body = [line.strip() for line in lines if line.strip()]

    starts = []
    offset = 0
    for text in body:
        starts.append(offset)
        offset += len(text) + 1

    deltas = [0] * len(body)
    closes = [False] * len(body)
    for pos, tokentype, value in tokens_get('\n'.join(body)):
        if tokentype not in Punctuation:
            continue
        index = bisect_right(starts, pos) - 1
        deltas[index] += 1 if value in OPENERS else -1
        if value in CLOSERS and pos == starts[index]:
            closes[index] = True

    depth = level
    for text, delta, closing in zip(body, deltas, closes):
        yield max(depth - 1 if closing else depth, 0), text
        depth += delta
