import functools
import re

from lark import Lark
from lark.exceptions import UnexpectedInput

from moho.error import TokenizerError


GRAMMAR = r'''moho: class_decl*

class_decl: [properties] KW_CLASS IDENTIFIER [inheritance] "{" body "}"
inheritance: ":" IDENTIFIER ("," IDENTIFIER)*

body: declaration*
declaration: properties* (field_decl | method_decl | block_decl)
block_decl: "{" body "}"

field_decl: [KW_STATIC] type_spelling IDENTIFIER ["=" value] ";"
method_decl: [KW_STATIC] type_spelling IDENTIFIER "(" [arguments] ")" ";"

arguments: argument ("," argument)*
argument: [properties] type_spelling IDENTIFIER ["=" value]


type_spelling: [KW_CONST] type_decl

?type_decl: type_name
    | pointer_type
    | double_pointer_type
    | reference_type
    | array_type
    | matrix_type

type_name: IDENTIFIER ("::" IDENTIFIER)*
pointer_type: type_decl "*"
double_pointer_type: type_decl "**"
reference_type: type_decl "&"
array_type: type_decl "[" "]"
matrix_type: MATRIX_OPEN type_decl ">"


properties: "[" property ("," property)* "]"
property: [KW_META] IDENTIFIER ["=" value]

value: BOOL | CHAR | FLOAT | INTEGER | STRING | KW_NULLPTR


KW_CLASS: "class"
KW_STATIC: "static"
KW_CONST: "const"
KW_META: "meta"
// Only `Matrix<` is reserved, a bare `Matrix` is still a class name.
MATRIX_OPEN.2: /Matrix[ \t\r\n]*</
KW_NULLPTR: "nullptr"

BOOL: "true" | "false"

IDENTIFIER: /[A-Za-z_][A-Za-z0-9_]*/

CHAR: /'[^'\n]*'/
FLOAT.2: /-?[0-9]+\.[0-9]+/
INTEGER: /-?[0-9]+/
STRING: /"(?:[^"\\\n]|\\.)*"/


%ignore COMMENT
COMMENT: /\/\/[^\n]*/

%ignore BLOCK_COMMENT
BLOCK_COMMENT: /\/\*(.|\n)*?\*\//

%import common.WS
%ignore WS
'''

START_RULES = ('moho', 'class_decl', 'properties', 'property', 'body', 'declaration',
               'field_decl', 'method_decl', 'type_decl', 'value')

PRIMITIVE_KEYWORDS = ('bool', 'char', 'float', 'double', 'int', 'long', 'string')

# Same text as the COMMENT and BLOCK_COMMENT terminals.
COMMENT_PATTERN = re.compile(r'\/\/[^\n]*|\/\*(?:.|\n)*?\*\/')


@functools.lru_cache(maxsize=None)
def get_parser(debug=False) -> Lark:
    return Lark(GRAMMAR, start=list(START_RULES), debug=debug, parser='lalr', lexer='contextual',
                propagate_positions=True, maybe_placeholders=True)


def tokenize(text: str, start='moho', debug=False):
    """Run the grammar over ``text`` and return the raw parse tree.

    Anything the grammar rejects is reported as a TokenizerError carrying
    the line and column lark stopped at.
    """
    if start not in START_RULES:
        raise ValueError('unknown start rule {!r}'.format(start))

    try:
        return get_parser(debug).parse(text, start=start)
    except UnexpectedInput as e:
        line, column = e.line, e.column
        if line is None or line < 0:
            # Reported against end of input
            lines = text.split('\n')
            line, column = len(lines), len(lines[-1]) + 1
            message = '{}: unexpected end of input'.format(e.__class__.__name__)
        else:
            message = '{}\n{}'.format(e.__class__.__name__, e.get_context(text).rstrip())
        raise TokenizerError(message, line, column) from e
