from dataclasses import dataclass, replace

from lark import Tree, Token, v_args
from lark.visitors import Transformer_NonRecursive
from lark.exceptions import VisitError

from moho.objects import *

from moho.error import (MohoParseError, Span, ParsePropertyError, ParseValueError, ParseClassError,
                        DeclarationError, ParseFieldError, ParseArgumentError)
from moho.grammar import COMMENT_PATTERN, tokenize


BOOL_LITERALS = {'true': True, 'false': False}


@dataclass(frozen=True)
class TypeSpelling:
    # Raw source text of a type, as written, plus its resolved form.
    text: str
    typ: Type
    is_const: bool


class MohoTransformer(Transformer_NonRecursive):
    # Non-recursive so deeply nested blocks cannot exhaust the interpreter stack.

    def __init__(self, text):
        Transformer_NonRecursive.__init__(self, visit_tokens=False)

        self.text = text

    def span(self, meta):
        return Span.from_meta(meta, self.text)

    def moho(self, args):
        return TranslationUnit(tuple(args))

    @v_args(meta=True)
    def class_decl(self, meta, args):
        name = None
        inherit = ()
        properties = ()
        declarations = ()

        while args:
            v = args.pop(0)
            if v is None:
                continue

            if isinstance(v, Tree):
                if v.data == 'properties':
                    properties = tuple(v.children)
                    continue
                if v.data == 'inheritance':
                    inherit = tuple(v.children)
                    continue
                if v.data == 'body':
                    declarations = tuple(v.children)
                    continue

            if isinstance(v, Token):
                if v.type == 'KW_CLASS':
                    continue
                if v.type == 'IDENTIFIER':
                    name = v.value
                    continue

            raise ParseClassError('Cannot parse %r in class.' % (v,), self.span(meta))

        if not name:
            raise ParseClassError('Class name missing.', self.span(meta))

        return Class(name, inherit, Block((), declarations), properties)

    def inheritance(self, args):
        # Order is significant: the first entry is the primary base.
        return Tree('inheritance', [arg.value for arg in args])

    def body(self, args):
        return Tree('body', args)

    @v_args(meta=True)
    def declaration(self, meta, args):
        decl = args[-1]

        if not isinstance(decl, (Block, Field, Method)):
            raise DeclarationError('Unexpected token %r in block.' % (decl,), self.span(meta))

        properties = ()
        for prop_list in args[:-1]:
            properties += tuple(prop_list.children)

        if not properties:
            return decl

        return replace(decl, properties=properties + decl.properties)

    @v_args(meta=True)
    def block_decl(self, meta, args):
        body = args[0]
        if not isinstance(body, Tree) or body.data != 'body':
            raise DeclarationError('Malformed block.', self.span(meta))

        return Block((), tuple(body.children))

    @v_args(meta=True)
    def field_decl(self, meta, args):
        static, spelling, identifier, value = args

        if not isinstance(spelling, TypeSpelling):
            raise ParseFieldError('Cannot parse %r in field.' % (spelling,), self.span(meta))

        if spelling.is_const:
            raise ParseFieldError('Qualifier on field %s is not supported.' % identifier, self.span(meta))

        return Field(identifier.value, spelling.typ, value, is_static=static is not None)

    @v_args(meta=True)
    def method_decl(self, meta, args):
        static, spelling, identifier, arguments = args

        if not isinstance(spelling, TypeSpelling):
            raise DeclarationError('Cannot parse %r in method.' % (spelling,), self.span(meta))

        arguments = tuple(arguments.children) if arguments is not None else ()
        return Method(identifier.value, spelling.text, arguments, is_static=static is not None)

    def arguments(self, args):
        return Tree('arguments', args)

    @v_args(meta=True)
    def argument(self, meta, args):
        properties, spelling, identifier, value = args

        if not isinstance(spelling, TypeSpelling) or not isinstance(identifier, Token):
            raise ParseArgumentError('Cannot parse argument.', self.span(meta))

        properties = tuple(properties.children) if properties is not None else ()
        return Argument(identifier.value, spelling.text, value, properties)

    @v_args(meta=True)
    def type_spelling(self, meta, args):
        qualifier, typ = args

        # Only tokens remain: comments are dropped and whitespace collapsed.
        raw = COMMENT_PATTERN.sub(' ', self.text[meta.start_pos:meta.end_pos])
        text = ' '.join(raw.split())
        return TypeSpelling(text, typ, qualifier is not None)

    def type_name(self, args):
        return type_from_name('::'.join(arg.value for arg in args))

    def pointer_type(self, args):
        return PointerType(args[-1], 1)

    def double_pointer_type(self, args):
        return PointerType(args[-1], 2)

    def reference_type(self, args):
        return ReferenceType(args[-1])

    def array_type(self, args):
        return ArrayType(args[-1])

    def matrix_type(self, args):
        return MatrixType(args[-1])

    def properties(self, args):
        return Tree('properties', args)

    @v_args(meta=True)
    def property(self, meta, args):
        meta_marker, identifier, value = args

        if not isinstance(identifier, Token) or identifier.type != 'IDENTIFIER':
            raise ParsePropertyError('Expected property name', self.span(meta))

        return Property(identifier.value, value, meta=meta_marker is not None)

    def value(self, args):
        token = args[0]
        try:
            if token.type == 'BOOL':
                return Value.boolean(BOOL_LITERALS[token.value])
            if token.type == 'CHAR':
                return Value.char(int(token.value[1:-1], 10))
            if token.type == 'INTEGER':
                return Value.integer(int(token.value, 10))
            if token.type == 'FLOAT':
                return Value.float(float(token.value))
            if token.type == 'STRING':
                return Value.string(token.value[1:-1])
            if token.type == 'KW_NULLPTR':
                return NULLPTR
        except (KeyError, ValueError) as e:
            raise ParseValueError(str(e), Span.from_token(token)) from e

        raise ParseValueError('Cannot read value', Span.from_token(token))


def transform(tree, text):
    try:
        return MohoTransformer(text).transform(tree)
    except VisitError as e:
        # Errors raised from rule callbacks come back wrapped.
        if isinstance(e.orig_exc, MohoParseError):
            raise e.orig_exc from None
        raise


def parse(text: str, debug=False) -> TranslationUnit:
    tree = tokenize(text, start='moho', debug=debug)
    return transform(tree, text)


def parse_rule(text: str, start: str, debug=False):
    """Parse ``text`` as a single grammar rule, e.g. ``properties`` or ``body``."""
    result = transform(tokenize(text, start=start, debug=debug), text)

    if isinstance(result, Tree):
        if result.data == 'body':
            return Block((), tuple(result.children))
        return list(result.children)

    return result


def parse_file(fp: str, debug=False) -> TranslationUnit:
    with open(fp, 'r', encoding='utf-8') as f:
        return parse(f.read(), debug=debug)
