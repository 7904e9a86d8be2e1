from dataclasses import dataclass
from typing import Optional

from dataslots import with_slots


@with_slots
@dataclass(frozen=True)
class Span:
    start: int
    end: int
    line: int
    column: int
    end_line: int
    end_column: int
    fragment: str

    @classmethod
    def from_token(cls, token):
        return cls(token.start_pos, token.end_pos, token.line, token.column,
                   token.end_line, token.end_column, str(token))

    @classmethod
    def from_meta(cls, meta, text):
        if meta.empty:
            return None
        return cls(meta.start_pos, meta.end_pos, meta.line, meta.column,
                   meta.end_line, meta.end_column, text[meta.start_pos:meta.end_pos])

    def __str__(self):
        return '{}:{}-{}:{}'.format(self.line, self.column, self.end_line, self.end_column)


class MohoParseError(Exception):
    stage = 'parse'

    def __init__(self, message, span=None):
        Exception.__init__(self, message)
        self.message = message
        self.span = span  # type: Optional[Span]

    @property
    def line(self):
        return self.span.line if self.span is not None else None

    @property
    def column(self):
        return self.span.column if self.span is not None else None

    def __str__(self):
        if self.span is None:
            return '{}: {}'.format(self.stage, self.message)
        return '{} at {}: {} ({!r})'.format(self.stage, self.span, self.message, self.span.fragment)


class TokenizerError(MohoParseError):
    """Raw grammar rejection. Only a line/column position is known."""

    stage = 'tokenizer'

    def __init__(self, message, line, column):
        MohoParseError.__init__(self, message)
        self._line = line
        self._column = column

    @property
    def line(self):
        return self._line

    @property
    def column(self):
        return self._column

    def __str__(self):
        return '{} at {}:{}: {}'.format(self.stage, self._line, self._column, self.message)


class ParsePropertyError(MohoParseError):
    stage = 'property'


class ParseValueError(MohoParseError):
    stage = 'value'


class ParseClassError(MohoParseError):
    stage = 'class'


class DeclarationError(MohoParseError):
    stage = 'declaration'


class ParseTypeError(MohoParseError):
    stage = 'type'


class ParseFieldError(MohoParseError):
    stage = 'field'


class ParseArgumentError(MohoParseError):
    stage = 'argument'
