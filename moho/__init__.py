from moho.error import MohoParseError, TokenizerError
from moho.objects import TranslationUnit, Class, Block, Field, Method, Argument, Property, Value, Type
from moho.parser import parse, parse_file, parse_rule
