"""Errors raised while loading an OpenAPI document.

Each message names the kind of source (``file`` or ``URL``) and the input
it was loaded from.
"""


class ParserError(Exception):
    """Base class for document loading failures."""


class SyntaxParserError(ParserError):
    def __init__(self, source: str, input_path: str, message: str):
        super().__init__(f'Syntax Error in {source} "{input_path}":\n{message}')


class ValidationParserError(ParserError):
    def __init__(self, source: str, input_path: str, message: str):
        super().__init__(f'OpenAPI Validation Error in {source} "{input_path}":\n{message}')


class ResolverParserError(ParserError):
    def __init__(self, source: str, input_path: str, message: str):
        super().__init__(f'Reference Resolution Error in {source} "{input_path}":\n{message}')


class ConnectionParserError(ParserError):
    def __init__(self, source: str, input_path: str, message: str):
        super().__init__(f'{message} "{input_path}"')
