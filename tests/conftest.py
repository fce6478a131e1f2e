from collections.abc import Callable

import pytest

from casec.casec_ast import ASTNode
from casec.casec_lexer import tokenize
from casec.casec_parser import Parser


@pytest.fixture  # type: ignore[misc]
def parse_source() -> Callable[..., ASTNode]:
    def _parse(source: str, recover: bool = False) -> ASTNode:
        return Parser(tokenize(source), recover=recover).parse()

    return _parse
