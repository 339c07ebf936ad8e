"""Parser package for loxlang.

`Parser` in `parser.py` owns the token cursor, the error list and panic-mode
recovery. The grammar rules themselves live in `expressions.py` and
`statements.py` as functions taking the parser.


File: __init__.py
Version: 0.1.0
License: MIT
"""

from .parser import Parser

__all__ = ["Parser"]
