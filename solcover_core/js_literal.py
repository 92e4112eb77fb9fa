"""
Reads the data held in a CommonJS configuration module of the form

    module.exports = { ... };

Only literal values are understood: objects (bare or quoted keys), arrays,
strings, numbers, true/false/null, with comments and trailing commas allowed.
Anything computed (function calls, require(), variables, template strings)
is rejected, since evaluating JavaScript is outside what this library does.
"""
import re
from typing import Any, Dict, List, Optional

from .errors import ConfigParseError

_EXPORT_TARGET = 'module.exports'
_HEX_DIGITS = re.compile(r"[0-9a-fA-F]+")
_KEYWORDS = {'true': True, 'false': False, 'null': None}
_ESCAPES = {
    'n': '\n', 't': '\t', 'r': '\r', 'b': '\b', 'f': '\f', 'v': '\v', '0': '\0',
    '"': '"', "'": "'", '\\': '\\', '/': '/',
}


def _is_identifier_start(char: str) -> bool:
    return bool(char) and (char.isalpha() or char in '_$')


def _is_identifier_part(char: str) -> bool:
    return bool(char) and (char.isalnum() or char in '_$')


class _LiteralReader:
    """Recursive-descent reader over the module text."""

    def __init__(self, text: str, path: Optional[str]):
        self.text = text
        self.path = path
        self.pos = 0

    # --- Error reporting ---

    def _error(self, message: str, pos: Optional[int] = None) -> ConfigParseError:
        where = self.pos if pos is None else pos
        line = self.text.count('\n', 0, where) + 1
        column = where - (self.text.rfind('\n', 0, where) + 1) + 1
        return ConfigParseError(f"{message} (line {line}, column {column})", path=self.path)

    # --- Lexing helpers ---

    def _peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ''

    def _skip_ignored(self):
        """Skips whitespace and both comment forms."""
        while self.pos < len(self.text):
            char = self.text[self.pos]
            if char.isspace():
                self.pos += 1
            elif self.text.startswith('//', self.pos):
                newline = self.text.find('\n', self.pos)
                self.pos = len(self.text) if newline == -1 else newline + 1
            elif self.text.startswith('/*', self.pos):
                end = self.text.find('*/', self.pos + 2)
                if end == -1:
                    raise self._error("Unterminated block comment")
                self.pos = end + 2
            else:
                return

    def _expect(self, char: str):
        self._skip_ignored()
        if self._peek() != char:
            found = self._peek() or 'end of file'
            raise self._error(f"Expected '{char}' but found '{found}'")
        self.pos += 1

    def _read_identifier(self) -> str:
        start = self.pos
        while self.pos < len(self.text) and _is_identifier_part(self.text[self.pos]):
            self.pos += 1
        return self.text[start:self.pos]

    # --- Module level ---

    def read_module(self) -> Any:
        self._skip_ignored()
        if self.text.startswith("'use strict'", self.pos) or self.text.startswith('"use strict"', self.pos):
            self.pos += len("'use strict'")
            self._skip_ignored()
            if self._peek() == ';':
                self.pos += 1
            self._skip_ignored()

        if not self.text.startswith(_EXPORT_TARGET, self.pos):
            raise self._error("Expected 'module.exports = ...'")
        self.pos += len(_EXPORT_TARGET)

        self._expect('=')
        value = self.read_value()
        self._skip_ignored()
        if self._peek() == ';':
            self.pos += 1
        self._skip_ignored()
        if self.pos != len(self.text):
            raise self._error("Unexpected content after the exported value")
        return value

    # --- Values ---

    def read_value(self) -> Any:
        self._skip_ignored()
        char = self._peek()
        if not char:
            raise self._error("Unexpected end of file")
        if char == '{':
            return self._read_object()
        if char == '[':
            return self._read_array()
        if char in ('"', "'"):
            return self._read_string()
        if char == '`':
            raise self._error("Template literals are not supported")
        if char.isdigit() or char in '-+.':
            return self._read_number()
        if _is_identifier_start(char):
            start = self.pos
            word = self._read_identifier()
            if word in _KEYWORDS:
                return _KEYWORDS[word]
            raise self._error(f"Unsupported expression '{word}'; only literal values can be read", start)
        raise self._error(f"Unexpected character '{char}'")

    def _read_object(self) -> Dict[str, Any]:
        self._expect('{')
        result: Dict[str, Any] = {}
        while True:
            self._skip_ignored()
            if self._peek() == '}':
                self.pos += 1
                return result

            key_pos = self.pos
            char = self._peek()
            if char in ('"', "'"):
                key = self._read_string()
            elif _is_identifier_start(char):
                key = self._read_identifier()
            elif char.isdigit():
                key = self._read_identifier()
            else:
                raise self._error(f"Expected a property name but found '{char or 'end of file'}'")

            if key in result:
                raise self._error(f"Duplicate property '{key}'", key_pos)
            self._expect(':')
            result[key] = self.read_value()

            self._skip_ignored()
            if self._peek() == ',':
                self.pos += 1
            elif self._peek() != '}':
                raise self._error(f"Expected ',' or '}}' but found '{self._peek() or 'end of file'}'")

    def _read_array(self) -> List[Any]:
        self._expect('[')
        result: List[Any] = []
        while True:
            self._skip_ignored()
            if self._peek() == ']':
                self.pos += 1
                return result
            result.append(self.read_value())
            self._skip_ignored()
            if self._peek() == ',':
                self.pos += 1
            elif self._peek() != ']':
                raise self._error(f"Expected ',' or ']' but found '{self._peek() or 'end of file'}'")

    def _read_string(self) -> str:
        quote = self.text[self.pos]
        start = self.pos
        self.pos += 1
        chars: List[str] = []
        while True:
            if self.pos >= len(self.text):
                raise self._error("Unterminated string", start)
            char = self.text[self.pos]
            if char == quote:
                self.pos += 1
                return ''.join(chars)
            if char == '\n':
                raise self._error("Unterminated string", start)
            if char == '\\':
                self.pos += 1
                chars.append(self._read_escape())
                continue
            chars.append(char)
            self.pos += 1

    def _read_escape(self) -> str:
        char = self._peek()
        if not char:
            raise self._error("Unterminated escape sequence")
        if char in _ESCAPES:
            self.pos += 1
            return _ESCAPES[char]
        if char == '\n':
            # Line continuation
            self.pos += 1
            return ''
        if char == 'x':
            digits = self.text[self.pos + 1:self.pos + 3]
            width = 2
            expected_length = 2
        elif char == 'u':
            if self.text.startswith('{', self.pos + 1):
                end = self.text.find('}', self.pos + 2)
                if end == -1:
                    raise self._error("Invalid unicode escape")
                digits = self.text[self.pos + 2:end]
                width = end - self.pos
                expected_length = None
            else:
                digits = self.text[self.pos + 1:self.pos + 5]
                width = 4
                expected_length = 4
        else:
            self.pos += 1
            return char
        if not _HEX_DIGITS.fullmatch(digits) or (expected_length is not None and len(digits) != expected_length):
            raise self._error(f"Invalid escape sequence '\\{char}{digits}'")
        code_point = int(digits, 16)
        if code_point > 0x10FFFF:
            raise self._error(f"Invalid unicode escape '\\{char}{{{digits}}}'")
        self.pos += 1 + width
        return chr(code_point)

    def _read_number(self) -> Any:
        start = self.pos
        sign = 1
        if self._peek() in '+-':
            sign = -1 if self._peek() == '-' else 1
            self.pos += 1

        if self.text.startswith(('0x', '0X'), self.pos):
            self.pos += 2
            digits_start = self.pos
            while self.pos < len(self.text) and (self.text[self.pos] in '0123456789abcdefABCDEF_'):
                self.pos += 1
            digits = self.text[digits_start:self.pos].replace('_', '')
            if not digits:
                raise self._error("Invalid hexadecimal number", start)
            return sign * int(digits, 16)

        while self.pos < len(self.text) and (self.text[self.pos].isdigit() or self.text[self.pos] in '._eE'):
            if self.text[self.pos] in 'eE' and self.text[self.pos + 1:self.pos + 2] in ('+', '-'):
                self.pos += 1
            self.pos += 1
        raw = self.text[start:self.pos]
        # Numeric separators ("1_000_000") are allowed in JS source
        literal = raw.lstrip('+-').replace('_', '')
        try:
            if any(marker in literal for marker in '.eE'):
                return sign * float(literal)
            return sign * int(literal)
        except ValueError:
            raise self._error(f"Invalid number '{raw}'", start)


def parse_commonjs_exports(text: str, path: Optional[str] = None) -> Any:
    """
    Returns the literal value assigned to module.exports in the given module text.

    :param text: Full text of the module.
    :param path: Document path, used only in error messages.
    :raises ConfigParseError: On syntax errors or non-literal expressions.
    """
    return _LiteralReader(text, path).read_module()
