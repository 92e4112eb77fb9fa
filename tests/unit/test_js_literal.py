import pytest
from hypothesis import given, strategies as st

from solcover_core.errors import ConfigParseError
from solcover_core.js_literal import parse_commonjs_exports


class TestParseCommonjsExports:
    def test_object_with_bare_and_quoted_keys(self):
        text = """
        module.exports = {
          providerOptions: { mnemonic: 'a b c', "default_balance_ether": 10 },
          'istanbulReporter': ["html", "lcov"],
        };
        """
        assert parse_commonjs_exports(text) == {
            'providerOptions': {'mnemonic': 'a b c', 'default_balance_ether': 10},
            'istanbulReporter': ['html', 'lcov'],
        }

    def test_comments_are_ignored(self):
        text = """
        // coverage settings
        module.exports = {
          mocha: {
            grep: "@skip-on-coverage", // Find everything with this tag
            /* run the inverse set */ invert: true,
          }
        }
        """
        assert parse_commonjs_exports(text) == {'mocha': {'grep': '@skip-on-coverage', 'invert': True}}

    def test_use_strict_prologue(self):
        assert parse_commonjs_exports("'use strict';\nmodule.exports = { a: null };") == {'a': None}

    def test_string_spanning_value_on_next_line(self):
        text = 'module.exports = { mnemonic:\n      "glad notable bullet" };'
        assert parse_commonjs_exports(text) == {'mnemonic': 'glad notable bullet'}

    @pytest.mark.parametrize("literal, expected", [
        ('3600000', 3600000),
        ('1_000_000', 1000000),
        ('-42', -42),
        ('0.5', 0.5),
        ('.25', 0.25),
        ('1e3', 1000.0),
        ('2.5E-1', 0.25),
        ('0xff', 255),
    ])
    def test_numbers(self, literal, expected):
        value = parse_commonjs_exports(f"module.exports = {{ n: {literal} }};")['n']
        assert value == expected
        assert type(value) is type(expected)

    @pytest.mark.parametrize("literal, expected", [
        (r'"a\"b"', 'a"b'),
        (r"'it\'s'", "it's"),
        (r'"tab\there"', 'tab\there'),
        (r'"\x41B\u{43}"', 'ABC'),
        (r'"back\\slash"', 'back\\slash'),
        (r'"\u{1F600}"', '\U0001F600'),
        (r'"\u{41}B"', 'AB'),
    ])
    def test_string_escapes(self, literal, expected):
        assert parse_commonjs_exports(f"module.exports = {{ s: {literal} }};")['s'] == expected

    def test_key_order_is_preserved(self):
        result = parse_commonjs_exports("module.exports = { z: 1, a: 2, m: 3 };")
        assert list(result) == ['z', 'a', 'm']

    def test_top_level_array_is_returned_as_is(self):
        # Shape checks belong to the loader
        assert parse_commonjs_exports("module.exports = [1, 2,];") == [1, 2]

    @pytest.mark.parametrize("text, message", [
        ("const x = {};", "Expected 'module.exports = ...'"),
        ("module.exports = { a: require('x') };", "Unsupported expression 'require'"),
        ("module.exports = { a: `tpl` };", "Template literals are not supported"),
        ("module.exports = { a: 1 } extra", "Unexpected content after the exported value"),
        ("module.exports = { a: 1, a: 2 };", "Duplicate property 'a'"),
        ("module.exports = { a: 'open };", "Unterminated string"),
        ("module.exports = { a: 1 /* never closed", "Unterminated block comment"),
        ("module.exports = { a: [1 2] };", "Expected ',' or ']' but found '2'"),
        ("module.exports = { a: 1", "Expected ',' or '}' but found 'end of file'"),
        ("module.exports = { a: 1.2.3 };", "Invalid number '1.2.3'"),
        ("module.exports = ", "Unexpected end of file"),
        (r'module.exports = { s: "\u{110000}" };', "Invalid unicode escape"),
        (r'module.exports = { s: "\x+1" };', "Invalid escape sequence '\\x+1'"),
        (r'module.exports = { s: "\u 12a" };', "Invalid escape sequence"),
        (r'module.exports = { s: "\u{_1}" };', "Invalid escape sequence"),
        (r'module.exports = { s: "\x4" };', "Invalid escape sequence"),
    ])
    def test_syntax_errors(self, text, message):
        with pytest.raises(ConfigParseError) as exc_info:
            parse_commonjs_exports(text, path='.solcover.js')
        assert message in str(exc_info.value)
        assert exc_info.value.path == '.solcover.js'

    def test_error_reports_line_and_column(self):
        text = "module.exports = {\n  skipFiles: [\n    oops\n  ]\n};"
        with pytest.raises(ConfigParseError) as exc_info:
            parse_commonjs_exports(text)
        assert "(line 3, column 5)" in str(exc_info.value)

    @given(words=st.lists(st.text(alphabet='abcdefghijklmnopqrstuvwxyz-_./@', min_size=1, max_size=12), max_size=8))
    def test_string_arrays_read_back(self, words):
        body = ', '.join(f'"{word}"' for word in words)
        assert parse_commonjs_exports(f"module.exports = {{ skipFiles: [{body}] }};") == {'skipFiles': words}
