"""
Defines the immutable value types produced by the configuration loader.
"""
import re
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Optional, Tuple

from . import config as core_config


@dataclass(frozen=True)
class ProviderOptions:
    """
    Options handed to the simulated chain provider the coverage run starts.
    """
    mnemonic: str
    default_balance_ether: float # int in every document seen so far; floats are accepted

    def __repr__(self) -> str:
        # Only the first word of the seed phrase is shown
        first_word = self.mnemonic.split(' ', 1)[0] if self.mnemonic else ''
        return (f"ProviderOptions(mnemonic='{first_word} ...', "
                f"default_balance_ether={self.default_balance_ether})")


# "/pattern/flags" strings are read as regex literals, as mocha does
_REGEX_LITERAL = re.compile(r'^/(.*)/([dgimsuvy]*)$')
# Escaped letters that carry a meaning in JavaScript patterns; any other escaped letter is the letter itself
_JS_LETTER_ESCAPES = frozenset('bBdDwWsSfnrtvxuc')


def _js_pattern_to_python(source: str) -> str:
    """
    Rewrites the JavaScript-only parts of a pattern into Python syntax:
    named groups (?<name>...), backreferences \\k<name>, and identity escapes such as \\q.
    """
    out = []
    index = 0
    while index < len(source):
        char = source[index]
        if char == '\\' and index + 1 < len(source):
            escaped = source[index + 1]
            close = source.find('>', index + 3)
            if escaped == 'k' and source.startswith('<', index + 2) and close != -1:
                out.append(f"(?P={source[index + 3:close]})")
                index = close + 1
                continue
            if escaped.isalpha() and escaped not in _JS_LETTER_ESCAPES:
                out.append(re.escape(escaped))
            else:
                out.append(source[index:index + 2])
            index += 2
            continue
        if source.startswith('(?<', index) and source[index + 3:index + 4] not in ('=', '!'):
            out.append('(?P<')
            index += 3
            continue
        out.append(char)
        index += 1
    return ''.join(out)


def grep_pattern(grep: str) -> 're.Pattern[str]':
    """
    Compiles a mocha grep string. A plain string is used as a pattern as is;
    "/pattern/flags" honours the i, m and s flags (the others have no effect on matching).

    :raises ValueError: If the pattern uses JavaScript syntax with no Python equivalent.
    """
    literal = _REGEX_LITERAL.match(grep)
    source, flag_letters = (grep, '') if literal is None else literal.groups()
    flags = 0
    if 'i' in flag_letters:
        flags |= re.IGNORECASE
    if 'm' in flag_letters:
        flags |= re.MULTILINE
    if 's' in flag_letters:
        flags |= re.DOTALL
    try:
        return re.compile(_js_pattern_to_python(source), flags)
    except re.error as e:
        raise ValueError(f"mocha grep '{grep}' cannot be evaluated here: {e}") from e


@dataclass(frozen=True)
class MochaOptions:
    """
    Test runner options. The loader stores them exactly as declared; selects()
    and effective_timeout_ms apply them the way mocha does.
    """
    grep: str
    invert: bool
    enable_timeouts: bool
    timeout_ms: int

    def selects(self, test_title: str) -> bool:
        """
        Returns True if a test with this full title would run.

        With invert set, matching tests are the ones left out.
        Raises ValueError if the grep cannot be evaluated (see grep_pattern).
        """
        matched = grep_pattern(self.grep).search(test_title) is not None
        return not matched if self.invert else matched

    @property
    def effective_timeout_ms(self) -> Optional[int]:
        """The per-test timeout the runner enforces, or None when timeouts are off."""
        if not self.enable_timeouts:
            return None
        return self.timeout_ms


@dataclass(frozen=True)
class CoverageConfig:
    """
    A fully validated coverage configuration document.
    Built once by the loader and never mutated afterwards.
    """
    provider_options: ProviderOptions
    reporters: Tuple[str, ...]
    skip_files: FrozenSet[str]
    mocha_options: MochaOptions
    source_path: Optional[str] = field(default=None, compare=False)

    @property
    def mnemonic(self) -> str:
        return self.provider_options.mnemonic

    @property
    def default_balance_ether(self) -> float:
        return self.provider_options.default_balance_ether

    def to_document(self) -> Dict[str, Any]:
        """
        Returns the document-shaped mapping for this configuration, using the
        key names the coverage tool expects. skipFiles is emitted sorted.
        """
        return {
            core_config.PROVIDER_OPTIONS_KEY: {
                'mnemonic': self.provider_options.mnemonic,
                'default_balance_ether': self.provider_options.default_balance_ether,
            },
            core_config.REPORTERS_KEY: list(self.reporters),
            core_config.SKIP_FILES_KEY: sorted(self.skip_files),
            core_config.MOCHA_KEY: {
                'grep': self.mocha_options.grep,
                'invert': self.mocha_options.invert,
                'enableTimeouts': self.mocha_options.enable_timeouts,
                'timeout': self.mocha_options.timeout_ms,
            },
        }

    def __repr__(self) -> str:
        return (f"CoverageConfig(source='{self.source_path}', reporters={list(self.reporters)}, "
                f"skip_files={len(self.skip_files)}, {self.provider_options!r}, {self.mocha_options!r})")
