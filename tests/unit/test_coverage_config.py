import dataclasses

import pytest
from hypothesis import given, strategies as st

from solcover_core.coverage_config import CoverageConfig, MochaOptions, ProviderOptions, grep_pattern

MNEMONIC = "glad notable bullet donkey fall dolphin simple size stone evil slogan dinner"


@pytest.fixture
def coverage_config():
    return CoverageConfig(
        provider_options=ProviderOptions(mnemonic=MNEMONIC, default_balance_ether=1000000),
        reporters=('html', 'lcov'),
        skip_files=frozenset({'mocks/DAIMock.sol'}),
        mocha_options=MochaOptions(grep='@skip-on-coverage', invert=True, enable_timeouts=False, timeout_ms=3600000),
        source_path='.solcover.js'
    )


class TestCoverageConfig:
    def test_is_immutable(self, coverage_config):
        with pytest.raises(dataclasses.FrozenInstanceError):
            coverage_config.reporters = ('lcov',)
        with pytest.raises(dataclasses.FrozenInstanceError):
            coverage_config.mocha_options.invert = False
        with pytest.raises(dataclasses.FrozenInstanceError):
            coverage_config.provider_options.mnemonic = 'other'

    def test_provider_fields_are_exposed(self, coverage_config):
        assert coverage_config.mnemonic == MNEMONIC
        assert coverage_config.default_balance_ether == 1000000

    def test_source_path_does_not_affect_equality(self, coverage_config):
        assert dataclasses.replace(coverage_config, source_path='other.json') == coverage_config

    def test_to_document_uses_document_keys(self, coverage_config):
        assert coverage_config.to_document() == {
            'providerOptions': {'mnemonic': MNEMONIC, 'default_balance_ether': 1000000},
            'istanbulReporter': ['html', 'lcov'],
            'skipFiles': ['mocks/DAIMock.sol'],
            'mocha': {'grep': '@skip-on-coverage', 'invert': True, 'enableTimeouts': False, 'timeout': 3600000},
        }

    def test_repr_hides_most_of_mnemonic(self, coverage_config):
        text = repr(coverage_config)
        assert "mnemonic='glad ...'" in text
        assert 'dinner' not in text


class TestMochaOptions:
    @pytest.mark.parametrize("title, invert, expected", [
        ("Staking contract deposits @skip-on-coverage", True, False),
        ("Staking contract deposits", True, True),
        ("Staking contract deposits @skip-on-coverage", False, True),
        ("Staking contract deposits", False, False),
    ])
    def test_selects_applies_invert(self, title, invert, expected):
        options = MochaOptions(grep='@skip-on-coverage', invert=invert, enable_timeouts=True, timeout_ms=2000)
        assert options.selects(title) is expected

    def test_regex_literal_grep_with_flags(self):
        options = MochaOptions(grep='/slow|FLAKY/i', invert=False, enable_timeouts=True, timeout_ms=2000)
        assert options.selects("a flaky oracle test")
        assert options.selects("a SLOW mint")
        assert not options.selects("fast transfer")

    def test_empty_grep_matches_everything(self):
        options = MochaOptions(grep='', invert=True, enable_timeouts=True, timeout_ms=2000)
        assert not options.selects("anything")

    def test_effective_timeout_disabled(self):
        options = MochaOptions(grep='', invert=False, enable_timeouts=False, timeout_ms=3600000)
        assert options.effective_timeout_ms is None
        # The declared value is still kept
        assert options.timeout_ms == 3600000

    def test_effective_timeout_enabled(self):
        options = MochaOptions(grep='', invert=False, enable_timeouts=True, timeout_ms=3600000)
        assert options.effective_timeout_ms == 3600000

    @given(title=st.text(max_size=40))
    def test_invert_flips_selection(self, title):
        included = MochaOptions(grep='@skip-on-coverage', invert=False, enable_timeouts=False, timeout_ms=0)
        excluded = MochaOptions(grep='@skip-on-coverage', invert=True, enable_timeouts=False, timeout_ms=0)
        assert included.selects(title) != excluded.selects(title)


class TestGrepPattern:
    def test_plain_string_is_pattern(self):
        assert grep_pattern('@skip-on-coverage').search('x @skip-on-coverage y')

    def test_regex_literal_flags(self):
        pattern = grep_pattern('/^deploy/im')
        assert pattern.search('other\nDeploy step')

    def test_slashes_without_flags_stay_literal_pattern(self):
        assert grep_pattern('mocks/x').search('path mocks/x.sol')

    def test_named_group_and_backreference(self):
        pattern = grep_pattern(r'(?<tag>@\w+) \k<tag>')
        assert pattern.search('deposit @slow @slow')
        assert not pattern.search('deposit @slow @fast')

    def test_identity_escape_is_the_letter(self):
        assert grep_pattern(r'\q\@skip').search('q@skip')

    def test_lookbehind_is_kept(self):
        assert grep_pattern('(?<=@)skip').search('@skip')

    def test_dotall_flag(self):
        assert grep_pattern('/a.b/s').search('a\nb')

    def test_pattern_without_python_equivalent_raises(self):
        with pytest.raises(ValueError) as exc_info:
            grep_pattern('@skip-(on-coverage')
        assert "mocha grep '@skip-(on-coverage' cannot be evaluated" in str(exc_info.value)

    def test_selects_with_js_only_grep(self):
        options = MochaOptions(grep='(?<tag>@skip-on-coverage)', invert=True, enable_timeouts=False, timeout_ms=0)
        assert not options.selects('mint @skip-on-coverage')
        assert options.selects('mint')
