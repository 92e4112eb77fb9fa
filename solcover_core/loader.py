# solcover_core/loader.py
"""
Loads a coverage configuration document from disk and validates it into an
immutable CoverageConfig. Nothing is defaulted except skipFiles: a document
that is missing a field, or declares one with the wrong shape, is rejected.
"""
import json
import os
from numbers import Real
from typing import Any, List, Mapping, Optional

from . import config as core_config
from .coverage_config import CoverageConfig, MochaOptions, ProviderOptions
from .errors import ConfigNotFoundError, ConfigParseError
from .js_literal import parse_commonjs_exports


def find_config_document(project_dir: str = '.',
                         candidate_names: Optional[List[str]] = None
                        ) -> str:
    """
    Returns the path of the first configuration document that exists in project_dir.

    :param project_dir: Directory to look in.
    :param candidate_names: File names to try, in order. If None, uses the defaults from core_config.
    :raises ConfigNotFoundError: If none of the candidates exists.
    """
    if candidate_names is None:
        candidate_names = [core_config.DEFAULT_CONFIG_FILE_PRIMARY, core_config.DEFAULT_CONFIG_FILE_SECONDARY]

    for name in candidate_names:
        candidate_path = os.path.join(project_dir, name)
        if os.path.isfile(candidate_path):
            print(f"INFO: Using coverage configuration document: {candidate_path}")
            return candidate_path
    raise ConfigNotFoundError(os.path.join(project_dir, candidate_names[0]) if candidate_names else project_dir)


def document_format_for(document_path: str) -> str:
    """Maps a document path to its reader format ('js' or 'json') by extension."""
    extension = os.path.splitext(document_path)[1].lower()
    fmt = core_config.DOCUMENT_FORMATS_BY_EXTENSION.get(extension)
    if fmt is None:
        supported = ', '.join(sorted(core_config.DOCUMENT_FORMATS_BY_EXTENSION))
        raise ConfigParseError(f"Unsupported document type '{extension or '<none>'}' (expected one of: {supported})",
                               path=document_path)
    return fmt


def load_document(text: str, fmt: str, source_path: Optional[str] = None) -> Any:
    """
    Parses document text into plain Python values without validating its fields.

    :param text: The document text.
    :param fmt: 'json' or 'js'.
    :param source_path: Used only in error messages.
    """
    if fmt == 'json':
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise ConfigParseError(f"Invalid JSON: {e}", path=source_path)
    if fmt == 'js':
        return parse_commonjs_exports(text, path=source_path)
    raise ConfigParseError(f"Unknown document format '{fmt}'", path=source_path)


def load(document_path: str) -> CoverageConfig:
    """
    Reads and validates the coverage configuration document at document_path.

    :raises ConfigNotFoundError: If the path does not resolve to a file.
    :raises ConfigParseError: If the document is malformed or a field is missing or mis-shaped.
    """
    if not os.path.isfile(document_path):
        raise ConfigNotFoundError(document_path)

    fmt = document_format_for(document_path)
    try:
        with open(document_path, encoding='utf-8') as document_file:
            text = document_file.read()
    except FileNotFoundError:
        # Removed between the isfile() check and the open()
        raise ConfigNotFoundError(document_path)
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigParseError(f"Could not read document: {e}", path=document_path)

    document = load_document(text, fmt, source_path=document_path)
    coverage_config = config_from_document(document, source_path=document_path)
    print(f"INFO: Loaded coverage configuration from {document_path} "
          f"({len(coverage_config.skip_files)} skipped files, reporters: {', '.join(coverage_config.reporters) or 'none'})")
    return coverage_config


def config_from_document(document: Any, source_path: Optional[str] = None) -> CoverageConfig:
    """
    Validates an already-parsed document and builds the CoverageConfig.

    :param document: The mapping held by the document (e.g. the value of module.exports).
    :param source_path: Recorded on the result and used in error messages.
    """
    if not isinstance(document, Mapping):
        raise ConfigParseError(f"Top-level value must be an object, got {_type_name(document)}", path=source_path)

    for key in document:
        if key not in core_config.RECOGNIZED_TOP_LEVEL_KEYS:
            print(f"WARN: Ignoring unrecognized option '{key}' in {source_path or '<document>'}.")

    validator = _FieldValidator(source_path)

    provider_section = validator.section(document, core_config.PROVIDER_OPTIONS_KEY)
    provider_options = ProviderOptions(
        mnemonic=validator.string(provider_section, 'mnemonic', core_config.PROVIDER_OPTIONS_KEY, non_empty=True),
        default_balance_ether=validator.number(provider_section, 'default_balance_ether', core_config.PROVIDER_OPTIONS_KEY)
    )

    reporters = validator.string_list(document, core_config.REPORTERS_KEY)
    for reporter in reporters:
        if reporter not in core_config.KNOWN_ISTANBUL_REPORTERS:
            print(f"WARN: Unknown istanbul reporter '{reporter}'. It is kept, but the coverage tool may reject it.")

    if core_config.SKIP_FILES_KEY in document:
        skip_file_list = validator.string_list(document, core_config.SKIP_FILES_KEY)
    else:
        skip_file_list = []
    skip_files = frozenset(skip_file_list)
    if len(skip_files) != len(skip_file_list):
        print(f"INFO: {len(skip_file_list) - len(skip_files)} duplicate skipFiles entries ignored.")

    mocha_section = validator.section(document, core_config.MOCHA_KEY)
    mocha_options = MochaOptions(
        grep=validator.string(mocha_section, 'grep', core_config.MOCHA_KEY),
        invert=validator.boolean(mocha_section, 'invert', core_config.MOCHA_KEY),
        enable_timeouts=validator.boolean(mocha_section, 'enableTimeouts', core_config.MOCHA_KEY),
        timeout_ms=validator.integer(mocha_section, 'timeout', core_config.MOCHA_KEY)
    )

    return CoverageConfig(
        provider_options=provider_options,
        reporters=tuple(reporters),
        skip_files=skip_files,
        mocha_options=mocha_options,
        source_path=source_path
    )


def _type_name(value: Any) -> str:
    """Names a parsed value the way the document would describe it."""
    if value is None:
        return 'null'
    if isinstance(value, bool):
        return 'boolean'
    if isinstance(value, Real):
        return 'number'
    if isinstance(value, str):
        return 'string'
    if isinstance(value, Mapping):
        return 'object'
    if isinstance(value, list):
        return 'array'
    return type(value).__name__


class _FieldValidator:
    """
    Pulls typed fields out of document sections, raising ConfigParseError
    with the dotted field name on the first problem found.
    """
    def __init__(self, source_path: Optional[str]):
        self.source_path = source_path

    def _fail(self, field: str, message: str) -> ConfigParseError:
        return ConfigParseError(message, path=self.source_path, field=field)

    def _require(self, section: Mapping, key: str, parent: Optional[str]) -> Any:
        dotted = f"{parent}.{key}" if parent else key
        if key not in section:
            raise self._fail(dotted, "Required field is missing")
        return section[key]

    def section(self, document: Mapping, key: str) -> Mapping:
        value = self._require(document, key, None)
        if not isinstance(value, Mapping):
            raise self._fail(key, f"Expected an object, got {_type_name(value)}")
        return value

    def string(self, section: Mapping, key: str, parent: Optional[str] = None, non_empty: bool = False) -> str:
        value = self._require(section, key, parent)
        dotted = f"{parent}.{key}" if parent else key
        if not isinstance(value, str):
            raise self._fail(dotted, f"Expected a string, got {_type_name(value)}")
        if non_empty and not value.strip():
            raise self._fail(dotted, "Must not be empty")
        return value

    def boolean(self, section: Mapping, key: str, parent: Optional[str] = None) -> bool:
        value = self._require(section, key, parent)
        if not isinstance(value, bool):
            raise self._fail(f"{parent}.{key}" if parent else key, f"Expected a boolean, got {_type_name(value)}")
        return value

    def number(self, section: Mapping, key: str, parent: Optional[str] = None) -> float:
        value = self._require(section, key, parent)
        dotted = f"{parent}.{key}" if parent else key
        # bool is an int subclass, but true is not a balance
        if isinstance(value, bool) or not isinstance(value, Real):
            raise self._fail(dotted, f"Expected a number, got {_type_name(value)}")
        if value != value or value in (float('inf'), float('-inf')):
            raise self._fail(dotted, "Must be a finite number")
        if value < 0:
            raise self._fail(dotted, f"Must not be negative, got {value}")
        return value

    def integer(self, section: Mapping, key: str, parent: Optional[str] = None) -> int:
        value = self.number(section, key, parent)
        dotted = f"{parent}.{key}" if parent else key
        if isinstance(value, float):
            if not value.is_integer():
                raise self._fail(dotted, f"Expected a whole number, got {value}")
            value = int(value)
        return value

    def string_list(self, section: Mapping, key: str, parent: Optional[str] = None) -> List[str]:
        value = self._require(section, key, parent)
        dotted = f"{parent}.{key}" if parent else key
        if not isinstance(value, list):
            raise self._fail(dotted, f"Expected an array of strings, got {_type_name(value)}")
        for index, item in enumerate(value):
            if not isinstance(item, str):
                raise self._fail(f"{dotted}[{index}]", f"Expected a string, got {_type_name(item)}")
        return list(value)
