# solcover_core/__init__.py

# This file makes the directory a Python package.
# The loader entry points and value types are re-exported for easier imports;
# scenarios import the remaining helpers directly from their modules.
from .coverage_config import CoverageConfig, MochaOptions, ProviderOptions
from .errors import ConfigNotFoundError, ConfigParseError, SolcoverConfigError
from .loader import config_from_document, find_config_document, load

__all__ = [
    'CoverageConfig', 'MochaOptions', 'ProviderOptions',
    'ConfigNotFoundError', 'ConfigParseError', 'SolcoverConfigError',
    'config_from_document', 'find_config_document', 'load',
]
