# solcover_core/config.py
"""
Default configuration values for the solcover_core library.
These can be overridden by scenario-specific arguments.
"""

# --- Document Discovery ---
DEFAULT_CONFIG_FILE_PRIMARY: str = '.solcover.js'    # CommonJS document, looked up first
DEFAULT_CONFIG_FILE_SECONDARY: str = '.solcover.json' # JSON document, used if the primary is absent
DEFAULT_CONTRACTS_DIR: str = 'contracts'             # skipFiles entries are relative to this directory

# Extensions the loader knows how to read, mapped to the reader format name
DOCUMENT_FORMATS_BY_EXTENSION = {
    '.js': 'js',
    '.cjs': 'js',
    '.json': 'json',
}

# --- Document Keys ---
PROVIDER_OPTIONS_KEY: str = 'providerOptions'
REPORTERS_KEY: str = 'istanbulReporter'
SKIP_FILES_KEY: str = 'skipFiles'
MOCHA_KEY: str = 'mocha'

# The coverage tool accepts far more top-level options than this library models.
# Keys outside this set are reported and ignored.
RECOGNIZED_TOP_LEVEL_KEYS = frozenset({PROVIDER_OPTIONS_KEY, REPORTERS_KEY, SKIP_FILES_KEY, MOCHA_KEY})

# --- Reporters ---
# Report names understood by istanbul; anything else is kept but reported.
KNOWN_ISTANBUL_REPORTERS = frozenset({
    'clover', 'cobertura', 'html', 'html-spa', 'json', 'json-summary',
    'lcov', 'lcovonly', 'none', 'teamcity', 'text', 'text-lcov', 'text-summary',
})

# --- Contracts ---
SOLIDITY_SOURCE_SUFFIX: str = '.sol'

# --- Test Accounts ---
DEFAULT_ACCOUNT_COUNT: int = 10                      # ganache derives 10 accounts unless told otherwise
DEFAULT_HD_PATH_PREFIX: str = "m/44'/60'/0'/0"       # BIP-44 Ethereum path; the account index is appended
DEFAULT_KEY_FILE_OUTPUT: str = './coverage_keys.csv' # Same pub_key/priv_key layout the key loaders read
MAX_ACCOUNTS_TO_DERIVE: int = 100                    # Safety limit for account derivation

# --- Logging ---
# Messages are printed with one of these prefixes, e.g. "WARN: ..."
LOG_LEVEL_INFO: str = "INFO"
LOG_LEVEL_WARN: str = "WARN"
LOG_LEVEL_ERROR: str = "ERROR"
LOG_LEVEL_CRITICAL: str = "CRITICAL"
