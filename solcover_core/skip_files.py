"""
Applies a skipFiles set to contract sources. Entries are paths relative to the
contracts directory; an entry naming a directory excludes everything below it.
"""
import os
import posixpath
from typing import Iterable, List

from . import config as core_config


def normalize_contract_path(path: str) -> str:
    """
    Normalizes a contract path for comparison: forward slashes, no leading './',
    no trailing slash.
    """
    normalized = posixpath.normpath(path.replace('\\', '/'))
    if normalized == '.':
        return ''
    return normalized.rstrip('/')


def is_skipped(contract_path: str, skip_files: Iterable[str]) -> bool:
    """
    Returns True if contract_path (relative to the contracts directory) is excluded
    from instrumentation, either by name or because a parent directory is listed.
    """
    target = normalize_contract_path(contract_path)
    for entry in skip_files:
        skipped = normalize_contract_path(entry)
        if not skipped:
            continue
        if target == skipped or target.startswith(skipped + '/'):
            return True
    return False


def instrumentable_files(contracts_dir: str = core_config.DEFAULT_CONTRACTS_DIR,
                         skip_files: Iterable[str] = ()) -> List[str]:
    """
    Lists the Solidity sources under contracts_dir that are not skipped,
    as sorted paths relative to contracts_dir.
    """
    if not os.path.isdir(contracts_dir):
        print(f"WARN: Contracts directory not found: {contracts_dir}")
        return []

    skip_entries = [normalize_contract_path(entry) for entry in skip_files]
    found: List[str] = []
    skipped_count = 0
    for root, _, file_names in os.walk(contracts_dir):
        for file_name in file_names:
            if not file_name.endswith(core_config.SOLIDITY_SOURCE_SUFFIX):
                continue
            relative_path = normalize_contract_path(
                os.path.relpath(os.path.join(root, file_name), contracts_dir)
            )
            if is_skipped(relative_path, skip_entries):
                skipped_count += 1
                continue
            found.append(relative_path)

    print(f"INFO: {len(found)} contracts to instrument in {contracts_dir} ({skipped_count} skipped).")
    return sorted(found)


def unmatched_skip_entries(contracts_dir: str, skip_files: Iterable[str]) -> List[str]:
    """
    Returns the skipFiles entries that name neither a file nor a directory under
    contracts_dir. Such entries usually point at a renamed or deleted mock.
    """
    missing = []
    for entry in sorted(skip_files):
        candidate = os.path.join(contracts_dir, *normalize_contract_path(entry).split('/'))
        if not os.path.exists(candidate):
            missing.append(entry)
    for entry in missing:
        print(f"WARN: skipFiles entry does not match anything in {contracts_dir}: {entry}")
    return missing
