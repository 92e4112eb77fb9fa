# scenarios/coverage_config_scenario.py
"""
Loads a project's coverage configuration document and prints what the coverage
tool and the test runner will be given: provider accounts, reporters, skipped
contracts and the test filter.
"""
import argparse
import sys
from typing import List, Optional

# Import core library components
from solcover_core.accounts import AccountManager
from solcover_core.errors import SolcoverConfigError
from solcover_core.loader import find_config_document, load
from solcover_core.skip_files import instrumentable_files, unmatched_skip_entries
from solcover_core import config as core_config


def run_coverage_config_scenario(
    config_path: Optional[str] = None,
    project_dir: str = '.',
    contracts_dir: Optional[str] = None,
    account_count: int = core_config.DEFAULT_ACCOUNT_COUNT,
    key_file_output: Optional[str] = None
) -> int:
    """
    Runs the configuration check. Returns a process exit status (0 on success).
    """
    print("--- Coverage Configuration ---")

    # 1. Locate and load the document
    try:
        if config_path is None:
            config_path = find_config_document(project_dir)
        coverage_config = load(config_path)
    except SolcoverConfigError as e:
        print(f"CRITICAL ERROR: {e}")
        return 1

    print(f"Document: {coverage_config.source_path}")
    print(f"Reporters: {', '.join(coverage_config.reporters) or '(none)'}")
    print(f"Skipped files: {len(coverage_config.skip_files)}")
    for skipped in sorted(coverage_config.skip_files):
        print(f"  - {skipped}")

    mocha_options = coverage_config.mocha_options
    mode = "excluding" if mocha_options.invert else "only"
    print(f"Test filter: {mode} tests matching '{mocha_options.grep}'")
    timeout = mocha_options.effective_timeout_ms
    print(f"Test timeout: {'disabled' if timeout is None else f'{timeout} ms'}")

    # 2. Derive the provider's accounts
    try:
        account_manager = AccountManager(coverage_config.provider_options, account_count=account_count)
    except ValueError as e:
        print(f"CRITICAL ERROR: {e}")
        return 1

    print(f"Provider accounts ({account_manager.loaded_account_count}, "
          f"{coverage_config.default_balance_ether} ether each):")
    for address in account_manager.managed_accounts_list:
        print(f"  {account_manager.get_index_by_address(address)}: {address}")
    if key_file_output:
        account_manager.write_key_file(key_file_output)

    # 3. Check the skip list against the contracts on disk
    if contracts_dir:
        unmatched_skip_entries(contracts_dir, coverage_config.skip_files)
        to_instrument = instrumentable_files(contracts_dir, coverage_config.skip_files)
        print(f"Contracts to instrument: {len(to_instrument)}")
        for contract_path in to_instrument:
            print(f"  + {contract_path}")

    return 0


def make_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Inspect a coverage configuration document.")
    parser.add_argument('-c', '--config', type=str, default=None, metavar='<config file>', dest='config_path',
                        help="Path to the configuration document (default: discovered in --project-dir)")
    parser.add_argument('-p', '--project-dir', type=str, default='.', metavar='<project dir>',
                        help="Directory searched for %s or %s (default: %%(default)s)"
                             % (core_config.DEFAULT_CONFIG_FILE_PRIMARY, core_config.DEFAULT_CONFIG_FILE_SECONDARY))
    parser.add_argument('--contracts-dir', type=str, default=None, metavar='<contracts dir>',
                        help="Contracts directory to check skipFiles against")
    parser.add_argument('-n', '--accounts', type=int, default=core_config.DEFAULT_ACCOUNT_COUNT, dest='account_count',
                        metavar='<count>', help="Number of provider accounts to derive (default: %(default)s)")
    parser.add_argument('--write-keys', type=str, default=None, metavar='<csv file>', dest='key_file_output',
                        help="Write the derived accounts to a pub_key/priv_key CSV file")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = make_parser().parse_args(argv)
    return run_coverage_config_scenario(
        config_path=args.config_path,
        project_dir=args.project_dir,
        contracts_dir=args.contracts_dir,
        account_count=args.account_count,
        key_file_output=args.key_file_output
    )


if __name__ == "__main__":
    # To run: python -m scenarios.coverage_config_scenario --contracts-dir contracts
    sys.exit(main())
