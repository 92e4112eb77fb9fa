"""
Derives the deterministic test accounts a coverage provider creates from the
configured mnemonic, and writes them out as a key file.
"""
import pandas as pd
from web3 import Account, Web3
from typing import Dict, List, Optional

from . import config as core_config
from .coverage_config import ProviderOptions

Account.enable_unaudited_hdwallet_features()


class TestAccount:
    """A single derived account and the balance the provider funds it with."""
    __test__ = False # not a pytest test class

    def __init__(self, index: int, address: str, private_key: str, balance_wei: int):
        self.index: int = index
        self.address: str = address
        self.private_key: str = private_key
        self.balance_wei: int = balance_wei

    def __repr__(self) -> str:
        return f"TestAccount(idx={self.index}, address='{self.address}', balance_wei={self.balance_wei})"


class AccountManager:
    """
    Derives the provider's test accounts from ProviderOptions and keeps them
    in derivation order, indexed by checksummed address.
    """
    __test__ = False

    def __init__(self,
                 provider_options: ProviderOptions,
                 account_count: int = core_config.DEFAULT_ACCOUNT_COUNT,
                 hd_path_prefix: str = core_config.DEFAULT_HD_PATH_PREFIX
                ):
        """
        Initializes the AccountManager.

        :param provider_options: Mnemonic and default balance from the coverage configuration.
        :param account_count: How many accounts to derive (index 0 upwards).
        :param hd_path_prefix: Derivation path; the account index is appended to it.
        :raises ValueError: If the mnemonic is not a valid seed phrase or account_count is out of range.
        """
        if not 0 < account_count <= core_config.MAX_ACCOUNTS_TO_DERIVE:
            raise ValueError(f"account_count must be between 1 and {core_config.MAX_ACCOUNTS_TO_DERIVE}, got {account_count}")

        self.provider_options = provider_options
        self.hd_path_prefix = hd_path_prefix
        self.accounts: List[TestAccount] = []
        self.address_to_internal_index: Dict[str, int] = {}

        self._derive_accounts(account_count)

    def _derive_accounts(self, count: int):
        """Derives count accounts from the mnemonic along hd_path_prefix."""
        balance_wei = ether_to_wei(self.provider_options.default_balance_ether)
        print(f"INFO: AccountManager deriving {count} accounts along {self.hd_path_prefix}/i.")
        for index in range(count):
            account_path = f"{self.hd_path_prefix}/{index}"
            try:
                derived = Account.from_mnemonic(self.provider_options.mnemonic, account_path=account_path)
            except Exception as e:
                print(f"ERROR: Failed to derive account {account_path}: {e}")
                raise ValueError(f"Could not derive test accounts from the configured mnemonic: {e}") from e

            address_str = Web3.to_checksum_address(derived.address)
            self.accounts.append(TestAccount(index, address_str, Web3.to_hex(derived.key), balance_wei))
            self.address_to_internal_index[address_str] = index

        print(f"INFO: AccountManager derived {len(self.accounts)} accounts, "
              f"each funded with {self.provider_options.default_balance_ether} ether.")

    def get_private_key(self, address: str) -> Optional[str]:
        """Retrieves the private key for a given checksummed account address."""
        index = self.address_to_internal_index.get(address)
        return self.accounts[index].private_key if index is not None else None

    def get_account_by_index(self, index: int) -> Optional[str]:
        """Gets an account address by its derivation index."""
        if 0 <= index < len(self.accounts):
            return self.accounts[index].address
        return None

    def get_index_by_address(self, address: str) -> Optional[int]:
        """Gets the derivation index of a checksummed account address."""
        return self.address_to_internal_index.get(address)

    def to_frame(self) -> pd.DataFrame:
        """Returns the accounts as a DataFrame with pub_key, priv_key and balance_wei columns."""
        return pd.DataFrame(
            [{'pub_key': acc.address, 'priv_key': acc.private_key, 'balance_wei': str(acc.balance_wei)}
             for acc in self.accounts],
            columns=['pub_key', 'priv_key', 'balance_wei']
        )

    def write_key_file(self, file_path: str = core_config.DEFAULT_KEY_FILE_OUTPUT) -> int:
        """
        Writes the derived accounts to a CSV key file (pub_key, priv_key, balance_wei).
        Returns the number of rows written.
        """
        key_data_frame = self.to_frame()
        key_data_frame.to_csv(file_path, index=False)
        print(f"INFO: Wrote {len(key_data_frame)} test accounts to {file_path}")
        return len(key_data_frame)

    @property
    def loaded_account_count(self) -> int:
        """Returns the number of derived accounts."""
        return len(self.accounts)

    @property
    def managed_accounts_list(self) -> List[str]:
        """Returns a copy of the list of derived account addresses."""
        return [acc.address for acc in self.accounts]


def ether_to_wei(amount_ether: float) -> int:
    """Converts an ether amount from the configuration into wei."""
    return int(Web3.to_wei(amount_ether, 'ether'))
