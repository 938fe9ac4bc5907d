"""
Signer key management for the BEPRO Network client.

Transactions are signed locally with an eth-account ``LocalAccount``.
The key comes from ``PRIVATE_KEY`` in the environment, optionally
loaded from ``~/.bepro/.env``.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from eth_account import Account
from eth_account.signers.local import LocalAccount


BEPRO_DIR = Path.home() / ".bepro"
BEPRO_ENV = BEPRO_DIR / ".env"


def load_config(env_path: Optional[Path] = None) -> None:
    """Load ``.env`` into the process environment without overriding it."""
    env_path = env_path or BEPRO_ENV
    if env_path.exists():
        load_dotenv(env_path, override=False)


def load_private_key(env_path: Optional[Path] = None) -> str:
    """
    Load the signer key from the environment or a .env file.

    Returns:
        0x-prefixed hex private key

    Raises:
        ValueError: If PRIVATE_KEY is not set
    """
    env_path = env_path or BEPRO_ENV
    load_config(env_path)

    private_key = os.environ.get("PRIVATE_KEY")
    if not private_key:
        raise ValueError(f"PRIVATE_KEY not found. Set it in the environment or in {env_path}")

    if not private_key.startswith("0x"):
        private_key = "0x" + private_key

    return private_key


def get_account(private_key: Optional[str] = None) -> LocalAccount:
    """Get a LocalAccount, loading the key from the environment when omitted."""
    if private_key is None:
        private_key = load_private_key()
    return Account.from_key(private_key)


def get_address(private_key: Optional[str] = None) -> str:
    return get_account(private_key).address
