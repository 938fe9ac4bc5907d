"""
Contracts - Async adapters over deployed contracts.

- base:    generic invocation helper (reads via eth_call, writes via signed tx)
- erc20:   ERC-20 token adapter used for staking approvals
- network: the BEPRO Network issue / staking / merge-proposal contract
"""

from .base import Contract
from .erc20 import ERC20Contract
from .network import BEPRO_TOKEN_ADDRESS, Network

__all__ = ["BEPRO_TOKEN_ADDRESS", "Contract", "ERC20Contract", "Network"]
