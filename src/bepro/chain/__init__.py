"""
Chain - On-chain interaction layer for the BEPRO Network client.

Provides the async JSON-RPC client, ABI registry, signer handling and
transaction utilities used by the contract adapters.

Uses httpx + eth-account + eth-abi instead of the heavyweight web3.py.
"""
