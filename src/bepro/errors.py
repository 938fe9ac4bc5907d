"""
Exceptions raised by the BEPRO Network client.

Local validation failures raise before anything is sent to the chain.
Transport failures (``httpx`` errors) are not wrapped and propagate as-is.
"""

from __future__ import annotations


class BeproError(RuntimeError):
    exit_code: int = 1


class InvalidAmountError(BeproError, ValueError):
    exit_code = 2


class ArgumentMismatchError(BeproError, ValueError):
    exit_code = 2


class ApprovalRequiredError(BeproError):
    exit_code = 3


class ContractNotDeployedError(BeproError):
    exit_code = 4


class RpcError(BeproError):
    exit_code = 5

    def __init__(self, error: object) -> None:
        self.error = error
        super().__init__(f"RPC error: {error}")


class TransactionRevertedError(BeproError):
    exit_code = 6

    def __init__(self, tx_hash: str, receipt: dict | None = None) -> None:
        self.tx_hash = tx_hash
        self.receipt = receipt or {}
        super().__init__(f"Transaction {tx_hash} reverted")


__all__ = [
    "ApprovalRequiredError",
    "ArgumentMismatchError",
    "BeproError",
    "ContractNotDeployedError",
    "InvalidAmountError",
    "RpcError",
    "TransactionRevertedError",
]
