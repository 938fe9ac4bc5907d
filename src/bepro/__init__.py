__all__ = [
    # Contracts
    "BEPRO_TOKEN_ADDRESS",
    "Contract",
    "ERC20Contract",
    "Network",
    # Records
    "Issue",
    "MergeProposal",
    # Errors
    "ApprovalRequiredError",
    "ArgumentMismatchError",
    "BeproError",
    "ContractNotDeployedError",
    "InvalidAmountError",
    "RpcError",
    "TransactionRevertedError",
    # Conversions
    "BEPRO_DECIMALS",
    "from_contract_time",
    "from_decimals",
    "from_hex",
    "to_contract_time",
    "to_decimals",
]

from .contracts import BEPRO_TOKEN_ADDRESS, Contract, ERC20Contract, Network
from .errors import (
    ApprovalRequiredError,
    ArgumentMismatchError,
    BeproError,
    ContractNotDeployedError,
    InvalidAmountError,
    RpcError,
    TransactionRevertedError,
)
from .models import Issue, MergeProposal
from .utils import (
    BEPRO_DECIMALS,
    from_contract_time,
    from_decimals,
    from_hex,
    to_contract_time,
    to_decimals,
)
