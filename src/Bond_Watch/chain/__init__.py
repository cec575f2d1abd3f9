"""On-chain access: ABI codec, JSON-RPC client, and the Bond Depository facade.

Re-exports the public classes so consumers can import directly:
    from Bond_Watch.chain import BondDepository, JsonRpcClient
"""

from Bond_Watch.chain.depository import BondDepository
from Bond_Watch.chain.rpc import JsonRpcClient, build_http_client

__all__ = [
    "BondDepository",
    "JsonRpcClient",
    "build_http_client",
]
