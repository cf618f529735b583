import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0


class RpcError(RuntimeError):
    """A single JSON-RPC query against the node failed."""


@dataclass(frozen=True)
class PerformanceSample:
    slot: int
    num_transactions: int
    num_slots: int
    sample_period_secs: int


@dataclass(frozen=True)
class EpochInfo:
    epoch: int
    absolute_slot: int
    slot_index: int
    slots_in_epoch: int


@dataclass(frozen=True)
class VoteAccounts:
    current: int
    delinquent: int


class RpcClient:
    """Point-in-time queries against a Solana JSON-RPC endpoint.

    Every query either returns a typed value or raises RpcError; callers decide
    what a failure means.
    """

    def __init__(
        self,
        url: str,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        commitment: str = "confirmed",
        session: requests.Session | None = None,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self.commitment = commitment
        self.session = session or requests.Session()
        self._request_id = 0

    def _rpc_call(self, method: str, params: Optional[list] = None) -> Any:
        self._request_id += 1
        payload = {
            "jsonrpc": "2.0",
            "id": self._request_id,
            "method": method,
            "params": params or [],
        }
        try:
            response = self.session.post(self.url, json=payload, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as exc:
            raise RpcError(f"{method}: {exc}") from exc
        except ValueError as exc:
            raise RpcError(f"{method}: invalid JSON response") from exc
        if not isinstance(data, dict):
            raise RpcError(f"{method}: unexpected response {data!r}")
        error = data.get("error")
        if error:
            message = error.get("message", error) if isinstance(error, dict) else error
            raise RpcError(f"{method}: {message}")
        if "result" not in data:
            raise RpcError(f"{method}: response has no result")
        return data["result"]

    def _commitment_config(self) -> Dict[str, str]:
        return {"commitment": self.commitment}

    def health(self) -> bool:
        # An unhealthy node answers getHealth with an error object
        return self._rpc_call("getHealth") == "ok"

    def version(self) -> str:
        result = self._rpc_call("getVersion")
        try:
            return str(result["solana-core"])
        except (KeyError, TypeError) as exc:
            raise RpcError(f"getVersion: malformed result {result!r}") from exc

    def current_slot(self) -> int:
        result = self._rpc_call("getSlot", [self._commitment_config()])
        try:
            return int(result)
        except (TypeError, ValueError) as exc:
            raise RpcError(f"getSlot: malformed result {result!r}") from exc

    def epoch_info(self) -> EpochInfo:
        result = self._rpc_call("getEpochInfo", [self._commitment_config()])
        try:
            return EpochInfo(
                epoch=int(result["epoch"]),
                absolute_slot=int(result["absoluteSlot"]),
                slot_index=int(result["slotIndex"]),
                slots_in_epoch=int(result["slotsInEpoch"]),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise RpcError(f"getEpochInfo: malformed result {result!r}") from exc

    def cluster_node_count(self) -> int:
        result = self._rpc_call("getClusterNodes")
        if not isinstance(result, list):
            raise RpcError(f"getClusterNodes: malformed result {result!r}")
        return len(result)

    def recent_performance_sample(self, n: int = 1) -> PerformanceSample | None:
        """Return the newest of the last ``n`` performance samples, or None if the node has none."""
        result = self._rpc_call("getRecentPerformanceSamples", [n])
        if not isinstance(result, list):
            raise RpcError(f"getRecentPerformanceSamples: malformed result {result!r}")
        if not result:
            return None
        latest = result[0]
        try:
            return PerformanceSample(
                slot=int(latest["slot"]),
                num_transactions=int(latest["numTransactions"]),
                num_slots=int(latest["numSlots"]),
                sample_period_secs=int(latest["samplePeriodSecs"]),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise RpcError(f"getRecentPerformanceSamples: malformed sample {latest!r}") from exc

    def vote_accounts(self) -> VoteAccounts:
        result = self._rpc_call("getVoteAccounts", [self._commitment_config()])
        try:
            return VoteAccounts(
                current=len(result["current"]),
                delinquent=len(result["delinquent"]),
            )
        except (KeyError, TypeError) as exc:
            raise RpcError(f"getVoteAccounts: malformed result {result!r}") from exc

    def recent_blocks(self, from_slot: int, limit: int = 100) -> List[int]:
        result = self._rpc_call(
            "getBlocksWithLimit", [from_slot, limit, self._commitment_config()]
        )
        try:
            return [int(slot) for slot in result]
        except (TypeError, ValueError) as exc:
            raise RpcError(f"getBlocksWithLimit: malformed result {result!r}") from exc

    def top_accounts_by_balance(self) -> List[Dict[str, Any]]:
        result = self._rpc_call("getLargestAccounts", [self._commitment_config()])
        try:
            accounts = result["value"]
        except (KeyError, TypeError) as exc:
            raise RpcError(f"getLargestAccounts: malformed result {result!r}") from exc
        if not isinstance(accounts, list):
            raise RpcError(f"getLargestAccounts: malformed value {accounts!r}")
        return accounts
