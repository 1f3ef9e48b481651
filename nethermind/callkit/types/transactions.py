from dataclasses import dataclass
from typing import Any


@dataclass(slots=True)
class TransactionRecord:
    """Transaction returned by a transaction history provider"""

    hash: str
    from_address: str
    to_address: str | None
    input: str
    value: str
    gas: str
    receipt_status: str | None

    @classmethod
    def from_json(cls, tx_json: dict[str, Any]) -> "TransactionRecord":
        """
        Parses a transaction from the JSON returned by the Moralis wallet transactions API.

        :param tx_json: Single entry from the 'result' list of the API response
        """
        return cls(
            hash=tx_json["hash"],
            from_address=tx_json["from_address"],
            to_address=tx_json.get("to_address"),
            input=tx_json.get("input") or "0x",
            value=str(tx_json.get("value", "0")),
            gas=str(tx_json.get("gas", "0")),
            receipt_status=None if tx_json.get("receipt_status") is None else str(tx_json["receipt_status"]),
        )

    @property
    def succeeded(self) -> bool:
        """True if the transaction receipt reports success"""
        return self.receipt_status == "1"


@dataclass(slots=True)
class MatchResult:
    """Transaction matched against locally computed calldata"""

    hash: str
    data: str
    from_address: str
    to_address: str | None
    value: str
    gas_limit: str
    status: bool

    @classmethod
    def from_record(cls, record: TransactionRecord) -> "MatchResult":
        """Normalizes a provider record into a match result"""
        return cls(
            hash=record.hash,
            data=record.input,
            from_address=record.from_address,
            to_address=record.to_address,
            value=record.value,
            gas_limit=record.gas,
            status=record.succeeded,
        )
