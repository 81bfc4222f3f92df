import json
from pathlib import Path
from typing import Dict

from ape.contracts import ContractInstance
from eth_typing import ABI
from eth_utils import to_checksum_address

REGISTRY_JSON_FORMAT = {"indent": 4, "separators": (",", ": ")}


def _read(filepath: Path) -> Dict:
    if not filepath.exists():
        return dict()
    with open(filepath, "r") as file:
        return json.load(file)


def _sorted_abi(instance: ContractInstance) -> ABI:
    abi = [entry.model_dump(mode="json", by_alias=True) for entry in instance.contract_type.abi]
    return sorted(abi, key=lambda item: (item["type"], item.get("name", "")))


def check_unpublished(filepath: Path, chain_id: int) -> None:
    """Refuses to deploy again onto a chain the registry already records."""
    if str(chain_id) in _read(filepath):
        raise ValueError(f"Deployment is already published for chain_id {chain_id} in {filepath}.")


def record_deployment(instance: ContractInstance, filepath: Path) -> Path:
    """
    Adds a deployed contract to the JSON registry at ``filepath``.

    Registry layout: chain id -> contract name -> address, abi, tx_hash,
    block_number and deployer. Chain ids are kept in ascending order.
    """
    receipt = instance.receipt
    registry = _read(filepath)
    chain_entries = registry.setdefault(str(receipt.chain_id), dict())
    chain_entries[instance.contract_type.name] = {
        "address": to_checksum_address(instance.address),
        "abi": _sorted_abi(instance),
        "tx_hash": receipt.txn_hash,
        "block_number": int(receipt.block_number),
        "deployer": receipt.transaction.sender,
    }

    filepath.parent.mkdir(parents=True, exist_ok=True)
    registry = dict(sorted(registry.items(), key=lambda item: int(item[0])))
    with open(filepath, "w") as file:
        json.dump(registry, file, **REGISTRY_JSON_FORMAT)
    print(f"(i) {instance.contract_type.name} recorded in {filepath}")
    return filepath
