from pathlib import Path
from typing import Dict, Optional

import yaml
from ape import networks, project
from ape.contracts import ContractContainer
from eth_typing import ChecksumAddress
from eth_utils import to_checksum_address

from deployment.constants import ARTIFACTS_DIR
from deployment.networks import is_local_network


def load_deployment_config(filepath: Path) -> Dict:
    with open(filepath, "r") as file:
        return yaml.safe_load(file)


def registry_filepath(config: Dict) -> Path:
    """Where the deployment described by ``config`` is recorded."""
    artifacts = config.get("artifacts") or dict()
    filename = artifacts.get("filename")
    if not filename:
        raise ValueError("artifacts.filename is not set in params file.")
    return Path(artifacts.get("dir", ARTIFACTS_DIR)) / filename


def base_relay_address(config: Dict) -> Optional[ChecksumAddress]:
    relay = (config.get("network") or dict()).get("base_relay_address")
    return to_checksum_address(relay) if relay else None


def validate_config(config: Dict) -> int:
    """
    Checks the params file against the connected network and returns its chain id.

    A live network must report the chain id the params file targets;
    local networks accept any chain id.
    """
    chain_id = (config.get("deployment") or dict()).get("chain_id")
    if not chain_id:
        raise ValueError("deployment.chain_id is not set in params file.")
    if not config.get("contracts"):
        raise ValueError("params file has no 'contracts' to deploy.")

    chain_id = int(chain_id)
    connected_chain_id = networks.provider.network.chain_id
    if chain_id != connected_chain_id and not is_local_network():
        raise ValueError(
            f"params file targets chain {chain_id} but the connected "
            f"network is chain {connected_chain_id}."
        )
    return chain_id


def get_contract_container(contract: str) -> ContractContainer:
    try:
        return getattr(project, contract)
    except AttributeError:
        raise ValueError(f"No contract artifact named '{contract}' in the project.")
