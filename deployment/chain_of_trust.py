from typing import Optional

from ape.contracts import ContractContainer, ContractInstance

from deployment.constants import CHAIN_OF_TRUST_BASE
from deployment.params import Deployer
from deployment.utils import get_contract_container


def deploy_chain_of_trust_base(
    deployer: Deployer, container: Optional[ContractContainer] = None
) -> ContractInstance:
    """
    Deploys a ChainOfTrustBase instance bound to the network's base relay.

    The constructor parameters (relay, depth, root DID, root account manager,
    revocation mode and root maintainer flag) come from the deployer's config.
    """
    container = container or get_contract_container(CHAIN_OF_TRUST_BASE)
    print(f"Using Base Relay Address: {deployer.relay_address}")
    instance = deployer.deploy(container)
    print(f"{CHAIN_OF_TRUST_BASE} instance successfully deployed at address: {instance.address}")
    return instance
