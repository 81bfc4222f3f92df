from types import SimpleNamespace
from unittest.mock import Mock

import pytest

import deployment.chain_of_trust
import deployment.networks
import deployment.params
import deployment.utils
from deployment.constants import CHAIN_OF_TRUST_BASE, CONSTRUCTOR_PARAMS_DIR
from deployment.params import Deployer
from deployment.utils import load_deployment_config

# Common constants
LACCHAIN_CHAIN_ID = 648540
CHAIN_OF_TRUST_BASE_PARAMS = CONSTRUCTOR_PARAMS_DIR / "lacchain" / "chain-of-trust-base.yml"
DEPLOYER_ADDRESS = "0x1111111111111111111111111111111111111111"
DEPLOYED_ADDRESS = "0xabcdef0000000000000000000000000000abcdef"

ROOT_DID = (
    "did:web:lacchain.id:3DArjNYv1q235YgLb2F7HEQmtmNncxu7qdXVnXvPx22e3UsX2RgNhHyhvZEw1Gb5C"
)
ROOT_ACCOUNT_MANAGER = "0xFFFCe4Cc7033746106986Aca1B8B8572B2f58B08"

CHAIN_OF_TRUST_BASE_ABI_INPUTS = [
    ("trustedForwarderAddress", "address"),
    ("maxDepth", "uint8"),
    ("did", "string"),
    ("rootEntityManager", "address"),
    ("revokeMode", "uint8"),
    ("isRootMaintainer", "bool"),
]

CHAIN_OF_TRUST_BASE_ABI = [
    {"type": "function", "name": "revokeMode", "inputs": [], "outputs": []},
    {"type": "constructor", "inputs": []},
    {"type": "function", "name": "depth", "inputs": [], "outputs": []},
]


# Utility functions
def make_container(name, abi_inputs):
    container = Mock()
    container.contract_type.name = name
    container.constructor.abi.inputs = [
        SimpleNamespace(name=input_name, type=input_type) for input_name, input_type in abi_inputs
    ]
    return container


def make_instance(address=DEPLOYED_ADDRESS, chain_id=LACCHAIN_CHAIN_ID, name=CHAIN_OF_TRUST_BASE):
    abi = [SimpleNamespace(model_dump=lambda d=d, **kwargs: d) for d in CHAIN_OF_TRUST_BASE_ABI]
    return SimpleNamespace(
        address=address,
        contract_type=SimpleNamespace(name=name, abi=abi),
        receipt=SimpleNamespace(
            chain_id=chain_id,
            txn_hash="0x" + "cd" * 32,
            block_number=99,
            transaction=SimpleNamespace(sender=DEPLOYER_ADDRESS),
        ),
    )


# Fixtures
@pytest.fixture
def chain_of_trust_container():
    return make_container(CHAIN_OF_TRUST_BASE, CHAIN_OF_TRUST_BASE_ABI_INPUTS)


@pytest.fixture
def project_containers(monkeypatch, chain_of_trust_container):
    containers = {CHAIN_OF_TRUST_BASE: chain_of_trust_container}

    def get_contract_container(contract):
        try:
            return containers[contract]
        except KeyError:
            raise ValueError(f"No contract artifact named '{contract}' in the project.")

    for module in (deployment.params, deployment.chain_of_trust):
        monkeypatch.setattr(module, "get_contract_container", get_contract_container)
    return containers


@pytest.fixture
def network_name():
    return "openprotest"


@pytest.fixture
def connected_network(monkeypatch, network_name):
    network = SimpleNamespace(
        name=network_name,
        chain_id=LACCHAIN_CHAIN_ID,
        ecosystem=SimpleNamespace(name="lacchain"),
    )
    fake_networks = SimpleNamespace(provider=SimpleNamespace(network=network, gas_price=0))
    for module in (deployment.networks, deployment.utils, deployment.params):
        monkeypatch.setattr(module, "networks", fake_networks)
    return network


@pytest.fixture
def deployer_account():
    account = Mock()
    account.address = DEPLOYER_ADDRESS
    account.deploy.return_value = make_instance()
    return account


@pytest.fixture
def config(tmp_path):
    config = load_deployment_config(CHAIN_OF_TRUST_BASE_PARAMS)
    config["artifacts"]["dir"] = str(tmp_path)
    return config


@pytest.fixture
def deployer(config, connected_network, project_containers, deployer_account):
    return Deployer(config=config, path=CHAIN_OF_TRUST_BASE_PARAMS, account=deployer_account)
