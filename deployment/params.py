import os
from abc import ABC, abstractmethod
from collections import OrderedDict
from pathlib import Path
from typing import Any, Dict, Optional

from ape import accounts, networks
from ape.api import AccountAPI
from ape.contracts.base import ContractContainer, ContractInstance
from ape.utils import ZERO_ADDRESS
from eth_typing import ChecksumAddress
from web3.auto import w3

from deployment.constants import DEPLOYER_ACCOUNT_ENVVAR, RevocationMode
from deployment.networks import is_local_network
from deployment.registry import check_unpublished, record_deployment
from deployment.utils import (
    base_relay_address,
    get_contract_container,
    load_deployment_config,
    registry_filepath,
    validate_config,
)

VARIABLE_PREFIX = "$"


class Variable(ABC):
    """A ``$``-prefixed placeholder in a params file."""

    @abstractmethod
    def resolve(self) -> Any:
        raise NotImplementedError


class RelayAddress(Variable):
    NAME = "relay"

    def __init__(self, relay_address: Optional[ChecksumAddress]):
        self.relay_address = relay_address

    def resolve(self) -> Any:
        return self.relay_address or ZERO_ADDRESS


class Revocation(Variable):
    PREFIX = "revocation:"

    def __init__(self, mode_name: str):
        try:
            self.mode = RevocationMode[mode_name]
        except KeyError:
            modes = ", ".join(mode.name for mode in RevocationMode)
            raise ValueError(f"Unknown revocation mode '{mode_name}'; expected one of {modes}.")

    def resolve(self) -> Any:
        return int(self.mode)


class Constant(Variable):
    def __init__(self, name: str, constants: Dict[str, Any]):
        try:
            self.value = constants[name]
        except KeyError:
            raise ValueError(f"Constant '{name}' not found in params file.")

    def resolve(self) -> Any:
        return self.value


def parse_value(
    value: Any, constants: Dict[str, Any], relay_address: Optional[ChecksumAddress]
) -> Any:
    """Turns ``$relay``, ``$revocation:<MODE>`` and ``$CONSTANT`` into variables."""
    if not (isinstance(value, str) and value.startswith(VARIABLE_PREFIX)):
        return value  # literal

    name = value[len(VARIABLE_PREFIX) :]
    if name == RelayAddress.NAME:
        return RelayAddress(relay_address)
    if name.startswith(Revocation.PREFIX):
        return Revocation(name[len(Revocation.PREFIX) :])
    if name.isupper():
        return Constant(name, constants)
    raise ValueError(f"Unsupported variable '{value}' in params file.")


def _encodable(abi_type: str, value: Any) -> Any:
    # ape converts numeric strings for integer inputs at call time
    if abi_type.startswith(("uint", "int")) and isinstance(value, str) and value.isdigit():
        return int(value)
    return value


class ConstructorParameters:
    """Constructor arguments, per contract, in ABI order."""

    class Invalid(Exception):
        """Raised when the constructor parameters do not fit the constructor ABI"""

    def __init__(self, parameters: Dict[str, OrderedDict]):
        self.parameters = parameters

    @classmethod
    def from_config(cls, config: Dict) -> "ConstructorParameters":
        constants = config.get("constants") or dict()
        relay_address = base_relay_address(config)
        parameters = dict()
        for entry in config["contracts"]:
            if isinstance(entry, str):
                entry = {entry: None}
            if not isinstance(entry, dict) or len(entry) != 1:
                raise ValueError("Malformed 'contracts' entry in params file.")

            ((contract_name, contract_data),) = entry.items()
            raw_values = (contract_data or dict()).get("constructor") or dict()
            parameters[contract_name] = OrderedDict(
                (name, parse_value(value, constants, relay_address))
                for name, value in raw_values.items()
            )
        return cls(parameters)

    def resolve(self, contract_name: str) -> OrderedDict:
        try:
            values = self.parameters[contract_name]
        except KeyError:
            raise ValueError(f"{contract_name} is not listed in the params file.")
        return OrderedDict(
            (name, value.resolve() if isinstance(value, Variable) else value)
            for name, value in values.items()
        )

    def validate(self, container: ContractContainer) -> None:
        """Checks count, names and types of the resolved values against the constructor ABI."""
        contract_name = container.contract_type.name
        resolved = self.resolve(contract_name)
        abi_inputs = container.constructor.abi.inputs
        if len(abi_inputs) != len(resolved):
            raise self.Invalid(
                f"{contract_name} constructor takes {len(abi_inputs)} parameters, "
                f"params file gives {len(resolved)}."
            )

        for position, (abi_input, (name, value)) in enumerate(zip(abi_inputs, resolved.items())):
            if abi_input.name != name:
                raise self.Invalid(
                    f"{contract_name} parameter '{name}' at position {position} should be "
                    f"named '{abi_input.name}'."
                )
            if not w3.is_encodable(abi_input.type, _encodable(abi_input.type, value)):
                raise self.Invalid(
                    f"{contract_name} parameter '{name}' at position {position} has value "
                    f"'{value}', which is not a valid '{abi_input.type}'."
                )


def _default_account() -> AccountAPI:
    if is_local_network():
        return accounts.test_accounts[0]
    alias = os.environ.get(DEPLOYER_ACCOUNT_ENVVAR)
    if not alias:
        raise ValueError(f"{DEPLOYER_ACCOUNT_ENVVAR} is not set.")
    return accounts.load(alias)


class Deployer:
    """
    Signs the deployments described by a params file and records them in its registry.

    Everything that can be checked before broadcasting is checked in the
    constructor: the target chain, the registry, and each contract's
    constructor parameters. Transactions are signed without prompting.
    """

    def __init__(self, config: Dict, path: Path, account: Optional[AccountAPI] = None):
        self.path = path
        self.chain_id = validate_config(config)
        self.registry_filepath = registry_filepath(config)
        check_unpublished(self.registry_filepath, self.chain_id)

        self.relay_address = base_relay_address(config) or ZERO_ADDRESS
        self.constructor_parameters = ConstructorParameters.from_config(config)
        for contract_name in self.constructor_parameters.parameters:
            self.constructor_parameters.validate(get_contract_container(contract_name))

        self.account = account or _default_account()
        self.account.set_autosign(True)
        self._print_deployment_info()

    @classmethod
    def from_yaml(cls, filepath: Path, **kwargs) -> "Deployer":
        return cls(config=load_deployment_config(filepath), path=filepath, **kwargs)

    def deploy(self, container: ContractContainer) -> ContractInstance:
        contract_name = container.contract_type.name
        values = self.constructor_parameters.resolve(contract_name)
        print(f"\nDeploying {contract_name}")
        for name, value in values.items():
            print(f"\t{name}={value}")
        return self.account.deploy(container, *values.values())

    def finalize(self, instance: ContractInstance) -> Path:
        return record_deployment(instance, self.registry_filepath)

    def _print_deployment_info(self):
        print(
            f"Account: {self.account.address} (autosign)",
            f"Config: {self.path}",
            f"Registry: {self.registry_filepath}",
            f"Base Relay: {self.relay_address}",
            f"Ecosystem: {networks.provider.network.ecosystem.name}",
            f"Network: {networks.provider.network.name}",
            f"Chain ID: {networks.provider.network.chain_id}",
            f"Gas Price: {networks.provider.gas_price}",
            sep="\n",
        )
