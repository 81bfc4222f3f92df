#!/usr/bin/python3
import sys

from deployment.chain_of_trust import deploy_chain_of_trust_base
from deployment.constants import CONSTRUCTOR_PARAMS_DIR
from deployment.params import Deployer

CONSTRUCTOR_PARAMS_FILEPATH = CONSTRUCTOR_PARAMS_DIR / "lacchain" / "chain-of-trust-base.yml"


def main():
    try:
        deployer = Deployer.from_yaml(filepath=CONSTRUCTOR_PARAMS_FILEPATH)
        chain_of_trust_base = deploy_chain_of_trust_base(deployer)
        deployer.finalize(chain_of_trust_base)
    except Exception as error:
        print(repr(error), file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
