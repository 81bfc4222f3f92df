from enum import IntEnum
from pathlib import Path

import deployment

#
# Filesystem
#

DEPLOYMENT_DIR = Path(deployment.__file__).parent
CONSTRUCTOR_PARAMS_DIR = DEPLOYMENT_DIR / "constructor_params"
ARTIFACTS_DIR = DEPLOYMENT_DIR / "artifacts"

#
# Networks
#

LOCAL_NETWORKS = ["local"]

# alias of the ape account that signs live deployments
DEPLOYER_ACCOUNT_ENVVAR = "DEPLOYER_ACCOUNT"

#
# Contracts
#

CHAIN_OF_TRUST_BASE = "ChainOfTrustBase"

#
# Revocation modes as defined in the ChainOfTrust contracts
#


class RevocationMode(IntEnum):
    ONLY_DIRECT_PARENT = 0
    ANY_ANCESTOR = 1
