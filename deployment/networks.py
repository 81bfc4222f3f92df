from ape import networks

from deployment.constants import LOCAL_NETWORKS


def is_local_network() -> bool:
    """Returns True if the connected network is a local (test) network."""
    network_name = networks.provider.network.name
    return network_name in LOCAL_NETWORKS or network_name.endswith("-fork")
