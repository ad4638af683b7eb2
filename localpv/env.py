"""Environment settings read by the local PV provisioner."""

from __future__ import annotations

import logging
import os

logger = logging.getLogger(__name__)

OPENEBS_NAMESPACE = "OPENEBS_NAMESPACE"
OPENEBS_SERVICE_ACCOUNT = "OPENEBS_SERVICE_ACCOUNT"

PROVISIONER_HELPER_IMAGE = "OPENEBS_IO_HELPER_IMAGE"
PROVISIONER_HELPER_POD_HOST_NETWORK = "OPENEBS_IO_HELPER_POD_HOST_NETWORK"
PROVISIONER_BASE_PATH = "OPENEBS_IO_BASE_PATH"
PROVISIONER_IMAGE_PULL_SECRETS = "OPENEBS_IO_IMAGE_PULL_SECRETS"

LEADER_ELECTION_KEY = "LEADER_ELECTION_ENABLED"

DEFAULT_HELPER_IMAGE = "openebs/linux-utils:latest"
DEFAULT_BASE_PATH = "/var/openebs/local"


def _get(key: str) -> str:
    """Return the variable's value with surrounding whitespace removed."""
    return os.environ.get(key, "").strip()


def _get_or_default(key: str, default: str) -> str:
    return _get(key) or default


def get_openebs_namespace() -> str:
    """Namespace the provisioner runs in."""
    return _get(OPENEBS_NAMESPACE)


def get_default_helper_image() -> str:
    """Container image used for helper pods."""
    return _get_or_default(PROVISIONER_HELPER_IMAGE, DEFAULT_HELPER_IMAGE)


def get_helper_pod_host_network() -> bool:
    """Whether helper pods run on the host network."""
    return _get_or_default(PROVISIONER_HELPER_POD_HOST_NETWORK, "false") == "true"


def get_default_base_path() -> str:
    """Default base directory for hostpath volumes."""
    return _get_or_default(PROVISIONER_BASE_PATH, DEFAULT_BASE_PATH)


def get_openebs_service_account_name() -> str:
    """Service account used by helper pods."""
    return _get(OPENEBS_SERVICE_ACCOUNT)


def get_openebs_image_pull_secrets() -> str:
    """Comma separated image pull secret names for helper pods."""
    return _get(PROVISIONER_IMAGE_PULL_SECRETS)


def is_leader_election_enabled() -> bool:
    """Leader election is on unless the variable explicitly says no."""
    value = os.environ.get(LEADER_ELECTION_KEY, "").lower()
    if value in ("n", "no", "false"):
        logger.info("Leader election disabled for localpv-provisioner via leaderElectionKey")
        return False
    if value in ("y", "yes", "true"):
        logger.info("Leader election enabled for localpv-provisioner via leaderElectionKey")
    else:
        logger.info("Leader election enabled for localpv-provisioner")
    return True