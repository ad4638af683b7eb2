"""Validation of volume requests handled by the local PV provisioner."""

from __future__ import annotations

import enum
from typing import Any, Mapping

from localpv.volume_config import get_node_hostname

SNAPSHOT_KIND = "VolumeSnapshot"
PVC_KIND = "PersistentVolumeClaim"
SNAPSHOT_API_GROUP = "snapshot.storage.k8s.io"

READ_WRITE_ONCE = "ReadWriteOnce"


class ProvisioningState(str, enum.Enum):
    """Outcome reported to the controller together with a provisioning result."""

    FINISHED = "Finished"
    IN_BACKGROUND = "Background"
    NO_CHANGE = "NoChange"
    RESCHEDULE = "Reschedule"


class ProvisioningError(Exception):
    """Raised when a volume request cannot be provisioned.

    ``state`` tells the controller whether to give up or to reschedule.
    """

    def __init__(
        self, message: str, state: ProvisioningState = ProvisioningState.FINISHED
    ) -> None:
        super().__init__(message)
        self.state = state


def _metadata(obj: Mapping[str, Any]) -> Mapping[str, Any]:
    return obj.get("metadata") or {}


def _spec(obj: Mapping[str, Any]) -> Mapping[str, Any]:
    return obj.get("spec") or {}


def validate_volume_source(pvc: Mapping[str, Any]) -> None:
    """Reject claims that ask for a data source.

    Clones, snapshots and volume populators are not handled by this
    provisioner.
    """
    data_source = _spec(pvc).get("dataSource")
    if data_source is None:
        return

    pvc_name = _metadata(pvc).get("name", "")
    if not data_source.get("name"):
        raise ProvisioningError(f"dataSource name not found for PVC `{pvc_name}`")

    kind = data_source.get("kind", "")
    api_group = data_source.get("apiGroup")
    if kind == SNAPSHOT_KIND:
        if api_group != SNAPSHOT_API_GROUP:
            raise ProvisioningError(
                "snapshot feature not supported by this provisioner"
            )
        raise ProvisioningError(
            f"datasource `{kind}` of group `{api_group}` is not handled by the provisioner"
        )
    if kind == PVC_KIND:
        raise ProvisioningError("clone feature not supported by this provisioner")
    raise ProvisioningError(
        f"datasource `{kind}` of group `{api_group or ''}` is not handled by the provisioner"
    )


def validate_provision_request(
    pvc: Mapping[str, Any], selected_node: Mapping[str, Any] | None
) -> str:
    """Check a claim and its selected node before provisioning.

    Returns the hostname of the selected node.
    """
    validate_volume_source(pvc)

    spec = _spec(pvc)
    if spec.get("selector") is not None:
        raise ProvisioningError("claim.Spec.Selector is not supported")
    if any(mode != READ_WRITE_ONCE for mode in spec.get("accessModes") or []):
        raise ProvisioningError("Only support ReadWriteOnce access mode")

    if selected_node is None:
        raise ProvisioningError(
            "configuration error, no node was specified",
            ProvisioningState.RESCHEDULE,
        )

    hostname = get_node_hostname(selected_node)
    if not hostname:
        node_name = _metadata(selected_node).get("name", "")
        raise ProvisioningError(
            f"configuration error, node{{{node_name}}} hostname is empty"
        )
    return hostname