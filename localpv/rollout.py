"""Rollout status messages for deployments."""

from __future__ import annotations

import enum
import json
from dataclasses import dataclass
from typing import Any, Callable, Mapping


class PredicateName(str, enum.Enum):
    """Names of the checks that decide whether a deployment has rolled out."""

    PROGRESS_DEADLINE_EXCEEDED = "ProgressDeadlineExceeded"
    NOT_SPEC_SYNCED = "NotSpecSynced"
    OLDER_REPLICA_ACTIVE = "OlderReplicaActive"
    TERMINATION_IN_PROGRESS = "TerminationInProgress"
    UPDATE_IN_PROGRESS = "UpdateInProgress"


@dataclass
class RolloutOutput:
    """Rollout state of a deployment with a human readable message."""

    is_rolled_out: bool
    message: str

    def to_json(self) -> bytes:
        """Compact JSON encoding of the output."""
        return json.dumps(
            {"isRolledout": self.is_rolled_out, "message": self.message},
            separators=(",", ":"),
        ).encode()


class Rollout:
    """Produces encoded forms of a rollout output."""

    def __init__(
        self,
        output: RolloutOutput | None = None,
        encoder: Callable[[RolloutOutput], bytes] | None = None,
    ) -> None:
        self.output = output
        self._encoder = encoder or RolloutOutput.to_json

    def raw(self) -> bytes:
        """Encoded rollout output."""
        if self.output is None:
            raise ValueError("unable to get rollout status output")
        return self._encoder(self.output)


def _status(deploy: Mapping[str, Any]) -> Mapping[str, Any]:
    return deploy.get("status") or {}


def status_message(name: PredicateName | str, deploy: Mapping[str, Any]) -> str:
    """Message describing why a deployment has not rolled out.

    ``deploy`` is the deployment object as a mapping with ``spec`` and
    ``status`` sections.
    """
    predicate = PredicateName(name)
    status = _status(deploy)
    updated = status.get("updatedReplicas", 0)

    if predicate is PredicateName.PROGRESS_DEADLINE_EXCEEDED:
        return "deployment exceeded its progress deadline"
    if predicate is PredicateName.OLDER_REPLICA_ACTIVE:
        replicas = (deploy.get("spec") or {}).get("replicas")
        if replicas is None:
            return "replica update in-progress: some older replicas were updated"
        return (
            f"replica update in-progress: {updated} of {replicas} "
            "new replicas were updated"
        )
    if predicate is PredicateName.TERMINATION_IN_PROGRESS:
        pending = status.get("replicas", 0) - updated
        return (
            f"replica termination in-progress: {pending} old replicas "
            "are pending termination"
        )
    if predicate is PredicateName.UPDATE_IN_PROGRESS:
        available = status.get("availableReplicas", 0)
        return (
            f"replica update in-progress: {available} of {updated} "
            "updated replicas are available"
        )
    return "deployment rollout in-progress: waiting for deployment spec update"