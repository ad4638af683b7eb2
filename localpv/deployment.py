"""Builder and rollout checks for deployment objects.

A deployment is handled as a plain mapping with ``metadata``, ``spec`` and
``status`` sections, using the field names of the Kubernetes API.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Mapping

from localpv.rollout import PredicateName, Rollout, RolloutOutput, status_message

Predicate = Callable[["Deploy"], bool]

_SUCCESS_MESSAGE = "deployment successfully rolled out"


class DeploymentBuildError(ValueError):
    """Raised when a deployment cannot be built from the given settings."""


@dataclass
class Deploy:
    """Wrapper over a deployment object."""

    obj: dict[str, Any] = field(default_factory=dict)

    def _metadata(self) -> dict[str, Any]:
        return self.obj.setdefault("metadata", {})

    def _spec(self) -> dict[str, Any]:
        return self.obj.setdefault("spec", {})

    def _status(self) -> Mapping[str, Any]:
        return self.obj.get("status") or {}

    def _template_spec(self) -> dict[str, Any]:
        template = self._spec().setdefault("template", {})
        return template.setdefault("spec", {})

    def is_rollout(self) -> tuple[PredicateName | None, bool]:
        """First failing rollout check, and whether the deployment rolled out."""
        for name, check in _ROLLOUT_CHECKS.items():
            if check(self):
                return name, False
        return None, True

    def failed_rollout(self, name: PredicateName | str) -> RolloutOutput:
        """Rollout output for a failed check."""
        return RolloutOutput(is_rolled_out=False, message=status_message(name, self.obj))

    def success_rollout(self) -> RolloutOutput:
        """Rollout output for a deployment that has rolled out."""
        return RolloutOutput(is_rolled_out=True, message=_SUCCESS_MESSAGE)

    def rollout_status(self) -> RolloutOutput:
        """Rollout output of this deployment."""
        name, rolled_out = self.is_rollout()
        if rolled_out:
            return self.success_rollout()
        return self.failed_rollout(name)

    def rollout_status_raw(self) -> bytes:
        """Rollout output of this deployment encoded as JSON."""
        return Rollout(self.rollout_status()).raw()

    def is_progress_deadline_exceeded(self) -> bool:
        """Whether the Progressing condition reports an exceeded deadline."""
        return any(
            cond.get("type") == "Progressing"
            and cond.get("reason") == "ProgressDeadlineExceeded"
            for cond in self._status().get("conditions") or []
        )

    def is_older_replica_active(self) -> bool:
        """Whether fewer replicas were updated than the spec asks for."""
        replicas = self._spec().get("replicas")
        return replicas is not None and self._status().get("updatedReplicas", 0) < replicas

    def is_termination_in_progress(self) -> bool:
        """Whether old replicas are still waiting to terminate."""
        status = self._status()
        return status.get("replicas", 0) > status.get("updatedReplicas", 0)

    def is_update_in_progress(self) -> bool:
        """Whether some updated replicas are not yet available."""
        status = self._status()
        return status.get("availableReplicas", 0) < status.get("updatedReplicas", 0)

    def is_not_sync_spec(self) -> bool:
        """Whether the controller has not yet observed the latest spec."""
        generation = (self.obj.get("metadata") or {}).get("generation", 0)
        return generation > self._status().get("observedGeneration", 0)

    def verify_replica_status(self) -> None:
        """Raise unless every replica of the deployment is ready."""
        replicas = self._spec().get("replicas")
        if replicas is None:
            raise ValueError(
                "failed to verify replica status for deployment: nil replicas"
            )
        ready = self._status().get("readyReplicas", 0)
        if ready != replicas:
            name = (self.obj.get("metadata") or {}).get("name", "")
            raise ValueError(
                f"{name} deployment pods are not in running state "
                f"expected: {replicas} got: {ready}"
            )


def is_progress_deadline_exceeded() -> Predicate:
    """Predicate form of Deploy.is_progress_deadline_exceeded."""
    return Deploy.is_progress_deadline_exceeded


def is_older_replica_active() -> Predicate:
    """Predicate form of Deploy.is_older_replica_active."""
    return Deploy.is_older_replica_active


def is_termination_in_progress() -> Predicate:
    """Predicate form of Deploy.is_termination_in_progress."""
    return Deploy.is_termination_in_progress


def is_update_in_progress() -> Predicate:
    """Predicate form of Deploy.is_update_in_progress."""
    return Deploy.is_update_in_progress


def is_not_sync_spec() -> Predicate:
    """Predicate form of Deploy.is_not_sync_spec."""
    return Deploy.is_not_sync_spec


_ROLLOUT_CHECKS: dict[PredicateName, Predicate] = {
    PredicateName.PROGRESS_DEADLINE_EXCEEDED: is_progress_deadline_exceeded(),
    PredicateName.OLDER_REPLICA_ACTIVE: is_older_replica_active(),
    PredicateName.TERMINATION_IN_PROGRESS: is_termination_in_progress(),
    PredicateName.UPDATE_IN_PROGRESS: is_update_in_progress(),
    PredicateName.NOT_SPEC_SYNCED: is_not_sync_spec(),
}


class Builder:
    """Builds a deployment object, collecting errors until ``build``."""

    def __init__(self, deployment: Deploy | None = None) -> None:
        self.deployment = deployment if deployment is not None else Deploy()
        self.checks: list[Predicate] = []
        self.errors: list[str] = []

    def _fail(self, message: str) -> Builder:
        self.errors.append(message)
        return self

    def with_name(self, name: str) -> Builder:
        """Set the deployment name."""
        if not name:
            return self._fail("failed to build deployment: missing name")
        self.deployment._metadata()["name"] = name
        return self

    def with_namespace(self, namespace: str) -> Builder:
        """Set the deployment namespace."""
        if not namespace:
            return self._fail("failed to build deployment: missing namespace")
        self.deployment._metadata()["namespace"] = namespace
        return self

    def with_annotations(self, annotations: Mapping[str, str]) -> Builder:
        """Merge annotations into any existing ones."""
        if not annotations:
            return self._fail("failed to build deployment object: missing annotations")
        existing = self.deployment._metadata().get("annotations")
        if existing is None:
            return self.with_annotations_new(annotations)
        existing.update(annotations)
        return self

    def with_annotations_new(self, annotations: Mapping[str, str]) -> Builder:
        """Replace existing annotations."""
        if not annotations:
            return self._fail("failed to build deployment object: no new annotations")
        self.deployment._metadata()["annotations"] = dict(annotations)
        return self

    def with_node_selector(self, selector: Mapping[str, str]) -> Builder:
        """Merge a node selector into the pod template."""
        if not selector:
            return self._fail("failed to build deployment object: no node selector")
        existing = self.deployment._template_spec().get("nodeSelector")
        if existing is None:
            return self.with_node_selector_new(selector)
        existing.update(selector)
        return self

    def with_node_selector_new(self, selector: Mapping[str, str]) -> Builder:
        """Replace the node selector of the pod template."""
        if not selector:
            return self._fail("failed to build deployment object: no new node selector")
        self.deployment._template_spec()["nodeSelector"] = dict(selector)
        return self

    def with_owner_reference_new(self, owner_references: Iterable[Any]) -> Builder:
        """Replace the owner references."""
        references = list(owner_references or [])
        if not references:
            return self._fail("failed to build deployment object: no new ownerRefernce")
        self.deployment._metadata()["ownerReferences"] = references
        return self

    def with_labels(self, labels: Mapping[str, str]) -> Builder:
        """Merge labels into any existing ones."""
        if not labels:
            return self._fail("failed to build deployment object: missing labels")
        existing = self.deployment._metadata().get("labels")
        if existing is None:
            return self.with_labels_new(labels)
        existing.update(labels)
        return self

    def with_labels_new(self, labels: Mapping[str, str]) -> Builder:
        """Replace existing labels."""
        if not labels:
            return self._fail("failed to build deployment object: no new labels")
        self.deployment._metadata()["labels"] = dict(labels)
        return self

    def with_selector_match_labels(self, match_labels: Mapping[str, str]) -> Builder:
        """Merge match labels into the deployment selector."""
        if not match_labels:
            return self._fail("failed to build deployment object: missing matchlabels")
        selector = self.deployment._spec().get("selector")
        if selector is None:
            return self.with_selector_match_labels_new(match_labels)
        selector.setdefault("matchLabels", {}).update(match_labels)
        return self

    def with_selector_match_labels_new(self, match_labels: Mapping[str, str]) -> Builder:
        """Replace the deployment selector with the given match labels."""
        if not match_labels:
            return self._fail("failed to build deployment object: no new matchlabels")
        self.deployment._spec()["selector"] = {"matchLabels": dict(match_labels)}
        return self

    def with_replicas(self, replicas: int | None) -> Builder:
        """Set the replica count."""
        if replicas is None:
            return self._fail("failed to build deployment object: nil replicas")
        if replicas < 0:
            return self._fail(
                f"failed to build deployment object: invalid replicas {{{replicas}}}"
            )
        self.deployment._spec()["replicas"] = replicas
        return self

    def with_strategy_type(self, strategy_type: str) -> Builder:
        """Set the deployment strategy type."""
        if not strategy_type:
            return self._fail("failed to build deployment object: missing strategytype")
        self.deployment._spec().setdefault("strategy", {})["type"] = strategy_type
        return self

    def with_pod_template_spec_builder(self, template_builder: Any) -> Builder:
        """Set the pod template from a builder whose ``build()`` returns it."""
        if template_builder is None:
            return self._fail("failed to build deployment: nil templatespecbuilder")
        try:
            template = template_builder.build()
        except Exception as exc:  # the template builder reports its own failures
            return self._fail(f"failed to build deployment: {exc}")
        self.deployment._spec()["template"] = template
        return self

    def add_check(self, predicate: Predicate) -> Builder:
        """Add a condition to be validated against the deployment."""
        self.checks.append(predicate)
        return self

    def add_checks(self, predicates: Iterable[Predicate]) -> Builder:
        """Add several conditions to be validated against the deployment."""
        for predicate in predicates:
            self.add_check(predicate)
        return self

    def build(self) -> dict[str, Any]:
        """Return the deployment object, or raise if any setting failed."""
        if self.errors:
            name = (self.deployment.obj.get("metadata") or {}).get("name", "")
            raise DeploymentBuildError(
                f"failed to build a deployment: {name}: failed to validate: "
                f"build errors were found: {self.errors}"
            )
        return self.deployment.obj