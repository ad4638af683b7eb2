# localpv

Building blocks for a dynamic local persistent-volume provisioner. The package
reads provisioner settings from the environment, merges StorageClass
configuration into a volume configuration, validates claims, prepares
helper-pod commands and quota limits, and reports deployment rollout status.
Kubernetes objects (claims, volumes, nodes, deployments) are handled as plain
dictionaries that use the field names of the Kubernetes API.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Modules

- `localpv.env`: settings from the environment.
  `get_openebs_namespace()`, `get_openebs_service_account_name()` and
  `get_openebs_image_pull_secrets()` return the trimmed value or an empty
  string; `get_default_helper_image()` falls back to
  `openebs/linux-utils:latest` and `get_default_base_path()` to
  `/var/openebs/local`; `get_helper_pod_host_network()` is true only for
  the value `true`; `is_leader_election_enabled()` is true unless
  `LEADER_ELECTION_ENABLED` is `n`, `no` or `false`.
- `localpv.volume_config`: `CasConfig` entries and `VolumeConfig`, with
  `get_storage_type()` (default `hostpath`), `get_fs_type()`,
  `get_block_device_selectors()`, `get_node_affinity_label_keys()`,
  `get_path()` (base path joined with the PV name; raises `ConfigError`
  when the base path is empty), `is_xfs_quota_enabled()`,
  `is_ext4_quota_enabled()` and `get_data_field()`. It also has
  `data_config_to_map()`, `list_config_to_map()`,
  `get_storage_class_name()`, `get_local_pv_type()`, `get_node_hostname()`,
  `get_node_label_value()`, `get_taints()` and `get_image_pull_secrets()`.
- `localpv.helper_pod`: `HelperPodOptions` with `validate()` and
  `validate_limits()`, `convert_to_k()`, `split_volume_path()` and
  `build_quota_command()`. Invalid options raise `HelperPodError`.
- `localpv.provisioner`: `validate_volume_source()` rejects claims with a
  data source (clone, snapshot or populator); `validate_provision_request()`
  also checks the selector, access modes and selected node, and returns the
  node's hostname. Both raise `ProvisioningError`, whose `state` is a
  `ProvisioningState` (`RESCHEDULE` when no node was selected).
- `localpv.rollout`: `PredicateName`, `RolloutOutput` with `to_json()`,
  `Rollout` with `raw()`, and `status_message()`.
- `localpv.deployment`: a deployment `Builder` (collects errors and raises
  `DeploymentBuildError` from `build()`), the `Deploy` wrapper with its
  rollout checks, `rollout_status()` and `verify_replica_status()`, and
  predicate factories such as `is_update_in_progress()`.

## Example

```python
from localpv.helper_pod import convert_to_k

convert_to_k("0%", 5000)       # "5k"
convert_to_k("200%", 5000000)  # "10000k"
```

```python
from localpv.volume_config import get_image_pull_secrets

get_image_pull_secrets(" docker-secret, image-pull-secret ")
# [{"name": "docker-secret"}, {"name": "image-pull-secret"}]
```

Invalid input raises an exception instead of returning a status. For
example, `convert_to_k("10", 10000)` raises `HelperPodError`.

## What this package does not do

It does not talk to a Kubernetes cluster. It has no command to start a
provisioner, no controller loop, and it neither creates helper pods,
block device claims or persistent volumes nor waits on them. It provides
the configuration, validation and command-building pieces that such a
provisioner would use.