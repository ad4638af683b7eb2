"""Volume configuration merged from StorageClass settings, and object helpers."""

from __future__ import annotations

import posixpath
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

KEY_PV_STORAGE_TYPE = "StorageType"
KEY_PV_BASE_PATH = "BasePath"
KEY_PV_FS_TYPE = "FSType"
# Deprecated in favour of KEY_BLOCK_DEVICE_SELECTORS.
KEY_BD_TAG = "BlockDeviceTag"
# Deprecated in favour of KEY_NODE_AFFINITY_LABELS.
KEY_NODE_AFFINITY_LABEL = "NodeAffinityLabel"
KEY_NODE_AFFINITY_LABELS = "NodeAffinityLabels"
KEY_BLOCK_DEVICE_SELECTORS = "BlockDeviceSelectors"
KEY_XFS_QUOTA = "XFSQuota"
KEY_EXT4_QUOTA = "EXT4Quota"
KEY_QUOTA_SOFT_LIMIT = "softLimitGrace"
KEY_QUOTA_HARD_LIMIT = "hardLimitGrace"

VALUE_PTP = "value"
ENABLED_PTP = "enabled"

CAS_TYPE_KEY = "openebs.io/cas-type"
CAS_CONFIG_KEY = "cas.openebs.io/config"

BETA_STORAGE_CLASS_ANNOTATION = "volume.beta.kubernetes.io/storage-class"
K8S_NODE_LABEL_KEY_HOSTNAME = "kubernetes.io/hostname"

DEFAULT_STORAGE_TYPE = "hostpath"

_TRUE_STRINGS = {"1", "t", "T", "TRUE", "true", "True"}
_FALSE_STRINGS = {"0", "f", "F", "FALSE", "false", "False"}


class ConfigError(ValueError):
    """Raised when volume configuration is missing or cannot be used."""


@dataclass
class CasConfig:
    """One entry of the cas.openebs.io/config annotation."""

    name: str
    value: str = ""
    enabled: str = ""
    data: dict[str, str] | None = None
    list: list[str] = field(default_factory=list)


@dataclass
class VolumeConfig:
    """Merged configuration of a PVC and its StorageClass.

    ``options`` maps a config name to ``{"enabled": ..., "value": ...}``,
    ``config_data`` maps a name to its data dictionary and ``config_list``
    maps a name to its list of values.
    """

    pv_name: str = ""
    pvc_name: str = ""
    sc_name: str = ""
    options: dict[str, Any] = field(default_factory=dict)
    config_data: dict[str, Any] = field(default_factory=dict)
    config_list: dict[str, Any] = field(default_factory=dict)

    def get_storage_type(self) -> str:
        """Configured StorageType, ``hostpath`` when unset."""
        value = self._get_value(KEY_PV_STORAGE_TYPE)
        return value if value.strip() else DEFAULT_STORAGE_TYPE

    def get_block_device_selectors(self) -> dict[str, str] | None:
        """Configured BlockDeviceSelectors data, or None."""
        return self._get_data(KEY_BLOCK_DEVICE_SELECTORS)

    def get_bd_tag_value(self) -> str:
        """Value of the deprecated BlockDeviceTag key, or an empty string."""
        return self._get_nonblank_value(KEY_BD_TAG)

    def get_fs_type(self) -> str:
        """Configured FSType, or an empty string."""
        return self._get_nonblank_value(KEY_PV_FS_TYPE)

    def get_node_affinity_label_key(self) -> str:
        """Value of the deprecated NodeAffinityLabel key, or an empty string."""
        return self._get_nonblank_value(KEY_NODE_AFFINITY_LABEL)

    def get_node_affinity_label_keys(self) -> list[str] | None:
        """Configured NodeAffinityLabels list, or None."""
        values = self.config_list.get(KEY_NODE_AFFINITY_LABELS)
        return values if isinstance(values, list) else None

    def get_path(self) -> str:
        """Host path of the volume: the base path joined with the PV name."""
        base_path = self._get_value(KEY_PV_BASE_PATH)
        if not base_path.strip():
            raise ConfigError("failed to get path: base path is empty")
        path = posixpath.normpath(posixpath.join(base_path, self.pv_name))
        if path == "/":
            raise ConfigError(
                f"path should not be a root directory: {base_path}/{self.pv_name}"
            )
        return path

    def is_xfs_quota_enabled(self) -> bool:
        """Whether the XFSQuota key is enabled."""
        return _parse_bool(self._get_enabled(KEY_XFS_QUOTA).strip())

    def is_ext4_quota_enabled(self) -> bool:
        """Whether the EXT4Quota key is enabled."""
        return _parse_bool(self._get_enabled(KEY_EXT4_QUOTA).strip())

    def get_data_field(self, key: str, data_key: str) -> str:
        """One entry of a key's data, or an empty string."""
        data = self._get_data(key)
        if data is None:
            return ""
        return data.get(data_key, "")

    def _option(self, key: str) -> Mapping[str, str] | None:
        option = self.options.get(key)
        return option if isinstance(option, Mapping) else None

    def _get_value(self, key: str) -> str:
        option = self._option(key)
        return option.get(VALUE_PTP, "") if option is not None else ""

    def _get_nonblank_value(self, key: str) -> str:
        value = self._get_value(key)
        return value if value.strip() else ""

    def _get_enabled(self, key: str) -> str:
        option = self._option(key)
        return option.get(ENABLED_PTP, "") if option is not None else ""

    def _get_data(self, key: str) -> dict[str, str] | None:
        data = self.config_data.get(key)
        return data if isinstance(data, dict) else None


def _parse_bool(value: str) -> bool:
    if value in _TRUE_STRINGS:
        return True
    if value in _FALSE_STRINGS:
        return False
    return False


def data_config_to_map(pv_config: Iterable[CasConfig]) -> dict[str, Any]:
    """Map each config name to its data, skipping entries without data."""
    result: dict[str, Any] = {}
    for config in pv_config:
        if config.data is None:
            continue
        name = config.name.strip()
        existing = result.get(name)
        if existing is None:
            result[name] = dict(config.data)
        elif isinstance(existing, dict):
            existing.update(config.data)
        else:
            raise ConfigError(
                f"failed to transform cas config 'Data' for configName '{name}' "
                f"to map: failed to merge: {config}"
            )
    return result


def list_config_to_map(pv_config: Iterable[CasConfig]) -> dict[str, Any]:
    """Map each config name to its list, skipping entries with an empty list."""
    result: dict[str, Any] = {}
    for config in pv_config:
        if not config.list:
            continue
        name = config.name.strip()
        if name in result:
            raise ConfigError(
                f"failed to transform cas config 'List' for configName '{name}' "
                f"to map: failed to merge: {config}"
            )
        result[name] = list(config.list)
    return result


def _metadata(obj: Mapping[str, Any]) -> Mapping[str, Any]:
    return obj.get("metadata") or {}


def _spec(obj: Mapping[str, Any]) -> Mapping[str, Any]:
    return obj.get("spec") or {}


def _labels(obj: Mapping[str, Any]) -> Mapping[str, str]:
    return _metadata(obj).get("labels") or {}


def get_storage_class_name(pvc: Mapping[str, Any]) -> str | None:
    """StorageClass name of a PVC, preferring the beta annotation."""
    annotations = _metadata(pvc).get("annotations") or {}
    if BETA_STORAGE_CLASS_ANNOTATION in annotations:
        return annotations[BETA_STORAGE_CLASS_ANNOTATION]
    return _spec(pvc).get("storageClassName")


def get_local_pv_type(pv: Mapping[str, Any]) -> str:
    """Local PV type from the CAS type label, or an empty string."""
    return _labels(pv).get(CAS_TYPE_KEY, "")


def get_node_hostname(node: Mapping[str, Any]) -> str:
    """Hostname label of a node, or an empty string."""
    return _labels(node).get(K8S_NODE_LABEL_KEY_HOSTNAME, "")


def get_node_label_value(node: Mapping[str, Any], label_key: str) -> str:
    """Value of a node label, or an empty string."""
    return _labels(node).get(label_key, "")


def get_taints(node: Mapping[str, Any]) -> list[Any]:
    """Taints in the node spec."""
    return list(_spec(node).get("taints") or [])


def get_image_pull_secrets(s: str) -> list[dict[str, str]]:
    """Parse a comma separated list of secret names into object references."""
    s = s.strip()
    if not s:
        return []
    return [{"name": item.strip()} for item in s.split(",") if item]