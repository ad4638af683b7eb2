"""Options and commands for the helper pods that manage host paths."""

from __future__ import annotations

import math
import posixpath
import re
from dataclasses import dataclass, field
from typing import Any

# Number of one-second polls to wait for a helper pod to finish.
CMD_TIMEOUT_COUNTS = 120

_VALUE_PATTERN = re.compile(r"\d*\.?\d*")


class HelperPodError(ValueError):
    """Raised when helper pod options or limits are invalid."""


@dataclass
class HelperPodOptions:
    """Settings for launching a helper pod on a node for a volume path."""

    name: str = ""
    path: str = ""
    node_affinity_labels: dict[str, str] = field(default_factory=dict)
    cmds_for_path: list[str] = field(default_factory=list)
    service_account_name: str = ""
    selected_node_taints: list[Any] = field(default_factory=list)
    image_pull_secrets: list[Any] = field(default_factory=list)
    soft_limit_grace: str = ""
    hard_limit_grace: str = ""
    pvc_storage: int = 0
    host_network: bool = False

    def validate(self) -> None:
        """Check the fields needed to launch a helper pod."""
        if not (
            self.name
            and self.path
            and self.node_affinity_labels
            and self.service_account_name
        ):
            raise HelperPodError(
                "invalid empty name or hostpath or hostname or service account name"
            )

    def validate_limits(self) -> None:
        """Check quota limits, filling both from the request size when unset."""
        soft, hard = self.soft_limit_grace, self.hard_limit_grace
        if soft == "0k" and hard == "0k":
            storage_k = _format_number(math.ceil(float(self.pvc_storage) / 1000)) + "k"
            self.soft_limit_grace = self.hard_limit_grace = storage_k
            return
        if soft == "0k" or hard == "0k":
            return
        if len(soft) > len(hard) or (len(soft) == len(hard) and soft > hard):
            raise HelperPodError("hard limit cannot be smaller than soft limit")


def _format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def convert_to_k(limit: str, pvc_storage: int) -> str:
    """Turn a percentage grace into a kilobyte limit over the request size."""
    if not limit:
        return "0k"
    match = _VALUE_PATTERN.match(limit)
    value_string = match.group() if match else ""
    if limit != value_string + "%":
        raise HelperPodError("invalid format for limit grace")
    try:
        value = float(value_string)
    except ValueError:
        raise HelperPodError("invalid format, cannot parse") from None
    value = min(value, 100.0)
    value *= float(pvc_storage)
    value /= 100
    value += float(pvc_storage)
    value /= 1000
    return _format_number(math.ceil(value)) + "k"


def split_volume_path(path: str) -> tuple[str, str]:
    """Split a volume path into its parent directory and volume directory.

    The volume directory must not sit directly under the root directory.
    """
    if not path or not path.strip():
        raise HelperPodError("volume path is empty")
    cleaned = posixpath.normpath(path)
    parent, volume_dir = posixpath.split(cleaned)
    if not volume_dir or parent in ("", "/"):
        raise HelperPodError(
            f"volume directory {{{path}}} should not be under root directory"
        )
    return parent, volume_dir


def _data_path(volume_dir: str) -> str:
    return posixpath.normpath(posixpath.join("/data/", volume_dir))


def build_quota_command(
    volume_dir: str, soft_limit_grace: str, hard_limit_grace: str
) -> list[str]:
    """Shell command applying an xfs or ext4 project quota to the volume."""
    target = _data_path(volume_dir)
    fs = "FS=`stat -f -c %T /data` ; "
    check_quota = (
        'if [[ "$FS" == "xfs" ]]; then '
        "  PID=`xfs_quota -x -c 'report -h' /data | tail -2 | awk 'NR==1{print substr ($1,2)}+0'` ;"
        "  PID=`expr $PID + 1` ;"
        "  xfs_quota -x -c 'project -s -p " + target + " '$PID /data;"
        "  xfs_quota -x -c 'limit -p bsoft=" + soft_limit_grace
        + " bhard=" + hard_limit_grace + " '$PID /data ;"
        'elif [[ "$FS" == "ext2/ext3" ]]; then'
        "  PID=`repquota -P /data | tail -3 | awk 'NR==1{print substr ($1,2)}+0'` ;"
        "  PID=`expr $PID + 1` ;"
        "  chattr +P -p $PID " + target + " ;"
        "  setquota -P $PID " + soft_limit_grace.upper() + " "
        + hard_limit_grace.upper() + " 0 0 /data ; "
        "else "
        "  rm -rf " + target + " ; exit 1; fi"
    )
    return ["sh", "-c", fs + check_quota]