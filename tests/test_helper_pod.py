import pytest

from localpv.helper_pod import (
    HelperPodError,
    HelperPodOptions,
    build_quota_command,
    convert_to_k,
    split_volume_path,
)


@pytest.mark.parametrize(
    "limit, storage, expected",
    [
        ("", 5000000000, "0k"),
        ("0%", 5000, "5k"),
        ("200%", 5000000, "10000k"),
        (".5%", 1000, "2k"),
    ],
)
def test_convert_to_k(limit, storage, expected):
    assert convert_to_k(limit, storage) == expected


@pytest.mark.parametrize("limit", ["10", "%", "abc%", "10%%"])
def test_convert_to_k_invalid(limit):
    with pytest.raises(HelperPodError):
        convert_to_k(limit, 10000)


def _valid_options(**overrides):
    values = dict(
        name="pvc-1",
        path="/var/openebs/local/pvc-1",
        node_affinity_labels={"kubernetes.io/hostname": "node-1"},
        service_account_name="openebs-sa",
    )
    values.update(overrides)
    return HelperPodOptions(**values)


def test_validate_accepts_complete_options():
    opts = _valid_options()
    opts.validate()
    assert opts.name == "pvc-1"


@pytest.mark.parametrize(
    "override",
    [
        {"name": ""},
        {"path": ""},
        {"node_affinity_labels": {}},
        {"service_account_name": ""},
    ],
)
def test_validate_rejects_missing_fields(override):
    with pytest.raises(HelperPodError):
        _valid_options(**override).validate()


def test_validate_limits_both_unset_uses_request_size():
    opts = _valid_options(soft_limit_grace="0k", hard_limit_grace="0k", pvc_storage=1500)
    opts.validate_limits()
    assert (opts.soft_limit_grace, opts.hard_limit_grace) == ("2k", "2k")


def test_validate_limits_one_unset_leaves_values():
    opts = _valid_options(soft_limit_grace="0k", hard_limit_grace="7k", pvc_storage=5000)
    opts.validate_limits()
    assert (opts.soft_limit_grace, opts.hard_limit_grace) == ("0k", "7k")


def test_validate_limits_ordered_ok():
    opts = _valid_options(soft_limit_grace="5k", hard_limit_grace="10k")
    opts.validate_limits()
    assert (opts.soft_limit_grace, opts.hard_limit_grace) == ("5k", "10k")


@pytest.mark.parametrize("soft, hard", [("10k", "5k"), ("6k", "5k")])
def test_validate_limits_soft_above_hard(soft, hard):
    opts = _valid_options(soft_limit_grace=soft, hard_limit_grace=hard)
    with pytest.raises(HelperPodError):
        opts.validate_limits()


def test_split_volume_path():
    assert split_volume_path("/var/openebs/local/pvc-1") == ("/var/openebs/local", "pvc-1")


def test_split_volume_path_cleans():
    assert split_volume_path("/var/openebs//local/pvc-1/") == ("/var/openebs/local", "pvc-1")


@pytest.mark.parametrize("path", ["/", "/pvc-1", ""])
def test_split_volume_path_rejects_root(path):
    with pytest.raises(HelperPodError):
        split_volume_path(path)


def test_build_quota_command():
    cmd = build_quota_command("pvc-1", "6k", "7k")
    assert cmd[:2] == ["sh", "-c"]
    script = cmd[2]
    assert script.startswith("FS=`stat -f -c %T /data` ; ")
    assert "project -s -p /data/pvc-1 '$PID /data;" in script
    assert "limit -p bsoft=6k bhard=7k '$PID /data ;" in script
    assert "setquota -P $PID 6K 7K 0 0 /data ; " in script
    assert script.endswith("rm -rf /data/pvc-1 ; exit 1; fi")