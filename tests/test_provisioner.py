import pytest

from localpv.provisioner import (
    PVC_KIND,
    SNAPSHOT_API_GROUP,
    SNAPSHOT_KIND,
    ProvisioningError,
    ProvisioningState,
    validate_provision_request,
    validate_volume_source,
)


def _pvc(data_source=None, **spec):
    body = dict(spec)
    if data_source is not None:
        body["dataSource"] = data_source
    return {"metadata": {"name": "pvc-hp"}, "spec": body}


def _node(hostname="node-1"):
    labels = {"kubernetes.io/hostname": hostname} if hostname else {}
    return {"metadata": {"name": "selectednode", "labels": labels}}


def test_no_data_source_is_accepted():
    assert validate_volume_source(_pvc()) is None


@pytest.mark.parametrize(
    "data_source, message",
    [
        ({"kind": PVC_KIND, "name": "source"}, "clone feature not supported"),
        ({"kind": PVC_KIND}, "dataSource name not found for PVC `pvc-hp`"),
        (
            {"apiGroup": SNAPSHOT_API_GROUP, "kind": SNAPSHOT_KIND, "name": "source"},
            "datasource `VolumeSnapshot` of group `snapshot.storage.k8s.io`",
        ),
        (
            {"apiGroup": SNAPSHOT_API_GROUP, "kind": SNAPSHOT_KIND},
            "dataSource name not found",
        ),
        (
            {"apiGroup": "example.io", "kind": "DemoPopulator", "name": "source"},
            "datasource `DemoPopulator` of group `example.io`",
        ),
        (
            {"apiGroup": "example.io", "kind": "DemoPopulator"},
            "dataSource name not found",
        ),
    ],
)
def test_data_sources_are_rejected(data_source, message):
    with pytest.raises(ProvisioningError, match=message) as info:
        validate_volume_source(_pvc(data_source))
    assert info.value.state is ProvisioningState.FINISHED


def test_snapshot_of_other_group_is_unsupported():
    source = {"apiGroup": "example.io", "kind": SNAPSHOT_KIND, "name": "source"}
    with pytest.raises(ProvisioningError, match="snapshot feature not supported"):
        validate_volume_source(_pvc(source))


def test_valid_request_returns_hostname():
    pvc = _pvc(accessModes=["ReadWriteOnce"])
    assert validate_provision_request(pvc, _node("node-1")) == "node-1"


def test_selector_is_rejected():
    pvc = _pvc(accessModes=["ReadWriteOnce"], selector={"matchLabels": {"a": "b"}})
    with pytest.raises(ProvisioningError, match="Selector is not supported"):
        validate_provision_request(pvc, _node())


def test_other_access_mode_is_rejected():
    pvc = _pvc(accessModes=["ReadWriteOnce", "ReadWriteMany"])
    with pytest.raises(ProvisioningError, match="Only support ReadWriteOnce"):
        validate_provision_request(pvc, _node())


def test_missing_node_asks_for_reschedule():
    pvc = _pvc(accessModes=["ReadWriteOnce"])
    with pytest.raises(ProvisioningError, match="no node was specified") as info:
        validate_provision_request(pvc, None)
    assert info.value.state is ProvisioningState.RESCHEDULE


def test_node_without_hostname_is_rejected():
    pvc = _pvc(accessModes=["ReadWriteOnce"])
    with pytest.raises(ProvisioningError, match="hostname is empty") as info:
        validate_provision_request(pvc, _node(hostname=""))
    assert info.value.state is ProvisioningState.FINISHED


def test_data_source_checked_before_node():
    pvc = _pvc({"kind": PVC_KIND, "name": "source"}, accessModes=["ReadWriteOnce"])
    with pytest.raises(ProvisioningError, match="clone feature") as info:
        validate_provision_request(pvc, None)
    assert info.value.state is ProvisioningState.FINISHED