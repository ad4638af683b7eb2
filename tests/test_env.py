import pytest

from localpv import env


def _set(monkeypatch, key, value):
    if value:
        monkeypatch.setenv(key, value)
    else:
        monkeypatch.delenv(key, raising=False)


@pytest.mark.parametrize(
    "value, expected",
    [("", ""), ("value1", "value1"), (" ", "")],
)
def test_get_openebs_namespace(monkeypatch, value, expected):
    _set(monkeypatch, env.OPENEBS_NAMESPACE, value)
    assert env.get_openebs_namespace() == expected


@pytest.mark.parametrize(
    "value, expected",
    [
        ("", env.DEFAULT_HELPER_IMAGE),
        ("value1", "value1"),
        (" ", env.DEFAULT_HELPER_IMAGE),
    ],
)
def test_get_default_helper_image(monkeypatch, value, expected):
    _set(monkeypatch, env.PROVISIONER_HELPER_IMAGE, value)
    assert env.get_default_helper_image() == expected


def test_default_helper_image_value(monkeypatch):
    monkeypatch.delenv(env.PROVISIONER_HELPER_IMAGE, raising=False)
    assert env.get_default_helper_image() == "openebs/linux-utils:latest"


@pytest.mark.parametrize(
    "value, expected",
    [("", False), ("value1", False), ("true", True)],
)
def test_get_helper_pod_host_network(monkeypatch, value, expected):
    _set(monkeypatch, env.PROVISIONER_HELPER_POD_HOST_NETWORK, value)
    assert env.get_helper_pod_host_network() is expected


@pytest.mark.parametrize(
    "value, expected",
    [
        ("", env.DEFAULT_BASE_PATH),
        ("value1", "value1"),
        (" ", env.DEFAULT_BASE_PATH),
    ],
)
def test_get_default_base_path(monkeypatch, value, expected):
    _set(monkeypatch, env.PROVISIONER_BASE_PATH, value)
    assert env.get_default_base_path() == expected


def test_default_base_path_value(monkeypatch):
    monkeypatch.delenv(env.PROVISIONER_BASE_PATH, raising=False)
    assert env.get_default_base_path() == "/var/openebs/local"


@pytest.mark.parametrize(
    "value, expected",
    [("", ""), ("value1", "value1"), (" ", "")],
)
def test_get_openebs_service_account_name(monkeypatch, value, expected):
    _set(monkeypatch, env.OPENEBS_SERVICE_ACCOUNT, value)
    assert env.get_openebs_service_account_name() == expected


@pytest.mark.parametrize(
    "value, expected",
    [
        ("", ""),
        ("image-pull-secret", "image-pull-secret"),
        ("image-pull-secret,secret-1", "image-pull-secret,secret-1"),
        (" ", ""),
    ],
)
def test_get_openebs_image_pull_secrets(monkeypatch, value, expected):
    _set(monkeypatch, env.PROVISIONER_IMAGE_PULL_SECRETS, value)
    assert env.get_openebs_image_pull_secrets() == expected


@pytest.mark.parametrize(
    "value, expected",
    [
        ("", True),
        ("anything", True),
        ("yes", True),
        ("TRUE", True),
        ("y", True),
        ("n", False),
        ("No", False),
        ("false", False),
        ("FALSE", False),
    ],
)
def test_is_leader_election_enabled(monkeypatch, value, expected):
    _set(monkeypatch, env.LEADER_ELECTION_KEY, value)
    assert env.is_leader_election_enabled() is expected