import pytest

from conftest import FakeReader

from cluster_capabilities.errors import ObjectNotFound
from cluster_capabilities.mesh import (
    LEGACY_POD_INJECTION_LABEL,
    MeshInjection,
    MeshLabels,
    namespace_has_injection,
    pod_ignored_by_mesh,
)


def test_namespace_with_injection_enabled():
    reader = FakeReader(namespaces={"shop": {"istio-injection": "enabled", "team": "a"}})
    assert namespace_has_injection(reader, "shop") is True


@pytest.mark.parametrize("labels", [{}, {"istio-injection": "disabled"}, {"istio-injection": "Enabled"}, {"istio-injection": "enabled "}, {"istio.io/rev": "enabled"}])
def test_namespace_without_injection(labels):
    reader = FakeReader(namespaces={"shop": labels})
    assert namespace_has_injection(reader, "shop") is False


def test_namespace_missing_propagates():
    with pytest.raises(ObjectNotFound) as excinfo:
        namespace_has_injection(FakeReader(), "ghost")
    assert excinfo.value.kind == "Namespace"
    assert excinfo.value.status == 404


def test_pod_opted_out():
    reader = FakeReader(pods={("shop", "db-0"): {"sidecar.istio.io/inject": "false"}})
    assert pod_ignored_by_mesh(reader, "shop", "db-0") is True


@pytest.mark.parametrize("labels", [{}, {"sidecar.istio.io/inject": "true"}, {"sidecar.istio.io/inject": "False"}, {LEGACY_POD_INJECTION_LABEL: "false"}])
def test_pod_not_opted_out(labels):
    reader = FakeReader(pods={("shop", "db-0"): labels})
    assert pod_ignored_by_mesh(reader, "shop", "db-0") is False


def test_pod_legacy_label_key():
    reader = FakeReader(pods={("shop", "db-0"): {LEGACY_POD_INJECTION_LABEL: "false"}})
    legacy = MeshLabels(pod_key=LEGACY_POD_INJECTION_LABEL)
    assert pod_ignored_by_mesh(reader, "shop", "db-0", labels=legacy) is True


def test_pod_missing_propagates():
    reader = FakeReader(pods={("shop", "db-0"): {}})
    with pytest.raises(ObjectNotFound) as excinfo:
        pod_ignored_by_mesh(reader, "other", "db-0")
    assert excinfo.value.namespace == "other"


def test_mesh_injection_binds_labels():
    reader = FakeReader(
        namespaces={"shop": {"mesh": "on"}},
        pods={("shop", "db-0"): {"mesh/skip": "yes"}},
    )
    mesh = MeshInjection(reader, MeshLabels(namespace_key="mesh", namespace_enabled="on", pod_key="mesh/skip", pod_disabled="yes"))
    assert mesh.namespace_has_injection("shop") is True
    assert mesh.pod_ignored_by_mesh("shop", "db-0") is True
    assert MeshInjection(reader).pod_ignored_by_mesh("shop", "db-0") is False
