"""Tests for manifest parsing."""

import pytest
import yaml

from conftest import manifest
from kube2swarm.core.constants import SERVICE_LABEL, STACK_LABEL
from kube2swarm.core.errors import MalformedObject
from kube2swarm.io.parsing import (
    exposures_from_manifests, parse_manifests, select_stack, workloads_from_manifests,
)
from kube2swarm.pacts.types import ExposureKind, Protocol, ServicePort, WorkloadKind


def _by_kind(docs):
    manifests = {}
    for doc in docs:
        manifests.setdefault(doc["kind"], []).append(doc)
    return manifests


def test_parse_manifests_reads_directory(tmp_path, stack_manifests):
    (tmp_path / "release").mkdir()
    (tmp_path / "release" / "all.yaml").write_text(yaml.safe_dump_all(stack_manifests))
    (tmp_path / "notes.txt").write_text("not yaml: [")
    manifests = parse_manifests(str(tmp_path))
    assert {k: len(v) for k, v in manifests.items()} == {
        "Deployment": 1, "DaemonSet": 1, "Service": 4}


def test_parse_manifests_flattens_lists(tmp_path, stack_manifests):
    path = tmp_path / "dump.yml"
    path.write_text(yaml.safe_dump({"apiVersion": "v1", "kind": "List", "items": stack_manifests}))
    manifests = parse_manifests(str(path))
    assert len(manifests["Service"]) == 4


def test_parse_manifests_skips_broken_files(tmp_path, capsys):
    (tmp_path / "bad.yaml").write_text("kind: [unclosed\n")
    (tmp_path / "good.yaml").write_text("kind: Service\nmetadata: {name: web}\n---\n")
    manifests = parse_manifests(str(tmp_path))
    assert list(manifests) == ["Service"]
    assert "Skipping bad.yaml" in capsys.readouterr().err


def test_parse_manifests_ignores_non_string_kind(tmp_path):
    (tmp_path / "odd.yaml").write_text(
        "kind: null\n---\nkind: 42\n---\nkind: Service\nmetadata: {name: web}\n")
    manifests = parse_manifests(str(tmp_path))
    assert list(manifests) == ["Service"]


def test_workloads_from_manifests(stack_manifests):
    workloads = workloads_from_manifests(_by_kind(stack_manifests))
    web, agent = workloads
    assert (web.kind, web.name, web.service_name, web.stack) == (
        WorkloadKind.DEPLOYMENT, "web", "web", "demo")
    assert (web.desired, web.available, web.image) == (3, 2, "nginx:1.25")
    assert web.container_ports == ({"name": "http", "containerPort": 8080},)
    assert (agent.kind, agent.desired, agent.available) == (WorkloadKind.DAEMON_SET, 4, 4)


def test_daemon_set_running_counts_available_not_ready():
    docs = [manifest("DaemonSet", "agent", {SERVICE_LABEL: "agent"}, status={
        "desiredNumberScheduled": 4, "numberReady": 4, "numberAvailable": 1})]
    [agent] = workloads_from_manifests(_by_kind(docs))
    assert (agent.desired, agent.available) == (4, 1)


def test_rendered_workload_without_status_uses_spec_replicas():
    docs = [manifest("StatefulSet", "db", {SERVICE_LABEL: "db"}, spec={"replicas": 2}),
            manifest("Deployment", "api", {SERVICE_LABEL: "api"})]
    db = workloads_from_manifests(_by_kind(docs), {"workload_kinds": ["StatefulSet"]})
    assert [(w.name, w.desired, w.available) for w in db] == [("db", 2, 0)]
    api = workloads_from_manifests(_by_kind(docs), {"workload_kinds": ["Deployment"]})
    assert [(w.name, w.desired, w.image) for w in api] == [("api", 1, "")]


def test_replica_set_owned_by_deployment_is_skipped():
    owner = [{"kind": "Deployment", "name": "web"}]
    docs = [
        manifest("Deployment", "web", {SERVICE_LABEL: "web"}),
        manifest("ReplicaSet", "web-5d9f", {SERVICE_LABEL: "web"}, ownerReferences=owner),
        manifest("ReplicaSet", "cron-7c1a", {SERVICE_LABEL: "cron"},
                 ownerReferences=[{"kind": "Deployment", "name": "cron"}]),
    ]
    assert [w.name for w in workloads_from_manifests(_by_kind(docs))] == ["web", "cron-7c1a"]


def test_unknown_workload_kind_in_config_is_ignored(capsys):
    assert workloads_from_manifests({}, {"workload_kinds": ["CronJob"]}) == []
    assert "CronJob" in capsys.readouterr().err


def test_custom_label_keys():
    docs = [manifest("Deployment", "web", {"app": "web", "team": "front"})]
    config = {"labels": {"service": "app", "stack": "team"}}
    [web] = workloads_from_manifests(_by_kind(docs), config)
    assert (web.service_name, web.stack) == ("web", "front")


def test_missing_label_gives_no_service_name():
    [web] = workloads_from_manifests(_by_kind([manifest("Deployment", "web")]))
    assert web.service_name is None
    assert web.stack is None


def test_exposures_from_manifests(stack_manifests):
    warnings = []
    exposures = exposures_from_manifests(_by_kind(stack_manifests), warnings=warnings)
    assert warnings == []
    assert [(e.name, e.kind, e.uid, e.stack) for e in exposures] == [
        ("web", ExposureKind.CLUSTER_IP, "uid-web", "demo"),
        ("agent", ExposureKind.CLUSTER_IP, "uid-agent", "demo"),
        ("web-published", ExposureKind.LOAD_BALANCER, "uid-web-lb", "demo"),
        ("agent-random-ports", ExposureKind.NODE_PORT, "uid-agent-np", "demo"),
    ]
    assert exposures[2].ports == (ServicePort(80, "http", Protocol.TCP),)
    assert exposures[3].ports == (ServicePort(9100, 9100, Protocol.UDP, node_port=31000),)


def test_exposure_uid_falls_back_to_namespaced_name():
    docs = [manifest("Service", "web", namespace="prod"), manifest("Service", "db")]
    assert [e.uid for e in exposures_from_manifests(_by_kind(docs))] == ["prod/web", "db"]


def test_unsupported_service_types_are_skipped():
    docs = [
        manifest("Service", "ext", spec={"type": "ExternalName", "externalName": "a.b"}),
        manifest("Service", "odd", spec={"type": "Headless"}),
        manifest("Service", "web", {STACK_LABEL: "s", SERVICE_LABEL: "web"}),
    ]
    warnings = []
    exposures = exposures_from_manifests(_by_kind(docs), warnings=warnings)
    assert [(e.name, e.service_label) for e in exposures] == [("web", "web")]
    assert len(warnings) == 2
    assert "ExternalName" in warnings[0]
    assert "unknown type 'Headless'" in warnings[1]


@pytest.mark.parametrize("port,message", [
    ({"port": "80"}, "port must be an integer"),
    ({"targetPort": 80}, "port must be an integer"),
    ({"port": 80, "protocol": "HTTP"}, "unknown protocol"),
    ({"port": 80, "protocol": 6}, "unknown protocol"),
])
def test_malformed_service_ports(port, message):
    docs = [manifest("Service", "web", spec={"ports": [port]})]
    with pytest.raises(MalformedObject, match=message):
        exposures_from_manifests(_by_kind(docs))


def test_select_stack(stack_manifests):
    manifests = _by_kind(stack_manifests)
    manifests["Service"].append(manifest("Service", "web", {STACK_LABEL: "other"}))
    workloads = workloads_from_manifests(manifests)
    exposures = exposures_from_manifests(manifests)
    w, e = select_stack(workloads, exposures, "demo")
    assert len(w) == 2
    assert len(e) == 4
    assert select_stack(workloads, exposures, "nope") == ([], [])


def test_select_stack_keeps_services_without_stack_label(stack_manifests):
    manifests = _by_kind(stack_manifests)
    manifests["Service"].append(manifest("Service", "shared", uid="uid-shared"))
    workloads = workloads_from_manifests(manifests)
    exposures = exposures_from_manifests(manifests)
    _, e = select_stack(workloads, exposures, "demo")
    assert [x.uid for x in e][-1] == "uid-shared"
    assert [x.uid for x in select_stack(workloads, exposures, "nope")[1]] == ["uid-shared"]
