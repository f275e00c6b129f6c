"""Shared fixtures: a small in-memory cluster."""

import pytest

from clusterfs import MemoryCluster


def pod(name, namespace):
    return {
        "apiVersion": "v1",
        "kind": "Pod",
        "metadata": {"name": name, "namespace": namespace},
        "spec": {"containers": [{"name": name, "image": f"{name}:latest"}]},
    }


def configmap(name, namespace, data):
    return {
        "apiVersion": "v1",
        "kind": "ConfigMap",
        "metadata": {"name": name, "namespace": namespace},
        "data": data,
    }


@pytest.fixture
def cluster():
    """Cluster with core pods/configmaps/nodes plus apps and batch groups."""
    c = MemoryCluster()
    c.add_group_version(
        "v1",
        [
            ("pods", "Pod", True),
            ("pods/log", "Pod", True),
            ("configmaps", "ConfigMap", True),
            ("nodes", "Node", False),
        ],
    )
    c.add_group_version("apps/v1", [("deployments", "Deployment", True)])
    c.add_group_version("batch/v1", [("jobs", "Job", True)])

    c.add_object(pod("nginx", "default"))
    c.add_object(pod("redis", "default"))
    c.add_object(pod("coredns", "kube-system"))
    c.add_object(configmap("settings", "default", {"app.conf": "port = 8080\n"}))
    c.add_object(
        {"apiVersion": "v1", "kind": "Node", "metadata": {"name": "node-1"}}
    )
    return c
