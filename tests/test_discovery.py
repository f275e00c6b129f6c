"""Tests for the discovery projection (groups, versions, resources)."""

import pytest

from clusterfs import MemoryCluster, NotFound, RemoteFailure, SpecializationRegistry
from clusterfs.base import DirectoryNode, Entry
from clusterfs.discovery import (
    GroupsDir,
    GroupVersionsDir,
    ResourcesDir,
    RootDir,
    ViewsDir,
    preferred_listings,
)


def groups_dir(cluster):
    return GroupsDir(cluster, SpecializationRegistry.default())


def names(entries):
    return sorted(entry.name for entry in entries)


class TestGroupsDir:
    """Test the groups level."""

    def test_dedup_group_labels(self):
        """apps/v1, batch/v1 and the core group each appear once."""
        cluster = MemoryCluster()
        cluster.add_group_version("apps/v1", [("deployments", "Deployment", True)])
        cluster.add_group_version("apps/v1beta1", [("deployments", "Deployment", True)])
        cluster.add_group_version("batch/v1", [("jobs", "Job", True)])
        cluster.add_group_version("/v1", [("pods", "Pod", True)])

        entries = groups_dir(cluster).list()
        assert names(entries) == ["apps", "batch", "v1"]
        assert all(entry.is_dir for entry in entries)

    def test_core_group_resolves_straight_to_resources(self):
        cluster = MemoryCluster()
        cluster.add_group_version("v1", [("pods", "Pod", True)])

        node = groups_dir(cluster).resolve("v1")
        assert isinstance(node, ResourcesDir)
        assert names(node.list()) == ["pods"]

    def test_group_with_several_versions_resolves_to_versions(self):
        cluster = MemoryCluster()
        cluster.add_group_version("apps/v1", [("deployments", "Deployment", True)])
        cluster.add_group_version("apps/v1beta1", [("deployments", "Deployment", True)])

        node = groups_dir(cluster).resolve("apps")
        assert isinstance(node, GroupVersionsDir)
        assert names(node.list()) == ["v1", "v1beta1"]

    def test_core_group_not_shadowed_by_custom_v1_group(self):
        """A custom group named v1 and the core group are both kept."""
        cluster = MemoryCluster()
        cluster.add_group_version("v1", [("pods", "Pod", True)])
        cluster.add_group_version("v1/v2", [("widgets", "Widget", False)])

        node = groups_dir(cluster).resolve("v1")
        assert isinstance(node, GroupVersionsDir)
        assert names(node.list()) == ["v1", "v2"]
        assert names(node.resolve("v1").list()) == ["pods"]

    def test_unknown_group_is_not_found(self, cluster):
        with pytest.raises(NotFound):
            groups_dir(cluster).resolve("extensions")

    def test_resolve_refetches_discovery(self, cluster):
        """list and resolve each perform their own fetch."""
        d = groups_dir(cluster)
        d.list()
        d.resolve("apps")
        assert cluster.calls.count(("preferred_resources",)) == 2

    def test_discovery_failure_is_remote_failure(self, cluster):
        cluster.fail_with(ConnectionError("connection refused"))
        with pytest.raises(RemoteFailure):
            groups_dir(cluster).list()
        with pytest.raises(RemoteFailure):
            groups_dir(cluster).resolve("apps")

    def test_empty_discovery_lists_nothing(self):
        assert groups_dir(MemoryCluster()).list() == []


class TestGroupVersionsDir:
    def test_skips_versions_without_resources(self):
        cluster = MemoryCluster()
        cluster.add_group_version("apps/v1", [("deployments", "Deployment", True)])
        cluster.add_group_version("apps/v1beta2", [])

        node = groups_dir(cluster).resolve("apps")
        assert names(node.list()) == ["v1"]
        with pytest.raises(NotFound):
            node.resolve("v1beta2")

    def test_works_from_captured_listings(self):
        """No refetch happens below the groups level."""
        cluster = MemoryCluster()
        cluster.add_group_version("apps/v1", [("deployments", "Deployment", True)])
        cluster.add_group_version("apps/v1beta1", [("deployments", "Deployment", True)])

        node = groups_dir(cluster).resolve("apps")
        calls = len(cluster.calls)
        node.list()
        node.resolve("v1beta1")
        assert len(cluster.calls) == calls


class TestResourcesDir:
    def test_subresources_are_hidden(self, cluster):
        node = groups_dir(cluster).resolve("v1")
        assert names(node.list()) == ["configmaps", "nodes", "pods"]
        with pytest.raises(NotFound):
            node.resolve("pods/log")

    def test_preferred_listings_filters_subresources(self, cluster):
        for listing in preferred_listings(cluster):
            assert not any(r.is_subresource for r in listing.resources)

    def test_unknown_resource_is_not_found(self, cluster):
        with pytest.raises(NotFound):
            groups_dir(cluster).resolve("apps").resolve("statefulsets")

    def test_read_on_directory_raises(self, cluster):
        with pytest.raises(IsADirectoryError):
            groups_dir(cluster).resolve("v1").read()


class TestRootAndViews:
    def test_root_lists_groups_without_views(self, cluster):
        root = RootDir(cluster, SpecializationRegistry.default())
        assert names(root.list()) == ["apps", "batch", "v1"]

    def test_root_lists_views_when_enabled(self, cluster):
        root = RootDir(cluster, SpecializationRegistry.default(), views=True)
        assert names(root.list()) == ["by-gvk"]
        assert isinstance(root.resolve("by-gvk"), GroupsDir)

    def test_unknown_view(self, cluster):
        with pytest.raises(NotFound):
            ViewsDir(cluster, SpecializationRegistry.default()).resolve("by-namespace")

    def test_root_stat_is_directory(self, cluster):
        assert RootDir(cluster, SpecializationRegistry.default()).stat().is_dir is True


class TestDirectoryNode:
    """Test the shared directory base."""

    def test_cannot_instantiate_without_list_and_resolve(self):
        class ListOnly(DirectoryNode):
            def list(self):
                return []

        with pytest.raises(TypeError):
            DirectoryNode()
        with pytest.raises(TypeError):
            ListOnly()

    def test_complete_subclass(self):
        class Single(DirectoryNode):
            name = "single"

            def list(self):
                return [Entry("only", "file")]

            def resolve(self, name):
                raise NotFound("No such entry", name)

        node = Single()
        assert node.stat().is_dir is True
        assert node.list() == [Entry("only", "file")]
        with pytest.raises(IsADirectoryError):
            node.read()
