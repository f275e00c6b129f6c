"""Cluster handles backed by the Kubernetes API.

``KubernetesCluster`` implements the ``ClusterHandle`` protocol with the
official ``kubernetes`` client: discovery through the raw ``/api`` and
``/apis`` endpoints, object listing through the dynamic client.
"""

from __future__ import annotations

import errno
import os
import threading
from typing import Any

import structlog
from kubernetes import client
from kubernetes import config as kube_config
from kubernetes.client.rest import ApiException
from kubernetes.config import ConfigException
from kubernetes.config.kube_config import KubeConfigMerger
from kubernetes.dynamic import DynamicClient
from kubernetes.dynamic.exceptions import DynamicApiError, ResourceNotFoundError

from .base import GroupVersionKind, GroupVersionListing, ObjectRecord, ResourceDescriptor
from .config import ClusterConfig, KubernetesConfig
from .errors import RemoteFailure
from .memory import MemoryCluster

logger = structlog.get_logger(__name__)

DEFAULT_KUBECONFIG = os.path.join(os.path.expanduser("~"), ".kube", "config")


def default_kubeconfig_path() -> str:
    """$KUBECONFIG (possibly several paths), else ~/.kube/config."""
    return os.environ.get("KUBECONFIG") or DEFAULT_KUBECONFIG


def current_context_name(kubeconfig_path: str = "") -> str:
    """Return the ``current-context`` the client would connect with.

    ``kubeconfig_path`` may list several files separated by ``os.pathsep``;
    they are merged the way ``kubernetes.config`` merges ``$KUBECONFIG``,
    so a later file's ``current-context`` wins.

    Raises:
        FileNotFoundError: If none of the kubeconfig files exist.
        ValueError: If a file is not a kubeconfig mapping.
    """
    path = kubeconfig_path or default_kubeconfig_path()
    try:
        merged = KubeConfigMerger(path).config
    except (ConfigException, TypeError, AttributeError) as exc:
        raise ValueError(f"Not a kubeconfig file: {path}") from exc
    if merged is None:
        raise FileNotFoundError(errno.ENOENT, "No kubeconfig found", path)
    return merged.safe_get("current-context") or ""


def _descriptor(resource: dict[str, Any]) -> ResourceDescriptor:
    return ResourceDescriptor(
        name=resource.get("name", ""),
        kind=resource.get("kind", ""),
        namespaced=bool(resource.get("namespaced", False)),
    )


class KubernetesCluster:
    """ClusterHandle for a live Kubernetes API server.

    Safe to share between threads: the underlying ``ApiClient`` pools its
    connections and the dynamic client is created once under a lock.
    """

    def __init__(
        self,
        api_client: client.ApiClient,
        request_timeout: float | None = None,
        dynamic_client: DynamicClient | None = None,
    ):
        """Initialize from an existing API client.

        Args:
            api_client: Configured ``kubernetes.client.ApiClient``.
            request_timeout: Per-request timeout in seconds.
            dynamic_client: Prebuilt dynamic client. Built lazily from
                ``api_client`` when omitted, since building one performs
                discovery.
        """
        self._api_client = api_client
        self._request_timeout = request_timeout
        self._dynamic = dynamic_client
        self._dynamic_lock = threading.Lock()

    @classmethod
    def from_config(cls, config: KubernetesConfig) -> KubernetesCluster:
        """Build a handle from a kubeconfig file."""
        api_client = kube_config.new_client_from_config(
            config_file=config.kubeconfig or None,
            context=config.context,
        )
        logger.info(
            "kubernetes_cluster.connected",
            kubeconfig=config.kubeconfig or default_kubeconfig_path(),
            context=config.context,
        )
        return cls(api_client, request_timeout=config.request_timeout)

    def _dynamic_client(self) -> DynamicClient:
        with self._dynamic_lock:
            if self._dynamic is None:
                self._dynamic = DynamicClient(self._api_client)
            return self._dynamic

    def _get(self, path: str) -> dict[str, Any]:
        try:
            response = self._api_client.call_api(
                path,
                "GET",
                auth_settings=["BearerToken"],
                response_type="object",
                _return_http_data_only=True,
                _request_timeout=self._request_timeout,
            )
        except ApiException as exc:
            raise RemoteFailure(f"GET {path} failed: {exc.status} {exc.reason}") from exc
        if not isinstance(response, dict):
            raise RemoteFailure(f"GET {path} returned {type(response).__name__}")
        return response

    def _listing(self, path: str) -> GroupVersionListing:
        document = self._get(path)
        return GroupVersionListing(
            document.get("groupVersion", ""),
            tuple(_descriptor(r) for r in document.get("resources") or []),
        )

    def preferred_resources(self) -> list[GroupVersionListing]:
        """Return the preferred version of every API group.

        The core group comes first, then named groups in server order.
        """
        listings = []
        for version in self._get("/api").get("versions") or []:
            listings.append(self._listing(f"/api/{version}"))

        for group in self._get("/apis").get("groups") or []:
            preferred = group.get("preferredVersion")
            if not preferred:
                versions = group.get("versions") or []
                if not versions:
                    continue
                preferred = versions[0]
            listings.append(self._listing(f"/apis/{preferred['groupVersion']}"))

        logger.debug("kubernetes_cluster.discovered", group_versions=len(listings))
        return listings

    def list(self, gvk: GroupVersionKind, namespace: str = "") -> list[ObjectRecord]:
        """List objects of a kind.

        Items come back without ``apiVersion``/``kind`` in list responses;
        both are filled in from ``gvk``.
        """
        try:
            api = self._dynamic_client().resources.get(
                api_version=gvk.api_version, kind=gvk.kind
            )
            result = api.get(
                namespace=namespace or None, _request_timeout=self._request_timeout
            )
        except ResourceNotFoundError as exc:
            raise RemoteFailure(f"unknown resource {gvk.api_version} {gvk.kind}") from exc
        except (ApiException, DynamicApiError) as exc:
            raise RemoteFailure(
                f"list {gvk.api_version} {gvk.kind} failed: {exc}"
            ) from exc

        records = []
        for item in result.to_dict().get("items") or []:
            item.setdefault("apiVersion", gvk.api_version)
            item.setdefault("kind", gvk.kind)
            records.append(ObjectRecord(item))
        logger.debug(
            "kubernetes_cluster.listed",
            api_version=gvk.api_version,
            kind=gvk.kind,
            namespace=namespace,
            count=len(records),
        )
        return records


def open_cluster(config: ClusterConfig) -> KubernetesCluster | MemoryCluster:
    """Create the cluster handle described by ``config``."""
    if config.type == "kubernetes":
        return KubernetesCluster.from_config(config)
    elif config.type == "memory":
        return MemoryCluster()
    raise ValueError(f"Unsupported cluster type: {config.type}")
