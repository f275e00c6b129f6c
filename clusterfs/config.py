"""Configuration for cluster access and the projected tree.

Provides configuration dataclasses and the connect_cluster factory
function for choosing a cluster backend (Kubernetes or in-memory).
"""

from dataclasses import dataclass
from typing import Literal

# Seconds before a Kubernetes API request is abandoned
DEFAULT_REQUEST_TIMEOUT = 30.0


@dataclass
class KubernetesConfig:
    """Configuration for a live Kubernetes cluster.

    Attributes:
        type: Always "kubernetes".
        kubeconfig: Path to a kubeconfig file. Empty means the client's
            default lookup ($KUBECONFIG, then ~/.kube/config).
        context: Context name to use. None means the current context.
        request_timeout: Per-request timeout in seconds. None means no
            timeout, in which case a fetch abandoned by a cancel scope
            holds its worker thread until the server answers.
    """

    type: Literal["kubernetes"] = "kubernetes"
    kubeconfig: str = ""
    context: str | None = None
    request_timeout: float | None = DEFAULT_REQUEST_TIMEOUT


@dataclass
class MemoryConfig:
    """Configuration for an in-memory cluster (tests and demos).

    Attributes:
        type: Always "memory".
    """

    type: Literal["memory"] = "memory"


# Type alias for all cluster configs
ClusterConfig = KubernetesConfig | MemoryConfig


@dataclass
class ClusterFSConfig:
    """Configuration for the projected tree.

    Attributes:
        views: Put a views directory (``by-gvk``) at the root instead of
            listing API groups directly.
    """

    views: bool = False


def connect_cluster(
    type: Literal["kubernetes", "memory"] = "kubernetes",
    **kwargs,
) -> ClusterConfig:
    """Configure cluster access.

    Args:
        type: Cluster backend.
            - "kubernetes": A live cluster reached through a kubeconfig.
            - "memory": An in-memory cluster populated by the caller.
        **kwargs: Additional configuration for the backend.
            For type="kubernetes":
                - kubeconfig (str): Optional. Path to the kubeconfig file.
                - context (str): Optional. Context name.
                - request_timeout (float): Optional. Timeout in seconds
                  (default 30). None disables it.

    Returns:
        ClusterConfig for open_cluster().

    Examples:
        >>> connect_cluster(type="kubernetes", context="staging")
        KubernetesConfig(type='kubernetes', kubeconfig='', context='staging', request_timeout=30.0)

        >>> connect_cluster(type="memory")
        MemoryConfig(type='memory')
    """
    if type == "kubernetes":
        kubeconfig = kwargs.pop("kubeconfig", "")
        context = kwargs.pop("context", None)
        request_timeout = kwargs.pop("request_timeout", DEFAULT_REQUEST_TIMEOUT)

        if kwargs:
            raise ValueError(
                f"Unexpected arguments for kubernetes cluster: {list(kwargs.keys())}"
            )

        if request_timeout is not None and request_timeout <= 0:
            raise ValueError(f"request_timeout must be positive, got {request_timeout}")

        return KubernetesConfig(
            kubeconfig=kubeconfig, context=context, request_timeout=request_timeout
        )

    elif type == "memory":
        if kwargs:
            raise ValueError(
                f"Unexpected arguments for memory cluster: {list(kwargs.keys())}"
            )
        return MemoryConfig()

    else:
        raise ValueError(
            f"Unsupported cluster type: {type}. Use 'kubernetes' or 'memory'."
        )
