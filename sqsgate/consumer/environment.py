"""
Container detection.

The trusted-bridge rule only makes sense when this process runs inside a
container: on a bare host, 172.17.0.x peers are just other machines. Whether
we are containerized cannot change while the process runs, so the cgroup probe
answers once and caches the result.
"""

from __future__ import annotations

import logging
from abc import ABC
from abc import abstractmethod
from functools import lru_cache
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sqsgate.consumer.settings import ConsumerSettings

logger = logging.getLogger(__name__)

PROC_1_CGROUP = Path("/proc/1/cgroup")
CONTAINER_RUNTIME_MARKERS = ("docker", "ecs")


class ContainerProbe(ABC):
    """Answers whether the current process runs inside a container."""

    @abstractmethod
    def is_containerized(self) -> bool: ...


class StaticContainerProbe(ContainerProbe):
    """Fixed answer, for explicit configuration and tests."""

    def __init__(self, containerized: bool):
        self._containerized = containerized

    def is_containerized(self) -> bool:
        return self._containerized

    def __repr__(self) -> str:
        return f"StaticContainerProbe({self._containerized!r})"


class CgroupContainerProbe(ContainerProbe):
    """Looks for a container runtime marker in PID 1's cgroup file."""

    def __init__(self, cgroup_path: Path | str = PROC_1_CGROUP):
        self.cgroup_path = Path(cgroup_path)

    def is_containerized(self) -> bool:
        return _detect_container(self.cgroup_path)


@lru_cache(maxsize=None)
def _detect_container(cgroup_path: Path) -> bool:
    try:
        content = cgroup_path.read_text()
    except FileNotFoundError:
        logger.info("%s not found; assuming no container runtime", cgroup_path)
        return False
    except OSError as exc:
        logger.warning(
            "Could not read %s (%s); assuming no container runtime",
            cgroup_path,
            exc,
        )
        return False

    containerized = any(marker in content for marker in CONTAINER_RUNTIME_MARKERS)
    logger.info("Container runtime detected: %s", containerized)
    return containerized


def clear_container_cache() -> None:
    """Forget cached detection results."""
    _detect_container.cache_clear()


def get_container_probe(consumer_settings: ConsumerSettings) -> ContainerProbe:
    """
    Pick the probe for the configured deployment.

    An explicit SQSGATE_CONTAINERIZED wins; otherwise detect from cgroups.
    """
    if consumer_settings.containerized is not None:
        return StaticContainerProbe(consumer_settings.containerized)
    return CgroupContainerProbe()
