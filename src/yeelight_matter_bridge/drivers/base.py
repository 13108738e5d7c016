"""Base interface for device-specific sub-drivers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, Mapping, Tuple

from ..device import MatterDevice
from ..encoder import CapabilityCommand, UnsupportedCommandError
from ..protocol import AttributeReport, ClusterCommand

LifecycleHandler = Callable[[MatterDevice], None]
AttributeHandler = Callable[[MatterDevice, AttributeReport], None]
CapabilityHandler = Callable[[MatterDevice, CapabilityCommand], ClusterCommand]


class SubDriver(ABC):
    """Abstract base class for sub-drivers layered over the generic Matter driver.

    Each sub-driver is responsible for:
    - Deciding whether it applies to a device (``can_handle``)
    - Handling lifecycle moments such as ``init`` and ``added``
    - Translating attribute reports into capability events
    - Translating capability commands into cluster commands
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human readable sub-driver name."""

    @abstractmethod
    def can_handle(self, device: MatterDevice) -> bool:
        """Return True when this sub-driver should own ``device``."""

    @property
    @abstractmethod
    def lifecycle_handlers(self) -> Mapping[str, LifecycleHandler]:
        """Handlers keyed by lifecycle event name."""

    @property
    @abstractmethod
    def attribute_handlers(self) -> Mapping[Tuple[int, int], AttributeHandler]:
        """Handlers keyed by (cluster id, attribute id)."""

    @property
    @abstractmethod
    def capability_handlers(self) -> Mapping[Tuple[str, str], CapabilityHandler]:
        """Handlers keyed by (capability, command)."""

    def handle_lifecycle(self, event: str, device: MatterDevice) -> bool:
        """Run the handler for ``event``; return False when none is registered."""

        handler = self.lifecycle_handlers.get(event)
        if handler is None:
            return False
        handler(device)
        return True

    def handle_attribute_report(self, device: MatterDevice, report: AttributeReport) -> bool:
        handler = self.attribute_handlers.get((report.cluster_id, report.attribute_id))
        if handler is None:
            return False
        handler(device, report)
        return True

    def handle_capability_command(
        self, device: MatterDevice, command: CapabilityCommand
    ) -> ClusterCommand:
        handler = self.capability_handlers.get((command.capability, command.command))
        if handler is None:
            raise UnsupportedCommandError(
                f"{self.name} does not handle {command.capability}.{command.command}"
            )
        return handler(device, command)
