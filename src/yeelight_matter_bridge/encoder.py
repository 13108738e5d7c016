"""Translate lighting effect capability commands into vendor cluster commands."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from . import events, metrics
from .constants import (
    EFFECT_FIELD_ID,
    LIGHTING_EFFECT_CAPABILITY,
    PRIVATE_CLUSTER_ENDPOINT_ID,
    PRIVATE_CLUSTER_ID,
    PRIVATE_LIGHTING_EFFECT_CMD_ID,
    STATE_CONTROL_COMMAND,
)
from .device import MatterDevice
from .effects import LIGHTING_EFFECTS, EffectTable
from .events import CapabilityEmitter
from .logging import get_logger
from .protocol import ClusterCommand, Uint64
from .state import DeviceStateStore
from .transport import Transport


class UnsupportedCommandError(ValueError):
    """Raised for capability commands this sub-driver does not implement."""


@dataclass(frozen=True)
class CapabilityCommand:
    """Command delivered by the hub's capability layer."""

    command: str
    args: Mapping[str, Any] = field(default_factory=dict)
    capability: str = LIGHTING_EFFECT_CAPABILITY

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "CapabilityCommand":
        command = data.get("command")
        if not isinstance(command, str) or not command:
            raise ValueError("Capability command requires a 'command' name.")
        args = data.get("args") or {}
        if not isinstance(args, Mapping):
            raise ValueError("Capability command 'args' must be a mapping.")
        return cls(
            command=command,
            args=dict(args),
            capability=str(data.get("capability", LIGHTING_EFFECT_CAPABILITY)),
        )

    @classmethod
    def state_control(cls, effect: str) -> "CapabilityCommand":
        return cls(command=STATE_CONTROL_COMMAND, args={STATE_CONTROL_COMMAND: effect})


def build_effect_command(effect: str, effects: EffectTable = LIGHTING_EFFECTS) -> ClusterCommand:
    """Build the vendor command selecting ``effect``.

    Raises:
        UnknownEffectError: ``effect`` is not in the effect table.
    """

    code = effects.code_for(effect)
    return ClusterCommand(
        endpoint_id=PRIVATE_CLUSTER_ENDPOINT_ID,
        cluster_id=PRIVATE_CLUSTER_ID,
        command_id=PRIVATE_LIGHTING_EFFECT_CMD_ID,
        fields={EFFECT_FIELD_ID: Uint64(code)},
    )


class CommandEncoder:
    """Send lighting effect commands and echo effects the lamp will not re-report."""

    def __init__(
        self,
        transport: Transport,
        emitter: CapabilityEmitter,
        state: DeviceStateStore,
        *,
        effects: EffectTable = LIGHTING_EFFECTS,
    ) -> None:
        self._transport = transport
        self._emitter = emitter
        self._state = state
        self._effects = effects
        self._logger = get_logger("yeelight.encoder")

    def handle(self, device: MatterDevice, command: CapabilityCommand) -> ClusterCommand:
        if command.capability != LIGHTING_EFFECT_CAPABILITY or command.command != STATE_CONTROL_COMMAND:
            raise UnsupportedCommandError(
                f"Unsupported capability command: {command.capability}.{command.command}"
            )
        effect = command.args.get(STATE_CONTROL_COMMAND)
        if not isinstance(effect, str):
            raise ValueError(f"'{STATE_CONTROL_COMMAND}' argument must be an effect name.")
        return self.set_effect(device, effect)

    def set_effect(self, device: MatterDevice, effect: str) -> ClusterCommand:
        """Send the command for ``effect`` to ``device``.

        The command is built before anything is sent, so an unknown effect
        raises without touching the transport. Transport errors propagate.
        """

        frame = build_effect_command(effect, self._effects)
        self._logger.info(
            "Sending lighting effect",
            extra={
                "device_id": device.id,
                "effect": effect,
                "effect_code": frame.fields[EFFECT_FIELD_ID].value,
            },
        )
        self._transport.send(device, frame)
        metrics.record_command_encoded(effect)

        # The lamp does not report an attribute change when the effect is
        # already active.
        if self._state.current_effect(device.id) == effect:
            self._emitter.emit(device, events.lighting_effect_state(effect))
        return frame
