"""Command-line tools for inspecting the Yeelight Matter translation layer."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Callable, Iterable, List, Mapping, Optional

import yaml
from rich.console import Console
from rich.table import Table

from . import metrics
from .config import Config
from .constants import YEELIGHT_VENDOR_ID
from .conversions import (
    COLOR_TEMPERATURE_MIRED_MAX,
    COLOR_TEMPERATURE_MIRED_MIN,
    KelvinConverter,
    kelvin_band,
    mired_in_range,
    mired_to_kelvin,
)
from .db import SqliteFieldStore
from .device import ManufacturerInfo, MatterDevice
from .drivers import YeelightSubDriver
from .effects import LIGHTING_EFFECTS, UnknownEffectError
from .encoder import build_effect_command
from .events import CapabilityEvent, CapabilityEventBus
from .logging import configure_logging, get_logger
from .protocol import AttributeReport, coerce_int
from .state import DeviceStateStore, MemoryFieldStore
from .transport import RecordingTransport

DEFAULT_DEVICE_ID = "yeelight-lamp"


class CliError(Exception):
    """Raised when the CLI encounters an expected error condition."""


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="yeelight-matter",
        description=(
            "Inspect the Yeelight Matter translation layer: list effects, encode "
            "effect commands, and replay attribute reports. Uses YEELIGHT_MATTER_* "
            "env vars for configuration defaults."
        ),
    )
    parser.add_argument("--config", type=Path, help="Path to TOML config file.")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log verbosity level.",
    )
    parser.add_argument(
        "--log-format",
        choices=["plain", "json"],
        help="Structured logging format.",
    )
    parser.add_argument(
        "--state-db-path",
        type=Path,
        help="SQLite file holding persisted device fields (in-memory when omitted).",
    )
    parser.add_argument(
        "--output",
        choices=["json", "yaml", "table"],
        default="table",
        help="Output format. Defaults to 'table'.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    effects = subparsers.add_parser("effects", help="List the lighting effect table")
    effects.set_defaults(func=_cmd_effects)

    encode = subparsers.add_parser(
        "encode",
        help="Show the vendor command sent for an effect",
    )
    encode.add_argument("effect", help="Effect name, e.g. rainbow")
    encode.set_defaults(func=_cmd_encode)

    decode = subparsers.add_parser(
        "decode",
        help="Replay attribute reports from a YAML/JSON file and print emitted events",
        description=(
            "The file holds a list of reports ({endpoint_id, cluster_id, attribute_id, "
            "value}) or a mapping with a 'reports' list and optional 'device' settings."
        ),
    )
    decode.add_argument("reports", type=Path, help="Path to the reports file")
    decode.add_argument("--device-id", default=None, help="Simulated device identifier")
    decode.add_argument(
        "--child-endpoint",
        type=int,
        action="append",
        default=[],
        help="Register a child device for an endpoint (repeatable)",
    )
    decode.add_argument(
        "--metrics",
        action="store_true",
        help="Print Prometheus metrics after the replay",
    )
    decode.set_defaults(func=_cmd_decode)

    convert = subparsers.add_parser("convert", help="Convert a mired reading to Kelvin")
    convert.add_argument("mired", type=int, help="Color temperature in mireds")
    convert.add_argument(
        "--previous",
        type=int,
        help="Previously reported Kelvin value for hysteresis",
    )
    convert.set_defaults(func=_cmd_convert)

    return parser


def _load_config(args: argparse.Namespace) -> Config:
    overrides = {
        "log_level": args.log_level,
        "log_format": args.log_format,
        "state_db_path": args.state_db_path,
    }
    try:
        return Config.from_sources(args.config, overrides)
    except (OSError, ValueError) as exc:
        raise CliError(f"Failed to load configuration: {exc}") from exc


def _configure_logging(config: Config) -> None:
    try:
        configure_logging(config)
    except (TypeError, ValueError) as exc:
        raise CliError(f"Failed to configure logging: {exc}") from exc


def _print_output(data: Any, output: str, table: Optional[Callable[[], Table]] = None) -> None:
    if output == "yaml":
        yaml.safe_dump(data, sys.stdout, sort_keys=False)
    elif output == "table" and table is not None:
        Console().print(table())
    else:
        json.dump(data, sys.stdout, indent=2)
        sys.stdout.write("\n")


def _rows_table(title: str, columns: Iterable[str], rows: Iterable[Iterable[Any]]) -> Table:
    table = Table(title=title)
    for column in columns:
        table.add_column(column)
    for row in rows:
        table.add_row(*("" if cell is None else str(cell) for cell in row))
    return table


def _cmd_effects(config: Config, args: argparse.Namespace) -> None:
    data = [{"name": name, "code": code} for name, code in LIGHTING_EFFECTS.items()]
    _print_output(
        data,
        args.output,
        lambda: _rows_table(
            "Lighting effects",
            ["Name", "Code"],
            ((item["name"], f"0x{item['code']:02X}") for item in data),
        ),
    )


def _cmd_encode(config: Config, args: argparse.Namespace) -> None:
    try:
        command = build_effect_command(args.effect)
    except UnknownEffectError as exc:
        known = ", ".join(LIGHTING_EFFECTS.names)
        raise CliError(f"{exc}. Known effects: {known}") from exc
    data = command.to_dict()
    _print_output(
        data,
        args.output,
        lambda: _rows_table(
            f"Effect command: {args.effect}",
            ["Field", "Value"],
            [
                ("endpoint_id", f"0x{command.endpoint_id:02X}"),
                ("cluster_id", f"0x{command.cluster_id:08X}"),
                ("command_id", f"0x{command.command_id:08X}"),
                ("effect_code", f"0x{command.fields[1].value:02X}"),
                ("tlv", data["tlv"]),
            ],
        ),
    )


def _load_reports(path: Path) -> tuple[List[AttributeReport], Any]:
    if not path.exists():
        raise CliError(f"Reports file not found: {path}")
    with path.open("r", encoding="utf-8") as f:
        try:
            raw = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise CliError(f"Failed to parse reports file: {exc}") from exc
    device_settings: Any = {}
    if isinstance(raw, Mapping):
        device_settings = raw.get("device") or {}
        raw = raw.get("reports")
    if not isinstance(raw, list):
        raise CliError("Reports file must contain a list of attribute reports.")
    reports: List[AttributeReport] = []
    for index, entry in enumerate(raw):
        if not isinstance(entry, Mapping):
            raise CliError(f"Report #{index} must be a mapping.")
        try:
            reports.append(AttributeReport.from_mapping(entry))
        except ValueError as exc:
            raise CliError(f"Report #{index}: {exc}") from exc
    return reports, device_settings


def _build_device(args: argparse.Namespace, settings: Any) -> MatterDevice:
    if not isinstance(settings, Mapping):
        raise CliError("Reports file 'device' entry must be a mapping.")
    try:
        device = MatterDevice(
            id=args.device_id or str(settings.get("id", DEFAULT_DEVICE_ID)),
            manufacturer_info=ManufacturerInfo(
                vendor_id=coerce_int(settings.get("vendor_id", YEELIGHT_VENDOR_ID), "vendor_id")
            ),
        )
        endpoints = settings.get("child_endpoints") or []
        if not isinstance(endpoints, list):
            raise ValueError("child_endpoints must be a list of endpoint ids")
        for endpoint_id in list(endpoints) + list(args.child_endpoint):
            device.add_child(coerce_int(endpoint_id, "child_endpoints"))
    except ValueError as exc:
        raise CliError(f"Invalid device settings: {exc}") from exc
    return device


def _cmd_decode(config: Config, args: argparse.Namespace) -> None:
    logger = get_logger("yeelight.cli")
    reports, settings = _load_reports(args.reports)
    device = _build_device(args, settings)

    fields = SqliteFieldStore(config.state_db_path) if config.state_db_path else MemoryFieldStore()
    bus = CapabilityEventBus()
    emitted: List[CapabilityEvent] = []
    bus.subscribe("*", emitted.append)
    sub_driver = YeelightSubDriver(RecordingTransport(), bus, DeviceStateStore(fields), config)
    if not sub_driver.can_handle(device):
        raise CliError(
            f"Device {device.id} is not a Yeelight Matter device (vendor id {device.vendor_id})."
        )

    for report in reports:
        if not sub_driver.handle_attribute_report(device, report):
            logger.info(
                "No handler for report",
                extra={"cluster_id": report.cluster_id, "attribute_id": report.attribute_id},
            )

    data = [event.to_dict() for event in emitted]
    _print_output(
        data,
        args.output,
        lambda: _rows_table(
            f"Events for {device.id}",
            ["Event", "Device", "Endpoint", "Value"],
            ((e["event"], e["device_id"], e["endpoint_id"], e["value"]) for e in data),
        ),
    )
    if args.metrics:
        sys.stdout.write(metrics.render_metrics().decode("utf-8"))


def _cmd_convert(config: Config, args: argparse.Namespace) -> None:
    mired = args.mired
    if not mired_in_range(mired):
        raise CliError(
            f"{mired} mired is outside of sane range of "
            f"{COLOR_TEMPERATURE_MIRED_MIN}-{COLOR_TEMPERATURE_MIRED_MAX}."
        )
    converter = KelvinConverter(hysteresis=config.hysteresis_enabled)
    low, high = kelvin_band(mired)
    data = {
        "mired": mired,
        "kelvin": mired_to_kelvin(mired),
        "band": [low, high],
        "previous": args.previous,
        "reported": converter.convert(mired, args.previous),
    }
    _print_output(
        data,
        args.output,
        lambda: _rows_table("Color temperature", ["Field", "Value"], data.items()),
    )


def main(argv: Optional[Iterable[str]] = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(args=argv)

    try:
        config = _load_config(args)
        _configure_logging(config)
        func: Callable[[Config, argparse.Namespace], None] = args.func
        func(config, args)
    except CliError as exc:
        sys.stderr.write(f"Error: {exc}\n")
        sys.exit(1)


if __name__ == "__main__":
    main()
