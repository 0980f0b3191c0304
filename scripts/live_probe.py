#!/usr/bin/env python3
"""Live dashboard probe for machine status telemetry.

This script drives pymachinestatus the way a dashboard would:
1) fetch the snapshot for the selected device,
2) join the live Socket.IO room,
3) print every live record as it is prepended to the timeline,
4) optionally post a randomized test observation.

Configuration comes from ``MACHINE_STATUS_*`` environment variables.
Use this to check that saved observations come back over the live channel.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
import time
from dataclasses import dataclass
from pathlib import Path

# Allow running from repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pymachinestatus import (  # noqa: E402
    ChannelState,
    MachineStatusClient,
    MachineStatusConfig,
    MachineStatusError,
    TelemetryRecord,
)


@dataclass
class ProbeStats:
    started_at: float
    live_records: int = 0
    warnings: int = 0
    last_record_at: float | None = None

    def on_record(self, now: float) -> float | None:
        previous = self.last_record_at
        self.live_records += 1
        self.last_record_at = now
        return None if previous is None else now - previous


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Live probe for the machine status dashboard room.",
    )
    parser.add_argument(
        "--device",
        default=None,
        help="Device to select (default: all devices).",
    )
    parser.add_argument(
        "--duration",
        type=int,
        default=0,
        help="Maximum runtime in seconds (0 = run until Ctrl+C).",
    )
    parser.add_argument(
        "--submit-sample",
        action="store_true",
        help="Post one randomized observation after joining.",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logs.",
    )
    return parser.parse_args()


def _print_record(prefix: str, record: TelemetryRecord) -> None:
    print(
        f"[probe] {prefix} {record.timestamp:%Y-%m-%d %H:%M:%S} device={record.device_id} "
        f"status={record.status} shift={record.shift} design={record.design} "
        f"count={record.count} eff={record.efficiency} errors={record.total_errors} "
        f"duration={record.duration}",
    )


def _print_summary(client: MachineStatusClient, stats: ProbeStats) -> None:
    runtime = time.time() - stats.started_at
    print("[probe] Summary")
    print(f"[probe]   runtime_s     : {runtime:.1f}")
    print(f"[probe]   live_records  : {stats.live_records}")
    print(f"[probe]   warnings      : {stats.warnings}")
    print(f"[probe]   timeline_size : {len(client.records())}")
    print(f"[probe]   channel       : {client.channel_state}")


async def _run(args: argparse.Namespace, config: MachineStatusConfig) -> int:
    stats = ProbeStats(started_at=time.time())

    def on_record(record: TelemetryRecord) -> None:
        delta = stats.on_record(time.time())
        gap_text = "first" if delta is None else f"{delta:.1f}s"
        _print_record(f"live#{stats.live_records} gap={gap_text}", record)

    def on_warning(error: MachineStatusError) -> None:
        stats.warnings += 1
        print(f"[probe] warning: {error}", file=sys.stderr)

    async with MachineStatusClient(config, on_record=on_record, on_warning=on_warning) as client:
        result = await client.select_device(args.device)
        print(f"[probe] Snapshot {result.status} for {result.device_id}: {len(client.records())} records")
        summary = client.summary
        if summary is not None:
            print(
                f"[probe]   production={summary.total_production} avg_eff={summary.avg_efficiency} "
                f"errors={summary.total_errors} on_cycles={summary.total_on_cycles}",
            )
        for record in client.view()[:5]:
            _print_record("snapshot", record)

        sample_sent = False
        while True:
            if args.duration > 0 and (time.time() - stats.started_at) >= args.duration:
                print(f"[probe] Reached --duration={args.duration}s, stopping.")
                break
            if args.submit_sample and not sample_sent and client.channel_state == ChannelState.JOINED:
                ack = await client.submit_sample(args.device)
                print(f"[probe] Sample submitted success={ack.success} {ack.message}")
                sample_sent = True
            await asyncio.sleep(1.0)

        _print_summary(client, stats)
    return 0


def _main() -> int:
    args = _parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = MachineStatusConfig.from_env()
    except MachineStatusError as exc:
        print(f"[probe] Invalid configuration: {exc}", file=sys.stderr)
        return 2

    try:
        return asyncio.run(_run(args, config))
    except KeyboardInterrupt:
        return 0


if __name__ == "__main__":
    raise SystemExit(_main())
