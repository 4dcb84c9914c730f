#!/usr/bin/env python3
"""
NeckCoach Development Runner
Drives a posture session from a simulated or recorded head-motion feed and
prints status every few seconds for manual verification.

Usage:
    python dev_runner.py [--replay FILE] [--rate HZ] [--fast]
"""

import argparse
import time
import sys
from typing import Iterable, Optional

from neckcoach import (
    PostureSession,
    SessionSnapshot,
    OrientationSample,
    ThreadTicker,
    ManualTicker,
    ManualClock,
    StatusBus,
    EventLogger,
    StatusChanged,
    CalibrationProgress,
    SessionEvent,
    create_status_from_session,
    simulated_samples,
    load_replay,
    save_replay,
    format_duration
)
from ui.config_manager import ConfigManager


def format_status_line(snapshot: SessionSnapshot) -> str:
    """Format a single line of session output."""
    if not snapshot.is_connected:
        return "[DISCONNECTED] Please connect the sensor"
    if not snapshot.is_tracking:
        return "[IDLE] Not monitoring"
    if snapshot.is_calibrating:
        return f"[CALIBRATING] {snapshot.calibration_progress_percent}%"

    status = snapshot.current_status
    stats = snapshot.stats
    return (
        f"[{status.direction.value.upper()}] "
        f"{status.direction.position_label} | "
        f"Angle: {snapshot.current_neck_angle:5.1f}° | "
        f"Yaw: {status.yaw_deviation:5.1f}° | "
        f"Good: {format_duration(stats.good_posture_time)} | "
        f"Bad: {format_duration(stats.bad_posture_time)} | "
        f"{stats.good_posture_percentage:.0f}% good"
    )


def describe_event(event: SessionEvent) -> Optional[str]:
    """One-line description of the events worth printing."""
    if isinstance(event, StatusChanged):
        return f"  → {event.from_direction or '-'} → {event.to_direction} ({event.deviation_angle:.1f}°)"
    if isinstance(event, CalibrationProgress) and event.complete:
        return (f"  → Calibration complete: pitch {event.pitch_baseline:.1f}°, "
                f"yaw {event.yaw_baseline:.1f}°")
    return None


def drain_events(session: PostureSession, logger: Optional[EventLogger], verbose: bool = True):
    """Move pending session events to the log (and console)."""
    events = session.events.drain()
    if logger:
        logger.log_session_events(events)
    if verbose:
        for event in events:
            line = describe_event(event)
            if line:
                print(line)


def run_fast(
    session: PostureSession,
    ticker: ManualTicker,
    samples: Iterable[OrientationSample],
    logger: Optional[EventLogger] = None,
    verbose: bool = False
) -> SessionSnapshot:
    """
    Replay samples in virtual time as fast as possible.

    The manual ticker is advanced to each sample's timestamp, so ticks and
    classifications interleave exactly as they would live.

    Returns:
        Final snapshot before tracking stops
    """
    session.on_connect()
    first = True

    for sample in samples:
        if first:
            ticker.clock.set(sample.timestamp)
            session.start_tracking()
            first = False
        else:
            ticker.advance(sample.timestamp - ticker.clock())
        session.submit_sample(sample.pitch, sample.yaw, sample.timestamp)
        drain_events(session, logger, verbose)

    final = session.snapshot()
    session.on_disconnect()
    drain_events(session, logger, verbose)
    return final


def run_live(
    session: PostureSession,
    samples: Iterable[OrientationSample],
    rate_hz: float,
    logger: Optional[EventLogger],
    status_bus: Optional[StatusBus],
    print_interval: float
):
    """Feed samples in real time until the feed ends or Ctrl+C."""
    session.on_connect()
    session.start_tracking()

    if status_bus:
        status_bus.start()
        print("Status bus started (publishing to storage/status.json)")

    interval = 1.0 / rate_hz
    last_print = time.time()
    next_sample = time.monotonic()

    for sample in samples:
        sleep_time = next_sample - time.monotonic()
        if sleep_time > 0:
            time.sleep(sleep_time)
        next_sample += interval

        session.submit_sample(sample.pitch, sample.yaw, time.time())
        drain_events(session, logger)

        now = time.time()
        if now - last_print >= print_interval:
            print(format_status_line(session.snapshot()))
            last_print = now


def print_summary(snapshot: SessionSnapshot):
    stats = snapshot.stats
    print()
    print("Session Summary:")
    print(f"  Good posture: {format_duration(stats.good_posture_time)}")
    print(f"  Poor posture: {format_duration(stats.bad_posture_time)}")
    print(f"  Good posture percentage: {stats.good_posture_percentage:.0f}%")
    if snapshot.baseline:
        print(f"  Baseline: pitch {snapshot.baseline.pitch_baseline:.1f}°, "
              f"yaw {snapshot.baseline.yaw_baseline:.1f}°")


def main():
    parser = argparse.ArgumentParser(description="NeckCoach Dev Runner")
    parser.add_argument("--replay", type=str, help="Replay samples from CSV/JSONL (timestamp,pitch,yaw)")
    parser.add_argument("--rate", type=float, help="Sample rate in Hz for the simulated feed")
    parser.add_argument("--seed", type=int, help="Random seed for the simulated feed")
    parser.add_argument("--loop", action="store_true", help="Repeat the simulated script forever")
    parser.add_argument("--fast", action="store_true", help="Replay in virtual time and print a summary")
    parser.add_argument("--record", type=str, help="Write the simulated feed to CSV and exit")
    parser.add_argument("--interval", type=float, help="Print interval in seconds")
    parser.add_argument("--no-status-bus", action="store_true", help="Don't publish storage/status.json")
    parser.add_argument("--no-log", action="store_true", help="Don't write storage/events.jsonl")
    parser.add_argument("--config", type=str, help="Config file (default: storage/ui_config.json)")
    args = parser.parse_args()

    estimator_config, accounting_config, system_config = ConfigManager(args.config).build_configs()
    rate_hz = args.rate or float(system_config.get("sample_rate_hz", 10.0))
    seed = args.seed if args.seed is not None else system_config.get("simulate_seed")
    print_interval = args.interval or float(system_config.get("print_interval_sec", 2.0))
    replay_path = args.replay or (system_config.get("replay_path") if system_config.get("source") == "replay" else None)

    if args.record:
        samples = list(simulated_samples(rate_hz=rate_hz, seed=seed))
        save_replay(samples, args.record)
        print(f"Wrote {len(samples)} samples to {args.record}")
        return

    if replay_path:
        try:
            samples = load_replay(replay_path)
        except (OSError, ValueError) as e:
            print(f"ERROR: Failed to load replay: {e}", file=sys.stderr)
            sys.exit(1)
        source_name = f"replay ({replay_path}, {len(samples)} samples)"
    else:
        samples = simulated_samples(rate_hz=rate_hz, seed=seed, repeat=args.loop and not args.fast)
        source_name = f"simulated ({rate_hz:.0f} Hz)"

    print("=" * 80)
    print("NeckCoach - Posture Session Dev Runner")
    print("=" * 80)
    print(f"Source: {source_name}")
    print(f"Mode: {'FAST (virtual time)' if args.fast else 'LIVE'}")
    print(f"Calibration: {estimator_config.calibration_samples} samples, "
          f"neutral ±{estimator_config.neutral_threshold_deg:.1f}°, "
          f"lateral ±{estimator_config.lateral_threshold_deg:.1f}°")
    print(f"Tick interval: {accounting_config.tick_interval_sec}s")
    print()

    logger = None if args.no_log else EventLogger()

    if args.fast:
        clock = ManualClock()
        ticker = ManualTicker(clock, interval_sec=accounting_config.tick_interval_sec)
        session = PostureSession(estimator_config, accounting_config, clock=clock, ticker=ticker)
        final = run_fast(session, ticker, samples, logger, verbose=True)
        print_summary(final)
        return

    session = PostureSession(
        estimator_config,
        accounting_config,
        ticker=ThreadTicker(accounting_config.tick_interval_sec)
    )

    status_bus = None
    if not args.no_status_bus:
        status_bus = StatusBus(update_interval_sec=float(system_config.get("status_interval_sec", 1.0)))
        status_bus.set_snapshot_provider(lambda: create_status_from_session(session))

    print("Press Ctrl+C to stop")
    print("=" * 80)
    print()

    try:
        run_live(session, samples, rate_hz, logger, status_bus, print_interval)
        print()
        print("Feed ended.")
    except KeyboardInterrupt:
        print()
        print("=" * 80)
        print("Stopping session...")
    finally:
        final = session.snapshot()
        session.on_disconnect()
        drain_events(session, logger, verbose=False)
        if status_bus:
            status_bus.publish_now()
            status_bus.stop()
            print("Status bus stopped")

    print_summary(final)
    print("=" * 80)


if __name__ == "__main__":
    main()
