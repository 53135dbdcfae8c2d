from __future__ import annotations

import argparse
import json
from collections import Counter
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from rich.console import Console
from rich.table import Table
from tqdm import tqdm

from collision_guard.inputs.roster import PeerRoster
from collision_guard.inputs.simulator import Bounds, PeerSimulator, ScriptedRouteSource
from collision_guard.runtime.health_monitor import HealthMonitor
from collision_guard.runtime.orchestrator import RiskMonitor
from collision_guard.runtime.scheduler import TickScheduler
from collision_guard.safety.alerts import AlertSettings, AlertTracker
from collision_guard.safety.safety_logger import SafetyLogger
from collision_guard.utils.config import (
    get,
    hazards_from_config,
    load_yaml,
    peers_from_config,
    tunables_from_config,
)
from collision_guard.utils.logger import setup_logger


def make_run_dir(base_dir: str | Path) -> Path:
    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    run_dir = Path(base_dir) / f"run_{ts}"
    run_dir.mkdir(parents=True, exist_ok=True)
    return run_dir


def run_simulation(cfg: Dict[str, Any], run_dir: Path, ticks: int, realtime: bool = False, progress: bool = True) -> Dict[str, Any]:
    """Drive the scripted route and simulated peers through the engine for `ticks` ticks."""
    tunables = tunables_from_config(cfg)
    hazards = hazards_from_config(cfg)
    seed: Optional[int] = get(cfg, "simulation.seed", None)
    interval_s = float(get(cfg, "runtime.tick_interval_s", 0.2))
    # GPS and peer updates run at their own cadence, expressed in ticks
    gps_every = max(1, int(get(cfg, "simulation.gps_every_ticks", 5)))
    peers_every = max(1, int(get(cfg, "simulation.peers_every_ticks", 5)))

    route = ScriptedRouteSource(seed=seed)
    route.start()
    roster = PeerRoster(peers_from_config(cfg))
    peer_sim = PeerSimulator(roster, bounds=Bounds(**(get(cfg, "simulation.bounds", {}) or {})), seed=seed)
    for _ in range(int(get(cfg, "simulation.spawn_random_peers", 0))):
        peer_sim.spawn_peer(route.current())

    alerts = AlertTracker(
        settings=AlertSettings(
            visual_alerts=bool(get(cfg, "alerts.visual", True)),
            audio_alerts=bool(get(cfg, "alerts.audio", True)),
            vibration_alerts=bool(get(cfg, "alerts.vibration", True)),
        )
    )
    safety_logger = SafetyLogger(run_dir)
    monitor = RiskMonitor(
        self_source=route.current,
        peer_source=roster.snapshot,
        hazards=hazards,
        tunables_source=lambda: tunables,
        sinks=[alerts],
        health=HealthMonitor(cfg.get("health", {}) or {}),
    )

    frames = []
    levels: Counter = Counter()
    bar = tqdm(total=ticks, desc="Ticks", disable=not progress)

    def on_tick(tick_id: int) -> None:
        if tick_id % gps_every == 0:
            route.advance()
        if tick_id % peers_every == 0:
            peer_sim.step()
        result = monitor.tick(tick_id)
        levels[result.verdict.level.name] += 1
        safety_logger.log(tick_id, tick_id * interval_s, result.verdict)
        frames.append({"tick": tick_id, "stages_ms": result.stages_ms, "verdict": result.verdict.to_dict()})
        bar.update(1)

    if realtime:
        TickScheduler(interval_s=interval_s).run(on_tick, max_ticks=ticks)
    else:
        for tick_id in range(ticks):
            on_tick(tick_id)
    bar.close()
    route.stop()

    return {
        "tunables": {
            "safe_distance_m": tunables.safe_distance_m,
            "proximity_multiplier": tunables.proximity_multiplier,
            "sensitivity": tunables.sensitivity.value,
            "closing_model": tunables.closing_model.value,
        },
        "hazards": [z.zone_id for z in hazards],
        "peers": [p.vehicle_id for p in roster.snapshot()],
        "level_counts": dict(levels),
        "latency_misses": monitor.health.misses,
        "alerts": [
            {"time": e.time, "level": e.level.name, "message": e.message} for e in alerts.recent()
        ],
        "frames": frames,
    }


def print_summary(console: Console, metrics: Dict[str, Any]) -> None:
    table = Table(title="Risk levels")
    table.add_column("Level")
    table.add_column("Ticks", justify="right")
    for level in ("SAFE", "WARNING", "DANGER"):
        table.add_row(level, str(metrics["level_counts"].get(level, 0)))
    console.print(table)
    for event in metrics["alerts"]:
        console.print(f"{event['time']}  [bold]{event['level']}[/bold]  {event['message']}")


def main(argv=None):
    parser = argparse.ArgumentParser(description="collision_guard - proximity risk engine simulator")
    parser.add_argument("--config", default="configs/system.yaml", help="Path to YAML config")
    parser.add_argument("--ticks", type=int, default=None, help="Number of engine ticks to run")
    parser.add_argument("--realtime", action="store_true", help="Pace ticks on the wall clock")
    args = parser.parse_args(argv)

    cfg: Dict[str, Any] = load_yaml(args.config)

    output_base = get(cfg, "runtime.output_dir", "results")
    run_dir = make_run_dir(output_base)
    logger = setup_logger(log_dir=run_dir, level=get(cfg, "runtime.log_level", "INFO"))

    console = Console()
    console.print(f"[bold]collision_guard[/bold] run dir: {run_dir}")

    ticks = args.ticks if args.ticks is not None else int(get(cfg, "runtime.ticks", 300))
    metrics = run_simulation(cfg, run_dir, ticks, realtime=args.realtime)

    if get(cfg, "runtime.save_metrics", True):
        metrics_path = run_dir / "metrics.json"
        metrics_path.write_text(json.dumps(metrics, indent=2), encoding="utf-8")
        logger.info("Saved metrics: %s", metrics_path)

    print_summary(console, metrics)
    logger.info("Done.")


if __name__ == "__main__":
    main()
