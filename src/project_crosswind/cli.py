import argparse
import logging
import sys
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from project_crosswind.conflicts.detector import detect_conflicts
from project_crosswind.dataset.loader import DEFAULT_AIRPORTS, load_airports, load_flights
from project_crosswind.hotspots.analyzer import compute_hotspots
from project_crosswind.load.window_counter import busiest_windows, compute_airport_load
from project_crosswind.optimize.greedy import GreedyConfig, default_time_range, optimize_schedule
from project_crosswind.optimize.objective import score_scenario
from project_crosswind.simulate.snapshot import SnapshotDiagnostics, snapshot
from project_crosswind.stateman.edit_table import EditTable
from project_crosswind.suggestions.rule_based import RuleBasedSuggestionProvider

console = Console()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def _load_inputs(args):
    flights = load_flights(args.flights_path)
    airports = load_airports(args.airports_path) if args.airports_path else dict(DEFAULT_AIRPORTS)
    edits = EditTable.load_json(args.edits_path) if getattr(args, "edits_path", None) else EditTable()
    return flights, airports, edits


def _time_range(args, flights):
    if not flights:
        return 0, 0
    default_start, default_end = default_time_range(flights)
    t_start = args.time_begin if args.time_begin is not None else default_start
    t_end = args.time_end if args.time_end is not None else default_end
    return t_start, t_end


def cmd_snapshot(args) -> int:
    flights, airports, edits = _load_inputs(args)
    diag = SnapshotDiagnostics()
    entries = snapshot(flights, args.time, edits, airports, diagnostics=diag)

    table = Table(title=f"Snapshot at t={args.time}")
    table.add_column("ACID", style="cyan", no_wrap=True)
    table.add_column("Lat", justify="right")
    table.add_column("Lon", justify="right")
    table.add_column("Alt (ft)", justify="right", style="magenta")
    for e in entries:
        table.add_row(e.acid, f"{e.lat:.4f}", f"{e.lon:.4f}", f"{e.altitude_ft:.0f}")
    console.print(table)
    console.print(
        f"active={diag.active} inactive={diag.inactive} unresolved={diag.unresolved}",
        style="dim",
    )
    return 0


def cmd_conflicts(args) -> int:
    flights, airports, edits = _load_inputs(args)
    entries = snapshot(flights, args.time, edits, airports)
    conflicts = detect_conflicts(
        entries,
        args.h_sep_nm,
        args.v_sep_ft,
        exclude_near_airports=airports if args.exclude_airports else None,
    )

    table = Table(title=f"Conflicts at t={args.time}")
    table.add_column("A", style="cyan")
    table.add_column("B", style="cyan")
    table.add_column("H (NM)", justify="right")
    table.add_column("V (ft)", justify="right")
    for c in conflicts:
        table.add_row(c.a.acid, c.b.acid, f"{c.h_nm:.2f}", f"{c.v_ft:.0f}")
    console.print(table)

    if args.suggest and conflicts:
        provider = RuleBasedSuggestionProvider()
        for c in conflicts:
            console.print(f"[bold]{c.a.acid} / {c.b.acid}[/bold]")
            for s in provider.suggest(c):
                console.print(f"  [{s.impact}] {s.action} (confidence {s.confidence:.0%})")
    return 0


def cmd_hotspots(args) -> int:
    flights, airports, edits = _load_inputs(args)
    t_start, t_end = _time_range(args, flights)
    cells = compute_hotspots(
        flights,
        t_start,
        t_end,
        airports=airports,
        edits=edits,
        cell_nm=args.cell_nm,
        cell_ft=args.cell_ft,
        time_bucket_s=args.time_bucket_s,
    )

    table = Table(title=f"Top hotspots ({len(cells)} cells)")
    for col in ("Time", "Cell", "Traffic", "Conflicts", "Flows", "Score", "Confidence"):
        table.add_column(col, justify="right")
    for c in cells[: args.top]:
        table.add_row(
            str(c.time),
            f"{c.ix},{c.iy},{c.iz}",
            str(c.traffic_count),
            str(c.conflict_count),
            str(c.flow_count),
            str(c.score),
            f"{c.confidence:.3f}",
        )
    console.print(table)
    return 0


def cmd_load(args) -> int:
    flights, _, _ = _load_inputs(args)
    t_start, t_end = _time_range(args, flights)
    load = compute_airport_load(flights, t_start, t_end, args.window_s)

    table = Table(title="Busiest airport windows")
    table.add_column("Airport", style="cyan")
    table.add_column("Window start", justify="right")
    table.add_column("Deps", justify="right")
    table.add_column("Arrs", justify="right")
    table.add_column("Ops", justify="right")
    table.add_column("Busy")
    for ap, w in busiest_windows(load, args.top):
        table.add_row(ap, str(w.window_start), str(w.deps), str(w.arrs), str(w.ops),
                      "[red]yes[/red]" if w.busy else "no")
    console.print(table)
    return 0


def cmd_optimize(args) -> int:
    flights, airports, _ = _load_inputs(args)
    config = GreedyConfig(
        max_iterations=args.max_iterations,
        time_bucket_s=args.time_bucket_s,
        cell_nm=args.cell_nm,
        cell_ft=args.cell_ft,
        time_budget_s=args.time_budget_s,
        n_jobs=args.n_jobs,
    )
    t_start = args.time_begin
    t_end = args.time_end
    result = optimize_schedule(flights, airports=airports, config=config, t_start=t_start, t_end=t_end)

    table = Table(title=f"Optimization ({result.iterations} iterations, {result.stop_reason})")
    table.add_column("Metric", style="cyan")
    table.add_column("Before", justify="right")
    table.add_column("After", justify="right", style="green")
    before = result.base_metrics.to_dict()
    after = result.final_metrics.to_dict()
    for key in before:
        table.add_row(key, f"{before[key]:g}", f"{after[key]:g}")
    table.add_row(
        "score",
        f"{score_scenario(result.base_metrics):g}",
        f"{score_scenario(result.final_metrics):g}",
    )
    console.print(table)

    for move in result.history:
        console.print(f"  #{move.iteration}: {move.acid} {move.changes} -> {move.score:g}")

    if args.output_path:
        result.edits.save_json(args.output_path)
        console.print(f"Edits written to {args.output_path}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Trajectory simulation, conflict and hotspot analytics for flight schedules."
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    sub = parser.add_subparsers(dest="command", required=True)

    def add_common(p, with_edits=True):
        p.add_argument("--flights_path", type=str, required=True, help="Path to the flights JSON file.")
        p.add_argument("--airports_path", type=str, default=None,
                       help="Path to an airport JSON file (code -> [lat, lon]). Defaults to the built-in table.")
        if with_edits:
            p.add_argument("--edits_path", type=str, default=None, help="Optional edits JSON to apply.")

    def add_range(p):
        p.add_argument("--time_begin", type=float, default=None, help="Start of the analysed range (Unix s).")
        p.add_argument("--time_end", type=float, default=None, help="End of the analysed range (Unix s).")

    p = sub.add_parser("snapshot", help="Positions of active flights at one instant.")
    add_common(p)
    p.add_argument("--time", type=float, required=True, help="Query time (Unix s).")
    p.set_defaults(func=cmd_snapshot)

    p = sub.add_parser("conflicts", help="Loss-of-separation pairs at one instant.")
    add_common(p)
    p.add_argument("--time", type=float, required=True, help="Query time (Unix s).")
    p.add_argument("--h_sep_nm", type=float, default=5.0, help="Horizontal minimum (NM).")
    p.add_argument("--v_sep_ft", type=float, default=2000.0, help="Vertical minimum (ft).")
    p.add_argument("--exclude_airports", action="store_true",
                   help="Ignore pairs with an aircraft within 15 NM of an airport.")
    p.add_argument("--suggest", action="store_true", help="Print rule-based remedies per conflict.")
    p.set_defaults(func=cmd_conflicts)

    p = sub.add_parser("hotspots", help="Space-time-altitude hotspot cells.")
    add_common(p)
    add_range(p)
    p.add_argument("--cell_nm", type=float, default=25.0, help="Horizontal cell size (NM).")
    p.add_argument("--cell_ft", type=float, default=2000.0, help="Vertical cell size (ft).")
    p.add_argument("--time_bucket_s", type=int, default=300, help="Time bucket width (s).")
    p.add_argument("--top", type=int, default=20, help="Number of cells to print.")
    p.set_defaults(func=cmd_hotspots)

    p = sub.add_parser("load", help="Windowed airport departures and arrivals.")
    add_common(p, with_edits=False)
    add_range(p)
    p.add_argument("--window_s", type=int, default=900, help="Window length (s).")
    p.add_argument("--top", type=int, default=20, help="Number of windows to print.")
    p.set_defaults(func=cmd_load)

    p = sub.add_parser("optimize", help="Greedy time/altitude edit search.")
    add_common(p, with_edits=False)
    add_range(p)
    p.add_argument("--max_iterations", type=int, default=30, help="Iteration cap.")
    p.add_argument("--cell_nm", type=float, default=25.0, help="Horizontal cell size (NM).")
    p.add_argument("--cell_ft", type=float, default=2000.0, help="Vertical cell size (ft).")
    p.add_argument("--time_bucket_s", type=int, default=300, help="Time bucket width (s).")
    p.add_argument("--time_budget_s", type=float, default=None, help="Wall-clock budget (s).")
    p.add_argument("--n_jobs", type=int, default=1, help="Worker processes for candidate evaluation.")
    p.add_argument("--output_path", type=str, default=None, help="Where to write the edits JSON.")
    p.set_defaults(func=cmd_optimize)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Command-line interface for the trajectory and conflict analytics.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
