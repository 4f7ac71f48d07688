from __future__ import annotations

import argparse
import logging
from typing import Any

from bopf_dashboard import load_config
from bopf_dashboard.alerts import classify_alerts
from bopf_dashboard.config import DashboardConfig, setup_logging
from bopf_dashboard.errors import InvalidScenarioEdit
from bopf_dashboard.indicators import field_pressure_score
from bopf_dashboard.scenario import ScenarioInput, ScenarioStore
from bopf_dashboard.state import DashboardSession, DashboardState


def _parse_assignments(items: list[str] | None) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for item in items or []:
        name, sep, value = item.partition("=")
        if not sep or not name:
            raise argparse.ArgumentTypeError(f"Expected field=value, got {item!r}")
        out[name.strip()] = value.strip()
    return out


def _fmt(value: float | None, suffix: str = "", digits: int = 2) -> str:
    return "—" if value is None else f"{value:,.{digits}f}{suffix}"


def _print_state(state: DashboardState) -> None:
    fc = state.forecast
    ind = state.indicators
    scenario = state.effective_scenario

    if fc is not None:
        print(f"Forecast {fc.date}: {_fmt(fc.price_lkr, ' LKR/kg')} (confidence: {fc.confidence or '—'})")
    else:
        print("Forecast: —")
    print(f"  Price trend (4w):   {_fmt(ind.trend_change_pct, '%', 1)}")
    print(f"  Volatility:         {_fmt(ind.volatility)}")
    print(f"  FX:                 {_fmt(scenario.fx_lkr_per_usd_m, ' LKR/USD', 0)}")
    print(f"  Spread vs Kenya:    {_fmt(ind.spread_vs_kenya, ' LKR/kg')}")
    print(f"  Spread vs India:    {_fmt(ind.spread_vs_india, ' LKR/kg')}")
    print(f"  Field pressure:     {ind.field_pressure_score if ind.field_pressure_score is not None else '—'}/100")
    print("Alerts:")
    for alert in state.alerts:
        print(f"  - {alert.message}")
    if state.error:
        print(f"ERROR: {state.error}")


def _baseline(cfg: DashboardConfig, args: argparse.Namespace) -> ScenarioInput:
    return ScenarioInput.from_mapping(cfg.scenario.resolved()).merged(_parse_assignments(args.set))


def _session(args: argparse.Namespace) -> DashboardSession:
    cfg = load_config(args.config) if args.config else DashboardConfig()
    session = DashboardSession(cfg, store=ScenarioStore(_baseline(cfg, args)))
    session.start(fetch_fx=not args.no_fx)
    if args.what_if:
        session.run_what_if(_parse_assignments(args.what_if))
    return session


def _cmd_snapshot(args: argparse.Namespace) -> int:
    with _session(args) as session:
        state = session.state
        _print_state(state)
        return 1 if state.error else 0


def _cmd_export(args: argparse.Namespace) -> int:
    with _session(args) as session:
        state = session.state
        if state.error:
            print(f"ERROR: {state.error}")
            return 1
        path = session.export_csv(args.out)
        print(f"Exported {len(state.series)} rows -> {path}")
        return 0


def _cmd_alerts(args: argparse.Namespace) -> int:
    cfg = load_config(args.config) if args.config else DashboardConfig()
    scenario = _baseline(cfg, args)
    score = field_pressure_score(scenario.temp_mean_c_w, scenario.humidity_mean_w, cfg.pressure)
    print(f"Field pressure: {score if score is not None else '—'}/100")
    for alert in classify_alerts(scenario, cfg.alerts):
        print(f"  - {alert.message}")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="bopf-dashboard")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="cmd", required=True)

    def add_scenario_args(p: argparse.ArgumentParser, remote: bool) -> None:
        p.add_argument("--config", help="Path to YAML config")
        p.add_argument("--set", action="append", metavar="FIELD=VALUE", help="Edit the baseline scenario")
        if remote:
            p.add_argument("--what-if", action="append", metavar="FIELD=VALUE", help="Transient override")
            p.add_argument("--no-fx", action="store_true", help="Skip the live FX refresh")

    p_snap = sub.add_parser("snapshot", help="Fetch a forecast and print indicators + alerts")
    add_scenario_args(p_snap, remote=True)
    p_snap.set_defaults(func=_cmd_snapshot)

    p_exp = sub.add_parser("export", help="Fetch a forecast and export the merged series as CSV")
    add_scenario_args(p_exp, remote=True)
    p_exp.add_argument("--out", help="Output CSV path (default from config)")
    p_exp.set_defaults(func=_cmd_export)

    p_alerts = sub.add_parser("alerts", help="Field alerts from scenario values only (offline)")
    add_scenario_args(p_alerts, remote=False)
    p_alerts.set_defaults(func=_cmd_alerts)

    args = parser.parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO)
    try:
        return int(args.func(args))
    except (InvalidScenarioEdit, argparse.ArgumentTypeError) as exc:
        print(f"ERROR: {exc}")
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
