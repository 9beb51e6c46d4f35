"""CLI entry point for the UV exposure estimator."""

import argparse
import json
import logging
from datetime import datetime
from pathlib import Path

from uvdose.config.defaults import DEFAULT_CONFIG_PATH
from uvdose.config.loader import (
    config_hash,
    get_config_value,
    load_config,
    set_config_value,
)
from uvdose.exposure.evaluator import ExposureEvaluator
from uvdose.models.errors import UvDoseError
from uvdose.models.exposure import SafeTimeStatus

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="uvdose",
        description="Estimate UV exposure for the rest of the day from an hourly forecast",
    )
    parser.add_argument(
        "--config", default=DEFAULT_CONFIG_PATH, help="Config YAML path"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )

    sub = parser.add_subparsers(dest="command")

    # exposure / safe-time / report
    exposure_p = sub.add_parser(
        "exposure", help="Percent of the limit used by going out now"
    )
    _add_forecast_args(exposure_p)

    safe_p = sub.add_parser(
        "safe-time", help="Earliest time it is safe to go out for the rest of the day"
    )
    _add_forecast_args(safe_p)
    safe_p.add_argument(
        "--precision", type=float, help="Search precision in seconds"
    )

    report_p = sub.add_parser("report", help="Both answers against one clock read")
    _add_forecast_args(report_p)
    report_p.add_argument(
        "--precision", type=float, help="Search precision in seconds"
    )
    report_p.add_argument("--json", action="store_true", help="Print JSON")

    # config show / config set
    config_p = sub.add_parser("config", help="Config operations")
    config_sub = config_p.add_subparsers(dest="config_command")
    config_sub.add_parser("show", help="Display current config")
    set_p = config_sub.add_parser("set", help="Set a config value")
    set_p.add_argument("keyvalue", help="key=value to set")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(args.config)
        if args.command == "config":
            return _cmd_config(config, args)
        forecast = _read_forecast(args.forecast)
        now = _parse_now(args.now)
        if args.command == "exposure":
            return _cmd_exposure(config, args, forecast, now)
        elif args.command == "safe-time":
            return _cmd_safe_time(config, args, forecast, now)
        elif args.command == "report":
            return _cmd_report(config, args, forecast, now)
    except (UvDoseError, ValueError, OSError) as e:
        logger.error("%s failed: %s", args.command, e)
        print(f"Error: {e}")
        return 1

    parser.print_help()
    return 1


def _add_forecast_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("forecast", help="Hourly forecast payload (JSON file)")
    p.add_argument("--skin-type", help="Skin type I-VI")
    p.add_argument("--margin", type=float, help="Safety margin fraction (0, 1]")
    p.add_argument("--now", help="Evaluate at this ISO-8601 instant")


def _read_forecast(path: str) -> dict:
    with open(Path(path)) as f:
        return json.load(f)


def _parse_now(raw: str | None) -> datetime | None:
    if raw is None:
        return None
    now = datetime.fromisoformat(raw)
    if now.tzinfo is None:
        raise ValueError(f"--now must include a UTC offset: {raw}")
    return now


def _settings(config, args) -> tuple[str, float]:
    skin_type = args.skin_type or config.exposure.skin_type
    margin = args.margin if args.margin is not None else config.exposure.margin_fraction
    return skin_type, margin


def _precision(config, args) -> float:
    if args.precision is not None:
        return args.precision
    return config.exposure.precision_seconds


def _cmd_exposure(config, args, forecast, now) -> int:
    skin_type, margin = _settings(config, args)
    evaluator = ExposureEvaluator.from_config(config)
    report = evaluator.percent_exposure_if_outside_now(
        forecast, skin_type, margin, now=now
    )
    print(f"Safety index if you go out now: {report.percent:.2f}%")
    print(
        f"Dose until {report.window_end}: {report.dose_sed:.3f} SED "
        f"(limit {report.threshold_sed:.3f} SED, skin type {report.skin_type})"
    )
    return 0


def _cmd_safe_time(config, args, forecast, now) -> int:
    skin_type, margin = _settings(config, args)
    evaluator = ExposureEvaluator.from_config(config)
    report = evaluator.safe_start_time_for_rest_of_day(
        forecast, skin_type, margin, _precision(config, args), now=now
    )
    _print_safe_time(report)
    return 0


def _cmd_report(config, args, forecast, now) -> int:
    skin_type, margin = _settings(config, args)
    evaluator = ExposureEvaluator.from_config(config)
    evaluation = evaluator.evaluate(
        forecast, skin_type, margin, _precision(config, args), now=now
    )
    if args.json:
        data = evaluation.to_dict()
        data["config_hash"] = config_hash(config)
        print(json.dumps(data, indent=2))
        return 0
    print(f"Safety index if you go out now: {evaluation.exposure.percent:.2f}%")
    _print_safe_time(evaluation.safe_time)
    return 0


def _print_safe_time(report) -> None:
    if report.status == SafeTimeStatus.RIGHT_NOW:
        print("Safe to go outside for the rest of the day")
    else:
        print(f"Safe to go outside at: {report.safe_time} ({report.zone})")


def _cmd_config(config, args) -> int:
    if args.config_command == "show":
        print(config.model_dump_json(indent=2))
        return 0
    elif args.config_command == "set":
        kv = args.keyvalue
        if "=" not in kv:
            print("Error: use key=value format")
            return 1
        key, value = kv.split("=", 1)
        try:
            new_config = set_config_value(config, key.strip(), value.strip())
            print(f"Set {key} = {get_config_value(new_config, key.strip())}")
            return 0
        except Exception as e:
            print(f"Error: {e}")
            return 1
    else:
        print("Use: config show | config set key=value")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
