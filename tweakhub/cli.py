"""tweakhub CLI: inspect, apply and serve tunable settings."""

import argparse
import asyncio
import json
import logging
import sys


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="tweakhub",
        description="tweakhub: compatibility filtering and value resolution for tunable settings",
    )
    parser.add_argument("--snapshot", default=None, help="Machine snapshot JSON (default: built-in demo machine)")
    parser.add_argument("--no-filter", action="store_true", help="Show settings the OS version filter would hide")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    list_parser = subparsers.add_parser("list", help="List compatible settings")
    list_parser.add_argument("--feature", default=None, help="Only this feature")
    list_parser.add_argument("--json", action="store_true", dest="json_output", help="Output as JSON")

    options_parser = subparsers.add_parser("options", help="Show the options of a selection setting")
    options_parser.add_argument("setting_id")

    apply_parser = subparsers.add_parser("apply", help="Apply a setting and save the snapshot")
    apply_parser.add_argument("setting_id")
    apply_parser.add_argument("--disable", action="store_true", help="Disable instead of enable")
    apply_parser.add_argument("--value", type=int, default=None, help="Selection index or numeric value")

    recommend_parser = subparsers.add_parser("recommend", help="Show recommended settings for a setting's domain")
    recommend_parser.add_argument("setting_id")
    recommend_parser.add_argument("--apply", action="store_true", help="Apply them and save the snapshot")

    subparsers.add_parser("check", help="Validate the built-in catalogs")

    status_parser = subparsers.add_parser("status", help="Show registry and hardware status")
    status_parser.add_argument("--json", action="store_true", dest="json_output", help="Output as JSON")

    serve_parser = subparsers.add_parser("serve", help="Start the REST API")
    serve_parser.add_argument("--port", type=int, default=None, help="Port (default: 8011)")
    serve_parser.add_argument("--host", default=None, help="Host (default: 127.0.0.1)")
    serve_parser.add_argument("--verbose", action="store_true", help="Enable DEBUG logging")
    serve_parser.add_argument("--quiet", action="store_true", help="Only show WARNING and above")

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    _dispatch(args)


def _dispatch(args):
    """Route CLI commands to their handlers."""
    if args.command == "check":
        _check()
    elif args.command == "serve":
        log_level = "INFO"
        if args.verbose:
            log_level = "DEBUG"
        elif args.quiet:
            log_level = "WARNING"
        _serve(args, log_level)
    elif args.command in ("list", "options", "apply", "recommend", "status"):
        logging.basicConfig(
            level=logging.WARNING,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        sys.exit(asyncio.run(_run_command(args)))
    else:
        print(f"Unknown command: {args.command}")
        sys.exit(1)


def _build_hub(args):
    from tweakhub.backends.snapshot import MachineSnapshot
    from tweakhub.config import AppConfig
    from tweakhub.hub.core import SettingsHub

    config = AppConfig.from_env()
    snapshot_path = args.snapshot or config.snapshot_path
    if args.no_filter:
        config.engine.filter_enabled = False
    snapshot = MachineSnapshot.load(snapshot_path)
    return SettingsHub.from_snapshot(snapshot, config), snapshot


async def _run_command(args) -> int:
    hub, snapshot = _build_hub(args)
    await hub.initialize()
    try:
        if args.command == "list":
            return _list(hub, args.feature, args.json_output)
        if args.command == "options":
            return await _options(hub, args.setting_id)
        if args.command == "apply":
            return await _apply(hub, snapshot, args)
        if args.command == "recommend":
            return await _recommend(hub, snapshot, args.setting_id, args.apply)
        if args.command == "status":
            return await _status(hub, args.json_output)
        return 1
    finally:
        await hub.shutdown()


def _list(hub, feature, json_output: bool) -> int:
    features = hub.registry.get_all_filtered_settings()
    if feature is not None:
        if feature not in features:
            print(f"Unknown feature: {feature}")
            return 1
        features = {feature: features[feature]}

    if json_output:
        print(json.dumps({fid: [s.summary() for s in settings] for fid, settings in features.items()}, indent=2))
        return 0

    for feature_id, settings in features.items():
        print(f"{feature_id} ({len(settings)})")
        for s in settings:
            note = f"  [{s.compatibility_message}]" if s.compatibility_message else ""
            print(f"  {s.id:<40} {s.input_type:<10} {s.name}{note}")
    return 0


async def _options(hub, setting_id: str) -> int:
    result = await hub.build_options(setting_id)
    if not result.success:
        print(f"Error: {result.error_message}")
        return 1
    for option in result.options:
        marker = "*" if option.value == result.selected_value else " "
        tooltip = f"  ({option.tooltip})" if option.tooltip else ""
        print(f" {marker} {option.value:>2}  {option.display_text}{tooltip}")
    return 0


async def _apply(hub, snapshot, args) -> int:
    try:
        result = await hub.apply_setting(args.setting_id, not args.disable, args.value)
    except ValueError as e:
        print(f"Error: {e}")
        return 1
    if not result.success:
        print(f"Error: {result.error_message}")
        return 1
    print(f"Applied {args.setting_id}")
    if snapshot.path is not None:
        snapshot.save()
    return 0


async def _recommend(hub, snapshot, setting_id: str, apply: bool) -> int:
    try:
        settings = await hub.recommended.get_recommended_settings(setting_id)
    except ValueError as e:
        print(f"Error: {e}")
        return 1
    for s in settings:
        print(f"  {s.id:<40} -> {hub.recommended.build_request(s).value}")
    if not apply:
        return 0

    results = await hub.recommended.apply_recommended_settings(setting_id)
    failed = [r for r in results if not r.success]
    print(f"Applied {len(results) - len(failed)}/{len(results)} recommended settings")
    for r in failed:
        print(f"  failed: {r.setting_id}: {r.error_message}")
    if snapshot.path is not None:
        snapshot.save()
    return 1 if failed else 0


async def _status(hub, json_output: bool) -> int:
    health = await hub.health_check()
    if json_output:
        print(json.dumps(health, indent=2))
        return 0

    print("tweakhub Status")
    print("=" * 40)
    print(f"  Registry:         {health['registry']}")
    print(f"  OS filter:        {'on' if health['filter_enabled'] else 'off'}")
    for feature_id, counts in health["features"].items():
        print(f"  {feature_id + ':':<18}{counts['compatible']}/{counts['total']} settings")
    for fact, value in health["hardware"].items():
        print(f"  {fact + ':':<18}{'yes' if value else 'no'}")
    return 0


def _check():
    from tweakhub.catalogs import FEATURE_PROVIDERS, validate_catalogs

    errors = validate_catalogs()
    if errors:
        for error in errors:
            print(f"  ERROR: {error}")
        sys.exit(1)
    total = sum(len(provider()) for provider in FEATURE_PROVIDERS.values())
    print(f"{len(FEATURE_PROVIDERS)} catalogs, {total} settings, no issues")


def _serve(args, log_level: str = "INFO"):
    """Start the tweakhub REST API."""
    logging.basicConfig(
        level=getattr(logging, log_level),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logger = logging.getLogger("tweakhub.serve")

    import uvicorn

    from tweakhub.hub.api import create_api

    hub, _ = _build_hub(args)
    host = args.host or hub.config.server.host
    port = args.port or hub.config.server.port

    async def start():
        await hub.initialize()
        app = create_api(hub)
        config = uvicorn.Config(
            app,
            host=host,
            port=port,
            log_level=log_level.lower(),
            access_log=(log_level != "WARNING"),
        )
        server = uvicorn.Server(config)
        logger.info(f"Serving tweakhub on http://{host}:{port}")
        try:
            await server.serve()
        finally:
            if hub.is_running():
                await hub.shutdown()

    asyncio.run(start())


if __name__ == "__main__":
    main()
