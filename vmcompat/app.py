import argparse
import json
import sys
from pathlib import Path

from . import __version__
from .config import Settings, load_env
from .errors import ParseFailure, VersionMappingError
from .loader import ManifestLoader
from .logger import get_logger, reset_logger
from .resolver import SCENARIO_KEYS
from .schema import parse_host_manifest, parse_plugin_manifest


def configure_logging(settings: Settings) -> None:
    reset_logger()
    get_logger(
        level=settings.log_level,
        log_dir=settings.log_dir,
        enable_file=settings.log_dir is not None,
    )


def build_loader(args: argparse.Namespace, settings: Settings) -> ManifestLoader:
    return ManifestLoader(
        settings=settings,
        plugin_source=getattr(args, "plugin_file", None) or getattr(args, "plugin_url", None),
        host_source=args.host_file or args.host_url,
        release_source=args.release_url,
        check_release=not args.no_release_check,
    )


def cmd_resolve(args: argparse.Namespace, settings: Settings) -> None:
    mapping = build_loader(args, settings).resolve()
    if args.format == "json":
        print(json.dumps({key: mapping[key] for key in SCENARIO_KEYS}, indent=2))
        return
    for key in SCENARIO_KEYS:
        print(f"{key}: {mapping[key]}")


def cmd_latest_host(args: argparse.Namespace, settings: Settings) -> None:
    loader = build_loader(args, settings)
    lookup = loader.host_lookup(loader.load_host_manifest())
    print(lookup.latest_host_for_protocol(args.protocol))


def cmd_validate(args: argparse.Namespace, settings: Settings) -> None:
    if not args.plugin_file and not args.host_file:
        raise SystemExit("Pass --plugin-file and/or --host-file")
    invalid = False
    checks = [
        (args.plugin_file, parse_plugin_manifest),
        (args.host_file, parse_host_manifest),
    ]
    for path, parse in checks:
        if not path:
            continue
        input_path = Path(path)
        if not input_path.exists():
            raise SystemExit(f"Input file not found: {input_path}")
        try:
            raw = input_path.read_bytes()
        except OSError as e:
            raise SystemExit(f"Cannot read {input_path}: {e}")
        try:
            parse(raw, url=str(input_path))
        except ParseFailure as e:
            invalid = True
            print(f"Invalid: {input_path}")
            for err in e.errors or [str(e)]:
                print(f" - {err}")
            continue
        print(f"Valid: {input_path}")
    if invalid:
        raise SystemExit(2)


def _add_source_args(parser: argparse.ArgumentParser, plugin: bool = True) -> None:
    if plugin:
        parser.add_argument("--plugin-url", help="Plugin compatibility manifest URL (or set VMCOMPAT_PLUGIN_COMPAT_URL)")
        parser.add_argument("--plugin-file", help="Read the plugin manifest from a local file instead")
    parser.add_argument("--host-url", help="Host compatibility manifest URL (or set VMCOMPAT_HOST_COMPAT_URL)")
    parser.add_argument("--host-file", help="Read the host manifest from a local file instead")
    release = parser.add_mutually_exclusive_group()
    release.add_argument("--release-url", help="Latest host release API URL (or set VMCOMPAT_HOST_RELEASE_URL)")
    release.add_argument("--no-release-check", action="store_true", help="Do not skip host versions newer than the latest release")


def main(argv=None):
    load_env()
    parser = argparse.ArgumentParser(prog="vmcompat", description="Resolve plugin/host version pairs for end-to-end tests")
    parser.add_argument("--version", action="store_true", help="Show version")

    subparsers = parser.add_subparsers(dest="command")
    res = subparsers.add_parser("resolve", help="Resolve and print the scenario version map")
    _add_source_args(res)
    res.add_argument("--format", choices=["text", "json"], default="text", help="Output format (default: text)")
    res.set_defaults(func=cmd_resolve)

    lat = subparsers.add_parser("latest-host", help="Print the host release to use for a protocol version")
    lat.add_argument("--protocol", type=int, required=True, help="RPC protocol version")
    _add_source_args(lat, plugin=False)
    lat.set_defaults(func=cmd_latest_host)

    val = subparsers.add_parser("validate", help="Validate local manifest files")
    val.add_argument("--plugin-file", help="Plugin compatibility manifest file")
    val.add_argument("--host-file", help="Host compatibility manifest file")
    val.set_defaults(func=cmd_validate)

    args = parser.parse_args(argv)

    if args.version:
        print(__version__)
        return

    if not hasattr(args, "func"):
        parser.print_help()
        return

    try:
        settings = Settings.from_env()
    except ValueError as e:
        raise SystemExit(f"Configuration error: {e}")
    configure_logging(settings)

    try:
        args.func(args, settings)
    except VersionMappingError as e:
        get_logger().error("Resolution failed", error_type=type(e).__name__, error=str(e))
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(1)
    finally:
        get_logger().log_metrics_summary()


if __name__ == "__main__":
    main()
