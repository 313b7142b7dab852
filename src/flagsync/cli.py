"""Ponto de entrada `flagsync` (invocado pelo job de CI antes do Terraform).

Exemplo:

    flagsync --config-file flags/checkout.json \\
        --app-name shop --env-name prod --profile-name checkout-flags

Códigos de saída:
    0 → sucesso (publicar ou inalterado)
    1 → falha (MissingBaseState, documento inválido, I/O, estado remoto, settings)
    2 → argumentos inválidos (argparse)
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

from flagsync import __version__
from flagsync.core.config.errors import SettingsError
from flagsync.core.config.hashing import compute_config_hash
from flagsync.core.config.loader import load_settings
from flagsync.core.run_context import RunContext
from flagsync.core.runner import RunResult, SyncJob, SyncRunner
from flagsync.core.traceability.manifest import create_manifest, save_manifest
from flagsync.persistence.merge_store import MergeArtifactStore
from flagsync.remote.appconfig import AppConfigStateReader, ExplicitStateReader, NullStateReader

logger = logging.getLogger("flagsync")

STATE_SOURCES = ("appconfig", "explicit", "none")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="flagsync",
        description="Merge AWS AppConfig feature flags with the previously deployed configuration",
    )
    parser.add_argument("--config-file", required=True, help="Path to the feature flags JSON file")
    parser.add_argument("--app-name", required=True, help="AWS AppConfig application name")
    parser.add_argument("--env-name", required=True, help="AWS AppConfig environment name")
    parser.add_argument("--profile-name", required=True, help="AWS AppConfig profile name")
    parser.add_argument("--force-create", action="store_true", help="Force create new configuration if none exists")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--output-file",
        help="Path to write the merged configuration (defaults to same as input with .merged.json suffix)",
    )
    parser.add_argument("--settings", help="Operator settings file (YAML or JSON)")
    parser.add_argument("--settings-local", help="Optional local settings override (ignored if missing)")
    parser.add_argument(
        "--state-source",
        choices=STATE_SOURCES,
        default="appconfig",
        help="Where to read the deployed version/hash from (default: appconfig)",
    )
    parser.add_argument("--deployed-version", type=int, help="Deployed version number (with --state-source explicit)")
    parser.add_argument("--deployed-hash", help="Deployed content hash (with --state-source explicit)")
    parser.add_argument("--result-file", help="Write the sync result (hash, publish decision) as JSON")
    parser.add_argument("--manifest-file", help="Write the run manifest as JSON")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def configure_logging(settings: Dict[str, Any], debug: bool) -> None:
    log_cfg = settings.get("logging", {}) or {}
    level = logging.DEBUG if debug else getattr(logging, str(log_cfg.get("level", "INFO")).upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format=log_cfg.get("format") or "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )
    logging.getLogger("flagsync").setLevel(level)


def build_state_reader(args: argparse.Namespace, settings: Dict[str, Any]) -> Any:
    if args.state_source == "none":
        return NullStateReader()
    if args.state_source == "explicit":
        return ExplicitStateReader(version_number=args.deployed_version, content_hash=args.deployed_hash)
    region = (settings.get("appconfig", {}) or {}).get("region")
    return AppConfigStateReader(region=region, removal_marker=settings["merge"]["removal_marker"])


def _write_json(path: str, data: Any) -> None:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(json.dumps(data, ensure_ascii=False, indent=2, sort_keys=True) + "\n", encoding="utf-8")


def run(args: argparse.Namespace, *, state_reader: Optional[Any] = None) -> int:
    try:
        settings = load_settings(defaults_path=args.settings, local_path=args.settings_local)
    except SettingsError as e:
        configure_logging({}, args.debug)
        logger.error("Invalid settings: %s", e)
        return 1

    configure_logging(settings, args.debug)

    logger.info("Processing configuration file: %s", args.config_file)
    logger.info("Using AppConfig application: %s", args.app_name)
    logger.info("Using AppConfig environment: %s", args.env_name)
    logger.info("Using AppConfig profile: %s", args.profile_name)

    artifact_cfg = settings.get("artifact", {}) or {}
    store = MergeArtifactStore(
        suffix=artifact_cfg.get("suffix", ".merged.json"),
        indent=artifact_cfg.get("indent", 2),
        removal_marker=settings["merge"]["removal_marker"],
        output_paths={args.config_file: args.output_file} if args.output_file else None,
    )

    started_at = datetime.now(timezone.utc)
    run_id = f"run-{started_at.strftime('%Y%m%dT%H%M%SZ')}-{uuid.uuid4().hex[:8]}"
    manifest = create_manifest(
        run_id=run_id,
        started_at=started_at,
        flagsync_version=__version__,
        settings_hash=compute_config_hash(settings),
    )
    ctx = RunContext(
        run_id=run_id,
        created_at=started_at,
        settings=settings,
        meta={"application": args.app_name, "environment": args.env_name, "profile": args.profile_name},
        manifest=manifest,
    )

    job = SyncJob(
        source_path=args.config_file,
        application=args.app_name,
        environment=args.env_name,
        profile=args.profile_name,
        force_create=args.force_create,
    )
    runner = SyncRunner(
        jobs=[job],
        ctx=ctx,
        store=store,
        state_reader=state_reader if state_reader is not None else build_state_reader(args, settings),
    )
    result: RunResult = runner.run()

    try:
        if args.result_file:
            sync_result = result.results[job.name]
            _write_json(args.result_file, sync_result.to_dict())
        if args.manifest_file:
            save_manifest(manifest, Path(args.manifest_file))
    except OSError as e:
        logger.error("Failed to write run outputs: %s", e)
        return 1

    for sync_result in result.results.values():
        if sync_result.document is not None:
            logger.debug(
                "Merged configuration content:\n%s",
                json.dumps(sync_result.document.to_dict(), indent=2, sort_keys=True),
            )

    if not result.ok:
        logger.error("Exiting without publishing changes")
        return 1
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    return run(args)


if __name__ == "__main__":
    sys.exit(main())
