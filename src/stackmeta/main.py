from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, List, Optional

from pydantic import ValidationError

from .analytics import decide_inclusion, expand_analytics, filter_trusted, format_analytics, jsii_agent_version
from .config import StackMetaSettings
from .constants import Analytics, ExitCode
from .errors import ConfigError, StackMetaError
from .logging import StructuredLogger
from .models import ConstructInfo, Deferred, Resolved


def _read_infos(source: str) -> List[ConstructInfo]:
    text = sys.stdin.read() if source == "-" else Path(source).read_text(encoding="utf-8")
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Construct list is not valid JSON: {exc}") from exc
    if not isinstance(raw, list):
        raise ConfigError("Construct list must be a JSON array")

    infos: List[ConstructInfo] = []
    for entry in raw:
        if not isinstance(entry, dict):
            raise ConfigError(f"Construct entry must be an object: {entry!r}")
        fqn, version = entry.get("fqn"), entry.get("version")
        if not isinstance(fqn, str) or not isinstance(version, str) or not fqn or not version:
            raise ConfigError(f"Construct entry needs string fqn and version: {entry!r}")
        infos.append(ConstructInfo(fqn=fqn, version=version))
    return infos


def _cmd_encode(args: argparse.Namespace, settings: StackMetaSettings) -> str:
    infos = filter_trusted(_read_infos(args.source))
    infos.append(ConstructInfo(Analytics.RUNTIME_FQN, jsii_agent_version(settings.jsii_agent)))
    return format_analytics(infos, args.uncompressed or settings.force_uncompressed)


def _cmd_decode(args: argparse.Namespace, settings: StackMetaSettings) -> str:
    infos = expand_analytics(args.analytics)
    return json.dumps([{"fqn": i.fqn, "version": i.version} for i in infos], indent=2)


def _cmd_gate(args: argparse.Namespace, settings: StackMetaSettings) -> str:
    region = Deferred() if args.region == "-" else Resolved(args.region)
    decision = decide_inclusion(region)
    payload: dict[str, Any] = {"decision": decision.kind.value}
    if decision.condition is not None:
        payload["condition"] = {Analytics.CONDITION_ID: decision.condition}
    return json.dumps(payload, indent=2)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="stackmeta", description="CDK construct analytics tooling")
    sub = parser.add_subparsers(dest="command", required=True)

    encode = sub.add_parser("encode", help="Encode a JSON list of {fqn, version} objects")
    encode.add_argument("source", help="Path to the JSON file, or - for stdin")
    encode.add_argument("--uncompressed", action="store_true", help="Never use deflate64")
    encode.set_defaults(handler=_cmd_encode)

    decode = sub.add_parser("decode", help="Expand an analytics string into constructs")
    decode.add_argument("analytics")
    decode.set_defaults(handler=_cmd_decode)

    gate = sub.add_parser("gate", help="Show the CDKMetadata inclusion decision for a region")
    gate.add_argument("region", help="Region name, or - when unknown until deploy")
    gate.set_defaults(handler=_cmd_gate)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logger = StructuredLogger("cli")
    try:
        try:
            settings = StackMetaSettings()
        except ValidationError as exc:
            raise ConfigError(str(exc)) from exc
        output = args.handler(args, settings)
    except StackMetaError as exc:
        logger.error("command_failed", command=args.command, error=str(exc), error_type=type(exc).__name__)
        return int(exc.exit_code)
    except OSError as exc:
        logger.error("command_failed", command=args.command, error=str(exc))
        return int(ExitCode.ERROR)

    sys.stdout.write(output + "\n")
    return int(ExitCode.SUCCESS)


if __name__ == "__main__":
    sys.exit(main())
