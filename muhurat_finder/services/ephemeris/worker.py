"""
Ephemeris worker process.

    echo '{"command": "longitudes", "args": {...}}' | python -m muhurat_finder.services.ephemeris.worker

Reads one JSON request from stdin and writes one JSON response to stdout:

    {"ok": true, "result": {...}}                              exit code 0
    {"ok": false, "error": "...", "error_type": "..."}        exit code 1

Diagnostics go to stderr only.
"""
from __future__ import annotations

import datetime as _dt
import json
import logging
import sys
from typing import Any, Dict, Optional

from muhurat_finder.config import get_settings
from muhurat_finder.services.astrology.schemas import GeoPosition
from muhurat_finder.services.ephemeris.provider import ROSTER, EphemerisProvider
from muhurat_finder.services.errors import MuhuratError

logger = logging.getLogger("muhurat_finder.worker")


def _parse_geo(raw: Optional[Dict[str, Any]]) -> Optional[GeoPosition]:
    if not raw:
        return None
    return GeoPosition(**raw)


def _parse_instant(raw: str) -> _dt.datetime:
    instant = _dt.datetime.fromisoformat(raw)
    if instant.tzinfo is None:
        raise ValueError(f"instant must carry a UTC offset: {raw!r}")
    return instant


def handle(request: Dict[str, Any], provider: EphemerisProvider) -> Dict[str, Any]:
    command = request.get("command")
    args = request.get("args") or {}

    if command == "ping":
        return {"message": "ephemeris worker is working", "provider": provider.name}

    if command == "longitudes":
        instant = _parse_instant(args["instant"])
        bodies = args.get("bodies") or list(ROSTER)
        longitudes = provider.body_longitudes(instant, bodies, _parse_geo(args.get("geo")))
        return {"instant": instant.isoformat(), "longitudes": longitudes}

    if command == "sun_rise_set":
        day = _dt.date.fromisoformat(args["date"])
        geo = _parse_geo(args["geo"])
        sunrise, sunset = provider.sun_rise_set(day, geo, args["timezone"])
        return {"sunrise": sunrise.isoformat(), "sunset": sunset.isoformat()}

    raise ValueError(f"Unknown command: {command!r}")


def _emit(payload: Dict[str, Any]) -> None:
    sys.stdout.write(json.dumps(payload))
    sys.stdout.write("\n")
    sys.stdout.flush()


def main(provider: Optional[EphemerisProvider] = None) -> int:
    settings = get_settings()
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        request = json.loads(sys.stdin.read())
        if not isinstance(request, dict):
            raise ValueError("request must be a JSON object")
    except ValueError as exc:
        logger.error("Malformed request: %s", exc)
        _emit({"ok": False, "error": f"Malformed request: {exc}", "error_type": "ValueError"})
        return 1

    try:
        if provider is None:
            from muhurat_finder.services.ephemeris.swisseph_provider import SwissEphemerisProvider

            provider = SwissEphemerisProvider(settings.SWISSEPH_EPHE_PATH)
        result = handle(request, provider)
    except (MuhuratError, ValueError, KeyError, TypeError) as exc:
        logger.error("Command %r failed: %s", request.get("command"), exc)
        _emit({"ok": False, "error": str(exc), "error_type": type(exc).__name__})
        return 1

    _emit({"ok": True, "result": result})
    return 0


if __name__ == "__main__":
    sys.exit(main())
