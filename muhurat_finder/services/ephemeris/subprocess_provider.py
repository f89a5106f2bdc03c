from __future__ import annotations

import datetime as _dt
import json
import logging
import math
import subprocess
import sys
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from muhurat_finder.services.astrology.schemas import GeoPosition
from muhurat_finder.services.ephemeris.provider import EphemerisProvider, check_body
from muhurat_finder.services.errors import EphemerisUnavailable, InvertedDayWindow

logger = logging.getLogger(__name__)

WORKER_MODULE = "muhurat_finder.services.ephemeris.worker"


def default_worker_command(python: Optional[str] = None) -> List[str]:
    return [python or sys.executable, "-m", WORKER_MODULE]


class SubprocessEphemerisProvider(EphemerisProvider):
    """
    Runs every request in a fresh worker process.

    One JSON request goes to the child's stdin, one JSON response is read
    back from its stdout once it exits. A non-zero exit code, a timeout or
    unparsable output all surface as EphemerisUnavailable.
    """

    name = "subprocess"

    def __init__(self, command: Optional[Sequence[str]] = None, timeout_sec: float = 10.0):
        self.command = list(command) if command else default_worker_command()
        self.timeout_sec = float(timeout_sec)

    def _request(self, command: str, args: Dict[str, Any]) -> Dict[str, Any]:
        payload = json.dumps({"command": command, "args": args})
        try:
            # subprocess.run kills the child when the timeout expires
            proc = subprocess.run(
                self.command,
                input=payload,
                capture_output=True,
                text=True,
                timeout=self.timeout_sec,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            logger.warning("Ephemeris worker timed out after %.1fs (%s)", self.timeout_sec, command)
            raise EphemerisUnavailable(
                f"Ephemeris worker timed out after {self.timeout_sec:g}s"
            ) from exc
        except OSError as exc:
            logger.warning("Failed to start ephemeris worker %r: %s", self.command, exc)
            raise EphemerisUnavailable(f"Failed to start ephemeris worker: {exc}") from exc

        if proc.stderr:
            logger.debug("ephemeris worker stderr: %s", proc.stderr.strip())

        envelope = _parse_envelope(proc.stdout)

        if proc.returncode != 0:
            # Failure regardless of stdout; the envelope only refines the message
            if envelope and envelope.get("error_type") == "InvertedDayWindow":
                raise InvertedDayWindow(envelope.get("error") or "inverted day window")
            reason = (envelope or {}).get("error") or _tail(proc.stderr) or "no output"
            logger.warning("Ephemeris worker exited with code %s: %s", proc.returncode, reason)
            raise EphemerisUnavailable(
                f"Ephemeris worker exited with code {proc.returncode}: {reason}"
            )

        if envelope is None:
            raise EphemerisUnavailable("Ephemeris worker produced malformed output")
        if not envelope.get("ok") or not isinstance(envelope.get("result"), dict):
            raise EphemerisUnavailable(envelope.get("error") or "Ephemeris worker reported failure")
        return envelope["result"]

    def ping(self) -> bool:
        self._request("ping", {})
        return True

    def body_longitude(
        self,
        instant: _dt.datetime,
        body: str,
        geo: Optional[GeoPosition] = None,
    ) -> float:
        longitudes = self.body_longitudes(instant, [body], geo)
        if body not in longitudes:
            raise EphemerisUnavailable(f"Ephemeris worker returned no longitude for {body}")
        return longitudes[body]

    def body_longitudes(
        self,
        instant: _dt.datetime,
        bodies: Iterable[str],
        geo: Optional[GeoPosition] = None,
    ) -> Dict[str, float]:
        bodies = [check_body(b) for b in bodies]
        if instant.tzinfo is None:
            raise ValueError("instant must be timezone-aware")
        result = self._request(
            "longitudes",
            {
                "instant": instant.isoformat(),
                "bodies": bodies,
                "geo": geo.model_dump() if geo else None,
            },
        )
        raw = result.get("longitudes")
        if not isinstance(raw, dict):
            raise EphemerisUnavailable("Ephemeris worker response has no longitudes")

        longitudes: Dict[str, float] = {}
        for body in bodies:
            try:
                value = float(raw[body])
            except (KeyError, TypeError, ValueError):
                continue
            if math.isfinite(value):
                longitudes[body] = value % 360.0
        return longitudes

    def sun_rise_set(
        self,
        day: _dt.date,
        geo: GeoPosition,
        tz_name: str,
    ) -> Tuple[_dt.datetime, _dt.datetime]:
        result = self._request(
            "sun_rise_set",
            {"date": day.isoformat(), "geo": geo.model_dump(), "timezone": tz_name},
        )
        try:
            sunrise = _dt.datetime.fromisoformat(result["sunrise"])
            sunset = _dt.datetime.fromisoformat(result["sunset"])
        except (KeyError, TypeError, ValueError) as exc:
            raise EphemerisUnavailable("Ephemeris worker returned unreadable rise/set times") from exc
        return sunrise, sunset


def _parse_envelope(stdout: str) -> Optional[Dict[str, Any]]:
    text = (stdout or "").strip()
    if not text:
        return None
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        return None
    return data if isinstance(data, dict) else None


def _tail(text: str, limit: int = 500) -> str:
    text = (text or "").strip()
    return text[-limit:]
