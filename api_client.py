import argparse
import json
import logging
import sys
from typing import List, Optional

import requests

from config import get_setting, setup_logging

log = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://127.0.0.1:7000"
API_ROOT = "api/public/v1"


class OlgHttpError(Exception):
    """Raised when the OLG HTTP API cannot execute a command."""

    def __init__(self, message: str, status_code=None):
        super().__init__(message)
        self.status_code = status_code


class OlgApiClient:
    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None):
        self.base_url = base_url or get_setting("API_BASE_URL", "API_BASE_URL", DEFAULT_BASE_URL)
        if timeout is None:
            timeout = get_setting("API_TIMEOUT", "API_TIMEOUT", "10")
        self.timeout = float(timeout)

        self.session = requests.Session()
        self.session.headers.update({"Accept": "application/json"})
        log.debug("Initialized OLG API client for %s", self.base_url.rstrip("/"))

    def _build_url(self, endpoint: str, api: bool = True) -> str:
        parts = [self.base_url.rstrip("/")]
        if api:
            parts.append(API_ROOT)
        parts.append(endpoint.lstrip("/"))
        return "/".join(parts)

    def _request(self, endpoint: str, method: str = "GET", json_payload=None, api: bool = True):
        url = self._build_url(endpoint, api=api)
        try:
            response = self.session.request(method, url, json=json_payload, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            resp = getattr(exc, "response", None)
            status = resp.status_code if resp is not None else None
            detail = _error_message(resp) if resp is not None else str(exc)
            log.debug("OLG API %s %s failure: %s", method, endpoint, exc, exc_info=True)
            raise OlgHttpError(f"{method} {endpoint} failed ({status or 'request'}): {detail}", status) from exc

        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return {"result": response.text}

    def health(self) -> bool:
        self._request("health", api=False)
        return True

    def get_maps(self) -> List[dict]:
        data = self._request("maps")
        if not isinstance(data, list):
            return []
        return [entry for entry in data if isinstance(entry, dict)]

    def map_restart(self) -> None:
        log.info("Requesting map restart")
        self._request("server/map_restart")

    def fast_restart(self) -> None:
        log.info("Requesting fast restart")
        self._request("server/fast_restart")

    def gametype_map(self, gametype: str, map_name: str) -> None:
        log.info("Requesting gametype %s on %s", gametype, map_name)
        self._request(
            "server/gametype_map",
            method="POST",
            json_payload={"gametype": gametype, "map": map_name},
        )


def _error_message(response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return response.text


_client: Optional[OlgApiClient] = None


def _get_client() -> OlgApiClient:
    global _client
    if _client is None:
        _client = OlgApiClient()
    return _client


def get_maps() -> List[dict]:
    return _get_client().get_maps()


def map_restart() -> None:
    _get_client().map_restart()


def fast_restart() -> None:
    _get_client().fast_restart()


def gametype_map(gametype: str, map_name: str) -> None:
    _get_client().gametype_map(gametype, map_name)


def main(argv=None):
    parser = argparse.ArgumentParser(prog="olgctl", description="Operator client for the OLG HTTP API")
    parser.add_argument("--url", default=None, help="API base URL (defaults to API_BASE_URL)")
    parser.add_argument("--timeout", type=float, default=None)
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("health")
    sub.add_parser("maps")
    sub.add_parser("map-restart")
    sub.add_parser("fast-restart")
    gm = sub.add_parser("gametype-map")
    gm.add_argument("gametype", help="gametype tag: dm, war, dom, sd, koth, sab")
    gm.add_argument("map", help="map name, e.g. mp_crash")
    args = parser.parse_args(argv)

    setup_logging()
    client = OlgApiClient(args.url, args.timeout)
    try:
        if args.command == "health":
            client.health()
            print("OK")
        elif args.command == "maps":
            print(json.dumps(client.get_maps(), indent=2))
        elif args.command == "map-restart":
            client.map_restart()
        elif args.command == "fast-restart":
            client.fast_restart()
        elif args.command == "gametype-map":
            client.gametype_map(args.gametype, args.map)
    except OlgHttpError as exc:
        print(f"FAIL: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
