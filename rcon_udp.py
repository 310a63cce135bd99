# Quake 3 family out-of-band RCON over UDP
# One datagram out, one datagram back, no session and no retransmission.

import logging
import socket
import time
from dataclasses import dataclass, field

from errors import CommandTooLarge, InvalidCommand, NetworkError, ProtocolError, RconTimeout

log = logging.getLogger(__name__)

OOB_MARKER = b"\xff\xff\xff\xff"
DEFAULT_TIMEOUT = 2.0
# Stays under a typical Ethernet MTU so the request is never fragmented.
MAX_PACKET_SIZE = 1400
RECV_BUFFER_SIZE = 4096


@dataclass(frozen=True)
class Endpoint:
    host: str
    port: int
    password: str = field(repr=False)

    def __str__(self) -> str:
        return f"{self.host}:{self.port}"


def build_command(password: str, subcommand: str) -> str:
    return f"rcon {password} {subcommand}"


def encode(command: str, max_size: int = MAX_PACKET_SIZE) -> bytes:
    try:
        packet = OOB_MARKER + command.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise InvalidCommand(f"command is not valid UTF-8 text: {exc.reason} at position {exc.start}") from exc
    if len(packet) > max_size:
        raise CommandTooLarge(len(packet), max_size)
    return packet


def decode(raw: bytes) -> str:
    """Strip the out-of-band framing from a reply and return its text.

    Exactly one leading line feed is dropped. Invalid UTF-8 is replaced
    rather than rejected so garbled server output still reaches the operator.
    """
    if len(raw) < len(OOB_MARKER) or raw[:len(OOB_MARKER)] != OOB_MARKER:
        raise ProtocolError(f"Invalid or empty response from server: {raw[:16]!r}")
    payload = raw[len(OOB_MARKER):]
    if payload.startswith(b"\n"):
        payload = payload[1:]
    return payload.decode("utf-8", errors="replace")


def _resolve(endpoint: Endpoint):
    try:
        infos = socket.getaddrinfo(endpoint.host, endpoint.port, type=socket.SOCK_DGRAM)
    except OSError as exc:
        raise NetworkError(f"cannot resolve {endpoint}: {exc}") from exc
    family, _, _, _, sockaddr = infos[0]
    return family, sockaddr


def roundtrip(endpoint: Endpoint, packet: bytes, timeout: float = DEFAULT_TIMEOUT) -> bytes:
    family, sockaddr = _resolve(endpoint)

    try:
        s = socket.socket(family, socket.SOCK_DGRAM)
    except OSError as exc:
        raise NetworkError(f"cannot open UDP socket: {exc}") from exc

    try:
        s.settimeout(timeout)
        s.bind(("", 0))
        s.sendto(packet, sockaddr)
        log.debug("Sent %d bytes to %s, waiting up to %.2fs", len(packet), endpoint, timeout)
        deadline = time.monotonic() + timeout
        while True:
            data, addr = s.recvfrom(RECV_BUFFER_SIZE)
            if addr[:2] == sockaddr[:2]:
                return data
            log.debug("Ignoring %d bytes from %s while waiting for %s", len(data), addr, endpoint)
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise socket.timeout("timed out")
            s.settimeout(remaining)
    except socket.timeout as exc:
        raise RconTimeout(f"no reply from {endpoint} within {timeout:g}s") from exc
    except OSError as exc:
        raise NetworkError(f"UDP exchange with {endpoint} failed: {exc}") from exc
    finally:
        s.close()
