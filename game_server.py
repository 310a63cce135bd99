import logging

import rcon_udp
from errors import PartialFailure, RconError
from gametype import Gametype, from_tag, to_tag
from rcon_udp import DEFAULT_TIMEOUT, MAX_PACKET_SIZE, Endpoint

log = logging.getLogger(__name__)


class GameServer:
    """Administrative operations against one game server over RCON.

    Instances hold only immutable configuration, so one object is shared by
    every request thread. Each command gets its own socket.
    """

    def __init__(
        self,
        host: str,
        port: int,
        password: str,
        timeout: float = DEFAULT_TIMEOUT,
        max_packet_size: int = MAX_PACKET_SIZE,
    ):
        if float(timeout) <= 0:
            raise ValueError(f"timeout must be positive, got {timeout!r}")
        if int(max_packet_size) < len(rcon_udp.OOB_MARKER):
            raise ValueError(f"max_packet_size must be at least {len(rcon_udp.OOB_MARKER)}, got {max_packet_size!r}")
        self._endpoint = Endpoint(host, int(port), password)
        self._timeout = float(timeout)
        self._max_packet_size = int(max_packet_size)

    @classmethod
    def from_endpoint(cls, endpoint: Endpoint, **kwargs) -> "GameServer":
        return cls(endpoint.host, endpoint.port, endpoint.password, **kwargs)

    @property
    def endpoint(self) -> Endpoint:
        return self._endpoint

    @property
    def timeout(self) -> float:
        return self._timeout

    def __str__(self) -> str:
        return str(self._endpoint)

    def __repr__(self) -> str:
        return f"GameServer({self._endpoint}, timeout={self._timeout:g})"

    def map_restart(self) -> str:
        return self.rcon("map_restart")

    def fast_restart(self) -> str:
        return self.rcon("fast_restart")

    def set_gametype_and_map(self, gametype, map_name: str) -> str:
        """Switch the gametype, then load ``map_name``.

        The two commands are not atomic. A failure of the first command is
        raised as is and the map command is never sent; a failure of the map
        command is wrapped in ``PartialFailure`` because the gametype change
        has already reached the server.
        """
        if not isinstance(gametype, Gametype):
            gametype = from_tag(gametype)

        completed = self.rcon(f"g_gametype {to_tag(gametype)}")

        map_command = f"map {map_name}"
        try:
            return self.rcon(map_command)
        except RconError as exc:
            log.debug("%s: '%s' failed after gametype change: %s", self, map_command, exc)
            raise PartialFailure(completed, exc, step=map_command) from exc

    def rcon(self, subcommand: str) -> str:
        log.debug("%s: rcon %s", self, subcommand)
        return self.send(rcon_udp.build_command(self._endpoint.password, subcommand))

    def send(self, command: str) -> str:
        packet = rcon_udp.encode(command, self._max_packet_size)
        raw = rcon_udp.roundtrip(self._endpoint, packet, self._timeout)
        return rcon_udp.decode(raw)
