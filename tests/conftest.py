import socket
import threading

import pytest
from sqlalchemy import create_engine, text

OOB = b"\xff\xff\xff\xff"


class MockGameServer:
    """UDP peer that records every datagram and answers through ``responder``.

    By default it echoes the request back, which is a well-formed reply
    since requests carry the same out-of-band marker. A responder returning
    ``None`` leaves the request unanswered.
    """

    def __init__(self, responder=None):
        self.responder = responder or (lambda index, payload: payload)
        self.payloads = []
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self.sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        self.sock.bind(("127.0.0.1", 0))
        self.sock.settimeout(0.05)
        self.thread = threading.Thread(target=self._serve, daemon=True)

    @property
    def port(self) -> int:
        return self.sock.getsockname()[1]

    def start(self):
        self.thread.start()
        return self

    def stop(self):
        self._stop.set()
        self.thread.join(timeout=2)
        self.sock.close()

    def _serve(self):
        while not self._stop.is_set():
            try:
                payload, addr = self.sock.recvfrom(65535)
            except socket.timeout:
                continue
            except OSError:
                return
            with self._lock:
                index = len(self.payloads)
                self.payloads.append(payload)
            reply = self.responder(index, payload)
            if reply is not None:
                self.sock.sendto(reply, addr)

    def received(self):
        with self._lock:
            return list(self.payloads)


@pytest.fixture
def game_server_factory():
    servers = []

    def factory(responder=None):
        server = MockGameServer(responder).start()
        servers.append(server)
        return server

    yield factory
    for server in servers:
        server.stop()


@pytest.fixture
def mock_server(game_server_factory):
    return game_server_factory()


@pytest.fixture
def silent_server(game_server_factory):
    return game_server_factory(lambda index, payload: None)


@pytest.fixture
def maps_engine(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'maps.db'}",
        connect_args={"check_same_thread": False},
    )
    with engine.begin() as conn:
        conn.execute(text("CREATE TABLE codmap (tag TEXT NOT NULL, name TEXT NOT NULL, active BOOLEAN NOT NULL)"))
        conn.execute(
            text("INSERT INTO codmap (tag, name, active) VALUES (:tag, :name, :active)"),
            [
                {"tag": "mp_strike", "name": "Strike", "active": True},
                {"tag": "mp_crash", "name": "Crash", "active": True},
                {"tag": "mp_killhouse", "name": "Killhouse", "active": False},
                {"tag": "mp_backlot", "name": "Backlot", "active": True},
            ],
        )
    yield engine
    engine.dispose()
