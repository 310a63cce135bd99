#!/usr/bin/env python3
"""Simple RCON connectivity tester.

Usage:
  python rcon_probe.py <host> [port] [password] [command]

Example:
  python rcon_probe.py example.com 28960 secret status
"""
import sys
import time

from errors import RconError
from game_server import GameServer


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    if not argv:
        print("Usage: python rcon_probe.py <host> [port] [password] [command]")
        return 2

    host = argv[0]
    port = int(argv[1]) if len(argv) >= 2 else 28960
    password = argv[2] if len(argv) >= 3 else "password"
    command = " ".join(argv[3:]) or "status"

    server = GameServer(host, port, password)
    start = time.time()
    try:
        reply = server.rcon(command)
    except RconError as e:
        print(f"FAIL: '{command}' on {server} - {e}")
        return 1

    elapsed = time.time() - start
    print(f"SUCCESS: {server} answered in {elapsed:.2f}s")
    print(reply)
    return 0


if __name__ == '__main__':
    sys.exit(main())
