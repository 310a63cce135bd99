import olg_server
import rcon_probe
from config import Settings


def test_probe_usage(capsys):
    assert rcon_probe.main([]) == 2
    assert "Usage" in capsys.readouterr().out


def test_probe_success(mock_server, capsys):
    assert rcon_probe.main(["127.0.0.1", str(mock_server.port), "test_password", "status"]) == 0
    out = capsys.readouterr().out
    assert "SUCCESS" in out
    assert "rcon test_password status" in out
    assert mock_server.received() == [b"\xff\xff\xff\xffrcon test_password status"]


def test_probe_joins_command_words(mock_server):
    rcon_probe.main(["127.0.0.1", str(mock_server.port), "pw", "say", "hello"])
    assert mock_server.received() == [b"\xff\xff\xff\xffrcon pw say hello"]


def test_probe_failure(game_server_factory, capsys):
    server = game_server_factory(lambda index, payload: b"garbage")
    assert rcon_probe.main(["127.0.0.1", str(server.port), "pw"]) == 1
    assert "FAIL" in capsys.readouterr().out


def test_parse_args():
    args = olg_server.parse_args(["-l", "debug", "-c", "conf/config.jsonc"])
    assert args.log_level == "DEBUG"
    assert args.config_file == "conf/config.jsonc"

    args = olg_server.parse_args([])
    assert args.log_level is None
    assert args.config_file is None


def test_build_game_server():
    settings = Settings(server_host="cod.local", server_port=28961, rcon_timeout=0.75)
    server = olg_server.build_game_server(settings)
    assert str(server) == "cod.local:28961"
    assert server.timeout == 0.75
