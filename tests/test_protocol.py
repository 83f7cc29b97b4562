"""Tests for DAP launch payload types."""

import json

from dotnet_launch.dap.protocol import (
    DAPRequest,
    DebugAdapterBinary,
    DebugRequest,
    LaunchRequest,
    RequestKind,
    StartDebuggingRequestArguments,
    TcpConnection,
)


class TestDAPRequest:
    """Tests for DAPRequest dataclass."""

    def test_to_dict_without_arguments(self):
        """Test converting request to dict without arguments."""
        d = DAPRequest(seq=1, command="launch").to_dict()

        assert d == {"seq": 1, "type": "request", "command": "launch"}

    def test_to_dict_with_arguments(self):
        """Test converting request to dict with arguments."""
        d = DAPRequest(seq=1, command="attach", arguments={"processId": 10}).to_dict()
        assert d["arguments"]["processId"] == 10

    def test_to_bytes(self):
        """Test serializing request to bytes with Content-Length header."""
        data = DAPRequest(seq=1, command="launch").to_bytes()

        assert data.startswith(b"Content-Length: ")
        assert b"\r\n\r\n" in data
        _, body = data.split(b"\r\n\r\n", 1)
        assert json.loads(body)["command"] == "launch"

    def test_content_length_counts_bytes(self):
        """Test non-ASCII content is measured in encoded bytes."""
        data = DAPRequest(seq=1, command="launch", arguments={"program": "/home/jürgen/App.dll"}).to_bytes()
        header, body = data.split(b"\r\n\r\n", 1)
        assert int(header.split(b": ")[1]) == len(body)


class TestDebugRequest:
    """Tests for DebugRequest."""

    def test_launch_to_dict(self):
        """Test a launch request flattens the launch fields."""
        request = DebugRequest.for_launch(LaunchRequest(program="/a/App.dll", cwd="/a"))
        assert request.to_dict() == {
            "request": "launch",
            "program": "/a/App.dll",
            "args": [],
            "cwd": "/a",
        }

    def test_attach_to_dict(self):
        """Test an attach request carries the process id."""
        request = DebugRequest.for_attach(321)
        assert request.kind == RequestKind.ATTACH
        assert request.to_dict() == {"request": "attach", "processId": 321}

    def test_attach_without_process_id(self):
        """Test an attach request may leave the process to the adapter."""
        config = {"request": "attach", "name": "Attach"}
        request = DebugRequest.for_attach(None, configuration=config)
        config["name"] = "changed"
        assert request.process_id is None
        assert request.to_dict() == {
            "request": "attach",
            "configuration": {"request": "attach", "name": "Attach"},
        }


class TestDebugAdapterBinary:
    """Tests for DebugAdapterBinary."""

    def _binary(self, **kwargs):
        args = StartDebuggingRequestArguments(
            configuration={"program": "/a/App.dll", "console": "integratedTerminal"},
            request=RequestKind.LAUNCH,
        )
        return DebugAdapterBinary(command="/usr/bin/netcoredbg", request_args=args, **kwargs)

    def test_to_dict(self):
        """Test camelCase serialization."""
        d = self._binary(arguments=["--interpreter=vscode"], cwd="/a").to_dict()

        assert d["command"] == "/usr/bin/netcoredbg"
        assert d["arguments"] == ["--interpreter=vscode"]
        assert d["cwd"] == "/a"
        assert d["requestArgs"]["request"] == "launch"
        assert d["requestArgs"]["configuration"]["program"] == "/a/App.dll"
        assert "connection" not in d

    def test_tcp_connection(self):
        """Test a socket transport is serialized."""
        d = self._binary(connection=TcpConnection(port=4711, timeout_ms=5000)).to_dict()
        assert d["connection"] == {"host": "127.0.0.1", "port": 4711, "timeout": 5000}

    def test_to_dap_request(self):
        """Test the start request uses the request kind as command."""
        request = self._binary().to_dap_request()
        assert request.seq == 1
        assert request.command == "launch"
        assert request.arguments["program"] == "/a/App.dll"
