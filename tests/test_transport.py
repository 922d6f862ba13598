"""Tests for the TCP and WebSocket transports."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from websockets.exceptions import ConnectionClosed, InvalidURI, WebSocketException

from gpsd_proto import (
    DEFAULT_MAX_FRAME_SIZE,
    ENABLE_WATCH,
    CodecSession,
    Tpv,
    UnknownClassPolicy,
    Version,
    WatchCommand,
)
from gpsd_proto.errors import (
    GpsdConnectionClosed,
    GpsdConnectionError,
    GpsdHandshakeError,
    GpsdTimeout,
)
from gpsd_proto.transport import (
    ByteTransport,
    TcpTransport,
    WebSocketTransport,
    connect_websocket,
    open_tcp,
)


class TestTcpTransport:
    """Tests for TcpTransport against a local asyncio server."""

    @pytest.mark.asyncio
    async def test_session_over_tcp(self):
        """Test a full exchange with a fake daemon."""
        received: list[bytes] = []

        async def fake_gpsd(reader, writer):
            writer.write(
                b'{"class":"VERSION","release":"3.25","rev":"3.25",'
                b'"proto_major":3,"proto_minor":15}\r\n'
            )
            await writer.drain()
            received.append(await reader.readline())
            # Split one report over two segments.
            writer.write(b'{"class":"TPV","mo')
            await writer.drain()
            writer.write(b'de":3,"lat":52.1}\r\n')
            await writer.drain()
            writer.close()

        server = await asyncio.start_server(fake_gpsd, "127.0.0.1", 0)
        port = server.sockets[0].getsockname()[1]
        async with server:
            transport = await open_tcp("127.0.0.1", port, read_size=8)
            assert isinstance(transport, ByteTransport)
            async with CodecSession(transport) as session:
                version = await session.receive()
                await session.send(ENABLE_WATCH)
                tpv = await session.receive()
                with pytest.raises(GpsdConnectionClosed):
                    await session.receive()

        assert isinstance(version, Version)
        assert isinstance(tpv, Tpv)
        assert tpv.lat == 52.1
        assert received == [b'{"class":"WATCH","enable":true,"json":true}\n']
        assert transport.is_closed

    @pytest.mark.asyncio
    async def test_connection_refused(self):
        """Test connection failures are translated."""
        with patch(
            "gpsd_proto.transport.tcp.asyncio.open_connection",
            side_effect=ConnectionRefusedError("refused"),
        ):
            with pytest.raises(GpsdConnectionError, match="gpsd connection failed"):
                await open_tcp("127.0.0.1", 2947)

    @pytest.mark.asyncio
    async def test_connection_timeout(self):
        """Test connection timeouts are translated."""
        with patch(
            "gpsd_proto.transport.tcp.asyncio.open_connection",
            side_effect=TimeoutError(),
        ):
            with pytest.raises(GpsdTimeout):
                await open_tcp("127.0.0.1", 2947, timeout=0.1)

    @pytest.mark.asyncio
    async def test_read_error(self):
        """Test socket errors during read."""
        reader = MagicMock()
        reader.read = AsyncMock(side_effect=ConnectionResetError("reset"))
        transport = TcpTransport(reader, MagicMock())

        with pytest.raises(GpsdConnectionError):
            await transport.read()

    @pytest.mark.asyncio
    async def test_write_error(self):
        """Test socket errors during write."""
        writer = MagicMock()
        writer.drain = AsyncMock(side_effect=BrokenPipeError("pipe"))
        transport = TcpTransport(MagicMock(), writer)

        with pytest.raises(GpsdConnectionError):
            await transport.write(b"?POLL;\n")

    @pytest.mark.asyncio
    async def test_close_is_idempotent(self):
        """Test close() twice and reads after close."""
        reader = asyncio.StreamReader()
        writer = MagicMock()
        writer.wait_closed = AsyncMock()
        transport = TcpTransport(reader, writer)

        await transport.close()
        await transport.close()

        writer.close.assert_called_once()
        assert await transport.read() == b""
        with pytest.raises(GpsdConnectionError):
            await transport.write(b"x")

    @pytest.mark.asyncio
    async def test_close_wakes_reader(self):
        """Test a blocked read returns end of stream on close."""
        reader = asyncio.StreamReader()
        writer = MagicMock()
        writer.wait_closed = AsyncMock()
        transport = TcpTransport(reader, writer)

        task = asyncio.create_task(transport.read())
        await asyncio.sleep(0)
        await transport.close()

        assert await asyncio.wait_for(task, timeout=1.0) == b""


class TestWebSocketTransport:
    """Tests for WebSocketTransport."""

    @pytest.mark.asyncio
    async def test_read_appends_newline(self):
        """Test each text message becomes one terminated chunk."""
        ws = AsyncMock()
        ws.recv.side_effect = ['{"class":"TPV","mode":2}', '{"class":"SKY"}\n']
        transport = WebSocketTransport(ws)

        assert await transport.read() == b'{"class":"TPV","mode":2}\n'
        assert await transport.read() == b'{"class":"SKY"}\n'

    @pytest.mark.asyncio
    async def test_read_binary(self):
        """Test binary messages are passed through."""
        ws = AsyncMock()
        ws.recv.return_value = b'{"class":"TPV","mode":2}'
        transport = WebSocketTransport(ws)

        assert await transport.read() == b'{"class":"TPV","mode":2}\n'

    @pytest.mark.asyncio
    async def test_read_closed(self):
        """Test a closed WebSocket reads as end of stream."""
        ws = AsyncMock()
        ws.recv.side_effect = ConnectionClosed(None, None)
        transport = WebSocketTransport(ws)

        assert await transport.read() == b""

    @pytest.mark.asyncio
    async def test_read_error(self):
        """Test other WebSocket errors are translated."""
        ws = AsyncMock()
        ws.recv.side_effect = WebSocketException("boom")
        transport = WebSocketTransport(ws)

        with pytest.raises(GpsdConnectionError):
            await transport.read()

    @pytest.mark.asyncio
    async def test_write_sends_lines(self):
        """Test every written line is one text message."""
        ws = AsyncMock()
        transport = WebSocketTransport(ws)

        await transport.write(b'{"class":"POLL"}\n')

        ws.send.assert_called_once_with('{"class":"POLL"}')

    @pytest.mark.asyncio
    async def test_write_closed(self):
        """Test writing to a closed WebSocket."""
        ws = AsyncMock()
        ws.send.side_effect = ConnectionClosed(None, None)
        transport = WebSocketTransport(ws)

        with pytest.raises(GpsdConnectionClosed):
            await transport.write(b"?POLL;\n")

    @pytest.mark.asyncio
    async def test_write_keeps_unicode_line_separators(self):
        """Test only LF splits messages; U+2028 in a device path stays in one message."""
        ws = AsyncMock()
        session = CodecSession(WebSocketTransport(ws))

        await session.send(WatchCommand(enable=True, device="/dev/gps\u2028x"))

        ws.send.assert_called_once_with(
            '{"class":"WATCH","enable":true,"device":"/dev/gps\u2028x"}'
        )

    @pytest.mark.asyncio
    async def test_write_several_lines(self):
        """Test each LF or CR LF terminated line is sent separately."""
        ws = AsyncMock()
        transport = WebSocketTransport(ws)

        await transport.write(b"?POLL;\r\n?VERSION;\n")

        assert [call.args[0] for call in ws.send.call_args_list] == ["?POLL;", "?VERSION;"]

    @pytest.mark.asyncio
    async def test_close(self):
        """Test close() closes the WebSocket."""
        ws = AsyncMock()
        transport = WebSocketTransport(ws)

        await transport.close()

        ws.close.assert_called_once()

    @pytest.mark.asyncio
    async def test_session_over_websocket(self):
        """Test a session reading relayed reports until closure."""
        ws = AsyncMock()
        ws.recv.side_effect = [
            '{"class":"FUTURE"}',
            '{"class":"TPV","mode":3,"lat":1.0}',
            ConnectionClosed(None, None),
        ]
        session = CodecSession(
            WebSocketTransport(ws), unknown_class_policy=UnknownClassPolicy.SKIP
        )

        messages = [message async for message in session]

        assert messages == [Tpv(mode=3, lat=1.0)]


class TestConnectWebsocket:
    """Tests for connect_websocket()."""

    @pytest.mark.asyncio
    async def test_connect_success(self):
        """Test a successful connection is wrapped."""
        mock_ws = AsyncMock()
        with patch(
            "gpsd_proto.transport.ws.websockets.connect",
            new=AsyncMock(return_value=mock_ws),
        ) as mock_connect:
            transport = await connect_websocket("10.0.0.1", 8080, path="/gpsd")

        mock_connect.assert_called_once_with(
            "ws://10.0.0.1:8080/gpsd",
            ping_interval=20,
            close_timeout=5,
            max_size=DEFAULT_MAX_FRAME_SIZE + 2,
        )
        assert isinstance(transport, WebSocketTransport)

    @pytest.mark.asyncio
    async def test_connect_message_limit(self):
        """Test the WebSocket message cap follows max_frame_size."""
        with patch(
            "gpsd_proto.transport.ws.websockets.connect",
            new=AsyncMock(return_value=AsyncMock()),
        ) as mock_connect:
            await connect_websocket("10.0.0.1", 8080, max_frame_size=512)
            await connect_websocket("10.0.0.1", 8080, max_frame_size=None)

        limits = [call.kwargs["max_size"] for call in mock_connect.call_args_list]
        assert limits == [514, None]

    @pytest.mark.asyncio
    async def test_connect_handshake_error(self):
        """Test handshake failures are translated."""
        with patch(
            "gpsd_proto.transport.ws.websockets.connect",
            new=AsyncMock(side_effect=InvalidURI("bad", "no")),
        ):
            with pytest.raises(GpsdHandshakeError):
                await connect_websocket("10.0.0.1", 8080)

    @pytest.mark.asyncio
    async def test_connect_os_error(self):
        """Test socket failures are translated."""
        with patch(
            "gpsd_proto.transport.ws.websockets.connect",
            new=AsyncMock(side_effect=OSError("unreachable")),
        ):
            with pytest.raises(GpsdConnectionError):
                await connect_websocket("10.0.0.1", 8080)

    @pytest.mark.asyncio
    async def test_connect_timeout(self):
        """Test connection timeouts are translated."""
        with patch(
            "gpsd_proto.transport.ws.websockets.connect",
            new=AsyncMock(side_effect=TimeoutError()),
        ):
            with pytest.raises(GpsdTimeout):
                await connect_websocket("10.0.0.1", 8080)
