"""
Unit tests for ResultSink.

Run with: pytest tests/unit/test_sink.py -v
"""

import asyncio

import pytest

from portprobe.core import ResultSink
from portprobe.scanners import ScanResult


class TestResultSink:
    """Test suite for ResultSink class"""

    @pytest.mark.asyncio
    async def test_writes_in_arrival_order(self):
        """Test lines come out in the order results were put"""
        lines = []
        sink = ResultSink(writer=lines.append)
        consumer = asyncio.create_task(sink.run())

        sink.put(ScanResult("b.example", 22, "SSH-2.0-OpenSSH_9.6"))
        sink.put(ScanResult("a.example", 21, "220 ProFTPD"))
        sink.close()

        assert await asyncio.wait_for(consumer, timeout=1) == 2
        assert lines == [
            "b.example:22 - SSH-2.0-OpenSSH_9.6",
            "a.example:21 - 220 ProFTPD",
        ]

    @pytest.mark.asyncio
    async def test_run_waits_until_closed(self):
        """Test the consumer keeps running while the sink is open"""
        sink = ResultSink(writer=lambda line: None)
        consumer = asyncio.create_task(sink.run())

        await asyncio.sleep(0.01)
        assert not consumer.done()

        sink.close()
        assert await asyncio.wait_for(consumer, timeout=1) == 0

    def test_put_after_close(self):
        """Test nothing can be added once the sink is closed"""
        sink = ResultSink(writer=lambda line: None)
        sink.close()
        sink.close()

        with pytest.raises(RuntimeError):
            sink.put(ScanResult("a", 1, "x"))

    def test_multiline_banner_kept(self):
        """Test embedded newlines survive formatting"""
        result = ScanResult("h", 25, "220 mail\r\n250 ok")

        assert result.format() == "h:25 - 220 mail\r\n250 ok"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
