"""Unit tests for the bounded event channel."""

import asyncio

import pytest

from entail.core.channel import ChannelClosed, EventChannel


class TestEventChannel:
    def test_rejects_non_positive_size(self) -> None:
        with pytest.raises(ValueError):
            EventChannel(maxsize=0)

    @pytest.mark.asyncio
    async def test_items_arrive_in_order_until_closed(self) -> None:
        channel: EventChannel[int] = EventChannel(maxsize=4)
        for item in (1, 2, 3):
            await channel.send(item)
        await channel.close()

        assert [item async for item in channel] == [1, 2, 3]
        assert channel.closed is True

    @pytest.mark.asyncio
    async def test_send_after_close_raises(self) -> None:
        channel: EventChannel[int] = EventChannel()
        await channel.close()
        await channel.close()

        with pytest.raises(ChannelClosed):
            await channel.send(1)

    @pytest.mark.asyncio
    async def test_full_channel_suspends_sender(self) -> None:
        channel: EventChannel[int] = EventChannel(maxsize=1)
        await channel.send(1)

        pending = asyncio.create_task(channel.send(2))
        await asyncio.sleep(0)
        assert not pending.done()

        received = []
        async for item in channel:
            received.append(item)
            if len(received) == 2:
                break

        await pending
        assert received == [1, 2]
