from __future__ import annotations

from board.documents import JsonDocumentStore
from board.models import BoardConfig
from config.defaults import CONFIG_DOCUMENT


class ConfigStore:
    def __init__(self, documents: JsonDocumentStore) -> None:
        self.documents = documents

    async def load(self) -> BoardConfig:
        return BoardConfig.from_dict(await self.documents.load(CONFIG_DOCUMENT))

    async def save(self, config: BoardConfig) -> None:
        await self.documents.save(CONFIG_DOCUMENT, config.to_dict())

    async def set_activity_channel(self, channel_id: int) -> BoardConfig:
        config = await self.load()
        config.activity_channel_id = int(channel_id)
        # A new channel always gets a fresh board message.
        config.activity_message_id = None
        await self.save(config)
        return config

    async def set_stream_channel(self, channel_id: int) -> BoardConfig:
        config = await self.load()
        config.stream_channel_id = int(channel_id)
        await self.save(config)
        return config

    async def set_board_message(self, message_id: int | None) -> BoardConfig:
        config = await self.load()
        config.activity_message_id = int(message_id) if message_id is not None else None
        await self.save(config)
        return config
