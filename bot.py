import os

import discord
from discord.ext import commands
from board.activity_store import ActivityStore
from board.config_store import ConfigStore
from board.documents import JsonDocumentStore
from board.pagination import PaginationState
from board.roster import GangRoster
from config.defaults import BOARD_PAGE_SIZE
from config.defaults import DEFAULT_DATA_DIR
from misc.add_flow import AddFlowHandler
from misc.adhoc_modules.stream_announcer import StreamAnnouncer
from misc.adhoc_modules.stream_announcer import default_templates_path as stream_templates_path_default
from misc.board_publisher import BoardPublisher
from misc.runtime_wiring import wire_bot_runtime

# =========================
# ENV
# =========================
DISCORD_TOKEN = os.getenv("DISCORD_TOKEN")

if not DISCORD_TOKEN:
    raise RuntimeError("Missing DISCORD_TOKEN env var")

# Commands sync instantly to one guild when set; otherwise they are registered globally.
_raw_guild_id = (os.getenv("GANGBOARD_GUILD_ID") or "").strip()
GUILD_ID = int(_raw_guild_id) if _raw_guild_id.isdigit() else None
if _raw_guild_id and GUILD_ID is None:
    print(f"[CFG] ignoring invalid GANGBOARD_GUILD_ID={_raw_guild_id!r}; commands will sync globally")

DATA_DIR = os.getenv("GANGBOARD_DATA_DIR", DEFAULT_DATA_DIR).strip() or DEFAULT_DATA_DIR
STREAM_TEMPLATES_PATH = os.getenv("GANGBOARD_STREAM_TEMPLATES_PATH", stream_templates_path_default())

print(
    f"[CFG] data_dir={DATA_DIR} guild_id={GUILD_ID or '(global)'} "
    f"page_size={BOARD_PAGE_SIZE} stream_templates={STREAM_TEMPLATES_PATH}"
)

# =========================
# STORES + BOARD
# =========================
documents = JsonDocumentStore(DATA_DIR)
activity_store = ActivityStore(documents)
roster = GangRoster(documents)
config_store = ConfigStore(documents)

# One cursor map for the whole process; restarts land every category on page 1.
pagination = PaginationState(page_size=BOARD_PAGE_SIZE)

publisher = BoardPublisher(
    activity_store=activity_store,
    config_store=config_store,
    pagination=pagination,
)
add_flow = AddFlowHandler(
    activity_store=activity_store,
    roster=roster,
    publisher=publisher,
)
stream_announcer = StreamAnnouncer(templates_path=STREAM_TEMPLATES_PATH)

# =========================
# DISCORD BOT
# =========================
intents = discord.Intents.default()

bot = commands.Bot(command_prefix="!", intents=intents)

wire_bot_runtime(
    bot,
    documents=documents,
    activity_store=activity_store,
    roster=roster,
    config_store=config_store,
    publisher=publisher,
    add_flow=add_flow,
    stream_announcer=stream_announcer,
    guild_id=GUILD_ID,
)


bot.run(DISCORD_TOKEN)
