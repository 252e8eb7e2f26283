from __future__ import annotations

# Document storage
DEFAULT_DATA_DIR = "data"
ACTIVITIES_DOCUMENT = "activities"
GANGS_DOCUMENT = "gangs"
CONFIG_DOCUMENT = "config"

# Board rendering
BOARD_PAGE_SIZE = 25
BOARD_UTC_OFFSET_HOURS = 7
EMPTY_CATEGORY_TEXT = "No activities in this category."
EMBED_DESCRIPTION_LIMIT = 4096
# Discord rejects a message whose embeds add up to more than this.
EMBED_TOTAL_LIMIT = 6000

# Roster / form limits
GANG_NAME_MAX_LENGTH = 60
DESCRIPTION_MAX_LENGTH = 200
CHOICE_LIMIT = 25

# Discord caps component custom_id at 100 characters.
CUSTOM_ID_MAX_LENGTH = 100

# Short-lived prompts; the board view itself never times out.
FLOW_VIEW_TIMEOUT_SECONDS = 600

GANG_LIST_COLOR = 0x0099FF
GENERIC_FAILURE_TEXT = "There was an error while executing this command!"
EXPIRED_CONTROL_TEXT = "This control is no longer valid. Run /quickadd again."
