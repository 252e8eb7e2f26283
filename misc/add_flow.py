from __future__ import annotations

from typing import Any

import discord

from board.activity_store import ActivityStore
from board.flow import CommitActivity
from board.flow import DescriptionPrompt
from board.flow import FlowTokenError
from board.flow import GangPicker
from board.flow import NewGangForm
from board.flow import OfferCreateGang
from board.flow import PageTurn
from board.flow import SearchPrompt
from board.flow import TypeChosen
from board.flow import decode_token
from board.flow import encode_token
from board.flow import is_flow_token
from board.flow import plan_direct_submission
from board.flow import plan_search
from board.flow import plan_type_chosen
from board.flow import token_fits
from board.models import Activity
from board.models import ActivityType
from board.models import parse_iso_timestamp
from board.renderer import format_display_date
from board.roster import GangRoster
from config.defaults import CHOICE_LIMIT
from config.defaults import DESCRIPTION_MAX_LENGTH
from config.defaults import EXPIRED_CONTROL_TEXT
from config.defaults import FLOW_VIEW_TIMEOUT_SECONDS
from config.defaults import GANG_NAME_MAX_LENGTH
from misc.board_publisher import BoardPublisher
from misc.board_publisher import add_quickadd_buttons
from misc.interaction_replies import reply_generic_failure
from misc.interaction_replies import reply_private


MODAL_TITLE_MAX = 45
SELECT_OPTION_MAX = 100


def _modal_title(text: str) -> str:
    return text if len(text) <= MODAL_TITLE_MAX else text[: MODAL_TITLE_MAX - 1] + "…"


def build_quickadd_view() -> discord.ui.View:
    return add_quickadd_buttons(discord.ui.View(timeout=FLOW_VIEW_TIMEOUT_SECONDS))


def build_search_modal(state: SearchPrompt) -> discord.ui.Modal:
    modal = discord.ui.Modal(
        title=_modal_title(f"{state.activity_type.label}: find a gang"),
        custom_id=encode_token(state),
        timeout=FLOW_VIEW_TIMEOUT_SECONDS,
    )
    modal.add_item(
        discord.ui.TextInput(
            label="Gang name contains",
            custom_id="query",
            placeholder="Leave empty to list every gang",
            required=False,
            max_length=GANG_NAME_MAX_LENGTH,
        )
    )
    return modal


def build_new_gang_modal(
    state: NewGangForm,
    *,
    default_name: str | None = None,
    default_description: str | None = None,
) -> discord.ui.Modal:
    title = "Add the first gang" if state.first_gang else "Add a new gang"
    modal = discord.ui.Modal(
        title=_modal_title(f"{state.activity_type.label}: {title}"),
        custom_id=encode_token(state),
        timeout=FLOW_VIEW_TIMEOUT_SECONDS,
    )
    modal.add_item(
        discord.ui.TextInput(
            label="Gang name",
            custom_id="gang_name",
            default=(default_name or "")[:GANG_NAME_MAX_LENGTH] or None,
            required=True,
            max_length=GANG_NAME_MAX_LENGTH,
        )
    )
    if state.with_description:
        modal.add_item(
            discord.ui.TextInput(
                label="Description (optional)",
                custom_id="description",
                style=discord.TextStyle.paragraph,
                default=(default_description or "")[:DESCRIPTION_MAX_LENGTH] or None,
                required=False,
                max_length=DESCRIPTION_MAX_LENGTH,
            )
        )
    return modal


def build_description_modal(state: DescriptionPrompt) -> discord.ui.Modal:
    modal = discord.ui.Modal(
        title=_modal_title(f"{state.activity_type.label}: {state.gang_name}"),
        custom_id=encode_token(state),
        timeout=FLOW_VIEW_TIMEOUT_SECONDS,
    )
    modal.add_item(
        discord.ui.TextInput(
            label="Description (optional)",
            custom_id="description",
            style=discord.TextStyle.paragraph,
            required=False,
            max_length=DESCRIPTION_MAX_LENGTH,
        )
    )
    return modal


def pickable_names(state: GangPicker) -> list[str]:
    # Select option values are capped at 100 characters.
    return [name for name in state.options[:CHOICE_LIMIT] if len(name) <= SELECT_OPTION_MAX]


def build_gang_picker_view(state: GangPicker) -> discord.ui.View:
    options = [discord.SelectOption(label=name, value=name) for name in pickable_names(state)]
    view = discord.ui.View(timeout=FLOW_VIEW_TIMEOUT_SECONDS)
    view.add_item(
        discord.ui.Select(
            custom_id=encode_token(state),
            placeholder="Choose a gang",
            min_values=1,
            max_values=1,
            options=options,
        )
    )
    return view


def build_offer_view(state: OfferCreateGang) -> discord.ui.View:
    view = discord.ui.View(timeout=FLOW_VIEW_TIMEOUT_SECONDS)
    view.add_item(
        discord.ui.Button(
            label="Create gang",
            style=discord.ButtonStyle.success,
            custom_id=encode_token(state),
        )
    )
    return view


def build_description_button_view(state: DescriptionPrompt) -> discord.ui.View:
    view = discord.ui.View(timeout=FLOW_VIEW_TIMEOUT_SECONDS)
    view.add_item(
        discord.ui.Button(
            label="Add details",
            style=discord.ButtonStyle.primary,
            custom_id=encode_token(state),
        )
    )
    return view


def build_confirmation_embed(activity: Activity, was_update: bool) -> discord.Embed:
    stamp = parse_iso_timestamp(activity.updated_at or activity.created_at)
    details = f" [{activity.description}]" if activity.description else ""
    embed = discord.Embed(
        title="Activity Updated" if was_update else "Activity Added",
        description=f"**{activity.gang_name}**{details} ({format_display_date(stamp)})",
        colour=discord.Colour(activity.type.color),
        timestamp=discord.utils.utcnow(),
    )
    embed.set_footer(text=f"Type: {activity.type.label}")
    return embed


def modal_values(interaction: Any) -> dict[str, str]:
    out: dict[str, str] = {}

    def walk(items: Any) -> None:
        if not isinstance(items, list):
            return
        for item in items:
            if not isinstance(item, dict):
                continue
            if "custom_id" in item and "value" in item:
                out[str(item["custom_id"])] = str(item.get("value") or "")
            walk(item.get("components"))
            if isinstance(item.get("component"), dict):
                walk([item["component"]])

    walk((getattr(interaction, "data", None) or {}).get("components"))
    return out


def selected_values(interaction: Any) -> list[str]:
    data = getattr(interaction, "data", None) or {}
    return [str(v) for v in (data.get("values") or [])]


class AddFlowHandler:
    """Drives the quick-add flow. Holds no per-user state; every step decodes its control id."""

    def __init__(
        self,
        *,
        activity_store: ActivityStore,
        roster: GangRoster,
        publisher: BoardPublisher,
    ) -> None:
        self.activity_store = activity_store
        self.roster = roster
        self.publisher = publisher

    async def start_quickadd(self, interaction: Any) -> None:
        await reply_private(interaction, "Pick a category for the new activity.", view=build_quickadd_view())

    async def submit_direct(
        self,
        interaction: Any,
        *,
        activity_type: ActivityType,
        gang_name: str,
        description: str | None,
    ) -> None:
        step = plan_direct_submission(activity_type, gang_name, description, await self.roster.list())
        if isinstance(step, CommitActivity):
            await self.commit(interaction, step)
            return
        await self._offer_create(interaction, step)

    async def handle_interaction(self, interaction: Any) -> bool:
        custom_id = (getattr(interaction, "data", None) or {}).get("custom_id")
        if not is_flow_token(custom_id):
            return False
        try:
            state = decode_token(custom_id)
        except FlowTokenError as e:
            print(f"[Flow] rejected control id {custom_id!r}: {e}")
            await reply_private(interaction, EXPIRED_CONTROL_TEXT)
            return True

        try:
            if interaction.type == discord.InteractionType.modal_submit:
                await self._on_modal(interaction, state)
            else:
                await self._on_component(interaction, state)
        except Exception as e:
            await reply_generic_failure(interaction, f"flow step {type(state).__name__}", e)
        return True

    async def _on_component(self, interaction: Any, state) -> None:
        if isinstance(state, PageTurn):
            embeds, view = await self.publisher.turn_page(state.activity_type, state.direction)
            await interaction.response.edit_message(embeds=embeds, view=view)
            return

        if isinstance(state, TypeChosen):
            next_state = plan_type_chosen(state.activity_type, await self.roster.list())
            if isinstance(next_state, NewGangForm):
                await interaction.response.send_modal(build_new_gang_modal(next_state))
            else:
                await interaction.response.send_modal(build_search_modal(next_state))
            return

        if isinstance(state, GangPicker):
            values = selected_values(interaction)
            if not values:
                await reply_private(interaction, "Pick a gang from the list.")
                return
            await self._open_description(interaction, DescriptionPrompt(state.activity_type, values[0]))
            return

        if isinstance(state, OfferCreateGang):
            form = NewGangForm(state.activity_type, with_description=state.description is not None)
            await interaction.response.send_modal(
                build_new_gang_modal(
                    form,
                    default_name=state.gang_name,
                    default_description=state.description,
                )
            )
            return

        if isinstance(state, DescriptionPrompt):
            await self._open_description(interaction, state)
            return

        await reply_private(interaction, EXPIRED_CONTROL_TEXT)

    async def _on_modal(self, interaction: Any, state) -> None:
        values = modal_values(interaction)

        if isinstance(state, SearchPrompt):
            next_state = plan_search(state.activity_type, values.get("query"), await self.roster.list())
            if isinstance(next_state, OfferCreateGang):
                await self._offer_create(interaction, next_state)
                return
            if not pickable_names(next_state):
                await reply_private(
                    interaction,
                    "The matching gangs have names too long to list here. Use /activity with the exact gang name.",
                )
                return
            note = f" Showing the first {CHOICE_LIMIT} matches." if next_state.truncated else ""
            await reply_private(
                interaction,
                f"Choose the gang for **{state.activity_type.label}**.{note}",
                view=build_gang_picker_view(next_state),
            )
            return

        if isinstance(state, NewGangForm):
            ok, msg = await self.roster.add(values.get("gang_name"))
            if not ok:
                await reply_private(interaction, msg)
                return
            gang_name = values.get("gang_name", "").strip()
            print(f"[Flow] gang added via form gang={gang_name!r} user={interaction.user.id}")
            if state.with_description:
                await self.commit(
                    interaction,
                    CommitActivity(state.activity_type, gang_name, values.get("description", "")),
                )
                return
            await reply_private(
                interaction,
                f"{msg} Add the activity details next.",
                view=build_description_button_view(DescriptionPrompt(state.activity_type, gang_name)),
            )
            return

        if isinstance(state, DescriptionPrompt):
            await self.commit(
                interaction,
                CommitActivity(state.activity_type, state.gang_name, values.get("description", "").strip()),
            )
            return

        await reply_private(interaction, EXPIRED_CONTROL_TEXT)

    async def _open_description(self, interaction: Any, state: DescriptionPrompt) -> None:
        if not token_fits(state):
            await reply_private(interaction, "That gang name is too long for quick add. Use /activity instead.")
            return
        await interaction.response.send_modal(build_description_modal(state))

    async def _offer_create(self, interaction: Any, offer: OfferCreateGang) -> None:
        if token_fits(offer):
            if offer.gang_name:
                text = f'Gang "{offer.gang_name}" not found. Create it and log this activity?'
            else:
                text = "No gang matched. Create a new one?"
            await reply_private(interaction, text, view=build_offer_view(offer))
            return
        if interaction.type == discord.InteractionType.modal_submit:
            await reply_private(interaction, f"Gang names must be {GANG_NAME_MAX_LENGTH} characters or fewer.")
            return
        # Too much to carry in a button id: open the form with everything prefilled.
        form = NewGangForm(offer.activity_type, with_description=offer.description is not None)
        await interaction.response.send_modal(
            build_new_gang_modal(
                form,
                default_name=offer.gang_name,
                default_description=offer.description,
            )
        )

    async def commit(self, interaction: Any, step: CommitActivity) -> None:
        if not await self.roster.contains(step.gang_name):
            await reply_private(interaction, f'Gang "{step.gang_name}" not found. Use /gangadd to add it first.')
            return
        activity, was_update = await self.activity_store.upsert(
            step.gang_name,
            step.activity_type,
            step.description,
            interaction.user.id,
        )
        print(
            f"[Flow] activity {'updated' if was_update else 'added'} "
            f"gang={activity.gang_name!r} type={activity.type.label!r} user={interaction.user.id}"
        )
        await reply_private(interaction, embed=build_confirmation_embed(activity, was_update))
        # The write is committed; a board failure is logged by refresh and never rolled back.
        await self.publisher.refresh(interaction.client)
