"""State machine for the interactive add flow and the codec for its control ids.

Every step of the flow is a fresh Discord prompt. The only state carried between
steps is what is encoded in the prompt's custom_id, so each variant below maps
to exactly one token shape:

    gb:<step>:<type code>:<len>:<text><len>:<text>...

Fields are length-prefixed, so gang names may contain ':' or any other
character without breaking decoding.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from board.models import ActivityType
from board.pagination import PageDirection
from board.roster import filter_gang_names
from config.defaults import CHOICE_LIMIT
from config.defaults import CUSTOM_ID_MAX_LENGTH


TOKEN_PREFIX = "gb"


class FlowTokenError(ValueError):
    pass


class FlowTokenTooLong(FlowTokenError):
    pass


@dataclass(frozen=True, slots=True)
class TypeChosen:
    activity_type: ActivityType


@dataclass(frozen=True, slots=True)
class SearchPrompt:
    activity_type: ActivityType


@dataclass(frozen=True, slots=True)
class GangPicker:
    activity_type: ActivityType
    options: tuple[str, ...] = field(default=(), compare=False)
    # More gangs matched than fit in the picker.
    truncated: bool = field(default=False, compare=False)


@dataclass(frozen=True, slots=True)
class OfferCreateGang:
    activity_type: ActivityType
    gang_name: str
    # None on the quick-add path; a string (possibly empty) when /activity supplied one.
    description: str | None = None


@dataclass(frozen=True, slots=True)
class NewGangForm:
    activity_type: ActivityType
    with_description: bool = False
    first_gang: bool = False


@dataclass(frozen=True, slots=True)
class DescriptionPrompt:
    activity_type: ActivityType
    gang_name: str


@dataclass(frozen=True, slots=True)
class PageTurn:
    activity_type: ActivityType
    direction: PageDirection


@dataclass(frozen=True, slots=True)
class CommitActivity:
    activity_type: ActivityType
    gang_name: str
    description: str


FlowState = Union[
    TypeChosen,
    SearchPrompt,
    GangPicker,
    OfferCreateGang,
    NewGangForm,
    DescriptionPrompt,
    PageTurn,
]

_STEP_CODES: dict[type, str] = {
    TypeChosen: "t",
    SearchPrompt: "s",
    GangPicker: "p",
    OfferCreateGang: "o",
    NewGangForm: "n",
    DescriptionPrompt: "d",
    PageTurn: "pg",
}


def is_flow_token(custom_id: str | None) -> bool:
    return isinstance(custom_id, str) and custom_id.startswith(f"{TOKEN_PREFIX}:")


def _pack_fields(values: list[str]) -> str:
    return "".join(f"{len(v)}:{v}" for v in values)


def _unpack_fields(raw: str) -> list[str]:
    out: list[str] = []
    pos = 0
    while pos < len(raw):
        sep = raw.find(":", pos)
        if sep < 0:
            raise FlowTokenError("Truncated field header")
        size_text = raw[pos:sep]
        if not size_text.isdigit():
            raise FlowTokenError(f"Bad field length: {size_text!r}")
        size = int(size_text)
        start = sep + 1
        end = start + size
        if end > len(raw):
            raise FlowTokenError("Field runs past end of token")
        out.append(raw[start:end])
        pos = end
    return out


def _fields_for(state: FlowState) -> list[str]:
    if isinstance(state, OfferCreateGang):
        if state.description is None:
            return [state.gang_name]
        return [state.gang_name, state.description]
    if isinstance(state, NewGangForm):
        flags = ("d" if state.with_description else "") + ("f" if state.first_gang else "")
        return [flags]
    if isinstance(state, DescriptionPrompt):
        return [state.gang_name]
    if isinstance(state, PageTurn):
        return [state.direction.value]
    return []


def encode_token(state: FlowState) -> str:
    step = _STEP_CODES.get(type(state))
    if step is None:
        raise FlowTokenError(f"State cannot be encoded: {type(state).__name__}")
    token = f"{TOKEN_PREFIX}:{step}:{state.activity_type.code}:{_pack_fields(_fields_for(state))}"
    if len(token) > CUSTOM_ID_MAX_LENGTH:
        raise FlowTokenTooLong(f"Token is {len(token)} characters (max {CUSTOM_ID_MAX_LENGTH})")
    return token


def token_fits(state: FlowState) -> bool:
    try:
        encode_token(state)
    except FlowTokenTooLong:
        return False
    return True


def _expect(fields: list[str], *counts: int) -> None:
    if len(fields) not in counts:
        raise FlowTokenError(f"Unexpected field count {len(fields)}")


def decode_token(custom_id: str | None) -> FlowState:
    if not is_flow_token(custom_id):
        raise FlowTokenError("Not a flow token")
    parts = custom_id.split(":", 3)
    if len(parts) != 4:
        raise FlowTokenError("Malformed token header")
    _, step, code, rest = parts
    try:
        activity_type = ActivityType.from_code(code)
    except ValueError as e:
        raise FlowTokenError(str(e)) from e
    fields = _unpack_fields(rest)

    if step == "t":
        _expect(fields, 0)
        return TypeChosen(activity_type)
    if step == "s":
        _expect(fields, 0)
        return SearchPrompt(activity_type)
    if step == "p":
        _expect(fields, 0)
        return GangPicker(activity_type)
    if step == "o":
        _expect(fields, 1, 2)
        return OfferCreateGang(activity_type, fields[0], fields[1] if len(fields) == 2 else None)
    if step == "n":
        _expect(fields, 1)
        flags = fields[0]
        if set(flags) - {"d", "f"}:
            raise FlowTokenError(f"Unknown form flags: {flags!r}")
        return NewGangForm(activity_type, with_description="d" in flags, first_gang="f" in flags)
    if step == "d":
        _expect(fields, 1)
        return DescriptionPrompt(activity_type, fields[0])
    if step == "pg":
        _expect(fields, 1)
        try:
            direction = PageDirection(fields[0])
        except ValueError as e:
            raise FlowTokenError(str(e)) from e
        return PageTurn(activity_type, direction)
    raise FlowTokenError(f"Unknown step: {step!r}")


def plan_type_chosen(activity_type: ActivityType, roster: list[str]) -> NewGangForm | SearchPrompt:
    if not roster:
        return NewGangForm(activity_type, first_gang=True)
    return SearchPrompt(activity_type)


def plan_search(
    activity_type: ActivityType,
    query: str | None,
    roster: list[str],
    limit: int = CHOICE_LIMIT,
) -> GangPicker | OfferCreateGang:
    matches = filter_gang_names(roster, query, limit + 1)
    if not matches:
        return OfferCreateGang(activity_type, (query or "").strip())
    return GangPicker(activity_type, tuple(matches[:limit]), truncated=len(matches) > limit)


def plan_direct_submission(
    activity_type: ActivityType,
    gang_name: str,
    description: str | None,
    roster: list[str],
) -> OfferCreateGang | CommitActivity:
    if gang_name not in roster:
        return OfferCreateGang(activity_type, gang_name, description or "")
    return CommitActivity(activity_type, gang_name, description or "")
