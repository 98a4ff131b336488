"""RenderSpec models — the formatter's pure output.

A RenderSpec describes WHAT to show for one cell, never HOW: it carries no
markup. Every variant has a literal ``kind`` so the union is discriminated
both in Python and in the JSON handed to a presentation layer.
"""

from typing import Annotated, Any, Callable, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.json_schema import SkipJsonSchema

from datadisplay.options.schemas import BadgeItem

EMPTY_PLACEHOLDER = "—"


class TextSpec(BaseModel):
    kind: Literal["text"] = "text"
    text: str
    translations: Optional[list[dict[str, Optional[str]]]] = Field(
        default=None,
        description="All per-language values when the source was translation-bearing",
    )


class EmptySpec(BaseModel):
    kind: Literal["empty"] = "empty"
    placeholder: str = EMPTY_PLACEHOLDER


class BadgesSpec(BaseModel):
    kind: Literal["badges"] = "badges"
    items: list[BadgeItem] = Field(default_factory=list)


class LinkSpec(BaseModel):
    kind: Literal["link"] = "link"
    url: str
    label: str


class MaskedSpec(BaseModel):
    """Masked secret. ``length`` is clamped and never the exact secret length."""

    kind: Literal["masked"] = "masked"
    length: int

    @property
    def mask(self) -> str:
        return "•" * self.length


class SwatchSpec(BaseModel):
    kind: Literal["swatch"] = "swatch"
    color_hex: str
    label: str
    raw: str = Field(default="", description="Value as stored, used for copy")


class RatingSpec(BaseModel):
    kind: Literal["rating"] = "rating"
    value: float
    max: int = 5


class PersonSpec(BaseModel):
    kind: Literal["person"] = "person"
    id: Optional[str] = None
    label: str
    avatar_url: Optional[str] = None
    email: Optional[str] = None
    initials: str = "?"


class NumericSpec(BaseModel):
    """Number, currency or percentage value with its display string."""

    kind: Literal["number", "currency", "percentage"] = "number"
    value: float
    display: str
    currency: Optional[str] = None


class DateTimeSpec(BaseModel):
    kind: Literal["datetime"] = "datetime"
    iso: str
    display_format: str
    display: str
    date_only: bool = False


class ListSpec(BaseModel):
    kind: Literal["list"] = "list"
    labels: list[str] = Field(default_factory=list)


class ChecklistEntry(BaseModel):
    label: str
    done: bool = False


class ChecklistSpec(BaseModel):
    kind: Literal["checklist"] = "checklist"
    items: list[ChecklistEntry] = Field(default_factory=list)


class JsonSpec(BaseModel):
    kind: Literal["json"] = "json"
    preview: str
    full: str


class FormulaSpec(BaseModel):
    kind: Literal["formula"] = "formula"
    expression: Optional[str] = None
    result: Any = None


class BooleanSpec(BaseModel):
    kind: Literal["boolean"] = "boolean"
    checked: bool


class IconSpec(BaseModel):
    kind: Literal["icon"] = "icon"
    name: str


class AvatarSpec(BaseModel):
    kind: Literal["avatar"] = "avatar"
    url: Optional[str] = None
    initials: str = "?"
    alt: str = "Avatar"


class CodeSpec(BaseModel):
    kind: Literal["code"] = "code"
    code: str


RENDER_SPEC_TYPES = (
    TextSpec,
    EmptySpec,
    BadgesSpec,
    LinkSpec,
    MaskedSpec,
    SwatchSpec,
    RatingSpec,
    PersonSpec,
    NumericSpec,
    DateTimeSpec,
    ListSpec,
    ChecklistSpec,
    JsonSpec,
    FormulaSpec,
    BooleanSpec,
    IconSpec,
    AvatarSpec,
    CodeSpec,
)

RenderSpec = Annotated[Union[RENDER_SPEC_TYPES], Field(discriminator="kind")]


class DecoratedSpec(BaseModel):
    """A RenderSpec plus row-level presentation metadata.

    Produced by the decoration step only. ``force`` places a force indicator
    before the content; ``copy_text`` enables a copy affordance.
    """

    kind: Literal["decorated"] = "decorated"
    content: RenderSpec
    bold: bool = False
    strike_through: bool = False
    force: bool = False
    force_reason: Optional[str] = None
    copy_text: Optional[str] = None


CellSpec = Annotated[
    Union[RENDER_SPEC_TYPES + (DecoratedSpec,)],
    Field(discriminator="kind"),
]


class FormatContext(BaseModel):
    """Per-call formatting options.

    ``formula_evaluator`` is an external collaborator: called with
    (field, row) it returns the computed value of a formula field.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    language: Optional[str] = None
    default_language: Optional[str] = None
    currency: Optional[str] = None
    formula_evaluator: SkipJsonSchema[Optional[Callable[..., Any]]] = Field(default=None, exclude=True)
