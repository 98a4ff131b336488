"""Option and badge models.

NormalizedOption is the uniform shape every option-like value is turned into;
BadgeItem is what badge rendering and click-navigation consume.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class NormalizedOption(BaseModel):
    """An option with resolved label/colour/icon.

    Every property of the source value is retained (extra="allow"), so
    downstream code can still read relation metadata such as targetSchema.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: Any = None
    label: str = ""
    color: Optional[str] = None
    icon: Optional[str] = None
    avatar: Optional[str] = None
    email: Optional[str] = None
    target_schema: Optional[str] = Field(default=None, alias="targetSchema")
    resolved: bool = Field(
        default=True,
        description="False when the label fell back to the raw id",
    )

    def extra(self, key: str, default: Any = None) -> Any:
        """Read a retained source property that is not a declared field."""
        return (self.model_extra or {}).get(key, default)


class BadgeItem(BaseModel):
    """One badge in a badge list."""

    id: str
    label: str
    color: Optional[str] = None
    icon: Optional[str] = None
    clickable_target_schema: Optional[str] = Field(
        default=None,
        description="Schema to navigate to on click; None disables navigation",
    )
