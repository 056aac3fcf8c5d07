"""Step schemas.

Scenes, step configuration, host context, self-describing metadata,
option presets and execution results. The metadata models serialize to
the host's camelCase shape with model_dump(by_alias=True).
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Scene(BaseModel):
    """A unit of scene text.

    Steps only ever touch `contents`; any other fields a host sends
    along are kept as-is.
    """

    model_config = ConfigDict(extra="allow")

    contents: Optional[str] = Field(
        default=None, description="Scene text, rewritten in place by steps"
    )


class StepContext(BaseModel):
    """Resolved option values handed to a step by the host pipeline."""

    model_config = ConfigDict(populate_by_name=True)

    option_values: dict[str, Any] = Field(
        default_factory=dict,
        alias="optionValues",
        description="Option id -> resolved value",
    )


class MarkerBlockConfig(BaseModel):
    """Options for the marker block step.

    Both values are stripped on validation. A value that is missing or
    blank after stripping is stored as None.
    """

    model_config = ConfigDict(populate_by_name=True)

    marker: Optional[str] = Field(
        default=None,
        description="Literal prefix identifying lines to wrap (e.g. '>r')",
    )
    style_name: Optional[str] = Field(
        default=None,
        alias="styleName",
        description="Paragraph style applied as custom-style and CSS class",
    )

    @field_validator("marker", "style_name", mode="before")
    @classmethod
    def _strip_blank(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        value = str(value).strip()
        return value or None

    @property
    def is_complete(self) -> bool:
        return self.marker is not None and self.style_name is not None

    @classmethod
    def from_context(cls, context: StepContext) -> "MarkerBlockConfig":
        """Read `marker` and `styleName` out of a host context."""
        return cls(
            marker=context.option_values.get("marker"),
            style_name=context.option_values.get("styleName"),
        )


class StepOption(BaseModel):
    """One user-facing option declared by a step."""

    id: str = Field(..., description="Key the value is stored under")
    name: str = Field(..., description="Human-readable display name")
    description: str = Field(default="", description="Help text for the UI")
    type: str = Field(default="Text", description="Option type, e.g. 'Text'")
    default: Optional[Any] = Field(
        default=None, description="Example value offered by the UI"
    )


class StepDescription(BaseModel):
    """Self-describing metadata a host uses for discovery and UI generation."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    description: str = ""
    available_kinds: list[str] = Field(
        default_factory=list,
        alias="availableKinds",
        description="Record kinds the step applies to",
    )
    options: list[StepOption] = Field(default_factory=list)


class StepPreset(BaseModel):
    """A named, reusable set of option values for a step."""

    preset_key: str = Field(..., description="Unique snake_case identifier")
    preset_name: str = Field(..., description="Human-readable display name")
    description: str = Field(default="")
    step_key: str = Field(..., description="Step these options belong to")
    option_values: dict[str, Any] = Field(default_factory=dict)


class StepResult(BaseModel):
    """Result of running a step over a scene sequence.

    `scenes` is the very sequence that was passed in. A skipped run is
    still a success: the input comes back untouched and `warning` says
    why.
    """

    success: bool = True
    skipped: bool = False
    warning: Optional[str] = None
    scenes: Any = None
    scenes_modified: int = 0
    replacements: int = 0
    execution_time_ms: int = 0
