"""Question type models for the screening quiz.

Each question type maps to a specific UI control and scoring rule:

  - boolean: Yes/No toggle; full weight on the positive answer
  - range: numeric slider with min/max/step; weight scaled by position
  - select: ordered choice list; weight scaled by the chosen index

Raw rows (database or YAML) carry two JSON-typed fields whose shape depends
on the row:

  - ``options``: ``{min, max, step}`` for range, ``{choices: [...]}`` for
    select, absent/null for boolean
  - ``next_question_logic``: ``{"<answer>": <question id>, ..., "default": <id>}``

Both are validated into typed models once, at load time.  The discriminated
``Question`` union uses ``type`` as its discriminator and ``question_mapper``
maps type strings to their Pydantic classes.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Optional, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    field_validator,
    model_validator,
)

from riskquiz_engine.constants import DEFAULT_BRANCH_KEY, GENERAL_CATEGORY


# --- Answer text ---

def format_response(value: Any) -> str:
    """Text form of an answer, shared by branch matching and the response log.

    Integral floats drop the trailing ``.0`` so slider answers read as "5".
    """
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


# --- Branching rules ---

class BranchRules(BaseModel):
    """Literal answer → next question id, plus an optional default target.

    Accepts the flat JSON mapping stored on question rows, where the
    ``default`` key holds the fallback target.
    """

    model_config = ConfigDict(frozen=True)

    targets: dict[str, int] = Field(default_factory=dict)
    default: Optional[int] = None

    @model_validator(mode="before")
    @classmethod
    def _from_flat_mapping(cls, data: Any) -> Any:
        if isinstance(data, dict) and "targets" not in data:
            raw = dict(data)
            default = raw.pop(DEFAULT_BRANCH_KEY, None)
            return {
                "targets": {format_response(answer): target for answer, target in raw.items()},
                "default": default,
            }
        return data

    def target_for(self, answer: Any) -> Optional[int]:
        """Return the literal target for ``answer`` compared as :func:`format_response` text."""
        return self.targets.get(format_response(answer))


# --- Type-specific options ---

class RangeOptions(BaseModel):
    """Slider bounds.  ``max == min`` is accepted here and handled by the scorer."""

    model_config = ConfigDict(frozen=True)

    min: float
    max: float
    step: float = 1.0

    @model_validator(mode="after")
    def _chk(self):
        if self.max < self.min:
            raise ValueError("range max must be >= min")
        if self.step <= 0:
            raise ValueError("range step must be positive")
        return self


class SelectOptions(BaseModel):
    """Ordered choice list; position drives the score."""

    model_config = ConfigDict(frozen=True)

    choices: tuple[str, ...] = Field(
        min_length=1,
        validation_alias=AliasChoices("choices", "options"),
    )

    @model_validator(mode="before")
    @classmethod
    def _from_bare_list(cls, data: Any) -> Any:
        # Some rows store the choice list directly as the options value
        if isinstance(data, (list, tuple)):
            return {"choices": list(data)}
        return data


# --- Base question type ---

class BaseQuestion(BaseModel):
    """Fields shared by all question types."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int
    text: str
    weight: float = Field(default=0.0, ge=0)
    category: str
    branch_rules: Optional[BranchRules] = Field(
        default=None,
        validation_alias=AliasChoices("branch_rules", "next_question_logic"),
    )
    # Only meaningful on general questions: candidate label → hint weight
    condition_hints: dict[str, float] = Field(default_factory=dict)

    @field_validator("condition_hints", mode="before")
    @classmethod
    def _null_hints(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("condition_hints")
    @classmethod
    def _non_negative_hints(cls, value: dict[str, float]) -> dict[str, float]:
        for label, weight in value.items():
            if weight < 0:
                raise ValueError(f"condition hint '{label}' has negative weight {weight}")
        return value

    @property
    def is_general(self) -> bool:
        return self.category == GENERAL_CATEGORY


# --- Concrete question types ---

class BooleanQuestion(BaseQuestion):
    """Yes/No question; carries no options."""

    type: Literal["boolean"] = "boolean"
    options: Optional[dict] = None


class RangeQuestion(BaseQuestion):
    """Numeric slider between ``options.min`` and ``options.max``."""

    type: Literal["range"] = "range"
    options: RangeOptions


class SelectQuestion(BaseQuestion):
    """Pick one of ``options.choices``; later choices score higher."""

    type: Literal["select"] = "select"
    options: SelectOptions

    @property
    def choices(self) -> tuple[str, ...]:
        return self.options.choices


# --- Discriminated union of all question types ---

Question = Annotated[
    Union[BooleanQuestion, RangeQuestion, SelectQuestion],
    Field(discriminator="type"),
]

# Maps type string → Pydantic class for dynamic deserialization.
question_mapper = {
    "boolean": BooleanQuestion,
    "range": RangeQuestion,
    "select": SelectQuestion,
}

_question_adapter: TypeAdapter[Question] = TypeAdapter(Question)


def parse_question(raw: dict[str, Any]) -> Question:
    """Validate a raw question row into its typed variant.

    Raises ``pydantic.ValidationError`` on malformed rows; loaders wrap it
    into ``FetchFailure``.
    """
    return _question_adapter.validate_python(raw)
