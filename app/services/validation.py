from collections.abc import Mapping
from dataclasses import dataclass, field

from pydantic import ValidationError
from pydantic_core import ErrorDetails

from app.schemas.book import BookSchema

BODY_FIELD = "body"

_FIELD_ORDER = {name: index for index, name in enumerate(BookSchema.model_fields)}


@dataclass(frozen=True)
class Violation:
    field: str
    code: str
    message: str

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


@dataclass(frozen=True)
class ValidationResult:
    book: BookSchema | None = None
    violations: list[Violation] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.violations

    @property
    def messages(self) -> list[str]:
        return [str(violation) for violation in self.violations]


def _violation_code(error_type: str) -> str:
    if error_type == "missing":
        return "missing"
    if error_type.endswith("_type"):
        return "type"
    return "constraint"


def _violation_message(error: ErrorDetails) -> str:
    if error["type"] == "missing":
        return "is required"
    if error["type"] == "value_error":
        ctx = error.get("ctx") or {}
        return str(ctx.get("error", error["msg"]))
    return error["msg"]


def _to_violation(error: ErrorDetails) -> Violation:
    loc = error["loc"]
    field_name = str(loc[0]) if loc else BODY_FIELD
    return Violation(
        field=field_name,
        code=_violation_code(error["type"]),
        message=_violation_message(error),
    )


def validate_book(candidate: object) -> ValidationResult:
    """Check an untrusted payload against :class:`BookSchema`.

    Every violated field is reported, in schema field order. On success the
    result carries the typed record and no violations.
    """
    if not isinstance(candidate, Mapping):
        return ValidationResult(
            violations=[Violation(BODY_FIELD, "type", "must be a JSON object")]
        )

    try:
        book = BookSchema.model_validate(dict(candidate))
    except ValidationError as exc:
        violations = [_to_violation(error) for error in exc.errors()]
        violations.sort(key=lambda v: _FIELD_ORDER.get(v.field, len(_FIELD_ORDER)))
        return ValidationResult(violations=violations)

    return ValidationResult(book=book)
