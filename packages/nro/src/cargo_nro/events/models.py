from __future__ import annotations

from enum import StrEnum
from pathlib import Path
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, TypeAdapter


class TargetKind(StrEnum):
    lib = "lib"
    bin = "bin"
    test = "test"
    bench = "bench"
    example = "example"
    custom_build = "custom-build"


# cargo reports library targets by crate type in `kind`
_LIB_CRATE_TYPES = frozenset({"rlib", "dylib", "cdylib", "staticlib", "proc-macro"})


def _fold_crate_type(v: Any) -> Any:
    if isinstance(v, str) and v in _LIB_CRATE_TYPES:
        return TargetKind.lib.value
    return v


Kind = Annotated[TargetKind, BeforeValidator(_fold_crate_type)]


class _WireModel(BaseModel):
    # cargo adds fields over time; only the ones declared here are kept
    model_config = ConfigDict(extra="ignore", frozen=True)


class Target(_WireModel):
    model_config = ConfigDict(populate_by_name=True)

    # Serialized as a list for historical reasons; only the first entry matters.
    kind: list[Kind] = Field(..., min_length=1)
    crate_types: list[str] = Field(default_factory=list)
    name: str
    src_path: Path
    edition: str = "2015"
    required_features: Optional[list[str]] = Field(
        default=None, alias="required-features"
    )

    @property
    def primary_kind(self) -> TargetKind:
        return self.kind[0]


class ArtifactProfile(_WireModel):
    opt_level: str
    debuginfo: Optional[int | str] = None
    debug_assertions: bool
    overflow_checks: bool
    test: bool


class ArtifactEvent(_WireModel):
    reason: Literal["compiler-artifact"]

    package_id: str
    target: Target
    profile: ArtifactProfile
    features: list[str] = Field(default_factory=list)
    filenames: list[str] = Field(..., min_length=1)
    executable: Optional[str] = None
    fresh: bool

    @property
    def primary_path(self) -> Path:
        return Path(self.filenames[0])

    @property
    def is_binary(self) -> bool:
        return self.target.primary_kind == TargetKind.bin


class CompilerMessageEvent(_WireModel):
    reason: Literal["compiler-message"]

    package_id: str
    target: Target
    # shape is checked where it is rendered
    message: Any


class BuildScriptEvent(_WireModel):
    reason: Literal["build-script-executed"]

    package_id: str
    linked_libs: list[str] = Field(default_factory=list)
    linked_paths: list[str] = Field(default_factory=list)
    cfgs: list[str] = Field(default_factory=list)
    env: list[tuple[str, str]] = Field(default_factory=list)


BuildEvent = Annotated[
    Union[ArtifactEvent, CompilerMessageEvent, BuildScriptEvent],
    Field(discriminator="reason"),
]

BUILD_EVENT_ADAPTER: TypeAdapter[BuildEvent] = TypeAdapter(BuildEvent)

KNOWN_REASONS: frozenset[str] = frozenset(
    {"compiler-artifact", "compiler-message", "build-script-executed"}
)


class OtherEvent(_WireModel):
    """
    Any JSON value without a recognized `reason` (e.g. `build-finished`).
    """

    reason: Optional[str] = None


class MalformedEvent(_WireModel):
    """
    A recognized event whose fields did not validate.
    """

    reason: str
    line_no: int
    error: str
