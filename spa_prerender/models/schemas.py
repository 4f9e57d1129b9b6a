"""
Pydantic Models and Schemas
===========================

Render configuration, per-route render results and the run report.
The configuration models accept the camelCase keys of the `.rsp.json` file
as well as their snake_case field names.
"""

from typing import Optional, List, Dict, Any, Tuple, Literal
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


DEFAULT_BATCH_SIZE = 30

WaitUntil = Literal["load", "domcontentloaded", "networkidle", "commit"]

# Puppeteer completion signals mapped onto Playwright's
_WAIT_UNTIL_ALIASES = {
    "networkidle0": "networkidle",
    "networkidle2": "networkidle",
}


# Enums
class BrowserType(str, Enum):
    """Playwright browser engines."""
    CHROMIUM = "chromium"
    FIREFOX = "firefox"
    WEBKIT = "webkit"


class RenderStatus(str, Enum):
    """Outcome of rendering a single route."""
    RENDERED = "rendered"
    EMPTY = "empty"


class RouteOutcome(str, Enum):
    """Final state of a route after a run."""
    WRITTEN = "written"
    EMPTY = "empty"
    FAILED = "failed"
    SKIPPED = "skipped"


class _ConfigModel(BaseModel):
    """Base for immutable configuration sections."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True, extra="forbid"
    )


# Engine Configuration
class LaunchOptions(_ConfigModel):
    """Browser launch configuration."""
    browser: BrowserType = Field(BrowserType.CHROMIUM, description="Browser engine to launch")
    headless: bool = Field(True, description="Run browser in headless mode")
    args: Tuple[str, ...] = Field(default_factory=tuple, description="Extra browser switches")
    executable_path: Optional[str] = Field(None, description="Custom browser executable")
    channel: Optional[str] = Field(None, description="Browser distribution channel")
    slow_mo: Optional[float] = Field(None, ge=0, description="Delay between operations in ms")
    timeout: Optional[float] = Field(None, ge=0, description="Launch timeout in ms")

    def launch_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for `BrowserType.launch`."""
        kwargs: Dict[str, Any] = {"headless": self.headless, "args": list(self.args)}
        for name in ("executable_path", "channel", "slow_mo", "timeout"):
            value = getattr(self, name)
            if value is not None:
                kwargs[name] = value
        return kwargs


class GotoOptions(_ConfigModel):
    """Per-page navigation configuration."""
    wait_until: WaitUntil = Field("networkidle", description="Navigation completion signal")
    timeout: Optional[float] = Field(None, ge=0, description="Navigation timeout in ms")
    referer: Optional[str] = Field(None, description="Referer header for navigation")
    blocked_urls: Tuple[str, ...] = Field(
        default_factory=tuple, description="URL substrings whose requests are aborted"
    )

    @field_validator("wait_until", mode="before")
    @classmethod
    def normalize_wait_until(cls, v: Any) -> Any:
        """Accept Puppeteer's networkidle0/networkidle2 spellings."""
        if isinstance(v, str):
            return _WAIT_UNTIL_ALIASES.get(v, v)
        return v

    @field_validator("blocked_urls")
    @classmethod
    def validate_blocked_urls(cls, v: Tuple[str, ...]) -> Tuple[str, ...]:
        """An empty pattern would match every URL."""
        if any(not pattern for pattern in v):
            raise ValueError("Blocked URL patterns must be non-empty strings")
        return v

    def navigation_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for `Page.goto`."""
        kwargs: Dict[str, Any] = {"wait_until": self.wait_until}
        if self.timeout is not None:
            kwargs["timeout"] = self.timeout
        if self.referer is not None:
            kwargs["referer"] = self.referer
        return kwargs


class EngineOptions(_ConfigModel):
    """Browser engine configuration."""
    launch_options: LaunchOptions = Field(default_factory=LaunchOptions)
    goto_options: GotoOptions = Field(default_factory=GotoOptions)


class RenderConfiguration(_ConfigModel):
    """Validated configuration for a single pre-render run."""
    port: int = Field(3000, ge=1, le=65535, description="Static server port")
    routes: Tuple[str, ...] = Field(("/",), min_length=1, description="Routes to pre-render")
    build_directory: Path = Field(
        Path("build"),
        validate_default=True,
        description="Directory to serve and to write rendered pages into",
    )
    batch_size: int = Field(DEFAULT_BATCH_SIZE, ge=1, description="Routes per batch")
    engine: EngineOptions = Field(default_factory=EngineOptions)

    @field_validator("routes")
    @classmethod
    def validate_routes(cls, v: Tuple[str, ...]) -> Tuple[str, ...]:
        """Every route must be an absolute URL path."""
        invalid = [route for route in v if not route.startswith("/")]
        if invalid:
            raise ValueError(f"Routes must start with '/': {invalid}")
        return v

    @field_validator("build_directory")
    @classmethod
    def resolve_build_directory(cls, v: Path) -> Path:
        """Resolve the build directory to an absolute path."""
        return v.expanduser().resolve()


# Rendering Results
class RenderResult(BaseModel):
    """Tagged outcome of rendering one route: Rendered(html) or Empty."""
    route: str = Field(..., description="Rendered route")
    url: str = Field(..., description="Absolute URL navigated to")
    status: RenderStatus = Field(..., description="Render outcome")
    html: Optional[str] = Field(None, description="Serialized DOM when rendered")
    elapsed: float = Field(0.0, ge=0, description="Render time in seconds")

    @model_validator(mode="after")
    def check_html_matches_status(self) -> "RenderResult":
        if self.status == RenderStatus.RENDERED and not self.html:
            raise ValueError("A rendered result requires non-empty HTML")
        if self.status == RenderStatus.EMPTY and self.html:
            raise ValueError("An empty result cannot carry HTML")
        return self

    @classmethod
    def rendered(cls, route: str, url: str, html: str, elapsed: float = 0.0) -> "RenderResult":
        return cls(route=route, url=url, status=RenderStatus.RENDERED, html=html, elapsed=elapsed)

    @classmethod
    def empty(cls, route: str, url: str, elapsed: float = 0.0) -> "RenderResult":
        return cls(route=route, url=url, status=RenderStatus.EMPTY, elapsed=elapsed)

    @property
    def is_rendered(self) -> bool:
        return self.status == RenderStatus.RENDERED


class RouteReport(BaseModel):
    """Final state of one route."""
    route: str = Field(..., description="Route")
    batch: int = Field(..., ge=0, description="Index of the batch the route belonged to")
    outcome: RouteOutcome = Field(..., description="What happened to the route")
    output_path: Optional[Path] = Field(None, description="Written file, if any")
    error: Optional[str] = Field(None, description="Error message if failed")


class RunReport(BaseModel):
    """Summary of a pre-render run."""
    total_routes: int = Field(0, ge=0, description="Number of configured routes")
    batch_count: int = Field(0, ge=0, description="Number of batches")
    routes: List[RouteReport] = Field(default_factory=list, description="Per-route reports")
    processing_time: float = Field(0.0, ge=0, description="Total processing time in seconds")

    def _with(self, outcome: RouteOutcome) -> List[RouteReport]:
        return [report for report in self.routes if report.outcome == outcome]

    @property
    def written(self) -> List[RouteReport]:
        return self._with(RouteOutcome.WRITTEN)

    @property
    def empty(self) -> List[RouteReport]:
        return self._with(RouteOutcome.EMPTY)

    @property
    def failed(self) -> List[RouteReport]:
        return self._with(RouteOutcome.FAILED)

    @property
    def skipped(self) -> List[RouteReport]:
        return self._with(RouteOutcome.SKIPPED)

    @property
    def success(self) -> bool:
        """Every configured route was written."""
        return len(self.written) == self.total_routes
