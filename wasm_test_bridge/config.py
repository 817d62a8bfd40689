"""Configuration for the browser harness."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, model_validator

from wasm_test_bridge.dispatchers.page import DEFAULT_TRIGGER_SELECTOR

DEFAULT_LAUNCH_ARGS = (
    "--no-sandbox",
    "--disable-gpu",
    "--disable-extensions",
    "--disable-background-timer-throttling",
    "--disable-backgrounding-occluded-windows",
    "--disable-renderer-backgrounding",
    "--no-first-run",
    "--no-default-browser-check",
    # Avoid renderer crashes when /dev/shm is tiny.
    "--disable-dev-shm-usage",
)


class LegacyDomSignalConfig(BaseModel):
    """Selectors of pages reporting completion through the DOM."""

    model_config = ConfigDict(frozen=True)

    busy_selector: str = "#loader"
    success_selector: str = "#testSuccess"


class HarnessConfig(BaseModel):
    """Configuration for driving the page under test."""

    model_config = ConfigDict(frozen=True)

    page_url: str | None = None
    # Serve this directory with cross-origin isolation headers instead of
    # using an external page_url.
    serve_dir: Path | None = None
    serve_host: str = "127.0.0.1"
    serve_port: int = Field(default=0, ge=0)
    trigger_selector: str = DEFAULT_TRIGGER_SELECTOR
    ready_expression: str | None = None
    ready_timeout_ms: int = Field(default=60_000, gt=0)
    poll_interval_ms: int = Field(default=100, gt=0)
    headless: bool = True
    chromium_path: str | None = None
    launch_args: tuple[str, ...] = DEFAULT_LAUNCH_ARGS
    legacy_dom_signal: LegacyDomSignalConfig | None = None
    forward_console: bool = True
    max_parallel: int = Field(default=1, gt=0)

    @model_validator(mode="after")
    def _check_page_source(self) -> "HarnessConfig":
        if self.page_url is None and self.serve_dir is None:
            raise ValueError("Either page_url or serve_dir must be configured")
        if "{identifier}" not in self.trigger_selector:
            raise ValueError("trigger_selector must contain '{identifier}'")
        return self

    @property
    def poll_interval(self) -> float:
        """Poll interval in seconds."""
        return self.poll_interval_ms / 1000
