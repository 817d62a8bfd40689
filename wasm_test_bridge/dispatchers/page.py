"""Trigger dispatcher clicking controls in the page under test."""

import logging
from dataclasses import dataclass, field

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page

from wasm_test_bridge.dispatchers.base import TriggerDispatcher
from wasm_test_bridge.errors import (
    AmbiguousTriggerError,
    NotActivatableError,
    TriggerNotFoundError,
)

log = logging.getLogger(__name__)

DEFAULT_TRIGGER_SELECTOR = '[id="{identifier}"]'


def quote_css_string(value: str) -> str:
    """Escape a value for use inside a double-quoted CSS string."""
    return value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\a ")


@dataclass(frozen=True, kw_only=True)
class PageTriggerDispatcher(TriggerDispatcher):
    """Dispatcher locating one control per identifier and clicking it.

    The selector template receives the identifier as ``{identifier}``,
    escaped for a double-quoted CSS string. The default binds a test to the
    element whose id equals the identifier, whatever characters it contains.
    """

    page: Page = field(repr=False)
    selector_template: str = DEFAULT_TRIGGER_SELECTOR

    def selector_for(self, identifier: str) -> str:
        """Render the selector of the control bound to the identifier."""
        return self.selector_template.format(identifier=quote_css_string(identifier))

    async def activate(self, identifier: str) -> None:
        selector = self.selector_for(identifier)
        locator = self.page.locator(selector)

        try:
            count = await locator.count()
        except PlaywrightError as exc:
            raise NotActivatableError(identifier, exc.message) from exc
        if count == 0:
            raise TriggerNotFoundError(identifier)
        if count > 1:
            raise AmbiguousTriggerError(identifier, count)

        log.info("Activating trigger %s (selector=%s)", identifier, selector)
        try:
            await locator.click(no_wait_after=True)
        except PlaywrightError as exc:
            log.error("Cannot click trigger %s: %s", identifier, exc.message)
            raise NotActivatableError(identifier, exc.message) from exc
