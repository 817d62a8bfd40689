"""Trigger dispatchers starting computations by test identifier."""

from wasm_test_bridge.dispatchers.base import TriggerDispatcher
from wasm_test_bridge.dispatchers.page import (
    DEFAULT_TRIGGER_SELECTOR,
    PageTriggerDispatcher,
)
from wasm_test_bridge.dispatchers.registry import Computation, RegistryTriggerDispatcher

__all__ = [
    "DEFAULT_TRIGGER_SELECTOR",
    "Computation",
    "PageTriggerDispatcher",
    "RegistryTriggerDispatcher",
    "TriggerDispatcher",
]
