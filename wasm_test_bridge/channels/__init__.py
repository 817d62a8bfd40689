"""Signal channels carrying outcomes from the page to the runner."""

from wasm_test_bridge.channels.base import SignalChannel
from wasm_test_bridge.channels.memory import InMemorySignalChannel, SignalWriter
from wasm_test_bridge.channels.page import PageSignalChannel

__all__ = [
    "InMemorySignalChannel",
    "PageSignalChannel",
    "SignalChannel",
    "SignalWriter",
]
