"""JavaScript installed into the page under test."""

import json

SIGNAL_GLOBAL = "__wasmTestSignal"

# Installed before any page script runs. Page code calls
# `window.__wasmTestSignal.writer()` when its computation starts and invokes
# the returned function exactly once with the terminal outcome.
MAILBOX_SCRIPT = """
(() => {
  if (window.__wasmTestSignal) {
    return;
  }
  const state = { epoch: 0, slot: null, violation: null };

  const normalize = (outcome) => {
    if (outcome instanceof Error) {
      return { status: "failure", reason: String(outcome.message || outcome) };
    }
    if (!outcome || typeof outcome !== "object") {
      return { status: "failure", reason: `malformed outcome: ${String(outcome)}` };
    }
    if (outcome.status === "success") {
      let value = outcome.value === undefined ? null : outcome.value;
      try {
        value = JSON.parse(JSON.stringify(value));
      } catch (err) {
        value = String(value);
      }
      return { status: "success", value };
    }
    return {
      status: "failure",
      reason: String(outcome.reason || "computation failed without a reason"),
    };
  };

  const snapshot = () => ({
    epoch: state.epoch,
    slot: state.slot,
    violation: state.violation,
  });

  window.__wasmTestSignal = {
    get epoch() {
      return state.epoch;
    },
    reset() {
      state.epoch += 1;
      state.slot = null;
      state.violation = null;
      return state.epoch;
    },
    write(outcome, epoch) {
      if (epoch !== undefined && epoch !== null && epoch !== state.epoch) {
        console.debug(`stale outcome for epoch ${epoch} discarded`);
        return "stale";
      }
      if (state.slot !== null) {
        state.violation = `Outcome already written for epoch ${state.epoch} and not consumed`;
        return "violation";
      }
      state.slot = normalize(outcome);
      return "written";
    },
    writer() {
      const epoch = state.epoch;
      return (outcome) => window.__wasmTestSignal.write(outcome, epoch);
    },
    peek() {
      return snapshot();
    },
    consume() {
      const current = snapshot();
      state.slot = null;
      return current;
    },
    pending() {
      return state.slot !== null || state.violation !== null;
    },
  };
})();
"""

# Adapts pages that report completion by hiding a busy indicator and ticking a
# success checkbox instead of writing to the mailbox.
_LEGACY_DOM_TEMPLATE = """
((options) => {
  let lastError = null;
  const originalError = console.error.bind(console);
  console.error = (...args) => {
    lastError = args.map((arg) => String(arg)).join(" ");
    originalError(...args);
  };

  const isVisible = (el) => {
    if (!el || el.hidden) {
      return false;
    }
    const style = window.getComputedStyle(el);
    return style.display !== "none" && style.visibility !== "hidden";
  };

  let write = null;
  const observe = () => {
    const busy = document.querySelector(options.busySelector);
    if (!busy) {
      return;
    }
    if (isVisible(busy)) {
      if (write === null) {
        write = window.__wasmTestSignal.writer();
        lastError = null;
      }
      return;
    }
    if (write !== null) {
      const success = document.querySelector(options.successSelector);
      if (success && success.checked) {
        write({ status: "success" });
      } else {
        write({ status: "failure", reason: lastError || "computation reported failure" });
      }
      write = null;
    }
  };

  const start = () => {
    new MutationObserver(observe).observe(document.documentElement, {
      attributes: true,
      attributeFilter: ["hidden", "style", "class"],
      subtree: true,
    });
    observe();
  };

  if (document.readyState === "loading") {
    document.addEventListener("DOMContentLoaded", start);
  } else {
    start();
  }
})(__OPTIONS__);
"""


def legacy_dom_script(busy_selector: str, success_selector: str) -> str:
    """Render the legacy DOM adapter for the given selectors."""
    options = json.dumps(
        {"busySelector": busy_selector, "successSelector": success_selector}
    )
    return _LEGACY_DOM_TEMPLATE.replace("__OPTIONS__", options)
