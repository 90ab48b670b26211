"""Swift source injected into the AppDelegate class body."""

from __future__ import annotations

from .schema import MarkerState

TEMPLATE_VERSION = "2"

BACKGROUND_MARKER = "applicationDidEnterBackground"
TERMINATION_MARKER = "applicationWillTerminate"

EARLY_TERMINATION_NOTIFICATION = "LifecycleEarlyTerminationWarning"
BRIDGE_INVALIDATE_NOTIFICATION = "RCTBridgeWillInvalidateNotification"

# Starts with a blank separator line and ends at a line break so it can be
# dropped in front of the class-closing brace.
INJECTION_BLOCK = f"""
  // Lifecycle notifications for worklet cleanup (template v{TEMPLATE_VERSION})
  // Added by worklet-lifecycle-patch
  public override func {BACKGROUND_MARKER}(_ application: UIApplication) {{
    // Delivered on every path that can end in the process being killed
    NotificationCenter.default.post(
      name: NSNotification.Name("{EARLY_TERMINATION_NOTIFICATION}"),
      object: self
    )
    super.{BACKGROUND_MARKER}(application)
  }}

  public override func {TERMINATION_MARKER}(_ application: UIApplication) {{
    // Not delivered on force-quit from the app switcher
    NotificationCenter.default.post(
      name: NSNotification.Name("{BRIDGE_INVALIDATE_NOTIFICATION}"),
      object: self
    )
    super.{TERMINATION_MARKER}(application)
  }}
"""


def scan_markers(source_text: str) -> MarkerState:
    """Report which callbacks are already declared, by plain containment."""
    return MarkerState(
        background=BACKGROUND_MARKER in source_text,
        termination=TERMINATION_MARKER in source_text,
    )


def injection_block_for(source_text: str) -> str:
    """Return the injection block using the line endings of ``source_text``."""
    if "\r\n" in source_text:
        return INJECTION_BLOCK.replace("\n", "\r\n")
    return INJECTION_BLOCK
