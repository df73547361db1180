"""Native event-type bits.

Native events use the platform's type codes; ``submit`` and ``resize`` are not
part of the platform bitmask and get dedicated synthetic bits above it.
"""

from __future__ import annotations

ONCLICK = 0x00001
ONDBLCLICK = 0x00002
ONMOUSEDOWN = 0x00004
ONMOUSEUP = 0x00008
ONMOUSEOVER = 0x00010
ONMOUSEOUT = 0x00020
ONMOUSEMOVE = 0x00040
ONKEYDOWN = 0x00080
ONKEYPRESS = 0x00100
ONKEYUP = 0x00200
ONCHANGE = 0x00400
ONFOCUS = 0x00800
ONBLUR = 0x01000
ONLOSECAPTURE = 0x02000
ONSCROLL = 0x04000
ONLOAD = 0x08000
ONERROR = 0x10000
ONMOUSEWHEEL = 0x20000
ONCONTEXTMENU = 0x40000
ONPASTE = 0x80000
ONTOUCHSTART = 0x100000
ONTOUCHMOVE = 0x200000
ONTOUCHEND = 0x400000
ONTOUCHCANCEL = 0x800000
ONGESTURESTART = 0x1000000
ONGESTURECHANGE = 0x2000000
ONGESTUREEND = 0x4000000

# Not exposed through the platform bitmask
ONSUBMIT = 0x8000000
ONRESIZE = 0x10000000

FOCUSEVENTS = ONFOCUS | ONBLUR
KEYEVENTS = ONKEYDOWN | ONKEYPRESS | ONKEYUP
MOUSEEVENTS = ONMOUSEDOWN | ONMOUSEUP | ONMOUSEMOVE | ONMOUSEOVER | ONMOUSEOUT
TOUCHEVENTS = ONTOUCHSTART | ONTOUCHMOVE | ONTOUCHEND | ONTOUCHCANCEL
GESTUREEVENTS = ONGESTURESTART | ONGESTURECHANGE | ONGESTUREEND

# Events sunk by name rather than through the native bitmask
NAMED_EVENTS: dict[str, int] = {"submit": ONSUBMIT, "resize": ONRESIZE}
NAMED_EVENT_BITS = ONSUBMIT | ONRESIZE

NATIVE_EVENTS: dict[str, int] = {
    "click": ONCLICK,
    "dblclick": ONDBLCLICK,
    "mousedown": ONMOUSEDOWN,
    "mouseup": ONMOUSEUP,
    "mouseover": ONMOUSEOVER,
    "mouseout": ONMOUSEOUT,
    "mousemove": ONMOUSEMOVE,
    "keydown": ONKEYDOWN,
    "keypress": ONKEYPRESS,
    "keyup": ONKEYUP,
    "change": ONCHANGE,
    "focus": ONFOCUS,
    "blur": ONBLUR,
    "losecapture": ONLOSECAPTURE,
    "scroll": ONSCROLL,
    "load": ONLOAD,
    "error": ONERROR,
    "mousewheel": ONMOUSEWHEEL,
    "contextmenu": ONCONTEXTMENU,
    "paste": ONPASTE,
    "touchstart": ONTOUCHSTART,
    "touchmove": ONTOUCHMOVE,
    "touchend": ONTOUCHEND,
    "touchcancel": ONTOUCHCANCEL,
    "gesturestart": ONGESTURESTART,
    "gesturechange": ONGESTURECHANGE,
    "gestureend": ONGESTUREEND,
}

MOUSEENTER = "mouseenter"
MOUSELEAVE = "mouseleave"

# Namespace carried by per-bit delegation indexes
LIVE_NAMESPACE = "live"
