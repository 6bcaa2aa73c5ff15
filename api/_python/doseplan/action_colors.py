"""
Default display colors for protocol actions.

The engine copies colors through untouched; callers use this module to fill
in a color for actions that arrive without one, so the same action always
gets the same color on schedule cards, legends and exports.

Resolution order:
1. Explicit action.color
2. Per-clinic color map keyed by action id
3. Legacy medication colors (matched by id, then by normalized name)
4. Deterministic hash of the id into a fixed palette
"""

import re

from .types import Action

# Accessible palette with good contrast on light backgrounds
COLOR_PALETTE = [
    "#0ea5e9",  # sky
    "#a855f7",  # purple
    "#f97316",  # orange
    "#22c55e",  # green
    "#eab308",  # yellow
    "#ef4444",  # red
    "#06b6d4",  # cyan
    "#8b5cf6",  # violet
    "#f59e0b",  # amber
    "#10b981",  # emerald
    "#ec4899",  # pink
    "#6366f1",  # indigo
]

# Kept so existing eye-drop protocols keep their familiar colors
LEGACY_MEDICATION_COLORS = {
    "sterodex": "#0ea5e9",
    "vigamox": "#a855f7",
    "dicloftil": "#f97316",
    "systane-balance": "#22c55e",
    "vitapos": "#eab308",
}

_NORMALIZE_PATTERN = re.compile(r"[\s\-()]")


def _normalize(value: str) -> str:
    return _NORMALIZE_PATTERN.sub("", value.lower())


def hash_string(value: str) -> int:
    """
    Stable 32-bit string hash (h * 31 + char, wrapped to signed int32).

    Python's built-in hash() is salted per process, so it cannot be used
    for colors that must match across requests.
    """
    h = 0
    for ch in value:
        h = ((h << 5) - h + ord(ch)) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return abs(h)


def get_action_color(action: Action, color_map: dict[str, str] | None = None) -> str:
    """
    Resolve the display color for an action.

    Args:
        action: The action (only id, name and color are consulted)
        color_map: Optional clinic-specific action_id -> color mapping

    Returns:
        Hex color string (e.g., "#0ea5e9")
    """
    if action.color:
        return action.color

    if color_map and color_map.get(action.id):
        return color_map[action.id]

    legacy = LEGACY_MEDICATION_COLORS.get(action.id.lower())
    if legacy:
        return legacy

    if action.name:
        normalized_name = _normalize(action.name)
        for key, color in LEGACY_MEDICATION_COLORS.items():
            if _normalize(key) in normalized_name:
                return color

    index = hash_string(action.id or action.name or "unknown") % len(COLOR_PALETTE)
    return COLOR_PALETTE[index]
