"""UI theme definitions and selection helpers.

Themes are UI-only ANSI palettes (tree rows, status bar, overlays). Syntax
highlighting inside the diff viewer uses a separate Pygments style.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by renderers."""

    name: str
    reverse: str
    reset: str
    dim: str
    graph: str
    change_id: str
    commit_id: str
    bookmark: str
    working_copy: str
    conflicted: str
    placeholder: str
    selected: str
    summary: str
    marker_source: str
    marker_destination: str
    marker_moving: str
    status_info: str
    status_success: str
    status_warning: str
    status_error: str
    help_heading: str
    help_key: str
    help_dim: str
    modal_border: str
    diff_header: str
    diff_hunk: str
    diff_added: str
    diff_removed: str


DEFAULT_THEME = UITheme(
    name="default",
    reverse="\033[7m",
    reset="\033[0m",
    dim="\033[2m",
    graph="\033[38;5;240m",
    change_id="\033[38;5;170m",
    commit_id="\033[38;5;109m",
    bookmark="\033[38;5;81m",
    working_copy="\033[1;38;5;42m",
    conflicted="\033[1;38;5;196m",
    placeholder="\033[2;38;5;250m",
    selected="\033[38;5;229m",
    summary="\033[2;38;5;250m",
    marker_source="\033[1;38;5;214m",
    marker_destination="\033[1;38;5;42m",
    marker_moving="\033[38;5;214m",
    status_info="\033[38;5;252m",
    status_success="\033[38;5;42m",
    status_warning="\033[38;5;214m",
    status_error="\033[1;38;5;196m",
    help_heading="\033[1;38;5;81m",
    help_key="\033[38;5;229m",
    help_dim="\033[2;38;5;250m",
    modal_border="\033[38;5;45m",
    diff_header="\033[1;38;5;252m",
    diff_hunk="\033[38;5;45m",
    diff_added="\033[38;5;42m",
    diff_removed="\033[38;5;203m",
)

OCEAN_THEME = UITheme(
    name="ocean",
    reverse="\033[7m",
    reset="\033[0m",
    dim="\033[2;38;5;110m",
    graph="\033[38;5;24m",
    change_id="\033[38;5;117m",
    commit_id="\033[38;5;73m",
    bookmark="\033[1;38;5;45m",
    working_copy="\033[1;38;5;84m",
    conflicted="\033[1;38;5;203m",
    placeholder="\033[2;38;5;110m",
    selected="\033[38;5;153m",
    summary="\033[2;38;5;110m",
    marker_source="\033[1;38;5;215m",
    marker_destination="\033[1;38;5;84m",
    marker_moving="\033[38;5;215m",
    status_info="\033[38;5;153m",
    status_success="\033[38;5;84m",
    status_warning="\033[38;5;215m",
    status_error="\033[1;38;5;203m",
    help_heading="\033[1;38;5;45m",
    help_key="\033[38;5;153m",
    help_dim="\033[2;38;5;110m",
    modal_border="\033[38;5;39m",
    diff_header="\033[1;38;5;153m",
    diff_hunk="\033[38;5;39m",
    diff_added="\033[38;5;84m",
    diff_removed="\033[38;5;203m",
)

PLAIN_THEME = UITheme(
    name="plain",
    reverse="",
    reset="",
    dim="",
    graph="",
    change_id="",
    commit_id="",
    bookmark="",
    working_copy="",
    conflicted="",
    placeholder="",
    selected="",
    summary="",
    marker_source="",
    marker_destination="",
    marker_moving="",
    status_info="",
    status_success="",
    status_warning="",
    status_error="",
    help_heading="",
    help_key="",
    help_dim="",
    modal_border="",
    diff_header="",
    diff_hunk="",
    diff_added="",
    diff_removed="",
)

_THEMES: dict[str, UITheme] = {
    DEFAULT_THEME.name: DEFAULT_THEME,
    OCEAN_THEME.name: OCEAN_THEME,
}


def available_theme_names() -> tuple[str, ...]:
    """Return selectable non-plain theme names."""
    return tuple(sorted(_THEMES.keys()))


def normalize_theme_name(name: str | None) -> str:
    """Return a valid theme name, falling back to default."""
    if not name:
        return DEFAULT_THEME.name
    candidate = str(name).strip().lower()
    if candidate in _THEMES:
        return candidate
    return DEFAULT_THEME.name


def resolve_theme(name: str | None, *, no_color: bool = False) -> UITheme:
    """Return concrete theme for requested name and color mode."""
    if no_color:
        return PLAIN_THEME
    return _THEMES[normalize_theme_name(name)]


__all__ = [
    "UITheme",
    "DEFAULT_THEME",
    "OCEAN_THEME",
    "PLAIN_THEME",
    "available_theme_names",
    "normalize_theme_name",
    "resolve_theme",
]
