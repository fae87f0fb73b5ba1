"""UI theme definitions and selection helpers.

Themes are ANSI palettes for chrome, the results list and tree rows. The
Pygments style used to highlight Markdown in the detail pane is a separate
setting.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UITheme:
    """ANSI escape prefixes for each styled element of a frame."""

    name: str
    reset: str
    reverse: str
    border: str
    title: str
    mode: str
    hint: str
    query_text: str
    status: str
    empty_hint: str
    error: str
    error_border: str
    detail_label: str
    node_heading: str
    node_list: str
    node_code: str
    node_link: str
    node_strong: str
    node_emphasis: str
    node_image: str
    node_math: str
    node_blockquote: str
    node_rule: str
    node_other: str
    help_heading: str
    help_key: str
    help_dim: str
    help_modal_title: str
    help_modal_border: str
    help_backdrop: str


DEFAULT_THEME = UITheme(
    name="default",
    reset="\033[0m",
    reverse="\033[7m",
    border="\033[2m",
    title="\033[1;32m",
    mode="\033[1;33m",
    hint="\033[37m",
    query_text="\033[33m",
    status="\033[90m",
    empty_hint="\033[90m",
    error="\033[97;41m",
    error_border="\033[1;97;41m",
    detail_label="\033[1;38;5;81m",
    node_heading="\033[1;34m",
    node_list="\033[32m",
    node_code="\033[36m",
    node_link="\033[35m",
    node_strong="\033[1m",
    node_emphasis="\033[3m",
    node_image="\033[33m",
    node_math="\033[31m",
    node_blockquote="\033[94m",
    node_rule="\033[90m",
    node_other="\033[37m",
    help_heading="\033[1;4;32m",
    help_key="\033[33m",
    help_dim="\033[2;38;5;250m",
    help_modal_title="\033[1;38;5;45m",
    help_modal_border="\033[38;5;45m",
    help_backdrop="\033[2m",
)

OCEAN_THEME = UITheme(
    name="ocean",
    reset="\033[0m",
    reverse="\033[7m",
    border="\033[2;38;5;31m",
    title="\033[1;38;5;45m",
    mode="\033[1;38;5;153m",
    hint="\033[38;5;110m",
    query_text="\033[38;5;153m",
    status="\033[38;5;73m",
    empty_hint="\033[2;38;5;110m",
    error="\033[38;5;231;48;5;124m",
    error_border="\033[1;38;5;231;48;5;124m",
    detail_label="\033[1;38;5;45m",
    node_heading="\033[1;38;5;39m",
    node_list="\033[38;5;84m",
    node_code="\033[38;5;117m",
    node_link="\033[38;5;177m",
    node_strong="\033[1m",
    node_emphasis="\033[3m",
    node_image="\033[38;5;215m",
    node_math="\033[38;5;203m",
    node_blockquote="\033[38;5;153m",
    node_rule="\033[38;5;24m",
    node_other="\033[38;5;252m",
    help_heading="\033[1;4;38;5;45m",
    help_key="\033[38;5;153m",
    help_dim="\033[2;38;5;110m",
    help_modal_title="\033[1;38;5;39m",
    help_modal_border="\033[38;5;39m",
    help_backdrop="\033[2;38;5;24m",
)

PLAIN_THEME = UITheme(
    name="plain",
    reset="",
    reverse="",
    border="",
    title="",
    mode="",
    hint="",
    query_text="",
    status="",
    empty_hint="",
    error="",
    error_border="",
    detail_label="",
    node_heading="",
    node_list="",
    node_code="",
    node_link="",
    node_strong="",
    node_emphasis="",
    node_image="",
    node_math="",
    node_blockquote="",
    node_rule="",
    node_other="",
    help_heading="",
    help_key="",
    help_dim="",
    help_modal_title="",
    help_modal_border="",
    help_backdrop="",
)

_THEMES: dict[str, UITheme] = {
    DEFAULT_THEME.name: DEFAULT_THEME,
    OCEAN_THEME.name: OCEAN_THEME,
}


def available_theme_names() -> tuple[str, ...]:
    """Return the names accepted by ``--theme`` and the config file."""
    return tuple(sorted(_THEMES.keys()))


def normalize_theme_name(name: str | None) -> str:
    """Map a user-supplied theme name onto a known theme, else ``default``."""
    if not name:
        return DEFAULT_THEME.name
    candidate = str(name).strip().lower()
    if candidate in _THEMES:
        return candidate
    return DEFAULT_THEME.name


def resolve_theme(name: str | None, *, no_color: bool = False) -> UITheme:
    """Return the palette for ``name``; ``no_color`` always selects ``plain``."""
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
