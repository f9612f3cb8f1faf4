"""
Worldview Upload - UI Components
Standardized command header
"""

from rich.console import Console
from rich.text import Text

LOGO = "worldview"

# Color scheme
BRAND_COLOR = "color(214)"
DETAIL_COLOR = "cyan"


def _prefix() -> Text:
    return Text.assemble((f" {LOGO}", f"bold {BRAND_COLOR}"), (" › ", "dim"))


def show_header(
    title: str,
    details: dict = None,
    console: Console = None,
):
    """
    Display a standardized command header.

    Args:
        title: Main title (e.g., "Upload")
        details: Additional key-value pairs to display
        console: Rich Console instance (creates new if None)

    Example:
        show_header(
            title="Upload",
            details={"Deployment": "mysite", "Target": "deploy@h1:/srv/app"}
        )
    """
    if console is None:
        console = Console()

    console.print(_prefix() + Text(title, style="bold white"))

    if details:
        for key, value in details.items():
            console.print(_prefix() + Text(f"{key}: ") + Text(str(value), style=DETAIL_COLOR))

    console.print()
