"""
pctl - UI Components
Standardized headers and UI elements
"""

from rich.console import Console
from rich.markup import escape

LOGO = "pctl"

# Color scheme
BRAND_COLOR = "cyan"


def show_header(
    title: str,
    subtitle: str = None,
    details: dict = None,
    console: Console = None,
):
    """
    Display a standardized pctl command header.

    Args:
        title: Main title (e.g., "Deploy Stack", "Destroy Resources")
        subtitle: Optional subtitle line (may contain markup)
        details: Additional key-value pairs to display; values are printed literally
        console: Rich Console instance (creates new if None)

    Example:
        show_header(
            title="Deploy Stack",
            details={"Stack": "web", "Endpoint": "name 'prod'"}
        )
    """
    if console is None:
        console = Console()

    prefix = f" [bold color(214)]{LOGO}[/bold color(214)] [dim]›[/dim]"

    console.print(f"{prefix} [bold white]{title}[/bold white]")

    if subtitle:
        console.print(f"{prefix} [dim]{subtitle}[/dim]")

    if details:
        for key, value in details.items():
            value = escape(str(value))
            console.print(f"{prefix} {key}: [{BRAND_COLOR}]{value}[/{BRAND_COLOR}]")

    console.print()
