from rich.console import Console
from rich.theme import Theme

from perfgate.common.models import Outcome

_perfgate_theme = Theme(
    {
        "bold": "bold",
        "success": "green bold",
        "error": "red bold",
        "warning": "yellow bold",
        "info": "blue bold",
    }
)

_OUTCOME_STYLES = {
    Outcome.SUCCESS: "success",
    Outcome.UNSTABLE: "warning",
    Outcome.FAILURE: "error",
}


_console: Console | None = None


def get_console(force_terminal: bool | None = None) -> Console:
    global _console

    if _console is None or force_terminal is not None:
        _console = Console(
            theme=_perfgate_theme,
            force_terminal=force_terminal,
            legacy_windows=False,
        )

    return _console


def outcome_style(outcome: Outcome) -> str:
    return _OUTCOME_STYLES[outcome]


def print_outcome(outcome: Outcome) -> None:
    console = get_console()
    style = outcome_style(outcome)
    console.print(f"[{style}]Build status: {outcome}[/{style}]")
