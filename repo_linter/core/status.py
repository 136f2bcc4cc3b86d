"""Check status lattice."""

from enum import Enum


class CheckStatus(Enum):
    """
    Traffic-light verdict of a single check.

    GRAY means "not evaluated yet". Only RED fails a lint run.
    """
    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"
    GRAY = "gray"

    @property
    def icon(self) -> str:
        return STATUS_ICONS[self]

    @property
    def is_failing(self) -> bool:
        return self is CheckStatus.RED


STATUS_ICONS: dict[CheckStatus, str] = {
    CheckStatus.GREEN: "✅",
    CheckStatus.YELLOW: "⚠️",
    CheckStatus.RED: "❌",
    CheckStatus.GRAY: "🔘",
}

# Rich styles used by the console reporter
STATUS_STYLES: dict[CheckStatus, str] = {
    CheckStatus.GREEN: "green",
    CheckStatus.YELLOW: "yellow",
    CheckStatus.RED: "red",
    CheckStatus.GRAY: "dim",
}
