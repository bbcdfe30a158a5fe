"""Interactive prompt collaborator.

Workflows ask for input through the Prompter interface so they can be driven by
scripted answers in tests. The click-backed implementation bounds every prompt
with a wall-clock timeout: the prompt runs on a daemon thread and the caller
gives up with operation-cancelled when no answer arrives in time.
"""

import threading
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

import click

from agt.core.errors import ClassifiedError, ErrorKind

T = TypeVar("T")

DEFAULT_PROMPT_TIMEOUT_SECONDS = 5 * 60


@dataclass(frozen=True)
class Choice(Generic[T]):
    label: str
    value: T


class Prompter(ABC):
    """Abstract interface for asking the user questions."""

    @abstractmethod
    def text(self, message: str, *, default: str = "", required: bool = False) -> str:
        """Ask for free text.

        Args:
            message: Question shown to the user
            default: Answer used when the user just presses Enter
            required: Re-ask until a non-blank answer is given
        """
        ...

    @abstractmethod
    def confirm(self, message: str, *, default: bool = False) -> bool:
        ...

    @abstractmethod
    def select(self, message: str, choices: Sequence[Choice[T]], *, default: T | None = None) -> T:
        """Ask the user to pick exactly one choice."""
        ...

    @abstractmethod
    def multi_select(
        self,
        message: str,
        choices: Sequence[Choice[T]],
        *,
        preselected: Sequence[T] = (),
    ) -> list[T]:
        """Ask the user to pick any number of choices (possibly none)."""
        ...


def parse_selection(raw: str, count: int) -> list[int] | None:
    """Parse "1, 3" into zero-based indexes. Returns None on any bad entry."""
    indexes: list[int] = []
    for part in raw.split(","):
        item = part.strip()
        if not item:
            continue
        if not item.isdigit():
            return None
        index = int(item) - 1
        if index < 0 or index >= count:
            return None
        if index not in indexes:
            indexes.append(index)
    return indexes


class ClickPrompter(Prompter):
    """Prompter backed by click.prompt/click.confirm with a timeout per question."""

    def __init__(self, timeout_seconds: float = DEFAULT_PROMPT_TIMEOUT_SECONDS) -> None:
        self._timeout_seconds = timeout_seconds

    def _ask(self, ask: Callable[[], T]) -> T:
        outcome: dict[str, object] = {}
        done = threading.Event()

        def target() -> None:
            try:
                outcome["value"] = ask()
            except BaseException as e:  # handed back to the waiting thread
                outcome["error"] = e
            finally:
                done.set()

        thread = threading.Thread(target=target, name="agt-prompt", daemon=True)
        thread.start()
        if not done.wait(self._timeout_seconds):
            click.echo("", err=True)
            raise ClassifiedError(
                ErrorKind.OPERATION_CANCELLED,
                f"No input received within {self._timeout_seconds:g}s",
            )
        if "error" in outcome:
            raise outcome["error"]  # type: ignore[misc]
        return outcome["value"]  # type: ignore[return-value]

    def text(self, message: str, *, default: str = "", required: bool = False) -> str:
        def ask() -> str:
            while True:
                answer = click.prompt(
                    message, default=default, show_default=bool(default), err=True
                )
                if answer.strip() or not required:
                    return answer.strip()
                click.echo(click.style("This field is required.", fg="yellow"), err=True)

        return self._ask(ask)

    def confirm(self, message: str, *, default: bool = False) -> bool:
        return self._ask(lambda: click.confirm(message, default=default, err=True))

    def select(self, message: str, choices: Sequence[Choice[T]], *, default: T | None = None) -> T:
        if not choices:
            raise ClassifiedError(ErrorKind.INVALID_INPUT, f"No choices available for: {message}")

        default_index = 1
        for index, choice in enumerate(choices, start=1):
            if default is not None and choice.value == default:
                default_index = index

        def ask() -> T:
            click.echo(message, err=True)
            for index, choice in enumerate(choices, start=1):
                click.echo(f"  {index}) {choice.label}", err=True)
            picked = click.prompt(
                "Choice",
                type=click.IntRange(1, len(choices)),
                default=default_index,
                err=True,
            )
            return choices[picked - 1].value

        return self._ask(ask)

    def multi_select(
        self,
        message: str,
        choices: Sequence[Choice[T]],
        *,
        preselected: Sequence[T] = (),
    ) -> list[T]:
        if not choices:
            return []

        defaults = [
            str(index) for index, choice in enumerate(choices, start=1) if choice.value in preselected
        ]

        def ask() -> list[T]:
            click.echo(message, err=True)
            for index, choice in enumerate(choices, start=1):
                click.echo(f"  {index}) {choice.label}", err=True)
            while True:
                raw = click.prompt(
                    "Numbers, comma-separated (Enter to skip)",
                    default=",".join(defaults),
                    show_default=bool(defaults),
                    err=True,
                )
                indexes = parse_selection(raw, len(choices))
                if indexes is not None:
                    return [choices[index].value for index in indexes]
                click.echo(
                    click.style(f"Enter numbers between 1 and {len(choices)}.", fg="yellow"),
                    err=True,
                )

        return self._ask(ask)
