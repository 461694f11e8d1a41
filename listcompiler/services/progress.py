from __future__ import annotations

import sys
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

"""Progress display with tqdm (TTY only).

One bar per run, advancing once per compiled list. In non-TTY environments
(CI, redirected output) no bar is created so the log stays free of ANSI
control sequences.
"""

__all__ = [
    "ListProgressTracker",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    return sys.stdout.isatty()


class ListProgressTracker:
    """Progress tracker over the lists of one compilation run."""

    def __init__(self, total_lists: int, *, description: str = "Compiling lists") -> None:
        self.total_lists = total_lists
        self.description = description
        self.current_list = 0

        self.enabled = is_tty_enabled()
        self.pbar: TqdmType[Any] | None
        if self.enabled:
            self.pbar = tqdm(
                total=total_lists,
                desc=description,
                unit="list",
                disable=False,
                leave=True,
                position=0,
                ncols=80,
                ascii=True,
            )
        else:
            self.pbar = None

    def start_list(self, list_name: str) -> None:
        self.current_list += 1
        if self.enabled and self.pbar is not None:
            self.pbar.set_description(f"{self.description} ({list_name})")

    def finish_list(self, entries: int = 0) -> None:
        if self.enabled and self.pbar is not None:
            self.pbar.update(1)
            self.pbar.set_postfix(entries=entries)
            self.pbar.set_description(self.description)

    def close(self) -> None:
        if self.enabled and self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> ListProgressTracker:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
