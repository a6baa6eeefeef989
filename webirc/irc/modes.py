"""Channel mode string walking."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

# Defaults matching common ircd CHANMODES/PREFIX values:
# list modes (beI), key (k) and membership prefixes (qaohv) always take an
# argument; the limit (l) takes one only when set.
ALWAYS_PARAM_MODES = "beIkqaohv"
SET_PARAM_MODES = "l"


@dataclass(frozen=True, slots=True)
class ModeChange:
    sign: str
    mode: str
    argument: str | None = None

    @property
    def adding(self) -> bool:
        return self.sign == "+"


def parse_mode_changes(
    modes: str,
    args: Sequence[str] = (),
    *,
    always_param: str = ALWAYS_PARAM_MODES,
    set_param: str = SET_PARAM_MODES,
) -> tuple[ModeChange, ...]:
    """Pair every flag in ``modes`` with its argument.

    ``"+o-v", ["alice", "bob"]`` yields ``(+o alice), (-v bob)``. A flag
    missing its argument gets ``None``; a string without a leading sign is
    read as ``+``. Unknown flags are assumed to take no argument.
    """
    changes: list[ModeChange] = []
    sign = "+"
    index = 0
    for ch in modes:
        if ch in "+-":
            sign = ch
            continue
        if ch in always_param or (ch in set_param and sign == "+"):
            argument = args[index] if index < len(args) else None
            index += 1
            changes.append(ModeChange(sign, ch, argument))
        else:
            changes.append(ModeChange(sign, ch))
    return tuple(changes)
