"""
Tracked roster: canonical player names, their in-match handles (puuids), and alias resolution.
Names are canonicalized here before anything is indexed, so a player's alt account and main
account land in the same entries.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from stackstats.schemas import Match, MatchParticipant

STACK_KEY_SEPARATOR = "-"


class UnknownPlayerError(KeyError):
    """A name or handle that does not belong to the tracked roster."""


def stack_key(names: Iterable[str]) -> str:
    """Canonical identity of a group: sorted names joined by "-". Order of input does not matter."""
    return STACK_KEY_SEPARATOR.join(sorted(names))


@dataclass
class Roster:
    """
    handles: display name (e.g. "Zed#NA1") -> participant handle (puuid).
    aliases: alternate display name -> canonical display name.
    """
    handles: dict[str, str]
    aliases: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self._name_by_handle = {handle: name for name, handle in self.handles.items()}

    def canonical_name(self, name: str) -> str:
        return self.aliases.get(name, name)

    def name_for_handle(self, handle: str) -> str | None:
        """Canonical name for a puuid, or None if the handle is not tracked."""
        name = self._name_by_handle.get(handle)
        if name is None:
            return None
        return self.canonical_name(name)

    def canonical_names(self) -> list[str]:
        """Distinct canonical names, roster order."""
        seen: dict[str, None] = {}
        for name in self.handles:
            seen.setdefault(self.canonical_name(name), None)
        return list(seen)

    def require_canonical(self, name: str) -> str:
        """Canonical name for a roster (or alias) name; raises UnknownPlayerError otherwise."""
        canonical = self.canonical_name(name)
        if canonical not in self.canonical_names():
            raise UnknownPlayerError(name)
        return canonical

    def tracked_participants(self, match: Match) -> list[tuple[str, MatchParticipant]]:
        """(canonical name, participant) for every tracked player in the match, participant order."""
        out: list[tuple[str, MatchParticipant]] = []
        for p in match.info.participants:
            name = self.name_for_handle(p.puuid)
            if name is not None:
                out.append((name, p))
        return out
