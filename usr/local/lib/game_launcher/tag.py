#!/usr/bin/env python3
# =============================================================================
# PROJECT:      GameLauncher - Tag Query
# VERSION:      1.0.0 - Python
# DESCRIPTION:  Comma-separated tag groups ("rpg,!wine") evaluated against
#               a game's tags. One group is an AND of possibly negated tags;
#               several groups are OR-ed by the caller.
# PHILOSOPHY:   KISS (Keep It Simple, Stupid)
# PATH:         /usr/local/lib/game_launcher/tag.py
# LICENSE:      MIT
# =============================================================================

from dataclasses import dataclass

NOT_PREFIX = "!"
SEPARATOR = ","


@dataclass(frozen=True)
class Tag:
    """A single literal of a tag group."""

    name: str
    is_negated: bool = False

    def satisfied_by(self, tag_set):
        """True when the literal holds for the given set of tags."""
        return (self.name in tag_set) != self.is_negated


class TagGroup:
    """Conjunction of tags parsed from one query string."""

    def __init__(self, tags):
        self.tags = tuple(tags)

    @classmethod
    def parse(cls, query):
        """Any string is a valid query; no escaping of ',' or '!'."""
        tags = []
        for raw in query.split(SEPARATOR):
            if raw.startswith(NOT_PREFIX):
                tags.append(Tag(raw[len(NOT_PREFIX):], True))
            else:
                tags.append(Tag(raw))
        return cls(tags)

    def matches(self, candidate_tags):
        """True iff every tag of the group is satisfied."""
        tag_set = set(candidate_tags)
        return all(tag.satisfied_by(tag_set) for tag in self.tags)

    def __repr__(self):
        body = SEPARATOR.join(
            f"{NOT_PREFIX if t.is_negated else ''}{t.name}" for t in self.tags
        )
        return f"TagGroup({body!r})"


def game_matches_tags(game, queries):
    """
    A game is selected when any query group matches either its tags or
    its own id, which doubles as an implicit tag.
    """
    own_id = (game.id,)
    for query in queries:
        group = TagGroup.parse(query)
        if group.matches(game.tags) or group.matches(own_id):
            return True
    return False
