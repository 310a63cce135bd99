from enum import Enum

from errors import InvalidGametype


class Gametype(Enum):
    FREE_FOR_ALL = "FreeForAll"
    TEAM_DEATHMATCH = "TeamDeathmatch"
    DOMINATION = "Domination"
    SEARCH_AND_DESTROY = "SearchAndDestroy"
    HEADQUARTERS = "Headquarters"
    SABOTAGE = "Sabotage"

    @property
    def tag(self) -> str:
        return to_tag(self)

    @classmethod
    def from_tag(cls, tag: str) -> "Gametype":
        return from_tag(tag)


# Tags understood by the server's g_gametype dvar.
GAMETYPE_TAGS: dict[Gametype, str] = {
    Gametype.FREE_FOR_ALL: "dm",
    Gametype.TEAM_DEATHMATCH: "war",
    Gametype.DOMINATION: "dom",
    Gametype.SEARCH_AND_DESTROY: "sd",
    Gametype.HEADQUARTERS: "koth",
    Gametype.SABOTAGE: "sab",
}

GAMETYPES_BY_TAG: dict[str, Gametype] = {tag: gametype for gametype, tag in GAMETYPE_TAGS.items()}


def to_tag(gametype: Gametype) -> str:
    return GAMETYPE_TAGS[gametype]


def from_tag(tag: str) -> Gametype:
    try:
        return GAMETYPES_BY_TAG[tag]
    except (KeyError, TypeError) as exc:
        raise InvalidGametype(tag) from exc
