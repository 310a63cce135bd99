import pytest

from errors import InvalidGametype
from gametype import GAMETYPE_TAGS, Gametype, from_tag, to_tag


def test_tags():
    assert to_tag(Gametype.FREE_FOR_ALL) == "dm"
    assert to_tag(Gametype.TEAM_DEATHMATCH) == "war"
    assert to_tag(Gametype.DOMINATION) == "dom"
    assert to_tag(Gametype.SEARCH_AND_DESTROY) == "sd"
    assert to_tag(Gametype.HEADQUARTERS) == "koth"
    assert to_tag(Gametype.SABOTAGE) == "sab"


@pytest.mark.parametrize("gametype", list(Gametype))
def test_tag_round_trip(gametype):
    assert from_tag(to_tag(gametype)) is gametype
    assert Gametype.from_tag(gametype.tag) is gametype


def test_table_is_a_bijection():
    assert set(GAMETYPE_TAGS) == set(Gametype)
    assert len(set(GAMETYPE_TAGS.values())) == len(Gametype)


@pytest.mark.parametrize("tag", ["unknown", "", "SD", "sd ", None, ["sd"]])
def test_unknown_tag(tag):
    with pytest.raises(InvalidGametype) as info:
        from_tag(tag)
    assert info.value.tag == tag
    assert isinstance(info.value, ValueError)
