"""Tests for tag-based recommendations."""

from app.models.tag import Tag
from app.youtube.recommendations import recommend, select_default_tags


def make_tags(**usage):
    return [Tag(name=name, usage_count=count) for name, count in usage.items()]


def test_select_default_tags_by_usage():
    tags = make_tags(music=5, jazz=9, rock=1, pop=7)
    assert select_default_tags(tags) == ["jazz", "pop", "music"]


def test_select_default_tags_ties_by_name():
    tags = make_tags(rock=2, jazz=2, music=2, pop=1)
    assert select_default_tags(tags) == ["jazz", "music", "rock"]


def test_select_default_tags_count_and_empty():
    assert select_default_tags(make_tags(music=1, jazz=2), count=1) == ["jazz"]
    assert select_default_tags([]) == []


async def test_recommend_uses_selection(gateway):
    result = await recommend(gateway, make_tags(jazz=10), selected=["rock"])

    assert result.tags == ["rock"]
    assert [video.youtube_id for video in result.videos] == ["vid3"]


async def test_recommend_defaults_to_top_tags(gateway):
    result = await recommend(gateway, make_tags(music=3, jazz=1, blues=0, folk=0))

    assert result.tags == ["music", "jazz", "blues"]
    assert [video.youtube_id for video in result.videos] == ["vid2", "vid1", "vid3"]


async def test_recommend_without_tags(gateway):
    result = await recommend(gateway, [])

    assert result.tags == []
    assert result.videos == []
