"""Shared test fixtures for smart-style-replacer."""

import pytest

from style_replacer.steps.marker_block import MarkerBlockTransformer
from style_replacer.steps.schemas import MarkerBlockConfig, Scene


@pytest.fixture
def transformer():
    return MarkerBlockTransformer()


@pytest.fixture
def right_aligned():
    return MarkerBlockConfig(marker=">r", style_name="RightAligned")


@pytest.fixture
def chat_scenes():
    return [
        Scene(contents="Intro line\n>r Hello there\nplain reply"),
        Scene(contents=None),
        Scene(contents=">r one\n>r two\n>rSomething"),
    ]
