"""Shared fixtures for core unit tests"""

import pytest

from craftpub.config import DEFAULT_MARKERS
from craftpub.core.utils.keys import KeyFactory

from craft_blocks import StubUploader


@pytest.fixture(name="markers")
def markers_fixture():
    return dict(DEFAULT_MARKERS)


@pytest.fixture(name="keys")
def keys_fixture():
    return KeyFactory()


@pytest.fixture(name="uploader")
def uploader_fixture():
    return StubUploader()
