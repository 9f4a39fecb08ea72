from datetime import datetime, timezone

import pytest

from edid import Codec


def utc_ms(year: int, month: int = 1, day: int = 1) -> int:
    return int(datetime(year, month, day, tzinfo=timezone.utc).timestamp() * 1000)


EPOCH_2015 = utc_ms(2015)


@pytest.fixture
def codec():
    return Codec()


@pytest.fixture
def parent_id(codec):
    return codec.generate(shard=7, time=utc_ms(2015, 2, 1), counter=10).unwrap()
