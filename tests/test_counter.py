from concurrent.futures import ThreadPoolExecutor

from edid import Codec


def test_counter_starts_at_zero_and_wraps():
    codec = Codec(max_counter=5)
    assert codec.counter == -1
    assert [codec.next_counter() for _ in range(5 + 2)] == [0, 1, 2, 3, 4, 5, 0]


def test_counter_wraps_at_resolved_maximum():
    codec = Codec(counter_len=1, max_counter=0)
    assert codec.max_counter == 57
    values = [codec.next_counter() for _ in range(57 + 2)]
    assert values == list(range(58)) + [0]


def test_generated_counters_cycle():
    codec = Codec(max_counter=2)
    counters = [
        codec.parse(codec.generate(shard=1).unwrap()).counter for _ in range(4)
    ]
    assert counters == [0, 1, 2, 0]


def test_shared_codec_hands_out_distinct_counters():
    codec = Codec(shard_count=0, max_counter=0)

    def take(_):
        return [codec.next_counter() for _ in range(200)]

    with ThreadPoolExecutor(max_workers=4) as pool:
        batches = list(pool.map(take, range(4)))

    values = [value for batch in batches for value in batch]
    assert sorted(values) == list(range(800))


def test_instances_keep_independent_counters():
    first, second = Codec(), Codec()
    first.next_counter()
    first.next_counter()
    assert second.next_counter() == 0
    assert first.counter == 1
