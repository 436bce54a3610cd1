"""
Unit tests for identifier generation and order-id allocators.
"""

import re
from concurrent.futures import ThreadPoolExecutor

from slant3d_mock.domain.identifiers import (
    RandomIdAllocator,
    SequentialIdAllocator,
    generate_delay,
    generate_log_id,
    generate_order_id,
    generate_order_number,
    generate_request_id,
    generate_tracking_number,
    generate_webhook_id,
)


class TestFormats:
    def test_order_id_is_ten_digits(self):
        for _ in range(20):
            order_id = generate_order_id()
            assert re.fullmatch(r"[1-9]\d{9}", order_id)

    def test_order_number(self):
        assert re.fullmatch(r"ORD-\d{8}-\d{3}", generate_order_number())

    def test_tracking_number(self):
        pattern = re.compile(r"1Z\d{6}[A-Z]{2}\d{10}|(92|94)\d{20}")
        for _ in range(50):
            assert pattern.fullmatch(generate_tracking_number())

    def test_opaque_ids(self):
        assert re.fullmatch(r"wh_\d+_[0-9a-z]{9}", generate_webhook_id())
        assert re.fullmatch(r"log_\d+_[0-9a-z]{9}", generate_log_id())
        assert re.fullmatch(r"req_\d+_[0-9a-z]{9}", generate_request_id())

    def test_delay_within_bounds(self):
        for _ in range(20):
            assert 2000 <= generate_delay(2000, 5000) <= 5000
        assert generate_delay(0, 0) == 0
        assert 10 <= generate_delay(20, 10) <= 20


class TestSequentialIdAllocator:
    def test_starts_at_one_million(self):
        allocator = SequentialIdAllocator()
        assert allocator.next_id() == "1000000"
        assert allocator.next_id() == "1000001"
        assert allocator.peek() == 1000002

    def test_reset(self):
        allocator = SequentialIdAllocator(start=5)
        allocator.next_id()
        allocator.reset()
        assert allocator.next_id() == "5"

    def test_no_duplicates_under_threads(self):
        allocator = SequentialIdAllocator()
        with ThreadPoolExecutor(max_workers=8) as pool:
            ids = list(pool.map(lambda _: allocator.next_id(), range(400)))
        assert len(set(ids)) == 400
        assert allocator.peek() == 1000400


class TestRandomIdAllocator:
    def test_redraws_on_collision(self):
        seen = []

        def taken(candidate):
            seen.append(candidate)
            return len(seen) < 3

        order_id = RandomIdAllocator(taken=taken).next_id()

        assert len(seen) == 3
        assert order_id == seen[-1]

    def test_without_collision_check(self):
        assert len(RandomIdAllocator().next_id()) == 10
