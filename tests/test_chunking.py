"""Tests for response chunking and continuation tokens."""

import base64
import json

from shaper_mcp.chunking import (
    chunk,
    decode_continuation_token,
    encode_continuation_token,
)
from shaper_mcp.truncation import DEPTH_LIMIT_MARKER


def _compact_size(value):
    return len(json.dumps(value, separators=(",", ":"), ensure_ascii=False))


class TestScalars:
    """Values that are never split."""

    def test_scalar_single_chunk(self):
        """Scalars become one chunk without a token."""
        chunks, token = chunk("hello")

        assert chunks == ["hello"]
        assert token is None

    def test_none_single_chunk(self):
        """None becomes one chunk."""
        chunks, token = chunk(None)

        assert chunks == [None]
        assert token is None

    def test_small_object_single_chunk(self):
        """Small mappings stay whole."""
        data = {"id": 1, "name": "test"}
        chunks, token = chunk(data)

        assert chunks == [data]
        assert token is None

    def test_empty_containers(self):
        """Empty containers produce one empty chunk."""
        assert chunk([]) == ([[]], None)
        assert chunk({}) == ([{}], None)


class TestSequenceChunking:
    """Greedy slicing of sequences."""

    def test_large_array_is_chunked(self):
        """A large array splits into several chunks with a token."""
        data = [{"id": i, "data": "x" * 100} for i in range(1000)]
        chunks, token = chunk(data, max_chunk_size=20000)

        assert len(chunks) > 1
        assert token
        assert decode_continuation_token(token) == {"kind": "sequence", "total": 1000}

    def test_round_trip(self):
        """Concatenating chunks reconstructs the input in order."""
        data = [{"id": i, "data": "x" * (i % 37)} for i in range(500)]
        chunks, _ = chunk(data, max_chunk_size=3000)

        rebuilt = [item for piece in chunks for item in piece]
        assert rebuilt == data

    def test_chunks_respect_budget(self):
        """Every chunk's compact JSON fits the budget."""
        data = [{"id": i, "data": "x" * 100} for i in range(1000)]
        chunks, _ = chunk(data, max_chunk_size=20000)

        for piece in chunks:
            assert _compact_size(piece) <= 20000

    def test_oversized_element_isolated(self):
        """An element larger than the budget gets its own chunk."""
        data = ["a", "x" * 500, "b"]
        chunks, token = chunk(data, max_chunk_size=50)

        assert chunks == [["a"], ["x" * 500], ["b"]]
        assert token is not None

    def test_tuple_input(self):
        """Tuples are chunked like lists."""
        chunks, token = chunk((1, 2, 3))

        assert chunks == [[1, 2, 3]]
        assert token is None


class TestMappingChunking:
    """Greedy grouping of key/value pairs."""

    def test_large_object_is_chunked(self):
        """A large mapping splits by properties."""
        data = {f"key{i}": "x" * 100 for i in range(500)}
        chunks, token = chunk(data, max_chunk_size=20000)

        assert len(chunks) > 1
        assert decode_continuation_token(token) == {
            "kind": "mapping",
            "keys": list(data.keys()),
        }

    def test_round_trip_preserves_order(self):
        """Merging chunks restores every pair in the original order."""
        data = {f"key{i}": "x" * (i % 50) for i in range(300)}
        chunks, _ = chunk(data, max_chunk_size=1000)

        merged = {}
        for piece in chunks:
            assert not set(piece) & set(merged)
            merged.update(piece)

        assert list(merged.items()) == list(data.items())

    def test_chunks_respect_budget(self):
        """Every mapping chunk's compact JSON fits the budget."""
        data = {f"key{i}": "x" * 100 for i in range(500)}
        chunks, _ = chunk(data, max_chunk_size=20000)

        for piece in chunks:
            assert _compact_size(piece) <= 20000

    def test_oversized_pair_isolated(self):
        """A pair larger than the budget flushes the group and stands alone."""
        data = {"small1": "a", "big": "x" * 500, "small2": "b"}
        chunks, _ = chunk(data, max_chunk_size=100)

        assert chunks == [{"small1": "a"}, {"big": "x" * 500}, {"small2": "b"}]

    def test_oversized_pair_is_truncated(self):
        """An oversized pair goes through truncation before emission."""
        data = {"a": 1, "big": list(range(1000))}
        chunks, _ = chunk(data, max_chunk_size=100, max_array_items=5)

        assert chunks == [{"a": 1}, {"big": [0, 1, 2, 3, 4, "... 995 more items"]}]

    def test_oversized_pair_depth_truncated(self):
        """Depth limits apply to an oversized pair as well."""
        data = {"big": {"inner": {"deeper": "x" * 500}}}
        chunks, _ = chunk(data, max_chunk_size=100, max_object_depth=1)

        assert chunks == [{"big": {"inner": DEPTH_LIMIT_MARKER}}]


class TestContinuationTokens:
    """Token encoding and decoding."""

    def test_token_is_base64_json(self):
        """Tokens are base64-encoded compact JSON."""
        token = encode_continuation_token({"kind": "sequence", "total": 3})
        assert json.loads(base64.b64decode(token)) == {"kind": "sequence", "total": 3}

    def test_tokens_are_deterministic(self):
        """Chunking the same value twice yields the same token."""
        data = list(range(2000))
        assert chunk(data, max_chunk_size=100).continuation_token == chunk(
            data, max_chunk_size=100
        ).continuation_token

    def test_decode_rejects_garbage(self):
        """Malformed tokens decode to None."""
        assert decode_continuation_token("") is None
        assert decode_continuation_token("not base64!!") is None
        assert decode_continuation_token(base64.b64encode(b"not json").decode()) is None

    def test_decode_rejects_unknown_kind(self):
        """Tokens with an unknown kind decode to None."""
        token = encode_continuation_token({"kind": "bogus"})
        assert decode_continuation_token(token) is None
