from __future__ import annotations

import errno
import io
import unittest
from pathlib import Path
from tempfile import TemporaryDirectory
from unittest.mock import patch

import xxhash

from tests.helpers import RecordingObserver, file_digest
from treehash.errors import FileOpenError, FileReadError
from treehash.util.hashing import CHUNK_SIZE, Hasher, hash_file, render_digest


class FailingReader(io.FileIO):
    """Real file handle whose second read fails."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.reads = 0

    def readinto(self, buffer):  # type: ignore[override]
        self.reads += 1
        if self.reads > 1:
            raise OSError(errno.EIO, "Input/output error")
        return super().readinto(buffer)


class HasherTests(unittest.TestCase):
    def test_chunking_does_not_change_digest(self) -> None:
        payload = bytes(range(256)) * 1000 + b"tail"

        whole = Hasher()
        whole.update(payload)

        for size in (1, 7, 255, 4096, 65537):
            chunked = Hasher()
            for idx in range(0, len(payload), size):
                chunked.update(payload[idx : idx + size])
            self.assertEqual(chunked.digest(), whole.digest(), msg=f"chunk size {size}")

    def test_reset_discards_previous_stream(self) -> None:
        reused = Hasher()
        reused.update(b"stream A, which must not leak")
        reused.digest()
        reused.reset()
        reused.update(b"stream B")

        fresh = Hasher()
        fresh.update(b"stream B")

        self.assertEqual(reused.digest(), fresh.digest())

    def test_digest_does_not_reset(self) -> None:
        hasher = Hasher()
        hasher.update(b"abc")
        first = hasher.digest()
        self.assertEqual(hasher.digest(), first)
        hasher.update(b"def")
        self.assertEqual(hasher.digest(), xxhash.xxh3_128_intdigest(b"abcdef"))

    def test_matches_xxh3_128(self) -> None:
        hasher = Hasher()
        hasher.update(b"hello world")
        self.assertEqual(hasher.hexdigest(), xxhash.xxh3_128_hexdigest(b"hello world").upper())


class RenderDigestTests(unittest.TestCase):
    def test_zero_renders_full_width(self) -> None:
        self.assertEqual(render_digest(0), "0" * 32)

    def test_leading_zero_bytes_are_padded(self) -> None:
        rendered = render_digest(0xABC)
        self.assertEqual(len(rendered), 32)
        self.assertEqual(rendered, "0" * 29 + "ABC")

    def test_max_value_is_uppercase(self) -> None:
        self.assertEqual(render_digest(2**128 - 1), "F" * 32)

    def test_out_of_range_rejected(self) -> None:
        with self.assertRaises(ValueError):
            render_digest(2**128)
        with self.assertRaises(ValueError):
            render_digest(-1)


class HashFileTests(unittest.TestCase):
    def test_hash_file_matches_in_memory_digest(self) -> None:
        payload = b"x" * 10_000 + b"y"
        with TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "data.bin"
            path.write_bytes(payload)

            digest = hash_file(str(path), hasher=Hasher(), buffer=bytearray(1024))

        self.assertEqual(digest, xxhash.xxh3_128_hexdigest(payload).upper())

    def test_buffer_size_does_not_change_digest(self) -> None:
        with TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "data.bin"
            path.write_bytes(bytes(range(256)) * 300)

            small = file_digest(str(path), chunk_size=3)
            large = file_digest(str(path), chunk_size=CHUNK_SIZE)

        self.assertEqual(small, large)

    def test_reused_hasher_between_files(self) -> None:
        with TemporaryDirectory() as tmpdir:
            first = Path(tmpdir) / "first.bin"
            second = Path(tmpdir) / "second.bin"
            first.write_bytes(b"first file contents")
            second.write_bytes(b"second")

            hasher = Hasher()
            buffer = bytearray(4)
            hash_file(str(first), hasher=hasher, buffer=buffer)
            digest = hash_file(str(second), hasher=hasher, buffer=buffer)

            self.assertEqual(digest, file_digest(str(second)))

    def test_empty_file(self) -> None:
        with TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "empty"
            path.write_bytes(b"")
            self.assertEqual(file_digest(str(path)), xxhash.xxh3_128_hexdigest(b"").upper())

    def test_observer_receives_progress(self) -> None:
        observer = RecordingObserver()
        with TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "data.bin"
            path.write_bytes(b"0123456789")
            hash_file(str(path), hasher=Hasher(), buffer=bytearray(4), observer=observer)

        kinds = [event[0] for event in observer.events]
        self.assertEqual(kinds, ["start", "chunk", "chunk", "chunk", "finish"])
        self.assertEqual(observer.events[0][2], 10)
        self.assertEqual(sum(e[2] for e in observer.events if e[0] == "chunk"), 10)

    def test_missing_file_raises_open_error(self) -> None:
        with TemporaryDirectory() as tmpdir:
            missing = str(Path(tmpdir) / "nope.txt")
            with self.assertRaises(FileOpenError) as ctx:
                file_digest(missing)
        self.assertEqual(ctx.exception.path, missing)
        self.assertIsInstance(ctx.exception.cause, FileNotFoundError)

    def test_read_error_mid_stream_raises_read_error(self) -> None:
        observer = RecordingObserver()
        with TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "flaky.bin"
            path.write_bytes(b"a" * 100)

            with patch(
                "treehash.util.hashing.open",
                create=True,
                side_effect=lambda p, mode, buffering: FailingReader(p, "rb"),
            ):
                with self.assertRaises(FileReadError):
                    hash_file(str(path), hasher=Hasher(), buffer=bytearray(10), observer=observer)

        self.assertEqual(observer.events[-1][0], "finish")


if __name__ == "__main__":
    unittest.main()
