"""Tests for content extraction."""

import pytest

from jar_cartography.exceptions import ArchiveReadError, TruncatedContentError
from jar_cartography.info import ResourceInfo
from jar_cartography.jar.content import fill_contents, read_fully
from jar_cartography.jar.models import StreamEntry
from jar_cartography.models import Cartography, CartographyRequest, Resource
from tests.helpers import (
    create_prefixed_jar,
    create_streamed_jar,
    create_test_jar,
    scan,
)


class TrickleStream:
    """Stream giving at most ``step`` bytes per read."""

    def __init__(self, data: bytes, step: int = 3) -> None:
        self.data = data
        self.step = step
        self.entry = StreamEntry("a.txt", 8, 0, 0, -1, len(data))
        self.reads = 0

    def read(self, size: int) -> bytes:
        self.reads += 1
        chunk = self.data[: min(size, self.step)]
        self.data = self.data[len(chunk):]
        return chunk


def test_read_fully_keeps_reading_short_reads():
    """Test that short reads are retried until the count is reached."""
    stream = TrickleStream(b"0123456789")
    assert read_fully(stream, 10) == b"0123456789"
    assert stream.reads == 4


def test_read_fully_stops_at_expected_count():
    """Test that nothing past the expected count is read."""
    stream = TrickleStream(b"0123456789", step=100)
    assert read_fully(stream, 4) == b"0123"
    assert stream.data == b"456789"


def test_read_fully_unknown_size():
    """Test reading up to the end of an entry of unknown size."""
    stream = TrickleStream(b"0123456789")
    assert read_fully(stream, -1) == b"0123456789"


def test_read_fully_truncated():
    """Test that an entry shorter than expected is an error."""
    stream = TrickleStream(b"01234")
    with pytest.raises(TruncatedContentError) as excinfo:
        read_fully(stream, 10)

    assert excinfo.value.entry_name == "a.txt"
    assert excinfo.value.expected == 10
    assert excinfo.value.actual == 5
    assert isinstance(excinfo.value, ArchiveReadError)


def test_fill_contents_round_trip(sample_jar):
    """Test that contents match the stored bytes."""
    cartography = scan(sample_jar, ResourceInfo.FILE)
    fill_contents(cartography)

    assert cartography.get_resource("a.txt").content == b"hello a"
    content = cartography.get_resource("dir/b.txt").content
    assert len(content) == cartography.get_resource("dir/b.txt").size
    assert content == b"hello b" * 100


def test_fill_contents_not_requested(sample_jar):
    """Test that no content is read unless requested."""
    cartography = scan(sample_jar, ResourceInfo.FILE_INFO)
    fill_contents(cartography)
    assert all(r.content is None for r in cartography.resources.values())


def test_fill_contents_only_for_mapped_entries(sample_jar):
    """Test that filtered out entries are read but not kept."""
    cartography = scan(sample_jar, ResourceInfo.FILE, pattern="dir/.*")
    fill_contents(cartography)

    assert set(cartography.resources) == {"dir/b.txt"}
    assert cartography.get_resource("dir/b.txt").content == b"hello b" * 100


def test_fill_contents_skips_directories(sample_jar):
    """Test that directories never get content."""
    cartography = scan(sample_jar, ResourceInfo.FULL)
    fill_contents(cartography)

    assert cartography.get_resource("dir/").content is None
    assert cartography.get_resource("a.txt").content == b"hello a"


def test_fill_contents_without_size(sample_jar):
    """Test that the stream size is used when the size was not requested."""
    cartography = scan(sample_jar, ResourceInfo.CONTENT)
    fill_contents(cartography)

    resource = cartography.get_resource("dir/b.txt")
    assert resource.size is None
    assert resource.content == b"hello b" * 100


def test_fill_contents_data_descriptors(tmp_path):
    """Test contents of entries whose sizes follow their data."""
    entries = {"a.txt": b"hello a", "b.txt": b"hello b" * 3000}
    path = create_streamed_jar(tmp_path / "streamed.jar", entries)

    cartography = scan(path, ResourceInfo.CONTENT)
    fill_contents(cartography)
    for name, data in entries.items():
        assert cartography.get_resource(name).content == data


def test_fill_contents_truncated(tmp_path):
    """Test that a resource longer than its entry is an error."""
    path = create_test_jar(tmp_path / "test.jar", {"a.txt": b"hello"})
    cartography = Cartography(
        CartographyRequest.create(str(path), ResourceInfo.FILE)
    )
    resource = Resource(name="a.txt", size=100)
    cartography.add_resource("a.txt", resource)

    with pytest.raises(TruncatedContentError):
        fill_contents(cartography)
    assert resource.content is None


def test_fill_contents_missing_jar(tmp_path):
    """Test that a jar removed between passes is an I/O failure."""
    cartography = Cartography(
        CartographyRequest.create(str(tmp_path / "gone.jar"), ResourceInfo.CONTENT)
    )
    with pytest.raises(ArchiveReadError):
        fill_contents(cartography)


def test_fill_contents_unreached_entry(tmp_path):
    """Test that a mapped file the stream never meets is an error."""
    path = create_test_jar(tmp_path / "test.jar", {"a.txt": b"hello"})
    cartography = scan(path, ResourceInfo.FILE)
    cartography.add_resource("ghost.txt", Resource(name="ghost.txt"))

    with pytest.raises(ArchiveReadError, match="ghost.txt"):
        fill_contents(cartography)


def test_fill_contents_prefixed_jar(tmp_path):
    """Test contents of a jar preceded by a launcher script."""
    prefix = b"#!/bin/sh\nexec java -jar \"$0\" \"$@\"\n"
    path = create_prefixed_jar(tmp_path / "run.jar", {"a.txt": b"hello"}, prefix)
    cartography = scan(path, ResourceInfo.FILE)

    with pytest.raises(ArchiveReadError, match="a.txt"):
        fill_contents(cartography)

    fill_contents(cartography, start_offset=len(prefix))
    assert cartography.get_resource("a.txt").content == b"hello"
