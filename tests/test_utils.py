# -*- coding: utf-8 -*-

import os

import pytest
from fs.memoryfs import MemoryFS

import fstash
from fstash import utils as u


@pytest.mark.parametrize(
    "name,expected",
    [
        ("foo", "foo"),
        ("FooBar", "foobar"),
        ("  My-Stash_1 \n", "my-stash_1"),
        ("\tx\t", "x"),
        ("", ""),
        ("   ", ""),
        ("Bad Name!", "bad name!"),
    ],
)
def test_normalize_name(name, expected):
    assert u.normalize_name(name) == expected
    assert u.normalize_name(u.normalize_name(name)) == u.normalize_name(name)


@pytest.mark.parametrize(
    "name,valid",
    [
        ("foo", True),
        ("Foo-Bar_09", True),
        ("-", True),
        ("_", True),
        ("", False),
        ("bad name!", False),
        ("foo/bar", False),
        ("..", False),
        ("foo\n", False),
        ("fo.o", False),
        ("café", False),
    ],
)
def test_validate_name(name, valid):
    assert u.validate_name(name) is valid


@pytest.mark.parametrize(
    "data,digest",
    [
        (b"", 0xCBF29CE484222325),
        (b"a", 0xAF63DC4C8601EC8C),
        (b"foobar", 0x85944171F73967E8),
    ],
)
def test_fnv1a_64(data, digest):
    assert u.fnv1a_64(data) == digest


def test_fold():
    assert u.fold(0xAF63DC4C8601EC8C) == bytes([0x29, 0x62, 0x30, 0xC0])


@pytest.mark.parametrize(
    "name,parts",
    [
        ("", ["4F", "D0", "BF", "C1"]),
        ("a", ["29", "62", "30", "C0"]),
        ("foobar", ["72", "AD", "26", "99"]),
    ],
)
def test_shard_key(name, parts):
    assert u.shard_key(name) == parts


def test_shard_key_format():
    for name in ("x", "project-skeleton", "some_other_name", "0"):
        parts = u.shard_key(name)

        assert len(parts) == 4
        assert all(len(part) == 2 for part in parts)
        assert all(part == part.upper() for part in parts)
        assert all(int(part, 16) < 256 for part in parts)


def test_derive():
    assert u.derive("foobar") == "72/AD/26/99/foobar"
    assert u.derive("  FooBar ") == u.derive("foobar")
    assert u.derive("a") == u.derive("a")


def test_shard_depth():
    assert u.shard("foobar", depth=2) == ["72", "AD", "foobar"]
    assert u.shard("foobar", depth=0) == ["foobar"]


def test_compact():
    assert u.compact(["a", "", None, "b", 0]) == ["a", "b"]


def test_opened_missing(tmpdir):
    missing = str(tmpdir.join("missing"))

    with pytest.raises(fstash.SourceNotFound):
        with u.opened(missing):
            pass

    assert not os.path.exists(missing)


def test_opened_create(tmpdir):
    path = str(tmpdir.join("new"))

    with u.opened(path, create=True) as filesystem:
        assert filesystem.isdir("/")

    assert os.path.isdir(path)
    assert filesystem.isclosed()


def test_opened_leaves_filesystem_open():
    mem = MemoryFS()

    with u.opened(mem) as filesystem:
        assert filesystem is mem

    assert not mem.isclosed()


def test_check_name():
    assert u.check_name("  Demo ") == "demo"

    with pytest.raises(fstash.InvalidName):
        u.check_name("bad name!")
