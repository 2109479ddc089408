"""Tests for TreeWalker end to end on real temporary trees."""

from __future__ import annotations

import hashlib
import os
from pathlib import Path

import pytest

from treedigest.errors import AccessError, InvalidInputError, UnsupportedAlgorithmError
from treedigest.fs.kinds import EntryKind
from treedigest.walk import TreeWalker, WalkOptions, digest_tree, iter_tree

EMPTY_SHA256 = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"

needs_symlink = pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
needs_fifo = pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="FIFOs unavailable")


def sha256(data: bytes) -> bytes:
    return hashlib.sha256(data).digest()


@pytest.fixture
def root(tmp_path):
    """An empty tree root with no symlinks in its own path."""
    r = Path(os.path.realpath(tmp_path)) / "r"
    r.mkdir()
    return r


def run(path, **opts):
    lines: list[str] = []
    result = TreeWalker(WalkOptions(**opts), emit=lines.append).walk(str(path))
    return lines, result


# ── iter_tree ────────────────────────────────────────────────────────────────

class TestIterTree:

    def test_preorder(self, root):
        (root / "sub").mkdir()
        (root / "sub" / "b").write_text("b")
        (root / "a").write_text("a")
        paths = list(iter_tree(str(root)))
        assert paths[0] == str(root)
        assert sorted(paths) == sorted([
            str(root), str(root / "a"), str(root / "sub"), str(root / "sub" / "b"),
        ])
        assert paths.index(str(root / "sub")) < paths.index(str(root / "sub" / "b"))

    def test_file_root(self, root):
        (root / "a").write_text("a")
        assert list(iter_tree(str(root / "a"))) == [str(root / "a")]

    @needs_symlink
    def test_symlinked_directory_not_descended(self, root):
        (root / "sub").mkdir()
        (root / "sub" / "b").write_text("b")
        os.symlink("sub", root / "ld")
        paths = list(iter_tree(str(root)))
        assert str(root / "ld") in paths
        assert str(root / "ld" / "b") not in paths

    @needs_symlink
    def test_symlink_root_descended_only_when_followed(self, root):
        (root / "real").mkdir()
        (root / "real" / "a").write_text("a")
        os.symlink("real", root / "link")
        link = str(root / "link")
        assert list(iter_tree(link)) == [link]
        assert list(iter_tree(link, follow_root=True)) == [link, str(root / "link" / "a")]

    @pytest.mark.skipif(hasattr(os, "geteuid") and os.geteuid() == 0,
                        reason="root can read any directory")
    def test_unreadable_directory_is_fatal(self, root):
        locked = root / "locked"
        locked.mkdir()
        locked.chmod(0)
        try:
            with pytest.raises(AccessError):
                list(iter_tree(str(root)))
        finally:
            locked.chmod(0o755)


# ── Per-entry output ─────────────────────────────────────────────────────────

class TestPerEntry:

    def test_empty_file_in_directory(self, root):
        (root / "a").write_bytes(b"")
        lines, result = run(root)
        assert lines == [f"{EMPTY_SHA256}  a"]
        assert result.squash_digest is None
        assert result.stats.count(EntryKind.REGULAR) == 1

    def test_file_root_reports_basename(self, root):
        (root / "a").write_bytes(b"")
        lines, result = run(root / "a")
        assert lines == [f"{EMPTY_SHA256}  a"]
        assert result.prefix == str(root)

    def test_nested_paths_are_prefix_relative(self, root):
        (root / "sub").mkdir()
        (root / "sub" / "b").write_bytes(b"b")
        lines, _ = run(root)
        assert lines == [f"{sha256(b'b').hex()}  sub/b"]

    def test_directories_not_printed(self, root):
        (root / "empty").mkdir()
        lines, result = run(root)
        assert lines == []
        assert result.stats.count(EntryKind.DIRECTORY) == 0

    def test_algorithm_selection(self, root):
        (root / "a").write_bytes(b"abc")
        lines, _ = run(root, hash_algo="md5")
        assert lines == [f"{hashlib.md5(b'abc').hexdigest()}  a"]

    def test_swap(self, root):
        (root / "a").write_bytes(b"")
        lines, _ = run(root, swap=True)
        assert lines == [f"a  {EMPTY_SHA256}"]

    def test_hash_only(self, root):
        (root / "a").write_bytes(b"")
        lines, _ = run(root, hash_only=True)
        assert lines == [EMPTY_SHA256]

    def test_absolute(self, root):
        (root / "a").write_bytes(b"")
        lines, _ = run(root, abs=True)
        assert lines == [f"{EMPTY_SHA256}  {root / 'a'}"]

    def test_relative_root_argument(self, root, monkeypatch):
        (root / "a").write_bytes(b"")
        monkeypatch.chdir(root.parent)
        lines, result = run("r")
        assert lines == [f"{EMPTY_SHA256}  a"]
        assert result.root == str(root)

    def test_sort_orders_output(self, root):
        for name in ("c", "a", "b"):
            (root / name).write_bytes(name.encode())
        lines, _ = run(root, sort=True, swap=True)
        assert [line.split("  ")[0] for line in lines] == ["a", "b", "c"]

    def test_missing_root(self, root):
        with pytest.raises(AccessError):
            run(root / "missing")

    @pytest.mark.skipif(not os.path.exists("/dev/null"), reason="no /dev/null")
    def test_device_hashed(self):
        lines, result = run(Path("/dev/null"))
        assert lines == [f"{EMPTY_SHA256}  null"]
        assert result.stats.count(EntryKind.DEVICE) == 1

    @needs_fifo
    def test_fifo_root_rejected(self, root):
        os.mkfifo(root / "fifo")
        with pytest.raises(InvalidInputError):
            run(root / "fifo")


# ── Verification ─────────────────────────────────────────────────────────────

class TestVerify:

    def test_only_matching_entries_printed(self, root):
        (root / "a").write_bytes(b"")
        (root / "b").write_bytes(b"b")
        lines, _ = run(root, hash_verify=EMPTY_SHA256)
        assert lines == [f"{EMPTY_SHA256}  a"]

    def test_case_insensitive_with_prefix(self, root):
        (root / "a").write_bytes(b"")
        lines, _ = run(root, hash_verify="0x" + EMPTY_SHA256.upper())
        assert lines == [f"{EMPTY_SHA256}  a"]

    def test_mismatch_prints_nothing(self, root):
        (root / "a").write_bytes(b"a")
        lines, _ = run(root, hash_verify="0" * 64)
        assert lines == []

    def test_invalid_verify_string(self):
        with pytest.raises(InvalidInputError):
            WalkOptions(hash_verify="xyz")

    def test_invalid_algorithm(self):
        with pytest.raises(UnsupportedAlgorithmError):
            WalkOptions(hash_algo="crc32")


# ── Symlinks ─────────────────────────────────────────────────────────────────

@needs_symlink
class TestSymlinks:

    def test_followed_link_label(self, root):
        (root / "a").write_bytes(b"content")
        os.symlink("a", root / "l")
        lines, result = run(root, sort=True)
        digest = sha256(b"content").hex()
        assert lines == [f"{digest}  a", f"{digest}  l -> a"]
        assert result.stats.count(EntryKind.REGULAR) == 2

    def test_lstat_hashes_basename(self, root):
        (root / "a").write_bytes(b"content")
        os.symlink("a", root / "l")
        lines, result = run(root, sort=True, follow_symlink=False)
        assert lines == [
            f"{sha256(b'content').hex()}  a",
            f"{sha256(b'l').hex()}  l",
        ]
        assert result.stats.count(EntryKind.SYMLINK) == 1

    def test_lstat_dangling_link_still_hashed(self, root):
        os.symlink("missing", root / "dangling")
        lines, result = run(root, follow_symlink=False)
        assert lines == [f"{sha256(b'dangling').hex()}  dangling"]
        assert result.stats.invalid == []

    def test_dangling_link_is_invalid_and_walk_completes(self, root):
        (root / "a").write_bytes(b"")
        os.symlink("missing", root / "dangling")
        lines, result = run(root, sort=True)
        assert lines == [
            f"{EMPTY_SHA256}  a",
            "1 invalid file",
            "dangling (symlink -> invalid file)",
        ]
        assert len(result.stats.invalid) == 1

    def test_ignore_symlink(self, root):
        (root / "a").write_bytes(b"")
        os.symlink("a", root / "l")
        lines, result = run(root, ignore_symlink=True)
        assert lines == [f"{EMPTY_SHA256}  a"]
        assert [e.path for e in result.stats.ignored] == [str(root / "l")]
        assert result.stats.ignored[0].resolved_kind is EntryKind.REGULAR

    def test_link_to_directory_not_descended(self, root):
        (root / "sub").mkdir()
        (root / "sub" / "b").write_bytes(b"b")
        os.symlink("sub", root / "ld")
        lines, _ = run(root)
        assert lines == [f"{sha256(b'b').hex()}  sub/b"]

    def test_link_to_directory_squash_blob(self, root):
        (root / "sub").mkdir()
        os.symlink("sub", root / "ld")
        lines, result = run(root, squash=True, sort=True)
        buf = hashlib.sha1(b"ld -> sub" + sha256(b"sub")).digest()
        buf = hashlib.sha1(buf + b"sub" + sha256(b"sub")).digest()
        assert lines == [f"{sha256(buf).hex()}[squash][v2]"]
        assert result.stats.count(EntryKind.DIRECTORY) == 2

    def test_target_outside_prefix_shown_absolute(self, tmp_path):
        base = Path(os.path.realpath(tmp_path))
        (base / "outside").mkdir()
        (base / "outside" / "f").write_bytes(b"")
        (base / "r").mkdir()
        os.symlink(base / "outside" / "f", base / "r" / "l")
        lines, _ = run(base / "r")
        assert lines == [f"{EMPTY_SHA256}  l -> {base / 'outside' / 'f'}"]

    def test_symlink_directory_root_walked(self, tmp_path):
        base = Path(os.path.realpath(tmp_path))
        (base / "real").mkdir()
        (base / "real" / "a").write_bytes(b"")
        os.symlink("real", base / "link")
        lines, result = run(base / "link")
        assert lines == [f"{EMPTY_SHA256}  link/a"]
        assert result.prefix == str(base)

    def test_symlink_directory_root_squash(self, tmp_path):
        base = Path(os.path.realpath(tmp_path))
        (base / "real").mkdir()
        (base / "real" / "a").write_bytes(b"")
        os.symlink("real", base / "link")
        lines, _ = run(base / "link", squash=True, sort=True)
        buf = hashlib.sha1(b"link -> real" + sha256(b"real")).digest()
        buf = hashlib.sha1(buf + b"link/a" + sha256(b"")).digest()
        assert lines == [f"{sha256(buf).hex()}  link[squash][v2]"]

    def test_symlink_directory_root_lstat_not_descended(self, tmp_path):
        base = Path(os.path.realpath(tmp_path))
        (base / "real").mkdir()
        (base / "real" / "a").write_bytes(b"")
        os.symlink("real", base / "link")
        lines, _ = run(base / "link", follow_symlink=False)
        assert lines == [f"{sha256(b'link').hex()}  link"]

    def test_symlink_root_lstat(self, root):
        (root / "a").write_bytes(b"")
        os.symlink("a", root / "l")
        lines, _ = run(root / "l", follow_symlink=False)
        assert lines == [f"{sha256(b'l').hex()}  l"]

    def test_lstat_relocation_invariant(self, tmp_path):
        base = Path(os.path.realpath(tmp_path))
        digests = []
        for name, target in (("one", "/etc/hosts"), ("two", "/nowhere")):
            r = base / name
            r.mkdir()
            os.symlink(target, r / "l")
            _, result = run(r, squash=True, follow_symlink=False)
            digests.append(result.squash_digest)
        assert digests[0] == digests[1]


# ── Ignore rules ─────────────────────────────────────────────────────────────

class TestIgnore:

    @pytest.fixture
    def dotted(self, root):
        (root / ".git").mkdir()
        (root / ".git" / "config").write_bytes(b"config")
        (root / ".hidden").write_bytes(b"hidden")
        (root / "a").write_bytes(b"")
        return root

    def test_ignore_dot_file(self, dotted):
        lines, result = run(dotted, sort=True, ignore_dot_file=True, swap=True)
        assert [line.split("  ")[0] for line in lines] == [".git/config", "a"]
        assert [e.path for e in result.stats.ignored] == [str(dotted / ".hidden")]

    def test_ignore_dot_dir(self, dotted):
        lines, _ = run(dotted, sort=True, ignore_dot_dir=True, swap=True)
        assert [line.split("  ")[0] for line in lines] == [".hidden", "a"]

    def test_ignore_dot(self, dotted):
        lines, result = run(dotted, sort=True, ignore_dot=True, swap=True)
        assert [line.split("  ")[0] for line in lines] == ["a"]
        assert len(result.stats.ignored) == 2

    def test_verbose_lists_ignored(self, dotted):
        lines, _ = run(dotted, sort=True, ignore_dot_file=True, verbose=True)
        assert lines[-2:] == ["1 ignored file", ".hidden (regular file)"]


# ── Statistics output ────────────────────────────────────────────────────────

class TestStatsOutput:

    def test_verbose_summary(self, root):
        (root / "a").write_bytes(b"abc")
        lines, _ = run(root, verbose=True)
        assert lines == [
            f"{sha256(b'abc').hex()}  a",
            "1 file",
            " 1 regular file",
            "3 bytes",
            " 3 regular file bytes",
        ]

    @needs_fifo
    def test_unsupported_always_listed(self, root):
        os.mkfifo(root / "fifo")
        lines, result = run(root)
        assert lines == ["1 unsupported file", "fifo (unsupported file)"]
        assert result.stats.unsupported[0].raw_kind is EntryKind.UNSUPPORTED


# ── Squash ───────────────────────────────────────────────────────────────────

class TestSquash:

    def test_empty_root_squash(self, root):
        lines, result = run(root, squash=True)
        assert lines == [f"{EMPTY_SHA256}[squash][v2]"]
        assert result.squash_bytes == 0

    def test_single_file_v2(self, root):
        (root / "a").write_bytes(b"")
        lines, result = run(root, squash=True)
        buf = hashlib.sha1(b"a" + sha256(b"")).digest()
        expected = sha256(buf).hex()
        assert lines == [f"{expected}[squash][v2]"]
        assert result.squash_digest == expected
        assert result.squash_bytes == 20

    def test_directory_identity_v2(self, root):
        (root / "sub").mkdir()
        (root / "sub" / "b").write_bytes(b"b")
        lines, _ = run(root, squash=True, sort=True)
        buf = hashlib.sha1(b"sub" + sha256(b"sub")).digest()
        buf = hashlib.sha1(buf + b"sub/b" + sha256(b"b")).digest()
        assert lines == [f"{sha256(buf).hex()}[squash][v2]"]

    def test_single_file_v1(self, root):
        (root / "a").write_bytes(b"")
        lines, _ = run(root, squash=True, squash_version=1)
        buf = hashlib.md5(b"a" + sha256(b"")).hexdigest().encode("ascii")
        assert lines == [f"{sha256(buf).hex()}[squash][v1]"]

    def test_hash_only_blob(self, root):
        (root / "a").write_bytes(b"")
        lines, _ = run(root, squash=True, hash_only=True)
        buf = hashlib.sha1(sha256(b"")).digest()
        assert lines == [sha256(buf).hex()]

    def test_file_root_squash_line(self, root):
        (root / "a").write_bytes(b"")
        lines, _ = run(root / "a", squash=True)
        buf = hashlib.sha1(b"a" + sha256(b"")).digest()
        assert lines == [f"{sha256(buf).hex()}  a[squash][v2]"]

    def test_absolute_root_squash_line(self, root):
        lines, _ = run(root, squash=True, abs=True)
        assert lines == [f"{EMPTY_SHA256}  {root}[squash][v2]"]

    def test_squash_verify_mismatch_prints_nothing(self, root):
        lines, result = run(root, squash=True, hash_verify="0" * 64)
        assert lines == []
        assert result.squash_digest == EMPTY_SHA256

    def test_verbose_squashed_bytes(self, root):
        (root / "a").write_bytes(b"")
        lines, _ = run(root, squash=True, verbose=True)
        assert lines[-2] == "20 squashed bytes"

    def test_prefix_contributes_nothing(self, tmp_path):
        base = Path(os.path.realpath(tmp_path))
        digests = []
        for name in ("one", "another"):
            r = base / name
            (r / "sub").mkdir(parents=True)
            (r / "sub" / "b").write_bytes(b"b")
            _, result = run(r, squash=True, sort=True)
            digests.append(result.squash_digest)
        assert digests[0] == digests[1]

    @pytest.mark.parametrize("version", [1, 2])
    def test_sorted_squash_is_reproducible(self, root, version):
        for i in range(20):
            (root / f"f{i}").write_bytes(str(i).encode())
        _, first = run(root, squash=True, sort=True, squash_version=version)
        _, second = run(root, squash=True, sort=True, squash_version=version)
        assert first.squash_digest == second.squash_digest

    def test_v1_independent_of_sort(self, root):
        for i in range(20):
            (root / f"f{i}").write_bytes(str(i).encode())
        _, unsorted = run(root, squash=True, squash_version=1)
        _, ordered = run(root, squash=True, sort=True, squash_version=1)
        assert unsorted.squash_digest == ordered.squash_digest

    def test_content_change_changes_digest(self, root):
        (root / "a").write_bytes(b"one")
        _, before = run(root, squash=True)
        (root / "a").write_bytes(b"two")
        _, after = run(root, squash=True)
        assert before.squash_digest != after.squash_digest


# ── Multiple roots ───────────────────────────────────────────────────────────

class TestMultipleRoots:

    def test_walks_are_independent(self, tmp_path):
        base = Path(os.path.realpath(tmp_path))
        r1, r2 = base / "r1", base / "r2"
        r1.mkdir()
        r2.mkdir()
        (r1 / "a").write_bytes(b"1")
        (r2 / "b").write_bytes(b"2")

        walker = TreeWalker(WalkOptions(squash=True), emit=lambda line: None)
        shared = [walker.walk(str(r1)).squash_digest, walker.walk(str(r2)).squash_digest]
        fresh = [
            digest_tree(str(r1), WalkOptions(squash=True), emit=lambda line: None).squash_digest,
            digest_tree(str(r2), WalkOptions(squash=True), emit=lambda line: None).squash_digest,
        ]
        assert shared == fresh
