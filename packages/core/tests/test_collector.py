"""Tests for concurrent change-set collection."""

import threading
import types

import pytest

from prscribe_core.collector import collect


def make_file(filename, status="modified", patch="@@ -1 +1 @@\n-a\n+b", additions=1, deletions=1):
    return types.SimpleNamespace(
        filename=filename, status=status, patch=patch, additions=additions, deletions=deletions
    )


class FakeHost:
    """Synchronous stand-in for GitHubHost; content maps path -> text, None (404) or an exception."""

    def __init__(self, files, content=None, commits=None):
        self.files = files
        self.content = content or {}
        self.commits = commits if commits is not None else ["Initial commit"]
        self.content_calls = []
        self._lock = threading.Lock()

    def list_files(self, owner, repo, pull_number):
        return list(self.files)

    def get_content(self, owner, repo, path, ref):
        with self._lock:
            self.content_calls.append((path, ref))
        value = self.content.get(path)
        if isinstance(value, Exception):
            raise value
        return value

    def list_commit_messages(self, owner, repo, pull_number):
        return list(self.commits)


class TestCollect:
    @pytest.mark.asyncio
    async def test_returns_one_record_per_file_in_host_order(self):
        files = [make_file("b.py"), make_file("a.py"), make_file("c.py")]
        host = FakeHost(files, content={"a.py": "A", "b.py": "B", "c.py": "C"})

        records, _ = await collect(host, "o", "r", 1, "sha")

        assert [r.filename for r in records] == ["b.py", "a.py", "c.py"]
        assert [r.content for r in records] == ["B", "A", "C"]

    @pytest.mark.asyncio
    async def test_removed_file_has_no_content_and_is_not_fetched(self):
        files = [make_file("src/app.py"), make_file("old.py", status="removed")]
        host = FakeHost(files, content={"src/app.py": "print('hi')"})

        records, _ = await collect(host, "o", "r", 42, "abc")

        assert len(records) == 2
        assert records[0].content == "print('hi')"
        assert records[1].content is None
        assert host.content_calls == [("src/app.py", "abc")]

    @pytest.mark.asyncio
    async def test_every_non_removed_file_is_fetched_once(self):
        files = [
            make_file("icons/logo.svg", patch=None),
            make_file("yarn.lock"),
            make_file("src/app.py"),
            make_file("legacy.min.js", status="removed"),
        ]
        host = FakeHost(
            files,
            content={"icons/logo.svg": "<svg/>", "yarn.lock": "lockfile", "src/app.py": "text of src/app.py"},
        )

        records, _ = await collect(host, "o", "r", 1, "sha")

        assert sorted(host.content_calls) == [("icons/logo.svg", "sha"), ("src/app.py", "sha"), ("yarn.lock", "sha")]
        assert [r.content for r in records] == ["<svg/>", "lockfile", "text of src/app.py", None]
        assert records[0].patch == ""

    @pytest.mark.asyncio
    async def test_not_found_gives_absent_content(self):
        host = FakeHost([make_file("gone.py")], content={"gone.py": None})

        records, _ = await collect(host, "o", "r", 1, "sha")

        assert records[0].content is None

    @pytest.mark.asyncio
    async def test_single_failure_does_not_abort_batch(self):
        files = [make_file("ok.py"), make_file("boom.py"), make_file("ok2.py")]
        host = FakeHost(files, content={"ok.py": "1", "boom.py": RuntimeError("502"), "ok2.py": "2"})

        records, _ = await collect(host, "o", "r", 1, "sha")

        assert len(records) == len(files)
        assert [r.content for r in records] == ["1", None, "2"]

    @pytest.mark.asyncio
    async def test_every_fetch_failing_still_returns_all_records(self):
        files = [make_file(f"f{i}.py") for i in range(5)]
        host = FakeHost(files, content={f.filename: OSError("timeout") for f in files})

        records, _ = await collect(host, "o", "r", 1, "sha")

        assert len(records) == 5
        assert all(r.content is None for r in records)

    @pytest.mark.asyncio
    async def test_diff_fields_are_copied(self):
        host = FakeHost([make_file("a.py", status="added", patch="+x", additions=3, deletions=0)])

        records, _ = await collect(host, "o", "r", 1, "sha")

        record = records[0]
        assert record.status == "added"
        assert record.patch == "+x"
        assert record.additions == 3
        assert record.deletions == 0

    @pytest.mark.asyncio
    async def test_returns_commit_messages(self):
        host = FakeHost([], commits=["Fix bug", "Add tests"])

        records, messages = await collect(host, "o", "r", 1, "sha")

        assert records == []
        assert messages == ["Fix bug", "Add tests"]

    @pytest.mark.asyncio
    async def test_file_listing_failure_propagates(self):
        class _UnauthorizedHost(FakeHost):
            def list_files(self, owner, repo, pull_number):
                raise RuntimeError("401")

        with pytest.raises(RuntimeError):
            await collect(_UnauthorizedHost([]), "o", "r", 1, "sha")

    @pytest.mark.asyncio
    async def test_fetches_run_concurrently(self):
        # Each fetch waits until all three have started; run serially this would time out.
        barrier = threading.Barrier(3, timeout=5)

        class _BarrierHost(FakeHost):
            def get_content(self, owner, repo, path, ref):
                barrier.wait()
                return path.upper()

        host = _BarrierHost([make_file("a.py"), make_file("b.py"), make_file("c.py")])

        records, _ = await collect(host, "o", "r", 1, "sha")

        assert [r.content for r in records] == ["A.PY", "B.PY", "C.PY"]
