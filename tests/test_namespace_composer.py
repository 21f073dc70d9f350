# -*- coding: utf-8 -*-
"""
Testes para o NamespaceComposer.

Testa:
- Precedência por rank e fallback quando o arquivo some
- Mounts com prefixo (/deps)
- Not found (None, nunca exceção)
- Index e redirect de diretórios
- Dotfiles servidos (política independente do manifest)
- Paths que tentam sair da raiz
"""

import sys

import pytest

from devserver.namespace import (
    NamespaceComposer,
    ResolutionKind,
    RootEntry,
    split_logical_path,
)


@pytest.fixture
def roots(tmp_path):
    """Três raízes: app (rank 1), worker (rank 2), deps (rank 3 em /deps)."""
    app = tmp_path / "app"
    worker = tmp_path / "worker"
    deps = tmp_path / "deps"
    for d in (app, worker, deps):
        d.mkdir()
    return app, worker, deps


@pytest.fixture
def composer(roots):
    app, worker, deps = roots
    return NamespaceComposer(
        [
            RootEntry(path=str(deps), rank=3, prefix="/deps", name="deps"),
            RootEntry(path=str(app), rank=1, name="app"),
            RootEntry(path=str(worker), rank=2, name="worker"),
        ]
    )


class TestPrecedence:

    def test_mounts_are_ordered_by_rank(self, composer):
        assert [m.name for m in composer.mounts] == ["app", "worker", "deps"]

    def test_lower_rank_shadows_higher_rank(self, composer, roots, make_file):
        app, worker, _ = roots
        make_file(app, "shared.js", "from app")
        make_file(worker, "shared.js", "from worker")

        for _ in range(3):
            resolution = composer.resolve("/shared.js")
            assert resolution.kind == ResolutionKind.FILE
            assert resolution.path == str(app / "shared.js")
            assert resolution.mount.name == "app"

    def test_removing_winner_falls_back_to_next_root(self, composer, roots, make_file):
        app, worker, _ = roots
        winner = make_file(app, "shared.js")
        make_file(worker, "shared.js")

        assert composer.resolve("/shared.js").mount.name == "app"
        winner.unlink()

        resolution = composer.resolve("/shared.js")
        assert resolution.path == str(worker / "shared.js")
        assert resolution.mount.name == "worker"

    def test_new_file_in_winner_takes_over(self, composer, roots, make_file):
        app, worker, _ = roots
        make_file(worker, "late.js")
        assert composer.resolve("/late.js").mount.name == "worker"

        make_file(app, "late.js")

        assert composer.resolve("/late.js").mount.name == "app"

    def test_duplicate_ranks_are_rejected(self, roots):
        app, worker, _ = roots
        with pytest.raises(ValueError):
            NamespaceComposer([RootEntry(path=str(app), rank=1), RootEntry(path=str(worker), rank=1)])


class TestPrefixMounts:

    def test_prefixed_mount_serves_under_prefix(self, composer, roots, make_file):
        _, _, deps = roots
        make_file(deps, "lodash/index.js")

        resolution = composer.resolve("/deps/lodash/index.js")

        assert resolution.path == str(deps / "lodash" / "index.js")
        assert resolution.mount.name == "deps"

    def test_prefixed_mount_not_reachable_without_prefix(self, composer, roots, make_file):
        _, _, deps = roots
        make_file(deps, "only-dep.js")

        assert composer.resolve("/only-dep.js") is None

    def test_prefix_matches_whole_segments(self, composer, roots, make_file):
        _, _, deps = roots
        make_file(deps, "x.js")

        assert composer.resolve("/depsx.js") is None
        assert composer.resolve("/deps-old/x.js") is None

    def test_root_mount_shadows_prefixed_mount(self, composer, roots, make_file):
        app, _, deps = roots
        make_file(app, "deps/x.js")
        make_file(deps, "x.js")

        assert composer.resolve("/deps/x.js").mount.name == "app"

    def test_prefix_is_normalized(self, tmp_path):
        assert RootEntry(path=str(tmp_path), rank=1, prefix="/deps/").prefix == "deps"
        assert RootEntry(path=str(tmp_path), rank=1, prefix="/").prefix == ""
        assert RootEntry(path=str(tmp_path), rank=1, prefix="a//b").url_prefix == "/a/b"


class TestNotFound:

    def test_missing_everywhere_is_none(self, composer):
        assert composer.resolve("/nope.js") is None

    def test_missing_root_directory_is_skipped(self, tmp_path, make_file):
        present = tmp_path / "present"
        make_file(present, "a.txt")
        composer = NamespaceComposer(
            [
                RootEntry(path=str(tmp_path / "absent"), rank=1),
                RootEntry(path=str(present), rank=2),
            ]
        )

        assert composer.resolve("/a.txt").path == str(present / "a.txt")

    @pytest.mark.parametrize(
        "path",
        ["/../secret.txt", "/a/../../secret.txt", "/deps/../../secret.txt", "/a\\..\\b", "/a\x00b"],
    )
    def test_escaping_paths_are_not_found(self, composer, roots, make_file, tmp_path, path):
        make_file(tmp_path, "secret.txt")
        assert composer.resolve(path) is None


class TestDirectories:

    def test_directory_with_trailing_slash_serves_index(self, composer, roots, make_file):
        app, _, _ = roots
        make_file(app, "docs/index.html", "<h1>docs</h1>")

        resolution = composer.resolve("/docs/")

        assert resolution.kind == ResolutionKind.FILE
        assert resolution.path == str(app / "docs" / "index.html")

    def test_namespace_root_serves_index(self, composer, roots, make_file):
        app, _, _ = roots
        make_file(app, "index.html")

        assert composer.resolve("/").path == str(app / "index.html")

    def test_directory_without_trailing_slash_redirects(self, composer, roots, make_file):
        app, _, _ = roots
        make_file(app, "docs/index.html")

        resolution = composer.resolve("/docs")

        assert resolution.kind == ResolutionKind.REDIRECT
        assert resolution.location == "/docs/"

    @pytest.mark.skipif(sys.platform == "win32", reason="'?' não é válido em nomes no Windows")
    def test_redirect_location_escapes_reserved_characters(self, composer, roots, make_file):
        app, _, _ = roots
        make_file(app, "a?b/index.html")
        make_file(app, "c#d/50%/index.html")

        assert composer.resolve("/a?b").location == "/a%3Fb/"
        assert composer.resolve("/c#d/50%").location == "/c%23d/50%25/"

    def test_prefix_mount_root_redirects_to_slash(self, composer, roots, make_file):
        _, _, deps = roots
        make_file(deps, "index.html")

        resolution = composer.resolve("/deps")

        assert resolution.kind == ResolutionKind.REDIRECT
        assert resolution.location == "/deps/"
        assert composer.resolve("/deps/").path == str(deps / "index.html")

    def test_directory_without_index_falls_through(self, composer, roots, make_file):
        app, worker, _ = roots
        (app / "assets").mkdir()
        make_file(worker, "assets/index.html")

        assert composer.resolve("/assets/").path == str(worker / "assets" / "index.html")

    def test_directory_without_index_anywhere_is_none(self, composer, roots):
        app, _, _ = roots
        (app / "empty").mkdir()

        assert composer.resolve("/empty/") is None

    def test_custom_index_file(self, roots, make_file):
        app, _, _ = roots
        make_file(app, "site/default.htm")
        composer = NamespaceComposer([RootEntry(path=str(app), rank=1)], index_file="default.htm")

        assert composer.resolve("/site/").path == str(app / "site" / "default.htm")


class TestDotfiles:
    """Serving é mais permissivo que o manifest."""

    def test_dotfiles_are_servable(self, composer, roots, make_file):
        app, _, _ = roots
        make_file(app, ".well-known/assetlinks.json")
        make_file(app, ".stage2-output")

        assert composer.resolve("/.well-known/assetlinks.json") is not None
        assert composer.resolve("/.stage2-output").path == str(app / ".stage2-output")

    def test_node_modules_are_servable(self, composer, roots, make_file):
        _, worker, _ = roots
        make_file(worker, "node_modules/pkg/index.js")

        assert composer.resolve("/node_modules/pkg/index.js").mount.name == "worker"


class TestSplitLogicalPath:

    def test_empty_and_dot_segments_are_dropped(self):
        assert split_logical_path("//a/./b/") == ("a", "b")
        assert split_logical_path("/") == ()

    def test_parent_segment_is_rejected(self):
        assert split_logical_path("/a/../b") is None

    def test_dot_prefixed_names_are_kept(self):
        assert split_logical_path("/.hidden/..x") == (".hidden", "..x")
