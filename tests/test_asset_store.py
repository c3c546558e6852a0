from __future__ import annotations

import os
from typing import TYPE_CHECKING

import orjson
import pytest

from assets import (
    AssetNotFoundError,
    DirectoryAssetStore,
    MalformedJsonError,
    MemoryAssetStore,
    build_file_index,
    find_asset_files,
    write_file_index,
)

if TYPE_CHECKING:
    from pathlib import Path


def _write_resources(resources_dir: Path, files: dict[str, str]) -> None:
    for name, text in files.items():
        target = resources_dir / name
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(text, encoding="utf-8")


def test_memory_store_reads_and_indexes_assets() -> None:
    store = MemoryAssetStore({"/app.js": "x = 1", "lib/util.js": ""})

    assert store.index.loaded is False
    assert store.exists("/app.js")
    assert store.index.loaded is True
    assert store.exists("/lib/util.js")
    assert not store.exists("/lib")
    assert not store.exists("/missing.js")
    assert store.read_text("/app.js") == "x = 1"


def test_memory_store_missing_asset_raises() -> None:
    store = MemoryAssetStore({})

    with pytest.raises(AssetNotFoundError) as excinfo:
        store.read_asset("/nope.js")

    assert excinfo.value.name == "/nope.js"
    assert isinstance(excinfo.value, FileNotFoundError)


def test_index_asset_is_authoritative() -> None:
    index = orjson.dumps({"Resources/listed.js": {"size": 0}}).decode()
    store = MemoryAssetStore(
        {"/_index_.json": index, "/listed.js": "", "/unlisted.js": ""}
    )

    assert store.exists("/listed.js")
    assert not store.exists("/unlisted.js")


def test_index_is_read_once() -> None:
    calls: list[int] = []
    store = MemoryAssetStore({"/a.js": ""})
    synthesize_index = store._load_index

    def counting_loader() -> dict[str, object]:
        calls.append(1)
        return dict(synthesize_index())

    store.index._loader = counting_loader
    store.exists("/a.js")
    store.exists("/b.js")
    store.files["/b.js"] = ""

    assert calls == [1]
    assert not store.exists("/b.js")


def test_malformed_index_raises() -> None:
    store = MemoryAssetStore({"/_index_.json": "{not json"})

    with pytest.raises(MalformedJsonError) as excinfo:
        store.exists("/app.js")

    assert excinfo.value.filename == "/_index_.json"


def test_explicit_index_override() -> None:
    store = MemoryAssetStore({"/a.js": ""}, index={"Resources/b.js": {}})

    assert store.exists("/b.js")
    assert not store.exists("/a.js")


def test_directory_store_reads_and_scans(tmp_path: Path) -> None:
    resources = tmp_path / "Resources"
    _write_resources(resources, {"app.js": "console.log('hi');\n", "lib/util.js": ""})
    store = DirectoryAssetStore(resources)

    assert store.read_text("/app.js") == "console.log('hi');\n"
    assert store.exists("/lib/util.js")
    assert not store.exists("/lib")


def test_directory_store_prefers_shipped_index(tmp_path: Path) -> None:
    resources = tmp_path / "Resources"
    _write_resources(
        resources,
        {
            "a.js": "",
            "b.js": "",
            "_index_.json": '{"Resources/a.js": {"size": 0}}',
        },
    )
    store = DirectoryAssetStore(resources)

    assert store.exists("/a.js")
    assert not store.exists("/b.js")


def test_directory_store_rejects_escaping_names(tmp_path: Path) -> None:
    resources = tmp_path / "Resources"
    _write_resources(resources, {"app.js": ""})
    (tmp_path / "secret.txt").write_text("s3cret", encoding="utf-8")
    store = DirectoryAssetStore(resources)

    with pytest.raises(AssetNotFoundError):
        store.read_asset("/../secret.txt")


def test_build_file_index_respects_gitignore_and_excludes(tmp_path: Path) -> None:
    resources = tmp_path / "Resources"
    _write_resources(
        resources,
        {
            ".gitignore": "*.log\n",
            "app.js": "abc",
            "debug.log": "",
            "fixtures/big.json": "{}",
            "lib/util.js": "",
        },
    )

    index = build_file_index(resources, exclude_patterns=["fixtures/*"])

    assert index == {
        "Resources/app.js": {"size": 3},
        "Resources/lib/util.js": {"size": 0},
    }


def test_write_file_index_is_deterministic(tmp_path: Path) -> None:
    resources = tmp_path / "Resources"
    _write_resources(resources, {"z.js": "", "a.js": "", "m/n.json": "{}"})

    index_path = write_file_index(resources)
    first = index_path.read_bytes()
    second = write_file_index(resources).read_bytes()

    assert index_path.name == "_index_.json"
    assert first == second
    assert list(orjson.loads(first)) == [
        "Resources/a.js",
        "Resources/m/n.json",
        "Resources/z.js",
    ]


def test_find_asset_files_skips_index_file(tmp_path: Path) -> None:
    resources = tmp_path / "Resources"
    _write_resources(resources, {"app.js": "", "_index_.json": "{}"})

    results = [p.relative_to(resources).as_posix() for p in find_asset_files(resources)]

    assert results == ["app.js"]


@pytest.mark.skipif(
    os.name == "nt",
    reason="Symlink semantics vary on Windows test runners.",
)
def test_find_asset_files_skips_symlinked_dirs(tmp_path: Path) -> None:
    resources = tmp_path / "Resources"
    _write_resources(resources, {"app.js": ""})
    external = tmp_path / "external"
    _write_resources(external, {"leak.js": ""})
    (resources / "linked").symlink_to(external, target_is_directory=True)

    results = [p.relative_to(resources).as_posix() for p in find_asset_files(resources)]

    assert results == ["app.js"]
