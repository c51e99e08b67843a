"""
Unit tests for media_assets.bootstrap
"""

import threading

import pytest

from media_assets import bootstrap
from media_assets.bootstrap import AssetManagerProvider, build_asset_manager
from media_assets.infrastructure.aws.s3_object_store import S3ObjectStore
from media_assets.models.errors import StorageUnavailableError
from media_assets.services.lifecycle import AssetLifecycleManager

STORE_ENV = {
    "CLOUDFLARE_ACCOUNT_ID": "acct123",
    "R2_ACCESS_KEY_ID": "key",
    "R2_SECRET_ACCESS_KEY": "secret",
    "R2_BUCKET_NAME": "media",
}


@pytest.fixture
def store_env(monkeypatch):
    for name, value in STORE_ENV.items():
        monkeypatch.setenv(name, value)


@pytest.fixture
def clear_store_env(monkeypatch):
    for name in STORE_ENV:
        monkeypatch.delenv(name, raising=False)


class TestBuildAssetManager:
    def test_wires_store_and_resolver(self, storage_settings) -> None:
        manager = build_asset_manager(storage_settings)

        assert isinstance(manager, AssetLifecycleManager)
        assert isinstance(manager.store, S3ObjectStore)
        assert manager.resolver.build_url("tours/a.webp") == (
            "https://test-media.testaccount.r2.cloudflarestorage.com/tours/a.webp"
        )

        manager.store.close()


class TestAssetManagerProvider:
    def test_get_before_init(self) -> None:
        provider = AssetManagerProvider()

        with pytest.raises(StorageUnavailableError):
            provider.get()

        assert provider.initialized is False

    def test_init_from_environment(self, store_env) -> None:
        provider = AssetManagerProvider()

        manager = provider.init()

        assert provider.initialized is True
        assert provider.get() is manager
        provider.close()

    def test_init_with_missing_environment(self, clear_store_env) -> None:
        provider = AssetManagerProvider()

        with pytest.raises(StorageUnavailableError) as exc:
            provider.init()

        assert set(exc.value.details["missing"]) == set(STORE_ENV)
        assert provider.initialized is False

    def test_init_is_idempotent(self, storage_settings) -> None:
        provider = AssetManagerProvider()

        first = provider.init(storage_settings)
        second = provider.init(storage_settings)

        assert first is second
        provider.close()

    def test_concurrent_init_builds_once(self, storage_settings, monkeypatch) -> None:
        calls = []
        real_build = bootstrap.build_asset_manager

        def counting_build(settings):
            calls.append(settings)
            return real_build(settings)

        monkeypatch.setattr(bootstrap, "build_asset_manager", counting_build)
        provider = AssetManagerProvider()
        results = []

        threads = [
            threading.Thread(target=lambda: results.append(provider.init(storage_settings)))
            for _ in range(8)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(calls) == 1
        assert len({id(manager) for manager in results}) == 1
        provider.close()

    def test_close_resets(self, storage_settings, monkeypatch) -> None:
        provider = AssetManagerProvider()
        manager = provider.init(storage_settings)
        closed = []
        monkeypatch.setattr(manager.store, "close", lambda: closed.append(True))

        provider.close()

        assert closed == [True]
        assert provider.initialized is False
        with pytest.raises(StorageUnavailableError):
            provider.get()

    def test_close_without_init(self) -> None:
        AssetManagerProvider().close()
