"""
Tests pour les miroirs de collections (MirrorHandle, SubscriptionMirror, CatalogReadModel).
"""

import asyncio

import pytest

from catalog_admin.core.value_objects.documents import DocumentSnapshot, StoredDocument
from catalog_admin.services.mirror import CatalogReadModel, MirrorHandle, SubscriptionMirror


class TestMirrorHandle:
    """Tests du remplacement de snapshot."""

    def test_replace_supersedes_previous_state(self):
        handle = MirrorHandle("movies")
        handle.replace(
            DocumentSnapshot("movies", (StoredDocument("a"), StoredDocument("b")))
        )
        handle.replace(DocumentSnapshot("movies", (StoredDocument("c"),)))

        assert handle.generation == 2
        assert handle.snapshot.ids == ("c",)
        assert handle.count == 1

    @pytest.mark.asyncio
    async def test_wait_for_update_wakes_on_next_snapshot(self):
        handle = MirrorHandle("movies")
        waiter = asyncio.create_task(handle.wait_for_update(timeout=1))
        await asyncio.sleep(0)

        handle.replace(DocumentSnapshot("movies", (StoredDocument("a"),)))

        snapshot = await waiter
        assert snapshot.ids == ("a",)

    @pytest.mark.asyncio
    async def test_wait_for_update_returns_if_generation_already_passed(self):
        handle = MirrorHandle("movies")
        handle.replace(DocumentSnapshot("movies"))
        snapshot = await handle.wait_for_update(after_generation=0, timeout=0.1)
        assert len(snapshot) == 0

    @pytest.mark.asyncio
    async def test_wait_for_update_times_out(self):
        handle = MirrorHandle("movies")
        with pytest.raises(asyncio.TimeoutError):
            await handle.wait_for_update(timeout=0.05)


class TestSubscriptionMirror:
    """Tests d'ouverture et fermeture des miroirs sur un store reel."""

    @pytest.mark.asyncio
    async def test_open_applies_initial_snapshot(self, store):
        await store.add("movies", {"title": "Nocturne"})
        async with SubscriptionMirror(store) as mirror:
            handle = await mirror.open("movies")
            assert handle.is_open
            assert handle.generation == 1
            assert handle.count == 1

    @pytest.mark.asyncio
    async def test_mirror_follows_writes(self, store):
        async with SubscriptionMirror(store) as mirror:
            handle = await mirror.open("movies")
            doc = await store.add("movies", {"title": "Nocturne"})
            assert handle.snapshot.ids == (doc.id,)

            await store.delete("movies", doc.id)
            assert handle.count == 0

    @pytest.mark.asyncio
    async def test_two_mirrors_are_independent(self, store):
        async with SubscriptionMirror(store) as mirror:
            catalog = await mirror.open("movies")
            users = await mirror.open("users")

            await store.add("users", {"email": "a@b.c"})

            assert users.generation == 2
            assert catalog.generation == 1

    @pytest.mark.asyncio
    async def test_close_is_idempotent(self, store):
        mirror = SubscriptionMirror(store)
        handle = await mirror.open("movies")

        mirror.close(handle)
        mirror.close(handle)
        await store.add("movies", {"title": "Nocturne"})

        assert not handle.is_open
        assert handle.count == 0
        assert mirror.handles == ()

    @pytest.mark.asyncio
    async def test_exit_closes_handles_on_error(self, store):
        """Les handles sont fermes meme si le bloc leve une exception."""
        mirror = SubscriptionMirror(store)
        with pytest.raises(RuntimeError):
            async with mirror:
                handle = await mirror.open("movies")
                raise RuntimeError("echec de l'ecran")

        assert not handle.is_open
        assert store._listeners.get("movies", []) == []


class TestCatalogReadModel:
    """Tests de la vue decodee du catalogue."""

    @pytest.mark.asyncio
    async def test_items_are_decoded(self, store, reconciler, movie_draft, series_draft):
        await store.add("movies", reconciler.encode(movie_draft))
        await store.add("movies", reconciler.encode(series_draft))

        async with SubscriptionMirror(store) as mirror:
            catalog = CatalogReadModel(await mirror.open("movies"), reconciler)
            assert [item.is_series for item in catalog.items] == [False, True]
            assert catalog.count == 2

    @pytest.mark.asyncio
    async def test_items_cached_per_generation(self, store, reconciler, movie_draft):
        async with SubscriptionMirror(store) as mirror:
            catalog = CatalogReadModel(await mirror.open("movies"), reconciler)
            first = catalog.items
            assert catalog.items is first

            await store.add("movies", reconciler.encode(movie_draft))
            assert catalog.items is not first
            assert len(catalog.items) == 1

    def test_search_is_case_insensitive(self, reconciler):
        handle = MirrorHandle("movies")
        handle.replace(
            DocumentSnapshot(
                "movies",
                (
                    StoredDocument("a", {"title": "Nocturne"}),
                    StoredDocument("b", {"title": "Harbor Lights"}),
                ),
            )
        )
        catalog = CatalogReadModel(handle, reconciler)

        assert [item.id for item in catalog.search("NOCT")] == ["a"]
        assert len(catalog.search("  ")) == 2
        assert catalog.search("inconnu") == []
        assert catalog.get("b").title == "Harbor Lights"
        assert catalog.get("z") is None
