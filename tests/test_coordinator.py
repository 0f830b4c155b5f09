"""
Tests SaveCoordinator : séquencement blocs → thème → template, échecs, gardes no-op
"""
import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import asyncio

from card_engine.editor import SaveStatus, open_editor_session
from card_engine.errors import CardNotFound, PartialSyncWarning
from card_engine.sync import CardStore, InMemoryCardStore, SaveCoordinator

import pytest


# ── Fixtures ──────────────────────────────────────────────────────────────

class FlakyStore(InMemoryCardStore):
    """Store qui échoue sur un bloc, le thème ou le template."""

    def __init__(self, fail_block=None, fail_theme=False, fail_template=False):
        super().__init__()
        self.fail_block = fail_block
        self.fail_theme = fail_theme
        self.fail_template = fail_template

    async def update_block(self, block_id, fields):
        if block_id == self.fail_block:
            self.calls.append(("update_block", block_id))
            raise RuntimeError("disk full")
        await super().update_block(block_id, fields)

    async def update_card_theme(self, card_id, theme):
        if self.fail_theme:
            raise RuntimeError("theme locked")
        await super().update_card_theme(card_id, theme)

    async def write_template_snapshot(self, template_id, snapshot):
        if self.fail_template:
            raise RuntimeError("template gone")
        return await super().write_template_snapshot(template_id, snapshot)


class YieldingStore(InMemoryCardStore):
    """Rend la main à la boucle pendant l'écriture du thème."""

    async def update_card_theme(self, card_id, theme):
        await asyncio.sleep(0)
        await super().update_card_theme(card_id, theme)


def _seed(store, template_id=None):
    store.add_card(
        {"id": "c1", "template_id": template_id,
         "theme": {"font": "Inter", "background": {"mode": "solid", "color": "#ffffff"}}},
        [
            {"id": "b1", "type": "header", "order": 0, "settings": {}, "style": {}},
            {"id": "b2", "type": "bio", "order": 1, "settings": {"text": "a"}, "style": {}},
            {"id": "b3", "type": "social", "order": 2, "settings": {"items": []}, "style": {}},
        ],
    )
    if template_id:
        store.add_template(template_id)
    return store


def _edit_and_save(store):
    async def run():
        session = await open_editor_session(store, "c1")
        session.update_block_settings("b2", {"text": "b"})
        session.apply_preset("gold-silk")
        result = await SaveCoordinator(store).save(session)
        return session, result
    return asyncio.run(run())


# ── Succès ────────────────────────────────────────────────────────────────

class TestSave:

    def test_protocol(self):
        assert isinstance(InMemoryCardStore(), CardStore)

    def test_sequence(self):
        store = _seed(InMemoryCardStore())
        session, result = _edit_and_save(store)
        assert result.ok and result.status == "saved"
        assert result.blocks_saved == 3
        assert store.calls == [
            ("update_block", "b1"), ("update_block", "b2"), ("update_block", "b3"),
            ("get_card_theme", "c1"), ("update_card_theme", "c1"),
        ]
        assert session.status is SaveStatus.SAVED

    def test_theme_merged_top_level(self):
        store = _seed(InMemoryCardStore())
        _edit_and_save(store)
        theme = store.cards["c1"]["theme"]
        assert theme["font"] == "Inter"
        assert theme["background"]["version"] == 1
        assert theme["background"]["overlays"][0]["kind"] == "silk"
        assert store.blocks["b2"]["settings"] == {"text": "b"}

    def test_template_snapshot_written(self):
        store = _seed(InMemoryCardStore(), template_id="t1")
        _, result = _edit_and_save(store)
        assert result.template_version == 1
        tpl = store.templates["t1"]
        assert [b["type"] for b in tpl["blocks"]] == ["header", "bio", "social"]
        assert all("id" not in b for b in tpl["blocks"])
        assert tpl["background"]["base"]["kind"] == "gradient"
        assert store.calls[-1] == ("write_template_snapshot", "t1")


# ── Échecs ────────────────────────────────────────────────────────────────

class TestFailures:

    def test_block_failure_aborts(self):
        store = _seed(FlakyStore(fail_block="b2"))
        session, result = _edit_and_save(store)
        assert result.status == "failed"
        assert result.error.stage == "blocks" and result.error.entity_id == "b2"
        assert result.blocks_saved == 1
        assert store.calls == [("update_block", "b1"), ("update_block", "b2")]
        assert session.status is SaveStatus.ERROR
        assert store.cards["c1"]["theme"]["background"] == {"mode": "solid", "color": "#ffffff"}

    def test_theme_failure(self):
        store = _seed(FlakyStore(fail_theme=True), template_id="t1")
        session, result = _edit_and_save(store)
        assert result.status == "failed"
        assert result.error.stage == "theme" and result.error.entity_id == "c1"
        assert session.status is SaveStatus.ERROR
        assert store.templates["t1"]["version"] == 0

    def test_template_failure_non_fatal(self):
        store = _seed(FlakyStore(fail_template=True), template_id="t1")
        session, result = _edit_and_save(store)
        assert result.ok
        assert isinstance(result.warning, PartialSyncWarning)
        assert result.to_dict()["warning"]["stage"] == "template"
        assert session.status is SaveStatus.SAVED

    def test_retry_after_failure(self):
        store = _seed(FlakyStore(fail_block="b2"))

        async def run():
            session = await open_editor_session(store, "c1")
            session.toggle_block("b3", False)
            first = await SaveCoordinator(store).save(session)
            store.fail_block = None
            second = await SaveCoordinator(store).save(session)
            return first, second, session

        first, second, session = asyncio.run(run())
        assert first.status == "failed" and second.ok
        assert store.blocks["b3"]["enabled"] is False


# ── Ajout / retrait de blocs ──────────────────────────────────────────────

class TestAddedRemoved:

    def test_added_block_inserted_then_updated(self):
        store = _seed(InMemoryCardStore())

        async def run():
            session = await open_editor_session(store, "c1")
            session.add_block({"id": "b4", "type": "video", "order": 3, "settings": {"url": "u1"}})
            first = await SaveCoordinator(store).save(session)
            store.calls.clear()
            session.update_block_settings("b4", {"url": "u2"})
            second = await SaveCoordinator(store).save(session)
            return session, first, second

        session, first, second = asyncio.run(run())
        assert first.ok and second.ok
        assert first.blocks_saved == 4
        assert ("update_block", "b4") in store.calls
        assert ("insert_block", "b4") not in store.calls
        assert store.blocks["b4"]["card_id"] == "c1"
        assert store.blocks["b4"]["type"] == "video"
        assert store.blocks["b4"]["settings"] == {"url": "u2"}
        assert session.new_block_ids == set()

    def test_insert_retried_after_failure(self):
        store = _seed(FlakyStore(fail_theme=True))

        async def run():
            session = await open_editor_session(store, "c1")
            session.add_block({"id": "b4", "type": "bio"})
            first = await SaveCoordinator(store).save(session)
            store.fail_theme = False
            second = await SaveCoordinator(store).save(session)
            return session, first, second

        session, first, second = asyncio.run(run())
        assert first.status == "failed" and second.ok
        assert [c for c in store.calls if c[1] == "b4"] == [("insert_block", "b4"), ("insert_block", "b4")]
        assert session.status is SaveStatus.SAVED

    def test_removed_block_deleted_first(self):
        store = _seed(InMemoryCardStore())

        async def run():
            session = await open_editor_session(store, "c1")
            session.remove_block("b2")
            result = await SaveCoordinator(store).save(session)
            reopened = await open_editor_session(store, "c1")
            return session, result, reopened

        session, result, reopened = asyncio.run(run())
        assert result.ok
        assert store.calls[0] == ("delete_block", "b2")
        assert "b2" not in store.blocks
        assert "b2" not in reopened.blocks
        assert session.removed_block_ids == set()

    def test_unsaved_block_removed_never_reaches_store(self):
        store = _seed(InMemoryCardStore())

        async def run():
            session = await open_editor_session(store, "c1")
            session.add_block({"id": "tmp", "type": "bio"})
            session.remove_block("tmp")
            return await SaveCoordinator(store).save(session)

        result = asyncio.run(run())
        assert result.ok
        assert not [c for c in store.calls if c[1] == "tmp"]

    def test_removed_while_saving_deleted_next_save(self):
        store = _seed(YieldingStore())

        async def run():
            session = await open_editor_session(store, "c1")
            session.add_block({"id": "b4", "type": "bio"})
            coordinator = SaveCoordinator(store)
            task = asyncio.ensure_future(coordinator.save(session))
            await asyncio.sleep(0)
            assert session.status is SaveStatus.SAVING
            session.remove_block("b4")
            first = await task
            second = await coordinator.save(session)
            return first, second

        first, second = asyncio.run(run())
        assert first.ok and second.ok
        assert ("delete_block", "b4") in store.calls
        assert "b4" not in store.blocks


# ── Gardes ────────────────────────────────────────────────────────────────

class TestGuards:

    def test_clean_session_skipped(self):
        store = _seed(InMemoryCardStore())

        async def run():
            session = await open_editor_session(store, "c1")
            return await SaveCoordinator(store).save(session)

        result = asyncio.run(run())
        assert result.status == "skipped"
        assert store.calls == []

    def test_save_while_saving_is_noop(self):
        store = _seed(InMemoryCardStore())

        async def run():
            session = await open_editor_session(store, "c1")
            session.toggle_block("b1", False)
            coordinator = SaveCoordinator(store)
            return await asyncio.gather(coordinator.save(session), coordinator.save(session))

        first, second = asyncio.run(run())
        assert first.ok
        assert second.status == "skipped"
        assert [c for c in store.calls if c[0] == "update_block"] == [
            ("update_block", "b1"), ("update_block", "b2"), ("update_block", "b3"),
        ]

    def test_unknown_card(self):
        with pytest.raises(CardNotFound):
            asyncio.run(open_editor_session(InMemoryCardStore(), "nope"))
