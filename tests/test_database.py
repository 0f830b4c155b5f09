"""
Tests persistance SQLite : SqlCardStore + helpers db_*
"""
import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import asyncio

import pytest

from card_engine.database import (
    SqlCardStore, db_create_card, db_create_card_from_template, db_create_template,
    db_get_template, db_list_blocks, init_db, jd, jl, jo, make_engine, make_session_factory, seed_blocks,
)
from card_engine.editor import SaveStatus, open_editor_session
from card_engine.models import CardBlockDB, CardDB, TemplateDB
from card_engine.sync import CardStore, SaveCoordinator


# ── Fixtures ──────────────────────────────────────────────────────────────

@pytest.fixture
def factory(tmp_path):
    engine = make_engine(str(tmp_path / "test.db"))
    init_db(engine)
    return make_session_factory(engine)


@pytest.fixture
def seeded(factory):
    with factory() as db:
        db_create_template(db, TemplateDB(id="t1", name="Base"))
        db_create_card(db, CardDB(
            id="c1", title="Ana", template_id="t1",
            theme=jd({"font": "Inter", "background": {"mode": "gradient", "from": "#000", "to": "#fff"}}),
        ))
        seed_blocks(db, "c1", [
            {"id": "b1", "type": "header", "order": 0, "settings": {"coverImage": "c.jpg"}},
            {"id": "b2", "type": "bio", "order": 1, "enabled": False, "settings": {"text": "hi"}},
        ])
    return factory


# ── JSON helpers ──────────────────────────────────────────────────────────

class TestJson:

    def test_helpers(self):
        assert jl("[1, 2]") == [1, 2]
        assert jl("oops") == [] and jl(None) == []
        assert jo('{"a": 1}') == {"a": 1}
        assert jo("[1]") == {} and jo("") == {}
        assert jd({"é": 1}) == '{"é": 1}'


# ── Store ─────────────────────────────────────────────────────────────────

class TestSqlStore:

    def test_protocol(self, factory):
        assert isinstance(SqlCardStore(factory), CardStore)

    def test_load(self, seeded):
        store = SqlCardStore(seeded)

        async def run():
            return await store.load_card("c1"), await store.load_blocks("c1"), await store.load_card("zz")

        card, blocks, missing = asyncio.run(run())
        assert card["template_id"] == "t1"
        assert card["theme"]["font"] == "Inter"
        assert [b["id"] for b in blocks] == ["b1", "b2"]
        assert blocks[0]["settings"] == {"coverImage": "c.jpg"}
        assert missing is None

    def test_round_trip(self, seeded):
        store = SqlCardStore(seeded)

        async def run():
            session = await open_editor_session(store, "c1")
            assert session.background.base.kind == "gradient"
            session.enable_block("b2")
            session.update_block_settings("b2", {"text": "bonjour"})
            session.set_effect("grid")
            result = await SaveCoordinator(store).save(session)
            reopened = await open_editor_session(store, "c1")
            return session, result, reopened

        session, result, reopened = asyncio.run(run())
        assert result.ok and result.template_version == 1
        assert session.status is SaveStatus.SAVED
        assert reopened.blocks.get("b2").enabled is True
        assert reopened.blocks.get("b2").settings == {"text": "bonjour"}
        assert reopened.background == session.background
        assert reopened.theme["font"] == "Inter"

        with seeded() as db:
            tpl = db_get_template(db, "t1")
            assert tpl.version == 1
            assert "blocks" in jo(tpl.preview_json)
            assert jo(tpl.theme_json)["background"]["overlays"][0]["kind"] == "grid"

    def test_added_block_round_trip(self, seeded):
        store = SqlCardStore(seeded)

        async def run():
            session = await open_editor_session(store, "c1")
            session.add_block({"id": "new", "type": "video", "order": 2, "title": "Démo",
                               "settings": {"url": "https://v/1"}})
            first = await SaveCoordinator(store).save(session)
            session.update_block_settings("new", {"url": "https://v/2"})
            second = await SaveCoordinator(store).save(session)
            reopened = await open_editor_session(store, "c1")
            return session, first, second, reopened

        session, first, second, reopened = asyncio.run(run())
        assert first.ok and second.ok
        assert first.blocks_saved == 3
        assert session.new_block_ids == set()
        block = reopened.blocks.get("new")
        assert block.type == "video" and block.title == "Démo" and block.order == 2
        assert block.settings == {"url": "https://v/2"}

    def test_removed_block_deleted(self, seeded):
        store = SqlCardStore(seeded)

        async def run():
            session = await open_editor_session(store, "c1")
            session.remove_block("b2")
            result = await SaveCoordinator(store).save(session)
            return result, await open_editor_session(store, "c1")

        result, reopened = asyncio.run(run())
        assert result.ok
        assert "b2" not in reopened.blocks
        with seeded() as db:
            assert [b.id for b in db_list_blocks(db, "c1")] == ["b1"]

    def test_insert_is_upsert(self, seeded):
        store = SqlCardStore(seeded)
        asyncio.run(store.insert_block("c1", {"id": "b2", "type": "bio", "order": 5, "enabled": True,
                                              "settings": {"text": "v2"}, "style": {}, "title": None}))
        with seeded() as db:
            blocks = {b.id: b for b in db_list_blocks(db, "c1")}
            assert len(blocks) == 2
            assert blocks["b2"].order == 5 and jo(blocks["b2"].settings) == {"text": "v2"}

    def test_missing_block_update_fails_save(self, seeded):
        store = SqlCardStore(seeded)

        async def run():
            session = await open_editor_session(store, "c1")
            with seeded() as db:
                db.query(CardBlockDB).filter_by(id="b2").delete()
                db.commit()
            session.toggle_block("b2", True)
            return await SaveCoordinator(store).save(session)

        result = asyncio.run(run())
        assert result.status == "failed"
        assert result.error.stage == "blocks" and result.error.entity_id == "b2"


# ── Création depuis un template ───────────────────────────────────────────

class TestCreateCard:

    def test_from_base_blocks(self, factory):
        with factory() as db:
            card = db_create_card_from_template(db, "Nouvelle carte")
            blocks = db_list_blocks(db, card.id)
            assert len(blocks) == 13
            assert [b.type for b in blocks][:4] == ["header", "profile", "social", "contact"]
            assert card.template_id is None

    def test_from_saved_template(self, seeded):
        store = SqlCardStore(seeded)

        async def run():
            session = await open_editor_session(store, "c1")
            session.toggle_block("b1", False)
            await SaveCoordinator(store).save(session)

        asyncio.run(run())
        with seeded() as db:
            tpl = db_get_template(db, "t1")
            card = db_create_card_from_template(db, "Copie", tpl)
            blocks = db_list_blocks(db, card.id)
            assert [b.type for b in blocks] == ["header", "bio"]
            assert {b.id for b in blocks}.isdisjoint({"b1", "b2"})
            assert jo(card.theme)["background"]["version"] == 1
