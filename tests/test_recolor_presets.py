"""
Tests recolor + presets + catalogue des patterns
"""
import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from card_engine.background import (
    CARD_BG_PRESETS, PATTERN_CATALOG, PATTERN_KINDS, GradientBase, SolidBase,
    get_bg_preset, list_bg_presets, migrate, recolor,
)


_GRADIENT = {
    "version": 1,
    "base": {"kind": "gradient", "angle": 135, "stops": [
        {"color": "#000000", "pos": 0}, {"color": "#777777", "pos": 40}, {"color": "#ffffff", "pos": 100},
    ]},
    "overlays": [
        {"kind": "silk", "opacity": 0.3, "density": 0.4, "blendMode": "overlay"},
        {"kind": "dots", "opacity": 0.2},
    ],
}


# ── Recolor ───────────────────────────────────────────────────────────────

class TestRecolor:

    def test_gradient_endpoints(self):
        out = recolor(_GRADIENT, "#aa0000", "#00aa00")
        assert [(s.color, s.pos) for s in out.base.stops] == [
            ("#aa0000", 0), ("#777777", 40), ("#00aa00", 100),
        ]
        assert out.base.angle == 135

    def test_overlays_colors_only(self):
        src = migrate(_GRADIENT)
        out = recolor(src, "#a", "#b")
        for before, after in zip(src.overlays, out.overlays):
            assert (after.color_a, after.color_b) == ("#a", "#b")
            assert after.model_dump(exclude={"color_a", "color_b"}) == \
                before.model_dump(exclude={"color_a", "color_b"})

    def test_solid_untouched(self):
        out = recolor({"mode": "solid", "color": "#123456"}, "#a", "#b")
        assert out.base == SolidBase(color="#123456")

    def test_input_not_mutated(self):
        src = migrate(_GRADIENT)
        before = src.model_copy(deep=True)
        recolor(src, "#a", "#b")
        assert src == before

    def test_legacy_input(self):
        out = recolor({"mode": "gradient", "from": "#000", "to": "#fff"}, "#1", "#2")
        assert isinstance(out.base, GradientBase)
        assert [s.color for s in out.base.stops] == ["#1", "#2"]


# ── Presets ───────────────────────────────────────────────────────────────

class TestPresets:

    def test_catalogue(self):
        ids = [p.id for p in list_bg_presets()]
        assert ids == [
            "gold-silk", "silver-matte", "bronze-diagonal", "graphite-noise",
            "black-marble", "midnight-dots", "clean-grid", "soft-silver-silk",
        ]

    def test_unknown(self):
        assert get_bg_preset("nope") is None

    def test_no_aliasing(self):
        bg = get_bg_preset("gold-silk")
        bg.overlays[0].opacity = 0.01
        bg.base.stops[0].color = "#ff00ff"
        fresh = get_bg_preset("gold-silk")
        assert fresh.overlays[0].opacity != 0.01
        assert fresh.base.stops[0].color != "#ff00ff"
        assert CARD_BG_PRESETS["gold-silk"].background == fresh

    def test_presets_are_migration_stable(self):
        for p in list_bg_presets():
            assert migrate(p.background.to_json()) == p.background


# ── Patterns ──────────────────────────────────────────────────────────────

def test_pattern_catalog_covers_kinds():
    assert sorted(p["value"] for p in PATTERN_CATALOG) == sorted(PATTERN_KINDS)
