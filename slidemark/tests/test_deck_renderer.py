"""
test_deck_renderer.py — End-to-end tests for deck rendering.

Tests:
- Empty results for missing decks, slides and unsupported versions
- Deck container, scoped stylesheet and slide blocks
- Scope cascade, z order and token resolution through a whole deck
- Graceful degradation for unresolved layouts and bad entities
- Background cascade in inline and layer modes
- The master/layout list convention
"""

import copy

import pytest

from slidemark import DeckRenderer, RenderPolicy, render_deck

from .helpers import (
    by_class,
    parse_fragment,
    shape_ids,
    slide_ids,
    style_of,
    stylesheet_of,
)


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def single_slide_deck(shapes: dict, **deck_fields) -> dict:
    """A one-slide deck over an empty layout."""
    deck = {
        "id": "test-deck",
        "version": "1.0.0",
        "layouts": {"blank": {}},
        "slides": [{"id": "s1", "layout": "blank", "shapes": shapes}],
    }
    deck.update(deck_fields)
    return deck


def render_root(deck, policy=None):
    markup = render_deck(deck, policy)
    assert markup, "expected a non-empty fragment"
    return parse_fragment(markup)


def slides(root) -> list:
    return by_class(root, "slide")


# =============================================================================
# EMPTY RESULTS
# =============================================================================

class TestEmptyResults:
    """Inputs that render to the empty string."""

    @pytest.mark.parametrize("deck", [None, {}, {"slides": None}, "deck", ["slides"], 42])
    def test_invalid_input(self, deck):
        assert render_deck(deck) == ""

    def test_unreadable_deck(self):
        assert render_deck({"slides": "not a list"}) == ""

    @pytest.mark.parametrize("version", ["2.0.0", "0.9", "10.1", "v1.0"])
    def test_unsupported_version(self, basic_deck, version):
        basic_deck["version"] = version
        assert render_deck(basic_deck) == ""

    @pytest.mark.parametrize("version", ["1.0.0", "1.2", "", None])
    def test_supported_or_absent_version(self, basic_deck, version):
        basic_deck["version"] = version
        assert render_deck(basic_deck) != ""

    def test_numeric_version_read_as_string(self, basic_deck):
        basic_deck["version"] = 1.5
        assert render_deck(basic_deck) != ""
        basic_deck["version"] = 2
        assert render_deck(basic_deck) == ""

    def test_version_gate_off_in_master_convention(self, master_deck, mastered_policy):
        master_deck["version"] = "3.0"
        assert render_deck(master_deck, mastered_policy) != ""

    def test_empty_slide_list_keeps_container(self):
        root = render_root({"id": "d", "slides": []})
        assert slides(root) == []
        assert root.xpath("//style")


# =============================================================================
# STRUCTURE
# =============================================================================

class TestStructure:
    """Tests for the deck container and slide blocks."""

    def test_basic_deck(self, basic_deck):
        root = render_root(basic_deck)
        deck = by_class(root, "slidemark-deck")

        assert len(deck) == 1
        assert deck[0].get("data-deck-id") == "basic-deck"
        assert len(root.xpath("//style")) == 1
        assert slide_ids(root) == ["slide1"]

    def test_fragment_not_document(self, basic_deck):
        markup = render_deck(basic_deck)
        assert "<!DOCTYPE" not in markup
        assert "<html" not in markup
        assert "<body" not in markup
        assert markup.startswith('<div class="slidemark-deck"')
        assert markup.endswith("</div>")

    def test_missing_deck_id(self, basic_deck):
        del basic_deck["id"]
        assert 'data-deck-id=""' in render_deck(basic_deck)

    def test_deck_id_escaped(self, basic_deck):
        basic_deck["id"] = '"><script>x</script>'
        root = render_root(basic_deck)
        assert root.xpath("//script") == []
        assert by_class(root, "slidemark-deck")[0].get("data-deck-id") == '"><script>x</script>'

    def test_all_slides_in_order(self, corporate_deck):
        assert slide_ids(render_root(corporate_deck)) == ["title", "content1"]

    def test_custom_deck_class(self, basic_deck):
        root = render_root(basic_deck, RenderPolicy.keyed(deck_class="deck-a"))
        assert by_class(root, "deck-a")
        assert ".deck-a .slide" in stylesheet_of(root)

    def test_renderer_class_matches_function(self, corporate_deck):
        assert DeckRenderer().render(corporate_deck) == render_deck(corporate_deck)

    def test_input_not_mutated(self, corporate_deck):
        before = copy.deepcopy(corporate_deck)
        render_deck(corporate_deck)
        assert corporate_deck == before


# =============================================================================
# STYLESHEET
# =============================================================================

class TestStylesheet:
    """Tests for the scoped stylesheet."""

    def test_every_rule_is_scoped(self, basic_deck):
        rules = stylesheet_of(render_root(basic_deck))
        assert rules
        assert all(selector.startswith(".slidemark-deck") for selector in rules)

    def test_required_rules(self, basic_deck):
        rules = stylesheet_of(render_root(basic_deck))

        assert rules[".slidemark-deck *"] == {"margin": "0", "padding": "0", "box-sizing": "border-box"}
        assert rules[".slidemark-deck .shape"] == {"position": "absolute"}
        assert rules[".slidemark-deck .list-shape ul"] == {"list-style": "none"}
        assert rules[".slidemark-deck .image-shape img"]["object-fit"] == "contain"
        assert rules[".slidemark-deck .svg-shape svg"]["position"] == "absolute"
        assert rules[".slidemark-deck .svg-shape .text-shape"]["justify-content"] == "center"
        assert rules[".slidemark-deck .slide"]["isolation"] == "isolate"

    def test_default_slide_size_and_theme(self, minimal_deck):
        rules = stylesheet_of(render_root(minimal_deck))
        slide = rules[".slidemark-deck .slide"]

        assert (slide["width"], slide["height"]) == ("1280px", "720px")
        assert slide["background"] == "#ffffff"
        assert rules[".slidemark-deck"]["font-family"] == "Arial, sans-serif"

    def test_custom_slide_size(self, basic_deck):
        basic_deck["slide_size"] = {"w": 16, "h": 9, "unit": "rem"}
        slide = stylesheet_of(render_root(basic_deck))[".slidemark-deck .slide"]
        assert (slide["width"], slide["height"]) == ("16rem", "9rem")

    def test_partial_slide_size(self, basic_deck):
        basic_deck["slide_size"] = {"w": 800}
        slide = stylesheet_of(render_root(basic_deck))[".slidemark-deck .slide"]
        assert (slide["width"], slide["height"]) == ("800px", "720px")

    def test_theme_fonts_and_colors(self, corporate_deck):
        rules = stylesheet_of(render_root(corporate_deck))
        assert rules[".slidemark-deck"]["font-family"] == "Inter, sans-serif"
        assert rules[".slidemark-deck .slide"]["background"] == "#ffffff"

    def test_nested_theme_tokens(self, minimal_deck):
        minimal_deck["theme"] = {"fonts": {"body": "Georgia"}, "colors": {"bg": "#000000"}}
        rules = stylesheet_of(render_root(minimal_deck))
        assert rules[".slidemark-deck"]["font-family"] == "Georgia, sans-serif"
        assert rules[".slidemark-deck .slide"]["background"] == "#000000"

    def test_flat_tokens_win_over_theme(self, minimal_deck):
        minimal_deck["theme"] = {"fonts": {"body": "Georgia"}}
        minimal_deck["fonts"] = {"body": "Inter"}
        rules = stylesheet_of(render_root(minimal_deck))
        assert rules[".slidemark-deck"]["font-family"] == "Inter, sans-serif"

    def test_theme_values_cannot_break_out(self, minimal_deck):
        minimal_deck["fonts"] = {"body": "Evil</style><script>alert(1)</script>"}
        minimal_deck["colors"] = {"bg": "red; } body { display: none"}
        markup = render_deck(minimal_deck)
        root = parse_fragment(markup)

        assert "<script>" not in markup
        assert root.xpath("//script") == []
        assert len(root.xpath("//style")) == 1
        assert "body" not in stylesheet_of(root)


# =============================================================================
# CASCADE THROUGH A DECK
# =============================================================================

class TestCascade:
    """Shape merging, z order and tokens end to end."""

    def test_root_layout_slide_merge(self):
        deck = {
            "version": "1.0.0",
            "shapes": {
                "root_shape": {"type": "text", "text": "Root", "z": 1},
            },
            "layouts": {
                "test_layout": {
                    "shapes": {
                        "layout_shape": {"type": "text", "text": "Layout", "z": 2},
                        "root_shape": {"text": "Root Override from Layout"},
                    },
                },
            },
            "slides": [{
                "id": "test_slide",
                "layout": "test_layout",
                "shapes": {
                    "slide_shape": {"type": "text", "text": "Slide", "z": 3},
                    "root_shape": {"text": "Final Override from Slide"},
                },
            }],
        }
        root = render_root(deck)
        texts = [block.text_content() for block in by_class(root, "text-shape")]
        assert texts == ["Final Override from Slide", "Layout", "Slide"]

    def test_z_order(self):
        root = render_root(single_slide_deck({
            "b": {"type": "text", "z": 2},
            "a": {"type": "text", "z": 1},
            "c": {"type": "text", "z": 0},
        }))
        assert shape_ids(slides(root)[0]) == ["c", "a", "b"]

    def test_unset_z_keeps_merge_order(self):
        deck = single_slide_deck({"late": {"type": "text"}})
        deck["shapes"] = {"early": {"type": "text"}}
        root = render_root(deck)
        assert shape_ids(slides(root)[0]) == ["early", "late"]

    def test_array_replaced_across_scopes(self):
        deck = {
            "shapes": {"l": {"type": "list", "items": ["a", "b"]}},
            "layouts": {"x": {"shapes": {"l": {"items": ["c"]}}}},
            "slides": [{"id": "s", "layout": "x", "shapes": {"l": {"items": ["d", "e"]}}}],
        }
        root = render_root(deck)
        assert [li.text_content() for li in root.xpath("//li")] == ["d", "e"]

    def test_palette_token(self):
        root = render_root(single_slide_deck(
            {
                "tok": {"type": "rectangle", "fill": "accent1"},
                "lit": {"type": "rectangle", "fill": "#000"},
            },
            colors={"accent1": "#112233"},
        ))
        fills = [path.get("fill") for path in root.xpath("//path")]
        assert fills == ["#112233", "#000"]

    def test_tokens_off(self):
        root = render_root(
            single_slide_deck({"tok": {"type": "rectangle", "fill": "accent1"}}, colors={"accent1": "#112233"}),
            RenderPolicy.keyed(token_resolution=False),
        )
        assert root.xpath("//path")[0].get("fill") == "accent1"

    def test_default_geometry(self):
        root = render_root(single_slide_deck({"t": {"type": "text", "text": "x"}}))
        style = style_of(by_class(root, "text-shape")[0])
        assert (style["left"], style["top"], style["width"], style["height"]) == ("0%", "0%", "100%", "100%")

    def test_meta_interpolation(self, corporate_deck):
        root = render_root(corporate_deck)
        texts = [block.text_content() for block in by_class(root, "text-shape")]
        assert "ACME Corp | December 2024" in texts
        assert "Prepared for ACME Corp" in texts

    def test_slide_overrides(self):
        deck = single_slide_deck({"t": {"type": "text", "text": "before"}})
        deck["slides"][0]["overrides"] = [{"shape": "t", "text": "after"}]
        root = render_root(deck)
        assert by_class(root, "text-shape")[0].text_content() == "after"


# =============================================================================
# GRACEFUL DEGRADATION
# =============================================================================

class TestDegradation:
    """Bad entities are dropped one at a time."""

    def test_missing_layout_skips_only_that_slide(self, basic_deck):
        good = basic_deck["slides"][0]
        bad = {**good, "id": "bad", "layout": "non-existent"}
        basic_deck["slides"] = [bad, good]

        root = render_root(basic_deck)
        assert slide_ids(root) == ["slide1"]

    def test_slide_without_layout_skipped(self, basic_deck):
        basic_deck["slides"].append({"id": "nolayout"})
        assert slide_ids(render_root(basic_deck)) == ["slide1"]

    def test_unreadable_slide_skipped(self, basic_deck):
        basic_deck["slides"] = ["junk", {"id": "x", "layout": "title-only", "meta": "bad"}] + basic_deck["slides"]
        assert slide_ids(render_root(basic_deck)) == ["slide1"]

    def test_unreadable_layout_skips_slide(self, basic_deck):
        basic_deck["layouts"]["broken"] = {"bg": "not a mapping"}
        basic_deck["slides"].append({"id": "broken", "layout": "broken"})
        assert slide_ids(render_root(basic_deck)) == ["slide1"]

    def test_unknown_type_skipped(self):
        root = render_root(single_slide_deck({
            "bad": {"type": "hologram", "text": "nope"},
            "good": {"type": "text", "text": "yes"},
        }))
        assert shape_ids(slides(root)[0]) == ["good"]

    def test_unknown_family_omitted(self):
        markup = render_deck(single_slide_deck({"star": {"type": "star", "text": "nope"}}))
        root = parse_fragment(markup)
        assert shape_ids(slides(root)[0]) == []
        assert "nope" not in markup

    def test_unreadable_shape_skipped(self):
        root = render_root(single_slide_deck({
            "bad": {"type": "text", "w": {"not": "a number"}},
            "good": {"type": "text"},
        }))
        assert shape_ids(slides(root)[0]) == ["good"]

    def test_unreadable_background_ignored(self):
        deck = single_slide_deck({"t": {"type": "text"}})
        deck["slides"][0]["bg"] = {"fill": ["red"]}
        root = render_root(deck)
        assert slide_ids(root) == ["s1"]
        assert style_of(slides(root)[0]) == {}

    @pytest.mark.parametrize("field,value", [
        ("bg", "#ff0000"),
        ("theme", "corporate"),
        ("masters", {}),
        ("colors", ["red"]),
        ("fonts", "Inter"),
        ("shapes", 7),
        ("version", ["1.0"]),
    ])
    def test_invalid_optional_deck_field_falls_back(self, field, value):
        deck = single_slide_deck({"t": {"type": "text", "text": "still here"}})
        deck[field] = value

        root = render_root(deck)
        assert slide_ids(root) == ["s1"]
        assert by_class(root, "text-shape")[0].text_content() == "still here"

    def test_invalid_slide_size_uses_defaults(self):
        deck = single_slide_deck({"t": {"type": "text"}}, slide_size={"w": [1], "h": 540})
        slide = stylesheet_of(render_root(deck))[".slidemark-deck .slide"]
        assert (slide["width"], slide["height"]) == ("1280px", "720px")

    def test_invalid_field_keeps_valid_theme(self):
        deck = single_slide_deck({"t": {"type": "text"}}, bg="#ff0000", fonts={"body": "Inter"})
        rules = stylesheet_of(render_root(deck))
        assert rules[".slidemark-deck"]["font-family"] == "Inter, sans-serif"

    def test_dash_array_list(self):
        root = render_root(single_slide_deck({
            "r": {"type": "rectangle", "stroke": "#000", "stroke_width": 2, "stroke_dasharray": [4, 2]},
            "t": {"type": "text"},
        }))
        assert shape_ids(slides(root)[0]) == ["r", "t"]
        assert root.xpath("//path")[0].get("stroke-dasharray") == "4,2"

    def test_layouts_as_list(self):
        deck = {
            "layouts": [{"id": "a", "shapes": {"t": {"type": "text", "text": "from list"}}}],
            "slides": [{"id": "s", "layout": "a"}],
        }
        root = render_root(deck)
        assert by_class(root, "text-shape")[0].text_content() == "from list"


# =============================================================================
# BACKGROUNDS
# =============================================================================

class TestBackground:
    """Background cascade and modes."""

    def test_layout_fill_inline(self, basic_deck):
        slide = slides(render_root(basic_deck))[0]
        assert style_of(slide) == {"background-color": "#ffffff"}

    def test_slide_overrides_layout(self, corporate_deck):
        title, content = slides(render_root(corporate_deck))
        assert style_of(title)["background-color"] == "#f8fafc"
        assert style_of(content)["background-color"] == "#ffffff"

    def test_root_image(self, image_deck):
        first, second = slides(render_root(image_deck))
        style = style_of(first)

        assert style["background-image"] == "url('https://placehold.co/1280x720/e2e8f0/64748b?text=Background')"
        assert style["background-size"] == "cover"
        assert style["background-repeat"] == "no-repeat"

        # a null image at slide scope clears the inherited one
        assert style_of(second) == {"background-color": "#0f172a"}

    def test_no_background(self, minimal_deck):
        slide = slides(render_root(minimal_deck))[0]
        assert slide.get("style") == ""

    def test_layer_mode(self):
        deck = single_slide_deck(
            {"low": {"type": "text", "z": -5}, "high": {"type": "text", "z": 3}},
            bg={"fill": "#123456"},
        )
        root = render_root(deck, RenderPolicy.keyed(background_mode="layer"))
        slide = slides(root)[0]
        layer = slide[0]

        assert slide.get("style") is None
        assert layer.get("class") == "background"
        assert style_of(layer) == {"background-color": "#123456", "z-index": "-6"}

    def test_layer_below_default_stack(self):
        deck = single_slide_deck({"t": {"type": "text"}}, bg={"fill": "#123456"})
        root = render_root(deck, RenderPolicy.keyed(background_mode="layer"))
        assert style_of(by_class(root, "background")[0])["z-index"] == "-1"

    def test_layer_omitted_without_background(self):
        root = render_root(single_slide_deck({"t": {"type": "text"}}), RenderPolicy.keyed(background_mode="layer"))
        assert by_class(root, "background") == []


# =============================================================================
# MASTER CONVENTION
# =============================================================================

class TestMasterConvention:
    """Master/layout list lookup with literal values."""

    def test_slides_resolve(self, master_deck, mastered_policy):
        assert slide_ids(render_root(master_deck, mastered_policy)) == ["cover", "agenda"]

    def test_map_lookup_finds_nothing(self, master_deck):
        assert slide_ids(render_root(master_deck)) == []

    def test_master_shapes_merged(self, master_deck, mastered_policy):
        cover = slides(render_root(master_deck, mastered_policy))[0]
        assert shape_ids(cover) == ["band", "confidential", "title", "badge"]

    def test_untyped_shape_drawn_as_rectangle(self, master_deck, mastered_policy):
        cover = slides(render_root(master_deck, mastered_policy))[0]
        band = cover.xpath("./*[@data-shape-id='band']")[0]
        assert band.get("class") == "shape svg-shape"
        assert band.xpath(".//path")[0].get("fill") == "#1e293b"

    def test_inherited_background(self, master_deck, mastered_policy):
        cover, agenda = slides(render_root(master_deck, mastered_policy))

        assert cover[0].get("class") == "background"
        assert style_of(cover[0]) == {"background-color": "#0f172a", "z-index": "-1"}
        assert style_of(agenda[0])["background-color"] == "#ffffff"

    def test_overrides(self, master_deck, mastered_policy):
        agenda = slides(render_root(master_deck, mastered_policy))[1]
        band = agenda.xpath("./*[@data-shape-id='band']")[0]
        confidential = agenda.xpath("./*[@data-shape-id='confidential']")[0]

        assert band.xpath(".//path")[0].get("fill") == "#2563eb"
        assert confidential.text_content() == "Internal"

    def test_alternate_text_fields(self, master_deck, mastered_policy):
        cover = slides(render_root(master_deck, mastered_policy))[0]
        title = cover.xpath("./*[@data-shape-id='title']")[0]
        style = style_of(title)

        assert title.text_content() == "Roadmap Q3"
        assert style["font-size"] == "44px"
        assert style["color"] == "#f8fafc"

    def test_vector_margin(self, master_deck, mastered_policy):
        cover = slides(render_root(master_deck, mastered_policy))[0]
        badge = cover.xpath("./*[@data-shape-id='badge']")[0]
        # 10% of min(10, 14)
        assert badge.xpath(".//path")[0].get("d").startswith("M3 1 ")

    def test_theme_block(self, master_deck, mastered_policy):
        rules = stylesheet_of(render_root(master_deck, mastered_policy))
        assert rules[".slidemark-deck"]["font-family"] == "Georgia, sans-serif"
        assert rules[".slidemark-deck .slide"]["width"] == "960px"
        assert rules[".slidemark-deck .slide"]["background"] == "#f1f5f9"

    def test_unknown_master_skips_slide(self, master_deck, mastered_policy):
        master_deck["slides"][0]["master"] = "nope"
        assert slide_ids(render_root(master_deck, mastered_policy)) == ["agenda"]

    def test_unknown_layout_in_master_skips_slide(self, master_deck, mastered_policy):
        master_deck["slides"][1]["layout"] = "nope"
        assert slide_ids(render_root(master_deck, mastered_policy)) == ["cover"]
