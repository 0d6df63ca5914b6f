"""
PagePress Style Compiler -- Layer Ordering and Declaration Tests

compile_element_rules emits, in order:
  1. one base rule          #id { ... }
  2. one rule per pseudo    #id:hover { ... }
  3. one @media per tier    @media (max-width: 992px) { #id { ... } #id:hover { ... } }
  4. custom CSS             %root% → #id, appended last

advancedStyling and the legacy flat props never mix: any advancedStyling key
switches the node off the legacy path.
"""

from pagepress.kernel.styles import (
    clean_css_value,
    compile_element_css,
    compile_element_rules,
    compile_node_rules,
    ensure_unit,
    is_zero_value,
    kebab_case,
    legacy_declarations,
    styling_to_declarations,
)

# ============================================================================
# Base rule
# ============================================================================


class TestBaseRule:
    def test_flat_property(self):
        assert compile_element_css("pp-a", {"color": "#ff0000"}) == "#pp-a { color: #ff0000; }"

    def test_camel_case_property_becomes_kebab_case(self):
        assert compile_element_css("x", {"backgroundColor": "#fff"}) == "#x { background-color: #fff; }"

    def test_no_styling_compiles_to_empty(self):
        assert compile_element_css("x") == ""
        assert compile_element_css("x", {}, {}, {}, "") == ""

    def test_layout_group(self):
        styling = {
            "layout": {
                "display": "flex",
                "flex": {"direction": "column", "gap": "8px"},
                "padding": {"top": 10, "right": 0, "bottom": "1rem"},
            }
        }
        assert compile_element_css("x", styling) == (
            "#x { display: flex; padding-top: 10px; padding-bottom: 1rem; flex-direction: column; gap: 8px; }"
        )

    def test_flex_settings_ignored_unless_display_flex(self):
        assert styling_to_declarations({"layout": {"display": "block", "flex": {"direction": "row"}}}) == {
            "display": "block"
        }

    def test_dimensions_auto_is_omitted(self):
        css = styling_to_declarations({"layout": {"dimensions": {"width": "auto", "height": 200, "maxWidth": "50%"}}})
        assert css == {"height": "200px", "max-width": "50%"}

    def test_typography_group(self):
        css = styling_to_declarations({"typography": {"fontSize": 18, "fontWeight": 700, "color": "#333"}})
        assert css == {"font-size": "18px", "font-weight": "700", "color": "#333"}

    def test_border_sides_and_radius(self):
        styling = {
            "border": {
                "top": {"width": 2, "style": "dashed", "color": "#000"},
                "bottom": {"width": 0, "style": "solid"},
                "radius": {"topLeft": 4, "topRight": 4, "bottomRight": 0, "bottomLeft": 0},
            }
        }
        assert styling_to_declarations(styling) == {
            "border-top": "2px dashed #000",
            "border-radius": "4px 4px 0 0",
        }

    def test_background_gradient(self):
        styling = {
            "background": {
                "type": "gradient",
                "gradient": {
                    "type": "linear",
                    "angle": 90,
                    "stops": [{"color": "#000", "position": 0}, {"color": "#fff", "position": 100}],
                },
            }
        }
        assert styling_to_declarations(styling) == {"background": "linear-gradient(90deg, #000 0%, #fff 100%)"}

    def test_background_image(self):
        styling = {"background": {"type": "image", "image": {"url": "https://ex.com/bg.jpg", "position": "top-left"}}}
        assert styling_to_declarations(styling) == {
            "background-image": 'url("https://ex.com/bg.jpg")',
            "background-size": "cover",
            "background-position": "top left",
        }

    def test_transform_with_origin(self):
        assert styling_to_declarations({"transform": {"rotateZ": 45, "scaleX": 1}}) == {
            "transform": "rotateZ(45deg)",
            "transform-origin": "center center",
        }

    def test_identity_transform_is_omitted(self):
        assert styling_to_declarations({"transform": {"scaleX": 1, "rotateZ": 0}}) == {}

    def test_transition_only_when_enabled(self):
        assert styling_to_declarations({"transition": {"enabled": False, "duration": 200}}) == {}
        assert styling_to_declarations({"transition": {"enabled": True, "duration": 200}}) == {
            "transition": "all 200ms ease 0ms"
        }

    def test_backdrop_filter_gets_webkit_prefix(self):
        css = compile_element_css("x", {"backdropFilter": {"enabled": True, "blur": 10}})
        assert css == "#x { backdrop-filter: blur(10px); -webkit-backdrop-filter: blur(10px); }"

    def test_filter_defaults_are_omitted(self):
        assert styling_to_declarations({"filter": {"brightness": 100, "opacity": 100, "grayscale": 0}}) == {}
        assert styling_to_declarations({"filter": {"grayscale": 50}}) == {"filter": "grayscale(50%)"}

    def test_box_shadow(self):
        css = styling_to_declarations(
            {"boxShadow": [{"x": 0, "y": 2, "blur": 4, "spread": 0, "color": "rgba(0,0,0,0.1)", "inset": True}]}
        )
        assert css == {"box-shadow": "inset 0px 2px 4px 0px rgba(0,0,0,0.1)"}

    def test_groups_precede_flat_properties(self):
        css = compile_element_css("x", {"cursor": "pointer", "typography": {"color": "red"}})
        assert css == "#x { color: red; cursor: pointer; }"


# ============================================================================
# Pseudo-states and breakpoints
# ============================================================================


class TestLayerOrdering:
    def test_pseudo_states(self):
        rules = compile_element_rules(
            "b",
            {"color": "red"},
            {"hover": {"color": "blue"}, "default": {"color": "green"}, "bogus": {"color": "pink"}},
        )
        assert rules == ["#b { color: red; }", "#b:hover { color: blue; }"]

    def test_before_and_after_use_pseudo_elements(self):
        rules = compile_element_rules("b", None, {"before": {"content": "'*'"}, "after": {"color": "red"}})
        assert rules == ["#b::before { content: '*'; }", "#b::after { color: red; }"]

    def test_breakpoints_in_chain_order_with_nested_pseudo_states(self):
        rules = compile_element_rules(
            "b",
            {"color": "red"},
            None,
            {
                "mobile": {"pseudoStates": {"hover": {"color": "green"}}},
                "tablet": {"typography": {"fontSize": 14}},
            },
        )
        assert rules == [
            "#b { color: red; }",
            "@media (max-width: 992px) { #b { font-size: 14px; } }",
            "@media (max-width: 768px) { #b:hover { color: green; } }",
        ]

    def test_breakpoint_base_and_pseudo_share_one_media_block(self):
        rules = compile_element_rules(
            "b",
            None,
            None,
            {"mobilePortrait": {"display": "none", "pseudoStates": {"focus": {"outline": "none"}}}},
        )
        assert rules == ["@media (max-width: 479px) { #b { display: none; } #b:focus { outline: none; } }"]

    def test_desktop_breakpoint_entry_is_ignored(self):
        assert compile_element_rules("b", None, None, {"desktop": {"color": "red"}}) == []

    def test_custom_css_is_last_with_root_token_replaced(self):
        rules = compile_element_rules(
            "b", {"color": "red"}, {"hover": {"color": "blue"}}, None, "%root% .x { color: red; }"
        )
        assert rules[-1] == "#b .x { color: red; }"
        assert len(rules) == 3

    def test_custom_css_is_stripped(self):
        css = compile_element_css("b", None, None, None, "%root% { background: url(javascript:alert(1)); }")
        assert "javascript" not in css
        assert "#b {" in css

    def test_custom_css_cannot_close_the_style_element(self):
        css = compile_element_css("b", None, None, None, "</style><script>alert(1)</script>")
        assert "</style" not in css


# ============================================================================
# Value safety
# ============================================================================


class TestValueSafety:
    def test_value_breaking_out_of_declaration_is_dropped(self):
        assert compile_element_css("x", {"color": "red; } body { display:none"}) == ""

    def test_value_closing_style_element_is_dropped(self):
        assert compile_element_css("x", {"color": "</style><script>"}) == ""

    def test_expression_is_dropped_but_siblings_survive(self):
        css = compile_element_css("x", {"width": "expression(alert(1))", "color": "red"})
        assert css == "#x { color: red; }"

    def test_invalid_property_name_is_dropped(self):
        assert compile_element_css("x", {"Color Me": "red"}) == ""

    def test_clean_css_value(self):
        assert clean_css_value(" 10px ") == "10px"
        assert clean_css_value(2.0) == "2"
        assert clean_css_value("") is None
        assert clean_css_value("url(javascript:x)") is None
        assert clean_css_value("a{b}") is None

    def test_non_scalar_flat_values_are_ignored(self):
        assert styling_to_declarations({"color": ["red"], "opacity": True, "margin": None}) == {}


class TestValueHelpers:
    def test_ensure_unit(self):
        assert ensure_unit(12) == "12px"
        assert ensure_unit("12") == "12px"
        assert ensure_unit(1.5) == "1.5px"
        assert ensure_unit("2em") == "2em"
        assert ensure_unit("50%") == "50%"

    def test_is_zero_value(self):
        assert is_zero_value(0)
        assert is_zero_value("0px")
        assert is_zero_value("")
        assert not is_zero_value("0.5rem")

    def test_kebab_case(self):
        assert kebab_case("borderTopLeftRadius") == "border-top-left-radius"
        assert kebab_case("color") == "color"


# ============================================================================
# Legacy props
# ============================================================================


class TestLegacyProps:
    def test_advanced_styling_supersedes_legacy(self):
        rules = compile_node_rules("pp-n", "Container", {"padding": 20, "advancedStyling": {"color": "red"}})
        assert rules == ["#pp-n { color: red; }"]

    def test_empty_advanced_styling_keeps_legacy_path(self):
        rules = compile_node_rules("pp-n", "Spacer", {"height": 60, "advancedStyling": {}})
        assert rules == ["#pp-n { height: 60px; }"]

    def test_heading_without_props_has_no_rule(self):
        assert compile_node_rules("pp-h", "Heading", {"level": 2, "text": "Hi"}) == []

    def test_container_defaults_to_flex(self):
        assert compile_node_rules("pp-c", "Container", {}) == ["#pp-c { display: flex; }"]

    def test_padding_shorthand_and_side_override(self):
        css = legacy_declarations({"padding": 16, "paddingTop": 0}, "Text")
        assert css == {"padding-right": "16px", "padding-bottom": "16px", "padding-left": "16px"}

    def test_text_typography(self):
        css = legacy_declarations({"fontSize": 18, "fontWeight": "bold", "textAlign": "center"}, "Text")
        assert css == {"font-size": "18px", "font-weight": "700", "text-align": "center"}

    def test_button_defaults(self):
        css = legacy_declarations({"size": "lg", "fullWidth": True}, "Button")
        assert css["padding"] == "14px 28px"
        assert css["width"] == "100%"
        assert css["display"] == "inline-flex"

    def test_responsive_legacy_prop_emits_only_changed_declarations(self):
        rules = compile_node_rules("t", "Text", {"fontSize": {"desktop": 32, "mobile": 20}, "color": "#111"})
        assert rules == [
            "#t { font-size: 32px; color: #111; }",
            "@media (max-width: 768px) { #t { font-size: 20px; } }",
        ]

    def test_zero_on_narrower_tier_overrides_desktop(self):
        rules = compile_node_rules("t", "Text", {"padding": {"desktop": 20, "mobile": 0}})
        assert rules == [
            "#t { padding-top: 20px; padding-right: 20px; padding-bottom: 20px; padding-left: 20px; }",
            "@media (max-width: 768px) { #t { padding-top: 0; padding-right: 0; padding-bottom: 0; padding-left: 0; } }",
        ]

    def test_cleared_non_spacing_prop_resets_to_initial(self):
        rules = compile_node_rules("t", "Text", {"color": {"desktop": "#111", "tablet": ""}})
        assert rules == [
            "#t { color: #111; }",
            "@media (max-width: 992px) { #t { color: initial; } }",
        ]

    def test_custom_css_from_metadata(self):
        rules = compile_node_rules("t", "Heading", {"metadata": {"customCSS": "%root%:hover { opacity: .8; }"}})
        assert rules == ["#t:hover { opacity: .8; }"]

    def test_pseudo_and_breakpoint_props_apply_on_legacy_path(self):
        rules = compile_node_rules(
            "t",
            "Spacer",
            {
                "height": 10,
                "pseudoStateStyling": {"hover": {"opacity": 0.5}},
                "breakpointStyling": {"tablet": {"display": "none"}},
            },
        )
        assert rules == [
            "#t { height: 10px; }",
            "#t:hover { opacity: 0.5; }",
            "@media (max-width: 992px) { #t { display: none; } }",
        ]
