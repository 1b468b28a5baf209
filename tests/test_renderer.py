import base64
from datetime import date

import pytest

from tv_core_utils.slides import (
    ClosingSlide,
    ContentSlide,
    CoverSlide,
    ImageRef,
    SectionTitleSlide,
    Slide,
    TocSlide,
)
from tv_renderer import (
    REVEAL_CURVES,
    format_cover_date,
    inline_markup,
    layout_for,
    render_black_html,
    render_slide_body,
    render_slide_html,
)

CSS = ".slide { color: red; }"


# ============================================================
# LAYOUT
# ============================================================

@pytest.mark.parametrize("kind", sorted(REVEAL_CURVES))
def test_layout_endpoints(kind):
    start = layout_for(kind, 0.0)
    end = layout_for(kind, 1.0)

    assert start.opacity == 0.0
    assert end.opacity == 1.0
    assert end.offset == 0.0
    assert end.scale == 1.0


@pytest.mark.parametrize("kind", sorted(REVEAL_CURVES))
def test_layout_is_monotonic(kind):
    opacities = [layout_for(kind, i / 50).opacity for i in range(51)]
    assert opacities == sorted(opacities)
    assert all(0.0 <= o <= 1.0 for o in opacities)


def test_list_items_reveal_in_order():
    first = layout_for("content-item", 0.3, 0)
    third = layout_for("content-item", 0.3, 2)
    assert first.opacity > third.opacity
    assert first.offset < third.offset


@pytest.mark.parametrize("kind", ["toc-item", "content-item"])
def test_long_lists_are_fully_shown_at_end(kind):
    layouts = [layout_for(kind, 1.0, i, 30) for i in range(30)]

    assert [l.opacity for l in layouts] == [1.0] * 30
    assert all(l.offset == 0.0 for l in layouts)


def test_short_lists_keep_their_stagger():
    assert layout_for("content-item", 0.3, 2, 3) == layout_for("content-item", 0.3, 2)


def test_unknown_element_kind():
    with pytest.raises(ValueError):
        layout_for("sparkles", 0.5)


def test_layout_style_string():
    assert layout_for("toc-item", 1.0).style() == "opacity:1.0000"
    hidden = layout_for("toc-item", 0.0).style()
    assert "opacity:0.0000" in hidden
    assert "translateX(30.00px)" in hidden


# ============================================================
# TEXT
# ============================================================

def test_inline_markup_escapes_then_translates():
    assert inline_markup("**bold** <x> & `a<b`") == "<strong>bold</strong> &lt;x&gt; &amp; <code>a&lt;b</code>"


def test_inline_markup_leaves_other_markdown_alone():
    assert inline_markup("_em_ [link](x)") == "_em_ [link](x)"


def test_cover_date_spanish_and_english():
    today = date(2026, 10, 18)
    assert format_cover_date("es", today) == "octubre de 2026"
    assert format_cover_date("en", today) == "October 2026"


# ============================================================
# SLIDES
# ============================================================

def test_slide_html_is_self_contained(tmp_path):
    image = tmp_path / "shot.png"
    image.write_bytes(b"\x89PNG fake")
    slide = ContentSlide(title="Paso", prose="Texto", images=(ImageRef(alt="alt", path=str(image)),))

    page = render_slide_html(slide, 1.0, CSS, (1280, 720))

    expected = base64.b64encode(image.read_bytes()).decode("ascii")
    assert f"data:image/png;base64,{expected}" in page
    assert str(image) not in page
    assert CSS in page
    assert "width: 1280px" in page
    assert "layout-split" in page


def test_missing_image_renders_text_only(tmp_path):
    slide = ContentSlide(title="Paso", prose="Texto", images=(ImageRef(alt="", path=str(tmp_path / "gone.png")),))

    body = render_slide_body(slide, 1.0)

    assert "<img" not in body
    assert "layout-text-only" in body


def test_content_steps_win_over_bullets():
    body = render_slide_body(ContentSlide(title="T", bullets=("bullet",), steps=("step",)))

    assert "1. step" in body
    assert "bullet" not in body


def test_content_bullets_and_prose():
    body = render_slide_body(ContentSlide(title="T", bullets=("uno", "dos"), prose="ignored"))
    assert "• uno" in body and "• dos" in body
    assert "ignored" not in body

    body = render_slide_body(ContentSlide(title="T", prose="Pulse **Guardar**"))
    assert "<strong>Guardar</strong>" in body


def test_cover_rows_and_labels():
    cover = CoverSlide(
        title="Manual", subtitle="Sub", version="2.0", classification="Interno",
        footer="ACME", date="enero de 2026", meta=(("Autor", "Ana"),),
    )

    body = render_slide_body(cover, 1.0, "es")

    for text in ("Manual", "Sub", "Versión", "2.0", "Clasificación", "Interno", "enero de 2026", "Autor", "Ana", "ACME"):
        assert text in body
    assert "Version" in render_slide_body(cover, 1.0, "en")


def test_toc_and_section():
    toc = render_slide_body(TocSlide(title="Índice", items=("1. A", "2. B")), 1.0)
    assert toc.count("<li") == 2

    section = render_slide_body(SectionTitleSlide(title="3. Setup", section_number="3"), 1.0)
    assert 'class="section-number"' in section
    assert "width:100.00%" in section

    unnumbered = render_slide_body(SectionTitleSlide(title="Setup"), 0.0)
    assert "section-number" not in unnumbered
    assert "width:0.00%" in unnumbered


def test_closing_thanks():
    body = render_slide_body(ClosingSlide(title="ACME", subtitle="Manual"), 1.0, "es")
    assert "¡Gracias!" in body
    assert "ACME" in body and "Manual" in body


def test_text_is_escaped():
    body = render_slide_body(SectionTitleSlide(title="<script>x</script>"))
    assert "<script>" not in body


def test_unknown_slide_type_renders_placeholder():
    body = render_slide_body(Slide(title="?"), 1.0, "en")
    assert "slide-unknown" in body
    assert "Unknown slide type" in body


def test_phase_changes_output():
    slide = TocSlide(title="Índice", items=("1. A",))
    assert render_slide_html(slide, 0.0, CSS) != render_slide_html(slide, 1.0, CSS)
    assert render_slide_html(slide, 1.0, CSS) == render_slide_html(slide, 1.0, CSS)


def test_black_page():
    page = render_black_html((640, 360))
    assert "background: #000" in page
    assert "width: 640px" in page
