"""
Unit tests for DocumentAssembler.

Produced PDFs are opened with PyMuPDF to check page count, page size,
where each band was drawn and which band landed on which page.
"""

import fitz
import pytest
from PIL import Image
from reportlab.lib.pagesizes import A4

from dashboard_export.export.errors import AssemblyFailure
from dashboard_export.export.layout import CompositedBand, Slice, compute_geometry, slice_raster
from dashboard_export.export.output import AssemblerState, DocumentAssembler, composite_band


TOLERANCE_PT = 0.5


@pytest.fixture
def geometry():
    """220x200pt paper, 10pt margin, 400px raster -> scale 0.5, 400px per page."""
    return compute_geometry(400, 220, 200, 10)


def _assemble(raster, geometry):
    assembler = DocumentAssembler(geometry)
    slices = slice_raster(raster.height, geometry.page_content_height_px)
    for slice_ in slices:
        assembler.place(composite_band(raster, slice_), slice_)
    return assembler, assembler.finish()


class TestAssemblerStates:

    def test_starts_empty(self, geometry):
        assembler = DocumentAssembler(geometry)

        assert assembler.state is AssemblerState.EMPTY
        assert assembler.page_count == 0

    def test_first_band_moves_to_building(self, geometry, striped_raster):
        raster = striped_raster(400, [100])
        assembler = DocumentAssembler(geometry)

        assembler.place(composite_band(raster, Slice(0, 0, 100)), Slice(0, 0, 100))

        assert assembler.state is AssemblerState.BUILDING
        assert assembler.page_count == 1

    def test_finish_completes(self, geometry, striped_raster):
        assembler, data = _assemble(striped_raster(400, [100]), geometry)

        assert assembler.state is AssemblerState.COMPLETE
        assert data.startswith(b"%PDF")

    def test_place_after_complete_rejected(self, geometry, striped_raster):
        raster = striped_raster(400, [100])
        assembler, _ = _assemble(raster, geometry)

        with pytest.raises(AssemblyFailure, match="complete"):
            assembler.place(composite_band(raster, Slice(0, 0, 100)), Slice(0, 0, 100))
        assert assembler.page_count == 1

    def test_finish_twice_rejected(self, geometry, striped_raster):
        assembler, _ = _assemble(striped_raster(400, [100]), geometry)

        with pytest.raises(AssemblyFailure):
            assembler.finish()

    def test_finish_without_pages_rejected(self, geometry):
        with pytest.raises(AssemblyFailure, match="no pages"):
            DocumentAssembler(geometry).finish()

    def test_band_slice_mismatch_rejected(self, geometry, striped_raster):
        raster = striped_raster(400, [100, 100])
        band = composite_band(raster, Slice(1, 100, 100))

        with pytest.raises(AssemblyFailure, match="does not match"):
            DocumentAssembler(geometry).place(band, Slice(0, 0, 100))

    def test_undecodable_band_rejected(self, geometry):
        band = CompositedBand(index=0, width=400, height=100, image_format="PNG", data=b"not an image")
        assembler = DocumentAssembler(geometry)

        with pytest.raises(AssemblyFailure):
            assembler.place(band, Slice(0, 0, 100))
            assembler.finish()


class TestAssembledDocument:

    def test_page_count_matches_slices(self, geometry, striped_raster):
        # Arrange - 1000px at 400px per page
        raster = striped_raster(400, [400, 400, 200])

        # Act
        assembler, data = _assemble(raster, geometry)

        # Assert
        doc = fitz.open(stream=data, filetype="pdf")
        assert len(doc) == 3
        assert assembler.page_count == 3

    def test_exact_fit_has_no_trailing_blank_page(self, geometry, striped_raster):
        _, data = _assemble(striped_raster(400, [400]), geometry)

        assert len(fitz.open(stream=data, filetype="pdf")) == 1

    def test_pages_use_paper_size(self, geometry, striped_raster):
        _, data = _assemble(striped_raster(400, [400, 50]), geometry)

        for page in fitz.open(stream=data, filetype="pdf"):
            assert page.rect.width == pytest.approx(220, abs=TOLERANCE_PT)
            assert page.rect.height == pytest.approx(200, abs=TOLERANCE_PT)

    def test_band_drawn_at_margin_with_content_width(self, geometry, striped_raster):
        # Arrange - a single 120px band renders 60pt tall
        _, data = _assemble(striped_raster(400, [120]), geometry)

        # Act
        page = fitz.open(stream=data, filetype="pdf")[0]
        x0, y0, x1, y1 = page.get_image_info()[0]["bbox"]

        # Assert
        assert x0 == pytest.approx(10, abs=TOLERANCE_PT)
        assert y0 == pytest.approx(10, abs=TOLERANCE_PT)
        assert x1 - x0 == pytest.approx(200, abs=TOLERANCE_PT)
        assert y1 - y0 == pytest.approx(60, abs=TOLERANCE_PT)

    def test_placements_follow_slice_order(self, geometry, striped_raster):
        assembler, _ = _assemble(striped_raster(400, [400, 400, 200]), geometry)

        placements = assembler.placements
        assert [p.page_index for p in placements] == [0, 1, 2]
        assert [p.band_index for p in placements] == [0, 1, 2]
        assert [p.height for p in placements] == [200, 200, 100]
        assert all((p.x, p.y, p.width) == (10, 10, 200) for p in placements)

    def test_each_page_shows_its_own_band(self, geometry, striped_raster, band_colours):
        """Band colours appear on pages in top-to-bottom source order."""
        _, data = _assemble(striped_raster(400, [400, 400, 200]), geometry)
        doc = fitz.open(stream=data, filetype="pdf")

        for page_index, page in enumerate(doc):
            images = page.get_images()
            assert len(images) == 1
            pix = fitz.Pixmap(doc, images[0][0])
            assert tuple(pix.pixel(0, 0))[:3] == band_colours[page_index]

    def test_transparent_pixels_show_white_page(self, geometry):
        # Arrange - fully transparent 400x100 band, drawn over (10..210, 10..60)pt
        raster = Image.new("RGBA", (400, 100), (0, 0, 0, 0))

        # Act
        _, data = _assemble(raster, geometry)

        # Assert
        pix = fitz.open(stream=data, filetype="pdf")[0].get_pixmap()
        assert tuple(pix.pixel(100, 30))[:3] == (255, 255, 255)

    def test_identical_input_gives_identical_bytes(self, geometry, striped_raster):
        raster = striped_raster(400, [400, 400, 200])

        _, first = _assemble(raster, geometry)
        _, second = _assemble(raster, geometry)

        assert first == second

    def test_a4_full_page_band(self, striped_raster):
        geometry = compute_geometry(575, *A4, 10)
        raster = striped_raster(575, [geometry.page_content_height_px, 30])

        assembler, data = _assemble(raster, geometry)

        doc = fitz.open(stream=data, filetype="pdf")
        assert len(doc) == 2
        assert doc[0].rect.width == pytest.approx(A4[0], abs=TOLERANCE_PT)
        assert assembler.placements[1].height == pytest.approx(30 * geometry.scale)
