"""Microsoft Word (.docx) export handler."""

import io
from dataclasses import replace

from bs4 import Tag
from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Emu, Inches, Pt, RGBColor
from PIL import Image

from docucraft.config import get_settings
from docucraft.formats.base import ExportHandler
from docucraft.formatting.ir import (
    Alignment,
    ExportBlock,
    HeadingBlock,
    ImageBlock,
    ListBlock,
    ParagraphBlock,
    RuleBlock,
    TableBlock,
    TextRun,
    TextStyle,
)


ALIGNMENTS = {
    Alignment.LEFT: WD_ALIGN_PARAGRAPH.LEFT,
    Alignment.CENTER: WD_ALIGN_PARAGRAPH.CENTER,
    Alignment.RIGHT: WD_ALIGN_PARAGRAPH.RIGHT,
}

# Image formats python-docx can embed directly
NATIVE_PICTURE_FORMATS = ("png", "jpeg", "gif", "bmp", "tiff")

EMU_PER_PIXEL = 9525
QUOTE_BORDER_COLOR = "6366F1"
TABLE_CELL_MARGIN = 180  # twips


class DOCXHandler(ExportHandler):
    """Handler for Microsoft Word (.docx) exports.

    Uses python-docx to build the document block by block, with run-level
    formatting for every style flag the walker resolves.
    """

    @property
    def supported_extensions(self) -> tuple[str, ...]:
        return (".docx",)

    def render(self, tree: Tag) -> bytes:
        """Render the tree to a DOCX file in memory."""
        document = self.build_document(tree)
        settings = get_settings()
        doc = Document()
        doc.core_properties.title = document.metadata["title"]

        # Set default font
        style = doc.styles["Normal"]
        style.font.name = settings.default_font
        style.font.size = Pt(settings.default_font_size)
        style.font.color.rgb = RGBColor.from_string(settings.text_color)
        style.paragraph_format.line_spacing = 1.5

        for section in doc.sections:
            margin = Inches(settings.page_margin_inches)
            section.top_margin = margin
            section.bottom_margin = margin
            section.left_margin = margin
            section.right_margin = margin

        for block in document.blocks:
            self._add_block(doc, block)

        buffer = io.BytesIO()
        doc.save(buffer)
        return buffer.getvalue()

    def _add_block(self, doc: Document, block: ExportBlock) -> None:
        if isinstance(block, HeadingBlock):
            para = doc.add_heading(level=block.level)
            para.paragraph_format.space_before = Pt(30)
            para.paragraph_format.space_after = Pt(12)
            para.alignment = ALIGNMENTS[block.alignment]
            self._add_runs(para, block.runs)
        elif isinstance(block, ParagraphBlock):
            para = doc.add_paragraph()
            para.alignment = ALIGNMENTS[block.alignment]
            self._add_runs(para, block.runs)
            if block.quote:
                para.paragraph_format.left_indent = Inches(0.5)
                self._set_paragraph_border(para, "left", QUOTE_BORDER_COLOR, 24)
        elif isinstance(block, ListBlock):
            for item in block.items:
                para = doc.add_paragraph()
                para.paragraph_format.left_indent = Inches(0.5)
                para.paragraph_format.first_line_indent = Inches(-0.25)
                self._add_runs(para, item)
        elif isinstance(block, TableBlock):
            self._add_table(doc, block)
        elif isinstance(block, ImageBlock):
            self._add_image(doc, block)
        elif isinstance(block, RuleBlock):
            self._add_horizontal_line(doc, block)

    def _add_runs(self, para, runs: list[TextRun]) -> None:
        """Append styled runs to a paragraph."""
        for run_data in runs:
            if run_data.line_break:
                para.add_run().add_break()
                continue

            run = para.add_run(run_data.text)
            run.bold = run_data.bold or None
            run.italic = run_data.italic or None
            run.underline = run_data.underline or None
            if run_data.strike:
                run.font.strike = True
            if run_data.font:
                run.font.name = run_data.font
            if run_data.color:
                run.font.color.rgb = RGBColor.from_string(run_data.color)
            if run_data.shading:
                self._set_run_shading(run, run_data.shading)

    def _add_table(self, doc: Document, block: TableBlock) -> None:
        """Add a full-width table with thin single borders."""
        if not block.rows or not block.column_count:
            return

        table = doc.add_table(rows=len(block.rows), cols=block.column_count)
        self._set_table_layout(table)

        for row_index, row in enumerate(block.rows):
            for col_index, cell_data in enumerate(row):
                cell = table.rows[row_index].cells[col_index]
                para = cell.paragraphs[0]
                para.alignment = ALIGNMENTS[cell_data.alignment]
                runs = cell_data.runs
                if cell_data.header:
                    runs = [
                        run if run.line_break
                        else replace(run, style=run.style | TextStyle.BOLD)
                        for run in runs
                    ]
                self._add_runs(para, runs)
                if cell_data.shading:
                    self._set_cell_shading(cell, cell_data.shading)

    def _add_image(self, doc: Document, block: ImageBlock) -> None:
        """Add an inline picture at its resolved pixel footprint."""
        para = doc.add_paragraph()
        para.alignment = ALIGNMENTS[block.alignment]
        para.paragraph_format.space_before = Pt(12)
        para.paragraph_format.space_after = Pt(12)

        run = para.add_run()
        run.add_picture(
            self._picture_stream(block),
            width=Emu(block.width * EMU_PER_PIXEL),
            height=Emu(block.height * EMU_PER_PIXEL),
        )

    def _picture_stream(self, block: ImageBlock) -> io.BytesIO:
        """Return image bytes python-docx can embed, converting to PNG if needed."""
        if block.format in NATIVE_PICTURE_FORMATS:
            return io.BytesIO(block.data)

        converted = io.BytesIO()
        with Image.open(io.BytesIO(block.data)) as pil_img:
            pil_img.convert("RGBA").save(converted, format="PNG")
        converted.seek(0)
        return converted

    def _add_horizontal_line(self, doc: Document, block: RuleBlock) -> None:
        """Add a horizontal line separator."""
        para = doc.add_paragraph()
        self._set_paragraph_border(para, "bottom", block.color, block.size)

    def _set_paragraph_border(
        self, para, side: str, color: str, size: int
    ) -> None:
        """Draw a single border on one side of a paragraph."""
        pPr = para._p.get_or_add_pPr()
        pBdr = OxmlElement("w:pBdr")
        border = OxmlElement(f"w:{side}")
        border.set(qn("w:val"), "single")
        border.set(qn("w:sz"), str(size))
        border.set(qn("w:space"), "1")
        border.set(qn("w:color"), color)
        pBdr.append(border)
        pPr.append(pBdr)

    def _set_run_shading(self, run, color: str) -> None:
        """Set background fill for a run."""
        shading_elm = OxmlElement("w:shd")
        shading_elm.set(qn("w:val"), "clear")
        shading_elm.set(qn("w:color"), "auto")
        shading_elm.set(qn("w:fill"), color)
        run._r.get_or_add_rPr().append(shading_elm)

    def _set_cell_shading(self, cell, color: str) -> None:
        """Set background color for a table cell."""
        shading_elm = OxmlElement("w:shd")
        shading_elm.set(qn("w:val"), "clear")
        shading_elm.set(qn("w:fill"), color)
        cell._tc.get_or_add_tcPr().append(shading_elm)

    def _set_table_layout(self, table) -> None:
        """Make a table full-width with thin borders and padded cells."""
        tbl = table._tbl
        tblPr = tbl.tblPr if tbl.tblPr is not None else OxmlElement("w:tblPr")

        width = OxmlElement("w:tblW")
        width.set(qn("w:w"), "5000")
        width.set(qn("w:type"), "pct")
        existing = tblPr.find(qn("w:tblW"))
        if existing is not None:
            tblPr.remove(existing)
        tblPr.append(width)

        tblBorders = OxmlElement("w:tblBorders")
        for border_name in ["top", "left", "bottom", "right", "insideH", "insideV"]:
            border = OxmlElement(f"w:{border_name}")
            border.set(qn("w:val"), "single")
            border.set(qn("w:sz"), "4")
            border.set(qn("w:space"), "0")
            border.set(qn("w:color"), "auto")
            tblBorders.append(border)
        tblPr.append(tblBorders)

        margins = OxmlElement("w:tblCellMar")
        for side in ["top", "left", "bottom", "right"]:
            margin = OxmlElement(f"w:{side}")
            margin.set(qn("w:w"), str(TABLE_CELL_MARGIN))
            margin.set(qn("w:type"), "dxa")
            margins.append(margin)
        tblPr.append(margins)

        if tbl.tblPr is None:
            tbl.insert(0, tblPr)
