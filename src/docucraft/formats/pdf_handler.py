"""PDF export handler."""

import copy
import io
import re

from bs4 import Tag
from reportlab.lib.colors import HexColor
from reportlab.lib.enums import TA_CENTER, TA_LEFT, TA_RIGHT
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import (
    HRFlowable,
    Image as RLImage,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)

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
)


# reportlab only ships the base-14 fonts, so families are mapped onto them
BODY_FONT = "Times-Roman"
HEADING_FONT = "Times-Bold"
MONO_FONT = "Courier"

TEXT_COLOR = HexColor("#111827")
QUOTE_BAR_COLOR = HexColor("#6366F1")
GRID_COLOR = HexColor("#E2E8F0")

POINTS_PER_PIXEL = 0.75

PARAGRAPH_ALIGNMENTS = {
    Alignment.LEFT: TA_LEFT,
    Alignment.CENTER: TA_CENTER,
    Alignment.RIGHT: TA_RIGHT,
}
IMAGE_ALIGNMENTS = {
    Alignment.LEFT: "LEFT",
    Alignment.CENTER: "CENTER",
    Alignment.RIGHT: "RIGHT",
}

# Declarations that would clip content once laid out on a page
CLIPPING_DECLARATION = re.compile(
    r"(?<![\w-])(?:overflow(?:-[xy])?|visibility|max-height|height)\s*:[^;]*;?\s*",
    re.IGNORECASE,
)


class PDFHandler(ExportHandler):
    """Handler for PDF exports.

    Works on a normalised clone of the live tree so the page layout never
    inherits on-screen clipping, then lays the walked blocks out with
    reportlab on letter-size pages.
    """

    @property
    def supported_extensions(self) -> tuple[str, ...]:
        return (".pdf",)

    def render(self, tree: Tag) -> bytes:
        """Render the tree to a PDF in memory."""
        clone = self.prepare_clone(tree)
        document = self.build_document(clone)
        settings = get_settings()

        margin = settings.pdf_margin_inches * inch
        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=letter,
            rightMargin=margin,
            leftMargin=margin,
            topMargin=margin,
            bottomMargin=margin,
            title=document.metadata["title"],
        )

        styles = self._create_styles()
        story: list = []
        for block in document.blocks:
            story.extend(self._render_block(block, styles, doc.width))

        if not story:
            story.append(Spacer(1, 1))

        doc.build(story)
        return buffer.getvalue()

    def prepare_clone(self, tree: Tag) -> Tag:
        """Copy the tree and normalise the copy for paged layout.

        Clipping declarations are stripped from inline styles and every
        image is forced to the centered alignment. The original tree is
        left untouched.
        """
        clone = copy.copy(tree)

        for tag in clone.find_all(style=True):
            cleaned = CLIPPING_DECLARATION.sub("", tag["style"]).strip()
            if cleaned:
                tag["style"] = cleaned
            else:
                del tag["style"]

        for img in clone.find_all("img"):
            classes = [
                c for c in (img.get("class") or [])
                if not c.startswith("img-align-")
            ]
            classes.append("img-align-center")
            img["class"] = classes

        return clone

    def _create_styles(self) -> dict[str, ParagraphStyle]:
        """Create all paragraph styles for the document."""
        base_styles = getSampleStyleSheet()
        settings = get_settings()
        size = settings.default_font_size
        body = ParagraphStyle(
            "BodyText",
            parent=base_styles["Normal"],
            fontName=BODY_FONT,
            fontSize=size,
            leading=size * 1.5,
            textColor=TEXT_COLOR,
            spaceBefore=6,
            spaceAfter=6,
        )
        return {
            "body": body,
            "h1": ParagraphStyle(
                "Heading1", parent=body, fontName=HEADING_FONT,
                fontSize=size * 2, leading=size * 2.4, spaceBefore=18, spaceAfter=10,
            ),
            "h2": ParagraphStyle(
                "Heading2", parent=body, fontName=HEADING_FONT,
                fontSize=size * 1.5, leading=size * 1.9, spaceBefore=16, spaceAfter=8,
            ),
            "h3": ParagraphStyle(
                "Heading3", parent=body, fontName=HEADING_FONT,
                fontSize=size * 1.25, leading=size * 1.6, spaceBefore=14, spaceAfter=6,
            ),
            "quote": ParagraphStyle(
                "Quote",
                parent=body,
                leftIndent=12,
                spaceBefore=12,
                spaceAfter=12,
            ),
            "list": ParagraphStyle(
                "ListItem",
                parent=body,
                leftIndent=36,
                firstLineIndent=-18,
                spaceBefore=2,
                spaceAfter=2,
            ),
            "cell": ParagraphStyle(
                "TableCell", parent=body, spaceBefore=0, spaceAfter=0,
            ),
        }

    def _render_block(
        self,
        block: ExportBlock,
        styles: dict[str, ParagraphStyle],
        frame_width: float,
    ) -> list:
        """Convert one export block into reportlab flowables."""
        if isinstance(block, HeadingBlock):
            style = self._aligned(styles[f"h{block.level}"], block.alignment)
            return [Paragraph(self._runs_to_html(block.runs), style)]

        if isinstance(block, ParagraphBlock):
            if not block.runs:
                return [Spacer(1, 12)]
            if block.quote:
                return [self._render_quote(block, styles["quote"], frame_width)]
            style = self._aligned(styles["body"], block.alignment)
            return [Paragraph(self._runs_to_html(block.runs), style)]

        if isinstance(block, ListBlock):
            return [
                Paragraph(self._runs_to_html(item), styles["list"])
                for item in block.items
            ]

        if isinstance(block, TableBlock):
            table = self._render_table(block, styles["cell"], frame_width)
            return [table, Spacer(1, 12)] if table else []

        if isinstance(block, ImageBlock):
            return [
                Spacer(1, 12),
                self._create_image_flowable(block, frame_width),
                Spacer(1, 12),
            ]

        if isinstance(block, RuleBlock):
            return [HRFlowable(
                width="100%",
                thickness=1,
                color=HexColor(f"#{block.color}"),
                spaceBefore=12,
                spaceAfter=12,
            )]

        return []

    def _aligned(self, style: ParagraphStyle, alignment: Alignment) -> ParagraphStyle:
        if alignment is Alignment.LEFT:
            return style
        return ParagraphStyle(
            f"{style.name}-{alignment.value}",
            parent=style,
            alignment=PARAGRAPH_ALIGNMENTS[alignment],
        )

    def _runs_to_html(self, runs: list[TextRun]) -> str:
        """Convert runs to reportlab's paragraph markup."""
        parts: list[str] = []

        for run in runs:
            if run.line_break:
                parts.append("<br/>")
                continue

            # Escape HTML special characters
            text = (
                run.text.replace("&", "&amp;")
                .replace("<", "&lt;")
                .replace(">", "&gt;")
            )
            if not text:
                continue

            if run.bold:
                text = f"<b>{text}</b>"
            if run.italic:
                text = f"<i>{text}</i>"
            if run.underline:
                text = f"<u>{text}</u>"
            if run.strike:
                text = f"<strike>{text}</strike>"

            attributes: list[str] = []
            if run.font:
                attributes.append(f'face="{MONO_FONT}"')
            if run.color:
                attributes.append(f'color="#{run.color}"')
            if run.shading:
                attributes.append(f'backColor="#{run.shading}"')
            if attributes:
                text = f"<font {' '.join(attributes)}>{text}</font>"

            parts.append(text)

        return "".join(parts)

    def _render_quote(
        self,
        block: ParagraphBlock,
        style: ParagraphStyle,
        frame_width: float,
    ) -> Table:
        """Render a quote as a one-cell table with a colored left bar."""
        para = Paragraph(self._runs_to_html(block.runs), style)
        table = Table([[para]], colWidths=[frame_width])
        table.setStyle(TableStyle([
            ("LINEBEFORE", (0, 0), (0, 0), 3, QUOTE_BAR_COLOR),
            ("LEFTPADDING", (0, 0), (-1, -1), 0),
            ("TOPPADDING", (0, 0), (-1, -1), 4),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
        ]))
        return table

    def _render_table(
        self,
        block: TableBlock,
        style: ParagraphStyle,
        frame_width: float,
    ):
        """Render a table block as a grid spanning the frame."""
        columns = block.column_count
        if not block.rows or not columns:
            return None

        table_data = []
        commands = [
            ("GRID", (0, 0), (-1, -1), 0.5, GRID_COLOR),
            ("VALIGN", (0, 0), (-1, -1), "TOP"),
            ("LEFTPADDING", (0, 0), (-1, -1), 6),
            ("RIGHTPADDING", (0, 0), (-1, -1), 6),
            ("TOPPADDING", (0, 0), (-1, -1), 4),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
        ]
        for row_index, row in enumerate(block.rows):
            cells = []
            for col_index, cell in enumerate(row):
                markup = self._runs_to_html(cell.runs)
                if cell.header:
                    markup = f"<b>{markup}</b>"
                cells.append(Paragraph(markup, self._aligned(style, cell.alignment)))
                if cell.shading:
                    commands.append((
                        "BACKGROUND",
                        (col_index, row_index),
                        (col_index, row_index),
                        HexColor(f"#{cell.shading}"),
                    ))
            cells.extend([""] * (columns - len(cells)))
            table_data.append(cells)

        table = Table(table_data, colWidths=[frame_width / columns] * columns)
        table.setStyle(TableStyle(commands))
        return table

    def _create_image_flowable(
        self, image: ImageBlock, max_width: float
    ) -> RLImage:
        """Create a reportlab Image flowable from an ImageBlock."""
        width = image.width * POINTS_PER_PIXEL
        height = image.height * POINTS_PER_PIXEL

        # Scale to fit within max_width while maintaining aspect ratio
        if width > max_width:
            scale = max_width / width
            width = max_width
            height = height * scale

        flowable = RLImage(io.BytesIO(image.data), width=width, height=height)
        flowable.hAlign = IMAGE_ALIGNMENTS[image.alignment]
        return flowable
