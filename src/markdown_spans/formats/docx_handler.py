"""Microsoft Word (.docx) file handler."""

import logging
from pathlib import Path

from docx import Document
from docx.image.exceptions import UnrecognizedImageError
from docx.opc.constants import RELATIONSHIP_TYPE as RT
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Inches, Pt, RGBColor
from docx.text.paragraph import Paragraph
from docx.text.run import Run

from markdown_spans.formats.base import FormatHandler
from markdown_spans.formatting.document import StyledDocument
from markdown_spans.formatting.ir import SchemeKind, TextAttributes, TextSegment

logger = logging.getLogger(__name__)

BASE_FONT_SIZE = 11  # points
MONOSPACE_FONT = "Courier New"
QUOTE_BORDER_COLOR = "CCCCCC"
MAX_IMAGE_WIDTH = Inches(6)
# Pictures wider than this many pixels are scaled to MAX_IMAGE_WIDTH
MAX_IMAGE_PIXELS = 576


def _hex(color: str) -> str:
    return color.lstrip("#").upper()


class DOCXHandler(FormatHandler):
    """Handler for Microsoft Word (.docx) output.

    Uses python-docx. Each line of the document becomes a paragraph; style
    runs become run formatting, links become hyperlinks and embedded images
    become inline pictures.
    """

    @property
    def supported_extensions(self) -> tuple[str, ...]:
        return (".docx",)

    def write(self, document: StyledDocument, path: Path) -> None:
        """Write styled document to DOCX file."""
        doc = Document()

        # Set default font
        style = doc.styles["Normal"]
        font = style.font
        font.name = "Calibri"
        font.size = Pt(BASE_FONT_SIZE)

        for line in self.split_lines(document):
            para = doc.add_paragraph()
            self._format_paragraph(para, line)

            for segment in line:
                if self.is_embedded(segment):
                    self._add_image(para, segment)
                    continue

                click_id = segment.attributes.click_id
                payload = document.payloads.get(click_id) if click_id is not None else None
                if payload is not None and payload.scheme_kind is SchemeKind.LINK:
                    run = self._add_hyperlink(para, segment.text, payload.resolved_value)
                else:
                    run = para.add_run(segment.text)
                self._style_run(run, segment.attributes)

        doc.save(path)

    def _format_paragraph(self, para: Paragraph, line: list[TextSegment]) -> None:
        """Apply line-level attributes (quote marker, block background)."""
        # pBdr and shd must precede ind inside pPr
        is_quote = any(segment.attributes.quote_marker for segment in line)
        if is_quote:
            self._set_left_border(para)

        for segment in line:
            if segment.attributes.block_background:
                self._set_paragraph_shading(para, segment.attributes.block_background)
                break

        if is_quote:
            para.paragraph_format.left_indent = Inches(0.4)

    def _style_run(self, run: Run, attributes: TextAttributes) -> None:
        """Copy style attributes onto a python-docx run."""
        if attributes.bold:
            run.bold = True
        if attributes.italic:
            run.italic = True
        if attributes.monospace:
            run.font.name = MONOSPACE_FONT
        if attributes.foreground:
            run.font.color.rgb = RGBColor.from_string(_hex(attributes.foreground))
        if attributes.relative_scale is not None:
            run.font.size = Pt(round(BASE_FONT_SIZE * attributes.relative_scale, 1))
        if attributes.background:
            self._set_run_shading(run, attributes.background)

    def _add_hyperlink(self, para: Paragraph, text: str, url: str) -> Run:
        """Append a hyperlink holding a single run; returns that run."""
        r_id = para.part.relate_to(url, RT.HYPERLINK, is_external=True)
        hyperlink = OxmlElement("w:hyperlink")
        hyperlink.set(qn("r:id"), r_id)

        r = OxmlElement("w:r")
        t = OxmlElement("w:t")
        t.text = text
        t.set(qn("xml:space"), "preserve")
        r.append(t)
        hyperlink.append(r)
        para._p.append(hyperlink)

        run = Run(r, para)
        run.font.underline = True
        return run

    def _add_image(self, para: Paragraph, segment: TextSegment) -> None:
        """Add an embedded image as an inline picture."""
        image = segment.attributes.embedded
        width = MAX_IMAGE_WIDTH if (image.width or 0) > MAX_IMAGE_PIXELS else None
        try:
            para.add_run().add_picture(image.open(), width=width)
        except (UnrecognizedImageError, OSError, ValueError) as e:
            logger.warning("Cannot embed image %s: %s", image.reference, e)
            para.add_run(f"[image: {image.alt_text or image.reference}]")

    def _set_run_shading(self, run: Run, color: str) -> None:
        """Set background color for a run."""
        shading_elm = OxmlElement("w:shd")
        shading_elm.set(qn("w:val"), "clear")
        shading_elm.set(qn("w:color"), "auto")
        shading_elm.set(qn("w:fill"), _hex(color))
        run._r.get_or_add_rPr().append(shading_elm)

    def _set_paragraph_shading(self, para: Paragraph, color: str) -> None:
        """Set background color for a whole paragraph."""
        shading_elm = OxmlElement("w:shd")
        shading_elm.set(qn("w:val"), "clear")
        shading_elm.set(qn("w:color"), "auto")
        shading_elm.set(qn("w:fill"), _hex(color))
        para._p.get_or_add_pPr().append(shading_elm)

    def _set_left_border(self, para: Paragraph) -> None:
        """Draw a quote bar along the left edge of a paragraph."""
        pPr = para._p.get_or_add_pPr()
        pBdr = OxmlElement("w:pBdr")
        left = OxmlElement("w:left")
        left.set(qn("w:val"), "single")
        left.set(qn("w:sz"), "18")
        left.set(qn("w:space"), "8")
        left.set(qn("w:color"), QUOTE_BORDER_COLOR)
        pBdr.append(left)
        pPr.append(pBdr)
