"""
Watermarking of certified PDFs.

The encrypted verification payload is written twice: as the /Creator metadata
field (the machine-readable proof) and as a QR code drawn in a strip added
below every page.
"""
import io
import logging

from PyPDF2 import PdfReader, PdfWriter, Transformation
from PyPDF2.generic import RectangleObject
from reportlab.graphics import renderPDF
from reportlab.graphics.barcode.qr import QrCodeWidget
from reportlab.graphics.shapes import Drawing
from reportlab.lib import colors
from reportlab.pdfgen import canvas

from certmgmt.common.codec import PayloadCodec
from certmgmt.errors import DocumentFormatError

logger = logging.getLogger(__name__)

MARGIN = 60       # points added below each page
QR_SIZE = 50
QR_OFFSET = 70    # distance of the QR's left edge from the right border
QR_COLOR = colors.HexColor("#40515e")


class PdfWatermarker:

    def __init__(self, codec: PayloadCodec):
        self.codec = codec

    def embed(self, pdf_bytes: bytes, payload: str) -> bytes:
        """
        Encrypts the payload, stores it as /Creator and draws it as a QR code
        in the bottom-right corner of every page.
        """
        reader = self._load(pdf_bytes)
        verification_tag = self.codec.encrypt(payload)

        writer = PdfWriter()
        for page in reader.pages:
            box = page.mediabox
            llx, lly = float(box.left), float(box.bottom)
            width = float(box.width)

            extended = RectangleObject([llx, lly - MARGIN, float(box.right), float(box.top)])
            page.mediabox = extended
            page.cropbox = extended

            overlay = self._render_qr_strip(verification_tag, width)
            overlay.add_transformation(Transformation().translate(llx, lly - MARGIN))
            page.merge_page(overlay)
            writer.add_page(page)

        metadata = {
            key: value for key, value in (reader.metadata or {}).items()
            if isinstance(value, str)
        }
        metadata["/Creator"] = verification_tag
        writer.add_metadata(metadata)

        out = io.BytesIO()
        writer.write(out)
        logger.debug("Watermarked PDF with %d pages", len(reader.pages))
        return out.getvalue()

    def extract_verification_tag(self, pdf_bytes: bytes) -> str:
        """Returns the encrypted payload stored in the /Creator field"""
        reader = self._load(pdf_bytes)
        try:
            metadata = reader.metadata
            creator = metadata.get("/Creator") if metadata else None
        except Exception as e:
            raise DocumentFormatError("PDF metadata could not be read") from e
        if not creator:
            raise DocumentFormatError("The PDF has no verification tag")
        return str(creator)

    @staticmethod
    def _load(pdf_bytes: bytes) -> PdfReader:
        if not pdf_bytes:
            raise DocumentFormatError("Invalid or corrupted PDF")
        try:
            reader = PdfReader(io.BytesIO(pdf_bytes))
            page_count = len(reader.pages)
        except Exception as e:
            raise DocumentFormatError("Invalid or corrupted PDF") from e
        if page_count == 0:
            raise DocumentFormatError("The PDF has no pages")
        return reader

    @staticmethod
    def _render_qr_strip(value: str, width: float):
        widget = QrCodeWidget(value)
        widget.barFillColor = QR_COLOR
        x1, y1, x2, y2 = widget.getBounds()
        drawing = Drawing(
            QR_SIZE, QR_SIZE,
            transform=[QR_SIZE / (x2 - x1), 0, 0, QR_SIZE / (y2 - y1), 0, 0]
        )
        drawing.add(widget)

        buf = io.BytesIO()
        c = canvas.Canvas(buf, pagesize=(width, MARGIN))
        renderPDF.draw(drawing, c, width - QR_OFFSET, (MARGIN - QR_SIZE) / 2)
        c.showPage()
        c.save()
        buf.seek(0)
        return PdfReader(buf).pages[0]
