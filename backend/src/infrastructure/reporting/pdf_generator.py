"""PDF rendering of disclosure packets and lease agreements."""

import asyncio
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional
from uuid import UUID

from reportlab.lib import colors
from reportlab.lib.pagesizes import LETTER
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont

from application.interfaces import IDocumentGenerator
from domain.entities import Application, LeaseSignature, Property
from domain.enums import DocumentKind, SignerRole
from infrastructure.config import get_logger
from infrastructure.disclosures import StaticDisclosureRegistry

FEDERAL_DISCLOSURES = (
    ("Fair Housing", "fair_housing_acknowledged"),
    ("Credit check authorization", "credit_check_authorized"),
    ("Accuracy certification", "accuracy_certified"),
    ("Application fee", "fee_acknowledged"),
)


def _fmt_date(value: Optional[datetime]) -> str:
    return value.strftime("%m/%d/%Y") if value else "-"


def _money(value: Optional[str]) -> str:
    return f"${value}" if value else "-"


class LeaseDocumentGenerator(IDocumentGenerator):
    """
    Renders application and lease documents to PDF files.

    Files are written to ``<output_dir>/<application_id>/<slug>.pdf`` and
    served from ``<base_url>/<application_id>/<slug>.pdf``.
    """

    def __init__(self, output_dir: str, base_url: str):
        self.logger = get_logger(self.__class__.__name__)
        self.output_dir = Path(output_dir)
        self.base_url = base_url.rstrip("/")
        self.disclosures = StaticDisclosureRegistry()
        self._register_fonts()
        self.styles = self._create_styles()

    def _register_fonts(self):
        """Register a TrueType font with wide glyph coverage when available."""
        font_path = "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf"
        bold_font_path = "/usr/share/fonts/truetype/liberation/LiberationSans-Bold.ttf"
        try:
            if Path(font_path).exists() and Path(bold_font_path).exists():
                pdfmetrics.registerFont(TTFont("LeaseFont", font_path))
                pdfmetrics.registerFont(TTFont("LeaseFont-Bold", bold_font_path))
                self.font_name = "LeaseFont"
                self.bold_font_name = "LeaseFont-Bold"
                return
        except Exception as e:
            self.logger.error(f"Font registration failed: {e}")
        self.font_name = "Helvetica"
        self.bold_font_name = "Helvetica-Bold"

    def _create_styles(self):
        styles = getSampleStyleSheet()

        styles.add(ParagraphStyle(
            name="DocTitle",
            parent=styles["Heading1"],
            fontName=self.bold_font_name,
            fontSize=20,
            textColor=colors.HexColor("#1a237e"),
            spaceAfter=16,
            alignment=1
        ))

        styles.add(ParagraphStyle(
            name="SectionHeader",
            parent=styles["Heading2"],
            fontName=self.bold_font_name,
            fontSize=14,
            textColor=colors.HexColor("#1565c0"),
            spaceBefore=16,
            spaceAfter=10
        ))

        styles.add(ParagraphStyle(
            name="DocBody",
            parent=styles["Normal"],
            fontName=self.font_name,
            fontSize=10,
            leading=14,
            spaceAfter=6
        ))

        # Legal notices
        styles.add(ParagraphStyle(
            name="NoticeBox",
            parent=styles["Normal"],
            fontName=self.font_name,
            fontSize=9,
            leading=13,
            backColor=colors.HexColor("#f8f9fa"),
            borderColor=colors.HexColor("#e0e0e0"),
            borderWidth=1,
            borderPadding=10,
            spaceBefore=5,
            spaceAfter=14
        ))

        return styles

    def document_url(self, application_id: UUID, document: DocumentKind) -> str:
        return f"{self.base_url}/{application_id}/{document.slug}.pdf"

    def document_path(self, application_id: UUID, document: DocumentKind) -> Path:
        return self.output_dir / str(application_id) / f"{document.slug}.pdf"

    async def generate_disclosure_pdf(
        self,
        application: Application,
        property: Optional[Property],
        url: str
    ) -> str:
        story = self._disclosure_story(application, property)
        await self._render(application.id, DocumentKind.DISCLOSURE, story)
        return url

    async def generate_lease_pdf(
        self,
        application: Application,
        property: Optional[Property],
        url: str
    ) -> str:
        story = self._lease_story(application, property)
        story.append(Spacer(1, 30))
        story.append(Paragraph("Signatures", self.styles["SectionHeader"]))
        story.append(Paragraph(
            "This agreement is awaiting electronic signature by the tenant and the landlord.",
            self.styles["DocBody"]
        ))
        await self._render(application.id, DocumentKind.LEASE, story)
        return url

    async def generate_signed_lease_pdf(
        self,
        application: Application,
        property: Optional[Property],
        signatures: list[LeaseSignature],
        esignature_disclosure: str,
        url: str
    ) -> str:
        story = self._lease_story(application, property)

        story.append(Paragraph("Electronic Signature Disclosure", self.styles["SectionHeader"]))
        story.append(Paragraph(esignature_disclosure, self.styles["NoticeBox"]))

        story.append(Paragraph("Signatures", self.styles["SectionHeader"]))
        by_role = {signature.signer_role: signature for signature in signatures}
        for role in (SignerRole.TENANT, SignerRole.LANDLORD):
            signature = by_role.get(role)
            if signature is None:
                continue
            self._add_table(story, [
                [f"{role.value.title()}:", signature.signer_name],
                ["Signed at:", signature.signed_at.strftime("%m/%d/%Y %H:%M UTC")],
                ["IP address:", signature.ip_address or "-"],
                ["Attestation:", Paragraph(signature.attestation_text, self.styles["DocBody"])],
            ])

        if application.lease_fully_signed_at:
            story.append(Paragraph(
                f"Fully executed on {_fmt_date(application.lease_fully_signed_at)}.",
                self.styles["DocBody"]
            ))

        await self._render(application.id, DocumentKind.SIGNED_LEASE, story)
        return url

    def _disclosure_story(self, application: Application, property: Optional[Property]) -> list:
        story = []
        story.append(Paragraph("Rental Application Disclosures", self.styles["DocTitle"]))
        story.append(Paragraph(
            f"Generated {datetime.now(timezone.utc).strftime('%m/%d/%Y %H:%M')} UTC",
            ParagraphStyle("Date", parent=self.styles["DocBody"], alignment=1, textColor=colors.grey)
        ))
        story.append(Spacer(1, 20))

        story.append(Paragraph("Applicant", self.styles["SectionHeader"]))
        personal = application.personal_info
        self._add_table(story, [
            ["Name:", personal.full_name if personal else "-"],
            ["Email:", (personal.email if personal else None) or "-"],
            ["Property:", (application.snapshot.title if application.snapshot else None) or "-"],
            ["Submitted:", _fmt_date(application.submitted_at)],
        ])

        story.append(Paragraph("Federal Disclosures", self.styles["SectionHeader"]))
        federal = application.legal_disclosures
        self._add_table(story, [
            [f"{label}:", "Acknowledged" if getattr(federal, attr) else "Not acknowledged"]
            for label, attr in FEDERAL_DISCLOSURES
        ])

        required = self.disclosures.get_required_disclosures(property.state if property else None)
        if required:
            story.append(Paragraph("State Disclosures", self.styles["SectionHeader"]))
            for disclosure in required:
                ack = application.state_disclosures.get(disclosure.id)
                mark = "Acknowledged" if ack and ack.acknowledged else "Not acknowledged"
                story.append(Paragraph(f"<b>{disclosure.label}</b> ({mark})", self.styles["DocBody"]))
                story.append(Paragraph(disclosure.text, self.styles["NoticeBox"]))

        if application.legal_acceptance and application.legal_acceptance.documents:
            story.append(Paragraph("Accepted Documents", self.styles["SectionHeader"]))
            self._add_table(story, [
                [f"{key}:", f"version {version}"]
                for key, version in application.legal_acceptance.documents.items()
            ])

        return story

    def _lease_story(self, application: Application, property: Optional[Property]) -> list:
        snapshot = application.snapshot
        personal = application.personal_info

        story = []
        story.append(Paragraph("Residential Lease Agreement", self.styles["DocTitle"]))
        story.append(Spacer(1, 10))

        story.append(Paragraph("1. Parties and Premises", self.styles["SectionHeader"]))
        self._add_table(story, [
            ["Tenant:", personal.full_name if personal else "-"],
            ["Property:", (snapshot.title if snapshot else None) or "-"],
            ["Address:", (snapshot.address if snapshot else None) or (property.address if property else None) or "-"],
            ["State:", (property.state if property else None) or "-"],
        ])

        story.append(Paragraph("2. Terms", self.styles["SectionHeader"]))
        self._add_table(story, [
            ["Monthly rent:", _money(snapshot.rent if snapshot else None)],
            ["Security deposit:", _money(snapshot.deposit if snapshot else None)],
            ["Lease term:", (snapshot.lease_term if snapshot else None) or "-"],
            ["Available:", _fmt_date(snapshot.available_date if snapshot else None)],
        ])

        if snapshot is not None:
            policies = snapshot.policies
            story.append(Paragraph("3. Policies", self.styles["SectionHeader"]))
            self._add_table(story, [
                ["Pets:", policies.pet_policy or "-"],
                ["Smoking:", policies.smoking_policy or "-"],
                ["Occupancy limit:", str(policies.occupancy_limit)],
                ["Utilities included:", ", ".join(policies.utilities_included) or "None"],
            ])
            if policies.rules_text:
                story.append(Paragraph(policies.rules_text, self.styles["NoticeBox"]))

        return story

    async def _render(self, application_id: UUID, document: DocumentKind, story: list) -> Path:
        output_path = self.document_path(application_id, document)
        await asyncio.to_thread(self._build, output_path, story)
        return output_path

    def _build(self, output_path: Path, story: list) -> None:
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            doc = SimpleDocTemplate(
                str(output_path),
                pagesize=LETTER,
                rightMargin=50, leftMargin=50,
                topMargin=50, bottomMargin=50
            )
            doc.build(story)
            self.logger.info(f"PDF generated: {output_path}")
        except Exception as e:
            self.logger.error(f"Failed to generate PDF {output_path}: {e}", exc_info=True)
            raise

    def _add_table(self, story, data, col_widths=(140, 370)):
        t = Table(data, colWidths=list(col_widths))
        t.setStyle(TableStyle([
            ("FONTNAME", (0, 0), (-1, -1), self.font_name),
            ("FONTNAME", (0, 0), (0, -1), self.bold_font_name),
            ("TEXTCOLOR", (0, 0), (0, -1), colors.HexColor("#1a237e")),
            ("TEXTCOLOR", (1, 0), (-1, -1), colors.HexColor("#424242")),
            ("VALIGN", (0, 0), (-1, -1), "TOP"),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 6),
            ("TOPPADDING", (0, 0), (-1, -1), 6),
            ("LINEBELOW", (0, 0), (-1, -1), 0.5, colors.HexColor("#eeeeee")),
        ]))
        story.append(t)
        story.append(Spacer(1, 12))
