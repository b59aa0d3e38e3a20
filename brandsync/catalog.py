from __future__ import annotations

from .schemas import AssetField, AssetTemplate, AssetTypeConfig, FieldType


ASSET_TYPES: tuple[AssetTypeConfig, ...] = (
    AssetTypeConfig(
        id="business-card",
        label="Business Cards",
        description='US Standard 3.5" × 2"',
        width="3.5in",
        height="2in",
        preview_width=336,
        preview_height=192,
        aspect="1.75/1",
        templates=(
            AssetTemplate(id="modern", name="Modern Minimal", description="Clean and contemporary design"),
            AssetTemplate(id="bold", name="Bold Corporate", description="Strong and professional look"),
        ),
        fields=(
            AssetField(key="name", label="Name", placeholder="John Smith", required=True),
            AssetField(key="title", label="Title", placeholder="Software Engineer"),
            AssetField(key="email", label="Email", placeholder="contact@company.com", type=FieldType.EMAIL),
            AssetField(key="phone", label="Phone", placeholder="+1 (555) 123-4567", type=FieldType.TEL),
            AssetField(key="tagline", label="Tagline", placeholder="Your company tagline"),
        ),
    ),
    AssetTypeConfig(
        id="envelope",
        label="Envelopes",
        description='#10 Envelope 9.5" × 4.125"',
        width="9.5in",
        height="4.125in",
        preview_width=912,
        preview_height=396,
        aspect="9.5/4.125",
        templates=(
            AssetTemplate(id="classic", name="Classic", description="Traditional business envelope"),
            AssetTemplate(id="modern", name="Modern", description="Clean contemporary layout"),
        ),
        fields=(
            AssetField(key="fromName", label="From Name", placeholder="Company Name", required=True),
            AssetField(key="fromAddress", label="From Address", placeholder="123 Main St, City, ST 12345"),
            AssetField(key="toName", label="To Name", placeholder="Recipient Name", required=True),
            AssetField(key="toAddress", label="To Address", placeholder="456 Oak Ave, City, ST 67890"),
        ),
    ),
    AssetTypeConfig(
        id="letterhead",
        label="Letterheads",
        description='US Letter 8.5" × 11"',
        width="8.5in",
        height="11in",
        preview_width=816,
        preview_height=1056,
        aspect="8.5/11",
        templates=(
            AssetTemplate(id="simple", name="Simple", description="Minimal clean header"),
            AssetTemplate(id="formal", name="Formal", description="Traditional with accent lines"),
        ),
        fields=(
            AssetField(key="companyName", label="Company Name", placeholder="Company Name", required=True),
            AssetField(key="tagline", label="Tagline", placeholder="Your company tagline"),
            AssetField(key="address", label="Address", placeholder="123 Main St, City, ST 12345"),
            AssetField(key="phone", label="Phone", placeholder="+1 (555) 123-4567", type=FieldType.TEL),
            AssetField(key="email", label="Email", placeholder="contact@company.com", type=FieldType.EMAIL),
            AssetField(key="website", label="Website", placeholder="www.company.com"),
        ),
    ),
    AssetTypeConfig(
        id="invoice",
        label="Invoices",
        description='US Letter 8.5" × 11"',
        width="8.5in",
        height="11in",
        preview_width=816,
        preview_height=1056,
        aspect="8.5/11",
        templates=(
            AssetTemplate(id="clean", name="Clean", description="Simple modern invoice"),
            AssetTemplate(id="minimal", name="Minimal", description="Stripped-down layout"),
        ),
        fields=(
            AssetField(key="companyName", label="Company Name", placeholder="Company Name", required=True),
            AssetField(key="companyAddress", label="Company Address", placeholder="123 Main St, City, ST 12345"),
            AssetField(key="clientName", label="Client Name", placeholder="Client Name", required=True),
            AssetField(key="clientAddress", label="Client Address", placeholder="456 Oak Ave, City, ST 67890"),
            AssetField(key="invoiceNumber", label="Invoice #", placeholder="INV-001"),
            AssetField(key="date", label="Date", placeholder="2026-01-28"),
            AssetField(key="dueDate", label="Due Date", placeholder="2026-02-28"),
            AssetField(
                key="items",
                label="Line Items",
                placeholder="Service description — $0.00",
                type=FieldType.TEXTAREA,
            ),
            AssetField(key="total", label="Total", placeholder="$0.00", type=FieldType.CURRENCY, required=True),
        ),
    ),
)


def list_asset_types() -> list[AssetTypeConfig]:
    return list(ASSET_TYPES)


def get_asset_type(asset_id: str) -> AssetTypeConfig | None:
    for asset in ASSET_TYPES:
        if asset.id == asset_id:
            return asset
    return None


def get_template(asset: AssetTypeConfig, template_id: str) -> AssetTemplate | None:
    for template in asset.templates:
        if template.id == template_id:
            return template
    return None
