from enum import Enum
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

PREVIEW_DPI = 96


class FieldType(str, Enum):
    TEXT = "text"
    EMAIL = "email"
    TEL = "tel"
    TEXTAREA = "textarea"
    CURRENCY = "currency"


class AssetField(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str = Field(..., description="Unique within the owning asset's field list")
    label: str
    placeholder: str = Field(default="", description="Shown in the edit form only, never rendered")
    type: FieldType = Field(default=FieldType.TEXT)
    required: bool = Field(
        default=False,
        description="A blank value blocks document generation",
    )


class AssetTemplate(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str = ""


def parse_inches(value: str) -> float:
    """
    Convert a CSS length in inches ("3.5in") to a float.

    Only inches are accepted; the catalog stores print sizes in inches.
    """
    text = (value or "").strip()
    if not text.endswith("in"):
        raise ValueError(f"Expected a length in inches, got {value!r}")
    return float(text[:-2])


class AssetTypeConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    description: str
    width: str = Field(..., description="Physical width in CSS print units, e.g. '3.5in'")
    height: str = Field(..., description="Physical height in CSS print units, e.g. '2in'")
    preview_width: int = Field(..., description="Native on-screen width at 96 px/inch")
    preview_height: int = Field(..., description="Native on-screen height at 96 px/inch")
    aspect: str = Field(..., description="CSS aspect-ratio value, e.g. '1.75/1'")
    templates: Tuple[AssetTemplate, ...] = ()
    fields: Tuple[AssetField, ...] = ()

    @model_validator(mode="after")
    def check_consistency(self) -> "AssetTypeConfig":
        expected_w = parse_inches(self.width) * PREVIEW_DPI
        expected_h = parse_inches(self.height) * PREVIEW_DPI
        if abs(expected_w - self.preview_width) > 0.5 or abs(expected_h - self.preview_height) > 0.5:
            raise ValueError(
                f"Preview size {self.preview_width}x{self.preview_height} does not match "
                f"{self.width} x {self.height} at {PREVIEW_DPI} dpi"
            )
        keys = [f.key for f in self.fields]
        if len(keys) != len(set(keys)):
            raise ValueError(f"Duplicate field keys in asset {self.id}")
        template_ids = [t.id for t in self.templates]
        if len(template_ids) != len(set(template_ids)):
            raise ValueError(f"Duplicate template ids in asset {self.id}")
        return self

    def registry_key(self, template_id: str) -> str:
        return f"{self.id}::{template_id}"

    def required_keys(self) -> List[str]:
        return [f.key for f in self.fields if f.required]


class BrandState(BaseModel):
    name: str = ""
    tagline: str = ""
    email: str = ""
    phone: str = ""
    logo: Optional[str] = Field(
        default=None,
        description="Embeddable image source (data URI or URL)",
    )

    @classmethod
    def defaults(cls) -> "BrandState":
        return cls(
            name="BrandSync",
            tagline="Your brand, unified",
            email="contact@brandsync.com",
            phone="+1 (555) 123-4567",
            logo=None,
        )


class BrandPayload(BaseModel):
    """Wire shape of the brand store. Every key may be absent."""

    name: Optional[str] = None
    tagline: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    logo_url: Optional[str] = None

    def to_state(self) -> BrandState:
        fallback = BrandState.defaults()
        return BrandState(
            name=self.name if self.name is not None else fallback.name,
            tagline=self.tagline if self.tagline is not None else fallback.tagline,
            email=self.email if self.email is not None else fallback.email,
            phone=self.phone if self.phone is not None else fallback.phone,
            logo=self.logo_url or None,
        )

    @classmethod
    def from_state(cls, brand: BrandState) -> "BrandPayload":
        return cls(
            name=brand.name,
            tagline=brand.tagline,
            email=brand.email,
            phone=brand.phone,
            logo_url=brand.logo,
        )


class BrandPatch(BaseModel):
    name: Optional[str] = None
    tagline: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    logo: Optional[str] = None
    clear_logo: bool = Field(default=False, description="Remove the logo instead of keeping it")


class GenerateRequest(BaseModel):
    asset_id: str
    template_id: str
    fields: Dict[str, str] = Field(default_factory=dict)
    logo: Optional[str] = None
    dark: bool = False


class FormatRequest(BaseModel):
    value: str = ""
    type: FieldType = FieldType.TEXT


class FormatResponse(BaseModel):
    value: str


class EditorOpenRequest(BaseModel):
    asset_id: str
    template_id: str


class FieldUpdate(BaseModel):
    value: str = ""


class EditorState(BaseModel):
    id: str
    asset_id: str
    template_id: str
    fields: Dict[str, str]
    zoom: float
    zoom_label: str
    dark: bool
    display_width: float
    display_height: float
    native_width: int
    native_height: int
    frame_min_width: float
    frame_min_height: float
    transform: str = Field(..., description="CSS transform applied to the native-size document")
    missing_required: List[str]
    generating: bool
    filename: str
    last_error: Optional[str] = None


class WorkspaceState(BaseModel):
    brand: BrandState
    dirty: bool
    saving: bool
    loaded: bool
    last_error: Optional[str] = None
