from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from phpcity.config import GLOBAL_NAMESPACE, UNKNOWN_NAME


class Category(str, Enum):
    CLASS = "class"
    INTERFACE = "interface"


class TypeMetrics(BaseModel):
    """
    Structural facts about one declared PHP type.

    Attribute names are pythonic; the aliases are the keys of the persisted
    JSON array, which is the contract shared with renderers. Field order here
    is the key order of that JSON.
    """

    file: str
    namespace: str = GLOBAL_NAMESPACE
    name: str = UNKNOWN_NAME
    extends: Optional[str] = None
    implements: Optional[str] = None
    line_span: int = Field(0, alias="no_lines", ge=0)
    attribute_count: int = Field(0, alias="no_attrs", ge=0)
    method_count: int = Field(0, alias="no_methods", ge=0)
    is_abstract: bool = Field(False, alias="abstract")
    is_final: bool = Field(False, alias="final")
    is_trait: bool = Field(False, alias="trait")
    category: Category = Field(Category.CLASS, alias="type")
    is_anonymous: bool = Field(False, alias="anonymous")
    # Every implemented interface; `implements` only carries the first one.
    # Not part of the persisted JSON.
    interfaces: List[str] = Field(default_factory=list, exclude=True)

    model_config = {
        "populate_by_name": True
    }

    @field_validator("namespace", mode="before")
    @classmethod
    def _global_when_absent(cls, value):
        # Files written before the sentinel existed carry `null`.
        return value or GLOBAL_NAMESPACE

    @property
    def style(self) -> str:
        if self.category == Category.INTERFACE:
            return "interface"
        if self.is_trait:
            return "trait"
        if self.is_abstract:
            return "abstract"
        return "class"


class ScanSummary(BaseModel):
    total: int = 0
    classes: int = 0
    interfaces: int = 0
    abstract_classes: int = 0
    traits: int = 0


class NamespaceNode(BaseModel):
    name: str
    full_path: str = ""
    level: int = 0
    # dict keeps first-insertion order, which drives the layout grid
    children: Dict[str, "NamespaceNode"] = Field(default_factory=dict)
    records: List[TypeMetrics] = Field(default_factory=list)


class Vec3(BaseModel):
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    model_config = {"frozen": True}


class Footprint(BaseModel):
    width: float
    height: float
    depth: float

    model_config = {"frozen": True}


class BuildingPlacement(BaseModel):
    record: TypeMetrics
    namespace_path: str
    position: Vec3
    footprint: Footprint
    style: str
    color: str

    model_config = {"frozen": True}


class PlatformPlacement(BaseModel):
    name: str
    full_path: str
    level: int
    record_count: int
    position: Vec3
    size: float
    height: float
    color: str

    model_config = {"frozen": True}


class NamespaceLabel(BaseModel):
    text: str
    full_path: str
    kind: str  # "records" or "district"
    position: Vec3
    font_size: int
    color: str

    model_config = {"frozen": True}


class CameraFraming(BaseModel):
    max_depth: int
    max_breadth: int
    city_size: float
    distance: float
    position: Vec3
    look_at: Vec3 = Field(default_factory=Vec3)

    model_config = {"frozen": True}


class LayoutResult(BaseModel):
    buildings: List[BuildingPlacement] = Field(default_factory=list)
    platforms: List[PlatformPlacement] = Field(default_factory=list)
    labels: List[NamespaceLabel] = Field(default_factory=list)
    camera: CameraFraming

    model_config = {"frozen": True}

    @property
    def is_empty(self) -> bool:
        return not self.buildings and not self.platforms
