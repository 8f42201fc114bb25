from pydantic import BaseModel, Field


class CatalogEntry(BaseModel):
    """One show in the recently-aired catalog"""
    id: str = Field(..., description="Namespaced primary identity (e.g., 'tvmaze:82')")
    type: str = Field("series", description="Display type tag")
    name: str = Field(..., description="Show name")
    description: str = Field("", description="Show summary with HTML removed")
    poster: str | None = Field(None, description="Poster URL (medium, falling back to original)")
    background: str | None = Field(None, description="Background URL (original, falling back to medium)")
    airstamp: str = Field(..., description="ISO8601 UTC stamp of the latest qualifying episode")


class CatalogResponse(BaseModel):
    """Catalog payload"""
    metas: list[CatalogEntry]


class VideoEntry(BaseModel):
    """Single episode of a show"""
    id: str
    title: str
    season: int | None = None
    episode: int | None = None
    released: str | None = Field(None, description="Airdate (YYYY-MM-DD)")
    overview: str = ""


class ShowMeta(BaseModel):
    """Show details with its episode list"""
    id: str
    type: str = "series"
    name: str
    description: str | None = None
    poster: str | None = None
    background: str | None = None
    videos: list[VideoEntry] = Field(default_factory=list)


class MetaResponse(BaseModel):
    """Meta payload"""
    meta: ShowMeta


class CatalogDescriptor(BaseModel):
    """Catalog advertised by the manifest"""
    type: str = "series"
    id: str
    name: str
    extra: list[dict] = Field(default_factory=list)


class ManifestResponse(BaseModel):
    """Add-on manifest"""
    id: str
    version: str
    name: str
    description: str
    catalogs: list[CatalogDescriptor]
    resources: list[str] = Field(default_factory=lambda: ["catalog", "meta"])
    types: list[str] = Field(default_factory=lambda: ["series"])
    idPrefixes: list[str] = Field(default_factory=lambda: ["tvmaze"])

