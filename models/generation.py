"""
Generation models for SiteCraft: request options and the generated code bundle.
"""
from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Dict, List, Optional
from enum import Enum


class CamelModel(BaseModel):
    """
    Base model for wire types. Serialized with camelCase names, accepts both
    camelCase and snake_case on input.
    """

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class Framework(str, Enum):
    VANILLA = "vanilla"
    REACT = "react"
    VUE = "vue"
    SVELTE = "svelte"
    ASTRO = "astro"


class ProjectType(str, Enum):
    WEBSITE = "website"
    WEBAPP = "webapp"
    LANDING_PAGE = "landing-page"
    DASHBOARD = "dashboard"


class StyleOptions(CamelModel):
    color_scheme: str = "blue"
    layout: str = "modern"


class GenerationOptions(CamelModel):
    type: ProjectType = Field(default=ProjectType.WEBSITE, description="Kind of site to generate")
    framework: Framework = Field(default=Framework.VANILLA, description="Target framework")
    features: List[str] = Field(default=[], description="Feature tags, e.g. 'responsive'")
    style: StyleOptions = Field(default_factory=StyleOptions)

    @field_validator("features")
    @classmethod
    def dedupe_features(cls, value: List[str]) -> List[str]:
        # Set semantics with a stable order so prompts stay deterministic
        return list(dict.fromkeys(value))


class GeneratedCode(CamelModel):
    """
    Code produced by one successful generation.

    For vanilla sites html/css/javascript are the three extracted sections and
    full_code is a standalone document embedding all of them. For frameworks,
    html holds the main component and full_code is a static placeholder page.
    """
    html: str
    css: str = ""
    javascript: str = ""
    full_code: str
    framework: Optional[Framework] = None
    package_json: Optional[str] = None
    config_files: Optional[Dict[str, str]] = None


class PreviewRequest(CamelModel):
    code: GeneratedCode
    device: str = Field(default="desktop", description="desktop, tablet or mobile")
    format: str = Field(default="png", description="png, jpeg or webp")


class ExportRequest(CamelModel):
    code: GeneratedCode
    project_name: str = Field(default="My Generated App", description="Used for the archive file name")


class CodeLanguage(str, Enum):
    HTML = "html"
    CSS = "css"
    JAVASCRIPT = "javascript"


class FormatRequest(CamelModel):
    code: str
    language: CodeLanguage


class FormatResponse(CamelModel):
    code: str
    language: CodeLanguage


class ComponentsRequest(CamelModel):
    html: str = Field(..., description="HTML containing <div class=\"...-component\"> blocks")


class ExtractedComponent(CamelModel):
    name: str
    code: str
    react_code: str
