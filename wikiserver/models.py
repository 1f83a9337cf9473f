from pydantic import BaseModel, Field
from typing import Optional

EMPTY_PAGE_MARKDOWN = "# A new page\n\nFeel-free to write in Markdown!\n"


class PageSummary(BaseModel):
    name: str
    id: Optional[int] = None


class PageLookup(BaseModel):
    found: bool = False
    id: Optional[int] = None
    raw_content: Optional[str] = Field(default=None, description="Stored markdown, absent for unknown pages")


class PageData(BaseModel):
    name: str
    content: str = ""


class ViewModel(BaseModel):
    """Values handed to the template renderer for a single response."""

    title: str = ""
    pages: list[PageSummary] = Field(default_factory=list)
    id: Optional[int] = None
    new_page: Optional[str] = None  # "yes" / "no"
    raw_content: Optional[str] = None
    content: Optional[str] = None
    timestamp: Optional[str] = None
    backup_gist_url: Optional[str] = None


class GistFile(BaseModel):
    content: str


class GistPayload(BaseModel):
    files: dict[str, GistFile] = Field(default_factory=dict)
    description: str = "A wiki backup"
    public: bool = True
