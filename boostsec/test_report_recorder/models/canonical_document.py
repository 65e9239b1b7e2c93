"""Model for converted reports in canonical JUnit XML form."""

from pydantic import BaseModel, Field


class CanonicalDocument(BaseModel):
    """A converted report ready for aggregation."""

    source: str = Field(..., description="Workspace-relative path of the document")
    content: bytes = Field(..., description="JUnit XML bytes")
