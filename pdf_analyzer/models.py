"""
Pydantic models for extracted content and request/response validation.
"""

from typing import List, Optional
from pydantic import BaseModel, Field


class Fragment(BaseModel):
    """A run of text drawn at one position on a page."""
    text: str = Field(..., description="Fragment text")
    x: Optional[float] = Field(default=None, description="Horizontal position of the text origin")
    y: Optional[float] = Field(default=None, description="Vertical position of the text origin")


class Page(BaseModel):
    """Text fragments of a single PDF page in content order."""
    number: int = Field(..., ge=1, description="1-based page number")
    fragments: List[Fragment] = Field(default_factory=list, description="Fragments in content stream order")

    @property
    def text(self) -> str:
        return "".join(fragment.text for fragment in self.fragments)


class AnalyzeResponse(BaseModel):
    """Response model for a successful analysis."""
    success: bool = Field(default=True, description="Always true on success")
    analysis: str = Field(..., description="Concatenated assistant response")


class ErrorResponse(BaseModel):
    """Response model for errors."""
    success: bool = Field(default=False, description="Always false on failure")
    error: str = Field(..., description="Error message")


class ConnectionTestResponse(BaseModel):
    """Response model for the assistant connectivity check."""
    success: bool = Field(default=True, description="Whether the service was reachable")
    message: str = Field(..., description="Status message")
    assistant_id: str = Field(..., description="Identifier of the throwaway assistant")


class HealthResponse(BaseModel):
    """Response model for health check."""
    status: str = Field(..., description="Health status")
    message: str = Field(..., description="Status message")
    version: str = Field(..., description="Application version")
    timestamp: str = Field(..., description="Current timestamp")
