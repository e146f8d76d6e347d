"""Schemas for report generation endpoints."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ReportResponse(BaseModel):
    success: bool = Field(default=True, description="Whether the report was generated")
    session_id: str = Field(..., description="Identifier of the report session")
    image_count: int = Field(..., description="Number of images analysed")
    analysis: str = Field(default="", description="Markdown analysis returned by the language model")
    download_url: str = Field(..., description="Relative URL of the zip archive")


class ProgressResponse(BaseModel):
    session_id: str = Field(..., description="Identifier of the report session")
    progress: int = Field(default=0, description="OCR progress in percent (0-100)")
    completed: int = Field(default=0, description="Images processed so far")
    total: int = Field(default=0, description="Images in the batch")


class HealthResponse(BaseModel):
    status: str = Field(..., description="Current API state")
    model: str = Field(..., description="Model used for the analysis")
    llm: str = Field(..., description="Base URL of the language model API")
