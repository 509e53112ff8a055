"""Matching request/response schemas."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class MatchSets(BaseModel):
    freight_matches: List[dict] = Field(default_factory=list)
    service_request_matches: List[dict] = Field(default_factory=list)


class CreatedCounts(BaseModel):
    freight_matches: int
    service_request_matches: int


class FailedCounts(BaseModel):
    freight_matches: int
    service_request_matches: int


class ProcessedCounts(BaseModel):
    freights_checked: int
    service_requests_checked: int


class MatchingResponse(BaseModel):
    success: bool = True
    matches: MatchSets
    freights: List[dict] = Field(default_factory=list, description="Matched freights still OPEN.")
    service_requests: List[dict] = Field(default_factory=list, description="Matched service requests still OPEN.")
    created: Optional[CreatedCounts] = None
    failed: Optional[FailedCounts] = None
    processed: Optional[ProcessedCounts] = None
    no_coverage: bool = False
    message: Optional[str] = None
