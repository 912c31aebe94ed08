"""Report Schemas - report types and filing payloads."""

from pydantic import Field

from plub.core.domain_types import ReportTarget, ReportType
from plub.schemas.common import CamelModel


class ReportTypeResponse(CamelModel):
    report_type: ReportType
    description: str


class ReportBody(CamelModel):
    """Report filed from a resource route; the route supplies the target."""
    report_type: ReportType
    reason: str | None = Field(None, max_length=500)


class CreateReportRequest(ReportBody):
    report_target: ReportTarget
    target_id: int = Field(ge=1)


class ReportResponse(CamelModel):
    report_id: int
    report_target: str
    target_id: int
    report_type: str
