"""Report catalog, file generation and dashboard analytics."""

import logging
from typing import Annotated

from fastapi import APIRouter, Body, Depends
from fastapi.responses import Response

from app.auth.permissions import require_permissions
from models.employee import Employee
from routers.dependencies import AppSettings, DbSession
from schemas.report import ReportAnalytics, ReportRequest, ReportTemplate
from services.report_service import ReportService

logger = logging.getLogger(__name__)

router = APIRouter()

ReportViewer = Annotated[Employee, Depends(require_permissions("view_all_reports"))]


def get_report_service(db: DbSession, settings: AppSettings) -> ReportService:
    return ReportService(db, settings)


Reports = Annotated[ReportService, Depends(get_report_service)]


@router.get("/templates", response_model=list[ReportTemplate], summary="Available reports")
def list_templates(current_user: ReportViewer) -> list[ReportTemplate]:
    return [ReportTemplate.model_validate(template) for template in ReportService.templates()]


@router.post(
    "/generate/{report_id}",
    summary="Generate a report file",
    response_class=Response,
    responses={
        200: {
            "description": "The rendered PDF or Excel file",
            "content": {"application/pdf": {}, "application/octet-stream": {}},
        },
        404: {"description": "Report template not found"},
    },
)
def generate_report(
    report_id: str,
    current_user: ReportViewer,
    service: Reports,
    request: Annotated[ReportRequest | None, Body()] = None,
) -> Response:
    """Render a report as a downloadable attachment.

    Args:
        report_id: One of the template ids.
        current_user: Caller holding ``view_all_reports``.
        service: Report service.
        request: Output format and filters; defaults to a PDF without filters.

    Returns:
        The file with a Content-Disposition attachment header.
    """
    content, media_type, filename = service.generate(report_id, request or ReportRequest())
    logger.info("Report %s generated for employee_id=%s", filename, current_user.id)
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@router.get("/analytics", response_model=ReportAnalytics, summary="Report dashboard analytics")
def report_analytics(current_user: ReportViewer, service: Reports) -> ReportAnalytics:
    return ReportAnalytics.model_validate(service.analytics())
