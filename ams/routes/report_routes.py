import logging
from datetime import date, datetime

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from ams.auth.dependencies import get_current_identity, get_uow
from ams.auth.jwt_handler import TokenClaims
from ams.core.result import ErrorKind, ServiceResult
from ams.models.enums import UserRole
from ams.repositories import UnitOfWork
from ams.routes.errors import raise_for_result
from ams.schemas.report import AttendanceReportRow
from ams.services import pdf_service
from ams.services.report_service import ReportService

router = APIRouter(tags=['reports'])

logger = logging.getLogger(__name__)

REPORT_TITLES = {
    UserRole.STUDENT: 'Student Attendance Report',
    UserRole.TEACHER: 'Course Attendance Report',
    UserRole.ADMIN: 'Course Attendance Report (Admin)',
}


def get_report_service(uow: UnitOfWork = Depends(get_uow)) -> ReportService:
    return ReportService(uow)


def report_title(role: UserRole) -> str:
    return REPORT_TITLES[role]


def validate_date_range(start_date: date | None, end_date: date | None) -> None:
    if start_date and end_date and start_date > end_date:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail='Start date cannot be after end date.',
        )


def build_report(
    report_service: ReportService,
    identity: TokenClaims,
    course_id: int | None,
    start_date: date | None,
    end_date: date | None,
) -> ServiceResult:
    validate_date_range(start_date, end_date)

    if identity.role == UserRole.STUDENT:
        if course_id is None:
            return report_service.get_student_report(identity.user_id, None, start_date, end_date)
        result = report_service.get_student_course_report(identity.user_id, course_id, start_date, end_date)
        return ServiceResult.ok([result.data], result.message) if result.success else result
    if course_id is None:
        return ServiceResult.fail('Course is required for course reports', kind=ErrorKind.VALIDATION)
    return report_service.get_course_report(course_id, start_date, end_date, identity.user_id, identity.role)


@router.get('', response_model=list[AttendanceReportRow])
def get_report(
    course_id: int | None = Query(default=None),
    start_date: date | None = Query(default=None),
    end_date: date | None = Query(default=None),
    identity: TokenClaims = Depends(get_current_identity),
    report_service: ReportService = Depends(get_report_service),
):
    return raise_for_result(build_report(report_service, identity, course_id, start_date, end_date))


@router.get('/export')
def export_report(
    course_id: int | None = Query(default=None),
    start_date: date | None = Query(default=None),
    end_date: date | None = Query(default=None),
    identity: TokenClaims = Depends(get_current_identity),
    report_service: ReportService = Depends(get_report_service),
):
    rows = raise_for_result(build_report(report_service, identity, course_id, start_date, end_date))
    if not rows:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='No data available to export')

    generated_at = datetime.now()
    content = pdf_service.render_attendance_report(rows, report_title(identity.role), generated_at=generated_at)
    filename = pdf_service.export_filename(generated_at)

    logger.info('User %s exported %d report row(s)', identity.user_id, len(rows))
    return Response(
        content=content,
        media_type='application/pdf',
        headers={'Content-Disposition': f'attachment; filename="{filename}"'},
    )
