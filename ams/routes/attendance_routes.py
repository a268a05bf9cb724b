from datetime import date

from fastapi import APIRouter, Depends, Query, status

from ams.auth.dependencies import get_uow, require_roles
from ams.auth.jwt_handler import TokenClaims
from ams.models.enums import UserRole
from ams.repositories import UnitOfWork
from ams.routes.errors import message_response, raise_for_result
from ams.schemas.attendance import AttendanceResponse, AttendanceUpdateRequest, MarkAttendanceRequest
from ams.services.attendance_service import AttendanceService

router = APIRouter(tags=['attendance'])


def get_attendance_service(uow: UnitOfWork = Depends(get_uow)) -> AttendanceService:
    return AttendanceService(uow)


@router.post('', status_code=status.HTTP_201_CREATED)
def mark_attendance(
    data: MarkAttendanceRequest,
    identity: TokenClaims = Depends(require_roles(UserRole.TEACHER)),
    attendance_service: AttendanceService = Depends(get_attendance_service),
):
    return message_response(attendance_service.mark_attendance(data, identity.user_id))


@router.put('/{attendance_id}', response_model=AttendanceResponse)
def update_attendance(
    attendance_id: int,
    data: AttendanceUpdateRequest,
    identity: TokenClaims = Depends(require_roles(UserRole.TEACHER)),
    attendance_service: AttendanceService = Depends(get_attendance_service),
):
    return raise_for_result(attendance_service.update_attendance(attendance_id, data, identity.user_id))


@router.get('/mine', response_model=list[AttendanceResponse])
def list_my_attendance(
    course_id: int | None = Query(default=None),
    identity: TokenClaims = Depends(require_roles(UserRole.STUDENT)),
    attendance_service: AttendanceService = Depends(get_attendance_service),
):
    return raise_for_result(attendance_service.get_student_attendance(identity.user_id, course_id))


@router.get('/course/{course_id}', response_model=list[AttendanceResponse])
def list_course_attendance(
    course_id: int,
    on_date: date | None = Query(default=None, alias='date'),
    identity: TokenClaims = Depends(require_roles(UserRole.ADMIN, UserRole.TEACHER)),
    attendance_service: AttendanceService = Depends(get_attendance_service),
):
    teacher_id = identity.user_id if identity.role == UserRole.TEACHER else None
    return raise_for_result(attendance_service.get_course_attendance(course_id, on_date, teacher_id))
