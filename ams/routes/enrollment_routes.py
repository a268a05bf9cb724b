from fastapi import APIRouter, Depends, status

from ams.auth.dependencies import get_uow, require_roles
from ams.auth.jwt_handler import TokenClaims
from ams.models.enums import UserRole
from ams.repositories import UnitOfWork
from ams.routes.errors import message_response, raise_for_result
from ams.schemas.enrollment import EnrollmentResponse
from ams.services.enrollment_service import EnrollmentService

router = APIRouter(tags=['enrollments'])


def get_enrollment_service(uow: UnitOfWork = Depends(get_uow)) -> EnrollmentService:
    return EnrollmentService(uow)


@router.get('/mine', response_model=list[EnrollmentResponse])
def list_my_enrollments(
    identity: TokenClaims = Depends(require_roles(UserRole.STUDENT)),
    enrollment_service: EnrollmentService = Depends(get_enrollment_service),
):
    return raise_for_result(enrollment_service.get_student_enrollments(identity.user_id))


@router.get('/course/{course_id}', response_model=list[EnrollmentResponse])
def list_course_enrollments(
    course_id: int,
    identity: TokenClaims = Depends(require_roles(UserRole.ADMIN, UserRole.TEACHER)),
    enrollment_service: EnrollmentService = Depends(get_enrollment_service),
):
    teacher_id = identity.user_id if identity.role == UserRole.TEACHER else None
    return raise_for_result(enrollment_service.get_course_enrollments(course_id, teacher_id))


@router.post('/{course_id}', status_code=status.HTTP_201_CREATED)
def enroll(
    course_id: int,
    identity: TokenClaims = Depends(require_roles(UserRole.STUDENT)),
    enrollment_service: EnrollmentService = Depends(get_enrollment_service),
):
    return message_response(enrollment_service.enroll(identity.user_id, course_id))


@router.delete('/{course_id}')
def unenroll(
    course_id: int,
    identity: TokenClaims = Depends(require_roles(UserRole.STUDENT)),
    enrollment_service: EnrollmentService = Depends(get_enrollment_service),
):
    return message_response(enrollment_service.unenroll(identity.user_id, course_id))
