from fastapi import APIRouter, Depends, status

from ams.auth.dependencies import get_current_identity, get_uow, require_roles
from ams.auth.jwt_handler import TokenClaims
from ams.models.enums import UserRole
from ams.repositories import UnitOfWork
from ams.routes.errors import message_response, raise_for_result
from ams.schemas.course import CourseRequest, CourseResponse
from ams.services.course_service import CourseService

router = APIRouter(tags=['courses'])


def get_course_service(uow: UnitOfWork = Depends(get_uow)) -> CourseService:
    return CourseService(uow)


@router.get('', response_model=list[CourseResponse])
def list_courses(
    identity: TokenClaims = Depends(get_current_identity),
    course_service: CourseService = Depends(get_course_service),
):
    return raise_for_result(course_service.get_all_courses(identity.user_id, identity.role))


@router.get('/mine', response_model=list[CourseResponse])
def list_my_courses(
    identity: TokenClaims = Depends(require_roles(UserRole.TEACHER)),
    course_service: CourseService = Depends(get_course_service),
):
    return raise_for_result(course_service.get_teacher_courses(identity.user_id))


@router.get('/{course_id}', response_model=CourseResponse)
def get_course(
    course_id: int,
    identity: TokenClaims = Depends(get_current_identity),
    course_service: CourseService = Depends(get_course_service),
):
    viewer_id = identity.user_id if identity.role == UserRole.STUDENT else None
    return raise_for_result(course_service.get_course(course_id, viewer_id))


@router.post('', response_model=CourseResponse, status_code=status.HTTP_201_CREATED)
def create_course(
    data: CourseRequest,
    identity: TokenClaims = Depends(require_roles(UserRole.ADMIN, UserRole.TEACHER)),
    course_service: CourseService = Depends(get_course_service),
):
    return raise_for_result(course_service.create_course(data, identity.user_id, identity.role))


@router.put('/{course_id}', response_model=CourseResponse)
def update_course(
    course_id: int,
    data: CourseRequest,
    identity: TokenClaims = Depends(require_roles(UserRole.ADMIN, UserRole.TEACHER)),
    course_service: CourseService = Depends(get_course_service),
):
    return raise_for_result(course_service.update_course(course_id, data, identity.user_id, identity.role))


@router.delete('/{course_id}')
def delete_course(
    course_id: int,
    identity: TokenClaims = Depends(require_roles(UserRole.ADMIN, UserRole.TEACHER)),
    course_service: CourseService = Depends(get_course_service),
):
    return message_response(course_service.delete_course(course_id, identity.user_id, identity.role))
