import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from ams.core import config
from ams.core.logging_config import configure_logging
from ams.database import create_tables, ensure_unique_indexes
from ams.routes import (
    attendance_routes,
    auth_routes,
    course_routes,
    dashboard_routes,
    enrollment_routes,
    report_routes,
    user_routes,
)

configure_logging()

app = FastAPI(title='Attendance Management System API')

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)

logger = logging.getLogger(__name__)


@app.on_event('startup')
def initialize_database() -> None:
    config.validate_runtime_config()
    try:
        create_tables()
        ensure_unique_indexes()
    except SQLAlchemyError:
        logger.exception('Database initialization failed. Check DATABASE_URL and database credentials.')


@app.get('/')
def root():
    return {'status': 'Attendance Management API Running'}


app.include_router(auth_routes.router, prefix='/auth')
app.include_router(course_routes.router, prefix='/courses')
app.include_router(enrollment_routes.router, prefix='/enrollments')
app.include_router(attendance_routes.router, prefix='/attendance')
app.include_router(report_routes.router, prefix='/reports')
app.include_router(user_routes.router, prefix='/users')
app.include_router(dashboard_routes.router, prefix='/dashboard')
