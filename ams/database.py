from threading import Lock

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.orm import declarative_base, sessionmaker

from ams.core import config


def _engine_options(url: str) -> dict:
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True}


engine = create_engine(config.DATABASE_URL, **_engine_options(config.DATABASE_URL))

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

Base = declarative_base()

_schema_lock = Lock()
_unique_indexes_checked = False

# Partial unique indexes declared on the models are only emitted by create_all
# for new tables; older databases get them here.
PARTIAL_UNIQUE_INDEXES = [
    (
        'users',
        'CREATE UNIQUE INDEX IF NOT EXISTS uq_users_registration_number '
        'ON users(registration_number) WHERE registration_number IS NOT NULL',
    ),
    (
        'enrollments',
        'CREATE UNIQUE INDEX IF NOT EXISTS uq_enrollments_active_student_course '
        "ON enrollments(student_id, course_id) WHERE status = 'active'",
    ),
    (
        'attendance',
        'CREATE UNIQUE INDEX IF NOT EXISTS uq_attendance_student_course_date '
        'ON attendance(student_id, course_id, date)',
    ),
    (
        'attendance',
        'CREATE INDEX IF NOT EXISTS idx_attendance_course_date ON attendance(course_id, date)',
    ),
]


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables(bind=None) -> None:
    from ams.models import attendance, course, enrollment, refresh_token, user  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)


def ensure_unique_indexes(bind=None) -> None:
    global _unique_indexes_checked

    if _unique_indexes_checked and bind is None:
        return

    with _schema_lock:
        if _unique_indexes_checked and bind is None:
            return

        target = bind or engine
        existing_tables = set(inspect(target).get_table_names())

        with target.begin() as connection:
            for table_name, statement in PARTIAL_UNIQUE_INDEXES:
                if table_name in existing_tables:
                    connection.execute(text(statement))

        if bind is None:
            _unique_indexes_checked = True
