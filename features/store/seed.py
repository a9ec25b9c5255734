from .models import Notice, NoticeType, Student, StudentRecord

INITIAL_STUDENTS: tuple[Student, ...] = (
    Student(
        id="1",
        reg_number="KIST/2023/001",
        username="Alice Johnson",
        photo_url="https://picsum.photos/seed/alice/200",
        records=(
            StudentRecord("Sem 1", 3.8, 95),
            StudentRecord("Sem 2", 3.9, 92),
            StudentRecord("Sem 3", 3.7, 88),
        ),
    ),
    Student(
        id="2",
        reg_number="KIST/2023/002",
        username="Bob Smith",
        photo_url="https://picsum.photos/seed/bob/200",
        records=(
            StudentRecord("Sem 1", 3.2, 85),
            StudentRecord("Sem 2", 3.4, 80),
        ),
    ),
)

INITIAL_NOTICES: tuple[Notice, ...] = (
    Notice(
        id="n1",
        title="Summer Break",
        content="University will remain closed for 2 weeks.",
        date="2024-06-15",
        type=NoticeType.HOLIDAY,
    ),
    Notice(
        id="n2",
        title="Independence Day",
        content="Holiday for national celebration.",
        date="2024-08-15",
        type=NoticeType.HOLIDAY,
    ),
)
