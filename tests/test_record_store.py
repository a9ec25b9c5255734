import pytest

from database import CorruptCollectionError, StaleWriteError
from features.store import (
    Notice,
    NoticeType,
    RecordStore,
    Role,
    Student,
    StudentRecord,
    User,
)


def test_initialize_seeds_once(store):
    assert store.initialize() == ["kist_students", "kist_notices"]
    students = store.get_students()
    notices = store.get_notices()

    for _ in range(3):
        assert store.initialize() == []

    assert store.get_students() == students
    assert store.get_notices() == notices
    assert [s.username for s in students] == ["Alice Johnson", "Bob Smith"]
    assert [n.id for n in notices] == ["n1", "n2"]


def test_initialize_keeps_existing_collections(store):
    store.save_notices([])

    assert store.initialize() == ["kist_students"]
    assert store.get_notices() == []


def test_initialize_against_sqlite(sql_adapter):
    store = RecordStore(sql_adapter)
    store.initialize()
    store.initialize()

    alice = store.get_student("1")
    assert alice.reg_number == "KIST/2023/001"
    assert [r.semester for r in alice.records] == ["Sem 1", "Sem 2", "Sem 3"]


def test_student_round_trip(store):
    student = Student(
        id="s-9",
        reg_number="KIST/2024/009",
        username="Carol Danvers",
        photo_url=None,
        records=(StudentRecord("Sem 1", 3.1, 77.5), StudentRecord("Sem 2", 3.6, 90)),
    )
    store.save_students([student])

    assert store.get_students() == [student]


def test_notice_round_trip(store):
    notice = Notice("x1", "Exam week", "Bring your ID card.", "2024-11-02", NoticeType.URGENT)
    store.save_notices([notice])

    assert store.get_notices() == [notice]


def test_persisted_layout_uses_camel_case_keys(store, memory_adapter):
    store.save_students(
        [Student(id="1", reg_number="KIST/1", username="A", photo_url="p.png")]
    )

    assert memory_adapter.get("kist_students", []) == [
        {
            "id": "1",
            "regNumber": "KIST/1",
            "username": "A",
            "role": "STUDENT",
            "photoUrl": "p.png",
            "records": [],
        }
    ]


def test_upsert_appends_new_student(seeded_store):
    newcomer = Student(id="3", reg_number="KIST/2023/003", username="Cara Lee")

    replaced = seeded_store.upsert_student(newcomer)

    assert replaced is False
    assert [s.id for s in seeded_store.get_students()] == ["1", "2", "3"]


def test_upsert_replaces_in_place(seeded_store):
    alice = seeded_store.get_student("1")
    bob = seeded_store.get_student("2")
    renamed = Student(
        id="1",
        reg_number=alice.reg_number,
        username="Alice J.",
        photo_url=alice.photo_url,
        records=alice.records,
    )

    replaced = seeded_store.upsert_student(renamed)

    students = seeded_store.get_students()
    assert replaced is True
    assert [s.id for s in students] == ["1", "2"]
    assert students[0].username == "Alice J."
    assert students[1] == bob


def test_delete_student(seeded_store):
    assert seeded_store.delete_student("2") is True
    assert [s.id for s in seeded_store.get_students()] == ["1"]


def test_delete_missing_student_is_a_no_op(seeded_store, memory_adapter):
    _, version = memory_adapter.get_versioned("kist_students", [])

    assert seeded_store.delete_student("nope") is False
    assert len(seeded_store.get_students()) == 2
    assert memory_adapter.get_versioned("kist_students", [])[1] == version


def test_delete_missing_notice_leaves_collection_unchanged(seeded_store):
    assert seeded_store.delete_notice("missing-id") is False

    notices = seeded_store.get_notices()
    assert len(notices) == 2
    assert [n.id for n in notices] == ["n1", "n2"]


def test_add_notice_assigns_unique_ids(seeded_store):
    first = seeded_store.add_notice("Sports Day", "Main field.", "2024-09-01", "EVENT")
    second = seeded_store.add_notice("Sports Day", "Main field.", "2024-09-01", "EVENT")

    assert first.id != second.id
    assert first.type is NoticeType.EVENT
    assert [n.id for n in seeded_store.get_notices()] == ["n1", "n2", first.id, second.id]


def test_add_notice_rejects_unknown_type(seeded_store):
    with pytest.raises(ValueError):
        seeded_store.add_notice("Party", "Tonight", "2024-09-01", "PARTY")
    assert len(seeded_store.get_notices()) == 2


def test_delete_notice(seeded_store):
    assert seeded_store.delete_notice("n1") is True
    assert [n.id for n in seeded_store.get_notices()] == ["n2"]


def test_authenticated_user_slot(store):
    assert store.get_authenticated_user() is None

    admin = User(id="admin-1", reg_number="ADMIN001", username="Prof. Smith", role=Role.ADMIN)
    store.set_authenticated_user(admin)
    assert store.get_authenticated_user() == admin

    store.set_authenticated_user(None)
    assert store.get_authenticated_user() is None


def test_student_stored_as_session_drops_records(seeded_store, memory_adapter):
    seeded_store.set_authenticated_user(seeded_store.get_student("1"))

    raw = memory_adapter.get("kist_auth_user", None)
    assert "records" not in raw
    assert seeded_store.get_authenticated_user() == User(
        id="1",
        reg_number="KIST/2023/001",
        username="Alice Johnson",
        role=Role.STUDENT,
        photo_url="https://picsum.photos/seed/alice/200",
    )


def test_malformed_collection_reads_as_empty(store, memory_adapter):
    memory_adapter.set("kist_students", [{"username": "no id"}])
    memory_adapter.set("kist_notices", {"not": "a list"})
    memory_adapter.set("kist_auth_user", "Prof. Smith")

    assert store.get_students() == []
    assert store.get_notices() == []
    assert store.get_authenticated_user() is None


def test_invalid_entries_are_skipped_on_read(seeded_store, memory_adapter):
    raw = memory_adapter.get("kist_students", [])
    raw.insert(1, {"username": "no id"})
    memory_adapter.set("kist_students", raw)

    assert [s.id for s in seeded_store.get_students()] == ["1", "2"]


def test_mutations_refuse_to_rewrite_a_damaged_collection(seeded_store, memory_adapter):
    raw = memory_adapter.get("kist_students", [])
    raw.append({"username": "no id"})
    memory_adapter.set("kist_students", raw)
    before = memory_adapter.get_versioned("kist_students", None)

    new_student = Student(id="3", reg_number="KIST/2023/003", username="Carol")
    with pytest.raises(CorruptCollectionError):
        seeded_store.upsert_student(new_student)
    with pytest.raises(CorruptCollectionError):
        seeded_store.delete_student("1")

    assert memory_adapter.get_versioned("kist_students", None) == before


def test_mutations_refuse_unparseable_collection(seeded_store, memory_adapter):
    memory_adapter._values["kist_notices"] = ("[{", 4)

    assert seeded_store.get_notices() == []
    with pytest.raises(CorruptCollectionError):
        seeded_store.add_notice("Exam Week", "Bring ID", "2024-11-01", "EVENT")
    with pytest.raises(CorruptCollectionError):
        seeded_store.delete_notice("n1")

    assert memory_adapter._values["kist_notices"] == ("[{", 4)


def test_mutations_refuse_non_list_collection(store, memory_adapter):
    memory_adapter.set("kist_notices", {"not": "a list"})

    with pytest.raises(CorruptCollectionError):
        store.add_notice("Exam Week", "Bring ID", "2024-11-01", "EVENT")
    assert memory_adapter.get("kist_notices", None) == {"not": "a list"}


def test_mutations_on_absent_collection_start_empty(store):
    assert store.upsert_student(
        Student(id="3", reg_number="KIST/2023/003", username="Carol")
    ) is False
    assert [s.id for s in store.get_students()] == ["3"]


def test_whole_collection_write_against_old_snapshot_is_rejected(seeded_store):
    students, version = seeded_store.get_students_with_version()
    seeded_store.delete_student("2")

    with pytest.raises(StaleWriteError):
        seeded_store.save_students(students, expected_version=version)
    assert [s.id for s in seeded_store.get_students()] == ["1"]


def test_unversioned_save_is_last_writer_wins(seeded_store):
    students = seeded_store.get_students()
    seeded_store.delete_student("2")

    seeded_store.save_students(students)
    assert [s.id for s in seeded_store.get_students()] == ["1", "2"]


def test_custom_key_prefix(memory_adapter):
    store = RecordStore(memory_adapter, key_prefix="test_")
    store.initialize()

    assert memory_adapter.contains("test_students")
    assert not memory_adapter.contains("kist_students")
