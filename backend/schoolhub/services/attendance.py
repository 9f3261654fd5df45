import logging

from schoolhub.errors import ValidationError, NotFound
from schoolhub.extensions import db, dispatcher, sms_gateway
from schoolhub.models import AttendanceRecord, Classroom, User, RoleEnum
from schoolhub.services.notifications import trigger_absence_sms
from schoolhub.utils.access_control import authorize
from schoolhub.utils.pagination import apply_pagination_and_search, pagination_meta
from schoolhub.utils.parsing import parse_date, parse_id, parse_id_list, parse_bool
from schoolhub.utils.statistics import attendance_statistics

logger = logging.getLogger(__name__)

SMS_PROCESSING = "SMS notifications are being processed in the background"
SMS_NOT_REQUESTED = "No SMS notifications requested"


def absentee_targets(entries, send_to_all_absent=False, send_to=None):
    """Students whose parents should hear about this record, in record order."""
    if send_to_all_absent:
        return [entry.student_id for entry in entries if not entry.present]
    if send_to:
        return list(send_to)
    return []


def _parse_records(records):
    if not isinstance(records, list):
        raise ValidationError("records must be a list")

    parsed = []
    for item in records:
        if not isinstance(item, dict):
            raise ValidationError("Each record needs student_id and present")
        parsed.append({
            "student_id": parse_id(item.get("student_id"), "student_id"),
            "present": parse_bool(item.get("present"), "present"),
        })

    student_ids = {item["student_id"] for item in parsed}
    if student_ids:
        found = User.query.filter(User.id.in_(student_ids), User.role == RoleEnum.student).count()
        if found != len(student_ids):
            raise ValidationError("All records must reference existing students")
    return parsed


def _notification_options(data):
    send_all = data.get("send_sms_to_all_absent")
    send_all = False if send_all is None else parse_bool(send_all, "send_sms_to_all_absent")
    send_to = parse_id_list(data.get("send_sms_to") or [], "send_sms_to")
    return send_all, send_to


def _send_absence_notifications(attendance_id, send_all, send_to):
    try:
        attendance = db.session.get(AttendanceRecord, attendance_id)
        if attendance is None:
            return

        targets = absentee_targets(attendance.entries, send_all, send_to)
        if not targets:
            return

        attendance.sms_sent = True
        attendance.sms_notified_students = targets
        db.session.commit()

        trigger_absence_sms(targets, attendance.classroom_id, attendance.date)
        logger.info(f"SMS notifications triggered for {len(targets)} students")
    except Exception:
        db.session.rollback()
        logger.exception(f"Failed to send SMS notifications for attendance {attendance_id}")


def _with_sms_status(attendance, requested):
    data = attendance.to_dict()
    data["sms_status"] = SMS_PROCESSING if requested else SMS_NOT_REQUESTED
    return data


def _request_notifications(attendance, send_all, send_to):
    requested = bool(send_all or send_to)
    if requested:
        dispatcher.submit(_send_absence_notifications, attendance.id, send_all, send_to)
    return requested


def mark_attendance(data, current_user):
    classroom_id = parse_id(data.get("classroom_id"), "classroom_id")
    on_date = parse_date(data.get("date"))
    records = _parse_records(data.get("records") or [])
    send_all, send_to = _notification_options(data)

    if db.session.get(Classroom, classroom_id) is None:
        raise NotFound("Classroom not found")

    attendance = AttendanceRecord(classroom_id=classroom_id, date=on_date, sms_notified_students=[])
    attendance.replace_entries(records)
    db.session.add(attendance)
    db.session.commit()
    logger.info(f"Attendance {attendance.id} marked for classroom {classroom_id} by user {current_user.id}")

    requested = _request_notifications(attendance, send_all, send_to)
    db.session.refresh(attendance)
    return _with_sms_status(attendance, requested)


def get_attendance(filters, current_user):
    query = AttendanceRecord.query

    if filters.get("classroom_id"):
        query = query.filter(AttendanceRecord.classroom_id == parse_id(filters["classroom_id"], "classroom_id"))
    if filters.get("start_date"):
        query = query.filter(AttendanceRecord.date >= parse_date(filters["start_date"], "start_date"))
    if filters.get("end_date"):
        query = query.filter(AttendanceRecord.date <= parse_date(filters["end_date"], "end_date"))

    student_id = None
    if current_user.role == RoleEnum.student:
        student_id = current_user.id
    elif filters.get("student_id"):
        student_id = parse_id(filters["student_id"], "student_id")
    if student_id is not None:
        query = query.filter(AttendanceRecord.entries.any(student_id=student_id))

    records = query.order_by(AttendanceRecord.date.desc(), AttendanceRecord.id.desc()).all()
    return [_with_details(record) for record in records]


def _with_details(attendance):
    data = attendance.to_dict()
    data["classroom"] = {"id": attendance.classroom.id, "name": attendance.classroom.name} if attendance.classroom else None
    data["records"] = [
        {
            "student": {"id": entry.student_id, "name": entry.student.name if entry.student else "Unknown"},
            "present": entry.present,
        }
        for entry in attendance.entries
    ]
    return data


def _load_attendance(attendance_id):
    attendance = db.session.get(AttendanceRecord, attendance_id)
    if attendance is None:
        raise NotFound("Attendance record not found")
    return attendance


def get_attendance_by_id(attendance_id):
    return _with_details(_load_attendance(attendance_id))


def update_attendance(attendance_id, data, current_user):
    attendance = _load_attendance(attendance_id)
    send_all, send_to = _notification_options(data)

    if data.get("date"):
        attendance.date = parse_date(data["date"])
    if data.get("records") is not None:
        attendance.replace_entries(_parse_records(data["records"]))

    db.session.commit()
    logger.info(f"Attendance {attendance.id} updated by user {current_user.id}")

    requested = _request_notifications(attendance, send_all, send_to)
    db.session.refresh(attendance)
    return _with_sms_status(attendance, requested)


def delete_attendance(attendance_id, current_user):
    authorize(current_user, "attendance.delete",
              message="Only superadmin or school admin can delete attendance records")
    attendance = _load_attendance(attendance_id)
    db.session.delete(attendance)
    db.session.commit()
    return {"message": "Attendance record deleted successfully"}


def get_classroom_attendance_records(classroom_id, current_user, page=1, limit=10):
    classroom = db.session.get(Classroom, classroom_id)
    if classroom is None:
        raise NotFound("Classroom not found")

    authorize(
        current_user, "attendance.classroom_records",
        school_id=classroom.school_id, teacher_id=classroom.teacher_id,
        message="You can only access attendance records for classrooms you teach or manage",
    )

    query = (
        AttendanceRecord.query
        .filter(AttendanceRecord.classroom_id == classroom.id)
        .order_by(AttendanceRecord.date.desc(), AttendanceRecord.id.desc())
    )
    paginated = apply_pagination_and_search(query, AttendanceRecord, None, [], page, limit)

    data = []
    for record in paginated.items:
        item = record.to_dict()
        item["records"] = [
            {
                "student": {
                    "id": entry.student_id,
                    "name": entry.student.name if entry.student else "Unknown",
                    "registration_id": entry.student.registration_id if entry.student else "N/A",
                },
                "present": entry.present,
            }
            for entry in record.entries
        ]
        item["statistics"] = attendance_statistics(record.entries)
        data.append(item)

    return {"data": data, "meta": pagination_meta(paginated)}


def send_test_sms(phone_number):
    if not phone_number:
        raise ValidationError("Phone number is required")

    result = sms_gateway.send_test_message(phone_number)
    return {
        "success": result,
        "message": "Test SMS sent successfully. Check your phone for the message."
        if result else "Failed to send test SMS. Check the server logs for details.",
    }
