import math


def round_half_up(value, places=0):
    scale = 10 ** places
    return math.floor(value * scale + 0.5) / scale


def attendance_statistics(entries):
    """
    Summarise one attendance record's presence list.

    The total is the number of entries on the record, not the classroom roster.
    """
    total = len(entries)
    present = sum(1 for entry in entries if entry.present)
    rate = round_half_up(present / total * 100, 2) if total else 0
    return {
        "total_students": total,
        "present_students": present,
        "absent_students": total - present,
        "attendance_rate": rate,
    }


def completion_statistics(completed, total):
    percentage = int(round_half_up(completed / total * 100)) if total else 0
    return {"completed": completed, "total": total, "percentage": percentage}
