"""
Absence notifications for parents.

Each absent student's parent gets one SMS in their preferred language. The
message is an English template translated on the fly; any translation problem
sends the English text instead.
"""
import logging
from concurrent.futures import ThreadPoolExecutor

from babel.core import UnknownLocaleError
from babel.dates import format_date

from schoolhub.errors import ProviderError
from schoolhub.extensions import db, dispatcher, sms_gateway, translator
from schoolhub.models import User, Classroom, ParentLanguage
from schoolhub.services.translation import language_code_for

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = ParentLanguage.english.value
DEFAULT_LOCALE = "en_US"

LANGUAGE_LOCALES = {
    "english": "en_US",
    "hindi": "hi_IN",
    "marathi": "mr_IN",
    "tamil": "ta_IN",
    "telugu": "te_IN",
    "kannada": "kn_IN",
    "malayalam": "ml_IN",
    "gujarati": "gu_IN",
    "bengali": "bn_IN",
    "punjabi": "pa_IN",
    "urdu": "ur_PK",
    "odia": "or_IN",
}

ABSENCE_TEMPLATE = (
    "Dear Parent, {student_name} was absent from class {classroom_name} "
    "on date {formatted_date}. – {school_name}"
)


def format_date_for_language(on_date, language):
    locale = LANGUAGE_LOCALES.get((language or "").lower())
    if locale:
        try:
            return format_date(on_date, format="full", locale=locale)
        except (UnknownLocaleError, ValueError) as e:
            logger.warning(f"Falling back to English date format for {language}: {e}")
    return format_date(on_date, format="full", locale=DEFAULT_LOCALE)


def compose_absence_message(student_name, classroom_name, school_name, on_date, language=DEFAULT_LANGUAGE):
    return ABSENCE_TEMPLATE.format(
        student_name=student_name,
        classroom_name=classroom_name,
        formatted_date=format_date_for_language(on_date, language),
        school_name=school_name,
    )


def message_for_language(english_message, language):
    if (language or DEFAULT_LANGUAGE).lower() == DEFAULT_LANGUAGE:
        return english_message
    try:
        return translator.translate(english_message, "en", language_code_for(language))
    except ProviderError as e:
        logger.error(f"Translation to {language} failed, sending English: {e.message}")
        return english_message


def _notify_parent(job):
    if not job["mobile"]:
        logger.warning(f"No mobile number for student {job['student_id']}")
        return False

    english = compose_absence_message(
        job["student_name"], job["classroom_name"], job["school_name"], job["date"], job["language"]
    )
    message = message_for_language(english, job["language"])
    return sms_gateway.send(job["mobile"], message)


def _load_jobs(student_ids, classroom_id, on_date):
    classroom_name, school_name = "Unknown", "School"
    try:
        classroom = db.session.get(Classroom, classroom_id)
        if classroom:
            classroom_name = classroom.name
            if classroom.school:
                school_name = classroom.school.name
    except Exception as e:
        logger.error(f"Failed to load classroom {classroom_id} for notifications: {e}")

    students = {
        student.id: student
        for student in User.query.filter(User.id.in_(student_ids)).all()
    } if student_ids else {}

    jobs = []
    for student_id in student_ids:
        student = students.get(student_id)
        if student is None:
            logger.warning(f"Student {student_id} not found; skipping notification")
            continue
        jobs.append({
            "student_id": student.id,
            "student_name": student.name,
            "mobile": student.mobile,
            "language": student.language,
            "classroom_name": classroom_name,
            "school_name": school_name,
            "date": on_date,
        })
    return jobs


def send_absence_sms(student_ids, classroom_id, on_date):
    """
    Notify the parents of the given students, one SMS each.

    Students are loaded up front so the per-student sends never touch the
    database session. Returns True if at least one message went out or
    there was nobody to notify.
    """
    try:
        jobs = _load_jobs(list(student_ids), classroom_id, on_date)
    except Exception:
        logger.exception("Failed to load students for absence SMS")
        return False
    if not jobs:
        return True

    with ThreadPoolExecutor(max_workers=len(jobs)) as pool:
        results = list(pool.map(_safe_notify, jobs))

    sent = sum(1 for result in results if result)
    logger.info(f"SMS notification summary: {sent} sent, {len(results) - sent} failed")
    return sent > 0


def _safe_notify(job):
    try:
        return _notify_parent(job)
    except Exception:
        logger.exception(f"Failed to notify parent of student {job['student_id']}")
        return False


def _run_absence_sms(student_ids, classroom_id, on_date):
    result = send_absence_sms(student_ids, classroom_id, on_date)
    logger.info(f"Absence SMS for classroom {classroom_id} on {on_date} completed with result: {result}")


def trigger_absence_sms(student_ids, classroom_id, on_date):
    """Hand the notification run to the background dispatcher and return immediately."""
    logger.info(f"Triggering absence SMS for {len(student_ids)} student(s) in classroom {classroom_id}")
    dispatcher.submit(_run_absence_sms, list(student_ids), classroom_id, on_date)
