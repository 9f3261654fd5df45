"""
SMS gateway backed by Twilio.

Configure in the app config:
TWILIO_ACCOUNT_SID = 'your_account_sid'
TWILIO_AUTH_TOKEN = 'your_auth_token'
TWILIO_PHONE_NUMBER = '+15550000000'
SMS_FALLBACK_ON_ERROR = True

Without credentials every message is written to the log instead of being sent.
"""

import logging

from twilio.rest import Client

logger = logging.getLogger(__name__)

TEST_MESSAGE = (
    "This is a test message from your School System SMS service. "
    "If you received this, your Twilio configuration is working correctly."
)


def normalize_number(phone_number):
    phone_number = phone_number.strip().replace(" ", "").replace("-", "")
    return phone_number if phone_number.startswith("+") else f"+{phone_number}"


class SMSGateway:
    def __init__(self, app=None):
        self.client = None
        self.from_number = None
        self.fallback_on_error = True
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        account_sid = app.config.get("TWILIO_ACCOUNT_SID")
        auth_token = app.config.get("TWILIO_AUTH_TOKEN")
        self.from_number = app.config.get("TWILIO_PHONE_NUMBER")
        self.fallback_on_error = app.config.get("SMS_FALLBACK_ON_ERROR", True)
        self.client = None

        if not account_sid or not auth_token or not self.from_number:
            logger.warning("Twilio credentials not fully configured. Will use fallback logging instead.")
            return

        try:
            self.client = Client(account_sid, auth_token)
            logger.info("Twilio service successfully initialized")
        except Exception as e:
            logger.error(f"Failed to initialize Twilio client: {str(e)}")

    @property
    def configured(self):
        return self.client is not None and bool(self.from_number)

    def send(self, to_number, message):
        """Send an SMS; returns True unless fallback is disabled and sending failed."""
        if not self.configured:
            self._log_fallback(to_number, message)
            return self.fallback_on_error

        try:
            sms = self.client.messages.create(
                body=message,
                from_=self.from_number,
                to=normalize_number(to_number),
            )
        except Exception as e:
            logger.error(f"Failed to send SMS to {to_number}: {str(e)}")
            self._log_fallback(to_number, message)
            return self.fallback_on_error

        logger.info(f"SMS sent successfully. SID: {sms.sid}")
        return True

    def send_test_message(self, phone_number):
        logger.info(f"Sending test SMS to {phone_number}")
        result = self.send(phone_number, TEST_MESSAGE)
        if result:
            logger.info("Test SMS sent successfully")
        else:
            logger.warning("Failed to send test SMS")
        return result

    @staticmethod
    def _log_fallback(to_number, message):
        logger.info(f"[SMS FALLBACK] To: {to_number}, Message: {message}")
