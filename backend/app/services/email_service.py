"""
Delivery of access codes by email using Resend.
Docs: https://resend.com/docs
"""
from __future__ import annotations

import html
import logging

import resend

from app.core.config import Settings

LOGGER = logging.getLogger(__name__)


def render_access_code_email(code: str) -> str:
    """Build the HTML body of the access-code message."""
    safe_code = html.escape(code)
    return f"""
    <!DOCTYPE html>
    <html>
    <head>
        <meta charset="UTF-8">
        <meta name="viewport" content="width=device-width, initial-scale=1.0">
        <title>Access code</title>
    </head>
    <body style="font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
                 max-width: 600px; margin: 0 auto; padding: 20px; background-color: #f8f9fa;">
        <div style="background: white; border-radius: 12px; padding: 40px; box-shadow: 0 4px 6px rgba(0,0,0,0.1);">
            <div style="text-align: center; margin-bottom: 30px;">
                <h1 style="color: #667eea; margin: 0; font-size: 28px; font-weight: 600;">UserApp</h1>
                <p style="color: #6c757d; margin: 5px 0 0 0; font-size: 14px;">Registration</p>
            </div>

            <div style="text-align: center;">
                <h2 style="color: #333; margin-bottom: 20px; font-size: 24px;">Welcome! 🎉</h2>
                <p style="color: #555; font-size: 16px; line-height: 1.5; margin-bottom: 30px;">
                    We received your registration. This is your personal access code:
                </p>

                <div style="background: linear-gradient(135deg, #667eea 0%, #764ba2 100%);
                            color: white; padding: 30px; border-radius: 12px; margin: 30px 0;">
                    <div style="font-size: 14px; opacity: 0.9; margin-bottom: 10px; text-transform: uppercase; letter-spacing: 1px;">
                        Your access code
                    </div>
                    <div style="font-size: 36px; font-weight: 700; letter-spacing: 3px; margin: 0;">
                        {safe_code}
                    </div>
                </div>

                <div style="background: #e3f2fd; border-left: 4px solid #2196f3; padding: 20px; border-radius: 8px; margin: 25px 0;">
                    <p style="margin: 0; color: #1976d2; font-size: 14px; text-align: left;">
                        <strong>📌 How to use it:</strong><br>
                        1. Copy the code exactly as shown<br>
                        2. Open the login page<br>
                        3. Paste the code into the code field<br>
                        4. Done, your profile is ready
                    </p>
                </div>

                <p style="color: #666; font-size: 14px; margin-top: 30px;">
                    This code is unique to your account. Do not share it with anyone.
                </p>
            </div>

            <div style="margin-top: 40px; padding-top: 20px; border-top: 1px solid #eee; text-align: center;">
                <p style="color: #999; font-size: 12px; margin: 0;">
                    This is an automated message, please do not reply.
                </p>
            </div>
        </div>
    </body>
    </html>
    """


class EmailService:
    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    @property
    def is_configured(self) -> bool:
        return self.settings.email_configured

    def send(self, to: str, subject: str, html_body: str) -> bool:
        """Send one message through Resend. Errors are logged and reported as False."""
        try:
            resend.api_key = self.settings.RESEND_API_KEY
            params = {
                "from": self.settings.RESEND_FROM_EMAIL,
                "to": [to],
                "subject": subject,
                "html": html_body,
            }
            response = resend.Emails.send(params)
        except Exception as exc:  # noqa: BLE001 - any SDK/network failure is an upstream error
            LOGGER.error("❌ Error sending email to %s: %s", to, exc, exc_info=True)
            return False
        LOGGER.info("✅ Email sent to %s. ID: %s", to, response.get("id", "N/A"))
        return True

    def send_access_code(self, to: str, code: str) -> bool:
        if not self.is_configured:
            banner = "=" * 60
            LOGGER.info(
                "\n%s\n📧 SIMULATED EMAIL (RESEND_API_KEY not set)\n%s\nTo: %s\nSubject: %s\n%s\n🔑 ACCESS CODE: %s\n%s",
                banner,
                banner,
                to,
                self.settings.EMAIL_SUBJECT,
                "-" * 60,
                code,
                banner,
            )
            return True
        return self.send(to, self.settings.EMAIL_SUBJECT, render_access_code_email(code))
