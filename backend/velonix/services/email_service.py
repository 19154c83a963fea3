"""
Email Service for VELONIX
=========================
Handles all outgoing mail:
- Applicant registration confirmation (with the QR ticket inline)
- Internal new-registration alert with a link to the payment screenshot
- Contact form forwarding

Delivery is over SMTP with STARTTLS. Every send returns True/False and logs
failures; nothing here raises to the caller.
"""

import aiosmtplib
from email.mime.text import MIMEText
from email.mime.image import MIMEImage
from email.mime.multipart import MIMEMultipart
from html import escape
from typing import Optional, List, Tuple
from datetime import datetime

from velonix.core.config import Settings, settings as default_settings
from velonix.core.logging_config import logger

TICKET_CONTENT_ID = "ticket-qr"

# (content_id, png_bytes)
InlineImage = Tuple[str, bytes]


class EmailService:
    """Async email service using SMTP"""

    def __init__(self, config: Optional[Settings] = None):
        config = config or default_settings
        self.smtp_host = config.SMTP_HOST
        self.smtp_port = config.SMTP_PORT
        self.smtp_user = config.SMTP_USER
        self.smtp_password = config.SMTP_PASSWORD
        self.from_email = config.email_sender
        self.from_name = config.EMAIL_FROM_NAME
        self.admin_email = config.admin_alert_recipient
        self.app_name = config.APP_NAME
        self.config = config

    @property
    def is_configured(self) -> bool:
        """Check if email service is properly configured"""
        return bool(self.smtp_user and self.smtp_password)

    def build_message(
        self,
        to_email: str,
        subject: str,
        html_content: str,
        text_content: Optional[str] = None,
        inline_images: Optional[List[InlineImage]] = None,
    ) -> MIMEMultipart:
        """Assemble a multipart message; inline images are referenced as cid:<id>"""
        alternative = MIMEMultipart("alternative")
        if text_content:
            alternative.attach(MIMEText(text_content, "plain", "utf-8"))
        alternative.attach(MIMEText(html_content, "html", "utf-8"))

        if inline_images:
            message = MIMEMultipart("related")
            message.attach(alternative)
            for content_id, png in inline_images:
                image = MIMEImage(png, _subtype="png")
                image.add_header("Content-ID", f"<{content_id}>")
                image.add_header("Content-Disposition", "inline", filename=f"{content_id}.png")
                message.attach(image)
        else:
            message = alternative

        message["From"] = f"{self.from_name} <{self.from_email}>"
        message["To"] = to_email
        message["Subject"] = subject
        return message

    async def send_email(
        self,
        to_email: str,
        subject: str,
        html_content: str,
        text_content: Optional[str] = None,
        inline_images: Optional[List[InlineImage]] = None,
    ) -> bool:
        """
        Send an email asynchronously.

        Returns True if successful, False otherwise.
        """
        if not self.is_configured:
            logger.warning("[Email] Email service not configured, skipping email send")
            return False

        try:
            message = self.build_message(to_email, subject, html_content, text_content, inline_images)

            await aiosmtplib.send(
                message,
                hostname=self.smtp_host,
                port=self.smtp_port,
                username=self.smtp_user,
                password=self.smtp_password,
                start_tls=True
            )

            logger.info(f"[Email/SMTP] Successfully sent email to {to_email}: {subject}")
            return True

        except Exception as e:
            logger.error(f"[Email/SMTP] Failed to send email to {to_email}: {e}")
            return False

    def _wrap(self, title: str, body: str) -> str:
        return f"""
        <!DOCTYPE html>
        <html>
        <head>
            <style>
                body {{ font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; line-height: 1.6; color: #333; }}
                .container {{ max-width: 600px; margin: 0 auto; padding: 20px; }}
                .header {{ background: linear-gradient(135deg, #a855f7 0%, #3b82f6 100%); color: white; padding: 30px; text-align: center; border-radius: 10px 10px 0 0; }}
                .content {{ background: #f9fafb; padding: 30px; border-radius: 0 0 10px 10px; }}
                .footer {{ text-align: center; margin-top: 30px; font-size: 12px; color: #6b7280; }}
            </style>
        </head>
        <body>
            <div class="container">
                <div class="header">
                    <h1>{escape(title)}</h1>
                </div>
                <div class="content">
                    {body}
                </div>
                <div class="footer">
                    <p>&copy; {datetime.utcnow().year} {escape(self.app_name)}</p>
                </div>
            </div>
        </body>
        </html>
        """

    async def send_registration_confirmation(
        self,
        to_email: str,
        full_name: str,
        registration_id: str,
        college_name: str,
        selected_events: str,
        transaction_id: str,
        ticket_png: bytes,
    ) -> bool:
        """Send the applicant their registration id and QR ticket"""
        subject = f"Registration Confirmed - {self.app_name}"

        body = f"""
            <h2>Registration Successful!</h2>
            <p>Hi {escape(full_name)},</p>
            <p>You have successfully registered for {escape(self.app_name)}.</p>
            <p><strong>Registration ID:</strong> {escape(registration_id)}</p>
            <p><strong>College:</strong> {escape(college_name)}</p>
            <p><strong>Events:</strong> {escape(selected_events)}</p>
            <p><strong>Transaction ID:</strong> {escape(transaction_id)}</p>
            <p>Please show this QR code at the registration desk on the event day.</p>
            <p style="text-align: center;">
                <img src="cid:{TICKET_CONTENT_ID}" alt="QR Code Ticket" width="240" height="240" />
            </p>
            <p style="font-size: 14px; color: #6b7280;">Your registration is pending payment verification.</p>
        """

        text_content = (
            f"Hi {full_name},\n\n"
            f"You have successfully registered for {self.app_name}.\n\n"
            f"Registration ID: {registration_id}\n"
            f"College: {college_name}\n"
            f"Events: {selected_events}\n"
            f"Transaction ID: {transaction_id}\n\n"
            "Please show the attached QR code at the registration desk on the event day.\n"
        )

        return await self.send_email(
            to_email,
            subject,
            self._wrap(self.app_name, body),
            text_content,
            inline_images=[(TICKET_CONTENT_ID, ticket_png)],
        )

    async def send_admin_alert(
        self,
        registration_id: str,
        full_name: str,
        college_name: str,
        selected_events: str,
        transaction_id: str,
        screenshot_path: str,
    ) -> bool:
        """Notify the organisers about a new registration"""
        if not self.admin_email:
            logger.warning("[Email] No admin alert recipient configured, skipping alert")
            return False

        subject = f"New Registration Alert - {registration_id}"
        screenshot_html = (
            f'<p><a href="{escape(self.config.get_upload_url(screenshot_path))}">View Payment Screenshot</a></p>'
            if screenshot_path
            else "<p><em>No payment screenshot was uploaded.</em></p>"
        )

        body = f"""
            <h2>New Registration Received</h2>
            <p><strong>Registration ID:</strong> {escape(registration_id)}</p>
            <p><strong>Name:</strong> {escape(full_name)}</p>
            <p><strong>College:</strong> {escape(college_name)}</p>
            <p><strong>Events:</strong> {escape(selected_events)}</p>
            <p><strong>Transaction ID:</strong> {escape(transaction_id)}</p>
            {screenshot_html}
        """

        return await self.send_email(self.admin_email, subject, self._wrap("New Registration", body))

    async def send_contact_message(self, name: str, email: str, message: str) -> bool:
        """Forward a contact form submission to the organisers"""
        if not self.admin_email:
            logger.warning("[Email] No admin recipient configured, dropping contact message")
            return False

        subject = f"Contact Form Submission from {name}"
        text_content = f"Name: {name}\nEmail: {email}\nMessage: {message}"
        body = f"""
            <p><strong>Name:</strong> {escape(name)}</p>
            <p><strong>Email:</strong> {escape(email)}</p>
            <p><strong>Message:</strong></p>
            <p>{escape(message)}</p>
        """

        return await self.send_email(self.admin_email, subject, self._wrap("Contact Form", body), text_content)
