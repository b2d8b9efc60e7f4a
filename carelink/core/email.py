import aiosmtplib
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from carelink.config import settings
from carelink.core.logging import logger
from typing import List, Optional


async def send_email(
    to: List[str],
    subject: str,
    body: str,
    html_body: Optional[str] = None
) -> bool:
    """
    Send an email through the configured SMTP relay.

    Args:
        to: List of recipient email addresses
        subject: Email subject
        body: Plain text email body
        html_body: Optional HTML email body

    Returns:
        bool: True if email sent successfully
    """
    if not settings.EMAILS_ENABLED:
        logger.debug(f"Emails disabled, skipping '{subject}' to {', '.join(to)}")
        return False

    logger.info(f"Sending email to {', '.join(to)}")
    logger.debug(f"SMTP: {settings.SMTP_HOST}:{settings.SMTP_PORT}, User: {settings.SMTP_USER}")

    message = MIMEMultipart("alternative")
    message["From"] = settings.EMAIL_FROM
    message["To"] = ", ".join(to)
    message["Subject"] = subject

    message.attach(MIMEText(body, "plain"))
    if html_body:
        message.attach(MIMEText(html_body, "html"))

    try:
        await aiosmtplib.send(
            message,
            hostname=settings.SMTP_HOST,
            port=settings.SMTP_PORT,
            username=settings.SMTP_USER,
            password=settings.SMTP_PASSWORD,
            start_tls=True,
        )
        logger.info(f"Email sent successfully to {', '.join(to)}")
        return True
    except aiosmtplib.SMTPAuthenticationError as e:
        logger.error(f"SMTP Authentication failed: {str(e)}")
        logger.error(f"   SMTP User: {settings.SMTP_USER}")
        return False
    except aiosmtplib.SMTPException as e:
        logger.error(f"SMTP error sending email to {to}: {type(e).__name__}: {str(e)}")
        return False


async def send_patient_credentials_email(
    email: str,
    name: str,
    patient_id: str,
    temp_password: str,
    hospital_name: str
) -> bool:
    """
    Send a newly registered patient their portal credentials.

    The temporary password must be changed on first login.
    """
    subject = f"Welcome to {hospital_name} - Your Patient Portal Access"

    body = f"""
    Hello {name},

    Your patient account has been created at {hospital_name}.

    Patient ID: {patient_id}
    Temporary password: {temp_password}

    You will be asked to choose a new password the first time you log in.

    Best regards,
    {hospital_name}
    """

    html_body = f"""
    <html>
        <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
            <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
                <h2 style="color: #0ea5e9;">Welcome to {hospital_name}!</h2>
                <p>Hello {name},</p>
                <p>Your patient account has been created.</p>
                <table style="width: 100%;">
                    <tr>
                        <td style="padding: 8px 0; color: #64748b;">Patient ID:</td>
                        <td style="padding: 8px 0; font-weight: bold; font-family: monospace;">{patient_id}</td>
                    </tr>
                    <tr>
                        <td style="padding: 8px 0; color: #64748b;">Temporary password:</td>
                        <td style="padding: 8px 0; font-weight: bold; font-family: monospace;">{temp_password}</td>
                    </tr>
                </table>
                <p style="color: #dc2626; font-size: 14px;">
                    You will be asked to choose a new password the first time you log in.
                </p>
            </div>
        </body>
    </html>
    """

    return await send_email([email], subject, body, html_body)


async def send_staff_welcome_email(email: str, name: str, staff_id: str, role: str) -> bool:
    """Send a welcome email to a newly registered staff member."""
    subject = "Your CareLink staff account is ready"

    body = f"""
    Hello {name},

    A {role.replace('_', ' ')} account has been created for you.
    Your staff ID is {staff_id}. Log in with this email address and the
    password set during registration.

    Best regards,
    CareLink HMS
    """

    return await send_email([email], subject, body)
