"""
Email utility functions
"""
from dataclasses import dataclass
from typing import Optional

from flask_mail import Mail, Message
from flask import current_app

from utils.otp_helper import OTP_EXPIRY_MINUTES

mail = Mail()

OTP_EMAIL_SUBJECT = "Verify Your Email - Serenity Suites"


@dataclass
class EmailResult:
    success: bool
    error: Optional[str] = None


def send_email(to, subject, html, body=None):
    """
    Send an email. Never raises; failures come back as EmailResult(success=False).

    Args:
        to: Recipient email address
        subject: Email subject
        html: HTML body
        body: Plain text body (optional)
    """
    if 'mail' not in current_app.extensions:
        return EmailResult(False, "Mail extension not initialized")
    if not current_app.config.get('MAIL_SERVER'):
        return EmailResult(False, "MAIL_SERVER not configured")

    msg = Message(
        subject=subject,
        recipients=[to],
        body=body,
        html=html,
    )
    try:
        mail.send(msg)
    except Exception as e:
        current_app.logger.error(f"SMTP error sending email to {to}: {str(e)}", exc_info=True)
        return EmailResult(False, str(e) or "Failed to send email")
    return EmailResult(True)


def send_verification_otp_email(name: str, email: str, otp: str) -> EmailResult:
    """Send the registration code to a guest."""
    body = (
        f"Hello {name},\n\nYour Serenity Suites verification code is: {otp}. "
        f"It expires in {OTP_EXPIRY_MINUTES} minutes. Do not share this code."
    )
    return send_email(email, OTP_EMAIL_SUBJECT, render_otp_email_html(name, otp), body=body)


def render_otp_email_html(name: str, otp: str) -> str:
    """Branded HTML template for the verification code email."""
    return f"""
    <!DOCTYPE html>
    <html lang="en">
    <head><meta charset="utf-8"><title>Verify Your Email - Serenity Suites</title></head>
    <body style="font-family: 'Segoe UI', Tahoma, sans-serif; background-color: #f8f9fa; margin: 0; padding: 0;">
        <div style="max-width: 600px; margin: 0 auto; background-color: #ffffff; border-radius: 8px; overflow: hidden;">
            <div style="background: linear-gradient(135deg, #d97706 0%, #f59e0b 100%); padding: 40px 20px; text-align: center;">
                <h1 style="color: white; margin: 0; font-size: 28px;">Serenity Suites</h1>
            </div>
            <div style="padding: 40px 20px; text-align: center;">
                <p style="font-size: 18px; color: #555;">Welcome to Serenity Suites, <strong>{name}</strong>!</p>
                <p>Thank you for creating an account with us. To complete your registration, please use the verification code below:</p>
                <div style="background-color: #f8f9fa; border: 2px dashed #d97706; border-radius: 12px; padding: 30px; margin: 30px 0;">
                    <span style="font-size: 48px; font-weight: bold; color: #d97706; letter-spacing: 8px; font-family: 'Courier New', monospace;">{otp}</span>
                </div>
                <p style="background-color: #fef3c7; border: 1px solid #f59e0b; border-radius: 8px; padding: 15px; color: #92400e;">
                    This code will expire in <strong>{OTP_EXPIRY_MINUTES} minutes</strong>
                </p>
                <p>If you didn't create this account, please ignore this email.</p>
            </div>
            <div style="background-color: #f8f9fa; padding: 20px; text-align: center; color: #666; font-size: 14px;">
                <p><span style="color: #d97706; font-weight: 600;">Serenity Suites</span>. All rights reserved.</p>
                <p>This is an automated message, please do not reply.</p>
            </div>
        </div>
    </body>
    </html>
    """
