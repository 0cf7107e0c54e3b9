"""Candidate email notifications through the Resend HTTP API"""

import html
import logging
from typing import Any, Dict, List, Optional

import httpx

from config.settings import settings

logger = logging.getLogger(__name__)

PASS_COLOR = "#10B981"
FAIL_COLOR = "#EF4444"

_LAYOUT = """<!DOCTYPE html>
<html>
<head>
  <style>
    body {{ font-family: Arial, sans-serif; line-height: 1.6; color: #333; }}
    .container {{ max-width: 600px; margin: 0 auto; padding: 20px; }}
    .header {{ background: {header_color}; color: white; padding: 30px; text-align: center; border-radius: 10px 10px 0 0; }}
    .content {{ background: #f9f9f9; padding: 30px; border-radius: 0 0 10px 10px; }}
    .box {{ background: white; padding: 20px; margin: 15px 0; border-radius: 8px; }}
    .footer {{ text-align: center; margin-top: 20px; color: #666; font-size: 14px; }}
  </style>
</head>
<body>
  <div class="container">
    <div class="header"><h1>{heading}</h1><p>{subheading}</p></div>
    <div class="content">
      <p>Hi <strong>{candidate_name}</strong>,</p>
      {body}
      <p>Best regards,<br><strong>The InterLink Team</strong></p>
    </div>
    <div class="footer"><p>This is an automated message. Please do not reply to this email.</p></div>
  </div>
</body>
</html>"""


def _render(heading: str, subheading: str, candidate_name: str, body: str, header_color: str = "#667eea") -> str:
    return _LAYOUT.format(
        heading=heading,
        subheading=subheading,
        candidate_name=html.escape(candidate_name),
        body=body,
        header_color=header_color,
    )


def _result_label(result: str) -> str:
    return "✅ PASSED" if result == "passed" else "❌ NOT PASSED"


class NotificationService:
    """
    Send transactional emails to candidates.

    Sends are skipped (and reported as such) when no API key is configured.
    Provider failures are returned, not raised: a notification never fails
    the action that triggered it.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_url: Optional[str] = None,
        sender: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.api_key = api_key if api_key is not None else settings.RESEND_API_KEY
        self.api_url = api_url or settings.RESEND_API_URL
        self.sender = sender or settings.EMAIL_FROM
        self.transport = transport

    async def send(self, to: List[str], subject: str, html_body: str) -> Dict[str, Any]:
        if not self.api_key:
            logger.warning(f"Resend API key not configured. Email would have been sent to: {', '.join(to)}")
            return {"success": True, "skipped": True, "reason": "RESEND_API_KEY not configured"}

        try:
            async with httpx.AsyncClient(timeout=10.0, transport=self.transport) as client:
                response = await client.post(
                    self.api_url,
                    headers={"Authorization": f"Bearer {self.api_key}"},
                    json={
                        "from": self.sender,
                        "to": to,
                        "subject": subject,
                        "html": html_body,
                    },
                )

            if not response.is_success:
                logger.error(f"Error sending email to {to}: {response.status_code} {response.text}")
                return {"success": False, "error": response.text}

            logger.info(f"📧 Email sent successfully to: {', '.join(to)}")
            return {"success": True, "data": response.json()}

        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Failed to send email to {to}: {str(e)}")
            return {"success": False, "error": str(e)}

    async def send_interview_scheduled(
        self,
        candidate_email: str,
        candidate_name: str,
        interview_title: str,
        interview_date: str,
        interview_time: str,
        interviewer_name: str,
        meeting_link: Optional[str] = None
    ) -> Dict[str, Any]:
        link = (
            f'<p><strong>Meeting Link:</strong> <a href="{html.escape(meeting_link)}">Join Meeting</a></p>'
            if meeting_link else ""
        )
        body = f"""
      <p>Great news! Your interview has been scheduled. Here are the details:</p>
      <div class="box">
        <h3>📅 Interview Details</h3>
        <p><strong>Position:</strong> {html.escape(interview_title)}</p>
        <p><strong>Date:</strong> {html.escape(interview_date)}</p>
        <p><strong>Time:</strong> {html.escape(interview_time)}</p>
        <p><strong>Interviewer:</strong> {html.escape(interviewer_name)}</p>
        {link}
      </div>
      <p>Please join 5 minutes early with a stable internet connection.</p>"""

        return await self.send(
            [candidate_email],
            f"🎯 Interview Scheduled: {interview_title}",
            _render("🎯 Interview Scheduled", "Your interview has been confirmed!", candidate_name, body),
        )

    async def send_feedback_added(
        self,
        candidate_email: str,
        candidate_name: str,
        interview_title: str,
        interviewer_name: str,
        feedback: str,
        result: str
    ) -> Dict[str, Any]:
        color = PASS_COLOR if result == "passed" else FAIL_COLOR
        closing = (
            "<p>🎉 <strong>Congratulations!</strong> Our team will contact you shortly regarding the next steps.</p>"
            if result == "passed" else
            "<p>Thank you for your time and effort. We encourage you to apply for future opportunities.</p>"
        )
        body = f"""
      <p><strong>{html.escape(interviewer_name)}</strong> has completed the evaluation for your interview: <strong>{html.escape(interview_title)}</strong></p>
      <div class="box" style="text-align: center; border: 2px solid {color};">
        <h2 style="color: {color};">{_result_label(result)}</h2>
      </div>
      <div class="box" style="border-left: 4px solid #8B5CF6;">
        <h3>💬 Feedback from Interviewer</h3>
        <p><em>"{html.escape(feedback)}"</em></p>
      </div>
      {closing}"""

        return await self.send(
            [candidate_email],
            f"💬 Interview Feedback: {interview_title}",
            _render("💬 Interview Feedback & Result", "Your interviewer has shared feedback", candidate_name, body, color),
        )

    async def send_interview_result(
        self,
        candidate_email: str,
        candidate_name: str,
        interview_title: str,
        result: str,
        rating: int,
        interviewer_name: str,
        feedback: Optional[str] = None
    ) -> Dict[str, Any]:
        color = PASS_COLOR if result == "passed" else FAIL_COLOR
        stars = "⭐" * rating + "☆" * (5 - rating)
        feedback_box = (
            f'<div class="box"><h3>💬 Feedback from Interviewer</h3><p><em>"{html.escape(feedback)}"</em></p></div>'
            if feedback else ""
        )
        body = f"""
      <p>Your interview result for <strong>{html.escape(interview_title)}</strong> has been reviewed.</p>
      <div class="box" style="text-align: center; border: 2px solid {color};">
        <h2 style="color: {color};">{_result_label(result)}</h2>
        <div>{stars} ({rating}/5)</div>
        <p><strong>Reviewed by:</strong> {html.escape(interviewer_name)}</p>
      </div>
      {feedback_box}"""

        return await self.send(
            [candidate_email],
            f"📊 Interview Result: {interview_title}",
            _render("📊 Interview Result", "Your interview result is available", candidate_name, body, color),
        )


# Global notification service instance
notification_service = NotificationService()

def get_notification_service() -> NotificationService:
    """Dependency returning the shared notification service"""
    return notification_service
