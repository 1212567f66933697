"""Plain-text and HTML bodies for every transactional email the program sends."""

from dataclasses import dataclass
from html import escape

from app.core.config import settings
from app.schemas.mentor_request import Actor, DecisionAction

SIGNATURE = "Best regards,\nThe TBI Team"


@dataclass(frozen=True)
class EmailMessage:
    subject: str
    text: str
    html: str | None = None


@dataclass(frozen=True)
class DecisionLinks:
    approve_url: str
    reject_url: str
    review_url: str


def token_url(token_id: str, action: DecisionAction | None = None) -> str:
    url = f"{settings.MENTOR_REQUESTS_URL}?token={token_id}"
    if action is not None:
        url += f"&action={action.value}"
    return url


def _line(prefix: str, notes: str | None) -> str:
    return f"{prefix}: {notes}" if notes else ""


def admin_rejection_email(
    user_name: str, mentor_name: str, notes: str | None = None
) -> EmailMessage:
    text = (
        f"Dear {user_name},\n\n"
        f"Thank you for your interest in connecting with {mentor_name} through our TBI platform.\n\n"
        "After careful review, we regret to inform you that your mentor request "
        "cannot be approved at this time.\n\n"
        f"{_line('Reason', notes)}\n\n"
        "We encourage you to explore other mentors available on our platform who "
        "might be a better fit for your current needs.\n\n"
        f"{SIGNATURE}"
    )
    return EmailMessage(subject="Update on Your Mentor Request", text=text)


def new_request_email(
    mentor_name: str,
    student_name: str,
    request_message: str,
    links: DecisionLinks | None = None,
) -> EmailMessage:
    requests_url = settings.MENTOR_REQUESTS_URL

    text = (
        f"Dear {mentor_name},\n\n"
        f"You have a new mentorship request from {student_name}.\n\n"
        f'Their message:\n"{request_message}"\n\n'
    )
    if links:
        text += (
            f"Approve: {links.approve_url}\n"
            f"Decline: {links.reject_url}\n"
            f"Review the full request: {links.review_url}\n\n"
        )
    text += (
        "You can also log in to your TBI Mentor Dashboard to review the request and respond:\n"
        f"{requests_url}\n\n"
        f"If you are not logged in, please go to: {settings.LOGIN_URL}\n\n"
        "Thank you for your guidance and support.\n\n"
        f"{SIGNATURE}"
    )

    # Student-supplied text must not be able to add markup next to the decision links.
    buttons = ""
    if links:
        buttons = (
            f'<p><a href="{escape(links.approve_url)}">Approve</a> &middot; '
            f'<a href="{escape(links.reject_url)}">Decline</a> &middot; '
            f'<a href="{escape(links.review_url)}">Review request</a></p>'
        )
    html = (
        f"<p>Dear {escape(mentor_name)},</p>"
        f"<p>You have a new mentorship request from <strong>{escape(student_name)}</strong>.</p>"
        f"<blockquote>{escape(request_message)}</blockquote>"
        f"{buttons}"
        f'<p><a href="{escape(requests_url)}">Click here to view your requests</a></p>'
        "<p>Thank you for your guidance and support.</p>"
        "<p>Best regards,<br>The TBI Team</p>"
    )
    return EmailMessage(
        subject="\U0001f393 You Have a New Mentorship Request", text=text, html=html
    )


def mentor_approval_email(
    user_name: str, mentor_name: str, mentor_email: str, notes: str | None = None
) -> EmailMessage:
    mentor_line = _line("Mentor's message", notes)
    text = (
        f"Dear {user_name},\n\n"
        f"Great news! {mentor_name} has accepted your mentorship request.\n\n"
        f"You can now reach out to your mentor directly at: {mentor_email}\n\n"
        f"{mentor_line}\n\n"
        "We're excited to see your mentorship journey begin!\n\n"
        f"{SIGNATURE}"
    )
    return EmailMessage(subject="Mentorship Request Approved!", text=text)


def mentor_rejection_email(
    user_name: str, mentor_name: str, notes: str | None = None
) -> EmailMessage:
    mentor_line = _line("Mentor's message", notes)
    text = (
        f"Dear {user_name},\n\n"
        f"Thank you for your interest in connecting with {mentor_name}.\n\n"
        f"After consideration, {mentor_name} is unable to take on new mentees at this time.\n\n"
        f"{mentor_line}\n\n"
        "We encourage you to explore other mentors available on our platform.\n\n"
        f"{SIGNATURE}"
    )
    return EmailMessage(subject="Update on Your Mentorship Request", text=text)


def decision_email(
    actor: Actor,
    action: DecisionAction,
    request: dict,
    notes: str | None = None,
    links: DecisionLinks | None = None,
) -> EmailMessage:
    """Pick the template for a workflow decision.

    Admin approvals go to the mentor; every other decision goes to the student.
    """
    if actor is Actor.ADMIN:
        if action is DecisionAction.APPROVE:
            return new_request_email(
                request["mentor_name"],
                request["user_name"],
                request.get("request_message") or "",
                links,
            )
        return admin_rejection_email(request["user_name"], request["mentor_name"], notes)

    if action is DecisionAction.APPROVE:
        return mentor_approval_email(
            request["user_name"], request["mentor_name"], request["mentor_email"], notes
        )
    return mentor_rejection_email(request["user_name"], request["mentor_name"], notes)


def application_accepted_email(
    applicant_name: str, temporary_user_id: str, temporary_password: str
) -> EmailMessage:
    text = (
        f"Dear {applicant_name},\n\n"
        "We are thrilled to inform you that your application to InnoNexus has been accepted!\n\n"
        "We were very impressed with your idea and believe in its potential. "
        "Here are your temporary login credentials to access our portal:\n"
        f"User ID: {temporary_user_id}\n"
        f"Password: {temporary_password}\n\n"
        "Please keep these safe. We will be in touch shortly with the next steps.\n\n"
        "Welcome to InnoNexus!\n\n"
        "Best regards,\nThe InnoNexus Team"
    )
    return EmailMessage(
        subject="Congratulations! Your InnoNexus Application has been Accepted!",
        text=text,
    )


def application_rejected_email(applicant_name: str) -> EmailMessage:
    text = (
        f"Dear {applicant_name},\n\n"
        "Thank you for your interest in InnoNexus and for taking the time to apply.\n\n"
        "After careful consideration, we regret to inform you that we will not be moving "
        "forward with your application at this time. The selection process is highly "
        "competitive, and we receive many qualified applications.\n\n"
        "We wish you the best of luck in your future endeavors.\n\n"
        "Sincerely,\nThe InnoNexus Team"
    )
    return EmailMessage(subject="Update on Your InnoNexus Application", text=text)
