"""
Error Types

Pipeline-level failures raised by the review bot components.
Per-file content absence is not an error; see models.review.FileContent.
"""

from typing import Optional


class PRReviewBotError(Exception):
    """Base class for review bot errors"""


class MalformedPayload(PRReviewBotError):
    """Inbound webhook body is missing, unparseable, or has the wrong shape"""


class UpstreamFailed(PRReviewBotError):
    """A fatal call to GitHub or the completion endpoint did not succeed"""
    def __init__(self, message: str, status_code: Optional[int] = None, response_body: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body
