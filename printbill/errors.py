"""Error taxonomy shared by the repository, storage, renderer and form layers."""

from __future__ import annotations


class PrintbillError(Exception):
    """Base class for every error raised on purpose by printbill."""

    #: Short text that is safe to show to an end user.
    user_message = "Something went wrong. Please try again."


class FormValidationError(PrintbillError, ValueError):
    user_message = "Please fix the highlighted fields."

    def __init__(self, errors: dict[str, str]) -> None:
        self.errors = dict(errors)
        fields = ", ".join(sorted(self.errors))
        super().__init__(f"Invalid fields: {fields}")


class BillNotFoundError(PrintbillError, LookupError):
    user_message = "Bill not found."

    def __init__(self, bill_id: str) -> None:
        self.bill_id = bill_id
        super().__init__(f"Bill not found: {bill_id}")


class BackendUnavailableError(PrintbillError, RuntimeError):
    user_message = "The bill store is unavailable right now. Please try again."


class UploadFailedError(PrintbillError, RuntimeError):
    user_message = "The file could not be uploaded. Please try again."


class RenderError(PrintbillError, RuntimeError):
    user_message = "The invoice could not be generated."
