"""Output schema for downloadable exports."""

from pydantic import BaseModel


class ExportFile(BaseModel):
    """A rendered file ready to be sent as a download."""

    content: str
    filename: str
    content_type: str
