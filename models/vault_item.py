from pydantic import BaseModel


class VaultItemRef(BaseModel):
    """The slice of a vault item the flashcard generator needs."""

    id: str
    title: str
    content: str
