from pydantic import BaseModel

from netcircle.domain.person import Person


class MutationResult(BaseModel):
    """Outcome of a model mutation.

    Attributes:
        ok: Whether the mutation was applied
        error: Reason for rejection, None on success
        id: Id of the created or affected entity, when there is one
        ids: Ids created by bulk operations
    """

    ok: bool
    error: str | None = None
    id: str | None = None
    ids: list[str] = []

    @classmethod
    def success(cls, id: str | None = None, ids: list[str] | None = None) -> "MutationResult":
        return cls(ok=True, id=id, ids=ids or [])

    @classmethod
    def failure(cls, error: str) -> "MutationResult":
        return cls(ok=False, error=error)

    def __bool__(self) -> bool:
        return self.ok


class Connection(BaseModel):
    """A neighbour of a person together with the tie strength."""

    person: Person
    strength: int
