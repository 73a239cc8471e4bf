from pydantic import BaseModel, Field
from typing import List, Optional


class Person(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    username: Optional[str] = None
    login: Optional[str] = None


class Repository(BaseModel):
    id: Optional[int] = None
    name: str = ""
    full_name: str = ""
    private: bool = False
    owner: Person = Field(default_factory=Person)
    html_url: Optional[str] = None
    url: Optional[str] = None


class HeadCommit(BaseModel):
    id: str = ""
    message: str = ""
    author: Person = Field(default_factory=Person)
    committer: Person = Field(default_factory=Person)
    modified: List[str] = Field(default_factory=list)


class PushEvent(BaseModel):
    ref: str = ""
    before: str = ""
    after: str = ""
    repository: Repository = Field(default_factory=Repository)
    pusher: Person = Field(default_factory=Person)
    # GitHub sends null here for branch deletions.
    head_commit: Optional[HeadCommit] = None

    @property
    def repository_name(self) -> str:
        return self.repository.name
