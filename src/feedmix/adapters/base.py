from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Generic, TypeVar

from feedmix.config import CredentialCheck
from feedmix.models import ContentItem, ContentSource, SourceRecord

RecordT = TypeVar("RecordT", bound=SourceRecord)


def has_credential(api_key: str | None) -> bool:
    return bool(api_key and api_key.strip())


def matches_query(query: str, *fields: str | None) -> bool:
    needle = query.strip().lower()
    if not needle:
        return False
    return any(value and needle in value.lower() for value in fields)


class BaseAdapter(ABC, Generic[RecordT]):
    """Bridge between one upstream provider and the unified ContentItem schema.

    Fetch and search never raise for provider problems: when the credential is
    unusable or the call fails they answer from ``fallback_records`` instead.
    """

    def __init__(
        self,
        api_key: str | None = None,
        credential_check: CredentialCheck = has_credential,
    ) -> None:
        self._api_key = api_key
        self._credential_check = credential_check

    @property
    @abstractmethod
    def source(self) -> ContentSource:
        pass

    @property
    @abstractmethod
    def fallback_records(self) -> Sequence[RecordT]:
        pass

    @abstractmethod
    async def fetch_by_topic(self, topic: str | None) -> list[RecordT]:
        pass

    @abstractmethod
    async def search_by_query(self, query: str) -> list[RecordT]:
        """Records matching ``query``; a blank query matches nothing and returns ``[]``."""
        pass

    @abstractmethod
    def normalize(self, records: Sequence[RecordT]) -> list[ContentItem]:
        pass

    @abstractmethod
    def record_matches(self, record: RecordT, query: str) -> bool:
        pass

    @property
    def has_valid_credential(self) -> bool:
        return self._credential_check(self._api_key)

    def search_fallback(self, query: str) -> list[RecordT]:
        return [record for record in self.fallback_records if self.record_matches(record, query)]
